"""Half-open time intervals with a zone-preserving wire form."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, timezone, tzinfo
from typing import Any, Final
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

__all__ = ["WIRE_TIME_FORMAT", "Interval", "moment_from_wire", "moment_to_wire"]

WIRE_TIME_FORMAT: Final[str] = "%Y-%m-%dT%H:%M"


def _zone_name(zone: tzinfo | None) -> str:
    if isinstance(zone, ZoneInfo):
        return zone.key
    if zone is UTC or zone == timezone.utc:
        return "UTC"
    raise ValueError(f"cannot serialise non-IANA time zone {zone!r}")


def moment_to_wire(moment: datetime) -> dict[str, str]:
    """``{"t": "YYYY-MM-DDTHH:MM", "z": "<IANA zone>"}`` for an aware datetime."""

    if moment.tzinfo is None:
        raise ValueError("wire moments must be timezone-aware")
    return {"t": moment.strftime(WIRE_TIME_FORMAT), "z": _zone_name(moment.tzinfo)}


def moment_from_wire(payload: Mapping[str, Any]) -> datetime:
    try:
        text = payload["t"]
        zone_name = payload["z"]
    except KeyError as exc:
        raise ValueError(f"wire moment is missing {exc.args[0]!r}") from exc
    try:
        zone = ZoneInfo(str(zone_name))
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"invalid time zone: {zone_name!r}") from exc
    return datetime.strptime(str(text), WIRE_TIME_FORMAT).replace(tzinfo=zone)


@dataclass(frozen=True, slots=True)
class Interval:
    """``[start, end)`` between two timezone-aware datetimes."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("interval bounds must be timezone-aware")
        if self.end < self.start:
            raise ValueError(f"interval ends before it starts: {self.start} > {self.end}")

    @property
    def duration(self) -> timedelta:
        """Elapsed absolute time; wall-clock shifts such as DST do not count."""

        return self.end.astimezone(UTC) - self.start.astimezone(UTC)

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    def __contains__(self, moment: object) -> bool:
        return isinstance(moment, datetime) and self.contains(moment)

    def __str__(self) -> str:
        return f"{self.start.isoformat()} - {self.end.isoformat()}"

    def to_dict(self) -> dict[str, dict[str, str]]:
        return {"start": moment_to_wire(self.start), "end": moment_to_wire(self.end)}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Interval:
        return cls(moment_from_wire(payload["start"]), moment_from_wire(payload["end"]))
