"""Transit records: one shared timing core with a kind-specific payload."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, Literal, Union

from ..aspects import Aspect, Lunation
from ..chart.models import AstroPoint

__all__ = [
    "AspectTransit",
    "IngressTransit",
    "LunationTransit",
    "Transit",
    "TransitKind",
    "transit_from_dict",
]

TransitKind = Literal["aspect", "ingress", "lunation"]


@dataclass(frozen=True, slots=True)
class _TransitBase:
    time: datetime
    journey: float
    days_elapsed: int
    start: datetime
    end: datetime

    kind: ClassVar[TransitKind]

    @property
    def in_window(self) -> bool:
        """Whether ``time`` lies between ``start`` and ``end`` inclusive."""

        return 0.0 <= self.journey <= 1.0

    def _base_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "time": self.time.isoformat(),
            "journey": self.journey,
            "days_elapsed": self.days_elapsed,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "in_window": self.in_window,
        }

    @staticmethod
    def _base_fields(payload: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "time": datetime.fromisoformat(payload["time"]),
            "journey": float(payload["journey"]),
            "days_elapsed": int(payload["days_elapsed"]),
            "start": datetime.fromisoformat(payload["start"]),
            "end": datetime.fromisoformat(payload["end"]),
        }


@dataclass(frozen=True, slots=True)
class AspectTransit(_TransitBase):
    aspect: Aspect

    kind: ClassVar[TransitKind] = "aspect"

    def __str__(self) -> str:
        return f"{self.aspect} ({self.journey:.2f} of {self.days_elapsed} days)"

    def to_dict(self) -> dict[str, Any]:
        return {**self._base_dict(), "aspect": self.aspect.to_dict()}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> AspectTransit:
        return cls(aspect=Aspect.from_dict(payload["aspect"]), **cls._base_fields(payload))


@dataclass(frozen=True, slots=True)
class IngressTransit(_TransitBase):
    point: AstroPoint

    kind: ClassVar[TransitKind] = "ingress"

    def __str__(self) -> str:
        return (
            f"{self.point.id.value} in {self.point.sign.value} "
            f"({self.journey:.2f} of {self.days_elapsed} days)"
        )

    def to_dict(self) -> dict[str, Any]:
        return {**self._base_dict(), "point": self.point.to_dict()}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> IngressTransit:
        return cls(point=AstroPoint.from_dict(payload["point"]), **cls._base_fields(payload))


@dataclass(frozen=True, slots=True)
class LunationTransit(_TransitBase):
    lunation: Lunation

    kind: ClassVar[TransitKind] = "lunation"

    @classmethod
    def at(cls, lunation: Lunation, moment: datetime) -> LunationTransit:
        """A lunation is instantaneous: it starts and ends at ``moment``."""

        return cls(
            time=moment,
            journey=0.0,
            days_elapsed=0,
            start=moment,
            end=moment,
            lunation=lunation,
        )

    def __str__(self) -> str:
        return f"{self.lunation.type.value} at {self.time.isoformat()}"

    def to_dict(self) -> dict[str, Any]:
        return {**self._base_dict(), "lunation": self.lunation.to_dict()}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> LunationTransit:
        return cls(lunation=Lunation.from_dict(payload["lunation"]), **cls._base_fields(payload))


Transit = Union[AspectTransit, IngressTransit, LunationTransit]

_KINDS: dict[str, type[AspectTransit] | type[IngressTransit] | type[LunationTransit]] = {
    "aspect": AspectTransit,
    "ingress": IngressTransit,
    "lunation": LunationTransit,
}


def transit_from_dict(payload: Mapping[str, Any]) -> Transit:
    """Rebuild a transit from :meth:`to_dict` output, dispatching on ``kind``."""

    kind = payload.get("kind")
    try:
        factory = _KINDS[str(kind)]
    except KeyError as exc:
        raise ValueError(f"unknown transit kind: {kind!r}") from exc
    return factory.from_dict(payload)
