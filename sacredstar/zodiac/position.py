"""Sign/degree/minute positions on the zodiac."""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering
from typing import Any, Mapping

from ..core.angles import absolute_difference, normalize
from .sign import Sign

__all__ = ["ZodiacalPosition"]

_MINUTES_PER_CIRCLE = 360 * 60


@total_ordering
@dataclass(frozen=True, slots=True, eq=False)
class ZodiacalPosition:
    """A point on the zodiac expressed as sign, whole degrees and minutes.

    Instances are immutable; arithmetic helpers always return a new value.
    Ordering is lexicographic on ``(sign, degrees, minutes)`` so Aries 0°0′
    is the smallest position and Pisces 29°59′ the largest.
    """

    sign: Sign
    degrees: int
    minutes: int

    def __post_init__(self) -> None:
        if not 0 <= self.degrees < 30:
            raise ValueError(f"degrees out of range: {self.degrees}")
        if not 0 <= self.minutes < 60:
            raise ValueError(f"minutes out of range: {self.minutes}")

    @classmethod
    def from_longitude(cls, longitude: float) -> ZodiacalPosition:
        """Build a position from an ecliptic longitude in degrees.

        The longitude is rounded to the nearest arc-minute, so a value just
        under a sign boundary may roll into the next sign.
        """

        total = round(normalize(longitude) * 60.0) % _MINUTES_PER_CIRCLE
        sign_number, within = divmod(total, 30 * 60)
        degrees, minutes = divmod(within, 60)
        return cls(Sign.from_int(sign_number + 1), int(degrees), int(minutes))

    @classmethod
    def from_parts(cls, sign: Sign | str | int, degrees: int, minutes: int = 0) -> ZodiacalPosition:
        return cls(Sign.parse(sign), int(degrees), int(minutes))

    @property
    def sign_degrees(self) -> float:
        """Degrees elapsed within the sign, in ``[0, 30)``."""

        return self.degrees + self.minutes / 60.0

    @property
    def absolute_degrees(self) -> float:
        return (self.sign.number - 1) * 30.0 + self.sign_degrees

    def opposite(self) -> ZodiacalPosition:
        return ZodiacalPosition.from_longitude(self.absolute_degrees + 180.0)

    def difference(self, other: ZodiacalPosition) -> float:
        """Short-way separation to ``other`` in ``[0, 180]``."""

        return absolute_difference(self.absolute_degrees, other.absolute_degrees)

    def _key(self) -> tuple[int, int, int]:
        return (self.sign.number, self.degrees, self.minutes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ZodiacalPosition):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: ZodiacalPosition) -> bool:
        if not isinstance(other, ZodiacalPosition):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return f"{self.sign.value} {self.degrees} {self.minutes}"

    def to_dict(self) -> dict[str, Any]:
        return {"sign": self.sign.value, "degrees": self.degrees, "minutes": self.minutes}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> ZodiacalPosition:
        return cls.from_parts(payload["sign"], payload["degrees"], payload.get("minutes", 0))
