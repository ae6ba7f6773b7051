"""Aspect and lunation matching between zodiacal positions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Final

from .zodiac.points import PointID
from .zodiac.position import ZodiacalPosition

__all__ = [
    "ASPECT_ORBS",
    "Aspect",
    "AspectType",
    "LUNATION_ORB",
    "Lunation",
    "LunationType",
    "find_aspect",
    "find_lunation",
    "match_aspect_type",
    "orb_table",
]

_EQUALITY_EPSILON = 1e-6


class AspectType(StrEnum):
    """Major Ptolemaic aspects, declared in order of nominal angle."""

    CONJUNCTION = "conjunction"
    SEXTILE = "sextile"
    SQUARE = "square"
    TRINE = "trine"
    OPPOSITION = "opposition"

    @property
    def nominal(self) -> float:
        return _NOMINAL[self]

    @property
    def is_hard(self) -> bool:
        return self in (AspectType.CONJUNCTION, AspectType.OPPOSITION, AspectType.SQUARE)

    @property
    def is_soft(self) -> bool:
        return not self.is_hard


_NOMINAL: Final[dict[AspectType, float]] = {
    AspectType.CONJUNCTION: 0.0,
    AspectType.SEXTILE: 60.0,
    AspectType.SQUARE: 90.0,
    AspectType.TRINE: 120.0,
    AspectType.OPPOSITION: 180.0,
}

ASPECT_ORBS: Final[Mapping[AspectType, float]] = {
    AspectType.CONJUNCTION: 5.0,
    AspectType.SEXTILE: 3.0,
    AspectType.SQUARE: 5.0,
    AspectType.TRINE: 5.0,
    AspectType.OPPOSITION: 5.0,
}

LUNATION_ORB: Final[float] = 13.0


@dataclass(frozen=True, slots=True)
class Aspect:
    """An angular relationship between two chart points."""

    p1: PointID
    p2: PointID
    degree: float
    type: AspectType

    @property
    def orb(self) -> int:
        """Whole degrees between the measured separation and the nominal angle."""

        return int(abs(self.degree - self.type.nominal))

    @property
    def is_hard(self) -> bool:
        return self.type.is_hard

    @property
    def is_soft(self) -> bool:
        return self.type.is_soft

    def equals(self, other: Aspect, *, ignore_degree: bool = False) -> bool:
        """Compare two aspects, treating ``(p1, p2)`` as an unordered pair."""

        same_pair = {self.p1, self.p2} == {other.p1, other.p2}
        if not same_pair or self.type is not other.type:
            return False
        if ignore_degree:
            return True
        return abs(self.degree - other.degree) < _EQUALITY_EPSILON

    def __str__(self) -> str:
        return f"{self.p1.value} {self.type.value} {self.p2.value} ({self.degree:.2f})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "p1": self.p1.value,
            "p2": self.p2.value,
            "degree": self.degree,
            "type": self.type.value,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Aspect:
        return cls(
            p1=PointID(payload["p1"]),
            p2=PointID(payload["p2"]),
            degree=float(payload["degree"]),
            type=AspectType(payload["type"]),
        )


def orb_table(
    orbs: Mapping[str, float] | Mapping[AspectType, float] | None = None,
) -> dict[AspectType, float]:
    """Default orbs with ``orbs`` overrides applied."""

    table = dict(ASPECT_ORBS)
    for key, value in (orbs or {}).items():
        table[AspectType(str(key).lower())] = float(value)
    return table


def match_aspect_type(
    separation: float,
    orbs: Mapping[str, float] | Mapping[AspectType, float] | None = None,
) -> AspectType | None:
    """Return the aspect whose orb window contains ``separation``.

    Windows are scanned by ascending nominal angle and are disjoint, so the
    first hit is the only hit. ``None`` means no aspect is formed.
    """

    table = orb_table(orbs)
    for aspect_type in AspectType:
        orb = table[aspect_type]
        if aspect_type.nominal - orb <= separation <= aspect_type.nominal + orb:
            return aspect_type
    return None


def find_aspect(
    p1: PointID,
    pos1: ZodiacalPosition,
    p2: PointID,
    pos2: ZodiacalPosition,
    *,
    orbs: Mapping[str, float] | Mapping[AspectType, float] | None = None,
) -> Aspect | None:
    """Return the aspect formed between two positions, or ``None``."""

    separation = pos1.difference(pos2)
    aspect_type = match_aspect_type(separation, orbs)
    if aspect_type is None:
        return None
    return Aspect(p1=p1, p2=p2, degree=separation, type=aspect_type)


class LunationType(StrEnum):
    NEW_MOON = "new-moon"
    FULL_MOON = "full-moon"

    @property
    def nominal(self) -> float:
        return 0.0 if self is LunationType.NEW_MOON else 180.0


@dataclass(frozen=True, slots=True)
class Lunation:
    """A new or full moon, matched with a wide orb around the exact phase."""

    type: LunationType

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Lunation:
        return cls(type=LunationType(payload["type"]))


def find_lunation(
    moon: ZodiacalPosition,
    sun: ZodiacalPosition,
    *,
    orb: float = LUNATION_ORB,
) -> Lunation | None:
    separation = moon.difference(sun)
    for lunation_type in LunationType:
        if abs(separation - lunation_type.nominal) <= orb:
            return Lunation(type=lunation_type)
    return None
