"""Identifiers for the chart points SacredStar can place."""

from __future__ import annotations

from enum import StrEnum
from typing import Final

__all__ = [
    "CLASSICAL_PLANETS",
    "MODERN_PLANETS",
    "PointID",
    "TRADITIONAL_PLANETS",
    "VEDIC_PLANETS",
]


class PointID(StrEnum):
    """Chart points, serialised by their lowercase name."""

    ASC = "asc"
    SUN = "sun"
    MOON = "moon"
    MERCURY = "mercury"
    VENUS = "venus"
    MARS = "mars"
    JUPITER = "jupiter"
    SATURN = "saturn"
    URANUS = "uranus"
    NEPTUNE = "neptune"
    PLUTO = "pluto"
    RAHU = "rahu"
    KETU = "ketu"

    @property
    def swiss_id(self) -> int | None:
        """Swiss Ephemeris body number, or ``None`` for derived points."""

        return _SWISS_IDS.get(self)

    @property
    def label(self) -> str:
        return "ASC" if self is PointID.ASC else self.value.capitalize()


# Rahu is the true lunar node (SE_TRUE_NODE); Ketu and the ascendant are
# derived rather than read from the ephemeris.
_SWISS_IDS: Final[dict[PointID, int]] = {
    PointID.SUN: 0,
    PointID.MOON: 1,
    PointID.MERCURY: 2,
    PointID.VENUS: 3,
    PointID.MARS: 4,
    PointID.JUPITER: 5,
    PointID.SATURN: 6,
    PointID.URANUS: 7,
    PointID.NEPTUNE: 8,
    PointID.PLUTO: 9,
    PointID.RAHU: 11,
}


TRADITIONAL_PLANETS: Final[tuple[PointID, ...]] = (
    PointID.SUN,
    PointID.MOON,
    PointID.MERCURY,
    PointID.VENUS,
    PointID.MARS,
    PointID.JUPITER,
    PointID.SATURN,
)

CLASSICAL_PLANETS: Final[tuple[PointID, ...]] = TRADITIONAL_PLANETS + (
    PointID.URANUS,
    PointID.NEPTUNE,
    PointID.PLUTO,
)

VEDIC_PLANETS: Final[tuple[PointID, ...]] = TRADITIONAL_PLANETS + (
    PointID.RAHU,
    PointID.KETU,
)

MODERN_PLANETS: Final[tuple[PointID, ...]] = CLASSICAL_PLANETS
