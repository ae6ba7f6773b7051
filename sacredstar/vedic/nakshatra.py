"""The 27 lunar mansions and their padas."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from math import floor
from typing import Final

from ..core.angles import normalize
from .dasha import LORD_ORDER, DashaLord, dasha_lord_pair

__all__ = [
    "NAKSHATRA_NAMES",
    "NAKSHATRA_SPAN",
    "PADA_SPAN",
    "Nakshatra",
    "nakshatra_of",
]

NAKSHATRA_SPAN: Final[float] = 360.0 / 27.0
PADA_SPAN: Final[float] = NAKSHATRA_SPAN / 4.0

NAKSHATRA_NAMES: Final[tuple[str, ...]] = (
    "Aswini",
    "Bharani",
    "Krittika",
    "Rohini",
    "Mrigashirsha",
    "Ardra",
    "Punarvasu",
    "Pushya",
    "Ashlesha",
    "Magha",
    "Purva Phalguni",
    "Uttara Phalguni",
    "Hasta",
    "Chitra",
    "Swati",
    "Vishakha",
    "Anuradha",
    "Jyeshtha",
    "Mula",
    "Purva Ashadha",
    "Uttara Ashadha",
    "Shravana",
    "Dhanishta",
    "Shatabhisha",
    "Purva Bhadrapada",
    "Uttara Bhadrapada",
    "Revati",
)


@dataclass(frozen=True, slots=True)
class Nakshatra:
    """A nakshatra (``index`` 0..26) and the pada (0..3) within it."""

    index: int
    pada: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.index < 27:
            raise ValueError(f"nakshatra index out of range: {self.index}")
        if not 0 <= self.pada < 4:
            raise ValueError(f"pada out of range: {self.pada}")

    @property
    def name(self) -> str:
        return NAKSHATRA_NAMES[self.index]

    @property
    def lord(self) -> DashaLord:
        """Mahadasha lord ruling this nakshatra."""

        return LORD_ORDER[self.index % len(LORD_ORDER)]

    @property
    def min_degree(self) -> float:
        return self.index * NAKSHATRA_SPAN

    @property
    def max_degree(self) -> float:
        return (self.index + 1) * NAKSHATRA_SPAN

    def dasha_lord_pair(
        self, birth: datetime, remaining: float
    ) -> tuple[DashaLord, DashaLord, timedelta]:
        return dasha_lord_pair(self.lord, birth, remaining)

    def __str__(self) -> str:
        return f"{self.name} pada {self.pada + 1}"

    def to_dict(self) -> dict[str, object]:
        return {"index": self.index, "name": self.name, "pada": self.pada, "lord": self.lord.value}


def nakshatra_of(longitude: float) -> Nakshatra:
    """Nakshatra and pada for a sidereal longitude."""

    lon = normalize(longitude)
    index = min(int(lon / NAKSHATRA_SPAN), 26)
    pada = min(int(floor((lon - index * NAKSHATRA_SPAN) / PADA_SPAN)), 3)
    return Nakshatra(index=index, pada=pada)
