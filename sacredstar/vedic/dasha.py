"""Vimshottari dasha lords and period lengths.

Durations use a fixed calendar: a year is 8760 hours, a month 730 hours
and a day 24 hours.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import StrEnum
from typing import Final

from ..exceptions import DashaInvariantError
from ..zodiac.points import PointID

__all__ = [
    "DAYS_HOURS",
    "LORD_ORDER",
    "MONTH_HOURS",
    "YEAR_HOURS",
    "DashaLord",
    "antardasha_duration",
    "antardashas",
    "dasha_lord_pair",
    "next_antardasha",
    "period_duration",
]

YEAR_HOURS: Final[int] = 8760
MONTH_HOURS: Final[int] = 730
DAYS_HOURS: Final[int] = 24


class DashaLord(StrEnum):
    KETU = "ketu"
    VENUS = "venus"
    SUN = "sun"
    MOON = "moon"
    MARS = "mars"
    RAHU = "rahu"
    JUPITER = "jupiter"
    SATURN = "saturn"
    MERCURY = "mercury"

    @classmethod
    def from_point(cls, point: PointID) -> DashaLord:
        try:
            return cls(point.value)
        except ValueError as exc:
            raise ValueError(f"{point.value} is not a dasha lord") from exc

    @property
    def point(self) -> PointID:
        return PointID(self.value)

    @property
    def label(self) -> str:
        return self.value.capitalize()

    def next(self) -> DashaLord:
        return LORD_ORDER[(_POSITION[self] + 1) % len(LORD_ORDER)]

    @property
    def mahadasha_years(self) -> int:
        return _MAHADASHA_YEARS[self]

    @property
    def mahadasha_duration(self) -> timedelta:
        return period_duration(self.mahadasha_years, 0, 0)


LORD_ORDER: Final[tuple[DashaLord, ...]] = tuple(DashaLord)
_POSITION: Final[dict[DashaLord, int]] = {lord: i for i, lord in enumerate(LORD_ORDER)}

_MAHADASHA_YEARS: Final[dict[DashaLord, int]] = {
    DashaLord.KETU: 7,
    DashaLord.VENUS: 20,
    DashaLord.SUN: 6,
    DashaLord.MOON: 10,
    DashaLord.MARS: 7,
    DashaLord.RAHU: 18,
    DashaLord.JUPITER: 16,
    DashaLord.SATURN: 19,
    DashaLord.MERCURY: 17,
}

_L = DashaLord

# (years, months, days) of each antardasha, listed in running order.
_ANTARDASHA_TABLE: Final[dict[DashaLord, tuple[tuple[DashaLord, tuple[int, int, int]], ...]]] = {
    _L.KETU: (
        (_L.KETU, (0, 4, 27)),
        (_L.VENUS, (1, 2, 0)),
        (_L.SUN, (0, 4, 6)),
        (_L.MOON, (0, 7, 0)),
        (_L.MARS, (0, 4, 27)),
        (_L.RAHU, (1, 0, 18)),
        (_L.JUPITER, (0, 11, 6)),
        (_L.SATURN, (1, 1, 9)),
        (_L.MERCURY, (0, 11, 27)),
    ),
    _L.VENUS: (
        (_L.VENUS, (3, 4, 0)),
        (_L.SUN, (1, 0, 0)),
        (_L.MOON, (1, 8, 0)),
        (_L.MARS, (1, 2, 0)),
        (_L.RAHU, (3, 0, 0)),
        (_L.JUPITER, (2, 8, 0)),
        (_L.SATURN, (3, 2, 0)),
        (_L.MERCURY, (2, 10, 0)),
        (_L.KETU, (1, 2, 0)),
    ),
    _L.SUN: (
        (_L.SUN, (0, 3, 18)),
        (_L.MOON, (0, 6, 0)),
        (_L.MARS, (0, 4, 6)),
        (_L.RAHU, (0, 10, 24)),
        (_L.JUPITER, (0, 9, 18)),
        (_L.SATURN, (0, 11, 12)),
        (_L.MERCURY, (0, 10, 6)),
        (_L.KETU, (0, 4, 6)),
        (_L.VENUS, (1, 0, 0)),
    ),
    _L.MOON: (
        (_L.MOON, (0, 10, 0)),
        (_L.MARS, (0, 7, 0)),
        (_L.RAHU, (1, 6, 0)),
        (_L.JUPITER, (1, 4, 0)),
        (_L.SATURN, (1, 7, 0)),
        (_L.MERCURY, (1, 5, 0)),
        (_L.KETU, (0, 7, 0)),
        (_L.VENUS, (1, 8, 0)),
        (_L.SUN, (0, 6, 0)),
    ),
    _L.MARS: (
        (_L.MARS, (0, 4, 27)),
        (_L.RAHU, (1, 0, 18)),
        (_L.JUPITER, (0, 11, 6)),
        (_L.SATURN, (1, 1, 9)),
        (_L.MERCURY, (0, 11, 27)),
        (_L.KETU, (0, 4, 27)),
        (_L.VENUS, (1, 2, 0)),
        (_L.SUN, (0, 4, 6)),
        (_L.MOON, (0, 7, 0)),
    ),
    _L.RAHU: (
        (_L.RAHU, (2, 8, 12)),
        (_L.JUPITER, (2, 4, 24)),
        (_L.SATURN, (2, 10, 6)),
        (_L.MERCURY, (2, 6, 18)),
        (_L.KETU, (1, 0, 18)),
        (_L.VENUS, (3, 0, 0)),
        (_L.SUN, (0, 10, 24)),
        (_L.MOON, (1, 6, 0)),
        (_L.MARS, (1, 0, 18)),
    ),
    _L.JUPITER: (
        (_L.JUPITER, (2, 1, 18)),
        (_L.SATURN, (2, 6, 12)),
        (_L.MERCURY, (2, 3, 6)),
        (_L.KETU, (0, 11, 6)),
        (_L.VENUS, (2, 8, 0)),
        (_L.SUN, (0, 9, 18)),
        (_L.MOON, (1, 4, 0)),
        (_L.MARS, (0, 11, 6)),
        (_L.RAHU, (2, 4, 24)),
    ),
    _L.SATURN: (
        (_L.SATURN, (3, 0, 3)),
        (_L.MERCURY, (2, 8, 9)),
        (_L.KETU, (1, 1, 9)),
        (_L.VENUS, (3, 2, 0)),
        (_L.SUN, (0, 11, 12)),
        (_L.MOON, (1, 7, 0)),
        (_L.MARS, (1, 1, 9)),
        (_L.RAHU, (2, 10, 6)),
        (_L.JUPITER, (2, 6, 12)),
    ),
    _L.MERCURY: (
        (_L.MERCURY, (2, 4, 27)),
        (_L.KETU, (0, 11, 27)),
        (_L.VENUS, (2, 10, 0)),
        (_L.SUN, (0, 10, 6)),
        (_L.MOON, (1, 5, 0)),
        (_L.MARS, (0, 11, 27)),
        (_L.RAHU, (2, 6, 18)),
        (_L.JUPITER, (2, 3, 6)),
        (_L.SATURN, (2, 8, 9)),
    ),
}

del _L


def period_duration(years: int, months: int, days: int) -> timedelta:
    return timedelta(hours=years * YEAR_HOURS + months * MONTH_HOURS + days * DAYS_HOURS)


def antardashas(mahadasha: DashaLord) -> tuple[DashaLord, ...]:
    """Sub-period lords of ``mahadasha`` in running order."""

    return tuple(lord for lord, _ in _ANTARDASHA_TABLE[mahadasha])


def antardasha_duration(mahadasha: DashaLord, antardasha: DashaLord) -> timedelta:
    for lord, (years, months, days) in _ANTARDASHA_TABLE[mahadasha]:
        if lord is antardasha:
            return period_duration(years, months, days)
    raise KeyError(f"{antardasha.value} is not an antardasha of {mahadasha.value}")


def next_antardasha(mahadasha: DashaLord, antardasha: DashaLord) -> tuple[DashaLord, DashaLord]:
    """The (maha, antar) pair that follows; the last sub-period rolls over."""

    sisters = antardashas(mahadasha)
    if antardasha is sisters[-1]:
        following = mahadasha.next()
        return following, antardashas(following)[0]
    return mahadasha, antardasha.next()


def dasha_lord_pair(
    mahadasha: DashaLord,
    birth: datetime,
    remaining: float,
) -> tuple[DashaLord, DashaLord, timedelta]:
    """Locate the running antardasha at ``birth``.

    ``remaining`` is the fraction of the natal nakshatra (and so of the
    mahadasha) still to run. Returns the mahadasha, the antardasha, and the
    time left in that antardasha.

    Raises
    ------
    DashaInvariantError
        If ``remaining`` is outside ``[0, 1]`` or no antardasha contains
        ``birth``.
    """

    if not 0.0 <= remaining <= 1.0:
        raise DashaInvariantError(f"remaining fraction {remaining!r} outside [0, 1]")
    sisters = antardashas(mahadasha)
    if remaining == 0.0:
        return mahadasha, sisters[-1], timedelta(0)
    if remaining == 1.0:
        return mahadasha, sisters[0], antardasha_duration(mahadasha, sisters[0])

    elapsed = mahadasha.mahadasha_duration * (1.0 - remaining)
    start = birth - elapsed
    for lord in sisters:
        end = start + antardasha_duration(mahadasha, lord)
        if start <= birth < end:
            return mahadasha, lord, end - birth
        start = end
    raise DashaInvariantError(
        f"no antardasha of {mahadasha.value} contains {birth.isoformat()} "
        f"(remaining {remaining:.6f})"
    )
