"""The narrow ephemeris contract the chart and search code depends on."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, runtime_checkable

from ..zodiac.points import PointID

__all__ = ["BodyPosition", "EphemerisAdapter"]


@dataclass(frozen=True, slots=True)
class BodyPosition:
    """Ecliptic coordinates of a body at one instant."""

    point: PointID
    julian_day: float
    longitude: float
    latitude: float
    distance: float
    speed_longitude: float

    @property
    def is_retrograde(self) -> bool:
        return self.speed_longitude < 0.0


@runtime_checkable
class EphemerisAdapter(Protocol):
    """Anything able to place bodies and the ascendant in time.

    ``SwissEphemeris`` is the production implementation; tests inject
    analytic fakes with the same four methods.
    """

    def julian_day(self, moment: datetime) -> float: ...

    def from_julian_day(self, jd_ut: float) -> datetime: ...

    def body_position(
        self, jd_ut: float, point: PointID, *, sidereal: bool = False
    ) -> BodyPosition: ...

    def ascendant(
        self, jd_ut: float, latitude: float, longitude: float, *, sidereal: bool = False
    ) -> float: ...
