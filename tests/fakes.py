"""Analytic ephemerides for deterministic tests."""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime

from sacredstar.core.angles import normalize
from sacredstar.core.time import from_julian_day, julian_day
from sacredstar.ephemeris.base import BodyPosition
from sacredstar.exceptions import EphemerisError
from sacredstar.zodiac.points import PointID

EPOCH = datetime(2024, 1, 1, tzinfo=UTC)
EPOCH_JD = julian_day(EPOCH)

Motion = Callable[[float], float]


def linear(base: float, rate: float) -> Motion:
    """Longitude moving ``rate`` degrees per day from ``base`` at the epoch."""

    return lambda jd: base + rate * (jd - EPOCH_JD)


def looping(base: float, rate: float, amplitude: float, period: float) -> Motion:
    """Mean motion plus an epicycle large enough to turn retrograde."""

    return lambda jd: (
        base
        + rate * (jd - EPOCH_JD)
        + amplitude * math.sin(2.0 * math.pi * (jd - EPOCH_JD) / period)
    )


@dataclass
class FakeEphemeris:
    """Analytic ephemeris: each point follows a closed-form motion.

    Sidereal longitudes are tropical minus a fixed ayanamsa.
    """

    motions: Mapping[PointID, Motion]
    ascendant_longitude: float = 0.0
    ayanamsa_deg: float = 24.0
    failing: set[PointID] = field(default_factory=set)
    calls: int = 0

    def julian_day(self, moment: datetime) -> float:
        return julian_day(moment)

    def from_julian_day(self, jd_ut: float) -> datetime:
        return from_julian_day(jd_ut)

    def _longitude(self, jd_ut: float, point: PointID, sidereal: bool) -> float:
        value = self.motions[point](jd_ut)
        return normalize(value - self.ayanamsa_deg if sidereal else value)

    def body_position(
        self, jd_ut: float, point: PointID, *, sidereal: bool = False
    ) -> BodyPosition:
        self.calls += 1
        if point in self.failing or point not in self.motions:
            raise EphemerisError(f"no motion for {point.value}")
        motion = self.motions[point]
        speed = (motion(jd_ut + 0.001) - motion(jd_ut - 0.001)) / 0.002
        return BodyPosition(
            point=point,
            julian_day=jd_ut,
            longitude=self._longitude(jd_ut, point, sidereal),
            latitude=0.0,
            distance=1.0,
            speed_longitude=speed,
        )

    def ascendant(
        self, jd_ut: float, latitude: float, longitude: float, *, sidereal: bool = False
    ) -> float:
        value = self.ascendant_longitude
        return normalize(value - self.ayanamsa_deg if sidereal else value)

    def ayanamsa(self, jd_ut: float) -> float:
        return self.ayanamsa_deg


def sky(**overrides: Motion) -> dict[PointID, Motion]:
    """A full set of slow, well separated motions for the modern planets."""

    motions: dict[PointID, Motion] = {
        PointID.SUN: linear(280.0, 1.0),
        PointID.MOON: linear(50.0, 13.2),
        PointID.MERCURY: linear(262.0, 1.2),
        PointID.VENUS: linear(238.0, 1.1),
        PointID.MARS: linear(254.0, 0.7),
        PointID.JUPITER: linear(35.0, 0.08),
        PointID.SATURN: linear(340.0, 0.03),
        PointID.URANUS: linear(49.0, 0.01),
        PointID.NEPTUNE: linear(355.0, 0.006),
        PointID.PLUTO: linear(299.0, 0.004),
        PointID.RAHU: linear(15.0, -0.053),
    }
    motions.update({PointID(name): motion for name, motion in overrides.items()})
    return motions
