"""Window functions fed to :func:`~sacredstar.search.edges.find_edge`.

Each builder returns ``g(jd)`` that is non-positive while the configuration
holds and positive once it no longer does.
"""

from __future__ import annotations

from typing import Final

from ..aspects import AspectType
from ..core.angles import absolute_difference, directional_difference
from ..ephemeris.base import EphemerisAdapter
from ..zodiac.points import PointID
from ..zodiac.sign import Sign
from .edges import EdgeFunction

__all__ = [
    "ASPECT_STEP_CAP_DAYS",
    "COARSE_STEP_DAYS",
    "aspect_step",
    "aspect_window",
    "coarse_step",
    "entry_window",
    "exit_window",
]

COARSE_STEP_DAYS: Final[dict[PointID, float]] = {
    PointID.MOON: 7.0,
    PointID.SUN: 14.0,
    PointID.MERCURY: 14.0,
    PointID.VENUS: 14.0,
    PointID.MARS: 14.0,
    PointID.JUPITER: 30.0,
    PointID.SATURN: 30.0,
    PointID.URANUS: 180.0,
    PointID.NEPTUNE: 180.0,
    PointID.PLUTO: 180.0,
    PointID.RAHU: 30.0,
    PointID.KETU: 30.0,
}

ASPECT_STEP_CAP_DAYS: Final[float] = 14.0


def coarse_step(point: PointID) -> float:
    """Scan step in days used while bracketing an ingress of ``point``."""

    try:
        return COARSE_STEP_DAYS[point]
    except KeyError as exc:
        raise ValueError(f"{point.value} has no coarse step") from exc


def aspect_step(p1: PointID, p2: PointID) -> float:
    """Step for an aspect: the faster body's step, capped at two weeks."""

    return min(coarse_step(p1), coarse_step(p2), ASPECT_STEP_CAP_DAYS)


def aspect_window(
    ephemeris: EphemerisAdapter,
    p1: PointID,
    p2: PointID,
    aspect_type: AspectType,
    orb: float,
    *,
    sidereal: bool = False,
) -> EdgeFunction:
    """``|separation - nominal| - orb`` for the pair at a Julian Day."""

    nominal = aspect_type.nominal

    def _g(jd: float) -> float:
        lon1 = ephemeris.body_position(jd, p1, sidereal=sidereal).longitude
        lon2 = ephemeris.body_position(jd, p2, sidereal=sidereal).longitude
        return abs(absolute_difference(lon1, lon2) - nominal) - orb

    return _g


def entry_window(
    ephemeris: EphemerisAdapter,
    point: PointID,
    sign: Sign,
    *,
    sidereal: bool = False,
) -> EdgeFunction:
    """Signed distance of ``point`` behind the start of ``sign``.

    Non-positive while the point is at or past the cusp, so only a move back
    into the previous sign ends the stay. Excursions ahead into the next
    sign stay on the non-positive side.
    """

    cusp = sign.start_degree

    def _g(jd: float) -> float:
        lon = ephemeris.body_position(jd, point, sidereal=sidereal).longitude
        return -directional_difference(cusp, lon)

    return _g


def exit_window(
    ephemeris: EphemerisAdapter,
    point: PointID,
    sign: Sign,
    *,
    sidereal: bool = False,
) -> EdgeFunction:
    """Signed distance of ``point`` past the start of the sign after ``sign``.

    Non-positive until the point reaches the next sign. A retrograde dip
    back into the previous sign stays on the non-positive side.
    """

    cusp = sign.next().start_degree

    def _g(jd: float) -> float:
        lon = ephemeris.body_position(jd, point, sidereal=sidereal).longitude
        return directional_difference(cusp, lon)

    return _g
