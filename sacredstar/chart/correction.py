"""Find the instant at which a point reaches a given chart longitude."""

from __future__ import annotations

import logging

from ..core.angles import directional_difference
from ..core.time import SECONDS_PER_DAY
from ..ephemeris.base import EphemerisAdapter
from ..exceptions import ConvergenceError
from ..search.edges import Bracket, bisect_crossing
from ..zodiac.points import PointID
from ..zodiac.position import ZodiacalPosition
from .types import ChartType
from .varga import varga_longitude

LOG = logging.getLogger(__name__)

__all__ = ["chart_longitude_at", "correct_to_longitude"]


def chart_longitude_at(
    ephemeris: EphemerisAdapter,
    jd_ut: float,
    point: PointID,
    chart_type: ChartType | str = ChartType.D1,
) -> float:
    """Longitude of ``point`` at ``jd_ut`` in ``chart_type`` coordinates."""

    chart_type = ChartType.parse(chart_type)
    body = ephemeris.body_position(jd_ut, point, sidereal=chart_type.is_sidereal)
    if chart_type.is_varga:
        return varga_longitude(body.longitude, chart_type, point=point)
    return body.longitude


def correct_to_longitude(
    ephemeris: EphemerisAdapter,
    point: PointID,
    start: float,
    target: ZodiacalPosition | float,
    *,
    chart_type: ChartType | str = ChartType.D1,
    window: float = 1.0,
    epsilon: float = 0.001,
    resolution_seconds: float = 1.0,
    max_iterations: int = 64,
) -> float:
    """Return the Julian Day near ``start`` when ``point`` sits on ``target``.

    The search bisects the signed distance between the point and ``target``
    inside ``[start - window, start + window]`` (days). The point must cross
    the target exactly once inside that bracket.

    Raises
    ------
    ConvergenceError
        If ``target`` is not bracketed by the window.
    """

    chart_type = ChartType.parse(chart_type)
    target_lon = target.absolute_degrees if isinstance(target, ZodiacalPosition) else float(target)

    def _offset(jd: float) -> float:
        return directional_difference(
            target_lon, chart_longitude_at(ephemeris, jd, point, chart_type)
        )

    bracket = Bracket(origin_side=start - window, far_side=start + window, steps=0)
    result = bisect_crossing(
        _offset,
        bracket,
        epsilon=epsilon,
        resolution=resolution_seconds / SECONDS_PER_DAY,
        max_iterations=max_iterations,
    )
    # A sign change on the far side of the circle is a wrap, not a crossing.
    if abs(result.value) > 90.0:
        raise ConvergenceError(
            f"{point.value} does not reach {target_lon:.4f}° within {window} days of JD {start}",
            lower=start - window,
            upper=start + window,
            iterations=result.iterations,
        )
    LOG.debug(
        "corrected %s to %.4f° at JD %.6f (%d iterations, %s)",
        point.value,
        target_lon,
        result.jd,
        result.iterations,
        result.status,
    )
    return result.jd
