"""Assemble chart snapshots from an ephemeris adapter."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime

from ..aspects import LUNATION_ORB, Aspect, AspectType, find_aspect, find_lunation
from ..exceptions import SacredStarError
from ..ephemeris.base import EphemerisAdapter
from ..observability import CHARTS_BUILT, COMPUTE_ERRORS
from ..zodiac.houses import opposite_house, whole_sign_house
from ..zodiac.points import CLASSICAL_PLANETS, PointID
from ..zodiac.position import ZodiacalPosition
from .models import AstroPoint, Chart
from .types import ChartType
from .varga import varga_longitude

LOG = logging.getLogger(__name__)

__all__ = ["DEFAULT_POINTS", "build_chart", "sanity_check"]

DEFAULT_POINTS: tuple[PointID, ...] = CLASSICAL_PLANETS + (PointID.RAHU, PointID.KETU)


def _chart_longitude(longitude: float, chart_type: ChartType, point: PointID) -> float:
    if chart_type.is_varga:
        return varga_longitude(longitude, chart_type, point=point)
    return longitude


def build_chart(
    ephemeris: EphemerisAdapter,
    moment: datetime,
    longitude: float,
    latitude: float,
    chart_type: ChartType | str = ChartType.TROPICAL,
    points: Sequence[PointID] = DEFAULT_POINTS,
    *,
    orbs: Mapping[str, float] | Mapping[AspectType, float] | None = None,
    lunation_orb: float = LUNATION_ORB,
) -> Chart:
    """Compute a whole-sign chart for ``moment`` at ``longitude``/``latitude``.

    The ascendant is always placed first because every house depends on
    it. Tropical charts use tropical longitudes; ``d1`` and the vargas use
    the adapter's sidereal mode, with varga charts remapped through the
    divisional transform. Ketu is the point opposite (the transformed)
    Rahu. Any ephemeris failure aborts the whole build.
    """

    chart_type = ChartType.parse(chart_type)
    sidereal = chart_type.is_sidereal
    try:
        jd_ut = ephemeris.julian_day(moment)
        asc_lon = _chart_longitude(
            ephemeris.ascendant(jd_ut, latitude, longitude, sidereal=sidereal),
            chart_type,
            PointID.ASC,
        )
        asc_pos = ZodiacalPosition.from_longitude(asc_lon)
        placed: dict[PointID, AstroPoint] = {
            PointID.ASC: AstroPoint(PointID.ASC, asc_lon, asc_pos, 1, False)
        }

        requested = [p for p in dict.fromkeys(points) if p is not PointID.ASC]
        wanted = set(requested)
        if PointID.KETU in wanted:
            wanted.add(PointID.RAHU)
        for point_id in (p for p in PointID if p in wanted and p is not PointID.KETU):
            body = ephemeris.body_position(jd_ut, point_id, sidereal=sidereal)
            lon = _chart_longitude(body.longitude, chart_type, point_id)
            pos = ZodiacalPosition.from_longitude(lon)
            placed[point_id] = AstroPoint(
                id=point_id,
                longitude=lon,
                position=pos,
                house=whole_sign_house(pos.sign, asc_pos.sign),
                is_retrograde=body.speed_longitude < 0.0,
            )
        if PointID.KETU in wanted:
            rahu = placed[PointID.RAHU]
            ketu_lon = (rahu.longitude + 180.0) % 360.0
            placed[PointID.KETU] = AstroPoint(
                id=PointID.KETU,
                longitude=ketu_lon,
                position=ZodiacalPosition.from_longitude(ketu_lon),
                house=opposite_house(rahu.house),
                is_retrograde=rahu.is_retrograde,
            )
    except SacredStarError as exc:
        COMPUTE_ERRORS.labels(component="chart", error=exc.__class__.__name__).inc()
        LOG.error("chart build failed at %s (%s): %s", moment, chart_type.value, exc)
        raise

    ordered = [placed[PointID.ASC]] + [placed[p] for p in requested]
    bodies = ordered[1:]
    aspects: list[Aspect] = []
    for i, left in enumerate(bodies):
        for right in bodies[i + 1 :]:
            aspect = find_aspect(left.id, left.position, right.id, right.position, orbs=orbs)
            if aspect is not None:
                aspects.append(aspect)

    lunation = None
    if PointID.SUN in wanted and PointID.MOON in wanted:
        lunation = find_lunation(
            placed[PointID.MOON].position, placed[PointID.SUN].position, orb=lunation_orb
        )

    CHARTS_BUILT.labels(chart_type=chart_type.value).inc()
    return Chart(
        time=moment,
        longitude=longitude,
        latitude=latitude,
        chart_type=chart_type,
        points=tuple(ordered),
        aspects=tuple(aspects),
        lunation=lunation,
    )


def sanity_check(ephemeris: EphemerisAdapter) -> Chart:
    """Build a known tropical chart (2024-01-01 00:00 UTC, London).

    Useful at start-up to confirm the ephemeris backend is wired correctly.
    """

    return build_chart(
        ephemeris,
        datetime(2024, 1, 1, tzinfo=UTC),
        -0.1278,
        51.5074,
        ChartType.TROPICAL,
        DEFAULT_POINTS,
    )
