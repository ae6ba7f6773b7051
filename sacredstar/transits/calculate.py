"""Collect every running transit for a moment."""

from __future__ import annotations

import logging
from datetime import datetime

from ..aspects import LUNATION_ORB
from ..chart.builder import build_chart
from ..chart.types import ChartType
from ..config.settings import AspectsCfg, SearchCfg
from ..ephemeris.base import EphemerisAdapter
from ..zodiac.points import MODERN_PLANETS, PointID
from .journeys import aspect_journey, ingress_journey
from .models import LunationTransit, Transit

LOG = logging.getLogger(__name__)

__all__ = ["calculate"]


def calculate(
    ephemeris: EphemerisAdapter,
    moment: datetime,
    *,
    search: SearchCfg | None = None,
    aspects: AspectsCfg | None = None,
) -> list[Transit]:
    """Ingress, aspect and lunation transits for the sky at ``moment``.

    The sky is cast as a tropical chart at longitude and latitude zero with
    the ten modern planets. Aspects that are within orb only through
    minute rounding of the chart positions are left out.
    """

    orbs = aspects.orbs if aspects is not None else None
    lunation_orb = aspects.lunation_orb if aspects is not None else LUNATION_ORB
    chart = build_chart(
        ephemeris,
        moment,
        0.0,
        0.0,
        ChartType.TROPICAL,
        MODERN_PLANETS,
        orbs=orbs,
        lunation_orb=lunation_orb,
    )

    transits: list[Transit] = []
    for point in chart.points:
        if point.id is PointID.ASC:
            continue
        transits.append(ingress_journey(ephemeris, point, moment, search=search))

    for aspect in chart.aspects:
        try:
            transits.append(aspect_journey(ephemeris, aspect, moment, search=search, orbs=orbs))
        except ValueError as exc:
            LOG.debug("skipping %s: %s", aspect, exc)

    if chart.lunation is not None:
        transits.append(LunationTransit.at(chart.lunation, moment))

    LOG.debug("%d transits at %s", len(transits), moment.isoformat())
    return transits
