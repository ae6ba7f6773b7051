"""How far a transit has travelled between its entry and exit edges."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime

from ..aspects import Aspect, AspectType, orb_table
from ..chart.models import AstroPoint
from ..config.settings import SearchCfg
from ..ephemeris.base import EphemerisAdapter
from ..search.edges import EdgeFunction, EdgeResult, find_edge
from ..search.windows import aspect_step, aspect_window, coarse_step, entry_window, exit_window
from ..zodiac.sign import sign_for_longitude
from .models import AspectTransit, IngressTransit

LOG = logging.getLogger(__name__)

__all__ = ["aspect_journey", "ingress_journey", "journey_fraction"]

_MINUTES_PER_DAY = 1440.0


def journey_fraction(moment_jd: float, start_jd: float, end_jd: float) -> float:
    """``(t - start) / (end - start)``, not clamped to [0, 1]."""

    span = end_jd - start_jd
    if span <= 0.0:
        return 0.0
    return (moment_jd - start_jd) / span


def _edge(
    fn: EdgeFunction,
    origin: float,
    step: float,
    direction: int,
    epsilon: float,
    cfg: SearchCfg,
    *,
    margin: float | None = None,
) -> EdgeResult:
    return find_edge(
        fn,
        origin,
        step,
        direction,
        epsilon=epsilon,
        resolution=cfg.resolution_minutes / _MINUTES_PER_DAY,
        max_steps=cfg.max_steps,
        max_iterations=cfg.max_iterations,
        margin=margin,
    )


def _as_datetime(ephemeris: EphemerisAdapter, jd: float, like: datetime) -> datetime:
    moment = ephemeris.from_julian_day(jd)
    return moment.astimezone(like.tzinfo) if like.tzinfo is not None else moment


def aspect_journey(
    ephemeris: EphemerisAdapter,
    aspect: Aspect,
    moment: datetime,
    *,
    search: SearchCfg | None = None,
    orbs: Mapping[str, float] | Mapping[AspectType, float] | None = None,
) -> AspectTransit:
    """Locate the orb window around ``moment`` for an active ``aspect``.

    Both bodies are tracked in tropical longitude. Each scan keeps going
    while the separation stays within twice the orb of the nominal angle,
    so a short retrograde dip out of orb does not split the window. The
    window opens at the earliest entry into orb and closes at the last exit
    seen before the pair drifts beyond twice the orb.

    Raises
    ------
    ValueError
        If the aspect is not within orb at ``moment``.
    ConvergenceError
        If either edge cannot be found.
    """

    cfg = search or SearchCfg()
    orb = orb_table(orbs)[aspect.type]
    fn = aspect_window(ephemeris, aspect.p1, aspect.p2, aspect.type, orb)
    jd = ephemeris.julian_day(moment)
    if fn(jd) > 0.0:
        raise ValueError(f"{aspect} is not within its {orb}° orb at {moment.isoformat()}")

    step = aspect_step(aspect.p1, aspect.p2)
    start = _edge(fn, jd, step, -1, cfg.aspect_epsilon_deg, cfg, margin=orb)
    end = _edge(fn, jd, step, +1, cfg.aspect_epsilon_deg, cfg, margin=orb)
    LOG.debug("%s window JD %.5f .. %.5f", aspect, start.jd, end.jd)
    return AspectTransit(
        time=moment,
        journey=journey_fraction(jd, start.jd, end.jd),
        days_elapsed=int(end.jd - start.jd),
        start=_as_datetime(ephemeris, start.jd, moment),
        end=_as_datetime(ephemeris, end.jd, moment),
        aspect=aspect,
    )


def ingress_journey(
    ephemeris: EphemerisAdapter,
    point: AstroPoint,
    moment: datetime,
    *,
    search: SearchCfg | None = None,
) -> IngressTransit:
    """Locate when ``point`` entered its current sign and when it leaves.

    The sign is taken from the ephemeris at ``moment``. The stay begins
    when the point last came over from the previous sign and ends when it
    next reaches the following sign, so retrograde visits to either
    neighbour stay inside one window.
    """

    cfg = search or SearchCfg()
    jd = ephemeris.julian_day(moment)
    sign = sign_for_longitude(ephemeris.body_position(jd, point.id).longitude)
    if sign is not point.sign:
        LOG.debug("%s sits on a cusp: tracking %s", point.id.value, sign.value)
    step = coarse_step(point.id)
    start = _edge(
        entry_window(ephemeris, point.id, sign), jd, step, -1, cfg.ingress_epsilon_deg, cfg
    )
    end = _edge(
        exit_window(ephemeris, point.id, sign), jd, step, +1, cfg.ingress_epsilon_deg, cfg
    )
    LOG.debug("%s in %s JD %.5f .. %.5f", point.id.value, sign.value, start.jd, end.jd)
    return IngressTransit(
        time=moment,
        journey=journey_fraction(jd, start.jd, end.jd),
        days_elapsed=int(end.jd - start.jd),
        start=_as_datetime(ephemeris, start.jd, moment),
        end=_as_datetime(ephemeris, end.jd, moment),
        point=point,
    )
