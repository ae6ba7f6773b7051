"""Vimshottari period tree anchored on the natal Moon."""

from __future__ import annotations

import logging
from bisect import bisect_right
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Final

from ..chart.correction import correct_to_longitude
from ..config.settings import DashaCfg
from ..core.angles import directional_difference, normalize
from ..core.time import SECONDS_PER_DAY, ensure_utc
from ..ephemeris.base import EphemerisAdapter
from ..exceptions import DashaInvariantError
from ..interval import Interval
from ..observability import COMPUTE_ERRORS
from ..zodiac.points import PointID
from .dasha import DashaLord, antardasha_duration, next_antardasha
from .nakshatra import Nakshatra, nakshatra_of

LOG = logging.getLogger(__name__)

__all__ = ["TOTAL_PERIODS", "DashaInterval", "DashaTree", "build_dasha_tree"]

TOTAL_PERIODS: Final[int] = 81

# Birth may sit this close (in days) outside the refined nakshatra window.
_ANCHOR_SLACK_DAYS: Final[float] = 60.0 / SECONDS_PER_DAY


@dataclass(frozen=True, slots=True)
class DashaInterval:
    mahadasha: DashaLord
    antardasha: DashaLord
    interval: Interval

    @property
    def start(self) -> datetime:
        return self.interval.start

    @property
    def end(self) -> datetime:
        return self.interval.end

    def to_dict(self) -> dict[str, Any]:
        return {
            "mahadasha": self.mahadasha.value,
            "antardasha": self.antardasha.value,
            "interval": self.interval.to_dict(),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> DashaInterval:
        return cls(
            mahadasha=DashaLord(payload["mahadasha"]),
            antardasha=DashaLord(payload["antardasha"]),
            interval=Interval.from_dict(payload["interval"]),
        )


@dataclass(frozen=True)
class DashaTree:
    """Consecutive (mahadasha, antardasha) periods starting at birth.

    ``intervals`` tile ``[birth, end)`` without gaps; lookups bisect over
    their start times.
    """

    birth: datetime
    nakshatra: Nakshatra
    nakshatra_window: Interval
    remaining: float
    intervals: tuple[DashaInterval, ...]
    _starts: list[datetime] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_starts", [item.start for item in self.intervals])

    def __len__(self) -> int:
        return len(self.intervals)

    def __iter__(self) -> Iterator[DashaInterval]:
        return iter(self.intervals)

    @property
    def span(self) -> Interval:
        return Interval(self.intervals[0].start, self.intervals[-1].end)

    def lookup(self, moment: datetime) -> DashaInterval | None:
        """Period containing ``moment``, or ``None`` outside the tree."""

        index = bisect_right(self._starts, moment) - 1
        if index < 0:
            return None
        candidate = self.intervals[index]
        return candidate if candidate.interval.contains(moment) else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "birth": self.birth.isoformat(),
            "nakshatra": self.nakshatra.to_dict(),
            "nakshatra_window": self.nakshatra_window.to_dict(),
            "remaining": self.remaining,
            "intervals": [item.to_dict() for item in self.intervals],
        }


def _fail(message: str) -> DashaInvariantError:
    COMPUTE_ERRORS.labels(component="dasha", error="DashaInvariantError").inc()
    LOG.error(message)
    return DashaInvariantError(message)


def build_dasha_tree(
    ephemeris: EphemerisAdapter,
    birth: datetime,
    *,
    settings: DashaCfg | None = None,
) -> DashaTree:
    """Anchor the Vimshottari sequence on the sidereal Moon at ``birth``.

    The natal nakshatra's entry and exit are estimated from the mean
    sidereal month and refined against the ephemeris; the fraction of the
    nakshatra still to run fixes how much of the first period is left.
    Naive ``birth`` values are taken as UTC.

    Raises
    ------
    ConvergenceError
        If a nakshatra boundary cannot be refined.
    DashaInvariantError
        If birth falls outside the refined nakshatra window.
    """

    cfg = settings or DashaCfg()
    if birth.tzinfo is None:
        birth = ensure_utc(birth)
    zone = birth.tzinfo
    # Period arithmetic runs in UTC so DST shifts do not leak into durations.
    birth_utc = ensure_utc(birth)

    jd_birth = ephemeris.julian_day(birth)
    moon_lon = ephemeris.body_position(jd_birth, PointID.MOON, sidereal=True).longitude
    nakshatra = nakshatra_of(moon_lon)
    days_per_degree = cfg.sidereal_month_days / 360.0

    entry_target = nakshatra.min_degree
    exit_target = normalize(nakshatra.max_degree)
    approx_entry = jd_birth + directional_difference(moon_lon, entry_target) * days_per_degree
    approx_exit = jd_birth + directional_difference(moon_lon, exit_target) * days_per_degree
    correction = {
        "window": cfg.correction_window_days,
        "epsilon": cfg.correction_epsilon_deg,
        "resolution_seconds": cfg.correction_resolution_seconds,
    }
    jd_entry = correct_to_longitude(ephemeris, PointID.MOON, approx_entry, entry_target, **correction)
    jd_exit = correct_to_longitude(ephemeris, PointID.MOON, approx_exit, exit_target, **correction)
    LOG.debug(
        "moon %.4f° in %s: window JD %.6f .. %.6f (birth %.6f)",
        moon_lon,
        nakshatra,
        jd_entry,
        jd_exit,
        jd_birth,
    )

    if not jd_entry - _ANCHOR_SLACK_DAYS <= jd_birth <= jd_exit + _ANCHOR_SLACK_DAYS:
        raise _fail(
            f"birth JD {jd_birth:.6f} outside {nakshatra} window "
            f"[{jd_entry:.6f}, {jd_exit:.6f}]"
        )
    if jd_exit <= jd_entry:
        raise _fail(f"empty {nakshatra} window [{jd_entry:.6f}, {jd_exit:.6f}]")
    remaining = min(1.0, max(0.0, (jd_exit - jd_birth) / (jd_exit - jd_entry)))

    mahadasha, antardasha, left = nakshatra.dasha_lord_pair(birth_utc, remaining)
    LOG.debug(
        "dasha anchor %s/%s with %s left (%.4f of nakshatra remaining)",
        mahadasha.value,
        antardasha.value,
        left,
        remaining,
    )

    intervals: list[DashaInterval] = []
    start = birth_utc
    end = birth_utc + left
    for index in range(TOTAL_PERIODS):
        if index:
            end = start + antardasha_duration(mahadasha, antardasha)
        intervals.append(
            DashaInterval(
                mahadasha,
                antardasha,
                Interval(start.astimezone(zone), end.astimezone(zone)),
            )
        )
        mahadasha, antardasha = next_antardasha(mahadasha, antardasha)
        start = end

    window = Interval(
        ephemeris.from_julian_day(jd_entry).astimezone(zone),
        ephemeris.from_julian_day(jd_exit).astimezone(zone),
    )
    return DashaTree(
        birth=birth,
        nakshatra=nakshatra,
        nakshatra_window=window,
        remaining=remaining,
        intervals=tuple(intervals),
    )
