"""Julian day helpers that do not depend on the Swiss Ephemeris."""

from __future__ import annotations

import datetime as _dt
from typing import Final

__all__ = [
    "JD_UNIX_EPOCH",
    "SECONDS_PER_DAY",
    "ensure_utc",
    "from_julian_day",
    "julian_day",
]

JD_UNIX_EPOCH: Final[float] = 2440587.5
SECONDS_PER_DAY: Final[float] = 86400.0

_EPOCH = _dt.datetime(1970, 1, 1, tzinfo=_dt.UTC)


def ensure_utc(moment: _dt.datetime) -> _dt.datetime:
    """Return ``moment`` converted to UTC; naive values are taken as UTC."""

    if moment.tzinfo is None:
        return moment.replace(tzinfo=_dt.UTC)
    return moment.astimezone(_dt.UTC)


def julian_day(moment: _dt.datetime) -> float:
    """Return the Julian day (UT) for ``moment``."""

    delta = ensure_utc(moment) - _EPOCH
    return JD_UNIX_EPOCH + delta / _dt.timedelta(days=1)


def from_julian_day(jd_ut: float) -> _dt.datetime:
    """Inverse of :func:`julian_day`, returning an aware UTC datetime."""

    return _EPOCH + _dt.timedelta(days=float(jd_ut) - JD_UNIX_EPOCH)
