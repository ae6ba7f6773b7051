"""Swiss Ephemeris adapter with Lahiri sidereal support."""

from __future__ import annotations

import logging
import os
import threading
from collections import OrderedDict
from datetime import UTC, datetime, timedelta
from time import perf_counter
from typing import TYPE_CHECKING, Final

from ..core.angles import normalize
from ..exceptions import EphemerisError
from ..observability import (
    COMPUTE_ERRORS,
    EPHEMERIS_CACHE_HITS,
    EPHEMERIS_CACHE_MISSES,
    EPHEMERIS_CALL_DURATION,
)
from ..zodiac.points import PointID
from .base import BodyPosition
from .swe import swe as _swe

if TYPE_CHECKING:  # pragma: no cover
    from ..config.settings import Settings

LOG = logging.getLogger(__name__)

__all__ = ["SIDEREAL_MODES", "SwissEphemeris"]

SIDEREAL_MODES: Final[dict[str, str]] = {
    "lahiri": "SIDM_LAHIRI",
    "krishnamurti": "SIDM_KRISHNAMURTI",
    "raman": "SIDM_RAMAN",
    "fagan_bradley": "SIDM_FAGAN_BRADLEY",
}

WHOLE_SIGN_HOUSES: Final[bytes] = b"W"

_CalcKey = tuple[float, int, int]
_CalcValue = tuple[float, float, float, float]


class SwissEphemeris:
    """Place bodies and the ascendant with :mod:`swisseph`.

    Parameters
    ----------
    ephemeris_path:
        Directory holding ``.se1`` files. When omitted ``SE_EPHE_PATH`` is
        consulted; without either the Moshier analytic ephemeris is used.
    sidereal_mode:
        Ayanamsa applied to sidereal requests (``lahiri`` by default).
    node:
        ``"true"`` or ``"mean"`` lunar node for Rahu.
    cache_size:
        Number of ``calc_ut`` results kept in the in-memory LRU cache. The
        cache may be shared between threads.
    """

    def __init__(
        self,
        *,
        ephemeris_path: str | os.PathLike[str] | None = None,
        sidereal_mode: str = "lahiri",
        node: str = "true",
        cache_size: int = 4096,
    ) -> None:
        swe = _swe()
        try:
            self._sidereal_mode = int(getattr(swe, SIDEREAL_MODES[sidereal_mode]))
        except KeyError as exc:
            options = ", ".join(sorted(SIDEREAL_MODES))
            raise ValueError(
                f"Unsupported sidereal mode '{sidereal_mode}'. Supported options: {options}"
            ) from exc
        if node not in {"true", "mean"}:
            raise ValueError(f"Unsupported node type '{node}'")
        self.sidereal_mode_name = sidereal_mode
        self.node = node
        self.ephemeris_path = self._configure_ephemeris_path(ephemeris_path)
        self._cache: OrderedDict[_CalcKey, _CalcValue] = OrderedDict()
        self._lock = threading.Lock()
        self._cache_size = max(0, int(cache_size))
        self._apply_sidereal_mode()

    @classmethod
    def from_settings(cls, settings: Settings) -> SwissEphemeris:
        cfg = settings.ephemeris
        return cls(
            ephemeris_path=cfg.path,
            sidereal_mode=cfg.sidereal_mode,
            node=cfg.node,
            cache_size=cfg.cache_size,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _configure_ephemeris_path(
        self, ephemeris_path: str | os.PathLike[str] | None
    ) -> str | None:
        swe = _swe()
        candidate = ephemeris_path or os.environ.get("SE_EPHE_PATH")
        if candidate:
            swe.set_ephe_path(str(candidate))
            return str(candidate)
        return None

    def _apply_sidereal_mode(self) -> None:
        _swe().set_sid_mode(self._sidereal_mode, 0.0, 0.0)

    def _body_code(self, point: PointID) -> int:
        if point is PointID.RAHU:
            swe = _swe()
            return int(swe.TRUE_NODE if self.node == "true" else swe.MEAN_NODE)
        code = point.swiss_id
        if code is None:
            raise EphemerisError(f"{point.value} is not an ephemeris body")
        return code

    def _calc(self, jd_ut: float, code: int, sidereal: bool) -> _CalcValue:
        swe = _swe()
        extra = swe.FLG_SPEED | (swe.FLG_SIDEREAL if sidereal else 0)
        key = (jd_ut, code, extra)
        cached = None
        if self._cache_size:
            with self._lock:
                cached = self._cache.get(key)
                if cached is not None:
                    self._cache.move_to_end(key)
        if cached is not None:
            EPHEMERIS_CACHE_HITS.labels(adapter="swiss").inc()
            return cached

        if sidereal:
            self._apply_sidereal_mode()
        try:
            try:
                xx, ret_flag = swe.calc_ut(jd_ut, code, swe.FLG_SWIEPH | extra)
            except swe.Error:
                # Missing .se1 files: retry with the built-in Moshier ephemeris.
                LOG.debug("swieph failed for body %s at %s; using moshier", code, jd_ut)
                xx, ret_flag = swe.calc_ut(jd_ut, code, swe.FLG_MOSEPH | extra)
        except swe.Error as exc:
            raise EphemerisError(
                f"Swiss ephemeris failed for body index {code} at JD {jd_ut}: {exc}"
            ) from exc
        if ret_flag < 0:
            raise EphemerisError(f"Swiss ephemeris returned error code {ret_flag}")

        value: _CalcValue = (float(xx[0]), float(xx[1]), float(xx[2]), float(xx[3]))
        EPHEMERIS_CACHE_MISSES.labels(adapter="swiss").inc()
        if self._cache_size:
            with self._lock:
                self._cache[key] = value
                self._cache.move_to_end(key)
                while len(self._cache) > self._cache_size:
                    self._cache.popitem(last=False)
        return value

    # ------------------------------------------------------------------
    # Core public API
    # ------------------------------------------------------------------

    @staticmethod
    def julian_day(moment: datetime) -> float:
        """Return the Julian day for a timezone-aware :class:`datetime`."""

        if moment.tzinfo is None or moment.tzinfo.utcoffset(moment) is None:
            raise ValueError("datetime must be timezone-aware")
        moment_utc = moment.astimezone(UTC)
        hour = (
            moment_utc.hour
            + moment_utc.minute / 60.0
            + moment_utc.second / 3600.0
            + moment_utc.microsecond / 3.6e9
        )
        return _swe().julday(moment_utc.year, moment_utc.month, moment_utc.day, hour)

    @staticmethod
    def from_julian_day(jd_ut: float) -> datetime:
        """Convert a Julian Day in UT back to an aware UTC datetime."""

        swe = _swe()
        year, month, day, hour = swe.revjul(jd_ut, swe.GREG_CAL)
        return datetime(year, month, day, tzinfo=UTC) + timedelta(hours=hour)

    def body_position(
        self, jd_ut: float, point: PointID, *, sidereal: bool = False
    ) -> BodyPosition:
        """Longitude, latitude, distance and speed for ``point``.

        Ketu is derived from Rahu by reflecting its longitude and latitude.
        """

        start = perf_counter()
        source = PointID.RAHU if point is PointID.KETU else point
        try:
            lon, lat, dist, speed = self._calc(jd_ut, self._body_code(source), sidereal)
        except EphemerisError as exc:
            COMPUTE_ERRORS.labels(component="ephemeris_body", error=exc.__class__.__name__).inc()
            raise
        finally:
            EPHEMERIS_CALL_DURATION.labels(adapter="swiss", operation="body").observe(
                perf_counter() - start
            )
        if point is PointID.KETU:
            lon, lat = lon + 180.0, -lat
        return BodyPosition(
            point=point,
            julian_day=jd_ut,
            longitude=normalize(lon),
            latitude=lat,
            distance=dist,
            speed_longitude=speed,
        )

    def ascendant(
        self, jd_ut: float, latitude: float, longitude: float, *, sidereal: bool = False
    ) -> float:
        """Ascendant longitude from whole-sign ``houses_ex``."""

        swe = _swe()
        start = perf_counter()
        flags = 0
        if sidereal:
            self._apply_sidereal_mode()
            flags = swe.FLG_SIDEREAL
        try:
            _cusps, ascmc = swe.houses_ex(jd_ut, latitude, longitude, WHOLE_SIGN_HOUSES, flags)
        except swe.Error as exc:
            COMPUTE_ERRORS.labels(component="ephemeris_houses", error=exc.__class__.__name__).inc()
            raise EphemerisError(
                f"house computation failed at JD {jd_ut} ({latitude}, {longitude}): {exc}"
            ) from exc
        finally:
            EPHEMERIS_CALL_DURATION.labels(adapter="swiss", operation="houses").observe(
                perf_counter() - start
            )
        return normalize(ascmc[0])

    def ayanamsa(self, jd_ut: float) -> float:
        """Offset subtracted from tropical longitudes in the configured sidereal mode."""

        self._apply_sidereal_mode()
        return float(_swe().get_ayanamsa_ut(jd_ut))
