"""SacredStar package bootstrap and curated public API surface."""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version as _get_version

from .aspects import Aspect, AspectType, Lunation, LunationType
from .chart import AstroPoint, Chart, ChartType, build_chart, correct_to_longitude, to_varga
from .ephemeris import BodyPosition, EphemerisAdapter, SwissEphemeris
from .exceptions import (
    ConvergenceError,
    DashaInvariantError,
    EphemerisError,
    InvalidChartTypeError,
    InvalidSignError,
    SacredStarError,
)
from .interval import Interval
from .transits import calculate as calculate_transits
from .vedic import DashaTree, build_dasha_tree
from .zodiac import PointID, Sign, ZodiacalPosition

LOG = logging.getLogger(__name__)

try:
    __version__ = _get_version("sacredstar")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0"


def get_version() -> str:
    """Return the resolved SacredStar package version."""

    return __version__


__all__ = [
    "Aspect",
    "AspectType",
    "AstroPoint",
    "BodyPosition",
    "Chart",
    "ChartType",
    "ConvergenceError",
    "DashaInvariantError",
    "DashaTree",
    "EphemerisAdapter",
    "EphemerisError",
    "Interval",
    "InvalidChartTypeError",
    "InvalidSignError",
    "Lunation",
    "LunationType",
    "PointID",
    "SacredStarError",
    "Sign",
    "SwissEphemeris",
    "ZodiacalPosition",
    "__version__",
    "build_chart",
    "build_dasha_tree",
    "calculate_transits",
    "correct_to_longitude",
    "get_version",
    "to_varga",
]
