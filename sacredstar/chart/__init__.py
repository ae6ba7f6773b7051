"""Chart snapshots, divisional transforms and time correction."""

from .builder import DEFAULT_POINTS, build_chart, sanity_check
from .correction import chart_longitude_at, correct_to_longitude
from .models import AstroPoint, Chart
from .types import ChartType
from .varga import VARGA_DEFINITIONS, VargaDefinition, to_varga, varga_longitude, varga_part

__all__ = [
    "AstroPoint",
    "Chart",
    "ChartType",
    "DEFAULT_POINTS",
    "VARGA_DEFINITIONS",
    "VargaDefinition",
    "build_chart",
    "chart_longitude_at",
    "correct_to_longitude",
    "sanity_check",
    "to_varga",
    "varga_longitude",
    "varga_part",
]
