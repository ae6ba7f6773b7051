"""Observability helpers (Prometheus metrics)."""

from .metrics import (
    CHARTS_BUILT,
    COMPUTE_ERRORS,
    EDGE_SEARCH_ITERATIONS,
    EPHEMERIS_CACHE_HITS,
    EPHEMERIS_CACHE_MISSES,
    EPHEMERIS_CALL_DURATION,
    ensure_metrics_registered,
)

__all__ = [
    "CHARTS_BUILT",
    "COMPUTE_ERRORS",
    "EDGE_SEARCH_ITERATIONS",
    "EPHEMERIS_CACHE_HITS",
    "EPHEMERIS_CACHE_MISSES",
    "EPHEMERIS_CALL_DURATION",
    "ensure_metrics_registered",
]
