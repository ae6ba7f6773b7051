"""Prometheus metric definitions shared across SacredStar components."""

from __future__ import annotations

from collections.abc import Iterable

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

__all__ = [
    "CHARTS_BUILT",
    "COMPUTE_ERRORS",
    "EDGE_SEARCH_ITERATIONS",
    "EPHEMERIS_CACHE_HITS",
    "EPHEMERIS_CACHE_MISSES",
    "EPHEMERIS_CALL_DURATION",
    "ensure_metrics_registered",
]


EPHEMERIS_CALL_DURATION = Histogram(
    "sacredstar_ephemeris_call_duration_seconds",
    "Duration of Swiss ephemeris lookups.",
    ("adapter", "operation"),
    registry=None,
)

EPHEMERIS_CACHE_HITS = Counter(
    "sacredstar_ephemeris_cache_hits_total",
    "Total body positions served from the adapter cache.",
    ("adapter",),
    registry=None,
)

EPHEMERIS_CACHE_MISSES = Counter(
    "sacredstar_ephemeris_cache_misses_total",
    "Total body positions that required a backend computation.",
    ("adapter",),
    registry=None,
)

EDGE_SEARCH_ITERATIONS = Histogram(
    "sacredstar_edge_search_iterations",
    "Coarse steps plus bisection iterations spent per edge search.",
    ("phase",),
    buckets=(1, 2, 4, 8, 16, 32, 64, 128, 256, 512),
    registry=None,
)

CHARTS_BUILT = Counter(
    "sacredstar_charts_built_total",
    "Charts assembled by the snapshot builder.",
    ("chart_type",),
    registry=None,
)

COMPUTE_ERRORS = Counter(
    "sacredstar_compute_errors_total",
    "Count of runtime failures across compute-heavy routines.",
    ("component", "error"),
    registry=None,
)


def _iter_metrics() -> Iterable[Counter | Histogram]:
    yield EPHEMERIS_CALL_DURATION
    yield EPHEMERIS_CACHE_HITS
    yield EPHEMERIS_CACHE_MISSES
    yield EDGE_SEARCH_ITERATIONS
    yield CHARTS_BUILT
    yield COMPUTE_ERRORS


def ensure_metrics_registered(
    registry: CollectorRegistry | None = None,
) -> None:
    """Register shared metrics with ``registry`` if not already present."""

    target = registry or REGISTRY
    for metric in _iter_metrics():
        try:
            target.register(metric)
        except ValueError:
            # Prometheus raises when a metric name already exists in the registry.
            continue
