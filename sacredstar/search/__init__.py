"""Edge search: coarse bracketing followed by bisection."""

from .edges import (
    HOURS_PER_DAY,
    Bracket,
    EdgeResult,
    bisect_crossing,
    find_edge,
    scan_for_crossing,
    scan_past_excursions,
)
from .windows import (
    ASPECT_STEP_CAP_DAYS,
    COARSE_STEP_DAYS,
    aspect_step,
    aspect_window,
    coarse_step,
    entry_window,
    exit_window,
)

__all__ = [
    "ASPECT_STEP_CAP_DAYS",
    "Bracket",
    "COARSE_STEP_DAYS",
    "EdgeResult",
    "HOURS_PER_DAY",
    "aspect_step",
    "aspect_window",
    "bisect_crossing",
    "coarse_step",
    "entry_window",
    "exit_window",
    "find_edge",
    "scan_for_crossing",
    "scan_past_excursions",
]
