"""Exception hierarchy raised by SacredStar computations."""

from __future__ import annotations

__all__ = [
    "ConvergenceError",
    "DashaInvariantError",
    "EphemerisError",
    "InvalidChartTypeError",
    "InvalidSignError",
    "SacredStarError",
]


class SacredStarError(Exception):
    """Base class for every error raised by the package."""


class EphemerisError(SacredStarError, RuntimeError):
    """Raised when the ephemeris backend fails to produce a position."""


class InvalidSignError(SacredStarError, ValueError):
    """Raised when a value cannot be interpreted as a zodiac sign."""


class InvalidChartTypeError(SacredStarError, ValueError):
    """Raised when a chart type is not valid for the requested operation."""


class ConvergenceError(SacredStarError, RuntimeError):
    """Raised when the edge search cannot bracket or refine a crossing.

    Callers may retry with a wider bracket or a coarser resolution; the
    attributes describe how far the search got.
    """

    def __init__(
        self,
        message: str,
        *,
        lower: float | None = None,
        upper: float | None = None,
        iterations: int = 0,
    ) -> None:
        super().__init__(message)
        self.lower = lower
        self.upper = upper
        self.iterations = iterations


class DashaInvariantError(SacredStarError, RuntimeError):
    """Raised when dasha anchoring produces an impossible state.

    This points at a calculation bug or pathological ephemeris input, not
    at a recoverable user error.
    """
