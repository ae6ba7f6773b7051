"""Two-phase edge search over a function of time.

A tracked quantity ``g(t)`` is negative on one side of an edge and positive
on the other; which side is "inside" does not matter. The search first
walks away from a known instant in coarse steps until ``g`` changes sign,
then bisects the resulting bracket. A scan may also be told to walk through
short excursions across the edge and stop only once ``g`` moves well clear.
All instants are Julian Days (UT).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal

from ..exceptions import ConvergenceError
from ..observability import COMPUTE_ERRORS, EDGE_SEARCH_ITERATIONS

LOG = logging.getLogger(__name__)

__all__ = [
    "HOURS_PER_DAY",
    "Bracket",
    "EdgeResult",
    "bisect_crossing",
    "find_edge",
    "scan_for_crossing",
    "scan_past_excursions",
]

HOURS_PER_DAY: float = 24.0
DEFAULT_RESOLUTION_DAYS: float = 1.0 / HOURS_PER_DAY

EdgeFunction = Callable[[float], float]


def _side(value: float) -> bool:
    """``True`` for the non-positive side of an edge."""

    return value <= 0.0


@dataclass(frozen=True, slots=True)
class Bracket:
    """Two instants on opposite sides of an edge.

    ``origin_side`` shares the sign of ``g`` at the scan origin; ``far_side``
    does not. The pair is not ordered in time.
    """

    origin_side: float
    far_side: float
    steps: int

    @property
    def width(self) -> float:
        return abs(self.far_side - self.origin_side)


@dataclass(frozen=True, slots=True)
class EdgeResult:
    """Outcome of a refined edge search.

    Attributes
    ----------
    jd:
        Julian Day (UT) of the edge estimate.
    value:
        ``g(jd)``, the residual left at the estimate.
    iterations:
        Bisection iterations spent.
    steps:
        Coarse steps spent while bracketing.
    status:
        ``"epsilon"`` when ``|g|`` fell within tolerance, ``"resolution"``
        when the bracket shrank below the time resolution first.
    """

    jd: float
    value: float
    iterations: int
    steps: int
    status: Literal["epsilon", "resolution"]


def scan_for_crossing(
    fn: EdgeFunction,
    origin: float,
    step: float,
    direction: int,
    *,
    max_steps: int = 400,
) -> Bracket:
    """Step from ``origin`` until ``fn`` changes sign.

    Parameters
    ----------
    fn:
        The tracked quantity.
    origin:
        Starting Julian Day.
    step:
        Coarse step in days; must be positive.
    direction:
        ``+1`` to walk forward in time, ``-1`` to walk backward.
    max_steps:
        Upper bound on the number of steps before giving up.

    Raises
    ------
    ConvergenceError
        If no sign change is seen within ``max_steps`` steps.
    """

    if step <= 0.0:
        raise ValueError("step must be positive")
    if direction not in (1, -1):
        raise ValueError("direction must be +1 or -1")

    start_side = _side(fn(origin))
    previous = origin
    for steps in range(1, max_steps + 1):
        current = origin + direction * step * steps
        if _side(fn(current)) != start_side:
            EDGE_SEARCH_ITERATIONS.labels(phase="scan").observe(steps)
            return Bracket(origin_side=previous, far_side=current, steps=steps)
        previous = current

    COMPUTE_ERRORS.labels(component="edge_scan", error="ConvergenceError").inc()
    raise ConvergenceError(
        f"no crossing within {max_steps} steps of {step} days from JD {origin}",
        lower=min(origin, previous),
        upper=max(origin, previous),
        iterations=max_steps,
    )


def scan_past_excursions(
    fn: EdgeFunction,
    origin: float,
    step: float,
    direction: int,
    *,
    margin: float,
    max_steps: int = 400,
) -> Bracket:
    """Step from ``origin`` until ``fn`` reaches ``margin``, then bracket the last exit.

    ``fn`` must be non-positive at ``origin``. Samples in ``(0, margin)``
    are treated as brief excursions: the scan walks through them, and a
    later non-positive sample moves the edge out past them. The returned
    bracket spans the last non-positive sample and the sample after it.

    Raises
    ------
    ConvergenceError
        If ``fn`` never reaches ``margin`` within ``max_steps`` steps.
    """

    if step <= 0.0:
        raise ValueError("step must be positive")
    if direction not in (1, -1):
        raise ValueError("direction must be +1 or -1")
    if margin <= 0.0:
        raise ValueError("margin must be positive")
    if not _side(fn(origin)):
        raise ValueError("origin must lie on the non-positive side")

    last_inside = 0
    for steps in range(1, max_steps + 1):
        value = fn(origin + direction * step * steps)
        if _side(value):
            last_inside = steps
        elif value >= margin:
            EDGE_SEARCH_ITERATIONS.labels(phase="scan").observe(steps)
            if last_inside:
                LOG.debug("scan walked through excursions up to step %d", last_inside)
            return Bracket(
                origin_side=origin + direction * step * last_inside,
                far_side=origin + direction * step * (last_inside + 1),
                steps=steps,
            )

    COMPUTE_ERRORS.labels(component="edge_scan", error="ConvergenceError").inc()
    far = origin + direction * step * max_steps
    raise ConvergenceError(
        f"still within {margin} of the edge after {max_steps} steps of {step} days "
        f"from JD {origin}",
        lower=min(origin, far),
        upper=max(origin, far),
        iterations=max_steps,
    )


def bisect_crossing(
    fn: EdgeFunction,
    bracket: Bracket,
    *,
    epsilon: float,
    resolution: float = DEFAULT_RESOLUTION_DAYS,
    max_iterations: int = 64,
    tolerate_resolution: bool = True,
) -> EdgeResult:
    """Narrow ``bracket`` until ``|fn| <= epsilon`` or it is below ``resolution``.

    The half that keeps the sign change is retained at each step. When the
    bracket collapses below ``resolution`` without meeting ``epsilon`` the
    origin-side endpoint is returned, unless ``tolerate_resolution`` is false, when
    :class:`ConvergenceError` is raised.
    """

    inside, outside = bracket.origin_side, bracket.far_side
    inside_side = _side(fn(inside))
    if _side(fn(outside)) == inside_side:
        raise ConvergenceError(
            "bracket does not straddle a crossing",
            lower=min(inside, outside),
            upper=max(inside, outside),
        )

    for iteration in range(1, max_iterations + 1):
        if abs(outside - inside) <= resolution:
            EDGE_SEARCH_ITERATIONS.labels(phase="bisect").observe(iteration)
            if not tolerate_resolution:
                COMPUTE_ERRORS.labels(component="edge_bisect", error="ConvergenceError").inc()
                raise ConvergenceError(
                    f"bracket narrower than {resolution * HOURS_PER_DAY:.3f} h "
                    f"without reaching epsilon {epsilon}",
                    lower=min(inside, outside),
                    upper=max(inside, outside),
                    iterations=iteration,
                )
            return EdgeResult(
                jd=inside,
                value=fn(inside),
                iterations=iteration,
                steps=bracket.steps,
                status="resolution",
            )

        mid = 0.5 * (inside + outside)
        value = fn(mid)
        if abs(value) <= epsilon:
            EDGE_SEARCH_ITERATIONS.labels(phase="bisect").observe(iteration)
            return EdgeResult(
                jd=mid, value=value, iterations=iteration, steps=bracket.steps, status="epsilon"
            )
        if _side(value) == inside_side:
            inside = mid
        else:
            outside = mid

    COMPUTE_ERRORS.labels(component="edge_bisect", error="ConvergenceError").inc()
    raise ConvergenceError(
        f"bisection did not converge in {max_iterations} iterations",
        lower=min(inside, outside),
        upper=max(inside, outside),
        iterations=max_iterations,
    )


def find_edge(
    fn: EdgeFunction,
    origin: float,
    step: float,
    direction: int,
    *,
    epsilon: float,
    resolution: float = DEFAULT_RESOLUTION_DAYS,
    max_steps: int = 400,
    max_iterations: int = 64,
    tolerate_resolution: bool = True,
    margin: float | None = None,
) -> EdgeResult:
    """Locate the edge of ``fn`` from ``origin`` in ``direction``.

    Without ``margin`` this is the first sign change. With it, excursions that
    stay below ``margin`` are walked through (see :func:`scan_past_excursions`).
    """

    if margin is None:
        bracket = scan_for_crossing(fn, origin, step, direction, max_steps=max_steps)
    else:
        bracket = scan_past_excursions(
            fn, origin, step, direction, margin=margin, max_steps=max_steps
        )
    LOG.debug(
        "edge bracket [%f, %f] after %d steps (direction %+d)",
        min(bracket.origin_side, bracket.far_side),
        max(bracket.origin_side, bracket.far_side),
        bracket.steps,
        direction,
    )
    return bisect_crossing(
        fn,
        bracket,
        epsilon=epsilon,
        resolution=resolution,
        max_iterations=max_iterations,
        tolerate_resolution=tolerate_resolution,
    )
