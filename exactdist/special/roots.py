"""
Newton-Raphson root finding.

The update is::

    x_{n+1} = x_n - f(x_n) / f'(x_n)

with ``f'`` supplied by the caller or estimated with a central difference.
Iterates are kept inside ``[lower_bound, upper_bound]``. The solver is best
effort: on non-convergence it returns the iterate with the smallest residual
instead of raising.
"""

import logging
import math
from typing import Callable, Optional

from exactdist.core.constants import FD_STEP, NEWTON_MAX_ITERATIONS, NEWTON_TOLERANCE

logger = logging.getLogger(__name__)


def central_difference(f: Callable[[float], float], x: float, step: float = FD_STEP) -> float:
    """Estimate ``f'(x)`` as ``(f(x + h) - f(x - h)) / 2h``."""
    return (f(x + step) - f(x - step)) / (2.0 * step)


def newton_raphson(
    f: Callable[[float], float],
    initial_guess: float,
    lower_bound: float = -math.inf,
    upper_bound: float = math.inf,
    tolerance: float = NEWTON_TOLERANCE,
    max_iterations: int = NEWTON_MAX_ITERATIONS,
    derivative: Optional[Callable[[float], float]] = None,
) -> float:
    """
    Find a root of *f* near *initial_guess*.

    Args:
        f: Function whose root is sought.
        initial_guess: Starting point.
        lower_bound: Smallest admissible iterate.
        upper_bound: Largest admissible iterate.
        tolerance: Stop once ``|f(x)| < tolerance``.
        max_iterations: Maximum number of updates.
        derivative: ``f'``; estimated by central difference when omitted.

    Returns:
        The root estimate.

    Notes:
        - An update that leaves the bracket is replaced by the point halfway
          between the current iterate and the violated bound, so the
          iteration can still approach a root near the edge.
        - A vanishing or non-finite derivative ends the iteration early.
    """
    x = min(max(initial_guess, lower_bound), upper_bound)
    fx = f(x)
    best_x, best_fx = x, abs(fx)

    for _ in range(max_iterations):
        if abs(fx) < tolerance:
            return x

        slope = derivative(x) if derivative is not None else central_difference(f, x)
        if slope == 0 or not math.isfinite(slope):
            logger.debug("newton_raphson: unusable derivative %r at x=%r", slope, x)
            break

        x_new = x - fx / slope
        if x_new < lower_bound:
            x_new = (x + lower_bound) / 2.0
        elif x_new > upper_bound:
            x_new = (x + upper_bound) / 2.0
        if x_new == x:
            break

        x = x_new
        fx = f(x)
        if abs(fx) < best_fx:
            best_x, best_fx = x, abs(fx)
    else:
        logger.debug(
            "newton_raphson: no convergence after %d iterations (|f|=%g)",
            max_iterations,
            best_fx,
        )

    return best_x
