"""
Numerical integration.

``definite_integral`` applies the composite Simpson's 3/8 rule over a fixed
number of panels; it is deterministic and has no convergence loop.
``improper_integral`` extends an integral towards +infinity over
geometrically growing intervals until the newest interval no longer changes
the running total.
"""

import logging
from typing import Callable

from exactdist.core.constants import SERIES_MAX_ITERATIONS

logger = logging.getLogger(__name__)

# Panels used for each interval of an improper integral
_PANELS_PER_INTERVAL = 10


def definite_integral(
    f: Callable[[float], float],
    lower: float,
    upper: float,
    intervals: int = 100,
) -> float:
    """
    Integrate *f* over ``[lower, upper]`` with the composite 3/8 rule.

    Each of the *intervals* panels is split into three steps of width ``h``
    and contributes ``3h/8 * (f0 + 3 f1 + 3 f2 + f3)``.

    Args:
        f: Integrand.
        lower: Lower limit.
        upper: Upper limit.
        intervals: Number of panels.

    Returns:
        The approximate integral.
    """
    h = (upper - lower) / (3 * intervals)
    total = f(lower) + f(upper)
    for i in range(1, 3 * intervals):
        weight = 2.0 if i % 3 == 0 else 3.0
        total += weight * f(lower + i * h)
    return 3.0 * h / 8.0 * total


def improper_integral(
    f: Callable[[float], float],
    lower: float,
    initial_interval: float = 0.1,
    growth_rate: float = 2.0,
    epsilon: float = 1e-10,
    max_iterations: int = SERIES_MAX_ITERATIONS,
) -> float:
    """
    Integrate *f* from *lower* to +infinity.

    Intervals start at *initial_interval* wide and grow by *growth_rate*
    each step. Summation stops once an interval contributes less than
    ``epsilon * |running total|``, or after *max_iterations* intervals.

    Args:
        f: Integrand, decaying towards +infinity.
        lower: Lower limit.
        initial_interval: Width of the first interval.
        growth_rate: Factor applied to the width after each interval.
        epsilon: Relative stopping tolerance.
        max_iterations: Cap on the number of intervals.

    Returns:
        The approximate integral (best effort when the cap is reached).
    """
    total = 0.0
    start = lower
    width = initial_interval
    for _ in range(max_iterations):
        contribution = definite_integral(f, start, start + width, _PANELS_PER_INTERVAL)
        total += contribution
        if abs(contribution) < epsilon * abs(total) or (contribution == 0 and total != 0):
            return total
        start += width
        width *= growth_rate
    logger.debug("improper_integral stopped after %d intervals", max_iterations)
    return total
