"""
Gamma and beta family special functions.

Values are evaluated in floating point, where the algorithms are stable, and
returned as :class:`~exactdist.core.ratio.Ratio` so distribution code can keep
combining them exactly. The ``log_*`` functions return plain floats.

Algorithms:

* Gamma: Lanczos approximation (g = 7, nine coefficients) with the reflection
  formula below 1/2; positive integers are exact factorials.
* Lower incomplete gamma: power series for ``x < s + 1``, modified Lentz
  continued fraction for the upper tail otherwise.
* Regularised incomplete beta: Lentz continued fraction, always evaluated on
  the side of ``(a + 1) / (a + b + 2)`` where it converges quickly, using
  ``I_x(a, b) = 1 - I_{1-x}(b, a)``.
* Inverse regularised incomplete beta: Newton-Raphson from the Numerical
  Recipes initial estimate.
"""

import logging
import math
from functools import lru_cache
from typing import Union

from exactdist.core.constants import (
    CONTINUED_FRACTION_MAX_ITERATIONS,
    CONTINUED_FRACTION_TOLERANCE,
    LENTZ_TINY,
    SERIES_MAX_ITERATIONS,
    SERIES_TOLERANCE,
)
from exactdist.core.context import Settings
from exactdist.core.ratio import Ratio
from exactdist.core.sequences import factorial
from exactdist.special.roots import newton_raphson

logger = logging.getLogger(__name__)

RealLike = Union[Ratio, int, float]

LANCZOS_G = 7
LANCZOS_COEFFICIENTS = (
    0.99999999999980993,
    676.5203681218851,
    -1259.1392167224028,
    771.32342877765313,
    -176.61502916214059,
    12.507343278686905,
    -0.13857109526572012,
    9.9843695780195716e-6,
    1.5056327351493116e-7,
)

_HALF_LOG_TWO_PI = 0.5 * math.log(2.0 * math.pi)
_LARGEST_DIRECT_ARGUMENT = 140.0


def _to_float(x: RealLike) -> float:
    if isinstance(x, Ratio):
        return x.to_value()
    return float(x)


def _positive_integer(x: RealLike):
    """Return *x* as an int when it is a positive integer, else None."""
    if isinstance(x, Ratio):
        if x.denominator == 1 and x.numerator > 0:
            return x.numerator
        return None
    value = float(x)
    if value > 0 and value.is_integer():
        return int(value)
    return None


def _lanczos_sum(z: float) -> float:
    total = LANCZOS_COEFFICIENTS[0]
    for i in range(1, LANCZOS_G + 2):
        total += LANCZOS_COEFFICIENTS[i] / (z + i)
    return total


# ------------------------------------------------------------------ #
#  Gamma
# ------------------------------------------------------------------ #


@lru_cache(maxsize=4096)
def gamma_float(z: float) -> float:
    """Lanczos approximation of ``Γ(z)``; ``inf`` at poles and on overflow."""
    if z <= 0 and z.is_integer():
        return math.inf
    if z < 0.5:
        return math.pi / (math.sin(math.pi * z) * gamma_float(1.0 - z))
    if z > _LARGEST_DIRECT_ARGUMENT:
        try:
            return math.exp(log_gamma(z))
        except OverflowError:
            return math.inf
    z -= 1.0
    t = z + LANCZOS_G + 0.5
    return math.sqrt(2.0 * math.pi) * t ** (z + 0.5) * math.exp(-t) * _lanczos_sum(z)


@lru_cache(maxsize=4096)
def _log_gamma(z: float) -> float:
    if z < 0.5:
        return math.log(math.pi / abs(math.sin(math.pi * z))) - _log_gamma(1.0 - z)
    z -= 1.0
    t = z + LANCZOS_G + 0.5
    return _HALF_LOG_TWO_PI + (z + 0.5) * math.log(t) - t + math.log(_lanczos_sum(z))


def log_gamma(z: RealLike) -> float:
    """Natural logarithm of ``|Γ(z)|``, evaluated without overflow."""
    n = _positive_integer(z)
    if n is not None and n <= 171:
        return math.log(factorial(n - 1))
    return _log_gamma(_to_float(z))


@lru_cache(maxsize=4096)
def _gamma_ratio(z: float, precision: int) -> Ratio:
    return Ratio.from_number(gamma_float(z), precision)


def gamma(z: RealLike) -> Ratio:
    """Return ``Γ(z)``.

    Positive integers give the exact ``(z - 1)!``; other arguments use the
    Lanczos approximation. Results are memoized by argument.
    """
    n = _positive_integer(z)
    if n is not None:
        return Ratio(factorial(n - 1))
    return _gamma_ratio(_to_float(z), Settings.current().ratio_precision)


# ------------------------------------------------------------------ #
#  Incomplete gamma
# ------------------------------------------------------------------ #


def _incomplete_gamma_series(s: float, x: float) -> float:
    """Regularised lower incomplete gamma ``P(s, x)`` by power series."""
    term = 1.0 / s
    total = term
    for n in range(1, SERIES_MAX_ITERATIONS + 1):
        term *= x / (s + n)
        total += term
        if abs(term) < abs(total) * SERIES_TOLERANCE:
            break
    else:
        logger.debug("incomplete gamma series: no convergence for s=%g, x=%g", s, x)
    return total * math.exp(-x + s * math.log(x) - log_gamma(s))


def _incomplete_gamma_continued_fraction(s: float, x: float) -> float:
    """Regularised upper incomplete gamma ``Q(s, x)`` by modified Lentz."""
    b = x + 1.0 - s
    c = 1.0 / LENTZ_TINY
    d = 1.0 / b
    h = d
    for i in range(1, CONTINUED_FRACTION_MAX_ITERATIONS + 1):
        an = -i * (i - s)
        b += 2.0
        d = an * d + b
        if abs(d) < LENTZ_TINY:
            d = LENTZ_TINY
        c = b + an / c
        if abs(c) < LENTZ_TINY:
            c = LENTZ_TINY
        d = 1.0 / d
        delta = d * c
        h *= delta
        if abs(delta - 1.0) < CONTINUED_FRACTION_TOLERANCE:
            break
    else:
        logger.debug("incomplete gamma fraction: no convergence for s=%g, x=%g", s, x)
    return math.exp(-x + s * math.log(x) - log_gamma(s)) * h


def regularised_lower_incomplete_gamma_float(s: float, x: float) -> float:
    if x <= 0:
        return 0.0
    if x < s + 1.0:
        value = _incomplete_gamma_series(s, x)
    else:
        value = 1.0 - _incomplete_gamma_continued_fraction(s, x)
    return min(max(value, 0.0), 1.0)


def regularised_lower_incomplete_gamma(s: RealLike, x: RealLike) -> Ratio:
    """Return ``P(s, x) = γ(s, x) / Γ(s)``."""
    return Ratio.from_number(regularised_lower_incomplete_gamma_float(_to_float(s), _to_float(x)))


def lower_incomplete_gamma(s: RealLike, x: RealLike) -> Ratio:
    """Return ``γ(s, x)``, the integral of ``t^(s-1) e^-t`` over ``[0, x]``.

    Zero when ``x = 0``. The series is used below ``x = s + 1`` and the
    continued fraction above it, where the series converges slowly.
    """
    if _to_float(x) <= 0:
        return Ratio.ZERO
    return regularised_lower_incomplete_gamma(s, x).times(gamma(s))


# ------------------------------------------------------------------ #
#  Beta
# ------------------------------------------------------------------ #


def log_beta(a: RealLike, b: RealLike) -> float:
    """Return ``log B(a, b) = log Γ(a) + log Γ(b) - log Γ(a + b)``."""
    a, b = _to_float(a), _to_float(b)
    return log_gamma(a) + log_gamma(b) - log_gamma(a + b)


def beta(a: RealLike, b: RealLike) -> Ratio:
    """Return ``B(a, b) = Γ(a) Γ(b) / Γ(a + b)``."""
    a = a if isinstance(a, Ratio) else Ratio.from_number(a)
    b = b if isinstance(b, Ratio) else Ratio.from_number(b)
    numerator = gamma(a).times(gamma(b))
    denominator = gamma(a.add(b))
    if numerator.is_infinity() or denominator.is_infinity():
        return Ratio.from_number(math.exp(log_beta(a, b)))
    return numerator.divide_by(denominator)


def _beta_continued_fraction(x: float, a: float, b: float) -> float:
    qab = a + b
    qap = a + 1.0
    qam = a - 1.0
    c = 1.0
    d = 1.0 - qab * x / qap
    if abs(d) < LENTZ_TINY:
        d = LENTZ_TINY
    d = 1.0 / d
    h = d
    for m in range(1, CONTINUED_FRACTION_MAX_ITERATIONS + 1):
        m2 = 2 * m
        # even step
        aa = m * (b - m) * x / ((qam + m2) * (a + m2))
        d = 1.0 + aa * d
        if abs(d) < LENTZ_TINY:
            d = LENTZ_TINY
        c = 1.0 + aa / c
        if abs(c) < LENTZ_TINY:
            c = LENTZ_TINY
        d = 1.0 / d
        h *= d * c
        # odd step
        aa = -(a + m) * (qab + m) * x / ((a + m2) * (qap + m2))
        d = 1.0 + aa * d
        if abs(d) < LENTZ_TINY:
            d = LENTZ_TINY
        c = 1.0 + aa / c
        if abs(c) < LENTZ_TINY:
            c = LENTZ_TINY
        d = 1.0 / d
        delta = d * c
        h *= delta
        if abs(delta - 1.0) < CONTINUED_FRACTION_TOLERANCE:
            break
    else:
        logger.debug("incomplete beta fraction: no convergence for x=%g, a=%g, b=%g", x, a, b)
    return h


def _front_factor(x: float, a: float, b: float) -> float:
    """``x^a (1-x)^b / (a B(a, b))`` computed in log space."""
    return math.exp(a * math.log(x) + b * math.log1p(-x) - log_beta(a, b)) / a


def regularised_incomplete_beta_float(x: float, a: float, b: float) -> float:
    if x <= 0:
        return 0.0
    if x >= 1:
        return 1.0
    if x < (a + 1.0) / (a + b + 2.0):
        value = _front_factor(x, a, b) * _beta_continued_fraction(x, a, b)
    else:
        value = 1.0 - _front_factor(1.0 - x, b, a) * _beta_continued_fraction(1.0 - x, b, a)
    return min(max(value, 0.0), 1.0)


def regularised_incomplete_beta(x: RealLike, a: RealLike, b: RealLike) -> Ratio:
    """Return ``I_x(a, b)``; exactly 0 at ``x <= 0`` and 1 at ``x >= 1``."""
    x = _to_float(x)
    if x <= 0:
        return Ratio.ZERO
    if x >= 1:
        return Ratio.ONE
    return Ratio.from_number(regularised_incomplete_beta_float(x, _to_float(a), _to_float(b)))


def beta_density(x: float, a: float, b: float) -> float:
    """Density of Beta(a, b) at *x*, the derivative of ``I_x(a, b)``."""
    if x <= 0 or x >= 1:
        return math.inf
    return math.exp((a - 1.0) * math.log(x) + (b - 1.0) * math.log1p(-x) - log_beta(a, b))


def _inverse_beta_guess(p: float, a: float, b: float) -> float:
    if a >= 1 and b >= 1:
        pp = p if p < 0.5 else 1.0 - p
        t = math.sqrt(-2.0 * math.log(pp))
        x = (2.30753 + t * 0.27061) / (1.0 + t * (0.99229 + t * 0.04481)) - t
        if p < 0.5:
            x = -x
        al = (x * x - 3.0) / 6.0
        h = 2.0 / (1.0 / (2.0 * a - 1.0) + 1.0 / (2.0 * b - 1.0))
        w = x * math.sqrt(al + h) / h - (1.0 / (2.0 * b - 1.0) - 1.0 / (2.0 * a - 1.0)) * (
            al + 5.0 / 6.0 - 2.0 / (3.0 * h)
        )
        return a / (a + b * math.exp(2.0 * w))
    t = math.exp(a * math.log(a / (a + b))) / a
    u = math.exp(b * math.log(b / (a + b))) / b
    w = t + u
    if p < t / w:
        return (a * w * p) ** (1.0 / a)
    return 1.0 - (b * w * (1.0 - p)) ** (1.0 / b)


_SMALLEST_X = 1e-300
_LARGEST_X = 1.0 - 2.0 ** -53


def regularised_incomplete_beta_inverse(p: RealLike, a: RealLike, b: RealLike) -> Ratio:
    """Return *x* with ``I_x(a, b) = p``; exactly 0 at ``p <= 0`` and 1 at ``p >= 1``."""
    p, a, b = _to_float(p), _to_float(a), _to_float(b)
    if p <= 0:
        return Ratio.ZERO
    if p >= 1:
        return Ratio.ONE
    guess = min(max(_inverse_beta_guess(p, a, b), _SMALLEST_X), _LARGEST_X)
    root = newton_raphson(
        lambda x: regularised_incomplete_beta_float(x, a, b) - p,
        guess,
        lower_bound=0.0,
        upper_bound=1.0,
        derivative=lambda x: beta_density(x, a, b),
    )
    return Ratio.from_number(root)
