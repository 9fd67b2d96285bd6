"""Registry of the supported distributions and their parameters.

Each entry describes how to present and validate a law: title, a plain
language interpretation, and per-parameter symbol, domain and default.
:func:`create` validates raw values before constructing the distribution;
the numeric classes themselves never check their arguments.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple, Type

from ..core.types import Dist
from .continuous import Beta, ChiSquared, Exponential, F, Gamma, Normal, T, Uniform
from .discrete import Binomial, Geometric, Hypergeometric, NegativeBinomial, Poisson


class ParameterError(ValueError):
    """A distribution parameter is outside its domain."""


# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------

def _number(value, symbol, kind="a real number"):
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ParameterError(f"{symbol} must be {kind}") from None
    if math.isnan(number) or math.isinf(number):
        raise ParameterError(f"{symbol} must be {kind}")
    return number


def real(value, symbol):
    return _number(value, symbol)


def positive_real(value, symbol):
    number = _number(value, symbol, "greater than 0")
    if number <= 0:
        raise ParameterError(f"{symbol} must be greater than 0")
    return number


def unit_interval(value, symbol):
    number = _number(value, symbol, "in range [0, 1]")
    if not 0 <= number <= 1:
        raise ParameterError(f"{symbol} must be in range [0, 1]")
    return number


def open_unit_interval(value, symbol):
    number = _number(value, symbol, "in range (0, 1]")
    if not 0 < number <= 1:
        raise ParameterError(f"{symbol} must be in range (0, 1]")
    return number


def non_negative_integer(value, symbol):
    number = _number(value, symbol, "a positive integer")
    if number < 0 or not number.is_integer():
        raise ParameterError(f"{symbol} must be a positive integer")
    return int(number)


def positive_integer(value, symbol):
    number = _number(value, symbol, "a positive integer")
    if number <= 0 or not number.is_integer():
        raise ParameterError(f"{symbol} must be a positive integer")
    return int(number)


# ---------------------------------------------------------------------------
# Registry types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ParameterInfo:
    name: str
    symbol: str
    description: str
    domain: str
    default: Any
    validator: Callable[[Any, str], Any]

    def validate(self, value):
        """Return *value* converted to its numeric type, or raise ParameterError."""
        return self.validator(value, self.symbol)


@dataclass(frozen=True)
class DistributionInfo:
    cls: Type[Dist]
    title: str
    interpretation: str
    kind: str
    parameters: Tuple[ParameterInfo, ...]
    label: Callable[..., str]

    @property
    def defaults(self) -> Tuple[Any, ...]:
        return tuple(p.default for p in self.parameters)


def _probability_of_success(default):
    return ParameterInfo(
        "prob", "p", "Probability of success, p", "0 <= p <= 1", default, unit_interval
    )


DISTRIBUTIONS: Dict[str, DistributionInfo] = {
    "binomial": DistributionInfo(
        Binomial,
        "Binomial",
        "Number of successes in a sequence of n independent experiments with success "
        "of probability p, failure of probability q = 1 - p",
        "discrete",
        (
            ParameterInfo("size", "n", "Number of trials, n", "n an integer ≥ 0", 10,
                          non_negative_integer),
            _probability_of_success(0.5),
        ),
        lambda n, p: f"B(n={n}, p={p})",
    ),
    "poisson": DistributionInfo(
        Poisson,
        "Poisson",
        "Number of events occurring in an interval of time, if these events occur with "
        "a known constant mean rate λ, and occur independently of the time since the "
        "last event",
        "discrete",
        (ParameterInfo("lambda", "λ", "Constant mean rate, λ", "λ > 0", 1, positive_real),),
        lambda lam: f"Pois(λ={lam})",
    ),
    "geometric": DistributionInfo(
        Geometric,
        "Geometric",
        "Number of failures before the first success, with success of probability p",
        "discrete",
        (ParameterInfo("prob", "p", "Probability of success, p", "0 < p ≤ 1", 0.6,
                       open_unit_interval),),
        lambda p: f"Geom(p={p})",
    ),
    "negative-binomial": DistributionInfo(
        NegativeBinomial,
        "Negative Binomial",
        "Number of failures in a sequence of independent and identically distributed "
        "Bernoulli trials with success of probability p, before a fixed number r of "
        "successes occur",
        "discrete",
        (
            ParameterInfo("size", "r", "Number of successes, r", "r an integer > 0", 5,
                          positive_integer),
            ParameterInfo("prob", "p", "Probability of success, p", "0 < p ≤ 1", 0.5,
                          open_unit_interval),
        ),
        lambda r, p: f"NB(r={r}, p={p})",
    ),
    "hypergeometric": DistributionInfo(
        Hypergeometric,
        "Hypergeometric",
        "Number of successes in n draws, without replacement, from a population of "
        "size N with exactly K objects with the success feature",
        "discrete",
        (
            ParameterInfo("size", "N", "Population size, N", "N an integer ≥ 0", 20,
                          non_negative_integer),
            ParameterInfo("success-states", "K", "Number of success states in the population, K",
                          "0 ≤ K ≤ N", 10, non_negative_integer),
            ParameterInfo("draws", "n", "Number of draws, n", "0 ≤ n ≤ N", 10,
                          non_negative_integer),
        ),
        lambda big_n, k, n: f"Hypergeometric(N={big_n}, K={k}, n={n})",
    ),
    "normal": DistributionInfo(
        Normal,
        "Normal",
        "The central limit theorem states that, under appropriate conditions, the "
        "distribution of a normalized version of the sample mean converges to a "
        "standard normal distribution",
        "continuous",
        (
            ParameterInfo("mean", "μ", "Mean, μ", "", 0, real),
            ParameterInfo("variance", "σ^2", "Variance, σ^2", "σ^2 > 0", 1, positive_real),
        ),
        lambda mu, var: f"N(μ={mu}, σ^2={var})",
    ),
    "uniform": DistributionInfo(
        Uniform,
        "Uniform",
        "An arbitrary outcome that lies between the bounds",
        "continuous",
        (
            ParameterInfo("min", "a", "Min, a", "", 0, real),
            ParameterInfo("max", "b", "Max, b", "a < b", 1, real),
        ),
        lambda a, b: f"U[a={a}, b={b}]",
    ),
    "exponential": DistributionInfo(
        Exponential,
        "Exponential",
        "Waiting time between events of a Poisson process with constant mean rate λ",
        "continuous",
        (ParameterInfo("rate", "λ", "Rate, λ", "λ > 0", 1, positive_real),),
        lambda lam: f"Exp(λ={lam})",
    ),
    "gamma": DistributionInfo(
        Gamma,
        "Gamma",
        "Generalisation of exponential distribution, Erlang distribution, "
        "chi-squared distribution",
        "continuous",
        (
            ParameterInfo("shape", "α", "Shape, α", "α > 0", 2, positive_real),
            ParameterInfo("rate", "λ", "Rate, λ", "λ > 0", 1, positive_real),
        ),
        lambda alpha, lam: f"Gam(α={alpha}, λ={lam})",
    ),
    "chi-squared": DistributionInfo(
        ChiSquared,
        "Chi-Squared",
        "Sum of the squares of k independent standard normal random variables",
        "continuous",
        (ParameterInfo("df", "k", "Degrees of freedom, k", "k > 0", 1, positive_real),),
        lambda k: f"χ2_k={k}",
    ),
    "beta": DistributionInfo(
        Beta,
        "Beta",
        "Prior distribution for a probability parameter p in binomial trials. If you've "
        "observed a-1 successes and b-1 failures, your posterior belief about p is Beta(a,b)",
        "continuous",
        (
            ParameterInfo("shape1", "a", "Shape 1", "a > 0", 0.5, positive_real),
            ParameterInfo("shape2", "b", "Shape 2", "b > 0", 0.5, positive_real),
        ),
        lambda a, b: f"β(shape1={a}, shape2={b})",
    ),
    "f": DistributionInfo(
        F,
        "F",
        "Arises frequently as the null distribution of a test statistic, most notably "
        "in the analysis of variance (ANOVA) and other F-tests",
        "continuous",
        (
            ParameterInfo("df1", "df1", "Degrees of freedom 1", "df1 > 0", 2, positive_real),
            ParameterInfo("df2", "df2", "Degrees of freedom 2", "df2 > 0", 5, positive_real),
        ),
        lambda d1, d2: f"F_df1={d1},df2={d2}",
    ),
    "t": DistributionInfo(
        T,
        "T",
        "Estimate of the mean of a normally distributed population in situations where "
        "the sample size is small and the population standard deviation is unknown",
        "continuous",
        (ParameterInfo("df", "m", "Degrees of freedom, m", "m > 0", 10, positive_real),),
        lambda m: f"t_m={m}",
    ),
}


def _check_relations(key, values):
    if key == "hypergeometric":
        size, success_states, draws = values
        if success_states > size:
            raise ParameterError("K must be in range [0, N]")
        if draws > size:
            raise ParameterError("n must be in range [0, N]")
    elif key == "uniform":
        low, high = values
        if not low < high:
            raise ParameterError("b must be greater than a")


def validate(key: str, *values) -> Tuple[Any, ...]:
    """Check *values* against the parameters of *key*; return them converted.

    Raises
    ------
    KeyError
        If *key* is not a registered distribution.
    ParameterError
        If a value is missing or outside its domain.
    """
    info = DISTRIBUTIONS[key]
    if len(values) != len(info.parameters):
        raise ParameterError(
            f"{info.title} takes {len(info.parameters)} parameter(s), got {len(values)}"
        )
    converted = tuple(p.validate(v) for p, v in zip(info.parameters, values))
    _check_relations(key, converted)
    return converted


def create(key: str, *values, rng=None) -> Dist:
    """Validate *values* and construct the distribution registered as *key*.

    Example:
        >>> d = create("binomial", 10, 0.5)
        >>> d.probability(5)
        Ratio(63, 256)
    """
    return DISTRIBUTIONS[key].cls(*validate(key, *values), rng=rng)


def defaults(key: str) -> Tuple[Any, ...]:
    """Default parameter values of the distribution registered as *key*."""
    return DISTRIBUTIONS[key].defaults


def label(key: str, *values) -> str:
    """Short notation such as ``"B(n=10, p=0.5)"``."""
    return DISTRIBUTIONS[key].label(*values)
