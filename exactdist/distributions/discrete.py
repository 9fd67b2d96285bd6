"""Discrete probability distributions with exact rational tables."""

import math
from typing import Union

from ..core.constants import EXP_SPLIT_THRESHOLD, SUMMARY_PRECISION
from ..core.ratio import Ratio
from ..core.sequences import PowerSequence, combination, factorial
from ..core.types import Statistic, Summary
from ..engine.discrete import DiscreteDist, dynamic_term_cap


def probability(distribution, threshold, comparison="gt"):
    """Compute the exact probability of a discrete law exceeding or falling below a threshold.

    Parameters
    ----------
    distribution : DiscreteDist
        A discrete distribution instance.
    threshold : int
        The threshold value.
    comparison : str
        One of "gt" (P(X > threshold)), "ge" (P(X >= threshold)),
        "lt" (P(X < threshold)), "le" (P(X <= threshold)),
        or "eq" (P(X == threshold)).

    Returns
    -------
    Ratio
        The computed probability.
    """
    if comparison == "gt":
        return Ratio.ONE.subtract(distribution.cumulative(threshold))
    elif comparison == "ge":
        return Ratio.ONE.subtract(distribution.cumulative(threshold - 1))
    elif comparison == "lt":
        return distribution.cumulative(threshold - 1)
    elif comparison == "le":
        return distribution.cumulative(threshold)
    elif comparison == "eq":
        return distribution.probability(threshold)
    else:
        raise ValueError(
            f"Unknown comparison '{comparison}'. Use 'gt', 'ge', 'lt', 'le', or 'eq'."
        )


def _undefined_if_zero(numerator: float, denominator: float) -> Union[float, str]:
    if denominator == 0:
        return "undefined"
    return numerator / denominator


class Binomial(DiscreteDist):
    """Number of successes in *size* independent trials.

    Parameters
    ----------
    size : int
        Number of trials, ``n >= 0``.
    prob : float
        Probability of success, ``0 <= p <= 1``.
    """

    def __init__(self, size, prob, rng=None):
        super().__init__(rng)
        self.size = int(size)
        self.prob_float = float(prob)
        self.prob = Ratio.from_number(prob)
        self._success_powers = PowerSequence(self.prob)
        self._failure_powers = PowerSequence(Ratio.ONE.subtract(self.prob))

    def probability(self, x):
        """``C(n, x) p^x (1-p)^(n-x)``; zero outside ``0..n``."""
        if x < 0 or x > self.size:
            return Ratio.ZERO
        return (
            Ratio(combination(self.size, x))
            .times(self._success_powers[x])
            .times(self._failure_powers[self.size - x])
        )

    def _tabulate(self):
        return self.range_fixed(self.size)

    def summary(self) -> Summary:
        n, p = self.size, self.prob_float
        q = 1 - p
        return {
            "PMF": Statistic("P(X=k) = nCk p^k q^(n-k)", f"{n}Ck {p}^k {q}^({n}-k)"),
            "expectation": Statistic("E[X] = np", n * p),
            "variance": Statistic("Var[X] = npq", n * p * q),
            "skewness": Statistic(
                "Skew[X] = (q-p) / sqrt(npq)", _undefined_if_zero(q - p, math.sqrt(n * p * q))
            ),
            "MGF": Statistic("M_X(t) = (q + pe^t)^n", f"({q} + {p}e^t)^{n}"),
            "CF": Statistic("φ_X(t) = (q + pe^it)^n", f"({q} + {p}e^it)^{n}"),
            "PGF": Statistic("G(z) = (q + pz)^n", f"({q} + {p}z)^{n}"),
        }

    def __repr__(self):
        return f"Binomial(size={self.size}, prob={self.prob_float})"


def _exp_negative(rate: float) -> Ratio:
    """``e^-rate`` as a Ratio.

    Past ``EXP_SPLIT_THRESHOLD`` a double underflows, so the value is built
    as an exact integer power of ``e^-(rate/k)``.
    """
    if rate <= EXP_SPLIT_THRESHOLD:
        return Ratio.from_number(rate).negative().pow_of(math.e)
    pieces = math.ceil(rate / EXP_SPLIT_THRESHOLD)
    return Ratio.from_number(math.exp(-rate / pieces)).pow(pieces)


class Poisson(DiscreteDist):
    """Number of events in an interval at constant mean rate *lambda_*.

    Parameters
    ----------
    lambda_ : float
        Rate parameter (mean), must be > 0.
    """

    def __init__(self, lambda_, rng=None):
        super().__init__(rng)
        self.lambda_float = float(lambda_)
        self.lambda_ = Ratio.from_number(lambda_)
        self._lambda_powers = PowerSequence(self.lambda_)
        self.e_neg_lambda = _exp_negative(self.lambda_float)
        self.max_terms = dynamic_term_cap(self.lambda_float, self.lambda_float)

    def probability(self, x):
        """``λ^x e^-λ / x!``."""
        if x < 0:
            return Ratio.ZERO
        return self._lambda_powers[x].times(self.e_neg_lambda).divide_by(factorial(x))

    def _tabulate(self):
        return self.range_dynamic()

    def summary(self) -> Summary:
        lam = self.lambda_float
        return {
            "PMF": Statistic("P(X=k) = λ^k e^-λ /k!", f"{lam}^k e^{-lam} /k!"),
            "expectation": Statistic("E[X] = λ", lam),
            "variance": Statistic("Var[X] = λ", lam),
            "skewness": Statistic("Skew[X] = 1 / sqrt(λ)", 1 / math.sqrt(lam)),
            "MGF": Statistic("M_X(t) = exp[λ(e^t - 1)]", f"exp[{lam}(e^t - 1)]"),
            "CF": Statistic("φ_X(t) = exp[λ(e^it - 1)]", f"exp[{lam}(e^it - 1)]"),
            "PGF": Statistic("G(z) = exp[λ(z - 1)]", f"exp[{lam}(z - 1)]"),
        }

    def __repr__(self):
        return f"Poisson(lambda_={self.lambda_float})"


class Geometric(DiscreteDist):
    """Number of failures before the first success.

    Parameters
    ----------
    prob : float
        Probability of success, ``0 < p <= 1``.
    """

    def __init__(self, prob, rng=None):
        super().__init__(rng)
        self.prob_float = float(prob)
        self.prob = Ratio.from_number(prob)
        self._failure_powers = PowerSequence(Ratio.ONE.subtract(self.prob))
        if self.prob_float > 0:
            q = 1 - self.prob_float
            self.max_terms = dynamic_term_cap(q / self.prob_float, q / self.prob_float ** 2)

    def probability(self, x):
        """``(1-p)^x p``."""
        if x < 0:
            return Ratio.ZERO
        return self._failure_powers[x].times(self.prob)

    def _tabulate(self):
        return self.range_dynamic()

    def summary(self) -> Summary:
        p = self.prob_float
        q = 1 - p
        bound = -math.log(q) if q > 0 else math.inf
        return {
            "PMF": Statistic("P(X=k) = p(1 - p)^k", f"{p}({q})^k"),
            "expectation": Statistic("E[X] = (1 - p) / p", q / p),
            "variance": Statistic("Var[X] = (1 - p) / p^2", q / p / p),
            "skewness": Statistic(
                "Skew[X] = (2 - p) / sqrt(1 - p)", _undefined_if_zero(2 - p, math.sqrt(q))
            ),
            "MGF": Statistic(
                "M_X(t) = p / (1 - (1 - p)e^t) for t < -ln(1 - p)",
                f"{p} / (1 - {q}e^t) for t < {bound:.{SUMMARY_PRECISION}f}",
            ),
            "CF": Statistic("φ_X(t) = p / (1 - (1 - p)e^it)", f"{p} / (1 - {q}e^it)"),
            "PGF": Statistic("G(z) = p / (1 - (1 - p)z)", f"{p} / (1 - {q}z)"),
        }

    def __repr__(self):
        return f"Geometric(prob={self.prob_float})"


class NegativeBinomial(DiscreteDist):
    """Number of failures before the *size*-th success.

    Parameters
    ----------
    size : int
        Number of successes, ``r > 0``.
    prob : float
        Probability of success, ``0 < p <= 1``.
    """

    def __init__(self, size, prob, rng=None):
        super().__init__(rng)
        self.size = int(size)
        self.prob_float = float(prob)
        self.prob = Ratio.from_number(prob)
        self._failure_powers = PowerSequence(Ratio.ONE.subtract(self.prob))
        self._prob_r = self.prob.pow(self.size)
        if self.prob_float > 0:
            q = 1 - self.prob_float
            self.max_terms = dynamic_term_cap(
                self.size * q / self.prob_float, self.size * q / self.prob_float ** 2
            )

    def probability(self, x):
        """``C(x+r-1, x) (1-p)^x p^r``."""
        if x < 0:
            return Ratio.ZERO
        return (
            Ratio(combination(x + self.size - 1, x))
            .times(self._failure_powers[x])
            .times(self._prob_r)
        )

    def _tabulate(self):
        return self.range_dynamic()

    def summary(self) -> Summary:
        r, p = self.size, self.prob_float
        q = 1 - p
        return {
            "PMF": Statistic(
                "P(X=k) = (k+r-1)Ck (1-p)^k p^r", f"(k+{r - 1})Ck {q}^k {p}^{r}"
            ),
            "expectation": Statistic("E[X] = r(1 - p) / p", r * q / p),
            "variance": Statistic("Var[X] = r(1 - p) / p^2", r * q / p / p),
            "skewness": Statistic(
                "Skew[X] = (2 - p) / sqrt((1 - p)r)", _undefined_if_zero(2 - p, math.sqrt(q * r))
            ),
            "MGF": Statistic("M_X(t) = (p/(1 - (1 - p)e^t))^r", f"({p}/(1-{q}e^t))^{r}"),
            "CF": Statistic("φ_X(t) = (p/(1 - (1 - p)e^it))^r", f"({p}/(1-{q}e^it))^{r}"),
            "PGF": Statistic("G(z) = (p/(1 - (1 - p)z))^r", f"({p}/(1-{q}z))^{r}"),
        }

    def __repr__(self):
        return f"NegativeBinomial(size={self.size}, prob={self.prob_float})"


class Hypergeometric(DiscreteDist):
    """Successes in *draws* draws without replacement.

    Parameters
    ----------
    size : int
        Population size, ``N``.
    success_states : int
        Success states in the population, ``0 <= K <= N``.
    draws : int
        Number of draws, ``0 <= n <= N``.
    """

    def __init__(self, size, success_states, draws, rng=None):
        super().__init__(rng)
        self.size = int(size)
        self.success_states = int(success_states)
        self.draws = int(draws)
        self._total = Ratio(combination(self.size, self.draws))

    @property
    def support(self):
        """Inclusive ``(min, max)`` of the support."""
        low = max(0, self.draws + self.success_states - self.size)
        return low, min(self.draws, self.success_states)

    def probability(self, x):
        """``C(K, x) C(N-K, n-x) / C(N, n)``; zero outside the support."""
        low, high = self.support
        if x < low or x > high:
            return Ratio.ZERO
        ways = combination(self.success_states, x) * combination(
            self.size - self.success_states, self.draws - x
        )
        return Ratio(ways).divide_by(self._total)

    def _tabulate(self):
        return self.range_fixed(self.support[1])

    def summary(self) -> Summary:
        big_n, k, n = self.size, self.success_states, self.draws
        variance = (
            n * (k / big_n) * ((big_n - k) / big_n) * ((big_n - n) / (big_n - 1))
            if big_n > 1
            else 0.0
        )
        skew_denominator = math.sqrt(n * k * (big_n - k) * (big_n - n)) * (big_n - 2)
        return {
            "PMF": Statistic(
                "P(X=k) = KCk (N-K)C(n-k) / NCn",
                f"{k}Ck {big_n - k}C({n}-k) / {combination(big_n, n)}",
            ),
            "expectation": Statistic("E[X] = nK/N", n * k / big_n if big_n > 0 else 0.0),
            "variance": Statistic("Var[X] = n K/N (N-K)/N (N-n)/(N-1)", variance),
            "skewness": Statistic(
                "Skew[X] = (N - 2K)(N - 1)^1/2 (N - 2n) / {[nK(N - K)(N - n)]^1/2 (N-2)}",
                _undefined_if_zero(
                    (big_n - 2 * k) * math.sqrt(max(big_n - 1, 0)) * (big_n - 2 * n),
                    skew_denominator,
                ),
            ),
        }

    def __repr__(self):
        return (
            f"Hypergeometric(size={self.size}, success_states={self.success_states}, "
            f"draws={self.draws})"
        )
