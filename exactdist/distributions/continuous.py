"""Continuous probability distributions with rational density tables."""

from __future__ import annotations

import math

import numpy as np

from ..core.ratio import Ratio, as_ratio
from ..core.types import Statistic, Summary
from ..engine.continuous import ContinuousDist
from ..special.functions import (
    beta,
    log_gamma,
    regularised_incomplete_beta,
    regularised_incomplete_beta_inverse,
    regularised_lower_incomplete_gamma,
)

_HALF = Ratio(1, 2)
_THREE = Ratio(3)
_LEFT_START = Ratio(1, 10)

# Beasley-Springer-Moro coefficients
_BSM_A = (
    -3.969683028665376e1, 2.209460984245205e2, -2.759285104469687e2,
    1.38357751867269e2, -3.066479806614716e1, 2.506628277459239,
)
_BSM_B = (
    -5.447609879822406e1, 1.615858368580409e2, -1.556989798598866e2,
    6.680131188771972e1, -1.328068155288572e1,
)
_BSM_C = (
    -7.784894002430293e-3, -3.223964580411365e-1, -2.400758277161838,
    -2.549732539343734, 4.374664141464968, 2.938163982698783,
)
_BSM_D = (7.784695709041462e-3, 3.224671290700398e-1, 2.445134137142996, 3.754408661907416)
_BSM_LOW = 0.02425


def _standard_normal_quantile(p: float) -> float:
    if p <= 0:
        return -math.inf
    if p >= 1:
        return math.inf
    c, d = _BSM_C, _BSM_D
    if p < _BSM_LOW or p > 1 - _BSM_LOW:
        q = math.sqrt(-2 * math.log(min(p, 1 - p)))
        z = (((((c[0] * q + c[1]) * q + c[2]) * q + c[3]) * q + c[4]) * q + c[5]) / (
            (((d[0] * q + d[1]) * q + d[2]) * q + d[3]) * q + 1
        )
        return z if p < _BSM_LOW else -z
    a, b = _BSM_A, _BSM_B
    q = p - 0.5
    r = q * q
    return (((((a[0] * r + a[1]) * r + a[2]) * r + a[3]) * r + a[4]) * r + a[5]) * q / (
        ((((b[0] * r + b[1]) * r + b[2]) * r + b[3]) * r + b[4]) * r + 1
    )


def _moment(value):
    """Finite float, or "undefined" where the moment does not exist."""
    return value if math.isfinite(value) else "undefined"


def _exp_ratio(log_value: float) -> Ratio:
    try:
        return Ratio.from_number(math.exp(log_value))
    except OverflowError:
        return Ratio.INFINITY


def _gamma_density(x: Ratio, shape: float, rate: float, log_factor: float) -> Ratio:
    """``λ^α x^(α-1) e^(-λx) / Γ(α)`` with ``log_factor = log(λ^α / Γ(α))``.

    Evaluated in logs, so shapes whose ``Γ(α)`` or ``x^(α-1)`` leave the
    float range still give finite densities.
    """
    if x.lt(Ratio.ZERO):
        return Ratio.ZERO
    if x.equals(Ratio.ZERO):
        if shape < 1:
            return Ratio.INFINITY
        return Ratio.from_number(rate) if shape == 1 else Ratio.ZERO
    x_float = x.to_value()
    return _exp_ratio(log_factor + (shape - 1) * math.log(x_float) - rate * x_float)


class Normal(ContinuousDist):
    """Gaussian law.

    Parameters
    ----------
    mean : float
        Location, ``μ``.
    variance : float
        ``σ^2 > 0``.
    """

    LOWER_TAIL = 0.0013499

    def __init__(self, mean=0.0, variance=1.0, rng=None):
        super().__init__(rng)
        self.mean_float = float(mean)
        self.variance_float = float(variance)
        self.standard_deviation_float = self.variance_float ** 0.5
        self.mean = Ratio.from_number(mean)
        self.variance = Ratio.from_number(variance)
        self.standard_deviation = Ratio.from_number(self.standard_deviation_float)
        self.two_variance = Ratio.from_number(2 * self.variance_float)
        # 1 / sqrt(2 π σ^2)
        self.correction_factor = Ratio.PI.times(self.two_variance).pow_float(0.5).invert()

    def probability(self, x):
        """``exp(-(x-μ)^2 / 2σ^2) / sqrt(2πσ^2)``."""
        deviation = as_ratio(x).subtract(self.mean)
        return (
            deviation.times(deviation)
            .divide_by(self.two_variance)
            .negative()
            .pow_of(math.e)
            .times(self.correction_factor)
        )

    def cumulative(self, x):
        z = (as_ratio(x).to_value() - self.mean_float) / (self.standard_deviation_float * math.sqrt(2))
        return Ratio.from_number(0.5 * (1 + math.erf(z)))

    def domain_min(self):
        """``(μ - 3σ, P(X <= μ - 3σ))``."""
        return (
            self.mean.subtract(self.standard_deviation.times(_THREE)),
            Ratio.from_number(self.LOWER_TAIL),
        )

    def domain_max(self):
        """``(μ + 3σ, P(X <= μ + 3σ))``."""
        return (
            self.mean.add(self.standard_deviation.times(_THREE)),
            Ratio.from_number(1 - self.LOWER_TAIL),
        )

    def _tabulate(self):
        return self.range_symmetric(self.domain_max()[0], self.mean)

    def quantile(self, cumulative_probability):
        """Beasley-Springer-Moro rational approximation, scaled by ``σ`` about ``μ``."""
        p = float(cumulative_probability)
        return self.mean_float + self.standard_deviation_float * _standard_normal_quantile(p)

    def observe(self, count=1):
        """Draw *count* values with the Box-Muller transform."""
        values = []
        for _ in range(0, count, 2):
            radius = math.sqrt(-2 * math.log(1.0 - self.rng.random())) * self.standard_deviation_float
            theta = 2 * math.pi * self.rng.random()
            values.append(radius * math.cos(theta) + self.mean_float)
            values.append(radius * math.sin(theta) + self.mean_float)
        if count % 2:
            values.pop()
        self.observations.extend(values)
        return np.array(values, dtype=float)

    def summary(self) -> Summary:
        mu, var = self.mean_float, self.variance_float
        return {
            "PDF": Statistic(
                "f(x) = exp(-(x-μ)^2 / 2σ^2) / sqrt(2πσ^2)",
                f"exp(-(x-{mu})^2 / {2 * var}) / sqrt({2 * math.pi * var:.4f})",
            ),
            "expectation": Statistic("E[X] = μ", mu),
            "variance": Statistic("Var[X] = σ^2", var),
            "skewness": Statistic("Skew[X] = 0", 0.0),
            "MGF": Statistic("M_X(t) = exp(μt + σ^2t^2/2)", f"exp({mu}t + {var / 2}t^2)"),
            "CF": Statistic("φ_X(t) = exp(iμt - σ^2t^2/2)", f"exp(i{mu}t - {var / 2}t^2)"),
        }

    def __repr__(self):
        return f"Normal(mean={self.mean_float}, variance={self.variance_float})"


class Uniform(ContinuousDist):
    """Constant density on ``[min_x, max_x]``."""

    def __init__(self, min_x=0.0, max_x=1.0, rng=None):
        super().__init__(rng)
        self.min_float = float(min_x)
        self.max_float = float(max_x)
        self.min_x = Ratio.from_number(min_x)
        self.max_x = Ratio.from_number(max_x)
        self.width = self.max_x.subtract(self.min_x)
        self.density = self.width.invert()

    def probability(self, x):
        """``1 / (b - a)`` on the support, else 0."""
        x = as_ratio(x)
        if x.lt(self.min_x) or x.gt(self.max_x):
            return Ratio.ZERO
        return self.density

    def cumulative(self, x):
        x = as_ratio(x)
        if x.lte(self.min_x):
            return Ratio.ZERO
        if x.gte(self.max_x):
            return Ratio.ONE
        return x.subtract(self.min_x).divide_by(self.width)

    def _tabulate(self):
        return self.range_fixed(self.max_x, self.min_x)

    def quantile(self, cumulative_probability):
        return (self.max_float - self.min_float) * float(cumulative_probability) + self.min_float

    def summary(self) -> Summary:
        a, b = self.min_float, self.max_float
        return {
            "PDF": Statistic("f(x) = 1 / (b - a)", f"1 / {b - a}"),
            "expectation": Statistic("E[X] = (a + b) / 2", (a + b) / 2),
            "variance": Statistic("Var[X] = (b - a)^2 / 12", (b - a) ** 2 / 12),
            "skewness": Statistic("Skew[X] = 0", 0.0),
            "MGF": Statistic(
                "M_X(t) = (e^tb - e^ta) / t(b - a)", f"(e^{b}t - e^{a}t) / {b - a}t"
            ),
            "CF": Statistic(
                "φ_X(t) = (e^itb - e^ita) / it(b - a)", f"(e^i{b}t - e^i{a}t) / i{b - a}t"
            ),
        }

    def __repr__(self):
        return f"Uniform(min_x={self.min_float}, max_x={self.max_float})"


class Exponential(ContinuousDist):
    """Waiting time between events of a Poisson process with rate *rate*."""

    def __init__(self, rate=1.0, rng=None):
        super().__init__(rng)
        self.rate_float = float(rate)
        self.rate = Ratio.from_number(rate)

    def probability(self, x):
        """``λ e^(-λx)`` for ``x >= 0``."""
        x = as_ratio(x)
        if x.lt(Ratio.ZERO):
            return Ratio.ZERO
        return x.times(self.rate).negative().pow_of(math.e).times(self.rate)

    def cumulative(self, x):
        x = as_ratio(x)
        if x.lte(Ratio.ZERO):
            return Ratio.ZERO
        return Ratio.ONE.subtract(x.times(self.rate).negative().pow_of(math.e))

    def _tabulate(self):
        return self.range_by_quantile()

    def quantile(self, cumulative_probability):
        p = float(cumulative_probability)
        if p >= 1:
            return math.inf
        return -math.log1p(-p) / self.rate_float

    def summary(self) -> Summary:
        lam = self.rate_float
        return {
            "PDF": Statistic("f(x) = λe^(-λx)", f"{lam}e^(-{lam}x)"),
            "expectation": Statistic("E[X] = 1/λ", 1 / lam),
            "variance": Statistic("Var[X] = 1/λ^2", 1 / lam ** 2),
            "skewness": Statistic("Skew[X] = 2", 2.0),
            "MGF": Statistic("M_X(t) = λ / (λ - t) for t < λ", f"{lam} / ({lam} - t) for t < {lam}"),
            "CF": Statistic("φ_X(t) = λ / (λ - it)", f"{lam} / ({lam} - it)"),
        }

    def __repr__(self):
        return f"Exponential(rate={self.rate_float})"


class Gamma(ContinuousDist):
    """Gamma law in the shape/rate parametrisation."""

    def __init__(self, shape, rate, rng=None):
        super().__init__(rng)
        self.shape_float = float(shape)
        self.rate_float = float(rate)
        self.shape = Ratio.from_number(shape)
        self.rate = Ratio.from_number(rate)
        # log(λ^α / Γ(α))
        self.log_correction_factor = self.shape_float * math.log(self.rate_float) - log_gamma(
            self.shape
        )

    def probability(self, x):
        """``λ^α x^(α-1) e^(-λx) / Γ(α)``."""
        return _gamma_density(
            as_ratio(x), self.shape_float, self.rate_float, self.log_correction_factor
        )

    def cumulative(self, x):
        x = as_ratio(x)
        if x.lte(Ratio.ZERO):
            return Ratio.ZERO
        return regularised_lower_incomplete_gamma(self.shape, x.times(self.rate))

    def _tabulate(self):
        pdf, _ = self.range_by_quantile(
            _LEFT_START, min_f=self.cumulative(_LEFT_START), compute_cdf=False
        )
        return pdf, self.cdf_from_cumulative(pdf)

    def summary(self) -> Summary:
        k, lam = self.shape_float, self.rate_float
        return {
            "PDF": Statistic(
                "f(x) = λ^α x^(α-1) e^(-λx) / Γ(α)", f"{lam}^{k} x^{k - 1} e^(-{lam}x) / Γ({k})"
            ),
            "expectation": Statistic("E[X] = α/λ", k / lam),
            "variance": Statistic("Var[X] = α/λ^2", k / lam ** 2),
            "skewness": Statistic("Skew[X] = 2 / sqrt(α)", 2 / math.sqrt(k)),
            "MGF": Statistic(
                "M_X(t) = (1 - t/λ)^-α for t < λ", f"(1 - t/{lam})^-{k} for t < {lam}"
            ),
            "CF": Statistic("φ_X(t) = (1 - it/λ)^-α", f"(1 - it/{lam})^-{k}"),
        }

    def __repr__(self):
        return f"Gamma(shape={self.shape_float}, rate={self.rate_float})"


class ChiSquared(ContinuousDist):
    """Sum of the squares of *df* independent standard normals."""

    def __init__(self, df, rng=None):
        super().__init__(rng)
        self.df_float = float(df)
        self.df = Ratio.from_number(df)
        self.df_half = self.df.divide_by(2)
        # log(1 / (2^(k/2) Γ(k/2)))
        self.log_correction_factor = -self.df_float / 2 * math.log(2) - log_gamma(self.df_half)

    def probability(self, x):
        """``x^(k/2-1) e^(-x/2) / (2^(k/2) Γ(k/2))``."""
        return _gamma_density(as_ratio(x), self.df_float / 2, 0.5, self.log_correction_factor)

    def cumulative(self, x):
        x = as_ratio(x)
        if x.lte(Ratio.ZERO):
            return Ratio.ZERO
        return regularised_lower_incomplete_gamma(self.df_half, x.divide_by(2))

    def _tabulate(self):
        pdf, _ = self.range_by_quantile(
            _LEFT_START, min_f=self.cumulative(_LEFT_START), compute_cdf=False
        )
        return pdf, self.cdf_from_cumulative(pdf)

    def summary(self) -> Summary:
        k = self.df_float
        return {
            "PDF": Statistic(
                "f(x) = x^(k/2-1) e^(-x/2) / (2^(k/2) Γ(k/2))",
                f"x^{k / 2 - 1} e^(-x/2) / (2^{k / 2} Γ({k / 2}))",
            ),
            "expectation": Statistic("E[X] = k", k),
            "variance": Statistic("Var[X] = 2k", 2 * k),
            "skewness": Statistic("Skew[X] = sqrt(8/k)", math.sqrt(8 / k)),
            "MGF": Statistic("M_X(t) = (1 - 2t)^(-k/2) for t < 1/2", f"(1 - 2t)^-{k / 2} for t < 0.5"),
            "CF": Statistic("φ_X(t) = (1 - 2it)^(-k/2)", f"(1 - 2it)^-{k / 2}"),
        }

    def __repr__(self):
        return f"ChiSquared(df={self.df_float})"


class Beta(ContinuousDist):
    """Law on ``[0, 1]`` with shapes ``a`` and ``b``."""

    def __init__(self, shape1, shape2, rng=None):
        super().__init__(rng)
        self.shape1_float = float(shape1)
        self.shape2_float = float(shape2)
        self.shape1 = Ratio.from_number(shape1)
        self.shape2 = Ratio.from_number(shape2)
        self.beta = beta(self.shape1, self.shape2)

    def probability(self, x):
        """``x^(a-1) (1-x)^(b-1) / B(a, b)``; zero outside ``[0, 1]``."""
        x = as_ratio(x)
        if x.lt(Ratio.ZERO) or x.gt(Ratio.ONE):
            return Ratio.ZERO
        return (
            x.pow(self.shape1.subtract_one())
            .times(Ratio.ONE.subtract(x).pow(self.shape2.subtract_one()))
            .divide_by(self.beta)
        )

    def cumulative(self, x):
        return regularised_incomplete_beta(as_ratio(x), self.shape1, self.shape2)

    def _tabulate(self):
        # the density is unbounded at an edge whose shape is below 1
        include_edges = self.shape1.gte(Ratio.ONE) and self.shape2.gte(Ratio.ONE)
        pdf, _ = self.range_fixed(
            Ratio.ONE, Ratio.ZERO, Ratio.ZERO, compute_cdf=False, include_edges=include_edges
        )
        return pdf, self.cdf_from_cumulative(pdf)

    def summary(self) -> Summary:
        a, b = self.shape1_float, self.shape2_float
        return {
            "PDF": Statistic("f(x) = x^(a-1) (1-x)^(b-1) / B(a, b)", f"x^{a - 1} (1-x)^{b - 1} / B({a}, {b})"),
            "expectation": Statistic("E[X] = a / (a + b)", a / (a + b)),
            "variance": Statistic(
                "Var[X] = ab / ((a + b)^2 (a + b + 1))", a * b / ((a + b) ** 2 * (a + b + 1))
            ),
            "skewness": Statistic(
                "Skew[X] = 2(b - a) sqrt(a + b + 1) / ((a + b + 2) sqrt(ab))",
                2 * (b - a) * math.sqrt(a + b + 1) / ((a + b + 2) * math.sqrt(a * b)),
            ),
        }

    def __repr__(self):
        return f"Beta(shape1={self.shape1_float}, shape2={self.shape2_float})"


class F(ContinuousDist):
    """Fisher-Snedecor law with *df1* and *df2* degrees of freedom."""

    MAX_X = Ratio(50)

    def __init__(self, df1, df2, rng=None):
        super().__init__(rng)
        self.df1_float = float(df1)
        self.df2_float = float(df2)
        self.df1 = Ratio.from_number(df1)
        self.df2 = Ratio.from_number(df2)
        self.df1_half = self.df1.divide_by(2)
        self.df2_half = self.df2.divide_by(2)
        self.df2_power = self.df2.pow(self.df2)
        self.df_sum = self.df1.add(self.df2)
        self.beta = beta(self.df1_half, self.df2_half)

    def probability(self, x):
        """``sqrt((d1 x)^d1 d2^d2 / (d1 x + d2)^(d1+d2)) / (x B(d1/2, d2/2))``."""
        x = as_ratio(x)
        if x.lt(Ratio.ZERO):
            return Ratio.ZERO
        scaled = self.df1.times(x)
        return (
            scaled.pow(self.df1)
            .times(self.df2_power)
            .divide_by(scaled.add(self.df2).pow(self.df_sum))
            .pow_float(0.5)
            .divide_by(x)
            .divide_by(self.beta)
        )

    def cumulative(self, x):
        x = as_ratio(x)
        if x.lte(Ratio.ZERO):
            return Ratio.ZERO
        scaled = self.df1.times(x)
        return regularised_incomplete_beta(
            scaled.divide_by(scaled.add(self.df2)), self.df1_half, self.df2_half
        )

    def quantile(self, cumulative_probability):
        x = regularised_incomplete_beta_inverse(cumulative_probability, self.df1_half, self.df2_half)
        return self.df2.times(x).divide_by(self.df1.times(Ratio.ONE.subtract(x))).to_value()

    def _tabulate(self):
        pdf, _ = self.range_by_quantile(
            _LEFT_START,
            min_f=self.cumulative(_LEFT_START),
            compute_cdf=False,
            max_x_cap=self.MAX_X,
        )
        return pdf, self.cdf_from_cumulative(pdf)

    def summary(self) -> Summary:
        d1, d2 = self.df1_float, self.df2_float
        expectation = d2 / (d2 - 2) if d2 > 2 else math.inf
        variance = (
            2 * d2 ** 2 * (d1 + d2 - 2) / (d1 * (d2 - 2) ** 2 * (d2 - 4)) if d2 > 4 else math.inf
        )
        skewness = (
            (2 * d1 + d2 - 2) * math.sqrt(8 * (d2 - 4)) / ((d2 - 6) * math.sqrt(d1 * (d1 + d2 - 2)))
            if d2 > 6
            else math.inf
        )
        return {
            "PDF": Statistic(
                "f(x) = sqrt((d1x)^d1 d2^d2 / (d1x + d2)^(d1+d2)) / (x B(d1/2, d2/2))",
                f"sqrt(({d1}x)^{d1} {d2}^{d2} / ({d1}x + {d2})^{d1 + d2}) / (x B({d1 / 2}, {d2 / 2}))",
            ),
            "expectation": Statistic("E[X] = d2 / (d2 - 2) for d2 > 2", _moment(expectation)),
            "variance": Statistic(
                "Var[X] = 2d2^2 (d1 + d2 - 2) / (d1 (d2 - 2)^2 (d2 - 4)) for d2 > 4",
                _moment(variance),
            ),
            "skewness": Statistic(
                "Skew[X] = (2d1 + d2 - 2) sqrt(8(d2 - 4)) / ((d2 - 6) sqrt(d1 (d1 + d2 - 2))) for d2 > 6",
                _moment(skewness),
            ),
        }

    def __repr__(self):
        return f"F(df1={self.df1_float}, df2={self.df2_float})"


class T(ContinuousDist):
    """Student's t law with *df* degrees of freedom."""

    def __init__(self, df, rng=None):
        super().__init__(rng)
        self.df_float = float(df)
        self.df = Ratio.from_number(df)
        self.df_half = self.df.divide_by(2)
        # -(ν + 1) / 2
        self.exponent = self.df.add_one().times(_HALF).negative()
        # Γ((ν+1)/2) / (sqrt(νπ) Γ(ν/2)), from logs so large ν does not overflow
        self.correction_factor = _exp_ratio(
            log_gamma(self.df.add_one().times(_HALF))
            - log_gamma(self.df_half)
            - 0.5 * math.log(self.df_float * math.pi)
        )

    def probability(self, x):
        """``c (1 + x^2/ν)^(-(ν+1)/2)``."""
        x = as_ratio(x)
        return x.times(x).divide_by(self.df).add_one().pow(self.exponent).times(self.correction_factor)

    def cumulative(self, x):
        x = as_ratio(x)
        tail = regularised_incomplete_beta(
            self.df.divide_by(x.times(x).add(self.df)), self.df_half, _HALF
        ).times(_HALF)
        return tail if x.lt(Ratio.ZERO) else Ratio.ONE.subtract(tail)

    def quantile(self, cumulative_probability):
        p = float(cumulative_probability)
        if p < 0.5:
            return -self.quantile(1 - p)
        x = regularised_incomplete_beta_inverse(2 * (1 - p), self.df_half, _HALF)
        return self.df.divide_by(x).subtract(self.df).pow_float(0.5).to_value()

    def _tabulate(self):
        pdf, _ = self.range_symmetric(
            Ratio.from_number(self.quantile(0.99)), Ratio.ZERO, compute_cdf=False
        )
        return pdf, self.cdf_from_cumulative(pdf)

    def summary(self) -> Summary:
        nu = self.df_float
        if nu > 2:
            variance = nu / (nu - 2)
        elif nu > 1:
            variance = math.inf
        else:
            variance = math.nan
        return {
            "PDF": Statistic(
                "f(x) = Γ((ν+1)/2) / (sqrt(νπ) Γ(ν/2)) (1 + x^2/ν)^(-(ν+1)/2)",
                f"Γ({(nu + 1) / 2}) / (sqrt({nu}π) Γ({nu / 2})) (1 + x^2/{nu})^-{(nu + 1) / 2}",
            ),
            "expectation": Statistic("E[X] = 0 for ν > 1", 0.0 if nu > 1 else "undefined"),
            "variance": Statistic("Var[X] = ν / (ν - 2) for ν > 2", _moment(variance)),
            "skewness": Statistic("Skew[X] = 0 for ν > 3", 0.0 if nu > 3 else "undefined"),
        }

    def __repr__(self):
        return f"T(df={self.df_float})"
