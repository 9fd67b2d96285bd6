"""Tests for exactdist.distributions.continuous."""

import math

import numpy as np
import pytest
from scipy import stats

from exactdist.core.context import Settings
from exactdist.core.ratio import Ratio
from exactdist.distributions.continuous import (
    Beta,
    ChiSquared,
    Exponential,
    F,
    Gamma,
    Normal,
    T,
    Uniform,
)


def _xs(table):
    return np.array([x for x, _ in table])


def _values(table):
    return np.array([value.to_value() for _, value in table])


def _is_monotone(table):
    values = [value for _, value in table]
    return all(a.lte(b) for a, b in zip(values, values[1:]))


# ------------------------------------------------------------------ Normal --


class TestNormal:
    def test_density_matches_scipy(self):
        d = Normal(1.0, 4.0)
        for x in (-3.0, 0.0, 1.0, 2.5, 7.0):
            assert d.probability(x).to_value() == pytest.approx(
                stats.norm.pdf(x, 1.0, 2.0), rel=1e-9
            )

    def test_cumulative_matches_scipy(self):
        d = Normal(1.0, 4.0)
        for x in (-3.0, 0.0, 1.0, 2.5, 7.0):
            assert d.cumulative(x).to_value() == pytest.approx(
                stats.norm.cdf(x, 1.0, 2.0), abs=1e-12
            )

    def test_table_is_symmetric(self):
        d = Normal(0.0, 1.0)
        pdf, cdf = d.pdf(), d.cdf()
        assert len(pdf) == len(cdf) == 21
        np.testing.assert_allclose(_xs(pdf), np.linspace(-3, 3, 21), atol=1e-12)
        assert cdf[10][1] == Ratio(1, 2)
        for (_, left), (_, right) in zip(cdf, reversed(cdf)):
            assert left.add(right) == Ratio.ONE

    def test_table_matches_scipy(self):
        d = Normal(0.0, 1.0)
        xs = _xs(d.pdf())
        np.testing.assert_allclose(_values(d.pdf()), stats.norm.pdf(xs), rtol=1e-8)
        np.testing.assert_allclose(_values(d.cdf()), stats.norm.cdf(xs), atol=1e-4)

    def test_table_is_centred_on_mean(self):
        pdf = Normal(10.0, 1.0).pdf()
        assert pdf[10][0] == 10.0
        assert pdf[0][0] == 7.0
        assert pdf[-1][0] == 13.0

    def test_domain_bounds(self):
        d = Normal(0.0, 1.0)
        low, f_low = d.domain_min()
        high, f_high = d.domain_max()
        assert low == Ratio(-3) and high == Ratio(3)
        assert f_low.to_value() == pytest.approx(stats.norm.cdf(-3), abs=1e-7)
        assert f_high.to_value() == pytest.approx(stats.norm.cdf(3), abs=1e-7)

    def test_quantile_matches_scipy(self):
        d = Normal(2.0, 9.0)
        for p in (0.001, 0.01, 0.3, 0.5, 0.9, 0.999):
            assert d.quantile(p) == pytest.approx(stats.norm.ppf(p, 2.0, 3.0), abs=1e-7)

    def test_quantile_edges(self):
        d = Normal(0.0, 1.0)
        assert d.quantile(0.0) == -math.inf
        assert d.quantile(1.0) == math.inf

    def test_box_muller_count(self, seeded_rng):
        d = Normal(0.0, 1.0, rng=seeded_rng)
        assert d.observe(7).shape == (7,)
        assert d.observe(8).shape == (8,)
        assert len(d.observations) == 15

    def test_box_muller_moments(self, seeded_rng):
        draws = Normal(5.0, 4.0, rng=seeded_rng).observe(20_000)
        assert abs(draws.mean() - 5.0) < 0.1
        assert abs(draws.std() - 2.0) < 0.1

    def test_summary(self):
        s = Normal(1.0, 4.0).summary()
        assert s["expectation"].value == 1.0
        assert s["variance"].value == 4.0
        assert s["skewness"].value == 0.0


# ----------------------------------------------------------------- Uniform --


class TestUniform:
    def test_density(self):
        d = Uniform(0.0, 2.0)
        assert d.probability(1.0) == Ratio(1, 2)
        assert d.probability(-0.5) == Ratio.ZERO
        assert d.probability(2.5) == Ratio.ZERO

    def test_cumulative(self):
        d = Uniform(0.0, 2.0)
        assert d.cumulative(0.5) == Ratio(1, 4)
        assert d.cumulative(-1.0) == Ratio.ZERO
        assert d.cumulative(3.0) == Ratio.ONE

    def test_table_integrates_exactly(self):
        d = Uniform(0.0, 2.0)
        pdf, cdf = d.pdf(), d.cdf()
        np.testing.assert_allclose(_xs(pdf), np.linspace(0, 2, 21))
        assert cdf[0][1] == Ratio.ZERO
        assert cdf[10][1] == Ratio(1, 2)
        assert cdf[-1][1] == Ratio.ONE

    def test_quantile(self):
        d = Uniform(1.0, 3.0)
        assert d.quantile(0.25) == 1.5

    def test_observe_with_fixed_source(self, fixed_uniform):
        d = Uniform(0.0, 2.0, rng=fixed_uniform(0.5))
        np.testing.assert_array_equal(d.observe(3), [1.0, 1.0, 1.0])
        assert d.observations == [1.0, 1.0, 1.0]

    def test_summary(self):
        s = Uniform(0.0, 6.0).summary()
        assert s["expectation"].value == 3.0
        assert s["variance"].value == 3.0


# ------------------------------------------------------------- Exponential --


class TestExponential:
    def test_density_and_cumulative(self):
        d = Exponential(2.0)
        for x in (0.0, 0.3, 1.0, 4.0):
            assert d.probability(x).to_value() == pytest.approx(
                stats.expon.pdf(x, scale=0.5), rel=1e-12
            )
            assert d.cumulative(x).to_value() == pytest.approx(
                stats.expon.cdf(x, scale=0.5), abs=1e-12
            )
        assert d.probability(-1.0) == Ratio.ZERO

    def test_quantile(self):
        d = Exponential(1.0)
        assert d.quantile(0.5) == pytest.approx(math.log(2))
        assert d.quantile(1.0) == math.inf

    def test_table_spans_target_quantile(self):
        d = Exponential(1.0)
        xs = _xs(d.pdf())
        assert xs[0] == 0.0
        assert xs[1] == 0.23
        assert xs[-1] == 4.6
        np.testing.assert_allclose(_values(d.cdf()), stats.expon.cdf(xs), atol=1e-4)


# ------------------------------------------------------------------- Gamma --


class TestGamma:
    def test_density_matches_scipy(self):
        d = Gamma(2.5, 1.5)
        for x in (0.2, 1.0, 3.0):
            assert d.probability(x).to_value() == pytest.approx(
                stats.gamma.pdf(x, 2.5, scale=1 / 1.5), rel=1e-9
            )

    def test_cumulative_matches_scipy(self):
        d = Gamma(2.0, 1.0)
        for x in (0.1, 1.0, 5.0):
            assert d.cumulative(x).to_value() == pytest.approx(stats.gamma.cdf(x, 2.0), abs=1e-10)
        assert d.cumulative(0.0) == Ratio.ZERO

    def test_table(self):
        d = Gamma(2.0, 1.0)
        pdf, cdf = d.pdf(), d.cdf()
        assert len(pdf) == len(cdf) == 21
        assert pdf[0][0] == 0.1
        assert _is_monotone(cdf)
        np.testing.assert_allclose(_values(cdf), stats.gamma.cdf(_xs(cdf), 2.0), atol=1e-10)

    def test_quantile(self):
        assert Gamma(2.0, 1.0).quantile(0.5) == pytest.approx(stats.gamma.ppf(0.5, 2.0), abs=1e-3)

    def test_large_shape_density(self):
        d = Gamma(200.5, 1.0)
        for x in (180.0, 200.0, 230.0):
            assert d.probability(x).to_value() == pytest.approx(
                stats.gamma.pdf(x, 200.5), rel=1e-9
            )

    def test_density_at_origin(self):
        assert Gamma(0.5, 1.0).probability(0) == Ratio.INFINITY
        assert Gamma(1.0, 2.0).probability(0) == Ratio(2)
        assert Gamma(3.0, 1.0).probability(0) == Ratio.ZERO

    def test_summary(self):
        s = Gamma(4.0, 2.0).summary()
        assert s["expectation"].value == 2.0
        assert s["variance"].value == 1.0
        assert s["skewness"].value == 1.0


# -------------------------------------------------------------- ChiSquared --


class TestChiSquared:
    @pytest.mark.parametrize("k", [1, 3, 4, 7.5])
    def test_density_matches_scipy(self, k):
        d = ChiSquared(k)
        for x in (0.5, 2.0, 6.0):
            assert d.probability(x).to_value() == pytest.approx(stats.chi2.pdf(x, k), rel=1e-9)

    def test_large_df_density(self):
        d = ChiSquared(401)
        for x in (360.0, 400.0, 450.0):
            assert d.probability(x).to_value() == pytest.approx(stats.chi2.pdf(x, 401), rel=1e-9)

    def test_cumulative_matches_scipy(self):
        d = ChiSquared(4)
        for x in (0.5, 2.0, 6.0, 15.0):
            assert d.cumulative(x).to_value() == pytest.approx(stats.chi2.cdf(x, 4), abs=1e-10)

    def test_table(self):
        d = ChiSquared(4)
        assert len(d.pdf()) == 21
        assert _is_monotone(d.cdf())

    def test_summary(self):
        s = ChiSquared(8).summary()
        assert s["expectation"].value == 8.0
        assert s["variance"].value == 16.0
        assert s["skewness"].value == 1.0


# -------------------------------------------------------------------- Beta --


class TestBeta:
    def test_density_is_exact_for_integer_shapes(self):
        assert Beta(2, 3).probability(0.5) == Ratio(3, 2)

    def test_density_matches_scipy(self):
        d = Beta(2.5, 0.7)
        for x in (0.1, 0.5, 0.9):
            assert d.probability(x).to_value() == pytest.approx(
                stats.beta.pdf(x, 2.5, 0.7), rel=1e-9
            )
        assert d.probability(1.5) == Ratio.ZERO

    def test_cumulative_matches_scipy(self):
        d = Beta(2.0, 3.0)
        for x in (0.1, 0.5, 0.9):
            assert d.cumulative(x).to_value() == pytest.approx(stats.beta.cdf(x, 2, 3), abs=1e-10)

    def test_table_includes_edges(self):
        d = Beta(2.0, 3.0)
        pdf, cdf = d.pdf(), d.cdf()
        assert pdf[0][0] == 0.0 and pdf[-1][0] == 1.0
        assert cdf[0][1] == Ratio.ZERO
        assert cdf[-1][1] == Ratio.ONE

    def test_table_moves_off_unbounded_edges(self):
        d = Beta(0.5, 0.5)
        pdf = d.pdf()
        assert pdf[0][0] == 0.01
        assert pdf[-1][0] == 0.99
        assert not any(value.is_infinity() for _, value in pdf)
        assert _is_monotone(d.cdf())

    def test_quantile(self):
        assert Beta(2.0, 3.0).quantile(0.5) == pytest.approx(stats.beta.ppf(0.5, 2, 3), abs=1e-3)

    def test_summary(self):
        s = Beta(2.0, 2.0).summary()
        assert s["expectation"].value == 0.5
        assert s["variance"].value == pytest.approx(0.05)
        assert s["skewness"].value == 0.0


# ----------------------------------------------------------------------- F --


class TestF:
    def test_density_matches_scipy(self):
        d = F(2, 5)
        for x in (0.2, 1.0, 3.0):
            assert d.probability(x).to_value() == pytest.approx(stats.f.pdf(x, 2, 5), rel=1e-9)
        assert d.probability(-1.0) == Ratio.ZERO

    def test_cumulative_matches_scipy(self):
        d = F(3, 8)
        for x in (0.2, 1.0, 3.0):
            assert d.cumulative(x).to_value() == pytest.approx(stats.f.cdf(x, 3, 8), abs=1e-10)

    def test_quantile_matches_scipy(self):
        d = F(3, 8)
        for p in (0.1, 0.5, 0.9):
            assert d.quantile(p) == pytest.approx(stats.f.ppf(p, 3, 8), rel=1e-6)

    def test_table_is_capped(self):
        d = F(1, 1)
        assert d.pdf()[-1][0] <= 50.0
        assert _is_monotone(d.cdf())

    def test_summary_undefined_moments(self):
        s = F(2, 4).summary()
        assert s["expectation"].value == 2.0
        assert s["variance"].value == "undefined"
        assert s["skewness"].value == "undefined"


# ----------------------------------------------------------------------- T --


class TestT:
    def test_density_matches_scipy(self):
        d = T(10)
        for x in (-2.0, 0.0, 1.5):
            assert d.probability(x).to_value() == pytest.approx(stats.t.pdf(x, 10), rel=1e-9)

    @pytest.mark.parametrize("df", [171.5, 400])
    def test_large_df_density(self, df):
        d = T(df)
        for x in (-1.0, 0.0, 2.5):
            assert d.probability(x).to_value() == pytest.approx(stats.t.pdf(x, df), rel=1e-9)

    def test_cumulative_matches_scipy(self):
        d = T(5)
        for x in (-3.0, -1.0, 0.0, 0.5, 2.0):
            assert d.cumulative(x).to_value() == pytest.approx(stats.t.cdf(x, 5), abs=1e-10)
        assert d.cumulative(0.0) == Ratio(1, 2)

    def test_quantile_is_symmetric(self):
        d = T(10)
        assert d.quantile(0.975) == pytest.approx(stats.t.ppf(0.975, 10), rel=1e-6)
        assert d.quantile(0.025) == pytest.approx(-d.quantile(0.975))
        assert d.quantile(1.0) == math.inf
        assert d.quantile(0.0) == -math.inf

    def test_table(self):
        d = T(10)
        pdf, cdf = d.pdf(), d.cdf()
        assert len(pdf) == 21
        assert pdf[10][0] == 0.0
        assert cdf[10][1] == Ratio(1, 2)
        assert _is_monotone(cdf)

    def test_summary(self):
        assert T(4).summary()["variance"].value == 2.0
        assert T(1.5).summary()["variance"].value == "undefined"
        assert T(1).summary()["expectation"].value == "undefined"


# ------------------------------------------------------- Common behaviour --


LAWS = [
    Normal(1.0, 2.0),
    Uniform(-1.0, 3.0),
    Exponential(1.5),
    Gamma(3.0, 2.0),
    ChiSquared(5),
    Beta(2.0, 5.0),
    F(4, 10),
    T(6),
]


class TestCommon:
    @pytest.mark.parametrize("d", LAWS, ids=repr)
    @pytest.mark.parametrize("p", [0.05, 0.5, 0.95])
    def test_quantile_inverts_cumulative(self, d, p):
        x = d.quantile(p)
        assert d.cumulative(x).to_value() == pytest.approx(p, abs=1e-4)

    @pytest.mark.parametrize("d", LAWS, ids=repr)
    def test_cdf_is_monotone(self, d):
        assert _is_monotone(d.cdf())

    def test_datapoints_setter_invalidates_tables(self):
        d = Normal(0.0, 1.0)
        assert len(d.pdf()) == 21
        d.datapoints = 41
        assert not d.is_tabulated
        assert len(d.pdf()) == 41

    def test_settings_datapoints(self):
        with Settings(datapoints=11):
            d = Uniform(0.0, 1.0)
        assert d.datapoints == 11
        assert len(d.pdf()) == 11

    def test_observe_records(self, fixed_uniform):
        d = Exponential(1.0, rng=fixed_uniform(0.5))
        values = d.observe(2)
        np.testing.assert_allclose(values, [math.log(2)] * 2)
        assert len(d.observations) == 2
