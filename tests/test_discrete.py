"""Tests for exactdist.distributions.discrete."""

import math

import numpy as np
import pytest
from scipy import stats

from exactdist.core.constants import MAX_DYNAMIC_TERMS
from exactdist.core.context import Settings
from exactdist.core.ratio import Ratio
from exactdist.distributions.discrete import (
    Binomial,
    Geometric,
    Hypergeometric,
    NegativeBinomial,
    Poisson,
    probability,
)


def _as_floats(table):
    return np.array([value.to_value() for value in table])


# ---------------------------------------------------------------- Binomial --


class TestBinomial:
    def test_exact_probability(self):
        d = Binomial(10, 0.5)
        assert d.probability(5) == Ratio(252, 1024)
        assert d.probability(0) == Ratio(1, 1024)

    def test_outside_support_is_zero(self):
        d = Binomial(10, 0.5)
        assert d.probability(-1) == Ratio.ZERO
        assert d.probability(11) == Ratio.ZERO

    def test_table_sums_to_one(self):
        d = Binomial(10, 0.5)
        pdf = d.pdf()
        assert len(pdf) == 11
        assert sum(pdf, Ratio.ZERO) == Ratio.ONE
        assert d.cdf()[-1] == Ratio.ONE

    def test_table_sums_to_one_for_inexact_p(self):
        d = Binomial(25, 0.3)
        assert d.cdf()[-1] == Ratio.ONE

    def test_pmf_matches_scipy(self):
        d = Binomial(20, 0.3)
        np.testing.assert_allclose(
            _as_floats(d.pdf()), stats.binom.pmf(np.arange(21), 20, 0.3), rtol=1e-10
        )

    def test_cdf_is_monotone(self):
        cdf = Binomial(30, 0.7).cdf()
        assert all(a.lte(b) for a, b in zip(cdf, cdf[1:]))

    def test_quantile(self):
        d = Binomial(20, 0.3)
        for p in (0.05, 0.5, 0.95):
            assert d.quantile(p) == int(stats.binom.ppf(p, 20, 0.3))
        assert d.quantile(1.0) == 20

    def test_tables_are_lazy_and_cached(self):
        d = Binomial(10, 0.5)
        assert not d.is_tabulated
        first = d.pdf()
        assert d.is_tabulated
        assert d.pdf() is first

    def test_summary(self):
        s = Binomial(10, 0.5).summary()
        assert s["expectation"].value == 5.0
        assert s["variance"].value == 2.5
        assert s["skewness"].value == 0.0
        assert s["MGF"].formula == "M_X(t) = (q + pe^t)^n"
        assert set(s) == {"PMF", "expectation", "variance", "skewness", "MGF", "CF", "PGF"}

    def test_summary_degenerate_skewness(self):
        assert Binomial(10, 0.0).summary()["skewness"].value == "undefined"

    def test_repr(self):
        assert repr(Binomial(10, 0.5)) == "Binomial(size=10, prob=0.5)"


# ------------------------------------------------------------- Observation --


class TestObservation:
    def test_fixed_draw_gives_median(self, fixed_uniform):
        d = Binomial(20, 0.3, rng=fixed_uniform(0.5))
        draws = d.observe(3)
        median = int(stats.binom.ppf(0.5, 20, 0.3))
        np.testing.assert_array_equal(draws, [median] * 3)

    def test_counters(self, sequence_uniform):
        d = Binomial(10, 0.5, rng=sequence_uniform([0.0, 0.5, 0.5, 0.999]))
        d.observe(4)
        counts, frequencies = d.observation_frequency()
        assert d.observation_count == 4
        assert counts[0] == 1 and counts[5] == 2 and counts[9] == 1
        assert counts.sum() == 4
        assert frequencies[5] == 0.5
        cumulative, relative = d.observation_cumulative()
        assert cumulative[-1] == 4
        assert relative[-1] == 1.0

    def test_counters_before_observing(self):
        d = Poisson(2)
        assert d.observations.sum() == 0
        counts, frequencies = d.observation_frequency()
        assert len(counts) == len(d.pdf())
        assert frequencies.sum() == 0

    def test_seeded_sampling_is_reproducible(self):
        a = Poisson(3, rng=7).observe(50)
        b = Poisson(3, rng=7).observe(50)
        np.testing.assert_array_equal(a, b)

    def test_sample_mean(self, seeded_rng):
        draws = Poisson(4, rng=seeded_rng).observe(4000)
        assert abs(draws.mean() - 4.0) < 0.15


# ----------------------------------------------------------------- Poisson --


class TestPoisson:
    def test_pmf_matches_scipy(self):
        d = Poisson(4)
        np.testing.assert_allclose(
            _as_floats(d.pdf()[:15]), stats.poisson.pmf(np.arange(15), 4), rtol=1e-10
        )

    def test_dynamic_range_reaches_one(self):
        d = Poisson(4)
        assert d.cdf()[-1].to_value(d.precision) == 1.0
        assert d.cdf()[-2].to_value(d.precision) < 1.0

    def test_display_precision_controls_range(self):
        coarse = Poisson(4)
        with Settings(display_precision=8):
            fine = Poisson(4)
        assert len(fine.pdf()) > len(coarse.pdf())

    def test_large_rate_does_not_underflow(self):
        d = Poisson(800)
        assert d.e_neg_lambda.gt(Ratio.ZERO)
        assert d.probability(800).to_value() == pytest.approx(
            stats.poisson.pmf(800, 800), rel=1e-9
        )

    def test_term_cap_scales_with_rate(self):
        assert Poisson(4).max_terms == MAX_DYNAMIC_TERMS
        assert Poisson(9500).max_terms > 9500 + 5 * math.sqrt(9500)
        assert Geometric(0.0001).max_terms > 10_000 * 20
        assert NegativeBinomial(50, 0.001).max_terms > 50 * 999

    def test_summary(self):
        s = Poisson(4).summary()
        assert s["expectation"].value == 4.0
        assert s["skewness"].value == 0.5


# --------------------------------------------------------------- Geometric --


class TestGeometric:
    def test_pmf_matches_scipy(self):
        d = Geometric(0.6)
        # scipy counts trials, not failures
        ks = np.arange(len(d.pdf()))
        np.testing.assert_allclose(_as_floats(d.pdf()), stats.geom.pmf(ks + 1, 0.6), rtol=1e-10)

    def test_summary(self):
        s = Geometric(0.5).summary()
        assert s["expectation"].value == 1.0
        assert s["variance"].value == 2.0
        assert s["MGF"].value.endswith("for t < 0.69")


# -------------------------------------------------------- NegativeBinomial --


class TestNegativeBinomial:
    def test_pmf_matches_scipy(self):
        d = NegativeBinomial(5, 0.5)
        ks = np.arange(len(d.pdf()))
        np.testing.assert_allclose(_as_floats(d.pdf()), stats.nbinom.pmf(ks, 5, 0.5), rtol=1e-10)

    def test_size_one_is_geometric(self):
        nb = NegativeBinomial(1, 0.25)
        geometric = Geometric(0.25)
        assert all(nb.probability(k) == geometric.probability(k) for k in range(20))

    def test_summary(self):
        s = NegativeBinomial(5, 0.5).summary()
        assert s["expectation"].value == 5.0
        assert s["variance"].value == 10.0


# ---------------------------------------------------------- Hypergeometric --


class TestHypergeometric:
    def test_pmf_matches_scipy(self):
        d = Hypergeometric(20, 10, 10)
        np.testing.assert_allclose(
            _as_floats(d.pdf()), stats.hypergeom.pmf(np.arange(11), 20, 10, 10), rtol=1e-10
        )
        assert sum(d.pdf(), Ratio.ZERO) == Ratio.ONE

    def test_table_ends_at_support_max(self):
        assert len(Hypergeometric(20, 5, 10).pdf()) == 6

    def test_entries_below_support_are_zero(self):
        d = Hypergeometric(10, 8, 5)
        assert d.support == (3, 5)
        pdf = d.pdf()
        assert pdf[:3] == [Ratio.ZERO] * 3
        assert d.cdf()[-1] == Ratio.ONE

    def test_summary(self):
        s = Hypergeometric(20, 10, 10).summary()
        assert s["expectation"].value == 5.0
        assert s["variance"].value == pytest.approx(stats.hypergeom.var(20, 10, 10))

    def test_empty_population(self):
        d = Hypergeometric(0, 0, 0)
        assert d.pdf() == [Ratio.ONE]
        s = d.summary()
        assert s["expectation"].value == 0.0
        assert s["variance"].value == 0.0
        assert s["skewness"].value == "undefined"


# ------------------------------------------------------------- probability --


class TestTailProbability:
    def test_comparisons(self):
        d = Binomial(10, 0.5)
        assert probability(d, 5, "le") == Ratio(638, 1024)
        assert probability(d, 5, "gt") == Ratio(386, 1024)
        assert probability(d, 5, "ge") == Ratio(638, 1024)
        assert probability(d, 5, "lt") == Ratio(386, 1024)
        assert probability(d, 5, "eq") == Ratio(252, 1024)

    def test_thresholds_outside_support(self):
        d = Binomial(10, 0.5)
        assert probability(d, 0, "lt") == Ratio.ZERO
        assert probability(d, 10, "gt") == Ratio.ZERO
        assert probability(d, 99, "le") == Ratio.ONE

    def test_unknown_comparison_raises(self):
        with pytest.raises(ValueError, match="Unknown comparison"):
            probability(Binomial(10, 0.5), 5, "ne")


# ------------------------------------------------------- Common behaviour --


LAWS = [
    Binomial(30, 0.7),
    Poisson(4),
    Geometric(0.3),
    NegativeBinomial(5, 0.4),
    Hypergeometric(20, 7, 12),
    Hypergeometric(10, 8, 5),
]


class TestCommon:
    @pytest.mark.parametrize("d", LAWS, ids=repr)
    def test_cdf_is_monotone(self, d):
        cdf = d.cdf()
        assert all(a.lte(b) for a, b in zip(cdf, cdf[1:]))

    @pytest.mark.parametrize("d", LAWS, ids=repr)
    def test_cdf_is_running_sum(self, d):
        total = Ratio.ZERO
        for mass, cumulative in zip(d.pdf(), d.cdf()):
            total = total.add(mass)
            assert cumulative == total
