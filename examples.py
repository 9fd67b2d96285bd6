"""Example usage of the exactdist package.

This example demonstrates the core features of the exactdist package including:
- Exact probability tables for discrete distributions
- Density and cumulative tables for continuous distributions
- Quantiles, tail probabilities and random observations
- Adjusting resolution with the Settings context manager
"""

from exactdist import (
    Binomial, Poisson, Hypergeometric,
    Normal, Gamma, T,
    Ratio, Settings, create, probability,
)


def discrete_distributions_example():
    """Demonstrate discrete distributions."""
    print("=" * 60)
    print("Discrete Distributions Example")
    print("=" * 60)

    # Binomial distribution
    print("\n1. Binomial Distribution")
    binom = Binomial(10, 0.5, rng=42)
    print(f"   P(X=5): {binom.probability(5)}  ({binom.probability(5).to_fixed(5)})")
    print(f"   Table sums to one: {binom.cdf()[-1] == Ratio.ONE}")
    print(f"   P(X > 7): {probability(binom, 7, 'gt').to_fixed(5)}")
    print(f"   Median: {binom.quantile(0.5)}")

    # Poisson distribution
    print("\n2. Poisson Distribution")
    poisson = Poisson(3.5, rng=42)
    draws = poisson.observe(1000)
    print(f"   Tabulated outcomes: {len(poisson.pdf())}")
    print(f"   Mean of draws: {draws.mean():.3f}")
    counts, frequencies = poisson.observation_frequency()
    print(f"   Relative frequency of 3: {frequencies[3]:.3f}")

    # Hypergeometric distribution
    print("\n3. Hypergeometric Distribution")
    hyper = Hypergeometric(20, 7, 12)
    print(f"   Support: {hyper.support}")
    print(f"   Expectation: {hyper.summary()['expectation'].value:.3f}")


def continuous_distributions_example():
    """Demonstrate continuous distributions."""
    print("\n" + "=" * 60)
    print("Continuous Distributions Example")
    print("=" * 60)

    # Normal distribution
    print("\n1. Normal Distribution")
    norm = Normal(0, 1, rng=42)
    for x, f in norm.cdf()[::5]:
        print(f"   F({x:+.1f}) = {f.to_fixed(5)}")
    print(f"   97.5% quantile: {norm.quantile(0.975):.4f}")
    print(f"   Mean of draws: {norm.observe(1000).mean():.3f}")

    # Gamma distribution
    print("\n2. Gamma Distribution")
    gamma = Gamma(2, 1)
    print(f"   Median: {gamma.quantile(0.5):.4f}")
    print(f"   P(X <= 1): {gamma.cumulative(1).to_fixed(5)}")

    # T distribution
    print("\n3. T Distribution")
    t = T(10)
    print(f"   95% two-sided critical value: {t.quantile(0.975):.4f}")


def settings_example():
    """Demonstrate the Settings context manager."""
    print("\n" + "=" * 60)
    print("Settings Example")
    print("=" * 60)

    with Settings(datapoints=41, display_precision=8):
        norm = Normal(0, 1)
        poisson = Poisson(3.5)
    print(f"   Normal abscissas: {len(norm.pdf())}")
    print(f"   Poisson outcomes at 8 decimals: {len(poisson.pdf())}")


def catalog_example():
    """Demonstrate building distributions from raw parameter values."""
    print("\n" + "=" * 60)
    print("Catalog Example")
    print("=" * 60)

    d = create("negative-binomial", "5", "0.5")
    for name, statistic in d.summary().items():
        print(f"   {name}: {statistic.formula}  ->  {statistic.value}")


if __name__ == "__main__":
    print("\n" + "=" * 60)
    print("exactdist Package Examples")
    print("=" * 60)

    discrete_distributions_example()
    continuous_distributions_example()
    settings_example()
    catalog_example()

    print("\n" + "=" * 60)
    print("Examples completed successfully!")
    print("=" * 60 + "\n")
