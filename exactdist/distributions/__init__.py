"""Distribution implementations for exactdist.

This module contains the concrete discrete and continuous laws and the
catalog describing their parameters.
"""

from .continuous import Beta, ChiSquared, Exponential, F, Gamma, Normal, T, Uniform
from .discrete import Binomial, Geometric, Hypergeometric, NegativeBinomial, Poisson, probability

__all__ = [
    "Binomial",
    "Poisson",
    "Geometric",
    "NegativeBinomial",
    "Hypergeometric",
    "Normal",
    "Uniform",
    "Exponential",
    "Gamma",
    "ChiSquared",
    "Beta",
    "F",
    "T",
    "probability",
]
