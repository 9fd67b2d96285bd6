"""exactdist: exact rational probability distributions.

This package tabulates discrete and continuous probability laws with exact
rational arithmetic: probability mass and density tables, cumulative
tables, quantiles, random observations and analytic summaries, plus the
special functions (gamma, incomplete gamma and beta) they rely on.
"""

import logging

try:
    from exactdist._version import version as __version__
except ImportError:
    __version__ = "0.1.0"

from .core.context import Settings
from .core.ratio import Ratio
from .core.types import Dist
from .distributions.catalog import DISTRIBUTIONS, ParameterError, create
from .distributions.continuous import Beta, ChiSquared, Exponential, F, Gamma, Normal, T, Uniform
from .distributions.discrete import (
    Binomial,
    Geometric,
    Hypergeometric,
    NegativeBinomial,
    Poisson,
    probability,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Dist",
    "Ratio",
    "Settings",
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
    "create",
    "DISTRIBUTIONS",
    "ParameterError",
]
