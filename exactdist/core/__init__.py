"""Core module for exactdist.

This module contains the exact rational number type, integer sequences,
numeric settings and the distribution base class.
"""

from .types import Dist
from .context import Settings
from .ratio import Ratio
from .sequences import PowerSequence, combination, factorial, permutation

__all__ = [
    "Dist",
    "Settings",
    "Ratio",
    "PowerSequence",
    "combination",
    "factorial",
    "permutation",
]
