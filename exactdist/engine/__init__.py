"""Tabulation engines shared by the discrete and continuous laws."""

from .continuous import ContinuousDist
from .discrete import DiscreteDist

__all__ = ["ContinuousDist", "DiscreteDist"]
