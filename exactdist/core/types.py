"""Core types for exactdist distributions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Tuple, Union

import numpy as np

from .ratio import Ratio


# ---------------------------------------------------------------------------
# Table and summary types
# ---------------------------------------------------------------------------

DiscreteTable = List[Ratio]
ContinuousTable = List[Tuple[float, Ratio]]
Table = Union[DiscreteTable, ContinuousTable]


@dataclass(frozen=True)
class Statistic:
    """One named summary entry: the general formula and its value here."""

    formula: str
    value: Union[float, int, str]


Summary = Dict[str, Statistic]


class UniformSource(Protocol):
    """Anything that draws uniform floats in ``[0, 1)``.

    ``numpy.random.Generator`` satisfies this, as does a test double.
    """

    def random(self) -> float: ...


def make_rng(rng: Optional[Union[int, UniformSource]] = None) -> UniformSource:
    """Return *rng* itself, or a numpy generator seeded with it."""
    if rng is None or isinstance(rng, (int, np.integer)):
        return np.random.default_rng(rng)
    return rng


# ---------------------------------------------------------------------------
# Distribution ABC
# ---------------------------------------------------------------------------

class Dist(ABC):
    """Abstract base class for tabulated probability distributions.

    A concrete law supplies :meth:`probability` and :meth:`summary`; the
    discrete and continuous engines supply tabulation, quantiles and
    sampling. Tables are built on first access and cached for the lifetime
    of the instance.
    """

    kind: str = ""

    @abstractmethod
    def probability(self, x) -> Ratio:
        """Probability mass or density at *x*."""

    @abstractmethod
    def pdf(self) -> Table:
        """Return the tabulated probability mass/density function."""

    @abstractmethod
    def cdf(self) -> Table:
        """Return the tabulated cumulative distribution function."""

    @abstractmethod
    def quantile(self, cumulative_probability: float):
        """Smallest *x* whose cumulative probability reaches the argument."""

    @abstractmethod
    def observe(self, count: int = 1) -> np.ndarray:
        """Draw *count* random observations and record them."""

    @abstractmethod
    def summary(self) -> Summary:
        """Named analytic statistics as formula/value pairs."""
