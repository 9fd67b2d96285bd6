"""Tabulation, quantiles and sampling shared by the discrete laws.

Tables are lists of exact :class:`~exactdist.core.ratio.Ratio` values indexed
by the outcome ``x`` (starting at 0), with a parallel running cumulative sum.
"""

from __future__ import annotations

import logging
import math
from abc import abstractmethod
from typing import Callable, Optional, Tuple, Union

import numpy as np

from exactdist.core.constants import MAX_DYNAMIC_TERMS, TAIL_DEVIATIONS
from exactdist.core.context import Settings
from exactdist.core.ratio import Ratio
from exactdist.core.types import DiscreteTable, Dist, UniformSource, make_rng

logger = logging.getLogger(__name__)

Probability = Callable[[int], Ratio]


def range_fixed(
    probability: Probability,
    max_x: int,
    min_x: int = 0,
) -> Tuple[DiscreteTable, DiscreteTable]:
    """Tabulate ``probability(x)`` for ``x = min_x .. max_x`` inclusive.

    Parameters
    ----------
    probability : callable
        Probability mass function returning a Ratio.
    max_x, min_x : int
        Inclusive bounds of a bounded support.

    Returns
    -------
    tuple of list
        ``(pdf, cdf)``.
    """
    pdf: DiscreteTable = []
    cdf: DiscreteTable = []
    cumulative = Ratio.ZERO
    for x in range(min_x, max_x + 1):
        p = probability(x)
        pdf.append(p)
        cumulative = cumulative.add(p)
        cdf.append(cumulative)
    return pdf, cdf


def range_dynamic(
    probability: Probability,
    min_x: int = 0,
    precision: int = 5,
    max_terms: int = MAX_DYNAMIC_TERMS,
) -> Tuple[DiscreteTable, DiscreteTable]:
    """Tabulate an unbounded support until the CDF reaches 1.

    Terms are added from *min_x* upward until the cumulative probability,
    rounded to *precision* decimals, equals 1, or *max_terms* terms have
    been tabulated.
    """
    pdf: DiscreteTable = []
    cdf: DiscreteTable = []
    cumulative = Ratio.ZERO
    x = min_x
    while cumulative.to_value(precision) < 1:
        if len(pdf) >= max_terms:
            logger.warning(
                "range_dynamic stopped after %d terms with cumulative %s",
                max_terms,
                cumulative.to_fixed(precision),
            )
            break
        p = probability(x)
        pdf.append(p)
        cumulative = cumulative.add(p)
        cdf.append(cumulative)
        x += 1
    return pdf, cdf


def dynamic_term_cap(mean: float, variance: float) -> int:
    """Term cap for :func:`range_dynamic` reaching ``TAIL_DEVIATIONS`` standard
    deviations past the mean, and never below ``MAX_DYNAMIC_TERMS``."""
    reach = mean + TAIL_DEVIATIONS * math.sqrt(variance)
    if not math.isfinite(reach):
        return MAX_DYNAMIC_TERMS
    return max(MAX_DYNAMIC_TERMS, math.ceil(reach) + 1)


def scan_quantile(cdf: DiscreteTable, cumulative_probability: Union[float, Ratio]) -> int:
    """Index of the first cumulative value ``>= cumulative_probability``.

    Falls back to the last index when the table ends below the target.
    """
    target = (
        cumulative_probability
        if isinstance(cumulative_probability, Ratio)
        else Ratio.from_number(cumulative_probability)
    )
    for index, value in enumerate(cdf):
        if value.gte(target):
            return index
    return len(cdf) - 1


class DiscreteDist(Dist):
    """Base for laws on the non-negative integers.

    Subclasses implement :meth:`probability`, :meth:`summary` and
    :meth:`_tabulate` (usually one call to :meth:`range_fixed` or
    :meth:`range_dynamic`). Tables are computed on the first call to
    :meth:`pdf`, :meth:`cdf`, :meth:`quantile` or :meth:`observe`.

    Parameters
    ----------
    rng : int or object with ``random()``, optional
        Seed for a numpy generator, or a uniform source to draw from.
    """

    kind = "discrete"

    def __init__(self, rng: Optional[Union[int, UniformSource]] = None) -> None:
        self.rng = make_rng(rng)
        self.precision = Settings.current().display_precision
        self.max_terms = MAX_DYNAMIC_TERMS
        self._pdf_table: Optional[DiscreteTable] = None
        self._cdf_table: Optional[DiscreteTable] = None
        self._counts: Optional[np.ndarray] = None
        self.observation_count = 0

    @abstractmethod
    def _tabulate(self) -> Tuple[DiscreteTable, DiscreteTable]:
        """Compute ``(pdf, cdf)`` tables."""

    # ---------- tabulation ----------

    def range_fixed(self, max_x: int, min_x: int = 0) -> Tuple[DiscreteTable, DiscreteTable]:
        return range_fixed(self.probability, max_x, min_x)

    def range_dynamic(self, min_x: int = 0) -> Tuple[DiscreteTable, DiscreteTable]:
        return range_dynamic(self.probability, min_x, self.precision, self.max_terms)

    @property
    def is_tabulated(self) -> bool:
        return self._pdf_table is not None

    def _ensure_tables(self) -> None:
        if self._pdf_table is None:
            self._pdf_table, self._cdf_table = self._tabulate()
            logger.debug("%r: tabulated %d outcomes", self, len(self._pdf_table))

    def pdf(self) -> DiscreteTable:
        """``P(X = x)`` for every tabulated ``x``."""
        self._ensure_tables()
        return self._pdf_table

    def cdf(self) -> DiscreteTable:
        """``P(X <= x)`` for every tabulated ``x``."""
        self._ensure_tables()
        return self._cdf_table

    def cumulative(self, x: int) -> Ratio:
        """``P(X <= x)`` read from the table (0 below the support)."""
        if x < 0:
            return Ratio.ZERO
        cdf = self.cdf()
        return cdf[min(int(x), len(cdf) - 1)]

    def quantile(self, cumulative_probability: Union[float, Ratio]) -> int:
        """Smallest outcome whose cumulative probability reaches the argument."""
        self._ensure_tables()
        return scan_quantile(self._cdf_table, cumulative_probability)

    # ---------- sampling ----------

    def observe(self, count: int = 1) -> np.ndarray:
        """Draw *count* outcomes by inverse-transform sampling.

        Each draw is also added to the per-outcome counters reported by
        :meth:`observation_frequency` and :meth:`observation_cumulative`.
        """
        self._ensure_tables()
        if self._counts is None:
            self._counts = np.zeros(len(self._cdf_table), dtype=np.int64)
        draws = np.array(
            [self.quantile(self.rng.random()) for _ in range(count)], dtype=np.int64
        )
        np.add.at(self._counts, draws, 1)
        self.observation_count += count
        return draws

    @property
    def observations(self) -> np.ndarray:
        """Occurrences of each outcome so far."""
        if self._counts is None:
            return np.zeros(len(self.cdf()), dtype=np.int64)
        return self._counts.copy()

    def observation_frequency(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return ``(counts, relative frequencies)`` per outcome."""
        counts = self.observations
        total = max(self.observation_count, 1)
        return counts, counts / total

    def observation_cumulative(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return ``(cumulative counts, cumulative relative frequencies)``."""
        cumulative = np.cumsum(self.observations)
        total = max(self.observation_count, 1)
        return cumulative, cumulative / total
