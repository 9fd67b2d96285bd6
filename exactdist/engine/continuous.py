"""Tabulation, quantiles and sampling shared by the continuous laws.

Tables are lists of ``(x, value)`` pairs: ``x`` is a float rounded for
display, ``value`` an exact :class:`~exactdist.core.ratio.Ratio`. Cumulative
values are either integrated panel by panel with Simpson's rule, or filled in
from a closed-form ``cumulative(x)``.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from typing import Callable, List, Optional, Tuple, Union

import numpy as np

from exactdist.core.constants import (
    EDGE,
    MAX_BISECTION_ITERATIONS,
    MAX_X_PRECISION,
    PREFERRED_X_PRECISION,
    TARGET_QUANTILE,
)
from exactdist.core.context import Settings
from exactdist.core.ratio import Ratio
from exactdist.core.types import ContinuousTable, Dist, UniformSource, make_rng

logger = logging.getLogger(__name__)

Probability = Callable[[Ratio], Ratio]
Tables = Tuple[ContinuousTable, ContinuousTable]

_FOUR = Ratio(4)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def rounded_increment(raw: float) -> Ratio:
    """Round a step width to ``PREFERRED_X_PRECISION`` significant digits."""
    return Ratio.from_number(float(format(raw, f".{PREFERRED_X_PRECISION}g")))


def abscissa_precision(*values: Ratio) -> int:
    """Decimals needed to show the given bounds/increment, capped."""
    return min(MAX_X_PRECISION, max(value.decimal_count() for value in values))


def _simpson_panel(
    probability: Probability,
    x: Ratio,
    previous: Ratio,
    half_increment: Ratio,
    sixth_increment: Ratio,
    cumulative: Ratio,
) -> Tuple[Ratio, Ratio]:
    """Add one Simpson panel ending at *x*; return ``(f(x), new cumulative)``."""
    p = probability(x)
    area = (
        probability(x.subtract(half_increment))
        .times(_FOUR)
        .add(previous)
        .add(p)
        .times(sixth_increment)
    )
    return p, cumulative.add(area)


# ---------------------------------------------------------------------------
# Range construction
# ---------------------------------------------------------------------------

def range_fixed(
    probability: Probability,
    max_x: Ratio,
    min_x: Ratio = Ratio.ZERO,
    min_f: Ratio = Ratio.ZERO,
    compute_cdf: bool = True,
    include_edges: bool = True,
    datapoints: int = 21,
    edge: float = EDGE,
) -> Tables:
    """Tabulate *datapoints* evenly spaced abscissas on ``[min_x, max_x]``.

    Parameters
    ----------
    probability : callable
        Density returning a Ratio.
    max_x, min_x : Ratio
        Bounds of the table.
    min_f : Ratio
        ``P(X <= min_x)``, the starting value of the integrated CDF.
    compute_cdf : bool
        Integrate the CDF with Simpson's rule. When False the returned CDF
        is empty and the caller fills it from ``cumulative(x)``.
    include_edges : bool
        Evaluate the density at the bounds. When False the first and last
        abscissas move inward by *edge*; requires ``compute_cdf=False``.
    datapoints : int
        Number of abscissas.

    Returns
    -------
    tuple of list
        ``(pdf, cdf)`` as lists of ``(x, Ratio)``.
    """
    increment = max_x.subtract(min_x).divide_by(datapoints - 1)
    half_increment = increment.divide_by(2)
    sixth_increment = increment.divide_by(6)
    precision = abscissa_precision(increment, max_x, min_x)
    edge_ratio = Ratio.from_number(edge)

    start = min_x if include_edges else min_x.add(edge_ratio)
    previous = probability(start)
    cumulative = min_f
    start_rounded = start.to_value(precision)
    pdf: ContinuousTable = [(start_rounded, previous)]
    cdf: ContinuousTable = [(start_rounded, min_f)] if compute_cdf else []

    x = min_x
    for counter in range(1, datapoints):
        x = x.add(increment)
        if not include_edges and counter == datapoints - 1:
            x = max_x.subtract(edge_ratio)
        x_rounded = x.to_value(precision)
        pdf.append((x_rounded, probability(Ratio.from_number(x_rounded))))
        if compute_cdf:
            previous, cumulative = _simpson_panel(
                probability, x, previous, half_increment, sixth_increment, cumulative
            )
            cdf.append((x_rounded, cumulative))
    return pdf, cdf


def range_symmetric(
    probability: Probability,
    max_x: Ratio,
    centre_x: Ratio = Ratio.ZERO,
    compute_cdf: bool = True,
    datapoints: int = 21,
) -> Tables:
    """Tabulate a density symmetric about *centre_x*.

    Only the right half is evaluated, integrating outward from
    ``F(centre_x) = 1/2``. The left half mirrors the abscissas, reuses the
    densities and reflects the CDF as ``1 - F``.
    """
    half_points = datapoints // 2
    raw_increment = max_x.subtract(centre_x).divide_by(half_points).to_value()
    increment = rounded_increment(raw_increment)
    half_increment = increment.divide_by(2)
    sixth_increment = increment.divide_by(6)
    precision = abscissa_precision(increment, max_x, centre_x)

    previous = probability(centre_x)
    cumulative = Ratio(1, 2)
    centre = centre_x.to_value(precision)
    right_pdf: ContinuousTable = [(centre, previous)]
    right_cdf: ContinuousTable = [(centre, cumulative)]

    x = centre_x
    for _ in range(half_points):
        x = x.add(increment)
        x_rounded = float(x.to_fixed(precision))
        right_pdf.append((x_rounded, probability(Ratio.from_number(x_rounded))))
        if compute_cdf:
            previous, cumulative = _simpson_panel(
                probability, x, previous, half_increment, sixth_increment, cumulative
            )
            right_cdf.append((x_rounded, cumulative))

    def mirror(value: float) -> float:
        return round(2 * centre - value, precision)

    pdf = [(mirror(x), p) for x, p in reversed(right_pdf[1:])] + right_pdf
    if not compute_cdf:
        return pdf, []
    cdf = [(mirror(x), Ratio.ONE.subtract(f)) for x, f in reversed(right_cdf[1:])] + right_cdf
    return pdf, cdf


def range_increment(
    probability: Probability,
    increment: Ratio,
    min_x: Ratio = Ratio.ZERO,
    min_f: Ratio = Ratio.ZERO,
    compute_cdf: bool = True,
    datapoints: int = 21,
) -> Tables:
    """Tabulate *datapoints* abscissas stepping by *increment*.

    The first abscissa is *min_x*. When *min_x* is smaller than one step the
    following abscissas are whole multiples of the increment.
    """
    half_increment = increment.divide_by(2)
    sixth_increment = increment.divide_by(6)
    precision = abscissa_precision(increment, min_x)

    previous = probability(min_x)
    cumulative = min_f
    start_rounded = min_x.to_value(precision)
    pdf: ContinuousTable = [(start_rounded, previous)]
    cdf: ContinuousTable = [(start_rounded, min_f)] if compute_cdf else []

    x = Ratio.ZERO if min_x.lt(increment) else min_x
    for _ in range(1, datapoints):
        x = x.add(increment)
        x_rounded = float(x.to_fixed(precision))
        pdf.append((x_rounded, probability(Ratio.from_number(x.to_value(precision)))))
        if compute_cdf:
            previous, cumulative = _simpson_panel(
                probability, x, previous, half_increment, sixth_increment, cumulative
            )
            cdf.append((x_rounded, cumulative))
    return pdf, cdf


def range_by_quantile(
    probability: Probability,
    quantile: Callable[[float], float],
    min_x: Ratio = Ratio.ZERO,
    target_quantile: float = TARGET_QUANTILE,
    min_f: Ratio = Ratio.ZERO,
    compute_cdf: bool = True,
    max_x_cap: Ratio = Ratio.INFINITY,
    datapoints: int = 21,
) -> Tables:
    """Tabulate up to ``min(quantile(target_quantile), max_x_cap)``.

    Used where the support has no simple right bound.
    """
    max_x = Ratio.from_number(quantile(target_quantile)).min(max_x_cap)
    increment = rounded_increment(max_x.divide_by(datapoints - 1).to_value())
    return range_increment(probability, increment, min_x, min_f, compute_cdf, datapoints)


# ---------------------------------------------------------------------------
# Quantile
# ---------------------------------------------------------------------------

def bisection_quantile(
    cumulative: Callable[[Ratio], Ratio],
    cumulative_probability: Union[float, Ratio],
    estimate: Ratio = Ratio.ONE,
    precision: int = 5,
    max_iterations: int = MAX_BISECTION_ITERATIONS,
) -> Ratio:
    """Invert a non-negative-support CDF by doubling then bisection.

    The estimate doubles until ``cumulative`` brackets the target, then the
    bracket halves until ``|cumulative(x) - p| <= 10^-precision``.
    """
    target = (
        cumulative_probability
        if isinstance(cumulative_probability, Ratio)
        else Ratio.from_number(cumulative_probability)
    )
    tolerance = Ratio(1, 10 ** precision)
    lower = Ratio.ZERO
    upper: Optional[Ratio] = None
    current = cumulative(estimate)
    for _ in range(max_iterations):
        if current.subtract(target).abs().lte(tolerance):
            return estimate
        if current.gt(target):
            upper = estimate
            estimate = estimate.add(lower).divide_by(2)
        else:
            lower = estimate
            estimate = estimate.times(2) if upper is None else estimate.add(upper).divide_by(2)
        current = cumulative(estimate)
    logger.debug(
        "bisection_quantile: no convergence for p=%s after %d iterations",
        target.to_fixed(precision),
        max_iterations,
    )
    return estimate


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------

class ContinuousDist(Dist):
    """Base for laws with a density.

    Subclasses implement :meth:`probability`, :meth:`summary` and
    :meth:`_tabulate`, and provide :meth:`cumulative` when they rely on the
    default bisection :meth:`quantile` or on :meth:`cdf_from_cumulative`.

    Parameters
    ----------
    rng : int or object with ``random()``, optional
        Seed for a numpy generator, or a uniform source to draw from.
    """

    kind = "continuous"

    def __init__(self, rng: Optional[Union[int, UniformSource]] = None) -> None:
        settings = Settings.current()
        self._datapoints = settings.datapoints
        self.precision = settings.display_precision
        self.rng = make_rng(rng)
        self._pdf_table: Optional[ContinuousTable] = None
        self._cdf_table: Optional[ContinuousTable] = None
        self.observations: List[float] = []

    @abstractmethod
    def _tabulate(self) -> Tables:
        """Compute ``(pdf, cdf)`` tables."""

    def cumulative(self, x: Ratio) -> Ratio:
        """``P(X <= x)``."""
        raise NotImplementedError(f"{type(self).__name__} has no closed-form CDF")

    # ---------- resolution ----------

    @property
    def datapoints(self) -> int:
        """Number of tabulated abscissas."""
        return self._datapoints

    @datapoints.setter
    def datapoints(self, value: int) -> None:
        value = int(value)
        if value != self._datapoints:
            self._datapoints = value
            self._pdf_table = None
            self._cdf_table = None

    # ---------- tabulation ----------

    def range_fixed(self, max_x, min_x=Ratio.ZERO, min_f=Ratio.ZERO,
                    compute_cdf=True, include_edges=True) -> Tables:
        return range_fixed(self.probability, max_x, min_x, min_f, compute_cdf,
                           include_edges, self.datapoints)

    def range_symmetric(self, max_x, centre_x=Ratio.ZERO, compute_cdf=True) -> Tables:
        return range_symmetric(self.probability, max_x, centre_x, compute_cdf, self.datapoints)

    def range_increment(self, increment, min_x=Ratio.ZERO, min_f=Ratio.ZERO,
                        compute_cdf=True) -> Tables:
        return range_increment(self.probability, increment, min_x, min_f, compute_cdf,
                               self.datapoints)

    def range_by_quantile(self, min_x=Ratio.ZERO, target_quantile=TARGET_QUANTILE,
                          min_f=Ratio.ZERO, compute_cdf=True,
                          max_x_cap=Ratio.INFINITY) -> Tables:
        return range_by_quantile(self.probability, self.quantile, min_x, target_quantile,
                                 min_f, compute_cdf, max_x_cap, self.datapoints)

    def cdf_from_cumulative(self, pdf: ContinuousTable) -> ContinuousTable:
        """CDF column evaluated with :meth:`cumulative` at each abscissa of *pdf*."""
        return [(x, self.cumulative(Ratio.from_number(x))) for x, _ in pdf]

    @property
    def is_tabulated(self) -> bool:
        return self._pdf_table is not None

    def _ensure_tables(self) -> None:
        if self._pdf_table is None:
            self._pdf_table, self._cdf_table = self._tabulate()
            logger.debug("%r: tabulated %d abscissas", self, len(self._pdf_table))

    def pdf(self) -> ContinuousTable:
        """``(x, f(x))`` pairs."""
        self._ensure_tables()
        return self._pdf_table

    def cdf(self) -> ContinuousTable:
        """``(x, F(x))`` pairs."""
        self._ensure_tables()
        return self._cdf_table

    # ---------- quantile & sampling ----------

    def quantile(self, cumulative_probability: float) -> float:
        """Inverse CDF by bisection on :meth:`cumulative`."""
        return bisection_quantile(
            self.cumulative, cumulative_probability, precision=self.precision
        ).to_value()

    def observe(self, count: int = 1) -> np.ndarray:
        """Draw *count* values by inverse-transform sampling and record them."""
        values = np.array(
            [self.quantile(self.rng.random()) for _ in range(count)], dtype=float
        )
        self.observations.extend(values.tolist())
        return values
