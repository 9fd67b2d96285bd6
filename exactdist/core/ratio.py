"""Exact rational numbers over arbitrary-precision integers.

:class:`Ratio` keeps every value as a reduced ``numerator / denominator``
pair of Python integers, so addition, subtraction, multiplication, division
and comparison never lose precision. Transcendental operations
(:meth:`Ratio.pow_float`, :meth:`Ratio.pow_of`, :meth:`Ratio.log` and
:meth:`Ratio.pow` with a non-integer exponent) go through floating point and
re-exactify the result with :meth:`Ratio.from_number`; they are
approximations by construction.

A zero denominator encodes the signed infinities. Dividing by zero yields one
of them instead of raising, and comparisons and conversions involving them
are total.
"""

from __future__ import annotations

import math
import numbers
from decimal import Decimal
from fractions import Fraction
from functools import lru_cache
from typing import Optional, Tuple, Union

from .context import Settings

RealLike = Union["Ratio", int, float, Fraction]


def _sign(x: int) -> int:
    return (x > 0) - (x < 0)


@lru_cache(maxsize=1 << 16)
def _simplify(numerator: int, denominator: int) -> Tuple[int, int]:
    """Reduce a raw pair and move its sign onto the numerator.

    The cache is process-wide and keyed by the raw pair. Populating it is
    idempotent, so concurrent readers may share it without locking.
    """
    if numerator == 0:
        return 0, 1
    if denominator == 0:
        return _sign(numerator), 0
    divisor = math.gcd(numerator, denominator)
    if denominator < 0:
        divisor = -divisor
    return numerator // divisor, denominator // divisor


class Ratio:
    """An immutable exact fraction.

    Parameters
    ----------
    numerator : int
    denominator : int, optional
        Defaults to 1. Zero produces a signed infinity (or zero for ``0/0``).
    """

    __slots__ = ("numerator", "denominator")

    ZERO: Ratio
    ONE: Ratio
    INFINITY: Ratio
    NEGATIVE_INFINITY: Ratio
    E: Ratio
    PI: Ratio

    def __init__(self, numerator: int, denominator: int = 1) -> None:
        self.numerator, self.denominator = _simplify(int(numerator), int(denominator))

    # ---------- construction ----------

    @classmethod
    def from_int(cls, x: int) -> Ratio:
        return cls(int(x))

    @classmethod
    def from_number(cls, x: float, precision: Optional[int] = None) -> Ratio:
        """Convert a float to a rational with a bounded number of digits.

        The float is printed in scientific notation with *precision* digits
        after the point (default: the active ``Settings.ratio_precision``) and
        that decimal is taken exactly. Bounding the digits keeps rationals
        built from irrational estimates from growing without limit.

        Raises
        ------
        ValueError
            If *x* is NaN.
        """
        x = float(x)
        if math.isnan(x):
            raise ValueError("cannot convert NaN to a Ratio")
        if math.isinf(x):
            return cls.INFINITY if x > 0 else cls.NEGATIVE_INFINITY
        if precision is None:
            precision = Settings.current().ratio_precision
        mantissa, exponent = format(x, f".{precision}e").split("e")
        digits = int(mantissa.replace(".", ""))
        shift = precision - int(exponent)
        if shift < 0:
            return cls(digits * 10 ** -shift)
        return cls(digits, 10 ** shift)

    @classmethod
    def from_decimal(cls, x: Union[float, str]) -> Ratio:
        """Convert the shortest decimal spelling of *x* to a rational.

        ``from_decimal(0.1)`` is exactly ``1/10``, whereas
        :meth:`from_number` keeps the binary rounding error of the float.
        Strings are parsed as written.
        """
        if isinstance(x, str):
            text = x.strip()
        else:
            if math.isinf(x):
                return cls.INFINITY if x > 0 else cls.NEGATIVE_INFINITY
            text = repr(float(x))
        numerator, denominator = Decimal(text).as_integer_ratio()
        return cls(numerator, denominator)

    # ---------- arithmetic ----------

    def add(self, x: RealLike) -> Ratio:
        x = _coerce(x)
        return Ratio(
            self.numerator * x.denominator + x.numerator * self.denominator,
            self.denominator * x.denominator,
        )

    def subtract(self, x: RealLike) -> Ratio:
        x = _coerce(x)
        return Ratio(
            self.numerator * x.denominator - x.numerator * self.denominator,
            self.denominator * x.denominator,
        )

    def times(self, x: RealLike) -> Ratio:
        x = _coerce(x)
        return Ratio(self.numerator * x.numerator, self.denominator * x.denominator)

    def divide_by(self, x: RealLike) -> Ratio:
        """Return ``self / x``; dividing by zero gives a signed infinity."""
        x = _coerce(x)
        numerator = self.numerator * x.denominator
        denominator = self.denominator * x.numerator
        if denominator < 0:
            return Ratio(-numerator, -denominator)
        return Ratio(numerator, denominator)

    def divide(self, x: RealLike) -> Ratio:
        """Return ``x / self`` (reciprocal order of :meth:`divide_by`)."""
        return _coerce(x).divide_by(self)

    def negative(self) -> Ratio:
        return Ratio(-self.numerator, self.denominator)

    def invert(self) -> Ratio:
        return Ratio.ONE.divide_by(self)

    def abs(self) -> Ratio:
        return Ratio(abs(self.numerator), self.denominator)

    def add_one(self) -> Ratio:
        return Ratio(self.numerator + self.denominator, self.denominator)

    def subtract_one(self) -> Ratio:
        return Ratio(self.numerator - self.denominator, self.denominator)

    def pow(self, exponent: RealLike) -> Ratio:
        """Raise to *exponent*.

        Integer exponents are exact. Any other exponent is estimated with
        :meth:`pow_float`.
        """
        exponent = _coerce(exponent)
        if exponent.denominator != 1:
            return self.pow_float(exponent.to_value())
        k = exponent.numerator
        if k < 0:
            return self.invert().pow(-k)
        return Ratio(self.numerator ** k, self.denominator ** k)

    def pow_float(self, exponent: float) -> Ratio:
        """Estimate ``self ** exponent`` in floating point.

        A negative base with a non-integer exponent has no real value and
        yields :attr:`INFINITY`, as does a float overflow.
        """
        exponent = float(exponent)
        if self.numerator < 0 and not exponent.is_integer():
            return Ratio.INFINITY
        try:
            base = self.to_value()
            return Ratio.from_number(base ** exponent)
        except (OverflowError, ZeroDivisionError):
            return Ratio.INFINITY

    def pow_of(self, base: float) -> Ratio:
        """Estimate ``base ** self`` in floating point, e.g. ``x.pow_of(math.e)``."""
        try:
            return Ratio.from_number(float(base) ** self.to_value())
        except OverflowError:
            return Ratio.INFINITY

    def log(self, base: float = math.e) -> Ratio:
        """Estimate the logarithm of a non-negative value."""
        if self.numerator == 0:
            return Ratio.NEGATIVE_INFINITY
        if self.is_infinity():
            return Ratio.INFINITY
        if self.numerator.bit_length() > 1000 or self.denominator.bit_length() > 1000:
            value = (math.log(self.numerator) - math.log(self.denominator)) / math.log(base)
        else:
            value = math.log(self.to_value(), base)
        return Ratio.from_number(value)

    def min(self, x: RealLike) -> Ratio:
        x = _coerce(x)
        return self if self.lte(x) else x

    def max(self, x: RealLike) -> Ratio:
        x = _coerce(x)
        return self if self.gte(x) else x

    def floor(self) -> Ratio:
        if self.is_infinity():
            return self
        return Ratio(self.numerator // self.denominator)

    def ceil(self) -> Ratio:
        if self.is_infinity():
            return self
        return Ratio(-(-self.numerator // self.denominator))

    # ---------- comparison ----------

    def _compare(self, x: Ratio) -> int:
        if self.denominator == 0 and x.denominator == 0:
            return _sign(self.numerator - x.numerator)
        return _sign(self.numerator * x.denominator - x.numerator * self.denominator)

    def equals(self, x: RealLike) -> bool:
        x = _coerce(x)
        return self.numerator == x.numerator and self.denominator == x.denominator

    def lt(self, x: RealLike) -> bool:
        return self._compare(_coerce(x)) < 0

    def lte(self, x: RealLike) -> bool:
        return self._compare(_coerce(x)) <= 0

    def gt(self, x: RealLike) -> bool:
        return self._compare(_coerce(x)) > 0

    def gte(self, x: RealLike) -> bool:
        return self._compare(_coerce(x)) >= 0

    def is_infinity(self) -> bool:
        return self.denominator == 0

    # ---------- conversion ----------

    def to_value(self, precision: Optional[int] = None) -> float:
        """Return the nearest float, optionally rounded to *precision* decimals.

        Never raises: infinities and values too large for a float saturate
        to ``inf``/``-inf``.
        """
        if self.denominator == 0:
            return math.inf if self.numerator > 0 else -math.inf
        try:
            value = self.numerator / self.denominator
        except OverflowError:
            # int too large for a float; the sign is all that survives
            value = math.inf if self.numerator > 0 else -math.inf
        if precision is not None and math.isfinite(value):
            value = round(value, precision)
        return value

    def to_fixed(self, n: int) -> str:
        """Format with *n* decimals, rounding half away from zero."""
        if self.denominator == 0:
            return str(self.to_value())
        if self.numerator < 0:
            return "-" + self.abs().to_fixed(n)
        scale = 10 ** n
        scaled = (2 * self.numerator * scale + self.denominator) // (2 * self.denominator)
        int_part, decimals = divmod(scaled, scale)
        if n == 0:
            return str(int_part)
        return f"{int_part}.{decimals:0{n}d}"

    def decimal_count(self) -> int:
        """Number of decimals in the shortest spelling of the value at 20 places."""
        value = float(self.to_fixed(20))
        if math.isinf(value) or value.is_integer():
            return 0
        return max(0, -Decimal(repr(value)).as_tuple().exponent)

    def floor_log10(self) -> Union[int, float]:
        """Integer part of ``log10(|self|)``; ``-inf`` for zero."""
        if self.numerator == 0:
            return -math.inf
        if self.is_infinity():
            return math.inf
        numerator = abs(self.numerator)
        if numerator >= self.denominator:
            return len(str(numerator // self.denominator)) - 1
        quotient, remainder = divmod(self.denominator, numerator)
        digits = len(str(quotient)) - 1
        if remainder == 0 and quotient == 10 ** digits:
            return -digits
        return -digits - 1

    # ---------- Python protocol ----------

    def __add__(self, other):
        other = _coerce_or_none(other)
        return NotImplemented if other is None else self.add(other)

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        other = _coerce_or_none(other)
        return NotImplemented if other is None else self.subtract(other)

    def __rsub__(self, other):
        other = _coerce_or_none(other)
        return NotImplemented if other is None else other.subtract(self)

    def __mul__(self, other):
        other = _coerce_or_none(other)
        return NotImplemented if other is None else self.times(other)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __truediv__(self, other):
        other = _coerce_or_none(other)
        return NotImplemented if other is None else self.divide_by(other)

    def __rtruediv__(self, other):
        other = _coerce_or_none(other)
        return NotImplemented if other is None else other.divide_by(self)

    def __pow__(self, exponent):
        if _coerce_or_none(exponent) is None:
            return NotImplemented
        return self.pow(exponent)

    def __neg__(self) -> Ratio:
        return self.negative()

    def __abs__(self) -> Ratio:
        return self.abs()

    def __eq__(self, other) -> bool:
        other = _coerce_or_none(other)
        return NotImplemented if other is None else self.equals(other)

    def __lt__(self, other) -> bool:
        other = _coerce_or_none(other)
        return NotImplemented if other is None else self.lt(other)

    def __le__(self, other) -> bool:
        other = _coerce_or_none(other)
        return NotImplemented if other is None else self.lte(other)

    def __gt__(self, other) -> bool:
        other = _coerce_or_none(other)
        return NotImplemented if other is None else self.gt(other)

    def __ge__(self, other) -> bool:
        other = _coerce_or_none(other)
        return NotImplemented if other is None else self.gte(other)

    def __hash__(self) -> int:
        # Consistent with int, float and Fraction hashing for equal values.
        if self.denominator == 0:
            return hash(self.to_value())
        return hash(Fraction(self.numerator, self.denominator))

    def __bool__(self) -> bool:
        return self.numerator != 0

    def __float__(self) -> float:
        return self.to_value()

    def __int__(self) -> int:
        if self.denominator == 0:
            raise OverflowError("cannot convert an infinite Ratio to int")
        return int(Fraction(self.numerator, self.denominator))

    def __str__(self) -> str:
        return f"{self.numerator} / {self.denominator}"

    def __repr__(self) -> str:
        return f"Ratio({self.numerator}, {self.denominator})"


def _coerce_or_none(value) -> Optional[Ratio]:
    if isinstance(value, Ratio):
        return value
    if isinstance(value, bool):
        return Ratio(int(value))
    if isinstance(value, numbers.Integral):
        return Ratio(int(value))
    if isinstance(value, numbers.Rational):
        return Ratio(value.numerator, value.denominator)
    if isinstance(value, numbers.Real):
        return Ratio.from_number(float(value))
    return None


def _coerce(value: RealLike) -> Ratio:
    ratio = _coerce_or_none(value)
    if ratio is None:
        raise TypeError(f"cannot interpret {type(value).__name__} as a Ratio")
    return ratio


def as_ratio(value: RealLike) -> Ratio:
    """Coerce an int, float, Fraction or Ratio to a :class:`Ratio`."""
    return _coerce(value)


Ratio.ZERO = Ratio(0)
Ratio.ONE = Ratio(1)
Ratio.INFINITY = Ratio(1, 0)
Ratio.NEGATIVE_INFINITY = Ratio(-1, 0)
Ratio.E = Ratio(52061284670617417, 19152276311294112)
Ratio.PI = Ratio(1783366216531, 567663097408)
