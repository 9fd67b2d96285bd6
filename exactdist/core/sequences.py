"""Memoized integer sequences: factorials, combinations and powers.

Each cache grows iteratively from its last entry, so large arguments never
recurse. The factorial cache is shared process-wide; extending it is
idempotent.
"""

from typing import List

from .ratio import Ratio

_FACTORIALS: List[int] = [1, 1]


def factorial(n: int) -> int:
    """Return ``n!`` as an exact integer.

    Requires ``n >= 0``.
    """
    cache = _FACTORIALS
    while len(cache) <= n:
        cache.append(cache[-1] * len(cache))
    return cache[n]


def combination(total: int, chosen: int) -> int:
    """Return ``total C chosen``. Requires ``total >= chosen >= 0``."""
    return factorial(total) // factorial(chosen) // factorial(total - chosen)


def permutation(total: int, chosen: int) -> int:
    """Return ``total P chosen``. Requires ``total >= chosen >= 0``."""
    return factorial(total) // factorial(total - chosen)


class PowerSequence:
    """Cached integer powers ``base**0, base**1, ...`` of a :class:`Ratio`.

    Discrete laws evaluate ``p**x`` for consecutive ``x`` while tabulating;
    each new power costs one exact multiplication.

    Parameters
    ----------
    base : Ratio
    """

    def __init__(self, base: Ratio) -> None:
        self.base = base
        self._powers: List[Ratio] = [Ratio.ONE]

    def __getitem__(self, k: int) -> Ratio:
        powers = self._powers
        while len(powers) <= k:
            powers.append(powers[-1].times(self.base))
        return powers[k]

    def __len__(self) -> int:
        return len(self._powers)

    def __repr__(self) -> str:
        return f"PowerSequence(base={self.base!r}, cached={len(self)})"
