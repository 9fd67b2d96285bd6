"""Scoped configuration for exactdist computations."""

from typing import Optional

from . import constants


class Settings:
    """Context manager holding tunable numeric settings.

    Settings nest: entering a block makes it the active configuration and
    leaving it restores the enclosing one. Values not given fall back to the
    settings active where the block is entered, then to
    :mod:`exactdist.core.constants`.

    Example:
        >>> with Settings(datapoints=41):
        ...     d = Normal(0, 1)
        >>> len(d.pdf())
        41
    """

    _active_context: Optional['Settings'] = None

    def __init__(
        self,
        ratio_precision: Optional[int] = None,
        display_precision: Optional[int] = None,
        datapoints: Optional[int] = None,
    ):
        """Initialize a settings block.

        Args:
            ratio_precision: Significant digits kept when converting floats
                to rationals.
            display_precision: Decimals used when rounding tables.
            datapoints: Number of abscissas in continuous tables.
        """
        self._overrides = (ratio_precision, display_precision, datapoints)
        self._parent_context: Optional['Settings'] = None
        self._resolve(Settings._active_context)

    def _resolve(self, parent: Optional['Settings']) -> None:
        ratio_precision, display_precision, datapoints = self._overrides
        self.ratio_precision = _pick(
            ratio_precision, parent and parent.ratio_precision, constants.RATIO_PRECISION
        )
        self.display_precision = _pick(
            display_precision, parent and parent.display_precision, constants.DISPLAY_PRECISION
        )
        self.datapoints = _pick(
            datapoints, parent and parent.datapoints, constants.DATAPOINTS
        )

    def __enter__(self) -> 'Settings':
        self._parent_context = Settings._active_context
        self._resolve(self._parent_context)
        Settings._active_context = self
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        """Restore the enclosing settings.

        Returns:
            False to propagate any exceptions.
        """
        Settings._active_context = self._parent_context
        return False

    @classmethod
    def current(cls) -> 'Settings':
        """Return the innermost active settings, or the defaults."""
        if cls._active_context is None:
            return _DEFAULTS
        return cls._active_context

    @classmethod
    def is_active(cls) -> bool:
        """Check whether a settings block is currently active."""
        return cls._active_context is not None

    def __repr__(self) -> str:
        return (
            f"Settings(ratio_precision={self.ratio_precision}, "
            f"display_precision={self.display_precision}, "
            f"datapoints={self.datapoints})"
        )


def _pick(*values):
    for value in values:
        if value is not None:
            return value
    return None


_DEFAULTS = Settings()
