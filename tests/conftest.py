"""
Pytest configuration and shared fixtures.
"""

import numpy as np
import pytest


class FixedUniform:
    """Uniform source that always returns the same draw."""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


class SequenceUniform:
    """Uniform source that cycles through a fixed list of draws."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


@pytest.fixture
def fixed_uniform():
    """Factory for a deterministic uniform source."""
    return FixedUniform


@pytest.fixture
def sequence_uniform():
    """Factory for a uniform source replaying given draws."""
    return SequenceUniform


@pytest.fixture
def seeded_rng():
    """Reproducible numpy generator."""
    return np.random.default_rng(12345)
