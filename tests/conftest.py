"""Shared fixtures for PathForge tests."""

import numpy as np
import pytest


class FixedRng:
    """Stand-in for numpy.random.Generator that returns scripted values.

    uniform() ignores its bounds and returns the next scripted array
    (cycling), random() returns a constant.
    """

    def __init__(self, uniform_values=None, random_value=0.5):
        self.uniform_values = [np.asarray(v, dtype=np.float64) for v in (uniform_values or [[0.0, 0.0, 0.0]])]
        self.random_value = random_value
        self._next = 0

    def uniform(self, low=0.0, high=1.0, size=None):
        value = self.uniform_values[self._next % len(self.uniform_values)]
        self._next += 1
        if size is None:
            return float(value[0])
        return value[:size].copy()

    def random(self):
        return self.random_value


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def fixed_rng():
    return FixedRng
