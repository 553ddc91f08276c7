"""Shared fixtures for the wavevar test suite."""

import numpy as np
import pytest


@pytest.fixture
def rng():
    return np.random.default_rng(20171)


@pytest.fixture
def white_noise(rng):
    """8192 samples of N(0, 4) noise."""
    return 2.0 * rng.standard_normal(8192)


@pytest.fixture
def random_walk(rng):
    """10,000-step Gaussian random walk."""
    return np.cumsum(rng.standard_normal(10_000))
