import pytest
import numpy as np


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def brute_force_pmf():
    """Sequential O(n^2) Poisson-binomial PMF, used as a reference."""
    def _pmf(probs):
        pmf = np.array([1.0])
        for p in np.asarray(probs, dtype=float):
            pmf = np.convolve(pmf, [1.0 - p, p])
        return pmf
    return _pmf
