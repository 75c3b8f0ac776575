import logging

import numpy as np
import pytest
from scipy.special import betainc

from distext import (
    Dirichlet,
    QuadratureConfig,
    ValidationError,
    dirichlet_winner_probabilities,
    solve_dirichlet_winner,
)


# ------------------------------ Known values ------------------------------

KNOWN_CASES = [
    (
        [5.5, 10.5, 15.5],
        [0.006730827936742794, 0.15691248315301745, 0.83635668891024],
    ),
    (
        [50.5, 100.5, 150.5],
        [1.2913384498578148e-13, 0.0007572193068734463, 0.9992427806931501],
    ),
]


@pytest.mark.parametrize("tol", [1e-3, 1e-8])
@pytest.mark.parametrize("alphas, expected", KNOWN_CASES)
def test_known_values(alphas, expected, tol):
    probs = dirichlet_winner_probabilities(alphas, tol)
    assert probs.shape == (len(alphas),)
    np.testing.assert_allclose(probs, expected, rtol=0, atol=tol)


def test_repeated_calls_do_not_alter_input():
    alphas = np.array([5.5, 10.5, 15.5])
    first = dirichlet_winner_probabilities(alphas, 1e-8)
    second = dirichlet_winner_probabilities(alphas, 1e-8)
    np.testing.assert_array_equal(alphas, [5.5, 10.5, 15.5])
    np.testing.assert_array_equal(first, second)


def test_result_follows_input_order():
    fwd = dirichlet_winner_probabilities([5.5, 10.5, 15.5], 1e-8)
    rev = dirichlet_winner_probabilities([15.5, 10.5, 5.5], 1e-8)
    np.testing.assert_allclose(fwd, rev[::-1], rtol=0, atol=1e-7)


# ------------------------------ Closed forms ------------------------------

def test_single_category_always_wins():
    res = solve_dirichlet_winner([3.0], 1e-8)
    np.testing.assert_array_equal(res.probabilities, [1.0])
    assert res.converged
    assert res.evaluations == 0


def test_two_equal_categories_split_evenly():
    np.testing.assert_array_equal(dirichlet_winner_probabilities([1, 1], 1e-8), [0.5, 0.5])


@pytest.mark.parametrize("a1, a2", [(2.0, 3.5), (0.3, 0.7), (40.0, 41.0)])
def test_two_categories_match_incomplete_beta(a1, a2):
    b = betainc(a1, a2, 0.5)
    res = solve_dirichlet_winner([a1, a2], 1e-6)
    np.testing.assert_array_equal(res.probabilities, [1.0 - b, b])
    assert res.min_depth == 0


# ------------------------------ Normalization ------------------------------

@pytest.mark.parametrize("tol", [1e-3, 1e-8])
def test_random_alphas_normalize(rng, tol):
    for i in range(0, 40, 4):
        n = int(rng.integers(3, 11))
        scale = 0.5 + rng.exponential() * 1.1**i
        # clustered alphas, the hard case for the integrand
        alphas = scale + rng.exponential(size=n) * np.sqrt(scale)
        res = solve_dirichlet_winner(alphas, tol)
        assert res.converged
        assert np.all(res.probabilities >= 0.0)
        assert abs(res.probabilities.sum() - 1.0) <= 2 * n * tol


def test_spread_out_alphas_normalize(rng):
    for i in range(0, 40, 4):
        n = int(rng.integers(3, 11))
        alphas = 0.5 + rng.exponential(size=n) * 1.1**i
        probs = dirichlet_winner_probabilities(alphas, 1e-8)
        assert np.all(probs >= 0.0)
        assert abs(probs.sum() - 1.0) <= 2 * n * 1e-8


def test_reports_work_done():
    config = QuadratureConfig(min_depth=3)
    res = solve_dirichlet_winner([2.0, 3.0, 4.0], 1e-6, config=config)
    assert res.converged
    assert res.min_depth >= 3
    # two endpoints plus at least the forced midpoints
    assert res.evaluations >= 2 + (2**3 - 1)


def test_non_convergence_returns_best_effort(caplog):
    config = QuadratureConfig(min_depth=0, max_depth=1, max_min_depth=1)
    with caplog.at_level(logging.WARNING, logger="distext.core.dirichlet_winner"):
        res = solve_dirichlet_winner([2.0, 3.0, 4.0], 1e-10, config=config)
    assert not res.converged
    assert res.min_depth == 1
    assert res.probabilities.shape == (3,)
    assert np.all(np.isfinite(res.probabilities))
    assert "did not normalize" in caplog.text


# ------------------------------ Validation ------------------------------

@pytest.mark.parametrize(
    "alphas",
    [[], [1.0, 0.0], [1.0, -2.0], [[1.0, 2.0]], [1.0, np.nan], [1.0, np.inf], ["a", "b"]],
)
def test_rejects_bad_alphas(alphas):
    with pytest.raises(ValidationError):
        dirichlet_winner_probabilities(alphas, 1e-8)


@pytest.mark.parametrize("tol", [0.0, -1e-3, np.nan, np.inf])
def test_rejects_bad_tolerance(tol):
    with pytest.raises(ValidationError):
        dirichlet_winner_probabilities([1.0, 2.0, 3.0], tol)


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        dirichlet_winner_probabilities([1.0, -1.0], 1e-8)


# ------------------------------ Monte Carlo ------------------------------

def test_agrees_with_sampled_argmax(rng):
    alphas = np.array([2.0, 3.0, 4.0, 3.5])
    X = Dirichlet(alphas, rng=rng).sample(200_000)
    freq = np.bincount(X.argmax(axis=1), minlength=alphas.size) / X.shape[0]
    np.testing.assert_allclose(dirichlet_winner_probabilities(alphas, 1e-8), freq, atol=0.01)
