import dataclasses

import numpy as np
import pytest

from distext import AdaptiveQuadrature, QuadratureConfig, ValidationError
from distext.core.quadrature import MAX_DEPTH, MAX_MIN_DEPTH, MIN_DEPTH


# ------------------------------ Helpers ------------------------------

def _integrate(func, dim, start, end, tol, min_depth=0, max_depth=MAX_DEPTH):
    quad = AdaptiveQuadrature(func, dim, max_depth=max_depth)
    fs = quad.evaluate(start)
    fe = quad.evaluate(end)
    return quad, quad.integrate(fs, fe, start, end, tol, min_depth)


def _polynomials(y, out):
    out[0] = 1.0
    out[1] = y
    out[2] = y**3


def _smooth(y, out):
    out[0] = y * y
    out[1] = np.exp(y)
    out[2] = np.sin(10.0 * y)


# ------------------------------ Accuracy ------------------------------

def test_cubics_are_exact():
    quad, result = _integrate(_polynomials, 3, 0.0, 2.0, 1e-10)
    np.testing.assert_allclose(result, [2.0, 2.0, 4.0], rtol=1e-12)
    assert quad.truncated == 0


def test_each_component_meets_tolerance():
    # components need very different refinement; a shared midpoint arena
    # must not leak values between sibling intervals
    quad, result = _integrate(_smooth, 3, 0.0, 1.0, 1e-12)
    expected = [1.0 / 3.0, np.e - 1.0, (1.0 - np.cos(10.0)) / 10.0]
    np.testing.assert_allclose(result, expected, rtol=0, atol=1e-9)


def test_reversed_limits_flip_sign():
    _, fwd = _integrate(_smooth, 3, 0.0, 1.0, 1e-12)
    _, rev = _integrate(_smooth, 3, 1.0, 0.0, 1e-12)
    np.testing.assert_allclose(rev, -fwd, rtol=1e-10)


# ------------------------------ Depth control ------------------------------

def test_min_depth_forces_bisection():
    def const(y, out):
        out[:] = 2.0

    quad, result = _integrate(const, 1, 0.0, 1.0, 1e-3, min_depth=0)
    assert quad.evaluations == 2 + 1
    np.testing.assert_allclose(result, [2.0])

    quad, result = _integrate(const, 1, 0.0, 1.0, 1e-3, min_depth=4)
    # every node at depths 0..4 evaluates its midpoint once
    assert quad.evaluations == 2 + (2**5 - 1)
    np.testing.assert_allclose(result, [2.0])


def test_depth_ceiling_is_counted():
    def root(y, out):
        out[0] = np.sqrt(y)

    quad, result = _integrate(root, 1, 0.0, 1.0, 1e-14, max_depth=3)
    assert quad.truncated == 8
    assert quad.evaluations == 2 + 7

    # accepted intervals fall back to the trapezoid rule on 8 panels
    f = np.sqrt(np.linspace(0.0, 1.0, 9))
    expected = (f[0] / 2 + f[1:-1].sum() + f[-1] / 2) / 8
    np.testing.assert_allclose(result, [expected], rtol=1e-12)


def test_truncated_resets_between_calls():
    def root(y, out):
        out[0] = np.sqrt(y)

    quad = AdaptiveQuadrature(root, 1, max_depth=2)
    fs, fe = quad.evaluate(0.0), quad.evaluate(1.0)
    quad.integrate(fs, fe, 0.0, 1.0, 1e-14)
    assert quad.truncated == 4
    quad.integrate(fs, fe, 0.0, 1.0, 10.0)
    assert quad.truncated == 0


# ------------------------------ API ------------------------------

def test_evaluate_returns_fresh_arrays():
    quad = AdaptiveQuadrature(_polynomials, 3)
    a = quad.evaluate(2.0)
    b = quad.evaluate(3.0)
    np.testing.assert_array_equal(a, [1.0, 2.0, 8.0])
    np.testing.assert_array_equal(b, [1.0, 3.0, 27.0])
    assert quad.evaluations == 2
    assert quad.dim == 3
    assert quad.max_depth == MAX_DEPTH


def test_rejects_mismatched_endpoints():
    quad = AdaptiveQuadrature(_polynomials, 3)
    with pytest.raises(ValueError):
        quad.integrate(np.zeros(2), np.zeros(3), 0.0, 1.0, 1e-6)


@pytest.mark.parametrize("dim, max_depth", [(0, 10), (3, 0)])
def test_rejects_bad_construction(dim, max_depth):
    with pytest.raises(ValidationError):
        AdaptiveQuadrature(_polynomials, dim, max_depth=max_depth)


def test_config_defaults():
    config = QuadratureConfig()
    assert config.min_depth == MIN_DEPTH == 2
    assert config.max_depth == MAX_DEPTH == 50
    # escalation stops well below the recursion ceiling
    assert config.max_min_depth == MAX_MIN_DEPTH == 20
    assert config.max_min_depth < config.max_depth


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(max_depth=0),
        dict(min_depth=-1),
        dict(min_depth=5, max_min_depth=4),
        dict(max_min_depth=60),
    ],
)
def test_config_rejects_inconsistent_limits(kwargs):
    with pytest.raises(ValidationError):
        QuadratureConfig(**kwargs)


def test_config_is_frozen():
    config = QuadratureConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.min_depth = 5
