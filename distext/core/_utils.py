from typing import Callable

from numpy.typing import NDArray

import numpy as np

from .errors import ValidationError


def _as_parameter_vector(values: NDArray, name: str) -> NDArray[np.floating]:
    """Converts a parameter sequence to a non-empty 1-D float array.

    Args:
        values (NDArray): Parameter sequence, shape (n,).
        name (str): Parameter name used in error messages.

    Returns:
        NDArray[np.floating]: A fresh float copy of shape (n,).

    Raises:
        ValidationError: If the input is not 1-D or is empty.
    """
    try:
        arr = np.array(values, dtype=float)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{name} must be a sequence of numbers.") from exc
    if arr.ndim != 1:
        raise ValidationError(f"{name} must be a 1D array.")
    if arr.size == 0:
        raise ValidationError(f"{name} must be non-empty.")
    return arr


def _check_positive_finite(value: float, name: str) -> float:
    """Returns ``value`` as a float after checking it is finite and > 0."""
    v = float(value)
    if not np.isfinite(v) or v <= 0.0:
        raise ValidationError(f"{name} must be a positive finite number.")
    return v


def _is_integral(v: NDArray[np.floating]) -> NDArray[np.bool_]:
    """Elementwise test for finite, integer-valued entries."""
    return np.isfinite(v) & (np.floor(v) == v)


def _evaluate(values: NDArray, fn: Callable[[NDArray[np.floating]], NDArray]):
    """Applies a vectorized kernel under the scalar-in/scalar-out shape policy.

    Scalars produce a Python float; arrays produce an ndarray of the same
    shape as the input.
    """
    arr = np.asarray(values, dtype=float)
    out = np.asarray(fn(arr.reshape(-1)), dtype=float)
    if arr.ndim == 0:
        return float(out[0])
    return out.reshape(arr.shape)


def _as_positive_vector(values: NDArray, name: str) -> NDArray[np.floating]:
    """Like :func:`_as_parameter_vector`, additionally requiring finite entries > 0."""
    arr = _as_parameter_vector(values, name)
    if not np.all(np.isfinite(arr)) or np.any(arr <= 0):
        raise ValidationError(f"{name} entries must be strictly positive and finite.")
    return arr


def _as_2d(x: NDArray) -> NDArray:
    """Converts input to a 2-D float array.

    A 1-D array is reshaped to (1, n). Higher-dimensional arrays are kept
    unchanged except for dtype casting to float.

    Args:
        x (NDArray): Input array of shape (n,), (n, d), or higher.

    Returns:
        NDArray: Float array. If input was 1-D, returns shape (1, n).
    """
    x = np.asarray(x, dtype=float)
    return x.reshape(1, -1) if x.ndim == 1 else x
