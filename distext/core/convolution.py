"""FFT-based convolution of many short polynomials.

The Poisson-binomial PMF is the coefficient vector of the product
``prod_i ((1 - p_i) + p_i z)``. Multiplying the factors one after another
costs O(n^2); multiplying them pairwise in a balanced tree, with each level
done in the Fourier domain, costs O(n log^2 n).
"""
import logging

import numpy as np
from scipy import fft as _fft

from ..custom_types import Array, ArrayLike

__all__ = [
    "next_pow2",
    "multi_convolve",
    "poisson_binomial_pmf",
]

logger = logging.getLogger(__name__)


def next_pow2(n: int) -> int:
    """Returns the smallest power of two that is >= ``n``.

    Raises:
        ValueError: If ``n`` is smaller than 1.
    """
    n = int(n)
    if n < 1:
        raise ValueError("n must be >= 1.")
    return 1 << (n - 1).bit_length()


def multi_convolve(blocks: ArrayLike) -> Array[np.complexfloating]:
    """Convolves every row of ``blocks`` together.

    Rows are multiplied pairwise, level by level: at each level all adjacent
    pairs share one batched transform of length ``2L`` (``L`` the current row
    length), the products are transformed back, the row count halves and the
    row length doubles. The output therefore has ``k * L0`` coefficients,
    where ``k`` and ``L0`` are the input shape.

    Args:
        blocks: Array of shape (k, L0) with ``k`` a power of two. Each row
            holds the coefficients of one polynomial, zero padded.

    Returns:
        Complex coefficients of the product polynomial, shape (k * L0,).
        Floating-point residue in the imaginary part is left in place.

    Raises:
        ValueError: If ``blocks`` is not 2-D or its row count is not a
            power of two.
    """
    data = np.asarray(blocks, dtype=complex)
    if data.ndim != 2 or data.shape[0] < 1 or data.shape[1] < 1:
        raise ValueError("blocks must be a non-empty 2D array of shape (k, L).")
    k = data.shape[0]
    if k & (k - 1):
        raise ValueError(f"number of blocks must be a power of two, got {k}.")

    if k == 1:
        return data[0].copy()

    while data.shape[0] > 1:
        width = 2 * data.shape[1]
        spectra = _fft.fft(data, n=width, axis=1)
        data = _fft.ifft(spectra[0::2] * spectra[1::2], axis=1)
    return data[0]


def poisson_binomial_pmf(probs: ArrayLike) -> Array[np.floating]:
    """Exact PMF of the number of successes among independent Bernoulli trials.

    Each trial contributes the polynomial ``[1 - p_i, p_i]``. The number of
    polynomials is padded to a power of two with ``[1, 0]``, which leaves the
    product unchanged, and all of them are convolved jointly by
    :func:`multi_convolve`.

    Args:
        probs: Success probabilities, shape (n,). Not validated here.

    Returns:
        PMF of shape (n + 1,). Entries may carry tiny negative round-off.
    """
    p = np.asarray(probs, dtype=float).reshape(-1)
    n = p.size
    k = next_pow2(n)

    blocks = np.zeros((k, 2), dtype=complex)
    blocks[:, 0] = 1.0
    blocks[:n, 0] = 1.0 - p
    blocks[:n, 1] = p

    logger.debug("convolving %d Bernoulli trials (%d padded blocks)", n, k)
    coeffs = multi_convolve(blocks)
    # Coefficients past n come from the padding and are zero up to round-off.
    return np.ascontiguousarray(coeffs[: n + 1].real)
