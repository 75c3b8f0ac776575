"""Probability that each coordinate of a Dirichlet vector is the largest.

For X ~ Dirichlet(alpha) write X = G / sum(G) with independent
G_j ~ Gamma(alpha_j, 1). Coordinate j is the maximum exactly when G_j is, so

    P(j wins) = int_0^inf pdf_j(x) * prod_{k != j} cdf_k(x) dx
              = int_0^inf pdf_j(x) / cdf_j(x) * prod_k cdf_k(x) dx.

The substitution x = a * y / (1 - y), with ``a`` the mean of the alphas,
maps the half line onto [0, 1) and centres the mass of the integrand; all
n integrals share the product term and are computed in one adaptive pass.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray
from scipy.special import betainc, gammainc, gammaln

from ..custom_types import Array, ArrayLike
from ._utils import _as_positive_vector
from .errors import ValidationError
from .quadrature import AdaptiveQuadrature, QuadratureConfig

__all__ = [
    "WinnerProbabilities",
    "solve_dirichlet_winner",
    "dirichlet_winner_probabilities",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WinnerProbabilities:
    """Result of :func:`solve_dirichlet_winner`.

    Attributes:
        probabilities: Winner probability of each category, in input order.
        converged: Whether ``|sum(probabilities) - 1| <= 2 * n * tol`` held.
        min_depth: Minimum recursion depth of the accepted attempt
            (0 when a closed form was used).
        evaluations: Integrand evaluations performed by this call.
    """
    probabilities: NDArray[np.floating]
    converged: bool
    min_depth: int
    evaluations: int


class _WinnerIntegrand:
    """Integrand of the winner probabilities on the unit interval."""

    def __init__(self, alphas: NDArray[np.floating]):
        self.alphas = alphas
        self.lgammas = gammaln(alphas)
        self.avg_alpha = float(alphas.mean())

    def __call__(self, y: float, out: NDArray[np.floating]) -> None:
        # Zero at both ends of the substitution; the general formula divides
        # by (1 - y)^2 and by CDF values that may underflow to zero.
        if y <= 0.0 or y >= 1.0:
            out[:] = 0.0
            return
        x = self.avg_alpha * y / (1.0 - y)
        cdfs = gammainc(self.alphas, x)
        if np.any(cdfs == 0.0):
            out[:] = 0.0
            return
        pdfs = np.exp(np.log(x) * (self.alphas - 1.0) - x - self.lgammas)
        scale = self.avg_alpha * np.prod(cdfs) / ((1.0 - y) * (1.0 - y))
        np.multiply(pdfs / cdfs, scale, out=out)


def solve_dirichlet_winner(
    alphas: ArrayLike,
    tol: float,
    *,
    config: Optional[QuadratureConfig] = None,
) -> WinnerProbabilities:
    """Computes Dirichlet winner probabilities with convergence details.

    One and two categories use closed forms. For three or more, the
    integrand is integrated adaptively over [0, 1]; if the probabilities do
    not sum to one within ``2 * n * tol``, the whole integration is redone
    with a larger minimum depth, up to ``config.max_min_depth``. A result
    that never passes the check is still returned, flagged with
    ``converged=False``.

    Each attempt at minimum depth ``d`` costs at least ``2**(d + 1) - 1``
    evaluations; the default ``config.max_min_depth`` of 20 bounds the work
    when the alphas sum to much less than one.

    Args:
        alphas: Positive concentration parameters, shape (n,).
        tol: Absolute error target, must be > 0.
        config: Depth limits. Defaults to :class:`QuadratureConfig`.

    Returns:
        WinnerProbabilities: Probabilities and convergence details.

    Raises:
        ValidationError: If ``alphas`` is empty, not 1-D, or has
            non-positive entries, or if ``tol`` is not a positive number.
    """
    a = _as_positive_vector(alphas, "alphas")
    tol = float(tol)
    if not np.isfinite(tol) or tol <= 0.0:
        raise ValidationError("tol must be a positive finite number.")
    config = config or QuadratureConfig()

    n = a.size
    if n == 1:
        return WinnerProbabilities(np.ones(1), True, 0, 0)
    if n == 2:
        # X_1 ~ Beta(alpha_1, alpha_2); category 2 wins when X_1 < 1/2.
        b = float(betainc(a[0], a[1], 0.5))
        return WinnerProbabilities(np.array([1.0 - b, b]), True, 0, 0)

    quad = AdaptiveQuadrature(_WinnerIntegrand(a), n, max_depth=config.max_depth)
    f_start = quad.evaluate(0.0)
    f_end = quad.evaluate(1.0)
    bound = 2 * n * tol

    for min_depth in range(config.min_depth, config.max_min_depth + 1):
        # Each attempt starts from scratch; a coarser tree cannot be refined
        # in place without mixing partial sums.
        result = quad.integrate(f_start, f_end, 0.0, 1.0, tol, min_depth)
        error = abs(float(result.sum()) - 1.0)
        logger.debug(
            "min_depth=%d evaluations=%d normalization error=%.3g (bound %.3g)",
            min_depth, quad.evaluations, error, bound,
        )
        if error <= bound:
            return WinnerProbabilities(result, True, min_depth, quad.evaluations)

    logger.warning(
        "winner probabilities for %d categories did not normalize within %.3g "
        "(error %.3g at min_depth=%d); returning best effort",
        n, bound, error, min_depth,
    )
    return WinnerProbabilities(result, False, min_depth, quad.evaluations)


def dirichlet_winner_probabilities(
    alphas: ArrayLike,
    tol: float,
    *,
    config: Optional[QuadratureConfig] = None,
) -> Array[np.floating]:
    """Probability that each coordinate of Dirichlet(alphas) is the maximum.

    Args:
        alphas: Positive concentration parameters, shape (n,).
        tol: Absolute error target, must be > 0.
        config: Depth limits. Defaults to :class:`QuadratureConfig`.

    Returns:
        Array: Winner probabilities of shape (n,), in input order.

    Raises:
        ValidationError: On malformed ``alphas`` or ``tol``.
    """
    return solve_dirichlet_winner(alphas, tol, config=config).probabilities
