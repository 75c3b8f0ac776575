from typing import Optional

import numpy as np
from numpy.typing import NDArray
from scipy.stats import dirichlet as _dirichlet

from ..custom_types import PRNG
from ._utils import _as_2d, _as_positive_vector
from .dirichlet_winner import WinnerProbabilities, solve_dirichlet_winner
from .distributions import Distribution
from .quadrature import QuadratureConfig

__all__ = [
    "Dirichlet",
]


class Dirichlet(Distribution[np.floating]):
    """Dirichlet distribution over the probability simplex.

    Represents a continuous multivariate distribution parameterized by a
    vector of positive concentration parameters ``alpha``. Backed by
    :mod:`scipy.stats.dirichlet` for sampling and density evaluation, and by
    :func:`~distext.core.dirichlet_winner.solve_dirichlet_winner` for the
    probability that each coordinate is the largest.

    Shape policy:
        - ``sample(n)`` -> (n, d)
        - ``density`` / ``log_density`` -> (n,)

    Attributes:
        _alpha: Read-only concentration parameters, shape (d,).
        _d: Number of categories.
        _rng: Generator passed to scipy for sampling.
        _mean: alpha / alpha_0, shape (d,).
        _cov: Population covariance, shape (d, d).
    """

    def __init__(
        self,
        alpha: NDArray[np.floating],
        *,
        rng: Optional[PRNG] = None,
    ):
        """Initializes a Dirichlet distribution.

        Args:
            alpha: Positive concentration parameters, shape (d,).
            rng: Random generator. If ``None``,
                creates a new default generator.

        Raises:
            ValidationError: If ``alpha`` is not 1D, empty, or contains nonpositive entries.
        """
        a = _as_positive_vector(alpha, "alpha")
        a.flags.writeable = False

        self._alpha = a
        self._d = int(a.size)
        self._rng = rng or np.random.default_rng()

        a0 = float(a.sum())
        m = a / a0
        # Cov[X_i, X_j] = (delta_ij m_i - m_i m_j) / (a0 + 1)
        self._mean = m
        self._cov = (np.diag(m) - np.outer(m, m)) / (a0 + 1.0)

    @property
    def alpha(self) -> NDArray[np.floating]:
        """NDArray: Read-only view of the concentration parameters."""
        return self._alpha

    @property
    def dimension(self) -> int:
        """int: Number of categories d."""
        return self._d

    @property
    def num_parameters(self) -> int:
        """int: One concentration parameter per category."""
        return self._d

    def sample(self, n_samples: int) -> NDArray[np.floating]:
        """Generates random samples from the Dirichlet distribution.

        Args:
            n_samples: Number of samples to draw.

        Returns:
            Samples of shape (n_samples, d).
        """
        if self._d == 1:
            return np.ones((int(n_samples), 1), dtype=float)
        X = _dirichlet.rvs(self._alpha, size=int(n_samples), random_state=self._rng)
        return np.asarray(X, dtype=float).reshape(-1, self._d)

    rvs = sample

    def density(self, values: NDArray) -> NDArray[np.floating]:
        """Evaluates the probability density function (PDF) row by row.

        Args:
            values: Points on the simplex, shape (n, d) or (d,).

        Returns:
            PDF values, shape (n,).
        """
        X = self._validate_simplex_rows(values)
        return np.asarray([_dirichlet.pdf(row, self._alpha) for row in X], dtype=float)

    def log_density(self, values: NDArray) -> NDArray[np.floating]:
        """Evaluates the log-PDF row by row.

        Args:
            values: Points on the simplex, shape (n, d) or (d,).

        Returns:
            Log-PDF values, shape (n,).
        """
        X = self._validate_simplex_rows(values)
        return np.asarray([_dirichlet.logpdf(row, self._alpha) for row in X], dtype=float)

    def mean(self) -> NDArray[np.floating]:
        """Returns the mean vector alpha / sum(alpha), shape (d,)."""
        return self._mean

    def cov(self) -> NDArray[np.floating]:
        """Returns the covariance matrix, shape (d, d)."""
        return self._cov

    def winner_probabilities(
        self,
        tol: float = 1e-8,
        *,
        config: Optional[QuadratureConfig] = None,
    ) -> WinnerProbabilities:
        """Probability that each coordinate is the largest.

        Args:
            tol: Absolute error target, must be > 0.
            config: Depth limits for the adaptive quadrature.

        Returns:
            WinnerProbabilities: Probabilities in coordinate order together
            with convergence details.
        """
        return solve_dirichlet_winner(self._alpha, tol, config=config)

    # ------------------------ helpers ------------------------

    def _validate_simplex_rows(self, values: NDArray) -> NDArray[np.floating]:
        """Ensures each row lies on the probability simplex.

        Args:
            values: Array of shape (n, d) or (d,).

        Returns:
            The rows as a float array of shape (n, d).

        Raises:
            ValueError: If any row is invalid.
        """
        X = _as_2d(values)
        if X.ndim != 2 or X.shape[1] != self._d:
            raise ValueError(f"values must have shape (n, {self._d}) or ({self._d},).")
        if np.any(X < -1e-12):
            raise ValueError("values must be nonnegative (within numerical tolerance).")
        if not np.allclose(X.sum(axis=1), 1.0, atol=1e-6):
            raise ValueError("each row must sum to 1 (within tolerance).")
        return X
