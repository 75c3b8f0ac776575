from typing import Optional

import numpy as np
from numpy.typing import NDArray
from scipy.special import betainc, betaincinv, betaln, xlogy
from scipy.stats import betaprime as _sps_betaprime

from ._utils import _check_positive_finite, _evaluate
from .distributions import Univariate
from .errors import ValidationError

__all__ = [
    "BetaPrime",
]


class BetaPrime(Univariate):
    """Beta prime (inverted beta) distribution on the positive half line.

    Density:

        x^(alpha - 1) (1 + x)^(-alpha - beta) / B(alpha, beta)

    If Y ~ Beta(alpha, beta) then Y / (1 - Y) ~ BetaPrime(alpha, beta), which
    gives the CDF and quantile through the regularized incomplete beta
    function and its inverse.

    Moments of order k exist only for beta > k; the corresponding methods
    return NaN otherwise.

    Shape policy:
        - ``sample(n)`` -> (n,)
        - ``density`` / ``log_density`` / ``cdf`` / ``survival`` / ``inv_cdf``:
          scalar input -> float, array input -> array of the same shape.
    """

    def __init__(
        self,
        alpha: float,
        beta: float,
        *,
        rng: Optional[np.random.Generator] = None,
    ):
        """Initializes a beta prime distribution.

        Args:
            alpha: alpha > 0, the first shape parameter.
            beta: beta > 0, the second shape parameter.
            rng: Random generator. If ``None``, a default generator is created.

        Raises:
            ValidationError: If ``alpha`` or ``beta`` is non-positive or non-finite.
        """
        self._a = _check_positive_finite(alpha, "alpha")
        self._b = _check_positive_finite(beta, "beta")
        self._rng = rng or np.random.default_rng()

        self._betaprime = _sps_betaprime(a=self._a, b=self._b)
        self._log_norm = float(betaln(self._a, self._b))

    @property
    def alpha(self) -> float:
        """float: First shape parameter."""
        return self._a

    @property
    def beta(self) -> float:
        """float: Second shape parameter; moments of order k need beta > k."""
        return self._b

    @property
    def num_parameters(self) -> int:
        """int: alpha and beta."""
        return 2

    def _log_density(self, x: NDArray[np.floating]) -> NDArray[np.floating]:
        out = np.full(x.shape, -np.inf, dtype=float)
        ok = x >= 0
        v = x[ok]
        with np.errstate(divide="ignore"):
            out[ok] = xlogy(self._a - 1.0, v) - (self._a + self._b) * np.log1p(v) - self._log_norm
        return out

    def _cdf(self, x: NDArray[np.floating]) -> NDArray[np.floating]:
        out = np.zeros(x.shape, dtype=float)
        pos = x > 0
        # x / (1 + x), written so that x = inf maps to 1
        y = 1.0 / (1.0 + 1.0 / x[pos])
        out[pos] = betainc(self._a, self._b, y)
        return out

    def _inv_cdf(self, u: NDArray[np.floating]) -> NDArray[np.floating]:
        y = betaincinv(self._a, self._b, u)
        with np.errstate(divide="ignore"):
            return y / (1.0 - y)

    def inv_cdf(self, u: NDArray):
        """Computes the quantile function.

        Args:
            u: Probabilities in [0, 1]; scalar or array.

        Returns:
            Quantiles with the shape of ``u`` (``inf`` at ``u = 1``).

        Raises:
            ValidationError: If any probability lies outside [0, 1].
        """
        U = np.asarray(u, dtype=float)
        if np.any(np.isnan(U)) or np.any(U < 0.0) or np.any(U > 1.0):
            raise ValidationError("probabilities must lie in [0, 1].")
        return _evaluate(U, self._inv_cdf)

    quantile = inv_cdf

    def sample(self, n_samples: int) -> NDArray[np.floating]:
        """Draws samples from the distribution, shape (n_samples,)."""
        x = self._betaprime.rvs(size=int(n_samples), random_state=self._rng)
        return np.asarray(x, dtype=float).reshape(-1)

    rvs = sample

    def mean(self) -> float:
        """Returns alpha / (beta - 1); NaN if beta <= 1."""
        if self._b <= 1.0:
            return float("nan")
        return self._a / (self._b - 1.0)

    def mode(self) -> float:
        """Returns the mode, (alpha - 1) / (beta + 1) for alpha >= 1 and 0 otherwise."""
        if self._a < 1.0:
            return 0.0
        return (self._a - 1.0) / (self._b + 1.0)

    def var(self) -> float:
        """Returns the variance; NaN if beta <= 2."""
        a, b = self._a, self._b
        if b <= 2.0:
            return float("nan")
        return a * (a + b - 1.0) / ((b - 2.0) * (b - 1.0) * (b - 1.0))

    def skewness(self) -> float:
        """Returns the skewness; NaN if beta <= 3."""
        a, b = self._a, self._b
        if b <= 3.0:
            return float("nan")
        return 2.0 * (2.0 * a + b - 1.0) / (b - 3.0) * float(np.sqrt((b - 2.0) / (a * (a + b - 1.0))))

    def ex_kurtosis(self) -> float:
        """Returns the excess kurtosis; NaN if beta <= 4."""
        a, b = self._a, self._b
        if b <= 4.0:
            return float("nan")
        num = a * (a + b - 1.0) * (5.0 * b - 11.0) + (b - 1.0) * (b - 1.0) * (b - 2.0)
        return 6.0 * num / (a * (a + b - 1.0) * (b - 3.0) * (b - 4.0))
