import logging
from typing import Optional

import numpy as np
from numpy.typing import NDArray
from scipy.special import betaln, gammaln
from scipy.stats import betabinom as _sps_betabinom

from ._utils import _as_parameter_vector, _check_positive_finite, _evaluate, _is_integral
from .convolution import poisson_binomial_pmf
from .distributions import Univariate
from .errors import ValidationError

__all__ = [
    "PoissonBinomial",
    "BetaBinomial",
]

logger = logging.getLogger(__name__)


def _table_cdf(x: NDArray[np.floating], table: NDArray[np.floating], n: int) -> NDArray[np.floating]:
    """Looks up a CDF table of length n + 1 at ``floor(x)``; 0 below 0, 1 at/above n."""
    out = np.zeros(x.shape, dtype=float)
    out[x >= n] = 1.0
    inside = (x >= 0) & (x < n)
    out[inside] = table[np.floor(x[inside]).astype(int)]
    return out


def _support_mask(x: NDArray[np.floating], n: int) -> NDArray[np.bool_]:
    return _is_integral(x) & (x >= 0) & (x <= n)


class PoissonBinomial(Univariate):
    """Poisson-binomial distribution: successes among independent, non-identical trials.

    The PMF is computed once at construction by FFT convolution of the
    per-trial polynomials ``[1 - p_i, p_i]`` (see
    :func:`~distext.core.convolution.poisson_binomial_pmf`), in
    O(n log^2 n) time. PMF, CDF table and parameters are stored read-only.

    The moments are closed-form sums over the Bernoulli moments and do not
    use the PMF.

    Shape policy:
        - ``sample(n)`` -> (n,)
        - ``density`` / ``log_density`` / ``cdf`` / ``survival``:
          scalar input -> float, array input -> array of the same shape.

    Attributes:
        _p: Success probability of each trial, shape (n,).
        _n: Number of trials.
        _pmf: Probability of exactly k successes, shape (n + 1,).
        _cdf_table: Prefix sums of the PMF, shape (n + 1,).
        _cw: Cumulative non-negative weights used for sampling.
        _rng: Random number generator.
    """

    def __init__(
        self,
        probs: NDArray[np.floating],
        *,
        rng: Optional[np.random.Generator] = None,
    ):
        """Initializes a Poisson-binomial distribution.

        Args:
            probs: Success probabilities of the trials, shape (n,), each in [0, 1].
            rng: Random generator. If ``None``, a default generator is created.

        Raises:
            ValidationError: If ``probs`` is empty, not 1-D, or has entries
                outside [0, 1].
        """
        p = _as_parameter_vector(probs, "probs")
        if np.any(np.isnan(p)):
            raise ValidationError("probs must not contain NaN.")
        if np.any(p < 0.0):
            raise ValidationError("probs must be >= 0.")
        if np.any(p > 1.0):
            raise ValidationError("probs must be <= 1.")

        self._p = p
        self._n = int(p.size)
        self._rng = rng or np.random.default_rng()

        self._pmf = poisson_binomial_pmf(p)
        self._cdf_table = np.cumsum(self._pmf)
        # Round-off can leave tiny negative masses; they get no sampling weight.
        self._cw = np.cumsum(np.clip(self._pmf, 0.0, None))
        for arr in (self._p, self._pmf, self._cdf_table, self._cw):
            arr.flags.writeable = False
        logger.debug("built Poisson-binomial PMF over %d trials", self._n)

    @property
    def probs(self) -> NDArray[np.floating]:
        """NDArray: Read-only view of the trial success probabilities, shape (n,)."""
        return self._p

    @property
    def n_trials(self) -> int:
        """int: Number of trials."""
        return self._n

    @property
    def pmf(self) -> NDArray[np.floating]:
        """NDArray: Read-only view of the PMF, shape (n + 1,)."""
        return self._pmf

    @property
    def num_parameters(self) -> int:
        """int: One parameter per trial."""
        return self._n

    def _density(self, x: NDArray[np.floating]) -> NDArray[np.floating]:
        out = np.zeros(x.shape, dtype=float)
        ok = _support_mask(x, self._n)
        out[ok] = self._pmf[x[ok].astype(int)]
        return out

    def _log_density(self, x: NDArray[np.floating]) -> NDArray[np.floating]:
        out = np.full(x.shape, -np.inf, dtype=float)
        ok = _support_mask(x, self._n)
        with np.errstate(divide="ignore"):
            out[ok] = np.log(np.clip(self._pmf[x[ok].astype(int)], 0.0, None))
        return out

    def _cdf(self, x: NDArray[np.floating]) -> NDArray[np.floating]:
        return _table_cdf(x, self._cdf_table, self._n)

    def density(self, values: NDArray):
        """Evaluates the PMF; 0 for non-integral or out-of-range values."""
        return _evaluate(values, self._density)

    def sample(self, n_samples: int) -> NDArray[np.floating]:
        """Draws success counts by inverse-transform sampling of the PMF.

        Args:
            n_samples: Number of samples to draw.

        Returns:
            Success counts as floats, shape (n_samples,).
        """
        u = self._rng.random(int(n_samples)) * self._cw[-1]
        idx = np.searchsorted(self._cw, u, side="right")
        return np.minimum(idx, self._n).astype(float)

    rvs = sample

    def mean(self) -> float:
        """Returns sum(p)."""
        return float(self._p.sum())

    def var(self) -> float:
        """Returns sum(p * (1 - p))."""
        return float((self._p * (1.0 - self._p)).sum())

    def skewness(self) -> float:
        """Returns the skewness; NaN when the variance is zero."""
        v = self.var()
        if v == 0.0:
            return float("nan")
        q = self._p * (1.0 - self._p)
        return float(((1.0 - 2.0 * self._p) * q).sum() / v ** 1.5)

    def ex_kurtosis(self) -> float:
        """Returns the excess kurtosis; NaN when the variance is zero."""
        v = self.var()
        if v == 0.0:
            return float("nan")
        q = self._p * (1.0 - self._p)
        return float(((1.0 - 6.0 * q) * q).sum() / (v * v))


class BetaBinomial(Univariate):
    """Beta-binomial(n_trials, alpha, beta) distribution.

    Number of successes in ``n_trials`` Bernoulli trials sharing a success
    probability drawn from Beta(alpha, beta):

        f(k) = C(n, k) B(k + alpha, n - k + beta) / B(alpha, beta)

    Evaluated in log space with :func:`scipy.special.gammaln` and
    :func:`scipy.special.betaln`; sampling uses :mod:`scipy.stats.betabinom`.

    Shape policy:
        - ``sample(n)`` -> (n,)
        - ``density`` / ``log_density`` / ``cdf`` / ``survival``:
          scalar input -> float, array input -> array of the same shape.
    """

    def __init__(
        self,
        n_trials: int,
        alpha: float,
        beta: float,
        *,
        rng: Optional[np.random.Generator] = None,
    ):
        """Initializes a beta-binomial distribution.

        Args:
            n_trials: Number of trials, a positive integer.
            alpha: alpha > 0, the first shape parameter of the Beta prior.
            beta: beta > 0, the second shape parameter of the Beta prior.
            rng: Random generator. If ``None``, a default generator is created.

        Raises:
            ValidationError: If ``n_trials`` is not a positive integer or a
                shape parameter is not a positive finite number.
        """
        n = float(n_trials)
        if not np.isfinite(n) or n < 1 or n != np.floor(n):
            raise ValidationError("n_trials must be a positive integer.")

        self._n = int(n)
        self._a = _check_positive_finite(alpha, "alpha")
        self._b = _check_positive_finite(beta, "beta")
        self._rng = rng or np.random.default_rng()

        self._betabinom = _sps_betabinom(n=self._n, a=self._a, b=self._b)

        k = np.arange(self._n + 1, dtype=float)
        self._pmf = np.exp(self._log_pmf(k))
        self._cdf_table = np.minimum(np.cumsum(self._pmf), 1.0)
        self._pmf.flags.writeable = False
        self._cdf_table.flags.writeable = False

    @property
    def n_trials(self) -> int:
        """int: Number of trials."""
        return self._n

    @property
    def alpha(self) -> float:
        """float: First shape parameter of the Beta prior on the success probability."""
        return self._a

    @property
    def beta(self) -> float:
        """float: Second shape parameter of the Beta prior on the success probability."""
        return self._b

    @property
    def num_parameters(self) -> int:
        """int: n_trials, alpha and beta."""
        return 3

    def _log_pmf(self, k: NDArray[np.floating]) -> NDArray[np.floating]:
        n, a, b = self._n, self._a, self._b
        log_choose = gammaln(n + 1.0) - gammaln(k + 1.0) - gammaln(n - k + 1.0)
        return log_choose + betaln(k + a, n - k + b) - betaln(a, b)

    def _log_density(self, x: NDArray[np.floating]) -> NDArray[np.floating]:
        out = np.full(x.shape, -np.inf, dtype=float)
        ok = _support_mask(x, self._n)
        out[ok] = self._log_pmf(x[ok])
        return out

    def _cdf(self, x: NDArray[np.floating]) -> NDArray[np.floating]:
        return _table_cdf(x, self._cdf_table, self._n)

    def sample(self, n_samples: int) -> NDArray[np.floating]:
        """Draws success counts, shape (n_samples,)."""
        x = self._betabinom.rvs(size=int(n_samples), random_state=self._rng)
        return np.asarray(x, dtype=float).reshape(-1)

    rvs = sample

    def mean(self) -> float:
        return self._n * self._a / (self._a + self._b)

    def var(self) -> float:
        n, a, b = self._n, self._a, self._b
        v = a + b
        return n * a * b * (v + n) / (v * v * (v + 1.0))

    def skewness(self) -> float:
        n, a, b = self._n, self._a, self._b
        v = a + b
        return (v + 2.0 * n) * (b - a) / (v + 2.0) * np.sqrt((v + 1.0) / (n * a * b * (v + n)))

    def ex_kurtosis(self) -> float:
        n, a, b = self._n, self._a, self._b
        v = a + b
        ab = a * b
        scale = v * v * (v + 1.0) / (n * ab * (v + 2.0) * (v + 3.0) * (v + n))
        bracket = (
            v * (v - 1.0 + 6.0 * n)
            + 3.0 * ab * (n - 2.0)
            + 6.0 * n * n
            - 3.0 * ab * n * (6.0 - n) / v
            - 18.0 * ab * n * n / (v * v)
        )
        return scale * bracket - 3.0
