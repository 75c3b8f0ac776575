from typing import Generic
from abc import ABC, abstractmethod

import numpy as np
from numpy.typing import NDArray

from ..custom_types import T
from ._utils import _evaluate

__all__ = [
    "Distribution",
    "Univariate",
]


# -------------------------- Abstract Classes ----------------------------


class Distribution(Generic[T], ABC):
    """
    Abstract base class for probability distributions.

    This class defines the general interface for any probabilistic
    distribution implementation used within distext. Subclasses are
    expected to implement methods for computing density, log-density
    and sampling.

    Subclasses that cannot support a specific operation (e.g., sampling)
    may leave that method unimplemented.

    Type Variables:
        T: Numeric data type (e.g., float or np.floating).
    """

    def sample(self, n_samples: int) -> NDArray[T]:
        """
        Samples data points from the distribution.

        Args:
            n_samples: The number of samples to generate.

        Returns:
            NDArray[T]: An array containing `n_samples` draws from the distribution.

        Raises:
            NotImplementedError: If the subclass does not implement this method.
        """
        raise NotImplementedError("This method may be implemented by subclasses (optional)")

    def density(self, data: NDArray) -> NDArray[np.floating]:
        """
        Computes the probability density (or mass) p(data) under this distribution.

        Args:
            data: Input array of observations for which to compute densities.

        Returns:
            NDArray[np.floating]: Probability density values for each input point.

        Raises:
            NotImplementedError: If the subclass does not implement this method.
        """
        raise NotImplementedError("This method may be implemented by subclasses (optional)")

    def log_density(self, data: NDArray) -> NDArray[np.floating]:
        """
        Computes the log-probability density log p(data).

        Args:
            data: Input array of observations for which to compute log-densities.

        Returns:
            NDArray[np.floating]: Log-probability values for each input point.

        Raises:
            NotImplementedError: If the subclass does not implement this method.
        """
        raise NotImplementedError("This method may be implemented by subclasses (optional)")

    @property
    @abstractmethod
    def num_parameters(self) -> int:
        """int: Number of scalar parameters defining the distribution."""
        raise NotImplementedError


class Univariate(Distribution[np.floating], ABC):
    """Abstract base class for scalar, real-valued distributions.

    Subclasses provide vectorized kernels (``_log_density``, ``_cdf``) over
    1-D float arrays and the closed-form moments; this class supplies the
    public evaluation surface on top of them.

    Shape policy:
        - ``sample(n)`` -> (n,)
        - ``density`` / ``log_density`` / ``cdf`` / ``survival``:
          scalar input -> float, array input -> array of the same shape.

    Raises:
        NotImplementedError: If abstract methods are not implemented by a subclass.
    """

    @abstractmethod
    def _log_density(self, x: NDArray[np.floating]) -> NDArray[np.floating]:
        """Vectorized log-density over a 1-D array, -inf outside the support."""
        raise NotImplementedError

    @abstractmethod
    def _cdf(self, x: NDArray[np.floating]) -> NDArray[np.floating]:
        """Vectorized CDF over a 1-D array."""
        raise NotImplementedError

    @abstractmethod
    def mean(self) -> float:
        """Returns the mean of the distribution."""
        raise NotImplementedError

    @abstractmethod
    def var(self) -> float:
        """Returns the variance of the distribution."""
        raise NotImplementedError

    @abstractmethod
    def skewness(self) -> float:
        """Returns the skewness of the distribution."""
        raise NotImplementedError

    @abstractmethod
    def ex_kurtosis(self) -> float:
        """Returns the excess kurtosis of the distribution."""
        raise NotImplementedError

    def density(self, values: NDArray):
        """Evaluates the density (PDF or PMF) at ``values``."""
        return _evaluate(values, lambda v: np.exp(self._log_density(v)))

    def log_density(self, values: NDArray):
        """Evaluates the natural logarithm of the density at ``values``."""
        return _evaluate(values, self._log_density)

    def cdf(self, values: NDArray):
        """Evaluates the cumulative distribution function P[X <= x]."""
        return _evaluate(values, self._cdf)

    def survival(self, values: NDArray):
        """Evaluates the survival function 1 - CDF(x)."""
        return _evaluate(values, lambda v: 1.0 - self._cdf(v))

    def std(self) -> float:
        """Returns the standard deviation of the distribution."""
        return float(np.sqrt(self.var()))

    def prob(self, values: NDArray):
        """Alias for :meth:`density`."""
        return self.density(values)

    def log_prob(self, values: NDArray):
        """Alias for :meth:`log_density`."""
        return self.log_density(values)
