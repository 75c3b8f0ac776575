"""Vector-valued adaptive Simpson quadrature.

One integrand evaluation per node serves every component of the integrand,
and an interval is bisected as soon as any single component misses the
tolerance. Midpoint values are written to a depth-indexed scratch arena
allocated once per integrator, so a node's midpoint stays valid while both
of its children read it.
"""
import logging
from dataclasses import dataclass
from typing import Callable

import numpy as np
from numpy.typing import NDArray

from .errors import ValidationError

__all__ = [
    "MIN_DEPTH",
    "MAX_DEPTH",
    "MAX_MIN_DEPTH",
    "QuadratureConfig",
    "AdaptiveQuadrature",
]

logger = logging.getLogger(__name__)

MIN_DEPTH = 2   # always bisect at least this many times
MAX_DEPTH = 50  # never bisect past this depth; expected to be unreachable
MAX_MIN_DEPTH = 20  # attempt d costs at least 2**(d + 1) - 1 evaluations


@dataclass(frozen=True)
class QuadratureConfig:
    """Depth limits for adaptive quadrature.

    Attributes:
        min_depth: Floor of the minimum recursion depth. Intervals shallower
            than the minimum depth are always bisected.
        max_depth: Hard recursion ceiling. Intervals reaching it are accepted
            with the trapezoid estimate regardless of their error.
        max_min_depth: Largest minimum depth tried by callers that escalate
            the minimum depth until a global check passes.
    """
    min_depth: int = MIN_DEPTH
    max_depth: int = MAX_DEPTH
    max_min_depth: int = MAX_MIN_DEPTH

    def __post_init__(self):
        if self.max_depth < 1:
            raise ValidationError("max_depth must be >= 1.")
        if not (0 <= self.min_depth <= self.max_min_depth <= self.max_depth):
            raise ValidationError(
                "depth limits must satisfy 0 <= min_depth <= max_min_depth <= max_depth."
            )


class AdaptiveQuadrature:
    """Recursive adaptive Simpson integrator for functions f: [a, b] -> R^d.

    The integrand is called as ``func(y, out)`` and must write its ``dim``
    values into ``out``; it must not keep a reference to ``out``.

    Attributes:
        evaluations: Integrand evaluations performed by this instance.
        truncated: Intervals accepted at the depth ceiling during the last
            call to :meth:`integrate`.
    """

    def __init__(
        self,
        func: Callable[[float, NDArray[np.floating]], None],
        dim: int,
        *,
        max_depth: int = MAX_DEPTH,
    ):
        dim = int(dim)
        max_depth = int(max_depth)
        if dim < 1:
            raise ValidationError("dim must be >= 1.")
        if max_depth < 1:
            raise ValidationError("max_depth must be >= 1.")

        self._func = func
        self._dim = dim
        self._max_depth = max_depth
        # one midpoint slot per depth level
        self._scratch = np.empty((max_depth, dim), dtype=float)

        self.evaluations = 0
        self.truncated = 0

    @property
    def dim(self) -> int:
        """int: Number of integrand components."""
        return self._dim

    @property
    def max_depth(self) -> int:
        """int: Recursion ceiling."""
        return self._max_depth

    def evaluate(self, y: float) -> NDArray[np.floating]:
        """Evaluates the integrand at ``y`` into a fresh array."""
        out = np.empty(self._dim, dtype=float)
        self._func(float(y), out)
        self.evaluations += 1
        return out

    def integrate(
        self,
        f_start: NDArray,
        f_end: NDArray,
        start: float,
        end: float,
        tol: float,
        min_depth: int = 0,
    ) -> NDArray[np.floating]:
        """Integrates over ``[start, end]`` given the endpoint values.

        Args:
            f_start: Integrand value at ``start``, shape (dim,).
            f_end: Integrand value at ``end``, shape (dim,).
            start: Lower limit.
            end: Upper limit.
            tol: Absolute error target per component and per interval.
            min_depth: Intervals above this depth are bisected unconditionally.

        Returns:
            Integral estimate of shape (dim,).
        """
        fs = np.asarray(f_start, dtype=float).reshape(-1)
        fe = np.asarray(f_end, dtype=float).reshape(-1)
        if fs.shape != (self._dim,) or fe.shape != (self._dim,):
            raise ValueError(f"endpoint values must have shape ({self._dim},).")

        result = np.zeros(self._dim, dtype=float)
        self.truncated = 0
        self._refine(fs, fe, float(start), float(end), 0, float(tol), int(min_depth), result)
        if self.truncated:
            logger.debug("%d intervals hit the depth ceiling %d", self.truncated, self._max_depth)
        return result

    def _refine(
        self,
        fs: NDArray[np.floating],
        fe: NDArray[np.floating],
        s: float,
        e: float,
        depth: int,
        tol: float,
        min_depth: int,
        out: NDArray[np.floating],
    ) -> None:
        width = e - s
        if depth >= self._max_depth:
            out += (fs + fe) * (width / 2.0)
            self.truncated += 1
            return

        mid = 0.5 * (s + e)
        fm = self._scratch[depth]
        self._func(mid, fm)
        self.evaluations += 1

        trapezoid = (fs + fe) * (width / 2.0)
        simpson = (fs + 4.0 * fm + fe) * (width / 6.0)
        if depth < min_depth or np.any(np.abs(trapezoid - simpson) >= tol):
            self._refine(fs, fm, s, mid, depth + 1, tol, min_depth, out)
            self._refine(fm, fe, mid, e, depth + 1, tol, min_depth, out)
            return
        out += simpson
