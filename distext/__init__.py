"""Probability utilities beyond the usual scipy.stats surface.

Winner probabilities of a Dirichlet vector, the Poisson-binomial
distribution via FFT convolution, and the beta-binomial and beta prime
distributions.
"""

from distext.core import (
    AdaptiveQuadrature,
    BetaBinomial,
    BetaPrime,
    Dirichlet,
    Distribution,
    PoissonBinomial,
    QuadratureConfig,
    Univariate,
    ValidationError,
    WinnerProbabilities,
    dirichlet_winner_probabilities,
    multi_convolve,
    poisson_binomial_pmf,
    solve_dirichlet_winner,
)

__all__ = [
    "AdaptiveQuadrature",
    "BetaBinomial",
    "BetaPrime",
    "Dirichlet",
    "Distribution",
    "PoissonBinomial",
    "QuadratureConfig",
    "Univariate",
    "ValidationError",
    "WinnerProbabilities",
    "dirichlet_winner_probabilities",
    "multi_convolve",
    "poisson_binomial_pmf",
    "solve_dirichlet_winner",
]
