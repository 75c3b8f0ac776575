from distext.core.errors import ValidationError
from distext.core.distributions import Distribution, Univariate
from distext.core.quadrature import (
    MAX_DEPTH,
    MAX_MIN_DEPTH,
    MIN_DEPTH,
    AdaptiveQuadrature,
    QuadratureConfig,
)
from distext.core.convolution import multi_convolve, next_pow2, poisson_binomial_pmf
from distext.core.dirichlet_winner import (
    WinnerProbabilities,
    dirichlet_winner_probabilities,
    solve_dirichlet_winner,
)
from distext.core.discrete import BetaBinomial, PoissonBinomial
from distext.core.continuous import BetaPrime
from distext.core.multivariate import Dirichlet
