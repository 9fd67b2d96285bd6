"""Special functions, numerical integration and root finding."""

from .functions import (
    beta,
    gamma,
    log_beta,
    log_gamma,
    lower_incomplete_gamma,
    regularised_incomplete_beta,
    regularised_incomplete_beta_inverse,
    regularised_lower_incomplete_gamma,
)
from .integration import definite_integral, improper_integral
from .roots import central_difference, newton_raphson

__all__ = [
    "beta",
    "gamma",
    "log_beta",
    "log_gamma",
    "lower_incomplete_gamma",
    "regularised_incomplete_beta",
    "regularised_incomplete_beta_inverse",
    "regularised_lower_incomplete_gamma",
    "definite_integral",
    "improper_integral",
    "central_difference",
    "newton_raphson",
]
