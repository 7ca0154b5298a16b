"""
Parameter payload for generalized least squares.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray


VALID_METHODS = ('REML', 'ML')
VALID_CORRELATIONS = ('ar1', None)


@dataclass(frozen=True)
class GLSParams:
    """
    Parameter payload for GLS with AR(1) errors.

    phi is 0.0 and phi_estimated is False for independent errors.
    phi_se_z is the standard error of atanh(phi) from the curvature of the
    profile log-likelihood (NaN when phi is fixed).
    """
    coefficients: NDArray[np.floating[Any]]
    cov_unscaled: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    normalized_residuals: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    sigma: float
    phi: float
    phi_se_z: float
    phi_estimated: bool
    log_likelihood: float
    rank: int
    df_residual: int
    method: str
    correlation: str | None
    converged: bool
    n_evaluations: int
