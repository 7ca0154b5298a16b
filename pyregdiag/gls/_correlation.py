"""
AR(1) correlation structure.

Errors follow e_t = phi * e_{t-1} + u_t, so corr(e_i, e_j) = phi^|t_i - t_j|.
With prior weights w the error covariance is

    Var(e) = sigma^2 * D R(phi) D,    D = diag(1 / sqrt(w))

and the whitening transform is L^-1 D^-1 where R(phi) = L L'.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy.linalg import cholesky, solve_triangular

from pyregdiag.core.exceptions import NotPositiveDefiniteError


@dataclass(frozen=True)
class Whitener:
    """Cholesky factor of D R D plus its log-determinant."""
    L: NDArray[np.floating[Any]]
    sqrt_w: NDArray[np.floating[Any]]
    log_det: float

    def apply(self, A: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        """L^-1 D^-1 A for a vector or matrix A."""
        scaled = A * (self.sqrt_w[:, np.newaxis] if A.ndim == 2 else self.sqrt_w)
        return solve_triangular(self.L, scaled, lower=True)


def ar1_correlation(phi: float, time: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """R(phi) with entries phi^|t_i - t_j| (phi^0 = 1 on the diagonal)."""
    lags = np.abs(time[:, np.newaxis] - time[np.newaxis, :])
    if phi == 0.0:
        return np.eye(len(time))
    return np.sign(phi) ** lags * np.abs(phi) ** lags


def make_whitener(
    phi: float,
    time: NDArray[np.floating[Any]],
    weights: NDArray[np.floating[Any]] | None,
) -> Whitener:
    """
    Build the whitening transform for a given phi.

    Raises:
        NotPositiveDefiniteError: If R(phi) is numerically singular
            (|phi| extremely close to 1)
    """
    n = len(time)
    sqrt_w = np.sqrt(weights) if weights is not None else np.ones(n)
    R = ar1_correlation(phi, time)
    try:
        L = cholesky(R, lower=True)
    except np.linalg.LinAlgError as e:
        raise NotPositiveDefiniteError(
            f"AR(1) correlation matrix not positive definite at phi={phi:.6g}",
            matrix_name='R(phi)',
        ) from e
    log_det = 2.0 * float(np.sum(np.log(np.diag(L)))) - 2.0 * float(np.sum(np.log(sqrt_w)))
    return Whitener(L=L, sqrt_w=sqrt_w, log_det=log_det)
