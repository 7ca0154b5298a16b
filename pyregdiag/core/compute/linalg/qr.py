"""
QR least-squares kernels.

Every least-squares solve in the package (OLS, each WLS/IRLS step, the
whitened GLS system, LTS concentration steps) goes through qr_solve().

Rank detection follows R's lm.fit (LINPACK dqrdc2 with limited pivoting):
columns are taken in their original order and a column is aliased when its
component orthogonal to the previously kept columns has norm below
tol * (its own norm). Aliased columns are moved to the end of the pivot
and get NaN coefficients, exactly as in R's coef() output.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import solve_triangular

from pyregdiag.core.compute.tolerances import QR_RANK_TOL
from pyregdiag.core.exceptions import SingularMatrixError


@dataclass(frozen=True)
class QRResult:
    """
    Result of a rank-revealing QR decomposition.

    Attributes:
        Q: Orthonormal basis for the kept columns (n x rank)
        R: Upper triangular factor of the kept columns (rank x rank)
        rank: Numerical rank
        pivot: Column order, kept columns first (length p)
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    rank: int
    pivot: NDArray[np.intp]

    @property
    def aliased(self) -> NDArray[np.intp]:
        """Indices of aliased (dropped) columns, in original order."""
        return np.sort(self.pivot[self.rank:])


def qr_decompose(
    X: NDArray[np.floating[Any]],
    tol: float = QR_RANK_TOL,
) -> QRResult:
    """
    Rank-revealing QR with R's limited pivoting.

    Args:
        X: Matrix to decompose (n x p)
        tol: Relative tolerance for declaring a column aliased

    Returns:
        QRResult for the kept columns
    """
    n, p = X.shape
    kept: list[int] = []
    dropped: list[int] = []
    Q_kept = np.empty((n, 0), dtype=np.float64)

    for j in range(p):
        col = X[:, j]
        norm0 = float(np.linalg.norm(col))
        if norm0 == 0.0 or len(kept) >= n:
            dropped.append(j)
            continue
        resid = col - Q_kept @ (Q_kept.T @ col)
        if np.linalg.norm(resid) < tol * norm0:
            dropped.append(j)
            continue
        kept.append(j)
        Q_kept, _ = np.linalg.qr(X[:, kept], mode='reduced')

    if kept:
        Q, R = np.linalg.qr(X[:, kept], mode='reduced')
    else:
        Q = np.empty((n, 0), dtype=np.float64)
        R = np.empty((0, 0), dtype=np.float64)

    pivot = np.array(kept + dropped, dtype=np.intp)
    return QRResult(Q=Q, R=R, rank=len(kept), pivot=pivot)


def qr_solve(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    *,
    check_rank: bool = False,
    tol: float = QR_RANK_TOL,
) -> tuple[NDArray[np.floating[Any]], QRResult]:
    """
    Solve min ||y - X b||^2 via QR.

    The kept columns are solved as b = R^-1 Q'y; aliased columns get NaN.

    Args:
        X: Design matrix (n x p)
        y: Response vector (n,)
        check_rank: If True, raise instead of aliasing columns
        tol: Rank tolerance

    Returns:
        (coefficients, QRResult)

    Raises:
        SingularMatrixError: If X is rank-deficient and check_rank=True
    """
    p = X.shape[1]
    qr = qr_decompose(X, tol=tol)

    if check_rank and qr.rank < p:
        raise SingularMatrixError(
            f"Design matrix is rank-deficient: rank={qr.rank}, expected={p}. "
            f"Aliased columns: {qr.aliased.tolist()}",
            matrix_name='X',
            rank=qr.rank,
            expected_rank=p,
        )

    beta = np.full(p, np.nan, dtype=np.float64)
    if qr.rank > 0:
        beta_kept = solve_triangular(qr.R, qr.Q.T @ y, lower=False)
        beta[qr.pivot[:qr.rank]] = beta_kept
    return beta, qr


def unscaled_covariance(qr: QRResult, p: int) -> NDArray[np.floating[Any]]:
    """
    (X'X)^-1 for the kept columns, NaN rows/columns for aliased ones.

    Computed from R as R^-1 R^-T, never by inverting X'X.
    """
    cov = np.full((p, p), np.nan, dtype=np.float64)
    if qr.rank == 0:
        return cov
    R_inv = solve_triangular(qr.R, np.eye(qr.rank), lower=False)
    kept = qr.pivot[:qr.rank]
    cov[np.ix_(kept, kept)] = R_inv @ R_inv.T
    return cov


def fitted_from_coefficients(
    X: NDArray[np.floating[Any]],
    beta: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """X @ beta treating aliased (NaN) coefficients as zero."""
    return X @ np.where(np.isnan(beta), 0.0, beta)
