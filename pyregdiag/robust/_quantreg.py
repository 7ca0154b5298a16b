"""
Quantile regression.

The tau-th regression quantile minimises sum_i rho_tau(y_i - x_i'b) with
the check function rho_tau(r) = r (tau - 1{r < 0}). Written as a linear
programme with r = u - v, u, v >= 0:

    min   tau 1'u + (1 - tau) 1'v
    s.t.  X b + u - v = y,   b free

and solved with HiGHS through scipy.optimize.linprog. tau = 0.5 is least
absolute deviations (LAD / L1) regression.

Standard errors (se='iid') follow quantreg's summary.rq: the sparsity
1/f(F^-1(tau)) is the slope of a median regression of the ordered
residuals on their ranks within a Hall-Sheather bandwidth, and
Cov(b) = sparsity^2 tau (1 - tau) (X'X)^-1.
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy import sparse
from scipy import stats as sp_stats
from scipy.optimize import linprog

from pyregdiag.core.compute.tolerances import ZERO_RESIDUAL_EPS
from pyregdiag.core.compute.linalg.qr import qr_decompose, unscaled_covariance
from pyregdiag.core.exceptions import NumericalError


def solve_quantile_lp(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    tau: float,
) -> tuple[NDArray[np.floating[Any]], float]:
    """
    Solve the quantile regression LP.

    Returns:
        (coefficients, objective value)

    Raises:
        NumericalError: If the LP solver reports failure
    """
    n, p = X.shape
    c = np.concatenate([np.zeros(p), np.full(n, tau), np.full(n, 1.0 - tau)])
    eye = sparse.identity(n, format='csr')
    A_eq = sparse.hstack([sparse.csr_matrix(X), eye, -eye], format='csr')
    bounds = [(None, None)] * p + [(0, None)] * (2 * n)

    res = linprog(c, A_eq=A_eq, b_eq=y, bounds=bounds, method='highs')
    if res.status != 0:
        raise NumericalError(f"quantile regression LP failed: {res.message}")
    return np.asarray(res.x[:p], dtype=np.float64), float(res.fun)


def hall_sheather_bandwidth(tau: float, n: int, alpha: float = 0.05) -> float:
    """Hall-Sheather (1988) bandwidth for sparsity estimation."""
    x0 = sp_stats.norm.ppf(tau)
    f0 = sp_stats.norm.pdf(x0)
    return float(
        n ** (-1.0 / 3.0)
        * sp_stats.norm.ppf(1.0 - alpha / 2.0) ** (2.0 / 3.0)
        * ((1.5 * f0 ** 2) / (2.0 * x0 ** 2 + 1.0)) ** (1.0 / 3.0)
    )


def iid_standard_errors(
    X: NDArray[np.floating[Any]],
    resid: NDArray[np.floating[Any]],
    tau: float,
    alpha: float,
) -> tuple[NDArray[np.floating[Any]], float, float]:
    """
    Standard errors under iid errors.

    Returns:
        (standard_errors, bandwidth, sparsity)
    """
    n, p_total = X.shape
    qr = qr_decompose(X)
    p = qr.rank
    xxinv = unscaled_covariance(qr, p_total)

    bandwidth = hall_sheather_bandwidth(tau, n, alpha)
    pz = int(np.sum(np.abs(resid) < ZERO_RESIDUAL_EPS))
    h = max(p + 1, int(np.ceil(n * bandwidth)))
    # 1-based ranks pz+1 .. h+pz+1, capped at n
    ir = np.arange(pz + 1, min(h + pz + 1, n) + 1)
    ord_resid = np.sort(resid[np.argsort(np.abs(resid), kind='stable')][ir - 1])
    xt = ir / (n - p)

    Z = np.column_stack([np.ones(len(xt)), xt])
    slope_fit, _ = solve_quantile_lp(Z, ord_resid, 0.5)
    sparsity = float(slope_fit[1])

    with np.errstate(invalid='ignore'):
        se = np.sqrt(np.diag(sparsity ** 2 * xxinv * tau * (1.0 - tau)))
    return se, bandwidth, sparsity
