"""
CPU backend for robust M-estimation via IRLS.

Matches MASS::rlm (method="M", init="ls"):

    b, r <- least squares fit
    for iteration 1..max_iter:
        r_old = r
        s = median(|r|) / 0.6745                (scale_est='MAD')
          or Huber's proposal 2                 (scale_est='Huber')
        if s == 0: stop (exact fit)
        w = psi(r / s) / (r / s)
        b, r <- weighted least squares with weights w
        delta = sqrt(sum((r_old - r)^2) / max(1e-20, sum(r_old^2)))
        if delta <= tol: converged

Standard errors follow summary.rlm (method="XtX"): Huber's kappa-corrected
sandwich, kappa = 1 + p var(psi') / (n mean(psi')^2).
"""

from typing import Any
import warnings

import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pyregdiag.core.result import Result
from pyregdiag.core.compute.timing import Timer
from pyregdiag.core.compute.linalg.qr import (
    qr_decompose,
    qr_solve,
    unscaled_covariance,
    fitted_from_coefficients,
)
from pyregdiag.core.exceptions import ConvergenceError
from pyregdiag.regression.design import Design
from pyregdiag.robust.psi import Psi
from pyregdiag.robust._common import RobustParams

MAD_CONSTANT = 0.6745
# Huber proposal 2 truncation constant (MASS default k2)
HUBER_K2 = 1.345


class CPUIRLSBackend:
    """CPU backend using IRLS with a QR inner solve."""

    @property
    def name(self) -> str:
        return 'cpu_irls'

    def solve(
        self,
        design: Design,
        psi: Psi,
        *,
        scale_est: str = 'MAD',
        tol: float = 1e-4,
        max_iter: int = 20,
        strict: bool = False,
    ) -> Result[RobustParams]:
        timer = Timer()
        timer.start()

        X, y = design.X, design.y
        n = design.n
        warnings_list: list[str] = []

        with timer.section('initial_fit'):
            coefficients, qr = qr_solve(X, y)
            resid = y - fitted_from_coefficients(X, coefficients)

        rank = qr.rank
        n1 = n - rank
        theta = 2.0 * sp_stats.norm.cdf(HUBER_K2) - 1.0
        gamma = theta + HUBER_K2 ** 2 * (1.0 - theta) - 2.0 * HUBER_K2 * sp_stats.norm.pdf(HUBER_K2)
        scale = float(np.median(np.abs(resid)) / MAD_CONSTANT)

        converged = False
        delta = float('nan')
        w = np.ones(n, dtype=np.float64)
        n_iter = 0

        with timer.section('irls'):
            for iteration in range(1, max_iter + 1):
                n_iter = iteration
                resid_old = resid

                if scale_est == 'MAD':
                    scale = float(np.median(np.abs(resid)) / MAD_CONSTANT)
                else:
                    clipped = np.minimum(resid ** 2, (HUBER_K2 * scale) ** 2)
                    scale = float(np.sqrt(np.sum(clipped) / (n1 * gamma)))
                if scale == 0.0:
                    converged = True
                    warnings_list.append("scale estimate is zero: exact fit of a majority of points")
                    break

                w = psi.weight(resid / scale)
                sqrt_w = np.sqrt(w)
                coefficients, qr = qr_solve(X * sqrt_w[:, np.newaxis], y * sqrt_w)
                resid = y - fitted_from_coefficients(X, coefficients)

                delta = float(np.sqrt(
                    np.sum((resid_old - resid) ** 2) / max(1e-20, float(np.sum(resid_old ** 2)))
                ))
                if delta <= tol:
                    converged = True
                    break

        if not converged:
            msg = f"IRLS failed to converge in {max_iter} steps (delta={delta:.3g})"
            if strict:
                raise ConvergenceError(
                    msg,
                    iterations=n_iter,
                    final_change=delta,
                    reason='max_iterations',
                    threshold=tol,
                )
            warnings.warn(msg, RuntimeWarning, stacklevel=3)
            warnings_list.append(msg)

        with timer.section('standard_errors'):
            standard_errors = self._standard_errors(X, resid, scale, psi, design.p)

        fitted_values = fitted_from_coefficients(X, coefficients)
        timer.stop()

        params = RobustParams(
            coefficients=coefficients,
            standard_errors=standard_errors,
            residuals=y - fitted_values,
            fitted_values=fitted_values,
            weights=w,
            scale=scale,
            psi_name=psi.name,
            tuning=psi.tuning,
            rank=rank,
            df_residual=n - rank,
            n_iter=n_iter,
            converged=converged,
            final_change=delta,
        )

        return Result(
            params=params,
            info={
                'method': 'irls_qr',
                'scale_est': scale_est,
                'psi': repr(psi),
                'converged': converged,
                'iterations': n_iter,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )

    @staticmethod
    def _standard_errors(
        X: NDArray,
        resid: NDArray,
        scale: float,
        psi: Psi,
        p_total: int,
    ) -> NDArray:
        """summary.rlm standard errors, method='XtX'."""
        n = len(resid)
        qr = qr_decompose(X)
        p = qr.rank
        if scale == 0.0 or n - p <= 0:
            return np.full(p_total, np.nan, dtype=np.float64)

        u = resid / scale
        S = float(np.sum((resid * psi.weight(u)) ** 2) / (n - p))
        psiprime = psi.deriv(u)
        mn = float(np.mean(psiprime))
        if mn <= 0:
            return np.full(p_total, np.nan, dtype=np.float64)
        kappa = 1.0 + p * float(np.var(psiprime, ddof=1)) / (n * mn ** 2)
        stddev = np.sqrt(S) * kappa / mn

        with np.errstate(invalid='ignore'):
            rowlen = np.sqrt(np.diag(unscaled_covariance(qr, p_total)))
        return rowlen * stddev
