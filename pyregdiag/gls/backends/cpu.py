"""
CPU backend for GLS with AR(1) errors.

For fixed phi the model is ordinary least squares on the whitened system
L^-1 D^-1 X, L^-1 D^-1 y (see _correlation). sigma and beta are profiled
out analytically, leaving a one-dimensional likelihood in phi:

    ML:    l(phi) = -n/2 (log 2pi + 1 + log(RSS/n)) - 1/2 log|V|
    REML:  l(phi) = -(n-r)/2 (log 2pi + 1 + log(RSS/(n-r)))
                    - 1/2 log|V| - log|det R_X|

where RSS is the whitened residual sum of squares, V = D R(phi) D,
r = rank(X) and R_X is the triangular QR factor of the whitened X.
phi is optimised on the atanh scale with bounded Brent search.
"""

from dataclasses import dataclass
from typing import Any
import warnings

import numpy as np
from numpy.typing import NDArray
from scipy.optimize import minimize_scalar

from pyregdiag.core.result import Result
from pyregdiag.core.compute.timing import Timer
from pyregdiag.core.compute.linalg.qr import (
    QRResult,
    qr_solve,
    unscaled_covariance,
    fitted_from_coefficients,
)
from pyregdiag.core.exceptions import ConvergenceError
from pyregdiag.regression.design import Design
from pyregdiag.gls._common import GLSParams
from pyregdiag.gls._correlation import Whitener, make_whitener

# Search interval for atanh(phi); tanh(6) = 0.99998
Z_MAX = 6.0
# Step for the numerical second derivative on the atanh scale
CURVATURE_STEP = 1e-3


@dataclass(frozen=True)
class _ProfileFit:
    log_likelihood: float
    coefficients: NDArray[np.floating[Any]]
    qr: QRResult
    whitener: Whitener
    rss: float


def profile_fit(
    design: Design,
    time: NDArray[np.floating[Any]],
    phi: float,
    method: str,
) -> _ProfileFit:
    """Whitened QR fit and profile log-likelihood at a fixed phi."""
    n = design.n
    whitener = make_whitener(phi, time, design.weights)
    X_w = whitener.apply(design.X)
    y_w = whitener.apply(design.y)
    beta, qr = qr_solve(X_w, y_w)
    resid_w = y_w - fitted_from_coefficients(X_w, beta)
    rss = float(resid_w @ resid_w)

    if method == 'ML':
        N = n
        ll = -0.5 * N * (np.log(2 * np.pi) + 1.0 + np.log(rss / N)) - 0.5 * whitener.log_det
    else:
        N = n - qr.rank
        ll = (
            -0.5 * N * (np.log(2 * np.pi) + 1.0 + np.log(rss / N))
            - 0.5 * whitener.log_det
            - float(np.sum(np.log(np.abs(np.diag(qr.R)))))
        )
    return _ProfileFit(
        log_likelihood=float(ll),
        coefficients=beta,
        qr=qr,
        whitener=whitener,
        rss=rss,
    )


class CPUGLSBackend:
    """CPU backend: profile likelihood in phi, whitened QR for beta."""

    @property
    def name(self) -> str:
        return 'cpu_gls'

    def solve(
        self,
        design: Design,
        *,
        time: NDArray[np.floating[Any]],
        correlation: str | None,
        method: str,
        phi: float | None,
        tol: float,
        max_iter: int,
        strict: bool,
    ) -> Result[GLSParams]:
        timer = Timer()
        timer.start()

        warnings_list: list[str] = []
        converged = True
        n_eval = 0
        phi_se_z = float('nan')

        if correlation is None:
            phi_hat = 0.0
            estimated = False
        elif phi is not None:
            phi_hat = float(phi)
            estimated = False
        else:
            estimated = True

            def objective(z: float) -> float:
                return -profile_fit(design, time, float(np.tanh(z)), method).log_likelihood

            with timer.section('optimize_phi'):
                opt = minimize_scalar(
                    objective,
                    bounds=(-Z_MAX, Z_MAX),
                    method='bounded',
                    options={'xatol': tol, 'maxiter': max_iter},
                )
            n_eval = int(opt.nfev)
            z_hat = float(opt.x)
            phi_hat = float(np.tanh(z_hat))
            converged = bool(opt.success)

            if not converged:
                msg = (
                    f"AR(1) likelihood optimisation did not converge after "
                    f"{n_eval} evaluations (phi={phi_hat:.6g}): {opt.message}"
                )
                if strict:
                    raise ConvergenceError(
                        msg, iterations=n_eval, reason='max_iterations', threshold=tol,
                    )
                warnings.warn(msg, RuntimeWarning, stacklevel=3)
                warnings_list.append(msg)

            if abs(z_hat) > Z_MAX - 1e-3:
                msg = f"phi estimate on the search boundary (phi={phi_hat:.6g})"
                warnings.warn(msg, RuntimeWarning, stacklevel=3)
                warnings_list.append(msg)

            with timer.section('curvature'):
                h = CURVATURE_STEP
                f0 = -float(opt.fun)
                fp = -objective(z_hat + h)
                fm = -objective(z_hat - h)
                d2 = (fp - 2.0 * f0 + fm) / h ** 2
                if d2 < 0:
                    phi_se_z = float(1.0 / np.sqrt(-d2))

        with timer.section('final_fit'):
            fit = profile_fit(design, time, phi_hat, method)

        n = design.n
        rank = fit.qr.rank
        df_residual = n - rank
        denom = n if method == 'ML' else df_residual
        sigma = float(np.sqrt(fit.rss / denom))

        fitted = fitted_from_coefficients(design.X, fit.coefficients)
        residuals = design.y - fitted
        normalized = fit.whitener.apply(residuals) / sigma

        timer.stop()

        params = GLSParams(
            coefficients=fit.coefficients,
            cov_unscaled=unscaled_covariance(fit.qr, design.p),
            residuals=residuals,
            normalized_residuals=normalized,
            fitted_values=fitted,
            sigma=sigma,
            phi=phi_hat,
            phi_se_z=phi_se_z,
            phi_estimated=estimated,
            log_likelihood=fit.log_likelihood,
            rank=rank,
            df_residual=df_residual,
            method=method,
            correlation=correlation,
            converged=converged,
            n_evaluations=n_eval,
        )

        return Result(
            params=params,
            info={
                'method': method,
                'correlation': correlation,
                'converged': converged,
                'n_evaluations': n_eval,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
