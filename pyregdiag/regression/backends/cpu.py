"""
CPU reference backend for OLS and WLS.

Weighted least squares is solved as OLS on the transformed system
sqrt(w)·X, sqrt(w)·y, exactly as R's lm.wfit does. Hat values come from
the Q factor of the transformed system.
"""

from typing import Any
import numpy as np

from pyregdiag.core.result import Result
from pyregdiag.core.compute.timing import Timer
from pyregdiag.core.compute.linalg.qr import (
    qr_solve,
    unscaled_covariance,
    fitted_from_coefficients,
)
from pyregdiag.regression.design import Design
from pyregdiag.regression._common import LinearParams


class CPUQRBackend:
    """
    CPU backend using rank-revealing QR.

    Matches R's lm() / lm(weights=) including aliased coefficients (NaN)
    for rank-deficient designs.
    """

    @property
    def name(self) -> str:
        return 'cpu_qr'

    def solve(self, design: Design) -> Result[LinearParams]:
        """
        Solve (weighted) least squares.

        Algorithm:
            1. Transform: X~ = sqrt(w) X, y~ = sqrt(w) y
            2. Rank-revealing QR of X~, solve b = R^-1 Q'y~
            3. Residuals, hat values, mss/rss on the weighted scale
        """
        timer = Timer()
        timer.start()

        X, y = design.X, design.y
        n, p = design.n, design.p
        w = design.weights if design.weights is not None else np.ones(n)
        sqrt_w = np.sqrt(w)

        with timer.section('qr_solve'):
            coefficients, qr = qr_solve(X * sqrt_w[:, np.newaxis], y * sqrt_w)

        with timer.section('residuals'):
            fitted_values = fitted_from_coefficients(X, coefficients)
            residuals = y - fitted_values
            weighted_residuals = sqrt_w * residuals
            hat_values = np.sum(qr.Q ** 2, axis=1)

        with timer.section('statistics'):
            rss = float(weighted_residuals @ weighted_residuals)
            if design.has_intercept:
                center = float(np.sum(w * fitted_values) / np.sum(w))
                mss = float(np.sum(w * (fitted_values - center) ** 2))
            else:
                mss = float(np.sum(w * fitted_values ** 2))
            cov_unscaled = unscaled_covariance(qr, p)

        timer.stop()

        warnings_list: list[str] = []
        if qr.rank < p:
            aliased = [design.names[j] for j in qr.aliased]
            warnings_list.append(
                f"{p - qr.rank} coefficient(s) not defined because of "
                f"singularities: {aliased}"
            )

        params = LinearParams(
            coefficients=coefficients,
            residuals=residuals,
            weighted_residuals=weighted_residuals,
            fitted_values=fitted_values,
            cov_unscaled=cov_unscaled,
            hat_values=hat_values,
            rss=rss,
            mss=mss,
            rank=qr.rank,
            df_residual=n - qr.rank,
        )

        info: dict[str, Any] = {
            'method': 'wls_qr' if design.weights is not None else 'qr',
            'rank': qr.rank,
            'pivot': qr.pivot.tolist(),
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
