"""
Solver dispatch for generalized least squares.

Public API:
    gls(X, y, ...) -> GLSSolution
"""

from typing import Any, Sequence

import numpy as np

from pyregdiag.core.exceptions import ValidationError
from pyregdiag.core.validation import (
    check_array,
    check_1d,
    check_finite,
    check_consistent_length,
    check_in_range,
)
from pyregdiag.regression.design import as_design
from pyregdiag.gls._common import VALID_METHODS, VALID_CORRELATIONS
from pyregdiag.gls.backends.cpu import CPUGLSBackend
from pyregdiag.gls.solution import GLSSolution


def gls(
    X: Any,
    y: Any = None,
    *,
    correlation: str | None = 'ar1',
    method: str = 'REML',
    phi: float | None = None,
    time: Any = None,
    weights: Any = None,
    names: Sequence[str] | None = None,
    tol: float = 1e-8,
    max_iter: int = 500,
    strict: bool = False,
) -> GLSSolution:
    """
    Generalized least squares with AR(1) correlated errors.

    Model:
        y = X b + e,   Var(e) = sigma^2 D R(phi) D,   R_ij = phi^|t_i - t_j|

    Args:
        X: Design matrix (n x p) or a Design
        y: Response (n,). Required when X is an array.
        correlation: 'ar1' or None (independent errors)
        method: 'REML' (default, as nlme::gls) or 'ML'
        phi: Fix the autocorrelation instead of estimating it
        time: Integer time index, strictly increasing. Defaults to 0..n-1,
            i.e. equally spaced observations in row order.
        weights: Prior weights (variance of e_i proportional to 1/w_i)
        names: Coefficient names
        tol: Tolerance on atanh(phi) for the optimiser
        max_iter: Maximum optimiser iterations
        strict: Raise ConvergenceError instead of warning on non-convergence

    Returns:
        GLSSolution

    Raises:
        ValidationError: On invalid inputs

    Example:
        >>> ds = load_dataset('longley')
        >>> design = Design.from_datasource(ds, x=['gnp', 'population'], y='employed')
        >>> result = gls(design, time=ds['year'])
        >>> result.phi
    """
    if correlation not in VALID_CORRELATIONS:
        raise ValidationError(
            f"correlation must be one of {VALID_CORRELATIONS}, got {correlation!r}"
        )
    if method not in VALID_METHODS:
        raise ValidationError(f"method must be one of {VALID_METHODS}, got {method!r}")
    if phi is not None:
        if correlation is None:
            raise ValidationError("phi given but correlation is None")
        check_in_range(float(phi), 'phi', low=-1.0, high=1.0)

    design = as_design(X, y, weights=weights, names=names)

    if time is None:
        time_arr = np.arange(design.n, dtype=np.float64)
    else:
        time_arr = check_array(time, 'time')
        check_1d(time_arr, 'time')
        check_finite(time_arr, 'time')
        check_consistent_length(time_arr, design.y, names=('time', 'y'))
        if not np.all(time_arr == np.round(time_arr)):
            raise ValidationError("time: must be integer-valued")
        if np.any(np.diff(time_arr) <= 0):
            raise ValidationError("time: must be strictly increasing")

    if design.n - design.p < 1:
        raise ValidationError(
            f"gls: need more observations than coefficients, got n={design.n}, p={design.p}"
        )

    result = CPUGLSBackend().solve(
        design,
        time=time_arr,
        correlation=correlation,
        method=method,
        phi=phi,
        tol=tol,
        max_iter=max_iter,
        strict=strict,
    )
    return GLSSolution(_result=result, _design=design)
