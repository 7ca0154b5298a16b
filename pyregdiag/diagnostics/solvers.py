"""
Residual diagnostics.

Provides R-named checks on the errors of a fitted model: acf(),
durbin_watson(), breusch_pagan(), box_test(), shapiro_test() and
outlier_test(). Functions that take residuals accept either an array or
any fitted solution with a `residuals` attribute.
"""

from __future__ import annotations

from typing import Any, Literal

import numpy as np
from numpy.typing import NDArray

from pyregdiag.core.result import Result
from pyregdiag.core.exceptions import ValidationError
from pyregdiag.core.validation import (
    check_array,
    check_finite,
    check_1d,
    check_min_samples,
)
from pyregdiag.diagnostics._common import VALID_BOX_KINDS, ACF_BAND_Z, ACFParams
from pyregdiag.diagnostics._acf import acf_impl, default_nlags
from pyregdiag.diagnostics._tests import (
    durbin_watson_impl,
    breusch_pagan_impl,
    box_test_impl,
    shapiro_impl,
    outlier_test_impl,
)
from pyregdiag.diagnostics.solution import TestSolution, ACFSolution


def _series(x: Any, name: str, data_name: str | None) -> tuple[NDArray, str]:
    """Extract a validated 1D series and its display name."""
    if hasattr(x, 'residuals') and not isinstance(x, np.ndarray):
        arr = np.asarray(x.residuals, dtype=np.float64)
        label = data_name or 'residuals'
    else:
        arr = check_array(x, name)
        label = data_name or name
    check_1d(arr, name)
    check_finite(arr, name)
    return arr, label


def _wrap(params, info: dict[str, Any]) -> TestSolution:
    return TestSolution(_result=Result(
        params=params,
        info=info,
        timing=None,
        backend_name='cpu',
    ))


def acf(
    x: Any,
    *,
    nlags: int | None = None,
    demean: bool = True,
    data_name: str | None = None,
) -> ACFSolution:
    """
    Sample autocorrelation function. Matches R acf(plot=FALSE).

    Args:
        x: Series or fitted model (its residuals are used)
        nlags: Largest lag. Default floor(10 log10 n), at most n - 1.
        demean: Subtract the mean before computing covariances
        data_name: Label for summaries and plots

    Returns:
        ACFSolution with lags 0..nlags and the 1.96/sqrt(n) bound

    Raises:
        ValidationError: If x has fewer than 2 values, is constant, or
            nlags is out of range
    """
    arr, label = _series(x, 'x', data_name)
    check_min_samples(arr, 2, 'x')
    n = len(arr)
    if nlags is None:
        nlags = default_nlags(n)
    if not 1 <= nlags <= n - 1:
        raise ValidationError(f"nlags must be in [1, {n - 1}], got {nlags}")
    centred = arr - arr.mean() if demean else arr
    if not np.any(centred):
        raise ValidationError("x: series has zero variance")

    params = ACFParams(
        lags=np.arange(nlags + 1),
        acf=acf_impl(arr, nlags, demean),
        n_obs=n,
        bound=ACF_BAND_Z / np.sqrt(n),
        demean=demean,
        data_name=label,
    )
    return ACFSolution(_result=Result(
        params=params,
        info={'method': 'biased', 'nlags': nlags},
        timing=None,
        backend_name='cpu',
    ))


def durbin_watson(residuals: Any) -> float:
    """
    Durbin-Watson statistic sum((e_t - e_{t-1})^2) / sum(e_t^2).

    Near 2 for uncorrelated errors; well below 2 indicates positive
    first-order autocorrelation.
    """
    arr, _ = _series(residuals, 'residuals', None)
    check_min_samples(arr, 2, 'residuals')
    if not np.any(arr):
        raise ValidationError("residuals: all zero")
    return durbin_watson_impl(arr)


def breusch_pagan(model: Any, *, data_name: str = 'model') -> TestSolution:
    """
    Koenker's studentized Breusch-Pagan test for non-constant variance.

    Matches lmtest::bptest(model) with its default studentize=TRUE for
    unweighted fits. For a weighted least-squares fit the test is applied
    to the transformed model: the weighted residuals sqrt(w) e are
    regressed on sqrt(w) X, so it checks whether the weights have removed
    the heteroscedasticity. (bptest itself ignores prior weights.)

    Args:
        model: Fitted solution with `design` and `residuals`
        data_name: Label for summary()

    Raises:
        ValidationError: If model lacks a design or has constant squared
            residuals
    """
    if not (hasattr(model, 'design') and hasattr(model, 'residuals')):
        raise ValidationError(
            f"breusch_pagan: expected a fitted model, got {type(model).__name__}"
        )
    X = model.design.X
    resid = np.asarray(model.residuals, dtype=np.float64)
    weights = getattr(model.design, 'weights', None)
    if weights is not None:
        sw = np.sqrt(weights)
        X = X * sw[:, np.newaxis]
        resid = resid * sw
    u = resid ** 2
    if np.allclose(u, u.mean()):
        raise ValidationError("breusch_pagan: squared residuals are constant")
    params = breusch_pagan_impl(X, resid, data_name)
    return _wrap(params, {'studentize': True, 'weighted': weights is not None})


def box_test(
    x: Any,
    *,
    lag: int = 1,
    kind: Literal['ljung-box', 'box-pierce'] = 'ljung-box',
    fitdf: int = 0,
    data_name: str | None = None,
) -> TestSolution:
    """
    Portmanteau test of white noise. Matches R Box.test().

    Args:
        x: Series or fitted model (its residuals are used)
        lag: Number of autocorrelations in the statistic
        kind: 'ljung-box' (default) or 'box-pierce'
        fitdf: Degrees of freedom to subtract (number of fitted ARMA terms)
        data_name: Label for summary()

    Raises:
        ValidationError: On an invalid kind, lag or fitdf
    """
    if kind not in VALID_BOX_KINDS:
        raise ValidationError(f"kind must be one of {VALID_BOX_KINDS}, got {kind!r}")
    arr, label = _series(x, 'x', data_name)
    n = len(arr)
    if not 1 <= lag <= n - 1:
        raise ValidationError(f"lag must be in [1, {n - 1}], got {lag}")
    if fitdf < 0 or lag - fitdf < 1:
        raise ValidationError(f"need 0 <= fitdf < lag, got fitdf={fitdf}, lag={lag}")
    if not np.any(arr - arr.mean()):
        raise ValidationError("x: series has zero variance")
    params = box_test_impl(arr, lag, kind, fitdf, label)
    return _wrap(params, {'lag': lag, 'kind': kind, 'fitdf': fitdf})


def shapiro_test(residuals: Any, *, data_name: str | None = None) -> TestSolution:
    """
    Shapiro-Wilk normality test of residuals. Matches R shapiro.test().

    Raises:
        ValidationError: If n is outside [3, 5000] or the values are identical
    """
    arr, label = _series(residuals, 'residuals', data_name)
    n = len(arr)
    if not 3 <= n <= 5000:
        raise ValidationError(f"shapiro_test: sample size must be between 3 and 5000, got {n}")
    if np.ptp(arr) == 0:
        raise ValidationError("shapiro_test: all values are identical")
    params = shapiro_impl(arr, label)
    return _wrap(params, {'n': n})


def outlier_test(model: Any, *, data_name: str = 'model') -> TestSolution:
    """
    Bonferroni outlier test on the largest absolute studentized residual.

    Matches the top row of car::outlierTest(model).

    Args:
        model: A LinearSolution (needs studentized_residuals)
        data_name: Label for summary()

    Raises:
        ValidationError: If the model has no studentized residuals or too
            few residual degrees of freedom
    """
    if not hasattr(model, 'studentized_residuals'):
        raise ValidationError(
            f"outlier_test: expected a least-squares fit, got {type(model).__name__}"
        )
    if model.df_residual < 2:
        raise ValidationError(
            f"outlier_test: need at least 2 residual df, got {model.df_residual}"
        )
    rstudent = np.asarray(model.studentized_residuals, dtype=np.float64)
    if not np.any(np.isfinite(rstudent)):
        raise ValidationError("outlier_test: no finite studentized residuals")
    params = outlier_test_impl(rstudent, model.df_residual, data_name)
    return _wrap(params, {'adjustment': 'bonferroni'})
