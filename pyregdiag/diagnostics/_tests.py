"""
Residual diagnostic test implementations.

Each function takes validated arrays and returns TestParams.
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pyregdiag.core.compute.linalg.qr import qr_solve, fitted_from_coefficients
from pyregdiag.diagnostics._acf import acf_impl
from pyregdiag.diagnostics._common import TestParams


def durbin_watson_impl(resid: NDArray[np.floating[Any]]) -> float:
    return float(np.sum(np.diff(resid) ** 2) / np.sum(resid ** 2))


def breusch_pagan_impl(
    X: NDArray[np.floating[Any]],
    resid: NDArray[np.floating[Any]],
    data_name: str,
) -> TestParams:
    """
    Koenker's studentized Breusch-Pagan test (lmtest::bptest default).

    Regress e^2 on X (with intercept); BP = n R^2 ~ chi^2(rank - 1).
    """
    n = len(resid)
    if not np.any(np.all(X == 1.0, axis=0)):
        X = np.column_stack([np.ones(n), X])
    u = resid ** 2
    beta, qr = qr_solve(X, u)
    fitted = fitted_from_coefficients(X, beta)
    r2 = float(np.sum((fitted - u.mean()) ** 2) / np.sum((u - u.mean()) ** 2))
    statistic = n * r2
    df = qr.rank - 1
    return TestParams(
        statistic=statistic,
        statistic_name="BP",
        parameter={"df": float(df)},
        p_value=float(sp_stats.chi2.sf(statistic, df)),
        method="studentized Breusch-Pagan test",
        data_name=data_name,
        extras={"r_squared": r2},
    )


def box_test_impl(
    x: NDArray[np.floating[Any]],
    lag: int,
    kind: str,
    fitdf: int,
    data_name: str,
) -> TestParams:
    """Box-Pierce and Ljung-Box portmanteau tests (R's Box.test)."""
    n = len(x)
    obs = acf_impl(x, lag)[1:]
    if kind == "box-pierce":
        method = "Box-Pierce test"
        statistic = n * float(np.sum(obs ** 2))
    else:
        method = "Box-Ljung test"
        statistic = n * (n + 2) * float(np.sum(obs ** 2 / (n - np.arange(1, lag + 1))))
    df = lag - fitdf
    return TestParams(
        statistic=statistic,
        statistic_name="X-squared",
        parameter={"df": float(df)},
        p_value=float(sp_stats.chi2.sf(statistic, df)),
        method=method,
        data_name=data_name,
    )


def shapiro_impl(x: NDArray[np.floating[Any]], data_name: str) -> TestParams:
    res = sp_stats.shapiro(x)
    return TestParams(
        statistic=float(res.statistic),
        statistic_name="W",
        parameter=None,
        p_value=float(res.pvalue),
        method="Shapiro-Wilk normality test",
        data_name=data_name,
    )


def outlier_test_impl(
    rstudent: NDArray[np.floating[Any]],
    df_residual: int,
    data_name: str,
) -> TestParams:
    """
    Bonferroni test on the largest |studentized residual| (car::outlierTest).

    rstudent_i ~ t(df_residual - 1); the unadjusted two-sided p-value is
    multiplied by n and capped at 1.
    """
    n = len(rstudent)
    df = df_residual - 1
    idx = int(np.nanargmax(np.abs(rstudent)))
    t_max = float(rstudent[idx])
    p_unadj = float(2.0 * sp_stats.t.sf(abs(t_max), df))
    return TestParams(
        statistic=t_max,
        statistic_name="rstudent",
        parameter={"df": float(df)},
        p_value=min(1.0, n * p_unadj),
        method="Bonferroni outlier test",
        data_name=data_name,
        extras={"index": idx, "observation": idx + 1, "unadjusted_p_value": p_unadj},
    )
