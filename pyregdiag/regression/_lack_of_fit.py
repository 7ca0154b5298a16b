"""
Lack-of-fit and nested-model F tests.

Lack of fit: with replicated design points the residual sum of squares
splits into pure error (variation of y within groups of identical X rows,
which no mean function can remove) and lack of fit (the rest). Under a
correct mean function the two mean squares estimate the same sigma^2:

    F = (SS_lof / df_lof) / (SS_pe / df_pe)
    df_pe  = n - g           (g = number of distinct rows of X)
    df_lof = df_residual - df_pe

This equals R's anova(fit, lm(y ~ factor(x))) for the corrosion example.
Weighted fits use weighted within-group means and weighted sums.
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pyregdiag.core.exceptions import ValidationError
from pyregdiag.regression._common import AnovaTableRow, LackOfFitParams, CompareRow


def replicate_groups(X: NDArray[np.floating[Any]]) -> tuple[NDArray[np.intp], int]:
    """
    Label rows of X by distinct design point.

    Returns:
        (labels, n_groups) with labels in 0..n_groups-1
    """
    _, labels = np.unique(X, axis=0, return_inverse=True)
    labels = np.asarray(labels).ravel()
    return labels, int(labels.max()) + 1


def lack_of_fit_impl(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    weights: NDArray[np.floating[Any]] | None,
    rss: float,
    df_residual: int,
) -> LackOfFitParams:
    """
    Pure-error decomposition of a fitted model's residual sum of squares.

    Raises:
        ValidationError: If X has no replicated rows, or the model is
            saturated (no degrees of freedom for lack of fit)
    """
    n = len(y)
    w = weights if weights is not None else np.ones(n)
    labels, n_groups = replicate_groups(X)

    df_pe = n - n_groups
    if df_pe <= 0:
        raise ValidationError(
            "lack_of_fit: no replicated design points, pure error cannot be "
            "estimated"
        )

    sw = np.bincount(labels, weights=w, minlength=n_groups)
    group_means = np.bincount(labels, weights=w * y, minlength=n_groups) / sw
    ss_pe = float(np.sum(w * (y - group_means[labels]) ** 2))

    df_lof = df_residual - df_pe
    if df_lof <= 0:
        raise ValidationError(
            f"lack_of_fit: model has {df_residual} residual df and pure error "
            f"uses {df_pe}; no degrees of freedom remain for lack of fit"
        )
    ss_lof = max(rss - ss_pe, 0.0)

    ms_lof = ss_lof / df_lof
    ms_pe = ss_pe / df_pe
    if ms_pe > 0:
        f_val = ms_lof / ms_pe
        p_val = float(sp_stats.f.sf(f_val, df_lof, df_pe))
    else:
        f_val = float('inf') if ms_lof > 0 else float('nan')
        p_val = 0.0 if ms_lof > 0 else float('nan')

    table = (
        AnovaTableRow('Lack of fit', df_lof, ss_lof, ms_lof, float(f_val), p_val),
        AnovaTableRow('Pure error', df_pe, ss_pe, ms_pe, None, None),
        AnovaTableRow('Residuals', df_residual, rss, rss / df_residual, None, None),
    )
    return LackOfFitParams(
        table=table,
        n_groups=n_groups,
        n_obs=n,
        rss=rss,
        df_residual=df_residual,
    )


def compare_impl(
    rss_reduced: float,
    df_reduced: int,
    rss_full: float,
    df_full: int,
) -> tuple[CompareRow, CompareRow]:
    """
    F test of a reduced model against a larger one containing it.

    The denominator uses the larger model's residual mean square, as R's
    anova.lmlist does.
    """
    df_diff = df_reduced - df_full
    if df_diff <= 0:
        raise ValidationError(
            f"compare: reduced model must have more residual df than the full "
            f"model, got {df_reduced} and {df_full}"
        )
    ss_diff = rss_reduced - rss_full
    f_val = (ss_diff / df_diff) / (rss_full / df_full)
    p_val = float(sp_stats.f.sf(f_val, df_diff, df_full))
    return (
        CompareRow(res_df=df_reduced, rss=rss_reduced, df=None, sum_sq=None,
                   f_value=None, p_value=None),
        CompareRow(res_df=df_full, rss=rss_full, df=df_diff, sum_sq=ss_diff,
                   f_value=float(f_val), p_value=p_val),
    )
