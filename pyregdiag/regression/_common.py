"""
Parameter payloads for linear regression.

Frozen data containers that go inside Result[P] envelopes. No methods,
no computation.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class LinearParams:
    """
    Parameter payload for OLS / WLS.

    rss and the residual-based quantities are on the weighted scale;
    residuals and fitted_values are on the response scale.
    """
    coefficients: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    weighted_residuals: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    cov_unscaled: NDArray[np.floating[Any]]
    hat_values: NDArray[np.floating[Any]]
    rss: float
    mss: float
    rank: int
    df_residual: int


@dataclass(frozen=True)
class AnovaTableRow:
    """One row of an F-test table (a model term, lack of fit, pure error)."""
    term: str
    df: int
    sum_sq: float
    mean_sq: float
    f_value: float | None
    p_value: float | None


@dataclass(frozen=True)
class LackOfFitParams:
    """Pure-error lack-of-fit decomposition of the residual sum of squares."""
    table: tuple[AnovaTableRow, ...]
    n_groups: int
    n_obs: int
    rss: float
    df_residual: int


@dataclass(frozen=True)
class CompareRow:
    """One model in a nested-model comparison (R's anova(m1, m2))."""
    res_df: int
    rss: float
    df: int | None
    sum_sq: float | None
    f_value: float | None
    p_value: float | None
