"""
Common types for residual diagnostics.

TestParams maps to R's htest class (the subset of fields the residual
tests use); ACFParams carries a sample autocorrelation function.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray


VALID_BOX_KINDS = ("ljung-box", "box-pierce")

# Normal quantile for the approximate 95% white-noise band
ACF_BAND_Z = 1.96


@dataclass(frozen=True)
class TestParams:
    """
    Parameter payload for diagnostic tests.

    Attributes
    ----------
    statistic : float
        Test statistic value.
    statistic_name : str
        Name of the statistic ("BP", "X-squared", "W", "rstudent").
    parameter : dict or None
        Distribution parameters, e.g. {"df": 3}.
    p_value : float
        p-value of the test (Bonferroni-adjusted for the outlier test).
    method : str
        Human-readable method name.
    data_name : str
        Description of the data.
    extras : dict or None
        Test-specific outputs (e.g. the flagged observation).
    """
    __test__ = False

    statistic: float
    statistic_name: str
    parameter: dict[str, float] | None
    p_value: float
    method: str
    data_name: str
    extras: dict[str, Any] | None = None


@dataclass(frozen=True)
class ACFParams:
    """Sample autocorrelations for lags 0..nlags (acf[0] == 1)."""
    lags: NDArray[np.intp]
    acf: NDArray[np.floating[Any]]
    n_obs: int
    bound: float
    demean: bool
    data_name: str
