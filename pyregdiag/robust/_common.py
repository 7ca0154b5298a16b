"""
Parameter payloads for robust regression.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class RobustParams:
    """M-estimation (IRLS) payload."""
    coefficients: NDArray[np.floating[Any]]
    standard_errors: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    weights: NDArray[np.floating[Any]]
    scale: float
    psi_name: str
    tuning: dict[str, float]
    rank: int
    df_residual: int
    n_iter: int
    converged: bool
    final_change: float


@dataclass(frozen=True)
class LTSParams:
    """Least trimmed squares payload."""
    coefficients: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    best_subset: NDArray[np.intp]
    quantile: int
    criterion: float
    raw_scale: float
    scale: float
    n_samples: int
    exhaustive: bool


@dataclass(frozen=True)
class QuantileParams:
    """Quantile regression payload."""
    coefficients: NDArray[np.floating[Any]]
    standard_errors: NDArray[np.floating[Any]] | None
    residuals: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    tau: float
    objective: float
    se_method: str | None
    bandwidth: float | None
    sparsity: float | None
    rank: int
    df_residual: int
