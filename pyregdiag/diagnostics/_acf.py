"""
Sample autocorrelation function.

Biased estimator, as R's acf():

    c_k = (1/n) sum_{t=1}^{n-k} (x_t - xbar)(x_{t+k} - xbar)
    r_k = c_k / c_0
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray


def default_nlags(n: int) -> int:
    """R's lag.max default: floor(10 log10 n), at most n - 1."""
    return int(min(np.floor(10.0 * np.log10(n)), n - 1))


def acf_impl(
    x: NDArray[np.floating[Any]],
    nlags: int,
    demean: bool = True,
) -> NDArray[np.floating[Any]]:
    """Autocorrelations at lags 0..nlags."""
    n = len(x)
    xc = x - np.mean(x) if demean else x
    c0 = float(np.dot(xc, xc)) / n
    out = np.empty(nlags + 1, dtype=np.float64)
    out[0] = 1.0
    for k in range(1, nlags + 1):
        out[k] = float(np.dot(xc[:n - k], xc[k:])) / n / c0
    return out
