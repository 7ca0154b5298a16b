"""
Least trimmed squares.

LTS minimises the sum of the h smallest squared residuals. The search
follows FAST-LTS (Rousseeuw & Van Driessen, 2006):

    1. Elemental starts: exact fits through p observations, all
       C(n, p) subsets when that is at most n_samples, otherwise
       n_samples random subsets.
    2. Two concentration steps (C-steps) per start: refit by least
       squares on the h observations with the smallest squared residuals.
       Each C-step cannot increase the criterion.
    3. The best N_REFINE starts are iterated to convergence.

Scales:
    raw    sqrt(crit / h), made consistent at the normal by the factor
           1 / sqrt(1 - 2 n q phi(q) / h), q = Phi^-1((n + h) / 2n)
    final  root mean square of the residuals with |r / raw| <= 2.5,
           on (count - p) degrees of freedom
"""

from itertools import combinations
from math import comb
from typing import Any, Iterator

import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pyregdiag.core.compute.linalg.qr import qr_solve
from pyregdiag.core.exceptions import SingularMatrixError
from pyregdiag.robust._common import LTSParams

N_REFINE = 10
INITIAL_CSTEPS = 2
OUTLIER_CUTOFF = 2.5


def _criterion(resid: NDArray, h: int) -> float:
    return float(np.sum(np.partition(resid ** 2, h - 1)[:h]))


def _c_step(X: NDArray, y: NDArray, resid: NDArray, h: int) -> tuple[NDArray, NDArray, NDArray]:
    subset = np.argsort(resid ** 2, kind='stable')[:h]
    beta, _ = qr_solve(X[subset], y[subset])
    beta = np.where(np.isnan(beta), 0.0, beta)
    return beta, y - X @ beta, np.sort(subset)


def _elemental_subsets(
    n: int,
    p: int,
    n_samples: int,
    rng: np.random.Generator,
) -> tuple[Iterator[tuple[int, ...]], bool]:
    if comb(n, p) <= n_samples:
        return combinations(range(n), p), True

    def draws() -> Iterator[tuple[int, ...]]:
        for _ in range(n_samples):
            yield tuple(rng.choice(n, size=p, replace=False))
    return draws(), False


def consistency_factor(n: int, h: int) -> float:
    """Normal-consistency factor for the raw LTS scale."""
    if h >= n:
        return 1.0
    q = sp_stats.norm.ppf((n + h) / (2.0 * n))
    return float(1.0 / np.sqrt(1.0 - 2.0 * n * q * sp_stats.norm.pdf(q) / h))


def lts_impl(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    *,
    h: int,
    n_samples: int,
    rng: np.random.Generator,
    max_csteps: int,
) -> LTSParams:
    """
    Run the FAST-LTS search.

    Raises:
        SingularMatrixError: If every elemental subset is singular
    """
    n, p = X.shape
    subsets, exhaustive = _elemental_subsets(n, p, n_samples, rng)

    starts: list[tuple[float, NDArray]] = []
    n_tried = 0
    for idx in subsets:
        n_tried += 1
        rows = list(idx)
        beta, qr = qr_solve(X[rows], y[rows])
        if qr.rank < p:
            continue
        resid = y - X @ beta
        for _ in range(INITIAL_CSTEPS):
            beta, resid, _ = _c_step(X, y, resid, h)
        starts.append((_criterion(resid, h), beta))

    if not starts:
        raise SingularMatrixError(
            f"lts: all {n_tried} elemental subsets of size {p} are singular",
            matrix_name='X',
            expected_rank=p,
        )

    starts.sort(key=lambda item: item[0])
    best_crit = np.inf
    best_beta = starts[0][1]
    best_subset = np.arange(h)

    for crit, beta in starts[:N_REFINE]:
        resid = y - X @ beta
        subset = None
        for _ in range(max_csteps):
            beta, resid, new_subset = _c_step(X, y, resid, h)
            new_crit = _criterion(resid, h)
            if subset is not None and np.array_equal(new_subset, subset):
                crit = new_crit
                break
            subset = new_subset
            crit = new_crit
        if crit < best_crit:
            best_crit = crit
            best_beta = beta
            best_subset = subset

    fitted = X @ best_beta
    resid = y - fitted
    raw_scale = float(np.sqrt(best_crit / h) * consistency_factor(n, h))

    if raw_scale > 0:
        keep = np.abs(resid / raw_scale) <= OUTLIER_CUTOFF
        scale = float(np.sqrt(np.sum(resid[keep] ** 2) / max(int(keep.sum()) - p, 1)))
    else:
        scale = 0.0

    return LTSParams(
        coefficients=best_beta,
        residuals=resid,
        fitted_values=fitted,
        best_subset=np.asarray(best_subset, dtype=np.intp),
        quantile=h,
        criterion=float(best_crit),
        raw_scale=raw_scale,
        scale=scale,
        n_samples=n_tried,
        exhaustive=exhaustive,
    )
