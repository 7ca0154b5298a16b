"""
Solver dispatch for linear regression.

Public API:
    fit(X, y, ...) -> LinearSolution
    lack_of_fit(model) -> LackOfFitSolution
    compare(reduced, full) -> CompareSolution
"""

from typing import Any, Literal, Sequence
import numpy as np

from pyregdiag.core.result import Result
from pyregdiag.core.exceptions import ValidationError
from pyregdiag.regression.design import Design, as_design
from pyregdiag.regression.solution import (
    LinearSolution,
    LackOfFitSolution,
    CompareSolution,
)
from pyregdiag.regression.backends.cpu import CPUQRBackend
from pyregdiag.regression._lack_of_fit import lack_of_fit_impl, compare_impl


BackendChoice = Literal['auto', 'cpu', 'cpu_qr']


def fit(
    X: Any,
    y: Any = None,
    *,
    weights: Any = None,
    names: Sequence[str] | None = None,
    backend: BackendChoice = 'auto',
) -> LinearSolution:
    """
    Fit a linear model by ordinary or weighted least squares.

    Solves:
        min_b  sum_i w_i (y_i - x_i'b)^2       (w_i = 1 for OLS)

    Args:
        X: Design matrix (n x p) or a Design. X is used as given: include
            a column of ones for an intercept (Design.from_datasource adds
            one by default).
        y: Response vector (n,). Required when X is an array.
        weights: Prior weights (n,), finite and strictly positive. For
            known error SDs use weights = 1 / sd**2.
        names: Coefficient names for summaries.
        backend: 'auto', 'cpu' or 'cpu_qr' (all the same CPU QR solver).

    Returns:
        LinearSolution with coefficients, inference, influence measures
        and summary()

    Raises:
        ValidationError: If inputs are invalid
        DimensionError: If X and y have inconsistent dimensions

    Example:
        >>> from pyregdiag.datasets import load_dataset
        >>> from pyregdiag.regression import Design, fit
        >>> ds = load_dataset('strongx')
        >>> design = Design.from_datasource(ds, x='energy', y='crossx')
        >>> result = fit(design, weights=1 / ds['sd'] ** 2)
        >>> print(result.summary())
    """
    design = as_design(X, y, weights=weights, names=names)
    backend_impl = _get_backend(backend)
    result = backend_impl.solve(design)
    return LinearSolution(_result=result, _design=design)


def lack_of_fit(model: LinearSolution) -> LackOfFitSolution:
    """
    Pure-error lack-of-fit F test for a fitted linear model.

    Requires replicated design points (identical rows of X).

    Raises:
        ValidationError: If there are no replicates or the model leaves no
            degrees of freedom for lack of fit
    """
    if not isinstance(model, LinearSolution):
        raise ValidationError(
            f"lack_of_fit: expected a LinearSolution, got {type(model).__name__}"
        )
    design = model.design
    params = lack_of_fit_impl(
        design.X,
        design.y,
        design.weights,
        model.rss,
        model.df_residual,
    )
    result = Result(
        params=params,
        info={'method': 'pure_error'},
        timing=None,
        backend_name='cpu',
    )
    return LackOfFitSolution(_result=result)


def compare(reduced: LinearSolution, full: LinearSolution) -> CompareSolution:
    """
    F test comparing two nested linear models (R's anova(reduced, full)).

    Raises:
        ValidationError: If the models were fit to different data or the
            reduced model does not have more residual df
    """
    if reduced.n_obs != full.n_obs or not np.array_equal(reduced.design.y, full.design.y):
        raise ValidationError("compare: models must be fit to the same response")
    rows = compare_impl(reduced.rss, reduced.df_residual, full.rss, full.df_residual)
    return CompareSolution(_rows=rows)


def _get_backend(choice: BackendChoice) -> CPUQRBackend:
    if choice in ('auto', 'cpu', 'cpu_qr'):
        return CPUQRBackend()
    raise ValueError(f"Unknown backend: {choice!r}")
