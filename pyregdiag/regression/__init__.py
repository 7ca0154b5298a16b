"""
Linear regression by ordinary and weighted least squares.

Public API:
    fit(X, y, weights=...) -> LinearSolution
    lack_of_fit(model) -> LackOfFitSolution
    compare(reduced, full) -> CompareSolution

Example:
    >>> from pyregdiag.regression import Design, fit, lack_of_fit
    >>> design = Design.from_datasource(ds, x='fe', y='loss')
    >>> model = fit(design)
    >>> print(lack_of_fit(model).summary())
"""

from pyregdiag.regression.design import Design
from pyregdiag.regression.solution import (
    LinearSolution,
    LackOfFitSolution,
    CompareSolution,
)
from pyregdiag.regression._common import LinearParams
from pyregdiag.regression.solvers import fit, lack_of_fit, compare

__all__ = [
    "fit",
    "lack_of_fit",
    "compare",
    "Design",
    "LinearSolution",
    "LackOfFitSolution",
    "CompareSolution",
    "LinearParams",
]
