"""
Diagnostics for the errors of a fitted regression.

Public API:
    acf(x, nlags=None) -> ACFSolution
    durbin_watson(residuals) -> float
    breusch_pagan(model) -> TestSolution
    box_test(x, lag=1, kind='ljung-box') -> TestSolution
    shapiro_test(residuals) -> TestSolution
    outlier_test(model) -> TestSolution
"""

from pyregdiag.diagnostics.solvers import (
    acf,
    durbin_watson,
    breusch_pagan,
    box_test,
    shapiro_test,
    outlier_test,
)
from pyregdiag.diagnostics.solution import TestSolution, ACFSolution
from pyregdiag.diagnostics._common import TestParams, ACFParams

__all__ = [
    "acf",
    "durbin_watson",
    "breusch_pagan",
    "box_test",
    "shapiro_test",
    "outlier_test",
    "TestSolution",
    "ACFSolution",
    "TestParams",
    "ACFParams",
]
