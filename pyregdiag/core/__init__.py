"""
Core infrastructure for pyregdiag.

Shared abstractions used by every model family (regression, gls, robust)
and by the diagnostics.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    datasource: Named-column data container
    compute: Timing, tolerances, QR kernels
"""

from pyregdiag.core.result import Result
from pyregdiag.core.datasource import DataSource
from pyregdiag.core.exceptions import (
    RegDiagError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
    NotPositiveDefiniteError,
    ConvergenceError,
)

__all__ = [
    "Result",
    "DataSource",
    "RegDiagError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "NotPositiveDefiniteError",
    "ConvergenceError",
]
