"""
Exception hierarchy for pyregdiag.

All exceptions inherit from RegDiagError so callers can catch any
library-specific error in one place. Numerical failures carry the
diagnostic values needed to act on them.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages state the actual vs expected values
    - Never catch and re-raise with less information
"""


class RegDiagError(Exception):
    """Base exception for all pyregdiag errors."""
    pass


class ValidationError(RegDiagError):
    """
    Input validation failed.

    Raised at public entry points when user-provided inputs fail checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.
    """
    pass


class NumericalError(RegDiagError):
    """
    Numerical computation failed.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or numerically rank-deficient.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        condition_number: Estimated condition number, if available
        rank: Numerical rank, if computed
        expected_rank: Rank required by the operation
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number
        self.rank = rank
        self.expected_rank = expected_rank


class ConvergenceError(RegDiagError):
    """
    Iterative algorithm failed to converge.

    Raised by IRLS (robust M-estimation) or the AR(1) likelihood optimiser
    when the caller asked for strict convergence.

    Attributes:
        iterations: Number of iterations completed
        final_change: Final convergence criterion value
        reason: Why convergence failed (e.g. 'max_iterations')
        threshold: The threshold that was not met
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        final_change: float | None = None,
        reason: str | None = None,
        threshold: float | None = None
    ):
        super().__init__(message)
        self.iterations = iterations
        self.final_change = final_change
        self.reason = reason
        self.threshold = threshold


class NotPositiveDefiniteError(NumericalError):
    """
    Matrix is not positive definite.

    Raised when a Cholesky factorisation fails, e.g. an AR(1) correlation
    matrix evaluated at |phi| numerically equal to 1.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        min_eigenvalue: Minimum eigenvalue, if computed
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        min_eigenvalue: float | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.min_eigenvalue = min_eigenvalue
