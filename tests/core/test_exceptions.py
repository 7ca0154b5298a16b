"""
Tests for the pyregdiag exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via RegDiagError)
    - Diagnostic attributes on SingularMatrixError, NotPositiveDefiniteError,
      ConvergenceError
    - Default attribute values (None for optional attributes)
"""

import pytest

from pyregdiag.core.exceptions import (
    ConvergenceError,
    DimensionError,
    NotPositiveDefiniteError,
    NumericalError,
    RegDiagError,
    SingularMatrixError,
    ValidationError,
)


# ═══════════════════════════════════════════════════════════════════════
# Inheritance hierarchy
# ═══════════════════════════════════════════════════════════════════════


class TestInheritance:
    """Every exception is catchable via RegDiagError."""

    @pytest.mark.parametrize("exc", [
        ValidationError("bad input"),
        DimensionError("wrong shape"),
        NumericalError("computation failed"),
        SingularMatrixError("singular"),
        NotPositiveDefiniteError("not PD"),
        ConvergenceError("did not converge", iterations=20),
    ])
    def test_catchable_as_base(self, exc):
        with pytest.raises(RegDiagError):
            raise exc

    def test_dimension_error_is_validation_error(self):
        assert issubclass(DimensionError, ValidationError)

    def test_singular_matrix_error_is_numerical_error(self):
        assert issubclass(SingularMatrixError, NumericalError)

    def test_not_positive_definite_is_numerical_error(self):
        assert issubclass(NotPositiveDefiniteError, NumericalError)

    def test_convergence_error_is_not_numerical_error(self):
        err = ConvergenceError("did not converge", iterations=100)
        assert not isinstance(err, NumericalError)


# ═══════════════════════════════════════════════════════════════════════
# Diagnostic attributes
# ═══════════════════════════════════════════════════════════════════════


class TestSingularMatrixError:

    def test_all_attributes(self):
        err = SingularMatrixError(
            "X is rank deficient",
            matrix_name="X",
            condition_number=1e18,
            rank=2,
            expected_rank=3,
        )
        assert str(err) == "X is rank deficient"
        assert err.matrix_name == "X"
        assert err.condition_number == 1e18
        assert err.rank == 2
        assert err.expected_rank == 3

    def test_defaults_are_none(self):
        err = SingularMatrixError("singular")
        assert err.matrix_name is None
        assert err.condition_number is None
        assert err.rank is None
        assert err.expected_rank is None


class TestNotPositiveDefiniteError:

    def test_attributes(self):
        err = NotPositiveDefiniteError(
            "Cholesky failed", matrix_name="R(phi)", min_eigenvalue=-1e-9
        )
        assert err.matrix_name == "R(phi)"
        assert err.min_eigenvalue == pytest.approx(-1e-9)

    def test_defaults_are_none(self):
        err = NotPositiveDefiniteError("not PD")
        assert err.matrix_name is None
        assert err.min_eigenvalue is None


class TestConvergenceError:

    def test_all_attributes(self):
        err = ConvergenceError(
            "IRLS did not converge",
            iterations=20,
            final_change=3e-3,
            reason="max_iterations",
            threshold=1e-4,
        )
        assert err.iterations == 20
        assert err.final_change == 3e-3
        assert err.reason == "max_iterations"
        assert err.threshold == 1e-4

    def test_required_iterations(self):
        err = ConvergenceError("failed", 42)
        assert err.iterations == 42

    def test_defaults_are_none(self):
        err = ConvergenceError("failed", iterations=10)
        assert err.final_change is None
        assert err.reason is None
        assert err.threshold is None
