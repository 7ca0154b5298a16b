"""
Tests for input validation utilities.
"""

import numpy as np
import pandas as pd
import pytest

from pyregdiag.core.exceptions import DimensionError, ValidationError
from pyregdiag.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_consistent_length,
    check_finite,
    check_in_range,
    check_min_samples,
    check_weights,
)


# ═══════════════════════════════════════════════════════════════════════
# check_array
# ═══════════════════════════════════════════════════════════════════════


class TestCheckArray:

    def test_list_to_float_array(self):
        result = check_array([1, 2, 3], "X")
        assert result.dtype == np.float64
        np.testing.assert_array_equal(result, [1.0, 2.0, 3.0])

    def test_pandas_series(self):
        result = check_array(pd.Series([1, 2, 3]), "x")
        assert result.dtype == np.float64
        assert result.shape == (3,)

    def test_rejects_mixed_types(self):
        with pytest.raises(ValidationError, match="object dtype"):
            check_array([None, 1, 2.0], "X")

    def test_rejects_strings(self):
        with pytest.raises(ValidationError, match="non-numeric dtype"):
            check_array(["a", "b", "c"], "X")


# ═══════════════════════════════════════════════════════════════════════
# Shape and value checks
# ═══════════════════════════════════════════════════════════════════════


class TestChecks:

    def test_check_finite_reports_counts(self):
        with pytest.raises(ValidationError, match="1 NaN, 1 Inf"):
            check_finite(np.array([1.0, np.nan, np.inf]), "y")

    def test_check_1d_rejects_2d(self):
        with pytest.raises(DimensionError, match="expected 1D"):
            check_1d(np.ones((2, 2)), "y")

    def test_check_2d_rejects_1d(self):
        with pytest.raises(DimensionError, match="expected 2D"):
            check_2d(np.ones(3), "X")

    def test_consistent_length(self):
        check_consistent_length(np.ones(3), np.ones(3), names=("a", "b"))
        with pytest.raises(DimensionError, match="a=3, b=4"):
            check_consistent_length(np.ones(3), np.ones(4), names=("a", "b"))

    def test_consistent_length_name_mismatch(self):
        with pytest.raises(ValueError):
            check_consistent_length(np.ones(3), names=("a", "b"))

    def test_min_samples(self):
        with pytest.raises(ValidationError, match="at least 5"):
            check_min_samples(np.ones((3, 2)), 5, "X")

    def test_weights_must_be_positive(self):
        check_weights(np.array([0.5, 1.0, 2.0]))
        with pytest.raises(ValidationError, match="strictly positive"):
            check_weights(np.array([1.0, 0.0, 2.0]))

    def test_weights_must_be_finite(self):
        with pytest.raises(ValidationError, match="non-finite"):
            check_weights(np.array([1.0, np.inf]))

    def test_in_range_exclusive(self):
        check_in_range(0.5, "tau", low=0.0, high=1.0)
        with pytest.raises(ValidationError, match=r"\(0, 1\)"):
            check_in_range(1.0, "tau", low=0.0, high=1.0)

    def test_in_range_inclusive(self):
        check_in_range(1.0, "level", low=0.0, high=1.0, inclusive=True)
        with pytest.raises(ValidationError, match=r"\[0, 1\]"):
            check_in_range(1.5, "level", low=0.0, high=1.0, inclusive=True)
