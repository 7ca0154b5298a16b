"""
Tests for least trimmed squares.
"""

import numpy as np
import pytest

from pyregdiag.robust import lts, LTSSolution
from pyregdiag.robust._lts import consistency_factor
from pyregdiag.core.exceptions import ValidationError


@pytest.fixture
def leverage_outliers(rng):
    """Line with a cluster of bad leverage points that drags OLS."""
    n = 60
    x = rng.uniform(0, 5, n)
    y = 3.0 - 1.5 * x + rng.standard_normal(n) * 0.3
    x[:12] = rng.uniform(14, 16, 12)
    y[:12] = rng.uniform(18, 20, 12)
    X = np.column_stack([np.ones(n), x])
    return X, y


class TestLTS:

    def test_returns_solution(self, stackloss_design):
        result = lts(stackloss_design, seed=1)
        assert isinstance(result, LTSSolution)
        assert result.quantile == (21 + 4 + 1) // 2
        assert len(result.best_subset) == result.quantile

    def test_criterion_is_trimmed_sum(self, stackloss_design):
        result = lts(stackloss_design, seed=1)
        r2 = np.sort(result.residuals ** 2)
        assert result.criterion == pytest.approx(np.sum(r2[:result.quantile]))

    def test_best_subset_fit_is_least_squares(self, stackloss_design):
        result = lts(stackloss_design, seed=1)
        idx = result.best_subset
        X, y = stackloss_design.X[idx], stackloss_design.y[idx]
        beta = np.linalg.lstsq(X, y, rcond=None)[0]
        np.testing.assert_allclose(result.coefficients, beta, atol=1e-8)

    def test_resists_leverage_points(self, leverage_outliers):
        X, y = leverage_outliers
        result = lts(X, y, seed=0)
        np.testing.assert_allclose(result.coefficients, [3.0, -1.5], atol=0.3)
        assert np.all(result.outliers[:12])
        assert result.outliers[12:].sum() <= 3

    def test_stackloss_outliers(self, stackloss_design):
        # observations 1, 3, 4 and 21 in R's numbering
        result = lts(stackloss_design, seed=1)
        flagged = set(np.flatnonzero(result.outliers))
        assert {0, 2, 3, 20} <= flagged

    def test_seed_reproducible(self, stackloss_design):
        a = lts(stackloss_design, seed=7)
        b = lts(stackloss_design, seed=7)
        np.testing.assert_array_equal(a.coefficients, b.coefficients)

    def test_exhaustive_for_small_problems(self):
        x = np.arange(10.0)
        y = 2.0 * x + 1.0
        y[9] = 100.0
        X = np.column_stack([np.ones(10), x])
        result = lts(X, y, n_samples=500)
        assert result.info['exhaustive']
        np.testing.assert_allclose(result.coefficients, [1.0, 2.0], atol=1e-10)
        assert result.criterion == pytest.approx(0.0, abs=1e-12)

    def test_full_coverage_is_ols(self, cars_design):
        result = lts(cars_design, quantile=cars_design.n, seed=0)
        beta = np.linalg.lstsq(cars_design.X, cars_design.y, rcond=None)[0]
        np.testing.assert_allclose(result.coefficients, beta, atol=1e-8)

    def test_scales_positive(self, stackloss_design):
        result = lts(stackloss_design, seed=1)
        assert result.raw_scale > 0
        assert result.scale > 0

    def test_summary(self, stackloss_design):
        s = lts(stackloss_design, seed=1).summary()
        assert "trimmed squares" in s.lower()


class TestConsistencyFactor:

    def test_no_trimming(self):
        assert consistency_factor(50, 50) == 1.0

    def test_inflates_scale_when_trimming(self):
        assert consistency_factor(50, 26) > 1.0
        assert consistency_factor(50, 26) > consistency_factor(50, 40)


class TestValidation:

    def test_quantile_too_small(self, stackloss_design):
        with pytest.raises(ValidationError, match="quantile"):
            lts(stackloss_design, quantile=4)

    def test_quantile_too_large(self, stackloss_design):
        with pytest.raises(ValidationError, match="quantile"):
            lts(stackloss_design, quantile=22)

    def test_n_samples(self, stackloss_design):
        with pytest.raises(ValidationError, match="n_samples"):
            lts(stackloss_design, n_samples=0)
