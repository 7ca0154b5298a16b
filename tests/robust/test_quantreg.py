"""
Tests for quantile and LAD regression.
"""

import numpy as np
import pytest
from scipy import stats

from pyregdiag.robust import quantreg, lad, QuantileSolution
from pyregdiag.robust._quantreg import hall_sheather_bandwidth
from pyregdiag.core.exceptions import ValidationError


def check_loss(r, tau):
    return float(np.sum(r * (tau - (r < 0))))


class TestQuantreg:

    def test_intercept_only_median(self, rng):
        y = rng.standard_normal(21)
        result = lad(np.ones((21, 1)), y)
        assert result.coefficients[0] == pytest.approx(np.median(y))

    def test_intercept_only_quantile(self, rng):
        y = rng.standard_normal(21)
        result = quantreg(np.ones((21, 1)), y, tau=0.25)
        # n * tau = 5.25, so the 6th order statistic
        assert result.coefficients[0] == pytest.approx(np.sort(y)[5])

    def test_objective_is_check_loss(self, stackloss_design):
        result = quantreg(stackloss_design, tau=0.3)
        assert result.objective == pytest.approx(check_loss(result.residuals, 0.3), abs=1e-6)

    def test_sign_balance(self, cars_design):
        tau = 0.75
        result = quantreg(cars_design, tau=tau, se=None)
        r = result.residuals
        n = len(r)
        # about tau * n residuals fall below the tau-th regression quantile
        assert np.sum(r < -1e-8) <= tau * n + cars_design.p
        assert np.sum(r > 1e-8) <= (1 - tau) * n + cars_design.p

    def test_interpolates_p_points(self, stackloss_design):
        result = lad(stackloss_design)
        assert np.sum(np.abs(result.residuals) < 1e-6) >= stackloss_design.p

    def test_not_worse_than_ols_in_check_loss(self, cars_design):
        result = quantreg(cars_design, tau=0.9, se=None)
        beta_ols = np.linalg.lstsq(cars_design.X, cars_design.y, rcond=None)[0]
        r_ols = cars_design.y - cars_design.X @ beta_ols
        assert result.objective <= check_loss(r_ols, 0.9) + 1e-8

    def test_stackloss_against_quantreg(self, stackloss_design):
        # coef(rq(stack.loss ~ ., stackloss))
        result = lad(stackloss_design)
        assert isinstance(result, QuantileSolution)
        np.testing.assert_allclose(
            result.coefficients, [-39.68986, 0.83188, 0.57391, -0.06087], atol=1e-4
        )

    def test_summary_names_lad(self, stackloss_design):
        assert "LAD" in lad(stackloss_design).summary()


class TestStandardErrors:

    def test_iid_standard_errors_positive(self, cars_design):
        result = quantreg(cars_design)
        assert result.standard_errors is not None
        assert np.all(result.standard_errors > 0)
        assert result.sparsity > 0
        assert result.p_values.shape == (2,)

    def test_se_none(self, cars_design):
        result = quantreg(cars_design, se=None)
        assert result.standard_errors is None
        assert result.t_statistics is None
        assert result.p_values is None

    def test_sparsity_calibrated_for_normal_errors(self):
        # sparsity 1 / f(F^-1(1/2)) is sqrt(2 pi) for standard normal errors;
        # a single Hall-Sheather estimate is noisy, so average over samples
        n = 400
        estimates = []
        for seed in range(30):
            rng = np.random.default_rng(seed)
            x = rng.uniform(0, 1, n)
            X = np.column_stack([np.ones(n), x])
            y = 1.0 + x + rng.standard_normal(n)
            estimates.append(lad(X, y).sparsity)
        assert np.mean(estimates) == pytest.approx(np.sqrt(2 * np.pi), rel=0.15)

    def test_standard_errors_scale_with_sparsity(self, rng):
        n = 400
        x = rng.uniform(0, 1, n)
        X = np.column_stack([np.ones(n), x])
        y = 1.0 + x + rng.standard_normal(n)
        result = lad(X, y)
        xxinv = np.linalg.inv(X.T @ X)
        expected = result.sparsity * np.sqrt(0.25 * np.diag(xxinv))
        np.testing.assert_allclose(result.standard_errors, expected, rtol=1e-10)

    def test_hall_sheather_formula(self):
        tau, n, alpha = 0.5, 100, 0.05
        x0 = stats.norm.ppf(tau)
        f0 = stats.norm.pdf(x0)
        expected = (
            n ** (-1 / 3) * stats.norm.ppf(1 - alpha / 2) ** (2 / 3)
            * (1.5 * f0 ** 2 / (2 * x0 ** 2 + 1)) ** (1 / 3)
        )
        assert hall_sheather_bandwidth(tau, n, alpha) == pytest.approx(expected)

    def test_bandwidth_shrinks_with_n(self):
        assert hall_sheather_bandwidth(0.5, 1000) < hall_sheather_bandwidth(0.5, 100)


class TestValidation:

    @pytest.mark.parametrize("tau", [0.0, 1.0, -0.2, 1.5])
    def test_tau_range(self, cars_design, tau):
        with pytest.raises(ValidationError, match="tau"):
            quantreg(cars_design, tau=tau)

    def test_unknown_se(self, cars_design):
        with pytest.raises(ValidationError, match="se"):
            quantreg(cars_design, se='boot')

    def test_rank_deficient_warns(self, collinear_data):
        X, y = collinear_data
        with pytest.warns(RuntimeWarning, match="rank deficient"):
            quantreg(X, y, se=None)
