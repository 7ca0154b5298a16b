"""
Tests for the sample autocorrelation function.
"""

import numpy as np
import pytest

from pyregdiag.diagnostics import acf, ACFSolution
from pyregdiag.diagnostics._acf import default_nlags
from pyregdiag.regression import fit
from pyregdiag.core.exceptions import DimensionError, ValidationError


class TestACF:

    def test_r_reference(self):
        # acf(1:5, plot = FALSE)
        result = acf(np.arange(1.0, 6.0))
        assert isinstance(result, ACFSolution)
        np.testing.assert_allclose(result.acf, [1.0, 0.4, -0.1, -0.4, -0.4])
        np.testing.assert_array_equal(result.lags, np.arange(5))

    def test_lag_zero_is_one(self, rng):
        result = acf(rng.standard_normal(50), nlags=5)
        assert result.acf[0] == 1.0
        assert result.nlags == 5

    def test_bound(self, rng):
        result = acf(rng.standard_normal(100))
        assert result.bound == pytest.approx(1.96 / 10.0)

    def test_ar1_detected(self, ar1_series):
        X, y = ar1_series
        model = fit(X, y)
        result = acf(model)
        assert result.data_name == 'residuals'
        assert result.acf[1] > 0.5
        assert 1 in result.significant_lags

    def test_white_noise_mostly_inside(self, rng):
        result = acf(rng.standard_normal(500), nlags=20)
        assert len(result.significant_lags) <= 4

    def test_no_demean(self):
        x = np.array([1.0, 1.0, 1.0, 1.0])
        result = acf(x, demean=False, nlags=2)
        np.testing.assert_allclose(result.acf, [1.0, 0.75, 0.5])

    def test_summary(self, rng):
        s = acf(rng.standard_normal(30), data_name='e').summary()
        assert "Autocorrelations of series 'e'" in s
        assert "Approximate 95% bound" in s


class TestDefaultLags:

    @pytest.mark.parametrize("n,expected", [(5, 4), (16, 12), (100, 20), (200, 23)])
    def test_values(self, n, expected):
        assert default_nlags(n) == expected


class TestValidation:

    def test_nlags_too_large(self):
        with pytest.raises(ValidationError, match="nlags"):
            acf(np.arange(5.0), nlags=5)

    def test_nlags_zero(self):
        with pytest.raises(ValidationError, match="nlags"):
            acf(np.arange(5.0), nlags=0)

    def test_constant_series(self):
        with pytest.raises(ValidationError, match="zero variance"):
            acf(np.ones(10))

    def test_two_dimensional(self):
        with pytest.raises(DimensionError):
            acf(np.ones((5, 2)))
