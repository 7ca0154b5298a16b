"""
Tests for the AR(1) correlation structure and whitening transform.
"""

import numpy as np
import pytest

from pyregdiag.gls._correlation import ar1_correlation, make_whitener


class TestAR1Correlation:

    def test_entries(self):
        R = ar1_correlation(0.5, np.arange(4.0))
        assert R[0, 0] == 1.0
        assert R[0, 1] == pytest.approx(0.5)
        assert R[0, 3] == pytest.approx(0.125)
        np.testing.assert_allclose(R, R.T)

    def test_negative_phi_alternates(self):
        R = ar1_correlation(-0.5, np.arange(3.0))
        assert R[0, 1] == pytest.approx(-0.5)
        assert R[0, 2] == pytest.approx(0.25)

    def test_zero_phi_identity(self):
        np.testing.assert_array_equal(ar1_correlation(0.0, np.arange(5.0)), np.eye(5))

    def test_time_gaps(self):
        R = ar1_correlation(0.5, np.array([0.0, 1.0, 3.0]))
        assert R[1, 2] == pytest.approx(0.25)


class TestWhitener:

    def test_whitened_covariance_is_identity(self):
        time = np.arange(6.0)
        w = np.array([1.0, 2.0, 0.5, 1.0, 4.0, 1.0])
        whitener = make_whitener(0.7, time, w)
        D = np.diag(1.0 / np.sqrt(w))
        V = D @ ar1_correlation(0.7, time) @ D
        M = whitener.apply(np.eye(6))
        np.testing.assert_allclose(M @ V @ M.T, np.eye(6), atol=1e-10)

    def test_log_determinant(self):
        time = np.arange(6.0)
        w = np.array([1.0, 2.0, 0.5, 1.0, 4.0, 1.0])
        whitener = make_whitener(-0.3, time, w)
        D = np.diag(1.0 / np.sqrt(w))
        _, logdet = np.linalg.slogdet(D @ ar1_correlation(-0.3, time) @ D)
        assert whitener.log_det == pytest.approx(logdet)

    def test_apply_vector_and_matrix_agree(self):
        whitener = make_whitener(0.4, np.arange(5.0), None)
        v = np.arange(5.0)
        np.testing.assert_allclose(
            whitener.apply(v), whitener.apply(v[:, np.newaxis]).ravel()
        )
