"""
Tests for psi functions.
"""

import numpy as np
import pytest

from pyregdiag.robust.psi import HuberPsi, HampelPsi, BisquarePsi, resolve_psi
from pyregdiag.core.exceptions import ValidationError


U = np.array([-10.0, -5.0, -3.0, -1.0, -0.1, 0.0, 0.1, 1.0, 3.0, 5.0, 10.0])


class TestHuber:

    def test_psi_clipped(self):
        psi = HuberPsi(k=1.345)
        np.testing.assert_allclose(psi.psi(U), np.clip(U, -1.345, 1.345))

    def test_weight_one_inside(self):
        psi = HuberPsi()
        assert psi.weight(np.array([0.0]))[0] == 1.0
        assert psi.weight(np.array([2.69]))[0] == pytest.approx(0.5)

    def test_deriv(self):
        np.testing.assert_array_equal(
            HuberPsi(k=2.0).deriv(np.array([-3.0, 1.0, 2.5])), [0.0, 1.0, 0.0]
        )

    def test_invalid_k(self):
        with pytest.raises(ValidationError):
            HuberPsi(k=0.0)


class TestHampel:

    def test_three_parts(self):
        psi = HampelPsi(a=2.0, b=4.0, c=8.0)
        out = psi.psi(np.array([1.0, 3.0, 6.0, 9.0, -3.0]))
        np.testing.assert_allclose(out, [1.0, 2.0, 1.0, 0.0, -2.0], atol=1e-12)

    def test_redescends_to_zero(self):
        psi = HampelPsi()
        assert psi.weight(np.array([8.0, 20.0])) == pytest.approx([0.0, 0.0])

    def test_deriv_negative_on_descending_part(self):
        psi = HampelPsi(a=2.0, b=4.0, c=8.0)
        assert psi.deriv(np.array([6.0]))[0] == pytest.approx(-0.5)

    def test_invalid_constants(self):
        with pytest.raises(ValidationError):
            HampelPsi(a=4.0, b=2.0, c=8.0)


class TestBisquare:

    def test_zero_beyond_c(self):
        psi = BisquarePsi(c=4.685)
        assert np.all(psi.weight(np.array([4.685, 5.0, -10.0])) == 0.0)

    def test_psi_formula(self):
        psi = BisquarePsi(c=4.0)
        u = np.array([1.0, -2.0])
        expected = u * (1 - (u / 4.0) ** 2) ** 2
        np.testing.assert_allclose(psi.psi(u), expected)

    def test_deriv_matches_finite_difference(self):
        psi = BisquarePsi()
        u = np.array([0.5, 1.5, 3.0])
        eps = 1e-6
        numeric = (psi.psi(u + eps) - psi.psi(u - eps)) / (2 * eps)
        np.testing.assert_allclose(psi.deriv(u), numeric, rtol=1e-5)


class TestResolve:

    @pytest.mark.parametrize("name,cls", [
        ('huber', HuberPsi), ('Hampel', HampelPsi), ('bisquare', BisquarePsi),
    ])
    def test_by_name(self, name, cls):
        assert isinstance(resolve_psi(name), cls)

    def test_tuning_passed(self):
        assert resolve_psi('huber', k=2.0).tuning == {'k': 2.0}

    def test_instance_passthrough(self):
        psi = BisquarePsi(c=3.0)
        assert resolve_psi(psi) is psi

    def test_instance_with_tuning_rejected(self):
        with pytest.raises(ValidationError):
            resolve_psi(HuberPsi(), k=1.0)

    def test_unknown(self):
        with pytest.raises(ValidationError, match="Available"):
            resolve_psi('cauchy')

    def test_repr(self):
        assert repr(HuberPsi()) == "HuberPsi(k=1.345)"
