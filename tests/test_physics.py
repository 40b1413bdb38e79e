"""
Tests for the physics module.
"""

import numpy as np
import pytest

from ddabeam.physics import (
    barton5_weights,
    davis3_weights,
    fresnel_rp,
    fresnel_rs,
    fresnel_tp,
    fresnel_ts,
    fundamental_amplitude,
    inverse_reflect,
    lminus_weights,
    normalize,
    reflect,
    sqrt_cut,
)


class TestSqrtCut:
    """Tests for sqrt_cut."""

    def test_positive_real(self):
        """Test root of a positive real number."""
        assert sqrt_cut(4.0) == 2.0

    def test_negative_real(self):
        """Test root of a negative real number is positive imaginary."""
        assert sqrt_cut(-4.0) == 2j

    def test_negative_zero_imaginary(self):
        """Test sign of zero imaginary part does not flip the branch."""
        assert sqrt_cut(complex(-4.0, -0.0)) == 2j
        assert sqrt_cut(complex(-4.0, 0.0)) == 2j

    def test_complex_principal_branch(self):
        """Test complex argument uses the principal root."""
        value = complex(2.0, 1.5)
        root = sqrt_cut(value)
        assert np.isclose(root * root, value)
        assert root.real > 0


class TestFresnel:
    """Tests for Fresnel coefficients."""

    def test_matched_interface(self):
        """Test no reflection when media are identical."""
        assert np.isclose(fresnel_rs(0.8, 0.8), 0)
        assert np.isclose(fresnel_ts(0.8, 0.8), 1)
        assert np.isclose(fresnel_rp(0.8, 0.8, 1.0), 0)
        assert np.isclose(fresnel_tp(0.8, 0.8, 1.0), 1)

    def test_normal_incidence(self):
        """Test normal incidence on glass."""
        m = 1.5
        assert np.isclose(fresnel_rs(1.0, m), (1 - m) / (1 + m))
        assert np.isclose(fresnel_ts(1.0, m), 2 / (1 + m))
        # parallel coefficient has the opposite sign convention
        assert np.isclose(fresnel_rp(1.0, m, m), (m - 1) / (m + 1))
        assert np.isclose(fresnel_tp(1.0, m, m), 2 / (1 + m))

    @pytest.mark.parametrize("angle", [0.0, 15.0, 40.0, 75.0])
    def test_energy_conservation(self, angle):
        """Test |r|^2 + (kt/ki)|t|^2 = 1 for a lossless interface."""
        m = 1.5
        theta = np.radians(angle)
        ki = np.cos(theta)
        kt = sqrt_cut(m * m - np.sin(theta) ** 2)

        rs, ts = fresnel_rs(ki, kt), fresnel_ts(ki, kt)
        rp, tp = fresnel_rp(ki, kt, m), fresnel_tp(ki, kt, m)

        ratio = kt.real / ki
        assert np.isclose(abs(rs) ** 2 + ratio * abs(ts) ** 2, 1)
        assert np.isclose(abs(rp) ** 2 + ratio * abs(tp) ** 2, 1)

    def test_total_internal_reflection(self):
        """Test full reflection above the critical angle."""
        m = 1.5
        theta = np.radians(60.0)
        ki = m * np.cos(theta)
        kt = sqrt_cut(1 - (m * np.sin(theta)) ** 2)

        assert kt.imag > 0
        assert np.isclose(abs(fresnel_rs(ki, kt)), 1)
        assert np.isclose(abs(fresnel_rp(ki, kt, 1 / m)), 1)


class TestVectorHelpers:
    """Tests for vector helpers."""

    def test_reflect(self):
        """Test mirror about the XY plane."""
        assert np.allclose(reflect([1.0, 2.0, 3.0]), [1.0, 2.0, -3.0])

    def test_inverse_reflect(self):
        """Test mirrored and inverted vector."""
        assert np.allclose(inverse_reflect([1.0, 2.0, 3.0]), [-1.0, -2.0, 3.0])

    def test_reflect_does_not_modify_input(self):
        """Test helpers return copies."""
        vector = np.array([1.0, 2.0, 3.0])
        reflect(vector)
        inverse_reflect(vector)
        assert np.allclose(vector, [1.0, 2.0, 3.0])

    def test_normalize(self):
        """Test unit norm."""
        assert np.isclose(np.linalg.norm(normalize([3.0, 4.0, 12.0])), 1)


class TestGaussianExpansions:
    """Tests for aberrated Gaussian beam weights."""

    @pytest.fixture
    def point(self):
        """Scaled coordinates of a generic off-axis point."""
        x = np.array([0.7])
        y = np.array([-0.4])
        z = np.array([0.3])
        rho2 = x * x + y * y
        q, _ = fundamental_amplitude(rho2, z)
        return x, y, rho2, q

    def test_fundamental_at_waist(self):
        """Test Q = i and psi0 = 1 at the beam center."""
        q, psi0 = fundamental_amplitude(np.array([0.0]), np.array([0.0]))
        assert np.allclose(q, 1j)
        assert np.allclose(psi0, 1)

    def test_fundamental_decays_off_axis(self):
        """Test Gaussian decay of the amplitude in the waist plane."""
        _, psi0 = fundamental_amplitude(np.array([1.0]), np.array([0.0]))
        assert np.allclose(psi0, np.exp(-1.0))

    def test_lminus(self, point):
        """Test L- beam is polarized along ex."""
        x, y, rho2, q = point
        t1, t2, t3 = lminus_weights(x, y, rho2, q, 0.2)
        assert np.allclose(t1, 1)
        assert np.allclose(t2, 0)
        assert np.allclose(t3, 0)

    def test_davis_expanded_form(self, point):
        """Test Davis weights against the expanded published expressions."""
        x, y, rho2, q = point
        s = 0.2
        t1, t2, t3 = davis3_weights(x, y, rho2, q, s)

        rho4 = rho2 * rho2
        expected_t1 = 1 + s**2 * (-4 * q**2 * x**2 - 1j * q**3 * rho4)
        expected_t3 = -s * 2 * q * x + s**3 * (
            8 * q**3 * rho2 * x + 2j * q**4 * rho4 * x - 4j * q**2 * x
        )
        assert np.allclose(t1, expected_t1)
        assert np.allclose(t2, 0)
        assert np.allclose(t3, expected_t3)

    def test_barton_expanded_form(self, point):
        """Test Barton weights against the expanded published expressions."""
        x, y, rho2, q = point
        s = 0.2
        t1, t2, t3 = barton5_weights(x, y, rho2, q, s)

        rho4 = rho2 * rho2
        rho6 = rho4 * rho2
        rho8 = rho4 * rho4
        expected_t1 = (
            1
            + s**2 * (-rho2 * q**2 - 1j * rho4 * q**3 - 2 * q**2 * x**2)
            + s**4
            * (
                2 * rho4 * q**4
                + 3j * rho6 * q**5
                - 0.5 * rho8 * q**6
                + x**2 * (8 * rho2 * q**4 + 2j * rho4 * q**5)
            )
        )
        expected_t2 = s**2 * (-2 * q**2 * x * y) + s**4 * (
            x * y * (8 * rho2 * q**4 + 2j * rho4 * q**5)
        )
        expected_t3 = (
            s * (-2 * q * x)
            + s**3 * ((6 * rho2 * q**3 + 2j * rho4 * q**4) * x)
            + s**5 * ((-20 * rho4 * q**5 - 10j * rho6 * q**6 + rho8 * q**7) * x)
        )
        assert np.allclose(t1, expected_t1)
        assert np.allclose(t2, expected_t2)
        assert np.allclose(t3, expected_t3)

    @pytest.mark.parametrize("weights", [davis3_weights, barton5_weights])
    def test_precomputed_s2(self, point, weights):
        """Test supplied s^2 matches the default and is the one used."""
        x, y, rho2, q = point
        default = weights(x, y, rho2, q, 0.2)
        explicit = weights(x, y, rho2, q, 0.2, 0.04)
        for a, b in zip(default, explicit):
            assert np.allclose(a, b)

        # without the s^2 terms only the leading -2Qxs of t3 remains
        t1, t2, t3 = weights(x, y, rho2, q, 0.2, 0.0)
        assert np.allclose(t1, 1)
        assert np.allclose(t2, 0)
        assert np.allclose(t3, -2 * q * x * 0.2)

    @pytest.mark.parametrize("weights", [lminus_weights, davis3_weights, barton5_weights])
    def test_finite_on_axis(self, weights):
        """Test weights stay finite where rho = 0."""
        x = np.zeros(3)
        y = np.zeros(3)
        z = np.array([-0.5, 0.0, 0.5])
        rho2 = np.zeros(3)
        q, _ = fundamental_amplitude(rho2, z)

        for t in weights(x, y, rho2, q, 0.3):
            assert np.all(np.isfinite(t))
