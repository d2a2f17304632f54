import math

import pytest

from li6sim.scattering import MultipleScattering, PolyScattering, RadiationLengthScattering


def test_multiple_scattering_inverse_in_energy():
    scat = MultipleScattering(3.0, 1.0e20, 6.0)
    assert scat.theta_rms(10.0, 0.5) == pytest.approx(2.0 * scat.theta_rms(20.0, 0.5))


def test_multiple_scattering_thickness_power():
    scat = MultipleScattering(2.0, 1.0e20, 6.0)
    ratio = scat.theta_rms(10.0, 1.0) / scat.theta_rms(10.0, 0.25)
    assert ratio == pytest.approx(4.0**0.55)


def test_multiple_scattering_zero_thickness():
    scat = MultipleScattering(1.0, 1.0e20, 1.0)
    assert scat.theta_rms(5.0, 0.0) == 0.0


def test_screening_parameter_uses_bohr_radius():
    scat = MultipleScattering(1.0, 1.0, 1.0)
    assert scat.a == pytest.approx(0.885 * 0.529e-8 / math.sqrt(2.0))


def test_poly_target_atom_counts():
    poly = PolyScattering(3.0, 3.2)
    assert poly.n_hydrogen == pytest.approx(2.0 * poly.n_carbon)
    assert poly.hydrogen.z_target == 1.0
    assert poly.carbon.z_target == 6.0


def test_poly_combines_in_quadrature():
    poly = PolyScattering(2.0, 3.0)
    h = poly.hydrogen.theta_rms(20.0, 0.7)
    c = poly.carbon.theta_rms(20.0, 0.7)
    assert poly.theta_rms(20.0, 0.7) == pytest.approx(math.sqrt(h * h + c * c))
    assert poly.theta_rms(20.0, 0.7) > max(h, c)


def test_radiation_length_scaling():
    scat = RadiationLengthScattering(1.0e20, 6.0)
    base = scat.theta_rms(1.0, 10.0, 0.25)
    assert scat.theta_rms(1.0, 10.0, 1.0) == pytest.approx(2.0 * base)
    assert scat.theta_rms(2.0, 10.0, 0.25) == pytest.approx(2.0 * base)
    assert scat.theta_rms(1.0, 20.0, 0.25) == pytest.approx(0.5 * base)


def test_radiation_length_factor_grows_with_thickness():
    thin = RadiationLengthScattering(1.0e19, 6.0)
    thick = RadiationLengthScattering(4.0e19, 6.0)
    assert thick.factor == pytest.approx(2.0 * thin.factor)