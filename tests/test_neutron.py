import math

import pytest

from li6sim.constants import DEG_TO_RAD
from li6sim.neutron import NeutronArray, NeutronFragment
from li6sim.rng import RandomSource


def test_outside_angle_range_never_hits():
    array = NeutronArray(1.0, 1.5, RandomSource(1))
    assert array.hit(0.5, -100.0) is False
    assert array.hit(1.5, -100.0) is False
    assert array.hit(1.0, -100.0) is False


def test_high_energy_never_detected():
    array = NeutronArray(0.0, 3.0, RandomSource(2))
    assert not any(array.hit(1.0, 10.0) for _ in range(200))


def test_certain_detection_when_probability_exceeds_one():
    array = NeutronArray(0.0, 3.0, RandomSource(3))
    assert all(array.hit(1.0, -100.0) for _ in range(200))


def test_fragment_angle_window():
    frag = NeutronFragment(1.0, RandomSource(4))
    assert frag.theta_min == pytest.approx(65.0 * DEG_TO_RAD)
    assert frag.theta_max == pytest.approx(85.0 * DEG_TO_RAD)


def test_set_velocity_sets_energy_and_angle():
    frag = NeutronFragment(1.0, RandomSource(5))
    frag.set_velocity([0.0, 0.0, 1.0])
    assert frag.neut.theta == pytest.approx(0.0)
    assert frag.neut.energy > 0.0
    assert frag.hit() is False
    assert frag.is_hit is False


def test_newton_and_relativistic_energy_close():
    a = NeutronFragment(1.0)
    b = NeutronFragment(1.0)
    a.set_velocity([0.1, 0.0, 0.1], relativistic=True)
    b.set_velocity([0.1, 0.0, 0.1], relativistic=False)
    assert a.neut.energy == pytest.approx(b.neut.energy, rel=1e-4)


def test_detection_fraction_in_window():
    frag = NeutronFragment(1.0, RandomSource(6))
    theta = 75.0 * DEG_TO_RAD
    speed = 0.5
    frag.set_velocity([speed * math.sin(theta), 0.0, speed * math.cos(theta)])
    expected = 0.27 - 0.027 * frag.neut.energy
    hits = [frag.hit() for _ in range(4000)]
    assert frag.is_hit == hits[-1]
    assert sum(hits) / len(hits) == pytest.approx(expected, abs=0.03)