import math
from types import SimpleNamespace

import pytest

from li6sim.decay import Decay
from li6sim.frame import Frame
from li6sim.rng import RandomSource


def make_parts(masses):
    return [SimpleNamespace(real=Frame(a), recon=Frame(a)) for a in masses]


def boost(decay, vz, relativistic):
    for frame in decay.real:
        frame.transform_velocity([0.0, 0.0, vz], relativistic)


def test_needs_two_fragments():
    with pytest.raises(ValueError):
        Decay(make_parts([4.0]), True, RandomSource(1))


def test_masses():
    decay = Decay(make_parts([2.0, 4.0]), True, RandomSource(1))
    assert decay.sum_a == 6.0
    assert decay.mass1 == 2.0
    assert decay.mass2 == 4.0


def test_two_body_balances_momentum():
    decay = Decay(make_parts([1.0, 6.0]), True, RandomSource(3))
    decay.mode_two_body(3.0, 0.0, 1.0)
    assert decay.et == 3.0 - 1.0
    first, second = decay.real
    assert first.theta == second.theta
    assert first.phi == second.phi
    assert first.velocity > 0.0 > second.velocity
    first.momentum_from_velocity()
    second.momentum_from_velocity()
    for a, b in zip(first.pc, second.pc):
        assert a + b == pytest.approx(0.0, abs=1e-6)


def test_erel_real_recovers_decay_energy():
    decay = Decay(make_parts([1.0, 6.0]), True, RandomSource(4))
    decay.mode_two_body(3.0, 0.0, 1.0)
    boost(decay, 1.5, True)
    assert decay.erel_real() == pytest.approx(decay.et, rel=1e-3)
    assert -1.0 <= decay.cos_theta_h <= 1.0


def test_erel_recon_matches_real_when_recon_is_exact():
    decay = Decay(make_parts([2.0, 4.0]), True, RandomSource(5))
    decay.mode_two_body(2.5, 0.0, 1.0)
    boost(decay, 1.0, True)
    for real, recon in zip(decay.real, decay.recon):
        recon.energy = real.energy
        recon.theta = real.theta
        recon.phi = real.phi
        recon.velocity_from_energy(True)
    assert decay.erel_recon() == pytest.approx(decay.erel_real(), rel=1e-6)


def test_erel_newton_recovers_decay_energy():
    decay = Decay(make_parts([1.0, 6.0]), False, RandomSource(6))
    decay.mode_two_body(3.0, 0.0, 1.0)
    boost(decay, 1.5, False)
    assert decay.erel_real() == pytest.approx(decay.et, rel=1e-2)


def test_negative_decay_energy_raises():
    decay = Decay(make_parts([1.0, 6.0]), True, RandomSource(7))
    with pytest.raises(ValueError):
        decay.mode_two_body(1.0, 0.0, 2.0)


@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
def test_breit_wigner_energy_in_window(seed):
    decay = Decay(make_parts([1.0, 6.0]), True, RandomSource(seed))
    decay.mode_two_body(3.0, 0.5, 1.0)
    assert 0.0001 < decay.et < 10.0


def test_micro_canonical_newton_energy_sum():
    decay = Decay(make_parts([1.0, 1.0, 4.0]), False, RandomSource(8))
    decay.mode_micro_canonical(3.0, 0.0, 1.0)
    total = sum(frame.energy for frame in decay.real)
    assert total == pytest.approx(decay.et, rel=1e-9)


def test_micro_canonical_relativistic_energy_sum():
    decay = Decay(make_parts([1.0, 1.0, 4.0]), True, RandomSource(9))
    decay.mode_micro_canonical(3.0, 0.0, 1.0)
    total = sum(frame.energy for frame in decay.real)
    assert total == pytest.approx(decay.et, rel=1e-2)


def test_erel_pair_agrees_with_erel_rel():
    decay = Decay(make_parts([2.0, 4.0]), True, RandomSource(10))
    decay.mode_two_body(2.5, 0.0, 1.0)
    boost(decay, 1.2, True)
    expected = decay.erel_real()
    pair = decay.erel_pair(decay.real[0], decay.real[1])
    assert pair == pytest.approx(expected, rel=1e-3)
    assert pair == pytest.approx(decay.et, rel=1e-3)
    assert -1.0 <= decay.cos_theta_h <= 1.0
    assert decay.plf_recon2.a == 6.0