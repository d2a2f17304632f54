import math

import pytest

from li6sim.correlations import Correlations, SampledValues, read_cross_section_file
from li6sim.constants import MASS_7LI, M0
from li6sim.loss import EnergyLoss
from li6sim.rng import RandomSource


def _write_table(path, angles, values, extra_lines=()):
    lines = [f"#{len(angles)} angles"]
    lines.extend(extra_lines)
    lines.extend(f"{a} {v}" for a, v in zip(angles, values))
    lines.append("END")
    path.write_text("\n".join(lines) + "\n")
    return path


def _no_loss():
    return EnergyLoss([0.0, 100.0], [0.0, 0.0], MASS_7LI / M0)


@pytest.fixture
def files(tmp_path):
    elastic_angles = list(range(1, 31))
    elastic = _write_table(tmp_path / "el.out", elastic_angles, [100.0 / a for a in elastic_angles])
    inel_angles = list(range(1, 11))
    inel1 = _write_table(tmp_path / "in1.out", inel_angles, [5.0] * 10)
    inel2 = _write_table(tmp_path / "in2.out", inel_angles, [2.0] * 10)
    return elastic, [inel1, inel2]


def _make(files, exts=(0.0, 3.089443), seed=1):
    elastic, inel = files
    return Correlations(inel[: len(exts)], elastic, 42.82126, 2.186, list(exts), _no_loss(), 3.026, RandomSource(seed))


def test_read_file_skips_comments(tmp_path):
    path = _write_table(tmp_path / "x.out", [1.0, 2.0, 3.0], [4.0, 5.0, 6.0], extra_lines=["@ legend", "# note"])
    rows = read_cross_section_file(path)
    assert rows == [(1.0, 4.0), (2.0, 5.0), (3.0, 6.0)]


def test_read_file_too_few_rows(tmp_path):
    path = tmp_path / "short.out"
    path.write_text("#5 angles\n1 2\n2 3\n")
    with pytest.raises(ValueError):
        read_cross_section_file(path)


def test_read_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_cross_section_file(tmp_path / "missing.out")


def test_mismatched_lengths(files):
    elastic, inel = files
    with pytest.raises(ValueError):
        Correlations(inel, elastic, 42.8, 2.186, [0.0], _no_loss(), 3.0, RandomSource(1))


def test_q_value(files):
    corr = _make(files)
    assert corr.q_value == pytest.approx(-2.3047, abs=1e-3)


def test_distributions_are_normalised(files):
    corr = _make(files)
    assert corr.channel_cdf[-1] == pytest.approx(1.0)
    assert corr.elastic_cdf[-1] == pytest.approx(1.0)
    for cdf in corr.inelastic_cdfs:
        assert cdf[-1] == pytest.approx(1.0)
        assert all(a <= b for a, b in zip(cdf, cdf[1:]))
    assert all(a <= b for a, b in zip(corr.elastic_cdf, corr.elastic_cdf[1:]))
    assert corr.inelastic_totals[0] > corr.inelastic_totals[1] > 0.0


def test_elastic_small_angles_excluded(files):
    corr = _make(files)
    small = [c for a, c in zip(corr.elastic_angles, corr.elastic_cdf) if a <= math.radians(3.0)]
    assert small
    assert all(c == 0.0 for c in small)
    for cm_deg, lab in zip(range(1, 31), corr.elastic_angles):
        assert lab < math.radians(cm_deg)


def test_elastic_all_below_threshold(tmp_path):
    elastic = _write_table(tmp_path / "el.out", [0.5, 1.0, 1.5], [1.0, 1.0, 1.0])
    inel = _write_table(tmp_path / "in.out", [1.0, 2.0, 3.0], [1.0, 1.0, 1.0])
    with pytest.raises(ValueError):
        Correlations([inel], elastic, 42.8, 2.186, [0.0], _no_loss(), 3.0, RandomSource(1))


def test_random_angles_ranges(files):
    corr = _make(files)
    for _ in range(50):
        s = corr.random_angles(1.0)
        assert 0.0 <= s.phi < 360.0
        assert s.ext in corr.target_excitations
        assert 0.0 < s.theta_lab < 10.0
        assert 0.0 < s.theta_elastic <= 30.0
        magnitude = math.sqrt(s.vpp_x**2 + s.vpp_y**2 + s.vpp_z**2)
        assert magnitude == pytest.approx(s.vpp_lab)
        assert 0.0 <= corr.theta_cm <= math.radians(10.0)


def test_same_seed_same_result(files):
    a = _make(files, seed=7).random_angles(1.5)
    b = _make(files, seed=7).random_angles(1.5)
    assert (a.phi, a.theta_lab, a.vpp_lab, a.theta_elastic) == (b.phi, b.theta_lab, b.vpp_lab, b.theta_elastic)


def test_higher_excitation_slower_ejectile(files):
    low = _make(files, exts=(0.0,), seed=3).random_angles(1.0)
    high = _make(files, exts=(3.853807,), seed=3).random_angles(1.0)
    assert high.vpp_lab < low.vpp_lab


def test_sampled_values_helpers():
    s = SampledValues(phi=180.0, theta_elastic=90.0, theta_lab=45.0)
    assert s.phi_rad() == pytest.approx(math.pi)
    assert s.theta_elastic_rad() == pytest.approx(math.pi / 2)
    assert s.theta_lab_rad() == pytest.approx(math.pi / 4)
    s.vpp_lab = 2.5
    s.theta_lab = 0.0
    s.phi = 0.0
    s.calculate_cartesian()
    assert s.vpp_z == pytest.approx(2.5)
    assert s.vpp_x == pytest.approx(0.0)
    s.clear()
    assert math.isnan(s.phi) and math.isnan(s.vpp_lab) and math.isnan(s.vpp_z)