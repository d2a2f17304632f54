import pytest

from li6sim.loss import EnergyLoss


@pytest.fixture
def constant_table():
    return EnergyLoss([0.0, 100.0], [2.0, 2.0], 1.0)


@pytest.fixture
def sloped_table():
    return EnergyLoss([0.0, 1.0, 5.0, 20.0], [10.0, 6.0, 3.0, 1.0], 4.0)


def test_dedx_at_table_points(sloped_table):
    assert sloped_table.dedx_at(4.0 * 5.0) == pytest.approx(3.0)
    assert sloped_table.dedx_at(4.0 * 1.0) == pytest.approx(6.0)


def test_dedx_interpolation_between_neighbours(sloped_table):
    value = sloped_table.dedx_at(4.0 * 3.0)
    assert 3.0 < value < 6.0


def test_energy_out_decreases_energy(sloped_table):
    out = sloped_table.energy_out(40.0, 2.0)
    assert 0.0 < out < 40.0


def test_energy_out_zero_thickness_is_identity(sloped_table):
    assert sloped_table.energy_out(30.0, 0.0) == 30.0


def test_energy_out_stopped_returns_minus_one(constant_table):
    assert constant_table.energy_out(1.0, 5.0) == -1.0


def test_energy_in_undoes_energy_out_for_constant_loss(constant_table):
    out = constant_table.energy_out(50.0, 3.0)
    assert constant_table.energy_in(out, 3.0) == pytest.approx(50.0, abs=0.05)


def test_energy_in_increases_energy(sloped_table):
    assert sloped_table.energy_in(10.0, 2.5) > 10.0


def test_mismatched_tables_rejected():
    with pytest.raises(ValueError):
        EnergyLoss([0.0, 1.0], [1.0], 1.0)


def test_from_file(tmp_path):
    path = tmp_path / "Hydrogen_C.loss"
    path.write_text("hydrogen in carbon\n3\n0.0 10.0\n1.0 6.0\n5.0 3.0\n")
    table = EnergyLoss.from_file(path, 2.0)
    assert table.header == "hydrogen in carbon"
    assert table.energies == [0.0, 1.0, 5.0]
    assert table.dedx == [10.0, 6.0, 3.0]
    assert table.mass == 2.0


def test_from_file_short_table(tmp_path):
    path = tmp_path / "short.loss"
    path.write_text("header\n4\n0.0 1.0\n1.0 2.0\n")
    with pytest.raises(ValueError):
        EnergyLoss.from_file(path, 1.0)


def test_from_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        EnergyLoss.from_file(tmp_path / "absent.loss", 1.0)