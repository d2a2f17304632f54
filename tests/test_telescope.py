import pytest

from li6sim.rng import RandomSource
from li6sim.telescope import Telescope


@pytest.fixture
def tele():
    return Telescope(10.0, -5.0, 64.0, 0.5, 1.0, RandomSource(123))


def test_miss_outside_active_area(tele):
    assert tele.hit(10.0 + 33.0, -5.0, 2.0, 5.0) is None
    assert tele.hit(10.0, -5.0 - 33.0, 2.0, 5.0) is None


def test_miss_below_thresholds(tele):
    assert tele.hit(10.0, -5.0, 0.4, 5.0) is None
    assert tele.hit(10.0, -5.0, 2.0, 0.9) is None


def test_hit_at_threshold(tele):
    assert tele.hit(10.0, -5.0, 0.5, 1.0) is not None and tele.hit(10.0, -5.0, 0.5, 1.0).ix <= 0


def test_strip_indices_in_range(tele):
    for x in (-21.9, -5.0, 10.0, 25.0, 41.9):
        result = tele.hit(x, -5.0 + (x - 10.0) / 2.0, 2.0, 5.0)
        assert -32 <= result.ix <= 0
        assert -32 <= result.iy <= 0


def test_left_edge_strip(tele):
    result = tele.hit(10.0 - 32.0, -5.0 - 32.0, 2.0, 5.0)
    assert result.ix == -32
    assert result.iy == -32


def test_reconstructed_position_within_one_strip(tele):
    width = 64.0 / 32.0
    for x, y in ((-3.3, 7.1), (12.5, -20.0), (30.0, 20.2)):
        result = tele.hit(x, y, 2.0, 5.0)
        assert x - 1e-9 <= result.x_recon < x + width + 1e-9
        assert y - 1e-9 <= result.y_recon < y + width + 1e-9


def test_same_seed_same_reconstruction():
    a = Telescope(0.0, 0.0, 50.0, 0.0, 0.0, RandomSource(5))
    b = Telescope(0.0, 0.0, 50.0, 0.0, 0.0, RandomSource(5))
    assert a.hit(3.0, -4.0, 1.0, 1.0) == b.hit(3.0, -4.0, 1.0, 1.0)