import statistics

from li6sim.rng import RandomSource


def test_same_seed_gives_same_sequence():
    a = RandomSource(42)
    b = RandomSource(42)
    assert [a.uniform() for _ in range(20)] == [b.uniform() for _ in range(20)]


def test_uniform_range():
    rng = RandomSource(1)
    values = [rng.uniform() for _ in range(5000)]
    assert all(0.0 < v <= 1.0 for v in values)
    assert 0.45 < statistics.fmean(values) < 0.55


def test_gaus_zero_sigma_returns_mean():
    rng = RandomSource(3)
    assert rng.gaus(2.5, 0.0) == 2.5


def test_gaus_statistics():
    rng = RandomSource(7)
    values = [rng.gaus(10.0, 2.0) for _ in range(20000)]
    assert abs(statistics.fmean(values) - 10.0) < 0.1
    assert abs(statistics.stdev(values) - 2.0) < 0.1


def test_breit_wigner_zero_width_returns_mean():
    rng = RandomSource(5)
    assert all(rng.breit_wigner(1.5, 0.0) == 1.5 for _ in range(10))


def test_breit_wigner_median_near_mean():
    rng = RandomSource(11)
    values = [rng.breit_wigner(3.0, 0.5) for _ in range(20000)]
    assert abs(statistics.median(values) - 3.0) < 0.05


def test_exp_decay_time_non_negative_and_scales_with_width():
    a = RandomSource(9)
    b = RandomSource(9)
    narrow = [a.exp_decay_time(1.0) for _ in range(100)]
    wide = [b.exp_decay_time(2.0) for _ in range(100)]
    assert all(t >= 0.0 for t in narrow)
    for n, w in zip(narrow, wide):
        assert abs(n - 2.0 * w) < 1e-12