"""Random number source used throughout the simulation."""

from __future__ import annotations

import math
import random


class RandomSource:
    """Uniform, Gaussian, Breit-Wigner and decay-time sampling."""

    def __init__(self, seed=None):
        self._random = random.Random(seed)

    def uniform(self) -> float:
        """Return a uniform number in the interval (0, 1]."""
        while True:
            value = 1.0 - self._random.random()
            if value > 0.0:
                return value

    def gaus(self, mean: float, sigma: float) -> float:
        """Return a Gaussian number with the given mean and standard deviation."""
        return self._random.gauss(mean, sigma)

    def exp_decay_time(self, width: float) -> float:
        """Return a time from an exponential decay consistent with the total width."""
        return -0.65824 * math.log(self.uniform() + 1.0e-37) / width

    def breit_wigner(self, mean: float, width: float) -> float:
        """Return a number from a Breit-Wigner (Cauchy) distribution."""
        rval = 2.0 * self._random.random() - 1.0
        return mean + 0.5 * width * math.tan(rval * math.pi / 2.0)