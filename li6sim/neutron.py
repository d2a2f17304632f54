"""A ring neutron detector and the neutron fragment it detects."""

from __future__ import annotations

import math
from typing import Sequence

from .frame import Frame
from .rng import RandomSource


class NeutronArray:
    """Ring detector between two polar angles with energy-dependent efficiency."""

    def __init__(self, theta_min: float, theta_max: float, rng: RandomSource | None = None):
        self.theta_min = theta_min
        self.theta_max = theta_max
        self.rng = rng if rng is not None else RandomSource()

    def hit(self, theta: float, energy: float) -> bool:
        """Return whether a neutron at polar angle theta (rad) is detected."""
        if not self.theta_min < theta < self.theta_max:
            return False
        # intrinsic efficiency of a ~2 cm thick p-terphenyl crystal
        prob = 0.27 - 0.27 / 10.0 * energy
        return self.rng.uniform() <= prob


class NeutronFragment:
    """A neutron and the ring detector (65 to 85 degrees) that may see it."""

    def __init__(self, mass: float, rng: RandomSource | None = None):
        self.mass = mass
        self.neut = Frame(mass)
        self.theta_min = 65.0 / 180.0 * math.pi
        self.theta_max = 85.0 / 180.0 * math.pi
        self.array = NeutronArray(self.theta_min, self.theta_max, rng)
        self.is_hit = False

    def set_velocity(self, v: Sequence[float], relativistic: bool = True) -> None:
        """Set the velocity vector (cm/ns) and compute energy and angles."""
        self.neut.v = v
        self.neut.energy_from_velocity(relativistic)

    def hit(self) -> bool:
        """Return whether the neutron is detected."""
        self.is_hit = self.array.hit(self.neut.theta, self.neut.energy)
        return self.is_hit