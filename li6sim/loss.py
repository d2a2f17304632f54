"""Energy loss of charged particles in an absorber from stopping-power tables."""

from __future__ import annotations

import bisect
import math
from os import PathLike
from typing import Sequence


class EnergyLoss:
    """Stopping-power table for one particle species in one absorber."""

    def __init__(self, energies: Sequence[float], dedx: Sequence[float], mass: float):
        if len(energies) != len(dedx):
            raise ValueError("energy and dE/dx tables differ in length")
        if len(energies) < 2:
            raise ValueError("an energy loss table needs at least two points")
        self.energies = [float(e) for e in energies]
        self.dedx = [float(d) for d in dedx]
        self.mass = float(mass)
        self.header = ""

    @classmethod
    def from_file(cls, path: str | PathLike, mass: float) -> "EnergyLoss":
        """Read a table: a header line, the number of points, then energy/dE/dx pairs."""
        with open(path, encoding="utf-8") as handle:
            header = handle.readline().rstrip("\n")
            tokens = handle.read().split()
        if not tokens:
            raise ValueError(f"loss file {path} holds no table")
        count = int(tokens[0])
        values = [float(t) for t in tokens[1 : 1 + 2 * count]]
        if len(values) < 2 * count:
            raise ValueError(f"loss file {path} holds fewer than {count} points")
        table = cls(values[0::2], values[1::2], mass)
        table.header = header
        return table

    def dedx_at(self, energy: float) -> float:
        """Return dE/dx linearly interpolated at the given energy (MeV)."""
        epa = energy / self.mass
        last = len(self.energies) - 2
        start = min(max(bisect.bisect_right(self.energies, epa) - 1, 0), last)
        e0, e1 = self.energies[start], self.energies[start + 1]
        d0, d1 = self.dedx[start], self.dedx[start + 1]
        return (epa - e0) / (e1 - e0) * (d1 - d0) + d0

    def energy_out(self, energy: float, thick: float) -> float:
        """Return the residual energy after an absorber of thickness thick (mg/cm2).

        Returns -1 if the particle stops in the absorber.
        """
        step_size = 0.01
        eout = energy
        while thick > 0.0:
            step = min(thick, step_size)
            eout -= self.dedx_at(eout) * step
            if eout < 0.0 or math.isnan(eout):
                return -1.0
            thick -= step_size
        return eout

    def energy_in(self, energy: float, thick: float) -> float:
        """Return the energy before an absorber given the residual energy."""
        step_size = 1.0
        ein = energy
        while True:
            step = min(thick, step_size)
            ein += self.dedx_at(ein) * step
            if step == thick:
                return ein
            thick -= step_size