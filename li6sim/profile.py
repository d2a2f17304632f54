"""R-matrix line shapes of resonances and sampling of decay energies.

Energies are in MeV, channel radii in fm and reduced masses in amu.
Charged-particle channels use Coulomb wave functions; s-wave neutron
channels use the l = 0 spherical Bessel solutions.
"""

from __future__ import annotations

import bisect
import logging
import math
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional, Sequence, Tuple

import mpmath

_log = logging.getLogger(__name__)

_HBARC = 197.326938  # MeV fm
_AMU = 931.5  # MeV
_NAN = float("nan")
_NEUTRON_SHIFT_FLOOR = 0.001  # MeV, used below the neutron threshold


def _rho(energy: float, r: float, mu: float) -> float:
    return r * math.sqrt(2.0 * mu * _AMU * energy) / _HBARC


@lru_cache(maxsize=65536)
def _coulomb(l: float, eta: float, rho: float) -> Tuple[float, float, float, float]:
    """Regular and irregular Coulomb functions and their derivatives in rho."""
    f = float(mpmath.coulombf(l, eta, rho))
    g = float(mpmath.coulombg(l, eta, rho))
    f_next = float(mpmath.coulombf(l + 1.0, eta, rho))
    g_next = float(mpmath.coulombg(l + 1.0, eta, rho))
    lp = l + 1.0
    root = math.sqrt(lp * lp + eta * eta)
    factor = lp * lp / rho + eta
    fd = (factor * f - root * f_next) / lp
    gd = (factor * g - root * g_next) / lp
    return f, g, fd, gd


def sommerfeld(energy: float, mu: float, z1: int, z2: int) -> float:
    """Sommerfeld parameter of two charges with reduced mass mu at energy."""
    return z1 * z2 * math.sqrt(mu / energy) / 6.3


def penetrability(energy: float, r: float, l: float, mu: float, z1: int, z2: int) -> float:
    """Coulomb penetrability at channel radius r."""
    if not energy > 0.0:
        raise ValueError(f"penetrability needs a positive energy, got {energy}")
    rho = _rho(energy, r, mu)
    eta = sommerfeld(energy, mu, z1, z2)
    f, g, _, _ = _coulomb(float(l), eta, rho)
    return rho / (f * f + g * g)


def swave_neutron_penetrability(
    energy: float, r: float, l: float, mu: float, z1: int, z2: int
) -> float:
    """Penetrability of an s-wave neutron channel."""
    if energy < 0.0:
        raise ValueError(f"penetrability needs a non-negative energy, got {energy}")
    rho = _rho(energy, r, mu)
    f = math.sin(rho)
    g = math.cos(rho)
    return rho / (f * f + g * g)


def shift(energy: float, r: float, l: float, mu: float, z1: int, z2: int) -> float:
    """Coulomb shift function at channel radius r (defined above threshold only)."""
    if not energy > 0.0:
        raise ValueError(f"shift function needs a positive energy, got {energy}")
    rho = _rho(energy, r, mu)
    eta = sommerfeld(energy, mu, z1, z2)
    f, g, fd, gd = _coulomb(float(l), eta, rho)
    return rho * (f * fd + g * gd) / (f * f + g * g)


def shift_neutron(energy: float, r: float, l: float, mu: float, z1: int, z2: int) -> float:
    """Shift function of an s-wave neutron channel (defined above threshold only)."""
    if not energy > 0.0:
        raise ValueError(f"shift function needs a positive energy, got {energy}")
    rho = _rho(energy, r, mu)
    f, fd = math.sin(rho), math.cos(rho)
    g, gd = math.cos(rho), -math.sin(rho)
    return rho * (f * fd + g * gd) / (f * f + g * g)


def gamma_width(
    energy: float, et: float, r: float, l: float, mu: float, z1: int, z2: int, rwidth2: float
) -> float:
    """Partial width for decay energy et - energy with reduced width squared rwidth2."""
    return 2.0 * penetrability(et - energy, r, l, mu, z1, z2) * rwidth2


def wigner_limit(mu: float, ac: float) -> float:
    """Wigner limit of the reduced width squared (MeV)."""
    return 41.863 / mu / ac**2


def _half_max_crossings(
    energies: Sequence[float], values: Sequence[float], ymax: float, step: float
) -> Tuple[float, float]:
    """Energies where the line shape crosses half its maximum, rising and falling."""
    e1 = e2 = _NAN
    half = ymax / 2.0
    old = 0.0
    for energy, yy in zip(energies, values):
        if (yy - half) * (old - half) < 0.0:
            slope = (yy - old) / step
            crossing = energy - step + (half - old) / slope
            if yy > old:
                e1 = crossing
            elif yy < old:
                e2 = crossing
        old = yy
    return e1, e2


def _cumulative(values: Sequence[float], step: float) -> List[float]:
    out: List[float] = []
    total = 0.0
    for value in values:
        total += value * step
        out.append(total)
    return out


def _normalised(cumulative: Sequence[float]) -> List[float]:
    norm = cumulative[-1]
    if norm == 0.0 or math.isnan(norm):
        raise ValueError("line shape integrates to zero")
    scale = 1.0 / norm
    return [c * scale for c in cumulative]


def _check_points(n: int) -> None:
    if n < 2:
        raise ValueError(f"line shape needs at least two energy points, got {n}")


@dataclass
class Profile:
    """Cumulative distribution of a decay-energy line shape on an even grid."""

    cdf: List[float]
    step: float
    energies: List[float] = field(default_factory=list)
    values: List[float] = field(default_factory=list)
    branch1: List[float] = field(default_factory=list)
    branch2: List[float] = field(default_factory=list)
    branch_gap: float = _NAN
    b: Tuple[float, ...] = ()
    e_max: float = _NAN
    half_max: Tuple[float, float] = (_NAN, _NAN)
    total: float = _NAN

    def __post_init__(self) -> None:
        _check_points(len(self.cdf))

    @property
    def fwhm(self) -> float:
        """Full width at half maximum of the line shape."""
        return self.half_max[1] - self.half_max[0]

    @classmethod
    def sequential(
        cls,
        et: float,
        er: float,
        z1: int,
        z2: int,
        z3: int,
        mu123: float,
        ac123: float,
        l1: float,
        mu23: float,
        ac23: float,
        l2: float,
        rwidth2_23: float,
        b23: Optional[float] = None,
    ) -> "Profile":
        """Line shape of a sequential decay of total energy et through a 2-3 resonance at er.

        If b23 is None the boundary condition is the shift function at er.
        """
        step = 0.001
        if b23 is None:
            b23 = shift(er, ac23, l2, mu23, z2, z3)
        _log.info("B23= %g", b23)

        n = math.floor(et / step)
        _check_points(n)

        ymax = 0.0
        e_max = 0.0
        sum_y = 0.0
        for i in range(10 * n):
            energy = (i + 0.5) * step
            g2 = gamma_width(0.0, energy, ac23, l2, mu23, z2, z3, rwidth2_23)
            d2 = -rwidth2_23 * (shift(energy, ac23, l2, mu23, z2, z3) - b23)
            y = g2 / ((energy - er - d2) ** 2 + (g2 / 2.0) ** 2)
            if y > ymax:
                ymax = y
                e_max = energy
            sum_y += y * step
        norm = 1.0 / sum_y

        energies: List[float] = []
        inner: List[float] = []
        values: List[float] = []
        for i in range(n):
            energy = (i + 0.5) * step
            p = penetrability(energy, ac123, l1, mu123, z1, z2 + z3)
            g = gamma_width(energy, et, ac23, l2, mu23, z2, z3, rwidth2_23)
            delta = -rwidth2_23 * (shift(et - energy, ac23, l2, mu23, z2, z3) - b23)
            yy = g / ((et - energy - er - delta) ** 2 + g * g / 4.0)
            energies.append(energy)
            inner.append(yy)
            values.append(2.0 * norm * p * yy)

        half_max = _half_max_crossings(energies, inner, ymax, step)
        cumulative = _cumulative(values, step)
        _log.info("Emax = %g", e_max)
        _log.info("%g %g FWHM = %g", half_max[0], half_max[1], half_max[1] - half_max[0])
        return cls(
            cdf=_normalised(cumulative),
            step=step,
            energies=energies,
            values=values,
            b=(b23,),
            e_max=e_max,
            half_max=half_max,
            total=cumulative[-1],
        )

    @classmethod
    def single(
        cls,
        er: float,
        z1: int,
        z2: int,
        mu: float,
        ac: float,
        l: float,
        rwidth2: float,
        b: Optional[float] = None,
        energy_range: float = 0.0,
    ) -> "Profile":
        """Line shape of a single-channel resonance at er.

        With energy_range 0 the grid spans 2.155 er; otherwise it spans
        energy_range in 0.03 MeV steps. If b is None the boundary condition
        is the shift function at er.
        """
        if b is None:
            b = shift(er, ac, l, mu, z1, z2)
        _log.info("Er= %g B= %g", er, b)

        step = 0.03
        if er / step < 400 and er > 0 and energy_range == 0:
            step = er / 400.0
        if energy_range == 0:
            n = math.floor(er * 2.155 / step)
        else:
            n = math.floor(energy_range / step)
        _check_points(n)
        _log.info("N = %d", n)

        if er > 0:
            p_er = penetrability(er, ac, l, mu, z1, z2)
            _log.info(" Gamma at Er = %g P = %g", 2.0 * rwidth2 * p_er, p_er)

        energies: List[float] = []
        values: List[float] = []
        pens: List[float] = []
        ymax = 0.0
        e_max = 0.0
        for i in range(1, n + 1):
            energy = (i + 0.5) * step
            p = penetrability(energy, ac, l, mu, z1, z2)
            g = 2.0 * rwidth2 * p
            delta = -rwidth2 * (shift(energy, ac, l, mu, z1, z2) - b)
            y = g / ((energy - er - delta) ** 2 + g * g / 4.0)
            energies.append(energy)
            values.append(y)
            pens.append(p)
            if y > ymax:
                ymax = y
                e_max = energy

        half_max = _half_max_crossings(energies, values, ymax, step)
        cumulative = _cumulative(values, 1.0)
        _log.info("Emax = %g", e_max)
        _log.info("%g %g FWHM = %g", half_max[0], half_max[1], half_max[1] - half_max[0])
        profile = cls(
            cdf=_normalised(cumulative),
            step=step,
            energies=energies,
            values=values,
            b=(b,),
            e_max=e_max,
            half_max=half_max,
            total=cumulative[-1],
        )
        profile.penetrabilities = pens
        return profile

    @classmethod
    def two_branch(
        cls,
        er: float,
        de: float,
        z1: int,
        z2: int,
        mu: float,
        ac: float,
        l1: float,
        l2: float,
        rwidth2_1: float,
        rwidth2_2: float,
        b1: Optional[float] = None,
        b2: Optional[float] = None,
    ) -> "Profile":
        """Line shape of a resonance at er decaying by a charged and a neutron branch.

        The neutron branch opens de below the charged threshold; the
        distribution follows the charged branch. None for b1 or b2 takes the
        shift function at the resonance energy of that branch.
        """
        _log.info("Er %g  DE0 %g", er, de)
        if b1 is None:
            b1 = shift(er, ac, l1, mu, z1, z2)
            _log.info("B_1= %g", b1)
        if b2 is None:
            b2 = shift_neutron(er - de, ac, l2, mu, 0, 3)
            _log.info("B_2= %g", b2)

        step = 0.01
        n = math.floor(8.0 / step)
        _log.info("N = %d", n)

        energies: List[float] = []
        y1s: List[float] = []
        y2s: List[float] = []
        ymax = 0.0
        for i in range(1, n + 1):
            energy = i * step
            p1 = penetrability(energy, ac, l1, mu, z1, z2)
            above = energy - de > 0.0
            p2 = swave_neutron_penetrability(energy - de, ac, l2, mu, z1, z2) if above else 0.0
            g1 = 2.0 * rwidth2_1 * p1
            g2 = 2.0 * rwidth2_2 * p2
            delta1 = -rwidth2_1 * (shift(energy, ac, l1, mu, z1, z2) - b1)
            neutron_energy = energy - de if above else _NEUTRON_SHIFT_FLOOR
            delta2 = -rwidth2_2 * (shift_neutron(neutron_energy, ac, l2, mu, z1, z2) - b2)
            denom = (energy - er - delta1 - delta2) ** 2 + (g1 + g2) ** 2 / 4.0
            y1 = g1 / denom
            energies.append(energy)
            y1s.append(y1)
            y2s.append(g2 / denom)
            ymax = max(ymax, y1)

        half_max = _half_max_crossings(energies, y1s, ymax, step)
        cumulative = _cumulative(y1s, 1.0)
        return cls(
            cdf=_normalised(cumulative),
            step=step,
            energies=energies,
            values=y1s,
            branch1=y1s,
            branch2=y2s,
            branch_gap=de,
            b=(b1, b2),
            half_max=half_max,
            total=cumulative[-1],
        )

    def _interval(self, xran: float) -> int:
        index = bisect.bisect_left(self.cdf, xran)
        if index == len(self.cdf):
            raise ValueError(f"{xran} lies beyond the cumulative distribution")
        return max(index - 1, 0)

    def sample(self, xran: float) -> float:
        """Return the decay energy for a uniform number xran in [0, 1]."""
        n = self._interval(xran)
        delta_p = xran - self.cdf[n]
        de_dp = self.step / (self.cdf[n + 1] - self.cdf[n])
        return (n + 0.5) * self.step + de_dp * delta_p

    def sample_two_branches(self, xran1: float, xran2: float) -> Optional[float]:
        """Return a decay energy for the charged branch, or None for the neutron branch."""
        if not self.branch1:
            raise ValueError("profile has no branch information")
        n = self._interval(xran1)
        delta_p = xran1 - self.cdf[n]
        de_dp = self.step / (self.cdf[n + 1] - self.cdf[n])
        dee = de_dp * delta_p
        energy = n * self.step + dee
        step = self.step
        branch1 = (step - dee) / self.branch_gap * self.branch1[n] + dee / step * self.branch1[n + 1]
        branch2 = (step - dee) / self.branch_gap * self.branch2[n] + dee / step * self.branch2[n + 1]
        prob1 = branch1 / (branch1 + branch2)
        if xran2 < prob1:
            return energy
        return None