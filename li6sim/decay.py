"""Decay of a parent fragment and reconstruction of the relative energy."""

from __future__ import annotations

import math
from typing import List, Protocol, Sequence

from .constants import C, C2, M0, M02, VFACT, VFACT2
from .frame import Frame
from .rng import RandomSource

_NAN = float("nan")
_MAX_ITERATIONS = 10000
_MIN_DECAY_ENERGY = 0.0001
_MAX_DECAY_ENERGY = 10.0


class _HasFrames(Protocol):
    real: Frame
    recon: Frame


class Decay:
    """Chooses decay fragment velocities and reconstructs their relative energy."""

    def __init__(
        self,
        fragments: Sequence[_HasFrames],
        relativistic: bool = True,
        rng: RandomSource | None = None,
    ):
        if len(fragments) < 2:
            raise ValueError("a decay needs at least two fragments")
        self.fragments = list(fragments)
        self.relativistic = relativistic
        self.rng = rng if rng is not None else RandomSource()
        self.real: List[Frame] = [f.real for f in self.fragments]
        self.recon: List[Frame] = [f.recon for f in self.fragments]
        self.sum_a = sum(frame.a for frame in self.real)
        self.mass1 = self.real[0].a
        self.mass2 = self.real[1].a
        self.plf_recon = Frame(self.sum_a)
        self.plf_recon2: Frame | None = None
        self.part_cm = [Frame(frame.a) for frame in self.real]
        self.et = _NAN
        self.cos_theta_h = _NAN
        self.erel_value = _NAN

    @property
    def n_frag(self) -> int:
        return len(self.real)

    def erel_real(self) -> float:
        """Relative energy of the fragments from their real velocities."""
        return self.erel(self.real)

    def erel_recon(self) -> float:
        """Relative energy of the fragments from their reconstructed velocities."""
        return self.erel(self.recon)

    def erel(self, frames: Sequence[Frame]) -> float:
        """Relative kinetic energy of the frames in their centre of mass."""
        if self.relativistic:
            return self.erel_rel(frames)
        return self.erel_newton(frames)

    def erel_newton(self, frames: Sequence[Frame]) -> float:
        """Non-relativistic relative kinetic energy."""
        plf = self.plf_recon
        plf.v = [0.0, 0.0, 0.0]
        for frame in frames:
            plf.kinematics.add_v([u * frame.a for u in frame.v])
        plf.scale_v(1.0 / self.sum_a)
        plf.energy_from_velocity(self.relativistic)

        total = 0.0
        for frame, cm, real in zip(frames, self.part_cm, self.real):
            cm.v = [a - b for a, b in zip(frame.v, plf.v)]
            cm.kinematics.calc_v_mag()
            cm.energy = real.a / 2.0 * cm.kinematics.v2() / VFACT2
            total += cm.energy
        self.erel_value = total
        return total

    def erel_rel(self, frames: Sequence[Frame]) -> float:
        """Relativistic relative kinetic energy; also sets cos_theta_h."""
        plf = self.plf_recon
        plf.pc = [0.0, 0.0, 0.0]
        plf.tot_energy = 0.0
        for frame in frames:
            plf.kinematics.add_pc(frame.pc)
        plf.velocity_from_momentum(self.relativistic)
        dv = [-u for u in plf.v]

        total = 0.0
        for frame, cm in zip(frames, self.part_cm):
            cm.v = frame.v
            cm.transform_velocity(dv, self.relativistic)
            total += cm.energy
        self.erel_value = total

        core = self.part_cm[len(frames) - 1]
        self.cos_theta_h = core.v[2] / core.velocity
        return total

    def erel_pair(self, part1: Frame, part2: Frame) -> float:
        """Relative kinetic energy of two frames from summed momenta and energies."""
        plf = Frame(part1.a + part2.a)
        plf.pc = [a + b for a, b in zip(part1.pc, part2.pc)]
        plf.tot_energy = part1.tot_energy + part2.tot_energy
        plf.kinematics.calc_pc_mag()
        plf.velocity = plf.pc_tot / plf.tot_energy * C
        plf.kinematics.calc_cart_v()
        dv = [-u for u in plf.v]
        plf.kinematics.cart_to_sph()
        self.plf_recon2 = plf

        pair = [Frame(part1.a), Frame(part2.a)]
        pair[0].v = part1.v
        pair[1].v = part2.v
        total = 0.0
        for cm in pair:
            cm.transform_velocity(dv, self.relativistic)
            total += cm.energy
        self.erel_value = total
        self.cos_theta_h = pair[1].v[2] / pair[1].velocity
        return total

    def _decay_energy(self, ex: float, gamma: float, q: float) -> float:
        et0 = ex - q
        if gamma <= 0.0:
            et = et0
        else:
            while True:
                et = self.rng.breit_wigner(et0, gamma)
                if _MIN_DECAY_ENERGY < et < _MAX_DECAY_ENERGY:
                    break
        if not et > 0.0:
            raise ValueError(f"decay energy {et} MeV is not positive")
        self.et = et
        return et

    def mode_two_body(self, ex: float, gamma: float, q: float) -> None:
        """Two-body decay of excitation ex (Breit-Wigner width gamma) with threshold q."""
        et = self._decay_energy(ex, gamma, q)
        m1, m2 = self.mass1, self.mass2

        mu = m1 * m2 / (m1 + m2)
        vrel = math.sqrt(2.0 * et / mu) * VFACT
        v1 = m2 / (m1 + m2) * vrel
        gamma1 = 1.0 / math.sqrt(1.0 - v1 * v1 / C2)
        pc = gamma1 * v1 * m1 * M0 / C

        for _ in range(_MAX_ITERATIONS):
            denom1 = math.sqrt(pc * pc + m1 * m1 * M02)
            denom2 = math.sqrt(pc * pc + m2 * m2 * M02)
            y = (denom1 - m1 * M0) + (denom2 - m2 * M0) - et
            dpc = -y / (pc / denom1 + pc / denom2)
            if abs(dpc) < 1e-4:
                break
            pc += dpc
        else:
            raise RuntimeError("fragment momentum did not converge")

        v1 = pc / math.sqrt(pc * pc + m1 * m1 * M02) * C
        v2 = pc / math.sqrt(pc * pc + m2 * m2 * M02) * C
        theta = math.acos(2.0 * self.rng.uniform() - 1.0)
        phi = 2.0 * math.pi * self.rng.uniform()

        for frame, speed in ((self.real[0], v1), (self.real[1], -v2)):
            frame.velocity = speed
            frame.theta = theta
            frame.phi = phi
            frame.kinematics.sph_to_cart_v()

    def mode_micro_canonical(self, ex: float, gamma: float, q: float) -> None:
        """Phase-space decay: fragment momenta drawn at random, scaled to the decay energy."""
        et = self._decay_energy(ex, gamma, q)

        for frame in self.real:
            frame.v = [self.rng.gaus(0.0, 1.0) / frame.a for _ in range(3)]
            frame.momentum_from_velocity()

        plf = self.plf_recon
        plf.pc = [0.0, 0.0, 0.0]
        plf.tot_energy = 0.0
        for frame in self.real:
            plf.kinematics.add_pc(frame.pc)
        plf.velocity_from_momentum(self.relativistic)
        vcm = [-u for u in plf.v]

        test_total = 0.0
        for frame in self.real:
            frame.transform_velocity(vcm, self.relativistic)
            test_total += frame.energy
        ratio = math.sqrt(et / test_total)
        for frame in self.real:
            frame.velocity = frame.velocity * ratio
            frame.scale_v(ratio)
            frame.energy_from_velocity(self.relativistic)