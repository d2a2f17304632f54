"""Kinematic state of a particle with Newtonian and relativistic transforms.

Energies are in MeV, velocities in cm/ns, momenta as p*c in MeV and
angles in radians unless converted with ``rad_to_deg``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Sequence

from .constants import C, C2, M0, RAD_TO_DEG, TWOPI, VFACT, VFACT2

_NAN = float("nan")


def _div(a: float, b: float) -> float:
    """Divide with IEEE semantics instead of raising on a zero divisor."""
    if b != 0.0:
        return a / b
    if a == 0.0 or math.isnan(a):
        return _NAN
    return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _sqrt(x: float) -> float:
    """Square root that yields NaN for negative arguments."""
    return math.sqrt(x) if x >= 0.0 else _NAN


def _acos(x: float) -> float:
    """Arc cosine that yields NaN outside [-1, 1]."""
    return math.acos(x) if -1.0 <= x <= 1.0 else _NAN


def _nan3() -> List[float]:
    return [_NAN, _NAN, _NAN]


def _zero3() -> List[float]:
    return [0.0, 0.0, 0.0]


@dataclass
class KinematicValues:
    """Energy, velocity, momentum and direction of one particle."""

    energy: float = _NAN
    velocity: float = _NAN
    pc_tot: float = _NAN
    v: List[float] = field(default_factory=_zero3)
    pc: List[float] = field(default_factory=_nan3)
    theta: float = _NAN
    phi: float = _NAN
    x: float = _NAN
    y: float = _NAN

    def clear(self) -> None:
        """Reset every value; the velocity vector goes back to zero."""
        self.energy = _NAN
        self.velocity = _NAN
        self.pc_tot = _NAN
        self.v = _zero3()
        self.pc = _nan3()
        self.theta = _NAN
        self.phi = _NAN
        self.x = _NAN
        self.y = _NAN

    def sph_to_cart_v(self) -> None:
        """Set the velocity components from speed and angles."""
        st = math.sin(self.theta)
        self.v = [
            self.velocity * st * math.cos(self.phi),
            self.velocity * st * math.sin(self.phi),
            self.velocity * math.cos(self.theta),
        ]

    def sph_to_cart_pc(self) -> None:
        """Set the momentum components from total momentum and angles."""
        st = math.sin(self.theta)
        self.pc = [
            self.pc_tot * st * math.cos(self.phi),
            self.pc_tot * st * math.sin(self.phi),
            self.pc_tot * math.cos(self.theta),
        ]

    def cart_to_sph(self) -> None:
        """Set the angles from the velocity components; phi lies in [0, 2 pi)."""
        self.theta = _acos(_div(self.v[2], self.velocity))
        phi = math.atan2(self.v[1], self.v[0])
        if phi < 0:
            phi += TWOPI
        self.phi = phi

    def calc_v_mag(self) -> None:
        """Set the speed from the velocity components."""
        self.velocity = math.sqrt(sum(c * c for c in self.v))

    def calc_pc_mag(self) -> None:
        """Set the total momentum from its components."""
        self.pc_tot = math.sqrt(sum(c * c for c in self.pc))

    def calc_cart_v(self) -> None:
        """Set velocity components parallel to the momentum vector."""
        ratio = _div(self.velocity, self.pc_tot)
        self.v = [p * ratio for p in self.pc]

    def calc_cart_pc(self) -> None:
        """Set momentum components parallel to the velocity vector."""
        ratio = _div(self.pc_tot, self.velocity)
        self.pc = [u * ratio for u in self.v]

    def add_v(self, vec: Sequence[float]) -> None:
        """Add a vector to the velocity vector."""
        self.v = [a + b for a, b in zip(self.v, vec)]

    def add_pc(self, vec: Sequence[float]) -> None:
        """Add a vector to the momentum vector."""
        self.pc = [a + b for a, b in zip(self.pc, vec)]

    def rad_to_deg(self) -> None:
        """Convert theta and phi from radians to degrees."""
        self.theta *= RAD_TO_DEG
        self.phi *= RAD_TO_DEG

    def v2(self) -> float:
        """Return the squared speed."""
        return self.velocity * self.velocity

    def pc2(self) -> float:
        """Return the squared total momentum."""
        return self.pc_tot * self.pc_tot

    def v_dot(self, vec: Sequence[float]) -> float:
        """Return the dot product of the velocity with a vector."""
        return sum(a * b for a, b in zip(self.v, vec))


class Frame:
    """A particle of mass number ``a`` with kinematics in some reference frame."""

    def __init__(self, a: float):
        self.a = float(a)
        self.mass = M0 * self.a
        self.mass2 = self.mass * self.mass
        self.tot_energy = _NAN
        self.gamma = _NAN
        self.kinematics = KinematicValues()

    # Convenient access to the stored kinematic values.
    @property
    def energy(self) -> float:
        return self.kinematics.energy

    @energy.setter
    def energy(self, value: float) -> None:
        self.kinematics.energy = value

    @property
    def velocity(self) -> float:
        return self.kinematics.velocity

    @velocity.setter
    def velocity(self, value: float) -> None:
        self.kinematics.velocity = value

    @property
    def pc_tot(self) -> float:
        return self.kinematics.pc_tot

    @pc_tot.setter
    def pc_tot(self, value: float) -> None:
        self.kinematics.pc_tot = value

    @property
    def v(self) -> List[float]:
        return self.kinematics.v

    @v.setter
    def v(self, value: Sequence[float]) -> None:
        self.kinematics.v = [float(c) for c in value]

    @property
    def pc(self) -> List[float]:
        return self.kinematics.pc

    @pc.setter
    def pc(self, value: Sequence[float]) -> None:
        self.kinematics.pc = [float(c) for c in value]

    @property
    def theta(self) -> float:
        return self.kinematics.theta

    @theta.setter
    def theta(self, value: float) -> None:
        self.kinematics.theta = value

    @property
    def phi(self) -> float:
        return self.kinematics.phi

    @phi.setter
    def phi(self, value: float) -> None:
        self.kinematics.phi = value

    @property
    def x(self) -> float:
        return self.kinematics.x

    @x.setter
    def x(self, value: float) -> None:
        self.kinematics.x = value

    @property
    def y(self) -> float:
        return self.kinematics.y

    @y.setter
    def y(self, value: float) -> None:
        self.kinematics.y = value

    def velocity_from_energy(self, relativistic: bool) -> float:
        """Compute the speed and velocity vector from energy and angles."""
        return self.velocity_rel() if relativistic else self.velocity_newton()

    def velocity_newton(self) -> float:
        kin = self.kinematics
        kin.velocity = _sqrt(2.0 * kin.energy / self.a) * VFACT
        kin.sph_to_cart_v()
        return kin.velocity

    def velocity_rel(self) -> float:
        kin = self.kinematics
        self.tot_energy = kin.energy + self.mass
        kin.pc_tot = _sqrt(self.tot_energy * self.tot_energy - self.mass2)
        kin.sph_to_cart_pc()
        self.gamma = self.tot_energy / self.mass
        kin.velocity = C * _sqrt(1.0 - 1.0 / (self.gamma * self.gamma))
        kin.sph_to_cart_v()
        return kin.velocity

    def energy_from_velocity(self, relativistic: bool) -> float:
        """Compute the kinetic energy and angles from the velocity vector."""
        return self.energy_rel() if relativistic else self.energy_newton()

    def energy_newton(self) -> float:
        kin = self.kinematics
        kin.calc_v_mag()
        kin.energy = 0.5 * self.a * kin.v2() / VFACT2
        kin.cart_to_sph()
        return kin.energy

    def energy_rel(self) -> float:
        kin = self.kinematics
        kin.calc_v_mag()
        self.gamma = _div(1.0, _sqrt(1.0 - kin.v2() / C2))
        self.tot_energy = self.mass * self.gamma
        kin.energy = self.tot_energy - self.mass
        kin.pc_tot = self.gamma * kin.velocity * self.mass / C
        kin.calc_cart_pc()
        kin.cart_to_sph()
        return kin.energy

    def transform_velocity(self, v_reference: Sequence[float], relativistic: bool) -> None:
        """Transform the velocity to a frame moving with ``v_reference``."""
        if relativistic:
            self.transform_velocity_rel(v_reference)
        else:
            self.transform_velocity_newton(v_reference)

    def transform_velocity_newton(self, v_reference: Sequence[float]) -> None:
        self.kinematics.add_v(v_reference)
        self.energy_newton()

    def transform_velocity_rel(self, v_reference: Sequence[float]) -> None:
        kin = self.kinematics
        ref = [float(c) for c in v_reference]
        dot = kin.v_dot(ref)
        vv_ref = sum(c * c for c in ref)
        scale = _div(dot, vv_ref)
        para = [scale * r for r in ref]
        perp = [u - p for u, p in zip(kin.v, para)]
        bb = _sqrt(1.0 - vv_ref / C2)
        denom = 1.0 + dot / C2
        kin.v = [
            (p + r) / denom + q * bb / denom for p, r, q in zip(para, ref, perp)
        ]
        self.energy_rel()

    def velocity_from_momentum(self, relativistic: bool) -> None:
        """Compute the velocity vector from the momentum vector."""
        if relativistic:
            self.velocity_from_momentum_rel()
        else:
            self.velocity_from_momentum_newton()

    def velocity_from_momentum_rel(self) -> None:
        kin = self.kinematics
        kin.calc_pc_mag()
        self.tot_energy = math.sqrt(self.mass2 + kin.pc2())
        kin.velocity = kin.pc_tot / self.tot_energy * C
        kin.calc_cart_v()
        kin.calc_v_mag()
        kin.cart_to_sph()

    def velocity_from_momentum_newton(self) -> None:
        kin = self.kinematics
        kin.v = [p / self.mass * C for p in kin.pc]
        kin.calc_v_mag()
        kin.cart_to_sph()

    def momentum_from_velocity(self) -> None:
        """Compute the momentum vector and total energy from the velocity."""
        kin = self.kinematics
        kin.calc_v_mag()
        self.gamma = _div(1.0, _sqrt(1.0 - kin.v2() / C2))
        kin.pc_tot = self.mass * self.gamma * kin.velocity / C
        kin.calc_cart_pc()
        self.tot_energy = self.gamma * self.mass

    def scale_v(self, s: float) -> None:
        """Multiply the velocity vector by ``s``."""
        self.kinematics.v = [u * s for u in self.kinematics.v]