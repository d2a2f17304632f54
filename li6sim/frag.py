"""A single detected fragment and its passage through target and detector."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from os import PathLike
from typing import Optional, Protocol, Sequence, Tuple, Union

from .frame import Frame
from .loss import EnergyLoss
from .rng import RandomSource
from .scattering import PolyScattering

_NAN = float("nan")
_SILICON_DE_THICKNESS = 14.85  # mg/cm2, 0.064 mm of Si

LossSource = Union[str, PathLike, EnergyLoss]


class HitStatus(IntEnum):
    """Outcome of a detection attempt; values add up to a hit count."""

    STOPPED = -1
    MISSED = 0
    HIT = 1


@dataclass(frozen=True)
class ArrayHit:
    """Reconstructed angles, position and strips reported by a detector array."""

    theta_recon: float
    phi_recon: float
    x_recon: float
    y_recon: float
    ix: int
    iy: int


class DetectorArray(Protocol):
    """A detector array that decides whether a particle is detected."""

    def hit(
        self, theta: float, phi: float, x_target: float, y_target: float, de: float, e: float
    ) -> Optional[ArrayHit]:
        ...


def _load_loss(source: LossSource, mass: float) -> EnergyLoss:
    if isinstance(source, EnergyLoss):
        return source
    return EnergyLoss.from_file(source, mass)


class Fragment:
    """A fragment of charge z and mass (amu) with real and reconstructed kinematics."""

    def __init__(
        self,
        z: float,
        mass: float,
        loss_target_file: LossSource,
        loss_silicon_file: LossSource,
        csi_resolution: float,
        thickness: float,
        array: DetectorArray,
        rng: RandomSource | None = None,
        scale_small_angle: float = 1.0,
        relativistic: bool = False,
        use_real_p: bool = False,
    ):
        self.z = float(z)
        self.mass = float(mass)
        self.csi_resolution = csi_resolution
        self.array = array
        self.rng = rng if rng is not None else RandomSource()
        self.loss_target = _load_loss(loss_target_file, self.mass)
        self.loss_silicon = _load_loss(loss_silicon_file, self.mass)
        self.scattering = PolyScattering(self.z, thickness)
        self.real = Frame(self.mass)
        self.recon = Frame(self.mass)
        self.scale_small_angle = scale_small_angle
        self.relativistic = relativistic
        self.use_real_p = use_real_p
        self.extra = False
        self.stopped = False
        self.front_energy = _NAN
        self.delta_energy = _NAN
        self.is_hit = HitStatus.MISSED
        self.last_hit: Optional[ArrayHit] = None

    def hit(self, x_target: float, y_target: float) -> HitStatus:
        """Try to detect the fragment emitted from (x_target, y_target)."""
        if self.stopped:
            return HitStatus.STOPPED
        result = self.array.hit(
            self.real.theta, self.real.phi, x_target, y_target, self.delta_energy, self.front_energy
        )
        self.last_hit = result
        if result is None:
            self.is_hit = HitStatus.MISSED
            return self.is_hit
        self.is_hit = HitStatus.HIT
        recon = self.recon
        recon.theta = result.theta_recon
        recon.phi = result.phi_recon
        recon.x = result.x_recon
        recon.y = result.y_recon
        recon.energy = self.real.energy * (1.0 + self.csi_resolution * self.rng.gaus(0.0, 1.0))
        recon.velocity_from_energy(self.relativistic)
        return self.is_hit

    def strip_hit(self) -> Optional[Tuple[int, int]]:
        """Return the (x, y) strips of the last detection, or None after a miss."""
        if self.last_hit is None:
            return None
        return self.last_hit.ix, self.last_hit.iy

    def add_velocity(self, v_plf: Sequence[float]) -> None:
        """Transform the real velocity by the velocity of a moving frame."""
        self.real.transform_velocity(v_plf, self.relativistic)

    def energy_loss(self, thick: float) -> float:
        """Slow the fragment through thick mg/cm2 of target; return its energy."""
        if self.real.energy <= 0.0:
            return 0.0
        self.real.energy = self.loss_target.energy_out(self.real.energy, thick)
        return self.real.energy

    def energy_gain(self, thick: float) -> float:
        """Correct the reconstructed energy for loss in thick mg/cm2 of target."""
        if thick > 0.0:
            self.recon.energy = self.loss_target.energy_in(
                self.recon.energy, thick / math.cos(self.recon.theta)
            )
        self.recon.velocity_from_energy(self.relativistic)
        return self.recon.energy

    def multiple_scatter(self, fractional_thick: float) -> None:
        """Randomly deflect the real direction by small-angle scattering."""
        theta_rms = self.scattering.theta_rms(self.real.energy, fractional_thick)
        sigma = theta_rms / math.sqrt(2.0) * self.scale_small_angle
        delta_theta = math.sqrt(2.0) * sigma * math.sqrt(-math.log(self.rng.uniform()))
        delta_phi = 2.0 * math.pi * self.rng.uniform()

        x = math.sin(delta_theta) * math.cos(delta_phi)
        y = math.sin(delta_theta) * math.sin(delta_phi)
        z = math.cos(delta_theta)

        theta = self.real.theta
        xx = x * math.cos(theta) + z * math.sin(theta)
        yy = y
        zz = z * math.cos(theta) - x * math.sin(theta)

        phi = self.real.phi
        xxx = xx * math.cos(phi) - yy * math.sin(phi)
        yyy = yy * math.cos(phi) + xx * math.sin(phi)

        self.real.theta = math.acos(max(-1.0, min(1.0, zz)))
        self.real.phi = math.atan2(yyy, xxx)

    def target_interaction(self, dthick: float, thickness: float) -> bool:
        """Apply energy loss and scattering over dthick of a target of total thickness.

        Returns whether the fragment stopped in the target.
        """
        self.stopped = False
        if dthick == 0.0:
            return self.stopped
        thick = dthick / math.cos(self.real.theta)
        self.energy_loss(thick)
        if self.real.energy <= 0.0:
            self.stopped = True
            return self.stopped
        self.multiple_scatter(thick / thickness)
        return self.stopped

    def silicon_interaction(self) -> bool:
        """Compute the energies left in the front and back silicon layers.

        Returns whether the fragment stopped before passing the front layer.
        """
        if self.stopped:
            return self.stopped
        de_thick = _SILICON_DE_THICKNESS / math.cos(self.real.theta)
        self.front_energy = self.loss_silicon.energy_out(self.real.energy, de_thick)
        self.delta_energy = self.real.energy - self.front_energy
        if self.front_energy <= 0.0:
            self.delta_energy = -1.0
            self.stopped = True
        return self.stopped