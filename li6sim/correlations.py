"""Sampling of scattering angles from elastic and inelastic cross sections.

The reaction is 7Li + 12C -> 6Li + 13C (neutron transfer) on a carbon
target. Angular distributions come from Fresco output files that hold
centre-of-mass differential cross sections.
"""

from __future__ import annotations

import bisect
import logging
import math
import re
from dataclasses import dataclass
from os import PathLike
from typing import List, Sequence, Tuple

from .constants import (
    C,
    DEG_TO_RAD,
    EXCESS_6LI,
    EXCESS_7LI,
    EXCESS_12C,
    EXCESS_13C,
    M0,
    MASS_6LI,
    MASS_7LI,
    MASS_12C,
    MASS_13C,
    PI,
    RAD_TO_DEG,
    TWOPI,
)
from .frame import Frame
from .loss import EnergyLoss
from .rng import RandomSource

_log = logging.getLogger(__name__)

_NAN = float("nan")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_ELASTIC_MIN_ANGLE = 3.0 * DEG_TO_RAD


def _sqrt(x: float) -> float:
    return math.sqrt(x) if x >= 0.0 else _NAN


@dataclass
class SampledValues:
    """Angles and velocities sampled for one event (angles in degrees)."""

    phi: float = _NAN
    theta_elastic: float = _NAN
    ext: float = _NAN
    theta_lab: float = _NAN
    vpp_lab: float = _NAN
    vpp_x: float = _NAN
    vpp_y: float = _NAN
    vpp_z: float = _NAN

    def clear(self) -> None:
        """Reset the sampled angles and velocities."""
        self.phi = _NAN
        self.theta_elastic = _NAN
        self.theta_lab = _NAN
        self.vpp_lab = _NAN
        self.vpp_x = _NAN
        self.vpp_y = _NAN
        self.vpp_z = _NAN

    def calculate_cartesian(self) -> None:
        """Set the velocity components from vpp_lab, theta_lab and phi (radians)."""
        st = math.sin(self.theta_lab)
        self.vpp_x = self.vpp_lab * st * math.cos(self.phi)
        self.vpp_y = self.vpp_lab * st * math.sin(self.phi)
        self.vpp_z = self.vpp_lab * math.cos(self.theta_lab)

    def phi_rad(self) -> float:
        return self.phi * DEG_TO_RAD

    def theta_elastic_rad(self) -> float:
        return self.theta_elastic * DEG_TO_RAD

    def theta_lab_rad(self) -> float:
        return self.theta_lab * DEG_TO_RAD


def read_cross_section_file(path: str | PathLike) -> List[Tuple[float, float]]:
    """Read a Fresco cross-section file.

    The first line carries the number of angles right after its first
    character. Lines starting with '#' or '@', or containing 'END', are
    skipped. Returns (angle in degrees, cross section) pairs.
    """
    with open(path, encoding="utf-8") as handle:
        header = handle.readline()
        space = header.find(" ")
        field = header[1:] if space < 0 else header[1 : 1 + space]
        match = _LEADING_INT.match(field)
        if match is None:
            raise ValueError(f"no angle count in the first line of {path}")
        count = int(match.group(1))
        if count < 2:
            raise ValueError(f"{path} declares fewer than two angles")
        rows: List[Tuple[float, float]] = []
        for line in handle:
            if line.startswith(("#", "@")) or "END" in line:
                continue
            parts = line.split()
            if len(parts) < 2:
                continue
            rows.append((float(parts[0]), float(parts[1])))
            if len(rows) == count:
                break
    if len(rows) < count:
        raise ValueError(f"{path} declares {count} angles but holds {len(rows)}")
    return rows


def _pick(cdf: Sequence[float], u: float) -> int:
    """Index of the first entry above u, or the last index."""
    return min(bisect.bisect_right(cdf, u), len(cdf) - 1)


class Correlations:
    """Samples elastic and inelastic scattering angles for the beam and ejectile."""

    def __init__(
        self,
        inelastic_files: Sequence[str | PathLike],
        elastic_file: str | PathLike,
        beam_energy: float,
        projectile_excitation: float,
        target_excitations: Sequence[float],
        loss_file: str | PathLike | EnergyLoss,
        thickness: float,
        rng: RandomSource | None = None,
    ):
        if len(inelastic_files) != len(target_excitations):
            raise ValueError("inelastic files and target excitations differ in length")
        if not inelastic_files:
            raise ValueError("at least one inelastic exit channel is required")

        self.rng = rng if rng is not None else RandomSource()
        self.inelastic_files = list(inelastic_files)
        self.elastic_file = elastic_file
        self.beam_energy = beam_energy
        self.projectile_excitation = projectile_excitation
        self.target_excitations = list(target_excitations)

        self.theta_cm = _NAN
        self.theta_target = _NAN
        self.v_target_lab = _NAN
        self.sampled = SampledValues()

        self._set_constants()

        if isinstance(loss_file, EnergyLoss):
            self.loss = loss_file
        else:
            self.loss = EnergyLoss.from_file(loss_file, self.m_p)

        self.read_elastic(thickness)

        self.inelastic_angles: List[List[float]] = []
        self.inelastic_cdfs: List[List[float]] = []
        self.inelastic_totals: List[float] = []
        cumulative: List[float] = []
        for filename in self.inelastic_files:
            angles, cdf, total = self.read_inelastic(filename)
            self.inelastic_angles.append(angles)
            self.inelastic_cdfs.append(cdf)
            self.inelastic_totals.append(total)
            cumulative.append(total + (cumulative[-1] if cumulative else 0.0))
        _log.info("Total inelastic scattering cross section (mb): %g", cumulative[-1])
        if cumulative[-1] == 0.0:
            raise ValueError("total inelastic cross section is zero")
        self.channel_cdf = [x / cumulative[-1] for x in cumulative]

    def _set_constants(self) -> None:
        self.m_p = MASS_7LI / M0
        self.m_t = MASS_12C / M0
        self.m_pp = MASS_6LI / M0
        self.m_tt = MASS_13C / M0
        self.mass_pp = MASS_6LI
        self.mass_tt = MASS_13C
        self.mass_pptt = self.mass_pp + self.mass_tt
        self.frame_p = Frame(self.m_p)
        self.frame_t = Frame(self.m_t)
        self.frame_pp = Frame(self.m_pp)
        self.frame_tt = Frame(self.m_tt)
        self.q_value = EXCESS_7LI + EXCESS_12C - EXCESS_6LI - EXCESS_13C
        _log.info("n-transfer Q-value: %g", self.q_value)

    def _incoming_cm(self, thick: float) -> None:
        """Compute the CM velocity and CM kinetic energy after loss in thick."""
        fp, ft = self.frame_p, self.frame_t
        fp.theta = 0.0
        fp.phi = 0.0
        ft.theta = 0.0
        ft.phi = 0.0
        ft.energy = 0.0
        ft.velocity_rel()

        self.energy_post_loss = self.loss.energy_out(self.beam_energy, thick)
        fp.energy = self.energy_post_loss
        fp.velocity_rel()

        self.vcm = fp.pc_tot * C / (fp.tot_energy + ft.tot_energy)
        unboost = [0.0, 0.0, -self.vcm]
        ft.transform_velocity_rel(unboost)
        fp.transform_velocity_rel(unboost)
        self.ecm_in = ft.energy + fp.energy

    def _pc_cm_out(self, ecm_out: float) -> float:
        """Momentum (p*c) of each exit fragment for CM kinetic energy ecm_out."""
        return (
            0.5
            * _sqrt(2.0 * self.mass_pp * ecm_out + ecm_out * ecm_out)
            * _sqrt((2.0 * self.mass_tt + ecm_out) * (2.0 * self.mass_pptt + ecm_out))
            / (self.mass_pptt + ecm_out)
        )

    @staticmethod
    def _emit_to_lab(frame: Frame, theta: float, phi: float, pc: float, vcm: float) -> None:
        frame.theta = theta
        frame.phi = phi
        frame.tot_energy = math.sqrt(frame.mass * frame.mass + pc * pc)
        frame.velocity = pc * C / frame.tot_energy
        frame.kinematics.sph_to_cart_v()
        frame.transform_velocity_rel([0.0, 0.0, vcm])

    def read_elastic(self, thickness: float) -> float:
        """Read the elastic distribution, converting its angles to the lab frame.

        Only lab angles above 3 degrees contribute. Returns the elastic
        cross section (mb).
        """
        _log.info("Elastic Differential Cross Section filename %s", self.elastic_file)
        rows = read_cross_section_file(self.elastic_file)
        _log.info("# elastic angles: %d", len(rows))

        self._incoming_cm(thickness * 0.5)
        pc_out = self._pc_cm_out(self.ecm_in)

        angles: List[float] = []
        cumulative: List[float] = []
        for theta_deg, xsec in rows:
            theta_rad = theta_deg * DEG_TO_RAD
            weighted = xsec * math.sin(theta_rad)
            self._emit_to_lab(self.frame_pp, theta_rad, 0.0, pc_out, self.vcm)
            theta_lab = self.frame_pp.theta
            angles.append(theta_lab)
            previous = cumulative[-1] if cumulative else 0.0
            cumulative.append(weighted + previous if theta_lab > _ELASTIC_MIN_ANGLE else 0.0)

        n = len(cumulative)
        self.elastic_total = TWOPI * cumulative[n - 2] * 180.0 / (n - 1) * DEG_TO_RAD
        _log.info("Elastic cross section (mb): %g", self.elastic_total)

        norm = cumulative[-1]
        if norm == 0.0 or math.isnan(norm):
            raise ValueError(f"no elastic cross section above 3 degrees in {self.elastic_file}")
        self.elastic_angles = angles
        self.elastic_cdf = [x / norm for x in cumulative]
        return self.elastic_total

    def read_inelastic(self, filename: str | PathLike) -> Tuple[List[float], List[float], float]:
        """Read one inelastic channel.

        Returns the CM angles (rad), the normalised cumulative distribution
        and the integrated cross section (mb).
        """
        _log.info("Inelastic Differential Cross Section file: %s", filename)
        rows = read_cross_section_file(filename)
        _log.info("# inelastic angles: %d", len(rows))

        angles: List[float] = []
        cumulative: List[float] = []
        for theta_deg, xsec in rows:
            theta_rad = theta_deg * DEG_TO_RAD
            weighted = xsec * math.sin(theta_rad)
            angles.append(theta_rad)
            cumulative.append(weighted + (cumulative[-1] if cumulative else 0.0))

        n = len(cumulative)
        total = TWOPI * cumulative[n - 2] * 180.0 / (n - 1) * DEG_TO_RAD
        _log.info("Inelastic cross section (mb): %g", total)

        norm = cumulative[-1]
        if norm == 0.0:
            raise ValueError(f"inelastic cross section in {filename} is zero")
        return angles, [x / norm for x in cumulative], total

    def _interpolated_angle(self, angles: Sequence[float], index: int) -> float:
        if index + 1 == len(angles):
            return angles[-1]
        return angles[index] + (angles[index + 1] - angles[index]) * self.rng.uniform()

    def random_angles(self, thick: float) -> SampledValues:
        """Sample one event; thick is the target depth (mg/cm2) of the reaction."""
        sampled = self.sampled
        sampled.phi = TWOPI * self.rng.uniform()

        channel = _pick(self.channel_cdf, self.rng.uniform())
        sampled.ext = self.target_excitations[channel]
        angles = self.inelastic_angles[channel]
        index = _pick(self.inelastic_cdfs[channel], self.rng.uniform())
        self.theta_cm = self._interpolated_angle(angles, index)

        index = _pick(self.elastic_cdf, self.rng.uniform())
        sampled.theta_elastic = self._interpolated_angle(self.elastic_angles, index)

        self._calculate_lab_angles(thick)
        return sampled

    def _calculate_lab_angles(self, thick: float) -> None:
        self._incoming_cm(thick)
        sampled = self.sampled
        ecm_out = self.ecm_in + self.q_value - self.projectile_excitation - sampled.ext
        pc_out = self._pc_cm_out(ecm_out)

        fpp = self.frame_pp
        self._emit_to_lab(fpp, self.theta_cm, sampled.phi, pc_out, self.vcm)
        sampled.vpp_lab = fpp.velocity
        sampled.theta_lab = fpp.theta
        sampled.calculate_cartesian()

        phi_target = sampled.phi + PI if sampled.phi < PI else sampled.phi - PI
        ftt = self.frame_tt
        self._emit_to_lab(ftt, PI - self.theta_cm, phi_target, pc_out, self.vcm)
        self.v_target_lab = ftt.velocity
        self.theta_target = ftt.theta

        sampled.phi *= RAD_TO_DEG
        sampled.theta_elastic *= RAD_TO_DEG
        sampled.theta_lab *= RAD_TO_DEG