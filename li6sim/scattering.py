"""Small-angle multiple scattering of charged particles in a target."""

from __future__ import annotations

import math


class MultipleScattering:
    """Multiple scattering of a projectile in a single-element target."""

    A0 = 0.529e-8  # Bohr radius in cm

    def __init__(self, z_projectile: float, total_thickness: float, z_target: float):
        self.z_projectile = float(z_projectile)
        self.z_target = float(z_target)
        self.total_thickness = float(total_thickness)  # atoms / cm2
        screen = math.sqrt(self.z_projectile ** (2.0 / 3.0) + self.z_target ** (2.0 / 3.0))
        self.a = 0.885 * self.A0 / screen
        self.total_tau = math.pi * self.a**2 * self.total_thickness
        self.factor = 16.26 / (self.z_projectile * self.z_target) / screen * 1000.0

    def theta_rms(self, energy: float, fractional_thickness: float) -> float:
        """Return the RMS scattering angle (rad) for a fraction of the target."""
        tau = fractional_thickness * self.total_tau
        alpha_bar = tau**0.55
        alpha = alpha_bar / energy / self.factor
        return alpha * 0.851


class PolyScattering:
    """Multiple scattering in a CH2 polymer target (thickness in mg/cm2)."""

    def __init__(self, z_projectile: float, thickness: float):
        self.z_projectile = float(z_projectile)
        self.n_hydrogen = thickness / 1000.0 / 16.0 * 2.0 * 6.02e23
        self.n_carbon = thickness / 1000.0 / 16.0 * 6.02e23
        self.hydrogen = MultipleScattering(self.z_projectile, self.n_hydrogen, 1.0)
        self.carbon = MultipleScattering(self.z_projectile, self.n_carbon, 6.0)

    def theta_rms(self, energy: float, fractional_thickness: float) -> float:
        """Return the combined RMS angle of the hydrogen and carbon components."""
        return math.hypot(
            self.hydrogen.theta_rms(energy, fractional_thickness),
            self.carbon.theta_rms(energy, fractional_thickness),
        )


class RadiationLengthScattering:
    """Multiple scattering estimated from the target radiation length."""

    ALPHA = 1.0 / 137.0  # fine structure constant
    E2 = 1.44e-13  # Coulomb constant

    def __init__(self, total_thickness: float, z_target: float):
        self.total_thickness = float(total_thickness)  # atoms / cm2
        self.z_target = float(z_target)
        z = self.z_target
        self.l_rad = math.log(184.15 / z ** (1.0 / 3.0))
        self.l_dash_rad = math.log(1194.0 / z ** (2.0 / 3.0))
        f = (z * self.ALPHA) ** 2
        self.f = f * (1.0 / (1.0 + f) + 0.20206 - 0.0369 * f + 0.0083 * f**2)
        self.factor = 0.5 * self.E2 * math.sqrt(
            4.0 * math.pi * self.total_thickness * (z**2 * (self.l_rad - self.f) + z * self.l_dash_rad)
        )

    def theta_rms(self, z_projectile: float, energy: float, fractional_thickness: float) -> float:
        """Return the RMS scattering angle (rad)."""
        return self.factor * math.sqrt(fractional_thickness) * z_projectile / energy