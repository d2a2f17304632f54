"""A square silicon telescope with 32 strips on each side."""

from __future__ import annotations

from dataclasses import dataclass

from .rng import RandomSource

_STRIPS = 32.0


@dataclass(frozen=True)
class TelescopeHit:
    """Strip indices and reconstructed position of a detected particle."""

    ix: int
    iy: int
    x_recon: float
    y_recon: float


class Telescope:
    """Detector face centred at (x_center, y_center) with energy thresholds."""

    def __init__(
        self,
        x_center: float,
        y_center: float,
        d_active: float,
        de_threshold: float,
        e_threshold: float,
        rng: RandomSource | None = None,
    ):
        self.x_center = x_center
        self.y_center = y_center
        self.d_active = d_active
        self.de_threshold = de_threshold
        self.e_threshold = e_threshold
        self.rng = rng if rng is not None else RandomSource()

    def hit(self, x: float, y: float, de: float, e: float) -> TelescopeHit | None:
        """Return the hit for a particle at (x, y), or None if it is not detected."""
        half = self.d_active / 2.0
        if abs(x - self.x_center) > half or abs(y - self.y_center) > half:
            return None
        if de < self.de_threshold or e < self.e_threshold:
            return None
        ix = int((x - self.x_center - half) / self.d_active * _STRIPS)
        iy = int((y - self.y_center - half) / self.d_active * _STRIPS)
        x_recon = (ix + self.rng.uniform()) / _STRIPS * self.d_active + half + self.x_center
        y_recon = (iy + self.rng.uniform()) / _STRIPS * self.d_active + half + self.y_center
        return TelescopeHit(ix, iy, x_recon, y_recon)