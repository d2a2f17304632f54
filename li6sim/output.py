"""Event records, histograms and the output file of a simulation run."""

from __future__ import annotations

import copy
import json
import math
from dataclasses import asdict, dataclass, field
from os import PathLike
from pathlib import Path
from typing import Any, Dict, List, Union

from .correlations import SampledValues
from .frame import KinematicValues

_NAN = float("nan")


def _nan3() -> List[float]:
    return [_NAN, _NAN, _NAN]


@dataclass
class FragmentRecord:
    """Energy, position and angle of one charged fragment."""

    de: float = _NAN
    e: float = _NAN
    recon_energy: float = _NAN
    x: float = _NAN
    y: float = _NAN
    theta_lab: float = _NAN

    def clear(self) -> None:
        """Reset every value to NaN."""
        self.de = _NAN
        self.e = _NAN
        self.recon_energy = _NAN
        self.x = _NAN
        self.y = _NAN
        self.theta_lab = _NAN


@dataclass
class NeutronRecord:
    """Time, energy, angle and position of the neutron fragment."""

    t: float = _NAN
    e: float = _NAN
    theta_lab: float = _NAN
    pos: List[float] = field(default_factory=_nan3)

    def clear(self) -> None:
        """Reset every value to NaN."""
        self.t = _NAN
        self.e = _NAN
        self.theta_lab = _NAN
        self.pos = _nan3()


def _find_bin(x: float, bins: int, low: float, high: float) -> int:
    """Bin number with 0 for underflow and bins + 1 for overflow (NaN included)."""
    if x < low:
        return 0
    if not x < high:
        return bins + 1
    return 1 + min(int(bins * (x - low) / (high - low)), bins - 1)


def _check_axis(bins: int, low: float, high: float) -> None:
    if bins < 1:
        raise ValueError(f"a histogram axis needs at least one bin, got {bins}")
    if not high > low:
        raise ValueError(f"axis upper edge {high} must exceed lower edge {low}")


class Histogram1D:
    """Fixed-width one-dimensional histogram with underflow and overflow."""

    def __init__(self, name: str, bins: int, low: float, high: float):
        _check_axis(bins, low, high)
        self.name = name
        self.bins = bins
        self.low = float(low)
        self.high = float(high)
        self.reset()

    def reset(self) -> None:
        """Empty the histogram."""
        self.counts = [0] * self.bins
        self.underflow = 0
        self.overflow = 0
        self.entries = 0

    def fill(self, x: float) -> int:
        """Add one entry at x; return its bin (0 underflow, bins + 1 overflow)."""
        index = _find_bin(x, self.bins, self.low, self.high)
        if index == 0:
            self.underflow += 1
        elif index == self.bins + 1:
            self.overflow += 1
        else:
            self.counts[index - 1] += 1
        self.entries += 1
        return index

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "bins": self.bins,
            "low": self.low,
            "high": self.high,
            "counts": list(self.counts),
            "underflow": self.underflow,
            "overflow": self.overflow,
            "entries": self.entries,
        }


class Histogram2D:
    """Fixed-width two-dimensional histogram; cells include under/overflow rows."""

    def __init__(
        self,
        name: str,
        xbins: int,
        xlow: float,
        xhigh: float,
        ybins: int,
        ylow: float,
        yhigh: float,
    ):
        _check_axis(xbins, xlow, xhigh)
        _check_axis(ybins, ylow, yhigh)
        self.name = name
        self.xbins = xbins
        self.xlow = float(xlow)
        self.xhigh = float(xhigh)
        self.ybins = ybins
        self.ylow = float(ylow)
        self.yhigh = float(yhigh)
        self.reset()

    def reset(self) -> None:
        """Empty the histogram."""
        self.cells = [[0] * (self.ybins + 2) for _ in range(self.xbins + 2)]
        self.entries = 0

    def fill(self, x: float, y: float) -> tuple:
        """Add one entry at (x, y); return its (x bin, y bin)."""
        ix = _find_bin(x, self.xbins, self.xlow, self.xhigh)
        iy = _find_bin(y, self.ybins, self.ylow, self.yhigh)
        self.cells[ix][iy] += 1
        self.entries += 1
        return ix, iy

    @property
    def counts(self) -> List[List[int]]:
        """In-range cell counts indexed [x bin - 1][y bin - 1]."""
        return [row[1:-1] for row in self.cells[1:-1]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "xbins": self.xbins,
            "xlow": self.xlow,
            "xhigh": self.xhigh,
            "ybins": self.ybins,
            "ylow": self.ylow,
            "yhigh": self.yhigh,
            "cells": [list(row) for row in self.cells],
            "entries": self.entries,
        }


def _json_safe(value: Any) -> Any:
    """Replace NaN and infinities with None so the output is strict JSON."""
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


class SimulationOutput:
    """Collects per-event records and histograms, and writes them to a file."""

    def __init__(self, suffix: str, n_frags: int, has_neutron: bool = True):
        self.suffix = suffix
        self.has_neutron = has_neutron
        self.n_frags = n_frags - int(bool(has_neutron))
        if self.n_frags < 0:
            raise ValueError("number of charged fragments cannot be negative")
        self.real_fragments = [FragmentRecord() for _ in range(self.n_frags)]
        self.recon_fragments = [FragmentRecord() for _ in range(self.n_frags)]
        self.elastic = FragmentRecord()
        self.neutron = NeutronRecord()
        self.sampler = SampledValues()
        self.recon = KinematicValues()
        self.erel_p = _NAN
        self.erel_p_recon = _NAN
        self.ex = _NAN
        self.cos_theta_h = _NAN
        self.is_elastic_hit = False
        self.is_frag_det = False
        self.events: List[Dict[str, Any]] = []

        self.histograms: Dict[str, Union[Histogram1D, Histogram2D]] = {}
        h1, h2 = self._h1, self._h2
        # primary distributions of the parent fragment
        self.hist_vel_p = h1("vel_P", 100, 1.5, 4)
        self.hist_theta_p = h1("theta_P", 200, 0, 30)
        self.hist_phi_p = h1("phi_P", 180, 0, 360)
        self.kinematic_circle = h2("kinematic_circle", 200, -1, 1, 120, 2, 3.8)
        self.hist_theta_beam_p = h1("theta_beam_P", 200, 0, 30)
        # reconstructed secondary distributions of the parent
        self.hist_vel_s = h1("vel_S", 100, 1.5, 4)
        self.hist_theta_s = h1("theta_S", 200, 0, 30)
        self.hist_phi_s = h1("phi_S", 180, 0, 360)
        self.hist_theta_beam_s_sharp = h1("hist_theta_beam_S_sharp", 200, 0, 30)
        self.hist_theta_beam_s_recon = h1("hist_theta_beam_S_recon", 200, 0, 30)
        # reconstructed fragment energies; E on x, DE on y
        self.dee = h2("DEE", 800, 0, 22, 500, 0, 80)
        self.proton_energy = h1("protonenergy", 100, 0, 30)
        self.alpha_energy = h1("alphaenergy", 100, 0, 40)
        # heavy fragment emission angle: +-1 longitudinal, 0 transverse
        self.cos_theta_h_hist = h1("cos_thetaH", 100, -1, 1)
        self.hist_erel_theta_h = h2("Erel_thetaH", 200, 0, 8, 25, -1, 1)
        # decay and excitation energy
        self.hist_erel_p = h1("hist_Erel_P", 200, 0, 8)
        self.hist_erel = h1("Erel", 200, 0, 8)
        self.hist_ex = h1("Ex", 400, 0, 18)
        self.hist_ex_trans = h1("Ex_trans", 400, 0, 18)
        self.hist_ex_trans_narrow = h1("Ex_trans_narrow", 400, 0, 18)
        self.hist_ex_de = h2("Ex_DE", 400, 0, 18, 100, 0, 16)
        # x-y maps of detected fragments
        self.proton_xy_s = h2("protonXY_S", 100, -10, 10, 100, -10, 10)
        self.core_xy_s = h2("coreXY_S", 100, -10, 10, 100, -10, 10)
        self.hist_neut_theta = h1("neut_theta", 200, 0, 90)

    def _h1(self, name: str, bins: int, low: float, high: float) -> Histogram1D:
        hist = Histogram1D(name, bins, low, high)
        self.histograms[name] = hist
        return hist

    def _h2(self, name, xbins, xlow, xhigh, ybins, ylow, yhigh) -> Histogram2D:
        hist = Histogram2D(name, xbins, xlow, xhigh, ybins, ylow, yhigh)
        self.histograms[name] = hist
        return hist

    @property
    def filename(self) -> str:
        return f"sim{self.suffix}.json"

    def fill(self) -> None:
        """Store a snapshot of the current event."""
        event: Dict[str, Any] = {
            "real_fragments": [asdict(f) for f in self.real_fragments],
            "recon_fragments": [asdict(f) for f in self.recon_fragments],
            "elastic": asdict(self.elastic),
            "erel_p": self.erel_p,
            "erel_p_recon": self.erel_p_recon,
            "ex": self.ex,
            "cos_theta_h": self.cos_theta_h,
            "is_elastic_hit": self.is_elastic_hit,
            "is_frag_det": self.is_frag_det,
            "sampler": asdict(self.sampler),
            "recon": asdict(self.recon),
        }
        if self.has_neutron:
            event["neutron"] = asdict(self.neutron)
        self.events.append(event)

    def clear(self) -> None:
        """Reset the current event before the next one."""
        for record in self.real_fragments:
            record.clear()
        for record in self.recon_fragments:
            record.clear()
        self.elastic.clear()
        self.erel_p = _NAN
        self.erel_p_recon = _NAN
        self.ex = _NAN
        self.cos_theta_h = _NAN
        self.is_elastic_hit = False
        self.is_frag_det = False
        self.sampler.clear()
        self.recon.clear()
        self.neutron.clear()

    def _fragment(self, records: List[FragmentRecord], index: int) -> FragmentRecord:
        if not 0 <= index < self.n_frags:
            raise IndexError(f"fragment index {index} out of range 0..{self.n_frags - 1}")
        return records[index]

    @staticmethod
    def _set(record: FragmentRecord, de, e, recon_energy, x, y, theta) -> None:
        record.de = de
        record.e = e
        record.recon_energy = recon_energy
        record.x = x
        record.y = y
        record.theta_lab = theta

    def record_real_fragment(self, index, de, e, recon_energy, x, y, theta) -> None:
        """Set the real values of charged fragment ``index``."""
        self._set(self._fragment(self.real_fragments, index), de, e, recon_energy, x, y, theta)

    def record_recon_fragment(self, index, de, e, recon_energy, x, y, theta) -> None:
        """Set the reconstructed values of charged fragment ``index``."""
        self._set(self._fragment(self.recon_fragments, index), de, e, recon_energy, x, y, theta)

    def record_elastic(self, de, e, recon_energy, x, y, theta) -> None:
        """Set the detected elastically scattered beam particle."""
        self._set(self.elastic, de, e, recon_energy, x, y, theta)
        self.hist_theta_beam_s_sharp.fill(self.sampler.theta_elastic)
        self.hist_theta_beam_s_recon.fill(theta)

    def record_neutron(self, t, energy, theta, x, y, z) -> None:
        """Set time, energy, angle and position of the neutron."""
        self.neutron.t = t
        self.neutron.e = energy
        self.neutron.theta_lab = theta
        self.neutron.pos = [x, y, z]
        self.hist_neut_theta.fill(theta)

    def record_erel_primary(self, e) -> None:
        """Set the sampled decay energy."""
        self.erel_p = e
        self.hist_erel_p.fill(e)

    def record_erel_primary_recon(self, e) -> None:
        """Set the decay energy computed from the real fragments."""
        self.erel_p_recon = e

    def record_ex(self, e) -> None:
        """Set the reconstructed excitation energy."""
        self.ex = e
        self.hist_ex.fill(e)

    def record_cos_theta_h(self, c) -> None:
        """Set cos(theta) of the heavy decay fragment."""
        self.cos_theta_h = c
        self.cos_theta_h_hist.fill(c)

    def record_elastic_hit(self, hit) -> None:
        """Mark whether the beam particle hit a detector."""
        self.is_elastic_hit = bool(hit)

    def record_frag_detected(self, detected) -> None:
        """Mark whether all decay fragments were detected."""
        self.is_frag_det = bool(detected)

    def record_sampled_values(self, sampled: SampledValues) -> None:
        """Copy the values sampled from the angular distributions."""
        self.sampler = copy.deepcopy(sampled)
        s = self.sampler
        self.hist_phi_p.fill(s.phi)
        self.hist_theta_beam_p.fill(s.theta_elastic)
        self.hist_theta_p.fill(s.theta_lab)
        self.hist_vel_p.fill(s.vpp_lab)
        self.kinematic_circle.fill(s.vpp_x, s.vpp_z)

    def record_recon_values(self, kinematics: KinematicValues) -> None:
        """Copy the reconstructed parent kinematics."""
        self.recon = copy.deepcopy(kinematics)

    def _fill_recon_histograms(self) -> None:
        pairs = (
            (self.hist_erel, "energy"),
            (self.hist_vel_s, "velocity"),
            (self.hist_theta_s, "theta"),
            (self.hist_phi_s, "phi"),
        )
        for hist, key in pairs:
            hist.reset()
            for event in self.events:
                value = event["recon"][key]
                if not math.isnan(value):
                    hist.fill(value)

    def write(self, directory: Union[str, PathLike] = ".") -> Path:
        """Write events and histograms to sim<suffix>.json in directory."""
        self._fill_recon_histograms()
        target = Path(directory)
        target.mkdir(parents=True, exist_ok=True)
        path = target / self.filename
        document = {
            "suffix": self.suffix,
            "n_frags": self.n_frags,
            "has_neutron": self.has_neutron,
            "events": self.events,
            "histograms": {name: h.to_dict() for name, h in self.histograms.items()},
        }
        with open(path, "w", encoding="utf-8") as handle:
            json.dump(_json_safe(document), handle)
        return path