# li6sim

Building blocks for a Monte Carlo simulation of a light projectile scattering
on a carbon target, the breakup of the excited ejectile into two charged
fragments, and the detection of those fragments in silicon telescopes. The
relative energy reconstructed from the fragments gives the excitation energy
of the parent (the invariant-mass method), so such a simulation estimates
detection efficiency and resolution.

Units throughout: energies in MeV, velocities in cm/ns, momenta as p·c in
MeV, target thicknesses in mg/cm², angles in radians unless stated.

## Modules

| Module | Contents |
| --- | --- |
| `li6sim.constants` | `M0`, `C`, `VFACT`, angle conversions, mass excesses (`EXCESS_*`) and total masses (`MASS_*`) of light nuclei |
| `li6sim.rng` | `RandomSource`: `uniform`, `gaus`, `breit_wigner`, `exp_decay_time`, seedable |
| `li6sim.loss` | `EnergyLoss`: stopping-power tables, `dedx_at`, `energy_out`, `energy_in` |
| `li6sim.scattering` | `MultipleScattering`, `PolyScattering` (CH₂-type target), `RadiationLengthScattering` |
| `li6sim.telescope` | `Telescope` and `TelescopeHit`: one square telescope, 32 strips per side, ΔE and E thresholds |
| `li6sim.frame` | `KinematicValues` and `Frame`: Newtonian and relativistic energy, velocity, momentum and boosts |
| `li6sim.neutron` | `NeutronArray` and `NeutronFragment`: a ring neutron detector between 65° and 85° with energy-dependent efficiency |
| `li6sim.correlations` | `Correlations`, `SampledValues`, `read_cross_section_file`: angle sampling for 7Li + 12C → 6Li + 13C from Fresco cross sections |
| `li6sim.frag` | `Fragment`: energy loss, multiple scattering, silicon ΔE/E and detection of one charged fragment |
| `li6sim.decay` | `Decay`: two-body and phase-space breakup, relative-energy reconstruction |
| `li6sim.profile` | `Profile` and R-matrix helpers (`penetrability`, `shift`, `shift_neutron`, `gamma_width`, `wigner_limit`, …) |
| `li6sim.output` | `SimulationOutput`, `Histogram1D`, `Histogram2D`, `FragmentRecord`, `NeutronRecord` |

The one dependency, `mpmath`, supplies the Coulomb wave functions used by
`li6sim.profile`. Progress messages (Q-values, cross sections, line-shape
widths) go to the standard `logging` module.

## Examples

A seeded random source makes a run repeatable:

```python
from li6sim.rng import RandomSource

rng = RandomSource(12345)
energy = rng.breit_wigner(2.186, 0.024)
smear = rng.gaus(0.0, 1.0)
```

Stopping-power files hold a header line, the number of rows, then pairs of
energy per nucleon and dE/dx:

```python
from li6sim.loss import EnergyLoss

loss = EnergyLoss.from_file("Helium_C.loss", 4.0)
e_out = loss.energy_out(20.0, 1.5)   # -1.0 if the particle stops
e_in = loss.energy_in(e_out, 1.5)
```

Small-angle scattering in a CH₂-type target:

```python
from li6sim.scattering import PolyScattering

scat = PolyScattering(2.0, 3.0)       # projectile Z, thickness
sigma = scat.theta_rms(20.0, 0.5)     # half the target traversed
```

Relativistic kinematics and a boost:

```python
from li6sim.frame import Frame

f = Frame(4.0)
f.energy, f.theta, f.phi = 20.0, 0.1, 0.0
f.velocity_from_energy(relativistic=True)
f.transform_velocity([0.0, 0.0, 1.0], relativistic=True)
print(f.energy, f.theta)
```

An R-matrix line shape, sampled with a uniform number:

```python
from li6sim.profile import Profile, wigner_limit

rwidth2 = wigner_limit(6.0 / 7.0, 4.0)
shape = Profile.single(1.0, 1, 2, 6.0 / 7.0, 4.0, 0, rwidth2, None, 0.0)
decay_energy = shape.sample(0.5)
print(shape.e_max, shape.fwhm)
```

Passing `None` as the boundary condition sets it from the shift function at
the resonance energy.

## Output

`SimulationOutput(suffix, n_frags, has_neutron)` keeps one record per event:
set values with its `record_*` methods, call `fill()` to store the event and
`clear()` before the next. Histograms are filled as values are recorded.
`write(directory)` fills the reconstructed-parent histograms from the stored
events and writes everything to `sim<suffix>.json`, with NaN written as
`null`.

## What the package does not do

- There is no command and no ready-made event loop; a run is assembled from
  the classes above.
- No detector-array geometry is included. `Fragment` takes any object with a
  method `hit(theta, phi, x_target, y_target, de, e)` that returns an
  `li6sim.frag.ArrayHit` or `None`; `Telescope` handles a single telescope
  face in position coordinates only.
- The reaction in `Correlations` is fixed to 7Li + 12C → 6Li + 13C.

## Tests

```
pip install -e .[test]
pytest
```