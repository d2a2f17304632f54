"""Kinematics, energy loss, scattering, decay, line-shape and output tools for simulating light-nucleus breakup."""

__version__ = "0.1.0"