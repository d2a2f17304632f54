[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "li6sim"
version = "0.1.0"
description = "Monte Carlo building blocks for simulating the breakup of light nuclei and the detection of the fragments in silicon telescopes"
requires-python = ">=3.10"
dependencies = [
    "mpmath",
]
keywords = [
    "nuclear physics",
    "monte carlo",
    "invariant mass",
    "kinematics",
    "energy loss",
    "multiple scattering",
    "r-matrix",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["li6sim"]

[tool.pytest.ini_options]
addopts = "-ra"
