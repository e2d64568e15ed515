[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "l2spice"
version = "0.1.0"
description = "A small circuit netlist editor with modified nodal analysis, DC operating point and implicit time stepping"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["spice", "circuit", "netlist", "mna", "simulation", "electronics"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Electronic Design Automation (EDA)",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
l2spice = "l2spice.netlist.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["l2spice"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
