[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "motionplan"
version = "0.1.0"
description = "2D motion planning: potential fields, occupancy grids with D* Lite, and probabilistic road maps with Theta*"
requires-python = ">=3.10"
dependencies = []
keywords = ["motion planning", "path planning", "robotics", "d-star lite", "prm", "potential field", "theta-star"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["motionplan"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
