[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "squishies"
version = "0.1.0"
description = "A 2D soft-body physics simulation of squishy characters, with shape matching, collisions and grenades."
requires-python = ">=3.10"
keywords = ["soft-body", "physics", "simulation", "game", "spring", "collision"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: Simulation",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["squishies"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
