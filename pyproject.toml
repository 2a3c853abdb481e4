[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "torcsga"
version = "0.1.0"
description = "Island-model genetic algorithm that tunes neural-controller weights for TORCS races"
requires-python = ">=3.10"
dependencies = []
keywords = ["genetic algorithm", "optimization", "torcs", "island model", "neuroevolution"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
torcsga = "torcsga.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["torcsga"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
