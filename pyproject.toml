[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cellmodels"
version = "0.1.0"
description = "Analysis tools, record stores and periodic Delaunay neighbour lists for 2D cell and particle simulations"
requires-python = ">=3.10"
keywords = [
    "vertex model",
    "voronoi model",
    "active matter",
    "autocorrelation",
    "structure factor",
    "delaunay",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Physics",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["cellmodels"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
