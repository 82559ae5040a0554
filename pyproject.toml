[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "scfcore"
version = "1.0.0"
description = "Restricted self-consistent field building blocks: Fock operators, AO matrix builders, guesses and an SCF loop"
requires-python = ">=3.10"
keywords = ["scf", "hartree-fock", "kohn-sham", "quantum chemistry", "fock matrix"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Chemistry",
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
packages = ["scfcore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
