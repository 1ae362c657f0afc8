[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bandfit"
version = "0.1.0"
description = "Fit an inverted Gaussian band on a linear baseline to spreadsheet columns and compare NG/OK groups"
requires-python = ">=3.10"
keywords = [
    "curve fitting",
    "gaussian",
    "least squares",
    "xlsx",
    "box plot",
    "scatter plot",
    "zoom",
    "viewport",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Manufacturing",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Information Analysis",
    "Topic :: Scientific/Engineering :: Visualization",
]
dependencies = [
    "numpy>=1.23",
    "scipy>=1.9",
    "matplotlib>=3.6",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
]

[project.scripts]
bandfit = "bandfit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["bandfit"]

[tool.hatch.build.targets.sdist]
include = ["bandfit", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
