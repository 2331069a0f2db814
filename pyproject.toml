[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hospital-personnel"
version = "0.1.0"
description = "Hospital personnel management: job groups, titles, staff records, rate limiting and polyclinic lookups."
requires-python = ">=3.10"
keywords = ["hospital", "personnel", "staff", "human resources", "polyclinic", "sqlite"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Healthcare Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["hospital_personnel"]

[tool.hatch.build.targets.sdist]
include = [
    "hospital_personnel",
    "tests",
    "README.md",
]

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
warn_redundant_casts = true
