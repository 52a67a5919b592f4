[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nspirekit"
version = "0.1.0"
description = "Build and deploy tooling for TI-Nspire programs, with a cooperative async runtime and glyph outline helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["ti-nspire", "ndless", "cargo", "firebird", "async", "outline", "build"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
cargo-ndless = "nspirekit.cargo.main:main"

[tool.hatch.build.targets.wheel]
packages = ["nspirekit"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
