[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "progresskit"
version = "0.1.0"
description = "Terminal progress rendering: human-readable formatting, draw targets, multi-line layouts and an in-memory terminal."
requires-python = ">=3.10"
dependencies = [
    "wcwidth",
]
keywords = ["progress", "terminal", "console", "cli", "formatting"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: User Interfaces",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["progresskit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
