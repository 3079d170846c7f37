[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "compiletest"
version = "0.1.0"
description = "Building blocks for a compiler test harness: process capture, expected-error matching, output normalization, debugger scripts and output checks"
requires-python = ">=3.10"
dependencies = []
keywords = ["testing", "compiler", "test-harness", "ui-tests", "diagnostics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["compiletest"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
