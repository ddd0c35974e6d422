[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pegmeta"
version = "0.1.0"
description = "Grammar model, validation and optimisation passes for PEG parser generators"
requires-python = ">=3.10"
dependencies = []
keywords = ["peg", "parser", "grammar", "optimizer", "validator"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pegmeta"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
