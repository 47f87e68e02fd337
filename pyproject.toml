[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minicc"
version = "1.0.0"
description = "A tiny compiler for a small subset of C that emits x86-64 assembly in Intel syntax"
requires-python = ">=3.10"
dependencies = []
keywords = ["compiler", "c", "lexer", "parser", "x86-64", "assembly"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
minicc = "minicc.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["minicc"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
