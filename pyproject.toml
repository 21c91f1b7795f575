[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vanarize"
version = "0.1.0"
description = "Lexer, syntax tree nodes, NaN-boxed values, simulated heap with mark-and-sweep collection, runtime helpers, event loop and x86-64 instruction encoder for the Vanarize language"
requires-python = ">=3.10"
dependencies = []
keywords = ["compiler", "lexer", "nan-boxing", "garbage-collector", "x86-64", "assembler"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["vanarize"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
