[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sfwiki"
version = "0.1.0"
description = "Building, reading, writing and inspecting plugin files made of records and groups, with error tracking, logging and file helpers."
requires-python = ">=3.10"
dependencies = []
keywords = ["esp", "esm", "plugin", "mod", "records", "groups", "binary"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: File Formats",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sfwiki"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
