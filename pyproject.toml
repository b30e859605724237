[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "raftlogkit"
version = "0.1.0"
description = "Building blocks of a log-structured Raft log store: number codecs, configuration, consistency checking and file-system abstractions"
requires-python = ">=3.11"
keywords = ["raft", "log", "storage", "codec", "varint", "write-ahead-log"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
    "Typing :: Typed",
]
dependencies = [
    "tomli-w",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["raftlogkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
strict = true
