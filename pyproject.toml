[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "protowkt"
version = "0.12.0"
description = "Protocol Buffers well-known types Duration, Timestamp and Any, with wire encoding, as plain Python objects."
requires-python = ">=3.10"
dependencies = []
keywords = ["protobuf", "serialization", "well-known-types", "duration", "timestamp", "any"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["protowkt"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
