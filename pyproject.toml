[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "daqstream"
version = "0.1.0"
description = "Consumer-side handling of streaming protocol signal meta information and measured data"
requires-python = ">=3.10"
dependencies = []
keywords = ["daq", "streaming", "signals", "measurement", "protocol"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["daqstream"]

[tool.pytest.ini_options]
addopts = "-ra"
