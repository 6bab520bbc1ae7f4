[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hfdlkit"
version = "1.3.0"
description = "HFDL building blocks: HFNPDU parsing and formatting, Viterbi decoding, FIR filter design and I/Q sample input"
requires-python = ">=3.10"
dependencies = []
keywords = ["hfdl", "sdr", "aviation", "viterbi", "fir", "iq", "radio"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Ham Radio",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
hfdlkit = "hfdlkit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["hfdlkit"]

[tool.pytest.ini_options]
addopts = "-ra"
