[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "oranlm"
version = "0.1.0"
description = "LTE handover logic modules: RSRP-margin, dynamic-programming and model-driven cell selection"
requires-python = ">=3.10"
dependencies = []
keywords = ["oran", "ric", "lte", "handover", "rsrp", "load-balancing"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["oranlm"]

[tool.pytest.ini_options]
addopts = "-ra"
