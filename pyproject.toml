[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gnsslocutils"
version = "0.1.0"
description = "GNSS location utilities: NMEA sentence generation, message queues, timers, config parsing, target detection and device helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["gnss", "gps", "nmea", "location", "glonass", "message-queue"]
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
    "Topic :: Scientific/Engineering :: GIS",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gnsslocutils"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
