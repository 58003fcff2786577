[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sysload"
version = "1.0"
description = "Print CPU load, GPU load and SoC temperature once a second as tab-separated columns"
requires-python = ">=3.10"
dependencies = []
keywords = ["monitoring", "cpu", "gpu", "temperature", "raspberry-pi", "proc"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sysload = "sysload.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["sysload"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
