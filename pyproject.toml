[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hydrotower"
version = "0.1.0"
description = "Active-object event framework and simulated controller for a hydroponic tower"
requires-python = ">=3.10"
dependencies = []
keywords = ["hydroponics", "active-object", "event-bus", "state-machine", "actors"]
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
    "Topic :: Home Automation",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
hydrotower = "hydrotower.app:main"

[tool.hatch.build.targets.wheel]
packages = ["hydrotower"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
