[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wizplatformer"
version = "0.1.0"
description = "A small tile-map platformer starring a wizard, with simple force-based kinematics and tile collisions"
requires-python = ">=3.10"
dependencies = [
    "pygame",
]
keywords = ["game", "platformer", "tilemap", "tmx", "pygame", "kinematics"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Side-Scrolling/Arcade Games",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
wizplatformer = "wizplatformer.game:main"

[tool.hatch.build.targets.wheel]
packages = ["wizplatformer"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
