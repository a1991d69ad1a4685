[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "streamdeckctl"
version = "0.5.0"
description = "Scoreboard data helpers for live-stream production: tournament brackets and match details from Challonge and smash.gg, tweet details and timestamp buttons"
requires-python = ">=3.10"
dependencies = []
keywords = ["streaming", "overlay", "scoreboard", "tournament", "bracket", "challonge", "smashgg"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["streamdeckctl"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
