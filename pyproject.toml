[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xenocontrol"
version = "0.12.16"
description = "Game controller state tracking, stick drift sampling, settings and button mappings"
requires-python = ">=3.11"
keywords = ["gamepad", "controller", "xbox", "xinput", "deadzone", "mapping", "stick-drift"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Typing :: Typed",
]
dependencies = [
    "tomli-w",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
xenocontrol = "xenocontrol.app:main"

[tool.hatch.build.targets.wheel]
packages = ["xenocontrol"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
