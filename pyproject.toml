[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chanchat"
version = "0.1.0"
description = "A small line-based TCP chat server with named channels and bounded message history"
requires-python = ">=3.10"
dependencies = []
keywords = ["chat", "server", "tcp", "channels"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
chanchat = "chanchat.server:main"

[tool.hatch.build.targets.wheel]
packages = ["chanchat"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
