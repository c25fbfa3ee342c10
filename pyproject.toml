[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "myshell"
version = "0.1.0"
description = "A small interactive Unix shell with pipelines, redirection and job control"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "pipeline", "job control", "redirection", "posix"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
myshell = "myshell.shell:main"

[tool.hatch.build.targets.wheel]
packages = ["myshell"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
