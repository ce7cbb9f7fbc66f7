[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minishellpy"
version = "0.1.0"
description = "A small interactive command shell with pipes, redirections, here-documents and built-in commands"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "repl", "pipeline", "command-line", "heredoc"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
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
minishellpy = "minishellpy.shell:main"

[tool.hatch.build.targets.wheel]
packages = ["minishellpy"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
