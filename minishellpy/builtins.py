"""The commands the shell runs itself: cd, echo, pwd, env, export, unset, exit."""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import TextIO

from .environment import Environment, assignment_name, is_assignment, split_assignment
from .errors import ErrorCode, ShellError, error_message

_BUILTINS = frozenset(("cd", "echo", "pwd", "env", "export", "unset", "exit"))
_PRINTING = frozenset(("echo", "pwd", "env"))
_BLANKS = " \t"
_EXIT = "exit"


def is_builtin(name: str | None) -> bool:
    """True if ``name`` is run by the shell itself."""
    return name in _BUILTINS


def prints_output(name: str | None) -> bool:
    """True for the built-ins whose output can be redirected."""
    return name in _PRINTING


def echo(args: Sequence[str], out: TextIO) -> int:
    """Write ``args`` separated by spaces; a leading ``-n`` drops the newline."""
    words = list(args)
    newline = True
    if words and words[0] == "-n":
        words = words[1:]
        newline = False
    parts: list[str] = []
    for position, word in enumerate(words):
        parts.append(word)
        if position + 1 < len(words) and word:
            parts.append(" ")
    if newline:
        parts.append("\n")
    out.write("".join(parts))
    return 0


def _target_directory(args: list[str], env: Environment, err: TextIO) -> str | None:
    if args and args[0].startswith("~"):
        home = env.get("HOME")
        args[0] = home if args[0] == "~" and home is not None else args[0][1:]
    if len(args) > 1:
        err.write(error_message(ErrorCode.TOO_MANY_ARGUMENTS, "cd") + "\n")
        return None
    if args:
        return args[0]
    home = env.get("HOME")
    if home is None:
        err.write(error_message(ErrorCode.CD_NO_SUCH_FILE, "~") + "\n")
    return home


def cd(args: Sequence[str], env: Environment, err: TextIO) -> int:
    """Change the working directory and update PWD.

    With no argument, or ``~``, goes to HOME. Returns the exit status.
    """
    path = _target_directory(list(args), env, err)
    if path is None:
        return 1
    try:
        os.chdir(path)
    except OSError:
        err.write(error_message(ErrorCode.CD_NO_SUCH_FILE, path) + "\n")
        return 1
    env.set("PWD", os.getcwd())
    return 0


def pwd(env: Environment, out: TextIO) -> int:
    """Write the working directory as recorded in PWD."""
    current = env.get("PWD")
    out.write(f"{os.getcwd() if current is None else current}\n")
    return 0


def print_env(env: Environment, out: TextIO) -> int:
    """Write every exported variable that has a value as NAME=value."""
    for variable in env.exported():
        if variable.value is not None:
            out.write(f"{variable.name}={variable.value}\n")
    return 0


def print_exports(env: Environment, out: TextIO) -> int:
    """Write every exported variable in ``declare -x`` form."""
    for variable in env.exported():
        if variable.value is None:
            out.write(f"declare -x {variable.name}\n")
        else:
            out.write(f'declare -x {variable.name}="{variable.value}"\n')
    return 0


def export(args: Sequence[str], env: Environment) -> int:
    """Export each NAME or NAME=value in ``args``.

    Every argument is checked first; an invalid one raises ShellError and
    nothing is changed.
    """
    for word in args:
        assignment_name(word)
    for word in args:
        if is_assignment(word):
            name, value = split_assignment(word)
            env.set(name, value, True)
        else:
            env.export(word)
    return 0


def unset(args: Sequence[str], env: Environment) -> int:
    """Remove each variable named in ``args``."""
    for name in args:
        env.unset(name)
    return 0


def check_exit(line: str) -> bool:
    """True if ``line`` asks the shell to leave.

    A line that goes on after the command name raises ShellError for too
    many arguments; the shell leaves in that case too.
    """
    pos = len(line) - len(line.lstrip(_BLANKS))
    matched = 0
    while pos < len(line) and matched < len(_EXIT) and line[pos] == _EXIT[matched]:
        pos += 1
        matched += 1
    rest = line[pos:].lstrip(_BLANKS)
    complete = matched == len(_EXIT)
    if complete and not rest:
        return True
    if line[pos:pos + 1] in (" ", "\t") and (rest or complete):
        raise ShellError(ErrorCode.TOO_MANY_ARGUMENTS, "exit")
    return False