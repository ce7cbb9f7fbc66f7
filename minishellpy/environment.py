"""Shell variables: the environment and local assignments."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from .errors import ErrorCode, ShellError


@dataclass
class Variable:
    """A shell variable; ``value`` is None when exported without a value."""

    name: str
    value: str | None = None
    exported: bool = False


def _assignment_count(word: str) -> int:
    """Number of '=' in ``word``, or -1 if it cannot start a variable."""
    first = word[:1]
    if not (first.isascii() and (first.isalpha() or first == "_")):
        return -1
    if word.strip("=") == "":
        return -1
    return word.count("=")


def is_assignment(word: str) -> bool:
    """True if ``word`` has the form NAME=value."""
    return _assignment_count(word) > 0


def assignment_name(word: str) -> str:
    """Return the variable name in ``word``: the part before '=', or all of it.

    Raises ShellError when ``word`` cannot name a variable.
    """
    count = _assignment_count(word)
    if count < 0:
        raise ShellError(ErrorCode.INVALID_IDENTIFIER, word)
    return word.split("=", 1)[0] if count > 0 else word


def split_assignment(word: str) -> tuple[str, str]:
    """Split NAME=value at the first '='. Raises ValueError otherwise."""
    if not is_assignment(word):
        raise ValueError(f"not an assignment: {word!r}")
    name, value = word.split("=", 1)
    return name, value


class Environment:
    """Ordered set of shell variables, exported or local."""

    def __init__(self, mapping: Mapping[str, str] | None = None) -> None:
        self._variables: dict[str, Variable] = {}
        for name, value in (mapping or {}).items():
            self._variables[name] = Variable(name, value, True)

    def get(self, name: str) -> str | None:
        """Return the value of ``name``, or None if unset or valueless."""
        variable = self._variables.get(name)
        return None if variable is None else variable.value

    def set(self, name: str, value: str | None, exported: bool | None = None) -> None:
        """Give ``name`` a value; a new variable is local unless ``exported``."""
        variable = self._variables.get(name)
        if variable is None:
            self._variables[name] = Variable(name, value, bool(exported))
            return
        variable.value = value
        if exported is not None:
            variable.exported = exported

    def unset(self, name: str) -> None:
        """Remove ``name``; nothing happens if it is not set."""
        self._variables.pop(name, None)

    def export(self, name: str) -> None:
        """Mark ``name`` exported, creating it without a value if needed."""
        if _assignment_count(name) != 0:
            raise ShellError(ErrorCode.INVALID_IDENTIFIER, name)
        variable = self._variables.get(name)
        if variable is None:
            self._variables[name] = Variable(name, None, True)
        else:
            variable.exported = True

    def exported(self) -> list[Variable]:
        """The exported variables, in order."""
        return [v for v in self._variables.values() if v.exported]

    def as_dict(self) -> dict[str, str]:
        """Exported variables that have a value, as passed to programs."""
        return {v.name: v.value for v in self.exported() if v.value is not None}

    def __iter__(self) -> Iterator[Variable]:
        return iter(list(self._variables.values()))

    def __contains__(self, name: object) -> bool:
        return name in self._variables

    def __len__(self) -> int:
        return len(self._variables)