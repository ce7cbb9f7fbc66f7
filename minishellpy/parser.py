"""Building commands, with their redirections, from the words of a line."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from itertools import dropwhile

from .environment import is_assignment
from .errors import ErrorCode, ShellError
from .lexer import remove_quotes

_PIPE = "|"


class RedirectKind(Enum):
    """The four kinds of redirection, named by their operator."""

    INPUT = "<"
    HEREDOC = "<<"
    OUTPUT = ">"
    APPEND = ">>"

    @property
    def is_input(self) -> bool:
        return self in (RedirectKind.INPUT, RedirectKind.HEREDOC)


@dataclass(frozen=True)
class Redirection:
    """A redirection; ``target`` is None when no name follows the operator."""

    kind: RedirectKind
    target: str | None


def _redirect_kind(word: str) -> RedirectKind | None:
    for kind in (RedirectKind.HEREDOC, RedirectKind.APPEND,
                 RedirectKind.INPUT, RedirectKind.OUTPUT):
        if word.startswith(kind.value):
            return kind
    return None


def redirection_target(word: str) -> str | None:
    """Return the file name or delimiter of a redirection word.

    Quotes are removed; None means the operator has no target.
    Raises ValueError if ``word`` is not a redirection.
    """
    if _redirect_kind(word) is None:
        raise ValueError(f"not a redirection: {word!r}")
    unquoted = remove_quotes(word)
    target = unquoted.lstrip(unquoted[0]).lstrip(" \t")
    return target or None


@dataclass
class Command:
    """One command of a pipeline."""

    words: list[str] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)

    @property
    def assignments(self) -> list[str]:
        """Every NAME=value word of the command."""
        return [word for word in self.words if is_assignment(word)]

    @property
    def arguments(self) -> list[str]:
        """The words from the program name on, leading assignments skipped."""
        return list(dropwhile(is_assignment, self.words))

    def program(self) -> str | None:
        """The first word that is not an assignment, or None."""
        arguments = self.arguments
        return arguments[0] if arguments else None

    def _last(self, inputs: bool) -> Redirection | None:
        for redirection in reversed(self.redirections):
            if redirection.kind.is_input == inputs:
                return redirection
        return None

    @property
    def input(self) -> Redirection | None:
        """The redirection that feeds standard input: the last input one."""
        return self._last(True)

    @property
    def output(self) -> Redirection | None:
        """The redirection that takes standard output: the last output one."""
        return self._last(False)

    @property
    def heredocs(self) -> list[Redirection]:
        """All here-documents, in order; each must be read."""
        return [r for r in self.redirections if r.kind is RedirectKind.HEREDOC]


def _segments(words: Sequence[str]) -> Iterator[list[str]]:
    current: list[str] = []
    for word in words:
        if word == _PIPE:
            if not current:
                raise ShellError(ErrorCode.UNEXPECTED_PIPE)
            yield current
            current = []
        else:
            current.append(word)
    if not current:
        raise ShellError(ErrorCode.UNCLOSED_PIPE)
    yield current


def _build(segment: list[str]) -> Command:
    command = Command()
    for word in segment:
        kind = _redirect_kind(word)
        if kind is not None:
            command.redirections.append(
                Redirection(kind, redirection_target(word))
            )
            continue
        unquoted = remove_quotes(word)
        if unquoted:
            command.words.append(unquoted)
    return command


def parse(words: Sequence[str]) -> list[Command]:
    """Turn the words of a line into the commands of a pipeline.

    Raises ShellError for a pipe with no command before or after it.
    """
    if not words:
        return []
    return [_build(segment) for segment in _segments(words)]