"""Splitting of an input line into words, and quote removal."""

from __future__ import annotations

from collections.abc import Iterator

from .errors import ErrorCode, ShellError

_BLANKS = " \t"
_QUOTES = "'\""
_WORD_STOPS = frozenset(" \t|<>;\\")
_REDIRECT_STOPS = frozenset(";\\<>")
_SEQUENCE_STOPS = frozenset(";\\")
_LINE_START_STOPS = frozenset("|;\\")
_AFTER_PIPE_STOPS = frozenset(("", "|", ";", "\\"))

_TOKEN_CODES = {
    "'": ErrorCode.UNCLOSED_QUOTES,
    '"': ErrorCode.UNCLOSED_DOUBLE_QUOTES,
    "|": ErrorCode.UNEXPECTED_PIPE,
    "": ErrorCode.UNCLOSED_PIPE,
    ";": ErrorCode.UNEXPECTED_SEMICOLON,
    "\\": ErrorCode.UNEXPECTED_BACKSLASH,
    "<": ErrorCode.UNEXPECTED_LESS,
    ">": ErrorCode.UNEXPECTED_GREATER,
}


def _unexpected(char: str) -> ShellError:
    return ShellError(_TOKEN_CODES[char])


def _skip_blanks(line: str, pos: int) -> int:
    while pos < len(line) and line[pos] in _BLANKS:
        pos += 1
    return pos


def _peek(line: str, pos: int) -> str:
    return line[pos:pos + 1]


def _pipe_end(line: str, pos: int) -> int:
    pos = _skip_blanks(line, pos + 1)
    following = _peek(line, pos)
    if following in _AFTER_PIPE_STOPS:
        raise _unexpected(following)
    return pos


def _word_end(line: str, pos: int) -> int:
    if line[pos] in "<>":
        arrow = line[pos]
        pos += 1
        if _peek(line, pos) == arrow:
            pos += 1
        pos = _skip_blanks(line, pos)
        following = _peek(line, pos)
        if following in _REDIRECT_STOPS:
            raise _unexpected(following)
    quote = None
    while pos < len(line):
        char = line[pos]
        if quote is None:
            if char in _WORD_STOPS:
                break
            if char in _QUOTES:
                quote = char
        elif char == quote:
            quote = None
        pos += 1
    if quote is not None:
        raise _unexpected(quote)
    following = _peek(line, pos)
    if following in _SEQUENCE_STOPS:
        raise _unexpected(following)
    return pos


def _tokens(line: str, pos: int) -> Iterator[str]:
    while pos < len(line):
        if line[pos] == "|":
            pos = _pipe_end(line, pos)
            yield "|"
        else:
            end = _word_end(line, pos)
            word = line[pos:end]
            yield "''" if is_empty_quotes(word) else word
            pos = end
        pos = _skip_blanks(line, pos)
        following = _peek(line, pos)
        if following in _SEQUENCE_STOPS:
            raise _unexpected(following)


def split_args(line: str) -> list[str]:
    """Split ``line`` into words, pipes and redirections.

    Quotes are kept in the words; a redirection keeps its arrows and the
    target that follows them. Raises ShellError on a syntax error.
    """
    if not line or line[0] == "\n":
        return []
    pos = _skip_blanks(line, 0)
    first = _peek(line, pos)
    if first in _LINE_START_STOPS:
        raise _unexpected(first)
    return list(_tokens(line, pos))


def is_empty_quotes(word: str) -> bool:
    """True if ``word`` is made only of pairs of empty quotes, or is empty."""
    rest = word
    while rest[:1] in ("'", '"') and rest[1:2] == rest[:1]:
        rest = rest[2:]
    return rest == ""


def remove_quotes(word: str) -> str:
    """Remove the quoting from ``word``, keeping what the quotes enclose.

    A lone pair of single quotes is kept as it is.
    """
    if word == "''":
        return word
    kept = []
    quote = None
    for char in word:
        if quote is None and char in _QUOTES:
            quote = char
        elif char == quote:
            quote = None
        else:
            kept.append(char)
    return "".join(kept)