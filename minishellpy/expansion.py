"""Expansion of ``$NAME`` and ``$?`` in words and here-document lines."""

from __future__ import annotations

import string
from collections.abc import Iterable

from .environment import Environment

_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_")
_DIGITS = frozenset(string.digits)


def _reference_end(text: str, start: int) -> int:
    """End of the reference whose name starts at ``start`` (just after '$')."""
    following = text[start:start + 1]
    if following == "?" or (following and following in _DIGITS):
        return start + 1
    end = start
    while end < len(text) and text[end] in _NAME_CHARS:
        end += 1
    return end


def _resolve(name: str, env: Environment, last_status: int) -> str:
    if name == "?":
        return str(last_status)
    if not name:
        return ""
    return env.get(name) or ""


def _expand_at(
    text: str, pos: int, env: Environment, last_status: int
) -> tuple[str, int]:
    """Expand the '$' at ``pos``; return the replacement and where it ends."""
    end = _reference_end(text, pos + 1)
    return _resolve(text[pos + 1:end], env, last_status), end


def expand(text: str, env: Environment, last_status: int) -> str:
    """Replace every variable reference in ``text``, ignoring quotes.

    ``$?`` becomes ``last_status``, ``$NAME`` the value of NAME, and a
    reference to an unset variable, or a '$' with no name, disappears.
    """
    parts: list[str] = []
    pos = 0
    while True:
        dollar = text.find("$", pos)
        if dollar < 0:
            parts.append(text[pos:])
            return "".join(parts)
        parts.append(text[pos:dollar])
        value, pos = _expand_at(text, dollar, env, last_status)
        parts.append(value)


def _expand_word(word: str, env: Environment, last_status: int) -> str:
    parts: list[str] = []
    quote: str | None = None
    pos = 0
    while pos < len(word):
        char = word[pos]
        if quote is None and char in "'\"":
            quote = char
        elif char == quote:
            quote = None
        elif char == "$" and quote != "'":
            value, pos = _expand_at(word, pos, env, last_status)
            parts.append(value)
            continue
        parts.append(char)
        pos += 1
    return "".join(parts)


def expand_words(
    words: Iterable[str], env: Environment, last_status: int
) -> list[str]:
    """Expand variables in each word, leaving single-quoted text alone.

    Quotes are kept; they are removed later, when commands are built.
    """
    return [_expand_word(word, env, last_status) for word in words]