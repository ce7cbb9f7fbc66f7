"""Here-documents: reading their lines and the files that hold them."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path
from types import TracebackType

from .errors import ErrorCode, ShellError

_PREFIX = ".temp_file_"
_BLANKS = " \t"


class HeredocFiles:
    """Numbered temporary files for here-documents, removed together."""

    def __init__(self, directory: str | Path | None = None) -> None:
        self.directory = Path("." if directory is None else directory)
        self._count = 0

    def new_path(self) -> Path:
        """Return the path of the next here-document file."""
        self._count += 1
        return self.directory / f"{_PREFIX}{self._count}"

    def cleanup(self) -> None:
        """Remove every file handed out so far and start numbering again."""
        while self._count > 0:
            (self.directory / f"{_PREFIX}{self._count}").unlink(missing_ok=True)
            self._count -= 1

    def __enter__(self) -> HeredocFiles:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.cleanup()


def _delimiter(word: str) -> str:
    return word.lstrip("<").lstrip(_BLANKS)


def delimiter_matches(word: str, line: str) -> bool:
    """True if ``line`` ends the here-document opened by ``word``.

    ``word`` may be the whole redirection, arrows included, or the bare
    delimiter.
    """
    return _delimiter(word) == line


def collect_heredoc(
    delimiter: str,
    lines: Iterable[str],
    expand: Callable[[str], str] | None = None,
) -> str:
    """Read lines up to the delimiter and return them, each ending in a newline.

    A trailing newline on an input line is dropped before it is compared.
    Each kept line goes through ``expand`` when one is given. Running out
    of lines first raises ShellError.
    """
    kept: list[str] = []
    for raw in lines:
        line = raw[:-1] if raw.endswith("\n") else raw
        if delimiter_matches(delimiter, line):
            return "".join(kept)
        kept.append((expand(line) if expand is not None else line) + "\n")
    raise ShellError(ErrorCode.HEREDOC_EOF, _delimiter(delimiter))