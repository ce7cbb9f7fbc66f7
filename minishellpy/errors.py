"""Error codes and the messages the shell prints for them."""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Every error the shell can report."""

    UNCLOSED_QUOTES = -1
    UNCLOSED_DOUBLE_QUOTES = -2
    NO_SUCH_FILE = -3
    FILE_ERROR = -4
    TOO_MANY_ARGUMENTS = -5
    CD_NO_SUCH_FILE = -6
    UNEXPECTED_PIPE = -7
    NO_ENVIRONMENT = -8
    UNCLOSED_PIPE = -9
    UNEXPECTED_SEMICOLON = -10
    UNEXPECTED_BACKSLASH = -11
    DOUBLE_PIPE = -12
    UNEXPECTED_LESS = -13
    UNEXPECTED_GREATER = -14
    INVALID_IDENTIFIER = -15
    HEREDOC_EOF = -16


_MESSAGES = {
    ErrorCode.UNCLOSED_QUOTES: "error: unclosed quotes",
    ErrorCode.UNCLOSED_DOUBLE_QUOTES: "error: unclosed double quotes",
    ErrorCode.NO_SUCH_FILE: "{0}: No such file or directory",
    ErrorCode.FILE_ERROR: "{0}: Error",
    ErrorCode.TOO_MANY_ARGUMENTS: "{0}: too many arguments",
    ErrorCode.CD_NO_SUCH_FILE: "cd: {0}: No such file or directory",
    ErrorCode.UNEXPECTED_PIPE: "error: syntax error near unexpected token `|'",
    ErrorCode.NO_ENVIRONMENT: "error: no enviroment variables",
    ErrorCode.UNCLOSED_PIPE: "error: unclosed pipe",
    ErrorCode.UNEXPECTED_SEMICOLON: "error: syntax error near unexpected token `;'",
    ErrorCode.UNEXPECTED_BACKSLASH: "error: syntax error near unexpected token `\\'",
    ErrorCode.DOUBLE_PIPE: "error: syntax error near unexpected token `|'",
    ErrorCode.UNEXPECTED_LESS: "error: syntax error near unexpected token `<'",
    ErrorCode.UNEXPECTED_GREATER: "error: syntax error near unexpected token `>'",
    ErrorCode.INVALID_IDENTIFIER: "export: `{0}': not a valid identifier",
    ErrorCode.HEREDOC_EOF: (
        "warning: here-document delimited by end-of-file (wanted `{0}')"
    ),
}


def error_message(code: int, argument: str | None = None) -> str:
    """Return the message for ``code``, filled in with ``argument``.

    Raises ValueError for a code that is not an ErrorCode.
    """
    template = _MESSAGES[ErrorCode(code)]
    return template.format("(null)" if argument is None else argument)


class ShellError(Exception):
    """An error the shell reports to the user and then carries on."""

    def __init__(self, code: int, argument: str | None = None) -> None:
        self.code = ErrorCode(code)
        self.argument = argument
        super().__init__(error_message(self.code, argument))

    @property
    def message(self) -> str:
        return str(self)