"""The interactive shell: prompt, line handling and the read loop."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path
from typing import Optional, TextIO

from .builtins import check_exit
from .environment import Environment, split_assignment
from .errors import ErrorCode, ShellError
from .executor import Executor
from .expansion import expand, expand_words
from .heredoc import HeredocFiles, collect_heredoc
from .lexer import split_args
from .parser import Command, RedirectKind, Redirection, parse

BLUE = "\033[1;34m"
YELLOW = "\033[0;32m"
WHITE = "\033[0m"
HEREDOC_PROMPT = f"{YELLOW}> {WHITE}"

Reader = Callable[[str], Optional[str]]


class Shell:
    """A shell session: its variables, last exit status and history."""

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self.env = Environment(os.environ if environ is None else environ)
        self.stdout = sys.stdout if stdout is None else stdout
        self.last_status = 0
        self.history: list[str] = []
        self.reader: Reader | None = None
        self._executor = Executor(self.env, self.stdout, self.stdout)

    def prompt(self) -> str:
        """The prompt: the working directory, then an arrow on a new line."""
        return f"{BLUE}minishell: {YELLOW}{os.getcwd()}{BLUE}\n ¬ {WHITE}"

    def _heredoc_lines(self) -> Iterator[str]:
        if self.reader is None:
            return
        while True:
            line = self.reader(HEREDOC_PROMPT)
            if line is None:
                return
            yield line

    def _read_heredocs(self, command: Command, files: HeredocFiles) -> Command:
        if not command.heredocs:
            return command
        redirections = []
        for redirection in command.redirections:
            if redirection.kind is RedirectKind.HEREDOC:
                text = collect_heredoc(
                    redirection.target or "",
                    self._heredoc_lines(),
                    lambda line: expand(line, self.env, self.last_status),
                )
                path = files.new_path()
                path.write_text(text)
                redirection = Redirection(RedirectKind.HEREDOC, str(path))
            redirections.append(redirection)
        return Command(list(command.words), redirections)

    def _assign(self, command: Command) -> None:
        for word in command.assignments:
            name, value = split_assignment(word)
            self.env.set(name, value)

    def execute(self, line: str) -> int:
        """Run one input line and return the last exit status.

        Errors are written to the output and leave the status unchanged.
        """
        try:
            if len(self.env) == 0:
                raise ShellError(ErrorCode.NO_ENVIRONMENT)
            words = split_args(line)
            if not words:
                return self.last_status
            words = expand_words(words, self.env, self.last_status)
            commands = parse(words)
            with HeredocFiles(Path.cwd()) as files:
                commands = [self._read_heredocs(c, files) for c in commands]
                if len(commands) == 1:
                    self._assign(commands[0])
                self.last_status = self._executor.run(commands)
        except ShellError as error:
            self.stdout.write(f"{error.message}\n")
        return self.last_status

    def repl(self, reader: Reader) -> int:
        """Read and run lines until end of input or exit.

        ``reader`` is called with a prompt and returns a line, or None at
        the end of input.
        """
        self.reader = reader
        self.stdout.write("\n")
        while True:
            line = reader(self.prompt())
            if line is None:
                break
            try:
                if check_exit(line):
                    break
            except ShellError as error:
                self.stdout.write(f"{error.message}\n")
                break
            self.history.append(line)
            self.execute(line)
        self.stdout.write("exit\n\n")
        return self.last_status


def _console_reader(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None
    except KeyboardInterrupt:
        sys.stdout.write("\n")
        return ""


def main(argv: list[str] | None = None) -> int:
    """Start an interactive session on the terminal."""
    try:
        import readline  # noqa: F401  (line editing and history for input())
    except ImportError:
        pass
    Shell().repl(_console_reader)
    return 0