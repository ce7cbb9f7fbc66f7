"""Running pipelines of built-in and external commands."""

from __future__ import annotations

import io
import os
import subprocess
import sys
import tempfile
import threading
from collections.abc import Iterable, Sequence
from contextlib import ExitStack
from dataclasses import dataclass
from typing import IO, BinaryIO, TextIO, Union

from .builtins import (
    cd,
    echo,
    export,
    is_builtin,
    print_env,
    print_exports,
    prints_output,
    pwd,
    unset,
)
from .environment import Environment, assignment_name
from .errors import ErrorCode, ShellError, error_message
from .parser import Command, RedirectKind, Redirection

NOT_FOUND_STATUS = 127

_MODES = {
    RedirectKind.INPUT: "rb",
    RedirectKind.HEREDOC: "rb",
    RedirectKind.OUTPUT: "wb",
    RedirectKind.APPEND: "ab",
}

_Source = Union["subprocess.Popen[bytes]", bytes, BinaryIO, None]


def search_paths(env: Environment) -> list[str]:
    """The directories of PATH, each ending in '/'; empty entries are skipped."""
    value = env.get("PATH")
    if not value:
        return []
    return [directory + "/" for directory in value.split(":") if directory]


def _is_executable(path: str) -> bool:
    return os.path.isfile(path) and os.access(path, os.X_OK)


def find_executable(name: str, env: Environment) -> str | None:
    """Find ``name`` in PATH, then as a path of its own; None if neither runs."""
    for directory in search_paths(env):
        candidate = directory + name
        if _is_executable(candidate):
            return candidate
    return name if _is_executable(name) else None


def _exit_status(returncode: int) -> int:
    return returncode if returncode >= 0 else 128 - returncode


def _release(source: _Source) -> None:
    """Close the parent's end of a pipe coming from an earlier process."""
    if isinstance(source, subprocess.Popen) and source.stdout is not None:
        source.stdout.close()


def _feed(pipe: IO[bytes], data: bytes) -> None:
    try:
        pipe.write(data)
    except BrokenPipeError:
        pass
    finally:
        try:
            pipe.close()
        except BrokenPipeError:
            pass


@dataclass
class _Streams:
    stdin: BinaryIO | None = None
    stdout: BinaryIO | None = None


def _open(redirection: Redirection, stack: ExitStack) -> BinaryIO:
    target = redirection.target
    try:
        if target is None:
            raise FileNotFoundError(target)
        return stack.enter_context(open(target, _MODES[redirection.kind]))
    except OSError as exc:
        code = (ErrorCode.NO_SUCH_FILE if redirection.kind.is_input
                else ErrorCode.FILE_ERROR)
        raise ShellError(code, target) from exc


def _open_redirections(command: Command, stack: ExitStack) -> _Streams:
    streams = _Streams()
    if command.input is not None:
        streams.stdin = _open(command.input, stack)
    if command.output is not None:
        streams.stdout = _open(command.output, stack)
    return streams


class _Outputs:
    """Where child processes write the shell's own output and error streams."""

    def __init__(self, stack: ExitStack) -> None:
        self._stack = stack
        self._targets: dict[int, int | IO[bytes]] = {}
        self._captured: list[tuple[IO[bytes], TextIO]] = []

    def target(self, stream: TextIO) -> int | IO[bytes]:
        known = self._targets.get(id(stream))
        if known is None:
            try:
                known = stream.fileno()
            except (AttributeError, OSError, ValueError):
                known = self._stack.enter_context(tempfile.TemporaryFile())
                self._captured.append((known, stream))
            self._targets[id(stream)] = known
        if isinstance(known, int):
            stream.flush()
        return known

    def deliver(self) -> None:
        for capture, stream in self._captured:
            capture.seek(0)
            data = capture.read()
            if data:
                stream.write(data.decode(errors="replace"))


class Executor:
    """Runs the commands of a line against an environment."""

    def __init__(
        self,
        env: Environment,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.env = env
        self.stdout = sys.stdout if stdout is None else stdout
        self.stderr = sys.stderr if stderr is None else stderr

    def run(self, commands: Iterable[Command]) -> int:
        """Run a pipeline and return the exit status of its last command.

        Every redirection is opened first; one that fails is reported and
        nothing runs. A lone cd, export, unset or exit runs in the shell.
        """
        commands = list(commands)
        if not commands:
            return 0
        with ExitStack() as stack:
            try:
                streams = [_open_redirections(c, stack) for c in commands]
            except ShellError as error:
                self._report(error)
                return 1
            if len(commands) == 1:
                name = commands[0].program()
                if is_builtin(name) and not prints_output(name):
                    return self._run_builtin(commands[0], self.stdout)
            return self._pipeline(commands, streams, stack)

    def _report(self, error: ShellError) -> None:
        self.stderr.write(f"{error.message}\n")

    def _run_builtin(self, command: Command, out: TextIO) -> int:
        name, *args = command.arguments
        try:
            if name == "echo":
                return echo(args, out)
            if name == "cd":
                return cd(args, self.env, self.stderr)
            if name == "pwd":
                return pwd(self.env, out)
            if name == "env":
                return print_env(self.env, out)
            if name == "export":
                if not args:
                    return print_exports(self.env, out)
                return export(args, self.env)
            if name == "unset":
                return unset(args, self.env)
            return 0
        except ShellError as error:
            if name == "export":
                for word in command.assignments:
                    self.env.unset(assignment_name(word))
            self._report(error)
            return 1

    def _route(self, text: str, redirect: _Streams, last: bool) -> bytes | None:
        if redirect.stdout is not None:
            redirect.stdout.write(text.encode())
            return None if last else b""
        if last:
            self.stdout.write(text)
            return None
        return text.encode()

    def _not_found(self, name: str) -> int:
        if search_paths(self.env):
            self.stderr.write(f"{name}: command not found\n")
        else:
            self.stderr.write(error_message(ErrorCode.NO_SUCH_FILE, name) + "\n")
        return NOT_FOUND_STATUS

    def _spawn(
        self,
        command: Command,
        stdin: _Source,
        redirect: _Streams,
        last: bool,
        outputs: _Outputs,
        feeders: list[threading.Thread],
    ) -> subprocess.Popen[bytes] | int:
        argv = command.arguments
        path = find_executable(argv[0], self.env)
        if path is None:
            _release(stdin)
            return self._not_found(argv[0])
        if isinstance(stdin, bytes):
            stdin_arg: object = subprocess.PIPE
        elif isinstance(stdin, subprocess.Popen):
            stdin_arg = stdin.stdout
        else:
            stdin_arg = stdin
        if redirect.stdout is not None:
            stdout_arg: object = redirect.stdout
        elif last:
            stdout_arg = outputs.target(self.stdout)
        else:
            stdout_arg = subprocess.PIPE
        try:
            process = subprocess.Popen(
                argv,
                executable=path,
                stdin=stdin_arg,
                stdout=stdout_arg,
                stderr=outputs.target(self.stderr),
                env=self.env.as_dict(),
            )
        except OSError:
            return self._not_found(argv[0])
        finally:
            _release(stdin)
        if isinstance(stdin, bytes) and process.stdin is not None:
            feeder = threading.Thread(
                target=_feed, args=(process.stdin, stdin), daemon=True
            )
            feeder.start()
            feeders.append(feeder)
        return process

    def _wait(self, process: subprocess.Popen[bytes]) -> int:
        while True:
            try:
                return _exit_status(process.wait())
            except KeyboardInterrupt:
                self.stdout.write("\n")

    def _pipeline(
        self, commands: Sequence[Command], streams: Sequence[_Streams],
        stack: ExitStack,
    ) -> int:
        outputs = _Outputs(stack)
        feeders: list[threading.Thread] = []
        results: list[subprocess.Popen[bytes] | int] = []
        previous: _Source = None
        last_index = len(commands) - 1
        for index, (command, redirect) in enumerate(zip(commands, streams)):
            last = index == last_index
            if redirect.stdin is not None:
                _release(previous)
                stdin: _Source = redirect.stdin
            else:
                stdin = previous
            name = command.program()
            if name is None or prints_output(name):
                _release(stdin)
                text, status = "", 0
                if name is not None:
                    buffer = io.StringIO()
                    status = self._run_builtin(command, buffer)
                    text = buffer.getvalue()
                results.append(status)
                previous = self._route(text, redirect, last)
                continue
            result = self._spawn(command, stdin, redirect, last, outputs, feeders)
            results.append(result)
            previous = result if isinstance(result, subprocess.Popen) else b""
        statuses = [
            self._wait(result) if isinstance(result, subprocess.Popen) else result
            for result in results
        ]
        for feeder in feeders:
            feeder.join()
        outputs.deliver()
        return statuses[-1]