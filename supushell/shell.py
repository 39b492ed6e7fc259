"""The interactive shell: reading lines, running pipelines and redirections."""

from __future__ import annotations

import io
import os
import subprocess
import sys
import threading
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import BinaryIO, TextIO, Union

from supushell.banner import print_banner
from supushell.builtins import (
    BOLDRED,
    RESET,
    do_cd,
    do_echo,
    do_env,
    do_export,
    do_pwd,
    do_unset,
    resolve_command,
)
from supushell.environment import Environment
from supushell.parser import InputError, ParsedCommand, check_for_input, split_input

PROMPT = (
    "\033[1m\033[32m➜  \033[0m"
    "\033[1m\033[36mSuPuShell\033[0m"
    "\033[1m\033[34m git:(\033[0m"
    "\033[1m\033[31mmaster\033[0m"
    "\033[1m\033[34m)\033[0m"
    "\033[1m\033[33m ✗ \033[0m"
)
HEREDOC_PROMPT = "> "

_PARENT_BUILTINS = frozenset({"cd", "export", "unset", "exit", "q"})
_CHILD_BUILTINS = frozenset({"echo", "pwd", "env"})

# What flows between stages: nothing (inherit), finished output, or a pipe.
_Stream = Union[None, bytes, BinaryIO]
_Result = Union[int, subprocess.Popen]


class ExitShell(Exception):
    """Raised when the user asks the shell to exit."""


def _read_line(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def _fileno(stream: object) -> int | None:
    try:
        return stream.fileno()  # type: ignore[attr-defined]
    except (AttributeError, OSError, ValueError):
        return None


def _discard(stream: _Stream) -> None:
    close = getattr(stream, "close", None)
    if close is not None:
        close()


def _feed(pipe: BinaryIO, data: bytes) -> None:
    try:
        pipe.write(data)
    except BrokenPipeError:
        pass
    finally:
        try:
            pipe.close()
        except BrokenPipeError:
            pass


def _wait(process: subprocess.Popen) -> int:
    while True:
        try:
            return process.wait()
        except KeyboardInterrupt:
            continue


class Shell:
    """A shell session with its own environment and output streams."""

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        if environ is None:
            environ = os.environ
        self.env = Environment.from_envp(f"{key}={value}" for key, value in environ.items())
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.reader: Callable[[str], str | None] = _read_line

    def run_line(self, line: str) -> None:
        """Check a line of input and run each of its commands."""
        try:
            check_for_input(line)
        except InputError as exc:
            self.out.write(f"{exc}\n")
            return
        for text in line.split("\n"):
            if text:
                self.run_pipeline([part for part in text.split("|") if part])

    def run_pipeline(self, parts: Iterable[str]) -> list[int]:
        """Run the commands of one pipeline; return the status of each stage run."""
        parts = list(parts)
        upstream: _Stream = None
        upstream_is_final = False
        results: list[_Result] = []
        feeders: list[threading.Thread] = []
        try:
            for index, part in enumerate(parts):
                try:
                    command = split_input(part, self.env)
                except InputError:
                    continue
                if not command.args:
                    continue
                if len(parts) == 1 and command.args[0] in _PARENT_BUILTINS:
                    self._run_parent_builtin(command.args)
                    continue
                last = index == len(parts) - 1
                upstream, result = self._run_stage(command, upstream, last, feeders)
                upstream_is_final = last
                results.append(result)
            if upstream is not None and not isinstance(upstream, bytes):
                data = upstream.read()
                if upstream_is_final:
                    self.out.write(data.decode(errors="replace"))
        finally:
            if upstream is not None and not isinstance(upstream, bytes):
                upstream.close()
        for feeder in feeders:
            feeder.join()
        return [result if isinstance(result, int) else _wait(result) for result in results]

    def loop(self) -> None:
        """Read and run lines until end of input or ``exit``."""
        while True:
            try:
                line = self.reader(PROMPT)
            except KeyboardInterrupt:
                self.out.write("\n")
                continue
            if line is None:
                return
            try:
                self.run_line(line)
            except ExitShell:
                return
            except KeyboardInterrupt:
                self.out.write("\n")

    def _run_parent_builtin(self, args: Sequence[str]) -> None:
        name = args[0]
        if name == "cd":
            do_cd(args, self.env, self.out, self.err)
        elif name == "export":
            do_export(args, self.env, self.out)
        elif name == "unset":
            do_unset(args, self.env)
        else:
            raise ExitShell()

    def _run_child_builtin(self, args: Sequence[str], out: TextIO) -> None:
        name = args[0]
        if name == "echo":
            do_echo(args, out)
        elif name == "pwd":
            do_pwd(out)
        else:
            do_env(self.env, out)

    def _read_heredoc(self, delimiter: str) -> str:
        lines = []
        while True:
            line = self.reader(HEREDOC_PROMPT)
            if line is None or line == delimiter:
                break
            lines.append(f"{line}\n")
        return "".join(lines)

    def _child_env(self) -> dict[str, str]:
        return dict(entry.split("=", 1) for entry in self.env.to_envp())

    def _emit(self, text: str, sink: BinaryIO | None, last: bool) -> _Stream:
        if sink is not None:
            sink.write(text.encode())
            sink.close()
            return None if last else b""
        if not last:
            return text.encode()
        self.out.write(text)
        return None

    def _run_stage(
        self,
        command: ParsedCommand,
        upstream: _Stream,
        last: bool,
        feeders: list[threading.Thread],
    ) -> tuple[_Stream, _Result]:
        failed: _Stream = None if last else b""
        stdin: _Stream = upstream
        if command.heredoc is not None:
            stdin = self._read_heredoc(command.heredoc).encode()
        elif command.infile is not None:
            try:
                stdin = open(command.infile, "rb")
            except OSError as exc:
                _discard(upstream)
                self.err.write(f"{command.infile}: {exc.strerror}\n")
                return failed, 1
        if stdin is not upstream:
            _discard(upstream)

        sink: BinaryIO | None = None
        if command.outfile is not None:
            try:
                sink = open(command.outfile, "ab" if command.append else "wb")
            except OSError as exc:
                _discard(stdin)
                self.err.write(f"{command.outfile}: {exc.strerror}\n")
                return failed, 1

        name = command.args[0]
        if name in _CHILD_BUILTINS:
            _discard(stdin)
            buffer = io.StringIO()
            self._run_child_builtin(command.args, buffer)
            return self._emit(buffer.getvalue(), sink, last), 0
        path = resolve_command(name, self.env)
        if path is None:
            _discard(stdin)
            return self._emit(f"{BOLDRED}{name}: command not found\n{RESET}", sink, last), 127
        return self._spawn(command.args, path, stdin, sink, last, feeders)

    def _spawn(
        self,
        args: Sequence[str],
        path: str,
        stdin: _Stream,
        sink: BinaryIO | None,
        last: bool,
        feeders: list[threading.Thread],
    ) -> tuple[_Stream, _Result]:
        stdout_target: object = sink
        if sink is None:
            out_fd = _fileno(self.out) if last else None
            if out_fd is None:
                stdout_target = subprocess.PIPE
            else:
                self.out.flush()
                stdout_target = out_fd
        err_fd = _fileno(self.err)
        if err_fd is not None:
            self.err.flush()
        stdin_target = subprocess.PIPE if isinstance(stdin, bytes) else stdin
        try:
            process = subprocess.Popen(
                list(args),
                executable=path,
                stdin=stdin_target,
                stdout=stdout_target,
                stderr=err_fd,
                env=self._child_env(),
            )
        except (OSError, ValueError) as exc:
            self.err.write(f"execve: {getattr(exc, 'strerror', None) or exc}\n")
            return (None if last else b""), 1
        finally:
            if not isinstance(stdin, bytes):
                _discard(stdin)
            if sink is not None:
                sink.close()
        if isinstance(stdin, bytes):
            feeder = threading.Thread(target=_feed, args=(process.stdin, stdin), daemon=True)
            feeder.start()
            feeders.append(feeder)
        if stdout_target is subprocess.PIPE:
            return process.stdout, process
        return (None if last else b""), process


def _disable_echoctl() -> None:
    try:
        import termios
    except ImportError:
        return
    fd = _fileno(sys.stdin)
    if fd is None or not os.isatty(fd):
        return
    attrs = termios.tcgetattr(fd)
    attrs[3] &= ~getattr(termios, "ECHOCTL", 0)
    termios.tcsetattr(fd, termios.TCSANOW, attrs)


def main(argv: Sequence[str] | None = None) -> int:
    """Greet the user and run an interactive session."""
    if sys.stdin.isatty():
        try:
            import readline  # noqa: F401  (gives input() line editing and history)
        except ImportError:
            pass
    print_banner(sys.stdout)
    shell = Shell(os.environ, sys.stdout, sys.stderr)
    _disable_echoctl()
    shell.loop()
    return 0