"""Input checks and the splitting of one command into words and redirections."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Protocol

_SPACES = " \t\n\v\f\r"
_NAME = re.compile(r"[A-Za-z0-9_]*")
_WORD_TEXT = re.compile(r"[^$'\" \t\n\v\f\r]+")
_QUOTED_TEXT = re.compile(r'[^$"]+')
_REDIRECTIONS = (">>", ">", "<<", "<")


class InputError(ValueError):
    """Raised for input the shell refuses to run."""


class _Lookup(Protocol):
    def get(self, key: str) -> str | None: ...


@dataclass
class ParsedCommand:
    """The words of one command and the redirections attached to it."""

    args: list[str] = field(default_factory=list)
    infile: str | None = None
    outfile: str | None = None
    append: bool = False
    heredoc: str | None = None


def is_space(char: str) -> bool:
    """Tell whether ``char`` is one of the ASCII whitespace characters."""
    return len(char) == 1 and char in _SPACES


def check_for_input(line: str) -> str:
    """Reject backslashes, semicolons and unbalanced quotes; return the line."""
    if "\\" in line or ";" in line or line.count('"') % 2 or line.count("'") % 2:
        raise InputError("Error input")
    return line


class _Scanner:
    def __init__(self, line: str, env: _Lookup) -> None:
        self.line = line
        self.pos = 0
        self.env = env

    def peek(self) -> str:
        return self.line[self.pos] if self.pos < len(self.line) else ""

    def at_end(self) -> bool:
        return self.pos >= len(self.line)

    def skip_blanks(self) -> None:
        while self.peek() in (" ", "\t"):
            self.pos += 1

    def variable(self) -> str:
        self.pos += 1
        match = _NAME.match(self.line, self.pos)
        self.pos = match.end()
        name = match.group()
        if not name:
            return "$"
        value = self.env.get(name)
        return value if value is not None else ""

    def word(self) -> str:
        parts = []
        while (char := self.peek()) and not is_space(char) and char not in "'\"":
            if char == "$":
                parts.append(self.variable())
            else:
                match = _WORD_TEXT.match(self.line, self.pos)
                parts.append(match.group())
                self.pos = match.end()
        return "".join(parts)

    def double_quoted(self) -> str:
        self.pos += 1
        parts = []
        while (char := self.peek()) and char != '"':
            if char == "$":
                parts.append(self.variable())
            else:
                match = _QUOTED_TEXT.match(self.line, self.pos)
                parts.append(match.group())
                self.pos = match.end()
        if self.peek() == '"':
            self.pos += 1
        return "".join(parts)

    def single_quoted(self) -> str:
        end = self.line.find("'", self.pos + 1)
        if end < 0:
            raise InputError("unterminated single quote")
        text = self.line[self.pos + 1:end]
        self.pos = end + 1
        return text

    def redirection(self, command: ParsedCommand) -> bool:
        for operator in _REDIRECTIONS:
            if self.line.startswith(operator, self.pos):
                break
        else:
            return False
        self.pos += len(operator)
        self.skip_blanks()
        target = self.word()
        if operator == ">>":
            command.outfile, command.append = target, True
        elif operator == ">":
            command.outfile, command.append = target, False
        elif operator == "<<":
            command.heredoc = target
        else:
            command.infile = target
        return True


def split_input(line: str, env: _Lookup) -> ParsedCommand:
    """Split one command into expanded words and redirections.

    Words that expand to nothing are dropped. An unterminated single quote
    raises :class:`InputError`.
    """
    scanner = _Scanner(line, env)
    command = ParsedCommand()
    while not scanner.at_end():
        scanner.skip_blanks()
        if scanner.redirection(command):
            continue
        char = scanner.peek()
        if not char:
            break
        if char == "'":
            arg = scanner.single_quoted()
        elif char == '"':
            arg = scanner.double_quoted()
        else:
            arg = scanner.word()
            if not arg and is_space(char):
                scanner.pos += 1
        if arg:
            command.args.append(arg)
    return command