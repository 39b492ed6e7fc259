"""Commands the shell carries out itself, and the lookup of external ones."""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import TextIO

from supushell.environment import Environment, parse_export_argument

BOLDGREEN = "\033[1m\033[32m"
BOLDRED = "\033[1m\033[31m"
RESET = "\033[0m"

_CD_LABEL = f"{BOLDRED}cd{RESET}"


def _report(err: TextIO, label: str, message: str | None) -> None:
    err.write(f"{label}: {message}\n")


def do_pwd(out: TextIO) -> None:
    """Write the current directory."""
    out.write(f"{BOLDGREEN}{os.getcwd()}\n{RESET}")


def goto_prev_dir(env: Environment, out: TextIO, err: TextIO) -> None:
    """Change to ``OLDPWD`` and show where the shell went."""
    old = env.get("OLDPWD")
    if not old:
        _report(err, _CD_LABEL, "OLDPWD not set")
        return
    try:
        os.chdir(old)
    except OSError as exc:
        _report(err, _CD_LABEL, exc.strerror)
        return
    do_pwd(out)


def do_cd(args: Sequence[str], env: Environment, out: TextIO, err: TextIO) -> None:
    """Change directory; ``~`` or no argument means ``HOME``, ``-`` means ``OLDPWD``."""
    try:
        old = os.getcwd()
    except OSError:
        return
    target = args[1] if len(args) > 1 else None
    if target is None or target == "~":
        home = os.environ.get("HOME")
        if home is not None:
            try:
                os.chdir(home)
            except OSError:
                pass
    elif target == "-":
        goto_prev_dir(env, out, err)
    else:
        try:
            os.chdir(target)
        except OSError as exc:
            _report(err, _CD_LABEL, exc.strerror)
    try:
        new = os.getcwd()
    except OSError:
        return
    env.set("OLDPWD", old)
    env.set("PWD", new)


def do_export(args: Sequence[str], env: Environment, out: TextIO) -> None:
    """Set every ``KEY=VALUE`` argument; report the ones without ``=``."""
    for arg in args[1:]:
        try:
            key, value = parse_export_argument(arg)
        except ValueError:
            out.write(f"{BOLDRED}export: invalid format: {arg}\n{RESET}")
            continue
        env.set(key, value)


def do_unset(args: Sequence[str], env: Environment) -> None:
    """Remove every named variable."""
    for arg in args[1:]:
        env.unset(arg)


def do_env(env: Environment, out: TextIO) -> None:
    """Write every variable that has a value as ``KEY=VALUE``."""
    for key, value in env.items():
        if value is not None:
            out.write(f"{key}={value}\n")


def _is_no_newline_flag(arg: str) -> bool:
    return arg.startswith("-n") and set(arg[1:]) == {"n"}


def do_echo(args: Sequence[str], out: TextIO) -> None:
    """Write the arguments separated by spaces; leading ``-n`` flags drop the newline."""
    words = list(args[1:])
    newline = True
    while words and _is_no_newline_flag(words[0]):
        newline = False
        words.pop(0)
    out.write(" ".join(words))
    if newline:
        out.write("\n")


def search_path(command: str, env: Environment) -> str | None:
    """Return the first executable ``dir/command`` along ``PATH``, if any."""
    path_var = env.get("PATH")
    if path_var is None:
        return None
    for directory in path_var.split(":"):
        candidate = f"{directory}/{command}"
        if os.access(candidate, os.X_OK):
            return candidate
    return None


def resolve_command(command: str, env: Environment) -> str | None:
    """Return the executable to run for ``command``, or None when there is none."""
    if command.startswith("./") or command.startswith("/"):
        path: str | None = command
    else:
        path = search_path(command, env)
    if path is None or not os.access(path, os.X_OK):
        return None
    return path