# supushell

A small interactive POSIX-style shell. It prints a picture as a greeting and
then reads commands one line at a time.

## Running

```
supushell
```

Leave the shell with `exit`, `q` or end of input (Ctrl-D). Ctrl-C abandons the
current line and does not close the shell. When standard input is a terminal,
the `readline` module is loaded for line editing and history where it is
available. Command-line arguments are ignored.

## What it understands

- Words separated by spaces and tabs.
- `'single'` and `"double"` quotes. A quoted part is always an argument of its
  own: `a"b"` gives the two arguments `a` and `b`.
- `$NAME` expansion (letters, digits and `_`) outside quotes and inside double
  quotes. An unknown name expands to nothing; a `$` that no name follows stays
  a literal `$`. Arguments that expand to nothing are dropped.
- Pipelines built with `|`. Every `|` separates commands, even inside quotes.
- Redirections: `< file`, `> file`, `>> file`, and here-documents with
  `<< WORD` (lines are read with the prompt `> ` until a line equal to `WORD`).
  A here-document takes the place of `< file` when both are given; only the
  last redirection of each kind counts.
- Several commands in one input string, one per line.

A line with a backslash, a semicolon, or an odd number of either quote
character is rejected with `Error input` and nothing of it runs.

## Builtins

| Command | Effect |
|---------|--------|
| `cd [dir]` | Change directory. No argument or `~` goes to the `HOME` of the process environment, `-` goes to `$OLDPWD` and prints the new directory. Updates `PWD` and `OLDPWD`. |
| `pwd` | Print the working directory. |
| `echo [-n] args...` | Print the arguments separated by spaces; leading `-n`, `-nn`, … drop the newline. |
| `export KEY=VALUE...` | Set variables; an argument without `=` prints `export: invalid format: ARG`. |
| `unset KEY...` | Remove variables. |
| `env` | List the variables that have a value, as `KEY=VALUE`. |
| `exit`, `q` | Leave the shell. |

`cd`, `export`, `unset`, `exit` and `q` act as builtins only when they are the
whole pipeline. Any other command is looked up along `PATH`, or run directly
when it starts with `/` or `./`. A command that cannot be found prints
`NAME: command not found` and has status 127. Commands run with the shell's
own variables as their environment.

## What it does not do

There is no `;`, `&&` or `||`, no globbing, no `$?`, no job control or
background commands, and no running of script files.

## Using it from Python

```python
import sys
from supushell.shell import ExitShell, Shell

shell = Shell({"PATH": "/usr/bin:/bin"}, sys.stdout, sys.stderr)
shell.run_line("export GREETING=hello")
shell.run_line('echo "$GREETING world"')

statuses = shell.run_pipeline(["echo one", " tr a-z A-Z"])  # e.g. [0, 0]

try:
    shell.run_line("exit")
except ExitShell:
    pass
```

`Shell.loop()` reads and runs lines until end of input or `exit`.
`Shell.run_pipeline()` returns the status of each stage that ran.

The parser and the environment can be used on their own:

```python
from supushell.environment import Environment, parse_export_argument
from supushell.parser import InputError, check_for_input, split_input

env = Environment.from_envp(["USER=alice"])
command = split_input("echo $USER > out.txt", env)
print(command.args, command.outfile, command.append)  # ['echo', 'alice'] out.txt False

env.set("EDITOR", "vi")
print(env.to_envp())                        # ['EDITOR=vi', 'USER=alice']
print(parse_export_argument("A=b=c"))       # ('A', 'b=c')

try:
    check_for_input("echo a; echo b")
except InputError as exc:
    print(exc)                              # Error input
```

`supushell.builtins` holds the builtins (`do_cd`, `do_echo`, …) together with
`search_path` and `resolve_command`; `supushell.banner` provides
`billy_banner()` and `print_banner(out)`.