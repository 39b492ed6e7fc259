import io
import os

import pytest

from supushell.banner import billy_banner
from supushell.shell import PROMPT, ExitShell, Shell, main


@pytest.fixture
def shell():
    environ = {"PATH": os.environ.get("PATH", "/usr/bin:/bin"), "HOME": "/"}
    return Shell(environ, io.StringIO(), io.StringIO())


def _reader_from(lines):
    remaining = iter(lines)
    prompts = []

    def read(prompt):
        prompts.append(prompt)
        return next(remaining, None)

    return read, prompts


def test_echo_line(shell):
    shell.run_line("echo hello world")
    assert shell.out.getvalue() == "hello world\n"


def test_variable_expansion(shell):
    shell.run_line("echo $HOME")
    assert shell.out.getvalue() == "/\n"


def test_export_then_echo(shell):
    shell.run_line("export GREETING=hi")
    shell.run_line('echo "$GREETING there"')
    assert shell.env.get("GREETING") == "hi"
    assert shell.out.getvalue() == "hi there\n"


def test_unset(shell):
    shell.run_line("export A=1")
    shell.run_line("unset A")
    assert shell.env.get("A") is None


def test_rejected_input(shell):
    shell.run_line("echo a;b")
    assert shell.out.getvalue() == "Error input\n"


def test_several_lines(shell):
    shell.run_line("echo a\necho b")
    assert shell.out.getvalue() == "a\nb\n"


def test_exit_raises(shell):
    with pytest.raises(ExitShell):
        shell.run_line("exit")
    with pytest.raises(ExitShell):
        shell.run_line("q")


def test_exit_in_pipeline_is_not_builtin(shell):
    shell.run_line("exit | echo after")
    assert "exit: command not found" not in shell.out.getvalue()
    assert shell.out.getvalue() == "after\n"


def test_command_not_found_status(shell):
    assert shell.run_pipeline(["no_such_command_zz"]) == [127]
    assert "no_such_command_zz: command not found" in shell.out.getvalue()


def test_builtin_status(shell):
    assert shell.run_pipeline(["echo hi"]) == [0]


def test_pipe_into_external(shell):
    codes = shell.run_pipeline(["echo hello ", " cat"])
    assert codes == [0, 0]
    assert shell.out.getvalue() == "hello\n"


def test_pipe_between_externals(shell):
    shell.run_line("echo one | cat | cat")
    assert shell.out.getvalue() == "one\n"


def test_output_redirection(shell, tmp_path):
    target = tmp_path / "out.txt"
    shell.run_line(f"echo first > {target}")
    shell.run_line(f"echo second >> {target}")
    assert target.read_text() == "first\nsecond\n"
    assert shell.out.getvalue() == ""
    shell.run_line(f"echo third > {target}")
    assert target.read_text() == "third\n"


def test_input_redirection(shell, tmp_path):
    source = tmp_path / "in.txt"
    source.write_text("abc\n")
    shell.run_line(f"cat < {source}")
    assert shell.out.getvalue() == "abc\n"


def test_missing_input_file(shell, tmp_path):
    missing = tmp_path / "missing.txt"
    assert shell.run_pipeline([f"cat < {missing}"]) == [1]
    assert str(missing) in shell.err.getvalue()


def test_heredoc(shell):
    shell.reader, prompts = _reader_from(["a", "b", "END", "ignored"])
    shell.run_line("cat << END")
    assert shell.out.getvalue() == "a\nb\n"
    assert prompts == ["> ", "> ", "> "]


def test_external_sees_exported_variable(shell):
    shell.run_line("export SHOWN=yes")
    shell.run_line("env | cat")
    assert "SHOWN=yes\n" in shell.out.getvalue()


def test_cd_then_pwd(shell, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    sub = tmp_path / "sub"
    sub.mkdir()
    shell.run_line(f"cd {sub}")
    assert os.path.samefile(os.getcwd(), sub)
    shell.run_line("pwd")
    assert os.getcwd() in shell.out.getvalue()
    assert shell.env.get("PWD") == os.getcwd()


def test_loop_stops_at_exit(shell):
    shell.reader, prompts = _reader_from(["echo one", "exit", "echo two"])
    shell.loop()
    assert shell.out.getvalue() == "one\n"
    assert prompts == [PROMPT, PROMPT]


def test_loop_stops_at_end_of_input(shell):
    shell.reader, prompts = _reader_from(["echo x"])
    shell.loop()
    assert shell.out.getvalue() == "x\n"
    assert len(prompts) == 2


def test_loop_survives_interrupt(shell):
    calls = []

    def read(prompt):
        calls.append(prompt)
        if len(calls) == 1:
            raise KeyboardInterrupt
        return None

    shell.reader = read
    shell.loop()
    assert shell.out.getvalue() == "\n"
    assert len(calls) == 2


def test_main_runs_session(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("echo from main\nexit\n"))
    assert main([]) == 0
    captured = capsys.readouterr().out
    assert captured.startswith(billy_banner())
    assert "from main\n" in captured