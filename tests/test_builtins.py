import io
import os

import pytest

from minishellpy.builtins import (
    cd,
    check_exit,
    echo,
    export,
    is_builtin,
    print_env,
    print_exports,
    prints_output,
    pwd,
    unset,
)
from minishellpy.environment import Environment
from minishellpy.errors import ErrorCode, ShellError, error_message


@pytest.mark.parametrize(
    "name", ["cd", "echo", "pwd", "env", "export", "unset", "exit"]
)
def test_is_builtin_true(name):
    assert is_builtin(name) is True


@pytest.mark.parametrize("name", ["ls", "cat", "", None])
def test_is_builtin_false(name):
    assert is_builtin(name) is False


@pytest.mark.parametrize(
    "name,expected",
    [("echo", True), ("pwd", True), ("env", True), ("cd", False),
     ("export", False), ("unset", False), ("exit", False), ("ls", False)],
)
def test_prints_output(name, expected):
    assert prints_output(name) is expected


def test_echo_joins_with_spaces():
    out = io.StringIO()
    assert echo(["hello", "world"], out) == 0
    assert out.getvalue() == "hello world\n"


def test_echo_n_flag():
    out = io.StringIO()
    echo(["-n", "a", "b"], out)
    assert out.getvalue() == "a b"


def test_echo_no_arguments():
    out = io.StringIO()
    echo([], out)
    assert out.getvalue() == "\n"


def test_echo_empty_word_has_no_space():
    out = io.StringIO()
    echo(["", "b"], out)
    assert out.getvalue() == "b\n"


def test_cd_to_directory_updates_pwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "sub"
    target.mkdir()
    env = Environment({"PWD": str(tmp_path), "HOME": str(tmp_path)})
    err = io.StringIO()
    assert cd([str(target)], env, err) == 0
    assert os.getcwd() == str(target.resolve())
    assert env.get("PWD") == os.getcwd()
    assert err.getvalue() == ""


def test_cd_without_arguments_goes_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.chdir(tmp_path)
    env = Environment({"PWD": str(tmp_path), "HOME": str(home)})
    assert cd([], env, io.StringIO()) == 0
    assert os.getcwd() == str(home.resolve())


def test_cd_tilde_goes_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.chdir(tmp_path)
    env = Environment({"PWD": str(tmp_path), "HOME": str(home)})
    assert cd(["~"], env, io.StringIO()) == 0
    assert env.get("PWD") == str(home.resolve())


def test_cd_too_many_arguments(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    env = Environment({"PWD": str(tmp_path), "HOME": str(tmp_path)})
    err = io.StringIO()
    assert cd(["a", "b"], env, err) == 1
    assert err.getvalue() == error_message(ErrorCode.TOO_MANY_ARGUMENTS, "cd") + "\n"
    assert os.getcwd() == str(tmp_path.resolve())


def test_cd_missing_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    env = Environment({"PWD": str(tmp_path), "HOME": str(tmp_path)})
    missing = str(tmp_path / "missing")
    err = io.StringIO()
    assert cd([missing], env, err) == 1
    assert err.getvalue() == error_message(ErrorCode.CD_NO_SUCH_FILE, missing) + "\n"
    assert env.get("PWD") == str(tmp_path)


def test_pwd_prints_pwd_variable():
    out = io.StringIO()
    location = "/some/where"
    env = Environment({"PWD": location})
    assert pwd(env, out) == 0
    assert out.getvalue() == location + "\n"


def test_print_env_only_exported_with_value():
    env = Environment({"A": "1"})
    env.set("LOCAL", "2")
    env.export("B")
    out = io.StringIO()
    print_env(env, out)
    assert out.getvalue() == "A=1\n"


def test_print_exports_format():
    env = Environment({"A": "1"})
    env.set("LOCAL", "2")
    env.export("B")
    out = io.StringIO()
    print_exports(env, out)
    assert out.getvalue() == 'declare -x A="1"\ndeclare -x B\n'


def test_export_assignment_sets_and_exports():
    env = Environment({})
    assert export(["X=5"], env) == 0
    assert env.get("X") == "5"
    assert [v.name for v in env.exported()] == ["X"]


def test_export_local_variable():
    env = Environment({})
    env.set("L", "v")
    export(["L"], env)
    assert env.as_dict() == {"L": "v"}


def test_export_invalid_identifier_changes_nothing():
    env = Environment({})
    with pytest.raises(ShellError) as caught:
        export(["OK=1", "1bad"], env)
    assert caught.value.code is ErrorCode.INVALID_IDENTIFIER
    assert caught.value.argument == "1bad"
    assert "OK" not in env


def test_unset_removes_variables():
    env = Environment({"A": "1", "B": "2", "C": "3"})
    assert unset(["A", "C", "MISSING"], env) == 0
    assert [v.name for v in env] == ["B"]


@pytest.mark.parametrize("line", ["exit", "  exit", "exit   ", "\texit\t"])
def test_check_exit_leaves(line):
    assert check_exit(line) is True


@pytest.mark.parametrize("line", ["", "echo hi", "exited", "ls", "   "])
def test_check_exit_carries_on(line):
    assert check_exit(line) is False


def test_check_exit_with_argument_raises():
    with pytest.raises(ShellError) as caught:
        check_exit("exit 3")
    assert caught.value.code is ErrorCode.TOO_MANY_ARGUMENTS
    assert caught.value.argument == "exit"