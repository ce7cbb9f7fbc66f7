import pytest

from minishellpy.environment import (
    Environment,
    Variable,
    assignment_name,
    is_assignment,
    split_assignment,
)
from minishellpy.errors import ErrorCode, ShellError


@pytest.fixture
def env():
    return Environment({"HOME": "/home/user", "PATH": "/bin:/usr/bin"})


def test_loaded_variables_are_exported(env):
    assert env.get("HOME") == "/home/user"
    assert env.as_dict() == {"HOME": "/home/user", "PATH": "/bin:/usr/bin"}
    assert all(v.exported for v in env)


def test_empty_environment():
    env = Environment()
    assert len(env) == 0
    assert env.get("HOME") is None


def test_missing_variable(env):
    assert env.get("NOPE") is None
    assert "NOPE" not in env


def test_new_variable_is_local(env):
    env.set("LOCAL", "value")
    assert env.get("LOCAL") == "value"
    assert "LOCAL" in env
    assert "LOCAL" not in env.as_dict()


def test_set_existing_keeps_export_flag(env):
    env.set("HOME", "/tmp")
    assert env.as_dict()["HOME"] == "/tmp"


def test_set_can_change_export_flag(env):
    env.set("HOME", "/tmp", exported=False)
    assert "HOME" not in env.as_dict()
    assert env.get("HOME") == "/tmp"


def test_order_preserved(env):
    env.set("ZED", "z")
    env.set("ALPHA", "a")
    assert [v.name for v in env] == ["HOME", "PATH", "ZED", "ALPHA"]


def test_unset(env):
    env.unset("HOME")
    assert "HOME" not in env
    assert env.get("HOME") is None


def test_unset_missing_changes_nothing(env):
    env.unset("NOPE")
    assert [v.name for v in env] == ["HOME", "PATH"]


def test_export_local_variable(env):
    env.set("LOCAL", "value")
    env.export("LOCAL")
    assert env.as_dict()["LOCAL"] == "value"


def test_export_unknown_adds_valueless(env):
    env.export("EMPTY")
    assert Variable("EMPTY", None, True) in env.exported()
    assert "EMPTY" not in env.as_dict()
    assert env.get("EMPTY") is None


@pytest.mark.parametrize("name", ["1abc", "", "=", "A=b"])
def test_export_invalid_name(env, name):
    with pytest.raises(ShellError) as info:
        env.export(name)
    assert info.value.code is ErrorCode.INVALID_IDENTIFIER


def test_exported_excludes_locals(env):
    env.set("LOCAL", "x")
    assert [v.name for v in env.exported()] == ["HOME", "PATH"]


@pytest.mark.parametrize("word", ["A=1", "_x=", "name=a=b", "a-b=c"])
def test_is_assignment(word):
    assert is_assignment(word) is True


@pytest.mark.parametrize("word", ["abc", "1A=2", "=x", "===", ""])
def test_is_not_assignment(word):
    assert is_assignment(word) is False


def test_assignment_name():
    assert assignment_name("PATH=/bin") == "PATH"
    assert assignment_name("name") == "name"


@pytest.mark.parametrize("word", ["9x", "=x", ""])
def test_assignment_name_invalid(word):
    with pytest.raises(ShellError) as info:
        assignment_name(word)
    assert info.value.argument == word


def test_split_assignment_first_equals():
    assert split_assignment("A=b=c") == ("A", "b=c")
    assert split_assignment("B=") == ("B", "")


def test_split_assignment_round_trip():
    for word in ["X=1", "long_name=some value", "Y=a=b"]:
        name, value = split_assignment(word)
        assert f"{name}={value}" == word


def test_split_non_assignment():
    with pytest.raises(ValueError):
        split_assignment("abc")