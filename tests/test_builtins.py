import os

import pytest

from minish.builtins import (
    builtin_cd,
    builtin_echo,
    builtin_env,
    builtin_exit,
    builtin_export,
    builtin_pwd,
    builtin_unset,
    run_builtin,
)
from minish.env import Environment
from minish.errors import ShellExit
from minish.nodes import Node


@pytest.fixture
def env():
    return Environment(["HOME=/nowhere", "USER=tester", "?=5"])


def test_echo_prints_words(env, capsys):
    builtin_echo(["echo", "hello", "world"], env)
    assert capsys.readouterr().out == "hello world\n"
    assert env.get("?") == "0"
    assert env.get("_") == "world"


@pytest.mark.parametrize("option", ["-n", "-nnnn"])
def test_echo_n_option_drops_newline(env, capsys, option):
    builtin_echo(["echo", option, "-n", "hi"], env)
    assert capsys.readouterr().out == "hi"


def test_echo_invalid_option_is_a_word(env, capsys):
    builtin_echo(["echo", "-nx", "hi"], env)
    assert capsys.readouterr().out == "-nx hi\n"


def test_env_prints_valued_variables(capsys):
    env = Environment(["A=1", "B", "?=0"])
    builtin_env(["env"], env)
    assert capsys.readouterr().out == "A=1\n"


def test_env_with_argument_fails(env, capsys):
    builtin_env(["env", "x"], env)
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "No such file or directory" in captured.err
    assert env.get("?") == "127"


def test_pwd_prints_cwd(env, capsys, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    builtin_pwd(["pwd"], env)
    assert capsys.readouterr().out == os.getcwd() + "\n"


def test_pwd_rejects_options(env, capsys):
    builtin_pwd(["pwd", "-L"], env)
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "option are not supported" in captured.err
    assert env.get("?") == "1"


def test_cd_changes_directory(env, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "sub"
    target.mkdir()
    before = os.getcwd()
    builtin_cd(["cd", str(target)], env)
    assert os.path.samefile(os.getcwd(), target)
    assert env.get("PWD") == os.getcwd()
    assert env.get("OLDPWD") == before
    assert env.get("?") == "0"


def test_cd_without_argument_goes_home(tmp_path, monkeypatch):
    monkeypatch.chdir("/")
    env = Environment([f"HOME={tmp_path}"])
    builtin_cd(["cd"], env)
    assert os.path.samefile(os.getcwd(), tmp_path)
    assert env.get("PWD") == os.getcwd()
    assert env.get("OLDPWD") == "/"
    assert env.get("?") == "0"


def test_cd_home_not_set(capsys, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    env = Environment([])
    builtin_cd(["cd"], env)
    assert "HOME not set" in capsys.readouterr().err
    assert env.get("?") == "1"
    assert os.path.samefile(os.getcwd(), tmp_path)


def test_cd_missing_directory(env, capsys, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    missing = str(tmp_path / "missing")
    builtin_cd(["cd", missing], env)
    err = capsys.readouterr().err
    assert err.startswith("minish: cd: " + missing)
    assert env.get("?") == "1"


def test_exit_with_number(env, capsys):
    with pytest.raises(ShellExit) as info:
        builtin_exit(["exit", "42"], env)
    assert info.value.status == 42
    assert capsys.readouterr().err.startswith("exit\n")


def test_exit_uses_last_status(env):
    with pytest.raises(ShellExit) as info:
        builtin_exit(["exit"], env)
    assert info.value.status == 5


@pytest.mark.parametrize("arg", ["abc", "12x", "+", "99999999999999999999"])
def test_exit_rejects_non_numeric(env, capsys, arg):
    with pytest.raises(ShellExit) as info:
        builtin_exit(["exit", arg], env)
    assert info.value.status == 255
    assert "numeric argument required" in capsys.readouterr().err


def test_exit_too_many_arguments_stays(env, capsys):
    builtin_exit(["exit", "1", "2"], env)
    assert "too many arguments" in capsys.readouterr().err
    assert env.get("?") == "1"


def test_export_sets_and_appends():
    env = Environment([])
    builtin_export(["export", "NAME=abc"], env)
    assert env.get("NAME") == "abc"
    builtin_export(["export", "NAME+=def"], env)
    assert env.get("NAME") == "abcdef"


def test_export_without_value_keeps_existing():
    env = Environment(["KEEP=yes"])
    builtin_export(["export", "KEEP", "NEW"], env)
    assert env.get("KEEP") == "yes"
    assert "NEW" in env
    assert env.get("NEW") is None


def test_export_invalid_identifier(capsys):
    env = Environment(["?=0"])
    builtin_export(["export", "1abc=x", "ok=1"], env)
    assert "not a valid identifier" in capsys.readouterr().err
    assert env.get("?") == "1"
    assert env.get("ok") == "1"
    assert "1abc" not in env


def test_export_lists_variables(capsys):
    env = Environment(["A=1", "B", "?=0", "_=x"])
    builtin_export(["export"], env)
    assert capsys.readouterr().out == 'declare -x A="1"\ndeclare -x B\n'


def test_unset_removes_variables():
    env = Environment(["A=1", "B=2", "C=3"])
    builtin_unset(["unset", "A", "C"], env)
    assert env.entries() == ["B=2"]


def test_unset_stops_at_invalid_name(capsys):
    env = Environment(["A=1", "B=2"])
    builtin_unset(["unset", "A", "9x", "B"], env)
    assert "not a valid identifier" in capsys.readouterr().err
    assert "A" not in env
    assert env.get("B") == "2"
    assert env.get("?") == "1"


def test_run_builtin_dispatches(env, capsys):
    assert run_builtin(Node(cmd=["echo", "hey"]), env) is True
    assert capsys.readouterr().out == "hey\n"


def test_run_builtin_ignores_other_commands(env):
    assert run_builtin(Node(cmd=["ls", "-l"]), env) is False
    assert env.get("_") == "-l"


def test_run_builtin_empty_node(env):
    assert run_builtin(Node(cmd=[]), env) is False
    assert run_builtin(None, env) is False