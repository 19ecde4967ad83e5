"""Commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import os
import string
import sys
from collections.abc import Callable

from .env import Environment
from .errors import ShellExit, is_directory, print_error
from .nodes import Node
from .textutil import atoi

_ALPHA = frozenset(string.ascii_letters)
_ALNUM = frozenset(string.ascii_letters + string.digits)
_LONG_MAX = 2**63 - 1


def _write(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


def _echo_option_end(argv: list[str]) -> int:
    index = 1
    while index < len(argv):
        arg = argv[index]
        if not arg.startswith("-n") or arg[1:].strip("n"):
            break
        index += 1
    return index


def builtin_echo(argv: list[str], env: Environment) -> None:
    """Print the arguments; any leading ``-n``/``-nnn`` drops the newline."""
    start = _echo_option_end(argv)
    words = argv[start:]
    for word in words:
        env.set("_", word)
    _write(" ".join(words))
    if start == 1:
        _write("\n")
    env.set_status(0)


def builtin_env(argv: list[str], env: Environment) -> None:
    """Print every variable that has a value."""
    if len(argv) > 1:
        print_error("env", argv[1], "No such file or directory", None)
        env.set_status(127)
        return
    for line in env.env_lines():
        _write(line + "\n")


def builtin_pwd(argv: list[str], env: Environment) -> None:
    """Print the working directory; options are refused."""
    if len(argv) > 1 and argv[1].startswith("-"):
        print_error("minish", "pwd", "option are not supported", None)
        env.set_status(1)
        return
    _write(os.getcwd() + "\n")


def _getcwd() -> str | None:
    try:
        return os.getcwd()
    except OSError:
        return None


def _stat_error(path: str) -> str:
    try:
        os.stat(path)
    except OSError as exc:
        return exc.strerror or "No such file or directory"
    return os.strerror(20)


def builtin_cd(argv: list[str], env: Environment) -> None:
    """Change directory, to ``HOME`` when no argument is given."""
    old_pwd = _getcwd()
    if len(argv) < 2:
        path = env.get("HOME")
        if path is None:
            sys.stderr.write("bash: cd: HOME not set\n")
            sys.stderr.flush()
            env.set_status(1)
            return
    else:
        path = argv[1]
    if not is_directory(path):
        print_error("minish", "cd", path, _stat_error(path))
        env.set_status(1)
        return
    try:
        os.chdir(path)
    except OSError as exc:
        print_error("minish", "cd", path, exc.strerror)
        env.set_status(1)
        return
    new_pwd = _getcwd()
    if new_pwd is None:
        sys.stderr.write(
            "cd: error retrieving current directory: getcwd: "
            "cannot access parent directories: No such file or directory\n"
        )
        sys.stderr.flush()
        return
    env.set("OLDPWD", old_pwd)
    env.set("PWD", new_pwd)
    env.set_status(0)


def _is_valid_number(text: str) -> bool:
    digits = text[1:] if text[:1] in ("-", "+") else text
    return bool(digits) and all(ch in string.digits for ch in digits)


def _fits_long(text: str) -> bool:
    negative = text.startswith("-")
    value = int(text.lstrip("+-"))
    return value <= (_LONG_MAX + 1 if negative else _LONG_MAX)


def builtin_exit(argv: list[str], env: Environment) -> None:
    """Leave the shell by raising ShellExit with the requested status."""
    sys.stderr.write("exit\n")
    sys.stderr.flush()
    if len(argv) > 1:
        arg = argv[1]
        if not _is_valid_number(arg) or not _fits_long(arg):
            print_error("minish", argv[0], arg, "numeric argument required")
            raise ShellExit(255)
        if len(argv) > 2:
            print_error("minish", argv[0], "too many arguments", None)
            env.set_status(1)
            return
        raise ShellExit(atoi(arg) & 0xFF)
    raise ShellExit(atoi(env.get("?")) & 0xFF)


def _valid_unset_name(name: str) -> bool:
    if not name or (name[0] not in _ALPHA and name[0] != "_"):
        return False
    return all(ch in _ALNUM or ch == "_" for ch in name[1:])


def builtin_unset(argv: list[str], env: Environment) -> None:
    """Remove variables; stop at the first invalid name."""
    for name in argv[1:]:
        if not _valid_unset_name(name):
            print_error("minishell", "unset", name, "not a valid identifier")
            env.set_status(1)
            return
        env.unset(name)


def _valid_export_arg(arg: str) -> bool:
    if not arg or (arg[0] not in _ALPHA and arg[0] != "_"):
        return False
    name = arg.split("=", 1)[0]
    for index, ch in enumerate(name[1:], start=1):
        if ch in _ALNUM or ch == "_":
            continue
        if ch == "+" and arg[index + 1:index + 2] == "=":
            continue
        return False
    return True


def _export_lines(env: Environment) -> list[str]:
    lines = []
    for entry in env.entries():
        if entry[:1] in ("?", "_") and entry[1:2] != "_":
            continue
        name, sep, value = entry.partition("=")
        lines.append(f'declare -x {name}="{value}"' if sep else f"declare -x {name}")
    return lines


def _export_one(arg: str, env: Environment) -> None:
    name, sep, value = arg.partition("=")
    env.set("_", arg)
    trimmed = name.strip("+")
    if sep and name.endswith("+"):
        env.append(trimmed, value)
    elif sep:
        env.set(trimmed, value)
    elif name not in env:
        env.set(name, None)


def builtin_export(argv: list[str], env: Environment) -> None:
    """Set or list exported variables; ``NAME+=value`` appends."""
    if len(argv) < 2:
        for line in _export_lines(env):
            _write(line + "\n")
        return
    for arg in argv[1:]:
        if not _valid_export_arg(arg):
            print_error("minish", "export", arg, "not a valid identifier")
            env.set("?", "1")
        else:
            _export_one(arg, env)


BUILTINS: dict[str, Callable[[list[str], Environment], None]] = {
    "echo": builtin_echo,
    "env": builtin_env,
    "pwd": builtin_pwd,
    "cd": builtin_cd,
    "exit": builtin_exit,
    "unset": builtin_unset,
    "export": builtin_export,
}


def run_builtin(node: Node | None, env: Environment) -> bool:
    """Run ``node`` if it names a builtin; return whether it did.

    ``_`` is set to the last argument for every command.
    """
    if node is None or not node.cmd:
        return False
    env.set("_", node.cmd[-1])
    handler = BUILTINS.get(node.cmd[0])
    if handler is None:
        return False
    handler(node.cmd, env)
    return True