"""Running command trees: redirections, external programs and pipes."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator
from typing import NoReturn

from .builtins import run_builtin
from .env import Environment
from .errors import ShellExit, exec_error_status, print_error
from .nodes import Node
from .signals import ignored_signals, restore_default_signals
from .textutil import atoi, split_fields
from .tokens import TokenType, is_redirection

try:
    import termios
except ImportError:  # pragma: no cover - non-POSIX platforms
    termios = None


def _flush_std() -> None:
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError, AttributeError):
            pass


def _write_stdout(text: str) -> None:
    try:
        sys.stdout.write(text)
        sys.stdout.flush()
    except (OSError, ValueError):
        pass


def wait_status_to_code(status: int) -> int:
    """Turn a raw wait status into the shell's exit status."""
    if os.WIFSTOPPED(status):
        return 128 + os.WSTOPSIG(status)
    if os.WIFSIGNALED(status):
        code = 128 + os.WTERMSIG(status)
        if code == 130:
            _write_stdout("\n")
        elif code == 131:
            _write_stdout("Quit: 3\n")
        return code
    if os.WIFEXITED(status):
        return os.WEXITSTATUS(status)
    return 1


def get_path(command: str | None, env: Environment) -> str | None:
    """Find ``command`` in ``PATH``; names holding a slash are used as they are."""
    if not command or "/" in command:
        return command
    for directory in split_fields(env.get("PATH"), ":"):
        candidate = f"{directory}/{command}"
        if os.access(candidate, os.X_OK):
            return candidate
    return None


def _open_file(path: str | None, flags: int) -> int | None:
    if path is None:
        print_error("minish", "ambiguous redirect", None, None)
        return None
    try:
        return os.open(path, flags, 0o644)
    except OSError as exc:
        print_error("minish", path, exc.strerror, None)
        return None


def open_input(path: str | None) -> int | None:
    """Open a file for ``<``; report and return None on failure."""
    return _open_file(path, os.O_RDONLY)


def open_output(path: str | None) -> int | None:
    """Open (create, truncate) a file for ``>``; report and return None on failure."""
    return _open_file(path, os.O_CREAT | os.O_WRONLY | os.O_TRUNC)


def open_append(path: str | None) -> int | None:
    """Open (create) a file for ``>>``; report and return None on failure."""
    return _open_file(path, os.O_CREAT | os.O_WRONLY | os.O_APPEND)


def _dup2(old: int, new: int) -> bool:
    if new == 1:
        _flush_std()
    try:
        os.dup2(old, new)
    except OSError as exc:
        print_error("minish", "dup2", exc.strerror, None)
        return False
    return True


def _left_chain(node: Node | None) -> Iterator[Node]:
    while node is not None:
        yield node
        node = node.left


def _redirect_target(node: Node) -> str | None:
    target = node.right
    if target is None or not target.cmd:
        return None
    return target.cmd[0]


def _open_redirections(node: Node) -> bool:
    openers = {
        TokenType.IN: open_input,
        TokenType.OUT: open_output,
        TokenType.APPEND: open_append,
    }
    for current in _left_chain(node):
        opener = openers.get(current.type)
        if opener is not None:
            fd = opener(_redirect_target(current))
            fd = -1 if fd is None else fd
            if current.type == TokenType.IN:
                current.fd_in = fd
            else:
                current.fd_out = fd
        if current.fd_in == -1 or current.fd_out == -1:
            return False
    return True


def duplicate_files(node: Node | None) -> bool:
    """Attach the descriptors held along the left chain to stdin and stdout."""
    for current in _left_chain(node):
        if current.fd_in != 0:
            if current.fd_in == -1 or not _dup2(current.fd_in, 0):
                return False
        if current.fd_out != 1:
            if current.fd_out == -1 or not _dup2(current.fd_out, 1):
                return False
    return True


def execute_redirections(node: Node, env: Environment) -> Node | None:
    """Apply the redirections heading ``node``.

    Returns the node left to run (the end of the left chain), or None, with
    status 1, when a file could not be opened or attached.
    """
    if not is_redirection(node.type):
        return node
    if not _open_redirections(node) or not duplicate_files(node):
        env.set_status(1)
        return None
    *_, last = _left_chain(node)
    return last


def _exit_child(action: Callable[[], int]) -> NoReturn:
    try:
        code = action()
    except ShellExit as exc:
        code = exc.status
    except BaseException:
        code = 1
    _flush_std()
    os._exit(code & 0xFF)


def _environ_mapping(env: Environment) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for entry in env.entries():
        name, sep, value = entry.partition("=")
        if sep:
            mapping[name] = value
    return mapping


def _exec_child(argv: list[str], env: Environment) -> int:
    restore_default_signals()
    path = get_path(argv[0], env)
    if path:
        try:
            os.execve(path, argv, _environ_mapping(env))
        except OSError:
            pass
    return exec_error_status(path, argv[0], "PATH" in env)


def execute_command(node: Node | None, env: Environment) -> None:
    """Run an external program and record its exit status."""
    if node is None or not node.cmd:
        return
    argv = list(node.cmd)
    _flush_std()
    with ignored_signals():
        try:
            pid = os.fork()
        except OSError as exc:
            print_error("minish", "fork", exc.strerror, None)
            return
        if pid == 0:
            _exit_child(lambda: _exec_child(argv, env))
        _, status = os.waitpid(pid, 0)
    env.set_status(wait_status_to_code(status))
    env.set("_", argv[-1])


def _fork_side(
    node: Node | None, env: Environment, keep: int, drop: int, target: int
) -> int | None:
    try:
        pid = os.fork()
    except OSError as exc:
        print_error("minish", "fork", exc.strerror, None)
        return None
    if pid == 0:

        def run() -> int:
            os.close(drop)
            _dup2(keep, target)
            os.close(keep)
            executing(node, env)
            return atoi(env.get("?"))

        _exit_child(run)
    return pid


def _close_pair(read_fd: int, write_fd: int) -> None:
    for fd in (read_fd, write_fd):
        try:
            os.close(fd)
        except OSError:
            pass


def execute_pipe(node: Node, env: Environment) -> None:
    """Run both sides of a pipe; the status is that of the right side."""
    env.set("_", "")
    _flush_std()
    with ignored_signals():
        try:
            read_fd, write_fd = os.pipe()
        except OSError as exc:
            print_error("minish", "pipe", exc.strerror, None)
            return
        left_pid = _fork_side(node.left, env, write_fd, read_fd, 1)
        if left_pid is None:
            _close_pair(read_fd, write_fd)
            return
        right_pid = _fork_side(node.right, env, read_fd, write_fd, 0)
        _close_pair(read_fd, write_fd)
        os.waitpid(left_pid, 0)
        if right_pid is None:
            return
        _, status = os.waitpid(right_pid, 0)
    env.set_status(os.WEXITSTATUS(status))


def _terminal_attrs():
    if termios is None or not os.isatty(0):
        return None
    try:
        return termios.tcgetattr(0)
    except (termios.error, OSError):
        return None


def _restore_terminal(attrs) -> None:
    if attrs is None:
        return
    try:
        termios.tcsetattr(0, termios.TCSANOW, attrs)
    except (termios.error, OSError):
        pass


def executing(node: Node | None, env: Environment) -> None:
    """Run a command tree: redirections, then a builtin, a pipe or a program."""
    if node is None:
        return
    saved = _terminal_attrs()
    target = execute_redirections(node, env)
    if target is None:
        return
    if run_builtin(target, env):
        return
    if target.type == TokenType.PIPE:
        execute_pipe(target, env)
    elif target.type == TokenType.CMD:
        execute_command(target, env)
    _restore_terminal(saved)