"""Error reporting and the exceptions the shell raises."""

from __future__ import annotations

import errno
import os
import sys


class ShellExit(Exception):
    """Raised to leave the shell with an exit status."""

    def __init__(self, status: int):
        super().__init__(status)
        self.status = status


class ShellSyntaxError(Exception):
    """Raised when a command line is not well formed."""


def format_error(s1, s2, s3, message) -> str:
    """Join the given parts with ': ', skipping those that are None."""
    return ": ".join(part for part in (s1, s2, s3, message) if part is not None)


def print_error(s1, s2, s3, message) -> None:
    """Write a formatted error line to standard error."""
    sys.stderr.write(format_error(s1, s2, s3, message) + "\n")
    sys.stderr.flush()


def is_directory(path) -> bool:
    """Return True when ``path`` names an existing directory."""
    try:
        return os.path.isdir(path)
    except (TypeError, ValueError):
        return False


def _access_errno(path: str) -> int:
    """Return 0 if ``path`` is executable, else the errno access() would give."""
    if os.access(path, os.X_OK):
        return 0
    try:
        os.stat(path)
    except OSError as exc:
        return exc.errno or errno.ENOENT
    return errno.EACCES


def exec_error_status(path, cmd, has_path) -> int:
    """Report why ``cmd`` could not be run and return its exit status."""
    if not has_path:
        print_error("minishell", cmd, "No such file or directory", None)
        return 127
    if not cmd or not path:
        print_error("minishell", cmd, "command not found", None)
        return 127
    err = _access_errno(path)
    if err in (errno.ENOTDIR, errno.EACCES):
        print_error("minishell", cmd, os.strerror(err), None)
        return 126
    if err:
        print_error("minishell", cmd, os.strerror(err), None)
        return 127
    if is_directory(path):
        print_error("minishell", cmd, "is a directory", None)
        return 126
    return 0