"""The shell's variable table."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping

from .textutil import atoi

DEFAULT_PATH = "/usr/local/bin:/usr/bin:/bin:."
_TRIM = " \t\n\f\r"


def _parse(entry: str) -> tuple[str, str | None]:
    name, sep, value = entry.partition("=")
    return name, (value if sep else None)


def _entry(name: str, value: str | None) -> str:
    return name if value is None else f"{name}={value}"


class Environment:
    """Ordered shell variables; a variable may exist without a value."""

    def __init__(self, entries: Iterable[str] = ()):
        self._vars: dict[str, str | None] = {}
        for entry in entries:
            name, value = _parse(entry)
            self._vars.setdefault(name, value)

    @classmethod
    def from_environ(cls, envp=None, cwd=None) -> "Environment":
        """Build the start-up environment from ``envp`` (entries or a mapping)."""
        if envp is None:
            envp = os.environ
        if isinstance(envp, Mapping):
            envp = [f"{key}={value}" for key, value in envp.items()]
        env = cls()
        for entry in envp:
            if entry.startswith("OLDPWD="):
                env.set("OLDPWD", None)
                continue
            name, value = _parse(entry)
            env._vars.setdefault(name, value)
        env.set("?", "0")
        if "PWD" not in env:
            if cwd is None:
                try:
                    cwd = os.getcwd()
                except OSError:
                    cwd = None
            env.set("PWD", cwd)
        if "PATH" not in env:
            env.set("PATH", DEFAULT_PATH)
        env._increment_shlvl()
        return env

    def _increment_shlvl(self) -> None:
        current = self.get("SHLVL")
        level = atoi(current) if current is not None else 0
        if level < 0 and level != -1:
            level = 0
        elif level == -1 or level >= 999:
            level = 1
        else:
            level += 1
        self.set("SHLVL", str(level))

    def find(self, name: str) -> str | None:
        """Return the raw entry for ``name`` ("NAME=value" or "NAME")."""
        if name not in self._vars:
            return None
        return _entry(name, self._vars[name])

    def get(self, name: str | None) -> str | None:
        """Return the value of ``name`` with surrounding whitespace trimmed."""
        if name is None:
            return None
        value = self._vars.get(name)
        if value is None:
            return None
        return value.strip(_TRIM)

    def set(self, name: str, value: str | None) -> None:
        """Set ``name``; a value of None keeps the variable without a value."""
        self._vars[name] = value

    def unset(self, name: str) -> None:
        self._vars.pop(name, None)

    def append(self, name: str, value: str | None) -> None:
        """Append ``value`` to the current value of ``name`` (``+=``)."""
        if value is None:
            return
        if name in self._vars:
            self._vars[name] = (self._vars[name] or "") + value
        else:
            self.set(name, value)

    def set_status(self, status: int) -> None:
        """Record the last exit status in ``?``."""
        self.set("?", str(status))

    def entries(self) -> list[str]:
        """Every variable as an entry string, in order."""
        return [_entry(name, value) for name, value in self._vars.items()]

    def env_lines(self) -> list[str]:
        """The lines the ``env`` builtin prints."""
        return [
            entry
            for entry in self.entries()
            if not entry.startswith("?") and "=" in entry
        ]

    def __contains__(self, name) -> bool:
        return name in self._vars

    def __repr__(self) -> str:
        return f"Environment({self.entries()!r})"