"""Signal handling for the prompt, here-documents and child processes."""

from __future__ import annotations

import os
import signal
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import ClassVar, NoReturn

from .env import Environment
from .errors import ShellExit
from .textutil import atoi

try:
    import termios
except ImportError:  # pragma: no cover - non-POSIX platforms
    termios = None

_HANDLED = (signal.SIGINT, signal.SIGQUIT)


@dataclass
class SignalState:
    """What the last interrupt did: nothing, broke the prompt, or a here-document."""

    IDLE: ClassVar[int] = 0
    PROMPT_INTERRUPTED: ClassVar[int] = 1
    HEREDOC_INTERRUPTED: ClassVar[int] = -1

    value: int = 0

    def reset(self) -> None:
        self.value = self.IDLE


state = SignalState()


def _write_stdout(text: str) -> None:
    try:
        sys.stdout.write(text)
        sys.stdout.flush()
    except (OSError, ValueError):
        pass


def _set_terminal_print_off() -> None:
    """Stop the terminal from echoing control characters such as ^C."""
    if termios is None or not os.isatty(1):
        return
    echoctl = getattr(termios, "ECHOCTL", 0)
    try:
        attrs = termios.tcgetattr(1)
        attrs[3] &= ~echoctl
        termios.tcsetattr(1, termios.TCSANOW, attrs)
    except (termios.error, OSError):
        pass


def _ctrl_c(signum, frame) -> None:
    if state.value != SignalState.HEREDOC_INTERRUPTED:
        _write_stdout("\n")
        state.value = SignalState.PROMPT_INTERRUPTED
    raise KeyboardInterrupt


def _sigint_heredoc(signum, frame) -> None:
    _write_stdout("\n")
    state.value = SignalState.HEREDOC_INTERRUPTED
    raise KeyboardInterrupt


def setup_signal() -> None:
    """Install the interactive prompt's handlers."""
    _set_terminal_print_off()
    signal.signal(signal.SIGINT, _ctrl_c)
    signal.signal(signal.SIGQUIT, signal.SIG_IGN)


def set_signal_heredoc() -> None:
    """Install the handlers used while a here-document is read."""
    _set_terminal_print_off()
    signal.signal(signal.SIGINT, _sigint_heredoc)
    signal.signal(signal.SIGQUIT, signal.SIG_IGN)


@contextmanager
def ignored_signals() -> Iterator[None]:
    """Ignore SIGINT and SIGQUIT for the duration of the block."""
    previous = {signum: signal.getsignal(signum) for signum in _HANDLED}
    for signum in _HANDLED:
        signal.signal(signum, signal.SIG_IGN)
    try:
        yield
    finally:
        for signum, handler in previous.items():
            if handler is not None:
                signal.signal(signum, handler)


def restore_default_signals() -> None:
    """Give SIGINT and SIGQUIT their default actions (for child processes)."""
    for signum in _HANDLED:
        signal.signal(signum, signal.SIG_DFL)


def handle_eof(env: Environment) -> NoReturn:
    """Leave the shell at end of input with the last exit status."""
    _write_stdout("exit\n")
    raise ShellExit(atoi(env.get("?")) & 0xFF)