"""Here-documents: their bodies are read before the command line runs."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Callable, Iterable, Iterator

from .env import Environment
from .errors import print_error
from .expansion import expand_heredoc, remove_quotes
from .nodes import Node
from .signals import SignalState, set_signal_heredoc, state
from .tokens import TokenType

PROMPT = "> "

Reader = Callable[[str], "str | None"]


def _prompt_reader(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def _read_lines(reader: Reader) -> Iterator[str]:
    while True:
        line = reader(PROMPT)
        if line is None:
            return
        yield line


def _is_quoted(delimiter: str) -> bool:
    return "'" in delimiter or '"' in delimiter


def collect_heredoc(delimiter: str, env: Environment, lines: Iterable[str]) -> str:
    """Return the body of a here-document read from ``lines``.

    Reading stops at the delimiter line or when ``lines`` runs out.  Lines are
    expanded unless the delimiter was quoted.
    """
    quoted = _is_quoted(delimiter)
    end = remove_quotes(delimiter)
    body: list[str] = []
    for line in lines:
        if line == end:
            break
        body.append(line if quoted else expand_heredoc(line, env))
    return "".join(f"{line}\n" for line in body)


def _body_fd(body: str) -> int:
    with tempfile.TemporaryFile() as handle:
        handle.write(body.encode())
        handle.flush()
        handle.seek(0)
        return os.dup(handle.fileno())


def open_heredoc(node: Node, env: Environment, reader: Reader | None = None) -> bool:
    """Read the here-document ``node`` introduces and keep it in ``node.fd_in``.

    Returns False, with status 1, when reading was interrupted or failed.
    """
    target = node.right
    if node.type != TokenType.HEREDOC or target is None or not target.cmd:
        return True
    set_signal_heredoc()
    delimiter = target.cmd[0]
    target.flag = int(_is_quoted(delimiter))
    try:
        body = collect_heredoc(delimiter, env, _read_lines(reader or _prompt_reader))
        fd = _body_fd(body)
    except KeyboardInterrupt:
        state.value = SignalState.HEREDOC_INTERRUPTED
        node.fd_in = -1
        env.set_status(1)
        return False
    except OSError as exc:
        print_error("minish", "pipe", exc.strerror, None)
        node.fd_in = -1
        env.set_status(1)
        return False
    node.fd_in = fd
    env.set_status(0)
    return True


def preorder_heredoc(
    node: Node | None, env: Environment, reader: Reader | None = None
) -> None:
    """Read every here-document in the tree, parents first, left before right."""
    if node is None or state.value == SignalState.HEREDOC_INTERRUPTED:
        return
    if not open_heredoc(node, env, reader):
        return
    preorder_heredoc(node.left, env, reader)
    preorder_heredoc(node.right, env, reader)