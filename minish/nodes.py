"""The command tree the parser builds and the executor walks."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from .tokens import Token, TokenType


@dataclass
class Node:
    """A command, pipe or redirection in the command tree.

    ``fd_in`` and ``fd_out`` hold descriptors opened for redirections and
    here-documents; 0 and 1 mean the standard streams are used unchanged.
    """

    cmd: list[str] | None = None
    type: TokenType = TokenType.CMD
    flag: int = 0
    fd_in: int = 0
    fd_out: int = 1
    left: Node | None = field(default=None, repr=False)
    right: Node | None = field(default=None, repr=False)

    def walk(self) -> Iterator[Node]:
        """Yield this node and its descendants, parent before left before right."""
        yield self
        if self.left is not None:
            yield from self.left.walk()
        if self.right is not None:
            yield from self.right.walk()

    def close_fds(self) -> None:
        """Close every descriptor above 2 held anywhere in the tree."""
        for node in self.walk():
            if node.fd_in > 2:
                _close_quietly(node.fd_in)
                node.fd_in = 0
            if node.fd_out > 2:
                _close_quietly(node.fd_out)
                node.fd_out = 1


def _close_quietly(fd: int) -> None:
    try:
        os.close(fd)
    except OSError:
        pass


def command_from_tokens(tokens: Iterable[Token]) -> Node:
    """Build a command node from word tokens, skipping those without a value."""
    return Node(
        cmd=[token.value for token in tokens if token.value is not None],
        type=TokenType.CMD,
    )