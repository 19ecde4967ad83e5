"""Checks that a token list forms a well-built command line."""

from __future__ import annotations

import sys

from .errors import ShellSyntaxError
from .tokens import Token, TokenType, is_redirection

_PREFIX = "syntax error near unexpected token `"


def _error_code(tokens: list[Token]) -> int:
    had_pipe = False
    pos = 0
    while pos < len(tokens):
        token = tokens[pos]
        following = tokens[pos + 1] if pos + 1 < len(tokens) else None
        if token.type == TokenType.PIPE:
            if following is None or had_pipe:
                return 2
            had_pipe = True
            pos += 1
        elif is_redirection(token.type):
            if following is None:
                return 1
            if following.type == TokenType.PIPE:
                return 2
            if following.type != TokenType.CMD:
                return 3
            had_pipe = False
            pos += 2
        else:
            had_pipe = False
            pos += 1
    return 1 if had_pipe else 0


def find_syntax_error(tokens: list[Token]) -> str | None:
    """Return the syntax error message for ``tokens``, or None if they are fine."""
    if tokens and tokens[0].type == TokenType.PIPE:
        return _PREFIX + "|'"
    code = _error_code(tokens)
    if code == 1:
        return _PREFIX + "newline'"
    if code == 2:
        return _PREFIX + "|'"
    if code == 3:
        value = tokens[1].value if len(tokens) > 1 else None
        return _PREFIX + (value or "") + "'"
    return None


def check_syntax(tokens: list[Token]) -> None:
    """Report a syntax error on standard error and raise ShellSyntaxError."""
    message = find_syntax_error(tokens)
    if message is not None:
        sys.stderr.write(message + "\n")
        sys.stderr.flush()
        raise ShellSyntaxError(message)