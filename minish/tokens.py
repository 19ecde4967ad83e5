"""Tokens and the character-level helpers the tokenizer relies on."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from .errors import print_error
from .textutil import is_space

_QUOTES = "'\""
_SPACE_CHARS = "\t\n\v\f\r "


class TokenType(IntEnum):
    CMD = 0
    PIPE = 1
    IN = 2
    OUT = 3
    APPEND = 4
    HEREDOC = 5


@dataclass
class Token:
    value: str | None
    type: TokenType = TokenType.CMD


def get_operator_type(text: str) -> TokenType:
    """Classify the operator at the start of ``text``."""
    if text.startswith("<<"):
        return TokenType.HEREDOC
    if text.startswith(">>"):
        return TokenType.APPEND
    if text.startswith("<"):
        return TokenType.IN
    if text.startswith(">"):
        return TokenType.OUT
    if text.startswith("|"):
        return TokenType.PIPE
    return TokenType.CMD


def is_operator(text: str) -> bool:
    """Return True when ``text`` starts with a pipe or redirection."""
    return bool(text) and text[0] in "<>|"


def is_redirection(token_type) -> bool:
    return TokenType.IN <= token_type <= TokenType.HEREDOC


def check_operators(text: str) -> bool:
    """Return True when ``text`` contains any operator character."""
    return any(ch in "<>|" for ch in text)


def skip_spaces(text: str, pos: int) -> int:
    """Return the first position at or after ``pos`` that is not whitespace."""
    rest = text[pos:]
    return pos + len(rest) - len(rest.lstrip(_SPACE_CHARS))


def skip_quotes(line: str, pos: int) -> int | None:
    """Return the index of the quote closing the one at ``pos``, or None."""
    closing = line.find(line[pos], pos + 1)
    return closing if closing != -1 else None


def quotes_closed(text: str) -> bool:
    """Check that every quote is closed, reporting the error if not."""
    pos = 0
    while pos < len(text):
        if text[pos] in _QUOTES:
            closing = skip_quotes(text, pos)
            if closing is None:
                print_error("minish", "Unclosed quoted`", None, None)
                return False
            pos = closing
        pos += 1
    return True


def count_quotes(text: str | None) -> int:
    """Count the quote characters at the start of ``text``."""
    if text is None:
        return 0
    return len(text) - len(text.lstrip(_QUOTES))


def has_whitespace(text: str | None) -> bool:
    """True for an empty string or one holding any whitespace."""
    if text is None:
        return False
    return text == "" or any(is_space(ch) for ch in text)


def is_blank(text: str | None) -> bool:
    """True for None or a string of whitespace only."""
    return text is None or all(is_space(ch) for ch in text)


def whitespace_before_equal(text: str) -> bool:
    """True if there is no '=' or whitespace appears before the first one."""
    eq = text.find("=")
    if eq == -1:
        return True
    return any(is_space(ch) for ch in text[:eq])