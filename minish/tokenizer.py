"""Split a command line into tokens, expanding each word as it goes."""

from __future__ import annotations

from enum import IntEnum

from .env import Environment
from .errors import ShellSyntaxError
from .expansion import expand_variable, remove_quotes
from .tokens import (
    Token,
    TokenType,
    count_quotes,
    get_operator_type,
    has_whitespace,
    is_operator,
    skip_spaces,
    whitespace_before_equal,
)
from .textutil import is_space

_TRIM = " \t\n\f\r"


class WordContext(IntEnum):
    """How a word is treated, set by the words that came before it."""

    DEFAULT = 0
    EXPORT = 1
    HEREDOC = 2
    FILE = 3


def _extract_operator(text: str, pos: int, kind: TokenType) -> tuple[str, int]:
    length = 2 if kind in (TokenType.HEREDOC, TokenType.APPEND) else 1
    return text[pos:pos + length], pos + length


def _extract_word(text: str, pos: int) -> tuple[str, int]:
    start = pos
    quote = ""
    while pos < len(text):
        ch = text[pos]
        if not quote and (is_operator(text[pos:pos + 2]) or is_space(ch)):
            break
        if ch in "'\"":
            if not quote:
                quote = ch
            elif ch == quote:
                quote = ""
        pos += 1
    return text[start:pos], pos


def _next_word(text: str, pos: int) -> tuple[str, TokenType, int]:
    pos = skip_spaces(text, pos)
    kind = get_operator_type(text[pos:])
    if kind != TokenType.CMD:
        word, pos = _extract_operator(text, pos, kind)
    else:
        word, pos = _extract_word(text, pos)
    return word, kind, pos


def extract_dollar_tokens(text: str, dollar: bool, tokens: list[Token]) -> None:
    """Split already expanded text into further tokens appended to ``tokens``."""
    pos = 0
    while pos < len(text):
        word, kind, pos = _next_word(text, pos)
        if dollar:
            tokens.append(Token(word.strip('"'), TokenType.CMD))
        else:
            tokens.append(Token(remove_quotes(word), kind))


def _dollar_word(word: str, tokens: list[Token], flag, env: Environment) -> None:
    expanded = expand_variable(word, flag, env)
    if count_quotes(word) % 2 == 0:
        extract_dollar_tokens(expanded, True, tokens)
    else:
        tokens.append(Token(remove_quotes(expanded), TokenType.CMD))


def _file_word(word: str, tokens: list[Token], flag, env: Environment) -> None:
    kind = get_operator_type(word)
    expanded = expand_variable(word, flag, env)
    if flag == WordContext.HEREDOC:
        tokens.append(Token(expanded, kind))
    elif "$" in word and flag == WordContext.FILE and has_whitespace(expanded):
        tokens.append(Token(None, TokenType.CMD))
    else:
        tokens.append(Token(remove_quotes(expanded), kind))


def _export_word(word: str, tokens: list[Token], flag, env: Environment) -> None:
    expanded = expand_variable(word, flag, env)
    unquoted = remove_quotes(expanded)
    if "$" in word and not whitespace_before_equal(expanded):
        tokens.append(Token(expanded, TokenType.CMD))
    elif whitespace_before_equal(expanded):
        extract_dollar_tokens(unquoted, False, tokens)
    else:
        tokens.append(Token(unquoted, TokenType.CMD))


def _default_word(word: str, tokens: list[Token], flag, env: Environment) -> None:
    kind = get_operator_type(word)
    expanded = expand_variable(word, flag, env)
    tokens.append(Token(remove_quotes(expanded), kind))


def analyse_token(word: str, tokens: list[Token], flag, env: Environment) -> None:
    """Expand ``word`` according to ``flag`` and append the resulting tokens."""
    if "$" in word and flag == WordContext.DEFAULT:
        _dollar_word(word, tokens, flag, env)
    elif flag in (WordContext.FILE, WordContext.HEREDOC):
        _file_word(word, tokens, flag, env)
    elif flag == WordContext.EXPORT:
        _export_word(word, tokens, flag, env)
    else:
        _default_word(word, tokens, flag, env)


def tokenize_input(text: str, env: Environment) -> list[Token]:
    """Turn a command line into tokens.

    Raises ShellSyntaxError, after reporting it, when a quote is left open.
    """
    line = text.strip(_TRIM)
    from .tokens import quotes_closed

    if not quotes_closed(line):
        raise ShellSyntaxError("Unclosed quoted`")
    tokens: list[Token] = []
    flag = WordContext.DEFAULT
    pos = 0
    while pos < len(line):
        word, kind, pos = _next_word(line, pos)
        if word == "export":
            flag = WordContext.EXPORT
        elif kind == TokenType.HEREDOC:
            flag = WordContext.HEREDOC
        elif kind in (TokenType.IN, TokenType.OUT):
            flag = WordContext.FILE
        analyse_token(word, tokens, flag, env)
    return tokens