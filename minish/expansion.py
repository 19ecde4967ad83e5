"""Variable expansion and quote removal for words and here-document lines."""

from __future__ import annotations

import string

from .env import Environment
from .tokens import is_blank

_DIGITS = frozenset(string.digits)
_ALNUM = frozenset(string.ascii_letters + string.digits)
_NAME_CHARS = _ALNUM | {"_"}
_SPECIAL = "'\"$"


def remove_quotes(text: str) -> str:
    """Drop quote pairs, keeping what they enclose.

    An unclosed quote swallows the rest of the text.
    """
    out: list[str] = []
    pos = 0
    length = len(text)
    while pos < length:
        ch = text[pos]
        if ch in "'\"":
            end = text.find(ch, pos + 1)
            if end == -1:
                out.append(text[pos + 1:])
                break
            out.append(text[pos + 1:end])
            pos = end + 1
        else:
            out.append(ch)
            pos += 1
    return "".join(out)


def expand_dollar(
    result: str, text: str, pos: int, env: Environment
) -> tuple[str, int]:
    """Expand the ``$`` run starting at ``pos``.

    Returns the new accumulated result and the position after what was
    consumed.
    """
    start = pos
    while pos < len(text) and text[pos] == "$":
        pos += 1
    count = pos - start
    ch = text[pos] if pos < len(text) else ""

    if ch in _DIGITS or ch == "@":
        return result, pos + 1
    if ch == "?":
        return result + (env.get("?") or ""), pos + 1
    if ch == "_":
        return result + (env.get("_") or ""), pos + 1
    if ch not in _ALNUM:
        return result + "$", pos

    if count % 2 == 0:
        return result + text[start:start + count], pos

    end = pos
    while end < len(text) and text[end] in _NAME_CHARS:
        end += 1
    value = env.get(text[pos:end])
    if not is_blank(value):
        result += value
    return "$" * (count - 1) + result, end


def _single_quoted(result: str, text: str, pos: int) -> tuple[str, int]:
    # The closing quote is left in place; the next pass copies it on.
    end = text.find("'", pos + 1)
    if end == -1:
        end = len(text)
    return result + text[pos:end], end


def _double_quoted(
    result: str, text: str, pos: int, env: Environment
) -> tuple[str, int]:
    pos += 1
    content = ""
    while pos < len(text) and text[pos] != '"':
        if text[pos] == "$":
            content, pos = expand_dollar(content, text, pos, env)
        else:
            content += text[pos]
            pos += 1
    if pos < len(text):
        pos += 1
    return f'{result}"{content}"', pos


def _plain(result: str, text: str, pos: int) -> tuple[str, int]:
    end = pos
    while end < len(text) and text[end] not in _SPECIAL:
        end += 1
    return result + text[pos:end], end


def _delimiter(result: str, text: str, pos: int) -> tuple[str, int]:
    if len(text) > 1 and text[0] == "$" and text[1] in "'\"":
        pos += 1
    return result + text[pos:], len(text)


def _heredoc_quoted(
    result: str, text: str, pos: int, env: Environment
) -> tuple[str, int]:
    start = pos
    length = len(text)
    while pos < length and text[pos] != "\n":
        if text[pos] == "$" and pos + 1 < length and text[pos + 1] != " ":
            result += text[start:pos]
            result, pos = expand_dollar(result, text, pos, env)
            start = pos
        else:
            pos += 1
    result += text[start:pos]
    if pos < length:
        pos += 1
    return result, pos


def expand_variable(text: str, flag: int, env: Environment) -> str:
    """Expand variables in a word, keeping its quotes.

    With ``flag`` 2 (a here-document delimiter) a ``$`` outside quotes is
    copied literally together with everything after it.
    """
    result = ""
    pos = 0
    while pos < len(text):
        ch = text[pos]
        if ch == "'":
            result, pos = _single_quoted(result, text, pos)
        elif ch == '"':
            result, pos = _double_quoted(result, text, pos, env)
        elif ch == "$" and flag == 2:
            result, pos = _delimiter(result, text, pos)
        elif ch == "$":
            result, pos = expand_dollar(result, text, pos, env)
        else:
            result, pos = _plain(result, text, pos)
    return result


def expand_heredoc(text: str, env: Environment) -> str:
    """Expand variables in a here-document line; quotes do not protect."""
    result = ""
    pos = 0
    while pos < len(text):
        ch = text[pos]
        if ch in "'\"":
            result, pos = _heredoc_quoted(result, text, pos, env)
        elif ch == "$":
            result, pos = expand_dollar(result, text, pos, env)
        else:
            result, pos = _plain(result, text, pos)
    return result