"""Small text helpers shared by the shell: number parsing, field splitting."""

from __future__ import annotations

import re

_LONG_MAX = 2**63 - 1
_SPACES = frozenset("\t\n\v\f\r ")
_NUMBER = re.compile(r"[\t\n\v\f\r ]*([+-]?)([0-9]*)")


def _to_int32(value: int) -> int:
    return ((value + 2**31) % 2**32) - 2**31


def atoi(text: str | None) -> int:
    """Parse a leading decimal integer the way the shell does.

    Leading whitespace and one sign are accepted and parsing stops at the
    first non-digit.  A value that overflows a 64-bit long gives -1 when
    positive and 0 when negative.  The result is a 32-bit signed int.
    """
    if text is None:
        return 0
    match = _NUMBER.match(text)
    sign = -1 if match.group(1) == "-" else 1
    digits = match.group(2)
    if not digits:
        return 0
    value = int(digits)
    if value > _LONG_MAX:
        return -1 if sign == 1 else 0
    return _to_int32(value * sign)


def split_fields(text: str | None, sep: str) -> list[str]:
    """Split ``text`` on ``sep``, dropping empty fields."""
    if text is None:
        return []
    return [part for part in text.split(sep) if part]


def is_space(ch: str) -> bool:
    """Return True for a single whitespace character (space, \\t..\\r)."""
    return len(ch) == 1 and ch in _SPACES