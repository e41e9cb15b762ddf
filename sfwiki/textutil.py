"""Small string helpers: trimming, case-insensitive search and comparison,
boolean parsing and bit strings."""

from __future__ import annotations

import re
import string

_C_WHITESPACE = " \t\n\v\f\r"
_TO_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)
_TO_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)

_TRUE_WORDS = frozenset({"TRUE", "YES"})
_FALSE_WORDS = frozenset({"FALSE", "NO"})

_INTEGER = re.compile(
    r"[ \t\n\v\f\r]*(?P<sign>[+-]?)"
    r"(?:0[xX](?P<hex>[0-9a-fA-F]+)|(?P<oct>0[0-7]*)|(?P<dec>[1-9][0-9]*))"
)

_BIT_WIDTHS = (8, 16, 32)


def safe_strlen(text: str | None) -> int:
    """Length of ``text``, treating ``None`` as empty."""
    return 0 if text is None else len(text)


def stristr(text: str, search: str) -> int | None:
    """Index of the first ASCII case-insensitive match of ``search`` in ``text``.

    Returns ``None`` when there is no match or ``search`` is empty.
    """
    if not search:
        return None
    index = text.translate(_TO_UPPER).find(search.translate(_TO_UPPER))
    return None if index < 0 else index


def bounded_copy(text: str, max_length: int) -> str:
    """Copy at most ``max_length`` characters, stopping at an embedded NUL."""
    end = text.find("\0")
    if end >= 0:
        text = text[:end]
    return text[:max(max_length, 0)]


def ltrim(text: str) -> str:
    """Remove leading whitespace."""
    return text.lstrip(_C_WHITESPACE)


def rtrim(text: str) -> str:
    """Remove trailing whitespace."""
    return text.rstrip(_C_WHITESPACE)


def trim(text: str) -> str:
    """Remove leading and trailing whitespace."""
    return ltrim(rtrim(text))


def _parse_c_integer(text: str) -> int:
    match = _INTEGER.fullmatch(text)
    if match is None:
        raise ValueError(f"not a boolean value: {text!r}")
    if match["hex"] is not None:
        value = int(match["hex"], 16)
    elif match["oct"] is not None:
        value = int(match["oct"], 8)
    else:
        value = int(match["dec"], 10)
    return -value if match["sign"] == "-" else value


def parse_boolean(text: str) -> bool:
    """Parse TRUE/YES/FALSE/NO (any case) or an integer into a boolean.

    Integers follow C conventions (decimal, 0x hex, leading-zero octal);
    zero is false. Raises ``ValueError`` for anything else.
    """
    word = text.translate(_TO_UPPER)
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    if not text:
        raise ValueError("empty string is not a boolean value")
    return _parse_c_integer(text) != 0


def string_to_boolean(text: str) -> bool:
    """Like :func:`parse_boolean` but returns ``False`` for unparseable text."""
    try:
        return parse_boolean(text)
    except ValueError:
        return False


def stricmp(first: str, second: str) -> int:
    """ASCII case-insensitive comparison returning -1, 0 or 1."""
    a = first.translate(_TO_LOWER)
    b = second.translate(_TO_LOWER)
    return (a > b) - (a < b)


def safe_string_compare(first: str | None, second: str | None, no_case: bool = True) -> int:
    """Compare two strings where ``None`` sorts before any string."""
    if first is None:
        return 0 if second is None else -1
    if second is None:
        return 1
    if no_case:
        return stricmp(first, second)
    return (first > second) - (first < second)


def create_bit_string(value: int, bits: int = 32) -> str:
    """Binary digits of ``value``, most significant first, ``bits`` wide (8, 16 or 32)."""
    if bits not in _BIT_WIDTHS:
        raise ValueError(f"unsupported bit width {bits}; expected one of {_BIT_WIDTHS}")
    return format(value & ((1 << bits) - 1), f"0{bits}b")


def terminate_path_string(path: str) -> str:
    """Ensure a non-empty path ends with a backslash."""
    if path and not path.endswith("\\"):
        return path + "\\"
    return path