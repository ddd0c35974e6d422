"""Unescaping of string and character literals in grammar source."""

from __future__ import annotations

import string as _string
from typing import Iterator

_SIMPLE = {
    '"': '"',
    "\\": "\\",
    "r": "\r",
    "n": "\n",
    "t": "\t",
    "0": "\0",
    "'": "'",
}


def _is_hex(text: str) -> bool:
    return bool(text) and all(c in _string.hexdigits for c in text)


def _byte_escape(chars: Iterator[str]) -> str:
    digits = "".join(c for _, c in zip(range(2), chars))
    if len(digits) != 2 or not _is_hex(digits):
        raise ValueError(f"invalid byte escape \\x{digits}")
    return chr(int(digits, 16))


def _unicode_escape(chars: Iterator[str]) -> str:
    if next(chars, None) != "{":
        raise ValueError("unicode escape must start with '{'")
    digits = []
    for c in chars:
        if c == "}":
            break
        digits.append(c)
    else:
        raise ValueError("unterminated unicode escape")
    text = "".join(digits)
    if not 2 <= len(text) <= 6 or not _is_hex(text):
        raise ValueError(f"invalid unicode escape \\u{{{text}}}")
    value = int(text, 16)
    if value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
        raise ValueError(f"\\u{{{text}}} is not a valid character")
    return chr(value)


def unescape(string: str) -> str:
    """Resolve backslash escapes; raise ValueError on a malformed escape."""
    result = []
    chars = iter(string)
    for c in chars:
        if c != "\\":
            result.append(c)
            continue
        code = next(chars, None)
        if code is None:
            raise ValueError("escape at end of input")
        if code in _SIMPLE:
            result.append(_SIMPLE[code])
        elif code == "x":
            result.append(_byte_escape(chars))
        elif code == "u":
            result.append(_unicode_escape(chars))
        else:
            raise ValueError(f"unknown escape \\{code}")
    return "".join(result)


def _quoted(text: str, quote: str) -> str:
    if len(text) < 2 or text[0] != quote or text[-1] != quote:
        raise ValueError(f"literal must be enclosed in {quote}: {text!r}")
    return unescape(text[1:-1])


def string_literal(text: str) -> str:
    """Return the value of a double-quoted string literal."""
    return _quoted(text, '"')


def insensitive_literal(text: str) -> str:
    """Return the value of a case-insensitive literal such as ``^"abc"``."""
    if not text.startswith("^"):
        raise ValueError(f"insensitive literal must start with '^': {text!r}")
    return string_literal(text[1:].lstrip())


def char_literal(text: str) -> str:
    """Return the value of a single-quoted character literal."""
    return _quoted(text, "'")