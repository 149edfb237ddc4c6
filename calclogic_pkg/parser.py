"""Input preprocessing for keypad text.

This module handles:
- Trailing operator removal (an expression cannot end in an infix operator)
- Delocalization of function names and variable tokens (e.g. Spanish "sen")
- Token-boundary aware searching, so "exp" never counts as the variable x
- Detection of text that is still being typed (incomplete suffixes)
"""

from __future__ import annotations

import re
from functools import lru_cache

from .types import Strings

# plus minus times div
OPERATORS = "+−×÷/*"


def is_operator(text: str) -> bool:
    """Return True if text is exactly one infix operator character."""
    return len(text) == 1 and text in OPERATORS


def strip_trailing_operators(text: str) -> str:
    """Drop final infix operators; they can only result in an error."""
    size = len(text)
    while size > 0 and is_operator(text[size - 1]):
        size -= 1
    return text[:size]


@lru_cache(maxsize=256)
def _token_regex(token: str) -> re.Pattern[str]:
    # A token must not be glued to other letters: "sen" matches in "2sen(1)"
    # but not in "senh(1)" or "absen"
    return re.compile(r"(?<![^\W\d_])" + re.escape(token) + r"(?![^\W\d_])")


def contains_token(text: str, token: str) -> bool:
    """Return True if token appears in text as a standalone word."""
    if not token:
        return False
    return _token_regex(token).search(text) is not None


def replace_token(text: str, token: str, replacement: str) -> str:
    """Replace standalone occurrences of token with replacement."""
    if not token or token == replacement:
        return text
    return _token_regex(token).sub(lambda _m: replacement, text)


def delocalize(text: str, strings: Strings) -> str:
    """Translate localized function names and X/Y tokens to canonical names.

    Args:
        text: Keypad text (e.g., "sen(30)+x" for a Spanish keypad)
        strings: Localized tokens in use

    Returns:
        Text with canonical names (e.g., "sin(30)+x")
    """
    # Longest names first so "ln" can never eat part of a longer name
    names = sorted(strings.function_names().items(), key=lambda kv: -len(kv[0]))
    for localized, canonical in names:
        text = replace_token(text, localized, canonical)
    text = replace_token(text, strings.x, "x")
    text = replace_token(text, strings.y, "y")
    return text


def has_variable(text: str) -> bool:
    """Return True if canonical text references x or y."""
    return contains_token(text, "x") or contains_token(text, "y")


def incomplete_suffixes(strings: Strings) -> tuple[str, ...]:
    """Suffixes showing the user is still typing the expression."""
    functions = (strings.sin, strings.cos, strings.tan, strings.lg, strings.mod, strings.ln)
    return (
        strings.plus,
        strings.minus,
        strings.div,
        strings.mul,
        strings.dot,
        strings.coma,
        strings.power,
        strings.sqrt,
        strings.integral,
    ) + tuple(f + "(" for f in functions)


def is_incomplete(text: str, strings: Strings) -> bool:
    """Return True if text ends in an operator, separator or an open function call."""
    return any(s and text.endswith(s) for s in incomplete_suffixes(strings))
