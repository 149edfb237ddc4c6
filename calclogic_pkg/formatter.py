"""Result formatting for a fixed-width calculator display.

A value is rendered like ``%W.Pg`` for decreasing precisions P until the text
fits in W characters, starting from the shortest decimal form of the float.
Each rendering is tidied: field padding, a ``+`` sign and leading zeros in
the exponent, trailing fractional zeros and a dangling decimal separator are
removed.

    >>> format_result(2.0 / 3.0, 10)
    '0.66666667'
    >>> format_result(-0.00001, 8)
    '-1e-5'
    >>> localize_result(format_result(-0.00001, 8))
    '−1e−5'
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Context, Decimal

from .config import MIN_PRECISION
from .types import FormatError

MINUS = "−"
INFINITY_UNICODE = "∞"

# What Python's float formatting produces for infinity. Never shown to the user.
INFINITY = "inf"


def tidy_number(text: str) -> str:
    """Strip redundant characters from a %g rendering.

    Already minimal text comes back unchanged.

    Args:
        text: Rendered number (e.g., "  1.500000e+05")

    Returns:
        Minimal form (e.g., "1.5e5")
    """
    result = text.strip()
    mantissa = result
    exponent = None
    e = result.find("e")
    if e != -1:
        mantissa = result[:e]
        exponent = result[e + 1 :]
        if exponent.startswith("+"):
            exponent = exponent[1:]
        exponent = str(int(exponent))

    period = mantissa.find(".")
    if period == -1:
        period = mantissa.find(",")
    if period != -1:
        while len(mantissa) > period + 1 and mantissa.endswith("0"):
            mantissa = mantissa[:-1]
        if len(mantissa) == period + 1:
            mantissa = mantissa[:-1]
        if mantissa in ("", "-", "+"):
            mantissa += "0"

    if exponent is not None:
        return mantissa + "e" + exponent
    return mantissa


def try_formatting_with_precision(value: float, precision: int, line_length: int) -> str:
    """Render value with the given number of significant digits.

    Digits come from the shortest decimal form of the float, so a wider
    precision only adds zeros and never exposes binary conversion noise. The
    layout follows ``%g``: positional notation when the rounded exponent lies
    in [-4, precision), scientific otherwise.

    Raises:
        FormatError: If value is NaN
    """
    if math.isnan(value):
        raise FormatError()
    width = max(line_length, 1)
    precision = max(precision, 1)
    if math.isinf(value):
        return tidy_number(format(value, f"{width}g"))

    context = Context(prec=precision, rounding=ROUND_HALF_UP)
    rounded = context.plus(Decimal(repr(float(value))))
    exponent = rounded.adjusted()
    if -4 <= exponent < precision:
        rendered = format(rounded, f"{width}.{precision - 1 - exponent}f")
    else:
        rendered = format(rounded, f"{width}.{precision - 1}e")
    return tidy_number(rendered)


def format_result(
    value: float, line_length: int, min_precision: int = MIN_PRECISION
) -> str:
    """Return the most precise rendering of value that fits in line_length characters.

    Precision goes from line_length down to min_precision. Below the floor the
    width is only a target: if nothing fits, the floor-precision rendering is
    returned as is.

    Args:
        value: Number to format
        line_length: Maximum number of characters the display can show
        min_precision: Lowest precision ever tried

    Returns:
        Formatted number using ASCII '-' and "inf"; see localize_result

    Raises:
        FormatError: If value is NaN
    """
    if math.isnan(value):
        raise FormatError()
    result = None
    for precision in range(line_length, min_precision - 1, -1):
        result = try_formatting_with_precision(value, precision, line_length)
        if len(result) <= line_length:
            break
    if result is None:
        result = try_formatting_with_precision(value, min_precision, line_length)
    return result


def localize_result(
    result: str, minus: str = MINUS, infinity: str = INFINITY_UNICODE
) -> str:
    """Substitute display glyphs for the minus sign and infinity."""
    return result.replace("-", minus).replace(INFINITY, infinity)
