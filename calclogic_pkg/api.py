"""Public API for calclogic - evaluation returns structured objects without side effects."""

from __future__ import annotations

import logging

from .config import DEFAULT_LINE_LENGTH, VERSION
from .display import TextDisplay
from .history import InputHistory
from .logging_config import setup_logging
from .logic import Logic
from .sampler import CurveSampler
from .types import CalcSyntaxError, CurveSeries, EvalResult, FormatError, Strings


def evaluate(
    expression: str,
    line_length: int = DEFAULT_LINE_LENGTH,
    strings: Strings | None = None,
) -> EvalResult:
    """Evaluate a calculator expression and format it for the display.

    Args:
        expression: Keypad text (e.g., "2+2", "sin(1)×3", "x^2=3")
        line_length: Display width in characters
        strings: Localized tokens (default: English keypad)

    Returns:
        EvalResult with the display text, or the error code

    Example:
        >>> from calclogic_pkg.api import evaluate
        >>> evaluate("2+2").result
        '4'
        >>> evaluate("1/0").error_code
        'NOT_A_NUMBER'
    """
    logic = Logic(InputHistory(), TextDisplay(), strings=strings, line_length=line_length)
    try:
        return EvalResult(ok=True, result=logic.evaluate(expression))
    except (CalcSyntaxError, FormatError) as e:
        return EvalResult(ok=False, error=e.message, error_code=e.code)


def sample_curve(expression: str, strings: Strings | None = None) -> CurveSeries:
    """Sample an equation such as "y=2×x" into (x, y) points.

    Example:
        >>> from calclogic_pkg.api import sample_curve
        >>> len(sample_curve("y=2x"))
        201
    """
    sampler = CurveSampler(strings)
    # No token or live text is passed, so the run is never abandoned
    return sampler.sample(expression) or CurveSeries(sampler.title_for(expression))


def configure_logging(level: str | None = None, log_file: str | None = None) -> logging.Logger:
    """Install the package log handlers; call once at host start-up.

    Args:
        level: Logging level name (default: CALCLOGIC_LOG_LEVEL, "WARNING")
        log_file: Optional log file (default: CALCLOGIC_LOG_FILE)

    Example:
        >>> from calclogic_pkg.api import configure_logging
        >>> configure_logging("DEBUG").name
        'calclogic'
    """
    logger = setup_logging(level, log_file)
    logger.debug("calclogic %s logging configured", VERSION)
    return logger
