"""Centralized configuration for calclogic.

This module defines:
- Display width and precision floor for result formatting
- Curve sampling ranges, step sizes and the implicit-curve tolerance
- Worker pool size for background sampling
- Allowed SymPy names and parser transformations for the math engine

Configuration can be overridden via environment variables (prefixed with
CALCLOGIC_).
"""

import os
import re

import sympy as sp
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    standard_transformations,
)

# Version is defined in pyproject.toml [project] section
try:
    import importlib.metadata

    VERSION = importlib.metadata.version("calclogic")
except Exception:
    # Fallback if package not installed
    VERSION = "1.0.0"

# Result formatting
DEFAULT_LINE_LENGTH = int(os.getenv("CALCLOGIC_DEFAULT_LINE_LENGTH", "10"))
MIN_PRECISION = int(
    os.getenv("CALCLOGIC_MIN_PRECISION", "7")
)  # significant digits, never go below this

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("CALCLOGIC_MAX_INPUT_LENGTH", "1000"))  # characters

MAX_HISTORY_ENTRIES = int(os.getenv("CALCLOGIC_MAX_HISTORY_ENTRIES", "100"))

# Cache configuration
CACHE_SIZE_PARSE = int(os.getenv("CALCLOGIC_CACHE_SIZE_PARSE", "512"))

# Curve sampling
SAMPLE_MIN = float(os.getenv("CALCLOGIC_SAMPLE_MIN", "-10"))
SAMPLE_MAX = float(os.getenv("CALCLOGIC_SAMPLE_MAX", "10"))
SAMPLE_STEP = float(os.getenv("CALCLOGIC_SAMPLE_STEP", "0.1"))
IMPLICIT_STEP = float(
    os.getenv("CALCLOGIC_IMPLICIT_STEP", "0.5")
)  # grid step for equations in both x and y
IMPLICIT_TOLERANCE = float(
    os.getenv("CALCLOGIC_IMPLICIT_TOLERANCE", "0.03")
)  # relative agreement between both sides
SAMPLER_WORKERS = int(os.getenv("CALCLOGIC_SAMPLER_WORKERS", "1"))

# Imaginary parts below this are treated as rounding noise
NUMERIC_TOLERANCE = float(os.getenv("CALCLOGIC_NUMERIC_TOLERANCE", "1e-12"))

# Logging (applied by api.configure_logging)
LOG_LEVEL = os.getenv("CALCLOGIC_LOG_LEVEL", "WARNING")
LOG_FILE = os.getenv("CALCLOGIC_LOG_FILE") or None


def _log10(arg):
    return sp.log(arg, 10)


ALLOWED_SYMPY_NAMES = {
    "pi": sp.pi,
    "e": sp.E,
    "E": sp.E,
    "sqrt": sp.sqrt,
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "asin": sp.asin,
    "acos": sp.acos,
    "atan": sp.atan,
    "log": _log10,  # keypad "log" is base 10
    "ln": sp.log,
    "exp": sp.exp,
    "abs": sp.Abs,
    "mod": sp.Mod,
}

TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication_application,
    convert_xor,
)

# Keypad glyphs the engine understands, mapped to parser syntax
KEYPAD_GLYPHS = {
    "−": "-",  # minus sign
    "×": "*",  # multiplication sign
    "÷": "/",  # division sign
    "π": "pi",
}

SQRT_UNICODE_REGEX = re.compile(r"√\s*\(")
SQRT_OPERAND_REGEX = re.compile(r"√\s*([0-9.]+|[^\W\d_]\w*)")
