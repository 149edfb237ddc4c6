"""SymPy-backed math engine.

The engine compiles keypad text into callable functions and evaluates it to
floats. ``Symbols`` is an evaluation scope: variables defined on one instance
are invisible to every other instance, so concurrent callers each create their
own scope.

    >>> Symbols().eval("2×(3+4)")
    14.0
    >>> Symbols().compile("x^2").eval(3)
    9.0
"""

from __future__ import annotations

import math
from functools import lru_cache
from tokenize import TokenError
from typing import Any, Iterable

import sympy as sp
from sympy import parse_expr

from .config import (
    ALLOWED_SYMPY_NAMES,
    CACHE_SIZE_PARSE,
    KEYPAD_GLYPHS,
    MAX_INPUT_LENGTH,
    NUMERIC_TOLERANCE,
    SQRT_OPERAND_REGEX,
    SQRT_UNICODE_REGEX,
    TRANSFORMATIONS,
)
from .logging_config import get_logger
from .types import CalcSyntaxError

logger = get_logger("engine")

X = sp.Symbol("x")
Y = sp.Symbol("y")

# Basic denylist to avoid dangerous tokens before SymPy parsing
FORBIDDEN_TOKENS = (
    "__",
    "import",
    "lambda",
    "eval",
    "exec",
    "open",
    "os.",
    "sys.",
    "subprocess",
    "builtins",
    "getattr",
    "setattr",
    "delattr",
    "compile",
    "globals",
    "locals",
)

_LOCAL_NAMES = dict(ALLOWED_SYMPY_NAMES, x=X, y=Y)


def normalize(text: str) -> str:
    """Convert keypad glyphs (−, ×, ÷, √, π) to parser syntax."""
    for glyph, replacement in KEYPAD_GLYPHS.items():
        text = text.replace(glyph, replacement)
    text = SQRT_UNICODE_REGEX.sub("sqrt(", text)
    return SQRT_OPERAND_REGEX.sub(r"sqrt(\1)", text)


@lru_cache(maxsize=CACHE_SIZE_PARSE)
def parse(text: str) -> sp.Expr:
    """Parse keypad text into a SymPy expression.

    Raises:
        CalcSyntaxError: If the text is empty, too long, contains forbidden
            tokens or is not a valid arithmetic expression
    """
    text = normalize(text).strip()
    if not text:
        raise CalcSyntaxError("Empty expression", "EMPTY_INPUT")
    if len(text) > MAX_INPUT_LENGTH:
        raise CalcSyntaxError(
            f"Expression too long (>{MAX_INPUT_LENGTH} characters)", "TOO_LONG"
        )
    lowered = text.lower()
    for tok in FORBIDDEN_TOKENS:
        if tok in lowered:
            logger.warning("Blocked input containing forbidden token %r", tok)
            raise CalcSyntaxError(
                f"Input contains forbidden token: {tok}", "FORBIDDEN_TOKEN"
            )

    try:
        expr = parse_expr(
            text,
            local_dict=dict(_LOCAL_NAMES),
            transformations=TRANSFORMATIONS,
            evaluate=True,
        )
    except (SyntaxError, TokenError) as e:
        raise CalcSyntaxError(f"Invalid syntax: {text}") from e
    except (TypeError, ValueError, AttributeError, ZeroDivisionError) as e:
        raise CalcSyntaxError(f"Cannot parse {text!r}: {e}") from e
    except Exception as e:
        logger.error("Unexpected parse error for %r: %s", text, e, exc_info=True)
        raise CalcSyntaxError(f"Cannot parse {text!r}") from e

    if not isinstance(expr, sp.Expr):
        raise CalcSyntaxError(f"Not an arithmetic expression: {text}", "NOT_NUMERIC")
    return expr


def to_float(expr: sp.Expr) -> float:
    """Evaluate a closed SymPy expression to a float.

    Complex infinity (e.g. 1/0), undefined results and values with a real
    imaginary part become NaN.

    Raises:
        CalcSyntaxError: If the expression still contains free names
    """
    if expr.free_symbols:
        names = ", ".join(sorted(str(s) for s in expr.free_symbols))
        raise CalcSyntaxError(f"Unknown name(s): {names}", "UNDEFINED_NAME")
    if expr.has(sp.zoo, sp.nan):
        return math.nan
    try:
        value = complex(sp.N(expr, 17))
    except OverflowError:
        return math.inf
    except (TypeError, ValueError) as e:
        raise CalcSyntaxError(f"Not a number: {expr}", "NOT_NUMERIC") from e
    return _real_part(value)


def _real_part(value: Any) -> float:
    if isinstance(value, complex):
        if abs(value.imag) > NUMERIC_TOLERANCE * max(1.0, abs(value.real)):
            return math.nan
        return float(value.real)
    return float(value)


class Function:
    """A compiled expression of zero or more named parameters."""

    def __init__(self, expr: sp.Expr, params: Iterable[str]):
        self.expr = expr
        self.params = tuple(params)
        self._symbols = [sp.Symbol(p) for p in self.params]
        self._numeric = None
        if self.params:
            try:
                self._numeric = sp.lambdify(self._symbols, expr, modules="math")
            except Exception as e:
                # Fall back to exact substitution for anything the math printer rejects
                logger.debug("lambdify failed for %s: %s", expr, e)

    @property
    def arity(self) -> int:
        return len(self.params)

    def eval(self, *args: float) -> float:
        """Apply the function to positional arguments, one per parameter.

        Raises:
            CalcSyntaxError: If the number of arguments does not match arity
        """
        if len(args) != self.arity:
            raise CalcSyntaxError(
                f"Expected {self.arity} argument(s), got {len(args)}",
                "ARITY_MISMATCH",
            )
        if not args:
            return to_float(self.expr)
        if self._numeric is None:
            return to_float(
                self.expr.subs({s: sp.Float(a) for s, a in zip(self._symbols, args)})
            )
        try:
            return _real_part(self._numeric(*[float(a) for a in args]))
        except (ZeroDivisionError, ValueError, OverflowError, TypeError):
            return math.nan

    def __call__(self, *args: float) -> float:
        return self.eval(*args)

    def __repr__(self) -> str:
        return f"Function(({', '.join(self.params)}) -> {self.expr})"


class Symbols:
    """Evaluation scope holding variable bindings."""

    def __init__(self, bindings: dict[str, float] | None = None):
        self._bindings: dict[str, float] = dict(bindings or {})

    def define(self, name: str, value: float) -> None:
        """Bind name to value for later eval/compile calls on this scope."""
        self._bindings[name] = float(value)

    def copy(self) -> "Symbols":
        return Symbols(self._bindings)

    def _bind(self, expr: sp.Expr, exclude: Iterable[str] = ()) -> sp.Expr:
        subs = {
            sp.Symbol(name): sp.Float(value)
            for name, value in self._bindings.items()
            if name not in exclude
        }
        return expr.subs(subs) if subs else expr

    def eval(self, text: str) -> float:
        """Evaluate text with the current bindings.

        Raises:
            CalcSyntaxError: On malformed text or unbound names
        """
        return to_float(self._bind(parse(text)))

    def compile(self, text: str, params: Iterable[str] | None = None) -> Function:
        """Compile text into a Function.

        Args:
            text: Expression text
            params: Parameter names. When omitted, the free variables x and y
                (in that order) that the text uses become the parameters.

        Raises:
            CalcSyntaxError: On malformed text or names that are neither
                bound nor parameters
        """
        if params is not None:
            params = tuple(params)
        expr = self._bind(parse(text), exclude=params or ())
        if params is None:
            params = tuple(str(v) for v in (X, Y) if v in expr.free_symbols)
        unknown = expr.free_symbols - {sp.Symbol(p) for p in params}
        if unknown:
            names = ", ".join(sorted(str(s) for s in unknown))
            raise CalcSyntaxError(f"Unknown name(s): {names}", "UNDEFINED_NAME")
        return Function(expr, params)
