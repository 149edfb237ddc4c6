"""Type definitions, result dataclasses and errors shared across the package."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Scroll(str, Enum):
    """Presentation hint passed to the display with new text."""

    NONE = "none"
    UP = "up"
    DOWN = "down"


class DeleteMode(str, Enum):
    """Whether the delete key removes one character or clears the display."""

    BACKSPACE = "backspace"
    CLEAR = "clear"


@dataclass(frozen=True)
class Strings:
    """Localized tokens the logic layer reads from the host application.

    Defaults are the English keypad labels. A Spanish build would pass
    ``Strings(sin="sen", error="Error")`` and so on.
    """

    error: str = "Error"
    sin: str = "sin"
    cos: str = "cos"
    tan: str = "tan"
    lg: str = "log"
    ln: str = "ln"
    mod: str = "mod"
    x: str = "x"
    y: str = "y"
    plus: str = "+"
    minus: str = "−"
    mul: str = "×"
    div: str = "÷"
    dot: str = "."
    coma: str = ","
    power: str = "^"
    sqrt: str = "√"
    integral: str = "∫"
    graph_title: str = "Graph: "

    def function_names(self) -> dict[str, str]:
        """Map localized function names to the canonical names the engine expects."""
        return {
            self.sin: "sin",
            self.cos: "cos",
            self.tan: "tan",
            self.lg: "log",
            self.ln: "ln",
            self.mod: "mod",
        }


@dataclass
class CurveSeries:
    """Ordered (x, y) samples of a plotted equation."""

    title: str
    points: list[tuple[float, float]] = field(default_factory=list)

    def add(self, x: float, y: float) -> None:
        self.points.append((float(x), float(y)))

    @property
    def xs(self) -> list[float]:
        return [p[0] for p in self.points]

    @property
    def ys(self) -> list[float]:
        return [p[1] for p in self.points]

    def __len__(self) -> int:
        return len(self.points)


@dataclass
class EvalResult:
    """Result of evaluating a calculator expression."""

    ok: bool
    result: str | None = None
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.result is not None:
            result_dict["result"] = self.result
        if self.error is not None:
            result_dict["error"] = self.error
        if self.error_code is not None:
            result_dict["error_code"] = self.error_code
        return result_dict

    def __repr__(self) -> str:
        if not self.ok:
            return f"EvalResult(ok=False, error={self.error!r})"
        return f"EvalResult(ok=True, result={self.result!r})"


class CalcSyntaxError(Exception):
    """Raised by the math engine when an expression cannot be evaluated."""

    def __init__(self, message: str, code: str = "SYNTAX_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class FormatError(Exception):
    """Raised when a computed value is not a number."""

    def __init__(self, message: str = "Result is not a number", code: str = "NOT_A_NUMBER"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message
