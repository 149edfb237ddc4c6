"""Calculator logic: evaluation, display state, delete mode and history.

The logic sits between the display, the input history and an optional graph.
Text is evaluated with the math engine and formatted to fit the display; a
computed result stays on screen until the next edit, and errors collapse into
a single error token that blocks further edits until cleared.
"""

from __future__ import annotations

from .config import DEFAULT_LINE_LENGTH
from .engine import Symbols
from .formatter import format_result, localize_result
from .history import MARKER_EVALUATE_ON_RESUME
from .interfaces import Display, GraphSink, History, Listener
from .logging_config import get_logger
from .parser import (
    delocalize,
    has_variable,
    is_operator,
    strip_trailing_operators,
)
from .sampler import CurveSampler
from .types import CalcSyntaxError, DeleteMode, FormatError, Scroll, Strings

logger = get_logger("logic")


class Logic:
    def __init__(
        self,
        history: History,
        display: Display,
        strings: Strings | None = None,
        line_length: int = DEFAULT_LINE_LENGTH,
        sampler: CurveSampler | None = None,
    ):
        self.strings = strings or Strings()
        self._history = history
        self._display = display
        self._line_length = line_length
        self._sampler = sampler or CurveSampler(self.strings)
        self._graph: GraphSink | None = None
        self._listener: Listener | None = None
        self._symbols = Symbols()
        self._result = ""
        self._is_error = False
        self._delete_mode = DeleteMode.BACKSPACE

    @property
    def result(self) -> str:
        """Last computed result (or the error token); empty after an edit."""
        return self._result

    @property
    def is_error(self) -> bool:
        return self._is_error

    @property
    def sampler(self) -> CurveSampler:
        return self._sampler

    def set_graph(self, graph: GraphSink | None) -> None:
        self._graph = graph

    def set_listener(self, listener: Listener | None) -> None:
        self._listener = listener

    def set_delete_mode(self, mode: DeleteMode) -> None:
        if self._delete_mode != mode:
            self._delete_mode = mode
            if self._listener is not None:
                self._listener.on_delete_mode_change()

    def get_delete_mode(self) -> DeleteMode:
        return self._delete_mode

    def set_line_length(self, n_digits: int) -> None:
        self._line_length = n_digits

    def get_line_length(self) -> int:
        return self._line_length

    def eat_horizontal_move(self, to_left: bool) -> bool:
        """Return True if the cursor is already at the end it would move toward."""
        cursor_pos = self._display.get_selection_start()
        return cursor_pos == 0 if to_left else cursor_pos >= len(self.get_text())

    def get_text(self) -> str:
        return self._display.get_text()

    def _set_text(self, text: str) -> None:
        self.clear(False)
        self._display.insert(text)

    def insert(self, delta: str) -> None:
        self._display.insert(delta)
        self.set_delete_mode(DeleteMode.BACKSPACE)
        self.update_graph()

    def on_text_changed(self) -> None:
        self.set_delete_mode(DeleteMode.BACKSPACE)

    def resume_with_history(self) -> None:
        self._clear_with_history(False)

    def _clear_with_history(self, scroll: bool) -> None:
        text = self._history.get_text()
        if text == MARKER_EVALUATE_ON_RESUME:
            if self._history.move_to_previous():
                text = self._history.get_text()
            else:
                text = ""
            self.evaluate_and_show_result(text, Scroll.NONE)
        else:
            self._result = ""
            self._display.set_text(text, Scroll.UP if scroll else Scroll.NONE)
            self._is_error = False

    def clear(self, scroll: bool) -> None:
        self._history.enter("")
        self._display.set_text("", Scroll.UP if scroll else Scroll.NONE)
        self.cleared()

    def cleared(self) -> None:
        self._result = ""
        self._is_error = False
        self.update_history()
        self.set_delete_mode(DeleteMode.BACKSPACE)

    def accept_insert(self, delta: str) -> bool:
        """Return True if delta may be inserted in place.

        A computed result is replaced rather than extended, unless delta is an
        operator or the cursor is not at the end. Nothing is accepted while an
        error is shown.
        """
        text = self.get_text()
        return not self._is_error and (
            self._result != text
            or is_operator(delta)
            or self._display.get_selection_start() != len(text)
        )

    def on_delete(self) -> None:
        if self.get_text() == self._result or self._is_error:
            self.clear(False)
        else:
            self._display.dispatch_delete_key()
            self._result = ""
        self.update_graph()

    def on_clear(self) -> None:
        self.clear(self._delete_mode == DeleteMode.CLEAR)

    def on_enter(self) -> None:
        if self._delete_mode == DeleteMode.CLEAR:
            # Enter on a shown result goes back to the edited line
            self._clear_with_history(False)
        else:
            self.evaluate_and_show_result(self.get_text(), Scroll.UP)

    def evaluate_and_show_result(self, text: str, scroll: Scroll) -> None:
        try:
            result = self.evaluate(text)
        except (CalcSyntaxError, FormatError) as e:
            logger.debug("Evaluation of %r failed: %s", text, e)
            self._is_error = True
            self._result = self.strings.error
            self._display.set_text(self._result, scroll)
            self.set_delete_mode(DeleteMode.CLEAR)
            return
        if text != result:
            self._history.enter(text)
            self._result = result
            self._display.set_text(self._result, scroll)
            self.set_delete_mode(DeleteMode.CLEAR)
            self.update_graph()

    def on_up(self) -> None:
        text = self.get_text()
        if text != self._result:
            self._history.update(text)
        if self._history.move_to_previous():
            self._display.set_text(self._history.get_text(), Scroll.DOWN)

    def on_down(self) -> None:
        text = self.get_text()
        if text != self._result:
            self._history.update(text)
        if self._history.move_to_next():
            self._display.set_text(self._history.get_text(), Scroll.UP)

    def update_history(self) -> None:
        text = self.get_text()
        # Empty text and the error token never need re-evaluation
        if text and text != self.strings.error and text == self._result:
            self._history.update(MARKER_EVALUATE_ON_RESUME)
        else:
            self._history.update(text)

    def evaluate(self, text: str) -> str:
        """Evaluate text and format the value for the display.

        Blank text gives "". An equation whose right side still uses x or y is
        a curve: it is handed to the graph and returned without trailing operators.

        Raises:
            CalcSyntaxError: If the text cannot be evaluated
            FormatError: If the value is not a number
        """
        if not text.strip():
            return ""

        stripped = strip_trailing_operators(text)
        expression = delocalize(stripped, self.strings)

        if has_variable(expression):
            if "=" not in expression:
                raise CalcSyntaxError(
                    "Expression uses a variable but assigns nothing", "MISSING_ASSIGNMENT"
                )
            left, _, right = expression.partition("=")
            if has_variable(right):
                # A stripped curve is drawn once it is back on the display
                if stripped == text:
                    self._request_curve(text)
                return stripped
            function = self._symbols.compile(left.lower())
            value = function.eval(self._symbols.eval(right))
        else:
            value = self._symbols.eval(expression)

        result = format_result(value, self._line_length)
        return localize_result(result)

    def _request_curve(self, text: str) -> None:
        if self._graph is not None and self._sampler.is_graphable(text):
            self._sampler.submit(text, self._graph, self.get_text)

    def update_graph(self, graph: GraphSink | None = None) -> None:
        """Resample the graph for the current display text."""
        graph = graph or self._graph
        if graph is None:
            return
        text = self.get_text()
        if not text:
            self._sampler.clear(graph, text)
            return
        if not self._sampler.is_graphable(text):
            return
        self._sampler.submit(text, graph, self.get_text)

    @staticmethod
    def is_operator(text: str) -> bool:
        return is_operator(text)
