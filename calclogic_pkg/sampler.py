"""Equation-to-series sampling for the graph view.

An equation ``lhs = rhs`` is turned into ordered (x, y) samples:

- ``y = f(x)`` / ``f(x) = y``: x swept over the sample range, one point per step
- ``x = f(y)`` / ``f(y) = x``: y swept, points are (f(y), y)
- anything else is treated as an implicit curve. For every x column, y is
  scanned from the top of the range down and the first y where both sides
  agree within a relative tolerance is kept. This is a coarse heuristic, not a
  root finder: it finds at most one point per column.

Sampling runs on a background thread. Each run owns its own evaluation scope
and cancellation token; starting a new run cancels the previous one, and a run
also stops as soon as the live display text no longer matches the text it was
started for. Cancelled runs never write to the graph.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .config import (
    IMPLICIT_STEP,
    IMPLICIT_TOLERANCE,
    SAMPLE_MAX,
    SAMPLE_MIN,
    SAMPLE_STEP,
    SAMPLER_WORKERS,
)
from .engine import Symbols
from .interfaces import GraphSink
from .logging_config import get_logger
from .parser import delocalize, is_incomplete
from .types import CalcSyntaxError, CurveSeries, Strings

logger = get_logger("sampler")


@dataclass(frozen=True)
class SamplerConfig:
    """Sampling range, step sizes and implicit-curve tolerance."""

    sample_min: float = SAMPLE_MIN
    sample_max: float = SAMPLE_MAX
    step: float = SAMPLE_STEP
    implicit_step: float = IMPLICIT_STEP
    tolerance: float = IMPLICIT_TOLERANCE


class CancellationToken:
    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def grid(start: float, stop: float, step: float) -> np.ndarray:
    """Inclusive grid from start to stop.

    Points are computed by index so float steps do not drop the end point:
    grid(-10, 10, 0.1) has exactly 201 points.
    """
    count = int(round((stop - start) / step)) + 1
    return start + np.arange(max(count, 0)) * step


def split_equation(text: str) -> tuple[str, str] | None:
    """Split text on its single '=' into stripped (left, right) sides.

    Returns None unless there is exactly one '=' with text on both sides.
    """
    if text.count("=") != 1:
        return None
    left, _, right = text.partition("=")
    left, right = left.strip(), right.strip()
    if not left or not right:
        return None
    return left, right


def sides_agree(left: float, right: float, tolerance: float) -> bool:
    """Return True if right lies within tolerance of left, relative to left.

    With both sides negative the bounds swap so the same band is used.
    """
    low = left * (1 - tolerance)
    high = left * (1 + tolerance)
    if left < 0 and right < 0:
        return low >= right and high <= right
    return low <= right and high >= right


class CurveSampler:
    """Builds curve series for equations and pushes them to a graph sink."""

    def __init__(
        self,
        strings: Strings | None = None,
        config: SamplerConfig | None = None,
        max_workers: int = SAMPLER_WORKERS,
    ):
        self.strings = strings or Strings()
        self.config = config or SamplerConfig()
        self._max_workers = max_workers
        self._executor: ThreadPoolExecutor | None = None
        self._lock = threading.Lock()
        self._token: CancellationToken | None = None
        self._future: Future | None = None

    def is_graphable(self, text: str) -> bool:
        """Return True if text is a complete equation with two sides."""
        if "=" not in text or is_incomplete(text, self.strings):
            return False
        return split_equation(text) is not None

    def title_for(self, text: str) -> str:
        return self.strings.graph_title + text

    def sample(
        self,
        text: str,
        token: CancellationToken | None = None,
        live_text: Optional[Callable[[], str]] = None,
    ) -> CurveSeries | None:
        """Sample the equation in text synchronously.

        Args:
            text: Display text of the equation, as typed
            token: Cancellation token checked at every sample point
            live_text: Returns the current display text; sampling stops once
                it differs from text

        Returns:
            The series, an empty series if text is not an equation, or None
            if the run was cancelled or went stale
        """
        series = CurveSeries(self.title_for(text))
        sides = split_equation(delocalize(text, self.strings))
        if sides is None:
            return series
        left, right = sides

        def should_stop() -> bool:
            if token is not None and token.cancelled:
                return True
            return live_text is not None and live_text() != text

        # A fresh scope per run: concurrent runs never share bindings
        scope = Symbols()
        if left == "y":
            done = self._sample_explicit(scope, right, "x", False, series, should_stop)
        elif left == "x":
            done = self._sample_explicit(scope, right, "y", True, series, should_stop)
        elif right == "y":
            done = self._sample_explicit(scope, left, "x", False, series, should_stop)
        elif right == "x":
            done = self._sample_explicit(scope, left, "y", True, series, should_stop)
        else:
            done = self._sample_implicit(scope, left, right, series, should_stop)
        return series if done else None

    def _sample_explicit(
        self,
        scope: Symbols,
        body: str,
        var: str,
        flip: bool,
        series: CurveSeries,
        should_stop: Callable[[], bool],
    ) -> bool:
        try:
            function = scope.compile(body, params=(var,))
        except CalcSyntaxError as e:
            logger.debug("Cannot sample %r: %s", body, e)
            return not should_stop()

        cfg = self.config
        for value in grid(cfg.sample_min, cfg.sample_max, cfg.step):
            if should_stop():
                return False
            try:
                result = function.eval(value)
            except CalcSyntaxError as e:
                logger.debug("Skipping %s=%s: %s", var, value, e)
                continue
            if flip:
                series.add(result, value)
            else:
                series.add(value, result)
        return True

    def _sample_implicit(
        self,
        scope: Symbols,
        left: str,
        right: str,
        series: CurveSeries,
        should_stop: Callable[[], bool],
    ) -> bool:
        try:
            lhs = scope.compile(left, params=("x", "y"))
            rhs = scope.compile(right, params=("x", "y"))
        except CalcSyntaxError as e:
            logger.debug("Cannot sample %r = %r: %s", left, right, e)
            return not should_stop()

        cfg = self.config
        columns = grid(cfg.sample_min, cfg.sample_max, cfg.implicit_step)
        rows = grid(cfg.sample_max, cfg.sample_min, -cfg.implicit_step)
        for x in columns:
            for y in rows:
                if should_stop():
                    return False
                try:
                    left_value = lhs.eval(x, y)
                    right_value = rhs.eval(x, y)
                except CalcSyntaxError as e:
                    logger.debug("Skipping x=%s, y=%s: %s", x, y, e)
                    continue
                if sides_agree(left_value, right_value, cfg.tolerance):
                    series.add(x, y)
                    break
        return True

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self._max_workers, thread_name_prefix="curve-sampler"
            )
        return self._executor

    def submit(
        self,
        text: str,
        sink: GraphSink,
        live_text: Optional[Callable[[], str]] = None,
    ) -> Future:
        """Start sampling text in the background, cancelling any earlier run.

        The future resolves to the series written to sink, or None if the run
        was superseded or went stale.
        """
        token = CancellationToken()
        with self._lock:
            if self._token is not None:
                self._token.cancel()
            self._token = token
            executor = self._get_executor()
        logger.debug("Sampling %r", text)
        future = executor.submit(self._run, text, sink, token, live_text)
        self._future = future
        return future

    def _run(
        self,
        text: str,
        sink: GraphSink,
        token: CancellationToken,
        live_text: Optional[Callable[[], str]],
    ) -> CurveSeries | None:
        try:
            series = self.sample(text, token=token, live_text=live_text)
            if series is None:
                logger.debug("Abandoned sampling of %r", text)
                return None
            with self._lock:
                if token.cancelled:
                    return None
                sink.set_series(series)
                sink.repaint()
            return series
        except Exception as e:
            logger.error("Sampling %r failed: %s", text, e, exc_info=True)
            raise

    def clear(self, sink: GraphSink, text: str = "") -> None:
        """Cancel any running sample and show an empty series."""
        with self._lock:
            if self._token is not None:
                self._token.cancel()
                self._token = None
            sink.set_series(CurveSeries(self.title_for(text)))
            sink.repaint()

    def wait(self, timeout: float | None = None) -> CurveSeries | None:
        """Block until the most recent run finishes and return its result."""
        future = self._future
        if future is None:
            return None
        return future.result(timeout=timeout)

    def cancel(self) -> None:
        with self._lock:
            if self._token is not None:
                self._token.cancel()
                self._token = None

    def shutdown(self, wait: bool = True) -> None:
        """Cancel the active run and stop the worker thread."""
        self.cancel()
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait)
