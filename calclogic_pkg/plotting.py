"""Graph sink that renders curve series with matplotlib."""

from __future__ import annotations

import threading

import matplotlib

matplotlib.use("Agg")  # Use non-GUI backend (no Tkinter required)
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from .config import SAMPLE_MAX, SAMPLE_MIN  # noqa: E402
from .logging_config import get_logger  # noqa: E402
from .types import CurveSeries  # noqa: E402

logger = get_logger("plotting")


def render_series(
    series: CurveSeries,
    file_path: str,
    x_min: float = SAMPLE_MIN,
    x_max: float = SAMPLE_MAX,
) -> str:
    """Draw series and save it as an image.

    Non-finite samples leave gaps in the line.

    Args:
        series: Points to draw
        file_path: Destination image path (format from the extension)
        x_min: Left edge of the visible range
        x_max: Right edge of the visible range

    Returns:
        file_path
    """
    xs = np.asarray(series.xs, dtype=float)
    ys = np.asarray(series.ys, dtype=float)

    fig, ax = plt.subplots(figsize=(6, 6))
    try:
        if len(series):
            ax.plot(xs, ys, linewidth=2, color="#2E86AB", marker=".", markersize=3)
        ax.set_xlim(x_min, x_max)
        ax.set_title(series.title, fontsize=12)
        ax.grid(True, alpha=0.3, linestyle="--")
        ax.axhline(y=0, color="k", linewidth=0.8, alpha=0.3)
        ax.axvline(x=0, color="k", linewidth=0.8, alpha=0.3)
        fig.tight_layout()
        fig.savefig(file_path, dpi=100)
    finally:
        plt.close(fig)
    return file_path


class MatplotlibGraph:
    """Holds the active series; repaint renders it when an output path is set."""

    def __init__(self, output_path: str | None = None):
        self.output_path = output_path
        self.repaint_count = 0
        self._series: CurveSeries | None = None
        self._lock = threading.Lock()

    def get_series(self) -> CurveSeries | None:
        with self._lock:
            return self._series

    def set_series(self, series: CurveSeries) -> None:
        with self._lock:
            self._series = series

    def repaint(self) -> None:
        with self._lock:
            series = self._series
            self.repaint_count += 1
        if series is None or not self.output_path:
            return
        render_series(series, self.output_path)
        logger.debug("Rendered %d points to %s", len(series), self.output_path)
