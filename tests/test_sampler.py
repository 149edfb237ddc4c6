"""Tests for equation-to-series sampling."""

import math
import threading

import pytest

from calclogic_pkg.sampler import (
    CancellationToken,
    CurveSampler,
    SamplerConfig,
    grid,
    sides_agree,
    split_equation,
)
from calclogic_pkg.types import CurveSeries, Strings


class RecordingGraph:
    """Graph sink that remembers every series it was given."""

    def __init__(self):
        self.series = None
        self.history = []
        self.repaints = 0
        self._lock = threading.Lock()

    def set_series(self, series):
        with self._lock:
            self.series = series
            self.history.append(series)

    def repaint(self):
        with self._lock:
            self.repaints += 1


class TestHelpers:
    """Test grid, splitting and tolerance helpers."""

    def test_grid_includes_end_point(self):
        points = grid(-10, 10, 0.1)
        assert len(points) == 201
        assert points[0] == -10
        assert points[-1] == pytest.approx(10)

    def test_descending_grid(self):
        points = grid(10, -10, -0.5)
        assert len(points) == 41
        assert points[0] == 10
        assert points[-1] == pytest.approx(-10)

    def test_split_equation(self):
        assert split_equation("y = 2x") == ("y", "2x")
        assert split_equation("y=") is None
        assert split_equation("=5") is None
        assert split_equation("y=x=1") is None
        assert split_equation("2+2") is None

    def test_sides_agree(self):
        assert sides_agree(10, 10.2, 0.03)
        assert not sides_agree(10, 11, 0.03)
        assert sides_agree(-10, -10.2, 0.03)
        assert not sides_agree(-10, -11, 0.03)
        assert not sides_agree(-10, 10, 0.03)
        assert sides_agree(0, 0, 0.03)
        assert not sides_agree(math.nan, 1.0, 0.03)


class TestIsGraphable:
    def test_graphable(self):
        sampler = CurveSampler()
        assert sampler.is_graphable("y=2x")
        assert sampler.is_graphable("x^2=4")

    def test_not_graphable(self):
        sampler = CurveSampler()
        assert not sampler.is_graphable("2+2")
        assert not sampler.is_graphable("y=2+")
        assert not sampler.is_graphable("y=sin(")
        assert not sampler.is_graphable("y=")
        assert not sampler.is_graphable("y=x=1")


class TestExplicitSampling:
    """Test equations solved for one variable."""

    def test_y_of_x(self):
        series = CurveSampler().sample("y=2*x")
        assert len(series) == 201
        for x, y in series.points:
            assert y == pytest.approx(2 * x)
        assert series.points[0] == (-10.0, -20.0)

    def test_x_of_y(self):
        series = CurveSampler().sample("x=y^2")
        assert len(series) == 201
        for x, y in series.points:
            assert x == pytest.approx(y * y)

    def test_bare_variable_on_right(self):
        series = CurveSampler().sample("2x=y")
        assert len(series) == 201
        for x, y in series.points:
            assert y == pytest.approx(2 * x)

    def test_keypad_glyphs(self):
        series = CurveSampler().sample("y=x×x−1")
        assert series.points[0] == (-10.0, 99.0)

    def test_localized_function(self):
        series = CurveSampler(Strings(sin="sen")).sample("y=sen(x)")
        assert len(series) == 201
        assert series.points[100][1] == pytest.approx(0.0, abs=1e-9)

    def test_title(self):
        series = CurveSampler(Strings(graph_title="Plot: ")).sample("y=x")
        assert series.title == "Plot: y=x"

    def test_invalid_body_gives_empty_series(self):
        series = CurveSampler().sample("y=2+*")
        assert isinstance(series, CurveSeries)
        assert len(series) == 0

    def test_configurable_range(self):
        config = SamplerConfig(sample_min=0, sample_max=1, step=0.25)
        series = CurveSampler(config=config).sample("y=x")
        assert series.xs == pytest.approx([0, 0.25, 0.5, 0.75, 1.0])


class TestImplicitSampling:
    """The implicit sampler is a grid heuristic, not a root finder."""

    def test_circle(self):
        series = CurveSampler().sample("x^2+y^2=25")
        assert (0.0, 5.0) in series.points
        assert (3.0, 4.0) in series.points
        # first match from the top wins, so only the upper half is found
        assert all(y >= 0 for _, y in series.points)

    def test_one_point_per_column(self):
        series = CurveSampler().sample("x^2+y^2=25")
        assert len(series.xs) == len(set(series.xs))

    def test_columns_without_solution_are_empty(self):
        series = CurveSampler().sample("x^2+y^2=25")
        assert -10.0 not in series.xs
        assert 10.0 not in series.xs


class TestCancellation:
    """Test stale and superseded runs."""

    def test_cancelled_token(self):
        token = CancellationToken()
        token.cancel()
        assert CurveSampler().sample("y=x", token=token) is None

    def test_stale_display_text(self):
        assert CurveSampler().sample("y=x", live_text=lambda: "y=2x") is None

    def test_matching_display_text(self):
        series = CurveSampler().sample("y=x", live_text=lambda: "y=x")
        assert len(series) == 201

    def test_submit_writes_to_sink(self):
        sampler = CurveSampler()
        graph = RecordingGraph()
        try:
            sampler.submit("y=x+1", graph)
            series = sampler.wait(timeout=30)
        finally:
            sampler.shutdown()
        assert series is graph.series
        assert graph.repaints == 1
        assert len(graph.series) == 201

    def test_new_run_supersedes_old(self):
        sampler = CurveSampler()
        graph = RecordingGraph()
        try:
            first = sampler.submit("y=x", graph)
            sampler.submit("y=3x", graph)
            sampler.wait(timeout=30)
            first.result(timeout=30)
        finally:
            sampler.shutdown()
        # the earlier run may or may not have finished first; the last write wins
        assert graph.series.title.endswith("y=3x")
        assert graph.series.points[0] == (-10.0, -30.0)

    def test_clear_sets_empty_series(self):
        sampler = CurveSampler()
        graph = RecordingGraph()
        sampler.clear(graph)
        assert len(graph.series) == 0
        assert graph.repaints == 1
