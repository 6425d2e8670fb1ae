"""
Shared pytest fixtures: small datasets, a chart and a RenderSurface double
that records every draw instruction instead of painting it.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Any, Optional

import numpy as np
import pytest

from weatherscatter.controller.chart import ScatterChart
from weatherscatter.controller.interaction import InteractionController
from weatherscatter.model.layout import ChartDimensions
from weatherscatter.model.records import Dataset


class RecordingSurface:
    """RenderSurface test double keeping the resulting scene state."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...], dict[str, Any]]] = []
        self.opacity: dict[str, float] = {}
        self.opacity_duration: dict[str, int] = {}
        self.transforms: dict[str, tuple[float, float]] = {}
        self.texts: dict[str, str] = {}
        self.tagged: dict[str, list[tuple[str, tuple[Any, ...], dict[str, Any]]]] = defaultdict(list)
        self.cells: dict[int, np.ndarray] = {}
        self.points: Optional[np.ndarray] = None
        self.point_colors: list[str] = []
        self.point_opacity: Optional[np.ndarray] = None
        self.point_opacity_duration: int = 0

    def _record(self, name: str, *args: Any, **kwargs: Any) -> None:
        self.calls.append((name, args, kwargs))
        tag = kwargs.get("tag")
        if tag is not None:
            self.tagged[tag].append((name, args, kwargs))

    def draw_points(self, points, colors, radius) -> None:
        self._record("draw_points", points, colors, radius)
        self.points = np.asarray(points)
        self.point_colors = list(colors)
        self.point_opacity = np.ones(len(points))

    def draw_circle(self, group, x, y, radius, color, *, tag=None) -> None:
        self._record("draw_circle", group, x, y, radius, color, tag=tag)

    def draw_rect(self, group, x, y, width, height, color, opacity, *, tag=None) -> None:
        self._record("draw_rect", group, x, y, width, height, color, opacity, tag=tag)

    def draw_gradient_rect(self, group, x, y, width, height, stops) -> None:
        self._record("draw_gradient_rect", group, x, y, width, height, stops)

    def draw_line(self, group, start, end) -> None:
        self._record("draw_line", group, start, end)

    def draw_text(self, group, text, x, y, *, anchor=(0.0, 0.0), angle=0.0, node_id=None) -> None:
        self._record("draw_text", group, text, x, y, anchor=anchor, angle=angle, node_id=node_id)
        if node_id is not None:
            self.texts[node_id] = text

    def draw_area_path(self, group, points, fill, opacity, *, stroke=None, tag=None) -> None:
        self._record("draw_area_path", group, points, fill, opacity, stroke=stroke, tag=tag)

    def draw_cell_boundary(self, index, path) -> None:
        self._record("draw_cell_boundary", index, path)
        self.cells[index] = np.asarray(path)

    def update_text(self, node_id, content) -> None:
        self._record("update_text", node_id, content)
        self.texts[node_id] = content

    def update_opacity(self, group_id, value, duration_ms=0) -> None:
        self._record("update_opacity", group_id, value, duration_ms)
        self.opacity[group_id] = value
        self.opacity_duration[group_id] = duration_ms

    def update_transform(self, group_id, x, y) -> None:
        self._record("update_transform", group_id, x, y)
        self.transforms[group_id] = (x, y)

    def update_point_opacity(self, opacities, duration_ms=0) -> None:
        self._record("update_point_opacity", opacities, duration_ms)
        self.point_opacity = np.asarray(opacities, dtype=float)
        self.point_opacity_duration = duration_ms

    def remove_tagged(self, tag) -> None:
        self._record("remove_tagged", tag)
        self.tagged.pop(tag, None)

    def count(self, tag: str) -> int:
        return len(self.tagged.get(tag, []))


@pytest.fixture
def two_point_records() -> list[dict[str, Any]]:
    return [
        {"date": "2010-01-01", "temperatureMin": 20, "temperatureMax": 35},
        {"date": "2010-07-01", "temperatureMin": 60, "temperatureMax": 90},
    ]


@pytest.fixture
def two_point_dataset(two_point_records) -> Dataset:
    return Dataset.from_records(two_point_records)


@pytest.fixture
def year_dataset() -> Dataset:
    """One record every third day of 2018 with a seasonal temperature cycle."""
    rng = np.random.default_rng(7)
    days = np.arange(np.datetime64("2018-01-01"), np.datetime64("2019-01-01"), 3)
    phase = np.linspace(0.0, 2.0 * np.pi, len(days))
    base = 50.0 - 25.0 * np.cos(phase)
    records = [
        {
            "date": str(day),
            "temperatureMin": float(b - 8.0 + rng.normal(0.0, 4.0)),
            "temperatureMax": float(b + 10.0 + rng.normal(0.0, 4.0)),
        }
        for day, b in zip(days, base)
    ]
    return Dataset.from_records(records)


@pytest.fixture
def dims() -> ChartDimensions:
    return ChartDimensions(width=600.0, height=600.0)


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def two_point_chart(two_point_dataset, dims) -> ScatterChart:
    return ScatterChart.build(two_point_dataset, dims)


@pytest.fixture
def year_chart(year_dataset, dims) -> ScatterChart:
    return ScatterChart.build(year_dataset, dims)


@pytest.fixture
def controller(two_point_chart, surface) -> InteractionController:
    two_point_chart.render(surface)
    return InteractionController(two_point_chart, surface)


@pytest.fixture
def year_controller(year_chart, surface) -> InteractionController:
    year_chart.render(surface)
    return InteractionController(year_chart, surface)
