"""
Scatter Chart (Initial Render Pass)
===================================
Builds everything that is computed once per dataset and layout and draws the
static scene.

Why is this file needed?
------------------------
1. Single construction point: scales, global marginal curves, projected
   points and the Voronoi index are derived here, in this order, exactly once.
2. The InteractionController receives a ready ScatterChart and only deals
   with state transitions.
"""
from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from weatherscatter import config
from weatherscatter.model.density import DensityCurve, DensityEstimator, MarginalAxis, Orientation
from weatherscatter.model.palette import gradient_stops, month_color
from weatherscatter.model.scales import ScaleRegistry
from weatherscatter.model.spatial import SpatialIndex

if TYPE_CHECKING:
    import numpy.typing as npt
    from weatherscatter.model.layout import ChartDimensions
    from weatherscatter.model.records import Dataset
    from weatherscatter.view.surface import RenderSurface

logger = logging.getLogger(__name__)


class Group:
    """Ids of the drawing groups on the RenderSurface."""
    BOUNDS = "bounds"
    MIN_STRIP = "min-strip"
    MAX_STRIP = "max-strip"
    HOVER = "hover"
    TOOLTIP = "tooltip"
    LEGEND = "legend"
    LEGEND_TICKS = "legend-ticks"
    LEGEND_HIGHLIGHT = "legend-highlight"


class Tag:
    """Tags of removable drawings."""
    HOVER_DOT = "hover-dot"
    STRIP_MARKER = "density-bar"
    BRUSHED_CURVE = "brushed-curve"


class Node:
    """Ids of updatable text nodes."""
    TOOLTIP_DATE = "tooltip-date"
    TOOLTIP_MIN = "tooltip-min-temperature"
    TOOLTIP_MAX = "tooltip-max-temperature"
    LEGEND_HIGHLIGHT_TEXT = "legend-highlight-text"


@dataclass
class ScatterChart:
    """Read-only chart model shared by the render pass and the controller."""
    dataset: Dataset
    dims: ChartDimensions
    scales: ScaleRegistry
    projected: npt.NDArray[np.float64]
    min_axis: MarginalAxis
    max_axis: MarginalAxis
    min_estimator: DensityEstimator
    max_estimator: DensityEstimator
    global_min_curve: DensityCurve
    global_max_curve: DensityCurve
    index: SpatialIndex

    @classmethod
    def build(cls, dataset: Dataset, dims: ChartDimensions) -> ScatterChart:
        logger.info(f"Building chart for {len(dataset)} points at {dims.width:.0f}x{dims.height:.0f} px.")
        scales = ScaleRegistry.from_dataset(dataset, dims)

        projected = np.column_stack([
            scales.x.forward(dataset.min_temps),
            scales.y.forward(dataset.max_temps),
        ])

        min_axis = MarginalAxis(
            orientation=Orientation.HORIZONTAL,
            value_scale=scales.x,
            density_scale=scales.density_min,
            baseline=dims.margin_top,
            thickness=dims.margin_top,
        )
        max_axis = MarginalAxis(
            orientation=Orientation.VERTICAL,
            value_scale=scales.y,
            density_scale=scales.density_max,
            baseline=0.0,
            thickness=dims.margin_right,
        )

        min_estimator = DensityEstimator.for_scale(scales.x)
        max_estimator = DensityEstimator.for_scale(scales.y)

        index = SpatialIndex.build(projected, dims.bounded_width, dims.bounded_height)

        return cls(
            dataset=dataset,
            dims=dims,
            scales=scales,
            projected=projected,
            min_axis=min_axis,
            max_axis=max_axis,
            min_estimator=min_estimator,
            max_estimator=max_estimator,
            global_min_curve=min_estimator.estimate(dataset.min_temps),
            global_max_curve=max_estimator.estimate(dataset.max_temps),
            index=index,
        )

    @property
    def point_colors(self) -> list[str]:
        return [month_color(m) for m in self.dataset.months]

    def render(self, surface: RenderSurface) -> None:
        """Draw the static scene: axes, points, global curves, legend and hit regions."""
        dims = self.dims
        surface.update_transform(Group.BOUNDS, *dims.bounds_origin)
        surface.update_transform(Group.MIN_STRIP, *dims.min_strip_origin)
        surface.update_transform(Group.MAX_STRIP, *dims.max_strip_origin)
        surface.update_transform(Group.LEGEND, *dims.legend_origin)

        self._render_axes(surface)

        surface.draw_points(self.projected, self.point_colors, config.POINT_RADIUS)

        surface.draw_area_path(Group.MIN_STRIP, self.min_axis.area_path(self.global_min_curve),
                               config.GLOBAL_CURVE_FILL, config.GLOBAL_CURVE_OPACITY)
        surface.draw_area_path(Group.MAX_STRIP, self.max_axis.area_path(self.global_max_curve),
                               config.GLOBAL_CURVE_FILL, config.GLOBAL_CURVE_OPACITY)

        self._render_legend(surface)
        self._render_tooltip(surface)

        for i in range(len(self.dataset)):
            surface.draw_cell_boundary(i, self.index.cell_boundary(i))

        surface.update_opacity(Group.HOVER, 0.0)
        surface.update_opacity(Group.TOOLTIP, 0.0)
        surface.update_opacity(Group.LEGEND_HIGHLIGHT, 0.0)
        logger.debug("Initial render pass finished.")

    def _render_axes(self, surface: RenderSurface) -> None:
        dims = self.dims
        w, h = dims.bounded_width, dims.bounded_height
        surface.draw_line(Group.BOUNDS, (0.0, h), (w, h))
        surface.draw_line(Group.BOUNDS, (0.0, 0.0), (0.0, h))

        for value in self.scales.x.ticks(config.AXIS_TICK_COUNT):
            x = self.scales.x.forward(value)
            surface.draw_line(Group.BOUNDS, (x, h), (x, h + 6.0))
            surface.draw_text(Group.BOUNDS, f"{value:g}", x, h + 9.0, anchor=(0.5, 0.0))
        for value in self.scales.y.ticks(config.AXIS_TICK_COUNT):
            y = self.scales.y.forward(value)
            surface.draw_line(Group.BOUNDS, (-6.0, y), (0.0, y))
            surface.draw_text(Group.BOUNDS, f"{value:g}", -9.0, y, anchor=(1.0, 0.5))

        surface.draw_text(Group.BOUNDS, "Minimum Temperature (°F)", w / 2.0, h + dims.margin_bottom - 10.0,
                          anchor=(0.5, 1.0))
        surface.draw_text(Group.BOUNDS, "Maximum Temperature (°F)", -dims.margin_left + 10.0, h / 2.0,
                          anchor=(0.5, 0.0), angle=90.0)

    def _render_legend(self, surface: RenderSurface) -> None:
        dims = self.dims
        surface.draw_gradient_rect(Group.LEGEND, 0.0, 0.0, dims.legend_width, dims.legend_height,
                                   gradient_stops(config.LEGEND_GRADIENT_STOPS))

        year = self.dataset.first_date.year
        for month in config.LEGEND_TICK_MONTHS:
            x = self.scales.legend_ticks.forward(month)
            label = datetime.date(year, month, 1).strftime(config.LEGEND_TICK_FORMAT)
            surface.draw_text(Group.LEGEND_TICKS, label, x, -6.0, anchor=(0.5, 1.0))
            surface.draw_line(Group.LEGEND_TICKS, (x, 6.0), (x, 0.0))

        bar = dims.legend_highlight_width
        surface.draw_rect(Group.LEGEND_HIGHLIGHT, 0.0, 0.0, bar, dims.legend_height, "white", 1.0)
        surface.draw_text(Group.LEGEND_HIGHLIGHT, "", bar / 2.0, -6.0, anchor=(0.5, 1.0),
                          node_id=Node.LEGEND_HIGHLIGHT_TEXT)

    def _render_tooltip(self, surface: RenderSurface) -> None:
        rows = (
            (None, Node.TOOLTIP_DATE),
            ("Min Temperature:", Node.TOOLTIP_MIN),
            ("Max Temperature:", Node.TOOLTIP_MAX),
        )
        for row, (label, node_id) in enumerate(rows):
            y = 18.0 * row
            if label is None:
                surface.draw_text(Group.TOOLTIP, "", 0.0, y, node_id=node_id)
            else:
                surface.draw_text(Group.TOOLTIP, label, 0.0, y)
                surface.draw_text(Group.TOOLTIP, "", 120.0, y, node_id=node_id)
