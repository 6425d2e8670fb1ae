"""
Interaction Controller
======================
Owns the hover and brush state machines and turns pointer events into draw
instructions.

Why is this file needed?
------------------------
1. State: The only mutable state of a running chart (which point is hovered,
   which date window is brushed) lives here, as plain dataclasses.
2. Atomicity: Every handler classifies, recomputes and redraws synchronously,
   so the latest pointer event always fully supersedes the previous one.
3. Decoupling: The view only forwards events; it contains no interaction logic.

States:
    Hover: Idle (hover is None) <-> Hovering(point_index)
    Brush: Unbrushed (brush_state is None) <-> Brushing(range)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

import numpy as np

from weatherscatter import config
from weatherscatter.controller.brush import BrushRange, LegendBrush, Selection
from weatherscatter.controller.chart import Group, Node, Tag
from weatherscatter.model.palette import month_color

if TYPE_CHECKING:
    from weatherscatter.controller.chart import ScatterChart
    from weatherscatter.model.density import DensityCurve
    from weatherscatter.view.surface import RenderSurface

logger = logging.getLogger(__name__)


@dataclass
class HoverState:
    point_index: int
    cursor: Optional[tuple[float, float]] = None


@dataclass
class BrushState:
    position: float
    range: BrushRange
    selection: Selection
    min_curve: DensityCurve
    max_curve: DensityCurve


def format_temperature(value: float) -> str:
    """Temperature rounded to one decimal, e.g. 60 -> '60.0'."""
    return f"{round(float(value), 1):.1f}"


class InteractionController:
    """Event handlers for the hover regions and the legend strip."""

    def __init__(self, chart: ScatterChart, surface: RenderSurface) -> None:
        self.chart = chart
        self.surface = surface
        self.brush = LegendBrush(
            dataset=chart.dataset,
            legend_width=chart.dims.legend_width,
            highlight_width=chart.dims.legend_highlight_width,
        )
        self._brushed_min_axis = chart.min_axis.with_density_scale(chart.scales.brushed_density_min)
        self._brushed_max_axis = chart.max_axis.with_density_scale(chart.scales.brushed_density_max)

        self.hover: Optional[HoverState] = None
        self.brush_state: Optional[BrushState] = None

    # ------------------------------------------------------------------
    # Hover
    # ------------------------------------------------------------------

    @property
    def hovered_index(self) -> Optional[int]:
        return self.hover.point_index if self.hover else None

    def on_cell_enter(self, index: int, cursor: Optional[tuple[float, float]] = None) -> None:
        """Pointer entered the Voronoi cell of point `index`."""
        if self.hover is not None:
            if self.hover.point_index == index:
                self.hover.cursor = cursor
                return
            # Enter arrived before the previous leave
            self._clear_hover()

        try:
            self._show_hover(index)
        except Exception:
            logger.exception(f"Failed to highlight point {index}")
            self._clear_hover()
            raise

        self.hover = HoverState(point_index=index, cursor=cursor)

    def on_cell_leave(self, index: int) -> None:
        """Pointer left the Voronoi cell of point `index`."""
        if self.hover is None or self.hover.point_index != index:
            return
        self._clear_hover()

    def _show_hover(self, index: int) -> None:
        chart = self.chart
        point = chart.dataset[index]
        x, y = chart.projected[index]

        self.surface.update_opacity(Group.HOVER, 1.0)
        self.surface.draw_circle(Group.HOVER, x, y, config.HOVER_DOT_RADIUS, month_color(point.month),
                                 tag=Tag.HOVER_DOT)

        self.surface.update_text(Node.TOOLTIP_DATE, point.date.strftime(config.TOOLTIP_DATE_FORMAT))
        self.surface.update_text(Node.TOOLTIP_MIN, format_temperature(point.min_temp))
        self.surface.update_text(Node.TOOLTIP_MAX, format_temperature(point.max_temp))
        self.surface.update_transform(Group.TOOLTIP, x + config.TOOLTIP_OFFSET_X, y + config.TOOLTIP_OFFSET_Y)
        self.surface.update_opacity(Group.TOOLTIP, 1.0)

        for group, axis, value in (
            (Group.MIN_STRIP, chart.min_axis, point.min_temp),
            (Group.MAX_STRIP, chart.max_axis, point.max_temp),
        ):
            rx, ry, rw, rh = axis.marker_rect(value)
            self.surface.draw_rect(group, rx, ry, rw, rh, config.STRIP_MARKER_COLOR,
                                   config.STRIP_MARKER_OPACITY, tag=Tag.STRIP_MARKER)

    def _clear_hover(self) -> None:
        self.surface.update_opacity(Group.HOVER, 0.0)
        self.surface.update_opacity(Group.TOOLTIP, 0.0)
        self.surface.remove_tagged(Tag.HOVER_DOT)
        self.surface.remove_tagged(Tag.STRIP_MARKER)
        self.hover = None

    # ------------------------------------------------------------------
    # Brush
    # ------------------------------------------------------------------

    @property
    def is_brushing(self) -> bool:
        return self.brush_state is not None

    def on_legend_move(self, position: float) -> None:
        """Pointer moved over the legend strip; `position` is in legend-local pixels."""
        chart = self.chart
        clamped = self.brush.clamp(position)
        brush_range = self.brush.range_at(clamped)
        selection = self.brush.classify(brush_range)
        mask = selection.mask

        min_curve = chart.min_estimator.estimate(chart.dataset.min_temps[mask])
        max_curve = chart.max_estimator.estimate(chart.dataset.max_temps[mask])

        surface = self.surface
        surface.update_opacity(Group.LEGEND_TICKS, 0.0)
        surface.update_opacity(Group.LEGEND_HIGHLIGHT, 1.0)
        surface.remove_tagged(Tag.BRUSHED_CURVE)

        surface.update_point_opacity(np.where(mask, 1.0, config.DIMMED_OPACITY))

        color = month_color(brush_range.month)
        surface.draw_area_path(Group.MIN_STRIP, self._brushed_min_axis.area_path(min_curve), color,
                               config.BRUSHED_CURVE_OPACITY, stroke=config.BRUSHED_CURVE_STROKE,
                               tag=Tag.BRUSHED_CURVE)
        surface.draw_area_path(Group.MAX_STRIP, self._brushed_max_axis.area_path(max_curve), color,
                               config.BRUSHED_CURVE_OPACITY, stroke=config.BRUSHED_CURVE_STROKE,
                               tag=Tag.BRUSHED_CURVE)

        surface.update_transform(Group.LEGEND_HIGHLIGHT, clamped - self.brush.highlight_width / 2.0, 0.0)
        surface.update_text(Node.LEGEND_HIGHLIGHT_TEXT, brush_range.label)

        self.brush_state = BrushState(
            position=clamped,
            range=brush_range,
            selection=selection,
            min_curve=min_curve,
            max_curve=max_curve,
        )
        logger.debug(f"Brush {brush_range.label}: {int(mask.sum())}/{len(mask)} points selected.")

    def on_legend_leave(self) -> None:
        """Pointer left the legend strip; restore the unbrushed chart."""
        if self.brush_state is None:
            return

        surface = self.surface
        surface.update_point_opacity(np.ones(len(self.chart.dataset)), duration_ms=config.RESTORE_DURATION_MS)
        surface.update_opacity(Group.LEGEND_TICKS, 1.0)
        surface.update_opacity(Group.LEGEND_HIGHLIGHT, 0.0)
        surface.remove_tagged(Tag.BRUSHED_CURVE)
        self.brush_state = None
