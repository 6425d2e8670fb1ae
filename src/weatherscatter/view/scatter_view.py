"""PyQtGraph implementation of the RenderSurface, with hover regions and the legend strip."""
from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence, TYPE_CHECKING

import numpy as np
import pyqtgraph as pg
from PySide6.QtCore import Qt, QPointF, QRectF, Signal, QVariantAnimation, QPropertyAnimation
from PySide6.QtGui import QBrush, QColor, QLinearGradient, QPainterPath, QPen
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QGraphicsPathItem, QGraphicsRectItem, QGraphicsEllipseItem, QGraphicsLineItem,
    QGraphicsItem
)

from weatherscatter.controller.chart import Group

if TYPE_CHECKING:
    import numpy.typing as npt
    from weatherscatter.model.layout import ChartDimensions


logger = logging.getLogger(__name__)

# (parent, z-value) of every drawing group; None = scene root
GROUPS: dict[str, tuple[Optional[str], float]] = {
    Group.BOUNDS: (None, 0.0),
    Group.MIN_STRIP: (None, 0.0),
    Group.MAX_STRIP: (None, 0.0),
    Group.HOVER: (Group.BOUNDS, 3.0),
    Group.LEGEND: (Group.BOUNDS, 4.0),
    Group.LEGEND_TICKS: (Group.LEGEND, 1.0),
    Group.LEGEND_HIGHLIGHT: (Group.LEGEND, 2.0),
    Group.TOOLTIP: (Group.BOUNDS, 5.0),
}

POINTS_Z = 1.0
CELLS_Z = 2.0
LEGEND_STRIP_Z = 10.0


def polygon_path(points: npt.NDArray[np.float64], close: bool = True) -> QPainterPath:
    pts = np.asarray(points, dtype=np.float64)
    path = pg.arrayToQPath(pts[:, 0], pts[:, 1])
    if close:
        path.closeSubpath()
    return path


class CellItem(QGraphicsPathItem):
    """Invisible Voronoi cell receiving pyqtgraph hover events."""

    def __init__(
        self,
        index: int,
        path: QPainterPath,
        on_enter: Callable[[int, tuple[float, float]], None],
        on_leave: Callable[[int], None],
        is_blocked: Callable[[QPointF], bool],
    ) -> None:
        super().__init__(path)
        self.index = index
        self._on_enter = on_enter
        self._on_leave = on_leave
        self._is_blocked = is_blocked
        self._inside = False
        self.setPen(QPen(Qt.NoPen))
        self.setBrush(QBrush(Qt.NoBrush))

    def hoverEvent(self, ev) -> None:
        # The legend strip sits above the cells and swallows the pointer
        inside = not ev.isExit() and not self._is_blocked(ev.scenePos())
        if inside and not self._inside:
            pos = ev.pos()
            self._on_enter(self.index, (pos.x(), pos.y()))
        elif not inside and self._inside:
            self._on_leave(self.index)
        self._inside = inside


class LegendStripItem(QGraphicsRectItem):
    """Transparent rectangle over the legend gradient tracking the pointer."""

    def __init__(self, width: float, height: float, on_move: Callable[[float], None],
                 on_leave: Callable[[], None]) -> None:
        super().__init__(0.0, 0.0, width, height)
        self._on_move = on_move
        self._on_leave = on_leave
        self.setPen(QPen(Qt.NoPen))
        self.setBrush(QBrush(Qt.NoBrush))

    def hoverEvent(self, ev) -> None:
        if ev.isExit():
            self._on_leave()
        else:
            self._on_move(float(ev.pos().x()))


class ScatterView(QWidget):
    """
    Chart canvas. Implements the RenderSurface protocol in pixel coordinates
    (origin top-left, y down) and re-emits pointer events as Qt signals.
    """
    # (point index, (x, y) in cell coordinates)
    cell_entered = Signal(int, object)
    cell_left = Signal(int)
    # x position in legend-local pixels
    legend_moved = Signal(float)
    legend_left = Signal()

    def __init__(self, dims: ChartDimensions, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.dims = dims

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.view = pg.GraphicsView(background="w")
        self.view.enableMouse(False)
        self.view.setRange(QRectF(0.0, 0.0, dims.width, dims.height), padding=0)
        self.view.setMinimumSize(int(dims.width), int(dims.height))
        layout.addWidget(self.view)

        self._groups: dict[str, pg.ItemGroup] = {}
        for group_id, (parent_id, z) in GROUPS.items():
            item = pg.ItemGroup()
            item.setZValue(z)
            if parent_id is None:
                self.view.addItem(item)
            else:
                item.setParentItem(self._groups[parent_id])
            self._groups[group_id] = item

        self._tagged: dict[str, list[QGraphicsItem]] = {}
        self._nodes: dict[str, pg.TextItem] = {}
        self._cells: dict[int, CellItem] = {}
        self._animations: dict[str, QPropertyAnimation] = {}

        self._scatter: pg.ScatterPlotItem | None = None
        self._point_colors: list[QColor] = []
        self._point_opacity = np.ones(0)
        self._fade: QVariantAnimation | None = None

        legend = self._groups[Group.LEGEND]
        self._legend_strip = LegendStripItem(
            dims.legend_width, dims.legend_height,
            on_move=self.legend_moved.emit,
            on_leave=self.legend_left.emit,
        )
        self._legend_strip.setParentItem(legend)
        self._legend_strip.setZValue(LEGEND_STRIP_Z)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _add(self, group: str, item: QGraphicsItem, tag: Optional[str] = None) -> QGraphicsItem:
        item.setParentItem(self._groups[group])
        if tag is not None:
            self._tagged.setdefault(tag, []).append(item)
        return item

    def _is_over_legend(self, scene_pos: QPointF) -> bool:
        local = self._legend_strip.mapFromScene(scene_pos)
        return self._legend_strip.rect().contains(local)

    def _apply_point_opacity(self, opacities: npt.NDArray[np.float64]) -> None:
        if self._scatter is None:
            return
        brushes = []
        for color, alpha in zip(self._point_colors, opacities):
            c = QColor(color)
            c.setAlphaF(float(np.clip(alpha, 0.0, 1.0)))
            brushes.append(pg.mkBrush(c))
        self._scatter.setBrush(brushes)
        self._point_opacity = np.asarray(opacities, dtype=np.float64).copy()

    # ------------------------------------------------------------------
    # RenderSurface
    # ------------------------------------------------------------------

    def draw_points(self, points: npt.NDArray[np.float64], colors: Sequence[str], radius: float) -> None:
        if self._scatter is not None:
            self._scatter.setParentItem(None)
            self.view.scene().removeItem(self._scatter)

        self._point_colors = [QColor(c) for c in colors]
        self._scatter = pg.ScatterPlotItem(
            x=points[:, 0], y=points[:, 1],
            size=2.0 * radius, pen=None, pxMode=True,
            brush=[pg.mkBrush(c) for c in self._point_colors],
        )
        self._scatter.setZValue(POINTS_Z)
        self._add(Group.BOUNDS, self._scatter)
        self._point_opacity = np.ones(len(points))

    def draw_circle(self, group: str, x: float, y: float, radius: float, color: str, *,
                    tag: Optional[str] = None) -> None:
        item = QGraphicsEllipseItem(x - radius, y - radius, 2.0 * radius, 2.0 * radius)
        item.setBrush(pg.mkBrush(color))
        item.setPen(pg.mkPen("w", width=2))
        self._add(group, item, tag)

    def draw_rect(self, group: str, x: float, y: float, width: float, height: float, color: str,
                  opacity: float, *, tag: Optional[str] = None) -> None:
        item = QGraphicsRectItem(x, y, width, height)
        item.setBrush(pg.mkBrush(color))
        item.setPen(QPen(Qt.NoPen))
        item.setOpacity(opacity)
        self._add(group, item, tag)

    def draw_gradient_rect(self, group: str, x: float, y: float, width: float, height: float,
                           stops: Sequence[tuple[float, str]]) -> None:
        gradient = QLinearGradient(QPointF(x, y), QPointF(x + width, y))
        for offset, color in stops:
            gradient.setColorAt(offset, QColor(color))
        item = QGraphicsRectItem(x, y, width, height)
        item.setBrush(QBrush(gradient))
        item.setPen(QPen(Qt.NoPen))
        self._add(group, item)

    def draw_line(self, group: str, start: tuple[float, float], end: tuple[float, float]) -> None:
        item = QGraphicsLineItem(start[0], start[1], end[0], end[1])
        item.setPen(pg.mkPen("k", width=1))
        self._add(group, item)

    def draw_text(self, group: str, text: str, x: float, y: float, *,
                  anchor: tuple[float, float] = (0.0, 0.0), angle: float = 0.0,
                  node_id: Optional[str] = None) -> None:
        item = pg.TextItem(text, color="k", anchor=anchor, angle=angle)
        item.setPos(x, y)
        self._add(group, item)
        if node_id is not None:
            self._nodes[node_id] = item

    def draw_area_path(self, group: str, points: npt.NDArray[np.float64], fill: str, opacity: float, *,
                       stroke: Optional[str] = None, tag: Optional[str] = None) -> None:
        item = QGraphicsPathItem(polygon_path(points))
        item.setBrush(pg.mkBrush(fill))
        item.setPen(pg.mkPen(stroke) if stroke else QPen(Qt.NoPen))
        item.setOpacity(opacity)
        self._add(group, item, tag)

    def draw_cell_boundary(self, index: int, path: npt.NDArray[np.float64]) -> None:
        old = self._cells.pop(index, None)
        if old is not None:
            self.view.scene().removeItem(old)
        if len(path) == 0:
            return
        cell = CellItem(
            index, polygon_path(path),
            on_enter=self.cell_entered.emit,
            on_leave=self.cell_left.emit,
            is_blocked=self._is_over_legend,
        )
        cell.setZValue(CELLS_Z)
        self._add(Group.BOUNDS, cell)
        self._cells[index] = cell

    def update_text(self, node_id: str, content: str) -> None:
        node = self._nodes.get(node_id)
        if node is None:
            logger.warning(f"Unknown text node '{node_id}'")
            return
        node.setText(content)

    def update_opacity(self, group_id: str, value: float, duration_ms: int = 0) -> None:
        group = self._groups[group_id]
        running = self._animations.pop(group_id, None)
        if running is not None:
            running.stop()
        if duration_ms <= 0:
            group.setOpacity(value)
            return
        anim = QPropertyAnimation(group, b"opacity", self)
        anim.setDuration(duration_ms)
        anim.setStartValue(group.opacity())
        anim.setEndValue(value)
        anim.start()
        self._animations[group_id] = anim

    def update_transform(self, group_id: str, x: float, y: float) -> None:
        self._groups[group_id].setPos(x, y)

    def update_point_opacity(self, opacities: npt.NDArray[np.float64], duration_ms: int = 0) -> None:
        if self._fade is not None:
            self._fade.stop()
            self._fade = None

        target = np.asarray(opacities, dtype=np.float64)
        if duration_ms <= 0:
            self._apply_point_opacity(target)
            return

        start = self._point_opacity.copy()
        fade = QVariantAnimation(self)
        fade.setDuration(duration_ms)
        fade.setStartValue(0.0)
        fade.setEndValue(1.0)
        fade.valueChanged.connect(lambda t: self._apply_point_opacity(start + (target - start) * float(t)))
        fade.start()
        self._fade = fade

    def remove_tagged(self, tag: str) -> None:
        scene = self.view.scene()
        for item in self._tagged.pop(tag, []):
            scene.removeItem(item)
