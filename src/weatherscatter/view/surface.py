"""
Render boundary between the chart logic and the graphics backend.

Coordinates passed to a group are local to that group; groups are positioned
with `update_transform`. Drawings created with a `tag` can later be removed
together with `remove_tagged`.
"""
from __future__ import annotations

from typing import Optional, Protocol, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    import numpy as np
    import numpy.typing as npt


class RenderSurface(Protocol):
    def draw_points(self, points: npt.NDArray[np.float64], colors: Sequence[str], radius: float) -> None:
        """Scatter points in bounds coordinates; spot i is dataset index i."""
        ...

    def draw_circle(self, group: str, x: float, y: float, radius: float, color: str, *,
                    tag: Optional[str] = None) -> None: ...

    def draw_rect(self, group: str, x: float, y: float, width: float, height: float, color: str,
                  opacity: float, *, tag: Optional[str] = None) -> None: ...

    def draw_gradient_rect(self, group: str, x: float, y: float, width: float, height: float,
                           stops: Sequence[tuple[float, str]]) -> None: ...

    def draw_line(self, group: str, start: tuple[float, float], end: tuple[float, float]) -> None: ...

    def draw_text(self, group: str, text: str, x: float, y: float, *,
                  anchor: tuple[float, float] = (0.0, 0.0), angle: float = 0.0,
                  node_id: Optional[str] = None) -> None: ...

    def draw_area_path(self, group: str, points: npt.NDArray[np.float64], fill: str, opacity: float, *,
                       stroke: Optional[str] = None, tag: Optional[str] = None) -> None: ...

    def draw_cell_boundary(self, index: int, path: npt.NDArray[np.float64]) -> None:
        """Invisible hover region of point `index`; an empty path means no region."""
        ...

    def update_text(self, node_id: str, content: str) -> None: ...

    def update_opacity(self, group_id: str, value: float, duration_ms: int = 0) -> None: ...

    def update_transform(self, group_id: str, x: float, y: float) -> None: ...

    def update_point_opacity(self, opacities: npt.NDArray[np.float64], duration_ms: int = 0) -> None: ...

    def remove_tagged(self, tag: str) -> None: ...
