"""
Spatial Index (Voronoi Hit Regions)
===================================
Voronoi tessellation over the projected scatter points, clipped to the plot
bounds. Each cell becomes an invisible hover region in the view, so hovering
anywhere in the plot highlights the nearest point.

The cells are derived from the dual Delaunay triangulation: the Voronoi cell
of a point is the bounds rectangle cut by the perpendicular bisector toward
each of its Delaunay neighbours.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
from scipy.spatial import Delaunay, QhullError

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

_EMPTY_CELL = np.empty((0, 2), dtype=np.float64)


def clip_half_plane(
    polygon: npt.NDArray[np.float64],
    origin: npt.NDArray[np.float64],
    normal: npt.NDArray[np.float64],
    eps: float = 1e-12,
) -> npt.NDArray[np.float64]:
    """
    Clip a convex polygon to the half-plane {p : (p - origin) . normal <= 0}
    (one Sutherland-Hodgman pass).

    Args:
        polygon: (N, 2) open ring of vertices.
        origin: A point on the clipping line.
        normal: Outward normal of the half-plane.

    Returns:
        (M, 2) open ring; empty if nothing remains.
    """
    if len(polygon) == 0:
        return polygon

    side = (polygon - origin) @ normal
    inside = side <= eps
    if inside.all():
        return polygon
    if not inside.any():
        return _EMPTY_CELL

    out: list[npt.NDArray[np.float64]] = []
    n = len(polygon)
    for k in range(n):
        cur, nxt = polygon[k], polygon[(k + 1) % n]
        s_cur, s_nxt = side[k], side[(k + 1) % n]
        if inside[k]:
            out.append(cur)
        if inside[k] != inside[(k + 1) % n]:
            t = s_cur / (s_cur - s_nxt)
            out.append(cur + t * (nxt - cur))

    if len(out) < 3:
        return _EMPTY_CELL
    return np.asarray(out, dtype=np.float64)


class SpatialIndex:
    """
    Read-only Voronoi tessellation of the projected points.

    Cell identity is the dataset index of the point. When several points
    share the same pixel coordinates, the lowest index owns the cell and the
    others get an empty (degenerate) cell.
    """

    def __init__(
        self,
        points: npt.NDArray[np.float64],
        bounds_width: float,
        bounds_height: float,
        owners: npt.NDArray[np.intp],
        cells: dict[int, npt.NDArray[np.float64]],
    ) -> None:
        self.points = points
        self.bounds_width = bounds_width
        self.bounds_height = bounds_height
        self._owners = owners
        self._cells = cells

    def __len__(self) -> int:
        return len(self.points)

    @classmethod
    def build(
        cls,
        projected_points: npt.NDArray[np.float64],
        bounds_width: float,
        bounds_height: float,
    ) -> SpatialIndex:
        """
        Build the tessellation.

        Args:
            projected_points: (N, 2) pixel coordinates, in dataset order.
            bounds_width: Width of the clipping rectangle [0, width].
            bounds_height: Height of the clipping rectangle [0, height].
        """
        pts = np.asarray(projected_points, dtype=np.float64).reshape(-1, 2)
        if not np.isfinite(pts).all():
            raise ValueError("Projected points must be finite.")

        n = len(pts)
        if n == 0:
            return cls(pts, bounds_width, bounds_height, np.empty(0, dtype=np.intp), {})

        # np.unique returns the first occurrence, i.e. the lowest dataset index
        _, first_idx = np.unique(pts, axis=0, return_index=True)
        owners = np.sort(first_idx).astype(np.intp)
        if len(owners) < n:
            logger.warning(f"{n - len(owners)} point(s) share coordinates with a lower index; "
                           f"their hover cells are empty.")

        neighbours = cls._neighbours(pts[owners])

        rect = np.array(
            [[0.0, 0.0], [bounds_width, 0.0], [bounds_width, bounds_height], [0.0, bounds_height]],
            dtype=np.float64,
        )

        cells: dict[int, npt.NDArray[np.float64]] = {}
        for local, index in enumerate(owners):
            site = pts[index]
            polygon = rect
            for other_local in neighbours[local]:
                other = pts[owners[other_local]]
                polygon = clip_half_plane(polygon, 0.5 * (site + other), other - site)
                if len(polygon) == 0:
                    break
            cells[int(index)] = polygon

        logger.info(f"Voronoi index built over {n} points ({len(owners)} distinct).")
        return cls(pts, bounds_width, bounds_height, owners, cells)

    @staticmethod
    def _neighbours(sites: npt.NDArray[np.float64]) -> list[npt.NDArray[np.intp]]:
        """Delaunay neighbours of every site; all other sites when no triangulation exists."""
        m = len(sites)
        everyone = [np.delete(np.arange(m), i) for i in range(m)]
        if m < 3:
            return everyone

        try:
            tri = Delaunay(sites)
        except QhullError:
            # All sites collinear: cells are parallel slabs
            logger.debug("Delaunay triangulation failed (collinear sites), using all pairs.")
            return everyone

        indptr, indices = tri.vertex_neighbor_vertices
        result = [indices[indptr[i]:indptr[i + 1]] for i in range(m)]
        # Sites Qhull dropped as coplanar have no neighbours; fall back to all pairs for them
        return [nb if len(nb) else everyone[i] for i, nb in enumerate(result)]

    def cell_boundary(self, index: int) -> npt.NDArray[np.float64]:
        """
        Closed path (first vertex repeated at the end) of the cell of point
        `index`; empty for a degenerate cell.
        """
        if not 0 <= index < len(self.points):
            raise IndexError(f"Point index {index} out of range.")
        cell = self._cells.get(index, _EMPTY_CELL)
        if len(cell) == 0:
            return _EMPTY_CELL
        return np.vstack([cell, cell[:1]])

    def nearest_point(self, cursor: tuple[float, float] | npt.NDArray[np.float64]) -> int:
        """Dataset index of the point nearest to `cursor`; ties resolve to the lowest index."""
        if len(self._owners) == 0:
            raise ValueError("Spatial index is empty.")
        c = np.asarray(cursor, dtype=np.float64)
        d2 = np.sum((self.points[self._owners] - c) ** 2, axis=1)
        return int(self._owners[int(np.argmin(d2))])
