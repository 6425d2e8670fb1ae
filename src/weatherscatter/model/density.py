"""
Kernel Density Estimation
=========================
Epanechnikov KDE of the marginal temperature distributions and the
MarginalAxis that turns a density curve into a drawable strip.

Note: Called once at load for the global curves and once per brush-move
event for the filtered curves, so everything here is vectorised NumPy.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, Sequence, TYPE_CHECKING

import numpy as np
from scipy.interpolate import BSpline

from weatherscatter import config

if TYPE_CHECKING:
    import numpy.typing as npt
    from weatherscatter.model.scales import LinearScale

Kernel = Callable[["npt.NDArray[np.float64]"], "npt.NDArray[np.float64]"]


def epanechnikov(bandwidth: float = config.KDE_BANDWIDTH) -> Kernel:
    """
    Epanechnikov kernel with the given bandwidth k:

        K(v) = 0.75 * (1 - (v/k)^2) / k   for |v/k| <= 1, else 0
    """
    if bandwidth <= 0.0:
        raise ValueError(f"Kernel bandwidth must be positive, got {bandwidth}.")

    def kernel(v: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        u = np.asarray(v, dtype=np.float64) / bandwidth
        return np.where(np.abs(u) <= 1.0, 0.75 * (1.0 - u * u) / bandwidth, 0.0)

    return kernel


@dataclass(frozen=True)
class DensityCurve:
    """Density values evaluated on a grid; both arrays have the same length."""
    x: npt.NDArray[np.float64]
    density: npt.NDArray[np.float64]

    def __len__(self) -> int:
        return len(self.x)

    def as_pairs(self) -> list[tuple[float, float]]:
        return list(zip(self.x.tolist(), self.density.tolist()))


class DensityEstimator:
    """
    Kernel density estimator over a fixed evaluation grid.

    The grid is fixed at construction so every curve of one axis (global or
    brushed) is evaluated at the same points.
    """

    def __init__(self, grid: Sequence[float] | npt.NDArray[np.float64], kernel: Kernel | None = None) -> None:
        self.grid = np.asarray(grid, dtype=np.float64)
        self.kernel = kernel or epanechnikov()

    @classmethod
    def for_scale(cls, scale: LinearScale, n: int = config.KDE_GRID_SIZE,
                  bandwidth: float = config.KDE_BANDWIDTH) -> DensityEstimator:
        return cls(scale.grid(n), epanechnikov(bandwidth))

    def estimate(self, samples: Sequence[float] | npt.NDArray[np.float64]) -> DensityCurve:
        return estimate(samples, self.grid, self.kernel)


def estimate(
    samples: Sequence[float] | npt.NDArray[np.float64],
    grid: Sequence[float] | npt.NDArray[np.float64],
    kernel: Kernel | None = None,
) -> DensityCurve:
    """
    Mean kernel contribution of all samples at every grid point.

    Args:
        samples: 1D sample values.
        grid: 1D evaluation points.
        kernel: Kernel function; defaults to Epanechnikov with k=7.

    Returns:
        DensityCurve over `grid`. An empty sample set yields all zeros.
    """
    kernel = kernel or epanechnikov()
    x = np.asarray(grid, dtype=np.float64).ravel()
    s = np.asarray(samples, dtype=np.float64).ravel()

    if s.size == 0:
        return DensityCurve(x=x, density=np.zeros_like(x))

    # (grid, samples) matrix of kernel contributions
    contributions = kernel(x[:, None] - s[None, :])
    return DensityCurve(x=x, density=contributions.mean(axis=1))


def basis_curve(vertices: npt.NDArray[np.float64],
                samples_per_segment: int = config.CURVE_SAMPLES_PER_SEGMENT) -> npt.NDArray[np.float64]:
    """
    Sample the uniform cubic B-spline with the given control vertices.

    The end vertices are tripled, so the curve starts at the first vertex,
    ends at the last one and otherwise only approximates the vertices
    (the same curve as d3's `curveBasis`).

    Args:
        vertices: (N, 2) control polygon.
        samples_per_segment: Points sampled per spline segment.

    Returns:
        ((N + 1) * samples_per_segment + 1, 2) points along the curve.
    """
    vertices = np.asarray(vertices, dtype=np.float64)
    if len(vertices) < 2:
        return vertices.copy()

    control = np.vstack([vertices[:1], vertices[:1], vertices, vertices[-1:], vertices[-1:]])
    n = len(control)
    spline = BSpline(np.arange(n + 4, dtype=np.float64), control, 3)
    segments = n - 3
    return spline(np.linspace(3.0, float(n), segments * samples_per_segment + 1))


class Orientation(StrEnum):
    HORIZONTAL = "horizontal"  # values along x, density grows upward (top strip)
    VERTICAL = "vertical"      # values along y, density grows rightward (right strip)


@dataclass(frozen=True)
class MarginalAxis:
    """
    One marginal density strip.

    Attributes:
        orientation: Direction of the value axis.
        value_scale: Temperature -> pixel along the strip.
        density_scale: Density -> pixel across the strip.
        baseline: Pixel coordinate (across the strip) the area is closed on.
        thickness: Strip extent across the value axis, used for markers.
    """
    orientation: Orientation
    value_scale: LinearScale
    density_scale: LinearScale
    baseline: float
    thickness: float

    def with_density_scale(self, density_scale: LinearScale) -> MarginalAxis:
        return MarginalAxis(self.orientation, self.value_scale, density_scale, self.baseline, self.thickness)

    def area_path(self, curve: DensityCurve) -> npt.NDArray[np.float64]:
        """
        Closed polygon of the area between the smoothed curve and the
        baseline, in strip-local pixel coordinates. The first and last rows
        lie on the baseline.
        """
        along = np.asarray(self.value_scale.forward(curve.x), dtype=np.float64)
        across = np.asarray(self.density_scale.forward(curve.density), dtype=np.float64)

        if self.orientation == Orientation.HORIZONTAL:
            pts = np.column_stack([along, across])
            first = (along[0], self.baseline)
            last = (along[-1], self.baseline)
        else:
            pts = np.column_stack([across, along])
            first = (self.baseline, along[0])
            last = (self.baseline, along[-1])

        return np.vstack([first, basis_curve(pts), last])

    def marker_rect(self, value: float, size: float = config.STRIP_MARKER_SIZE) -> tuple[float, float, float, float]:
        """(x, y, width, height) of a band marking `value` across the whole strip."""
        pos = self.value_scale.forward(value)
        if self.orientation == Orientation.HORIZONTAL:
            return pos, 0.0, size, self.thickness
        return 0.0, pos, self.thickness, size

