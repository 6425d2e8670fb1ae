"""
Scales
======
Linear mappings between data values and pixel positions.

Why is this file needed?
------------------------
1. Every projection in the chart (points, marginal curves, legend) goes
   through a LinearScale, so forward/inverse stay exactly consistent.
2. The ScaleRegistry computes the chart domains once, from the dataset, and
   hands out the same scale objects to the chart, the spatial index and the
   interaction controller.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, TYPE_CHECKING, Union

import numpy as np

from weatherscatter import config
from weatherscatter.model.errors import DomainError

if TYPE_CHECKING:
    import numpy.typing as npt
    from weatherscatter.model.layout import ChartDimensions
    from weatherscatter.model.records import Dataset

logger = logging.getLogger(__name__)

ArrayLike = Union[float, "npt.NDArray[np.float64]"]


@dataclass(frozen=True)
class LinearScale:
    """
    Invertible, unclamped linear map from [domain_min, domain_max] to
    [range_min, range_max]. Values outside the domain extrapolate.
    """
    domain_min: float
    domain_max: float
    range_min: float
    range_max: float

    @property
    def domain(self) -> tuple[float, float]:
        return self.domain_min, self.domain_max

    @property
    def range(self) -> tuple[float, float]:
        return self.range_min, self.range_max

    def forward(self, value: ArrayLike) -> ArrayLike:
        """Map a domain value (or array of values) to pixels."""
        t = (np.asarray(value, dtype=np.float64) - self.domain_min) / (self.domain_max - self.domain_min)
        out = self.range_min + t * (self.range_max - self.range_min)
        return float(out) if np.ndim(out) == 0 else out

    def inverse(self, pixel: ArrayLike) -> ArrayLike:
        """Map a pixel position (or array of them) back to the domain."""
        span = self.range_max - self.range_min
        if span == 0.0:
            # Collapsed range: every pixel corresponds to the domain start
            out = np.full(np.shape(pixel), self.domain_min, dtype=np.float64)
        else:
            t = (np.asarray(pixel, dtype=np.float64) - self.range_min) / span
            out = self.domain_min + t * (self.domain_max - self.domain_min)
        return float(out) if np.ndim(out) == 0 else out

    def grid(self, n: int) -> npt.NDArray[np.float64]:
        """n evenly spaced values across the domain."""
        return np.linspace(self.domain_min, self.domain_max, n)

    def ticks(self, count: int = 10) -> npt.NDArray[np.float64]:
        """
        Round tick values inside the domain, roughly `count` of them.

        The step is 1, 2 or 5 times a power of ten, so [0, 100] with
        count=4 gives 0, 20, ..., 100.
        """
        lo, hi = sorted(self.domain)
        step = tick_step(lo, hi, count)
        first, last = math.ceil(lo / step), math.floor(hi / step)
        steps = np.arange(first, last + 1, dtype=np.float64)
        if step < 1.0:
            # Divide by the inverse step to keep e.g. 0.6 instead of 0.6000000000000001
            return steps / round(1.0 / step)
        return steps * step


def tick_step(lo: float, hi: float, count: int) -> float:
    """Nice step (1, 2 or 5 times a power of ten) splitting [lo, hi] into about `count` intervals."""
    if hi <= lo or count < 1:
        raise ValueError(f"Cannot tick [{lo}, {hi}] into {count} intervals.")
    raw = (hi - lo) / count
    power = math.floor(math.log10(raw))
    error = raw / 10.0 ** power
    if error >= math.sqrt(50.0):
        factor = 10.0
    elif error >= math.sqrt(10.0):
        factor = 5.0
    elif error >= math.sqrt(2.0):
        factor = 2.0
    else:
        factor = 1.0
    return factor * 10.0 ** power


def create_linear(domain_min: float, domain_max: float, range_min: float, range_max: float) -> LinearScale:
    """
    Create a LinearScale.

    Raises:
        DomainError: If the domain is degenerate (domain_min == domain_max)
            or not finite.
    """
    if not (math.isfinite(domain_min) and math.isfinite(domain_max)):
        raise DomainError(f"Scale domain must be finite, got [{domain_min}, {domain_max}].")
    if domain_min == domain_max:
        raise DomainError(f"Degenerate scale domain [{domain_min}, {domain_max}].")
    return LinearScale(float(domain_min), float(domain_max), float(range_min), float(range_max))


def rounded_domain(values: Iterable[float], step: float = config.DOMAIN_ROUNDING) -> tuple[float, float]:
    """
    Domain [0, max rounded up to the nearest `step`].

    Raises:
        DomainError: If there are no values (the maximum is undefined).
    """
    arr = np.asarray(list(values) if not isinstance(values, np.ndarray) else values, dtype=np.float64)
    if arr.size == 0:
        raise DomainError("Cannot derive a scale domain from an empty value set.")
    upper = math.ceil(float(np.max(arr)) / step) * step
    return 0.0, float(upper)


def create_linear_widening(domain_min: float, domain_max: float, range_min: float, range_max: float,
                           name: str = "scale") -> LinearScale:
    """Like `create_linear`, but recovers a degenerate domain by widening it by one unit."""
    try:
        return create_linear(domain_min, domain_max, range_min, range_max)
    except DomainError:
        logger.warning(f"Degenerate domain [{domain_min}, {domain_max}] for {name}, widening to "
                       f"[{domain_min}, {domain_max + 1.0}].")
        return create_linear(domain_min, domain_max + 1.0, range_min, range_max)


@dataclass(frozen=True)
class ScaleRegistry:
    """All scales used by the chart. Computed once per dataset and layout."""
    x: LinearScale
    y: LinearScale
    density_min: LinearScale
    density_max: LinearScale
    brushed_density_min: LinearScale
    brushed_density_max: LinearScale
    legend_ticks: LinearScale

    @classmethod
    def from_dataset(cls, dataset: Dataset, dims: ChartDimensions) -> ScaleRegistry:
        """
        Derive all scales.

        The x axis shows the minimum temperature, the y axis the maximum
        temperature; the y range is inverted so larger values sit higher.
        """
        x_min, x_max = rounded_domain(dataset.min_temps)
        y_min, y_max = rounded_domain(dataset.max_temps)

        x = create_linear_widening(x_min, x_max, 0.0, dims.bounded_width, name="x")
        y = create_linear_widening(y_min, y_max, dims.bounded_height, 0.0, name="y")

        density_top = config.DENSITY_DOMAIN_MAX
        registry = cls(
            x=x,
            y=y,
            density_min=create_linear(0.0, density_top, dims.margin_top, 0.0),
            density_max=create_linear(0.0, density_top, 0.0, dims.margin_right),
            brushed_density_min=create_linear(
                0.0, density_top, dims.margin_top, dims.margin_top - config.BRUSHED_DENSITY_MIN_EXTENT
            ),
            brushed_density_max=create_linear(
                0.0, density_top, 0.0, dims.margin_right - config.BRUSHED_DENSITY_MAX_INSET
            ),
            legend_ticks=create_linear(1.0, float(len(config.MONTH_KEYS)), 0.0, dims.legend_width),
        )
        logger.debug(f"Scales: x domain {x.domain}, y domain {y.domain}")
        return registry
