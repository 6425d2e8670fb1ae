from __future__ import annotations

from dataclasses import dataclass

from weatherscatter import config


@dataclass(frozen=True)
class ChartDimensions:
    """
    Pixel geometry of the chart.

    The scatter plot ("bounds") sits inside the margins; the top margin hosts
    the minimum-temperature strip and the right margin the maximum-temperature
    strip. The legend is positioned in bounds coordinates.
    """
    width: float
    height: float
    margin_top: float = config.MARGIN_TOP
    margin_right: float = config.MARGIN_RIGHT
    margin_bottom: float = config.MARGIN_BOTTOM
    margin_left: float = config.MARGIN_LEFT
    legend_width: float = config.LEGEND_WIDTH
    legend_height: float = config.LEGEND_HEIGHT

    @classmethod
    def square(cls, size: float) -> ChartDimensions:
        """Square chart, never smaller than MIN_CHART_SIZE."""
        size = max(float(size), config.MIN_CHART_SIZE)
        return cls(width=size, height=size)

    @property
    def bounded_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def bounded_height(self) -> float:
        return self.height - self.margin_top - self.margin_bottom

    @property
    def bounds_origin(self) -> tuple[float, float]:
        return self.margin_left, self.margin_top

    @property
    def min_strip_origin(self) -> tuple[float, float]:
        return self.margin_left, 0.0

    @property
    def max_strip_origin(self) -> tuple[float, float]:
        return self.margin_left + self.bounded_width, self.margin_top

    @property
    def legend_origin(self) -> tuple[float, float]:
        """Top-left corner of the legend strip, in bounds coordinates."""
        return (
            self.bounded_width - self.legend_width - config.LEGEND_OFFSET_RIGHT,
            self.bounded_height - config.LEGEND_OFFSET_BOTTOM,
        )

    @property
    def legend_highlight_width(self) -> float:
        return self.legend_width * config.LEGEND_HIGHLIGHT_FRACTION
