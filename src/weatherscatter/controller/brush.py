"""
Legend Brush
============
Maps a pointer position on the legend strip to a 30-day date window and
classifies the dataset against it.
"""
from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from weatherscatter import config
from weatherscatter.model.scales import LinearScale, create_linear_widening

if TYPE_CHECKING:
    import numpy.typing as npt
    from weatherscatter.model.records import Dataset

logger = logging.getLogger(__name__)

_EPOCH = datetime.datetime(1970, 1, 1)


def to_days(value: datetime.date | datetime.datetime) -> float:
    """Days since the epoch (fractional for datetimes)."""
    if not isinstance(value, datetime.datetime):
        value = datetime.datetime(value.year, value.month, value.day)
    return (value - _EPOCH) / datetime.timedelta(days=1)


def from_days(days: float) -> datetime.datetime:
    return _EPOCH + datetime.timedelta(days=float(days))


@dataclass(frozen=True)
class BrushRange:
    """Half-open time window [start, end)."""
    start: datetime.datetime
    end: datetime.datetime

    @classmethod
    def starting_at(cls, start: datetime.datetime, days: int = config.BRUSH_WINDOW_DAYS) -> BrushRange:
        return cls(start=start, end=start + datetime.timedelta(days=days))

    @property
    def width(self) -> datetime.timedelta:
        return self.end - self.start

    @property
    def month(self) -> str:
        """Colour key of the window: month of its start, "01".."12"."""
        return f"{self.start.month:02d}"

    @property
    def label(self) -> str:
        fmt = config.LEGEND_DATE_FORMAT
        return f"{self.start.strftime(fmt)} – {self.end.strftime(fmt)}"

    def contains(self, day: datetime.date | datetime.datetime) -> bool:
        if not isinstance(day, datetime.datetime):
            day = datetime.datetime(day.year, day.month, day.day)
        return self.start <= day < self.end

    def selection_mask(self, dates: npt.NDArray[np.datetime64]) -> npt.NDArray[np.bool_]:
        """Boolean mask, True where the date lies inside the window."""
        days = (np.asarray(dates, dtype="datetime64[D]") - np.datetime64("1970-01-01", "D")).astype(np.float64)
        return (days >= to_days(self.start)) & (days < to_days(self.end))


@dataclass(frozen=True)
class Selection:
    """Partition of the dataset indices by a BrushRange."""
    range: BrushRange
    mask: npt.NDArray[np.bool_]

    @property
    def selected(self) -> npt.NDArray[np.intp]:
        return np.flatnonzero(self.mask)

    @property
    def not_selected(self) -> npt.NDArray[np.intp]:
        return np.flatnonzero(~self.mask)


class LegendBrush:
    """
    Position-to-date mapping of the legend strip.

    The active pixel sub-range excludes half the highlight bar at each edge,
    so the bar never overflows the strip. Positions outside it are clamped.
    """

    def __init__(self, dataset: Dataset, legend_width: float, highlight_width: float,
                 window_days: int = config.BRUSH_WINDOW_DAYS) -> None:
        self.dataset = dataset
        self.window_days = window_days
        self.legend_width = legend_width
        self.highlight_width = highlight_width

        self.lower = highlight_width / 2.0
        self.upper = legend_width - highlight_width / 2.0

        first = to_days(dataset.first_date)
        last = to_days(dataset.last_date) - window_days
        if last < first:
            logger.warning(f"Dataset spans less than {window_days} days; brush windows will start before the data.")

        self.scale: LinearScale = create_linear_widening(self.lower, self.upper, first, last, name="legend brush")

    def clamp(self, position: float) -> float:
        return min(max(float(position), self.lower), self.upper)

    def range_at(self, position: float) -> BrushRange:
        """BrushRange for a pointer position in legend-local pixels."""
        start = from_days(self.scale.forward(self.clamp(position)))
        return BrushRange.starting_at(start, self.window_days)

    def classify(self, brush_range: BrushRange) -> Selection:
        return Selection(range=brush_range, mask=brush_range.selection_mask(self.dataset.dates))
