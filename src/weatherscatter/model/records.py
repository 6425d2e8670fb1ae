"""
Weather Records
===============
Immutable data structures for the daily temperature records and the JSON
loader that produces them.

Classes:
    DataPoint: One day (date, minimum and maximum temperature).
    Dataset: Ordered, immutable collection of DataPoints.
"""
from __future__ import annotations

import datetime
import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping, TYPE_CHECKING

import numpy as np

from weatherscatter.model.errors import DataError

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = ("date", "temperatureMin", "temperatureMax")


@dataclass(frozen=True)
class DataPoint:
    """A single day of the dataset."""
    date: datetime.date
    min_temp: float
    max_temp: float

    @property
    def month(self) -> str:
        """Zero-padded month label ("01".."12") used as the colour key."""
        return f"{self.date.month:02d}"

    @classmethod
    def from_record(cls, record: Mapping[str, Any], position: int = 0) -> DataPoint:
        """
        Build a DataPoint from one raw JSON record.

        Args:
            record: Mapping with at least 'date', 'temperatureMin' and 'temperatureMax'.
            position: Index of the record in the input, only used for error messages.

        Raises:
            DataError: If a required field is missing or cannot be parsed.
        """
        if not isinstance(record, Mapping):
            raise DataError(f"Record #{position} is not an object: {record!r}")

        missing = [key for key in REQUIRED_FIELDS if record.get(key) is None]
        if missing:
            raise DataError(f"Record #{position} is missing required field(s): {', '.join(missing)}")

        return cls(
            date=_parse_date(record["date"], position),
            min_temp=_parse_temperature(record["temperatureMin"], "temperatureMin", position),
            max_temp=_parse_temperature(record["temperatureMax"], "temperatureMax", position),
        )


def _parse_date(value: Any, position: int) -> datetime.date:
    """ISO calendar date, optionally followed by a 'T...' time part which is dropped."""
    if not isinstance(value, str):
        raise DataError(f"Record #{position} has an invalid date {value!r}")
    try:
        if "T" in value:
            return datetime.datetime.fromisoformat(value).date()
        return datetime.date.fromisoformat(value)
    except ValueError as e:
        raise DataError(f"Record #{position} has an invalid date {value!r}") from e


def _parse_temperature(value: Any, key: str, position: int) -> float:
    # bool is an int subclass, float(True) would pass
    if isinstance(value, bool):
        raise DataError(f"Record #{position} has a non-numeric {key}: {value!r}")
    try:
        temperature = float(value)
    except (TypeError, ValueError) as e:
        raise DataError(f"Record #{position} has a non-numeric {key}: {value!r}") from e
    if not math.isfinite(temperature):
        raise DataError(f"Record #{position} has a non-finite {key}: {value!r}")
    return temperature


@dataclass(frozen=True)
class Dataset:
    """
    Ordered sequence of DataPoints, frozen at load.

    The position of a point in the dataset is its identity everywhere else
    (Voronoi cell index, selection mask index, scatter spot index).
    """
    points: tuple[DataPoint, ...]
    _min_temps: npt.NDArray[np.float64] = field(init=False, repr=False, compare=False)
    _max_temps: npt.NDArray[np.float64] = field(init=False, repr=False, compare=False)
    _dates: npt.NDArray[np.datetime64] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.points:
            raise DataError("Dataset is empty.")

        min_temps = np.array([p.min_temp for p in self.points], dtype=np.float64)
        max_temps = np.array([p.max_temp for p in self.points], dtype=np.float64)
        dates = np.array([p.date for p in self.points], dtype="datetime64[D]")
        for arr in (min_temps, max_temps, dates):
            arr.flags.writeable = False

        object.__setattr__(self, "_min_temps", min_temps)
        object.__setattr__(self, "_max_temps", max_temps)
        object.__setattr__(self, "_dates", dates)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> Dataset:
        """Parse raw records, keeping their order."""
        if records is None:
            raise DataError("No records given.")
        points = tuple(DataPoint.from_record(r, i) for i, r in enumerate(records))
        return cls(points=points)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[DataPoint]:
        return iter(self.points)

    def __getitem__(self, index: int) -> DataPoint:
        return self.points[index]

    @property
    def min_temps(self) -> npt.NDArray[np.float64]:
        return self._min_temps

    @property
    def max_temps(self) -> npt.NDArray[np.float64]:
        return self._max_temps

    @property
    def dates(self) -> npt.NDArray[np.datetime64]:
        return self._dates

    @property
    def months(self) -> list[str]:
        return [p.month for p in self.points]

    @property
    def first_date(self) -> datetime.date:
        return min(p.date for p in self.points)

    @property
    def last_date(self) -> datetime.date:
        return max(p.date for p in self.points)


def load_dataset(filepath: str) -> Dataset:
    """
    Load the weather dataset from a JSON file (an array of records).

    Raises:
        DataError: If the file does not contain a non-empty list of valid records.
        OSError: If the file cannot be read.
    """
    logger.info(f"Loading dataset from: {filepath}")
    with open(filepath, "r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            raise DataError(f"File '{filepath}' is not valid JSON: {e}") from e

    if not isinstance(raw, list):
        raise DataError(f"File '{filepath}' must contain a JSON array of records.")

    dataset = Dataset.from_records(raw)
    logger.info(f"Loaded {len(dataset)} records ({dataset.first_date} - {dataset.last_date}).")
    return dataset
