"""Typed record batches of CPS basic monthly microdata.

A :class:`RecordBatch` wraps one pandas DataFrame whose columns and dtypes
are fixed when the batch is built (see ``config.COLUMN_NAMES``), together
with the ``(year, month)`` periods the rows come from.  Everything
downstream reads named, typed columns and never raw API strings.

Missing values are explicit: hourly earnings and actual hours use the
nullable ``Float64`` dtype and the API's negative sentinels become ``<NA>``;
weights are plain ``float64`` where unusable values become ``0.0``, so a
row with no weight contributes nothing to any sum.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import numpy as np
import pandas as pd

from .config import MISSING_WAGE_SENTINELS, OPTIONAL_VARIABLES, REQUIRED_VARIABLES

Period = Tuple[int, int]

REQUIRED_COLUMNS: List[str] = list(REQUIRED_VARIABLES.values())
OPTIONAL_COLUMNS: List[str] = list(OPTIONAL_VARIABLES.values())

WEIGHT_COLUMNS: Tuple[str, ...] = ("count_weight", "outgoing_rotation_weight")
NULLABLE_FLOAT_COLUMNS: Tuple[str, ...] = ("hourly_earnings", "actual_hours")


def ensure_columns(df: pd.DataFrame, required: Iterable[str]) -> None:
    """Raise an error if the DataFrame lacks any of the required columns."""
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise KeyError(f"Missing expected columns: {missing}")


def _as_weight(series: pd.Series) -> pd.Series:
    values = pd.to_numeric(series, errors="coerce").to_numpy(dtype="float64", na_value=np.nan)
    values = np.where(np.isnan(values) | (values < 0), 0.0, values)
    return pd.Series(values, index=series.index, dtype="float64")


def _as_optional_float(series: pd.Series, sentinels: Sequence[float] = ()) -> pd.Series:
    values = pd.to_numeric(series, errors="coerce").to_numpy(dtype="float64", na_value=np.nan)
    missing = np.isnan(values) | (values < 0) | np.isin(values, list(sentinels))
    values = np.where(missing, np.nan, values)
    return pd.Series(values, index=series.index, dtype="float64").astype("Float64")


def _as_code(series: pd.Series) -> pd.Series:
    values = pd.to_numeric(series, errors="coerce").to_numpy(dtype="float64", na_value=np.nan)
    # Non-integral codes are unparseable, not truncated
    values = np.where(values == np.round(values), values, np.nan)
    return pd.Series(values, index=series.index, dtype="float64").astype("Int64")


def _check_periods(periods: Iterable[Period]) -> Tuple[Period, ...]:
    checked = tuple((int(year), int(month)) for year, month in periods)
    for year, month in checked:
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month {month} for year {year}.")
    return checked


@dataclass(frozen=True)
class RecordBatch:
    """One or more months of typed CPS rows.

    Build instances with :meth:`from_frame` (or :func:`combine_batches`);
    the constructor itself does no validation.
    """

    frame: pd.DataFrame
    periods: Tuple[Period, ...]

    @classmethod
    def from_frame(cls, frame: pd.DataFrame, periods: Iterable[Period]) -> "RecordBatch":
        """Validate and coerce ``frame`` into the canonical schema.

        Parameters
        ----------
        frame : pd.DataFrame
            Rows with (at least) every column in ``REQUIRED_COLUMNS``; values
            may still be strings as returned by the API.
        periods : iterable of (year, month)
            The survey months the rows belong to.

        Returns
        -------
        RecordBatch
            A batch owning a private copy of the coerced data.
        """
        ensure_columns(frame, REQUIRED_COLUMNS)
        columns = REQUIRED_COLUMNS + [c for c in OPTIONAL_COLUMNS if c in frame.columns]
        source = frame[columns].reset_index(drop=True)

        typed = pd.DataFrame(index=source.index)
        for col in columns:
            if col in WEIGHT_COLUMNS:
                typed[col] = _as_weight(source[col])
            elif col == "hourly_earnings":
                typed[col] = _as_optional_float(source[col], MISSING_WAGE_SENTINELS)
            elif col in NULLABLE_FLOAT_COLUMNS:
                typed[col] = _as_optional_float(source[col])
            else:
                typed[col] = _as_code(source[col])

        return cls(frame=typed, periods=_check_periods(periods))

    def __len__(self) -> int:
        return len(self.frame)

    def has(self, column: str) -> bool:
        """Whether an optional field was published for these rows."""
        return column in self.frame.columns

    @property
    def month_count(self) -> int:
        return len(self.periods)

    @property
    def period(self) -> Period:
        """The single month of a monthly batch."""
        if len(self.periods) != 1:
            raise ValueError(f"Batch covers {len(self.periods)} months, not one.")
        return self.periods[0]


def combine_batches(batches: Sequence[RecordBatch]) -> RecordBatch:
    """Concatenate monthly batches into one longer-window batch.

    Rows are stacked as-is (no deduplication).  The inputs are left
    untouched; the result owns a new frame.  Optional columns missing from
    some months are filled with ``<NA>`` for those rows.
    """
    if not batches:
        raise ValueError("Cannot combine an empty list of record batches.")

    frames = [batch.frame for batch in batches]
    combined = pd.concat(frames, ignore_index=True, sort=False)
    for col in OPTIONAL_COLUMNS:
        if col in combined.columns:
            combined[col] = combined[col].astype("Int64")

    periods: List[Period] = []
    for batch in batches:
        periods.extend(batch.periods)
    return RecordBatch(frame=combined, periods=tuple(periods))
