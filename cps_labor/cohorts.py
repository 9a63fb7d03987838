"""
Cohort filters: named sub-populations of a record-batch frame.

Every filter takes a DataFrame with the ``RecordBatch`` schema and returns
the matching rows as a new DataFrame; the input is never modified.  Filters
compose by chaining (``valid_wage(employed_hourly_private(df))``).  Missing
values never match a predicate, and an empty selection is returned as an
empty frame rather than raised.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from .config import (
    CIVILIAN_POPULATION_CODES,
    DISCOURAGED_CODE,
    EMPLOYED_CODES,
    FULL_TIME_USUAL_HOURS_CODES,
    LABOR_FORCE_CODES,
    NOT_IN_LABOR_FORCE_CODES,
    PAID_HOURLY_CODE,
    PRIME_AGE_BOUNDS,
    PRIVATE_SECTOR_CODES,
    UNEMPLOYED_CODES,
    YOUTH_MAX_AGE_EXCLUSIVE,
)


def select(df: pd.DataFrame, mask: pd.Series) -> pd.DataFrame:
    """Rows where ``mask`` is true; ``<NA>`` in the mask counts as false."""
    mask = mask.astype("boolean").fillna(False).astype(bool)
    return df.loc[mask].copy()


def code_in(df: pd.DataFrame, column: str, codes: Iterable[int]) -> pd.DataFrame:
    return select(df, df[column].isin(list(codes)))


# ---------------------------------------------------------------------------
# Labor-force status (PEMLR)
# ---------------------------------------------------------------------------


def civilian_population(df: pd.DataFrame) -> pd.DataFrame:
    """People in the labor-force universe (any valid status code)."""
    return code_in(df, "employment_status", CIVILIAN_POPULATION_CODES)


def labor_force(df: pd.DataFrame) -> pd.DataFrame:
    return code_in(df, "employment_status", LABOR_FORCE_CODES)


def employed(df: pd.DataFrame) -> pd.DataFrame:
    return code_in(df, "employment_status", EMPLOYED_CODES)


def unemployed(df: pd.DataFrame) -> pd.DataFrame:
    return code_in(df, "employment_status", UNEMPLOYED_CODES)


def not_in_labor_force(df: pd.DataFrame) -> pd.DataFrame:
    return code_in(df, "employment_status", NOT_IN_LABOR_FORCE_CODES)


# ---------------------------------------------------------------------------
# Demographics
# ---------------------------------------------------------------------------


def youth(df: pd.DataFrame) -> pd.DataFrame:
    return select(df, df["age"] < YOUTH_MAX_AGE_EXCLUSIVE)


def prime_age(df: pd.DataFrame) -> pd.DataFrame:
    low, high = PRIME_AGE_BOUNDS
    return select(df, (df["age"] >= low) & (df["age"] <= high))


# ---------------------------------------------------------------------------
# Job characteristics
# ---------------------------------------------------------------------------


def private_sector(df: pd.DataFrame) -> pd.DataFrame:
    return code_in(df, "class_of_worker", PRIVATE_SECTOR_CODES)


def paid_hourly(df: pd.DataFrame) -> pd.DataFrame:
    return select(df, df["paid_hourly"] == PAID_HOURLY_CODE)


def employed_hourly_private(df: pd.DataFrame) -> pd.DataFrame:
    """Employed, paid by the hour, private sector: the minimum-wage universe."""
    return private_sector(paid_hourly(employed(df)))


def valid_wage(df: pd.DataFrame) -> pd.DataFrame:
    """Rows with a reported, positive hourly wage."""
    wages = df["hourly_earnings"]
    return select(df, wages.notna() & (wages > 0))


def valid_actual_hours(df: pd.DataFrame) -> pd.DataFrame:
    hours = df["actual_hours"]
    return select(df, hours.notna() & (hours >= 0))


def full_time(df: pd.DataFrame) -> pd.DataFrame:
    """Usually works 35 hours or more (PRHRUSL 35-39 through varies-full-time)."""
    return code_in(df, "usual_hours_code", FULL_TIME_USUAL_HOURS_CODES)


def discouraged_workers(df: pd.DataFrame) -> pd.DataFrame:
    if "discouraged" not in df.columns:
        return df.iloc[0:0].copy()
    return select(df, df["discouraged"] == DISCOURAGED_CODE)


def with_valid_code(df: pd.DataFrame, column: str, codes: range) -> pd.DataFrame:
    """Rows whose ``column`` code lies in ``codes``; 0, negatives and ``<NA>`` drop out."""
    values = df[column]
    return select(df, values.notna() & (values >= codes.start) & (values < codes.stop))
