"""Grouped (per industry / per occupation) weighted aggregation.

A :class:`Dimension` names one code column at one fixed granularity.  Rows
whose code is missing, zero or outside the dimension's valid range are "not
applicable" and are dropped before grouping rather than kept as a bucket of
their own.  Detailed and major-group codes are separate dimensions and are
never mixed within one table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional

import pandas as pd

from . import cohorts, weighted
from .config import MIN_GROUP_SAMPLE, TOP_N, WAGE_DISTRIBUTION

GroupStatistic = Callable[[pd.DataFrame], Mapping[str, Optional[float]]]


@dataclass(frozen=True)
class Dimension:
    kind: str
    granularity: str
    column: str
    valid_codes: range

    @property
    def code_key(self) -> str:
        return f"{self.kind}_code"

    @property
    def name_key(self) -> str:
        return f"{self.kind}_name"


INDUSTRY_DETAILED = Dimension("industry", "detailed", "industry_detailed", range(1, 53))
INDUSTRY_MAJOR = Dimension("industry", "major", "industry_major", range(1, 15))
OCCUPATION_DETAILED = Dimension("occupation", "detailed", "occupation_detailed", range(1, 24))
OCCUPATION_MAJOR = Dimension("occupation", "major", "occupation_major", range(1, 12))


# ---------------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------------


def aggregate_by_code(
    df: pd.DataFrame, dimension: Dimension, statistic: GroupStatistic
) -> pd.DataFrame:
    """Apply ``statistic`` to each code group of ``dimension``.

    Parameters
    ----------
    df : pd.DataFrame
        An already-filtered sub-population.
    dimension : Dimension
        Code column and valid range to group on.
    statistic : callable
        Maps a group's rows to a ``{metric name: value}`` mapping.

    Returns
    -------
    pd.DataFrame
        One row per valid code present in ``df`` with columns ``code``,
        ``sample_size`` (raw, unweighted rows) and the statistic's metrics,
        sorted by code ascending.
    """
    scoped = cohorts.with_valid_code(df, dimension.column, dimension.valid_codes)

    rows: List[Dict[str, object]] = []
    for code, group in scoped.groupby(dimension.column, sort=True):
        row: Dict[str, object] = {"code": int(code), "sample_size": len(group)}
        row.update(statistic(group))
        rows.append(row)

    if not rows:
        return pd.DataFrame(columns=["code", "sample_size"])
    return pd.DataFrame(rows).sort_values("code", ignore_index=True)


def employment_by_code(df: pd.DataFrame, dimension: Dimension) -> pd.DataFrame:
    """Weighted employment (count weight) per code."""
    return aggregate_by_code(
        cohorts.employed(df),
        dimension,
        lambda group: {"employment": weighted.weighted_total(group)},
    )


def unemployment_by_code(df: pd.DataFrame, dimension: Dimension) -> pd.DataFrame:
    """Labor force, unemployed and unemployment rate per code.

    The unemployed are classified by the industry/occupation of their last
    job, so both numerator and denominator share the group's code.
    """
    return aggregate_by_code(cohorts.labor_force(df), dimension, weighted.unemployment_rate)


def median_wage_by_code(df: pd.DataFrame, dimension: Dimension) -> pd.DataFrame:
    universe = cohorts.valid_wage(cohorts.employed_hourly_private(df))
    return aggregate_by_code(
        universe,
        dimension,
        lambda group: {
            "median_hourly_wage": weighted.weighted_median(
                group["hourly_earnings"], group[weighted.EARNINGS_WEIGHT]
            )
        },
    )


def median_overtime_by_code(df: pd.DataFrame, dimension: Dimension) -> pd.DataFrame:
    """Median overtime hours of full-time, hourly, private-sector workers per code."""
    universe = cohorts.valid_actual_hours(
        cohorts.full_time(cohorts.employed_hourly_private(df))
    )
    return aggregate_by_code(
        universe,
        dimension,
        lambda group: {"median_ot_hours": weighted.median_overtime_hours(group)},
    )


def wage_quantiles_by_code(
    df: pd.DataFrame,
    dimension: Dimension,
    distribution: Mapping[str, float] = WAGE_DISTRIBUTION,
) -> pd.DataFrame:
    """Weighted hourly-wage percentiles per code (earnings weight).

    ``distribution`` maps output column names to percentiles, e.g.
    ``{"min": 0, "q2": 50, "max": 100}``.
    """
    universe = cohorts.valid_wage(cohorts.employed_hourly_private(df))

    def quantiles(group: pd.DataFrame) -> Dict[str, Optional[float]]:
        values = weighted.weighted_quantiles(
            group["hourly_earnings"],
            group[weighted.EARNINGS_WEIGHT],
            distribution.values(),
        )
        return {key: values[p] for key, p in distribution.items()}

    return aggregate_by_code(universe, dimension, quantiles)


# ---------------------------------------------------------------------------
# Post-processing
# ---------------------------------------------------------------------------


def rank_groups(
    table: pd.DataFrame,
    metric: str,
    n: int = TOP_N,
    *,
    descending: bool = True,
    min_sample: int = MIN_GROUP_SAMPLE,
) -> pd.DataFrame:
    """Top (``descending``) or bottom ``n`` groups by ``metric``.

    Groups with fewer than ``min_sample`` raw rows or without a value are
    not eligible.  Ties are broken by code ascending.
    """
    if table.empty or metric not in table.columns:
        return table.iloc[0:0].copy()

    eligible = table[(table["sample_size"] >= min_sample) & table[metric].notna()]
    ranked = eligible.sort_values(
        [metric, "code"], ascending=[not descending, True], kind="mergesort"
    )
    return ranked.head(n).reset_index(drop=True)


def average_monthly(total: float, month_count: int) -> float:
    """Average of a multi-month total over the months actually present."""
    if month_count < 1:
        raise ValueError(f"month_count must be at least 1, got {month_count}.")
    return total / month_count


def add_employment_shares(table: pd.DataFrame, column: str = "employment") -> pd.DataFrame:
    """Add ``employment_share``: each group's percent of the table's total."""
    out = table.copy()
    if out.empty:
        out["employment_share"] = pd.Series(dtype="float64")
        return out
    total = float(out[column].sum())
    out["employment_share"] = [
        weighted.safe_ratio(float(value), total) for value in out[column]
    ]
    return out
