"""Monthly statistics records and long-window industry/occupation sections.

This module turns record batches into the plain ``dict``/``list`` values that
end up in the JSON report.  Numbers are kept at full precision until
:func:`format_metrics`, which rounds rates and wages to two decimals and
weighted totals to whole people.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

import pandas as pd

from . import aggregate, weighted
from .aggregate import (
    INDUSTRY_DETAILED,
    INDUSTRY_MAJOR,
    OCCUPATION_DETAILED,
    OCCUPATION_MAJOR,
    Dimension,
)
from .codes import DEFAULT_LOOKUPS, Lookups
from .config import FEDERAL_MIN_WAGE, MIN_GROUP_SAMPLE, REPORT_DIGITS, TOP_N, WAGE_DISTRIBUTION
from .records import RecordBatch

logger = logging.getLogger(__name__)

# Weighted totals shown as whole people
COUNT_KEYS = frozenset({"employment", "average_monthly_employment"})
COUNT_SUFFIXES = ("_count", "_total")
# Raw row counts
SIZE_KEYS = frozenset({"sample_size", "wage_sample_size"})


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def format_metrics(
    raw: Mapping[str, object], digits: int = REPORT_DIGITS
) -> Dict[str, Optional[float]]:
    """Round a ``{metric: value}`` mapping for display; missing values become ``None``."""
    out: Dict[str, Optional[float]] = {}
    for key, value in raw.items():
        if key in SIZE_KEYS:
            out[key] = None if value is None or pd.isna(value) else int(value)
        elif key in COUNT_KEYS or key.endswith(COUNT_SUFFIXES):
            out[key] = weighted.display_count(value)
        else:
            out[key] = weighted.round_or_none(value, digits)
    return out


def named_rows(
    table: pd.DataFrame, dimension: Dimension, lookups: Lookups
) -> List[Dict[str, object]]:
    """Convert an aggregated table into report entries with resolved names.

    Each entry starts with ``<kind>_code`` and ``<kind>_name`` followed by
    the table's metric columns, formatted with :func:`format_metrics`.
    """
    entries: List[Dict[str, object]] = []
    for row in table.to_dict("records"):
        code = int(row.pop("code"))
        entry: Dict[str, object] = {
            dimension.code_key: code,
            dimension.name_key: lookups.name(dimension.column, code, dimension.kind),
        }
        entry.update(format_metrics(row))
        entries.append(entry)
    return entries


# ---------------------------------------------------------------------------
# Monthly record
# ---------------------------------------------------------------------------


def compute_headline_metrics(
    batch: RecordBatch, *, minimum_wage: float = FEDERAL_MIN_WAGE
) -> Dict[str, Optional[float]]:
    """Unrounded headline indicators for one batch."""
    df = batch.frame
    raw: Dict[str, Optional[float]] = {}
    raw.update(weighted.unemployment_rate(df))
    raw.update(weighted.min_wage_incidence(df, minimum_wage))
    raw.update(weighted.labor_force_participation(df))
    raw["median_hourly_wage"] = weighted.median_hourly_wage(df)
    raw.update(weighted.parttime_rate(df))
    raw["youth_participation_rate"] = weighted.youth_participation_rate(df)
    raw["prime_age_participation_rate"] = weighted.prime_age_participation_rate(df)
    raw["median_overtime_hours"] = weighted.median_overtime_hours(df)
    if batch.has("discouraged"):
        raw["discouraged_rate"] = weighted.discouraged_rate(df)
    return raw


def build_monthly_record(
    batch: RecordBatch,
    lookups: Lookups = DEFAULT_LOOKUPS,
    *,
    minimum_wage: float = FEDERAL_MIN_WAGE,
    top_n: int = TOP_N,
    min_sample: int = MIN_GROUP_SAMPLE,
) -> Dict[str, object]:
    """Build the report entry for one month.

    Parameters
    ----------
    batch : RecordBatch
        A single-month batch.
    lookups : Lookups
        Code -> name tables used for the per-group breakdowns.
    minimum_wage : float
        Threshold for ``min_wage_pct``.
    top_n : int
        Length of the ranked lists.
    min_sample : int
        Minimum raw rows for a group to be ranked.

    Returns
    -------
    Dict[str, object]
        ``year``, ``month``, the headline metrics and the per-group arrays
        ``unemployment_by_industry``, ``unemployment_by_occupation`` (major
        groups), ``top_industries``, ``top_occupations``,
        ``overtime_by_industry`` and ``lowest_wage_industries`` (detailed
        codes).
    """
    year, month = batch.period
    df = batch.frame

    record: Dict[str, object] = {"year": year, "month": month}
    record.update(format_metrics(compute_headline_metrics(batch, minimum_wage=minimum_wage)))

    record["unemployment_by_industry"] = named_rows(
        aggregate.unemployment_by_code(df, INDUSTRY_MAJOR), INDUSTRY_MAJOR, lookups
    )
    record["unemployment_by_occupation"] = named_rows(
        aggregate.unemployment_by_code(df, OCCUPATION_MAJOR), OCCUPATION_MAJOR, lookups
    )

    for key, dimension in (
        ("top_industries", INDUSTRY_DETAILED),
        ("top_occupations", OCCUPATION_DETAILED),
    ):
        ranked = aggregate.rank_groups(
            aggregate.employment_by_code(df, dimension),
            "employment",
            top_n,
            descending=True,
            min_sample=min_sample,
        )
        record[key] = named_rows(ranked, dimension, lookups)

    record["overtime_by_industry"] = named_rows(
        aggregate.rank_groups(
            aggregate.median_overtime_by_code(df, INDUSTRY_DETAILED),
            "median_ot_hours",
            top_n,
            descending=True,
            min_sample=min_sample,
        ),
        INDUSTRY_DETAILED,
        lookups,
    )
    record["lowest_wage_industries"] = named_rows(
        aggregate.rank_groups(
            aggregate.median_wage_by_code(df, INDUSTRY_DETAILED),
            "median_hourly_wage",
            top_n,
            descending=False,
            min_sample=min_sample,
        ),
        INDUSTRY_DETAILED,
        lookups,
    )
    return record


# ---------------------------------------------------------------------------
# Long-window sections
# ---------------------------------------------------------------------------


def build_dimension_table(
    combined: RecordBatch,
    dimension: Dimension,
    *,
    distribution: Mapping[str, float] = WAGE_DISTRIBUTION,
) -> pd.DataFrame:
    """Employment and wage distribution per code over a multi-month batch.

    ``average_monthly_employment`` divides by the number of months actually
    present in ``combined``, so months that failed to fetch do not dilute
    it.  ``employment_share`` is the group's percent of employment across
    all valid codes.
    """
    df = combined.frame

    employment = aggregate.employment_by_code(df, dimension)
    if not employment.empty:
        employment = aggregate.add_employment_shares(employment)
        employment["average_monthly_employment"] = [
            aggregate.average_monthly(total, combined.month_count)
            for total in employment["employment"]
        ]
        employment = employment.drop(columns=["employment"])

    wages = aggregate.wage_quantiles_by_code(df, dimension, distribution).rename(
        columns={"sample_size": "wage_sample_size"}
    )

    if employment.empty:
        table = wages
    elif wages.empty:
        table = employment
    else:
        table = employment.merge(wages, on="code", how="outer")
    return table.sort_values("code", ignore_index=True)


def build_dimension_section(
    combined: RecordBatch,
    dimension: Dimension,
    lookups: Lookups = DEFAULT_LOOKUPS,
    *,
    distribution: Mapping[str, float] = WAGE_DISTRIBUTION,
) -> List[Dict[str, object]]:
    logger.info(
        "Computing %d-month %s distributions (%s codes)...",
        combined.month_count,
        dimension.kind,
        dimension.granularity,
    )
    table = build_dimension_table(combined, dimension, distribution=distribution)
    return named_rows(table, dimension, lookups)


def build_window_sections(
    combined: RecordBatch, lookups: Lookups = DEFAULT_LOOKUPS
) -> Dict[str, List[Dict[str, object]]]:
    """``industries`` and ``occupations`` sections (major groups) for the report."""
    return {
        "industries": build_dimension_section(combined, INDUSTRY_MAJOR, lookups),
        "occupations": build_dimension_section(combined, OCCUPATION_MAJOR, lookups),
    }
