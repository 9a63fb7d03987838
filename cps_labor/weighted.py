"""Survey-weighted statistics over record-batch frames.

Two weight columns exist and they are not interchangeable:

* ``count_weight`` (PWCMPWGT) scales respondents to population counts and is
  used for every labor-force and composition statistic.
* ``outgoing_rotation_weight`` (PWORWGT) is the earnings weight and is used
  for wage statistics.

Every function here keeps full floating-point precision; rounding for
display happens in :mod:`cps_labor.report`.  When a denominator population
has no weight the statistic is ``None`` (never ``NaN`` and never an
exception).
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Sequence, Union

import numpy as np
import pandas as pd

from . import cohorts
from .config import OVERTIME_BASELINE_HOURS, PART_TIME_HOURS_THRESHOLD

COUNT_WEIGHT: str = "count_weight"
EARNINGS_WEIGHT: str = "outgoing_rotation_weight"

ArrayLike = Union[pd.Series, Sequence[float], np.ndarray]


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------


def weighted_total(df: pd.DataFrame, weight: str = COUNT_WEIGHT) -> float:
    """Sum of ``weight`` over the rows of ``df`` (0.0 for an empty frame)."""
    if df.empty:
        return 0.0
    return float(df[weight].sum())


def safe_ratio(numerator: float, denominator: float, scale: float = 100.0) -> Optional[float]:
    if denominator == 0:
        return None
    return scale * numerator / denominator


def weighted_rate(
    numerator: pd.DataFrame,
    denominator: pd.DataFrame,
    *,
    numerator_weight: str = COUNT_WEIGHT,
    denominator_weight: Optional[str] = None,
    scale: float = 100.0,
) -> Optional[float]:
    """Return ``scale * sum(numerator weight) / sum(denominator weight)``.

    Parameters
    ----------
    numerator, denominator : pd.DataFrame
        Sub-populations; the numerator is normally a filter of the
        denominator.
    numerator_weight : str
        Weight column summed over ``numerator``.
    denominator_weight : str, optional
        Weight column summed over ``denominator``; defaults to
        ``numerator_weight``.
    scale : float
        100 for a percentage, 100_000 for a per-100k rate, 1 for a share.

    Returns
    -------
    Optional[float]
        ``None`` when the denominator's weighted total is zero.
    """
    denominator_weight = denominator_weight or numerator_weight
    return safe_ratio(
        weighted_total(numerator, numerator_weight),
        weighted_total(denominator, denominator_weight),
        scale,
    )


def _float_array(values: ArrayLike) -> np.ndarray:
    return pd.Series(values).to_numpy(dtype="float64", na_value=np.nan)


def weighted_percentile(values: ArrayLike, weights: ArrayLike, p: float) -> Optional[float]:
    """Weighted order-statistic percentile.

    Observations are sorted by value and the result is the value at the
    first position where the cumulative weight reaches ``p / 100`` of the
    total weight.  There is no interpolation and equal values are not
    merged.  Missing values and non-positive weights are ignored, so
    ``p = 0`` yields the minimum and ``p = 100`` the maximum.

    Returns ``None`` when nothing with positive weight remains.
    """
    if not 0 <= p <= 100:
        raise ValueError(f"Percentile must be within [0, 100], got {p}.")

    vals = _float_array(values)
    wts = _float_array(weights)
    if vals.shape != wts.shape:
        raise ValueError(
            f"values and weights differ in length ({vals.size} vs {wts.size})."
        )

    keep = ~np.isnan(vals) & ~np.isnan(wts) & (wts > 0)
    vals, wts = vals[keep], wts[keep]
    if vals.size == 0:
        return None

    order = np.argsort(vals, kind="stable")
    sorted_vals = vals[order]
    cumulative = np.cumsum(wts[order])
    # cum >= p% of total, tested as 100 * cum >= p * total
    idx = int(np.searchsorted(cumulative * 100.0, p * cumulative[-1], side="left"))
    return float(sorted_vals[min(idx, sorted_vals.size - 1)])


def weighted_median(values: ArrayLike, weights: ArrayLike) -> Optional[float]:
    return weighted_percentile(values, weights, 50)


def weighted_quantiles(
    values: ArrayLike, weights: ArrayLike, percentiles: Iterable[float]
) -> Dict[float, Optional[float]]:
    """Several percentiles of the same observations, keyed by percentile."""
    return {p: weighted_percentile(values, weights, p) for p in percentiles}


def round_or_none(value: Optional[float], digits: int = 2) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    return round(float(value), digits)


def display_count(total: Optional[float]) -> Optional[int]:
    """Round a weighted total to whole people for display only."""
    if total is None or pd.isna(total):
        return None
    return int(round(float(total)))


# ---------------------------------------------------------------------------
# Labor-market indicators
# ---------------------------------------------------------------------------


def unemployment_rate(df: pd.DataFrame) -> Dict[str, Optional[float]]:
    lf = cohorts.labor_force(df)
    unemp = cohorts.unemployed(lf)
    return {
        "unemployment_rate": weighted_rate(unemp, lf),
        "unemployed_count": weighted_total(unemp),
        "labor_force_count": weighted_total(lf),
    }


def min_wage_incidence(df: pd.DataFrame, minimum_wage: float) -> Dict[str, Optional[float]]:
    """Share of hourly private-sector workers paid at or below ``minimum_wage``.

    The numerator (workers with ``0 < wage <= minimum_wage``) is summed on
    the outgoing-rotation weight and the denominator (all employed hourly
    private-sector workers, with or without a reported wage) on the count
    weight.  This mix of weights is the CPS convention for this measure.
    """
    universe = cohorts.employed_hourly_private(df)
    wages = cohorts.valid_wage(universe)
    at_or_below = cohorts.select(wages, wages["hourly_earnings"] <= minimum_wage)
    return {
        "min_wage_pct": weighted_rate(
            at_or_below,
            universe,
            numerator_weight=EARNINGS_WEIGHT,
            denominator_weight=COUNT_WEIGHT,
        ),
        "min_wage_count": weighted_total(at_or_below, EARNINGS_WEIGHT),
        "min_wage_total": weighted_total(universe, COUNT_WEIGHT),
    }


def labor_force_participation(df: pd.DataFrame) -> Dict[str, Optional[float]]:
    population = cohorts.civilian_population(df)
    lf = cohorts.labor_force(population)
    return {
        "labor_force_participation_rate": weighted_rate(lf, population),
        "labor_force_count": weighted_total(lf),
        "total_population_count": weighted_total(population),
    }


def youth_participation_rate(df: pd.DataFrame) -> Optional[float]:
    population = cohorts.youth(cohorts.civilian_population(df))
    return weighted_rate(cohorts.labor_force(population), population)


def prime_age_participation_rate(df: pd.DataFrame) -> Optional[float]:
    population = cohorts.prime_age(cohorts.civilian_population(df))
    return weighted_rate(cohorts.labor_force(population), population)


def median_hourly_wage(df: pd.DataFrame) -> Optional[float]:
    """Median wage of employed hourly private-sector workers with a valid wage."""
    universe = cohorts.valid_wage(cohorts.employed_hourly_private(df))
    return weighted_median(universe["hourly_earnings"], universe[EARNINGS_WEIGHT])


def parttime_rate(df: pd.DataFrame) -> Dict[str, Optional[float]]:
    """Part-time = fewer than 35 hours actually worked in the reference week."""
    workers = cohorts.valid_actual_hours(cohorts.employed(df))
    part_time = cohorts.select(workers, workers["actual_hours"] < PART_TIME_HOURS_THRESHOLD)
    return {
        "parttime_employment_rate": weighted_rate(part_time, workers),
        "parttime_count": weighted_total(part_time),
        "total_employed_count": weighted_total(workers),
    }


def median_overtime_hours(df: pd.DataFrame) -> Optional[float]:
    """Weighted median actual hours of full-time workers, minus 40.

    Negative values mean the nominally full-time group worked less than 40
    hours at the median and are reported as they are.
    """
    workers = cohorts.valid_actual_hours(cohorts.full_time(cohorts.employed(df)))
    median_hours = weighted_median(workers["actual_hours"], workers[COUNT_WEIGHT])
    if median_hours is None:
        return None
    return median_hours - OVERTIME_BASELINE_HOURS


def discouraged_rate(df: pd.DataFrame, scale: float = 100.0) -> Optional[float]:
    """Discouraged workers relative to the labor force plus discouraged workers.

    ``None`` for vintages that do not publish the discouraged-worker recode.
    """
    if "discouraged" not in df.columns:
        return None
    population = cohorts.civilian_population(df)
    discouraged = weighted_total(cohorts.discouraged_workers(population))
    lf = weighted_total(cohorts.labor_force(population))
    return safe_ratio(discouraged, lf + discouraged, scale)
