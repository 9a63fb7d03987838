"""
Unit tests for aggregate.py: grouping by industry/occupation and ranking.
"""

import pandas as pd
import pytest

from cps_labor import aggregate, cohorts, weighted
from cps_labor.aggregate import INDUSTRY_DETAILED, INDUSTRY_MAJOR, OCCUPATION_MAJOR


def _rows(n, **fields):
    return [dict(fields) for _ in range(n)]


# =============================================================================
# Grouping
# =============================================================================

def test_employment_groups_sum_to_employed_minus_not_applicable(make_frame):
    df = make_frame(
        _rows(3, industry_major=1, count_weight=100.0)
        + _rows(2, industry_major=5, count_weight=250.0)
        + _rows(2, industry_major=0, count_weight=400.0)        # not applicable
        + _rows(1, industry_major="?", count_weight=50.0)       # unparseable
        + _rows(4, industry_major=5, employment_status=5)       # not employed
    )

    table = aggregate.employment_by_code(df, INDUSTRY_MAJOR)

    employed_total = weighted.weighted_total(cohorts.employed(df))
    not_applicable = 2 * 400.0 + 50.0
    assert table["code"].tolist() == [1, 5]
    assert table["employment"].sum() == pytest.approx(employed_total - not_applicable)
    assert table["sample_size"].tolist() == [3, 2]


def test_groups_sorted_by_code(make_frame):
    df = make_frame([{"industry_major": c} for c in (9, 2, 14, 2)])

    table = aggregate.employment_by_code(df, INDUSTRY_MAJOR)

    assert table["code"].tolist() == [2, 9, 14]


def test_granularities_are_separate(make_frame):
    df = make_frame([{"industry_detailed": 40, "industry_major": 10}])

    detailed = aggregate.employment_by_code(df, INDUSTRY_DETAILED)
    major = aggregate.employment_by_code(df, INDUSTRY_MAJOR)

    assert detailed["code"].tolist() == [40]
    assert major["code"].tolist() == [10]


def test_major_range_excludes_detailed_codes(make_frame):
    # 22 is a valid detailed code but not a major group
    df = make_frame([{"industry_major": 22}])

    assert aggregate.employment_by_code(df, INDUSTRY_MAJOR).empty


def test_empty_aggregation(make_frame):
    df = make_frame([{"employment_status": 5}])

    table = aggregate.employment_by_code(df, INDUSTRY_MAJOR)

    assert table.empty
    assert list(table.columns) == ["code", "sample_size"]


def test_unemployment_by_code(make_frame):
    df = make_frame(
        _rows(9, occupation_major=3, employment_status=1)
        + _rows(1, occupation_major=3, employment_status=3)
        + _rows(4, occupation_major=7, employment_status=2)
        + _rows(5, occupation_major=7, employment_status=6)
    )

    table = aggregate.unemployment_by_code(df, OCCUPATION_MAJOR).set_index("code")

    assert table.loc[3, "unemployment_rate"] == pytest.approx(10.0)
    assert table.loc[7, "unemployment_rate"] == pytest.approx(0.0)
    assert table.loc[7, "labor_force_count"] == 400.0


def test_median_wage_by_code(make_frame):
    df = make_frame(
        [{"industry_detailed": 46, "hourly_earnings": w} for w in (9.0, 11.0, 13.0)]
        + [{"industry_detailed": 32, "hourly_earnings": w} for w in (30.0, 40.0, -0.01)]
    )

    table = aggregate.median_wage_by_code(df, INDUSTRY_DETAILED).set_index("code")

    assert table.loc[46, "median_hourly_wage"] == 11.0
    assert table.loc[32, "median_hourly_wage"] == 30.0
    assert table.loc[32, "sample_size"] == 2


def test_wage_quantiles_by_code(make_frame):
    df = make_frame([{"industry_major": 4, "hourly_earnings": float(w)} for w in range(1, 11)])

    table = aggregate.wage_quantiles_by_code(df, INDUSTRY_MAJOR)
    row = table.iloc[0]

    assert row["min"] == 1.0
    assert row["p10"] == 1.0
    assert row["q2"] == 5.0
    assert row["p90"] == 9.0
    assert row["max"] == 10.0


def test_median_overtime_by_code(make_frame):
    df = make_frame(
        [{"industry_detailed": 4, "usual_hours_code": 6, "actual_hours": h} for h in (50, 52, 60)]
        + [{"industry_detailed": 4, "usual_hours_code": 6, "actual_hours": 80, "paid_hourly": 2}]
    )

    table = aggregate.median_overtime_by_code(df, INDUSTRY_DETAILED)

    assert table["median_ot_hours"].tolist() == [12.0]
    assert table["sample_size"].tolist() == [3]


# =============================================================================
# Ranking
# =============================================================================

def test_rank_excludes_small_samples():
    table = pd.DataFrame(
        {
            "code": [1, 2, 3],
            "sample_size": [29, 30, 500],
            "employment": [9e9, 10.0, 20.0],
        }
    )

    ranked = aggregate.rank_groups(table, "employment", n=10, descending=True)

    assert ranked["code"].tolist() == [3, 2]


def test_rank_ties_broken_by_code():
    table = pd.DataFrame(
        {
            "code": [7, 3, 5, 1],
            "sample_size": [50, 50, 50, 50],
            "median_hourly_wage": [12.0, 12.0, 9.0, 15.0],
        }
    )

    lowest = aggregate.rank_groups(table, "median_hourly_wage", n=3, descending=False)
    highest = aggregate.rank_groups(table, "median_hourly_wage", n=3, descending=True)

    assert lowest["code"].tolist() == [5, 3, 7]
    assert highest["code"].tolist() == [1, 3, 7]


def test_rank_skips_missing_metric():
    table = pd.DataFrame(
        {"code": [1, 2], "sample_size": [40, 40], "unemployment_rate": [None, 4.0]}
    )

    ranked = aggregate.rank_groups(table, "unemployment_rate", n=5)

    assert ranked["code"].tolist() == [2]


def test_rank_empty_table():
    table = pd.DataFrame(columns=["code", "sample_size"])

    assert aggregate.rank_groups(table, "employment").empty


# =============================================================================
# Window helpers
# =============================================================================

def test_average_monthly_uses_actual_month_count():
    assert aggregate.average_monthly(3600.0, 3) == 1200.0
    with pytest.raises(ValueError):
        aggregate.average_monthly(3600.0, 0)


def test_employment_shares():
    table = pd.DataFrame({"code": [1, 2], "sample_size": [1, 1], "employment": [25.0, 75.0]})

    shares = aggregate.add_employment_shares(table)

    assert shares["employment_share"].tolist() == [25.0, 75.0]
    assert "employment_share" not in table.columns
