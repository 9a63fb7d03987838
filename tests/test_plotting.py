"""
Tests for plotting.py figure builders.
"""

from cps_labor.plotting import (
    create_monthly_figure,
    create_wage_distribution_figure,
    monthly_frame,
)

REPORT = {
    "lookback_months": 2,
    "monthly": [
        {
            "year": 2025,
            "month": 2,
            "unemployment_rate": 4.1,
            "median_hourly_wage": None,
            "top_industries": [],
        },
        {
            "year": 2025,
            "month": 1,
            "unemployment_rate": 4.3,
            "median_hourly_wage": None,
            "top_industries": [],
        },
    ],
    "industries": [
        {"industry_code": 5, "industry_name": "Trade", "q1": 12, "q2": 15, "q3": 20, "p10": 10, "p90": 28},
        {"industry_code": 11, "industry_name": "Leisure", "q1": 9, "q2": 11, "q3": 14, "p10": 8, "p90": 18},
        {"industry_code": 2, "industry_name": "Mining", "q2": None},
    ],
}


def test_monthly_frame_sorted_and_scalar_only():
    df = monthly_frame(REPORT)

    assert list(df["unemployment_rate"]) == [4.3, 4.1]
    assert "top_industries" not in df.columns


def test_monthly_figure_skips_missing_and_null_panels():
    fig = create_monthly_figure(REPORT)

    assert len(fig.data) == 1
    assert list(fig.data[0].y) == [4.3, 4.1]


def test_empty_report_gives_empty_figures():
    assert len(create_monthly_figure({"monthly": []}).data) == 0
    assert len(create_wage_distribution_figure({}, "occupations").data) == 0


def test_wage_distribution_sorted_by_median():
    fig = create_wage_distribution_figure(REPORT, "industries")

    assert len(fig.data) == 1
    assert list(fig.data[0].y) == ["Leisure", "Trade"]
    assert list(fig.data[0].median) == [11, 15]
