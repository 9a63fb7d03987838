"""
Tests for pipeline.py: month loop, skipped months and fatal conditions.
"""

import pytest

from cps_labor.config import Settings
from cps_labor.pipeline import NoDataError, run_pipeline, target_months


def _settings(**overrides):
    values = dict(api_key="test-key", end_year=2025, end_month=2, lookback_months=3)
    values.update(overrides)
    return Settings(**values)


def test_target_months_cross_year_boundary():
    assert target_months(2025, 2, 4) == [(2025, 2), (2025, 1), (2024, 12), (2024, 11)]


def test_target_months_requires_positive_count():
    with pytest.raises(ValueError):
        target_months(2025, 2, 0)


def test_failed_month_is_skipped(make_batch):
    rows = [{"hourly_earnings": 10.0} for _ in range(30)]
    calls = []

    def fake_fetch(year, month, api_key):
        calls.append((year, month, api_key))
        if (year, month) == (2025, 1):
            return None
        return make_batch(rows, period=(year, month))

    report = run_pipeline(_settings(), fetch=fake_fetch)

    assert calls == [(2025, 2, "test-key"), (2025, 1, "test-key"), (2024, 12, "test-key")]
    assert report["lookback_months"] == 2
    assert [(m["year"], m["month"]) for m in report["monthly"]] == [(2024, 12), (2025, 2)]
    # 30 rows x 100 weight per month, averaged over the 2 months that arrived
    assert report["industries"][0]["average_monthly_employment"] == 3000


def test_monthly_sorted_oldest_first(make_batch):
    def fake_fetch(year, month, api_key):
        return make_batch([{}], period=(year, month))

    report = run_pipeline(_settings(lookback_months=5), fetch=fake_fetch)

    periods = [(m["year"], m["month"]) for m in report["monthly"]]
    assert periods == sorted(periods)
    assert periods[0] == (2024, 10)


def test_no_months_fetched_is_fatal():
    with pytest.raises(NoDataError):
        run_pipeline(_settings(), fetch=lambda year, month, api_key: None)


def test_sections_optional(make_batch):
    report = run_pipeline(
        _settings(lookback_months=1),
        fetch=lambda year, month, api_key: make_batch([{}], period=(year, month)),
        include_sections=False,
    )

    assert set(report) == {"generated_at", "lookback_months", "monthly"}


def test_minimum_wage_setting_is_used(make_batch):
    rows = [{"hourly_earnings": 9.0}, {"hourly_earnings": 20.0}]

    report = run_pipeline(
        _settings(lookback_months=1, minimum_wage=10.0),
        fetch=lambda year, month, api_key: make_batch(rows, period=(year, month)),
    )

    assert report["monthly"][0]["min_wage_pct"] == 50.0
