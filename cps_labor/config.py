"""
Configuration constants for the CPS labor statistics pipeline.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import date
from typing import Dict, Mapping, Optional, Tuple

import pandas as pd

# ======================================================
#  DATA SOURCES / CONSTANTS
# ======================================================
CENSUS_BASE_URL: str = "https://api.census.gov/data"
API_KEY_ENV: str = "CENSUS_API_KEY"

FEDERAL_MIN_WAGE: float = 7.25
LOOKBACK_MONTHS: int = 12
OUTPUT_FILE: str = "data/labor_stats.json"

REQUEST_TIMEOUT_S: int = 120
MAX_RETRIES: int = 3

MONTH_ABBREVIATIONS: Dict[int, str] = {
    1: "jan", 2: "feb", 3: "mar", 4: "apr",
    5: "may", 6: "jun", 7: "jul", 8: "aug",
    9: "sep", 10: "oct", 11: "nov", 12: "dec",
}

# CPS variable -> column name used throughout the package (order matters: it is
# the order of the `get=` parameter sent to the API)
REQUIRED_VARIABLES: Dict[str, str] = {
    "PWCMPWGT": "count_weight",
    "PWORWGT": "outgoing_rotation_weight",
    "PTERNHLY": "hourly_earnings",
    "PEMLR": "employment_status",
    "PEIO1COW": "class_of_worker",
    "PEERNHRY": "paid_hourly",
    "PRHRUSL": "usual_hours_code",
    "PEHRACT1": "actual_hours",
    "PRDTIND1": "industry_detailed",
    "PRMJIND1": "industry_major",
    "PRDTOCC1": "occupation_detailed",
    "PRMJOCC1": "occupation_major",
    "PRTAGE": "age",
}

# Only published in some vintages; absence disables the dependent metric
OPTIONAL_VARIABLES: Dict[str, str] = {
    "PRDISC": "discouraged",
}

COLUMN_NAMES: Dict[str, str] = {**REQUIRED_VARIABLES, **OPTIONAL_VARIABLES}

# ======================================================
#  CPS CODE SETS
# ======================================================
EMPLOYED_CODES: Tuple[int, ...] = (1, 2)
UNEMPLOYED_CODES: Tuple[int, ...] = (3, 4)
NOT_IN_LABOR_FORCE_CODES: Tuple[int, ...] = (5, 6, 7)
LABOR_FORCE_CODES: Tuple[int, ...] = EMPLOYED_CODES + UNEMPLOYED_CODES
CIVILIAN_POPULATION_CODES: Tuple[int, ...] = LABOR_FORCE_CODES + NOT_IN_LABOR_FORCE_CODES

# PEIO1COW: 4 private for-profit, 5 private nonprofit, 7 self-employed incorporated
PRIVATE_SECTOR_CODES: Tuple[int, ...] = (4, 5, 7)
PAID_HOURLY_CODE: int = 1
DISCOURAGED_CODE: int = 1

# PRHRUSL: 3 = 35-39, 4 = 40, 5 = 41-49, 6 = 50+, 7 = varies (full time)
FULL_TIME_USUAL_HOURS_CODES: Tuple[int, ...] = (3, 4, 5, 6, 7)
PART_TIME_HOURS_THRESHOLD: float = 35.0
OVERTIME_BASELINE_HOURS: float = 40.0

YOUTH_MAX_AGE_EXCLUSIVE: int = 18
PRIME_AGE_BOUNDS: Tuple[int, int] = (25, 54)

# Sentinels published by the API in place of missing values
MISSING_WAGE_SENTINELS: Tuple[float, ...] = (-0.01, -1.0)

# ======================================================
#  AGGREGATION DEFAULTS
# ======================================================
MIN_GROUP_SAMPLE: int = 30
TOP_N: int = 10
# Long-window wage distribution: output key -> percentile
WAGE_DISTRIBUTION: Dict[str, int] = {
    "min": 0,
    "p10": 10,
    "q1": 25,
    "q2": 50,
    "q3": 75,
    "p90": 90,
    "max": 100,
}
REPORT_DIGITS: int = 2

# CPS_END_MONTH / --end-month
YEAR_MONTH_PATTERN = re.compile(r"\d{4}-\d{2}")


class ConfigurationError(ValueError):
    """Raised when credentials or the requested date range are unusable."""


@dataclass(frozen=True)
class Settings:
    api_key: str
    end_year: int
    end_month: int
    lookback_months: int = LOOKBACK_MONTHS
    output_file: str = OUTPUT_FILE
    minimum_wage: float = FEDERAL_MIN_WAGE
    top_n: int = TOP_N


def default_end_month(today: Optional[date] = None) -> Tuple[int, int]:
    """Previous calendar month; the current month is usually not yet published."""
    period = pd.Period(today or date.today(), freq="M") - 1
    return period.year, period.month


def parse_year_month(value: str) -> Tuple[int, int]:
    """Parse ``YYYY-MM`` into ``(year, month)``."""
    text = str(value).strip()
    if not YEAR_MONTH_PATTERN.fullmatch(text):
        raise ConfigurationError(f"Cannot parse month {value!r}; expected YYYY-MM.")
    try:
        period = pd.Period(text, freq="M")
    except (ValueError, TypeError) as exc:
        raise ConfigurationError(f"Cannot parse month {value!r}; expected YYYY-MM.") from exc
    if pd.isna(period):
        raise ConfigurationError(f"Cannot parse month {value!r}; expected YYYY-MM.")
    return period.year, period.month


def _positive_int(value: object, name: str) -> int:
    try:
        parsed = int(str(value).strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}.") from exc
    if parsed < 1:
        raise ConfigurationError(f"{name} must be at least 1, got {parsed}.")
    return parsed


def load_settings(
    env: Optional[Mapping[str, str]] = None,
    *,
    end_month: Optional[str] = None,
    lookback_months: Optional[int] = None,
    output_file: Optional[str] = None,
    today: Optional[date] = None,
) -> Settings:
    """
    Build run settings from the environment, with explicit overrides winning.

    Environment variables:
    - CENSUS_API_KEY (required)
    - CPS_END_MONTH (``YYYY-MM``, default: previous calendar month)
    - CPS_LOOKBACK_MONTHS (default: ``LOOKBACK_MONTHS``)
    - CPS_OUTPUT_FILE (default: ``OUTPUT_FILE``)

    Raises ``ConfigurationError`` before anything is fetched.
    """
    env = os.environ if env is None else env

    api_key = (env.get(API_KEY_ENV) or "").strip()
    if not api_key:
        raise ConfigurationError(f"{API_KEY_ENV} environment variable not set")

    end_raw = end_month if end_month is not None else env.get("CPS_END_MONTH")
    if end_raw:
        end_year, end_mon = parse_year_month(end_raw)
    else:
        end_year, end_mon = default_end_month(today)

    lookback_raw = (
        lookback_months if lookback_months is not None else env.get("CPS_LOOKBACK_MONTHS")
    )
    lookback = (
        _positive_int(lookback_raw, "lookback months")
        if lookback_raw not in (None, "")
        else LOOKBACK_MONTHS
    )

    return Settings(
        api_key=api_key,
        end_year=end_year,
        end_month=end_mon,
        lookback_months=lookback,
        output_file=output_file or env.get("CPS_OUTPUT_FILE") or OUTPUT_FILE,
    )
