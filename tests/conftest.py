"""Shared fixtures: small synthetic CPS batches."""

from typing import Dict, Iterable, List, Tuple

import pandas as pd
import pytest

from cps_labor.records import RecordBatch

# An employed, hourly, private-sector retail worker without a reported wage
DEFAULT_ROW: Dict[str, object] = {
    "count_weight": 100.0,
    "outgoing_rotation_weight": 100.0,
    "hourly_earnings": -0.01,
    "employment_status": 1,
    "class_of_worker": 4,
    "paid_hourly": 1,
    "usual_hours_code": 4,
    "actual_hours": 40,
    "industry_detailed": 22,
    "industry_major": 5,
    "occupation_detailed": 16,
    "occupation_major": 4,
    "age": 35,
}


def build_batch(
    rows: Iterable[Dict[str, object]], period: Tuple[int, int] = (2025, 1)
) -> RecordBatch:
    records: List[Dict[str, object]] = [{**DEFAULT_ROW, **row} for row in rows]
    frame = pd.DataFrame(records, columns=list(DEFAULT_ROW) + _extra_columns(records))
    return RecordBatch.from_frame(frame, [period])


def _extra_columns(records: List[Dict[str, object]]) -> List[str]:
    extra: List[str] = []
    for rec in records:
        for key in rec:
            if key not in DEFAULT_ROW and key not in extra:
                extra.append(key)
    return extra


@pytest.fixture
def make_batch():
    return build_batch


@pytest.fixture
def make_frame():
    def _make(rows, period=(2025, 1)) -> pd.DataFrame:
        return build_batch(rows, period).frame

    return _make
