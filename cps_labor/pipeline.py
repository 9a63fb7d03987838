"""Run orchestration: fetch each target month, compute, and assemble.

The primary entry point is :func:`run_pipeline`.  For each month in the
lookback window it calls the fetch collaborator; a month that cannot be
fetched is skipped (and logged) rather than retried here.  After the loop
the successful months are folded into one combined batch for the
industry/occupation sections.  A run in which no month succeeds raises
:class:`NoDataError` instead of producing an empty report.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

import pandas as pd

from .census_fetch import fetch_cps_month
from .codes import DEFAULT_LOOKUPS, Lookups
from .config import Settings
from .output import assemble_report
from .records import RecordBatch, combine_batches
from .report import build_monthly_record, build_window_sections

logger = logging.getLogger(__name__)

FetchFn = Callable[[int, int, str], Optional[RecordBatch]]


class NoDataError(RuntimeError):
    """Raised when not a single month could be fetched."""


def target_months(end_year: int, end_month: int, count: int) -> List[Tuple[int, int]]:
    """``count`` consecutive months ending at ``end_year-end_month``, newest first."""
    if count < 1:
        raise ValueError(f"count must be at least 1, got {count}.")
    end = pd.Period(year=end_year, month=end_month, freq="M")
    return [((end - i).year, (end - i).month) for i in range(count)]


def run_pipeline(
    settings: Settings,
    *,
    fetch: FetchFn = fetch_cps_month,
    lookups: Lookups = DEFAULT_LOOKUPS,
    include_sections: bool = True,
) -> Dict[str, object]:
    """Fetch, compute and assemble the report for the configured window.

    Parameters
    ----------
    settings : Settings
        Credentials, end month, window length and thresholds.
    fetch : callable, optional
        ``fetch(year, month, api_key) -> RecordBatch | None``.  Defaults to
        the Census API client.
    lookups : Lookups, optional
        Code -> name tables.
    include_sections : bool, optional
        Whether to add the combined-window ``industries``/``occupations``
        sections.

    Returns
    -------
    Dict[str, object]
        The assembled report (see :func:`cps_labor.output.assemble_report`).
    """
    months = target_months(settings.end_year, settings.end_month, settings.lookback_months)
    logger.info(
        "Fetching data for the last %d months through %d-%02d",
        len(months),
        settings.end_year,
        settings.end_month,
    )

    batches: List[RecordBatch] = []
    monthly: List[Dict[str, object]] = []
    for year, month in months:
        logger.info("Processing %d-%02d...", year, month)
        batch = fetch(year, month, settings.api_key)
        if batch is None:
            logger.warning("Skipping %d-%02d: no data fetched", year, month)
            continue

        logger.info("  Computing monthly statistics...")
        monthly.append(
            build_monthly_record(
                batch,
                lookups,
                minimum_wage=settings.minimum_wage,
                top_n=settings.top_n,
            )
        )
        batches.append(batch)

    if not batches:
        raise NoDataError("No data fetched for aggregation period")

    sections: Dict[str, object] = {}
    if include_sections:
        combined = combine_batches(batches)
        sections = build_window_sections(combined, lookups)

    report = assemble_report(monthly, **sections)
    logger.info("%d of %d requested months contributed data", len(batches), len(months))
    return report
