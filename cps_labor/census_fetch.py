"""
Handles interactions with the Census Bureau CPS basic monthly API.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, List, Optional

import pandas as pd
import requests

from .config import (
    CENSUS_BASE_URL,
    COLUMN_NAMES,
    MAX_RETRIES,
    MONTH_ABBREVIATIONS,
    REQUEST_TIMEOUT_S,
    REQUIRED_VARIABLES,
)
from .records import RecordBatch

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT_S: int = 30


class CensusPayloadError(ValueError):
    """Raised when the API answers with something that is not a usable table."""


def build_url(year: int, month: int) -> str:
    return f"{CENSUS_BASE_URL}/{year}/cps/basic/{MONTH_ABBREVIATIONS[month]}"


def parse_payload(payload: Any, year: int, month: int) -> RecordBatch:
    """Turn the API's JSON table (header row + data rows) into a RecordBatch.

    Fields that do not parse as numbers become missing values in the batch;
    only a structurally broken payload raises ``CensusPayloadError``.
    """
    if not isinstance(payload, list) or not payload or not isinstance(payload[0], list):
        raise CensusPayloadError("Expected a JSON array with a header row.")

    header = [str(name).upper() for name in payload[0]]
    missing = [var for var in REQUIRED_VARIABLES if var not in header]
    if missing:
        raise CensusPayloadError(f"Response lacks required variables: {missing}")

    rows = payload[1:]
    if not rows:
        raise CensusPayloadError("Response contains no records.")
    if any(not isinstance(row, list) or len(row) != len(header) for row in rows):
        raise CensusPayloadError("Response rows do not match the header width.")

    frame = pd.DataFrame(rows, columns=header).rename(columns=COLUMN_NAMES)
    return RecordBatch.from_frame(frame, [(year, month)])


def fetch_cps_month(
    year: int,
    month: int,
    api_key: str,
    *,
    max_retries: int = MAX_RETRIES,
    timeout: int = REQUEST_TIMEOUT_S,
    session: Optional[requests.Session] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Optional[RecordBatch]:
    """Fetch one month of CPS microdata.

    Retries with exponential backoff (2, 4, 8... seconds).  If the vintage
    rejects an optional variable (HTTP 400) the request is repeated at once
    with the required variables only.  Returns ``None`` when every attempt
    fails; the caller decides what to do with a missing month.
    """
    http = session or requests
    url = build_url(year, month)
    label = f"{year}-{month:02d}"
    variables: List[str] = list(COLUMN_NAMES)

    def request(names: List[str]) -> requests.Response:
        return http.get(
            url,
            params={"get": ",".join(names), "key": api_key},
            timeout=(CONNECT_TIMEOUT_S, timeout),
        )

    for attempt in range(1, max_retries + 1):
        try:
            logger.info("  Attempt %d/%d...", attempt, max_retries)
            resp = request(variables)
            if resp.status_code == 400 and len(variables) > len(REQUIRED_VARIABLES):
                logger.warning(
                    "%s rejected optional variables; retrying with required variables only",
                    label,
                )
                variables = list(REQUIRED_VARIABLES)
                resp = request(variables)

            resp.raise_for_status()
            batch = parse_payload(resp.json(), year, month)
            logger.info("  Fetched %d records for %s", len(batch), label)
            return batch

        except (requests.RequestException, ValueError, KeyError) as exc:
            if attempt < max_retries:
                wait_time = 2**attempt
                logger.warning(
                    "Attempt %d failed for %s: %s. Retrying in %d seconds...",
                    attempt,
                    label,
                    exc,
                    wait_time,
                )
                sleep(wait_time)
            else:
                logger.warning(
                    "Failed to fetch data for %s after %d attempts: %s",
                    label,
                    max_retries,
                    exc,
                )
    return None
