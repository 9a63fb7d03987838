"""Assemble the final report and write it to disk.

The report is a single JSON document::

    {
      "generated_at": "2025-10-01T12:00:00+00:00",
      "lookback_months": 12,
      "monthly": [...],          # oldest -> newest
      "industries": [...],       # optional
      "occupations": [...]       # optional
    }
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    """Return the current UTC timestamp as ISO string (no microseconds)."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def assemble_report(
    monthly: List[Dict[str, object]],
    *,
    industries: Optional[List[Dict[str, object]]] = None,
    occupations: Optional[List[Dict[str, object]]] = None,
    generated_at: Optional[str] = None,
) -> Dict[str, object]:
    """Merge monthly records and aggregate sections into the report structure.

    Monthly records are sorted by ``(year, month)`` regardless of the order
    they were computed in, and ``lookback_months`` counts the months that
    actually contributed.
    """
    report: Dict[str, object] = {
        "generated_at": generated_at or utc_now_iso(),
        "lookback_months": len(monthly),
        "monthly": sorted(monthly, key=lambda rec: (rec["year"], rec["month"])),
    }
    if industries is not None:
        report["industries"] = industries
    if occupations is not None:
        report["occupations"] = occupations
    return report


def write_report(report: Dict[str, object], path: str | Path) -> Path:
    """Write the report as pretty-printed JSON atomically.

    The JSON is first written to a temporary file in the same directory
    and then renamed to the final location, so an interrupted run never
    leaves a half-written report behind.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    # allow_nan=False: a NaN reaching this point is a bug upstream
    tmp_path.write_text(json.dumps(report, indent=2, allow_nan=False), encoding="utf-8")
    tmp_path.replace(path)
    logger.info("Report written to %s", path)
    return path
