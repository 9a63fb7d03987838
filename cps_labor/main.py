"""
CPS labor statistics: fetch the last N months of CPS basic monthly microdata
from the Census API, compute weighted labor-market indicators per month plus
long-window industry/occupation wage distributions, and write one JSON report.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import LOOKBACK_MONTHS, OUTPUT_FILE, ConfigurationError, load_settings
from .output import write_report
from .pipeline import NoDataError, run_pipeline
from .plotting import create_monthly_figure, create_wage_distribution_figure

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Compute weighted labor-market statistics from CPS basic monthly "
            "microdata. Requires CENSUS_API_KEY in the environment."
        )
    )
    parser.add_argument(
        "--end-month",
        default=None,
        help="Last month to include as YYYY-MM (default: CPS_END_MONTH or previous month).",
    )
    parser.add_argument(
        "--lookback-months",
        type=int,
        default=None,
        help=f"Number of months to process (default: CPS_LOOKBACK_MONTHS or {LOOKBACK_MONTHS}).",
    )
    parser.add_argument(
        "--output",
        default=None,
        help=f"Path of the JSON report (default: CPS_OUTPUT_FILE or {OUTPUT_FILE}).",
    )
    parser.add_argument(
        "--plot",
        default=None,
        metavar="HTML_PATH",
        help="Also write an interactive chart of the monthly indicators to this file.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging.")
    return parser.parse_args(argv)


def write_plot(report: dict, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    monthly_fig = create_monthly_figure(report)
    wage_fig = create_wage_distribution_figure(report, "industries")
    with path.open("w", encoding="utf-8") as fh:
        fh.write(monthly_fig.to_html(full_html=False, include_plotlyjs="cdn"))
        fh.write(wage_fig.to_html(full_html=False, include_plotlyjs=False))
    return path


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(
            end_month=args.end_month,
            lookback_months=args.lookback_months,
            output_file=args.output,
        )
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return 2

    try:
        report = run_pipeline(settings)
    except NoDataError as exc:
        logger.error("%s", exc)
        return 1

    output_path = write_report(report, settings.output_file)

    print("\n--- CPS LABOR STATISTICS COMPLETE ---")
    print(
        f"Months with data: {report['lookback_months']} of {settings.lookback_months} requested"
    )
    print(f"Saved report to {output_path}")
    if args.plot:
        plot_path = write_plot(report, args.plot)
        print(f"Saved chart to {plot_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
