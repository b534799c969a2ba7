"""
Render the daily markdown report from the latest snapshot.
"""

from __future__ import annotations

import argparse
import os
import sys

from rank_sync.config import get_sync_settings
from rank_sync.logging_utils import configure_logging
from rank_sync.reporting import write_daily_report


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate the daily ranking report.")
    parser.add_argument("--top", type=int, default=None, help="Rows per dataset table.")
    args = parser.parse_args()

    settings = get_sync_settings()
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    try:
        report_path = write_daily_report(
            data_dir=settings.data_dir,
            report_dir=settings.report_dir,
            top_n=args.top or settings.report_top_n,
        )
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    print(f"report generated: {report_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
