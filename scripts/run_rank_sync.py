"""
Run ranking synchronization from CLI.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import os
import sys

from rank_sync.config import get_sync_settings
from rank_sync.config.loader import parse_dimension_list
from rank_sync.engine import RankSyncEngine
from rank_sync.errors import RankSyncError
from rank_sync.jobs import build_scheduler
from rank_sync.logging_utils import configure_logging


def main() -> int:
    parser = argparse.ArgumentParser(description="Sync App Store ranking snapshots.")
    parser.add_argument("--region", action="append", default=None, help="Region code; repeatable.")
    parser.add_argument("--category", action="append", default=None, help="Category; repeatable.")
    parser.add_argument("--feed", action="append", default=None, help="Feed id or alias; repeatable.")
    parser.add_argument("--limit", type=int, default=None, help="Max items per dataset.")
    parser.add_argument("--concurrency", type=int, default=None, help="Concurrent fetch workers.")
    parser.add_argument(
        "--schedule",
        action="store_true",
        help="Run as a daily scheduler instead of syncing once.",
    )
    args = parser.parse_args()

    settings = get_sync_settings()
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    overrides: dict[str, object] = {}
    if args.region:
        overrides["regions"] = parse_dimension_list(",".join(args.region), settings.regions)
    if args.category:
        overrides["categories"] = parse_dimension_list(",".join(args.category), settings.categories)
    if args.feed:
        overrides["feeds"] = parse_dimension_list(",".join(args.feed), settings.feeds)
    if args.limit is not None:
        overrides["item_limit"] = args.limit
    if args.concurrency is not None:
        overrides["concurrency_limit"] = args.concurrency
    if overrides:
        settings = dataclasses.replace(settings, **overrides)

    if args.schedule:
        build_scheduler(settings).start()
        return 0

    try:
        summary = RankSyncEngine(settings=settings).run()
    except RankSyncError as exc:
        print(f"rank sync failed: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(dataclasses.asdict(summary), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
