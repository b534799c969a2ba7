"""
APScheduler-based daily synchronization.

One cron job, ``daily_rank_sync``, runs the full pipeline followed by the
daily report. ``max_instances=1`` keeps runs non-overlapping, which the
history ledger relies on since it takes no file lock.
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.blocking import BlockingScheduler

from rank_sync.config import SyncSettings, get_sync_settings
from rank_sync.engine import RankSyncEngine
from rank_sync.errors import RankSyncError
from rank_sync.reporting import write_daily_report

logger = logging.getLogger(__name__)

JOB_ID = "daily_rank_sync"


def run_daily_sync(settings: SyncSettings | None = None) -> None:
    """
    Run one synchronization and render the report; failures are logged only.
    """

    resolved = settings or get_sync_settings()
    logger.info("Scheduler: daily_rank_sync starting")
    try:
        summary = RankSyncEngine(settings=resolved).run()
    except RankSyncError as exc:
        logger.error("Scheduler: daily_rank_sync failed: %s", exc)
        return

    logger.info(
        "Scheduler: daily_rank_sync date=%s succeeded=%d skipped=%d",
        summary.date,
        summary.succeeded,
        summary.skipped,
    )
    try:
        write_daily_report(
            data_dir=resolved.data_dir,
            report_dir=resolved.report_dir,
            top_n=resolved.report_top_n,
        )
    except (OSError, ValueError) as exc:
        logger.warning("Scheduler: daily report failed: %s", exc)

    logger.info("Scheduler: daily_rank_sync complete")


def build_scheduler(settings: SyncSettings | None = None) -> BlockingScheduler:
    """
    Return a configured but not yet started ``BlockingScheduler``.
    """

    resolved = settings or get_sync_settings()
    scheduler = BlockingScheduler(timezone="UTC")
    scheduler.add_job(
        run_daily_sync,
        trigger="cron",
        hour=resolved.schedule_hour,
        minute=resolved.schedule_minute,
        kwargs={"settings": resolved},
        id=JOB_ID,
        name="Daily ranking synchronization",
        replace_existing=True,
        misfire_grace_time=3600,
        coalesce=True,
        max_instances=1,
    )
    return scheduler
