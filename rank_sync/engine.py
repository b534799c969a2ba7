"""
Rank synchronization engine.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from datetime import date, datetime, timezone
from functools import partial

import requests

from rank_sync.aggregation import build_aggregates, partition_outcomes
from rank_sync.client import RetryingFetchClient
from rank_sync.config.models import SyncSettings
from rank_sync.errors import NoDatasetsSucceededError
from rank_sync.feeds import normalize_feed_alias
from rank_sync.fetcher import DatasetFetcher
from rank_sync.logging_utils import log_event
from rank_sync.storage import HistoryLedger, ShardedSnapshotWriter
from rank_sync.task_pool import BoundedTaskPool
from rank_sync.types import Dataset, FetchTask, SyncRunSummary, unique_in_order

logger = logging.getLogger(__name__)


def build_tasks(settings: SyncSettings) -> list[FetchTask]:
    """
    Expand the configured dimensions, region-major, into fetch tasks.

    Feeds are resolved to canonical ids first, so two spellings of the same
    feed produce a single task.
    """

    feeds = unique_in_order(normalize_feed_alias(feed) for feed in settings.feeds)
    return [
        FetchTask(region=region, category=category, feed=feed)
        for region, category, feed in itertools.product(
            settings.regions,
            settings.categories,
            feeds,
        )
    ]


class RankSyncEngine:
    """
    Orchestrates fetch, aggregation, shard persistence and ledger append.
    """

    def __init__(
        self,
        *,
        settings: SyncSettings,
        client: RetryingFetchClient | None = None,
        session: requests.Session | None = None,
        writer: ShardedSnapshotWriter | None = None,
        ledger: HistoryLedger | None = None,
        today: Callable[[], date] | None = None,
    ) -> None:
        self._settings = settings
        self._client = client or RetryingFetchClient.from_settings(settings, session=session)
        self._writer = writer or ShardedSnapshotWriter(data_dir=settings.data_dir)
        self._ledger = ledger or HistoryLedger.in_data_dir(settings.data_dir)
        self._today = today or (lambda: datetime.now(timezone.utc).date())

    def run(self) -> SyncRunSummary:
        run_date = self._today().isoformat()
        tasks = build_tasks(self._settings)
        fetcher = DatasetFetcher(
            settings=self._settings,
            client=self._client,
            run_date=run_date,
        )

        pool: BoundedTaskPool[Dataset] = BoundedTaskPool(
            concurrency_limit=self._settings.concurrency_limit
        )
        outcomes = pool.run(
            [partial(fetcher.fetch_dataset, task.region, task.category, task.feed) for task in tasks]
        )
        datasets, failures = partition_outcomes(tasks, outcomes)

        for failure in failures:
            log_event(logger, logging.WARNING, "task_failed", date=run_date, error=failure)

        if not datasets:
            log_event(
                logger,
                logging.ERROR,
                "sync_failed",
                date=run_date,
                tasks=len(tasks),
            )
            raise NoDatasetsSucceededError(failures)

        aggregates = build_aggregates(
            datasets,
            date=run_date,
            limit=self._settings.item_limit,
            warnings=failures,
        )
        written = self._writer.write(aggregates, datasets)
        appended = self._ledger.append(datasets)

        summary = SyncRunSummary(
            date=run_date,
            succeeded=len(datasets),
            skipped=len(failures),
            warnings=failures,
            files_written=len(written),
            ledger_appended=appended,
        )
        log_event(
            logger,
            logging.INFO,
            "sync_completed",
            date=run_date,
            succeeded=summary.succeeded,
            skipped=summary.skipped,
            files_written=summary.files_written,
            ledger_appended=summary.ledger_appended,
        )
        return summary
