"""
Fetch and normalize one (region, category, feed) dataset.
"""

from __future__ import annotations

import logging

from rank_sync.client import RetryingFetchClient
from rank_sync.config.models import SyncSettings
from rank_sync.errors import AllCandidatesFailedError, FetchError
from rank_sync.feeds import build_feed_candidates, build_feed_url, genre_for_category
from rank_sync.logging_utils import log_event
from rank_sync.normalization import ItemNormalizer
from rank_sync.types import Dataset

logger = logging.getLogger(__name__)


class DatasetFetcher:
    """
    Tries each feed candidate in resolver order until one fetch succeeds.
    """

    def __init__(
        self,
        *,
        settings: SyncSettings,
        client: RetryingFetchClient,
        run_date: str,
        normalizer: ItemNormalizer | None = None,
    ) -> None:
        self._settings = settings
        self._client = client
        self._run_date = run_date
        self._normalizer = normalizer or ItemNormalizer()

    def fetch_dataset(self, region: str, category: str, feed: str) -> Dataset:
        errors: dict[str, FetchError] = {}

        for candidate in build_feed_candidates(feed):
            url = build_feed_url(
                settings=self._settings,
                region=region,
                category=category,
                feed=candidate,
            )
            try:
                fetched = self._client.fetch(url)
            except FetchError as exc:
                errors[candidate] = exc
                log_event(
                    logger,
                    logging.WARNING,
                    "feed_candidate_failed",
                    region=region,
                    category=category,
                    feed=feed,
                    candidate=candidate,
                    error=str(exc),
                )
                continue

            items = self._normalizer.normalize(fetched.payload, run_date=self._run_date)
            dataset = Dataset(
                date=self._run_date,
                region=region,
                category=category,
                feed_type=candidate,
                limit=self._settings.item_limit,
                genre=genre_for_category(category),
                source=fetched.source,
                items=tuple(items),
            )
            log_event(
                logger,
                logging.INFO,
                "dataset_fetched",
                region=region,
                category=category,
                feed=candidate,
                total=dataset.total,
                from_fallback=fetched.from_fallback,
            )
            return dataset

        raise AllCandidatesFailedError(
            region=region,
            category=category,
            feed=feed,
            errors=errors,
        )
