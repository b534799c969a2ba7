"""
Exceptions raised by the synchronization pipeline.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence


class RankSyncError(Exception):
    """Base exception for rank synchronization failures."""


class FetchError(RankSyncError):
    """
    Raised when one URL exhausted its retries and no fallback payload was usable.
    """

    def __init__(self, url: str, attempts: int, last_error: BaseException | None) -> None:
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Failed to fetch {url} after {attempts} attempt(s): {last_error}")


class AllCandidatesFailedError(RankSyncError):
    """
    Raised when every feed candidate for one (region, category, feed) task failed.
    """

    def __init__(
        self,
        *,
        region: str,
        category: str,
        feed: str,
        errors: Mapping[str, FetchError],
    ) -> None:
        self.region = region
        self.category = category
        self.feed = feed
        self.errors = dict(errors)
        tried = ", ".join(self.errors) or "none"
        super().__init__(
            f"All feed candidates failed for region={region} category={category} "
            f"feed={feed} (tried: {tried})"
        )


class NoDatasetsSucceededError(RankSyncError):
    """
    Raised when no task of a run produced a dataset. Nothing is written.
    """

    def __init__(self, failures: Sequence[str]) -> None:
        self.failures = list(failures)
        super().__init__(
            f"No datasets succeeded ({len(self.failures)} task(s) failed): "
            + "; ".join(self.failures)
        )
