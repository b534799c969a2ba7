"""
Rank synchronization configuration models.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

DEFAULT_FEED_BASE_URL = "https://rss.applemarketingtools.com/api/v2"
DEFAULT_LEGACY_FEED_BASE_URL = "https://itunes.apple.com"
DEFAULT_USER_AGENT = "ios-rank-history-bot/1.0"

_SAFE_SEGMENT = re.compile(r"^[a-z0-9][a-z0-9_.-]*$")


def is_safe_segment(value: str) -> bool:
    """
    Whether a dimension value can be used verbatim as a file path component.
    """

    return bool(_SAFE_SEGMENT.match(value)) and ".." not in value


@dataclass(frozen=True)
class SyncSettings:
    """
    Runtime settings for one synchronization run.
    """

    regions: tuple[str, ...] = ("cn",)
    categories: tuple[str, ...] = ("apps",)
    feeds: tuple[str, ...] = ("top-free",)
    item_limit: int = 100
    max_retries: int = 3
    retry_delay_ms: int = 1500
    concurrency_limit: int = 3
    fallback_file_path: str | None = None
    data_dir: str = "data"
    report_dir: str = "reports"
    timeout_seconds: float = 15.0
    user_agent: str = DEFAULT_USER_AGENT
    feed_base_url: str = DEFAULT_FEED_BASE_URL
    legacy_feed_base_url: str = DEFAULT_LEGACY_FEED_BASE_URL
    report_top_n: int = 20
    schedule_hour: int = 6
    schedule_minute: int = 0

    def __post_init__(self) -> None:
        for name in ("regions", "categories", "feeds"):
            values = getattr(self, name)
            if not values:
                raise ValueError(f"SyncSettings.{name} must not be empty.")
            for value in values:
                if not is_safe_segment(value):
                    raise ValueError(f"Invalid {name} value {value!r}: use lower-case letters, digits, '-', '_' or '.'.")
        if self.item_limit < 1:
            raise ValueError("SyncSettings.item_limit must be >= 1.")
        if self.max_retries < 1:
            raise ValueError("SyncSettings.max_retries must be >= 1.")
        if self.retry_delay_ms < 0:
            raise ValueError("SyncSettings.retry_delay_ms must be >= 0.")
        if self.concurrency_limit < 1:
            raise ValueError("SyncSettings.concurrency_limit must be >= 1.")

    @property
    def retry_delay_seconds(self) -> float:
        return self.retry_delay_ms / 1000.0
