"""
Environment config loader for rank synchronization.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from rank_sync.config.models import (
    DEFAULT_FEED_BASE_URL,
    DEFAULT_LEGACY_FEED_BASE_URL,
    DEFAULT_USER_AGENT,
    SyncSettings,
)


def load_env_files(project_root: Path | None = None) -> None:
    """
    Seed ``os.environ`` from ``.env`` then ``.env.local`` under ``project_root``.

    ``project_root`` defaults to the checkout containing the ``rank_sync``
    package; tests point it at a temporary directory. Variables already set
    in the process environment, such as ``APPSTORE_*`` or ``FETCH_*`` from a
    scheduler unit, are left untouched.
    """

    root = project_root or Path(__file__).resolve().parents[2]
    for filename in (".env", ".env.local"):
        env_path = root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    stripped = raw.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    stripped = raw.strip()
    return stripped or None


def parse_dimension_list(raw: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
    """
    Split a comma separated dimension list, lower-casing and de-duplicating
    while keeping first-seen order.
    """

    if raw is None:
        return default

    values: list[str] = []
    for token in raw.split(","):
        value = token.strip().lower()
        if value and value not in values:
            values.append(value)
    return tuple(values) or default


def build_sync_settings() -> SyncSettings:
    """
    Build settings from the current process environment.
    """

    return SyncSettings(
        regions=parse_dimension_list(os.getenv("APPSTORE_REGIONS"), ("cn",)),
        categories=parse_dimension_list(os.getenv("APPSTORE_CATEGORIES"), ("apps",)),
        feeds=parse_dimension_list(os.getenv("APPSTORE_FEEDS"), ("top-free",)),
        item_limit=max(1, _get_int_env("APPSTORE_LIMIT", 100)),
        max_retries=max(1, _get_int_env("FETCH_RETRIES", 3)),
        retry_delay_ms=max(0, _get_int_env("FETCH_RETRY_DELAY_MS", 1500)),
        concurrency_limit=max(1, _get_int_env("FETCH_CONCURRENCY", 3)),
        fallback_file_path=_get_optional_str_env("APPSTORE_FALLBACK_FILE"),
        data_dir=_get_str_env("DATA_DIR", "data"),
        report_dir=_get_str_env("REPORT_DIR", "reports"),
        timeout_seconds=max(1.0, _get_float_env("FETCH_TIMEOUT_SECONDS", 15.0)),
        user_agent=_get_str_env("RANK_SYNC_USER_AGENT", DEFAULT_USER_AGENT),
        feed_base_url=_get_str_env("APPSTORE_FEED_BASE_URL", DEFAULT_FEED_BASE_URL).rstrip("/"),
        legacy_feed_base_url=_get_str_env(
            "APPSTORE_LEGACY_FEED_BASE_URL",
            DEFAULT_LEGACY_FEED_BASE_URL,
        ).rstrip("/"),
        report_top_n=max(1, _get_int_env("REPORT_TOP_N", 20)),
        schedule_hour=min(23, max(0, _get_int_env("RANK_SYNC_SCHEDULE_HOUR", 6))),
        schedule_minute=min(59, max(0, _get_int_env("RANK_SYNC_SCHEDULE_MINUTE", 0))),
    )


@lru_cache(maxsize=1)
def get_sync_settings() -> SyncSettings:
    """
    Return cached settings, loading `.env` files first.
    """

    load_env_files()
    return build_sync_settings()
