"""
HTTP client with bounded retries and a static-file degradation path.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import requests

from rank_sync.config.models import SyncSettings
from rank_sync.errors import FetchError
from rank_sync.logging_utils import log_event
from rank_sync.retry import RetryPolicy
from rank_sync.types import FetchedPayload

logger = logging.getLogger(__name__)


class RetryingFetchClient:
    """
    Fetch one JSON document, retrying failed attempts with a fixed delay.

    When every attempt fails and a fallback file is configured and present,
    its contents are returned instead. The fallback is shared by every URL,
    so callers get a best-effort local cache, not a response for that URL.
    """

    def __init__(
        self,
        *,
        policy: RetryPolicy,
        session: requests.Session | None = None,
        timeout_seconds: float = 15.0,
        user_agent: str = "ios-rank-history-bot/1.0",
        fallback_file_path: str | None = None,
    ) -> None:
        self._policy = policy
        self._session = session or requests.Session()
        self._timeout_seconds = timeout_seconds
        self._headers = {"User-Agent": user_agent}
        self._fallback_file_path = fallback_file_path

    @classmethod
    def from_settings(
        cls,
        settings: SyncSettings,
        *,
        session: requests.Session | None = None,
        policy: RetryPolicy | None = None,
    ) -> "RetryingFetchClient":
        return cls(
            policy=policy
            or RetryPolicy(
                max_attempts=settings.max_retries,
                delay_seconds=settings.retry_delay_seconds,
            ),
            session=session,
            timeout_seconds=settings.timeout_seconds,
            user_agent=settings.user_agent,
            fallback_file_path=settings.fallback_file_path,
        )

    def fetch(self, url: str) -> FetchedPayload:
        last_error: Exception | None = None

        for attempt in self._policy.attempts():
            try:
                return FetchedPayload(payload=self._get_json(url), url=url)
            except (requests.RequestException, ValueError) as exc:
                last_error = exc
                log_event(
                    logger,
                    logging.WARNING,
                    "fetch_attempt_failed",
                    url=url,
                    attempt=attempt,
                    max_attempts=self._policy.max_attempts,
                    error=str(exc),
                )
            self._policy.wait_before_next(attempt)

        fallback = self._read_fallback(url=url, last_error=last_error)
        if fallback is not None:
            return fallback

        log_event(
            logger,
            logging.ERROR,
            "fetch_exhausted",
            url=url,
            attempts=self._policy.max_attempts,
            error=str(last_error),
        )
        raise FetchError(url, self._policy.max_attempts, last_error) from last_error

    def _get_json(self, url: str) -> Any:
        response = self._session.get(
            url,
            headers=self._headers,
            timeout=self._timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    def _read_fallback(self, *, url: str, last_error: Exception | None) -> FetchedPayload | None:
        if not self._fallback_file_path:
            return None

        path = Path(self._fallback_file_path)
        if not path.is_file():
            return None

        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise FetchError(url, self._policy.max_attempts, exc) from exc

        log_event(
            logger,
            logging.WARNING,
            "fetch_fallback_used",
            url=url,
            fallback_file=str(path),
            error=str(last_error),
        )
        return FetchedPayload(payload=payload, url=url, from_fallback=True)
