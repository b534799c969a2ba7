from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from rank_sync.config import SyncSettings


@pytest.fixture()
def make_settings(tmp_path) -> Callable[..., SyncSettings]:
    """Settings factory writing under the test's tmp_path, with no retry delay."""

    def factory(**overrides: Any) -> SyncSettings:
        values: dict[str, Any] = {
            "regions": ("us",),
            "categories": ("apps",),
            "feeds": ("top-free",),
            "retry_delay_ms": 0,
            "concurrency_limit": 2,
            "data_dir": str(tmp_path / "data"),
            "report_dir": str(tmp_path / "reports"),
        }
        values.update(overrides)
        return SyncSettings(**values)

    return factory
