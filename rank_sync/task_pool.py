"""
Bounded, pull-based worker pool for independent fetch tasks.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from typing import Generic, TypeVar

from rank_sync.types import TaskOutcome

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BoundedTaskPool(Generic[T]):
    """
    Run callables on at most ``concurrency_limit`` worker threads.

    Workers share a cursor and each claims the next pending index, so faster
    workers absorb more of the backlog. Outcomes are stored by index, which
    keeps output order equal to input order whatever the completion order.
    Task exceptions are captured in the outcome and never propagate.
    """

    def __init__(self, *, concurrency_limit: int) -> None:
        if concurrency_limit < 1:
            raise ValueError("concurrency_limit must be >= 1.")
        self._concurrency_limit = concurrency_limit

    def run(self, tasks: Sequence[Callable[[], T]]) -> list[TaskOutcome[T]]:
        if not tasks:
            return []

        outcomes: list[TaskOutcome[T] | None] = [None] * len(tasks)
        cursor = 0
        lock = threading.Lock()

        def claim() -> int | None:
            nonlocal cursor
            with lock:
                if cursor >= len(tasks):
                    return None
                index = cursor
                cursor += 1
                return index

        def worker() -> None:
            while True:
                index = claim()
                if index is None:
                    return
                try:
                    outcomes[index] = TaskOutcome(index=index, value=tasks[index]())
                except Exception as exc:  # noqa: BLE001
                    logger.debug("Task %d failed: %s", index, exc)
                    outcomes[index] = TaskOutcome(index=index, error=exc)

        width = min(self._concurrency_limit, len(tasks))
        threads = [
            threading.Thread(target=worker, name=f"rank-sync-worker-{number}", daemon=True)
            for number in range(width)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        return [outcome for outcome in outcomes if outcome is not None]
