"""
Bounded fixed-delay retry policy.

No exponential backoff and no jitter: every gap between attempts is the same
``delay_seconds``, and there is no wait after the final attempt.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class RetryPolicy:
    """
    Attempts budget and inter-attempt delay for one fetch.

    Attributes:
        max_attempts: Total number of attempts, including the first.
        delay_seconds: Fixed pause between two consecutive attempts.
        sleep: Clock hook, replaced by a no-op or recorder in tests.
    """

    max_attempts: int = 3
    delay_seconds: float = 1.5
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("RetryPolicy.max_attempts must be >= 1.")
        if self.delay_seconds < 0:
            raise ValueError("RetryPolicy.delay_seconds must be >= 0.")

    def attempts(self) -> range:
        return range(1, self.max_attempts + 1)

    def wait_before_next(self, attempt: int) -> None:
        """
        Sleep between attempts; a no-op after the final attempt.
        """

        if attempt < self.max_attempts and self.delay_seconds > 0:
            self.sleep(self.delay_seconds)
