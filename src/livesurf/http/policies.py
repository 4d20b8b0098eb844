from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_JITTER_RATIO = 0.2


def delay_for(
    attempt: int,
    initial_backoff_ms: float,
    jitter_ratio: float = DEFAULT_JITTER_RATIO,
    rng: Optional[random.Random] = None,
) -> float:
    """
    Backoff before retrying after `attempt` (1-based), in milliseconds.

    Exponential base `initial_backoff_ms * 2**(attempt-1)` plus a uniform
    draw in +/- `jitter_ratio` of the base. Never negative.
    """
    if attempt < 1:
        raise ValueError("attempt must be >= 1")
    base = initial_backoff_ms * (2 ** (attempt - 1))
    jitter = base * jitter_ratio
    draw = (rng or random).uniform(-jitter, jitter)
    return max(0.0, base + draw)


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for HTTP retry behavior."""

    max_retries: int = 3
    initial_backoff_ms: float = 500
    jitter_ratio: float = DEFAULT_JITTER_RATIO
    rng: Optional[random.Random] = field(default=None, compare=False, repr=False)

    def delay_for(self, attempt: int) -> float:
        return delay_for(attempt, self.initial_backoff_ms, self.jitter_ratio, self.rng)

    def should_retry(self, attempt: int) -> bool:
        """Attempts are 1-based; the first try is not a retry."""
        return attempt <= self.max_retries

    @staticmethod
    def is_retryable_status(status_code: int) -> bool:
        return status_code == 429 or status_code >= 500
