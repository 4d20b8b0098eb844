from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Optional

from livesurf.utils.logging import get_logger
from livesurf.utils.time import Clock, SystemClock

WINDOW_MS = 1000.0


class SlidingWindowLimiter:
    """
    Admit at most `rate_limit_per_sec` calls in any trailing window.

    Timestamps of admitted calls are kept oldest-first, so expiring them is a
    prefix trim. One instance is shared by every thread of a client; the lock
    is never held while a caller sleeps.
    """

    def __init__(self, rate_limit_per_sec: int, clock: Optional[Clock] = None, window_ms: float = WINDOW_MS):
        if rate_limit_per_sec < 1:
            raise ValueError("rate_limit_per_sec must be >= 1")
        self.rate_limit_per_sec = rate_limit_per_sec
        self.window_ms = window_ms
        self.clock = clock or SystemClock()
        self._timestamps: Deque[float] = deque()
        self._lock = threading.Lock()
        self.log = get_logger("limiter")

    def acquire(self) -> None:
        """Block the calling thread until a slot is free, then take it."""
        while True:
            with self._lock:
                wait_ms = self._wait_locked(self.clock.now_ms())
                if wait_ms <= 0:
                    self._timestamps.append(self.clock.now_ms())
                    return

            self.log.debug("Rate limit reached (%s/s), waiting %.0f ms", self.rate_limit_per_sec, wait_ms)
            self.clock.sleep(wait_ms)
            # other threads may have admitted meanwhile; re-check under the lock

    def wait_time_ms(self) -> float:
        """Wait a caller arriving now would observe. Does not admit."""
        with self._lock:
            return max(0.0, self._wait_locked(self.clock.now_ms()))

    def in_window(self) -> int:
        """Number of admissions still tracked (not yet pruned)."""
        with self._lock:
            return len(self._timestamps)

    def _wait_locked(self, now: float) -> float:
        cutoff = now - self.window_ms
        while self._timestamps and self._timestamps[0] <= cutoff:
            self._timestamps.popleft()

        if len(self._timestamps) < self.rate_limit_per_sec:
            return 0.0
        return self.window_ms - (now - self._timestamps[0])
