from __future__ import annotations

import threading
import time
from typing import Optional, Protocol

from livesurf.core.errors import RequestCancelled


class Clock(Protocol):
    """Time source and sleep primitive used by the limiter and executor."""

    def now_ms(self) -> float: ...

    def sleep(self, ms: float) -> None: ...


class SystemClock:
    """Monotonic clock whose sleeps can be interrupted by `cancel()`."""

    def __init__(self, cancel_event: Optional[threading.Event] = None):
        self._cancelled = cancel_event or threading.Event()

    def now_ms(self) -> float:
        return time.monotonic() * 1000.0

    def sleep(self, ms: float) -> None:
        """Block the calling thread for `ms` milliseconds."""
        if self._cancelled.is_set():
            raise RequestCancelled("client closed")
        if ms <= 0:
            return
        # Event.wait returns True only when cancel() fired during the wait
        if self._cancelled.wait(ms / 1000.0):
            raise RequestCancelled("client closed while waiting")

    def cancel(self) -> None:
        """Abort current and future sleeps."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()
