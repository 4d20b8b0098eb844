from __future__ import annotations

from typing import Optional


class LiveSurfError(Exception):
    """Base class for every error raised by the client."""


class ConfigError(LiveSurfError, ValueError):
    """Invalid or missing client configuration."""


class TransportFault(LiveSurfError):
    """Network-level failure (connection refused, timeout, reset...)."""


class RequestCancelled(LiveSurfError):
    """A rate-limit or backoff wait was aborted by the client shutting down."""


class ApiError(LiveSurfError):
    """Final, classified failure of a logical request."""

    def __init__(self, status_code: Optional[int], message: str, attempts: int = 1):
        self.status_code = status_code
        self.message = message
        self.attempts = attempts
        code = status_code if status_code is not None else "transport"
        super().__init__(f"API error ({code}): {message}")


class ExhaustedRetries(ApiError):
    """429/5xx or transport fault with no attempts remaining."""


class NonRetryableClientError(ApiError):
    """Non-2xx status outside 429/5xx; surfaced without retrying."""
