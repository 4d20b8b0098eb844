from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class HttpMethod(str, Enum):
    """HTTP methods supported by the LiveSurf API."""

    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @property
    def sends_empty_object(self) -> bool:
        """POST/PATCH without a body still carry `{}` on the wire."""
        return self in (HttpMethod.POST, HttpMethod.PATCH)


@dataclass(frozen=True)
class RequestSpec:
    """Specification for one logical HTTP request, reused across retries."""

    method: HttpMethod
    url: str
    body: Any = None
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Success:
    """A 2xx attempt with its parsed body."""

    value: Any


@dataclass(frozen=True)
class RetryableFailure:
    """429/5xx status or a transport fault."""

    status_code: Optional[int]
    message: str
    cause: Optional[BaseException] = None


@dataclass(frozen=True)
class FatalFailure:
    """Any other non-2xx status."""

    status_code: int
    message: str
