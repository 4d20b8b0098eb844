from __future__ import annotations

from typing import Dict, Optional, Protocol

import requests

from livesurf.core.errors import TransportFault
from livesurf.http.response import HttpResponse
from livesurf.utils.logging import get_logger


class Transport(Protocol):
    """Protocol for the network layer underneath the executor."""

    def send(self, method: str, url: str, headers: Dict[str, str], body: Optional[str] = None) -> HttpResponse: ...


class RequestsTransport:
    """Transport built on a pooled requests.Session."""

    def __init__(self, timeout_s: float = 15, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self.timeout_s = timeout_s
        self.log = get_logger("http")

    def send(self, method: str, url: str, headers: Dict[str, str], body: Optional[str] = None) -> HttpResponse:
        """Send one request and read the body fully before returning."""
        data = body.encode("utf-8") if body is not None else None
        try:
            # redirects are surfaced as non-2xx statuses, never followed
            with self.session.request(
                method=method,
                url=url,
                headers=headers,
                data=data,
                timeout=self.timeout_s,
                allow_redirects=False,
            ) as r:
                if r.encoding is None:
                    r.encoding = "utf-8"
                return HttpResponse(status_code=r.status_code, text=r.text, headers=dict(r.headers))
        except requests.RequestException as e:
            self.log.debug("Transport fault on %s %s: %s", method, url, type(e).__name__)
            raise TransportFault(f"{type(e).__name__}: {e}") from e

    def close(self) -> None:
        self.session.close()
