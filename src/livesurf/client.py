from __future__ import annotations

import random
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlencode

from livesurf.config_models import DEFAULT_BASE_URL, ClientConfig, build_config
from livesurf.core.factory import ComponentFactory
from livesurf.core.errors import RequestCancelled
from livesurf.core.models import HttpMethod, RequestSpec
from livesurf.http.transport import Transport
from livesurf.utils.logging import get_logger
from livesurf.utils.time import Clock


def resolve_url(base_url: str, endpoint: str, append_slash: bool = False) -> str:
    """
    Join `endpoint` to `base_url` after trimming its leading/trailing slashes.

    With `append_slash` one trailing slash is put back in front of any query
    string; the endpoint wrappers use this because LiveSurf routes end with `/`.
    """
    path, sep, query = endpoint.partition("?")
    path = path.strip("/")
    if append_slash and path:
        path += "/"
    return base_url.rstrip("/") + "/" + path + sep + query


class LiveSurfClient:
    """
    Client for https://api.livesurf.ru/.

    Safe to share between threads: every call on one instance goes through
    the same rate limiter. Note that retries take limiter slots too, so an
    unstable endpoint eats into the per-second budget.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 15,
        rate_limit_per_sec: int = 10,
        max_retries: int = 3,
        initial_backoff_ms: float = 500,
        *,
        append_slash: bool = False,
        transport: Optional[Transport] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
    ):
        config = build_config(dict(
            api_key=api_key,
            base_url=base_url,
            timeout_seconds=timeout_seconds,
            rate_limit_per_sec=rate_limit_per_sec,
            max_retries=max_retries,
            initial_backoff_ms=initial_backoff_ms,
            append_slash=append_slash,
        ))
        self._setup(config, ComponentFactory(transport=transport, clock=clock, rng=rng))

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        transport: Optional[Transport] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
    ) -> "LiveSurfClient":
        client = cls.__new__(cls)
        client._setup(config, ComponentFactory(transport=transport, clock=clock, rng=rng))
        return client

    def _setup(self, config: ClientConfig, factory: ComponentFactory) -> None:
        self.config = config
        self._closed = False
        built = factory.build(config)
        self.clock = built.clock
        self.limiter = built.limiter
        self.transport = built.transport
        self.executor = built.executor
        self.headers: Dict[str, str] = {
            "Accept": "application/json",
            "Authorization": config.api_key,
            "Content-Type": "application/json",
            "User-Agent": config.user_agent,
        }
        self.log = get_logger("client")
        self.log.debug(
            "Client ready: base_url=%s rate=%s/s max_retries=%s",
            config.base_url,
            config.rate_limit_per_sec,
            config.max_retries,
        )

    @property
    def base_url(self) -> str:
        return self.config.base_url

    def request(self, method: Union[str, HttpMethod], endpoint: str, json_body: Any = None) -> Any:
        """
        Perform one logical request with rate limiting and retries.

        Returns:
            Parsed JSON (dict/list) when the body is JSON, else the raw text.

        Raises:
            NonRetryableClientError, ExhaustedRetries, RequestCancelled
        """
        return self._send(method, endpoint, json_body, self.config.append_slash)

    def _route(self, method: HttpMethod, route: str, body: Any = None) -> Any:
        """Call a LiveSurf route, keeping the trailing slash its URLs require."""
        return self._send(method, route, body, append_slash=True)

    def _send(self, method: Union[str, HttpMethod], endpoint: str, body: Any, append_slash: bool) -> Any:
        if self._closed:
            raise RequestCancelled("client is closed")
        spec = RequestSpec(
            method=HttpMethod(str(getattr(method, "value", method)).upper()),
            url=resolve_url(self.config.base_url, endpoint, append_slash),
            body=body,
            headers=self.headers,
        )
        return self.executor.execute(spec)

    def get(self, endpoint: str) -> Any:
        return self.request(HttpMethod.GET, endpoint)

    def post(self, endpoint: str, body: Any = None) -> Any:
        return self.request(HttpMethod.POST, endpoint, body)

    def patch(self, endpoint: str, body: Any = None) -> Any:
        return self.request(HttpMethod.PATCH, endpoint, body)

    def delete(self, endpoint: str) -> Any:
        return self.request(HttpMethod.DELETE, endpoint)

    # Reference data

    def get_categories(self) -> Any:
        return self._route(HttpMethod.GET, "categories/")

    def get_countries(self) -> Any:
        return self._route(HttpMethod.GET, "countries/")

    def get_languages(self) -> Any:
        return self._route(HttpMethod.GET, "languages/")

    def get_sources_ad(self) -> Any:
        return self._route(HttpMethod.GET, "sources/ad/")

    def get_sources_messengers(self) -> Any:
        return self._route(HttpMethod.GET, "sources/messengers/")

    def get_sources_search(self) -> Any:
        return self._route(HttpMethod.GET, "sources/search/")

    def get_sources_social(self) -> Any:
        return self._route(HttpMethod.GET, "sources/social/")

    # Account

    def get_user(self) -> Any:
        return self._route(HttpMethod.GET, "user/")

    def set_auto_mode(self) -> Any:
        return self._route(HttpMethod.POST, "user/automode/")

    def set_manual_mode(self) -> Any:
        return self._route(HttpMethod.POST, "user/manualmode/")

    # Groups

    def get_groups(self) -> Any:
        return self._route(HttpMethod.GET, "group/all/")

    def get_group(self, group_id: int) -> Any:
        return self._route(HttpMethod.GET, f"group/{group_id}/")

    def create_group(self, data: Mapping[str, Any]) -> Any:
        return self._route(HttpMethod.POST, "group/create/", dict(data))

    def update_group(self, group_id: int, data: Mapping[str, Any]) -> Any:
        return self._route(HttpMethod.PATCH, f"group/{group_id}/", dict(data))

    def delete_group(self, group_id: int) -> Any:
        return self._route(HttpMethod.DELETE, f"group/{group_id}/")

    def clone_group(self, group_id: int, data: Optional[Mapping[str, Any]] = None) -> Any:
        return self._route(HttpMethod.POST, f"group/{group_id}/clone/", dict(data) if data is not None else None)

    def add_group_credits(self, group_id: int, credits: int) -> Any:
        return self._route(HttpMethod.POST, f"group/{group_id}/add_credits/", {"credits": credits})

    # Pages

    def get_page(self, page_id: int) -> Any:
        return self._route(HttpMethod.GET, f"page/{page_id}/")

    def create_page(self, data: Mapping[str, Any]) -> Any:
        return self._route(HttpMethod.POST, "page/create/", dict(data))

    def update_page(self, page_id: int, data: Mapping[str, Any]) -> Any:
        return self._route(HttpMethod.PATCH, f"page/{page_id}/", dict(data))

    def delete_page(self, page_id: int) -> Any:
        return self._route(HttpMethod.DELETE, f"page/{page_id}/")

    def clone_page(self, page_id: int) -> Any:
        return self._route(HttpMethod.POST, f"page/{page_id}/clone/")

    def move_page_up(self, page_id: int) -> Any:
        return self._route(HttpMethod.POST, f"page/{page_id}/up/")

    def move_page_down(self, page_id: int) -> Any:
        return self._route(HttpMethod.POST, f"page/{page_id}/down/")

    def start_page(self, page_id: int) -> Any:
        return self._route(HttpMethod.POST, f"page/{page_id}/start/")

    def stop_page(self, page_id: int) -> Any:
        return self._route(HttpMethod.POST, f"page/{page_id}/stop/")

    # Stats

    def get_stats(self, params: Mapping[str, Any]) -> Any:
        """Compiled page statistics, filtered by query params (e.g. page, date_from)."""
        query = urlencode(list(params.items()))
        return self._route(HttpMethod.GET, f"pages-compiled-stats/?{query}" if query else "pages-compiled-stats/")

    def close(self) -> None:
        """Abort pending waits and release the transport."""
        self._closed = True
        cancel = getattr(self.clock, "cancel", None)
        if callable(cancel):
            cancel()
        close = getattr(self.transport, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "LiveSurfClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
