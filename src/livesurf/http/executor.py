from __future__ import annotations

import json
from typing import Any, Optional, Union

from livesurf.core.errors import ExhaustedRetries, NonRetryableClientError, TransportFault
from livesurf.core.models import FatalFailure, HttpMethod, RequestSpec, RetryableFailure, Success
from livesurf.http.limiter import SlidingWindowLimiter
from livesurf.http.policies import RetryPolicy
from livesurf.http.transport import Transport
from livesurf.utils.logging import get_logger
from livesurf.utils.time import Clock

Outcome = Union[Success, RetryableFailure, FatalFailure]


def parse_body(text: str) -> Any:
    """
    Parse a 2xx body.

    Blank bodies become an empty dict; JSON objects and arrays are decoded;
    anything else (including bare JSON scalars) is returned as raw text.
    """
    if not text or not text.strip():
        return {}
    try:
        parsed = json.loads(text)
    except ValueError:
        return text
    if isinstance(parsed, (dict, list)):
        return parsed
    return text


def extract_error_message(text: str) -> str:
    """Use the `error` field of a JSON object body if present, else the raw text."""
    try:
        parsed = json.loads(text) if text and text.strip() else {}
    except ValueError:
        return text
    if isinstance(parsed, dict) and parsed.get("error") is not None:
        err = parsed["error"]
        return err if isinstance(err, str) else json.dumps(err, ensure_ascii=False)
    return text


def classify_response(status_code: int, text: str) -> Outcome:
    """Map a status and body to an outcome. Independent of the attempt number."""
    if 200 <= status_code <= 299:
        return Success(parse_body(text))
    message = extract_error_message(text)
    if RetryPolicy.is_retryable_status(status_code):
        return RetryableFailure(status_code, message)
    return FatalFailure(status_code, message)


def encode_body(spec: RequestSpec) -> Optional[str]:
    """Wire payload for a request; POST/PATCH without a body send `{}`.

    Every explicit body, strings included, is JSON-encoded to match the
    `Content-Type: application/json` header.
    """
    if spec.body is not None:
        return json.dumps(spec.body, ensure_ascii=False)
    if HttpMethod(spec.method).sends_empty_object:
        return "{}"
    return None


class RequestExecutor:
    """
    Drives one logical request to a final result.

    Every attempt first takes a limiter slot (retries included), then goes
    through the transport and is classified. Retryable outcomes back off and
    loop while attempts remain; everything else ends the request.
    """

    def __init__(
        self,
        transport: Transport,
        limiter: SlidingWindowLimiter,
        retry: Optional[RetryPolicy] = None,
        clock: Optional[Clock] = None,
    ):
        self.transport = transport
        self.limiter = limiter
        self.retry = retry or RetryPolicy()
        self.clock = clock or limiter.clock
        self.log = get_logger("http")

    def execute(self, spec: RequestSpec) -> Any:
        """
        Run the request until success or a final error.

        Raises:
            NonRetryableClientError: non-2xx status other than 429/5xx.
            ExhaustedRetries: 429/5xx or transport fault after the last attempt.
            RequestCancelled: the client was closed during a wait.
        """
        body = encode_body(spec)
        method = HttpMethod(spec.method).value
        attempt = 0

        while True:
            attempt += 1
            self.limiter.acquire()
            outcome = self._attempt(method, spec, body)

            if isinstance(outcome, Success):
                if attempt > 1:
                    self.log.info("%s %s succeeded on attempt %s", method, spec.url, attempt)
                return outcome.value

            if isinstance(outcome, FatalFailure):
                self.log.error("%s %s failed (status=%s): %s", method, spec.url, outcome.status_code, outcome.message)
                raise NonRetryableClientError(outcome.status_code, outcome.message, attempts=attempt)

            if self.retry.should_retry(attempt):
                delay_ms = self.retry.delay_for(attempt)
                self.log.warning(
                    "Retrying %s %s (status=%s, attempt=%s, backoff=%.0fms)",
                    method,
                    spec.url,
                    outcome.status_code if outcome.status_code is not None else type(outcome.cause).__name__,
                    attempt,
                    delay_ms,
                )
                self.clock.sleep(delay_ms)
                continue

            self.log.error(
                "%s %s gave up after %s attempts (status=%s): %s",
                method,
                spec.url,
                attempt,
                outcome.status_code,
                outcome.message,
            )
            raise ExhaustedRetries(outcome.status_code, outcome.message, attempts=attempt) from outcome.cause

    def _attempt(self, method: str, spec: RequestSpec, body: Optional[str]) -> Outcome:
        try:
            resp = self.transport.send(method, spec.url, dict(spec.headers), body)
        except (TransportFault, OSError) as e:
            return RetryableFailure(None, str(e), cause=e)
        return classify_response(resp.status_code, resp.text)
