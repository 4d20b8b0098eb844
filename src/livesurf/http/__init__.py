from livesurf.http.executor import RequestExecutor, classify_response, parse_body
from livesurf.http.limiter import SlidingWindowLimiter
from livesurf.http.policies import RetryPolicy, delay_for
from livesurf.http.response import HttpResponse
from livesurf.http.transport import RequestsTransport, Transport

__all__ = [
    "HttpResponse",
    "RequestExecutor",
    "RequestsTransport",
    "RetryPolicy",
    "SlidingWindowLimiter",
    "Transport",
    "classify_response",
    "delay_for",
    "parse_body",
]
