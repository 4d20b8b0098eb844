from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from livesurf.config_models import ClientConfig
from livesurf.http.executor import RequestExecutor
from livesurf.http.limiter import SlidingWindowLimiter
from livesurf.http.policies import RetryPolicy
from livesurf.http.transport import RequestsTransport, Transport
from livesurf.utils.time import Clock, SystemClock


@dataclass(frozen=True)
class BuiltComponents:
    clock: Clock
    limiter: SlidingWindowLimiter
    retry: RetryPolicy
    transport: Transport
    executor: RequestExecutor


class ComponentFactory:
    """
    Factory responsible for wiring the admission-and-retry stack.
    Tests swap the transport, clock or RNG without touching the client.
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
    ):
        self.transport = transport
        self.clock = clock
        self.rng = rng

    def build(self, config: ClientConfig) -> BuiltComponents:
        """
        Build one independent limiter/executor pair for a client.

        Args:
            config: Validated client configuration.

        Returns:
            A container with all built components.
        """
        clock = self.clock or SystemClock()
        limiter = SlidingWindowLimiter(config.rate_limit_per_sec, clock=clock)
        retry = RetryPolicy(
            max_retries=config.max_retries,
            initial_backoff_ms=config.initial_backoff_ms,
            rng=self.rng,
        )
        transport = self.transport or RequestsTransport(timeout_s=config.timeout_seconds)
        executor = RequestExecutor(transport=transport, limiter=limiter, retry=retry, clock=clock)
        return BuiltComponents(clock=clock, limiter=limiter, retry=retry, transport=transport, executor=executor)
