"""
Rate Limiter - Fixed-interval request spacing for the platform API.

The platform allows a fixed number of requests per minute. Rather than a
token bucket, requests are spaced at least 60 / requests_per_minute seconds
apart, so the per-minute ceiling holds under any request timing.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import structlog


@dataclass
class RateLimitConfig:
    """Configuration for rate limiter"""
    requests_per_minute: int = 360  # Platform ceiling

    @property
    def min_interval(self) -> float:
        """Minimum spacing between request starts (seconds)"""
        return 60.0 / self.requests_per_minute


class RateLimiter:
    """
    Spaces outbound requests by a fixed minimum interval.

    The first call never waits. Each later call waits until min_interval has
    elapsed since the previous request started, then records its own start.

    Example:
        >>> limiter = RateLimiter()
        >>> await limiter.throttle()  # Before each request
    """

    def __init__(
        self,
        config: Optional[RateLimitConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize the rate limiter.

        Args:
            config: Rate limit configuration (uses defaults if None)
            clock: Monotonic time source
            sleep: Coroutine used to wait
        """
        self.config = config or RateLimitConfig()
        self.last_request_time: Optional[float] = None
        self.request_count = 0

        self._clock = clock
        self._sleep = sleep

        self.logger = structlog.get_logger(__name__)

    async def throttle(self):
        """Wait until the next request may start."""
        if self.last_request_time is not None:
            elapsed = self._clock() - self.last_request_time
            delay = self.config.min_interval - elapsed
            if delay > 0:
                self.logger.debug("rate_limit_wait", delay=f"{delay:.3f}s")
                await self._sleep(delay)

        self.last_request_time = self._clock()
        self.request_count += 1

    def reset(self):
        """Forget the previous request"""
        self.last_request_time = None
        self.request_count = 0
