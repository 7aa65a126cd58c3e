from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional


logger = logging.getLogger(__name__)

# Notion allows an average of three requests per second per integration.
NOTION_REQUESTS_PER_SECOND = 3


class RateLimiter:
    """Fixed-window token bucket.

    The bucket holds ``tokens_per_interval`` tokens and is refilled to full at
    every ``interval`` boundary, counted from the first acquisition. Callers
    that find it empty are suspended until the next window opens; nobody is
    ever rejected for being too early.
    """

    def __init__(
        self
        ,tokens_per_interval: int = NOTION_REQUESTS_PER_SECOND
        ,interval: float = 1.0
        ,*
        ,clock: Callable[[], float] = time.monotonic
        ,sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ) -> None:
        if tokens_per_interval < 1:
            raise ValueError("tokens_per_interval must be at least 1")
        if interval <= 0:
            raise ValueError("interval must be positive")

        self.tokens_per_interval = tokens_per_interval
        self.interval = interval
        self._clock = clock
        self._sleep = sleep
        self._tokens = tokens_per_interval
        self._window_start: Optional[float] = None
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def remaining(self) -> int:
        self._refill(self._clock())
        return self._tokens

    def _refill(self, now: float) -> None:
        if self._window_start is None:
            return
        elapsed = now - self._window_start
        if elapsed >= self.interval:
            # Align to the boundary so windows do not drift with late wake-ups.
            windows = int(elapsed // self.interval)
            self._window_start += windows * self.interval
            self._tokens = self.tokens_per_interval

    def _loop_lock(self) -> asyncio.Lock:
        # An asyncio.Lock binds to the loop that first contends on it.
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def acquire(self, count: int = 1) -> None:
        """Wait until ``count`` tokens are available in the current window, then take them."""

        if count < 1:
            raise ValueError(f"Requested {count} tokens, at least 1 is required")
        if count > self.tokens_per_interval:
            raise ValueError(
                f"Requested {count} tokens but the bucket only holds {self.tokens_per_interval}"
            )
        async with self._loop_lock():
            while True:
                now = self._clock()
                if self._window_start is None:
                    self._window_start = now
                self._refill(now)
                if self._tokens >= count:
                    self._tokens -= count
                    return
                wait = self._window_start + self.interval - now
                logger.debug("Rate limit reached, waiting %.3fs", wait)
                await self._sleep(wait)
