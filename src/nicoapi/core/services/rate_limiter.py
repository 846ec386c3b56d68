"""Single-flight rate limiter.

The upstream throttles aggressively and does not document the limit, so every
request start is spaced at least `min_interval_ms` from the previous start,
independently of how long individual requests take.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

lib_logger = logging.getLogger("nicoapi")

DEFAULT_MIN_INTERVAL_MS = 1000


class RateLimiter:
    """Spaces the starts of request attempts.

    One instance per client. The next start slot is reserved before the
    coroutine suspends, so callers sharing the instance on one event loop are
    queued in call order.
    """

    def __init__(
        self,
        min_interval_ms: int = DEFAULT_MIN_INTERVAL_MS,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if min_interval_ms < 0:
            raise ValueError("min_interval_ms must be >= 0")
        self._min_interval = min_interval_ms / 1000.0
        self._clock = clock
        self._sleep = sleep
        self._last_request_at: float | None = None

    @property
    def min_interval_ms(self) -> int:
        return int(round(self._min_interval * 1000))

    @property
    def last_request_at(self) -> float | None:
        """Clock value of the last granted slot, `None` before the first request."""

        return self._last_request_at

    async def enforce(self) -> None:
        """Suspend until the next request may start, then claim that slot."""

        now = self._clock()
        if self._last_request_at is None:
            slot = now
        else:
            slot = max(now, self._last_request_at + self._min_interval)
        self._last_request_at = slot

        wait = slot - now
        if wait > 0:
            lib_logger.debug(f"Rate limiter: waiting {wait * 1000:.0f} ms before next request")
            await self._sleep(wait)
