"""
Sliding-window request limiter keyed by client address.

Best-effort, in-memory, per-process abuse mitigation for unauthenticated
write paths (submission, tracking-code lookup, upvote). It resets on
restart and is not shared between workers. One instance is created per app
and reached through ``app.state.rate_limiter``.

Counting is done by `limits` (the engine behind slowapi): a moving window
over thread-safe in-memory storage. A rejected hit is not recorded.
"""

from __future__ import annotations

import logging

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage, Storage
from limits.strategies import MovingWindowRateLimiter

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 3
DEFAULT_WINDOW_SECONDS = 60


class SlidingWindowRateLimiter:
    """At most ``limit`` accepted hits per key in any rolling ``window_seconds``."""

    def __init__(
        self,
        limit: int = DEFAULT_LIMIT,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        storage: Storage | None = None,
    ) -> None:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")
        self.limit = limit
        self.window_seconds = window_seconds
        self._item = RateLimitItemPerSecond(limit, window_seconds)
        self._strategy = MovingWindowRateLimiter(storage or MemoryStorage())

    def hit(self, key: str) -> bool:
        """Record a hit for ``key``; return False (and record nothing) when over the limit."""
        if self._strategy.hit(self._item, key):
            return True
        logger.warning("Rate limit exceeded key=%s", key)
        return False
