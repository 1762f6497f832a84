"""Per-client sliding-window rate limiting for scan requests."""

from __future__ import annotations

import collections
import time
from collections.abc import Callable


class SlidingWindowLimiter:
    """Allow at most ``max_requests`` per ``window_seconds`` for each key.

    Each key keeps the timestamps of its accepted requests; entries
    older than the window are discarded on every check, and keys with
    no request inside the window are forgotten.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, collections.deque[float]] = {}

    def __len__(self) -> int:
        """Number of keys with at least one request inside the window."""
        return len(self._hits)

    def _expire(self, now: float) -> None:
        for key in list(self._hits):
            hits = self._hits[key]
            while hits and now - hits[0] >= self.window_seconds:
                hits.popleft()
            if not hits:
                del self._hits[key]

    def allow(self, key: str) -> bool:
        """Record a request for *key* and return whether it is within the limit."""
        now = self._clock()
        self._expire(now)
        hits = self._hits.setdefault(key, collections.deque())
        if len(hits) >= self.max_requests:
            return False
        hits.append(now)
        return True

    def reset(self) -> None:
        self._hits.clear()
