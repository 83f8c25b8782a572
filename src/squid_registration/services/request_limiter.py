"""In-memory per-client request limiter applied to every route"""

import time
from collections import defaultdict, deque
from typing import Callable


class RequestLimiter:
    """
    Sliding-window request counter keyed by client address.

    Counts live in process memory, so each worker enforces its own limit.
    A limit of 0 disables the check.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, deque] = defaultdict(deque)

    @property
    def retry_after(self) -> str:
        minutes = max(1, round(self.window_seconds / 60))
        return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"

    def allow(self, client_key: str) -> bool:
        """Record a request from client_key. False once it is over the limit."""
        if not self.limit:
            return True

        now = self._clock()
        hits = self._hits[client_key]
        while hits and now - hits[0] >= self.window_seconds:
            hits.popleft()

        if len(hits) >= self.limit:
            return False

        hits.append(now)
        return True
