"""In-memory per-client rate limiting: one search per window."""

import time
from typing import Callable, Dict, Optional

from delivery_scraper.core.config import settings


class RateLimiter:
    def __init__(self, window_seconds: float = settings.rate_limit_window_seconds,
                 clock: Callable[[], float] = time.monotonic):
        self.window_seconds = window_seconds
        self.clock = clock
        self.last_seen: Dict[str, float] = {}

    def check(self, client: str) -> Optional[int]:
        """
        Record a request from ``client``.

        Returns:
            None if the request is allowed, otherwise seconds until the next one is
        """
        now = self.clock()
        self._prune(now)

        last = self.last_seen.get(client)
        if last is not None and now - last < self.window_seconds:
            remaining = self.window_seconds - (now - last)
            return max(1, int(remaining + 0.999))

        self.last_seen[client] = now
        return None

    def _prune(self, now: float):
        stale = [client for client, ts in self.last_seen.items() if now - ts > self.window_seconds * 2]
        for client in stale:
            del self.last_seen[client]
