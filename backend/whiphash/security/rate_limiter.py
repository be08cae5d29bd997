"""
Rate limiting for the password generation endpoint.

Each derivation runs two 64 MiB Argon2id passes, so requests are limited per
client with an in-memory sliding window.
"""
import time
from threading import Lock
from typing import Dict, List, Optional

from whiphash.core.config import settings


class RateLimiter:
    """Sliding-window limiter keyed by an arbitrary string (client host)."""

    def __init__(self, max_requests: int = 10, window_seconds: float = 60.0, clock=time.monotonic):
        self._hits: Dict[str, List[float]] = {}
        self._lock = Lock()
        self._clock = clock

        self.max_requests = max_requests
        self.window_seconds = window_seconds

    def _prune(self, key: str, now: float) -> List[float]:
        window_start = now - self.window_seconds
        hits = [t for t in self._hits.get(key, []) if t > window_start]
        if hits:
            self._hits[key] = hits
        else:
            self._hits.pop(key, None)
        return hits

    def is_allowed(self, key: str) -> bool:
        """
        Record a request for key and report whether it fits in the window.
        Rejected requests are not recorded.
        """
        with self._lock:
            now = self._clock()
            hits = self._prune(key, now)
            if len(hits) < self.max_requests:
                hits.append(now)
                self._hits[key] = hits
                return True
            return False

    def get_retry_after(self, key: str) -> float:
        """Seconds until the oldest hit leaves the window (0 if allowed now)."""
        with self._lock:
            now = self._clock()
            hits = self._prune(key, now)
            if len(hits) < self.max_requests:
                return 0.0
            return max(0.0, hits[0] + self.window_seconds - now)

    def cleanup_old_entries(self) -> None:
        with self._lock:
            now = self._clock()
            for key in list(self._hits):
                self._prune(key, now)

    def reset(self, key: Optional[str] = None) -> None:
        with self._lock:
            if key is None:
                self._hits.clear()
            else:
                self._hits.pop(key, None)


# Global instance
_rate_limiter = RateLimiter(
    max_requests=settings.rate_limit_max_requests,
    window_seconds=settings.rate_limit_window_seconds,
)


def get_rate_limiter() -> RateLimiter:
    """Get global rate limiter instance."""
    return _rate_limiter
