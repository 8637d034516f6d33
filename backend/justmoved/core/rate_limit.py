"""
Fixed-window, per-client request limiter (in-process, per worker).
Only the geocode endpoint uses it; counts reset when the window elapses.
"""
import threading
import time

from justmoved.core.constants import RATE_LIMIT_WINDOW_SECONDS
from justmoved.core.errors import RateLimited


class RateLimiter:
    def __init__(self, limit: int, window_seconds: float = RATE_LIMIT_WINDOW_SECONDS) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._windows: dict[str, tuple[int, float]] = {}  # client -> (count, reset_at)
        self._next_prune = 0.0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._windows)

    def _prune(self, now: float) -> None:
        """Drop clients whose window has elapsed. Runs at most once per window."""
        if now < self._next_prune:
            return
        self._windows = {c: w for c, w in self._windows.items() if w[1] > now}
        self._next_prune = now + self.window_seconds

    def hit(self, client: str, *, now: float | None = None) -> None:
        """Count one request for client; raise RateLimited once the window's limit is used up."""
        now = time.monotonic() if now is None else now
        with self._lock:
            self._prune(now)
            count, reset_at = self._windows.get(client, (0, 0.0))
            if now >= reset_at:
                self._windows[client] = (1, now + self.window_seconds)
                return
            if count >= self.limit:
                raise RateLimited()
            self._windows[client] = (count + 1, reset_at)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
            self._next_prune = 0.0
