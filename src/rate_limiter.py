"""
Fixed-window rate limiting for administrative MCP tools.
"""

import threading
import time
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional


ADMIN_RATE_LIMIT = 100      # calls per window
ADMIN_WINDOW_MS = 60000     # one minute


def _now_ms() -> float:
    return time.time() * 1000


@dataclass
class RateLimitWindow:
    count: int
    reset_time: float


class AdminRateLimiter:
    """
    Count calls per operation name in fixed windows.

    Each operation gets its own window, created on first use and reset lazily
    on the first call after it expires. Records are never evicted.
    """

    def __init__(
        self,
        limit: int = ADMIN_RATE_LIMIT,
        window_ms: int = ADMIN_WINDOW_MS,
        clock: Optional[Callable[[], float]] = None
    ):
        self.limit = limit
        self.window_ms = window_ms
        self._clock = clock or _now_ms
        self._windows: Dict[str, RateLimitWindow] = {}
        self._lock = threading.Lock()

    def check_admin_rate_limit(self, operation: str) -> bool:
        """
        Record a call to operation if it is within the limit.

        Returns:
            True if the call is allowed, False if the window is exhausted
        """
        with self._lock:
            now = self._clock()
            window = self._windows.get(operation)

            if window is None:
                window = RateLimitWindow(count=0, reset_time=now + self.window_ms)
                self._windows[operation] = window

            if now > window.reset_time:
                window.count = 0
                window.reset_time = now + self.window_ms

            if window.count >= self.limit:
                return False

            window.count += 1
            return True

    def get_window(self, operation: str) -> Optional[RateLimitWindow]:
        """Return a copy of the current window for operation, if one exists."""
        with self._lock:
            window = self._windows.get(operation)
            return replace(window) if window else None
