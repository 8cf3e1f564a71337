import time
from collections.abc import Callable

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter

from finintake.logging.logger import Log

MIN_WAIT_SECONDS = 0.001


class SlidingWindowRateLimiter:
    """Allows at most `limit` job starts within any rolling `period_seconds` window.

    The window is a `limits` moving window held in process memory, so each lane
    owns its own counter. Starts are recorded when they are granted.
    """

    def __init__(
        self,
        limit: int,
        period_seconds: int,
        *,
        name: str = "lane",
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if limit < 1:
            raise ValueError("limit must be at least 1")
        if period_seconds < 1:
            raise ValueError("period_seconds must be at least 1")
        self.limit = limit
        self.period_seconds = period_seconds
        self._name = name
        self._sleep = sleep
        self._item = RateLimitItemPerSecond(limit, period_seconds)
        self._window = MovingWindowRateLimiter(MemoryStorage())

    def try_acquire(self) -> float:
        """Take a slot if one is free.

        Returns:
            0.0 when a slot was taken, otherwise seconds until the oldest start
            leaves the window.
        """
        if self._window.hit(self._item, self._name):
            return 0.0
        stats = self._window.get_window_stats(self._item, self._name)
        return max(stats.reset_time - time.time(), MIN_WAIT_SECONDS)

    def acquire(self) -> None:
        """Block until a slot is free, then take it."""
        while True:
            wait = self.try_acquire()
            if wait <= 0:
                return
            Log.debug(f"Rate limit reached for {self._name}, waiting {wait:.1f}s")
            self._sleep(wait)
