"""
Pacing between consecutive external search calls.
"""

import time
from typing import Callable


class RateLimiter:
    """
    Fixed pacing delay between requests.

    Unlike a sliding-interval limiter, ``wait`` always sleeps the full
    interval: time spent inside the previous request does not shorten the
    pause, and a slow request does not lengthen it.
    """

    def __init__(self, min_delay_ms: int, sleep: Callable[[float], None] = time.sleep):
        """
        Initialize the rate limiter.

        Args:
            min_delay_ms: Pause between requests in milliseconds (0 = no pause)
            sleep: Sleep function, injectable for tests
        """
        self.min_delay_ms = max(0, int(min_delay_ms))  # Ensure non-negative
        self._sleep = sleep

    @property
    def min_interval(self) -> float:
        """Pause between requests in seconds."""
        return self.min_delay_ms / 1000.0

    def wait(self) -> None:
        """
        Pause before the next request.

        Call this between requests, never before the first one.
        """
        if self.min_delay_ms <= 0:
            return  # No pacing
        self._sleep(self.min_interval)

