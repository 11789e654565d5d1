"""
Rate limiting utilities for probe workers.
"""

import threading
import time
from collections import deque


class ProbeDelay:
    """
    Fixed sleep before every probe.

    With N workers each sleeping ``delay`` seconds, throughput settles
    around N / delay requests per second.
    """

    def __init__(self, delay: float):
        self.delay = max(0.0, delay)

    def wait(self) -> None:
        if self.delay:
            time.sleep(self.delay)


class RateLimiter:
    """
    Thread-safe rate limiter using sliding window algorithm.

    Usage:
        limiter = RateLimiter(rate=10, per=1.0)  # 10 requests per second

        with limiter:
            make_request()
    """

    def __init__(self, rate: int, per: float = 1.0):
        """
        Initialize rate limiter.

        Args:
            rate: Maximum number of requests allowed
            per: Time window in seconds
        """
        self.rate = rate
        self.per = per
        self.timestamps: deque = deque()
        self._lock = threading.Lock()

    def acquire(self) -> None:
        """Block until a request may be made."""
        with self._lock:
            now = time.monotonic()

            # Remove timestamps outside the window
            while self.timestamps and now - self.timestamps[0] > self.per:
                self.timestamps.popleft()

            if len(self.timestamps) >= self.rate:
                sleep_time = self.timestamps[0] + self.per - now
                if sleep_time > 0:
                    time.sleep(sleep_time)
                    now = time.monotonic()
                    while self.timestamps and now - self.timestamps[0] > self.per:
                        self.timestamps.popleft()

            self.timestamps.append(now)

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        pass
