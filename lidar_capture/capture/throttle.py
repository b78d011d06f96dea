"""
Frame Rate Limiter

Minimum-interval gate deciding whether an incoming frame is processed.
"""

import threading
from typing import Optional
import logging


class RateLimiter:
    """Allows at most one event per ``min_interval`` seconds."""

    def __init__(self, min_interval: float, last_update: Optional[float] = None):
        """
        Initialize rate limiter.

        Args:
            min_interval: Minimum seconds between accepted events
            last_update: Timestamp of the last accepted event, if any
        """
        if min_interval < 0:
            raise ValueError("min_interval must be non-negative")

        self.min_interval = min_interval
        self.last_update = last_update
        self._lock = threading.Lock()
        self.logger = logging.getLogger(__name__)

    def should_proceed(self, now: float) -> bool:
        """
        Decide whether an event at ``now`` may proceed and record it if so.

        An event proceeds when nothing was accepted yet or strictly more than
        ``min_interval`` has elapsed since the last accepted event.
        """
        with self._lock:
            if self.last_update is not None and now - self.last_update <= self.min_interval:
                return False
            self.last_update = now
            return True

    def reset(self) -> None:
        with self._lock:
            self.last_update = None
