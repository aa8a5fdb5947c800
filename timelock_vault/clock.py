"""
Time sources for the vault

Timestamps are integer seconds since the epoch.
"""

import time


class SystemClock:
    """Wall clock"""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """Clock that only moves when told to, for tests and simulations"""

    def __init__(self, start: int = None):
        self._now = int(time.time()) if start is None else start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("Cannot move the clock backwards")
        self._now += seconds
        return self._now

    def set(self, timestamp: int) -> int:
        if timestamp < self._now:
            raise ValueError(f"Cannot move the clock backwards from {self._now} to {timestamp}")
        self._now = timestamp
        return self._now
