"""Minimum-spacing pacer for sequential external calls."""

import time


class Pacer:
    """Blocks until ``min_interval`` seconds have passed since the last call.

    The first call never waits. Clock and sleep are injectable so callers
    can be tested without real delays.
    """

    def __init__(self, min_interval: float, clock=time.monotonic, sleep=time.sleep):
        self.min_interval = min_interval
        self.clock = clock
        self._sleep = sleep
        self._last = None

    def wait(self):
        if self._last is not None:
            elapsed = self.clock() - self._last
            if elapsed < self.min_interval:
                self._sleep(self.min_interval - elapsed)
        self._last = self.clock()

    def reset(self):
        self._last = None
