"""
Clock Module.

Time source for the pipeline. Components take explicit timestamps; the
pipeline and session read them from a Clock so tests can drive time.
"""

import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """Monotonic time source in seconds."""

    @abstractmethod
    def now(self) -> float:
        pass


class MonotonicClock(Clock):
    """Wall-clock-independent time from time.monotonic()."""

    def now(self) -> float:
        return time.monotonic()
