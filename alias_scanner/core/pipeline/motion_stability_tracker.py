"""
Motion Stability Tracker Module.

Keeps a rolling stability verdict from accelerometer samples. Written by
the sensor thread, read by the capture thread.
"""

import logging
import threading
from typing import Optional

from alias_scanner.core.interfaces.motion_sensor_interface import StabilitySample


logger = logging.getLogger(__name__)


class MotionStabilityTracker:
    """
    Derives `isStable` from the change between the two latest samples.

    movement = |dx| + |dy| + |dz|; stable while movement < threshold.
    The first sample has no predecessor and leaves the verdict unchanged.
    """

    def __init__(self, stabilityThreshold: float = 0.4, initiallyStable: bool = True):
        self._stabilityThreshold = stabilityThreshold
        self._isStable = initiallyStable
        self._lastSample: Optional[StabilitySample] = None
        self._lock = threading.Lock()

    def observe(self, sample: StabilitySample) -> None:
        with self._lock:
            last = self._lastSample
            if last is not None:
                movement = (
                    abs(sample.x - last.x)
                    + abs(sample.y - last.y)
                    + abs(sample.z - last.z)
                )
                stable = movement < self._stabilityThreshold
                if stable != self._isStable:
                    logger.debug(
                        f"Device {'stable' if stable else 'moving'} "
                        f"(movement={movement:.3f})"
                    )
                self._isStable = stable

            self._lastSample = sample

    def isStable(self) -> bool:
        with self._lock:
            return self._isStable

    @property
    def lastSample(self) -> Optional[StabilitySample]:
        with self._lock:
            return self._lastSample
