"""
Motion Sensor Sources

Implements IMotionSensor for the desktop host.

- PollingMotionSensor: polls a reader callable on its own thread at a
  fixed interval (USB/serial IMUs, phone bridges, replayed recordings).
- StationaryMotionSensor: fixed-mount cameras; reports a constant
  reading so every delta is zero.
"""

import logging
import threading
from typing import Callable, Optional

from alias_scanner.core.interfaces.motion_sensor_interface import (
    IMotionSensor,
    StabilitySample
)


logger = logging.getLogger(__name__)


class PollingMotionSensor(IMotionSensor):
    """
    Motion sensor that polls a reader function at a fixed interval.

    The reader returns the latest accelerometer sample, or None when no
    new reading is available. Reader exceptions stop that tick only.
    """

    def __init__(
        self,
        readSample: Callable[[], Optional[StabilitySample]],
        updateInterval: float = 0.1,
        name: str = "motion-sensor"
    ):
        """
        Initialize PollingMotionSensor.

        Args:
            readSample: Callable returning the current sample or None.
            updateInterval: Seconds between polls.
            name: Thread name.
        """
        if updateInterval <= 0:
            raise ValueError(f"updateInterval must be positive, got {updateInterval}")

        self._readSample = readSample
        self._updateInterval = updateInterval
        self._name = name
        self._thread: Optional[threading.Thread] = None
        self._stopEvent = threading.Event()
        self._onSample: Optional[Callable[[StabilitySample], None]] = None

    @property
    def updateInterval(self) -> float:
        return self._updateInterval

    def isAvailable(self) -> bool:
        return self._readSample is not None

    def start(self, onSample: Callable[[StabilitySample], None]) -> bool:
        if not self.isAvailable():
            logger.error("Motion sensor is not available")
            return False

        if self._thread is not None and self._thread.is_alive():
            logger.warning("Motion sensor already running")
            return True

        self._onSample = onSample
        self._stopEvent.clear()
        self._thread = threading.Thread(
            target=self._pollLoop,
            daemon=True,
            name=self._name
        )
        self._thread.start()
        logger.info(f"Motion sensor started (interval={self._updateInterval * 1000:.0f}ms)")
        return True

    def stop(self) -> None:
        self._stopEvent.set()
        if self._thread is not None:
            self._thread.join(timeout=max(1.0, self._updateInterval * 5))
            self._thread = None
            logger.info("Motion sensor stopped")

    def _pollLoop(self) -> None:
        while not self._stopEvent.is_set():
            try:
                sample = self._readSample()
            except Exception as e:
                logger.warning(f"Motion sensor read failed: {e}")
                sample = None

            if sample is not None and self._onSample is not None:
                self._onSample(sample)

            self._stopEvent.wait(self._updateInterval)


class StationaryMotionSensor(PollingMotionSensor):
    """
    Motion sensor for cameras that never move (desk or wall mounts).

    Always reports 1 g straight down, so the device is always stable.
    """

    def __init__(self, updateInterval: float = 0.1):
        super().__init__(
            readSample=lambda: StabilitySample(0.0, 0.0, -1.0),
            updateInterval=updateInterval,
            name="stationary-motion-sensor"
        )
