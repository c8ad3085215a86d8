"""
Frame Gate Module.

Admits or rejects camera frames based on a warm-up delay after session
start and a minimum spacing between admitted frames.
"""

import logging
from typing import Optional


logger = logging.getLogger(__name__)


class FrameGate:
    """
    Timing gate in front of the local code detector.

    Rejects every frame until `initialDelay` has elapsed since
    `sessionStart` (exposure and focus are still converging), then admits
    at most one frame per `visionInterval`. Only admission mutates state.
    """

    def __init__(
        self,
        sessionStart: float,
        initialDelay: float = 0.5,
        visionInterval: float = 0.15
    ):
        self._sessionStart = sessionStart
        self._initialDelay = initialDelay
        self._visionInterval = visionInterval
        self._lastAdmitted: Optional[float] = None

    @property
    def lastAdmitted(self) -> Optional[float]:
        return self._lastAdmitted

    def admit(self, now: float) -> bool:
        """
        Decide whether the frame captured at `now` enters the pipeline.

        Args:
            now: Capture timestamp in seconds (same clock as sessionStart).

        Returns:
            bool: True if admitted.
        """
        if now - self._sessionStart < self._initialDelay:
            return False

        if self._lastAdmitted is not None and now - self._lastAdmitted < self._visionInterval:
            return False

        self._lastAdmitted = now
        return True
