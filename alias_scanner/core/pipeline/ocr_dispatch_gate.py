"""
OCR Dispatch Gate Module.

Fallback path for frames with no local codes: decides whether the frame
may be sent to remote OCR, and crops it to the region of interest.
"""

import logging
from typing import Optional

import cv2
import numpy as np


logger = logging.getLogger(__name__)


_ROTATE_CODES = {
    "clockwise": cv2.ROTATE_90_CLOCKWISE,
    "counterclockwise": cv2.ROTATE_90_COUNTERCLOCKWISE,
    "180": cv2.ROTATE_180,
}


class OcrDispatchGate:
    """
    Rate-limit and stability gate for remote OCR.

    Dispatch requires both `now - lastDispatch >= ocrInterval` and a
    stable device. Only a successful dispatch advances the rate-limit
    clock; a declined frame is simply recovered by the next eligible one.
    """

    def __init__(
        self,
        ocrInterval: float = 1.5,
        cropWidthRatio: float = 0.95,
        cropHeightRatio: float = 0.85,
        frameRotation: str = "none"
    ):
        """
        Initialize OcrDispatchGate.

        Args:
            ocrInterval: Minimum seconds between dispatches.
            cropWidthRatio: Share of the rotated frame width kept.
            cropHeightRatio: Share of the rotated frame height kept.
            frameRotation: Rotation applied to the sensor buffer before cropping
                ("none", "clockwise", "counterclockwise", "180").
        """
        if frameRotation != "none" and frameRotation not in _ROTATE_CODES:
            raise ValueError(f"Unsupported frame rotation: '{frameRotation}'")

        self._ocrInterval = ocrInterval
        self._cropWidthRatio = cropWidthRatio
        self._cropHeightRatio = cropHeightRatio
        self._rotateCode = _ROTATE_CODES.get(frameRotation)
        self._lastDispatch: Optional[float] = None

    @property
    def lastDispatch(self) -> Optional[float]:
        return self._lastDispatch

    def shouldDispatch(self, now: float, stable: bool) -> bool:
        if self._lastDispatch is not None and now - self._lastDispatch < self._ocrInterval:
            return False

        if not stable:
            logger.debug("OCR dispatch held back: device moving")
            return False

        self._lastDispatch = now
        return True

    def crop(self, frame: np.ndarray) -> np.ndarray:
        """
        Rotate the frame to display orientation and keep the centered region.

        The result is a copy; the caller's frame buffer is not retained.

        Args:
            frame: Sensor frame (H x W [x C]).

        Returns:
            np.ndarray: Cropped image.
        """
        if self._rotateCode is not None:
            frame = cv2.rotate(frame, self._rotateCode)

        height, width = frame.shape[:2]
        cropWidth = max(1, int(width * self._cropWidthRatio))
        cropHeight = max(1, int(height * self._cropHeightRatio))
        x = (width - cropWidth) // 2
        y = (height - cropHeight) // 2

        return frame[y:y + cropHeight, x:x + cropWidth].copy()
