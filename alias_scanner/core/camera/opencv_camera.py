"""
OpenCV Camera Implementation

Implements ICameraCapture using OpenCV's VideoCapture.
Follows SRP: Only handles camera capture operations.
"""

import logging
from typing import List, Tuple, Optional
import numpy as np
import cv2

from alias_scanner.core.interfaces.camera_interface import ICameraCapture, CameraInfo


logger = logging.getLogger(__name__)


class OpenCVCamera(ICameraCapture):
    """
    Camera capture implementation using OpenCV VideoCapture.

    Keeps the driver buffer at a single frame so that the pipeline always
    evaluates the most recent image instead of a backlog of late frames.
    """

    def __init__(self, maxCameraSearch: int = 4, autoFocus: bool = True):
        """
        Initialize OpenCVCamera.

        Args:
            maxCameraSearch: Maximum number of camera indices to probe.
            autoFocus: Request continuous autofocus when the driver supports it.
        """
        self._capture: Optional[cv2.VideoCapture] = None
        self._cameraIndex: int = -1
        self._maxCameraSearch = maxCameraSearch
        self._autoFocus = autoFocus

    def listAvailableCameras(self) -> List[CameraInfo]:
        """
        List available camera devices by probing camera indices.

        Returns:
            List[CameraInfo]: List of available cameras.
        """
        cameras = []

        for index in range(self._maxCameraSearch):
            probe = cv2.VideoCapture(index)
            try:
                if probe.isOpened():
                    ret, _ = probe.read()
                    if ret:
                        cameras.append(CameraInfo(index=index, name=f"Camera {index}"))
            except cv2.error as e:
                logger.debug(f"Error probing camera {index}: {e}")
            finally:
                probe.release()

        if not cameras:
            logger.warning("No cameras found in the system")
        else:
            logger.info(f"Found {len(cameras)} camera(s)")

        return cameras

    def open(self, cameraIndex: int, width: int = 1280, height: int = 720) -> bool:
        """
        Open a camera device by its index.

        Args:
            cameraIndex: The index of the camera to open.
            width: Desired frame width.
            height: Desired frame height.

        Returns:
            bool: True if camera opened successfully.
        """
        if self._capture is not None:
            self.release()

        try:
            self._capture = cv2.VideoCapture(cameraIndex)
        except cv2.error as e:
            logger.error(f"Error opening camera {cameraIndex}: {e}")
            self._capture = None
            return False

        if not self._capture.isOpened():
            logger.error(f"Failed to open camera {cameraIndex}")
            self._capture = None
            return False

        self._cameraIndex = cameraIndex
        self._capture.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        self._capture.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        self._capture.set(cv2.CAP_PROP_BUFFERSIZE, 1)
        if self._autoFocus:
            self._capture.set(cv2.CAP_PROP_AUTOFOCUS, 1)

        logger.info(f"Camera {cameraIndex} opened successfully ({width}x{height})")
        return True

    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        """
        Read a frame from the opened camera.

        Returns:
            Tuple[bool, Optional[np.ndarray]]: Success flag and frame.
        """
        if self._capture is None or not self._capture.isOpened():
            return (False, None)

        try:
            ret, frame = self._capture.read()
        except cv2.error as e:
            logger.error(f"Error reading frame: {e}")
            return (False, None)

        return (ret, frame if ret else None)

    def release(self) -> None:
        """Release the camera device and free resources."""
        if self._capture is None:
            return

        try:
            self._capture.release()
            logger.info(f"Camera {self._cameraIndex} released")
        finally:
            self._capture = None
            self._cameraIndex = -1

    def isOpened(self) -> bool:
        """Check if a camera is currently opened."""
        return self._capture is not None and self._capture.isOpened()

    def getCameraIndex(self) -> int:
        """
        Get the current camera index.

        Returns:
            int: Current camera index, or -1 if no camera is opened.
        """
        return self._cameraIndex
