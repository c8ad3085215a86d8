"""
Camera Interface Module

Defines the abstract interface for the camera capture source that feeds
the frame-classification pipeline.
Follows ISP (Interface Segregation Principle): Only contains camera-related methods.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Tuple, Optional
import numpy as np


@dataclass
class CameraInfo:
    """Data class representing camera device information."""
    index: int
    name: str

    def __str__(self) -> str:
        return self.name


class ICameraCapture(ABC):
    """
    Abstract interface for camera capture operations.

    Frames are delivered in the sensor's native orientation (BGR).
    Any rotation needed before OCR is applied downstream by the
    OCR dispatch gate, not by the camera.
    """

    @abstractmethod
    def listAvailableCameras(self) -> List[CameraInfo]:
        """
        List camera devices that can deliver frames.

        Returns:
            List[CameraInfo]: Available camera devices.
        """
        pass

    @abstractmethod
    def open(self, cameraIndex: int, width: int = 1280, height: int = 720) -> bool:
        """
        Open a camera device by its index.

        Args:
            cameraIndex: The index of the camera to open.
            width: Desired frame width.
            height: Desired frame height.

        Returns:
            bool: True if the camera is ready to deliver frames.
        """
        pass

    @abstractmethod
    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        """
        Read the next frame from the opened camera.

        Returns:
            Tuple[bool, Optional[np.ndarray]]: Success flag and BGR frame.
        """
        pass

    @abstractmethod
    def release(self) -> None:
        """Release the camera device."""
        pass

    @abstractmethod
    def isOpened(self) -> bool:
        """
        Check if a camera is currently opened.

        Returns:
            bool: True if camera is opened.
        """
        pass
