"""Camera capture implementations."""

from alias_scanner.core.camera.opencv_camera import OpenCVCamera

__all__ = ["OpenCVCamera"]
