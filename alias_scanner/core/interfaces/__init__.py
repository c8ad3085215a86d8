"""Core capability interfaces."""

from alias_scanner.core.interfaces.camera_interface import ICameraCapture, CameraInfo
from alias_scanner.core.interfaces.code_detector_interface import (
    CodeKind,
    NormalizedRect,
    DetectedCode,
    ICodeDetector
)
from alias_scanner.core.interfaces.motion_sensor_interface import (
    StabilitySample,
    IMotionSensor
)

__all__ = [
    "ICameraCapture",
    "CameraInfo",
    "CodeKind",
    "NormalizedRect",
    "DetectedCode",
    "ICodeDetector",
    "StabilitySample",
    "IMotionSensor",
]
