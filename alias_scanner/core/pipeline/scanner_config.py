"""
Scanner Config Module.

Immutable timing and threshold parameters for the frame-classification
pipeline. Built once per session and passed into every component at
construction, so no component reads global state.
"""

from dataclasses import dataclass, fields, asdict
from typing import Any, Dict


FRAME_ROTATIONS = ("none", "clockwise", "counterclockwise", "180")


@dataclass(frozen=True)
class ScannerConfig:
    """
    Pipeline parameters. All durations are in seconds.

    Attributes:
        initialDelay: Warm-up after session start before any frame is admitted.
        visionInterval: Minimum spacing between frames given to the local detector.
        ocrInterval: Minimum spacing between remote OCR dispatches.
        debounceInterval: Cool-down before the same barcode may be emitted again.
        accumulationWindow: Time codes are collected before a decision is made.
        stabilityThreshold: Max summed accelerometer delta (g) still considered stable.
        ocrCropWidthRatio: Share of the (rotated) frame width kept for OCR.
        ocrCropHeightRatio: Share of the (rotated) frame height kept for OCR.
        frameRotation: Rotation applied to the sensor buffer before cropping.
        surfaceEmptyFrames: Publish ScanOutcome NONE for frames that led nowhere.
    """
    initialDelay: float = 0.5
    visionInterval: float = 0.15
    ocrInterval: float = 1.5
    debounceInterval: float = 3.0
    accumulationWindow: float = 0.5
    stabilityThreshold: float = 0.4
    ocrCropWidthRatio: float = 0.95
    ocrCropHeightRatio: float = 0.85
    frameRotation: str = "none"
    surfaceEmptyFrames: bool = False

    def __post_init__(self):
        for name in (
            "initialDelay", "visionInterval", "ocrInterval",
            "debounceInterval", "accumulationWindow", "stabilityThreshold"
        ):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be >= 0, got {value}")

        for name in ("ocrCropWidthRatio", "ocrCropHeightRatio"):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                raise ValueError(f"{name} must be in (0, 1], got {value}")

        if self.frameRotation not in FRAME_ROTATIONS:
            raise ValueError(
                f"frameRotation must be one of {FRAME_ROTATIONS}, "
                f"got '{self.frameRotation}'"
            )

    @classmethod
    def fromDict(cls, data: Dict[str, Any]) -> "ScannerConfig":
        """
        Create config from a dictionary, using defaults for missing keys.

        Unknown keys are ignored.
        """
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in (data or {}).items() if k in known})

    def toDict(self) -> Dict[str, Any]:
        return asdict(self)
