"""
Code Detector Interface Module.

This module defines the interface and data classes for local QR code and
barcode detection. The detector is a black box to the pipeline: given a
frame it returns zero or more recognized codes.
Follows the Interface Segregation Principle (ISP) from SOLID.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List

import numpy as np


class CodeKind(Enum):
    """Symbology family of a detected code."""
    QR = "qr"
    BARCODE = "barcode"

    @property
    def displayName(self) -> str:
        return "QR" if self is CodeKind.QR else "Barcode"


@dataclass(frozen=True)
class NormalizedRect:
    """
    Axis-aligned rectangle in normalized image coordinates.

    Attributes:
        x: Left edge (0-1)
        y: Top edge (0-1)
        width: Width (0-1)
        height: Height (0-1)
    """
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def fromPixels(
        cls,
        left: float,
        top: float,
        width: float,
        height: float,
        imageWidth: int,
        imageHeight: int
    ) -> "NormalizedRect":
        """
        Build a normalized rectangle from pixel coordinates.

        Values are clamped to [0, 1] so that codes touching the frame edge
        never produce out-of-range boxes.
        """
        if imageWidth <= 0 or imageHeight <= 0:
            return cls(0.0, 0.0, 0.0, 0.0)

        x1 = min(max(left / imageWidth, 0.0), 1.0)
        y1 = min(max(top / imageHeight, 0.0), 1.0)
        x2 = min(max((left + width) / imageWidth, 0.0), 1.0)
        y2 = min(max((top + height) / imageHeight, 0.0), 1.0)
        return cls(x1, y1, x2 - x1, y2 - y1)


@dataclass(frozen=True)
class DetectedCode:
    """
    A code recognized by the local detector in a single frame.

    Attributes:
        kind: QR or linear barcode family
        payload: Decoded text content
        boundingBox: Location in normalized coordinates
        symbology: Backend-specific format name (e.g. "QRCode", "EAN13")
        id: Opaque identity, unique per detection
    """
    kind: CodeKind
    payload: str
    boundingBox: NormalizedRect
    symbology: str = ""
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def isQr(self) -> bool:
        return self.kind is CodeKind.QR

    def __repr__(self) -> str:
        return f"DetectedCode({self.kind.value}: {self.payload!r})"


class ICodeDetector(ABC):
    """
    Interface for the local code detector.

    Implementations must be fast (single-digit milliseconds) because they
    run synchronously inside the capture callback. Failures are reported
    as an empty result, never raised.
    """

    @abstractmethod
    def detect(self, image: np.ndarray) -> List[DetectedCode]:
        """
        Detect and decode all codes visible in an image.

        Args:
            image: Input image (BGR or grayscale numpy array)

        Returns:
            Codes in detector emission order; empty list if none found
        """
        pass
