"""
ZXing Code Detector Implementation.

This module provides QR code and barcode detection using the zxing-cpp
library. zxing-cpp is a high-performance C++ implementation with Python
bindings and decodes all supported symbologies in a single pass.

Follows the Single Responsibility Principle (SRP) from SOLID.
"""

import logging
from typing import Optional, List, Sequence

import cv2
import numpy as np

from alias_scanner.core.interfaces.code_detector_interface import (
    CodeKind,
    DetectedCode,
    ICodeDetector,
    NormalizedRect
)


# zxing-cpp format names that belong to the QR family
QR_FORMAT_NAMES = {"QRCode", "MicroQRCode", "RMQRCode"}

DEFAULT_SYMBOLOGIES = [
    "QRCode", "EAN13", "EAN8", "Code128", "Code39", "UPCE",
    "Codabar", "ITF", "PDF417", "Aztec", "DataMatrix"
]


class ZxingCodeDetector(ICodeDetector):
    """
    Code detector using zxing-cpp library.

    Returns every valid code found in the frame, in the order reported
    by zxing-cpp, with its bounding box normalized to the frame size.
    """

    def __init__(
        self,
        symbologies: Optional[Sequence[str]] = None,
        tryRotate: bool = True,
        tryDownscale: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize ZxingCodeDetector.

        Args:
            symbologies: zxing-cpp format names to decode (default: DEFAULT_SYMBOLOGIES)
            tryRotate: Try rotated barcodes (90/270 degrees)
            tryDownscale: Try downscaled versions for better detection
            logger: Logger instance for debug output
        """
        self._symbologies = list(symbologies) if symbologies else list(DEFAULT_SYMBOLOGIES)
        self._tryRotate = tryRotate
        self._tryDownscale = tryDownscale
        self._logger = logger or logging.getLogger(__name__)
        self._zxingcpp = None
        self._formats = None

        self._logger.info(
            f"ZxingCodeDetector initialized "
            f"(symbologies={self._symbologies}, tryRotate={tryRotate}, "
            f"tryDownscale={tryDownscale})"
        )

    def _ensureZxing(self) -> None:
        """Lazily import zxing-cpp module."""
        if self._zxingcpp is None:
            try:
                import zxingcpp
            except ImportError as e:
                self._logger.error(
                    f"Failed to import zxing-cpp. "
                    f"Please install: pip install zxing-cpp. Error: {e}"
                )
                raise
            self._zxingcpp = zxingcpp
            self._formats = zxingcpp.barcode_formats_from_str("|".join(self._symbologies))
            self._logger.info("zxing-cpp module loaded successfully")

    def detect(self, image: np.ndarray) -> List[DetectedCode]:
        """
        Detect and decode all codes in image.

        Args:
            image: Input image (BGR or grayscale)

        Returns:
            Detected codes, empty list if none found or decoding failed
        """
        self._ensureZxing()

        if image is None or image.size == 0:
            return []

        try:
            if len(image.shape) == 3:
                grayImage = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
            else:
                grayImage = image

            barcodes = self._zxingcpp.read_barcodes(
                grayImage,
                formats=self._formats,
                try_rotate=self._tryRotate,
                try_downscale=self._tryDownscale
            )
        except Exception as e:
            self._logger.error(f"Error during code detection: {e}")
            return []

        imageHeight, imageWidth = grayImage.shape[:2]
        codes = []

        for barcode in barcodes:
            if not barcode.valid or not barcode.text:
                continue

            formatName = barcode.format.name
            position = barcode.position
            xs = [
                position.top_left.x, position.top_right.x,
                position.bottom_right.x, position.bottom_left.x
            ]
            ys = [
                position.top_left.y, position.top_right.y,
                position.bottom_right.y, position.bottom_left.y
            ]

            codes.append(DetectedCode(
                kind=CodeKind.QR if formatName in QR_FORMAT_NAMES else CodeKind.BARCODE,
                payload=barcode.text,
                boundingBox=NormalizedRect.fromPixels(
                    min(xs), min(ys),
                    max(xs) - min(xs), max(ys) - min(ys),
                    imageWidth, imageHeight
                ),
                symbology=formatName
            ))

        if codes:
            self._logger.debug(f"Detected {len(codes)} code(s): {codes}")

        return codes
