"""
Pyzbar Code Detector Implementation.

This module provides QR code and barcode detection using the pyzbar library.
Follows the Single Responsibility Principle (SRP) and
Dependency Inversion Principle (DIP) from SOLID.
"""

import logging
from typing import Optional, List, Sequence

import numpy as np
from pyzbar.pyzbar import decode, ZBarSymbol, Decoded

from alias_scanner.core.interfaces.code_detector_interface import (
    CodeKind,
    DetectedCode,
    ICodeDetector,
    NormalizedRect
)


DEFAULT_SYMBOLS = [
    "QRCODE", "EAN13", "EAN8", "CODE128", "CODE39",
    "UPCE", "CODABAR", "I25", "PDF417"
]


class PyzbarCodeDetector(ICodeDetector):
    """
    Code detector using pyzbar (ZBar) library.

    Slower than zxing-cpp on large frames but available on platforms
    where zxing-cpp wheels are not.
    """

    def __init__(
        self,
        symbols: Optional[Sequence[str]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize PyzbarCodeDetector.

        Args:
            symbols: ZBarSymbol names to decode (default: DEFAULT_SYMBOLS)
            logger: Logger instance for debug output
        """
        self._symbolTypes = [ZBarSymbol[name] for name in (symbols or DEFAULT_SYMBOLS)]
        self._logger = logger or logging.getLogger(__name__)

    def detect(self, image: np.ndarray) -> List[DetectedCode]:
        """
        Detect and decode all codes in an image.

        Args:
            image: Input image (BGR or grayscale numpy array)

        Returns:
            Detected codes, empty list if none found or decoding failed
        """
        if image is None or image.size == 0:
            return []

        try:
            results: List[Decoded] = decode(image, symbols=self._symbolTypes)
        except Exception as e:
            self._logger.error(f"Error detecting codes: {e}")
            return []

        imageHeight, imageWidth = image.shape[:2]
        codes = []

        for result in results:
            text = result.data.decode('utf-8', errors='replace')
            if not text:
                continue

            codes.append(DetectedCode(
                kind=CodeKind.QR if result.type == "QRCODE" else CodeKind.BARCODE,
                payload=text,
                boundingBox=NormalizedRect.fromPixels(
                    result.rect.left, result.rect.top,
                    result.rect.width, result.rect.height,
                    imageWidth, imageHeight
                ),
                symbology=result.type
            ))

        if codes:
            self._logger.debug(f"Detected {len(codes)} code(s): {codes}")

        return codes
