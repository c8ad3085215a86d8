"""
Code Detector Factory Module.

Factory function for creating local code detector instances based on
backend selection. Supports zxing-cpp and pyzbar backends.

Follows:
- OCP (Open/Closed Principle): Easy to extend with new backends
- DIP (Dependency Inversion): Returns ICodeDetector interface
- Factory Pattern: Encapsulates object creation logic
"""

import logging
from typing import Optional, List, Sequence

from alias_scanner.core.interfaces.code_detector_interface import ICodeDetector


logger = logging.getLogger(__name__)


def createCodeDetector(
    backend: str = "zxing",
    symbologies: Optional[Sequence[str]] = None,
    # ZXing params (prefixed with 'zxing')
    zxingTryRotate: bool = True,
    zxingTryDownscale: bool = True
) -> ICodeDetector:
    """
    Factory function to create a code detector based on backend.

    Supports:
    - "zxing": zxing-cpp backend (fast, all symbologies in one pass)
    - "pyzbar": ZBar backend

    Args:
        backend: Backend name ("zxing" or "pyzbar").
        symbologies: Backend-specific symbology names, None for defaults.
        zxingTryRotate: (zxing) Try rotated barcodes (90/270 degrees).
        zxingTryDownscale: (zxing) Try downscaled versions for better detection.

    Returns:
        ICodeDetector: Detector instance.

    Raises:
        ValueError: If backend is invalid or not supported.
        ImportError: If required library is not installed.

    Examples:
        >>> detector = createCodeDetector(
        ...     backend="zxing",
        ...     symbologies=["QRCode", "EAN13"]
        ... )
    """
    backend = backend.lower().strip()

    supportedBackends = getSupportedCodeBackends()
    if backend not in supportedBackends:
        errorMsg = (
            f"Invalid code detector backend: '{backend}'. "
            f"Supported backends: {supportedBackends}"
        )
        logger.error(errorMsg)
        raise ValueError(errorMsg)

    if backend == "pyzbar":
        return _createPyzbarDetector(symbologies=symbologies)

    return _createZxingDetector(
        symbologies=symbologies,
        zxingTryRotate=zxingTryRotate,
        zxingTryDownscale=zxingTryDownscale
    )


def _createZxingDetector(
    symbologies: Optional[Sequence[str]],
    zxingTryRotate: bool,
    zxingTryDownscale: bool
) -> ICodeDetector:
    """
    Create ZXing code detector instance.

    Raises:
        ImportError: If zxing-cpp is not installed.
    """
    try:
        import zxingcpp  # noqa: F401
    except ImportError as e:
        errorMsg = (
            "zxing-cpp is not installed. "
            "Install with: pip install zxing-cpp"
        )
        logger.error(errorMsg)
        logger.error(f"Import error details: {e}")
        raise ImportError(errorMsg) from e

    from alias_scanner.core.detector.zxing_code_detector import ZxingCodeDetector

    logger.info(
        f"Creating ZXing code detector "
        f"(tryRotate={zxingTryRotate}, tryDownscale={zxingTryDownscale})"
    )

    return ZxingCodeDetector(
        symbologies=symbologies,
        tryRotate=zxingTryRotate,
        tryDownscale=zxingTryDownscale
    )


def _createPyzbarDetector(
    symbologies: Optional[Sequence[str]]
) -> ICodeDetector:
    """
    Create pyzbar code detector instance.

    Raises:
        ImportError: If pyzbar (or the zbar shared library) is not installed.
    """
    try:
        from alias_scanner.core.detector.pyzbar_code_detector import PyzbarCodeDetector
    except ImportError as e:
        errorMsg = (
            "pyzbar is not installed. "
            "Install with: pip install pyzbar (requires the zbar shared library)"
        )
        logger.error(errorMsg)
        logger.error(f"Import error details: {e}")
        raise ImportError(errorMsg) from e

    logger.info("Creating pyzbar code detector")
    return PyzbarCodeDetector(symbols=symbologies)


def getSupportedCodeBackends() -> List[str]:
    """
    Get list of supported code detector backend names.

    Returns:
        List[str]: List of backend names ["zxing", "pyzbar"].
    """
    return ["zxing", "pyzbar"]


def isCodeBackendAvailable(backend: str) -> bool:
    """
    Check if a code detector backend is available (library installed).

    Args:
        backend: Backend name ("zxing" or "pyzbar").

    Returns:
        bool: True if backend library is installed and importable.
    """
    backend = backend.lower().strip()

    if backend == "zxing":
        try:
            import zxingcpp  # noqa: F401
            return True
        except ImportError:
            return False

    elif backend == "pyzbar":
        try:
            from pyzbar import pyzbar  # noqa: F401
            return True
        except ImportError:
            return False

    return False
