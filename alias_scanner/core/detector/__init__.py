"""Local code detection module."""

from alias_scanner.core.detector.code_detector_factory import (
    createCodeDetector,
    getSupportedCodeBackends,
    isCodeBackendAvailable
)

__all__ = [
    'createCodeDetector',
    'getSupportedCodeBackends',
    'isCodeBackendAvailable'
]
