"""
Base Service Interface Module.

Defines the base interface, shared error kinds and the helper base class
for the collaborator services (authentication, remote classification,
alias validation, transfer).

Follows:
- ISP (Interface Segregation Principle): Minimal base interface
- DIP (Dependency Inversion Principle): High-level modules depend on abstractions
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Any, Dict
from pathlib import Path
import logging
import json
import time


class ServiceErrorKind(Enum):
    """
    Failure categories reported by the HTTP collaborators.

    Services never raise for HTTP status or network failures; they return
    a result carrying one of these.
    """
    NO_TOKEN = "noToken"
    NETWORK_ERROR = "networkError"
    INVALID_RESPONSE = "invalidResponse"
    NOT_FOUND = "notFound"
    UNAUTHORIZED = "unauthorized"
    SERVER_ERROR = "serverError"


class IBaseService(ABC):
    """
    Base interface for all collaborator services.

    Provides common functionality for:
    - Service identification
    - Debug output management
    """

    @abstractmethod
    def getServiceName(self) -> str:
        """
        Get the service name for logging and debug output.

        Returns:
            str: Service name (e.g., "auth", "remote_classification")
        """
        pass

    @abstractmethod
    def setDebugEnabled(self, enabled: bool) -> None:
        """
        Enable or disable debug output.

        Args:
            enabled: True to enable debug output, False to disable.
        """
        pass

    @abstractmethod
    def isDebugEnabled(self) -> bool:
        """
        Check if debug output is enabled.

        Returns:
            bool: True if debug is enabled.
        """
        pass


class BaseService(IBaseService):
    """
    Base implementation for all collaborator services.

    Provides common functionality that can be inherited by concrete services.
    This is not an interface but a helper base class.
    """

    def __init__(
        self,
        serviceName: str,
        debugBasePath: str = "output/debug",
        debugEnabled: bool = False
    ):
        """
        Initialize BaseService.

        Args:
            serviceName: Name of the service (e.g., "alias_validation").
            debugBasePath: Base path for debug output.
            debugEnabled: Whether debug output is enabled.
        """
        self._serviceName = serviceName
        self._debugBasePath = Path(debugBasePath) / serviceName
        self._debugEnabled = debugEnabled
        self._logger = logging.getLogger(serviceName)

        if debugEnabled:
            self._ensureDebugDirectory()

    def getServiceName(self) -> str:
        """Get the service name."""
        return self._serviceName

    def setDebugEnabled(self, enabled: bool) -> None:
        """Enable or disable debug output."""
        self._debugEnabled = enabled
        if enabled:
            self._ensureDebugDirectory()
        self._logger.info(f"Debug {'enabled' if enabled else 'disabled'}")

    def isDebugEnabled(self) -> bool:
        """Check if debug is enabled."""
        return self._debugEnabled

    def _ensureDebugDirectory(self) -> None:
        """Create debug directory if it doesn't exist."""
        self._debugBasePath.mkdir(parents=True, exist_ok=True)

    def _saveDebugImage(self, requestId: str, image: Any, prefix: str = "") -> Optional[str]:
        """
        Save debug image with consistent naming.

        Args:
            requestId: Request identifier for naming.
            image: Image to save (numpy array).
            prefix: Optional prefix for filename.

        Returns:
            Saved file path, or None if debug is disabled or failed.
        """
        if not self._debugEnabled or image is None:
            return None

        try:
            import cv2
            filename = f"{prefix}_{requestId}.png" if prefix else f"{requestId}.png"
            filepath = self._debugBasePath / filename
            cv2.imwrite(str(filepath), image)
            self._logger.debug(f"Saved debug image: {filepath}")
            return str(filepath)
        except Exception as e:
            self._logger.warning(f"Failed to save debug image: {e}")
            return None

    def _saveDebugJson(self, requestId: str, data: Dict, prefix: str = "") -> Optional[str]:
        """
        Save debug JSON with consistent naming.

        Args:
            requestId: Request identifier for naming.
            data: Data to save as JSON.
            prefix: Optional prefix for filename.

        Returns:
            Saved file path, or None if debug is disabled or failed.
        """
        if not self._debugEnabled:
            return None

        try:
            filename = f"{prefix}_{requestId}.json" if prefix else f"{requestId}.json"
            filepath = self._debugBasePath / filename
            with open(filepath, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False, default=str)
            self._logger.debug(f"Saved debug JSON: {filepath}")
            return str(filepath)
        except Exception as e:
            self._logger.warning(f"Failed to save debug JSON: {e}")
            return None

    def _logTiming(self, requestId: str, processingTimeMs: float) -> None:
        """Log request round-trip time."""
        self._logger.info(f"[{requestId}] Request time: {processingTimeMs:.2f}ms")

    def _measureTime(self, startTime: float) -> float:
        """
        Calculate elapsed time in milliseconds.

        Args:
            startTime: Start time from time.time().

        Returns:
            Elapsed time in milliseconds.
        """
        return (time.time() - startTime) * 1000
