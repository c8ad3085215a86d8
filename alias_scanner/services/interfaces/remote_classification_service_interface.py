"""
Remote Classification Service Interface Module.

Defines the interface for the remote OCR call that reads a bank alias
from frames the local detector could not classify.

Follows:
- SRP: Only handles remote alias recognition
- DIP: Consumers depend on this abstraction
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
import numpy as np

from alias_scanner.services.interfaces.base_service_interface import ServiceErrorKind


@dataclass
class ClassificationResult:
    """
    Result of a remote classification.

    Attributes:
        success: Whether the request completed (a negative answer is still a success).
        alias: Recognized alias, or None when the image has no alias.
        rawResponse: Text returned by the model.
        error: Failure category when success is False.
        processingTimeMs: Request round-trip time.
    """
    success: bool
    alias: Optional[str] = None
    rawResponse: str = ""
    error: Optional[ServiceErrorKind] = None
    processingTimeMs: float = 0.0

    @property
    def hasAlias(self) -> bool:
        return self.success and bool(self.alias)


class IRemoteClassificationService(ABC):
    """
    Interface for remote alias recognition.
    """

    @abstractmethod
    def classify(self, image: np.ndarray) -> ClassificationResult:
        """
        Send a cropped frame to the remote model.

        Blocking; call it off the UI thread.

        Args:
            image: Cropped BGR frame.

        Returns:
            ClassificationResult
        """
        pass
