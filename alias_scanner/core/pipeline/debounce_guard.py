"""
Debounce Guard Module.

Suppresses re-emitting the same barcode result within a cool-down window,
so a barcode held in view does not re-trigger the "code found" transition
on every accumulation window.
"""

import logging
from typing import Optional


logger = logging.getLogger(__name__)


def barcodeKey(payload: str) -> str:
    """Namespaced debounce key for a barcode payload."""
    return f"barcode:{payload}"


class DebounceGuard:
    """
    Remembers the last emitted key and when it was emitted.

    Suppresses a candidate when it equals the last key and less than
    `debounceInterval` has passed since that emission.
    """

    def __init__(self, debounceInterval: float = 3.0):
        self._debounceInterval = debounceInterval
        self._lastPayloadKey: Optional[str] = None
        self._lastEmittedAt: Optional[float] = None

    @property
    def lastPayloadKey(self) -> Optional[str]:
        return self._lastPayloadKey

    @property
    def lastEmittedAt(self) -> Optional[float]:
        return self._lastEmittedAt

    def shouldSuppress(self, candidateKey: str, now: float) -> bool:
        if self._lastPayloadKey is None or candidateKey != self._lastPayloadKey:
            return False
        return now - self._lastEmittedAt < self._debounceInterval

    def recordEmission(self, candidateKey: str, now: float) -> None:
        self._lastPayloadKey = candidateKey
        self._lastEmittedAt = now

    def reset(self) -> None:
        self._lastPayloadKey = None
        self._lastEmittedAt = None
        logger.debug("Debounce state cleared")
