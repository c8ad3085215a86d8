"""
Selection Resolver Module.

Maps the user's choice among several published codes back to a single
outcome. Explicit selection bypasses the debounce guard.
"""

import logging
from typing import Dict, Iterable, List

from alias_scanner.core.interfaces.code_detector_interface import DetectedCode
from alias_scanner.core.pipeline.scan_outcome import ScanOutcome


logger = logging.getLogger(__name__)


class SelectionResolver:
    """
    Holds the codes offered by MultipleCodes outcomes until one is chosen.

    Codes from every MultipleCodes outcome published since the last
    resolve or clear stay selectable, so a window closing while the user
    is still choosing does not invalidate the codes already on screen.
    """

    def __init__(self):
        self._pending: Dict[str, DetectedCode] = {}

    @property
    def pendingCodes(self) -> List[DetectedCode]:
        return list(self._pending.values())

    @property
    def hasPending(self) -> bool:
        return bool(self._pending)

    def addPending(self, codes: Iterable[DetectedCode]) -> None:
        for code in codes:
            self._pending.setdefault(code.payload, code)

    def clear(self) -> None:
        self._pending = {}

    def resolve(self, chosen: DetectedCode) -> ScanOutcome:
        """
        Resolve a chosen code to a QR or barcode outcome.

        Matching is by payload, so a code detected again in a later frame
        still resolves the pending entry. The kind comes from the pending
        entry, not from the caller's object.

        Raises:
            ValueError: If the code is not among the pending codes.
        """
        match = self._pending.get(chosen.payload)
        if match is None:
            raise ValueError(f"Code {chosen.payload!r} is not pending selection")

        self._pending = {}
        logger.info(f"Selection resolved to {match.kind.value} {match.payload!r}")
        return ScanOutcome.forCode(match)
