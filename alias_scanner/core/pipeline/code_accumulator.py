"""
Code Accumulator Module.

Collects codes seen across a short window, deduplicated by payload, then
decides between a single-code result, a multiple-codes result, or nothing.

Codes seen in different frames of the same window count as one view, so
a second code missed by a single detector pass still reaches the user.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional

from alias_scanner.core.interfaces.code_detector_interface import DetectedCode
from alias_scanner.core.pipeline.debounce_guard import DebounceGuard, barcodeKey
from alias_scanner.core.pipeline.scan_outcome import ScanOutcome


logger = logging.getLogger(__name__)


class AccumulatorStatus(Enum):
    NO_CODES = "noCodes"            # frame had no codes; any open window was discarded
    ACCUMULATING = "accumulating"   # window still open
    RESOLVED = "resolved"           # window closed with an outcome to publish
    SUPPRESSED = "suppressed"       # window closed on a debounced barcode


@dataclass(frozen=True)
class AccumulatorDecision:
    status: AccumulatorStatus
    outcome: Optional[ScanOutcome] = None

    @property
    def hasCodes(self) -> bool:
        return self.status is not AccumulatorStatus.NO_CODES


@dataclass
class AccumulationWindow:
    startedAt: float
    codes: Dict[str, DetectedCode]


class CodeAccumulator:
    """
    Time-windowed code collector.

    The window opens on the first frame with codes and closes on the first
    frame observed at or after `startedAt + accumulationWindow`. Closure is
    only evaluated when a frame arrives; if frames stop, the window stays
    open until an empty frame discards it.
    """

    def __init__(self, debounceGuard: DebounceGuard, accumulationWindow: float = 0.5):
        self._debounceGuard = debounceGuard
        self._accumulationWindow = accumulationWindow
        self._window: Optional[AccumulationWindow] = None

    @property
    def isWindowOpen(self) -> bool:
        return self._window is not None

    @property
    def pendingCodes(self) -> List[DetectedCode]:
        return list(self._window.codes.values()) if self._window else []

    def observe(self, frameCodes: Iterable[DetectedCode], now: float) -> AccumulatorDecision:
        """
        Feed the codes detected in one admitted frame.

        Args:
            frameCodes: Codes from the local detector for this frame.
            now: Frame timestamp.

        Returns:
            AccumulatorDecision
        """
        codes = [code for code in frameCodes if code.payload]

        if not codes:
            if self._window is not None:
                logger.debug(
                    f"Empty frame, discarding window with {len(self._window.codes)} code(s)"
                )
                self._window = None
            return AccumulatorDecision(AccumulatorStatus.NO_CODES)

        if self._window is None:
            self._window = AccumulationWindow(startedAt=now, codes={})

        # Payload is the dedup key; a re-seen code replaces its entry in place
        for code in codes:
            self._window.codes[code.payload] = code

        if now - self._window.startedAt < self._accumulationWindow:
            return AccumulatorDecision(AccumulatorStatus.ACCUMULATING)

        snapshot = list(self._window.codes.values())
        self._window = None

        if len(snapshot) > 1:
            logger.debug(f"Window closed with {len(snapshot)} codes")
            return AccumulatorDecision(
                AccumulatorStatus.RESOLVED,
                ScanOutcome.multipleCodes(snapshot)
            )

        code = snapshot[0]
        if code.isQr:
            return AccumulatorDecision(AccumulatorStatus.RESOLVED, ScanOutcome.qrCode(code.payload))

        key = barcodeKey(code.payload)
        if self._debounceGuard.shouldSuppress(key, now):
            logger.debug(f"Barcode {code.payload!r} suppressed by debounce")
            return AccumulatorDecision(AccumulatorStatus.SUPPRESSED)

        self._debounceGuard.recordEmission(key, now)
        return AccumulatorDecision(AccumulatorStatus.RESOLVED, ScanOutcome.barcode(code.payload))

    def reset(self) -> None:
        self._window = None
