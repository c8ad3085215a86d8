"""
Scan Outcome Module.

The closed set of decisions the pipeline delivers to its consumer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from alias_scanner.core.interfaces.code_detector_interface import DetectedCode


class ScanOutcomeKind(Enum):
    QR_CODE = "qrCode"
    BARCODE = "barcode"
    MULTIPLE_CODES = "multipleCodes"
    NEEDS_REMOTE_CLASSIFICATION = "needsRemoteClassification"
    NONE = "none"


@dataclass(frozen=True)
class ScanOutcome:
    """
    Tagged union of pipeline decisions.

    Only the field matching `kind` is set:
        QR_CODE / BARCODE: payload
        MULTIPLE_CODES: codes (discovery order)
        NEEDS_REMOTE_CLASSIFICATION: image (cropped frame, owned by the outcome)

    Use the factory classmethods instead of the constructor.
    """
    kind: ScanOutcomeKind
    payload: str = ""
    codes: Tuple[DetectedCode, ...] = ()
    image: Optional[np.ndarray] = field(default=None, repr=False, compare=False)

    @classmethod
    def qrCode(cls, payload: str) -> "ScanOutcome":
        return cls(kind=ScanOutcomeKind.QR_CODE, payload=payload)

    @classmethod
    def barcode(cls, payload: str) -> "ScanOutcome":
        return cls(kind=ScanOutcomeKind.BARCODE, payload=payload)

    @classmethod
    def multipleCodes(cls, codes) -> "ScanOutcome":
        return cls(kind=ScanOutcomeKind.MULTIPLE_CODES, codes=tuple(codes))

    @classmethod
    def needsRemoteClassification(cls, image: np.ndarray) -> "ScanOutcome":
        return cls(kind=ScanOutcomeKind.NEEDS_REMOTE_CLASSIFICATION, image=image)

    @classmethod
    def none(cls) -> "ScanOutcome":
        return cls(kind=ScanOutcomeKind.NONE)

    @classmethod
    def forCode(cls, code: DetectedCode) -> "ScanOutcome":
        """Single-code outcome matching the code's kind."""
        return cls.qrCode(code.payload) if code.isQr else cls.barcode(code.payload)

    def __repr__(self) -> str:
        if self.kind in (ScanOutcomeKind.QR_CODE, ScanOutcomeKind.BARCODE):
            return f"ScanOutcome({self.kind.value}: {self.payload!r})"
        if self.kind is ScanOutcomeKind.MULTIPLE_CODES:
            return f"ScanOutcome({self.kind.value}: {list(self.codes)})"
        if self.kind is ScanOutcomeKind.NEEDS_REMOTE_CLASSIFICATION:
            shape = self.image.shape if self.image is not None else None
            return f"ScanOutcome({self.kind.value}: image={shape})"
        return f"ScanOutcome({self.kind.value})"
