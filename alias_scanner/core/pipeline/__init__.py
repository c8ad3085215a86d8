"""Real-time frame-classification pipeline."""

from alias_scanner.core.pipeline.scanner_config import ScannerConfig, FRAME_ROTATIONS
from alias_scanner.core.pipeline.clock import Clock, MonotonicClock
from alias_scanner.core.pipeline.scan_outcome import ScanOutcome, ScanOutcomeKind
from alias_scanner.core.pipeline.frame_gate import FrameGate
from alias_scanner.core.pipeline.motion_stability_tracker import MotionStabilityTracker
from alias_scanner.core.pipeline.debounce_guard import DebounceGuard, barcodeKey
from alias_scanner.core.pipeline.code_accumulator import (
    CodeAccumulator,
    AccumulatorDecision,
    AccumulatorStatus
)
from alias_scanner.core.pipeline.ocr_dispatch_gate import OcrDispatchGate
from alias_scanner.core.pipeline.scan_result_publisher import (
    ScanResultPublisher,
    immediateDispatcher
)
from alias_scanner.core.pipeline.selection_resolver import SelectionResolver
from alias_scanner.core.pipeline.frame_classification_pipeline import FrameClassificationPipeline
from alias_scanner.core.pipeline.scan_session import ScanSession, SessionStartError

__all__ = [
    "ScannerConfig",
    "FRAME_ROTATIONS",
    "Clock",
    "MonotonicClock",
    "ScanOutcome",
    "ScanOutcomeKind",
    "FrameGate",
    "MotionStabilityTracker",
    "DebounceGuard",
    "barcodeKey",
    "CodeAccumulator",
    "AccumulatorDecision",
    "AccumulatorStatus",
    "OcrDispatchGate",
    "ScanResultPublisher",
    "immediateDispatcher",
    "SelectionResolver",
    "FrameClassificationPipeline",
    "ScanSession",
    "SessionStartError",
]
