"""
Frame Classification Pipeline Module.

Composes the gates and collectors into the per-frame decision:

    frame -> FrameGate -> detector -> CodeAccumulator (+ DebounceGuard)
          -> ScanResultPublisher
    or, when the frame had no codes:
          -> OcrDispatchGate -> ScanResultPublisher

Runs synchronously on the capture thread. Commands from the UI context
(reset debounce, resolve or cancel a selection) are queued and executed on
the same thread before the next frame, so pipeline state has one writer.
"""

import logging
import queue
from typing import Callable, List, Optional

import numpy as np

from alias_scanner.core.interfaces.code_detector_interface import DetectedCode, ICodeDetector
from alias_scanner.core.interfaces.motion_sensor_interface import StabilitySample
from alias_scanner.core.pipeline.clock import Clock, MonotonicClock
from alias_scanner.core.pipeline.code_accumulator import AccumulatorStatus, CodeAccumulator
from alias_scanner.core.pipeline.debounce_guard import DebounceGuard
from alias_scanner.core.pipeline.frame_gate import FrameGate
from alias_scanner.core.pipeline.motion_stability_tracker import MotionStabilityTracker
from alias_scanner.core.pipeline.ocr_dispatch_gate import OcrDispatchGate
from alias_scanner.core.pipeline.scan_outcome import ScanOutcome, ScanOutcomeKind
from alias_scanner.core.pipeline.scan_result_publisher import ScanResultPublisher
from alias_scanner.core.pipeline.scanner_config import ScannerConfig
from alias_scanner.core.pipeline.selection_resolver import SelectionResolver


logger = logging.getLogger(__name__)


class FrameClassificationPipeline:
    """
    One pipeline instance per camera session.

    All mutable state (accumulation window, debounce, selection, rate-limit
    clocks) lives here and is discarded with the session. Motion samples
    arrive on the sensor thread through `observeMotion`; everything else
    runs on the capture thread.
    """

    def __init__(
        self,
        config: ScannerConfig,
        detector: ICodeDetector,
        publisher: ScanResultPublisher,
        clock: Optional[Clock] = None,
        sessionStart: Optional[float] = None
    ):
        """
        Initialize FrameClassificationPipeline.

        Args:
            config: Timing and threshold parameters.
            detector: Local QR/barcode detector.
            publisher: Exit point for outcomes.
            clock: Time source; MonotonicClock when omitted.
            sessionStart: Start of the warm-up period; defaults to clock.now().
        """
        self._config = config
        self._detector = detector
        self._publisher = publisher
        self._clock = clock or MonotonicClock()
        self._sessionStart = self._clock.now() if sessionStart is None else sessionStart

        self._frameGate = FrameGate(
            sessionStart=self._sessionStart,
            initialDelay=config.initialDelay,
            visionInterval=config.visionInterval
        )
        self._stabilityTracker = MotionStabilityTracker(
            stabilityThreshold=config.stabilityThreshold
        )
        self._debounceGuard = DebounceGuard(debounceInterval=config.debounceInterval)
        self._accumulator = CodeAccumulator(
            debounceGuard=self._debounceGuard,
            accumulationWindow=config.accumulationWindow
        )
        self._ocrGate = OcrDispatchGate(
            ocrInterval=config.ocrInterval,
            cropWidthRatio=config.ocrCropWidthRatio,
            cropHeightRatio=config.ocrCropHeightRatio,
            frameRotation=config.frameRotation
        )
        self._selectionResolver = SelectionResolver()
        self._commands: "queue.Queue[Callable[[], None]]" = queue.Queue()

        logger.info(
            f"Pipeline created (initialDelay={config.initialDelay}s, "
            f"visionInterval={config.visionInterval}s, "
            f"accumulationWindow={config.accumulationWindow}s, "
            f"ocrInterval={config.ocrInterval}s, "
            f"debounceInterval={config.debounceInterval}s)"
        )

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Properties
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    @property
    def config(self) -> ScannerConfig:
        return self._config

    @property
    def sessionStart(self) -> float:
        return self._sessionStart

    @property
    def stabilityTracker(self) -> MotionStabilityTracker:
        return self._stabilityTracker

    @property
    def debounceGuard(self) -> DebounceGuard:
        return self._debounceGuard

    @property
    def pendingSelection(self) -> List[DetectedCode]:
        return self._selectionResolver.pendingCodes

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Capture thread
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def processFrame(self, image: np.ndarray, now: Optional[float] = None) -> Optional[ScanOutcome]:
        """
        Evaluate one camera frame.

        The frame is only borrowed for the duration of the call; the OCR
        path publishes a cropped copy.

        Args:
            image: BGR frame.
            now: Capture timestamp; read from the clock when omitted.

        Returns:
            Optional[ScanOutcome]: The outcome published for this frame, if any.
        """
        self.runPendingCommands()

        if now is None:
            now = self._clock.now()

        if not self._frameGate.admit(now):
            return None

        codes = self._detectCodes(image)
        decision = self._accumulator.observe(codes, now)

        if decision.status is AccumulatorStatus.RESOLVED:
            outcome = decision.outcome
            if outcome.kind is ScanOutcomeKind.MULTIPLE_CODES:
                self._selectionResolver.addPending(outcome.codes)
            self._publisher.publish(outcome)
            return outcome

        if decision.hasCodes:
            return None

        if self._ocrGate.shouldDispatch(now, self._stabilityTracker.isStable()):
            outcome = ScanOutcome.needsRemoteClassification(self._ocrGate.crop(image))
            logger.debug(f"Frame at {now:.3f}s dispatched to remote classification")
            self._publisher.publish(outcome)
            return outcome

        if self._config.surfaceEmptyFrames:
            outcome = ScanOutcome.none()
            self._publisher.publish(outcome)
            return outcome

        return None

    def runPendingCommands(self) -> int:
        """
        Execute queued UI commands in submission order.

        Returns:
            int: Number of commands executed.
        """
        executed = 0
        while True:
            try:
                command = self._commands.get_nowait()
            except queue.Empty:
                return executed
            command()
            executed += 1

    def _detectCodes(self, image: np.ndarray) -> List[DetectedCode]:
        try:
            return list(self._detector.detect(image))
        except Exception as e:
            logger.warning(f"Code detector failed, treating frame as empty: {e}")
            return []

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Sensor thread
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def observeMotion(self, sample: StabilitySample) -> None:
        self._stabilityTracker.observe(sample)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # UI commands (queued, executed on the capture thread)
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def resetDebounce(self) -> None:
        """Allow the barcode emitted last to be detected again immediately."""
        self._commands.put(self._debounceGuard.reset)

    def resolveSelection(self, code: DetectedCode) -> None:
        """Publish the single outcome for a code chosen from a MultipleCodes result."""
        self._commands.put(lambda: self._resolveSelection(code))

    def cancelSelection(self) -> None:
        self._commands.put(self._selectionResolver.clear)

    def _resolveSelection(self, code: DetectedCode) -> None:
        try:
            outcome = self._selectionResolver.resolve(code)
        except ValueError as e:
            logger.error(f"Selection ignored: {e}")
            return
        self._publisher.publish(outcome)
