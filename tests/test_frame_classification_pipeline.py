"""
Integration Tests for FrameClassificationPipeline

Drives the composed pipeline with a scripted detector and explicit
timestamps, collecting published outcomes synchronously.

Run with: python -m pytest tests/test_frame_classification_pipeline.py -v
"""

import numpy as np
import pytest

from alias_scanner.core.interfaces.motion_sensor_interface import StabilitySample
from alias_scanner.core.pipeline.frame_classification_pipeline import FrameClassificationPipeline
from alias_scanner.core.pipeline.scan_outcome import ScanOutcome, ScanOutcomeKind
from alias_scanner.core.pipeline.scan_result_publisher import ScanResultPublisher
from alias_scanner.core.pipeline.scanner_config import ScannerConfig

from conftest import makeCode, makeQr


@pytest.fixture
def published():
    return []


def buildPipeline(detector, published, clock, **overrides):
    params = dict(initialDelay=0.0, visionInterval=0.0)
    params.update(overrides)
    return FrameClassificationPipeline(
        config=ScannerConfig(**params),
        detector=detector,
        publisher=ScanResultPublisher(consumer=published.append),
        clock=clock,
        sessionStart=0.0
    )


@pytest.fixture
def pipeline(detector, published, fakeClock):
    return buildPipeline(detector, published, fakeClock)


class TestCodePath:
    """Frames that carry QR codes or barcodes."""

    def test_single_qr_emits_once_after_window(self, pipeline, detector, published, frame):
        detector.codes = [makeQr("pay.me.now")]

        assert pipeline.processFrame(frame, 1.0) is None
        assert published == []

        outcome = pipeline.processFrame(frame, 1.5)
        assert outcome == ScanOutcome.qrCode("pay.me.now")
        assert published == [ScanOutcome.qrCode("pay.me.now")]

    def test_multiple_codes_emitted_once_with_each_payload_once(self, pipeline, detector, published, frame):
        detector.codes = [makeQr("alias.one.two"), makeCode("1234567890128")]

        for t in (1.0, 1.25, 1.5):
            pipeline.processFrame(frame, t)

        assert len(published) == 1
        assert published[0].kind is ScanOutcomeKind.MULTIPLE_CODES
        payloads = [code.payload for code in published[0].codes]
        assert sorted(payloads) == ["1234567890128", "alias.one.two"]
        assert len(set(payloads)) == len(payloads)
        assert [code.payload for code in pipeline.pendingSelection] == payloads

    def test_barcode_debounce_and_reset(self, pipeline, detector, published, frame):
        detector.codes = [makeCode("1234567890128")]

        pipeline.processFrame(frame, 1.0)
        pipeline.processFrame(frame, 1.5)
        assert published == [ScanOutcome.barcode("1234567890128")]

        pipeline.processFrame(frame, 2.0)
        assert pipeline.processFrame(frame, 2.5) is None
        assert len(published) == 1

        pipeline.resetDebounce()
        pipeline.processFrame(frame, 3.0)
        pipeline.processFrame(frame, 3.5)
        assert published == [ScanOutcome.barcode("1234567890128")] * 2

    def test_suppressed_barcode_does_not_fall_back_to_ocr(self, pipeline, detector, published, frame):
        detector.codes = [makeCode("1234567890128")]
        for t in (1.0, 1.5, 2.0, 2.5):
            pipeline.processFrame(frame, t)

        kinds = [outcome.kind for outcome in published]
        assert ScanOutcomeKind.NEEDS_REMOTE_CLASSIFICATION not in kinds

    def test_codes_lost_mid_window_restart_accumulation(self, pipeline, detector, published, frame):
        detector.codes = [makeQr("pay.me.now")]
        pipeline.processFrame(frame, 1.0)

        detector.codes = []
        pipeline.processFrame(frame, 1.25)

        detector.codes = [makeQr("pay.me.now")]
        assert pipeline.processFrame(frame, 1.5) is None
        assert [o for o in published if o.kind is ScanOutcomeKind.QR_CODE] == []

        assert pipeline.processFrame(frame, 2.0) == ScanOutcome.qrCode("pay.me.now")


class TestOcrPath:
    """Frames with no codes."""

    def test_empty_stable_frame_dispatches_cropped_copy(self, pipeline, published, frame):
        outcome = pipeline.processFrame(frame, 1.0)

        assert outcome.kind is ScanOutcomeKind.NEEDS_REMOTE_CLASSIFICATION
        assert outcome.image.shape == (int(100 * 0.85), int(200 * 0.95), 3)
        assert published == [outcome]

        outcome.image[:] = 255
        assert frame.max() == 0

    def test_ocr_dispatch_is_rate_limited(self, pipeline, published, frame):
        for t in (1.0, 1.5, 2.0, 2.5, 3.0):
            pipeline.processFrame(frame, t)

        dispatched = [o for o in published if o.kind is ScanOutcomeKind.NEEDS_REMOTE_CLASSIFICATION]
        assert len(dispatched) == 2

    def test_unstable_device_never_dispatches(self, pipeline, published, frame):
        pipeline.observeMotion(StabilitySample(0.0, 0.0, -1.0))
        pipeline.observeMotion(StabilitySample(1.0, 0.5, -1.0))

        for t in (1.0, 2.5, 4.0):
            pipeline.processFrame(frame, t)

        assert published == []

    def test_dispatch_resumes_when_device_settles(self, pipeline, published, frame):
        pipeline.observeMotion(StabilitySample(0.0, 0.0, -1.0))
        pipeline.observeMotion(StabilitySample(1.0, 0.5, -1.0))
        pipeline.processFrame(frame, 1.0)

        pipeline.observeMotion(StabilitySample(1.0, 0.5, -1.0))
        outcome = pipeline.processFrame(frame, 1.25)
        assert outcome.kind is ScanOutcomeKind.NEEDS_REMOTE_CLASSIFICATION

    def test_frame_inside_accumulation_window_is_not_dispatched(self, pipeline, detector, published, frame):
        detector.codes = [makeQr("pay.me.now")]
        pipeline.processFrame(frame, 1.0)
        assert published == []

    def test_surface_empty_frames(self, detector, published, fakeClock, frame):
        pipeline = buildPipeline(detector, published, fakeClock, surfaceEmptyFrames=True)
        pipeline.processFrame(frame, 1.0)
        pipeline.processFrame(frame, 1.25)

        assert published[0].kind is ScanOutcomeKind.NEEDS_REMOTE_CLASSIFICATION
        assert published[1] == ScanOutcome.none()

    def test_empty_frames_silent_by_default(self, pipeline, published, frame):
        pipeline.processFrame(frame, 1.0)
        assert pipeline.processFrame(frame, 1.25) is None
        assert len(published) == 1


class TestGatingAndErrors:
    """Warm-up, rate limiting and detector failures."""

    def test_warm_up_frames_reach_neither_detector_nor_consumer(self, detector, published, fakeClock, frame):
        pipeline = buildPipeline(detector, published, fakeClock, initialDelay=0.5)
        for i in range(10):
            pipeline.processFrame(frame, i * 0.05)

        assert detector.calls == 0
        assert published == []

    def test_rate_limited_frames_skip_detector(self, detector, published, fakeClock, frame):
        pipeline = buildPipeline(detector, published, fakeClock, visionInterval=0.25)
        detector.codes = [makeQr("pay.me.now")]
        for t in (1.0, 1.125, 1.25):
            pipeline.processFrame(frame, t)
        assert detector.calls == 2

    def test_detector_error_treated_as_empty_frame(self, pipeline, detector, published, frame):
        detector.error = RuntimeError("decoder crashed")
        outcome = pipeline.processFrame(frame, 1.0)
        assert outcome.kind is ScanOutcomeKind.NEEDS_REMOTE_CLASSIFICATION

    def test_reads_clock_when_timestamp_omitted(self, pipeline, detector, published, fakeClock, frame):
        detector.codes = [makeQr("pay.me.now")]
        fakeClock.time = 1.0
        pipeline.processFrame(frame)
        fakeClock.time = 1.5
        assert pipeline.processFrame(frame) == ScanOutcome.qrCode("pay.me.now")

    def test_session_start_defaults_to_clock(self, detector, published, fakeClock):
        fakeClock.time = 42.0
        pipeline = FrameClassificationPipeline(
            ScannerConfig(), detector, ScanResultPublisher(published.append), clock=fakeClock
        )
        assert pipeline.sessionStart == 42.0


class TestSelectionCommands:
    """Queued commands from the UI context."""

    def _collectMultiple(self, pipeline, detector, frame):
        qr = makeQr("alias.one.two")
        barcode = makeCode("1234567890128")
        detector.codes = [qr, barcode]
        pipeline.processFrame(frame, 1.0)
        pipeline.processFrame(frame, 1.5)
        detector.codes = []
        return qr, barcode

    def test_commands_run_before_next_frame(self, pipeline, detector, published, frame):
        qr, _ = self._collectMultiple(pipeline, detector, frame)
        pipeline.resolveSelection(qr)
        assert published[-1].kind is ScanOutcomeKind.MULTIPLE_CODES

        assert pipeline.runPendingCommands() == 1
        assert published[-1] == ScanOutcome.qrCode("alias.one.two")
        assert pipeline.pendingSelection == []

    def test_selected_barcode_bypasses_debounce(self, pipeline, detector, published, frame):
        detector.codes = [makeCode("1234567890128")]
        pipeline.processFrame(frame, 0.25)
        pipeline.processFrame(frame, 0.75)
        assert published[-1] == ScanOutcome.barcode("1234567890128")

        _, barcode = self._collectMultiple(pipeline, detector, frame)
        pipeline.resolveSelection(barcode)
        pipeline.runPendingCommands()
        assert published[-1] == ScanOutcome.barcode("1234567890128")

    def test_unknown_selection_is_ignored(self, pipeline, detector, published, frame):
        self._collectMultiple(pipeline, detector, frame)
        count = len(published)

        pipeline.resolveSelection(makeQr("not.offered"))
        pipeline.runPendingCommands()

        assert len(published) == count
        assert len(pipeline.pendingSelection) == 2

    def test_selection_survives_a_later_window(self, pipeline, detector, published, frame):
        qr, _ = self._collectMultiple(pipeline, detector, frame)
        detector.codes = [makeQr("other.alias.x"), makeCode("9876543210982")]
        pipeline.processFrame(frame, 2.0)
        pipeline.processFrame(frame, 2.5)
        assert [outcome.kind for outcome in published] == [ScanOutcomeKind.MULTIPLE_CODES] * 2

        pipeline.resolveSelection(qr)
        pipeline.runPendingCommands()

        assert published[-1] == ScanOutcome.qrCode("alias.one.two")
        assert pipeline.pendingSelection == []

    def test_cancel_selection(self, pipeline, detector, frame):
        self._collectMultiple(pipeline, detector, frame)
        pipeline.cancelSelection()
        pipeline.processFrame(frame, 1.75)
        assert pipeline.pendingSelection == []

    def test_no_commands_pending(self, pipeline):
        assert pipeline.runPendingCommands() == 0


class TestScanResultPublisher:
    """Dispatching outcomes to the consumer."""

    def test_without_consumer_outcome_is_dropped(self):
        dispatched = []
        publisher = ScanResultPublisher(dispatcher=dispatched.append)
        publisher.publish(ScanOutcome.none())
        assert dispatched == []

    def test_consumer_runs_through_dispatcher(self):
        received = []
        tasks = []
        publisher = ScanResultPublisher(consumer=received.append, dispatcher=tasks.append)

        publisher.publish(ScanOutcome.qrCode("pay.me.now"))
        assert received == []

        tasks[0]()
        assert received == [ScanOutcome.qrCode("pay.me.now")]

    def test_set_consumer(self):
        received = []
        publisher = ScanResultPublisher()
        publisher.setConsumer(received.append)
        publisher.publish(ScanOutcome.barcode("123"))
        assert received == [ScanOutcome.barcode("123")]


class TestScannerConfig:
    """Parameter validation and dictionary conversion."""

    def test_defaults(self):
        config = ScannerConfig()
        assert config.initialDelay == 0.5
        assert config.visionInterval == 0.15
        assert config.ocrInterval == 1.5
        assert config.debounceInterval == 3.0
        assert config.accumulationWindow == 0.5
        assert config.stabilityThreshold == 0.4
        assert config.frameRotation == "none"
        assert config.surfaceEmptyFrames is False

    def test_from_dict_ignores_unknown_keys(self):
        config = ScannerConfig.fromDict({"ocrInterval": 2.0, "unknown": 1})
        assert config.ocrInterval == 2.0
        assert config.toDict()["ocrInterval"] == 2.0

    def test_from_none_uses_defaults(self):
        assert ScannerConfig.fromDict(None) == ScannerConfig()

    @pytest.mark.parametrize("overrides", [
        {"initialDelay": -1.0},
        {"ocrCropWidthRatio": 0.0},
        {"ocrCropHeightRatio": 1.5},
        {"frameRotation": "diagonal"},
    ])
    def test_invalid_values_raise(self, overrides):
        with pytest.raises(ValueError):
            ScannerConfig(**overrides)

    def test_frozen(self):
        config = ScannerConfig()
        with pytest.raises(Exception):
            config.ocrInterval = 9.0
