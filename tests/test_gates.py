"""
Unit Tests for the pipeline gates: frame gate, motion stability tracker,
debounce guard and OCR dispatch gate.

Run with: python -m pytest tests/test_gates.py -v
"""

import numpy as np
import pytest

from alias_scanner.core.interfaces.motion_sensor_interface import StabilitySample
from alias_scanner.core.pipeline.debounce_guard import DebounceGuard, barcodeKey
from alias_scanner.core.pipeline.frame_gate import FrameGate
from alias_scanner.core.pipeline.motion_stability_tracker import MotionStabilityTracker
from alias_scanner.core.pipeline.ocr_dispatch_gate import OcrDispatchGate


class TestFrameGate:
    """Warm-up and rate limiting."""

    def test_rejects_every_frame_during_warm_up(self):
        gate = FrameGate(sessionStart=0.0, initialDelay=0.5, visionInterval=0.0)
        timestamps = [i * 0.05 for i in range(10)]
        assert [gate.admit(t) for t in timestamps] == [False] * 10
        assert gate.lastAdmitted is None

    def test_admits_once_warm_up_elapsed(self):
        gate = FrameGate(sessionStart=10.0, initialDelay=0.5)
        assert gate.admit(10.25) is False
        assert gate.admit(10.5) is True
        assert gate.lastAdmitted == 10.5

    def test_rate_limit_admits_frames_spaced_by_interval(self):
        gate = FrameGate(sessionStart=-0.5, initialDelay=0.5, visionInterval=0.15)
        timestamps = [0.0, 0.05, 0.1, 0.15, 0.2, 0.3]
        admitted = [t for t in timestamps if gate.admit(t)]
        assert admitted == [0.0, 0.15, 0.3]

    def test_admitted_gaps_never_below_interval(self):
        gate = FrameGate(sessionStart=0.0, initialDelay=0.0, visionInterval=0.25)
        timestamps = [i * 0.125 for i in range(20)]
        admitted = [t for t in timestamps if gate.admit(t)]
        gaps = [b - a for a, b in zip(admitted, admitted[1:])]
        assert admitted
        assert all(gap >= 0.25 for gap in gaps)

    def test_rejection_does_not_move_last_admitted(self):
        gate = FrameGate(sessionStart=0.0, initialDelay=0.0, visionInterval=0.25)
        assert gate.admit(1.0) is True
        assert gate.admit(1.125) is False
        assert gate.lastAdmitted == 1.0


class TestMotionStabilityTracker:
    """Stability from accelerometer deltas."""

    def test_stable_by_default(self):
        assert MotionStabilityTracker().isStable() is True

    def test_first_sample_keeps_prior_verdict(self):
        tracker = MotionStabilityTracker(initiallyStable=False)
        tracker.observe(StabilitySample(5.0, 5.0, 5.0))
        assert tracker.isStable() is False

    def test_large_movement_is_unstable(self):
        tracker = MotionStabilityTracker(stabilityThreshold=0.4)
        tracker.observe(StabilitySample(0.0, 0.0, -1.0))
        tracker.observe(StabilitySample(0.25, 0.25, -1.0))
        assert tracker.isStable() is False

    def test_small_movement_is_stable(self):
        tracker = MotionStabilityTracker(stabilityThreshold=0.4)
        tracker.observe(StabilitySample(0.0, 0.0, -1.0))
        tracker.observe(StabilitySample(0.5, 0.0, -1.0))
        tracker.observe(StabilitySample(0.625, 0.0, -1.0))
        assert tracker.isStable() is True

    def test_movement_equal_to_threshold_is_unstable(self):
        tracker = MotionStabilityTracker(stabilityThreshold=0.5)
        tracker.observe(StabilitySample(0.0, 0.0, 0.0))
        tracker.observe(StabilitySample(0.25, -0.25, 0.0))
        assert tracker.isStable() is False

    def test_only_latest_sample_is_kept(self):
        tracker = MotionStabilityTracker()
        tracker.observe(StabilitySample(1.0, 2.0, 3.0))
        tracker.observe(StabilitySample(1.0, 2.0, 3.0))
        assert tracker.lastSample == StabilitySample(1.0, 2.0, 3.0)


class TestDebounceGuard:
    """Barcode cool-down."""

    def test_barcode_key_is_namespaced(self):
        assert barcodeKey("123") == "barcode:123"

    def test_nothing_suppressed_before_first_emission(self):
        guard = DebounceGuard(debounceInterval=3.0)
        assert guard.shouldSuppress("barcode:123", 0.0) is False

    def test_same_key_within_interval_is_suppressed(self):
        guard = DebounceGuard(debounceInterval=3.0)
        guard.recordEmission("barcode:123", 1.0)
        assert guard.shouldSuppress("barcode:123", 3.5) is True

    def test_same_key_after_interval_is_allowed(self):
        guard = DebounceGuard(debounceInterval=3.0)
        guard.recordEmission("barcode:123", 1.0)
        assert guard.shouldSuppress("barcode:123", 4.0) is False

    def test_different_key_is_allowed(self):
        guard = DebounceGuard(debounceInterval=3.0)
        guard.recordEmission("barcode:123", 1.0)
        assert guard.shouldSuppress("barcode:456", 1.5) is False

    def test_reset_clears_state(self):
        guard = DebounceGuard(debounceInterval=3.0)
        guard.recordEmission("barcode:123", 1.0)
        guard.reset()
        assert guard.lastPayloadKey is None
        assert guard.lastEmittedAt is None
        assert guard.shouldSuppress("barcode:123", 1.5) is False


class TestOcrDispatchGate:
    """Rate limit, stability gate and crop."""

    def test_first_stable_frame_dispatches(self):
        gate = OcrDispatchGate(ocrInterval=1.5)
        assert gate.shouldDispatch(0.0, stable=True) is True
        assert gate.lastDispatch == 0.0

    def test_unstable_blocks_even_when_interval_elapsed(self):
        gate = OcrDispatchGate(ocrInterval=1.5)
        gate.shouldDispatch(0.0, stable=True)
        assert gate.shouldDispatch(2.0, stable=False) is False
        assert gate.lastDispatch == 0.0

    def test_interval_blocks_even_when_stable(self):
        gate = OcrDispatchGate(ocrInterval=1.5)
        gate.shouldDispatch(0.0, stable=True)
        assert gate.shouldDispatch(1.0, stable=True) is False
        assert gate.lastDispatch == 0.0

    def test_both_conditions_dispatch_and_advance_clock(self):
        gate = OcrDispatchGate(ocrInterval=1.5)
        gate.shouldDispatch(0.0, stable=True)
        assert gate.shouldDispatch(1.5, stable=True) is True
        assert gate.lastDispatch == 1.5
        assert gate.shouldDispatch(2.5, stable=True) is False

    def test_crop_keeps_centered_region(self):
        gate = OcrDispatchGate(cropWidthRatio=0.5, cropHeightRatio=0.5)
        frame = np.arange(8 * 8, dtype=np.uint8).reshape(8, 8)
        cropped = gate.crop(frame)
        assert cropped.shape == (4, 4)
        assert np.array_equal(cropped, frame[2:6, 2:6])

    def test_crop_returns_copy(self):
        gate = OcrDispatchGate(cropWidthRatio=0.5, cropHeightRatio=0.5)
        frame = np.zeros((8, 8), dtype=np.uint8)
        cropped = gate.crop(frame)
        cropped[:] = 255
        assert frame.max() == 0

    def test_crop_rotates_before_cropping(self):
        gate = OcrDispatchGate(cropWidthRatio=1.0, cropHeightRatio=0.5, frameRotation="clockwise")
        frame = np.zeros((100, 200, 3), dtype=np.uint8)
        assert gate.crop(frame).shape == (100, 100, 3)

    def test_invalid_rotation_raises(self):
        with pytest.raises(ValueError):
            OcrDispatchGate(frameRotation="sideways")
