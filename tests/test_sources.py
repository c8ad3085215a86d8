"""
Unit Tests for frame and motion sources: OpenCV camera, code detectors
and motion sensors.

Run with: python -m pytest tests/test_sources.py -v
"""

import sys
import threading
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from alias_scanner.core.camera.opencv_camera import OpenCVCamera
from alias_scanner.core.detector.code_detector_factory import (
    createCodeDetector,
    getSupportedCodeBackends,
    isCodeBackendAvailable
)
from alias_scanner.core.interfaces.code_detector_interface import CodeKind, NormalizedRect
from alias_scanner.core.interfaces.motion_sensor_interface import StabilitySample
from alias_scanner.core.sensor.motion_sensors import PollingMotionSensor, StationaryMotionSensor


def point(x, y):
    return SimpleNamespace(x=x, y=y)


def zxingBarcode(text, formatName, valid=True):
    return SimpleNamespace(
        valid=valid,
        text=text,
        format=SimpleNamespace(name=formatName),
        position=SimpleNamespace(
            top_left=point(20, 10), top_right=point(60, 10),
            bottom_right=point(60, 30), bottom_left=point(20, 30)
        )
    )


@pytest.fixture
def fakeZxing(monkeypatch):
    module = MagicMock()
    module.read_barcodes.return_value = []
    monkeypatch.setitem(sys.modules, "zxingcpp", module)
    return module


class TestNormalizedRect:

    def test_from_pixels(self):
        rect = NormalizedRect.fromPixels(50, 25, 100, 50, 200, 100)
        assert rect == NormalizedRect(0.25, 0.25, 0.5, 0.5)

    def test_clamped_to_frame(self):
        rect = NormalizedRect.fromPixels(-50, 50, 300, 100, 200, 100)
        assert rect == NormalizedRect(0.0, 0.5, 1.0, 0.5)

    def test_empty_image(self):
        assert NormalizedRect.fromPixels(1, 1, 1, 1, 0, 0) == NormalizedRect(0.0, 0.0, 0.0, 0.0)


class TestZxingCodeDetector:
    """Detector behaviour with the zxing-cpp module replaced by a mock."""

    def test_maps_results_to_detected_codes(self, fakeZxing, frame):
        fakeZxing.read_barcodes.return_value = [
            zxingBarcode("pay.me.now", "QRCode"),
            zxingBarcode("1234567890128", "EAN13"),
        ]
        detector = createCodeDetector("zxing")
        codes = detector.detect(frame)

        assert [(c.kind, c.payload, c.symbology) for c in codes] == [
            (CodeKind.QR, "pay.me.now", "QRCode"),
            (CodeKind.BARCODE, "1234567890128", "EAN13"),
        ]
        box = codes[0].boundingBox
        assert box.x == pytest.approx(0.1)
        assert box.y == pytest.approx(0.1)
        assert box.width == pytest.approx(0.2)
        assert box.height == pytest.approx(0.2)

    def test_skips_invalid_and_empty_results(self, fakeZxing, frame):
        fakeZxing.read_barcodes.return_value = [
            zxingBarcode("bad", "QRCode", valid=False),
            zxingBarcode("", "EAN13"),
        ]
        detector = createCodeDetector("zxing")
        assert detector.detect(frame) == []

    def test_decoder_error_returns_empty(self, fakeZxing, frame):
        fakeZxing.read_barcodes.side_effect = RuntimeError("decoder crashed")
        detector = createCodeDetector("zxing")
        assert detector.detect(frame) == []

    def test_grayscale_input_passed_through(self, fakeZxing):
        gray = np.zeros((50, 80), dtype=np.uint8)
        createCodeDetector("zxing").detect(gray)
        assert fakeZxing.read_barcodes.call_args[0][0] is gray

    def test_empty_image(self, fakeZxing):
        detector = createCodeDetector("zxing")
        assert detector.detect(np.zeros((0, 0), dtype=np.uint8)) == []

    def test_each_detection_has_own_identity(self, fakeZxing, frame):
        fakeZxing.read_barcodes.return_value = [zxingBarcode("pay.me.now", "QRCode")]
        detector = createCodeDetector("zxing")
        first = detector.detect(frame)[0]
        second = detector.detect(frame)[0]
        assert first.payload == second.payload
        assert first.id != second.id


class TestPyzbarCodeDetector:
    """Detector behaviour with pyzbar's decode patched."""

    @pytest.fixture(autouse=True)
    def requirePyzbar(self):
        pytest.importorskip("pyzbar.pyzbar")

    def test_maps_results_to_detected_codes(self, frame):
        results = [
            SimpleNamespace(data=b"pay.me.now", type="QRCODE",
                            rect=SimpleNamespace(left=50, top=25, width=100, height=50)),
            SimpleNamespace(data=b"1234567890128", type="EAN13",
                            rect=SimpleNamespace(left=0, top=0, width=20, height=10)),
        ]
        with patch("alias_scanner.core.detector.pyzbar_code_detector.decode", return_value=results):
            codes = createCodeDetector("pyzbar").detect(frame)

        assert [(c.kind, c.payload) for c in codes] == [
            (CodeKind.QR, "pay.me.now"),
            (CodeKind.BARCODE, "1234567890128"),
        ]
        assert codes[0].boundingBox == NormalizedRect(0.25, 0.25, 0.5, 0.5)

    def test_decoder_error_returns_empty(self, frame):
        with patch("alias_scanner.core.detector.pyzbar_code_detector.decode",
                   side_effect=RuntimeError("zbar failed")):
            assert createCodeDetector("pyzbar").detect(frame) == []


class TestCodeDetectorFactory:

    def test_supported_backends(self):
        assert getSupportedCodeBackends() == ["zxing", "pyzbar"]

    def test_invalid_backend_raises(self):
        with pytest.raises(ValueError):
            createCodeDetector("wechat")

    def test_backend_name_is_normalized(self, fakeZxing):
        from alias_scanner.core.detector.zxing_code_detector import ZxingCodeDetector
        assert isinstance(createCodeDetector("  ZXing "), ZxingCodeDetector)

    def test_unknown_backend_not_available(self):
        assert isCodeBackendAvailable("wechat") is False

    def test_zxing_available_when_importable(self, fakeZxing):
        assert isCodeBackendAvailable("zxing") is True


class TestOpenCVCamera:
    """Camera wrapper with cv2.VideoCapture mocked."""

    @pytest.fixture
    def capture(self):
        with patch("alias_scanner.core.camera.opencv_camera.cv2.VideoCapture") as videoCapture:
            instance = videoCapture.return_value
            instance.isOpened.return_value = True
            instance.read.return_value = (True, np.zeros((4, 4, 3), dtype=np.uint8))
            yield instance

    def test_open_configures_single_frame_buffer(self, capture):
        import cv2
        camera = OpenCVCamera(autoFocus=False)
        assert camera.open(1, 640, 480) is True
        capture.set.assert_any_call(cv2.CAP_PROP_BUFFERSIZE, 1)
        capture.set.assert_any_call(cv2.CAP_PROP_FRAME_WIDTH, 640)
        assert camera.getCameraIndex() == 1
        assert camera.isOpened()

    def test_open_failure(self, capture):
        capture.isOpened.return_value = False
        camera = OpenCVCamera()
        assert camera.open(0) is False
        assert not camera.isOpened()

    def test_read_before_open(self):
        assert OpenCVCamera().read() == (False, None)

    def test_read_and_release(self, capture):
        camera = OpenCVCamera()
        camera.open(0)
        ok, frame = camera.read()
        assert ok and frame.shape == (4, 4, 3)

        camera.release()
        capture.release.assert_called_once()
        assert camera.getCameraIndex() == -1

    def test_failed_read_returns_no_frame(self, capture):
        capture.read.return_value = (False, np.zeros((1, 1, 3), dtype=np.uint8))
        camera = OpenCVCamera()
        camera.open(0)
        assert camera.read() == (False, None)

    def test_list_available_cameras(self, capture):
        cameras = OpenCVCamera(maxCameraSearch=2).listAvailableCameras()
        assert [c.index for c in cameras] == [0, 1]


class TestMotionSensors:
    """Polling sensor threads."""

    def test_polling_sensor_delivers_samples(self):
        samples = iter([None, StabilitySample(0.0, 0.0, -1.0)])
        received = []
        done = threading.Event()

        def onSample(sample):
            received.append(sample)
            done.set()

        sensor = PollingMotionSensor(lambda: next(samples, None), updateInterval=0.01)
        assert sensor.start(onSample) is True
        try:
            assert done.wait(2.0)
        finally:
            sensor.stop()
        assert received == [StabilitySample(0.0, 0.0, -1.0)]

    def test_reader_errors_do_not_stop_polling(self):
        attempts = []
        done = threading.Event()

        def reader():
            attempts.append(1)
            if len(attempts) == 1:
                raise OSError("device busy")
            return StabilitySample(1.0, 1.0, 1.0)

        sensor = PollingMotionSensor(reader, updateInterval=0.01)
        sensor.start(lambda sample: done.set())
        try:
            assert done.wait(2.0)
        finally:
            sensor.stop()

    def test_invalid_interval(self):
        with pytest.raises(ValueError):
            PollingMotionSensor(lambda: None, updateInterval=0)

    def test_unavailable_sensor_does_not_start(self):
        sensor = PollingMotionSensor(None)
        assert sensor.isAvailable() is False
        assert sensor.start(lambda sample: None) is False

    def test_stationary_sensor_reports_constant_reading(self):
        received = []
        done = threading.Event()

        def onSample(sample):
            received.append(sample)
            if len(received) >= 2:
                done.set()

        sensor = StationaryMotionSensor(updateInterval=0.01)
        assert sensor.updateInterval == 0.01
        sensor.start(onSample)
        try:
            assert done.wait(2.0)
        finally:
            sensor.stop()
        assert set(received) == {StabilitySample(0.0, 0.0, -1.0)}
