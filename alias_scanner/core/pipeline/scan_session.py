"""
Scan Session Module.

Binds one camera, one motion sensor and one pipeline for the lifetime of
a scan. Frames are read and evaluated on a dedicated capture thread;
motion samples arrive on the sensor's own thread.
"""

import logging
import threading
from typing import Callable, List, Optional

from alias_scanner.core.interfaces.camera_interface import ICameraCapture
from alias_scanner.core.interfaces.code_detector_interface import DetectedCode
from alias_scanner.core.interfaces.motion_sensor_interface import IMotionSensor
from alias_scanner.core.pipeline.clock import Clock, MonotonicClock
from alias_scanner.core.pipeline.frame_classification_pipeline import FrameClassificationPipeline


logger = logging.getLogger(__name__)


PipelineFactory = Callable[[float], FrameClassificationPipeline]


class SessionStartError(RuntimeError):
    """Camera or motion sensor unavailable; the session never started."""


class ScanSession:
    """
    Camera session lifecycle.

    The pipeline is built by `pipelineFactory(sessionStart)` inside
    `start()`, so the warm-up period counts from the moment the camera
    is open and each session starts with empty state. A stopped session
    cannot be restarted; create a new one.
    """

    def __init__(
        self,
        camera: ICameraCapture,
        motionSensor: IMotionSensor,
        pipelineFactory: PipelineFactory,
        cameraIndex: int = 0,
        frameWidth: int = 1280,
        frameHeight: int = 720,
        clock: Optional[Clock] = None,
        readRetryDelay: float = 0.01
    ):
        """
        Initialize ScanSession.

        Args:
            camera: Camera capture source.
            motionSensor: Accelerometer source.
            pipelineFactory: Builds the pipeline from the session start time.
            cameraIndex: Device index to open.
            frameWidth: Requested frame width.
            frameHeight: Requested frame height.
            clock: Time source shared with the pipeline.
            readRetryDelay: Pause after a failed frame read.
        """
        self._camera = camera
        self._motionSensor = motionSensor
        self._pipelineFactory = pipelineFactory
        self._cameraIndex = cameraIndex
        self._frameWidth = frameWidth
        self._frameHeight = frameHeight
        self._clock = clock or MonotonicClock()
        self._readRetryDelay = readRetryDelay

        self._pipeline: Optional[FrameClassificationPipeline] = None
        self._thread: Optional[threading.Thread] = None
        self._stopEvent = threading.Event()
        self._started = False
        self._framesProcessed = 0

    @property
    def pipeline(self) -> Optional[FrameClassificationPipeline]:
        return self._pipeline

    @property
    def isRunning(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def framesProcessed(self) -> int:
        return self._framesProcessed

    def start(self) -> None:
        """
        Open the camera, start the motion sensor and the capture thread.

        Raises:
            SessionStartError: If the camera cannot be opened, the motion
                sensor is unavailable, or the session was already started.
        """
        if self._started:
            raise SessionStartError("Scan session already started; create a new session")
        self._started = True

        if not self._camera.open(self._cameraIndex, self._frameWidth, self._frameHeight):
            raise SessionStartError(f"Cannot open camera {self._cameraIndex}")

        sessionStart = self._clock.now()
        try:
            self._pipeline = self._pipelineFactory(sessionStart)
        except Exception:
            self._camera.release()
            raise

        if not self._motionSensor.isAvailable() or not self._motionSensor.start(self._pipeline.observeMotion):
            self._camera.release()
            self._pipeline = None
            raise SessionStartError("Motion sensor is not available")

        self._stopEvent.clear()
        self._thread = threading.Thread(
            target=self._captureLoop,
            daemon=True,
            name="scan-capture"
        )
        self._thread.start()
        logger.info(f"Scan session started on camera {self._cameraIndex}")

    def stop(self, timeout: float = 2.0) -> None:
        """Stop frame delivery and release the camera and sensor."""
        self._stopEvent.set()

        if self._thread is not None:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("Capture thread did not stop in time")
            self._thread = None

        self._motionSensor.stop()
        if self._camera.isOpened():
            self._camera.release()

        if self._pipeline is not None:
            logger.info(f"Scan session stopped after {self._framesProcessed} frame(s)")
        self._pipeline = None

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # UI commands
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def resetDebounce(self) -> None:
        if self._pipeline is not None:
            self._pipeline.resetDebounce()

    def resolveSelection(self, code: DetectedCode) -> None:
        if self._pipeline is not None:
            self._pipeline.resolveSelection(code)

    def cancelSelection(self) -> None:
        if self._pipeline is not None:
            self._pipeline.cancelSelection()

    def pendingSelection(self) -> List[DetectedCode]:
        return self._pipeline.pendingSelection if self._pipeline is not None else []

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Capture thread
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def _captureLoop(self) -> None:
        pipeline = self._pipeline

        while not self._stopEvent.is_set():
            try:
                ok, frame = self._camera.read()
                if not ok or frame is None:
                    pipeline.runPendingCommands()
                    self._stopEvent.wait(self._readRetryDelay)
                    continue

                pipeline.processFrame(frame, self._clock.now())
                self._framesProcessed += 1

            except Exception as e:
                logger.error(f"Error processing frame: {e}", exc_info=True)
                self._stopEvent.wait(self._readRetryDelay)
