"""
Pipeline Orchestrator Module.

Wires the scanner together from configuration.
Creates ConfigService and initializes every component with proper parameters.

Components:
1. Camera: OpenCV capture source
2. Code detector: local QR / barcode detector (zxing or pyzbar)
3. Motion sensor: stability source for the OCR gate
4. Scanner pipeline: frame gate, accumulator, debounce, OCR gate, publisher
5. Services: backend login, remote classification, alias validation, transfer
6. ScanController: consumer of the pipeline outcomes

Follows:
- SRP: Only handles wiring
- DIP: Components receive parameters, not the config service
- OCP: Easy to add new components
"""

import logging
from typing import Optional

from alias_scanner.core.camera.opencv_camera import OpenCVCamera
from alias_scanner.core.detector.code_detector_factory import createCodeDetector
from alias_scanner.core.interfaces.code_detector_interface import ICodeDetector
from alias_scanner.core.interfaces.motion_sensor_interface import IMotionSensor
from alias_scanner.core.pipeline.clock import Clock, MonotonicClock
from alias_scanner.core.pipeline.frame_classification_pipeline import FrameClassificationPipeline
from alias_scanner.core.pipeline.scan_result_publisher import Dispatcher, ScanResultPublisher
from alias_scanner.core.pipeline.scan_session import ScanSession
from alias_scanner.core.pipeline.scanner_config import ScannerConfig
from alias_scanner.core.sensor.motion_sensors import StationaryMotionSensor
from alias_scanner.services.impl.alias_validation_service import AliasValidationService
from alias_scanner.services.impl.auth_token_service import AuthTokenService, DEFAULT_TOKEN_CLAIM
from alias_scanner.services.impl.config_service import ConfigService
from alias_scanner.services.impl.gateway_token_provider import GatewayTokenProvider
from alias_scanner.services.impl.remote_classification_service import RemoteClassificationService
from alias_scanner.services.impl.transfer_service import TransferService
from alias_scanner.ui.scan_controller import ScanController


SUPPORTED_MOTION_SOURCES = ("stationary",)


class PipelineOrchestrator:
    """
    Builds and owns all scanner components.

    Responsibilities:
    - Initialize ConfigService
    - Create detector, services and pipeline config from it
    - Create the scan session and its controller
    - Start and stop scanning
    """

    def __init__(
        self,
        configPath: str = "config/application_config.json",
        dispatcher: Optional[Dispatcher] = None,
        cameraIndex: Optional[int] = None,
        clock: Optional[Clock] = None
    ):
        """
        Initialize the pipeline orchestrator.

        Args:
            configPath: Path to the application configuration file.
            dispatcher: Runs outcome delivery and service callbacks on the
                UI context (QtMainThreadDispatcher in the application).
            cameraIndex: Overrides camera.index from config.
            clock: Time source for the pipeline.
        """
        self._logger = logging.getLogger(__name__)

        self._configService = ConfigService(configPath)
        self._logger.info("ConfigService initialized")

        self._dispatcher = dispatcher
        self._clock = clock or MonotonicClock()
        self._cameraIndex = self._configService.getCameraIndex() if cameraIndex is None else cameraIndex

        debugBasePath = self._configService.getDebugBasePath()
        debugEnabled = self._configService.isDebugEnabled()

        self._scannerConfig = ScannerConfig.fromDict(self._configService.getScannerConfig())
        self._logger.info(f"Scanner config: {self._scannerConfig}")

        self._initializeCapture()
        self._initializeServices(debugBasePath, debugEnabled)

        self._publisher = ScanResultPublisher(dispatcher=self._dispatcher)
        self._session: Optional[ScanSession] = None
        self._controller: Optional[ScanController] = None

        self._logger.info("PipelineOrchestrator initialized successfully")

    def _initializeCapture(self) -> None:
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        # Camera
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        self._camera = OpenCVCamera(
            maxCameraSearch=self._configService.getMaxCameraSearch(),
            autoFocus=self._configService.isAutoFocusEnabled()
        )

        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        # Local Code Detector
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        self._detector: ICodeDetector = createCodeDetector(
            backend=self._configService.getCodeBackend(),
            symbologies=self._configService.getSymbologies() or None,
            zxingTryRotate=self._configService.getZxingTryRotate(),
            zxingTryDownscale=self._configService.getZxingTryDownscale()
        )
        self._logger.info(f"Code detector initialized ({self._configService.getCodeBackend()})")

        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        # Motion Sensor
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        source = self._configService.getMotionSource()
        if source not in SUPPORTED_MOTION_SOURCES:
            raise ValueError(
                f"Invalid motion source: '{source}'. "
                f"Supported sources: {list(SUPPORTED_MOTION_SOURCES)}"
            )
        self._motionSensor: IMotionSensor = StationaryMotionSensor(
            updateInterval=self._configService.getMotionUpdateInterval()
        )
        self._logger.info(f"Motion sensor initialized ({source})")

    def _initializeServices(self, debugBasePath: str, debugEnabled: bool) -> None:
        """
        Initialize the HTTP collaborators with parameters from config.

        Following DIP: Services receive parameters, not IConfigService.
        """
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        # Backend Login
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        auth = self._configService.getAuthConfig()
        self._authService = AuthTokenService(
            tokenUrl=auth.get("tokenUrl", ""),
            clientId=auth.get("clientId", ""),
            audience=auth.get("audience", ""),
            username=auth.get("username", ""),
            password=auth.get("password", ""),
            connection=auth.get("connection", "Username-Password-Authentication"),
            device=auth.get("device", "00000"),
            scope=auth.get("scope", "openid profile email offline_access"),
            tokenClaim=auth.get("tokenClaim", DEFAULT_TOKEN_CLAIM),
            tokenLifetime=auth.get("tokenLifetime", 25 * 60),
            timeout=auth.get("timeout", 15.0),
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )
        self._logger.info("AuthTokenService initialized")

        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        # Remote Classification
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        self._gatewayTokenProvider = GatewayTokenProvider(
            tokenUrl=self._configService.getRemoteClassificationTokenUrl(),
            initialToken=self._configService.getRemoteClassificationToken()
        )
        self._classificationService = RemoteClassificationService(
            apiUrl=self._configService.getRemoteClassificationUrl(),
            tokenProvider=self._gatewayTokenProvider,
            model=self._configService.getRemoteClassificationModel(),
            temperature=self._configService.getRemoteClassificationTemperature(),
            systemPrompt=self._configService.getSystemPrompt(),
            userPrompt=self._configService.getUserPrompt(),
            jpegQuality=self._configService.getJpegQuality(),
            timeout=self._configService.getRemoteClassificationTimeout(),
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )
        self._logger.info("RemoteClassificationService initialized")

        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        # Alias Validation
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        self._aliasValidationService = AliasValidationService(
            baseUrl=self._configService.getAliasValidationBaseUrl(),
            authService=self._authService,
            timeout=self._configService.getAliasValidationTimeout(),
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )
        self._logger.info("AliasValidationService initialized")

        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        # Transfer
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        transfer = self._configService.getTransferConfig()
        self._transferService = TransferService(
            endpoint=transfer.get("endpoint", ""),
            authService=self._authService,
            pin=str(transfer.get("pin", "")),
            deviceId=transfer.get("deviceId") or None,
            concept=transfer.get("concept", "VAR"),
            timeout=transfer.get("timeout", 15.0),
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )
        self._logger.info("TransferService initialized")

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Component Getters
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    @property
    def configService(self) -> ConfigService:
        """Get the configuration service."""
        return self._configService

    @property
    def scannerConfig(self) -> ScannerConfig:
        return self._scannerConfig

    @property
    def detector(self) -> ICodeDetector:
        return self._detector

    @property
    def publisher(self) -> ScanResultPublisher:
        return self._publisher

    @property
    def authService(self) -> AuthTokenService:
        return self._authService

    @property
    def classificationService(self) -> RemoteClassificationService:
        return self._classificationService

    @property
    def aliasValidationService(self) -> AliasValidationService:
        return self._aliasValidationService

    @property
    def transferService(self) -> TransferService:
        return self._transferService

    @property
    def session(self) -> Optional[ScanSession]:
        return self._session

    @property
    def controller(self) -> Optional[ScanController]:
        return self._controller

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Session Management
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def createPipeline(self, sessionStart: float) -> FrameClassificationPipeline:
        """Build a pipeline with empty state for a new session."""
        return FrameClassificationPipeline(
            config=self._scannerConfig,
            detector=self._detector,
            publisher=self._publisher,
            clock=self._clock,
            sessionStart=sessionStart
        )

    def createSession(self) -> ScanController:
        """
        Create a new scan session and the controller consuming its outcomes.

        Any previous session is stopped first.

        Returns:
            ScanController: Controller bound to the new session.
        """
        self.stopSession()

        self._session = ScanSession(
            camera=self._camera,
            motionSensor=self._motionSensor,
            pipelineFactory=self.createPipeline,
            cameraIndex=self._cameraIndex,
            frameWidth=self._configService.getFrameWidth(),
            frameHeight=self._configService.getFrameHeight(),
            clock=self._clock
        )
        self._controller = ScanController(
            session=self._session,
            classificationService=self._classificationService,
            aliasValidationService=self._aliasValidationService,
            transferService=self._transferService,
            authService=self._authService,
            uiDispatcher=self._dispatcher,
            currency=self._configService.getAliasCurrency()
        )
        self._publisher.setConsumer(self._controller.onScanOutcome)
        return self._controller

    def startSession(self) -> ScanController:
        """
        Create and start a scan session.

        Raises:
            SessionStartError: If the camera or motion sensor is unavailable.
        """
        controller = self.createSession()
        self._session.start()
        controller.start()
        return controller

    def stopSession(self) -> None:
        if self._session is not None:
            self._session.stop()
            self._session = None
        if self._controller is not None:
            self._publisher.setConsumer(None)
            self._controller.shutdown()
            self._controller = None

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Debug Control
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def setDebugEnabled(self, enabled: bool) -> None:
        """
        Enable or disable debug mode for all services.

        Args:
            enabled: True to enable debug output for all services.
        """
        self._configService.setDebugEnabled(enabled)

        self._authService.setDebugEnabled(enabled)
        self._classificationService.setDebugEnabled(enabled)
        self._aliasValidationService.setDebugEnabled(enabled)
        self._transferService.setDebugEnabled(enabled)

        self._logger.info(f"Debug mode {'enabled' if enabled else 'disabled'} for all services")

    def isDebugEnabled(self) -> bool:
        """Check if debug mode is enabled."""
        return self._configService.isDebugEnabled()

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Lifecycle Management
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def shutdown(self) -> None:
        """
        Stop scanning and release resources.

        Call this when the application is closing.
        """
        self._logger.info("Shutting down PipelineOrchestrator...")
        self.stopSession()
        self._logger.info("PipelineOrchestrator shutdown complete")
