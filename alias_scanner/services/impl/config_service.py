"""
Config Service Implementation.

Centralized configuration management for the alias scanner.
Loads configuration from application_config.json organized by section.

Follows:
- SRP: Only handles configuration management
- DIP: Provides configuration to other services via interface
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List


from alias_scanner.services.interfaces.config_service_interface import IConfigService


logger = logging.getLogger(__name__)


class ConfigService(IConfigService):
    """
    Implementation of IConfigService.

    Loads and manages application configuration from application_config.json.
    Configuration is organized by section (camera, scanner, auth, ...).
    Typed getters fall back to the documented defaults when a key is absent.
    """

    def __init__(self, configPath: str = "config/application_config.json"):
        """
        Initialize ConfigService.

        Args:
            configPath: Path to the configuration file.

        Raises:
            RuntimeError: If the file is missing or is not valid JSON.
        """
        self._config: Dict[str, Any] = {}
        self._configPath = Path(configPath)
        self._debugEnabled = False

        if not self.loadConfig(configPath):
            raise RuntimeError(f"Failed to load configuration from: {configPath}")

    def loadConfig(self, configPath: str) -> bool:
        """Load configuration from JSON file."""
        try:
            path = Path(configPath)
            if not path.exists():
                logger.error(f"Config file not found: {configPath}")
                return False

            with open(path, 'r', encoding='utf-8') as f:
                config = json.load(f)

            if not isinstance(config, dict):
                logger.error(f"Config root must be an object: {configPath}")
                return False

            self._config = config
            self._configPath = path
            self._debugEnabled = bool(self.get("debug.enabled", False))

            logger.info(f"Configuration loaded from: {path.absolute()}")
            return True

        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in config file: {e}")
            return False
        except OSError as e:
            logger.error(f"Failed to load config: {e}")
            return False

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Generic Config Access
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key with dot notation support.

        Examples:
            get("camera.index") -> 0
            get("scanner.visionInterval") -> 0.15
            get("codeDetection.backend") -> "zxing"
        """
        value = self._config
        for part in key.split('.'):
            if not isinstance(value, dict):
                return default
            value = value.get(part)
            if value is None:
                return default
        return value

    def getServiceConfig(self, serviceName: str) -> Dict[str, Any]:
        """
        Get all configuration for a specific section.

        Args:
            serviceName: Section name (e.g., "camera", "scanner")

        Returns:
            Configuration dictionary for the section.
        """
        config = self._config.get(serviceName, {})
        return dict(config) if isinstance(config, dict) else {}

    def getAllConfig(self) -> Dict[str, Any]:
        """Get complete configuration dictionary."""
        return self._config.copy()

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Debug Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getDebugBasePath(self) -> str:
        """Get base path for debug output."""
        return self.get("debug.basePath", "output/debug")

    def isDebugEnabled(self) -> bool:
        """Check if debug mode is enabled."""
        return self._debugEnabled

    def setDebugEnabled(self, enabled: bool) -> None:
        """Enable or disable debug mode at runtime."""
        self._debugEnabled = enabled
        logger.info(f"Debug mode {'enabled' if enabled else 'disabled'}")

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # App Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getAppConfig(self) -> Dict[str, Any]:
        """Get app-level configuration."""
        return self.getServiceConfig("app")

    def getAppName(self) -> str:
        return self.get("app.name", "Alias Scanner")

    def getWorkerThreads(self) -> int:
        """Get number of background workers for remote calls."""
        return self.get("app.workerThreads", 2)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Camera Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getCameraConfig(self) -> Dict[str, Any]:
        """Get camera configuration."""
        return self.getServiceConfig("camera")

    def getCameraIndex(self) -> int:
        return self.get("camera.index", 0)

    def getFrameWidth(self) -> int:
        """Get camera frame width."""
        return self.get("camera.frameWidth", 1280)

    def getFrameHeight(self) -> int:
        """Get camera frame height."""
        return self.get("camera.frameHeight", 720)

    def getMaxCameraSearch(self) -> int:
        """Get max camera search count."""
        return self.get("camera.maxCameraSearch", 4)

    def isAutoFocusEnabled(self) -> bool:
        return self.get("camera.autoFocus", True)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Code Detection Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getCodeDetectionConfig(self) -> Dict[str, Any]:
        """Get local code detector configuration."""
        return self.getServiceConfig("codeDetection")

    def getCodeBackend(self) -> str:
        """
        Get local code detector backend (zxing or pyzbar).

        Returns:
            str: Backend name, default "zxing".
        """
        return str(self.get("codeDetection.backend", "zxing")).lower()

    def getSymbologies(self) -> List[str]:
        """Get enabled symbologies; empty list means the backend defaults."""
        return self.get("codeDetection.symbologies", [])

    def getZxingTryRotate(self) -> bool:
        return self.get("codeDetection.zxingTryRotate", True)

    def getZxingTryDownscale(self) -> bool:
        return self.get("codeDetection.zxingTryDownscale", True)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Motion Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getMotionConfig(self) -> Dict[str, Any]:
        """Get motion sensor configuration."""
        return self.getServiceConfig("motion")

    def getMotionSource(self) -> str:
        """Get motion sensor source (currently only "stationary")."""
        return str(self.get("motion.source", "stationary")).lower()

    def getMotionUpdateInterval(self) -> float:
        """Get motion sensor update interval in seconds."""
        return self.get("motion.updateInterval", 0.1)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Scanner Pipeline Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getScannerConfig(self) -> Dict[str, Any]:
        """
        Get pipeline timing and threshold settings.

        Keys match ScannerConfig field names.
        """
        return self.getServiceConfig("scanner")

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Remote Classification Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getRemoteClassificationConfig(self) -> Dict[str, Any]:
        """Get remote OCR configuration."""
        return self.getServiceConfig("remoteClassification")

    def getRemoteClassificationUrl(self) -> str:
        return self.get("remoteClassification.apiUrl", "")

    def getRemoteClassificationTokenUrl(self) -> str:
        """Get gateway token endpoint."""
        return self.get("remoteClassification.tokenUrl", "")

    def getRemoteClassificationToken(self) -> str:
        """Get initial gateway token (may be empty)."""
        return self.get("remoteClassification.token", "")

    def getRemoteClassificationModel(self) -> str:
        return self.get("remoteClassification.model", "gemini-2.5-flash")

    def getRemoteClassificationTemperature(self) -> float:
        return self.get("remoteClassification.temperature", 0.0)

    def getRemoteClassificationTimeout(self) -> float:
        """Get request timeout in seconds."""
        return self.get("remoteClassification.timeout", 15.0)

    def getJpegQuality(self) -> int:
        """Get JPEG quality for uploaded frames."""
        return self.get("remoteClassification.jpegQuality", 60)

    def getSystemPrompt(self) -> str:
        return self.get("remoteClassification.systemPrompt", "You are an OCR. Answer briefly.")

    def getUserPrompt(self) -> str:
        return self.get(
            "remoteClassification.userPrompt",
            "Find a CBU/CVU alias in the image (word.word format, 6-20 characters, "
            "only letters, digits and dots). If you find one, answer ONLY the alias. "
            "If there is no alias, answer NO_ALIAS."
        )

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Auth Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getAuthConfig(self) -> Dict[str, Any]:
        """
        Get backend login configuration.

        Keys: tokenUrl, clientId, audience, username, password, connection,
        device, scope, tokenClaim, tokenLifetime, timeout.
        """
        return self.getServiceConfig("auth")

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Alias Validation / Transfer Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getAliasValidationBaseUrl(self) -> str:
        return self.get("aliasValidation.baseUrl", "")

    def getAliasCurrency(self) -> str:
        return self.get("aliasValidation.currency", "ars")

    def getAliasValidationTimeout(self) -> float:
        return self.get("aliasValidation.timeout", 15.0)

    def getTransferConfig(self) -> Dict[str, Any]:
        """Get transfer configuration (endpoint, pin, deviceId, timeout)."""
        return self.getServiceConfig("transfer")
