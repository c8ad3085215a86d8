"""
Unit Tests for ConfigService

Run with: python -m pytest tests/test_config_service.py -v
"""

import json
from pathlib import Path

import pytest

from alias_scanner.core.pipeline.scanner_config import ScannerConfig
from alias_scanner.services.impl.config_service import ConfigService


BUNDLED_CONFIG = Path(__file__).resolve().parent.parent / "config" / "application_config.json"


def writeConfig(tmp_path, data) -> str:
    path = tmp_path / "application_config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


class TestConfigLoading:

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(RuntimeError):
            ConfigService(str(tmp_path / "missing.json"))

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RuntimeError):
            ConfigService(str(path))

    def test_non_object_root_raises(self, tmp_path):
        with pytest.raises(RuntimeError):
            ConfigService(writeConfig(tmp_path, [1, 2, 3]))

    def test_bundled_config_matches_pipeline_defaults(self):
        config = ConfigService(str(BUNDLED_CONFIG))
        assert ScannerConfig.fromDict(config.getScannerConfig()) == ScannerConfig()
        assert config.getCodeBackend() == "zxing"
        assert config.getMotionSource() == "stationary"


class TestConfigAccess:

    @pytest.fixture
    def config(self, tmp_path):
        return ConfigService(writeConfig(tmp_path, {
            "camera": {"index": 2, "frameWidth": 640},
            "codeDetection": {"backend": "PyZbar"},
            "scanner": {"ocrInterval": 2.0},
            "debug": {"enabled": True, "basePath": "tmp/debug"}
        }))

    def test_dot_notation(self, config):
        assert config.get("camera.index") == 2
        assert config.get("camera.missing", "fallback") == "fallback"
        assert config.get("camera.index.deeper", "fallback") == "fallback"

    def test_typed_getters_use_defaults(self, config):
        assert config.getCameraIndex() == 2
        assert config.getFrameWidth() == 640
        assert config.getFrameHeight() == 720
        assert config.getMaxCameraSearch() == 4
        assert config.getRemoteClassificationTimeout() == 15.0
        assert config.getJpegQuality() == 60
        assert config.getAliasCurrency() == "ars"

    def test_backend_is_lowercased(self, config):
        assert config.getCodeBackend() == "pyzbar"

    def test_service_config_is_a_copy(self, config):
        section = config.getServiceConfig("scanner")
        section["ocrInterval"] = 99.0
        assert config.get("scanner.ocrInterval") == 2.0

    def test_missing_section_is_empty(self, config):
        assert config.getAuthConfig() == {}
        assert config.getTransferConfig() == {}

    def test_debug_settings(self, config):
        assert config.isDebugEnabled() is True
        assert config.getDebugBasePath() == "tmp/debug"
        config.setDebugEnabled(False)
        assert config.isDebugEnabled() is False
