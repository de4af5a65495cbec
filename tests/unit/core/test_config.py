"""
Configuration Unit Tests

Usage:
    pytest tests/unit/core/test_config.py -v
"""
import logging

import pytest

from core.config import get_settings, reload_settings
from core.config.logging_config import LoggingConfig
from core.config.sync_config import SyncConfig
from core.logger import setup_service_logger

pytestmark = pytest.mark.unit


class TestSyncConfig:

    def test_defaults(self):
        config = SyncConfig()

        assert config.propagation_timeout_seconds == 5.0
        assert config.propagate_in_background is False
        assert config.warehouse_lag_threshold == 10
        assert config.avg_lag_threshold == 5.0

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SYNC_PROPAGATION_TIMEOUT", "0.5")
        monkeypatch.setenv("SYNC_PROPAGATE_IN_BACKGROUND", "TRUE")
        monkeypatch.setenv("SYNC_WAREHOUSE_LAG_THRESHOLD", "3")
        monkeypatch.setenv("SYNC_AVG_LAG_THRESHOLD", "1.5")
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        config = SyncConfig.from_env()

        assert config.propagation_timeout_seconds == 0.5
        assert config.propagate_in_background is True
        assert config.warehouse_lag_threshold == 3
        assert config.avg_lag_threshold == 1.5
        assert config.log_level == "WARNING"

    def test_invalid_numbers_fall_back_to_defaults(self, monkeypatch):
        monkeypatch.setenv("SYNC_PROPAGATION_TIMEOUT", "soon")
        monkeypatch.setenv("SYNC_WAREHOUSE_LAG_THRESHOLD", "many")

        config = SyncConfig.from_env()

        assert config.propagation_timeout_seconds == 5.0
        assert config.warehouse_lag_threshold == 10

    def test_reload_settings(self, monkeypatch):
        monkeypatch.setenv("SYNC_AVG_LAG_THRESHOLD", "2.0")

        settings = reload_settings()

        assert settings.avg_lag_threshold == 2.0
        assert get_settings() is settings


class TestLoggingConfig:

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("ENV", "production")
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("LOG_CONSOLE", "false")

        config = LoggingConfig.from_env()

        assert config.environment == "production"
        assert config.log_level == "INFO"
        assert config.enable_console is False

    def test_development_defaults_to_debug(self, monkeypatch):
        monkeypatch.setenv("ENV", "development")
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        assert LoggingConfig.from_env().log_level == "DEBUG"


class TestServiceLogger:

    def test_configures_level_and_handler_once(self):
        config = LoggingConfig(log_level="INFO")

        logger = setup_service_logger("test_inventory_sync_logger", config=config)
        again = setup_service_logger("test_inventory_sync_logger", level="error", config=config)

        assert logger is again
        assert logger.level == logging.ERROR
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "sync.log"
        config = LoggingConfig(log_file=str(log_file), enable_console=False)

        logger = setup_service_logger("test_inventory_sync_file_logger", config=config)
        logger.warning("lag threshold exceeded")
        for handler in logger.handlers:
            handler.flush()

        assert len(logger.handlers) == 1
        assert "lag threshold exceeded" in log_file.read_text()
