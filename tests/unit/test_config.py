"""Tests for EngineConfig and logging setup."""

import dataclasses

import pytest
import structlog

from bonding_curve.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from bonding_curve.logging_config import configure_logging


class TestEngineConfig:
    """Tests for EngineConfig."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.decimal_precision == 78
        assert config.price_decimal_places == 25
        assert config.log_level == "WARNING"
        assert config == DEFAULT_ENGINE_CONFIG

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_ENGINE_CONFIG.decimal_precision = 10

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("BONDING_CURVE_LOG_LEVEL", "debug")
        config = EngineConfig.from_env()
        assert config.log_level == "DEBUG"

    def test_from_env_keeps_arithmetic_defaults(self, monkeypatch):
        """Only the log level is read from the environment."""
        monkeypatch.setenv("BONDING_CURVE_DECIMAL_PRECISION", "100")
        monkeypatch.setenv("BONDING_CURVE_LOG_LEVEL", "error")
        config = EngineConfig.from_env()
        assert config.decimal_precision == 78
        assert config.sqrt_max_iterations == 255
        assert config.log_level == "ERROR"

    def test_from_env_without_overrides(self, monkeypatch):
        monkeypatch.delenv("BONDING_CURVE_LOG_LEVEL", raising=False)
        assert EngineConfig.from_env() == EngineConfig()


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.fixture(autouse=True)
    def reset_structlog(self):
        yield
        structlog.reset_defaults()

    def test_level_name(self):
        configure_logging("info")
        assert structlog.is_configured()

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            configure_logging("chatty")

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("BONDING_CURVE_LOG_LEVEL", "ERROR")
        configure_logging()
        assert structlog.is_configured()
