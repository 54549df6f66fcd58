"""Tests for configuration management."""

import logging
import os
import pytest
from unittest.mock import patch

from risk_aggregation.config import AppSettings, ProviderSettings, Settings
from risk_aggregation.logging_setup import configure_logging


def test_provider_settings_defaults():
    """Test provider settings with defaults."""
    config = ProviderSettings(_env_file=None)
    assert config.base_url == "https://sms.sniperbuisnesscenter.com/api/v1"
    assert config.default_timeout == 10.0
    assert config.catalog_path is None
    assert config.max_connections == 10


def test_provider_settings_from_env():
    """Test provider settings read from the environment."""
    with patch.dict(os.environ, {
        "RISK_AGG_BASE_URL": "https://school.test/api/v1/",
        "RISK_AGG_DEFAULT_TIMEOUT": "2.5",
        "RISK_AGG_MAX_CONNECTIONS": "4",
        "RISK_AGG_CATALOG_PATH": "configs/providers.yaml"
    }):
        config = ProviderSettings(_env_file=None)
        assert config.base_url == "https://school.test/api/v1"
        assert config.default_timeout == 2.5
        assert config.max_connections == 4
        assert config.catalog_path == "configs/providers.yaml"


def test_provider_settings_invalid_url():
    """Test invalid base URL."""
    with patch.dict(os.environ, {
        "RISK_AGG_BASE_URL": "ftp://school.test"
    }):
        with pytest.raises(ValueError, match="must be an http"):
            ProviderSettings(_env_file=None)


def test_provider_settings_invalid_timeout():
    """Test out-of-range timeout."""
    with patch.dict(os.environ, {
        "RISK_AGG_DEFAULT_TIMEOUT": "0"
    }):
        with pytest.raises(ValueError):
            ProviderSettings(_env_file=None)


def test_app_settings_defaults():
    """Test app settings with defaults."""
    config = AppSettings(_env_file=None)
    assert config.name == "risk-aggregation"
    assert config.log_level == "INFO"
    assert config.classify_records is True
    assert config.enable_salvage is True


def test_app_settings_log_level():
    """Test log level normalization and validation."""
    with patch.dict(os.environ, {"RISK_AGG_LOG_LEVEL": "debug"}):
        assert AppSettings(_env_file=None).log_level == "DEBUG"

    with patch.dict(os.environ, {"RISK_AGG_LOG_LEVEL": "chatty"}):
        with pytest.raises(ValueError, match="Unknown log level"):
            AppSettings(_env_file=None)


def test_settings_load():
    """Test loading combined settings."""
    with patch.dict(os.environ, {"RISK_AGG_ENABLE_SALVAGE": "false"}):
        settings = Settings.load()
        assert settings.app.enable_salvage is False
        assert settings.providers.default_timeout > 0


def test_configure_logging():
    """Test package logger setup."""
    package_logger = configure_logging("warning")
    assert package_logger.name == "risk_aggregation"
    assert package_logger.level == logging.WARNING
    assert len(package_logger.handlers) == 1

    configure_logging("info")
    assert len(package_logger.handlers) == 1
