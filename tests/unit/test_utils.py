"""
Unit tests for liveconfig settings, exceptions, decorators and logging.
"""

import asyncio
import logging

import pytest
import structlog
from pydantic import ValidationError

from liveconfig.config.constants import DEFAULT_SETTINGS
from liveconfig.config.settings import Settings, get_settings
from liveconfig.utils.decorators import measure_latency, timeout_async
from liveconfig.utils.exceptions import (
    ConfigLoadError,
    ConfigParseError,
    ConfigurationError,
    LiveConfigError,
    TimeoutError,
)
from liveconfig.utils.logging import get_logger, setup_logging


class TestSettings:
    """Test library settings."""

    def test_defaults(self):
        settings = Settings()
        assert settings.check_config_freq_ms == DEFAULT_SETTINGS["check_config_freq_ms"] == 10000
        assert settings.watch_strategy == "poll"
        assert settings.hostname_env_vars == ["HOSTNAME", "HOST"]
        assert settings.hostname_command == "/bin/hostname"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("LIVECONFIG_LOG_LEVEL", "debug")
        monkeypatch.setenv("LIVECONFIG_ENVIRONMENT", "Production")
        monkeypatch.setenv("LIVECONFIG_WATCH_STRATEGY", "notify")

        settings = get_settings()

        assert settings.log_level == "DEBUG"
        assert settings.environment == "production"
        assert settings.watch_strategy == "notify"

    def test_invalid_values_rejected(self, monkeypatch):
        monkeypatch.setenv("LIVECONFIG_WATCH_STRATEGY", "magic")
        with pytest.raises(ValidationError):
            Settings()

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestExceptions:
    """Test the exception hierarchy."""

    def test_hierarchy(self):
        assert issubclass(ConfigLoadError, ConfigurationError)
        assert issubclass(ConfigParseError, ConfigurationError)
        assert issubclass(ConfigurationError, LiveConfigError)

    def test_default_error_codes_and_dict(self):
        error = ConfigParseError("bad json", config_file="app.json", details={"line": 3})

        assert str(error) == "[CONFIG_PARSE_FAILED] bad json"
        assert error.config_file == "app.json"
        assert error.to_dict() == {
            "error_type": "ConfigParseError",
            "message": "bad json",
            "error_code": "CONFIG_PARSE_FAILED",
            "details": {"line": 3},
        }

    def test_plain_message(self):
        assert str(LiveConfigError("plain")) == "plain"


class TestDecorators:
    """Test timeout and latency decorators."""

    @pytest.mark.asyncio
    async def test_timeout_async_raises(self):
        @timeout_async(0.01)
        async def slow():
            await asyncio.sleep(1)

        with pytest.raises(TimeoutError) as exc_info:
            await slow()
        assert exc_info.value.operation == "slow"
        assert exc_info.value.timeout_seconds == 0.01

    @pytest.mark.asyncio
    async def test_timeout_async_callable_limit(self):
        @timeout_async(lambda: 1.0)
        async def fast():
            return "done"

        assert await fast() == "done"

    @pytest.mark.asyncio
    async def test_measure_latency_async(self):
        @measure_latency("op")
        async def work(x):
            return x * 2

        assert await work(2) == 4

    def test_measure_latency_sync_propagates(self):
        @measure_latency()
        def broken():
            raise ValueError("nope")

        with pytest.raises(ValueError):
            broken()


class TestLogging:

    def test_setup_logging_json(self, caplog):
        caplog.set_level(logging.INFO)
        try:
            setup_logging("INFO", "production")
            get_logger("liveconfig.test").info("hello", answer=42)
        finally:
            structlog.reset_defaults()

        assert '"answer": 42' in caplog.text
