"""
liveconfig Library Settings

Settings that tune liveconfig itself (not the documents it loads), resolved in
order of precedence:
1. Environment variables (``LIVECONFIG_*``)
2. ``.env`` file
3. Default values (code)
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from liveconfig.config.constants import DEFAULT_SETTINGS


class Settings(BaseSettings):
    """Library settings using Pydantic for validation."""

    model_config = SettingsConfigDict(
        env_prefix="LIVECONFIG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(default=DEFAULT_SETTINGS["environment"])
    log_level: str = Field(default=DEFAULT_SETTINGS["log_level"])

    # Watching
    check_config_freq_ms: int = Field(default=DEFAULT_SETTINGS["check_config_freq_ms"], gt=0)
    watch_strategy: Literal["poll", "notify"] = Field(default=DEFAULT_SETTINGS["watch_strategy"])
    notify_debounce_ms: int = Field(default=DEFAULT_SETTINGS["notify_debounce_ms"], ge=0)
    reload_history_size: int = Field(default=DEFAULT_SETTINGS["reload_history_size"], ge=1)

    # Environment discovery
    hostname_command: str = Field(default=DEFAULT_SETTINGS["hostname_command"])
    hostname_env_vars: list[str] = Field(default_factory=lambda: list(DEFAULT_SETTINGS["hostname_env_vars"]))
    dns_timeout_seconds: float = Field(default=DEFAULT_SETTINGS["dns_timeout_seconds"], gt=0)

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("environment")
    @classmethod
    def _lower_environment(cls, value: str) -> str:
        return value.lower()


@lru_cache
def get_settings() -> Settings:
    """Get global settings instance."""
    return Settings()
