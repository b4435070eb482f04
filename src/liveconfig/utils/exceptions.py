"""
liveconfig Custom Exceptions

Defines custom exception classes for the error categories raised by liveconfig.
"""

from typing import Any


class LiveConfigError(Exception):
    """Base exception class for liveconfig-specific errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class ConfigurationError(LiveConfigError):
    """Raised when there's an error loading or applying configuration."""

    def __init__(
        self,
        message: str,
        config_file: str | None = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.config_file = config_file


class ConfigLoadError(ConfigurationError):
    """Raised when the config file cannot be stat'ed or read."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("error_code", "CONFIG_LOAD_FAILED")
        super().__init__(message, **kwargs)


class ConfigParseError(ConfigurationError):
    """Raised when the config file content cannot be parsed into a mapping."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("error_code", "CONFIG_PARSE_FAILED")
        super().__init__(message, **kwargs)


class WatcherError(LiveConfigError):
    """Raised when a change watcher cannot be created or started."""

    def __init__(
        self,
        message: str,
        strategy: str | None = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.strategy = strategy


class EnvironmentDiscoveryError(LiveConfigError):
    """Raised when the server hostname cannot be determined."""

    def __init__(
        self,
        message: str,
        method: str | None = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.method = method


class TimeoutError(LiveConfigError):
    """Raised when operations timeout."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        timeout_seconds: float | None = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.timeout_seconds = timeout_seconds
