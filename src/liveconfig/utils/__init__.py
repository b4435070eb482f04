"""
liveconfig Utility Modules

Common utilities for logging, exceptions and decorators.
"""

from liveconfig.utils.decorators import measure_latency, timeout_async
from liveconfig.utils.exceptions import (
    ConfigLoadError,
    ConfigParseError,
    ConfigurationError,
    EnvironmentDiscoveryError,
    LiveConfigError,
    WatcherError,
)
from liveconfig.utils.logging import get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "LiveConfigError",
    "ConfigurationError",
    "ConfigLoadError",
    "ConfigParseError",
    "WatcherError",
    "EnvironmentDiscoveryError",
    "measure_latency",
    "timeout_async",
]
