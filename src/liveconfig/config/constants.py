"""
liveconfig Default Configuration Constants

Contains the default values embedded in the library code. These serve as the
base layer beneath the ``LIVECONFIG_*`` environment settings.
"""

from typing import Any

# Key inside a watched config file that changes its own poll interval
CHECK_FREQ_KEY = "check_config_freq_ms"

# Sentinel tokens standing in for escaped delimiters while a path is split
ESCAPED_DOT_TOKEN = "\x00LCDOT\x00"
ESCAPED_SLASH_TOKEN = "\x00LCSLASH\x00"

LOOPBACK_ADDRESS = "127.0.0.1"
LINK_LOCAL_PREFIX = "169.254."

# Default library settings
DEFAULT_SETTINGS: dict[str, Any] = {
    "environment": "development",
    "log_level": "INFO",
    "check_config_freq_ms": 10 * 1000,
    "watch_strategy": "poll",
    "notify_debounce_ms": 100,
    "hostname_command": "/bin/hostname",
    "hostname_env_vars": ["HOSTNAME", "HOST"],
    "dns_timeout_seconds": 5.0,
    "reload_history_size": 100,
}
