"""
liveconfig Settings and Environment Module

Provides:
- Library settings loaded from ``LIVECONFIG_*`` environment variables
- Default constants embedded in code
- Hostname and IP address discovery
"""

from liveconfig.config.constants import DEFAULT_SETTINGS
from liveconfig.config.environments import (
    EnvironmentInfo,
    get_env,
    get_hostname,
    get_ip_address,
)
from liveconfig.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "DEFAULT_SETTINGS",
    "EnvironmentInfo",
    "get_env",
    "get_hostname",
    "get_ip_address",
]
