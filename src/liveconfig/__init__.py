"""
liveconfig - Live-reloading hierarchical configuration store

Loads a JSON document from disk, overlays command-line overrides, exposes
path-addressed access, and keeps sub-configuration views in sync as the
file changes on disk.

License: MIT
Version: 1.0.0
"""

__version__ = "1.0.0"

from liveconfig.core import (
    MISSING,
    CommandLineOverrides,
    ConfigStore,
    EnvironmentOverrides,
    MappingOverrides,
    OverrideSource,
    ReloadResult,
    SubView,
)
from liveconfig.utils.exceptions import (
    ConfigLoadError,
    ConfigParseError,
    LiveConfigError,
)

__all__ = [
    "__version__",
    "ConfigStore",
    "SubView",
    "OverrideSource",
    "CommandLineOverrides",
    "MappingOverrides",
    "EnvironmentOverrides",
    "ReloadResult",
    "MISSING",
    "LiveConfigError",
    "ConfigLoadError",
    "ConfigParseError",
]
