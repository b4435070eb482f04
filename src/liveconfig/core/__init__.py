"""
liveconfig Core

Path addressing, override sources, the config store with its sub-views, and
the watch/reload machinery that keeps them current.
"""

from liveconfig.core.events import EventEmitter
from liveconfig.core.overrides import (
    ChainedOverrides,
    CommandLineOverrides,
    EnvironmentOverrides,
    MappingOverrides,
    OverrideSource,
)
from liveconfig.core.parsers import parse_json, parse_yaml
from liveconfig.core.paths import MISSING, get_path, has_path, set_path, split_path
from liveconfig.core.reload import ReloadEvent, ReloadPipeline, ReloadResult
from liveconfig.core.store import ConfigStore, SubView
from liveconfig.core.watcher import (
    ChangeWatcher,
    NotifyWatcher,
    PollWatcher,
    WatchState,
    create_watcher,
)

__all__ = [
    "ConfigStore",
    "SubView",
    "EventEmitter",
    "OverrideSource",
    "MappingOverrides",
    "CommandLineOverrides",
    "EnvironmentOverrides",
    "ChainedOverrides",
    "parse_json",
    "parse_yaml",
    "MISSING",
    "get_path",
    "set_path",
    "has_path",
    "split_path",
    "ReloadPipeline",
    "ReloadResult",
    "ReloadEvent",
    "ChangeWatcher",
    "PollWatcher",
    "NotifyWatcher",
    "WatchState",
    "create_watcher",
]
