"""
Live configuration store.

``ConfigStore`` owns a JSON-shaped mapping loaded from a file (or given
literally), overlays overrides on top of it, and can watch the file and
reload it in place. ``SubView`` is a store rooted at one key of a parent,
refreshed whenever the parent reloads.

Example:
    >>> store = ConfigStore("app.json", watch=5000)
    >>> store.on("reload", lambda: print("reloaded"))
    >>> db = store.get_sub("db")
    >>> db.get("host")
"""

import os
import weakref
from collections.abc import Mapping
from typing import Any

from liveconfig.config import environments
from liveconfig.config.constants import CHECK_FREQ_KEY
from liveconfig.core import paths
from liveconfig.core.events import EventEmitter, Listener
from liveconfig.core.overrides import CommandLineOverrides, OverrideSource
from liveconfig.core.parsers import Parser, parse_json, parser_for, read_text
from liveconfig.core.reload import ReloadPipeline, ReloadResult
from liveconfig.core.watcher import ChangeWatcher, create_watcher, stat_stamp
from liveconfig.utils.exceptions import ConfigLoadError, ConfigParseError, WatcherError
from liveconfig.utils.logging import get_logger

logger = get_logger(__name__)


class ConfigStore:
    """Hierarchical config mapping with overrides, sub-views and live reload.

    Args:
        source: Path of a config file (loaded immediately), or a literal
            mapping. ``None`` leaves an empty store for manual setup.
        watch: ``True`` or a poll interval in ms to start watching the file.
            A ``check_config_freq_ms`` key in the file wins over the interval.
        parser: Text-to-value function; chosen by file extension if omitted.
        overrides: Override source; defaults to command-line ``--key value``
            pairs.
        strategy: ``"poll"`` or ``"notify"``; defaults to the library setting.

    Raises:
        ConfigLoadError: The file cannot be stat'ed or read.
        ConfigParseError: The content is malformed or not an object.
    """

    def __init__(
        self,
        source: str | os.PathLike | dict[str, Any] | None = None,
        watch: bool | int = False,
        *,
        parser: Parser | None = None,
        overrides: OverrideSource | None = None,
        strategy: str | None = None,
    ):
        self.config: dict[str, Any] = {}
        self.config_file = ""
        self.mod = 0
        self.args: OverrideSource | None = overrides
        self.subs: dict[str, SubView] = {}
        self.parser: Parser = parser or parse_json
        self.strategy = strategy
        self.watcher: ChangeWatcher | None = None
        self.pipeline: ReloadPipeline | None = None
        self.hostname = ""
        self.ip = ""
        self.events = EventEmitter()

        if source is None:
            return

        if isinstance(source, dict):
            self.config = source
        else:
            self.config_file = os.fspath(source)
            self.events.owner = self.config_file
            if parser is None:
                self.parser = parser_for(self.config_file)

        if self.args is None:
            self.args = CommandLineOverrides()

        if self.config_file:
            self.pipeline = ReloadPipeline(self)
            self.load()
        else:
            self.load_args()

        if self.config_file and watch:
            frequency_ms = watch if not isinstance(watch, bool) else None
            self.monitor(frequency_ms)

    def __repr__(self) -> str:
        source = self.config_file or "<memory>"
        return f"<{self.__class__.__name__} {source} keys={len(self.config)} subs={len(self.subs)}>"

    # Loading

    def load(self) -> None:
        """Synchronously load the file, then apply overrides."""
        path = self.config_file
        try:
            self.mod = stat_stamp(path)
            text = read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigLoadError(
                f"Failed to load config file: {path}: {e}", config_file=path
            ) from e

        try:
            config = self.parser(text)
        except Exception as e:
            raise ConfigParseError(
                f"Failed to parse config file: {path}: {e}", config_file=path
            ) from e

        if not isinstance(config, dict):
            raise ConfigParseError(
                f"Failed to parse config file: {path}: top level must be an object, "
                f"got {type(config).__name__}",
                config_file=path,
            )

        self.config = config
        self.load_args()
        logger.info("config_loaded", config_file=path, keys=len(config))

    def load_args(self) -> None:
        """Apply a fresh snapshot of every override to the current mapping."""
        if self.args is None:
            return

        for path, value in self.args.all_overrides().items():
            if not paths.set_path(self.config, path, value):
                logger.warning("override_blocked", config_file=self.config_file, path=path)

    async def reload(self) -> ReloadResult:
        """Re-read the file now, outside the watcher schedule."""
        if self.pipeline is None:
            raise WatcherError("Only file-backed stores can be reloaded")
        return await self.pipeline.run()

    # Watching

    def monitor(self, frequency_ms: int | None = None, strategy: str | None = None) -> None:
        """Start watching the backing file for changes."""
        if not self.config_file:
            raise WatcherError("Only file-backed stores can be watched")

        file_freq = self.config.get(CHECK_FREQ_KEY)
        if isinstance(file_freq, int) and not isinstance(file_freq, bool) and file_freq > 0:
            frequency_ms = file_freq

        if self.watcher is None:
            self.watcher = create_watcher(
                strategy or self.strategy,
                self.config_file,
                self.pipeline.run,
                frequency_ms=frequency_ms,
                last_modified=self.mod,
            )
        elif frequency_ms:
            self.watcher.state.frequency_ms = frequency_ms

        self.watcher.start()

    def stop(self) -> None:
        """Stop watching the backing file."""
        if self.watcher is not None:
            self.watcher.stop()

    def close(self) -> None:
        """Stop watching and drop every sub-view."""
        self.stop()
        self.subs.clear()

    # Access

    def get(self, key: str | None = None) -> Any:
        """Get a single top-level key, or the whole mapping for an empty key."""
        if not key:
            return self.config
        return self.config.get(key)

    def set(self, key: str, value: Any) -> None:
        """Set a top-level key; also recorded as an override to survive reloads."""
        self.config[key] = value
        if self.args is not None:
            self.args.set_override(key, value)

    def get_path(self, path: str, default: Any = None) -> Any:
        """Get a value by ``dot.path`` or ``slash/path``.

        Pass ``default=paths.MISSING`` to tell a stored None from a missing key.
        """
        value = paths.get_path(self.config, path)
        return default if value is paths.MISSING else value

    def set_path(self, path: str, value: Any) -> bool:
        """Set a value by path; False if a non-mapping blocks the path."""
        return paths.set_path(self.config, path, value)

    def has_path(self, path: str) -> bool:
        return paths.has_path(self.config, path)

    def import_mapping(self, mapping: Mapping[str, Any]) -> None:
        """Shallow-merge ``mapping`` into the top level."""
        self.config.update(mapping)

    # Sub-views

    def get_sub(self, key: str) -> "SubView":
        """Get the sub-view rooted at ``key``, creating it on first use."""
        sub = self.subs.get(key)
        if sub is None:
            sub = SubView(self, key)
            self.subs[key] = sub
        return sub

    def refresh_subs(self) -> None:
        """Re-root every sub-view on the current mapping, recursively."""
        for sub in list(self.subs.values()):
            sub.refresh()

    # Events

    def on(self, event: str, listener: Listener) -> Listener:
        return self.events.on(event, listener)

    def once(self, event: str, listener: Listener) -> Listener:
        return self.events.once(event, listener)

    def off(self, event: str, listener: Listener) -> bool:
        return self.events.off(event, listener)

    def emit(self, event: str, *args: Any) -> int:
        return self.events.emit(event, *args)

    # Environment

    async def get_env(self) -> environments.EnvironmentInfo:
        """Discover hostname and IP address, storing them on the store."""
        info = await environments.get_env()
        self.hostname = info.hostname
        self.ip = info.ip
        return info


class SubView(ConfigStore):
    """A store rooted at ``key`` inside a parent store.

    Holds only a weak reference to the parent; the parent's ``subs`` map owns
    the view. No file, watcher, or overrides of its own.
    """

    def __init__(self, parent: ConfigStore, key: str):
        super().__init__()
        self.key = key
        self._parent = weakref.ref(parent)
        self.events.owner = f"{parent.events.owner or '<memory>'}#{key}"
        self.config = self._resolve(parent)

    def __repr__(self) -> str:
        return f"<SubView {self.key!r} keys={len(self.config)} subs={len(self.subs)}>"

    @property
    def parent(self) -> ConfigStore | None:
        return self._parent()

    def _resolve(self, parent: ConfigStore) -> dict[str, Any]:
        value = parent.get(self.key)
        return value if isinstance(value, dict) else {}

    def refresh(self) -> None:
        """Re-root on the parent's current mapping and notify listeners."""
        parent = self.parent
        if parent is None:
            return
        self.config = self._resolve(parent)
        self.emit('reload')
        self.refresh_subs()

    def detach(self) -> None:
        """Unregister from the parent; the view stops refreshing."""
        parent = self.parent
        if parent is not None and parent.subs.get(self.key) is self:
            del parent.subs[self.key]
