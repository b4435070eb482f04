"""
Change watchers for a backing config file.

Two strategies detect that the file changed on disk:

- ``PollWatcher`` stats the file on a fixed asyncio timer and fires when the
  modification stamp moves. Stat failures skip the cycle, since editors may
  briefly remove the file during an atomic save.
- ``NotifyWatcher`` subscribes to OS file events through watchdog. Events
  arrive on the observer thread, are handed to the event loop, debounced, and
  fire the callback. The watch handle is re-created after every triggered
  event because some platforms stop reporting after a rename-style save.

Both call ``callback(stamp)`` on the event loop and never run two timers or
handles at once: ``restart()`` stops the old one before starting the new one.
"""

import asyncio
import os
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from liveconfig.config.settings import get_settings
from liveconfig.utils.exceptions import WatcherError
from liveconfig.utils.logging import ReloadEventLogger, get_logger

logger = get_logger(__name__)

ChangeCallback = Callable[[int], Awaitable[object]]


@dataclass
class WatchState:
    """Poll interval and last known modification stamp (``st_mtime_ns``)."""
    frequency_ms: int
    last_modified: int = 0


def stat_stamp(path: str) -> int:
    """Modification stamp of ``path``; raises OSError when it cannot be stat'ed."""
    return os.stat(path).st_mtime_ns


class ChangeWatcher(ABC):
    """Base class for file change watchers."""

    strategy = ""

    def __init__(
        self,
        path: str | os.PathLike,
        callback: ChangeCallback,
        frequency_ms: int | None = None,
        last_modified: int = 0,
    ):
        self.path = os.fspath(path)
        self.callback = callback
        self.state = WatchState(
            frequency_ms=frequency_ms or get_settings().check_config_freq_ms,
            last_modified=last_modified,
        )
        self.event_logger = ReloadEventLogger()

    @property
    @abstractmethod
    def running(self) -> bool:
        """Whether the watcher is currently armed."""

    @abstractmethod
    def _start(self, loop: asyncio.AbstractEventLoop) -> None:
        """Arm the watcher on ``loop``."""

    @abstractmethod
    def _stop(self) -> None:
        """Disarm the watcher."""

    def start(self) -> None:
        """Start watching. Must be called with a running event loop."""
        if self.running:
            logger.warning("watcher_already_running", config_file=self.path)
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise WatcherError(
                "Watching a config file requires a running event loop",
                strategy=self.strategy,
            ) from e

        self._start(loop)
        self.event_logger.log_watcher_event(
            "start", self.path, self.strategy, frequency_ms=self.state.frequency_ms
        )

    def stop(self) -> None:
        """Stop watching. Safe to call when not running."""
        if not self.running:
            return
        self._stop()
        self.event_logger.log_watcher_event("stop", self.path, self.strategy)

    def restart(self, frequency_ms: int | None = None) -> None:
        """Stop, then start again with a new frequency."""
        if frequency_ms:
            self.state.frequency_ms = frequency_ms
        self.stop()
        self.start()

    async def current_stamp(self) -> int:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, stat_stamp, self.path)

    async def _fire(self, stamp: int) -> None:
        try:
            await self.callback(stamp)
        except Exception as e:
            logger.error("watch_callback_failed", config_file=self.path, error=str(e), exc_info=True)


class PollWatcher(ChangeWatcher):
    """Stat the file every ``frequency_ms`` and fire when its stamp changes."""

    strategy = "poll"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _start(self, loop: asyncio.AbstractEventLoop) -> None:
        self._task = loop.create_task(self._poll_loop(self.state.frequency_ms / 1000))

    def _stop(self) -> None:
        self._task.cancel()
        self._task = None

    async def _poll_loop(self, interval: float) -> None:
        # The interval is bound at start; a new frequency means a new task
        while True:
            await asyncio.sleep(interval)
            await self.check()

    async def check(self) -> bool:
        """Run one poll cycle; returns True when a change was detected."""
        try:
            stamp = await self.current_stamp()
        except OSError as e:
            # Transient during atomic saves, try again next cycle
            logger.debug("stat_failed", config_file=self.path, error=str(e))
            return False

        if stamp and stamp != self.state.last_modified:
            self.state.last_modified = stamp
            await self._fire(stamp)
            return True

        return False


class _ConfigFileEventHandler(FileSystemEventHandler):
    """Forwards events for one file name from the observer thread."""

    def __init__(self, filename: str, notify: Callable[[], None]):
        super().__init__()
        self.filename = filename
        self.notify = notify

    def _should_trigger(self, event: FileSystemEvent) -> bool:
        if event.is_directory:
            return False
        event_path = getattr(event, "dest_path", None) or event.src_path
        return Path(os.fsdecode(event_path)).name == self.filename

    def on_modified(self, event: FileSystemEvent) -> None:
        if self._should_trigger(event):
            self.notify()

    def on_created(self, event: FileSystemEvent) -> None:
        if self._should_trigger(event):
            self.notify()

    def on_moved(self, event: FileSystemEvent) -> None:
        # Atomic saves write a temp file and rename it over the target
        if self._should_trigger(event):
            self.notify()


class NotifyWatcher(ChangeWatcher):
    """Fire on OS file-change notifications, re-subscribing after each one.

    The parent directory is watched, filtered to the file name, so a
    rename-over save is still seen.
    """

    strategy = "notify"

    def __init__(self, *args, debounce_ms: int | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        if debounce_ms is None:
            debounce_ms = get_settings().notify_debounce_ms
        self.debounce_seconds = debounce_ms / 1000
        self.watch_dir = str(Path(self.path).resolve().parent)
        self.handler = _ConfigFileEventHandler(Path(self.path).name, self._on_fs_event)

        self._loop: asyncio.AbstractEventLoop | None = None
        self._observer: Observer | None = None
        self._watch = None
        self._debounce_handle: asyncio.TimerHandle | None = None
        self._triggers: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._observer is not None

    def _start(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        self._observer = Observer()
        self._watch = self._observer.schedule(self.handler, self.watch_dir, recursive=False)
        self._observer.start()

    def _stop(self) -> None:
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None
        self._observer.stop()
        self._observer.join(timeout=5.0)
        self._observer = None
        self._watch = None

    def _on_fs_event(self) -> None:
        # Observer thread: hand off to the loop, never touch state here
        loop = self._loop
        if loop is not None and not loop.is_closed():
            loop.call_soon_threadsafe(self._schedule)

    def _schedule(self) -> None:
        if not self.running:
            return
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
        self._debounce_handle = self._loop.call_later(self.debounce_seconds, self._trigger)

    def _trigger(self) -> None:
        self._debounce_handle = None
        task = self._loop.create_task(self._handle_change())
        self._triggers.add(task)
        task.add_done_callback(self._triggers.discard)

    def _rearm(self) -> None:
        """Close the current watch handle and open a fresh one."""
        if self._observer is None:
            return
        if self._watch is not None:
            try:
                self._observer.unschedule(self._watch)
            except KeyError:
                logger.debug("watch_already_gone", config_file=self.path)
        self._watch = self._observer.schedule(self.handler, self.watch_dir, recursive=False)

    async def _handle_change(self) -> None:
        self._rearm()
        try:
            stamp = await self.current_stamp()
        except OSError as e:
            logger.debug("stat_failed", config_file=self.path, error=str(e))
            stamp = 0
        if stamp:
            self.state.last_modified = stamp
        await self._fire(stamp)


WATCHERS: dict[str, type[ChangeWatcher]] = {
    PollWatcher.strategy: PollWatcher,
    NotifyWatcher.strategy: NotifyWatcher,
}


def create_watcher(
    strategy: str | None,
    path: str | os.PathLike,
    callback: ChangeCallback,
    frequency_ms: int | None = None,
    last_modified: int = 0,
) -> ChangeWatcher:
    """Build a watcher for ``strategy`` (``"poll"`` or ``"notify"``)."""
    strategy = strategy or get_settings().watch_strategy
    try:
        watcher_cls = WATCHERS[strategy]
    except KeyError:
        raise WatcherError(f"Unknown watch strategy: {strategy}", strategy=strategy) from None
    return watcher_cls(path, callback, frequency_ms=frequency_ms, last_modified=last_modified)
