"""
Reload pipeline for file-backed config stores.

One run is one watch cycle:

1. Read the file (executor, off the loop)
2. Parse it with the store's parser
3. Swap the store's backing mapping in a single assignment
4. Re-fetch and re-apply every override
5. Emit ``reload`` on the store
6. Refresh the store's sub-views, recursively
7. Restart the watcher if the file asks for a different check frequency

A read or parse failure emits ``error`` and leaves the previous mapping in
place; the watcher stays armed and the next detected change tries again.
Runs are serialized, so a change detected mid-reload runs afterwards.
"""

import asyncio
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from liveconfig.config.constants import CHECK_FREQ_KEY
from liveconfig.config.settings import get_settings
from liveconfig.core.parsers import read_text
from liveconfig.utils.decorators import measure_latency
from liveconfig.utils.logging import ReloadEventLogger, get_logger

if TYPE_CHECKING:
    from liveconfig.core.store import ConfigStore

logger = get_logger(__name__)


class ReloadResult(Enum):
    """Result of a reload run."""
    SUCCESS = "success"
    IO_ERROR = "io_error"
    PARSE_ERROR = "parse_error"


@dataclass
class ReloadEvent:
    """Record of one reload run."""
    timestamp: float
    result: ReloadResult
    config_file: str
    duration_ms: float
    error_message: str | None = None
    stamp: int = 0

    def __post_init__(self):
        if self.result != ReloadResult.SUCCESS and self.error_message is None:
            raise ValueError(f"Failed event {self.result} must have error_message")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            'timestamp': self.timestamp,
            'result': self.result.value,
            'config_file': self.config_file,
            'duration_ms': self.duration_ms,
            'error_message': self.error_message,
            'stamp': self.stamp,
        }


class ReloadPipeline:
    """Re-reads a store's file and propagates the result."""

    def __init__(self, store: "ConfigStore", history_size: int | None = None):
        self.store = store
        self._lock = asyncio.Lock()
        self._history: deque[ReloadEvent] = deque(
            maxlen=history_size or get_settings().reload_history_size
        )
        self._stats = {
            'total_reloads': 0,
            'successful_reloads': 0,
            'failed_reloads': 0,
            'last_reload_time': None,
            'last_reload_result': None,
        }
        self.event_logger = ReloadEventLogger()

    async def run(self, stamp: int = 0) -> ReloadResult:
        """Run one reload; waits for any run already in flight."""
        async with self._lock:
            return await self._run(stamp)

    @measure_latency("config_reload")
    async def _run(self, stamp: int) -> ReloadResult:
        store = self.store
        path = store.config_file
        start_time = time.perf_counter()

        if stamp:
            store.mod = stamp

        loop = asyncio.get_running_loop()
        try:
            text = await loop.run_in_executor(None, read_text, path)
        except (OSError, UnicodeDecodeError) as e:
            return self._fail(
                ReloadResult.IO_ERROR,
                f"Failed to reload config file: {path}: {e}",
                start_time, stamp,
            )

        try:
            config = store.parser(text)
        except Exception as e:
            return self._fail(
                ReloadResult.PARSE_ERROR,
                f"Failed to parse config file: {path}: {e}",
                start_time, stamp,
            )

        if not isinstance(config, dict):
            return self._fail(
                ReloadResult.PARSE_ERROR,
                f"Failed to parse config file: {path}: top level must be an object, "
                f"got {type(config).__name__}",
                start_time, stamp,
            )

        # Readers see either the old mapping or the new one, never a mix
        store.config = config
        store.load_args()

        store.emit('reload')
        store.refresh_subs()

        self._check_frequency(store)

        duration_ms = (time.perf_counter() - start_time) * 1000
        self._record(ReloadResult.SUCCESS, duration_ms, stamp)
        return ReloadResult.SUCCESS

    def _check_frequency(self, store: "ConfigStore") -> None:
        watcher = store.watcher
        freq = store.config.get(CHECK_FREQ_KEY)
        if watcher is None or not watcher.running:
            return
        if isinstance(freq, bool) or not isinstance(freq, int) or freq <= 0:
            return
        if freq != watcher.state.frequency_ms:
            logger.info(
                "check_frequency_changed",
                config_file=store.config_file,
                old_frequency_ms=watcher.state.frequency_ms,
                new_frequency_ms=freq,
            )
            watcher.restart(freq)

    def _fail(self, result: ReloadResult, message: str, start_time: float, stamp: int) -> ReloadResult:
        self.store.emit('error', message)
        duration_ms = (time.perf_counter() - start_time) * 1000
        self._record(result, duration_ms, stamp, message)
        return result

    def _record(
        self,
        result: ReloadResult,
        duration_ms: float,
        stamp: int,
        error_message: str | None = None,
    ) -> None:
        now = time.time()
        self._stats['total_reloads'] += 1
        if result == ReloadResult.SUCCESS:
            self._stats['successful_reloads'] += 1
        else:
            self._stats['failed_reloads'] += 1
        self._stats['last_reload_time'] = now
        self._stats['last_reload_result'] = result

        self._history.append(ReloadEvent(
            timestamp=now,
            result=result,
            config_file=self.store.config_file,
            duration_ms=duration_ms,
            error_message=error_message,
            stamp=stamp,
        ))
        self.event_logger.log_reload(self.store.config_file, result.value, duration_ms, stamp=stamp)

    @property
    def in_progress(self) -> bool:
        return self._lock.locked()

    def get_stats(self) -> dict[str, Any]:
        """Get reload statistics."""
        return self._stats.copy()

    def get_event_history(self, limit: int | None = None) -> list[ReloadEvent]:
        """Get reload history, most recent first."""
        history = list(self._history)
        if limit is not None:
            history = history[-limit:]
        return list(reversed(history))
