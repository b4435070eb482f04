"""
Listener registry for config store events.

Each store owns one ``EventEmitter``. Listeners are plain callables keyed by
event name; a listener that returns an awaitable is scheduled on the running
loop, and is closed unrun when no loop is running. A failing listener is logged and never stops delivery to the others.
"""

import asyncio
import inspect
from collections.abc import Callable
from typing import Any

from liveconfig.utils.logging import get_logger

logger = get_logger(__name__)

Listener = Callable[..., Any]


class EventEmitter:
    """Per-instance observer registry."""

    def __init__(self, owner: str = ""):
        self.owner = owner
        self._listeners: dict[str, list[Listener]] = {}
        self._pending: set[asyncio.Task] = set()

    def on(self, event: str, listener: Listener) -> Listener:
        """Register ``listener`` for ``event``; returns it for decorator use."""
        if not callable(listener):
            raise TypeError("Listener must be callable")
        self._listeners.setdefault(event, []).append(listener)
        return listener

    def once(self, event: str, listener: Listener) -> Listener:
        """Register a listener that removes itself after its first call."""
        def wrapper(*args: Any) -> Any:
            self.off(event, wrapper)
            return listener(*args)

        wrapper.__name__ = getattr(listener, "__name__", "once")
        return self.on(event, wrapper)

    def off(self, event: str, listener: Listener) -> bool:
        """Remove a listener; returns False if it was not registered."""
        try:
            self._listeners.get(event, []).remove(listener)
            return True
        except ValueError:
            return False

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def emit(self, event: str, *args: Any) -> int:
        """Deliver ``event`` to its listeners; returns how many were called."""
        listeners = list(self._listeners.get(event, []))

        if event == "error":
            logger.error("config_error", owner=self.owner, error=args[0] if args else None)

        for listener in listeners:
            try:
                result = listener(*args)
                if inspect.isawaitable(result):
                    self._schedule(event, listener, result)
            except Exception as e:
                logger.error(
                    "listener_failed",
                    owner=self.owner,
                    event=event,
                    listener=getattr(listener, "__name__", repr(listener)),
                    error=str(e),
                    exc_info=True,
                )

        return len(listeners)

    def _schedule(self, event: str, listener: Listener, awaitable: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Awaitable listeners only run when emitted from inside the loop
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            logger.warning(
                "async_listener_skipped",
                owner=self.owner,
                event=event,
                listener=getattr(listener, "__name__", repr(listener)),
                reason="no running event loop",
            )
            return

        task = asyncio.ensure_future(awaitable, loop=loop)
        self._pending.add(task)
        task.add_done_callback(self._listener_done)

    def _listener_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("listener_failed", owner=self.owner, error=str(task.exception()))
