"""
Unit tests for the liveconfig listener registry.
"""

import asyncio
import inspect
from unittest.mock import MagicMock

import pytest

from liveconfig.core.events import EventEmitter


class TestEventEmitter:
    """Test listener registration and delivery."""

    def test_emit_passes_arguments(self):
        emitter = EventEmitter()
        listener = MagicMock()
        emitter.on("error", listener)

        assert emitter.emit("error", "boom") == 1
        listener.assert_called_once_with("boom")

    def test_emit_without_listeners(self):
        emitter = EventEmitter()
        assert emitter.emit("reload") == 0
        assert emitter.emit("error", "unheard") == 0

    def test_listeners_are_keyed_by_event(self):
        emitter = EventEmitter()
        on_reload, on_error = MagicMock(), MagicMock()
        emitter.on("reload", on_reload)
        emitter.on("error", on_error)

        emitter.emit("reload")
        on_reload.assert_called_once_with()
        on_error.assert_not_called()

    def test_off(self):
        emitter = EventEmitter()
        listener = MagicMock()
        emitter.on("reload", listener)

        assert emitter.off("reload", listener) is True
        assert emitter.off("reload", listener) is False
        emitter.emit("reload")
        listener.assert_not_called()

    def test_once(self):
        emitter = EventEmitter()
        listener = MagicMock()
        emitter.once("reload", listener)

        emitter.emit("reload")
        emitter.emit("reload")
        listener.assert_called_once_with()
        assert emitter.listener_count("reload") == 0

    def test_failing_listener_does_not_block_others(self):
        emitter = EventEmitter(owner="test")
        calls = []

        def broken():
            raise RuntimeError("listener bug")

        emitter.on("reload", broken)
        emitter.on("reload", lambda: calls.append("second"))

        assert emitter.emit("reload") == 2
        assert calls == ["second"]

    def test_listener_must_be_callable(self):
        with pytest.raises(TypeError):
            EventEmitter().on("reload", "not callable")

    @pytest.mark.asyncio
    async def test_async_listener_is_scheduled(self):
        emitter = EventEmitter()
        seen = asyncio.Event()

        async def on_reload():
            seen.set()

        emitter.on("reload", on_reload)
        emitter.emit("reload")

        await asyncio.wait_for(seen.wait(), timeout=1.0)

    @pytest.mark.asyncio
    async def test_failing_async_listener_is_contained(self):
        emitter = EventEmitter()

        async def broken():
            raise RuntimeError("async listener bug")

        emitter.on("reload", broken)
        emitter.emit("reload")
        await asyncio.sleep(0.01)

        assert emitter._pending == set()

    def test_async_listener_without_loop_is_closed(self):
        emitter = EventEmitter()
        ran = []
        coroutines = []

        async def on_reload():
            ran.append(True)

        def listener():
            coroutines.append(on_reload())
            return coroutines[0]

        emitter.on("reload", listener)
        assert emitter.emit("reload") == 1

        assert ran == []
        assert inspect.getcoroutinestate(coroutines[0]) == inspect.CORO_CLOSED
        assert emitter._pending == set()
