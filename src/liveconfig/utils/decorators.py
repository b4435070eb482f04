"""
liveconfig Utility Decorators

Decorators for timeout handling and latency measurement.
"""

import asyncio
import builtins
import time
from collections.abc import Callable
from functools import wraps
from typing import Any

from liveconfig.utils.exceptions import TimeoutError
from liveconfig.utils.logging import get_logger

logger = get_logger(__name__)


def timeout_async(timeout_seconds: float | Callable[[], float]) -> Callable:
    """Async timeout decorator.

    ``timeout_seconds`` may be a callable, evaluated on every call, so the
    limit can follow runtime settings.
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            limit = timeout_seconds() if callable(timeout_seconds) else timeout_seconds
            try:
                return await asyncio.wait_for(
                    func(*args, **kwargs),
                    timeout=limit
                )
            except builtins.TimeoutError as e:
                raise TimeoutError(
                    f"Function {func.__name__} timed out after {limit}s",
                    operation=func.__name__,
                    timeout_seconds=limit,
                ) from e

        return wrapper
    return decorator


def measure_latency(operation_name: str | None = None) -> Callable:
    """Decorator to measure and log function execution latency."""

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def async_wrapper(*args, **kwargs) -> Any:
            op_name = operation_name or func.__name__
            start_time = time.perf_counter()
            success = False

            try:
                result = await func(*args, **kwargs)
                success = True
                return result
            finally:
                latency_ms = (time.perf_counter() - start_time) * 1000
                logger.debug(
                    "latency_measurement",
                    operation=op_name,
                    latency_ms=round(latency_ms, 3),
                    success=success,
                )

        @wraps(func)
        def sync_wrapper(*args, **kwargs) -> Any:
            op_name = operation_name or func.__name__
            start_time = time.perf_counter()
            success = False

            try:
                result = func(*args, **kwargs)
                success = True
                return result
            finally:
                latency_ms = (time.perf_counter() - start_time) * 1000
                logger.debug(
                    "latency_measurement",
                    operation=op_name,
                    latency_ms=round(latency_ms, 3),
                    success=success,
                )

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        else:
            return sync_wrapper

    return decorator
