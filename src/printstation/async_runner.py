"""Helpers to drive the async workflow from sync or async contexts."""

from __future__ import annotations

import asyncio
import threading
from queue import Queue
from typing import TYPE_CHECKING, Any, TypeVar

from printstation.exceptions import AsyncExecutionError

if TYPE_CHECKING:
    from collections.abc import Coroutine

T = TypeVar("T")


async def _bounded(coro: Coroutine[Any, Any, T], timeout: float | None) -> T:
    """Await a coroutine, optionally within a time limit.

    Args:
        coro: The coroutine to await.
        timeout: Seconds before giving up, or None to wait forever.

    Returns:
        The result of the coroutine.
    """
    if timeout is None:
        return await coro
    async with asyncio.timeout(timeout):
        return await coro


def _run_in_background_thread(coro: Coroutine[Any, Any, T], timeout: float | None) -> T:
    """Run a coroutine in a dedicated thread with its own event loop.

    Args:
        coro: The coroutine to run.
        timeout: Seconds before giving up, or None.

    Raises:
        AsyncExecutionError: If the coroutine raises an exception.

    Returns:
        The result of the coroutine.
    """
    output: Queue[T | BaseException] = Queue(maxsize=1)

    def _runner() -> None:
        try:
            output.put(asyncio.run(_bounded(coro, timeout)))
        except BaseException as exc:
            output.put(exc)

    thread = threading.Thread(target=_runner, daemon=True)
    thread.start()
    thread.join()

    result = output.get()
    if isinstance(result, BaseException):
        raise AsyncExecutionError(result=result) from result
    return result


def run_async(coro: Coroutine[Any, Any, T], *, timeout: float | None = None) -> T:
    """Run an async coroutine from both sync and async contexts.

    From a sync context the coroutine runs on a fresh event loop. From inside a running
    loop it runs in a dedicated thread with its own loop, so the caller's loop is not
    re-entered.

    Args:
        coro: The coroutine to run.
        timeout: Optional limit in seconds; `TimeoutError` is raised when exceeded.

    Returns:
        The result of the coroutine.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(_bounded(coro, timeout))

    return _run_in_background_thread(coro, timeout)
