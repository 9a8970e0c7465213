from __future__ import annotations

import asyncio

import pytest

from printstation.async_runner import run_async
from printstation.exceptions import AsyncExecutionError


async def _identity(value: int) -> int:
    await asyncio.sleep(0)
    return value


def test_run_async_from_sync_context() -> None:
    assert run_async(_identity(7)) == 7


def test_run_async_with_running_loop() -> None:
    async def _nested() -> int:
        await asyncio.sleep(0)
        return run_async(_identity(11))

    assert asyncio.run(_nested()) == 11


def test_run_async_applies_timeout() -> None:
    with pytest.raises(TimeoutError):
        run_async(asyncio.sleep(1), timeout=0.01)


def test_run_async_wraps_errors_inside_running_loop() -> None:
    async def _boom() -> None:
        raise ValueError("boom")

    async def _nested() -> None:
        run_async(_boom())

    with pytest.raises(AsyncExecutionError, match="boom"):
        asyncio.run(_nested())
