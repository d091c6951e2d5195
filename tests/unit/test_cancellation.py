"""Cancellation token semantics for cooperative long-running jobs."""

from __future__ import annotations

import asyncio
import time

import pytest

from bikegarage.errors import OperationCancelled
from bikegarage.orchestrator import CancellationToken


@pytest.mark.asyncio
async def test_sleep_completes_when_not_cancelled():
    token = CancellationToken()
    await token.sleep(0.01, "job")
    assert token.cancelled is False


@pytest.mark.asyncio
async def test_sleep_is_interrupted_by_cancel():
    token = CancellationToken()
    loop = asyncio.get_running_loop()
    loop.call_later(0.05, token.cancel)

    start = time.perf_counter()
    with pytest.raises(OperationCancelled) as exc_info:
        await token.sleep(5.0, "load_garage")

    assert time.perf_counter() - start < 1.0
    assert exc_info.value.job == "load_garage"


@pytest.mark.asyncio
async def test_cancel_is_broadcast_to_every_waiter():
    token = CancellationToken()
    waiters = [asyncio.create_task(token.sleep(5.0, f"job-{i}")) for i in range(3)]
    await asyncio.sleep(0)
    token.cancel()

    results = await asyncio.gather(*waiters, return_exceptions=True)

    assert all(isinstance(result, OperationCancelled) for result in results)


@pytest.mark.asyncio
async def test_sleep_after_cancel_raises_immediately():
    token = CancellationToken()
    token.cancel()
    token.cancel()  # one-shot: repeating is harmless
    with pytest.raises(OperationCancelled):
        await token.sleep(5.0, "late")
