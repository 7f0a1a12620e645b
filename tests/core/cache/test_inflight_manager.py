"""Tests for InFlightManager."""

from __future__ import annotations

import asyncio

import pytest

from core.cache.inflight_manager import InFlightManager
from core.trans.interface import NonRetryableTransportError


@pytest.fixture
def inflight_manager() -> InFlightManager:
    return InFlightManager()


@pytest.mark.asyncio
async def test_first_caller_becomes_producer(inflight_manager: InFlightManager) -> None:
    result: str | None = await inflight_manager.mark_inflight_start("key")

    assert result is None
    assert len(inflight_manager) == 1


@pytest.mark.asyncio
async def test_waiter_receives_stored_result(inflight_manager: InFlightManager) -> None:
    """A second caller for the same key waits for the producer's result."""
    key = "result-key"
    assert await inflight_manager.mark_inflight_start(key) is None

    waiter: asyncio.Task[str | None] = asyncio.create_task(inflight_manager.mark_inflight_start(key))
    await asyncio.sleep(0)
    assert waiter.done() is False

    inflight_manager.store_inflight_result(key, "Hello world")

    assert await waiter == "Hello world"
    assert len(inflight_manager) == 0


@pytest.mark.asyncio
async def test_store_inflight_exception_propagates_to_waiter(inflight_manager: InFlightManager) -> None:
    """Stored inflight exception should propagate to waiting callers."""
    key = "exception-key"
    assert await inflight_manager.mark_inflight_start(key) is None

    waiter: asyncio.Task[str | None] = asyncio.create_task(inflight_manager.mark_inflight_start(key))
    await asyncio.sleep(0)

    inflight_manager.store_inflight_exception(key, NonRetryableTransportError("rejected", status=403))

    with pytest.raises(NonRetryableTransportError, match="rejected"):
        await waiter
    assert len(inflight_manager) == 0


@pytest.mark.asyncio
async def test_exception_without_waiters_is_silent(inflight_manager: InFlightManager) -> None:
    key = "lonely-key"
    assert await inflight_manager.mark_inflight_start(key) is None

    inflight_manager.store_inflight_exception(key, NonRetryableTransportError("rejected", status=400))

    assert len(inflight_manager) == 0
    assert await inflight_manager.mark_inflight_start(key) is None


@pytest.mark.asyncio
async def test_waiter_takes_over_after_discard(inflight_manager: InFlightManager) -> None:
    """When the producer is cancelled and discards the key, a waiter becomes the new producer."""
    key = "discard-key"
    assert await inflight_manager.mark_inflight_start(key) is None

    waiter: asyncio.Task[str | None] = asyncio.create_task(inflight_manager.mark_inflight_start(key))
    await asyncio.sleep(0)

    inflight_manager.discard(key)

    assert await waiter is None
    assert len(inflight_manager) == 1


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_cancel_producer_future(inflight_manager: InFlightManager) -> None:
    key = "cancel-key"
    assert await inflight_manager.mark_inflight_start(key) is None
    shared_future: asyncio.Future[str] = inflight_manager._inflight[key]  # noqa: SLF001

    waiter: asyncio.Task[str | None] = asyncio.create_task(inflight_manager.mark_inflight_start(key))
    await asyncio.sleep(0)
    waiter.cancel()

    with pytest.raises(asyncio.CancelledError):
        await waiter
    assert shared_future.cancelled() is False


@pytest.mark.asyncio
async def test_store_result_for_unknown_key_logs_warning(
    inflight_manager: InFlightManager, caplog: pytest.LogCaptureFixture
) -> None:
    inflight_manager.store_inflight_result("unknown", "value")

    assert any("No in-flight future found" in rec.message for rec in caplog.records)


@pytest.mark.asyncio
async def test_teardown_cancels_pending_futures(inflight_manager: InFlightManager) -> None:
    assert await inflight_manager.mark_inflight_start("a") is None
    shared_future: asyncio.Future[str] = inflight_manager._inflight["a"]  # noqa: SLF001

    inflight_manager.teardown()

    assert shared_future.cancelled() is True
    assert len(inflight_manager) == 0
