"""Process-wide cap on concurrent upstream calls."""

from __future__ import annotations

import asyncio
from collections import deque
from contextlib import suppress
from typing import TYPE_CHECKING, Self

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

__all__: list[str] = ["ConcurrencyLimiter"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class ConcurrencyLimiter:
    """FIFO semaphore that hands released permits directly to the longest waiter.

    Unlike asyncio.Semaphore, a released permit never returns to the pool while somebody is
    queued, so a caller arriving between release() and the waiter's wake-up cannot overtake it.
    Use it as ``async with limiter:`` so the permit is returned on every exit path.

    Args:
        max_concurrency (int): Number of permits.

    Raises:
        ValueError: If max_concurrency is smaller than 1.
    """

    def __init__(self, max_concurrency: int) -> None:
        if max_concurrency < 1:
            msg: str = f"max_concurrency must be at least 1: {max_concurrency}"
            raise ValueError(msg)
        self.max_concurrency: int = max_concurrency
        self._available: int = max_concurrency
        self._waiters: deque[asyncio.Future[None]] = deque()

    @property
    def available(self) -> int:
        """Number of free permits."""
        return self._available

    @property
    def waiting(self) -> int:
        """Number of callers queued in acquire()."""
        return sum(1 for fut in self._waiters if not fut.done())

    @property
    def in_use(self) -> int:
        return self.max_concurrency - self._available

    async def acquire(self) -> None:
        """Take a permit, suspending until one is handed over if none is free."""
        if self._available > 0 and not self.waiting:
            self._available -= 1
            return

        fut: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(fut)
        logger.debug("Waiting for a permit (%d queued)", len(self._waiters))
        try:
            await fut
        except asyncio.CancelledError:
            if fut.done() and not fut.cancelled():
                # the permit was handed over just before the cancellation landed
                self.release()
            else:
                self._remove_waiter(fut)
            raise

    def release(self) -> None:
        """Return a permit, handing it to the longest waiter when there is one.

        Raises:
            RuntimeError: If more permits are released than were acquired.
        """
        while self._waiters:
            fut: asyncio.Future[None] = self._waiters.popleft()
            if not fut.done():
                fut.set_result(None)
                return

        if self._available >= self.max_concurrency:
            msg = "ConcurrencyLimiter released more times than acquired"
            raise RuntimeError(msg)
        self._available += 1

    def _remove_waiter(self, fut: asyncio.Future[None]) -> None:
        with suppress(ValueError):
            self._waiters.remove(fut)

    async def __aenter__(self) -> Self:
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        _ = exc_type, exc_val, exc_tb
        self.release()
