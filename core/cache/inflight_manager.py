from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging


__all__: list[str] = ["InFlightManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class InFlightManager:
    """Coalesces identical translation requests that are in flight at the same time.

    The first caller for a key becomes the producer: mark_inflight_start() returns None and the
    caller must later settle the key with store_inflight_result(), store_inflight_exception() or
    discard(). Later callers for the same key wait for the producer's outcome instead of issuing
    their own upstream call. If the producer is cancelled, one waiter takes over as the new producer.
    """

    def __init__(self) -> None:
        self._inflight: dict[str, asyncio.Future[str]] = {}

    def __len__(self) -> int:
        return len(self._inflight)

    async def mark_inflight_start(self, cache_key: str) -> str | None:
        """Register as producer for a key, or wait for the current producer.

        Args:
            cache_key (str): Cache key of the translation request.

        Returns:
            str | None: The translation produced by another caller, or None if the caller
            has just been registered as the producer.

        Raises:
            Exception: Whatever the producer stored with store_inflight_exception().
        """
        while True:
            fut: asyncio.Future[str] | None = self._inflight.get(cache_key)
            if fut is None:
                self._inflight[cache_key] = asyncio.get_running_loop().create_future()
                logger.debug("Marked in-flight start for key: %s", cache_key[:32])
                return None

            logger.debug("In-flight translation detected for key: %s", cache_key[:32])
            try:
                # shield: a cancelled waiter must not cancel the producer's future
                result: str = await asyncio.shield(fut)
            except asyncio.CancelledError:
                task: asyncio.Task | None = asyncio.current_task()
                if (task is not None and task.cancelling()) or not fut.cancelled():
                    raise
                logger.debug("In-flight producer cancelled for key: %s, taking over", cache_key[:32])
                continue
            logger.debug("Received in-flight translation result for key: %s", cache_key[:32])
            return result

    def store_inflight_result(self, cache_key: str, result: str) -> None:
        """Hand the producer's result to every waiter and release the key."""
        fut: asyncio.Future[str] | None = self._inflight.pop(cache_key, None)
        if fut is not None and not fut.done():
            fut.set_result(result)
        else:
            logger.warning("No in-flight future found for key: %s when storing result", cache_key[:32])

    def store_inflight_exception(self, cache_key: str, exc: BaseException) -> None:
        """Hand the producer's failure to every waiter and release the key."""
        fut: asyncio.Future[str] | None = self._inflight.pop(cache_key, None)
        if fut is not None and not fut.done():
            fut.set_exception(exc)
            # mark as retrieved so a key without waiters does not log "exception was never retrieved"
            fut.exception()
        else:
            logger.warning("No in-flight future found for key: %s when storing exception", cache_key[:32])

    def discard(self, cache_key: str) -> None:
        """Release a key whose producer was cancelled; waiters retry as producers."""
        fut: asyncio.Future[str] | None = self._inflight.pop(cache_key, None)
        if fut is not None and not fut.done():
            fut.cancel()

    def teardown(self) -> None:
        """Cancel every pending future and clear the registry."""
        for fut in self._inflight.values():
            if not fut.done():
                fut.cancel()
        self._inflight.clear()
        logger.info("InFlightManager torn down and in-flight state cleared")
