"""Debounced translation of text that is still being edited."""

from __future__ import annotations

import asyncio
import contextlib
import inspect
from typing import TYPE_CHECKING, Final

from core.trans.interface import TranslationFailedError
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Awaitable, Callable

    from core.trans.manager import TransManager

__all__: list[str] = ["DEFAULT_DEBOUNCE_SEC", "DEFAULT_ERROR_TEXT", "LiveTranslation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

DEFAULT_DEBOUNCE_SEC: Final[float] = 0.3
DEFAULT_ERROR_TEXT: Final[str] = "<< translation error >>"

type ResultCallback = Callable[[list[str]], Awaitable[None] | None]


class LiveTranslation:
    """Translate the latest submitted text after a quiet period.

    Each submit() supersedes the previous one: a request that is still waiting out the debounce
    delay, or already talking to the upstream, is cancelled and delivers nothing. A request that
    completes delivers the translated text split into lines to ``on_result``. A failed translation
    delivers ``[error_text]`` instead.

    Args:
        manager (TransManager): Translation manager used for the requests.
        on_result (ResultCallback | None): Receives the lines of each completed request; may be a coroutine function.
        delay_sec (float): Debounce delay in seconds.
        error_text (str): Line delivered when the translation fails.
        sleep (Callable[[float], Awaitable[object]]): Sleep function, replaceable in tests.
    """

    def __init__(
        self,
        manager: TransManager,
        on_result: ResultCallback | None = None,
        *,
        delay_sec: float = DEFAULT_DEBOUNCE_SEC,
        error_text: str = DEFAULT_ERROR_TEXT,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self.manager: TransManager = manager
        self.on_result: ResultCallback | None = on_result
        self.delay_sec: float = delay_sec
        self.error_text: str = error_text
        self._sleep: Callable[[float], Awaitable[object]] = sleep
        self._task: asyncio.Task[list[str]] | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def submit(self, text: str, tgt_lang: str, src_lang: str) -> asyncio.Task[list[str]]:
        """Schedule a translation of text, cancelling the previous request.

        Returns:
            asyncio.Task[list[str]]: Task resolving to the delivered lines.
        """
        if self.pending and self._task is not None:
            logger.debug("Superseding pending live translation")
            self._task.cancel()
        self._task = asyncio.create_task(self._run(text, tgt_lang, src_lang), name="live_translation_task")
        return self._task

    async def wait(self) -> list[str] | None:
        """Wait for the current request.

        Returns:
            list[str] | None: The delivered lines, or None if there is no request or it was cancelled.
        """
        task: asyncio.Task[list[str]] | None = self._task
        if task is None:
            return None
        await asyncio.wait({task})
        if task.cancelled():
            return None
        return task.result()

    async def cancel(self) -> None:
        """Abort the current request without delivering anything."""
        task: asyncio.Task[list[str]] | None = self._task
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.debug("Live translation cancelled")

    async def _run(self, text: str, tgt_lang: str, src_lang: str) -> list[str]:
        lines: list[str]
        normalized: str = StringUtils.normalize_text(text)
        if not normalized:
            lines = []
        else:
            await self._sleep(self.delay_sec)
            try:
                translated: str = await self.manager.translate(tgt_lang, src_lang, normalized)
            except TranslationFailedError as err:
                logger.error("Live translation failed: %s", err)
                lines = [self.error_text]
            else:
                lines = translated.split("\n")

        await self._deliver(lines)
        return lines

    async def _deliver(self, lines: list[str]) -> None:
        if self.on_result is None:
            return
        outcome: Awaitable[None] | None = self.on_result(lines)
        if inspect.isawaitable(outcome):
            await outcome
