"""Upstream call execution with retries.

One logical call may take several attempts. Every attempt holds a limiter permit only while the
HTTP request is running, so the backoff sleep between attempts does not occupy a permit and each
retry queues for a permit again.
"""

from __future__ import annotations

import asyncio
import random
from typing import TYPE_CHECKING, Any

from core.trans.interface import (
    MalformedResponseError,
    NonRetryableTransportError,
    RetryableTransportError,
    TranslationRateLimitError,
    TransportError,
)
from handlers.async_comm import AsyncCommError, AsyncCommInvalidContentTypeError, AsyncCommTimeoutError
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Awaitable, Callable

    from core.trans.identity import IdentityRotator
    from core.trans.interface import TransInterface
    from core.trans.limiter import ConcurrencyLimiter
    from handlers.async_comm import AsyncHttp
    from models.config_models import Config
    from models.translation_models import TranslationPayload, UpstreamRequest

__all__: list[str] = ["UpstreamCallExecutor"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

HTTP_TOO_MANY_REQUESTS: int = 429
HTTP_SERVER_ERROR: int = 500


class UpstreamCallExecutor:
    """Performs upstream calls with a per-attempt timeout and exponential backoff.

    Timeouts, connection failures, HTTP 429 and HTTP 5xx are retried up to ``max_retries`` times;
    the delay after failed attempt ``k`` is ``base_delay * 2**k`` plus a uniform jitter in
    ``[0, jitter)``. Any other HTTP status fails immediately. Cancellation is never retried.

    Args:
        http (AsyncHttp): Transport.
        limiter (ConcurrencyLimiter): Process-wide concurrency cap, held for each attempt.
        rotator (IdentityRotator | None): Identity source; None omits the identity headers.
        timeout (float): Time budget of one attempt in seconds.
        max_retries (int): Retries after the first attempt.
        base_delay (float): Backoff base in seconds.
        jitter (float): Upper bound of the random jitter in seconds.
        sleep (Callable[[float], Awaitable[Any]]): Sleep function, replaceable in tests.
        uniform (Callable[[float, float], float]): Random source for the jitter, replaceable in tests.
    """

    def __init__(
        self,
        http: AsyncHttp,
        limiter: ConcurrencyLimiter,
        rotator: IdentityRotator | None = None,
        *,
        timeout: float = 8.0,
        max_retries: int = 5,
        base_delay: float = 0.5,
        jitter: float = 0.3,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        uniform: Callable[[float, float], float] = random.uniform,
    ) -> None:
        if max_retries < 0:
            msg: str = f"max_retries must not be negative: {max_retries}"
            raise ValueError(msg)
        self.http: AsyncHttp = http
        self.limiter: ConcurrencyLimiter = limiter
        self.rotator: IdentityRotator | None = rotator
        self.timeout: float = timeout
        self.max_retries: int = max_retries
        self.base_delay: float = base_delay
        self.jitter: float = jitter
        self._sleep: Callable[[float], Awaitable[Any]] = sleep
        self._uniform: Callable[[float, float], float] = uniform

    @classmethod
    def from_config(
        cls, config: Config, http: AsyncHttp, limiter: ConcurrencyLimiter, rotator: IdentityRotator | None
    ) -> UpstreamCallExecutor:
        return cls(
            http,
            limiter,
            rotator,
            timeout=config.TRANSLATION.TIMEOUT,
            max_retries=config.RETRY.MAX_RETRIES,
            base_delay=config.RETRY.BASE_DELAY,
            jitter=config.RETRY.JITTER,
        )

    def compute_delay(self, attempt: int) -> float:
        """Backoff before the attempt following failed attempt ``attempt`` (0-indexed)."""
        jitter: float = self._uniform(0.0, self.jitter) if self.jitter > 0 else 0.0
        return self.base_delay * (2**attempt) + jitter

    @staticmethod
    def classify_error(err: AsyncCommError) -> TransportError:
        """Map a transport failure onto the retryable / non-retryable taxonomy."""
        if isinstance(err, AsyncCommTimeoutError):
            return RetryableTransportError(f"request timed out: {err}")
        if err.status is None:
            return RetryableTransportError(f"connection failed: {err}")
        if err.status == HTTP_TOO_MANY_REQUESTS:
            return TranslationRateLimitError(f"rate limited: {err}", status=err.status)
        if err.status >= HTTP_SERVER_ERROR:
            return RetryableTransportError(f"server error: {err}", status=err.status)
        return NonRetryableTransportError(f"request rejected: {err}", status=err.status)

    async def call(self, engine: TransInterface, payload: TranslationPayload) -> Any:
        """Execute one logical upstream call.

        Args:
            engine (TransInterface): Engine that shapes the request.
            payload (TranslationPayload): Languages and text(s) to send.

        Returns:
            Any: The decoded response body of the first successful attempt.

        Raises:
            RetryableTransportError: When every attempt failed with a retryable error; ``attempts``
                holds the number of attempts made.
            NonRetryableTransportError: On the first non-retryable HTTP status.
            MalformedResponseError: When a successful response body cannot be decoded.
        """
        request: UpstreamRequest = engine.build_request(payload)
        last_error: RetryableTransportError | None = None

        for attempt in range(self.max_retries + 1):
            if attempt > 0:
                delay: float = self.compute_delay(attempt - 1)
                logger.debug("Backing off %.3f sec before attempt %d", delay, attempt)
                await self._sleep(delay)

            try:
                return await self._attempt(request)
            except AsyncCommInvalidContentTypeError as err:
                msg: str = f"undecodable response body: {err}"
                raise MalformedResponseError(msg) from err
            except AsyncCommError as err:
                error: TransportError = self.classify_error(err)
                if not isinstance(error, RetryableTransportError):
                    logger.error("Upstream call failed without retry: %s", error)
                    raise error from err
                error.__cause__ = err
                last_error = error
                logger.warning("Upstream attempt %d/%d failed: %s", attempt + 1, self.max_retries + 1, error)

        if last_error is None:
            msg = "no attempt was made"
            raise RuntimeError(msg)
        last_error.attempts = self.max_retries + 1
        logger.error("Upstream call failed after %d attempts: %s", last_error.attempts, last_error)
        raise last_error

    async def _attempt(self, request: UpstreamRequest) -> Any:
        async with self.limiter:
            headers: dict[str, str] | None = self.rotator.build_headers() if self.rotator is not None else None
            return await self.http.request(
                request.method,
                url=request.url,
                total_timeout=self.timeout,
                params=request.params,
                json=request.json,
                headers=headers,
            )
