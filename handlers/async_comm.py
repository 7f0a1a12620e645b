"""Asynchronous HTTP communication for the upstream translation endpoint.

This module provides the `AsyncHttp` class, a thin wrapper around an aiohttp session that performs
a single request with a total timeout, decodes the body according to its content type and maps
transport failures onto a small exception hierarchy carrying the HTTP status, if any.
Retrying is not done here; the caller decides what to do with each failure.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Final, Literal

import aiohttp
from aiohttp.client import ClientSession

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable

    from aiohttp.client import ClientResponse


__all__: list[str] = [
    "AsyncCommError",
    "AsyncCommInvalidContentTypeError",
    "AsyncCommTimeoutError",
    "AsyncHttp",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

HTTPMethod = Literal["GET", "POST"]

def _decode_json(raw: bytes) -> Any:
    return json.loads(raw.decode("utf-8"))


def _decode_text(raw: bytes) -> str:
    return raw.decode("utf-8")


DEFAULT_DECODERS: Final[dict[str, Callable[[bytes], Any]]] = {
    "application/json": _decode_json,
    "text/javascript": _decode_json,  # translate_a/single answers with this type
    "text/plain": _decode_text,
    "text/html": _decode_text,
}


def _client_timeout(total_timeout: float) -> aiohttp.ClientTimeout:
    """Per-attempt budget shared by connecting, sending and reading the answer."""
    if total_timeout <= 0:
        return aiohttp.ClientTimeout(total=None)
    return aiohttp.ClientTimeout(total=total_timeout)


class AsyncHttp:
    """Asynchronous HTTP client for the translation endpoint.

    The aiohttp session is created lazily on first use, inside the running event loop, and
    recreated if it was closed. Responses are decoded by content type through registered handlers.
    """

    def __init__(self) -> None:
        logger.info("%s initializing", self.__class__.__name__)
        self.__session: ClientSession | None = None
        self.content_handlers: dict[str, Callable[[bytes], Any]] = dict(DEFAULT_DECODERS)

    @property
    def session(self) -> ClientSession:
        """Get the current aiohttp session, creating it when missing or closed."""
        if self.__session is None or self.__session.closed:
            self.__session = ClientSession(raise_for_status=True)
            logger.debug("%s session initialized", self.__class__.__name__)
        return self.__session

    @property
    def is_open(self) -> bool:
        return self.__session is not None and not self.__session.closed

    async def close(self) -> None:
        """Close the aiohttp session if it is open."""
        if self.__session is not None and not self.__session.closed:
            await self.__session.close()
            logger.info("%s session closed", self.__class__.__name__)
        self.__session = None

    async def decode_response(self, resp: ClientResponse) -> Any:
        """Decode the response body according to its 'Content-Type' header.

        Returns:
            Any: The decoded body, or None for an empty body.

        Raises:
            AsyncCommInvalidContentTypeError: If no handler is registered for the content type
                or the handler cannot decode the body.
        """
        content_type: str = resp.headers.get("Content-Type", "").split(";")[0].strip()
        raw: bytes = await resp.read()
        if not raw:
            logger.debug("Received empty response")
            return None

        handler: Callable[[bytes], Any] | None = self.content_handlers.get(content_type)
        if handler is None:
            msg: str = f"Unknown Content-Type '{content_type}'"
            raise AsyncCommInvalidContentTypeError(msg, status=resp.status)
        try:
            return handler(raw)
        except (UnicodeDecodeError, ValueError) as err:
            msg = f"Failed to decode '{content_type}' body: {err}"
            raise AsyncCommInvalidContentTypeError(msg, status=resp.status) from err

    async def request(
        self,
        method: HTTPMethod,
        *,
        url: str,
        total_timeout: float,
        params: dict[str, str] | None = None,
        json: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Perform one HTTP request and return the decoded body.

        Args:
            method (HTTPMethod): "GET" or "POST".
            url (str): The URL to send the request to.
            total_timeout (float): Total time budget for the attempt in seconds; 0 or less disables it.
            params (dict[str, str] | None): Query string parameters.
            json (Any | None): JSON body for POST requests.
            headers (dict[str, str] | None): Extra request headers.

        Returns:
            Any: The decoded response body.

        Raises:
            AsyncCommTimeoutError: If the attempt exceeded its time budget.
            AsyncCommError: For connection failures (status None) and error statuses (status set).
        """
        logger.debug("[%s] url=%s timeout=%s params=%s", method, url, total_timeout, params)
        try:
            async with self.session.request(
                method=method,
                url=url,
                params=params,
                json=json,
                headers=headers,
                timeout=_client_timeout(total_timeout),
            ) as resp:
                return await self.decode_response(resp)

        except TimeoutError as err:
            logger.debug(err)
            msg = f"No response within {total_timeout} sec"
            raise AsyncCommTimeoutError(msg) from err
        except aiohttp.ClientResponseError as err:
            logger.debug(err)
            msg = f"Upstream answered {method} {url} with an error"
            raise AsyncCommError(msg, status=err.status) from err
        except (ConnectionResetError, aiohttp.ClientConnectionError) as err:
            logger.debug(err)
            msg = f"Connection to {url} failed"
            raise AsyncCommError(msg) from err
        except aiohttp.ClientError as err:
            # truncated or malformed bodies (ClientPayloadError and friends)
            logger.debug(err)
            msg = f"Transfer from {url} failed: {err.__class__.__name__}"
            raise AsyncCommError(msg) from err


class AsyncCommError(Exception):
    """Base class for asynchronous communication errors.

    Attributes:
        msg (str): Human readable description.
        status (int | None): HTTP status of the failed response, None when no response arrived.
    """

    def __init__(self, msg: str | BaseException, *, status: int | None = None) -> None:
        self.status: int | None = status
        self.msg: str = str(msg)
        if status is not None:
            self.msg = f"{self.msg}: status='{status}'"
        super().__init__(self.msg)


class AsyncCommTimeoutError(AsyncCommError):
    """Error raised when a request did not complete within its time budget."""


class AsyncCommInvalidContentTypeError(AsyncCommError):
    """Error raised when a successful response body cannot be decoded."""
