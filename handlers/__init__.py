"""Network handlers for the translation client.

This package contains the asynchronous HTTP client used to reach the upstream translation endpoint.
"""

from handlers.async_comm import (
    AsyncCommError,
    AsyncCommInvalidContentTypeError,
    AsyncCommTimeoutError,
    AsyncHttp,
)

__all__: list[str] = [
    "AsyncCommError",
    "AsyncCommInvalidContentTypeError",
    "AsyncCommTimeoutError",
    "AsyncHttp",
]
