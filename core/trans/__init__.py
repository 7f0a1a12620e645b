"""Translation engines, call execution and orchestration.

This package provides the translation manager, the upstream call executor with its concurrency
limiter and identity rotator, and the pluggable upstream engines.
"""

from core.trans import engines  # noqa: F401  # registers the engines
from core.trans.chunker import TextChunker
from core.trans.executor import UpstreamCallExecutor
from core.trans.identity import IdentityRotator
from core.trans.interface import (
    EmptyInputError,
    LanguageDetectionError,
    MalformedResponseError,
    NonRetryableTransportError,
    RetryableTransportError,
    TransInterface,
    TranslateExceptionError,
    TranslationFailedError,
    TranslationRateLimitError,
    TransportError,
)
from core.trans.limiter import ConcurrencyLimiter
from core.trans.live import LiveTranslation
from core.trans.manager import TransManager

__all__: list[str] = [
    "ConcurrencyLimiter",
    "EmptyInputError",
    "IdentityRotator",
    "LanguageDetectionError",
    "LiveTranslation",
    "MalformedResponseError",
    "NonRetryableTransportError",
    "RetryableTransportError",
    "TextChunker",
    "TransInterface",
    "TransManager",
    "TranslateExceptionError",
    "TranslationFailedError",
    "TranslationRateLimitError",
    "TransportError",
    "UpstreamCallExecutor",
]
