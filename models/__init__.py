"""Data models for the translation client.

This package contains dataclass definitions for configuration, cache entries,
and upstream translation requests and responses.
"""

from __future__ import annotations

from models.cache_models import CacheEntry, CacheStatistics
from models.config_models import Config
from models.translation_models import (
    NestedArrayResponse,
    ParsedResponse,
    StructuredResponse,
    TranslationItem,
    TranslationPayload,
    UpstreamRequest,
)

__all__: list[str] = [
    "CacheEntry",
    "CacheStatistics",
    "Config",
    "NestedArrayResponse",
    "ParsedResponse",
    "StructuredResponse",
    "TranslationItem",
    "TranslationPayload",
    "UpstreamRequest",
]
