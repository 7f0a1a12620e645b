"""Models for translation cache data.

Defines the in-memory cache entry and the counters reported by the cache manager.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__: list[str] = ["CacheEntry", "CacheStatistics"]


@dataclass
class CacheEntry:
    """Translation cache entry data.

    Attributes:
        value (str): Translated text.
        timestamp (int): Insertion time in epoch milliseconds, used for TTL expiry.
    """

    value: str
    timestamp: int


@dataclass
class CacheStatistics:
    """Cache usage statistics.

    Attributes:
        total_entries (int): Number of entries currently stored.
        max_size (int): Configured capacity.
        hits (int): Lookups answered from the cache.
        misses (int): Lookups that found nothing (including expired entries).
        evictions (int): Entries removed to make room for new ones.
        expirations (int): Entries dropped because their TTL elapsed.
    """

    total_entries: int = 0
    max_size: int = 0
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0
