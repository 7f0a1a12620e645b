"""Translation cache manager.

Keeps translation results in memory, keyed by (source language, target language, normalized text).
The cache is bounded: inserting a new key at capacity evicts exactly one entry. Entries may expire
after a configurable time-to-live.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from models.cache_models import CacheEntry, CacheStatistics
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable

    from models.config_models import Config

__all__: list[str] = ["TranslationCacheManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class TranslationCacheManager:
    """Bounded in-memory store for translation results.

    Eviction picks the entry with the oldest timestamp when a TTL is configured, and the oldest
    insertion otherwise. Both reads and writes fail soft: a missing or expired key reads as None and
    a write always succeeds. All methods are synchronous and must only be called from the event loop
    thread.

    Args:
        max_size (int): Maximum number of entries.
        ttl_sec (float): Entry lifetime in seconds. 0 or less disables expiry.
        clock (Callable[[], float]): Time source in epoch seconds.

    Raises:
        ValueError: If max_size is smaller than 1.
    """

    def __init__(self, max_size: int, ttl_sec: float = 0.0, *, clock: Callable[[], float] = time.time) -> None:
        if max_size < 1:
            msg: str = f"max_size must be at least 1: {max_size}"
            raise ValueError(msg)
        self.max_size: int = max_size
        self.ttl_ms: int = int(ttl_sec * 1000) if ttl_sec > 0 else 0
        self._clock: Callable[[], float] = clock
        self._entries: dict[str, CacheEntry] = {}
        self._stats = CacheStatistics(max_size=max_size)
        logger.debug("TranslationCacheManager created (max_size=%d, ttl_ms=%d)", self.max_size, self.ttl_ms)

    @classmethod
    def from_config(cls, config: Config) -> TranslationCacheManager:
        return cls(config.CACHE.MAX_SIZE, config.CACHE.TTL)

    @property
    def has_ttl(self) -> bool:
        return self.ttl_ms > 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._peek(key) is not None

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _is_expired(self, entry: CacheEntry, now_ms: int) -> bool:
        return self.has_ttl and now_ms - entry.timestamp > self.ttl_ms

    def _peek(self, key: str) -> CacheEntry | None:
        entry: CacheEntry | None = self._entries.get(key)
        if entry is None:
            return None
        if self._is_expired(entry, self._now_ms()):
            del self._entries[key]
            self._stats.expirations += 1
            return None
        return entry

    def get(self, key: str) -> str | None:
        """Look up a cached translation.

        Args:
            key (str): Cache key built by StringUtils.generate_cache_key().

        Returns:
            str | None: The cached value, or None if absent or expired. Expired entries are removed.
        """
        entry: CacheEntry | None = self._peek(key)
        if entry is None:
            self._stats.misses += 1
            return None
        self._stats.hits += 1
        return entry.value

    def set(self, key: str, value: str) -> None:
        """Store a translation, evicting one entry first if the cache is full.

        Replacing an existing key refreshes its timestamp and never evicts.

        Args:
            key (str): Cache key built by StringUtils.generate_cache_key().
            value (str): Translated text.
        """
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self.max_size:
            if self.has_ttl:
                self.cleanup_expired()
            if len(self._entries) >= self.max_size:
                self._evict_one()

        self._entries[key] = CacheEntry(value=value, timestamp=self._now_ms())

    def _evict_one(self) -> None:
        if not self._entries:
            return
        if self.has_ttl:
            oldest_key: str = min(self._entries, key=lambda k: self._entries[k].timestamp)
        else:
            oldest_key = next(iter(self._entries))
        del self._entries[oldest_key]
        self._stats.evictions += 1
        logger.debug("Evicted cache entry: %s", oldest_key[:32])

    def cleanup_expired(self) -> int:
        """Remove every expired entry.

        Returns:
            int: Number of entries removed. Always 0 when no TTL is configured.
        """
        if not self.has_ttl:
            return 0
        now_ms: int = self._now_ms()
        expired: list[str] = [key for key, entry in self._entries.items() if self._is_expired(entry, now_ms)]
        for key in expired:
            del self._entries[key]
        self._stats.expirations += len(expired)
        if expired:
            logger.debug("Deleted %d expired translation cache entries", len(expired))
        return len(expired)

    def clear(self) -> None:
        """Remove every entry; statistics counters are kept."""
        self._entries.clear()
        logger.info("Translation cache cleared")

    def get_statistics(self) -> CacheStatistics:
        """Return a snapshot of the cache counters."""
        return CacheStatistics(
            total_entries=len(self._entries),
            max_size=self.max_size,
            hits=self._stats.hits,
            misses=self._stats.misses,
            evictions=self._stats.evictions,
            expirations=self._stats.expirations,
        )
