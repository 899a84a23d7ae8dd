#!/usr/bin/env python3
"""LRU cache with TTL support for tagblacklist.

Used to memoize content items fetched from an item provider:
- LRU eviction policy
- TTL-based expiration
- Entry count limit
- Thread-safe operations
- Cache statistics

Example:
    >>> cache = LRUCache(CacheConfig(max_entries=128, ttl_seconds=60))
    >>> cache.set(1234, item)
    >>> cache.get(1234) is item
    True
"""

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Optional

from tagblacklist.core.constants import DEFAULT_CACHE_MAX_ENTRIES, DEFAULT_CACHE_TTL_SECONDS

_MISSING = object()


@dataclass
class CacheEntry:
    """Single cache entry with metadata."""

    value: Any
    timestamp: float = field(default_factory=time.monotonic)
    access_count: int = 0

    def is_expired(self, ttl: float) -> bool:
        return time.monotonic() - self.timestamp > ttl


@dataclass
class CacheConfig:
    """Configuration for an LRU cache."""

    max_entries: int = DEFAULT_CACHE_MAX_ENTRIES
    ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS
    enabled: bool = True

    def validate(self) -> None:
        """Validate cache configuration."""
        if self.max_entries <= 0:
            raise ValueError(f"max_entries must be positive: {self.max_entries}")
        if self.ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive: {self.ttl_seconds}")


class LRUCache:
    """Thread-safe LRU cache with TTL and entry limits."""

    def __init__(self, config: Optional[CacheConfig] = None):
        """Initialize LRU cache.

        Args:
            config: Cache configuration (defaults if omitted)
        """
        self.config = config or CacheConfig()
        self.config.validate()
        self._cache: "OrderedDict[Hashable, CacheEntry]" = OrderedDict()
        self._lock = threading.RLock()

        # Statistics
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Get value from cache.

        Args:
            key: Cache key
            default: Returned when the key is missing or expired

        Returns:
            Cached value or default
        """
        with self._lock:
            entry = self._cache.get(key) if self.config.enabled else None
            if entry is None:
                self._misses += 1
                return default

            if entry.is_expired(self.config.ttl_seconds):
                del self._cache[key]
                self._expirations += 1
                self._misses += 1
                return default

            self._cache.move_to_end(key)
            entry.access_count += 1
            self._hits += 1
            return entry.value

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def set(self, key: Hashable, value: Any) -> None:
        """Set value in cache, evicting the least recently used entries."""
        if not self.config.enabled:
            return

        with self._lock:
            self._cache.pop(key, None)
            while len(self._cache) >= self.config.max_entries:
                self._cache.popitem(last=False)
                self._evictions += 1
            self._cache[key] = CacheEntry(value=value)

    def invalidate(self, key: Hashable) -> bool:
        """Remove entry from cache.

        Returns:
            True if entry was removed
        """
        with self._lock:
            return self._cache.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            total_requests = self._hits + self._misses
            return {
                "entries": len(self._cache),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / total_requests if total_requests > 0 else 0,
                "evictions": self._evictions,
                "expirations": self._expirations,
            }
