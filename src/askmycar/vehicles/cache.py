"""Bounded in-memory cache for vehicle lookups.

Entries expire after a fixed time-to-live and the least recently used
entry is evicted once the cache is full. The cache is created once at
application startup and handed to the services that use it.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

__all__ = ["CacheStats", "TTLCache"]

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass
class CacheStats:
    """Counters for cache operations.

    Attributes:
        hits: Lookups that returned a live entry
        misses: Lookups that found nothing or an expired entry
        evictions: Entries dropped to stay within max_entries
        expirations: Entries dropped because their TTL passed
    """

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total

    def to_dict(self) -> dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "expirations": self.expirations,
            "hit_rate": self.hit_rate,
        }


class TTLCache(Generic[V]):
    """LRU cache with per-entry time-to-live.

    Not thread-safe; meant for use from a single event loop.

    Example:
        cache: TTLCache[str] = TTLCache(max_entries=512, ttl_seconds=86400)
        cache.set("2019-toyota-camry", url)
        cache.get("2019-toyota-camry")
    """

    def __init__(
        self,
        max_entries: int = 512,
        ttl_seconds: float = 86400.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            max_entries: Capacity; must be positive
            ttl_seconds: Entry lifetime in seconds (0 = no expiry)
            clock: Monotonic time source
        """
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, tuple[V, float]] = OrderedDict()
        self.stats = CacheStats()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and not self._is_expired(entry[1])

    def _is_expired(self, created_at: float) -> bool:
        if self.ttl_seconds <= 0:
            return False
        return self._clock() - created_at > self.ttl_seconds

    def get(self, key: str) -> Optional[V]:
        """Return the cached value, or None on a miss.

        A hit marks the entry as most recently used.
        """
        entry = self._entries.get(key)
        if entry is None:
            self.stats.misses += 1
            return None

        value, created_at = entry
        if self._is_expired(created_at):
            del self._entries[key]
            self.stats.expirations += 1
            self.stats.misses += 1
            return None

        self._entries.move_to_end(key)
        self.stats.hits += 1
        return value

    def set(self, key: str, value: V) -> None:
        """Store a value, evicting the least recently used entry if full."""
        if key in self._entries:
            del self._entries[key]
        self._entries[key] = (value, self._clock())

        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            self.stats.evictions += 1
            logger.debug(f"Evicted cache entry {evicted}")

    def invalidate(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()
