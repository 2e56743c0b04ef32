"""In-memory LRU implementation of CacheStore.

Backed by ``cachetools.TTLCache``: entries are evicted least-recently-used
first once ``max_entries`` is reached, and expire ``ttl`` seconds after they
were inserted (reads refresh recency, not age).
"""

import copy
import threading
import time
from collections.abc import Callable
from typing import Any

from cachetools import TTLCache

from persisted_query_cache.config import settings
from persisted_query_cache.errors import ConfigurationError


class LRUCacheRepository:
    """Bounded, thread-safe response cache.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Values are deep-copied on the way in and out so no caller can mutate
    what another request will be served.
    """

    def __init__(
        self,
        max_entries: int | None = None,
        ttl: float | None = None,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the LRU cache repository.

        Args:
            max_entries: Maximum number of entries. Defaults to settings.
            ttl: Time-to-live for entries in seconds. Defaults to settings.
            timer: Clock used for expiry, in seconds.

        Raises:
            ConfigurationError: If max_entries or ttl is not positive
        """
        self._max_entries = settings.cache_max_entries if max_entries is None else max_entries
        self._ttl = settings.cache_ttl if ttl is None else ttl

        if self._max_entries < 1:
            raise ConfigurationError(f"max_entries must be at least 1, got {self._max_entries}")
        if self._ttl <= 0:
            raise ConfigurationError(f"ttl must be positive, got {self._ttl}")

        self._cache: TTLCache[str, Any] = TTLCache(maxsize=self._max_entries, ttl=self._ttl, timer=timer)
        self._lock = threading.Lock()

    @classmethod
    def create(
        cls,
        max_entries: int | None = None,
        ttl: float | None = None,
    ) -> "LRUCacheRepository":
        """Factory method to create LRUCacheRepository with defaults.

        Args:
            max_entries: Capacity. If None, uses settings.
            ttl: Time-to-live in seconds. If None, uses settings.

        Returns:
            Configured LRUCacheRepository
        """
        return cls(max_entries=max_entries, ttl=ttl)

    def get(self, key: str) -> Any | None:
        with self._lock:
            value = self._cache.get(key)
        return copy.deepcopy(value)

    def set(self, key: str, value: Any) -> bool:
        value = copy.deepcopy(value)
        with self._lock:
            self._cache[key] = value
        return True

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._cache

    def delete(self, key: str) -> bool:
        """Delete a specific entry.

        Args:
            key: The fingerprint to delete

        Returns:
            True if an entry was removed, False otherwise
        """
        with self._lock:
            return self._cache.pop(key, None) is not None

    def clear(self) -> int:
        """Remove all entries.

        Returns:
            Number of entries removed
        """
        with self._lock:
            self._cache.expire()
            count = len(self._cache)
            self._cache.clear()
        return count

    def count(self) -> int:
        """Count live entries, purging expired ones first."""
        with self._lock:
            self._cache.expire()
            return len(self._cache)

    def health_check(self) -> bool:
        """In-memory storage is always reachable."""
        return True

    def get_stats(self) -> dict[str, Any]:
        """Get repository statistics.

        Returns:
            Dictionary with entry count, capacity and TTL
        """
        return {
            "total_entries": self.count(),
            "max_entries": self._max_entries,
            "ttl": self._ttl,
        }

    @property
    def max_entries(self) -> int:
        """Get the capacity bound."""
        return self._max_entries

    @property
    def ttl(self) -> float:
        """Get the entry time-to-live in seconds."""
        return self._ttl
