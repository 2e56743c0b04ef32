"""Response cache protocol.

Defines the interface for any key-value store that can hold cached
GraphQL responses under their request fingerprint.

Implementations can include:
- In-process LRU with TTL (default)
- Any other single-process store with get/set/has semantics
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for response cache backends.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed.

    Example:
        ```python
        from persisted_query_cache.protocols import CacheStore

        cache: CacheStore = LRUCacheRepository(max_entries=100, ttl=3600)
        ```
    """

    def get(self, key: str) -> Any | None:
        """Return the cached value for key.

        Args:
            key: The request fingerprint

        Returns:
            The cached value, or None if absent or expired
        """
        ...

    def set(self, key: str, value: Any) -> bool:
        """Store a value under key, replacing any existing entry.

        Args:
            key: The request fingerprint
            value: The response body to cache

        Returns:
            True once stored
        """
        ...

    def has(self, key: str) -> bool:
        """Check whether a live entry exists for key.

        Args:
            key: The request fingerprint

        Returns:
            True if present and not expired
        """
        ...
