"""Service layer for business logic.

This layer contains the request normalization and the persisted query
pipeline. Services depend on protocols (interfaces), not concrete
implementations, making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Cache / Executor)

Usage:
    ```python
    from persisted_query_cache.services import PersistedQueryCache

    pipeline = PersistedQueryCache.create({"map": {"abc123": "{ hello }"}})
    ```
"""

from .persisted_query_service import PersistedQueryCache, is_cacheable_content_type, is_cacheable_response
from .request_normalizer import normalize_request

__all__ = [
    "PersistedQueryCache",
    "is_cacheable_content_type",
    "is_cacheable_response",
    "normalize_request",
]
