"""Repository layer for storage and external services.

This layer puts the response cache and the GraphQL execution backend
behind protocol-based interfaces, so services can be tested with fakes
and backends swapped without touching business logic.
"""

from persisted_query_cache.protocols import CacheStore, GraphQLExecutor

from .lru_cache_repository import LRUCacheRepository
from .upstream_executor import UpstreamGraphQLExecutor

__all__ = [
    "CacheStore",
    "GraphQLExecutor",
    "LRUCacheRepository",
    "UpstreamGraphQLExecutor",
]
