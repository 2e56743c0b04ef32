"""Persisted Query Cache - persisted GraphQL query resolution with response caching.

Clients send a short persisted query id (plus variables) instead of the full
query text. The pipeline resolves the id to its stored query, lets a GraphQL
execution layer run it, and caches the JSON result under a fingerprint of
the id and variables.

Layers:
    - protocols: Interface contracts (CacheStore, GraphQLExecutor, InboundRequest, ...)
    - repositories: LRU response cache and upstream GraphQL executor
    - services: Request normalization and the persisted query pipeline
    - handlers: ASGI middleware and HTTP endpoint handlers
    - dto: Pipeline configuration and API response contracts
    - entities: Domain models (internal)

Usage:
    ```python
    from persisted_query_cache.repositories import LRUCacheRepository
    from persisted_query_cache.services import PersistedQueryCache

    pipeline = PersistedQueryCache.create(
        {"path": "/graphql", "map": {"abc123": "{ hello }"}},
        cache=LRUCacheRepository(max_entries=100, ttl=3600),
    )
    ```

For HTTP API:
    ```python
    from persisted_query_cache.api.app import app, create_app
    ```
"""

from persisted_query_cache.config import settings
from persisted_query_cache.dto import PersistCacheConfig
from persisted_query_cache.entities import CachedResponse, GraphQLRequest, PersistedQueryMap, load_query_map
from persisted_query_cache.errors import ConfigurationError, HttpQueryError, SerializationError
from persisted_query_cache.fingerprint import fingerprint
from persisted_query_cache.handlers import CacheHandler, GraphQLHandler, PersistedQueryMiddleware
from persisted_query_cache.models import CacheOutcome, PipelineMetrics
from persisted_query_cache.protocols import CacheStore, GraphQLExecutor, InboundRequest, OutboundResponse
from persisted_query_cache.repositories import LRUCacheRepository, UpstreamGraphQLExecutor
from persisted_query_cache.services import PersistedQueryCache, normalize_request

__all__ = [
    # Configuration
    "settings",
    "PersistCacheConfig",
    # Errors
    "ConfigurationError",
    "HttpQueryError",
    "SerializationError",
    # Protocols (interfaces)
    "CacheStore",
    "GraphQLExecutor",
    "InboundRequest",
    "OutboundResponse",
    # Core
    "fingerprint",
    "normalize_request",
    "PersistedQueryCache",
    "CacheOutcome",
    "PipelineMetrics",
    # Repositories
    "LRUCacheRepository",
    "UpstreamGraphQLExecutor",
    # Handlers (HTTP)
    "CacheHandler",
    "GraphQLHandler",
    "PersistedQueryMiddleware",
    # Entities (domain models)
    "CachedResponse",
    "GraphQLRequest",
    "PersistedQueryMap",
    "load_query_map",
]
