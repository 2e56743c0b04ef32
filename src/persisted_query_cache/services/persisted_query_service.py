"""Persisted query resolution and response caching.

This service sits in front of a GraphQL execution layer. For every request
on its route it normalizes the payload, derives a fingerprint from the
persisted query id and variables, and either serves the cached response or
resolves the id to its query text, lets the execution layer run, and caches
a successful JSON result together with its media type.

Concurrent misses on the same fingerprint are not coalesced: each executes
and writes its own result, and the last write wins.
"""

from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from persisted_query_cache.dto import PersistCacheConfig
from persisted_query_cache.entities import CachedResponse, PersistedQueryMap, freeze_query_map
from persisted_query_cache.errors import ConfigurationError, HttpQueryError
from persisted_query_cache.fingerprint import fingerprint
from persisted_query_cache.models import CacheOutcome, PipelineMetrics
from persisted_query_cache.protocols import CacheStore, InboundRequest, NextHandler, OutboundResponse
from persisted_query_cache.repositories import LRUCacheRepository
from persisted_query_cache.services.request_normalizer import normalize_request

logger = structlog.get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"
CACHEABLE_CONTENT_TYPES = frozenset({JSON_CONTENT_TYPE, "application/graphql-response+json"})


class PersistedQueryCache:
    """Middleware-shaped persisted query pipeline.

    Depends on the CacheStore PROTOCOL, so tests and hosts can supply their
    own cache. Each pipeline owns its cache; nothing is shared globally.

    Example:
        ```python
        from persisted_query_cache.services import PersistedQueryCache

        pipeline = PersistedQueryCache.create(
            {"path": "/graphql", "map": {"abc123": "{ hello }"}},
        )

        # Inside a host framework's middleware
        await pipeline(request, response, call_next)
        ```
    """

    def __init__(
        self,
        config: PersistCacheConfig | Mapping[str, Any],
        cache: CacheStore | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: ``{"path": ..., "map": ..., "sort_variable_keys": ...}``
                or a PersistCacheConfig.
            cache: Response cache. Defaults to an LRUCacheRepository built
                from settings.

        Raises:
            ConfigurationError: If config is not a well-formed object
        """
        try:
            self._config = PersistCacheConfig.model_validate(config)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid persisted query cache config: {e}") from e

        self._query_map: PersistedQueryMap = freeze_query_map(self._config.query_map)
        self._cache: CacheStore = cache if cache is not None else LRUCacheRepository.create()
        self._metrics = PipelineMetrics()

    @classmethod
    def create(
        cls,
        config: PersistCacheConfig | Mapping[str, Any],
        cache: CacheStore | None = None,
    ) -> "PersistedQueryCache":
        """Factory method to create PersistedQueryCache with a default cache.

        Args:
            config: Pipeline configuration.
            cache: Response cache. If None, an LRUCacheRepository from settings.

        Returns:
            Configured PersistedQueryCache
        """
        return cls(config=config, cache=cache)

    def handles(self, path: str) -> bool:
        """Whether requests on path go through the pipeline."""
        return path == self._config.path

    async def __call__(
        self,
        request: InboundRequest,
        response: OutboundResponse,
        call_next: NextHandler,
    ) -> CacheOutcome:
        """Run one request through the pipeline.

        Args:
            request: The inbound request
            response: The outbound response, populated by call_next on a miss
            call_next: The execution layer

        Returns:
            The cache outcome for the request

        Raises:
            HttpQueryError: If the request cannot be normalized, its variables
                cannot be fingerprinted, or its persisted id is unknown
        """
        if not self.handles(request.path):
            await call_next()
            self._metrics.record(CacheOutcome.BYPASS)
            return CacheOutcome.BYPASS

        graphql_request = normalize_request(request)
        request.graphql_request = graphql_request

        if not graphql_request.is_persisted:
            await call_next()
            self._metrics.record(CacheOutcome.UNCACHED)
            return CacheOutcome.UNCACHED

        persist_hash = graphql_request.persist_hash
        key = fingerprint(
            persist_hash,
            graphql_request.variables,
            sort_keys=self._config.sort_variable_keys,
        )

        cached = self._read(key)
        if cached is not None:
            logger.debug("persisted_query.cache_hit", persist_hash=persist_hash, fingerprint=key)
            response.body = cached.body
            response.content_type = cached.content_type
            self._metrics.record(CacheOutcome.HIT)
            return CacheOutcome.HIT

        query = self._query_map.get(persist_hash)
        if query is None:
            raise HttpQueryError(400, "PersistedQueryNotFound", is_graphql_error=True)

        request.inject_query(query)
        request.graphql_request = graphql_request.resolved(query)

        logger.debug("persisted_query.cache_miss", persist_hash=persist_hash, fingerprint=key)
        await call_next()

        if is_cacheable_response(response):
            self._write(key, CachedResponse(body=response.body, content_type=response.content_type))

        self._metrics.record(CacheOutcome.MISS)
        return CacheOutcome.MISS

    def _read(self, key: str) -> CachedResponse | None:
        try:
            return self._cache.get(key)
        except Exception as e:
            # Serving uncached is always correct.
            logger.warning("persisted_query.cache_read_failed", fingerprint=key, error=str(e))
            self._metrics.record_cache_error()
            return None

    def _write(self, key: str, entry: CachedResponse) -> None:
        try:
            self._cache.set(key, entry)
        except Exception as e:
            logger.warning("persisted_query.cache_write_failed", fingerprint=key, error=str(e))
            self._metrics.record_cache_error()

    @property
    def path(self) -> str:
        """Get the intercepted route."""
        return self._config.path

    @property
    def query_map(self) -> PersistedQueryMap:
        """Get the read-only persisted query map."""
        return self._query_map

    @property
    def cache(self) -> CacheStore:
        """Get the underlying cache (for testing and stats)."""
        return self._cache

    @property
    def metrics(self) -> PipelineMetrics:
        """Get the outcome counters."""
        return self._metrics


def is_cacheable_content_type(content_type: str | None) -> bool:
    """Check whether a response content type holds a JSON GraphQL result.

    Parameters such as ``charset`` are ignored.
    """
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type in CACHEABLE_CONTENT_TYPES


def is_cacheable_response(response: OutboundResponse) -> bool:
    """Check whether an execution-layer response may be cached.

    Only successful (2xx) JSON GraphQL results are stored, so upstream
    outages and rejected requests are never replayed as hits.
    """
    return 200 <= response.status_code < 300 and is_cacheable_content_type(response.content_type)
