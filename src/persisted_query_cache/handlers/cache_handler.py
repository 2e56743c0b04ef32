"""HTTP handlers for cache administration.

Handlers convert between service state and DTOs, and handle HTTP concerns
like status codes and error responses.
"""

from fastapi import HTTPException, status

from persisted_query_cache.dto import CacheStatsResponse, ClearCacheResponse, HealthCheckResponse
from persisted_query_cache.protocols import GraphQLExecutor
from persisted_query_cache.repositories import LRUCacheRepository
from persisted_query_cache.services import PersistedQueryCache


class CacheHandler:
    """HTTP handlers for cache inspection and maintenance.

    Example:
        ```python
        handler = CacheHandler(pipeline=pipeline, cache=cache, executor=executor)

        @app.get("/cache/stats", response_model=CacheStatsResponse)
        async def stats():
            return await handler.get_stats()
        ```
    """

    def __init__(
        self,
        pipeline: PersistedQueryCache,
        cache: LRUCacheRepository,
        executor: GraphQLExecutor,
    ) -> None:
        """Initialize the cache handler.

        Args:
            pipeline: The persisted query pipeline (required).
            cache: The pipeline's response cache (required).
            executor: The GraphQL executor, checked by health checks (required).
        """
        self._pipeline = pipeline
        self._cache = cache
        self._executor = executor

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /cache/stats requests.

        Returns:
            CacheStatsResponse with cache and pipeline statistics

        Raises:
            HTTPException: If an error occurs while fetching stats
        """
        try:
            stats = self._cache.get_stats()
            metrics = self._pipeline.metrics

            return CacheStatsResponse(
                path=self._pipeline.path,
                persisted_queries=len(self._pipeline.query_map),
                total_entries=stats["total_entries"],
                max_entries=stats["max_entries"],
                ttl_seconds=stats["ttl"],
                cache_hits=metrics.cache_hits,
                cache_misses=metrics.cache_misses,
                hit_rate=metrics.hit_rate,
            )

        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to get stats: {e}",
            ) from e

    async def clear_cache(self) -> ClearCacheResponse:
        """Handle DELETE /cache requests.

        Returns:
            ClearCacheResponse with the number of removed entries
        """
        try:
            count = self._cache.clear()
            self._pipeline.metrics.reset()

            return ClearCacheResponse(
                success=True,
                deleted_count=count,
                message="Cache cleared successfully",
            )

        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to clear cache: {e}",
            ) from e

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests.

        Returns:
            HealthCheckResponse with cache and executor status
        """
        cache_healthy = self._cache.health_check()
        executor_healthy = await self._executor.is_available()

        return HealthCheckResponse(
            status="healthy" if cache_healthy and executor_healthy else "unhealthy",
            cache_healthy=cache_healthy,
            executor_healthy=executor_healthy,
        )
