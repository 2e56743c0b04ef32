"""Response DTOs for API endpoints."""

from pydantic import BaseModel, Field


class GraphQLErrorItem(BaseModel):
    """Single entry of a GraphQL ``errors`` array."""

    message: str = Field(..., description="Human-readable error message")


class GraphQLErrorResponse(BaseModel):
    """GraphQL-shaped body used for request errors."""

    errors: list[GraphQLErrorItem] = Field(..., description="Errors that stopped the request")


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    path: str = Field(..., description="Route handled by the persisted query cache")
    persisted_queries: int = Field(..., description="Number of known persisted query ids", ge=0)
    total_entries: int = Field(..., description="Total number of cached responses", ge=0)
    max_entries: int = Field(..., description="Cache capacity", ge=1)
    ttl_seconds: float = Field(..., description="Time-to-live for cache entries in seconds", gt=0)
    cache_hits: int = Field(..., ge=0)
    cache_misses: int = Field(..., ge=0)
    hit_rate: float = Field(..., description="Hits over cache lookups", ge=0.0, le=1.0)


class ClearCacheResponse(BaseModel):
    """Response DTO for cache clear operation."""

    success: bool = Field(..., description="Whether the operation succeeded")
    deleted_count: int = Field(..., description="Number of entries removed", ge=0)
    message: str = Field(..., description="Human-readable status message")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    cache_healthy: bool = Field(..., description="Whether the response cache is usable")
    executor_healthy: bool | None = Field(
        None,
        description="Whether the GraphQL executor is reachable",
    )
