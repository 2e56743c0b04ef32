"""Data Transfer Objects for configuration and API contracts.

These Pydantic models define the external contracts: the pipeline
configuration and the JSON bodies the HTTP layer returns.

Internal domain logic should use entities from the entities package.
"""

from .config import PersistCacheConfig
from .responses import (
    CacheStatsResponse,
    ClearCacheResponse,
    GraphQLErrorItem,
    GraphQLErrorResponse,
    HealthCheckResponse,
)

__all__ = [
    "PersistCacheConfig",
    "GraphQLErrorItem",
    "GraphQLErrorResponse",
    "CacheStatsResponse",
    "ClearCacheResponse",
    "HealthCheckResponse",
]
