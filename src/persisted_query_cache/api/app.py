from collections.abc import Mapping
from typing import Any

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from persisted_query_cache.api.dependencies import CacheHandlerDep, GraphQLHandlerDep, lifespan
from persisted_query_cache.config import Settings, settings
from persisted_query_cache.dto import CacheStatsResponse, ClearCacheResponse, HealthCheckResponse
from persisted_query_cache.entities import load_query_map
from persisted_query_cache.errors import HttpQueryError
from persisted_query_cache.handlers import (
    CacheHandler,
    GraphQLHandler,
    PersistedQueryMiddleware,
    http_query_error_handler,
)
from persisted_query_cache.protocols import GraphQLExecutor
from persisted_query_cache.repositories import LRUCacheRepository, UpstreamGraphQLExecutor
from persisted_query_cache.services import PersistedQueryCache

router = APIRouter()


@router.get("/")
async def root(request: Request) -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "Persisted Query Cache",
        "version": "0.1.0",
        "description": "Persisted GraphQL query resolution with response caching",
        "endpoints": {
            "graphql": request.app.state.pipeline.path,
            "stats": "/cache/stats",
            "health": "/health",
            "docs": "/docs",
        },
    }


@router.get("/health", response_model=HealthCheckResponse)
async def health(handler: CacheHandlerDep) -> HealthCheckResponse:
    """Health check endpoint."""
    return await handler.health_check()


@router.get("/cache/stats", response_model=CacheStatsResponse)
async def cache_stats(handler: CacheHandlerDep) -> CacheStatsResponse:
    """Get cache statistics."""
    return await handler.get_stats()


@router.delete("/cache", response_model=ClearCacheResponse)
async def clear_cache(handler: CacheHandlerDep) -> ClearCacheResponse:
    """Clear all cached responses."""
    return await handler.clear_cache()


async def graphql(request: Request, handler: GraphQLHandlerDep) -> JSONResponse:
    """Execute a GraphQL request (persisted ids are resolved by middleware)."""
    return await handler.execute(request)


def create_app(
    app_settings: Settings | None = None,
    query_map: Mapping[str, str] | None = None,
    executor: GraphQLExecutor | None = None,
    cache: LRUCacheRepository | None = None,
) -> FastAPI:
    """Build the application with all layers wired together.

    Args:
        app_settings: Settings. Defaults to the environment-derived settings.
        query_map: Persisted queries. Defaults to PERSISTED_QUERIES_FILE, or empty.
        executor: GraphQL backend. Defaults to the upstream HTTP executor.
        cache: Response cache. Defaults to an LRU cache sized from settings.

    Returns:
        The configured FastAPI application

    Raises:
        ConfigurationError: If the query map or pipeline config is invalid
    """
    app_settings = app_settings or settings

    if query_map is None:
        if app_settings.persisted_queries_file:
            query_map = load_query_map(app_settings.persisted_queries_file)
        else:
            query_map = {}

    if cache is None:
        cache = LRUCacheRepository(max_entries=app_settings.cache_max_entries, ttl=app_settings.cache_ttl)
    if executor is None:
        executor = UpstreamGraphQLExecutor.create(
            url=app_settings.upstream_graphql_url,
            timeout=app_settings.upstream_timeout,
        )
    pipeline = PersistedQueryCache.create(
        {
            "path": app_settings.graphql_path,
            "map": query_map,
            "sort_variable_keys": app_settings.cache_sort_variable_keys,
        },
        cache=cache,
    )

    app = FastAPI(
        title="Persisted Query Cache API",
        description="Persisted GraphQL query resolution with response caching",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store in app.state (FastAPI pattern)
    app.state.settings = app_settings
    app.state.pipeline = pipeline
    app.state.executor = executor
    app.state.graphql_handler = GraphQLHandler(executor=executor)
    app.state.cache_handler = CacheHandler(pipeline=pipeline, cache=cache, executor=executor)

    app.add_middleware(PersistedQueryMiddleware, pipeline=pipeline)
    app.add_exception_handler(HttpQueryError, http_query_error_handler)
    app.add_api_route(app_settings.graphql_path, graphql, methods=["GET", "POST"])
    app.include_router(router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "persisted_query_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
