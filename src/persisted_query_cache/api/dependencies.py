"""Dependency injection configuration for the FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services built by create_app and stored in app.state
    - Dependency functions retrieve from request.app.state
    - Lifespan configures logging and releases the executor on shutdown
"""

from contextlib import asynccontextmanager
from typing import Annotated

import structlog
from fastapi import Depends, FastAPI, Request

from persisted_query_cache.handlers import CacheHandler, GraphQLHandler
from persisted_query_cache.logging_config import configure_logging

logger = structlog.get_logger(__name__)


def get_graphql_handler(request: Request) -> GraphQLHandler:
    """Dependency injection for GraphQLHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The GraphQLHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "graphql_handler", None)
    if handler is None:
        raise RuntimeError("GraphQLHandler not initialized. Check create_app setup.")
    return handler


def get_cache_handler(request: Request) -> CacheHandler:
    """Dependency injection for CacheHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The CacheHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "cache_handler", None)
    if handler is None:
        raise RuntimeError("CacheHandler not initialized. Check create_app setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Args:
        app: The FastAPI application instance

    Yields:
        None

    Cleanup:
        Closes the GraphQL executor on shutdown
    """
    settings = app.state.settings
    configure_logging(settings.log_level)

    pipeline = app.state.pipeline
    logger.info(
        "persisted_query_cache.started",
        path=pipeline.path,
        persisted_queries=len(pipeline.query_map),
        max_entries=settings.cache_max_entries,
        ttl=settings.cache_ttl,
    )

    yield

    await app.state.executor.close()
    logger.info("persisted_query_cache.stopped")


# Type aliases for cleaner dependency injection
GraphQLHandlerDep = Annotated[GraphQLHandler, Depends(get_graphql_handler)]
CacheHandlerDep = Annotated[CacheHandler, Depends(get_cache_handler)]
