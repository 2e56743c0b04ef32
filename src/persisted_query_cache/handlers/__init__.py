"""Handler layer for HTTP endpoints.

This layer adapts HTTP requests to the services: the ASGI middleware that
drives the persisted query pipeline, the GraphQL execution endpoint, and
the cache administration endpoints.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Cache / Executor)
"""

from .asgi_middleware import AsgiInboundRequest, BufferedResponse, PersistedQueryMiddleware
from .cache_handler import CacheHandler
from .errors import http_query_error_handler, http_query_error_response
from .graphql_handler import GraphQLHandler

__all__ = [
    "AsgiInboundRequest",
    "BufferedResponse",
    "CacheHandler",
    "GraphQLHandler",
    "PersistedQueryMiddleware",
    "http_query_error_handler",
    "http_query_error_response",
]
