"""Domain entities for internal representation.

These are frozen dataclasses and read-only mappings used by the services.
They carry no HTTP or serialization concerns - use the dto package for
the external configuration and response contracts.
"""

from .cached_response import CachedResponse
from .graphql_request import GraphQLRequest
from .persisted_query_map import PersistedQueryMap, freeze_query_map, load_query_map

__all__ = ["CachedResponse", "GraphQLRequest", "PersistedQueryMap", "freeze_query_map", "load_query_map"]
