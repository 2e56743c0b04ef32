"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Swapping the cache backend or GraphQL executor
- Driving the pipeline from any web framework
- Unit testing with fake implementations
"""

from .cache_store import CacheStore
from .executor import GraphQLExecutor
from .http import InboundRequest, NextHandler, OutboundResponse

__all__ = [
    "CacheStore",
    "GraphQLExecutor",
    "InboundRequest",
    "NextHandler",
    "OutboundResponse",
]
