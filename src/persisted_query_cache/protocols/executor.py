"""GraphQL execution protocol.

Defines the interface for the layer that actually runs GraphQL queries.

Implementations can include:
- An HTTP forwarder to an upstream GraphQL server (default)
- An in-process schema executor
"""

from typing import Any, Protocol, runtime_checkable

from persisted_query_cache.entities import GraphQLRequest


@runtime_checkable
class GraphQLExecutor(Protocol):
    """Protocol for GraphQL execution backends."""

    async def execute(self, request: GraphQLRequest) -> dict[str, Any]:
        """Execute a GraphQL request.

        Args:
            request: The normalized request; ``query`` is always set

        Returns:
            The GraphQL result, e.g. ``{"data": {...}}``
        """
        ...

    async def is_available(self) -> bool:
        """Check if the executor can accept requests.

        Returns:
            True if available, False otherwise
        """
        ...

    async def close(self) -> None:
        """Release any held resources."""
        ...
