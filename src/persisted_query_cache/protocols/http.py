"""Request/response contracts between the pipeline and a host framework.

Any web framework can drive the pipeline by adapting its own request and
response objects to these protocols. The ASGI adapter in
``persisted_query_cache.handlers`` is one such implementation.
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol

from persisted_query_cache.entities import GraphQLRequest

NextHandler = Callable[[], Awaitable[None]]


class InboundRequest(Protocol):
    """Inbound HTTP request as seen by the pipeline.

    Attributes:
        method: HTTP method, e.g. "GET"
        path: Request path without query string
        body: Parsed request body (POST); parsing happens before the pipeline
        query_params: Parsed query-string mapping (GET)
        graphql_request: Normalized request, assigned by the pipeline
    """

    method: str
    path: str
    body: Any
    query_params: Mapping[str, Any] | None
    graphql_request: GraphQLRequest | None

    def inject_query(self, query: str) -> None:
        """Make ``query`` the query text the execution layer will see."""
        ...


class OutboundResponse(Protocol):
    """Outbound HTTP response as seen by the pipeline.

    Attributes:
        body: Response body; parsed JSON for JSON results
        content_type: Response media type, with any parameters
        status_code: HTTP status set by the execution layer
    """

    body: Any
    content_type: str | None
    status_code: int
