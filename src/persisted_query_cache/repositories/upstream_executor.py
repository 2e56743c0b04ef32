"""HTTP forwarder implementation of GraphQLExecutor.

Sends resolved GraphQL requests to an upstream GraphQL-over-HTTP server and
returns its JSON result. This turns the app into a caching persisted-query
front for any existing GraphQL server.
"""

from typing import Any

import httpx
import structlog

from persisted_query_cache.config import settings
from persisted_query_cache.entities import GraphQLRequest
from persisted_query_cache.errors import HttpQueryError

logger = structlog.get_logger(__name__)


class UpstreamGraphQLExecutor:
    """Upstream HTTP implementation of the GraphQLExecutor protocol.

    This class satisfies the GraphQLExecutor protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        executor = UpstreamGraphQLExecutor.create(url="http://localhost:4000/graphql")
        result = await executor.execute(GraphQLRequest(query="{ hello }"))
        ```
    """

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the upstream executor.

        Args:
            url: Upstream GraphQL endpoint. Defaults to settings.upstream_graphql_url.
            timeout: Request timeout in seconds. Defaults to settings.upstream_timeout.
            transport: Optional httpx transport (used by tests).
        """
        self._url = url or settings.upstream_graphql_url
        self._timeout = timeout or settings.upstream_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @classmethod
    def create(cls, url: str | None = None, timeout: float | None = None) -> "UpstreamGraphQLExecutor":
        """Factory method to create UpstreamGraphQLExecutor with defaults.

        Args:
            url: Upstream endpoint. If None, uses settings.
            timeout: Timeout in seconds. If None, uses settings.

        Returns:
            Configured UpstreamGraphQLExecutor
        """
        return cls(url=url, timeout=timeout)

    @property
    def url(self) -> str:
        """Get the upstream endpoint URL."""
        return self._url

    async def execute(self, request: GraphQLRequest) -> dict[str, Any]:
        """Forward a request to the upstream server.

        Args:
            request: The normalized request with its query text resolved

        Returns:
            The upstream GraphQL result

        Raises:
            HttpQueryError: 502 if the upstream is unreachable or replies
                with something other than a JSON object. A non-2xx reply
                keeps its status and carries the first upstream error message.
        """
        try:
            response = await self.client.post(self._url, json=request.to_payload())
        except httpx.HTTPError as e:
            logger.warning("upstream.request_failed", url=self._url, error=str(e))
            raise HttpQueryError(502, f"Upstream GraphQL server error: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise HttpQueryError(
                502, f"Upstream GraphQL server returned invalid JSON (status {response.status_code})"
            ) from e

        if not isinstance(data, dict):
            raise HttpQueryError(502, "Upstream GraphQL server returned a non-object result")

        if not response.is_success:
            message = _first_error_message(data) or f"Upstream GraphQL server returned status {response.status_code}"
            logger.warning("upstream.error_status", url=self._url, status_code=response.status_code, message=message)
            raise HttpQueryError(response.status_code, message, is_graphql_error=True)

        return data

    async def is_available(self) -> bool:
        """Check if the upstream answers a trivial query.

        Returns:
            True if the upstream replied without a transport error
        """
        try:
            await self.execute(GraphQLRequest(query="{ __typename }"))
            return True
        except HttpQueryError:
            return False

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def _first_error_message(data: dict[str, Any]) -> str | None:
    errors = data.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        message = errors[0].get("message")
        if isinstance(message, str):
            return message
    return None
