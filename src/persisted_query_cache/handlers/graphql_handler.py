"""HTTP handler for the GraphQL endpoint behind the persisted query cache."""

from fastapi import Request
from fastapi.responses import JSONResponse

from persisted_query_cache.errors import HttpQueryError
from persisted_query_cache.handlers.asgi_middleware import AsgiInboundRequest
from persisted_query_cache.protocols import GraphQLExecutor
from persisted_query_cache.services import normalize_request


class GraphQLHandler:
    """Execution layer for GraphQL requests.

    Runs after PersistedQueryMiddleware, so persisted ids have already been
    resolved into query text by the time a request gets here.

    Example:
        ```python
        handler = GraphQLHandler(executor=UpstreamGraphQLExecutor.create())

        @app.post("/graphql")
        async def graphql(request: Request):
            return await handler.execute(request)
        ```
    """

    def __init__(self, executor: GraphQLExecutor) -> None:
        """Initialize the GraphQL handler.

        Args:
            executor: The backend that runs queries (required).
        """
        self._executor = executor

    async def execute(self, request: Request) -> JSONResponse:
        """Handle GET/POST requests on the GraphQL route.

        Args:
            request: The incoming request

        Returns:
            The GraphQL result as JSON

        Raises:
            HttpQueryError: If the request is malformed or has no query text
        """
        inbound = AsgiInboundRequest(request.scope, await request.body())
        graphql_request = normalize_request(inbound)

        if graphql_request.query is None:
            raise HttpQueryError(400, "Must provide query string.")

        result = await self._executor.execute(graphql_request)
        return JSONResponse(result)
