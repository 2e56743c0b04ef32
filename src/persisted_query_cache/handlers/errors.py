"""Translation of HttpQueryError into HTTP responses."""

from fastapi import Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from persisted_query_cache.dto import GraphQLErrorItem, GraphQLErrorResponse
from persisted_query_cache.errors import HttpQueryError


def http_query_error_response(exc: HttpQueryError) -> Response:
    """Render an HttpQueryError with its status code and headers.

    GraphQL errors get a ``{"errors": [...]}`` JSON body; everything else is
    sent as plain text.
    """
    if exc.is_graphql_error:
        body = GraphQLErrorResponse(errors=[GraphQLErrorItem(message=exc.message)])
        return JSONResponse(status_code=exc.status_code, content=body.model_dump(), headers=exc.headers)

    return PlainTextResponse(exc.message, status_code=exc.status_code, headers=exc.headers)


async def http_query_error_handler(request: Request, exc: HttpQueryError) -> Response:
    """FastAPI exception handler for HttpQueryError."""
    return http_query_error_response(exc)
