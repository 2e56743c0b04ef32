"""Extraction of a GraphQLRequest from an inbound HTTP request.

Body parsing is a precondition: POST requests arrive with ``body`` already
decoded, GET requests with ``query_params`` already parsed.
"""

import json
from collections.abc import Mapping
from typing import Any

from persisted_query_cache.entities import GraphQLRequest
from persisted_query_cache.errors import HttpQueryError
from persisted_query_cache.protocols import InboundRequest

ALLOW_HEADER = {"Allow": "GET, POST"}


def normalize_request(request: InboundRequest) -> GraphQLRequest:
    """Build a GraphQLRequest from the request payload.

    Args:
        request: The inbound request

    Returns:
        The normalized request

    Raises:
        HttpQueryError: On a missing payload (500 for POST, 400 for GET), an
            unsupported method (405 with an Allow header) or malformed fields
    """
    method = request.method.upper()

    if method == "POST":
        payload = request.body
        if not payload:
            # A missing body means nothing parsed it upstream of us.
            raise HttpQueryError(500, "POST body missing")
        if not isinstance(payload, Mapping):
            raise HttpQueryError(400, "POST body must be a JSON object")
    elif method == "GET":
        payload = request.query_params
        if not payload:
            raise HttpQueryError(400, "GET query missing")
    else:
        raise HttpQueryError(405, "only GET/POST supported", headers=dict(ALLOW_HEADER))

    query = payload.get("query")
    if query is not None and not isinstance(query, str):
        if isinstance(query, Mapping) and query.get("kind") == "Document":
            raise HttpQueryError(
                400,
                "GraphQL queries must be strings. It looks like you sent a parsed "
                "Document AST; print it to a string before sending the request.",
            )
        raise HttpQueryError(400, "GraphQL queries must be strings.")

    persist_hash = payload.get("id")

    return GraphQLRequest(
        query=query,
        operation_name=payload.get("operationName"),
        variables=_parse_json_field(payload.get("variables"), "Variables are invalid JSON"),
        extensions=_parse_json_field(payload.get("extensions"), "Extensions are invalid JSON"),
        persist_hash=None if persist_hash is None else str(persist_hash),
    )


def _parse_json_field(value: Any, error_message: str) -> Any:
    """Decode a field that may arrive JSON-encoded (always the case for GET)."""
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except (json.JSONDecodeError, RecursionError) as e:
        raise HttpQueryError(400, error_message) from e
