"""
Tests for the upstream GraphQL executor.
"""

import json

import httpx
import pytest

from persisted_query_cache.entities import GraphQLRequest
from persisted_query_cache.errors import HttpQueryError
from persisted_query_cache.protocols import GraphQLExecutor
from persisted_query_cache.repositories import UpstreamGraphQLExecutor

UPSTREAM_URL = "http://upstream.test/graphql"


def make_executor(handler):
    """Create an executor backed by a mock transport."""
    return UpstreamGraphQLExecutor(url=UPSTREAM_URL, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_forwards_payload():
    """Test the request is posted as GraphQL-over-HTTP JSON."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"data": {"hello": "world"}})

    executor = make_executor(handler)
    result = await executor.execute(
        GraphQLRequest(query="{ hello }", variables={"x": 1}, persist_hash="abc123")
    )
    await executor.close()

    assert result == {"data": {"hello": "world"}}
    assert seen == [{"query": "{ hello }", "variables": {"x": 1}}]


@pytest.mark.asyncio
async def test_graphql_errors_on_success_are_returned():
    """Test GraphQL errors in a 200 reply pass through as results."""
    executor = make_executor(lambda request: httpx.Response(200, json={"data": None, "errors": [{"message": "bad"}]}))

    assert await executor.execute(GraphQLRequest(query="{ x }")) == {"data": None, "errors": [{"message": "bad"}]}


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [400, 500, 503])
async def test_error_status_keeps_upstream_status(status_code):
    """Test non-2xx replies raise with the upstream status and first error message."""
    executor = make_executor(
        lambda request: httpx.Response(status_code, json={"errors": [{"message": "Service Unavailable"}]})
    )

    with pytest.raises(HttpQueryError) as exc_info:
        await executor.execute(GraphQLRequest(query="{ hello }"))

    assert exc_info.value.status_code == status_code
    assert exc_info.value.message == "Service Unavailable"
    assert exc_info.value.is_graphql_error


@pytest.mark.asyncio
async def test_error_status_without_errors_gets_generic_message():
    """Test a non-2xx JSON reply with no errors list still keeps its status."""
    executor = make_executor(lambda request: httpx.Response(502, json={"detail": "bad gateway"}))

    with pytest.raises(HttpQueryError) as exc_info:
        await executor.execute(GraphQLRequest(query="{ hello }"))

    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "Upstream GraphQL server returned status 502"


@pytest.mark.asyncio
async def test_transport_error_is_502():
    """Test connection failures become a 502."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    executor = make_executor(handler)

    with pytest.raises(HttpQueryError) as exc_info:
        await executor.execute(GraphQLRequest(query="{ hello }"))

    assert exc_info.value.status_code == 502
    assert not await executor.is_available()


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [b"<html>oops</html>", b"[1, 2]"])
async def test_non_object_replies_are_502(content):
    """Test non-JSON and non-object replies become a 502."""
    executor = make_executor(lambda request: httpx.Response(200, content=content))

    with pytest.raises(HttpQueryError) as exc_info:
        await executor.execute(GraphQLRequest(query="{ hello }"))

    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_is_available():
    """Test availability check against a healthy upstream."""
    executor = make_executor(lambda request: httpx.Response(200, json={"data": {"__typename": "Query"}}))

    assert isinstance(executor, GraphQLExecutor)
    assert await executor.is_available()
