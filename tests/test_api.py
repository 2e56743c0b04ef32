"""
Tests for the persisted query cache API.
"""

import json

import httpx
import pytest
from fakes import FakeGraphQLExecutor
from fastapi.testclient import TestClient

from persisted_query_cache.api.app import create_app
from persisted_query_cache.handlers.asgi_middleware import CACHE_STATUS_HEADER
from persisted_query_cache.repositories import LRUCacheRepository, UpstreamGraphQLExecutor

QUERY_MAP = {"abc123": "{ hello }", "greet": "query Greet($name: String) { greet(name: $name) }"}


@pytest.fixture
def executor():
    """Create a fake GraphQL executor."""
    return FakeGraphQLExecutor()


@pytest.fixture
def cache():
    """Create a fresh response cache."""
    return LRUCacheRepository(max_entries=10, ttl=60)


@pytest.fixture
def client(executor, cache):
    """Create a test client."""
    return TestClient(create_app(query_map=QUERY_MAP, executor=executor, cache=cache))


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Persisted Query Cache"
    assert data["endpoints"]["graphql"] == "/graphql"


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "cache_healthy": True, "executor_healthy": True}


def test_post_miss_then_hit(client, executor):
    """Test a repeated persisted POST is served from cache."""
    first = client.post("/graphql", json={"id": "abc123"})
    assert first.status_code == 200
    assert first.json() == {"data": {"hello": "world"}}
    assert first.headers[CACHE_STATUS_HEADER] == "miss"
    assert [r.query for r in executor.requests] == ["{ hello }"]

    second = client.post("/graphql", json={"id": "abc123"})
    assert second.status_code == 200
    assert second.json() == {"data": {"hello": "world"}}
    assert second.headers[CACHE_STATUS_HEADER] == "hit"
    assert len(executor.requests) == 1


def test_variables_are_forwarded_and_keyed(client, executor):
    """Test variables reach the executor and separate cache entries."""
    client.post("/graphql", json={"id": "greet", "variables": {"name": "a"}})
    client.post("/graphql", json={"id": "greet", "variables": {"name": "b"}})
    repeat = client.post("/graphql", json={"id": "greet", "variables": {"name": "a"}})

    assert [r.variables for r in executor.requests] == [{"name": "a"}, {"name": "b"}]
    assert executor.requests[0].operation_name is None
    assert repeat.headers[CACHE_STATUS_HEADER] == "hit"


def test_get_persisted_query(client, executor):
    """Test persisted GET requests are resolved and cached."""
    params = {"id": "greet", "variables": json.dumps({"name": "a"})}

    first = client.get("/graphql", params=params)
    second = client.get("/graphql", params=params)

    assert first.status_code == 200
    assert first.headers[CACHE_STATUS_HEADER] == "miss"
    assert second.headers[CACHE_STATUS_HEADER] == "hit"
    assert executor.requests[0].query == QUERY_MAP["greet"]
    assert executor.requests[0].variables == {"name": "a"}


def test_plain_query_is_not_cached(client, executor):
    """Test ordinary queries execute every time."""
    for _ in range(2):
        response = client.post("/graphql", json={"query": "{ hello }"})
        assert response.status_code == 200
        assert response.headers[CACHE_STATUS_HEADER] == "uncached"

    assert len(executor.requests) == 2


def test_application_graphql_body(client, executor):
    """Test raw GraphQL bodies are accepted."""
    response = client.post("/graphql", content="{ hello }", headers={"content-type": "application/graphql"})

    assert response.status_code == 200
    assert executor.requests[0].query == "{ hello }"


def test_put_is_405_with_allow(client):
    """Test unsupported methods are rejected by the middleware."""
    response = client.put("/graphql", json={"id": "abc123"})
    assert response.status_code == 405
    assert response.headers["allow"] == "GET, POST"


def test_empty_post_is_500(client):
    """Test a POST without a body."""
    response = client.post("/graphql")
    assert response.status_code == 500
    assert response.text == "POST body missing"


def test_empty_get_is_400(client):
    """Test a GET without parameters."""
    response = client.get("/graphql")
    assert response.status_code == 400
    assert response.text == "GET query missing"


def test_invalid_json_body_is_400(client):
    """Test an unparseable POST body."""
    response = client.post("/graphql", content="{oops", headers={"content-type": "application/json"})
    assert response.status_code == 400


def test_deeply_nested_body_is_400(client):
    """Test a body nested past the decoder's recursion limit."""
    body = "[" * 100_000 + "]" * 100_000
    response = client.post("/graphql", content=body, headers={"content-type": "application/json"})
    assert response.status_code == 400
    assert response.text == "POST body is not valid JSON"


def test_malformed_extensions(client):
    """Test invalid extensions JSON."""
    response = client.post("/graphql", json={"id": "abc123", "extensions": "{not json"})
    assert response.status_code == 400
    assert "Extensions are invalid JSON" in response.text


def test_unknown_persisted_query(client, executor):
    """Test unknown ids get a GraphQL error body."""
    response = client.post("/graphql", json={"id": "missing"})
    assert response.status_code == 400
    assert response.json() == {"errors": [{"message": "PersistedQueryNotFound"}]}
    assert executor.requests == []


def test_missing_query_reaches_handler(client):
    """Test a request with neither id nor query."""
    response = client.post("/graphql", json={"operationName": "Q"})
    assert response.status_code == 400
    assert response.text == "Must provide query string."


def test_cache_stats_and_clear(client):
    """Test stats reflect traffic and clearing resets them."""
    client.post("/graphql", json={"id": "abc123"})
    client.post("/graphql", json={"id": "abc123"})

    stats = client.get("/cache/stats").json()
    assert stats["total_entries"] == 1
    assert stats["persisted_queries"] == 2
    assert stats["cache_hits"] == 1
    assert stats["cache_misses"] == 1
    assert stats["hit_rate"] == 0.5

    cleared = client.delete("/cache").json()
    assert cleared["deleted_count"] == 1
    assert client.get("/cache/stats").json()["total_entries"] == 0


def test_lifespan_closes_executor(executor, cache):
    """Test the executor is released on shutdown."""
    with TestClient(create_app(query_map=QUERY_MAP, executor=executor, cache=cache)) as client:
        assert client.get("/health").status_code == 200

    assert executor.closed


def test_upstream_errors_are_not_cached(cache):
    """Test an upstream outage keeps its status and is never served as a hit."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503, json={"errors": [{"message": "Service Unavailable"}]})

    executor = UpstreamGraphQLExecutor(url="http://upstream.test/graphql", transport=httpx.MockTransport(handler))
    client = TestClient(create_app(query_map=QUERY_MAP, executor=executor, cache=cache))

    first = client.post("/graphql", json={"id": "abc123"})
    second = client.post("/graphql", json={"id": "abc123"})

    for response in (first, second):
        assert response.status_code == 503
        assert response.json() == {"errors": [{"message": "Service Unavailable"}]}
        assert response.headers[CACHE_STATUS_HEADER] == "miss"
    assert len(calls) == 2
    assert cache.count() == 0
