#!/usr/bin/env python3
"""
Demo script for the persisted query cache.

This script runs persisted GraphQL requests through the FastAPI app with an
in-process executor, showing cache misses, hits, and error handling.
"""

import asyncio
import json
import time
from typing import Any

from fastapi.testclient import TestClient

from persisted_query_cache.api.app import create_app
from persisted_query_cache.entities import GraphQLRequest
from persisted_query_cache.handlers.asgi_middleware import CACHE_STATUS_HEADER

QUERY_MAP = {
    "hello": "{ hello }",
    "greet": "query Greet($name: String!) { greet(name: $name) }",
}


class SlowEchoExecutor:
    """Executor that pretends each query takes a while to resolve."""

    def __init__(self, delay: float = 0.2) -> None:
        self._delay = delay

    async def execute(self, request: GraphQLRequest) -> dict[str, Any]:
        await asyncio.sleep(self._delay)
        name = (request.variables or {}).get("name", "world")
        return {"data": {"query": request.query, "greet": f"Hello, {name}!"}}

    async def is_available(self) -> bool:
        return True

    async def close(self) -> None:
        pass


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def send(client: TestClient, method: str, **kwargs: Any) -> None:
    """Send one request and print what came back."""
    start_time = time.time()
    response = client.request(method, "/graphql", **kwargs)
    elapsed_ms = (time.time() - start_time) * 1000

    cache_status = response.headers.get(CACHE_STATUS_HEADER, "-")
    print(f"{method:5} {response.status_code} cache={cache_status:8} {elapsed_ms:7.1f}ms  {response.text}")


def demo_cache_hits(client: TestClient) -> None:
    """Demonstrate misses followed by hits."""
    print_section("Persisted Queries")

    send(client, "POST", json={"id": "hello"})
    send(client, "POST", json={"id": "hello"})
    send(client, "GET", params={"id": "hello"})


def demo_variables(client: TestClient) -> None:
    """Demonstrate that variables are part of the cache key."""
    print_section("Variables")

    send(client, "POST", json={"id": "greet", "variables": {"name": "Ada"}})
    send(client, "POST", json={"id": "greet", "variables": {"name": "Grace"}})
    send(client, "GET", params={"id": "greet", "variables": json.dumps({"name": "Ada"})})


def demo_errors(client: TestClient) -> None:
    """Demonstrate request errors."""
    print_section("Errors")

    send(client, "POST", json={"id": "unknown"})
    send(client, "POST", json={"id": "hello", "extensions": "{not json"})
    send(client, "PUT", json={"id": "hello"})
    send(client, "GET")


def main() -> None:
    """Run all demos."""
    app = create_app(query_map=QUERY_MAP, executor=SlowEchoExecutor())

    with TestClient(app) as client:
        demo_cache_hits(client)
        demo_variables(client)
        demo_errors(client)

        print_section("Cache Stats")
        print(json.dumps(client.get("/cache/stats").json(), indent=2))


if __name__ == "__main__":
    main()
