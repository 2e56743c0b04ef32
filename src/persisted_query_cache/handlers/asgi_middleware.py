"""ASGI adapter that runs the persisted query pipeline in front of an app.

The middleware parses the request body, hands request/response adapters to
the pipeline, and plays the wrapped app's response back to the client once
the pipeline has had a chance to cache it. When the pipeline resolves a
persisted id, the wrapped app receives a rewritten body (POST) or query
string (GET) that carries the query text.
"""

import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

from starlette.datastructures import Headers, QueryParams
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from persisted_query_cache.entities import GraphQLRequest
from persisted_query_cache.errors import HttpQueryError
from persisted_query_cache.handlers.errors import http_query_error_response
from persisted_query_cache.models import CacheOutcome
from persisted_query_cache.services import PersistedQueryCache, is_cacheable_content_type

CACHE_STATUS_HEADER = "x-persisted-query-cache"

_UNSET: Any = object()


def parse_body(raw_body: bytes, content_type: str | None) -> Any:
    """Decode a GraphQL POST body.

    ``application/graphql`` bodies are the query text itself; anything else
    is decoded as JSON.

    Raises:
        HttpQueryError: 400 if the body is not valid JSON
    """
    if not raw_body:
        return None

    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if media_type == "application/graphql":
        return {"query": raw_body.decode("utf-8")}

    try:
        return json.loads(raw_body)
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
        raise HttpQueryError(400, "POST body is not valid JSON") from e


async def read_body(receive: Receive) -> bytes:
    """Drain the request body from the ASGI receive channel."""
    chunks: list[bytes] = []
    while True:
        message = await receive()
        if message["type"] != "http.request":
            break
        chunks.append(message.get("body", b""))
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


class AsgiInboundRequest:
    """InboundRequest implementation over an ASGI scope and buffered body."""

    def __init__(self, scope: Scope, raw_body: bytes) -> None:
        self._scope = scope
        self._raw_body = raw_body
        self._query_string: bytes = scope.get("query_string", b"")
        self._rewritten = False

        headers = Headers(scope=scope)
        self.method: str = scope["method"]
        self.path: str = scope["path"]
        self.query_params: Mapping[str, Any] = QueryParams(self._query_string)
        self.body: Any = parse_body(raw_body, headers.get("content-type")) if self.method.upper() == "POST" else None
        self.graphql_request: GraphQLRequest | None = None

    def inject_query(self, query: str) -> None:
        if self.method.upper() == "POST":
            self.body = {**self.body, "query": query}
            self._raw_body = json.dumps(self.body).encode("utf-8")
        else:
            params = [(k, v) for k, v in self.query_params.multi_items() if k != "query"]
            params.append(("query", query))
            self._query_string = urlencode(params).encode("ascii")
            self.query_params = QueryParams(self._query_string)
        self._rewritten = True

    def downstream_scope(self) -> Scope:
        """Scope the wrapped app should see, reflecting any injected query."""
        if not self._rewritten:
            return self._scope

        scope = dict(self._scope)
        scope["query_string"] = self._query_string
        if self.method.upper() == "POST":
            headers = [
                (name, value)
                for name, value in self._scope.get("headers", [])
                if name.lower() not in (b"content-length", b"content-type")
            ]
            headers.append((b"content-type", b"application/json"))
            headers.append((b"content-length", str(len(self._raw_body)).encode("latin-1")))
            scope["headers"] = headers
        return scope

    def downstream_receive(self, receive: Receive) -> Receive:
        """Replay the (possibly rewritten) body, then defer to the real channel."""
        body_sent = False

        async def replay() -> Message:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": self._raw_body, "more_body": False}
            return await receive()

        return replay


class BufferedResponse:
    """OutboundResponse implementation that captures the wrapped app's reply."""

    def __init__(self) -> None:
        self.status_code = 200
        self.content_type: str | None = None
        self._headers: list[tuple[bytes, bytes]] = []
        self._chunks: list[bytes] = []
        self._body: Any = _UNSET
        self._started = False

    @property
    def body(self) -> Any:
        if self._body is not _UNSET:
            return self._body
        raw = b"".join(self._chunks)
        if is_cacheable_content_type(self.content_type):
            try:
                return json.loads(raw)
            except (UnicodeDecodeError, json.JSONDecodeError, RecursionError):
                return raw
        return raw

    @body.setter
    def body(self, value: Any) -> None:
        self._body = value

    async def capture(self, message: Message) -> None:
        """ASGI send callable handed to the wrapped app."""
        if message["type"] == "http.response.start":
            self._started = True
            self.status_code = message["status"]
            self._headers = list(message.get("headers", []))
            for name, value in self._headers:
                if name.lower() == b"content-type":
                    self.content_type = value.decode("latin-1")
        elif message["type"] == "http.response.body":
            self._chunks.append(message.get("body", b""))

    async def send_to(self, scope: Scope, receive: Receive, send: Send, outcome: CacheOutcome) -> None:
        """Send the final response to the client."""
        status_header = {CACHE_STATUS_HEADER: outcome.value}

        if self._body is not _UNSET:
            response: Response
            if isinstance(self._body, (bytes, bytearray)):
                response = Response(bytes(self._body), media_type=self.content_type, headers=status_header)
            else:
                response = JSONResponse(self._body, media_type=self.content_type, headers=status_header)
            await response(scope, receive, send)
            return

        if not self._started:
            return

        headers = self._headers + [(CACHE_STATUS_HEADER.encode("latin-1"), outcome.value.encode("latin-1"))]
        await send({"type": "http.response.start", "status": self.status_code, "headers": headers})
        await send({"type": "http.response.body", "body": b"".join(self._chunks), "more_body": False})


class PersistedQueryMiddleware:
    """Pure ASGI middleware driving a PersistedQueryCache.

    Example:
        ```python
        app.add_middleware(PersistedQueryMiddleware, pipeline=pipeline)
        ```
    """

    def __init__(self, app: ASGIApp, pipeline: PersistedQueryCache) -> None:
        self.app = app
        self.pipeline = pipeline

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self.pipeline.handles(scope["path"]):
            await self.app(scope, receive, send)
            return

        raw_body = await read_body(receive)
        response = BufferedResponse()

        try:
            request = AsgiInboundRequest(scope, raw_body)

            async def call_next() -> None:
                await self.app(request.downstream_scope(), request.downstream_receive(receive), response.capture)

            outcome = await self.pipeline(request, response, call_next)
        except HttpQueryError as e:
            await http_query_error_response(e)(scope, receive, send)
            return

        await response.send_to(scope, receive, send, outcome)
