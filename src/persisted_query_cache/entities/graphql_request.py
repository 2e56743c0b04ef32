"""GraphQL request domain entity."""

from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True)
class GraphQLRequest:
    """Normalized GraphQL request extracted from an inbound HTTP request.

    Built fresh for every request and never mutated. Resolving a persisted
    query produces a new instance via ``dataclasses.replace``.

    Attributes:
        query: GraphQL query text, if the client sent one
        operation_name: Operation to run when the document has several
        variables: Parsed variables mapping
        extensions: Parsed extensions mapping
        persist_hash: Persisted query id; None for ordinary requests
    """

    query: str | None = None
    operation_name: str | None = None
    variables: dict[str, Any] | None = None
    extensions: dict[str, Any] | None = None
    persist_hash: str | None = None

    @property
    def is_persisted(self) -> bool:
        """Whether the request references a persisted query."""
        return self.persist_hash is not None

    def resolved(self, query: str) -> "GraphQLRequest":
        """Return a copy with the persisted query text filled in."""
        return replace(self, query=query)

    def to_payload(self) -> dict[str, Any]:
        """Render the request as a GraphQL-over-HTTP JSON payload."""
        payload: dict[str, Any] = {"query": self.query}
        if self.operation_name is not None:
            payload["operationName"] = self.operation_name
        if self.variables is not None:
            payload["variables"] = self.variables
        if self.extensions is not None:
            payload["extensions"] = self.extensions
        return payload
