"""Cached response domain entity."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CachedResponse:
    """A JSON GraphQL result stored under a request fingerprint.

    The media type is kept with the body so hits are replayed exactly as
    the execution layer answered. A ``None`` body (JSON ``null``) is still
    a stored entry, distinct from a cache miss.
    """

    body: Any
    content_type: str
