"""Error types raised by the persisted query cache.

Handlers translate these into HTTP responses; the core never does.
"""


class ConfigurationError(Exception):
    """Invalid configuration detected at construction time."""


class HttpQueryError(Exception):
    """Per-request error carrying the HTTP status the caller should respond with.

    Attributes:
        status_code: HTTP status code
        message: Human-readable error message
        is_graphql_error: Whether the message is already GraphQL-shaped
        headers: Extra response headers (e.g. ``Allow`` for 405)
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        is_graphql_error: bool = False,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.is_graphql_error = is_graphql_error
        self.headers = headers

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, message={self.message!r})"


class SerializationError(HttpQueryError):
    """Variables could not be serialized for fingerprinting."""

    def __init__(self, message: str = "Variables could not be serialized") -> None:
        super().__init__(400, message)
