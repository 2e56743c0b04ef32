"""Persisted query map: id -> query text, frozen at startup."""

import json
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from persisted_query_cache.errors import ConfigurationError

PersistedQueryMap = Mapping[str, str]

APOLLO_MANIFEST_FORMAT = "apollo-persisted-query-manifest"


def freeze_query_map(queries: Mapping[str, str]) -> PersistedQueryMap:
    """Return a read-only copy of the given id -> query mapping."""
    return MappingProxyType(dict(queries))


def load_query_map(path: str | Path) -> PersistedQueryMap:
    """Load a persisted query map from a JSON file.

    Two layouts are accepted: a flat ``{"id": "query"}`` object, or an
    Apollo persisted query manifest with an ``operations`` list of
    ``{"id", "body"}`` entries.

    Args:
        path: Path to the JSON file

    Returns:
        Read-only mapping of query ids to query text

    Raises:
        ConfigurationError: If the file cannot be read or has the wrong shape
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot load persisted queries from {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Persisted queries file {path} must contain a JSON object")

    if data.get("format") == APOLLO_MANIFEST_FORMAT:
        operations = data.get("operations")
        if not isinstance(operations, list):
            raise ConfigurationError(f"Manifest {path} has no 'operations' list")
        try:
            queries = {op["id"]: op["body"] for op in operations}
        except (KeyError, TypeError) as e:
            raise ConfigurationError(f"Malformed operation in manifest {path}: {e}") from e
    else:
        queries = data

    for query_id, query in queries.items():
        if not isinstance(query_id, str) or not isinstance(query, str):
            raise ConfigurationError(f"Persisted query {query_id!r} in {path} is not a string")

    return freeze_query_map(queries)
