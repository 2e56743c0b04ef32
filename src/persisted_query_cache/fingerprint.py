"""Cache key derivation for persisted query requests."""

import hashlib
import json
from collections.abc import Mapping
from typing import Any

from persisted_query_cache.errors import SerializationError


def canonicalize_variables(variables: Any, sort_keys: bool = False) -> str:
    """Serialize variables into the string that participates in the cache key.

    Anything that is not a mapping canonicalizes to the empty string. Key
    order is preserved unless ``sort_keys`` is set, so ``{"a": 1, "b": 2}``
    and ``{"b": 2, "a": 1}`` produce different keys by default.

    Raises:
        SerializationError: If the mapping is cyclic or holds values JSON
            cannot represent (including NaN and Infinity), or nests
            deeper than the encoder can follow
    """
    if not isinstance(variables, Mapping):
        return ""

    try:
        return json.dumps(
            dict(variables),
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
            sort_keys=sort_keys,
        )
    except (TypeError, ValueError, RecursionError) as e:
        raise SerializationError(f"Variables could not be serialized: {e}") from e


def fingerprint(persist_hash: str, variables: Any = None, *, sort_keys: bool = False) -> str:
    """Derive the cache key for a persisted query id and its variables.

    Args:
        persist_hash: The persisted query id sent by the client
        variables: Parsed request variables, or None
        sort_keys: Sort variable keys before hashing

    Returns:
        64-character lowercase hex SHA-256 digest
    """
    payload = persist_hash + canonicalize_variables(variables, sort_keys=sort_keys)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
