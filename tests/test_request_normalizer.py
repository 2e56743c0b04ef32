"""
Tests for request normalization.
"""

import pytest
from fakes import FakeRequest

from persisted_query_cache.entities import GraphQLRequest
from persisted_query_cache.errors import HttpQueryError
from persisted_query_cache.services import normalize_request


def test_post_extracts_all_fields():
    """Test a full POST payload is normalized."""
    request = FakeRequest(
        body={
            "query": "query Q($x: Int) { f(x: $x) }",
            "operationName": "Q",
            "variables": {"x": 1},
            "extensions": {"persistedQuery": {"version": 1}},
            "id": "abc123",
        }
    )

    assert normalize_request(request) == GraphQLRequest(
        query="query Q($x: Int) { f(x: $x) }",
        operation_name="Q",
        variables={"x": 1},
        extensions={"persistedQuery": {"version": 1}},
        persist_hash="abc123",
    )


def test_get_parses_json_encoded_fields():
    """Test GET variables and extensions arrive as JSON strings."""
    request = FakeRequest(
        method="GET",
        query_params={"id": "abc123", "variables": '{"x": 1}', "extensions": "{}"},
    )

    result = normalize_request(request)

    assert result.persist_hash == "abc123"
    assert result.variables == {"x": 1}
    assert result.extensions == {}
    assert result.query is None


def test_method_is_case_insensitive():
    """Test lower-case methods are accepted."""
    request = FakeRequest(method="get", query_params={"id": "abc123"})
    assert normalize_request(request).persist_hash == "abc123"


def test_request_without_id_is_not_persisted():
    """Test absence of id means an ordinary request."""
    result = normalize_request(FakeRequest(body={"query": "{ hello }"}))
    assert result.persist_hash is None
    assert not result.is_persisted


def test_numeric_id_becomes_string():
    """Test ids are keyed as strings."""
    assert normalize_request(FakeRequest(body={"id": 42})).persist_hash == "42"


@pytest.mark.parametrize("body", [None, {}, ""])
def test_post_without_body_is_500(body):
    """Test a missing POST body signals a misconfigured pipeline."""
    with pytest.raises(HttpQueryError) as exc_info:
        normalize_request(FakeRequest(body=body))

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "POST body missing"


def test_post_batch_is_rejected():
    """Test non-object bodies are client errors."""
    with pytest.raises(HttpQueryError) as exc_info:
        normalize_request(FakeRequest(body=[{"id": "a"}, {"id": "b"}]))

    assert exc_info.value.status_code == 400


@pytest.mark.parametrize("query_params", [None, {}])
def test_get_without_query_is_400(query_params):
    """Test a GET with no parameters is a client error."""
    with pytest.raises(HttpQueryError) as exc_info:
        normalize_request(FakeRequest(method="GET", query_params=query_params))

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "GET query missing"


@pytest.mark.parametrize("method", ["PUT", "DELETE", "PATCH"])
def test_other_methods_are_405_with_allow(method):
    """Test unsupported methods carry an Allow header."""
    with pytest.raises(HttpQueryError) as exc_info:
        normalize_request(FakeRequest(method=method, body={"id": "abc123"}))

    assert exc_info.value.status_code == 405
    assert exc_info.value.headers == {"Allow": "GET, POST"}


def test_document_ast_query_gets_specific_message():
    """Test a pre-parsed AST is rejected with a stringify hint."""
    request = FakeRequest(body={"query": {"kind": "Document", "definitions": []}})

    with pytest.raises(HttpQueryError) as exc_info:
        normalize_request(request)

    assert exc_info.value.status_code == 400
    assert "Document" in exc_info.value.message
    assert "string" in exc_info.value.message


def test_non_string_query_is_400():
    """Test other non-string queries are rejected."""
    with pytest.raises(HttpQueryError) as exc_info:
        normalize_request(FakeRequest(body={"query": 123}))

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "GraphQL queries must be strings."


def test_malformed_extensions():
    """Test invalid extensions JSON is a 400."""
    with pytest.raises(HttpQueryError) as exc_info:
        normalize_request(FakeRequest(body={"id": "abc123", "extensions": "{not json"}))

    assert exc_info.value.status_code == 400
    assert "Extensions are invalid JSON" in exc_info.value.message


def test_malformed_variables():
    """Test invalid variables JSON is a 400."""
    with pytest.raises(HttpQueryError) as exc_info:
        normalize_request(FakeRequest(method="GET", query_params={"id": "a", "variables": "{x"}))

    assert exc_info.value.status_code == 400
    assert "Variables are invalid JSON" in exc_info.value.message


@pytest.mark.parametrize(("field", "message"), [("variables", "Variables"), ("extensions", "Extensions")])
def test_deeply_nested_json_fields_are_400(field, message):
    """Test JSON nested past the decoder's recursion limit is a 400."""
    nested = "[" * 100_000 + "]" * 100_000

    with pytest.raises(HttpQueryError) as exc_info:
        normalize_request(FakeRequest(method="GET", query_params={"id": "a", field: nested}))

    assert exc_info.value.status_code == 400
    assert f"{message} are invalid JSON" in exc_info.value.message
