"""
Unit tests for custom exception handling in deelcli.

These tests verify that the exception hierarchy works correctly and that
the handle_http_errors context manager properly translates httpx and pydantic
failures into DeelError subclasses.
"""

import json

import httpx
import pytest
from pydantic import BaseModel

from deelcli.exceptions import (
    EXIT_AUTH,
    EXIT_FORBIDDEN,
    EXIT_GENERIC,
    EXIT_NETWORK,
    EXIT_NOT_FOUND,
    EXIT_RATE_LIMITED,
    EXIT_SERVER,
    APIError,
    AuthenticationError,
    ConfigError,
    DeelError,
    NetworkError,
    NotFoundError,
    PaginationLimitError,
    PermissionDeniedError,
    RateLimitError,
    RequestTimeoutError,
    ResponseParseError,
    ServerError,
    ValidationError,
    extract_api_message,
    handle_http_errors,
)


def _status_error(status_code: int, **response_kwargs) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://api.letsdeel.com/rest/v2/contracts")
    response = httpx.Response(status_code, request=request, **response_kwargs)
    return httpx.HTTPStatusError("error", request=request, response=response)


class TestExceptionHierarchy:
    """Test the exception class hierarchy and instantiation."""

    def test_deel_error_base_class(self):
        error = DeelError("Test message")
        assert isinstance(error, Exception)
        assert error.message == "Test message"
        assert error.original_error is None
        assert error.exit_code == EXIT_GENERIC

    def test_deel_error_with_original_error(self):
        original = ValueError("Original error")
        error = DeelError("Wrapped message", original_error=original)
        assert error.original_error is original

    def test_api_error_fields(self):
        error = NotFoundError(404, "contract not found")
        assert isinstance(error, APIError)
        assert error.status_code == 404
        assert error.api_message == "contract not found"
        assert str(error) == "API error 404: contract not found"

    def test_pagination_limit_error(self):
        error = PaginationLimitError(100)
        assert isinstance(error, DeelError)
        assert error.max_pages == 100
        assert "100 pages" in str(error)
        assert "--limit" in str(error)
        assert "--all" in str(error)

    def test_request_timeout_is_network_error(self):
        error = RequestTimeoutError()
        assert isinstance(error, NetworkError)
        assert error.exit_code == EXIT_NETWORK
        assert "timed out" in str(error)

    def test_exit_codes(self):
        assert ConfigError("x").exit_code == EXIT_AUTH
        assert AuthenticationError(401, "x").exit_code == EXIT_AUTH
        assert PermissionDeniedError(403, "x").exit_code == EXIT_FORBIDDEN
        assert NotFoundError(404, "x").exit_code == EXIT_NOT_FOUND
        assert RateLimitError(429, "x").exit_code == EXIT_RATE_LIMITED
        assert ServerError(500, "x").exit_code == EXIT_SERVER
        assert ValidationError(422, "x").exit_code == EXIT_GENERIC

    def test_every_error_has_suggestions(self):
        errors = [
            DeelError("x"),
            ConfigError("x"),
            AuthenticationError(401, "x"),
            RateLimitError(429, "x"),
            NetworkError("x"),
            ResponseParseError("x"),
            PaginationLimitError(3),
        ]
        for error in errors:
            assert error.suggestions
            assert isinstance(error, DeelError)


class TestExtractApiMessage:
    def test_error_key(self):
        response = httpx.Response(400, json={"error": "bad cursor"})
        assert extract_api_message(response) == "bad cursor"

    def test_message_key(self):
        response = httpx.Response(404, json={"message": "not here"})
        assert extract_api_message(response) == "not here"

    def test_nested_single(self):
        body = {"errors": {"errors": [{"key": "limit", "message": "limit too large"}]}}
        response = httpx.Response(422, json=body)
        assert extract_api_message(response) == "limit too large"

    def test_nested_multiple(self):
        body = {"errors": {"errors": [{"message": "first"}, {"message": "second"}]}}
        response = httpx.Response(422, json=body)
        message = extract_api_message(response)
        assert message.startswith("2 errors:")
        assert "first" in message and "second" in message

    def test_plain_text(self):
        response = httpx.Response(502, text="Bad Gateway from proxy")
        assert extract_api_message(response) == "Bad Gateway from proxy"

    def test_empty_body_uses_reason_phrase(self):
        response = httpx.Response(503)
        assert extract_api_message(response) == "Service Unavailable"


class TestHandleHttpErrors:
    """Test the handle_http_errors context manager."""

    def test_successful_operation(self):
        with handle_http_errors():
            result = 42
        assert result == 42

    @pytest.mark.parametrize(
        "status_code,expected",
        [
            (400, ValidationError),
            (401, AuthenticationError),
            (403, PermissionDeniedError),
            (404, NotFoundError),
            (422, ValidationError),
            (429, RateLimitError),
            (500, ServerError),
            (503, ServerError),
            (409, APIError),
        ],
    )
    def test_status_mapping(self, status_code, expected):
        error = _status_error(status_code, json={"message": "nope"})

        with pytest.raises(expected) as exc_info:
            with handle_http_errors(operation="listing contracts"):
                raise error

        assert type(exc_info.value) is expected
        assert exc_info.value.status_code == status_code
        assert exc_info.value.api_message == "nope"
        assert exc_info.value.original_error is error
        assert exc_info.value.__cause__ is error

    def test_timeout(self):
        error = httpx.ReadTimeout("read timed out")

        with pytest.raises(RequestTimeoutError) as exc_info:
            with handle_http_errors(operation="listing people"):
                raise error

        assert "listing people" in str(exc_info.value)
        assert exc_info.value.original_error is error

    def test_transport_error(self):
        error = httpx.ConnectError("connection refused")

        with pytest.raises(NetworkError) as exc_info:
            with handle_http_errors():
                raise error

        assert not isinstance(exc_info.value, RequestTimeoutError)
        assert "connection refused" in str(exc_info.value)

    def test_json_decode_error(self):
        with pytest.raises(ResponseParseError) as exc_info:
            with handle_http_errors():
                json.loads("<html>")

        assert isinstance(exc_info.value.original_error, json.JSONDecodeError)

    def test_pydantic_validation_error(self):
        class Record(BaseModel):
            id: int

        with pytest.raises(ResponseParseError) as exc_info:
            with handle_http_errors():
                Record.model_validate({"id": "not-a-number"})

        assert "Record" in str(exc_info.value)

    def test_other_exceptions_pass_through(self):
        with pytest.raises(KeyError):
            with handle_http_errors():
                raise KeyError("untouched")
