"""
Hedge Layer CLI - Error Tests
"""

import pytest

from hedgelayer.errors import (
    APIError,
    AuthenticationError,
    ConnectionError,
    HedgeLayerError,
    InvalidRequestError,
    RateLimitError,
    StreamError,
    TimeoutError,
)


class TestHedgeLayerError:
    """Tests for the base error."""

    def test_attributes(self):
        error = HedgeLayerError("boom", code="x", status_code=500, details={"a": 1})

        assert str(error) == "boom"
        assert error.message == "boom"
        assert error.code == "x"
        assert error.status_code == 500
        assert error.details == {"a": 1}

    def test_repr(self):
        error = HedgeLayerError("boom", code="x", status_code=500)
        assert repr(error) == "HedgeLayerError(message='boom', code='x', status_code=500)"

    @pytest.mark.parametrize("error", [
        APIError(500, "oops"),
        AuthenticationError(),
        RateLimitError(),
        InvalidRequestError("bad"),
        TimeoutError(),
        ConnectionError(),
        StreamError("x"),
    ])
    def test_all_errors_inherit_base(self, error):
        assert isinstance(error, HedgeLayerError)


class TestAPIError:
    """Tests for APIError message extraction."""

    def test_json_error_field(self):
        error = APIError(404, '{"error": "Assessment not found"}')

        assert error.message == "API error 404: Assessment not found"
        assert error.status_code == 404
        assert error.code == "api_error"
        assert error.body == '{"error": "Assessment not found"}'

    def test_json_message_field(self):
        error = APIError(400, '{"message": "q is required"}')
        assert error.message == "API error 400: q is required"

    def test_structured_error_field(self):
        error = APIError(422, '{"error": {"field": "limit"}}')
        assert error.message == 'API error 422: {"field": "limit"}'

    def test_plain_text_body(self):
        error = APIError(502, "Bad Gateway")
        assert error.message == "API error 502: Bad Gateway"

    def test_json_without_known_fields(self):
        error = APIError(500, '{"detail": "x"}')
        assert error.message == 'API error 500: {"detail": "x"}'

    def test_explicit_message(self):
        error = APIError(500, "body", message="custom")
        assert error.message == "custom"


class TestAuthenticationError:
    """Tests for AuthenticationError."""

    def test_defaults(self):
        error = AuthenticationError()

        assert error.status_code == 401
        assert error.code == "authentication_error"
        assert error.message == "Invalid or missing API token"

    def test_from_body(self):
        error = AuthenticationError(body='{"error": "Token revoked"}')
        assert error.message == "API error 401: Token revoked"

    def test_is_api_error(self):
        assert isinstance(AuthenticationError("x"), APIError)


class TestRateLimitError:
    def test_retry_after(self):
        error = RateLimitError(body="slow down", retry_after=30)

        assert error.status_code == 429
        assert error.code == "rate_limit_exceeded"
        assert error.retry_after == 30
        assert error.message == "API error 429: slow down"


class TestLocalErrors:
    """Tests for errors raised without an HTTP response."""

    def test_invalid_request_param(self):
        error = InvalidRequestError("bad token", param="token")

        assert error.param == "token"
        assert error.code == "invalid_request"
        assert error.status_code == 0

    def test_stream_error_message_is_verbatim(self):
        error = StreamError("Model overloaded, try again")

        assert error.message == "Model overloaded, try again"
        assert error.code == "stream_error"

    def test_defaults(self):
        assert TimeoutError().code == "timeout"
        assert ConnectionError().message == "Failed to connect to API"
        assert StreamError().message == "Unknown stream error"
