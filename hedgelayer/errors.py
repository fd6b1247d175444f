"""
Hedge Layer CLI - Error Classes

Error taxonomy for API interactions and stream consumption.
"""

import json
from typing import Any, Dict, Optional


class HedgeLayerError(Exception):
    """
    Base exception for the Hedge Layer client.

    All client errors inherit from this class.

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        status_code: HTTP status code if applicable (0 when no response exists)
        details: Additional error details
    """

    def __init__(
        self,
        message: str,
        code: str = "unknown",
        status_code: int = 0,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"status_code={self.status_code})"
        )


class APIError(HedgeLayerError):
    """
    The API answered with a non-2xx status.

    The message is built from the response body: the ``error`` or
    ``message`` field when the body is a JSON object, the raw body otherwise.

    Attributes:
        body: Raw response body text
    """

    def __init__(
        self,
        status_code: int,
        body: str = "",
        message: Optional[str] = None,
        **kwargs
    ):
        self.body = body
        super().__init__(
            message=message or f"API error {status_code}: {_extract_detail(body)}",
            code=kwargs.pop("code", "api_error"),
            status_code=status_code,
            **kwargs
        )


class AuthenticationError(APIError):
    """
    Missing, invalid or expired API token.

    Raised for 401 responses and when a command needs a token
    but none is configured.
    """

    def __init__(self, message: Optional[str] = None, body: str = "", **kwargs):
        kwargs.pop("code", None)
        if message is None and not body:
            message = "Invalid or missing API token"
        super().__init__(
            status_code=kwargs.pop("status_code", 401),
            body=body,
            message=message,
            code="authentication_error",
            **kwargs
        )


class RateLimitError(APIError):
    """
    Rate limit exceeded (429).

    Attributes:
        retry_after: Seconds the server asked us to wait
    """

    def __init__(self, body: str = "", retry_after: int = 60, **kwargs):
        kwargs.pop("code", None)
        super().__init__(
            status_code=kwargs.pop("status_code", 429),
            body=body,
            message=kwargs.pop("message", None),
            code="rate_limit_exceeded",
            **kwargs
        )
        self.retry_after = retry_after


class InvalidRequestError(HedgeLayerError):
    """
    Local input is invalid.

    Raised before any request is sent, e.g. for a malformed token
    or an incomplete risk profile.

    Attributes:
        param: The parameter that caused the error
    """

    def __init__(self, message: str, param: Optional[str] = None, **kwargs):
        super().__init__(
            message=message,
            code=kwargs.pop("code", "invalid_request"),
            **kwargs
        )
        self.param = param


class TimeoutError(HedgeLayerError):
    """Request timed out."""

    def __init__(self, message: str = "Request timed out", **kwargs):
        kwargs.pop("code", None)
        super().__init__(message=message, code="timeout", **kwargs)


class ConnectionError(HedgeLayerError):
    """
    Failed to reach the API.

    This error occurs when:
    - Network is unavailable
    - DNS resolution fails
    - Connection is refused or dropped mid-response
    """

    def __init__(self, message: str = "Failed to connect to API", **kwargs):
        kwargs.pop("code", None)
        super().__init__(message=message, code="connection_error", **kwargs)


class StreamError(HedgeLayerError):
    """
    The server reported an error inside a chat stream.

    The message is the server-supplied text, verbatim. Stream
    consumption stops at this point and no partial result is returned.
    """

    def __init__(self, message: str = "Unknown stream error", **kwargs):
        kwargs.pop("code", None)
        super().__init__(message=message, code="stream_error", **kwargs)


def _extract_detail(body: str) -> str:
    try:
        parsed = json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return body
    if isinstance(parsed, dict):
        detail = parsed.get("error") or parsed.get("message")
        if isinstance(detail, str):
            return detail
        if detail is not None:
            return json.dumps(detail)
    return body
