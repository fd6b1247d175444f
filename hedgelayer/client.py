"""
Hedge Layer CLI - Synchronous Client

Thin HTTP client for the Hedge Layer API. All hedge computation
happens server-side; this client only sends requests and parses the
chat stream. Requests are never retried.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Union

import httpx

from .config import load_config, resolve_api_url, resolve_token
from .errors import (
    APIError,
    AuthenticationError,
    ConnectionError,
    RateLimitError,
    TimeoutError,
)
from .logging import get_logger
from .models import (
    Assessment,
    ChatMessage,
    MarketSearchResult,
    OrderbookSummary,
    UserProfile,
)
from .streaming import StreamCallbacks, StreamProtocol, StreamResult, parse_stream


__version__ = "0.3.0"

CHAT_PATH = "/api/chat"

logger = get_logger(__name__)

MessageInput = Union[ChatMessage, Dict[str, str]]


def build_headers(token: Optional[str], user_agent: str) -> Dict[str, str]:
    """Default headers; the bearer token is only sent when configured."""
    headers = {
        "Content-Type": "application/json",
        "User-Agent": user_agent,
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def clean_params(params: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Drop empty query parameters."""
    return {
        key: str(value)
        for key, value in (params or {}).items()
        if value is not None and value != ""
    }


def chat_payload(messages: Iterable[MessageInput], assessment_id: Optional[str] = None) -> Dict[str, Any]:
    """Request body of the chat endpoint."""
    payload: Dict[str, Any] = {
        "messages": [m.to_dict() if isinstance(m, ChatMessage) else m for m in messages]
    }
    if assessment_id:
        payload["assessmentId"] = assessment_id
    return payload


def error_from_response(response: httpx.Response) -> APIError:
    """
    Map a non-2xx response to an error.

    The response body must already be read.
    """
    body = response.text
    if response.status_code == 401:
        return AuthenticationError(body=body)
    if response.status_code == 429:
        retry_after = int(response.headers.get("Retry-After", 60))
        return RateLimitError(body=body, retry_after=retry_after)
    return APIError(response.status_code, body)


def decode_json(response: httpx.Response) -> Any:
    """Parse a successful response body; empty bodies yield None."""
    if not response.content:
        return None
    return response.json()


class HedgeLayer:
    """
    Hedge Layer API client.

    Args:
        token: API token. Defaults to HEDGELAYER_TOKEN, then the stored config.
        base_url: API base URL. Defaults to HEDGELAYER_API_URL, then the
            stored config, then https://hedgelayer.ai.
        timeout: Request timeout in seconds. Defaults to 60.
        transport: Optional httpx transport (used by tests).

    Example:
        >>> client = HedgeLayer(token="hl_xxx")
        >>> result = client.search_markets("hurricane")
        >>> print(result.total)

        >>> result = client.chat(
        ...     [ChatMessage.user("Hedge my house in Miami")],
        ...     callbacks=StreamCallbacks(on_text=print),
        ... )
        >>> print(result.hedge_bundle)
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        config = load_config()
        self.token = resolve_token(token, config)
        self._base_url = resolve_api_url(base_url, config)
        self._timeout = timeout

        self._client = httpx.Client(
            base_url=self._base_url,
            headers=build_headers(self.token, f"hedgelayer-python/{__version__}"),
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        """Base URL for API requests."""
        return self._base_url

    @property
    def is_authenticated(self) -> bool:
        """Whether a token is configured (not whether it is valid)."""
        return bool(self.token)

    def require_auth(self) -> None:
        """
        Raises:
            AuthenticationError: If no token is configured.
        """
        if not self.is_authenticated:
            raise AuthenticationError("Not logged in. Run `hl auth login` first.")

    # ============================================================
    # Generic requests
    # ============================================================

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("GET", path, params=clean_params(params))

    def post(self, path: str, body: Any = None) -> Any:
        if body is None:
            return self._request("POST", path)
        return self._request("POST", path, json=body)

    def patch(self, path: str, body: Any) -> Any:
        return self._request("PATCH", path, json=body)

    def delete(self, path: str) -> None:
        self._request("DELETE", path)

    def stream_chat(
        self,
        payload: Dict[str, Any],
        callbacks: Optional[StreamCallbacks] = None,
        protocol: StreamProtocol = StreamProtocol.UI_MESSAGE,
    ) -> StreamResult:
        """
        POST to the chat endpoint and parse the streamed answer.

        The response is released when parsing ends, fails or is
        abandoned by a raising callback.

        Raises:
            APIError: On a non-2xx response.
            StreamError: If the server reports an error mid-stream.
        """
        logger.debug("POST (stream) %s%s", self._base_url, CHAT_PATH, protocol=StreamProtocol(protocol).value)
        try:
            with self._client.stream(
                "POST",
                CHAT_PATH,
                json=payload,
                headers={"Accept": "text/event-stream"},
            ) as response:
                logger.debug(
                    "POST (stream) %s%s -> %d",
                    self._base_url, CHAT_PATH, response.status_code,
                    status_code=response.status_code,
                )
                if response.is_error:
                    response.read()
                    raise error_from_response(response)
                return parse_stream(response.iter_bytes(), callbacks=callbacks, protocol=protocol)

        except httpx.TimeoutException:
            raise TimeoutError("Request timed out")
        except httpx.RequestError as e:
            raise ConnectionError(f"Stream failed: {e}")

    # ============================================================
    # Hedge Layer API
    # ============================================================

    def get_profile(self) -> UserProfile:
        """Profile of the token owner."""
        return UserProfile.from_dict(self.get("/api/profile"))

    def search_markets(self, query: str, limit: int = 10) -> MarketSearchResult:
        """Search prediction markets by keyword."""
        data = self.get("/api/markets", {"q": query, "limit": limit})
        return MarketSearchResult.from_dict(data)

    def get_orderbook(self, token_id: str, size: Optional[float] = None) -> OrderbookSummary:
        """Orderbook, spread and optional slippage estimate for a CLOB token."""
        data = self.get("/api/orderbook", {"tokenId": token_id, "size": size})
        return OrderbookSummary.from_dict(data)

    def create_assessment(self) -> str:
        """Create an empty assessment and return its id."""
        return self.post("/api/assessments")["id"]

    def list_assessments(self, status: Optional[str] = None) -> List[Assessment]:
        data = self.get("/api/assessments", {"list": "true", "status": status})
        return [Assessment.from_dict(a) for a in data.get("assessments", [])]

    def get_assessment(self, assessment_id: str) -> Assessment:
        return Assessment.from_dict(self.get(f"/api/assessments/{assessment_id}"))

    def update_assessment(self, assessment_id: str, fields: Dict[str, Any]) -> Assessment:
        return Assessment.from_dict(self.patch(f"/api/assessments/{assessment_id}", fields))

    def delete_assessment(self, assessment_id: str) -> None:
        self.delete(f"/api/assessments/{assessment_id}")

    def chat(
        self,
        messages: Iterable[MessageInput],
        assessment_id: Optional[str] = None,
        callbacks: Optional[StreamCallbacks] = None,
        protocol: StreamProtocol = StreamProtocol.UI_MESSAGE,
    ) -> StreamResult:
        """
        Send the conversation to the hedging agent.

        Args:
            messages: Full conversation so far.
            assessment_id: Assessment the chat belongs to, if any.
            callbacks: Live observers for text and tool activity.
            protocol: Wire protocol the server answers with.
        """
        return self.stream_chat(chat_payload(messages, assessment_id), callbacks, protocol)

    # ============================================================
    # Private methods
    # ============================================================

    def _request(self, method: str, path: str, **kwargs) -> Any:
        """Make an HTTP request and handle errors."""
        logger.debug("%s %s%s", method, self._base_url, path)
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.TimeoutException:
            raise TimeoutError("Request timed out")
        except httpx.ConnectError:
            raise ConnectionError("Failed to connect to API")
        except httpx.RequestError as e:
            raise ConnectionError(f"Request failed: {e}")

        logger.debug(
            "%s %s%s -> %d", method, self._base_url, path, response.status_code,
            status_code=response.status_code,
        )
        if response.is_error:
            raise error_from_response(response)
        return decode_json(response)

    # ============================================================
    # Context Manager
    # ============================================================

    def close(self):
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
