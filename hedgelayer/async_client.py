"""
Hedge Layer CLI - Async Client

Async client for non-blocking API interactions.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import httpx

from .client import (
    CHAT_PATH,
    MessageInput,
    __version__,
    build_headers,
    chat_payload,
    clean_params,
    decode_json,
    error_from_response,
)
from .config import load_config, resolve_api_url, resolve_token
from .errors import AuthenticationError, ConnectionError, TimeoutError
from .logging import get_logger
from .models import Assessment, MarketSearchResult, OrderbookSummary, UserProfile
from .streaming import StreamCallbacks, StreamProtocol, StreamResult, aparse_stream

logger = get_logger(__name__)


class AsyncHedgeLayer:
    """
    Async Hedge Layer API client.

    Takes the same arguments as :class:`hedgelayer.HedgeLayer`.

    Example:
        >>> async with AsyncHedgeLayer(token="hl_xxx") as client:
        ...     result = await client.chat([ChatMessage.user("Hedge my boat")])
        ...     print(result.assistant_text)
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        config = load_config()
        self.token = resolve_token(token, config)
        self.base_url = resolve_api_url(base_url, config)
        self.timeout = timeout
        self._transport = transport

        self._client: Optional[httpx.AsyncClient] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def require_auth(self) -> None:
        if not self.is_authenticated:
            raise AuthenticationError("Not logged in. Run `hl auth login` first.")

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=build_headers(self.token, f"hedgelayer-python-async/{__version__}"),
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", path, params=clean_params(params))

    async def post(self, path: str, body: Any = None) -> Any:
        if body is None:
            return await self._request("POST", path)
        return await self._request("POST", path, json=body)

    async def patch(self, path: str, body: Any) -> Any:
        return await self._request("PATCH", path, json=body)

    async def delete(self, path: str) -> None:
        await self._request("DELETE", path)

    async def stream_chat(
        self,
        payload: Dict[str, Any],
        callbacks: Optional[StreamCallbacks] = None,
        protocol: StreamProtocol = StreamProtocol.UI_MESSAGE,
    ) -> StreamResult:
        """POST to the chat endpoint and parse the streamed answer."""
        client = await self._get_client()
        logger.debug("POST (stream) %s%s", self.base_url, CHAT_PATH, protocol=StreamProtocol(protocol).value)
        try:
            async with client.stream(
                "POST",
                CHAT_PATH,
                json=payload,
                headers={"Accept": "text/event-stream"},
            ) as response:
                logger.debug(
                    "POST (stream) %s%s -> %d",
                    self.base_url, CHAT_PATH, response.status_code,
                    status_code=response.status_code,
                )
                if response.is_error:
                    await response.aread()
                    raise error_from_response(response)
                return await aparse_stream(
                    response.aiter_bytes(), callbacks=callbacks, protocol=protocol
                )

        except httpx.TimeoutException:
            raise TimeoutError("Request timed out")
        except httpx.RequestError as e:
            raise ConnectionError(f"Stream failed: {e}")

    async def get_profile(self) -> UserProfile:
        return UserProfile.from_dict(await self.get("/api/profile"))

    async def search_markets(self, query: str, limit: int = 10) -> MarketSearchResult:
        data = await self.get("/api/markets", {"q": query, "limit": limit})
        return MarketSearchResult.from_dict(data)

    async def get_orderbook(self, token_id: str, size: Optional[float] = None) -> OrderbookSummary:
        data = await self.get("/api/orderbook", {"tokenId": token_id, "size": size})
        return OrderbookSummary.from_dict(data)

    async def create_assessment(self) -> str:
        return (await self.post("/api/assessments"))["id"]

    async def list_assessments(self, status: Optional[str] = None) -> List[Assessment]:
        data = await self.get("/api/assessments", {"list": "true", "status": status})
        return [Assessment.from_dict(a) for a in data.get("assessments", [])]

    async def get_assessment(self, assessment_id: str) -> Assessment:
        return Assessment.from_dict(await self.get(f"/api/assessments/{assessment_id}"))

    async def update_assessment(self, assessment_id: str, fields: Dict[str, Any]) -> Assessment:
        return Assessment.from_dict(await self.patch(f"/api/assessments/{assessment_id}", fields))

    async def delete_assessment(self, assessment_id: str) -> None:
        await self.delete(f"/api/assessments/{assessment_id}")

    async def chat(
        self,
        messages: Iterable[MessageInput],
        assessment_id: Optional[str] = None,
        callbacks: Optional[StreamCallbacks] = None,
        protocol: StreamProtocol = StreamProtocol.UI_MESSAGE,
    ) -> StreamResult:
        """Send the conversation to the hedging agent."""
        return await self.stream_chat(chat_payload(messages, assessment_id), callbacks, protocol)

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        """Make an async HTTP request and handle errors."""
        client = await self._get_client()
        logger.debug("%s %s%s", method, self.base_url, path)
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.TimeoutException:
            raise TimeoutError("Request timed out")
        except httpx.ConnectError:
            raise ConnectionError("Failed to connect to API")
        except httpx.RequestError as e:
            raise ConnectionError(f"Request failed: {e}")

        logger.debug(
            "%s %s%s -> %d", method, self.base_url, path, response.status_code,
            status_code=response.status_code,
        )
        if response.is_error:
            raise error_from_response(response)
        return decode_json(response)

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()
