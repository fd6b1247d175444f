"""
Hedge Layer Python client and CLI

Hedge real-world risks with prediction-market positions. The hosted
service does the matching, sizing and cost estimation; this package
talks to it over HTTP and renders the results.

Quick Start:
    from hedgelayer import HedgeLayer, ChatMessage, StreamCallbacks

    client = HedgeLayer(token="hl_xxx")

    # Market search
    result = client.search_markets("hurricane", limit=5)

    # Chat with the hedging agent, printing text as it streams
    result = client.chat(
        [ChatMessage.user("Hedge my $500k house in Miami against hurricanes")],
        callbacks=StreamCallbacks(on_text=lambda t: print(t, end="")),
    )
    print(result.hedge_bundle)
"""

from .client import HedgeLayer, __version__
from .async_client import AsyncHedgeLayer
from .config import Config, DEFAULT_API_URL
from .models import (
    Market,
    MarketSearchResult,
    OrderbookLevel,
    Orderbook,
    Spread,
    SlippageResult,
    OrderbookSummary,
    HedgePosition,
    HedgeBundle,
    RiskProfile,
    Assessment,
    UserProfile,
    ChatMessage,
)
from .errors import (
    HedgeLayerError,
    APIError,
    AuthenticationError,
    RateLimitError,
    InvalidRequestError,
    TimeoutError,
    ConnectionError,
    StreamError,
)
from .streaming import (
    StreamCallbacks,
    StreamProtocol,
    StreamResult,
    CompletedToolCall,
    is_hedge_bundle,
    parse_stream,
    aparse_stream,
)

__all__ = [
    # Clients
    "HedgeLayer",
    "AsyncHedgeLayer",
    # Config
    "Config",
    "DEFAULT_API_URL",
    # Models
    "Market",
    "MarketSearchResult",
    "OrderbookLevel",
    "Orderbook",
    "Spread",
    "SlippageResult",
    "OrderbookSummary",
    "HedgePosition",
    "HedgeBundle",
    "RiskProfile",
    "Assessment",
    "UserProfile",
    "ChatMessage",
    # Errors
    "HedgeLayerError",
    "APIError",
    "AuthenticationError",
    "RateLimitError",
    "InvalidRequestError",
    "TimeoutError",
    "ConnectionError",
    "StreamError",
    # Streaming
    "StreamCallbacks",
    "StreamProtocol",
    "StreamResult",
    "CompletedToolCall",
    "is_hedge_bundle",
    "parse_stream",
    "aparse_stream",
]
