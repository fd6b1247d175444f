"""
Hedge Layer CLI - Streaming Module

Parses the chat endpoint's streamed answer:
- Incremental decoding and line framing of arbitrary byte chunks
- Two wire protocols (UI message stream, data stream)
- Tool call tracking across partial argument deltas
- Hedge bundle extraction and live callbacks
"""

from .events import (
    StreamEvent,
    TextDelta,
    ToolCallStart,
    ToolCallArgumentDelta,
    ToolCallReady,
    ToolResult,
    FinishMessage,
    ErrorEvent,
    StreamEnd,
)
from .framing import LineFramer
from .protocols import (
    StreamProtocol,
    FrameDecoder,
    UIMessageStreamDecoder,
    DataStreamDecoder,
    get_decoder,
)
from .tool_calls import PendingToolCall, ToolCallTracker
from .parser import (
    StreamCallbacks,
    StreamResult,
    StreamSession,
    CompletedToolCall,
    BUNDLE_TOOL_NAME,
    DEFAULT_BUNDLE_TOOLS,
    is_hedge_bundle,
    parse_stream,
    aparse_stream,
)

__all__ = [
    # Events
    "StreamEvent",
    "TextDelta",
    "ToolCallStart",
    "ToolCallArgumentDelta",
    "ToolCallReady",
    "ToolResult",
    "FinishMessage",
    "ErrorEvent",
    "StreamEnd",
    # Framing and protocols
    "LineFramer",
    "StreamProtocol",
    "FrameDecoder",
    "UIMessageStreamDecoder",
    "DataStreamDecoder",
    "get_decoder",
    # Tool calls
    "PendingToolCall",
    "ToolCallTracker",
    # Parser
    "StreamCallbacks",
    "StreamResult",
    "StreamSession",
    "CompletedToolCall",
    "BUNDLE_TOOL_NAME",
    "DEFAULT_BUNDLE_TOOLS",
    "is_hedge_bundle",
    "parse_stream",
    "aparse_stream",
]
