"""
Hedge Layer CLI - Stream Events

Typed events produced by the wire-protocol decoders and consumed
by the stream session. Events are transient and never persisted.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union


@dataclass(frozen=True)
class TextDelta:
    """Incremental assistant text."""
    text: str


@dataclass(frozen=True)
class ToolCallStart:
    """A tool call begins; arguments follow as deltas."""
    call_id: str
    tool_name: str


@dataclass(frozen=True)
class ToolCallArgumentDelta:
    """Partial argument text for a started tool call."""
    call_id: str
    fragment: str


@dataclass(frozen=True)
class ToolCallReady:
    """
    Arguments of a tool call are final.

    ``has_arguments`` is False when the server did not send the
    parsed arguments; the accumulated argument text is used instead.
    """
    call_id: str
    tool_name: Optional[str] = None
    arguments: Any = None
    has_arguments: bool = False


@dataclass(frozen=True)
class ToolResult:
    """Output of a tool call. ``tool_name`` may be unknown on the wire."""
    call_id: str
    output: Any = None
    tool_name: Optional[str] = None


@dataclass(frozen=True)
class FinishMessage:
    """Finish payload of the data stream protocol (``d:`` lines)."""
    payload: Any = None


@dataclass(frozen=True)
class ErrorEvent:
    """Server-reported error; terminates the stream."""
    message: str


@dataclass(frozen=True)
class StreamEnd:
    """The byte source is exhausted. Not an error."""


StreamEvent = Union[
    TextDelta,
    ToolCallStart,
    ToolCallArgumentDelta,
    ToolCallReady,
    ToolResult,
    FinishMessage,
    ErrorEvent,
    StreamEnd,
]
