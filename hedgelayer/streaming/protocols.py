"""
Hedge Layer CLI - Wire Protocol Decoders

The chat endpoint speaks one of two line-oriented protocols. A
decoder is picked once per stream; lines are never sniffed.

UI message stream (SSE framed, one JSON object per ``data:`` line):
    data: {"type":"text-delta","delta":"Hi"}
    data: {"type":"tool-input-start","toolCallId":"1","toolName":"searchMarkets"}
    data: {"type":"tool-input-delta","toolCallId":"1","inputTextDelta":"{\\"q\\":"}
    data: {"type":"tool-input-available","toolCallId":"1","toolName":"searchMarkets","input":{...}}
    data: {"type":"tool-output-available","toolCallId":"1","output":{...}}
    data: {"type":"error","errorText":"..."}
    data: [DONE]

Data stream (``<code>:<json>`` lines):
    0:"Hi"                                         text delta
    9:{"toolCallId":"1","toolName":"..."}          tool call start
    a:{"toolCallId":"1","argsTextDelta":"..."}     argument delta
    b:{"toolCallId":"1","result":{...}}            tool result
    d:[{...}]                                      finish payload
    e:"message"                                    error

Lines that cannot be parsed are skipped; they never fail the stream.
"""

import json
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional

from .events import (
    ErrorEvent,
    FinishMessage,
    StreamEvent,
    TextDelta,
    ToolCallArgumentDelta,
    ToolCallReady,
    ToolCallStart,
    ToolResult,
)

DONE_SENTINEL = "[DONE]"
UNKNOWN_STREAM_ERROR = "Unknown stream error"


class StreamProtocol(str, Enum):
    """Wire protocols understood by the stream parser."""
    UI_MESSAGE = "ui-message"
    DATA = "data"


class FrameDecoder(ABC):
    """Classifies one complete line into zero or more stream events."""

    protocol: StreamProtocol

    @abstractmethod
    def decode_line(self, line: str) -> List[StreamEvent]:
        """Return the events carried by ``line`` (empty when insignificant)."""


_INVALID = object()


def _loads(payload: str) -> Any:
    """Parse JSON; ``_INVALID`` when it cannot be decoded (``null`` is valid)."""
    try:
        return json.loads(payload)
    except (ValueError, RecursionError):
        return _INVALID


def _str_field(message: Dict[str, Any], key: str) -> Optional[str]:
    value = message.get(key)
    return value if isinstance(value, str) else None


class UIMessageStreamDecoder(FrameDecoder):
    """Decoder for the SSE-framed UI message stream."""

    protocol = StreamProtocol.UI_MESSAGE

    def decode_line(self, line: str) -> List[StreamEvent]:
        trimmed = line.strip()
        if not trimmed or trimmed.startswith(":"):
            return []
        if not trimmed.startswith("data:"):
            return []

        payload = trimmed[len("data:"):].strip()
        if payload == DONE_SENTINEL:
            return []

        message = _loads(payload)
        if not isinstance(message, dict):
            return []

        handler = self._handlers.get(message.get("type"))
        if handler is None:
            return []
        event = handler(self, message)
        return [event] if event is not None else []

    def _text_delta(self, message: Dict[str, Any]) -> Optional[StreamEvent]:
        delta = _str_field(message, "delta")
        if delta is None:
            return None
        return TextDelta(text=delta)

    def _tool_input_start(self, message: Dict[str, Any]) -> Optional[StreamEvent]:
        call_id = _str_field(message, "toolCallId")
        name = _str_field(message, "toolName")
        if not call_id or not name:
            return None
        return ToolCallStart(call_id=call_id, tool_name=name)

    def _tool_input_delta(self, message: Dict[str, Any]) -> Optional[StreamEvent]:
        call_id = _str_field(message, "toolCallId")
        fragment = _str_field(message, "inputTextDelta")
        if not call_id or fragment is None:
            return None
        return ToolCallArgumentDelta(call_id=call_id, fragment=fragment)

    def _tool_input_available(self, message: Dict[str, Any]) -> Optional[StreamEvent]:
        call_id = _str_field(message, "toolCallId")
        if not call_id:
            return None
        arguments = message.get("input")
        return ToolCallReady(
            call_id=call_id,
            tool_name=_str_field(message, "toolName"),
            arguments=arguments,
            has_arguments=arguments is not None,
        )

    def _tool_output_available(self, message: Dict[str, Any]) -> Optional[StreamEvent]:
        call_id = _str_field(message, "toolCallId")
        if not call_id:
            return None
        return ToolResult(call_id=call_id, output=message.get("output"))

    def _error(self, message: Dict[str, Any]) -> Optional[StreamEvent]:
        return ErrorEvent(message=_str_field(message, "errorText") or UNKNOWN_STREAM_ERROR)

    _handlers = {
        "text-delta": _text_delta,
        "tool-input-start": _tool_input_start,
        "tool-input-delta": _tool_input_delta,
        "tool-input-available": _tool_input_available,
        "tool-output-available": _tool_output_available,
        "error": _error,
    }


class DataStreamDecoder(FrameDecoder):
    """Decoder for the single-character-code data stream."""

    protocol = StreamProtocol.DATA

    def decode_line(self, line: str) -> List[StreamEvent]:
        if len(line) < 2 or line[1] != ":":
            return []

        handler = self._handlers.get(line[0])
        if handler is None:
            return []

        payload = _loads(line[2:])
        if payload is _INVALID:
            return []
        event = handler(self, payload)
        return [event] if event is not None else []

    def _text(self, payload: Any) -> Optional[StreamEvent]:
        if not isinstance(payload, str):
            return None
        return TextDelta(text=payload)

    def _tool_call_start(self, payload: Any) -> Optional[StreamEvent]:
        if not isinstance(payload, dict):
            return None
        call_id = _str_field(payload, "toolCallId")
        name = _str_field(payload, "toolName")
        if not call_id or not name:
            return None
        return ToolCallStart(call_id=call_id, tool_name=name)

    def _tool_call_delta(self, payload: Any) -> Optional[StreamEvent]:
        if not isinstance(payload, dict):
            return None
        call_id = _str_field(payload, "toolCallId")
        fragment = _str_field(payload, "argsTextDelta")
        if not call_id or fragment is None:
            return None
        return ToolCallArgumentDelta(call_id=call_id, fragment=fragment)

    def _tool_result(self, payload: Any) -> Optional[StreamEvent]:
        if not isinstance(payload, dict):
            return None
        call_id = _str_field(payload, "toolCallId")
        if not call_id:
            return None
        return ToolResult(call_id=call_id, output=payload.get("result"))

    def _finish(self, payload: Any) -> Optional[StreamEvent]:
        if not isinstance(payload, (list, dict)):
            return None
        return FinishMessage(payload=payload)

    def _error(self, payload: Any) -> Optional[StreamEvent]:
        if isinstance(payload, str):
            return ErrorEvent(message=payload)
        return ErrorEvent(message=json.dumps(payload))

    _handlers = {
        "0": _text,
        "9": _tool_call_start,
        "a": _tool_call_delta,
        "b": _tool_result,
        "d": _finish,
        "e": _error,
    }


_DECODERS = {
    StreamProtocol.UI_MESSAGE: UIMessageStreamDecoder,
    StreamProtocol.DATA: DataStreamDecoder,
}


def get_decoder(protocol: "StreamProtocol | str") -> FrameDecoder:
    """
    Create a fresh decoder for a protocol.

    Raises:
        ValueError: If the protocol name is unknown.
    """
    return _DECODERS[StreamProtocol(protocol)]()
