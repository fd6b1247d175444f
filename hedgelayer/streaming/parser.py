"""
Hedge Layer CLI - Stream Parser

Consumes a chat response body and reassembles it into a transcript:

    bytes -> LineFramer -> FrameDecoder -> StreamSession -> StreamResult

Callbacks fire synchronously, in arrival order, while the stream is
being read, so the terminal can render the answer live.
"""

import copy
from dataclasses import dataclass, field
from typing import (
    Any,
    AsyncIterable,
    Callable,
    Dict,
    Iterable,
    List,
    Optional,
)

from ..errors import StreamError
from ..logging import get_logger
from .events import (
    ErrorEvent,
    FinishMessage,
    StreamEnd,
    StreamEvent,
    TextDelta,
    ToolCallArgumentDelta,
    ToolCallReady,
    ToolCallStart,
    ToolResult,
)
from .framing import LineFramer
from .protocols import FrameDecoder, StreamProtocol, get_decoder
from .tool_calls import PendingToolCall, ToolCallTracker

logger = get_logger(__name__)

BUNDLE_TOOL_NAME = "buildHedgeBundle"
DEFAULT_BUNDLE_TOOLS = frozenset({BUNDLE_TOOL_NAME})


@dataclass
class StreamCallbacks:
    """
    Optional observers for a stream.

    Attributes:
        on_text: Called with each text fragment (incremental, not cumulative).
        on_tool_call: Called once per tool call with its final arguments.
        on_tool_result: Called once per tool call with its output.
    """
    on_text: Optional[Callable[[str], None]] = None
    on_tool_call: Optional[Callable[[str, Any], None]] = None
    on_tool_result: Optional[Callable[[str, Any], None]] = None


@dataclass
class CompletedToolCall:
    """A tool call whose arguments are final."""
    name: str
    arguments: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "arguments": self.arguments}


@dataclass
class StreamResult:
    """Everything a chat stream produced."""
    assistant_text: str = ""
    tool_calls: List[CompletedToolCall] = field(default_factory=list)
    hedge_bundle: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase shape used on the wire."""
        return {
            "assistantText": self.assistant_text,
            "toolCalls": [call.to_dict() for call in self.tool_calls],
            "hedgeBundle": self.hedge_bundle,
        }


def is_hedge_bundle(value: Any) -> bool:
    """A hedge bundle is an object with both ``positions`` and ``totalCost``."""
    return isinstance(value, dict) and "positions" in value and "totalCost" in value


class StreamSession:
    """
    State machine for one stream.

    Tracks pending tool calls, accumulates assistant text and keeps the
    most recent hedge bundle. A session lives exactly as long as the
    parse that owns it.
    """

    def __init__(
        self,
        callbacks: Optional[StreamCallbacks] = None,
        bundle_tools: Iterable[str] = DEFAULT_BUNDLE_TOOLS
    ):
        self._callbacks = callbacks or StreamCallbacks()
        self._bundle_tools = frozenset(bundle_tools)
        self._tracker = ToolCallTracker()
        self._text_parts: List[str] = []
        self._tool_calls: List[CompletedToolCall] = []
        self._hedge_bundle: Optional[Dict[str, Any]] = None
        self._ended = False
        self.events_handled = 0

    @property
    def tracker(self) -> ToolCallTracker:
        return self._tracker

    @property
    def ended(self) -> bool:
        return self._ended

    def handle(self, event: StreamEvent) -> None:
        """
        Apply one event.

        Raises:
            StreamError: On a server-reported error event.
        """
        if self._ended:
            raise RuntimeError("StreamSession.handle() called after the stream ended")
        self.events_handled += 1

        handler = self._handlers.get(type(event))
        if handler is not None:
            handler(self, event)

    def result(self) -> StreamResult:
        return StreamResult(
            assistant_text="".join(self._text_parts),
            tool_calls=list(self._tool_calls),
            hedge_bundle=self._hedge_bundle,
        )

    def _on_text(self, event: TextDelta) -> None:
        if not event.text:
            return
        self._text_parts.append(event.text)
        if self._callbacks.on_text:
            self._callbacks.on_text(event.text)

    def _on_start(self, event: ToolCallStart) -> None:
        self._tracker.start(event.call_id, event.tool_name)

    def _on_argument_delta(self, event: ToolCallArgumentDelta) -> None:
        self._tracker.append(event.call_id, event.fragment)

    def _on_ready(self, event: ToolCallReady) -> None:
        call = self._tracker.mark_ready(
            event.call_id,
            arguments=copy.deepcopy(event.arguments),
            has_arguments=event.has_arguments,
        )
        if call is not None:
            self._report_tool_call(call)

    def _on_result(self, event: ToolResult) -> None:
        call = self._tracker.get_call(event.call_id)
        if call is None:
            return
        if not call.ready:
            # Results can arrive without a ready event (data stream protocol).
            self._tracker.mark_ready(event.call_id)
            self._report_tool_call(call)
        self._tracker.resolve(event.call_id)

        if self._callbacks.on_tool_result:
            self._callbacks.on_tool_result(call.tool_name, copy.deepcopy(event.output))

        if call.tool_name in self._bundle_tools and is_hedge_bundle(event.output):
            self._hedge_bundle = copy.deepcopy(event.output)

    def _on_finish(self, event: FinishMessage) -> None:
        candidates = event.payload if isinstance(event.payload, list) else [event.payload]
        for candidate in candidates:
            if is_hedge_bundle(candidate):
                self._hedge_bundle = copy.deepcopy(candidate)

    def _on_error(self, event: ErrorEvent) -> None:
        self._tracker.clear()
        self._ended = True
        raise StreamError(event.message)

    def _on_end(self, event: StreamEnd) -> None:
        self._tracker.clear()
        self._ended = True

    def _report_tool_call(self, call: PendingToolCall) -> None:
        self._tool_calls.append(CompletedToolCall(name=call.tool_name, arguments=call.arguments))
        if self._callbacks.on_tool_call:
            self._callbacks.on_tool_call(call.tool_name, copy.deepcopy(call.arguments))

    _handlers = {
        TextDelta: _on_text,
        ToolCallStart: _on_start,
        ToolCallArgumentDelta: _on_argument_delta,
        ToolCallReady: _on_ready,
        ToolResult: _on_result,
        FinishMessage: _on_finish,
        ErrorEvent: _on_error,
        StreamEnd: _on_end,
    }


def _dispatch(lines: List[str], decoder: FrameDecoder, session: StreamSession) -> None:
    for line in lines:
        for event in decoder.decode_line(line):
            session.handle(event)


def _finish(
    framer: LineFramer,
    decoder: FrameDecoder,
    session: StreamSession
) -> StreamResult:
    _dispatch(framer.finish(), decoder, session)
    session.handle(StreamEnd())
    result = session.result()
    logger.debug(
        "Stream finished: %d events, %d tool calls, bundle=%s",
        session.events_handled,
        len(result.tool_calls),
        result.hedge_bundle is not None,
        protocol=decoder.protocol.value,
        discarded_chars=len(framer.discarded),
    )
    return result


def parse_stream(
    chunks: Iterable[bytes],
    callbacks: Optional[StreamCallbacks] = None,
    protocol: StreamProtocol = StreamProtocol.UI_MESSAGE,
    bundle_tools: Iterable[str] = DEFAULT_BUNDLE_TOOLS
) -> StreamResult:
    """
    Parse a chat response body.

    Args:
        chunks: Byte chunks in arrival order (any boundaries).
        callbacks: Optional live observers.
        protocol: Wire protocol of the stream.
        bundle_tools: Tool names whose output may be a hedge bundle.

    Returns:
        StreamResult with text, completed tool calls and the last bundle.

    Raises:
        StreamError: If the server reports an error mid-stream.

    The chunk source is closed on every exit path.

    Example:
        >>> result = parse_stream([b'data: {"type":"text-delta","delta":"Hi"}\\n'])
        >>> result.assistant_text
        'Hi'
    """
    decoder = get_decoder(protocol)
    framer = LineFramer()
    session = StreamSession(callbacks, bundle_tools)

    iterator = iter(chunks)
    try:
        for chunk in iterator:
            _dispatch(framer.feed(chunk), decoder, session)
        return _finish(framer, decoder, session)
    finally:
        close = getattr(iterator, "close", None)
        if callable(close):
            close()


async def aparse_stream(
    chunks: AsyncIterable[bytes],
    callbacks: Optional[StreamCallbacks] = None,
    protocol: StreamProtocol = StreamProtocol.UI_MESSAGE,
    bundle_tools: Iterable[str] = DEFAULT_BUNDLE_TOOLS
) -> StreamResult:
    """Async variant of :func:`parse_stream`."""
    decoder = get_decoder(protocol)
    framer = LineFramer()
    session = StreamSession(callbacks, bundle_tools)

    iterator = chunks.__aiter__()
    try:
        async for chunk in iterator:
            _dispatch(framer.feed(chunk), decoder, session)
        return _finish(framer, decoder, session)
    finally:
        aclose = getattr(iterator, "aclose", None)
        if callable(aclose):
            await aclose()
