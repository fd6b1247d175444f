"""
Hedge Layer CLI - Tool Call Tracking

Tool calls arrive in pieces:
1. Start: call id and tool name
2. Zero or more deltas with partial argument JSON
3. Ready: arguments final (UI message stream only)
4. Result: tool output; the call is done and forgotten

Calls are keyed by the server-supplied call id. Events for ids
that are not pending are ignored.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class PendingToolCall:
    """A tool call that has started but has no result yet."""
    call_id: str
    tool_name: str
    arguments_buffer: str = ""
    arguments: Any = None
    ready: bool = False

    def append(self, fragment: str):
        """Append a partial argument fragment."""
        self.arguments_buffer += fragment

    def finalize_arguments(self) -> Any:
        """
        Parse the accumulated argument text.

        Falls back to the raw text when it is not valid JSON.
        """
        try:
            return json.loads(self.arguments_buffer)
        except json.JSONDecodeError:
            return self.arguments_buffer


class ToolCallTracker:
    """
    Tracks in-flight tool calls for a single stream.

    Owned by one stream session; nothing is shared across streams.
    """

    def __init__(self):
        self._calls: Dict[str, PendingToolCall] = {}

    def start(self, call_id: str, tool_name: str) -> Optional[PendingToolCall]:
        """
        Begin tracking a call.

        A repeated start for an id that is still pending is ignored so
        a call cannot be reported twice.
        """
        if call_id in self._calls:
            return None
        call = PendingToolCall(call_id=call_id, tool_name=tool_name)
        self._calls[call_id] = call
        return call

    def append(self, call_id: str, fragment: str) -> Optional[PendingToolCall]:
        """Add argument text to a pending call."""
        call = self._calls.get(call_id)
        if call is None or call.ready:
            return None
        call.append(fragment)
        return call

    def mark_ready(
        self,
        call_id: str,
        arguments: Any = None,
        has_arguments: bool = False
    ) -> Optional[PendingToolCall]:
        """
        Finalize the arguments of a pending call.

        Returns the call only on the first transition to ready.
        """
        call = self._calls.get(call_id)
        if call is None or call.ready:
            return None
        call.arguments = arguments if has_arguments else call.finalize_arguments()
        call.ready = True
        return call

    def resolve(self, call_id: str) -> Optional[PendingToolCall]:
        """Remove and return a pending call once its result arrived."""
        return self._calls.pop(call_id, None)

    def get_call(self, call_id: str) -> Optional[PendingToolCall]:
        """Get a pending call by id."""
        return self._calls.get(call_id)

    def pending_ids(self) -> List[str]:
        """Ids of calls without a result, in start order."""
        return list(self._calls)

    def has_calls(self) -> bool:
        """Check if any calls are pending."""
        return len(self._calls) > 0

    def clear(self):
        """Drop every pending call."""
        self._calls.clear()
