"""
Hedge Layer CLI - Test Helpers

Stream builders and chunk sources shared by the test modules.
"""

import json
from typing import Any, Dict, Iterator, List


TEST_TOKEN = "hl_" + "a" * 40


def ui_line(message: Dict[str, Any]) -> str:
    """One UI message stream line."""
    return f"data: {json.dumps(message, ensure_ascii=False)}\n"


def data_line(code: str, payload: Any) -> str:
    """One data stream line."""
    return f"{code}:{json.dumps(payload, ensure_ascii=False)}\n"


def split_every(data: bytes, size: int) -> List[bytes]:
    """Split bytes into fixed-size chunks (may split characters)."""
    return [data[i:i + size] for i in range(0, len(data), size)]


class TrackingChunks:
    """Chunk source that records whether it was closed."""

    def __init__(self, chunks: List[bytes]):
        self._chunks = chunks
        self.closed = False

    def __iter__(self) -> Iterator[bytes]:
        return self

    def __next__(self) -> bytes:
        if not self._chunks:
            raise StopIteration
        return self._chunks.pop(0)

    def close(self):
        self.closed = True
