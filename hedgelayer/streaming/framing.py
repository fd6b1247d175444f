"""
Hedge Layer CLI - Line Framing

Turns byte chunks with arbitrary boundaries into complete text lines.

Chunks may split a multi-byte character or a line anywhere. The
framer keeps two carry-overs between calls:
1. the incremental decoder state (undecoded trailing bytes)
2. the text of the last, not yet terminated, line
"""

import codecs
from typing import List

LINE_TERMINATOR = "\n"


class LineFramer:
    """
    Incremental decoder + line splitter for one stream.

    Example:
        >>> framer = LineFramer()
        >>> framer.feed(b'0:"Hi"\\n1:')
        ['0:"Hi"']
        >>> framer.feed(b'"x"\\n')
        ['1:"x"']
    """

    def __init__(self, encoding: str = "utf-8"):
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""
        self._finished = False
        self.discarded = ""

    @property
    def pending_text(self) -> str:
        """Text of the current unterminated line."""
        return self._buffer

    def feed(self, chunk: bytes) -> List[str]:
        """Decode a chunk and return every line it completes, in order."""
        if self._finished:
            raise RuntimeError("LineFramer.feed() called after finish()")
        if not chunk:
            return []
        self._buffer += self._decoder.decode(chunk, final=False)
        return self._drain()

    def finish(self) -> List[str]:
        """
        Flush the decoder at end of stream.

        Complete lines are still returned. A non-empty trailing fragment
        without a terminator is dropped and kept in ``discarded``.
        """
        if self._finished:
            return []
        self._finished = True
        self._buffer += self._decoder.decode(b"", final=True)
        lines = self._drain()
        self.discarded = self._buffer
        self._buffer = ""
        return lines

    def _drain(self) -> List[str]:
        if LINE_TERMINATOR not in self._buffer:
            return []
        *lines, self._buffer = self._buffer.split(LINE_TERMINATOR)
        return lines
