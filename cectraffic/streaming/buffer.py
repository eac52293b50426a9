"""
Line framing for chunked adapter output.

Turns arbitrarily split text or byte chunks into complete, ordered lines.
"""

import codecs
import logging
from typing import Callable, List, Optional, Union, Dict, Any

logger = logging.getLogger(__name__)


class LineFramer:
    """
    Accumulates chunks and emits each line once it is complete.

    A line is complete when a newline arrives or the stream ends. The newline
    itself is dropped; a trailing carriage return is kept. One framer owns the
    backlog of one stream.
    """

    def __init__(
        self,
        on_line: Optional[Callable[[str], None]] = None,
        encoding: str = "utf-8",
    ):
        """
        Initialize line framer.

        Args:
            on_line: Callback invoked with each complete line
            encoding: Encoding used when chunks arrive as bytes
        """
        self.on_line = on_line
        self._backlog = ""
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._closed = False

        # Statistics
        self._chunks_received = 0
        self._lines_emitted = 0

    @property
    def backlog(self) -> str:
        """Text received but not yet terminated by a newline."""
        return self._backlog

    def feed(self, chunk: Union[str, bytes]) -> List[str]:
        """
        Add a chunk and emit every line it completes.

        Args:
            chunk: Text or bytes from the stream

        Returns:
            Lines completed by this chunk, in order
        """
        if self._closed:
            raise ValueError("Cannot feed a closed LineFramer")

        if isinstance(chunk, bytes):
            chunk = self._decoder.decode(chunk)

        self._chunks_received += 1
        self._backlog += chunk

        lines = []
        n = self._backlog.find("\n")
        while n >= 0:
            lines.append(self._backlog[:n])
            self._backlog = self._backlog[n + 1:]
            n = self._backlog.find("\n")

        for line in lines:
            self._emit(line)
        return lines

    def close(self) -> List[str]:
        """
        Signal end of stream and emit the unterminated remainder, if any.

        Returns:
            The final line, or an empty list if nothing was pending
        """
        if self._closed:
            return []
        self._closed = True

        self._backlog += self._decoder.decode(b"", final=True)
        if not self._backlog:
            return []

        line, self._backlog = self._backlog, ""
        self._emit(line)
        return [line]

    def _emit(self, line: str):
        self._lines_emitted += 1
        if self.on_line:
            self.on_line(line)

    def get_stats(self) -> Dict[str, Any]:
        """Get framer statistics."""
        return {
            "chunks_received": self._chunks_received,
            "lines_emitted": self._lines_emitted,
            "backlog_size": len(self._backlog),
            "closed": self._closed,
        }
