"""
Traffic line tokenizer for adapter diagnostic output.
"""

import re
import logging
from typing import List, Optional, Dict, Any
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class Packet:
    """
    Represents one decoded bus frame.

    ``source`` and ``target`` are the raw hex characters of the header token,
    not their numeric values. A packet with one token or less is a polling
    frame.
    """

    tokens: Optional[List[str]] = None
    source: Optional[str] = None
    target: Optional[str] = None
    opcode: Optional[int] = None
    args: Optional[List[Optional[int]]] = None

    @property
    def is_polling(self) -> bool:
        """Check if the frame carries no opcode."""
        return self.tokens is None or len(self.tokens) <= 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tokens": self.tokens,
            "source": self.source,
            "target": self.target,
            "opcode": self.opcode,
            "args": self.args,
        }


class TrafficTokenizer:
    """
    Tokenizes TRAFFIC lines from the adapter process.

    Lines look like ``TRAFFIC: [   37491]\\t>> 04:82:10:00``: everything after
    the closing bracket and tab is the command region, whose first word is the
    direction marker and whose remainder is the colon-separated hex frame.
    """

    COMMAND_MARKER = "]\t"
    HEX_BYTE = re.compile(r"[0-9A-Fa-f]{1,2}")

    def __init__(self):
        self.line_count = 0
        self.error_count = 0

    def parse_line(self, line: str) -> Packet:
        """
        Parse a single traffic line into a packet.

        Args:
            line: Raw traffic line

        Returns:
            Packet, degenerate if the line carries one token or less
        """
        self.line_count += 1

        # A missing marker leaves the region starting at offset 1
        command = line[line.find(self.COMMAND_MARKER) + len(self.COMMAND_MARKER):]
        # Drop the direction marker ("<<" or ">>")
        command = command[command.find(" ") + 1:]

        tokens = command.split(":")
        packet = Packet(tokens=tokens)

        if len(tokens) > 0:
            header = tokens[0]
            packet.source = header[0] if len(header) > 0 else None
            packet.target = header[1] if len(header) > 1 else None

        if len(tokens) > 1:
            packet.opcode = self._safe_hex(tokens[1])
            packet.args = [self._safe_hex(token) for token in tokens[2:]]

        logger.debug(f"Parsed traffic line {self.line_count}: {tokens}")
        return packet

    def _safe_hex(self, token: str) -> Optional[int]:
        """Parse a one-byte hex token, returning None for anything else."""
        if self.HEX_BYTE.fullmatch(token):
            return int(token, 16)

        self.error_count += 1
        logger.warning(f"Undecodable hex token {token!r} on line {self.line_count}")
        return None

    def get_stats(self) -> Dict[str, Any]:
        """Get tokenizer statistics."""
        return {
            "lines_processed": self.line_count,
            "errors": self.error_count,
            "error_rate": self.error_count / max(1, self.line_count),
        }
