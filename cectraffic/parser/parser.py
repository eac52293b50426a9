"""
Main traffic parser that coordinates line handling, tokenization and dispatch.
"""

import logging
from typing import Iterable, List, Optional, Dict, Any

from .bus import EventBus
from .events import CecEvent, LineEvent, ReadyEvent, PacketDispatcher
from .handlers import LineHandlerRegistry
from .tokenizer import TrafficTokenizer


logger = logging.getLogger(__name__)


class CecTrafficParser:
    """
    Turns adapter output lines into broadcast events.

    Every line is broadcast as a LineEvent, then run through the handler
    registry. The readiness handler emits a ReadyEvent; the traffic handler
    tokenizes the line and dispatches the resulting packet.
    """

    def __init__(self, bus: Optional[EventBus] = None, evaluate_all_handlers: bool = False):
        """
        Initialize the traffic parser.

        Args:
            bus: Event bus to broadcast on (a new one is created if omitted)
            evaluate_all_handlers: Evaluate every line handler, not only the first
        """
        self.bus = bus or EventBus()
        self.tokenizer = TrafficTokenizer()
        self.dispatcher = PacketDispatcher(self.bus.emit)
        self.registry = LineHandlerRegistry.default(
            on_ready=self._on_ready,
            on_traffic=self.process_traffic,
            evaluate_all=evaluate_all_handlers,
        )
        self.lines_processed = 0
        self.packets_processed = 0
        self.packets_unhandled = 0
        self.parse_errors = []

    def process_line(self, line: str):
        """Broadcast a line and run it through the handler registry."""
        self.lines_processed += 1
        self.bus.emit(LineEvent(line=line))
        self.registry.process(line)

    def process_lines(self, lines: Iterable[str]):
        for line in lines:
            self.process_line(line)

    def process_traffic(self, line: str) -> bool:
        """
        Parse a traffic line and dispatch its packet.

        Returns:
            False if the packet was not handled or could not be decoded
        """
        self.packets_processed += 1

        try:
            packet = self.tokenizer.parse_line(line)
            handled = self.dispatcher.dispatch(packet)
        except Exception as e:
            self.parse_errors.append({
                "line": line[:100],
                "error": str(e),
                "line_number": self.lines_processed,
            })
            logger.debug(f"Decode error on line {self.lines_processed}: {e}")
            handled = False

        if not handled:
            self.packets_unhandled += 1
        return handled

    def _on_ready(self, line: str):
        logger.debug("Adapter is waiting for input")
        self.bus.emit(ReadyEvent())

    def get_stats(self) -> Dict[str, Any]:
        """
        Get parsing statistics.

        Returns:
            Dictionary with parsing stats
        """
        return {
            "lines_processed": self.lines_processed,
            "packets_processed": self.packets_processed,
            "packets_unhandled": self.packets_unhandled,
            "parse_errors": len(self.parse_errors),
            "tokenizer_stats": self.tokenizer.get_stats(),
        }


def decode_lines(lines: Iterable[str], evaluate_all_handlers: bool = False) -> List[CecEvent]:
    """
    Decode a sequence of lines and return every broadcast event in order.

    Args:
        lines: Adapter output lines
        evaluate_all_handlers: Evaluate every line handler, not only the first

    Returns:
        List of events
    """
    events: List[CecEvent] = []
    parser = CecTrafficParser(evaluate_all_handlers=evaluate_all_handlers)
    parser.bus.subscribe_all(events.append)
    parser.process_lines(lines)
    return events
