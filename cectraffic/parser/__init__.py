"""
Traffic parser module for decoding adapter diagnostic lines.
"""

from .tokenizer import Packet, TrafficTokenizer
from .events import EventType, CecEvent, PacketDispatcher
from .handlers import LineHandler, LineHandlerRegistry
from .bus import EventBus
from .parser import CecTrafficParser, decode_lines

__all__ = [
    "Packet",
    "TrafficTokenizer",
    "EventType",
    "CecEvent",
    "PacketDispatcher",
    "LineHandler",
    "LineHandlerRegistry",
    "EventBus",
    "CecTrafficParser",
    "decode_lines",
]
