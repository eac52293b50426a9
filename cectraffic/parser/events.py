"""
Event classes and packet dispatch for decoded CEC traffic.
"""

import logging
from typing import Any, Callable, ClassVar, Dict, List, Optional
from dataclasses import dataclass, field, asdict
from enum import Enum

from .tokenizer import Packet
from ..config.cec_data import Opcode, name_of

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Enumeration of broadcast event types."""

    # Stream events
    LINE = "line"
    READY = "ready"
    STOP = "stop"

    # Frame events
    PACKET = "packet"
    POLLING = "POLLING"

    # Specialized opcode events
    SET_OSD_NAME = "SET_OSD_NAME"
    ROUTING_CHANGE = "ROUTING_CHANGE"
    ACTIVE_SOURCE = "ACTIVE_SOURCE"
    REPORT_PHYSICAL_ADDRESS = "REPORT_PHYSICAL_ADDRESS"

    # Any other opcode found in the opcode table
    OPCODE = "opcode"


@dataclass
class CecEvent:
    """Base class for all broadcast events."""

    event_type: ClassVar[EventType]

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["event_type"] = self.event_type.value
        return data


@dataclass
class LineEvent(CecEvent):
    """Every line read from the adapter."""

    event_type: ClassVar[EventType] = EventType.LINE

    line: str = ""


@dataclass
class ReadyEvent(CecEvent):
    """The adapter is waiting for input."""

    event_type: ClassVar[EventType] = EventType.READY


@dataclass
class StopEvent(CecEvent):
    """The adapter process was stopped or closed its output."""

    event_type: ClassVar[EventType] = EventType.STOP


@dataclass
class PacketEvent(CecEvent):
    """Raw packet, emitted for every traffic line."""

    event_type: ClassVar[EventType] = EventType.PACKET

    packet: Packet = field(default_factory=Packet)


@dataclass
class PollingEvent(PacketEvent):
    """Frame with no opcode, sent to poll a logical address."""

    event_type: ClassVar[EventType] = EventType.POLLING


@dataclass
class OsdNameEvent(PacketEvent):
    """Device announced its on-screen-display name."""

    event_type: ClassVar[EventType] = EventType.SET_OSD_NAME

    name: str = ""


@dataclass
class RoutingChangeEvent(PacketEvent):
    """Active route moved between two physical addresses."""

    event_type: ClassVar[EventType] = EventType.ROUTING_CHANGE

    from_address: int = 0
    to_address: int = 0


@dataclass
class ActiveSourceEvent(PacketEvent):
    """Device at a physical address became the active source."""

    event_type: ClassVar[EventType] = EventType.ACTIVE_SOURCE

    address: int = 0


@dataclass
class ReportPhysicalAddressEvent(PacketEvent):
    """Device reported its physical address and, optionally, its device type."""

    event_type: ClassVar[EventType] = EventType.REPORT_PHYSICAL_ADDRESS

    address: int = 0
    device_type: Optional[int] = None


@dataclass
class OpcodeEvent(PacketEvent):
    """
    Any other opcode found in the opcode table.

    Consumers match on ``name`` (the symbolic opcode name) rather than
    subscribing per opcode.
    """

    event_type: ClassVar[EventType] = EventType.OPCODE

    name: str = ""
    args: List[Optional[int]] = field(default_factory=list)


def _is_byte(value: Optional[int]) -> bool:
    return value is not None and 0 <= value <= 0xFF


def _word(high: Optional[int], low: Optional[int]) -> Optional[int]:
    """Big-endian 16-bit value from two bytes, None if either is not a byte."""
    if not (_is_byte(high) and _is_byte(low)):
        return None
    return (high << 8) | low


class PacketDispatcher:
    """
    Maps a parsed packet to typed events.

    Every packet is broadcast as a PacketEvent first. Frames without an opcode
    produce a PollingEvent. Four opcodes have fixed-shape events; any other
    opcode in the table produces an OpcodeEvent carrying its symbolic name.
    """

    def __init__(self, emit: Callable[[CecEvent], None]):
        self.emit = emit
        self._handlers: Dict[int, Callable[[Packet], bool]] = {
            Opcode.SET_OSD_NAME: self._set_osd_name,
            Opcode.ROUTING_CHANGE: self._routing_change,
            Opcode.ACTIVE_SOURCE: self._active_source,
            Opcode.REPORT_PHYSICAL_ADDRESS: self._report_physical_address,
        }

    def dispatch(self, packet: Packet) -> bool:
        """
        Dispatch one packet.

        Args:
            packet: Packet produced by the tokenizer

        Returns:
            True if a polling, specialized or opcode event was emitted
        """
        self.emit(PacketEvent(packet=packet))

        if packet.is_polling:
            self.emit(PollingEvent(packet=packet))
            return True

        handler = self._handlers.get(packet.opcode)
        if handler is not None:
            # Short payloads are dropped without falling back to the table
            return handler(packet)

        name = name_of(packet.opcode)
        if name:
            self.emit(OpcodeEvent(packet=packet, name=name, args=list(packet.args or [])))
            return True

        logger.debug(f"Unhandled opcode {packet.opcode!r} in {packet.tokens}")
        return False

    def _set_osd_name(self, packet: Packet) -> bool:
        args = packet.args or []
        if len(args) < 1 or not all(_is_byte(byte) for byte in args):
            return False
        # CEC names are ASCII, one byte per character
        name = "".join(chr(byte) for byte in args)
        self.emit(OsdNameEvent(packet=packet, name=name))
        return True

    def _routing_change(self, packet: Packet) -> bool:
        args = packet.args or []
        if len(args) < 4:
            return False
        from_address = _word(args[0], args[1])
        to_address = _word(args[2], args[3])
        if from_address is None or to_address is None:
            return False
        self.emit(RoutingChangeEvent(packet=packet, from_address=from_address, to_address=to_address))
        return True

    def _active_source(self, packet: Packet) -> bool:
        args = packet.args or []
        if len(args) < 2:
            return False
        address = _word(args[0], args[1])
        if address is None:
            return False
        self.emit(ActiveSourceEvent(packet=packet, address=address))
        return True

    def _report_physical_address(self, packet: Packet) -> bool:
        args = packet.args or []
        if len(args) < 2:
            return False
        address = _word(args[0], args[1])
        if address is None:
            return False
        device_type = args[2] if len(args) > 2 else None
        self.emit(ReportPhysicalAddressEvent(packet=packet, address=address, device_type=device_type))
        return True
