"""
HDMI-CEC data mappings.

This module contains the read-only lookup tables used when decoding bus
traffic: opcodes, logical addresses and device types as defined by the
CEC 1.4 specification and reported by the adapter process.
"""

from typing import Dict, Optional, Union
from enum import IntEnum


class Opcode(IntEnum):
    """CEC message opcodes."""

    # One touch play / routing
    ACTIVE_SOURCE = 0x82
    IMAGE_VIEW_ON = 0x04
    TEXT_VIEW_ON = 0x0D
    INACTIVE_SOURCE = 0x9D
    REQUEST_ACTIVE_SOURCE = 0x85
    ROUTING_CHANGE = 0x80
    ROUTING_INFORMATION = 0x81
    SET_STREAM_PATH = 0x86

    # Standby
    STANDBY = 0x36

    # One touch record
    RECORD_OFF = 0x0B
    RECORD_ON = 0x09
    RECORD_STATUS = 0x0A
    RECORD_TV_SCREEN = 0x0F

    # Timer programming
    CLEAR_ANALOGUE_TIMER = 0x33
    CLEAR_DIGITAL_TIMER = 0x99
    CLEAR_EXTERNAL_TIMER = 0xA1
    SET_ANALOGUE_TIMER = 0x34
    SET_DIGITAL_TIMER = 0x97
    SET_EXTERNAL_TIMER = 0xA2
    SET_TIMER_PROGRAM_TITLE = 0x67
    TIMER_CLEARED_STATUS = 0x43
    TIMER_STATUS = 0x35

    # System information
    CEC_VERSION = 0x9E
    GET_CEC_VERSION = 0x9F
    GIVE_PHYSICAL_ADDRESS = 0x83
    GET_MENU_LANGUAGE = 0x91
    REPORT_PHYSICAL_ADDRESS = 0x84
    SET_MENU_LANGUAGE = 0x32

    # Deck control
    DECK_CONTROL = 0x42
    DECK_STATUS = 0x1B
    GIVE_DECK_STATUS = 0x1A
    PLAY = 0x41

    # Tuner control
    GIVE_TUNER_DEVICE_STATUS = 0x08
    SELECT_ANALOGUE_SERVICE = 0x92
    SELECT_DIGITAL_SERVICE = 0x93
    TUNER_DEVICE_STATUS = 0x07
    TUNER_STEP_DECREMENT = 0x06
    TUNER_STEP_INCREMENT = 0x05

    # Vendor specific
    DEVICE_VENDOR_ID = 0x87
    GIVE_DEVICE_VENDOR_ID = 0x8C
    VENDOR_COMMAND = 0x89
    VENDOR_COMMAND_WITH_ID = 0xA0
    VENDOR_REMOTE_BUTTON_DOWN = 0x8A
    VENDOR_REMOTE_BUTTON_UP = 0x8B

    # OSD
    SET_OSD_STRING = 0x64
    GIVE_OSD_NAME = 0x46
    SET_OSD_NAME = 0x47

    # Menu control
    MENU_REQUEST = 0x8D
    MENU_STATUS = 0x8E

    # Remote control passthrough
    USER_CONTROL_PRESSED = 0x44
    USER_CONTROL_RELEASE = 0x45

    # Power status
    GIVE_DEVICE_POWER_STATUS = 0x8F
    REPORT_POWER_STATUS = 0x90

    # General protocol
    FEATURE_ABORT = 0x00
    ABORT = 0xFF

    # System audio control
    GIVE_AUDIO_STATUS = 0x71
    GIVE_SYSTEM_AUDIO_MODE_STATUS = 0x7D
    REPORT_AUDIO_STATUS = 0x7A
    REPORT_SHORT_AUDIO_DESCRIPTORS = 0xA3
    REQUEST_SHORT_AUDIO_DESCRIPTORS = 0xA4
    SET_SYSTEM_AUDIO_MODE = 0x72
    SYSTEM_AUDIO_MODE_REQUEST = 0x70
    SYSTEM_AUDIO_MODE_STATUS = 0x7E
    SET_AUDIO_RATE = 0x9A

    # Audio return channel
    INITIATE_ARC = 0xC0
    REPORT_ARC_INITIATED = 0xC1
    REPORT_ARC_TERMINATED = 0xC2
    REQUEST_ARC_INITIATION = 0xC3
    REQUEST_ARC_TERMINATION = 0xC4
    TERMINATE_ARC = 0xC5

    # Capability discovery and control
    CDC_MESSAGE = 0xF8


class LogicalAddress(IntEnum):
    """4-bit device role identifiers on the bus."""

    TV = 0x0
    RECORDING_DEVICE_1 = 0x1
    RECORDING_DEVICE_2 = 0x2
    TUNER_1 = 0x3
    PLAYBACK_DEVICE_1 = 0x4
    AUDIO_SYSTEM = 0x5
    TUNER_2 = 0x6
    TUNER_3 = 0x7
    PLAYBACK_DEVICE_2 = 0x8
    RECORDING_DEVICE_3 = 0x9
    TUNER_4 = 0xA
    PLAYBACK_DEVICE_3 = 0xB
    RESERVED_1 = 0xC
    RESERVED_2 = 0xD
    FREE_USE = 0xE
    BROADCAST = 0xF


class DeviceType(IntEnum):
    """Primary device types carried by REPORT_PHYSICAL_ADDRESS."""

    TV = 0
    RECORDING_DEVICE = 1
    RESERVED = 2
    TUNER = 3
    PLAYBACK_DEVICE = 4
    AUDIO_SYSTEM = 5


# Reverse lookup for the opcode table
OPCODE_NAMES: Dict[int, str] = {opcode.value: opcode.name for opcode in Opcode}


def name_of(opcode: Optional[int]) -> Optional[str]:
    """Get the symbolic name for an opcode, or None if it is not in the table."""
    if opcode is None:
        return None
    return OPCODE_NAMES.get(opcode)


def get_logical_address_name(address: Union[int, str, None]) -> str:
    """Get a display name for a logical address given as an int or a hex digit."""
    if address is None:
        return "Unknown"
    try:
        value = int(address, 16) if isinstance(address, str) else int(address)
        return LogicalAddress(value).name
    except ValueError:
        return f"Unknown ({address})"


def get_device_type_name(device_type: Optional[int]) -> str:
    """Get a display name for a device type."""
    if device_type is None:
        return "Unknown"
    try:
        return DeviceType(device_type).name
    except ValueError:
        return f"Unknown ({device_type})"


def format_physical_address(address: int) -> str:
    """Format a 16-bit physical address in the usual dotted notation (1.0.0.0)."""
    return ".".join(str((address >> shift) & 0xF) for shift in (12, 8, 4, 0))
