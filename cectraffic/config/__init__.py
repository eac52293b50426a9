"""
Configuration module for the CEC traffic decoder.

Provides the opcode lookup tables and settings management for the adapter
process and the line decoder.
"""

from .settings import (
    ApplicationSettings,
    ClientSettings,
    DecoderSettings,
    get_settings,
    reload_settings,
    settings
)
from .cec_data import Opcode, LogicalAddress, DeviceType, name_of

__all__ = [
    "ApplicationSettings",
    "ClientSettings",
    "DecoderSettings",
    "get_settings",
    "reload_settings",
    "settings",
    "Opcode",
    "LogicalAddress",
    "DeviceType",
    "name_of"
]
