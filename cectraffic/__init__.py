"""
CEC traffic decoder.

Decodes the diagnostic output of a CEC bus adapter process into packets and
typed bus events.
"""

__version__ = "0.1.0"
