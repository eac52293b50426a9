"""
Adapter streaming package.

This package provides:
- Line framing for chunked adapter output
- The adapter process wrapper and command encoding
"""

from .buffer import LineFramer
from .client import CecClient, CecClientError, encode_command

__all__ = ["LineFramer", "CecClient", "CecClientError", "encode_command"]
