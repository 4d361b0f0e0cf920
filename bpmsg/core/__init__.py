"""
Core module: error kinds.
"""

from bpmsg.core.errors import MessageError, InvalidParameter, DimensionMismatch, EmptyInput

__all__ = ["MessageError", "InvalidParameter", "DimensionMismatch", "EmptyInput"]
