"""
bpmsg/core/errors.py

Error kinds raised by message construction and message algebra.

All errors are caller misuse and subclass ValueError, so they surface
immediately and are never recovered inside the library.
"""

from __future__ import annotations


class MessageError(ValueError):
    """Base class for message algebra errors."""


class InvalidParameter(MessageError):
    """A precision, variance or probability argument is out of range."""


class DimensionMismatch(MessageError):
    """Two discrete messages have different outcome counts."""

    def __init__(self, n_left: int, n_right: int):
        super().__init__(
            f"Discrete message dimension mismatch: {n_left} outcomes vs {n_right} outcomes"
        )
        self.n_left = n_left
        self.n_right = n_right


class EmptyInput(MessageError):
    """A reduction was asked to operate on zero values."""
