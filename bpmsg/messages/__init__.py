"""
Messages module: Gaussian and discrete message types and their algebra.
"""

from bpmsg.messages.gaussian import (
    GaussianMessage,
    absdiff,
    log_norm_product,
    log_norm_ratio,
)
from bpmsg.messages.discrete import DiscreteMessage, format_probabilities

__all__ = [
    "GaussianMessage",
    "absdiff",
    "log_norm_product",
    "log_norm_ratio",
    "DiscreteMessage",
    "format_probabilities",
]
