"""
bpmsg: Message algebra for belief propagation

Gaussian and categorical messages for belief-propagation and
expectation-propagation style inference.

Key components:
- messages: GaussianMessage (natural parameters) and DiscreteMessage
  (unnormalized log-probabilities) with product/quotient algebra
- algebra: Numerically stable log-domain primitives (logsumexp)
- api: Helpers for message-passing loops (products, convergence)
- core: Error kinds
"""

__version__ = "1.0.0"
__author__ = "bpmsg Team"

from bpmsg.core.errors import MessageError, InvalidParameter, DimensionMismatch, EmptyInput
from bpmsg.algebra.logspace import logsumexp, log_normalize, normalized_probabilities
from bpmsg.messages.gaussian import (
    GaussianMessage,
    absdiff,
    log_norm_product,
    log_norm_ratio,
)
from bpmsg.messages.discrete import DiscreteMessage, format_probabilities
from bpmsg.api.products import multiply_all, max_abs_difference, has_converged

__all__ = [
    # Errors
    "MessageError",
    "InvalidParameter",
    "DimensionMismatch",
    "EmptyInput",
    # Log-space
    "logsumexp",
    "log_normalize",
    "normalized_probabilities",
    # Gaussian
    "GaussianMessage",
    "absdiff",
    "log_norm_product",
    "log_norm_ratio",
    # Discrete
    "DiscreteMessage",
    "format_probabilities",
    # Loops
    "multiply_all",
    "max_abs_difference",
    "has_converged",
]
