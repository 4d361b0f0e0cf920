"""
Algebra module: log-domain numeric primitives.
"""

from bpmsg.algebra.logspace import logsumexp, log_normalize, normalized_probabilities

__all__ = [
    "logsumexp",
    "log_normalize",
    "normalized_probabilities",
]
