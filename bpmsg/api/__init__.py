"""
API module: helpers for message-passing loops.
"""

from bpmsg.api.products import multiply_all, max_abs_difference, has_converged

__all__ = ["multiply_all", "max_abs_difference", "has_converged"]
