"""
bpmsg/api/products.py

Helpers for message-passing loops: folding many incoming messages into one
and measuring convergence between successive sweeps.
"""

from __future__ import annotations

from functools import reduce
from typing import Iterable, Sequence, TypeVar, Union

from bpmsg.core.errors import EmptyInput, InvalidParameter
from bpmsg.messages.discrete import DiscreteMessage
from bpmsg.messages.gaussian import GaussianMessage, absdiff

Message = TypeVar("Message", GaussianMessage, DiscreteMessage)


def multiply_all(messages: Iterable[Message]) -> Message:
    """
    Product of a non-empty collection of messages of one kind.

    Args:
        messages: Gaussian or discrete messages (not mixed)

    Returns:
        The product message

    Raises:
        EmptyInput: If no messages are given
        DimensionMismatch: If discrete messages differ in outcome count
    """
    msgs = list(messages)
    if not msgs:
        raise EmptyInput("multiply_all requires at least one message")
    kind = type(msgs[0])
    for m in msgs[1:]:
        if type(m) is not kind:
            raise InvalidParameter(
                f"Cannot multiply {kind.__name__} with {type(m).__name__}"
            )
    return reduce(lambda a, b: a * b, msgs)


def max_abs_difference(
    old: Sequence[GaussianMessage],
    new: Sequence[GaussianMessage],
) -> float:
    """Largest absdiff over paired messages of two sweeps."""
    if len(old) != len(new):
        raise InvalidParameter(
            f"Sweeps have different sizes: {len(old)} vs {len(new)}"
        )
    if not old:
        raise EmptyInput("max_abs_difference requires at least one message pair")
    return max(absdiff(a, b) for a, b in zip(old, new))


def has_converged(
    old: Union[GaussianMessage, Sequence[GaussianMessage]],
    new: Union[GaussianMessage, Sequence[GaussianMessage]],
    tol: float = 1e-6,
) -> bool:
    """True when every paired absdiff is below tol."""
    single_old = isinstance(old, GaussianMessage)
    single_new = isinstance(new, GaussianMessage)
    if single_old != single_new:
        raise InvalidParameter(
            "has_converged needs two messages or two sequences of messages"
        )
    if single_old:
        return absdiff(old, new) < tol
    return max_abs_difference(old, new) < tol
