"""
bpmsg/messages/discrete.py

Categorical messages over the outcomes 0..n-1, stored as unnormalized
log-probabilities.

The probability of outcome i is exp(log_p[i]) / sum_j exp(log_p[j]).
Normalization is deferred: multiply/divide are elementwise +/- in log
space and never renormalize. The outcome count n is fixed at
construction; every binary operation checks it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

from bpmsg.algebra.logspace import log_normalize, logsumexp, normalized_probabilities
from bpmsg.core.errors import DimensionMismatch, InvalidParameter


@dataclass(frozen=True, eq=False)
class DiscreteMessage:
    """
    A categorical message in the log domain.

    Attributes:
        log_p: Read-only 1D float64 array of unnormalized log-probabilities
    """
    log_p: np.ndarray

    def __post_init__(self):
        log_p = np.array(self.log_p, dtype=np.float64)
        if log_p.ndim != 1:
            raise InvalidParameter(f"log_p must be one-dimensional, got shape {log_p.shape}")
        if log_p.size == 0:
            raise InvalidParameter("A discrete message needs at least one outcome")
        if np.any(np.isnan(log_p)):
            raise InvalidParameter(f"log_p must not contain NaN, got {log_p.tolist()}")
        log_p.flags.writeable = False
        object.__setattr__(self, "log_p", log_p)

    @staticmethod
    def uniform(n: int) -> "DiscreteMessage":
        """Uniform message over n outcomes (all log-probabilities zero)."""
        if n < 1:
            raise InvalidParameter(f"A discrete message needs at least one outcome, got n={n}")
        return DiscreteMessage(np.zeros(n, dtype=np.float64))

    @staticmethod
    def from_probabilities(probs: Union[Sequence[float], np.ndarray]) -> "DiscreteMessage":
        """
        Build a message from non-negative (not necessarily normalized) weights.

        Zero weights map to -inf.
        """
        p = np.asarray(probs, dtype=np.float64)
        if np.any(p < 0.0) or np.any(np.isnan(p)):
            raise InvalidParameter(f"Probabilities must be non-negative, got {p.tolist()}")
        with np.errstate(divide="ignore"):
            return DiscreteMessage(np.log(p))

    @property
    def n(self) -> int:
        """Number of outcomes."""
        return int(self.log_p.shape[0])

    def __len__(self) -> int:
        return self.n

    def probabilities(self) -> np.ndarray:
        """Normalized probabilities; non-negative and summing to 1."""
        return normalized_probabilities(self.log_p)

    def log_normalizer(self) -> float:
        """log sum_i exp(log_p[i])."""
        return logsumexp(self.log_p)

    def normalized(self) -> "DiscreteMessage":
        """Equivalent message whose log_p has logsumexp zero."""
        return DiscreteMessage(log_normalize(self.log_p))

    def __mul__(self, other: "DiscreteMessage") -> "DiscreteMessage":
        if not isinstance(other, DiscreteMessage):
            return NotImplemented
        return multiply(self, other)

    def __truediv__(self, other: "DiscreteMessage") -> "DiscreteMessage":
        if not isinstance(other, DiscreteMessage):
            return NotImplemented
        return divide(self, other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DiscreteMessage):
            return NotImplemented
        return self.n == other.n and bool(np.array_equal(self.log_p, other.log_p))

    def __hash__(self) -> int:
        # +0.0 folds -0.0 into 0.0, matching array_equal
        return hash(tuple((self.log_p + 0.0).tolist()))

    def __repr__(self) -> str:
        return f"DiscreteMessage{{{self.n}}}({self.log_p.tolist()})"

    def __str__(self) -> str:
        return format_probabilities(self)


def _check_dims(p: DiscreteMessage, q: DiscreteMessage) -> None:
    if p.n != q.n:
        raise DimensionMismatch(p.n, q.n)


def multiply(p: DiscreteMessage, q: DiscreteMessage) -> DiscreteMessage:
    """Pointwise product of the mass functions: log_p + log_q."""
    _check_dims(p, q)
    with np.errstate(invalid="ignore"):
        log_p = p.log_p + q.log_p
    return DiscreteMessage(log_p)


def divide(p: DiscreteMessage, q: DiscreteMessage) -> DiscreteMessage:
    """Pointwise quotient of the mass functions: log_p - log_q."""
    _check_dims(p, q)
    with np.errstate(invalid="ignore"):
        log_p = p.log_p - q.log_p
    return DiscreteMessage(log_p)


def format_probabilities(p: DiscreteMessage, digits: int = 4) -> str:
    """Render normalized probabilities, e.g. ' P = [0.5, 0.5]'."""
    probs = p.probabilities()
    return " P = [" + ", ".join(str(round(float(x), digits)) for x in probs) + "]"
