"""
bpmsg/algebra/logspace.py

Numerically stable log-domain primitives.

All reductions shift by the maximum entry before exponentiating, so that
large positive inputs never overflow and a shared offset across all
entries cancels exactly:

    logsumexp(x) = m + log(sum_i exp(x_i - m)),   m = max_i x_i
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from bpmsg.core.errors import EmptyInput, InvalidParameter

ArrayLike = Union[Sequence[float], np.ndarray]


def _as_vector(values: ArrayLike) -> np.ndarray:
    x = np.asarray(values, dtype=np.float64)
    if x.ndim != 1:
        x = x.reshape(-1)
    if x.size == 0:
        raise EmptyInput("logsumexp requires at least one value")
    return x


def logsumexp(values: ArrayLike) -> float:
    """
    Numerically stable log(sum(exp(values))).

    Args:
        values: Non-empty sequence of log-domain values

    Returns:
        The log of the sum of exponentials. -inf only when every input
        is -inf; +inf when any input is +inf.

    Raises:
        EmptyInput: If values is empty
    """
    x = _as_vector(values)
    m = np.max(x)
    # Guard against -inf/+inf maxima, where x - m is undefined
    if not np.isfinite(m):
        return float(m)
    return float(m + np.log(np.sum(np.exp(x - m))))


def log_normalize(values: ArrayLike) -> np.ndarray:
    """Shift log-domain values so that their logsumexp is zero."""
    x = _as_vector(values)
    z = logsumexp(x)
    if np.isneginf(z):
        raise InvalidParameter("Cannot normalize: every entry has zero mass")
    return x - z


def normalized_probabilities(values: ArrayLike) -> np.ndarray:
    """
    Convert unnormalized log-probabilities to a probability vector.

    Uses the max-shifted exponentials directly (rather than exp(x - logsumexp))
    so that equal entries map to exactly 1/n.
    """
    x = _as_vector(values)
    if np.any(np.isnan(x)):
        raise InvalidParameter("Cannot normalize: an entry is NaN")
    m = np.max(x)
    if np.isneginf(m):
        raise InvalidParameter("Cannot normalize: every entry has zero mass")
    if np.isposinf(m):
        raise InvalidParameter("Cannot normalize: an entry has infinite mass")
    w = np.exp(x - m)
    return w / np.sum(w)
