"""
bpmsg/messages/gaussian.py

One-dimensional Gaussian messages in natural (information) form.

A message stores
  - tau: precision-weighted mean (mean * precision)
  - rho: precision (1 / variance)

In this parameterization the product of two densities is addition of
natural parameters and the quotient is subtraction, so neither operation
ever divides. rho == 0 is a valid improper message (zero information,
infinite variance); it is handled by explicit conventions below and never
by relying on 0/0.

Normalization constants are computed from the Gaussian log-partition

    A(tau, rho) = 1/2 log(2 pi) - 1/2 log(rho) + tau^2 / (2 rho)

so that N(x; tau, rho) = exp(tau x - rho x^2 / 2 - A(tau, rho)).
"""

from __future__ import annotations

from dataclasses import InitVar, dataclass

import numpy as np

from bpmsg.core.errors import InvalidParameter

_LOG_2PI = float(np.log(2.0 * np.pi))


def _log_partition(tau: float, rho: float) -> float:
    return 0.5 * _LOG_2PI - 0.5 * float(np.log(rho)) + 0.5 * tau * tau / rho


@dataclass(frozen=True)
class GaussianMessage:
    """
    A 1D Gaussian message (tau, rho).

    Attributes:
        tau: Precision times mean
        rho: Precision; must be non-negative

    Construction with rho < 0 raises InvalidParameter. Only divide() may
    produce a negative-precision message (see divide()).
    """
    tau: float
    rho: float
    check: InitVar[bool] = True

    def __post_init__(self, check: bool):
        object.__setattr__(self, "tau", float(self.tau))
        object.__setattr__(self, "rho", float(self.rho))
        if not (np.isfinite(self.tau) and np.isfinite(self.rho)):
            raise InvalidParameter(
                f"Natural parameters must be finite, got tau={self.tau}, rho={self.rho}"
            )
        if check and not self.rho >= 0.0:
            raise InvalidParameter(f"Precision must be non-negative, got rho={self.rho}")

    @staticmethod
    def standard() -> "GaussianMessage":
        """The standard normal message: mean 0, variance 1."""
        return GaussianMessage(0.0, 1.0)

    @staticmethod
    def improper() -> "GaussianMessage":
        """The zero-information message (rho == 0)."""
        return GaussianMessage(0.0, 0.0)

    @staticmethod
    def from_mean_variance(mean: float, variance: float) -> "GaussianMessage":
        """
        Build a message from moment parameters.

        variance == inf gives the improper message (0, 0). variance == 0
        would need infinite precision and is rejected.

        Raises:
            InvalidParameter: If variance is negative, zero, NaN, or so small
                that its inverse overflows
        """
        variance = float(variance)
        if not variance > 0.0:
            raise InvalidParameter(f"Variance must be positive, got variance={variance}")
        if np.isposinf(variance):
            return GaussianMessage.improper()
        rho = 1.0 / variance
        if not np.isfinite(rho):
            raise InvalidParameter(f"Variance {variance} is too small to invert")
        return GaussianMessage(float(mean) * rho, rho)

    @property
    def is_proper(self) -> bool:
        return self.rho > 0.0

    @property
    def mean(self) -> float:
        """tau / rho; NaN or +-inf when rho == 0."""
        with np.errstate(divide="ignore", invalid="ignore"):
            return float(np.float64(self.tau) / np.float64(self.rho))

    @property
    def variance(self) -> float:
        """1 / rho; +inf when rho == 0."""
        with np.errstate(divide="ignore"):
            return float(np.float64(1.0) / np.float64(self.rho))

    @property
    def stdev(self) -> float:
        with np.errstate(invalid="ignore"):
            return float(np.sqrt(self.variance))

    def __mul__(self, other: "GaussianMessage") -> "GaussianMessage":
        if not isinstance(other, GaussianMessage):
            return NotImplemented
        return multiply(self, other)

    def __truediv__(self, other: "GaussianMessage") -> "GaussianMessage":
        if not isinstance(other, GaussianMessage):
            return NotImplemented
        return divide(self, other)

    def __str__(self) -> str:
        if self.rho == 0.0:
            return "μ = 0, σ = Inf"
        return f"μ = {self.mean}, σ = {self.stdev}"


def multiply(g1: GaussianMessage, g2: GaussianMessage) -> GaussianMessage:
    """Product of two messages: natural parameters add."""
    return GaussianMessage(g1.tau + g2.tau, g1.rho + g2.rho)


def divide(g1: GaussianMessage, g2: GaussianMessage) -> GaussianMessage:
    """
    Quotient of two messages: natural parameters subtract.

    The result may carry negative precision when g2 is more precise than
    g1 (e.g. an expectation-propagation cavity). The non-negativity check
    is skipped; use is_proper to test the result.
    """
    return GaussianMessage(g1.tau - g2.tau, g1.rho - g2.rho, check=False)


def absdiff(g1: GaussianMessage, g2: GaussianMessage) -> float:
    """
    Convergence metric: max(|tau1 - tau2|, sqrt(|rho1 - rho2|)).
    """
    tau_diff = abs(g1.tau - g2.tau)
    rho_diff = float(np.sqrt(abs(g1.rho - g2.rho)))
    return max(tau_diff, rho_diff)


def log_norm_product(g1: GaussianMessage, g2: GaussianMessage) -> float:
    """
    Log of Z in N(x; g1) * N(x; g2) = Z * N(x; g1 * g2).

    Equals log N(mean1; mean2, var1 + var2). An improper operand carries no
    information and yields 0.

    Raises:
        InvalidParameter: If either operand has negative precision
    """
    if g1.rho < 0.0 or g2.rho < 0.0:
        raise InvalidParameter(
            f"Product normalization undefined for negative precision: rho1={g1.rho}, rho2={g2.rho}"
        )
    if g1.rho == 0.0 or g2.rho == 0.0:
        return 0.0

    g = multiply(g1, g2)
    return (
        _log_partition(g.tau, g.rho)
        - _log_partition(g1.tau, g1.rho)
        - _log_partition(g2.tau, g2.rho)
    )


def log_norm_ratio(g1: GaussianMessage, g2: GaussianMessage) -> float:
    """
    Log of Z in N(x; g1) / N(x; g2) = Z * N(x; g1 / g2).

    An improper operand yields 0, as does a quotient with zero precision.

    Raises:
        InvalidParameter: If either operand has negative precision, or if
            g2 is strictly more precise than g1 (the quotient is not
            normalizable)
    """
    if g1.rho < 0.0 or g2.rho < 0.0:
        raise InvalidParameter(
            f"Ratio normalization undefined for negative precision: rho1={g1.rho}, rho2={g2.rho}"
        )
    if g1.rho == 0.0 or g2.rho == 0.0:
        return 0.0

    g = divide(g1, g2)
    if g.rho == 0.0:
        return 0.0
    if g.rho < 0.0:
        raise InvalidParameter(
            f"Quotient has negative precision {g.rho}; its normalization constant is undefined"
        )
    return (
        _log_partition(g.tau, g.rho)
        - _log_partition(g1.tau, g1.rho)
        + _log_partition(g2.tau, g2.rho)
    )
