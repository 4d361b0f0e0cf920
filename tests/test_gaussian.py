"""
Tests for Gaussian messages.
"""

import numpy as np
import pytest
from scipy import integrate, stats

from bpmsg.core.errors import InvalidParameter
from bpmsg.messages import gaussian
from bpmsg.messages.gaussian import (
    GaussianMessage,
    absdiff,
    log_norm_product,
    log_norm_ratio,
)


def _reference_log_norm_product(ma, va, mb, vb):
    """log of the integral of N(x; ma, va) N(x; mb, vb), by quadrature."""
    lo = min(ma, mb) - 20.0
    hi = max(ma, mb) + 20.0
    z, _ = integrate.quad(
        lambda x: stats.norm.pdf(x, ma, np.sqrt(va)) * stats.norm.pdf(x, mb, np.sqrt(vb)),
        lo,
        hi,
        points=[ma, mb],
        limit=200,
        epsabs=1e-12,
        epsrel=1e-10,
    )
    return np.log(z)


class TestConstruction:
    def test_natural_parameters(self):
        g = GaussianMessage(1.0, 2.0)
        assert g.tau == 1.0
        assert g.rho == 2.0

    def test_negative_precision_raises(self):
        with pytest.raises(InvalidParameter):
            GaussianMessage(0.0, -1.0)

    def test_nan_precision_raises(self):
        with pytest.raises(InvalidParameter):
            GaussianMessage(0.0, float("nan"))

    def test_invalid_parameter_is_value_error(self):
        with pytest.raises(ValueError):
            GaussianMessage(0.0, -0.5)

    def test_zero_precision_is_valid(self):
        g = GaussianMessage(0.0, 0.0)
        assert g.rho == 0.0
        assert not g.is_proper

    def test_standard(self):
        assert GaussianMessage.standard() == GaussianMessage(0.0, 1.0)

    def test_from_mean_variance(self):
        g = GaussianMessage.from_mean_variance(1.0, 2.0)
        assert g.rho == pytest.approx(0.5)
        assert g.tau == pytest.approx(0.5)
        assert g.mean == pytest.approx(1.0)
        assert g.variance == pytest.approx(2.0)

    def test_from_mean_variance_negative_raises(self):
        with pytest.raises(InvalidParameter):
            GaussianMessage.from_mean_variance(0.0, -1.0)

    def test_from_mean_variance_zero_raises(self):
        with pytest.raises(InvalidParameter):
            GaussianMessage.from_mean_variance(3.0, 0.0)

    def test_from_mean_variance_tiny_variance_raises(self):
        with pytest.raises(InvalidParameter):
            GaussianMessage.from_mean_variance(0.0, 1e-310)

    @pytest.mark.parametrize(
        "tau,rho",
        [(0.0, np.inf), (np.nan, 1.0), (np.inf, 1.0), (-np.inf, 0.0)],
    )
    def test_non_finite_parameters_raise(self, tau, rho):
        with pytest.raises(InvalidParameter):
            GaussianMessage(tau, rho)

    def test_from_mean_variance_infinite_is_improper(self):
        g = GaussianMessage.from_mean_variance(3.0, np.inf)
        assert g == GaussianMessage.improper()

    def test_immutable(self):
        g = GaussianMessage(0.0, 1.0)
        with pytest.raises(AttributeError):
            g.rho = 2.0


class TestMoments:
    @pytest.mark.parametrize("tau,rho", [(1.0, 2.0), (-3.5, 0.25), (0.0, 7.0), (1e6, 1e-3)])
    def test_mean_variance(self, tau, rho):
        g = GaussianMessage(tau, rho)
        assert g.mean == pytest.approx(tau / rho)
        assert g.variance == pytest.approx(1.0 / rho)

    def test_examples(self):
        assert GaussianMessage(1, 2).mean == 0.5
        assert GaussianMessage(1, 2).variance == 0.5

    def test_improper_variance_is_infinite(self):
        assert GaussianMessage(0.0, 0.0).variance == np.inf

    def test_improper_mean_is_not_finite(self):
        assert np.isnan(GaussianMessage(0.0, 0.0).mean)
        assert np.isinf(GaussianMessage(1.0, 0.0).mean)


class TestAbsDiff:
    def test_examples(self):
        assert absdiff(GaussianMessage(0, 1), GaussianMessage(0, 2)) == 1.0
        assert absdiff(GaussianMessage(0, 1), GaussianMessage(0, 3)) == pytest.approx(np.sqrt(2.0))

    def test_tau_dominates(self):
        assert absdiff(GaussianMessage(5, 1), GaussianMessage(2, 1)) == 3.0

    def test_symmetric_and_zero_on_self(self):
        a = GaussianMessage(0.3, 1.7)
        b = GaussianMessage(-1.2, 0.4)
        assert absdiff(a, b) == absdiff(b, a)
        assert absdiff(a, a) == 0.0


class TestAlgebra:
    def test_standard_squared(self):
        g = GaussianMessage.from_mean_variance(0.0, 1.0)
        h = g * g
        assert h.rho == 2.0
        assert h.tau == 0.0
        assert h.mean == 0.0
        assert h.variance == 0.5

    def test_multiply_adds_natural_parameters(self):
        a = GaussianMessage(1.0, 2.0)
        b = GaussianMessage(-0.5, 3.0)
        assert gaussian.multiply(a, b) == GaussianMessage(0.5, 5.0)

    def test_divide_subtracts_natural_parameters(self):
        a = GaussianMessage(1.0, 2.0)
        b = GaussianMessage(-0.5, 0.5)
        assert gaussian.divide(a, b) == GaussianMessage(1.5, 1.5)

    @pytest.mark.parametrize(
        "a,b",
        [
            (GaussianMessage(0.0, 1.0), GaussianMessage(0.0, 1.0)),
            (GaussianMessage(1.3, 0.2), GaussianMessage(-4.0, 9.0)),
            (GaussianMessage(2.0, 0.0), GaussianMessage(0.1, 0.7)),
        ],
    )
    def test_divide_undoes_multiply(self, a, b):
        c = (a * b) / b
        assert c.tau == pytest.approx(a.tau)
        assert c.rho == pytest.approx(a.rho)

    def test_divide_allows_negative_precision(self):
        c = GaussianMessage(0.0, 1.0) / GaussianMessage(0.0, 3.0)
        assert c.rho == -2.0
        assert not c.is_proper

    def test_operands_unchanged(self):
        a = GaussianMessage(1.0, 2.0)
        b = GaussianMessage(3.0, 4.0)
        a * b
        a / b
        assert a == GaussianMessage(1.0, 2.0)
        assert b == GaussianMessage(3.0, 4.0)

    def test_multiply_with_other_type_fails(self):
        with pytest.raises(TypeError):
            GaussianMessage(0.0, 1.0) * 2.0

    def test_scenario_standard_product(self):
        g = GaussianMessage(0.0, 1.0)
        h = g * g
        assert h == GaussianMessage(0.0, 2.0)
        assert absdiff(g, h) == 1.0


class TestLogNormProduct:
    def test_both_improper_is_zero(self):
        for tau_a, tau_b in [(0.0, 0.0), (1.0, -2.0), (5.0, 3.0)]:
            assert log_norm_product(GaussianMessage(tau_a, 0.0), GaussianMessage(tau_b, 0.0)) == 0.0

    def test_one_improper_is_zero(self):
        assert log_norm_product(GaussianMessage(0.0, 0.0), GaussianMessage(1.0, 2.0)) == 0.0

    def test_standard_operands(self):
        g = GaussianMessage.standard()
        expected = stats.norm.logpdf(0.0, 0.0, np.sqrt(2.0))
        assert log_norm_product(g, g) == pytest.approx(expected)
        assert log_norm_product(g, g) == pytest.approx(-0.5 * np.log(4.0 * np.pi))

    @pytest.mark.parametrize(
        "ma,va,mb,vb",
        [(0.0, 1.0, 1.0, 1.0), (2.0, 0.5, -1.0, 3.0), (10.0, 4.0, 9.5, 0.25)],
    )
    def test_matches_quadrature(self, ma, va, mb, vb):
        a = GaussianMessage.from_mean_variance(ma, va)
        b = GaussianMessage.from_mean_variance(mb, vb)
        expected = _reference_log_norm_product(ma, va, mb, vb)
        assert log_norm_product(a, b) == pytest.approx(expected, rel=1e-6)
        assert log_norm_product(b, a) == pytest.approx(expected, rel=1e-6)

    def test_negative_precision_operand_raises(self):
        cavity = GaussianMessage(0.0, 1.0) / GaussianMessage(0.0, 2.0)
        with pytest.raises(InvalidParameter):
            log_norm_product(cavity, GaussianMessage.standard())


class TestLogNormRatio:
    def test_both_improper_is_zero(self):
        assert log_norm_ratio(GaussianMessage(3.0, 0.0), GaussianMessage(-1.0, 0.0)) == 0.0

    def test_example(self):
        a = GaussianMessage(0.0, 1.0)
        b = GaussianMessage(0.0, 0.5)
        assert log_norm_ratio(a, b) == pytest.approx(0.5 * np.log(2.0 * np.pi) + np.log(2.0))

    def test_matches_pointwise_identity(self):
        a = GaussianMessage.from_mean_variance(1.0, 1.0)
        b = GaussianMessage.from_mean_variance(-0.5, 4.0)
        c = a / b
        for x in [-2.0, 0.7, 3.1]:
            expected = (
                stats.norm.logpdf(x, a.mean, a.stdev)
                - stats.norm.logpdf(x, b.mean, b.stdev)
                - stats.norm.logpdf(x, c.mean, c.stdev)
            )
            assert log_norm_ratio(a, b) == pytest.approx(expected)

    def test_equal_precision_is_zero(self):
        assert log_norm_ratio(GaussianMessage(1.0, 2.0), GaussianMessage(0.0, 2.0)) == 0.0

    def test_more_precise_divisor_raises(self):
        with pytest.raises(InvalidParameter):
            log_norm_ratio(GaussianMessage(0.0, 1.0), GaussianMessage(0.0, 3.0))

    def test_inverts_product_constant(self):
        a = GaussianMessage.from_mean_variance(0.4, 2.0)
        b = GaussianMessage.from_mean_variance(-1.0, 0.5)
        assert log_norm_ratio(a * b, b) == pytest.approx(-log_norm_product(a, b))


class TestFormat:
    def test_standard_product(self):
        g = GaussianMessage.standard() * GaussianMessage.standard()
        assert str(g) == "μ = 0.0, σ = 0.7071067811865476"

    def test_quotient(self):
        g = GaussianMessage(0, 1) / GaussianMessage(0, 0.5)
        assert str(g) == "μ = 0.0, σ = 1.4142135623730951"

    def test_improper(self):
        assert str(GaussianMessage(4.0, 0.0)) == "μ = 0, σ = Inf"
