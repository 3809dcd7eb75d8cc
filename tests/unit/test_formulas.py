"""
Unit Tests for Equation-of-Value Formulas

Tests for the valuator, the root finder and the uniform-series formulas.
"""
import math

import pytest

from eov_engine.discounting import (
    compound_factor,
    move_factor,
    normalize_schedule,
    value_at,
    value_schedule_at,
)
from eov_engine.models import AnnuityKind, CashFlow, FlowDirection
from eov_engine.root_finding import bisect, interpolate_crossing
from eov_engine.series import (
    future_from_payment,
    payment_from_future,
    payment_from_present,
    present_from_payment,
)
from eov_engine.validation import DegenerateEquation, ParseError, SymbolicNotSupported


def inflow(period, amount):
    return CashFlow(period=period, amount=amount, direction=FlowDirection.INFLOW)


def outflow(period, amount):
    return CashFlow(period=period, amount=amount, direction=FlowDirection.OUTFLOW)


# ============================================================================
# Valuator tests
# ============================================================================

class TestValueAt:
    @pytest.mark.parametrize("rate", [0.0, 0.013, 0.1, 0.5, -0.3])
    def test_zero_distance_is_exact(self, rate):
        """A flow valued at its own period is returned untouched."""
        assert value_at(outflow(3, 250.37), 3, rate) == -250.37
        assert value_at(inflow(3, 250.37), 3, rate) == 250.37

    def test_accumulates_to_later_period(self):
        assert value_at(inflow(0, 100), 2, 0.1) == pytest.approx(121.0, abs=1e-9)

    def test_discounts_to_earlier_period(self):
        assert value_at(inflow(2, 121), 0, 0.1) == pytest.approx(100.0, abs=1e-9)

    def test_outflow_is_negative(self):
        assert value_at(outflow(0, 100), 1, 0.1) == pytest.approx(-110.0, abs=1e-9)

    @pytest.mark.parametrize("rate", [0.01, 0.05, 0.2])
    @pytest.mark.parametrize("t1,t2", [(2, 5), (5, 2), (0, 7), (7, 0)])
    def test_discount_accumulate_inverse(self, rate, t1, t2):
        """Valuing directly at t2 equals valuing at t1 and rolling to t2."""
        flow = inflow(4, 1000)
        direct = value_at(flow, t2, rate)
        rolled = value_at(flow, t1, rate) * (1 + rate) ** (t2 - t1)
        assert direct == pytest.approx(rolled, rel=1e-12)

    def test_outflow_rate_applies_to_outflows_only(self):
        assert value_at(outflow(0, 100), 1, 0.1, outflow_rate=0.2) == pytest.approx(-120.0)
        assert value_at(inflow(0, 100), 1, 0.1, outflow_rate=0.2) == pytest.approx(110.0)

    def test_numeric_string_amount(self):
        assert value_at(inflow(0, "250"), 0, 0.1) == 250.0

    def test_symbolic_amount_rejected(self):
        with pytest.raises(SymbolicNotSupported):
            value_at(inflow(0, "2x"), 1, 0.1)

    def test_invalid_string_amount(self):
        with pytest.raises(ParseError):
            value_at(inflow(0, "abc"), 1, 0.1)

    def test_underflowed_discount_is_signed_infinity(self):
        assert value_at(inflow(200, 1200), 0, -0.99) == math.inf
        assert value_at(outflow(200, 1200), 0, -0.99) == -math.inf
        assert value_at(inflow(200, 0), 0, -0.99) == 0.0

    def test_overflowed_accumulation_is_signed_infinity(self):
        assert value_at(outflow(0, 100), 1100, 1.0) == -math.inf

    def test_schedule_sum(self):
        flows = [inflow(0, 100), outflow(1, 50)]
        expected = 100 * 1.1 ** 2 - 50 * 1.1
        assert value_schedule_at(flows, 2, 0.1) == pytest.approx(expected)


class TestFactors:
    def test_compound_factor(self):
        assert compound_factor(0.1, 2) == pytest.approx(1.21)

    def test_move_factor_same_period(self):
        assert move_factor(4, 4, 0.3) == 1.0

    def test_move_factor_directions(self):
        assert move_factor(0, 2, 0.1) == pytest.approx(1.21)
        assert move_factor(2, 0, 0.1) == pytest.approx(1 / 1.21)

    def test_overflow_saturates(self):
        assert compound_factor(1.0, 1100) == math.inf
        assert move_factor(0, 1100, 1.0) == math.inf
        assert move_factor(1100, 0, 1.0) == 0.0

    def test_underflow_saturates(self):
        assert compound_factor(-0.99, 200) == 0.0
        assert move_factor(200, 0, -0.99) == math.inf


class TestNormalizeSchedule:
    def test_returns_new_flows(self):
        """Coercion never mutates the caller's flows."""
        original = inflow(1, "1500")
        normalized = normalize_schedule([original])
        assert normalized[0].amount == 1500.0
        assert original.amount == "1500"


# ============================================================================
# Root finding tests
# ============================================================================

class TestBisect:
    def test_finds_root(self):
        root = bisect(lambda x: x * x - 2, 0.0, 2.0)
        assert root == pytest.approx(math.sqrt(2), abs=1e-6)

    def test_no_root_returns_none(self):
        assert bisect(lambda x: x * x + 1, -1.0, 1.0) is None

    def test_iteration_limit(self):
        assert bisect(lambda x: x - 0.3, 0.0, 1.0, tolerance=1e-12, max_iterations=3) is None


class TestInterpolateCrossing:
    def test_linear_crossing(self):
        assert interpolate_crossing(8, 100.0, 9, 200.0, 150.0) == pytest.approx(8.5)

    def test_flat_segment_returns_later_point(self):
        assert interpolate_crossing(3, 100.0, 4, 100.0, 100.0) == 4


# ============================================================================
# Uniform series tests
# ============================================================================

class TestUniformSeries:
    def test_payment_from_present_ordinary(self):
        """Loan of 10,000 over 24 months at 1.5%."""
        assert payment_from_present(10000, 0.015, 24, AnnuityKind.ORDINARY) == pytest.approx(499.24, abs=1e-2)

    def test_future_from_payment(self):
        ordinary = future_from_payment(100, 0.01, 12, AnnuityKind.ORDINARY)
        due = future_from_payment(100, 0.01, 12, AnnuityKind.DUE)
        assert ordinary == pytest.approx(1268.25, abs=1e-2)
        assert due == pytest.approx(ordinary * 1.01)

    def test_payment_from_future_due(self):
        future = future_from_payment(100, 0.01, 12, AnnuityKind.DUE)
        assert payment_from_future(future, 0.01, 12, AnnuityKind.DUE) == pytest.approx(100.0)

    def test_present_from_payment_due(self):
        """An annuity due is worth one period of interest more than an ordinary one."""
        ordinary = present_from_payment(100, 0.05, 10, AnnuityKind.ORDINARY)
        due = present_from_payment(100, 0.05, 10, AnnuityKind.DUE)
        assert due == pytest.approx(ordinary * 1.05)

    @pytest.mark.parametrize("kind", [AnnuityKind.ORDINARY, AnnuityKind.DUE])
    @pytest.mark.parametrize("n", [1, 5, 30])
    @pytest.mark.parametrize("rate", [0.01, 0.05, 0.2])
    def test_present_payment_inverse(self, kind, n, rate):
        payment = payment_from_present(10000, rate, n, kind)
        assert present_from_payment(payment, rate, n, kind) == pytest.approx(10000, rel=1e-9)

    def test_zero_rate_is_degenerate(self):
        with pytest.raises(DegenerateEquation):
            payment_from_present(1000, 0.0, 5, AnnuityKind.ORDINARY)
        with pytest.raises(DegenerateEquation):
            payment_from_future(1000, 0.0, 5, AnnuityKind.DUE)
        with pytest.raises(DegenerateEquation):
            present_from_payment(100, 0.0, 5, AnnuityKind.ORDINARY)
        with pytest.raises(DegenerateEquation):
            future_from_payment(100, 0.0, 5, AnnuityKind.ORDINARY)
