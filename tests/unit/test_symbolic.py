"""
Unit Tests for Symbolic Amounts

Parsing of linear X expressions and reduction to coeff * X = constant.
"""
import pytest

from eov_engine.models import CashFlow, FlowDirection, SymbolicAmount
from eov_engine.symbolic import parse_amount, parse_symbolic, reduce_to_linear, split_schedule
from eov_engine.validation import DegenerateEquation, NoUnknownFound, ParseError


def inflow(period, amount):
    return CashFlow(period=period, amount=amount, direction=FlowDirection.INFLOW)


def outflow(period, amount):
    return CashFlow(period=period, amount=amount, direction=FlowDirection.OUTFLOW)


class TestParseSymbolic:
    @pytest.mark.parametrize("text,coefficient", [
        ("x", 1.0),
        ("X", 1.0),
        ("2x", 2.0),
        ("0.5x", 0.5),
        (".5x", 0.5),
        ("-x", -1.0),
        ("+x", 1.0),
        ("x/5", 0.2),
        ("-3x/4", -0.75),
        (" 2 x ", 2.0),
        ("x / 2.5", 0.4),
    ])
    def test_linear_expressions(self, text, coefficient):
        parsed = parse_symbolic(text)
        assert parsed is not None
        assert parsed.coefficient == pytest.approx(coefficient)

    @pytest.mark.parametrize("text", ["2x+1", "xx", "x^2", "1000", "2*x"])
    def test_non_linear_returns_none(self, text):
        assert parse_symbolic(text) is None

    def test_division_by_zero(self):
        with pytest.raises(ParseError):
            parse_symbolic("x/0")


class TestParseAmount:
    def test_numeric_string(self):
        assert parse_amount("1500") == 1500.0

    def test_native_number(self):
        assert parse_amount(42) == 42.0

    def test_symbolic_passthrough(self):
        amount = SymbolicAmount(coefficient=3.0)
        assert parse_amount(amount) is amount

    @pytest.mark.parametrize("text", ["abc", "2x+1", ""])
    def test_unparseable(self, text):
        with pytest.raises(ParseError) as exc:
            parse_amount(text)
        assert repr(text) in str(exc.value)


class TestSplitSchedule:
    def test_separates_unknown_flows(self):
        flows = [inflow(0, "x"), outflow(1, 1000), outflow(2, "250"), inflow(3, "x/4")]
        split = split_schedule(flows)

        assert [f.period for f in split.numeric] == [1, 2]
        assert split.numeric[1].amount == 250.0
        assert [(f.period, c) for f, c in split.unknown] == [(0, 1.0), (3, 0.25)]


class TestReduceToLinear:
    def test_single_unknown_at_focal_zero(self):
        """x received today balances 1000 paid next period at 10%."""
        flows = [inflow(0, "x"), outflow(1, 1000)]
        equation = reduce_to_linear(flows, 0.1, focal_period=0)

        assert equation.coefficient == pytest.approx(1.0)
        assert equation.constant == pytest.approx(1000 / 1.1)
        assert round(equation.solve(), 2) == 909.09

    def test_default_focal_is_first_unknown(self):
        flows = [inflow(2, "x"), outflow(0, 1000)]
        equation = reduce_to_linear(flows, 0.1)

        assert equation.focal_period == 2
        assert equation.solve() == pytest.approx(1210.0)

    def test_coefficients_move_with_compound_factor(self):
        flows = [inflow(0, "2x"), inflow(2, "x"), outflow(1, 500)]
        equation = reduce_to_linear(flows, 0.1, focal_period=1)

        assert equation.coefficient == pytest.approx(2 * 1.1 + 1 / 1.1)
        assert equation.constant == pytest.approx(500.0)

    def test_focal_choice_does_not_change_solution(self):
        flows = [inflow(0, "x"), inflow(4, "x/2"), outflow(2, 800), outflow(6, 300)]
        solutions = [reduce_to_linear(flows, 0.04, focal_period=p).solve() for p in (0, 3, 6)]
        assert solutions[1] == pytest.approx(solutions[0])
        assert solutions[2] == pytest.approx(solutions[0])

    def test_terms_record_every_flow(self):
        flows = [inflow(0, "x"), outflow(1, 1000)]
        equation = reduce_to_linear(flows, 0.1, focal_period=0)

        unknown = [t for t in equation.terms if t.unknown]
        numeric = [t for t in equation.terms if not t.unknown]
        assert len(unknown) == 1 and unknown[0].amount == "1x"
        assert numeric[0].value == pytest.approx(-1000 / 1.1)

    def test_no_unknown(self):
        with pytest.raises(NoUnknownFound):
            reduce_to_linear([inflow(0, 100), outflow(1, 50)], 0.1)

    def test_cancelling_unknowns_are_degenerate(self):
        flows = [inflow(0, "x"), outflow(0, "x"), inflow(1, 100)]
        equation = reduce_to_linear(flows, 0.1, focal_period=0)
        with pytest.raises(DegenerateEquation):
            equation.solve()
