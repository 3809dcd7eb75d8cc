"""
Equation-of-Value Symbolic Amounts

Parsing of linear amounts in the unknown X ("x", "2x", "-x", "x/5") and
reduction of a schedule to a single linear equation coeff * X = constant.
"""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Iterable

from eov_engine.discounting import flow_term, move_factor, rate_for_flow, value_at
from eov_engine.models import CashFlow, FlowTerm, SymbolicAmount
from eov_engine.validation import DegenerateEquation, InvalidInput, NoUnknownFound, ParseError

logger = logging.getLogger(__name__)

# [sign][number]x[/number]
LINEAR_X_PATTERN = re.compile(
    r"^(?P<coef>[-+]?\s*(?:\d*\.\d+|\d+)?)\s*x(?:\s*/\s*(?P<div>\d+(?:\.\d+)?))?$",
    re.IGNORECASE,
)


def parse_symbolic(text: str) -> SymbolicAmount | None:
    """
    Parse a linear X expression.

    Returns:
        SymbolicAmount, or None when text does not match the linear pattern
    """
    match = LINEAR_X_PATTERN.match(text.strip())
    if match is None:
        return None

    coefficient = 1.0
    raw = match.group("coef").replace(" ", "")
    if raw not in ("", "+"):
        coefficient = -1.0 if raw == "-" else float(raw)

    divisor = match.group("div")
    if divisor is not None:
        divisor_value = float(divisor)
        if divisor_value == 0:
            raise ParseError(f"Could not interpret amount: {text!r} (division by zero)")
        coefficient /= divisor_value

    return SymbolicAmount(coefficient=coefficient)


def parse_amount(amount: float | str | SymbolicAmount) -> float | SymbolicAmount:
    """
    Interpret a raw amount as a number or a linear X expression.

    Raises:
        ParseError: If a string matches neither form
    """
    if isinstance(amount, SymbolicAmount):
        return amount
    if isinstance(amount, (int, float)):
        return float(amount)

    text = amount.strip()
    if "x" in text.lower():
        symbolic = parse_symbolic(text)
        if symbolic is not None:
            return symbolic
    try:
        return float(text)
    except ValueError:
        raise ParseError(f"Could not interpret amount: {amount!r}") from None


@dataclass(frozen=True)
class SplitSchedule:
    """A schedule separated into numeric flows and X-bearing flows."""
    numeric: list[CashFlow] = field(default_factory=list)
    unknown: list[tuple[CashFlow, float]] = field(default_factory=list)


def split_schedule(cash_flows: Iterable[CashFlow]) -> SplitSchedule:
    """
    Separate numeric flows from flows whose amount is a multiple of X.

    Numeric flows are returned as new flows with float amounts; X-bearing
    flows are paired with their extracted coefficient. Input order is kept.
    """
    numeric: list[CashFlow] = []
    unknown: list[tuple[CashFlow, float]] = []
    for flow in cash_flows:
        parsed = parse_amount(flow.amount)
        if isinstance(parsed, SymbolicAmount):
            unknown.append((flow, parsed.coefficient))
        elif isinstance(flow.amount, float):
            numeric.append(flow)
        else:
            numeric.append(flow.model_copy(update={"amount": parsed}))
    return SplitSchedule(numeric=numeric, unknown=unknown)


@dataclass(frozen=True)
class LinearEquation:
    """coefficient * X = constant at a focal period."""
    coefficient: float
    constant: float
    focal_period: int
    terms: list[FlowTerm] = field(default_factory=list)

    def solve(self) -> float:
        if not (math.isfinite(self.coefficient) and math.isfinite(self.constant)):
            raise InvalidInput(
                f"The equation at period {self.focal_period} is outside the floating-point range"
            )
        if self.coefficient == 0:
            raise DegenerateEquation(
                "The coefficient of X is 0; the equation cannot be solved"
            )
        return self.constant / self.coefficient


def reduce_to_linear(
    cash_flows: Iterable[CashFlow],
    rate: float,
    focal_period: int | None = None,
    outflow_rate: float | None = None,
) -> LinearEquation:
    """
    Reduce a schedule to coeff * X = constant at the focal period.

    Each X coefficient is moved to the focal period with the compound factor
    and signed by its direction; each numeric flow's value at the focal
    period moves to the right-hand side with its sign flipped.

    Args:
        cash_flows: Schedule containing at least one X-bearing flow
        rate: Periodic rate
        focal_period: Comparison period (defaults to the first X-bearing flow)
        outflow_rate: Optional rate for outflows

    Raises:
        NoUnknownFound: If no flow carries X
        ParseError: If an amount cannot be interpreted
    """
    split = split_schedule(cash_flows)
    if not split.unknown:
        raise NoUnknownFound("No cash flow contains the unknown X")

    focal = focal_period if focal_period is not None else split.unknown[0][0].period

    coefficient = 0.0
    terms: list[FlowTerm] = []
    for flow, raw_coefficient in split.unknown:
        applied = rate_for_flow(flow, rate, outflow_rate)
        factor = move_factor(flow.period, focal, applied)
        adjusted = raw_coefficient * factor * flow.sign
        coefficient += adjusted
        terms.append(FlowTerm(
            period=flow.period,
            direction=flow.direction,
            amount=f"{raw_coefficient:g}x",
            factor=factor,
            value=adjusted,
            unknown=True,
        ))

    constant = 0.0
    for flow in split.numeric:
        constant -= value_at(flow, focal, rate, outflow_rate)
        terms.append(flow_term(flow, focal, rate, outflow_rate))

    logger.debug("reduced equation at period %d: %.6f X = %.6f", focal, coefficient, constant)
    return LinearEquation(
        coefficient=coefficient,
        constant=constant,
        focal_period=focal,
        terms=terms,
    )
