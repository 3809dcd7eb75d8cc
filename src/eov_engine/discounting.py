"""
Equation-of-Value Discounting Logic

Time-shifted value of single cash flows under compound interest.
Every solver sums these values over a schedule.
"""
from __future__ import annotations

import math
from typing import Iterable

from eov_engine.models import CashFlow, FlowDirection, FlowTerm, SymbolicAmount
from eov_engine.validation import ParseError, SymbolicNotSupported


def compound_factor(rate: float, distance: int) -> float:
    """
    Compound interest factor over a number of periods.

    factor = (1 + i)^d

    A factor beyond the float range saturates to inf; one below it
    underflows to 0.0.
    """
    try:
        return (1.0 + rate) ** distance
    except OverflowError:
        return math.inf


def numeric_amount(flow: CashFlow) -> float:
    """
    Numeric amount of a flow, coercing numeric strings.

    Raises:
        SymbolicNotSupported: If the amount is an X expression
        ParseError: If a string amount is not a number
    """
    amount = flow.amount
    if isinstance(amount, SymbolicAmount):
        raise SymbolicNotSupported(
            f"Flow at period {flow.period} has a symbolic amount ({amount}); solve for X first"
        )
    if isinstance(amount, str):
        text = amount.strip()
        if "x" in text.lower():
            raise SymbolicNotSupported(
                f"Flow at period {flow.period} has a symbolic amount ({amount!r}); solve for X first"
            )
        try:
            value = float(text)
        except ValueError:
            raise ParseError(
                f"Invalid amount: {amount!r}. It must be a number or an expression in X."
            ) from None
    else:
        value = float(amount)
    if not math.isfinite(value):
        raise ParseError(f"Invalid amount: {amount!r}. It must be a finite number.")
    return value


def normalize_schedule(cash_flows: Iterable[CashFlow]) -> list[CashFlow]:
    """Return new flows whose amounts are all floats; inputs are left untouched."""
    normalized = []
    for flow in cash_flows:
        if isinstance(flow.amount, float):
            normalized.append(flow)
        else:
            normalized.append(flow.model_copy(update={"amount": numeric_amount(flow)}))
    return normalized


def rate_for_flow(
    flow: CashFlow,
    rate: float,
    outflow_rate: float | None = None,
) -> float:
    """Outflows move with outflow_rate when one is given, everything else with rate."""
    if outflow_rate is not None and flow.direction == FlowDirection.OUTFLOW:
        return outflow_rate
    return rate


def move_factor(
    from_period: int,
    to_period: int,
    rate: float,
) -> float:
    """
    Multiplier that moves an amount from one period to another.

    Later target:   (1 + i)^d
    Earlier target: 1 / (1 + i)^d
    Same period:    1 (exactly)
    """
    if from_period == to_period:
        return 1.0
    distance = abs(from_period - to_period)
    factor = compound_factor(rate, distance)
    if to_period < from_period:
        return math.inf if factor == 0 else 1.0 / factor
    return factor


def value_at(
    flow: CashFlow,
    target_period: int,
    rate: float,
    outflow_rate: float | None = None,
) -> float:
    """
    Value of one cash flow at a target period.

    Same period:    V = amount * sign
    Earlier target: V = amount / (1 + i)^d * sign
    Later target:   V = amount * (1 + i)^d * sign

    where d = |period - target| and sign is +1 for inflows, -1 for outflows.
    A value beyond the float range is returned as a signed inf.

    Args:
        flow: Cash flow with a numeric amount
        target_period: Period to move the flow to
        rate: Periodic rate
        outflow_rate: Optional rate used for outflows instead of rate

    Returns:
        Signed value at the target period

    Raises:
        SymbolicNotSupported: If the flow carries an X expression
    """
    amount = numeric_amount(flow)

    if flow.period == target_period:
        return amount * flow.sign

    distance = abs(flow.period - target_period)
    applied = rate_for_flow(flow, rate, outflow_rate)

    if amount == 0:
        return 0.0

    factor = compound_factor(applied, distance)
    if target_period < flow.period:
        if factor == 0:
            # Discounting through an underflowed factor
            return math.copysign(math.inf, amount * flow.sign)
        return amount / factor * flow.sign
    return amount * factor * flow.sign


def value_schedule_at(
    cash_flows: Iterable[CashFlow],
    target_period: int,
    rate: float,
    outflow_rate: float | None = None,
) -> float:
    """
    Net value of a schedule at a target period.

    V(t) = Sum(value_at(flow, t, i))
    """
    return sum(value_at(flow, target_period, rate, outflow_rate) for flow in cash_flows)


def flow_term(
    flow: CashFlow,
    target_period: int,
    rate: float,
    outflow_rate: float | None = None,
) -> FlowTerm:
    """Audit record of a numeric flow's contribution at the target period."""
    applied = rate_for_flow(flow, rate, outflow_rate)
    return FlowTerm(
        period=flow.period,
        direction=flow.direction,
        amount=format(numeric_amount(flow), ".10g"),
        factor=move_factor(flow.period, target_period, applied),
        value=value_at(flow, target_period, rate, outflow_rate),
    )
