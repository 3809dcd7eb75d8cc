"""
Equation-of-Value Input Validation

Error taxonomy and fail-fast validation of requests with precise messages.
Every solver input is checked here before any arithmetic runs.
"""
from __future__ import annotations

from eov_engine.models import (
    CashFlow,
    InterestRateRequest,
    PeriodsForAmountRequest,
    SeriesTarget,
    UniformSeriesRequest,
    UnknownXRequest,
    ValueAtNRequest,
)


class EquationOfValueError(Exception):
    """Base class for every failure reported by the solver core."""
    pass


class MissingInput(EquationOfValueError):
    """A required field for the selected objective is absent."""
    pass


class InvalidInput(EquationOfValueError):
    """A field is present but its value cannot be used."""
    pass


class SymbolicNotSupported(EquationOfValueError):
    """A symbolic amount reached a solver that needs numeric flows."""
    pass


class ParseError(EquationOfValueError):
    """An amount is neither a linear X expression nor a number."""
    pass


class NoUnknownFound(EquationOfValueError):
    """The X solver received a schedule without symbolic amounts."""
    pass


class DegenerateEquation(EquationOfValueError):
    """A coefficient or denominator is zero."""
    pass


class UnsupportedRateKind(EquationOfValueError):
    """Unknown rate quotation convention."""
    pass


class UnsupportedPeriodicity(UnsupportedRateKind):
    """Unknown payment or compounding periodicity."""
    pass


def validate_request(request) -> None:
    """
    Validate a request against the required-field contract of its objective.

    Raises MissingInput / InvalidInput / SymbolicNotSupported on failure.
    """
    validator = _VALIDATORS.get(type(request))
    if validator is None:
        raise InvalidInput(f"Unsupported request type: {type(request).__name__}")
    validator(request)


def _require(value, name: str) -> None:
    if value is None:
        raise MissingInput(f"Missing required input: {name}")


def _require_nonzero_rate(rate: float | None, name: str = "rate") -> None:
    if rate is None or rate == 0:
        raise MissingInput(f"Missing required input: {name} (must be a nonzero rate)")
    _require_above_minus_one(rate, name)


def _require_above_minus_one(rate: float, name: str = "rate") -> None:
    if rate <= -1:
        raise InvalidInput(f"{name} must be greater than -1 (-100%), got {rate}")


def _require_schedule(cash_flows: list[CashFlow] | None) -> None:
    if cash_flows is None:
        raise MissingInput("Missing required input: cash_flows")
    if len(cash_flows) == 0:
        raise MissingInput("No cash flows to evaluate")


def _has_symbolic_amount(flow: CashFlow) -> bool:
    if isinstance(flow.amount, (int, float)):
        return False
    if isinstance(flow.amount, str):
        return "x" in flow.amount.lower()
    return True


def _reject_symbolic(cash_flows: list[CashFlow], objective: str) -> None:
    symbolic = [f for f in cash_flows if _has_symbolic_amount(f)]
    if symbolic:
        raise SymbolicNotSupported(
            f"Cannot solve {objective} with flows containing X expressions "
            f"(period {symbolic[0].period}: {symbolic[0].amount!s}). "
            "Solve for the unknown X first."
        )


def _validate_differential_rates(request) -> None:
    if request.use_differential_rates and request.outflow_rate is None:
        raise MissingInput("Differential rates enabled but outflow_rate is missing")
    if request.use_differential_rates:
        _require_above_minus_one(request.outflow_rate, "outflow_rate")


def _validate_value_at_n(request: ValueAtNRequest) -> None:
    _require_nonzero_rate(request.rate)
    _require_schedule(request.cash_flows)
    _require(request.target_period, "target_period")
    _validate_differential_rates(request)
    _reject_symbolic(request.cash_flows, "valueAtN")


def _validate_interest_rate(request: InterestRateRequest) -> None:
    _require_schedule(request.cash_flows)
    _require(request.periods, "periods")
    _reject_symbolic(request.cash_flows, "interestRate")


def _validate_periods_for_amount(request: PeriodsForAmountRequest) -> None:
    _require_nonzero_rate(request.rate)
    _require_schedule(request.cash_flows)
    if request.target_amount is None or request.target_amount == 0:
        raise MissingInput("Missing required input: target_amount")
    _validate_differential_rates(request)
    _reject_symbolic(request.cash_flows, "periodsForAmount")


def _validate_unknown_x(request: UnknownXRequest) -> None:
    _require_nonzero_rate(request.rate)
    _require_schedule(request.cash_flows)
    _validate_differential_rates(request)


def _validate_uniform_series(request: UniformSeriesRequest) -> None:
    # A zero rate is a valid input that the series formulas report as degenerate
    _require(request.rate, "rate")
    _require_above_minus_one(request.rate)
    _require(request.annuity_kind, "annuity_kind (vencida or anticipada)")
    if request.first_period is None or request.last_period is None:
        raise MissingInput("Missing required input: first_period and/or last_period")
    _require(request.solve_for, "solve_for (A, P or F)")

    if request.last_period < request.first_period:
        raise InvalidInput(
            f"last_period ({request.last_period}) must be greater than or equal "
            f"to first_period ({request.first_period})"
        )

    if request.solve_for == SeriesTarget.A:
        if request.value_f is None and request.value_p is None:
            raise MissingInput("Solving for A requires a value for P or F")
    elif request.value_a is None:
        raise MissingInput(f"Solving for {request.solve_for.value} requires a value for A")


_VALIDATORS = {
    ValueAtNRequest: _validate_value_at_n,
    InterestRateRequest: _validate_interest_rate,
    PeriodsForAmountRequest: _validate_periods_for_amount,
    UnknownXRequest: _validate_unknown_x,
    UniformSeriesRequest: _validate_uniform_series,
}
