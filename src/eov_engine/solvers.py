"""
Equation-of-Value Objective Solvers

One solver per objective. Each solver receives a validated request and
returns a SolverResult with the value and a human-readable description.
"""
from __future__ import annotations

import logging
import math

from eov_engine.discounting import flow_term, normalize_schedule, value_schedule_at
from eov_engine.models import (
    AnnuityKind,
    InterestRateRequest,
    Objective,
    PeriodsForAmountRequest,
    SeriesTarget,
    SolverResult,
    SolverSettings,
    UniformSeriesRequest,
    UnknownXRequest,
    ValueAtNRequest,
)
from eov_engine.root_finding import bisect, interpolate_crossing
from eov_engine.series import (
    future_from_payment,
    payment_from_future,
    payment_from_present,
    present_from_payment,
)
from eov_engine.symbolic import reduce_to_linear
from eov_engine.validation import InvalidInput

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = SolverSettings()


def _require_finite(value: float, what: str) -> float:
    if not math.isfinite(value):
        raise InvalidInput(f"{what} is outside the floating-point range; check the rate and periods")
    return value


# ============================================================================
# VALUE AT PERIOD N
# ============================================================================

def solve_value_at_n(
    request: ValueAtNRequest,
    settings: SolverSettings = DEFAULT_SETTINGS,
) -> SolverResult:
    """
    Equivalent value of the schedule at the target period.

    Flows after the target are left out unless that would leave nothing,
    or the target is period 0; then the whole schedule is valued.
    The reported value is the absolute sum rounded to 2 decimals.
    """
    target = request.target_period
    rate = request.rate
    outflow_rate = request.rate_for_outflows()
    flows = normalize_schedule(request.cash_flows)
    logger.debug("valueAtN: %d flows, target period %d, rate %s", len(flows), target, rate)

    any_before = any(flow.period <= target for flow in flows)
    if target == 0 or not any_before:
        relevant = flows
    else:
        relevant = [flow for flow in flows if flow.period <= target]

    total = value_schedule_at(relevant, target, rate, outflow_rate)
    _require_finite(total, f"The value at period {target}")
    logger.debug("valueAtN: total %.6f over %d relevant flows", total, len(relevant))

    return SolverResult(
        objective=Objective.VALUE_AT_N,
        value=abs(round(total, 2)),
        description=f"Value computed at period {target}",
        reference_period=target,
        terms=[flow_term(flow, target, rate, outflow_rate) for flow in relevant],
    )


# ============================================================================
# IMPLIED INTEREST RATE
# ============================================================================

def solve_interest_rate(
    request: InterestRateRequest,
    settings: SolverSettings = DEFAULT_SETTINGS,
) -> SolverResult:
    """
    Periodic rate at which the schedule's net value at `periods` is zero.

    Bisection on [irr_lower, irr_upper]. Non-convergence is reported as a
    result with value 0 and converged=False.
    """
    anchor = request.periods
    flows = normalize_schedule(request.cash_flows)
    logger.debug("interestRate: %d flows, anchor period %d", len(flows), anchor)

    def npv(rate: float) -> float:
        return value_schedule_at(flows, anchor, rate)

    rate = bisect(
        npv,
        settings.irr_lower,
        settings.irr_upper,
        tolerance=settings.irr_tolerance,
        max_iterations=settings.irr_max_iterations,
    )

    if rate is None:
        return SolverResult(
            objective=Objective.INTEREST_RATE,
            value=0.0,
            description=(
                "No interest rate found: the search did not converge within "
                f"{settings.irr_max_iterations} iterations in "
                f"[{settings.irr_lower}, {settings.irr_upper}]"
            ),
            converged=False,
            reference_period=anchor,
        )

    return SolverResult(
        objective=Objective.INTEREST_RATE,
        value=rate,
        description="Interest rate computed (decimal form)",
        reference_period=anchor,
        terms=[flow_term(flow, anchor, rate) for flow in flows],
    )


# ============================================================================
# PERIODS TO REACH AN AMOUNT
# ============================================================================

def solve_periods_for_amount(
    request: PeriodsForAmountRequest,
    settings: SolverSettings = DEFAULT_SETTINGS,
) -> SolverResult:
    """
    Fractional period at which the schedule's value reaches the target amount.

    The amount reached at period p is |V(p)|. When it is already reached at
    the last flow's period, the crossing is interpolated between the last
    two periods; otherwise periods are scanned forward one at a time up to
    period_search_limit periods past the last flow. Running out of periods
    is reported with value -1 and converged=False.
    """
    rate = request.rate
    outflow_rate = request.rate_for_outflows()
    target_amount = request.target_amount
    flows = normalize_schedule(request.cash_flows)

    def reached(period: int) -> float:
        value = abs(value_schedule_at(flows, period, rate, outflow_rate))
        return _require_finite(value, f"The value at period {period}")

    last_period = max(flow.period for flow in flows)
    value_last = reached(last_period)
    logger.debug(
        "periodsForAmount: value %.6f at last period %d, target %s",
        value_last, last_period, target_amount,
    )

    if value_last >= target_amount:
        if last_period == 0:
            return SolverResult(
                objective=Objective.PERIODS_FOR_AMOUNT,
                value=float(last_period),
                description=f"The target amount {target_amount} is already reached at period {last_period}",
                reference_period=last_period,
            )
        value_before = reached(last_period - 1)
        exact = interpolate_crossing(
            last_period - 1, value_before, last_period, value_last, target_amount
        )
        return _periods_result(exact, target_amount)

    ceiling = last_period + settings.period_search_limit
    period = last_period + 1
    value = reached(period)
    while value < target_amount:
        if period >= ceiling:
            logger.debug("periodsForAmount: no crossing up to period %d", ceiling)
            return SolverResult(
                objective=Objective.PERIODS_FOR_AMOUNT,
                value=-1.0,
                description=(
                    "No period reaches the target amount within the "
                    f"{settings.period_search_limit} periods searched after period {last_period}"
                ),
                converged=False,
            )
        period += 1
        value = reached(period)

    logger.debug("periodsForAmount: crossing between periods %d and %d", period - 1, period)
    value_before = reached(period - 1)
    exact = interpolate_crossing(period - 1, value_before, period, value, target_amount)
    return _periods_result(exact, target_amount)


def _periods_result(exact: float, target_amount: float) -> SolverResult:
    return SolverResult(
        objective=Objective.PERIODS_FOR_AMOUNT,
        value=round(exact, 3),
        description=f"Periods needed to reach exactly the amount of {target_amount}",
    )


# ============================================================================
# UNKNOWN X
# ============================================================================

def solve_unknown_x(
    request: UnknownXRequest,
    settings: SolverSettings = DEFAULT_SETTINGS,
) -> SolverResult:
    """
    Value of X such that the schedule balances at the focal period.

    coeffX * X = constant  ->  X = constant / coeffX, rounded to 2 decimals.
    """
    equation = reduce_to_linear(
        request.cash_flows,
        request.rate,
        focal_period=request.focal_period,
        outflow_rate=request.rate_for_outflows(),
    )
    x_value = round(equation.solve(), 2)

    reduced = f"{equation.coefficient:.2f}X = {equation.constant:.2f}"
    division = f"X = {equation.constant:.2f} / {equation.coefficient:.2f}"
    return SolverResult(
        objective=Objective.UNKNOWN_X,
        value=x_value,
        description=(
            f"Value of X at period {equation.focal_period}: {reduced}, "
            f"therefore {division} = {x_value}"
        ),
        reference_period=equation.focal_period,
        terms=equation.terms,
    )


# ============================================================================
# UNIFORM SERIES
# ============================================================================

_KIND_LABEL = {
    AnnuityKind.ORDINARY: "ordinary annuity (vencida)",
    AnnuityKind.DUE: "annuity due (anticipada)",
}


def solve_uniform_series(
    request: UniformSeriesRequest,
    settings: SolverSettings = DEFAULT_SETTINGS,
) -> SolverResult:
    """
    Missing A, P or F of a uniform series over n = last - first + 1 periods.

    When solving for A, F takes priority over P if both are given.
    """
    rate = request.rate
    kind = request.annuity_kind
    n = request.n_periods
    label = _KIND_LABEL[kind]
    logger.debug("seriesUniformes: solve %s, n=%d, rate=%s, %s", request.solve_for.value, n, rate, kind.value)

    if request.solve_for == SeriesTarget.A:
        if request.value_f is not None:
            value = payment_from_future(request.value_f, rate, n, kind)
            source = "F"
        else:
            value = payment_from_present(request.value_p, rate, n, kind)
            source = "P"
        rounded = round(value, 2)
        description = f"Annuity payment (A) from {source} with {label}: {rounded}"
    elif request.solve_for == SeriesTarget.P:
        rounded = round(present_from_payment(request.value_a, rate, n, kind), 2)
        description = f"Present value (P) with {label}: {rounded}"
    else:
        rounded = round(future_from_payment(request.value_a, rate, n, kind), 2)
        description = f"Future value (F) with {label}: {rounded}"

    _require_finite(rounded, f"The series value {request.solve_for.value}")

    return SolverResult(
        objective=Objective.UNIFORM_SERIES,
        value=rounded,
        description=description,
        reference_period=_reference_period(request),
    )


def _reference_period(request: UniformSeriesRequest) -> int | None:
    """Period at which the solved value sits on the time axis."""
    if request.solve_for == SeriesTarget.P:
        offset = 1 if request.annuity_kind == AnnuityKind.ORDINARY else 0
        return request.first_period - offset
    if request.solve_for == SeriesTarget.F:
        offset = 0 if request.annuity_kind == AnnuityKind.ORDINARY else 1
        return request.last_period + offset
    return None
