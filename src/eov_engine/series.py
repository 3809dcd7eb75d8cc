"""
Equation-of-Value Uniform Series

Closed-form annuity formulas relating the periodic payment (A), present
value (P) and future value (F) of ordinary (vencida) and due (anticipada)
uniform series.
"""
from __future__ import annotations

from eov_engine.discounting import compound_factor
from eov_engine.models import AnnuityKind
from eov_engine.validation import DegenerateEquation


def _growth(rate: float, n: int) -> float:
    """(1 + i)^n - 1, the denominator shared by every formula."""
    denominator = compound_factor(rate, n) - 1
    if denominator == 0:
        raise DegenerateEquation(
            "The denominator (1+i)^n - 1 is zero; the series cannot be solved"
        )
    return denominator


def _require_nonzero_rate(rate: float) -> None:
    if rate == 0:
        raise DegenerateEquation("A zero rate leaves the series formula without a solution")


def payment_from_future(future: float, rate: float, n: int, kind: AnnuityKind) -> float:
    """
    Periodic payment that accumulates to F.

    Ordinary: A = F * i / ((1+i)^n - 1)
    Due:      A = F * i / ((1+i)^n - 1) * 1 / (1+i)
    """
    payment = future * (rate / _growth(rate, n))
    if kind == AnnuityKind.DUE:
        payment *= 1 / (1 + rate)
    return payment


def payment_from_present(present: float, rate: float, n: int, kind: AnnuityKind) -> float:
    """
    Periodic payment that amortizes P.

    Ordinary: A = P * i(1+i)^n / ((1+i)^n - 1)
    Due:      A = P * i(1+i)^(n-1) / ((1+i)^n - 1)
    """
    denominator = _growth(rate, n)
    exponent = n if kind == AnnuityKind.ORDINARY else n - 1
    return present * (rate * compound_factor(rate, exponent)) / denominator


def present_from_payment(payment: float, rate: float, n: int, kind: AnnuityKind) -> float:
    """
    Present value of n payments.

    Ordinary: P = A * ((1+i)^n - 1) / (i(1+i)^n)
    Due:      P = A * ((1+i)^n - 1) / (i(1+i)^(n-1))
    """
    _require_nonzero_rate(rate)
    numerator = _growth(rate, n)
    exponent = n if kind == AnnuityKind.ORDINARY else n - 1
    return payment * numerator / (rate * compound_factor(rate, exponent))


def future_from_payment(payment: float, rate: float, n: int, kind: AnnuityKind) -> float:
    """
    Accumulated value of n payments.

    Ordinary: F = A * ((1+i)^n - 1) / i
    Due:      F = A * ((1+i)^n - 1) / i * (1+i)
    """
    _require_nonzero_rate(rate)
    future = payment * (_growth(rate, n) / rate)
    if kind == AnnuityKind.DUE:
        future *= 1 + rate
    return future
