"""
Equation-of-Value Rate Conversion

Conversion of an interest rate between quotation conventions through the
effective annual rate E.

    To E:   Tnv -> iv = Tnv / mPay
            ia  -> iv = ia / (1 - ia)
            Tna -> ia = Tna / mPay -> iv
            E = (1 + iv)^mCap - 1

    From E: iv  = (1 + E)^(1/mCap) - 1
            Tnv = iv * mPay
            ia  = iv / (1 + iv)
            Tna = ia * mPay

mPay and mCap are the periods per year of the payment and compounding
periodicities. Nominal <-> periodic steps always use mPay and periodic <->
effective steps always use mCap, so each direction inverts the other.
"""
from __future__ import annotations

from eov_engine.models import Periodicity, RateKind, RateQuotation
from eov_engine.validation import InvalidInput, UnsupportedPeriodicity, UnsupportedRateKind


def resolve_kind(kind: RateKind | str) -> RateKind:
    """Coerce a rate kind tag, rejecting unknown tags."""
    if isinstance(kind, RateKind):
        return kind
    try:
        return RateKind(kind)
    except ValueError:
        raise UnsupportedRateKind(
            f"Unsupported rate kind: {kind!r} (expected one of {[k.value for k in RateKind]})"
        ) from None


def resolve_periodicity(period: Periodicity | str) -> Periodicity:
    """Coerce a periodicity name (English or Spanish), rejecting unknown names."""
    if isinstance(period, Periodicity):
        return period
    try:
        return Periodicity(period)
    except ValueError:
        raise UnsupportedPeriodicity(f"Unsupported periodicity: {period!r}") from None


def _anticipated_to_due(ia: float) -> float:
    if ia >= 1:
        raise InvalidInput(f"An anticipated periodic rate must be below 100%, got {ia}")
    return ia / (1 - ia)


def to_effective_annual(
    value: float,
    kind: RateKind,
    m_pay: int,
    m_cap: int,
) -> float:
    """Effective annual rate E equivalent to a quoted rate."""
    if kind == RateKind.EFFECTIVE_ANNUAL:
        return value

    if kind == RateKind.NOMINAL_DUE:
        iv = value / m_pay
    elif kind == RateKind.PERIODIC_DUE:
        iv = value
    elif kind == RateKind.PERIODIC_ANTICIPATED:
        iv = _anticipated_to_due(value)
    elif kind == RateKind.NOMINAL_ANTICIPATED:
        iv = _anticipated_to_due(value / m_pay)
    else:
        raise UnsupportedRateKind(f"Unsupported rate kind: {kind!r}")

    return (1 + iv) ** m_cap - 1


def from_effective_annual(
    effective: float,
    kind: RateKind,
    m_pay: int,
    m_cap: int,
) -> float:
    """Quoted rate of the given convention equivalent to E."""
    if effective <= -1:
        raise InvalidInput(f"The effective annual rate must be above -100%, got {effective}")

    if kind == RateKind.EFFECTIVE_ANNUAL:
        return effective

    iv = (1 + effective) ** (1 / m_cap) - 1
    if kind == RateKind.PERIODIC_DUE:
        return iv
    if kind == RateKind.NOMINAL_DUE:
        return iv * m_pay
    if kind == RateKind.PERIODIC_ANTICIPATED:
        return iv / (1 + iv)
    if kind == RateKind.NOMINAL_ANTICIPATED:
        return iv / (1 + iv) * m_pay
    raise UnsupportedRateKind(f"Unsupported rate kind: {kind!r}")


def convert_rate(
    value: float,
    from_kind: RateKind | str,
    from_period: Periodicity | str,
    to_kind: RateKind | str,
    to_period: Periodicity | str,
    from_compounding: Periodicity | str | None = None,
    to_compounding: Periodicity | str | None = None,
) -> float:
    """
    Convert a rate between quotation conventions.

    Compounding periods default to the payment period on either side.

    Args:
        value: Rate in decimal form (2.6% -> 0.026)
        from_kind: Convention of the given rate
        from_period: Payment periodicity of the given rate
        to_kind: Convention of the result
        to_period: Payment periodicity of the result
        from_compounding: Compounding periodicity of the given rate
        to_compounding: Compounding periodicity of the result

    Returns:
        The equivalent rate in decimal form

    Raises:
        UnsupportedRateKind: Unknown rate kind
        UnsupportedPeriodicity: Unknown periodicity
    """
    source_kind = resolve_kind(from_kind)
    target_kind = resolve_kind(to_kind)
    source_pay = resolve_periodicity(from_period)
    target_pay = resolve_periodicity(to_period)
    source_cap = resolve_periodicity(from_compounding) if from_compounding is not None else source_pay
    target_cap = resolve_periodicity(to_compounding) if to_compounding is not None else target_pay

    effective = to_effective_annual(
        value, source_kind, source_pay.periods_per_year, source_cap.periods_per_year
    )
    return from_effective_annual(
        effective, target_kind, target_pay.periods_per_year, target_cap.periods_per_year
    )


def convert_quotation(
    quotation: RateQuotation,
    to_kind: RateKind | str,
    to_period: Periodicity | str,
    to_compounding: Periodicity | str | None = None,
) -> RateQuotation:
    """Convert a RateQuotation, returning a new quotation in the target convention."""
    target_pay = resolve_periodicity(to_period)
    target_cap = resolve_periodicity(to_compounding) if to_compounding is not None else None
    value = convert_rate(
        quotation.value,
        quotation.kind,
        quotation.payment_period,
        to_kind,
        target_pay,
        from_compounding=quotation.effective_compounding,
        to_compounding=target_cap,
    )
    return RateQuotation(
        value=value,
        kind=resolve_kind(to_kind),
        payment_period=target_pay,
        compounding_period=target_cap,
    )
