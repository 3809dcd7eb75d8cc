"""
Equation-of-Value Core Data Models

Pydantic models for cash flows, solver requests, rate quotations and results.
"""
from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator


class FlowDirection(str, Enum):
    """Direction of a cash flow; decides its sign in any net value."""
    INFLOW = "inflow"
    OUTFLOW = "outflow"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            aliases = {"entrada": cls.INFLOW, "salida": cls.OUTFLOW}
            if key in aliases:
                return aliases[key]
            for member in cls:
                if member.value == key:
                    return member
        return None

    @property
    def sign(self) -> int:
        return 1 if self is FlowDirection.INFLOW else -1


class Objective(str, Enum):
    """Unknown an equation-of-value request solves for."""
    VALUE_AT_N = "valueAtN"
    INTEREST_RATE = "interestRate"
    PERIODS_FOR_AMOUNT = "periodsForAmount"
    UNKNOWN_X = "incognitaX"
    UNIFORM_SERIES = "seriesUniformes"


class AnnuityKind(str, Enum):
    """Timing of the payments of a uniform series."""
    ORDINARY = "vencida"     # payment at period end
    DUE = "anticipada"       # payment at period start


class SeriesTarget(str, Enum):
    """Value of a uniform series being solved for."""
    A = "A"
    P = "P"
    F = "F"


class RateKind(str, Enum):
    """Interest rate quotation conventions."""
    EFFECTIVE_ANNUAL = "E"
    NOMINAL_DUE = "Tnv"
    NOMINAL_ANTICIPATED = "Tna"
    PERIODIC_DUE = "iv"
    PERIODIC_ANTICIPATED = "ia"


class Periodicity(str, Enum):
    """Payment or compounding periodicity of a quoted rate."""
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    BIMONTHLY = "bimonthly"
    QUARTERLY = "quarterly"
    FOUR_MONTHLY = "four_monthly"
    SEMIANNUAL = "semiannual"
    ANNUAL = "annual"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "_")
            if key in PERIODICITY_ALIASES:
                return cls(PERIODICITY_ALIASES[key])
            for member in cls:
                if member.value == key:
                    return member
        return None

    @property
    def periods_per_year(self) -> int:
        return PERIODS_PER_YEAR[self]


# ============================================================================
# CONSTANTS
# ============================================================================

# Daily uses a 360-day commercial year
PERIODS_PER_YEAR: dict[Periodicity, int] = {
    Periodicity.DAILY: 360,
    Periodicity.WEEKLY: 52,
    Periodicity.BIWEEKLY: 26,
    Periodicity.MONTHLY: 12,
    Periodicity.BIMONTHLY: 6,
    Periodicity.QUARTERLY: 4,
    Periodicity.FOUR_MONTHLY: 3,
    Periodicity.SEMIANNUAL: 2,
    Periodicity.ANNUAL: 1,
}

PERIODICITY_ALIASES: dict[str, str] = {
    "diario": "daily",
    "semanal": "weekly",
    "quincenal": "biweekly",
    "mensual": "monthly",
    "bimestral": "bimonthly",
    "trimestral": "quarterly",
    "cuatrimestral": "four_monthly",
    "semestral": "semiannual",
    "anual": "annual",
}


# ============================================================================
# CASH FLOWS
# ============================================================================

class SymbolicAmount(BaseModel):
    """Linear amount `coefficient * X`."""
    coefficient: float

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.coefficient:g}x"


class CashFlow(BaseModel):
    """A signed amount positioned on the discrete period axis (0 = present)."""
    period: int = Field(..., description="Period index on the time axis")
    amount: Union[float, SymbolicAmount, str] = Field(
        ..., description="Numeric amount or linear expression in X (e.g. '2x', 'x/5')"
    )
    direction: FlowDirection = Field(..., description="Inflow (+) or outflow (-)")

    model_config = {"frozen": True}

    @property
    def sign(self) -> int:
        return self.direction.sign


# ============================================================================
# SOLVER SETTINGS
# ============================================================================

class SolverSettings(BaseModel):
    """Numeric limits of the iterative solvers."""
    irr_lower: float = Field(-0.99, gt=-1.0, description="Lower bound of the IRR search")
    irr_upper: float = Field(1.0, description="Upper bound of the IRR search")
    irr_tolerance: float = Field(1e-6, gt=0, description="|NPV| accepted as a root")
    irr_max_iterations: int = Field(100, ge=1, description="Bisection iterations before giving up")
    period_search_limit: int = Field(1000, ge=1, description="Periods scanned past the last flow")

    model_config = {"extra": "forbid"}


# ============================================================================
# REQUEST MODELS
# ============================================================================

class _RateInputs(BaseModel):
    """Rate fields shared by the schedule-based objectives."""
    rate: Optional[float] = Field(None, description="Periodic due rate matching the period axis")
    outflow_rate: Optional[float] = Field(None, description="Rate applied to outflows when differential rates are on")
    use_differential_rates: bool = Field(False, description="Move outflows with outflow_rate")
    cash_flows: Optional[list[CashFlow]] = Field(None, description="Cash-flow schedule")

    def rate_for_outflows(self) -> Optional[float]:
        if self.use_differential_rates and self.outflow_rate is not None:
            return self.outflow_rate
        return None


class ValueAtNRequest(_RateInputs):
    """Equivalent value of the schedule at a target period."""
    objective: Literal["valueAtN"] = "valueAtN"
    target_period: Optional[int] = None


class InterestRateRequest(BaseModel):
    """Implied periodic rate (IRR) of a schedule."""
    objective: Literal["interestRate"] = "interestRate"
    cash_flows: Optional[list[CashFlow]] = None
    periods: Optional[int] = Field(None, description="Valuation anchor period for the NPV")


class PeriodsForAmountRequest(_RateInputs):
    """Fractional period at which the schedule reaches a target amount."""
    objective: Literal["periodsForAmount"] = "periodsForAmount"
    target_amount: Optional[float] = None


class UnknownXRequest(_RateInputs):
    """Value of X in a schedule with linear symbolic amounts."""
    objective: Literal["incognitaX"] = "incognitaX"
    focal_period: Optional[int] = None


class UniformSeriesRequest(BaseModel):
    """Missing A, P or F of a uniform annuity series."""
    objective: Literal["seriesUniformes"] = "seriesUniformes"
    rate: Optional[float] = None
    annuity_kind: Optional[AnnuityKind] = None
    first_period: Optional[int] = None
    last_period: Optional[int] = None
    value_a: Optional[float] = None
    value_p: Optional[float] = None
    value_f: Optional[float] = None
    solve_for: Optional[SeriesTarget] = None

    @property
    def n_periods(self) -> int:
        return self.last_period - self.first_period + 1


EquationOfValueRequest = Annotated[
    Union[
        ValueAtNRequest,
        InterestRateRequest,
        PeriodsForAmountRequest,
        UnknownXRequest,
        UniformSeriesRequest,
    ],
    Field(discriminator="objective"),
]

REQUEST_ADAPTER: TypeAdapter = TypeAdapter(EquationOfValueRequest)


def parse_request(data: dict) -> EquationOfValueRequest:
    """Validate a plain mapping into the request variant its objective names."""
    return REQUEST_ADAPTER.validate_python(data)


# ============================================================================
# RATE QUOTATIONS
# ============================================================================

class RateQuotation(BaseModel):
    """A quoted interest rate with its convention."""
    value: float
    kind: RateKind
    payment_period: Periodicity
    compounding_period: Optional[Periodicity] = None

    model_config = {"frozen": True}

    @property
    def effective_compounding(self) -> Periodicity:
        return self.compounding_period or self.payment_period


# ============================================================================
# OUTPUT MODELS
# ============================================================================

class FlowTerm(BaseModel):
    """One flow's contribution to an equation of value."""
    period: int
    direction: FlowDirection
    amount: str
    factor: float = Field(..., description="Compound factor applied to move the flow")
    value: float = Field(..., description="Signed value (or X coefficient) at the reference period")
    unknown: bool = False


class SolverResult(BaseModel):
    """Outcome of one equation-of-value request."""
    objective: Objective
    value: float
    description: str
    converged: bool = True
    reference_period: Optional[int] = None
    terms: list[FlowTerm] = Field(default_factory=list)

    @field_validator("value")
    @classmethod
    def normalize_negative_zero(cls, v: float) -> float:
        return 0.0 if v == 0 else v
