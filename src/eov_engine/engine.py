"""
Equation-of-Value Engine

Validates a tagged request and dispatches it to the solver of its objective.
"""
from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from eov_engine.models import (
    EquationOfValueRequest,
    Objective,
    SolverResult,
    SolverSettings,
    parse_request,
)
from eov_engine.rates import convert_rate
from eov_engine.solvers import (
    solve_interest_rate,
    solve_periods_for_amount,
    solve_uniform_series,
    solve_unknown_x,
    solve_value_at_n,
)
from eov_engine.validation import InvalidInput, MissingInput, validate_request

logger = logging.getLogger(__name__)

__all__ = ["EquationOfValueEngine", "evaluate", "convert_rate"]


_DISPATCH = {
    Objective.VALUE_AT_N: solve_value_at_n,
    Objective.INTEREST_RATE: solve_interest_rate,
    Objective.PERIODS_FOR_AMOUNT: solve_periods_for_amount,
    Objective.UNKNOWN_X: solve_unknown_x,
    Objective.UNIFORM_SERIES: solve_uniform_series,
}


_MISSING_ERROR_TYPES = {"missing", "union_tag_not_found"}


def _parse_request(data: dict[str, Any]) -> EquationOfValueRequest:
    """Parse a mapping, reporting pydantic failures as solver input errors."""
    try:
        return parse_request(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        if any(err["type"] in _MISSING_ERROR_TYPES for err in e.errors()):
            raise MissingInput(f"Missing required input: {problems}") from e
        raise InvalidInput(f"Invalid input: {problems}") from e


class EquationOfValueEngine:
    """
    Main equation-of-value engine.

    Holds one request; validation runs on construction so an invalid request
    never reaches the arithmetic.
    """

    def __init__(
        self,
        request: EquationOfValueRequest | dict[str, Any],
        settings: SolverSettings | None = None,
    ):
        """
        Initialize engine with a request.

        Args:
            request: Request model, or a mapping with an `objective` key
            settings: Numeric limits of the iterative solvers
        """
        if isinstance(request, dict):
            request = _parse_request(request)
        self.request = request
        self.settings = settings or SolverSettings()
        self._validate()

    def _validate(self) -> None:
        """Validate the request before computation."""
        validate_request(self.request)

    @property
    def objective(self) -> Objective:
        return Objective(self.request.objective)

    def run(self) -> SolverResult:
        """
        Solve the request.

        Returns:
            SolverResult with the value and its description
        """
        solver = _DISPATCH[self.objective]
        logger.debug("dispatching %s to %s", self.objective.value, solver.__name__)
        return solver(self.request, self.settings)


def evaluate(
    request: EquationOfValueRequest | dict[str, Any],
    settings: SolverSettings | None = None,
) -> SolverResult:
    """Validate and solve one request."""
    return EquationOfValueEngine(request, settings).run()
