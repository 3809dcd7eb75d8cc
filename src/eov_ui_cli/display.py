"""
Equation-of-Value CLI Display

Rich table formatting for terminal output.
"""
from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from eov_engine.models import Objective, RateQuotation, SolverResult


console = Console()

_OBJECTIVE_TITLES = {
    Objective.VALUE_AT_N: "Value at Period N",
    Objective.INTEREST_RATE: "Implied Interest Rate",
    Objective.PERIODS_FOR_AMOUNT: "Periods to Reach Amount",
    Objective.UNKNOWN_X: "Unknown X",
    Objective.UNIFORM_SERIES: "Uniform Series",
}


def display_header(title: str) -> None:
    """Display a section header."""
    console.print()
    console.print(Panel(Text(title, style="bold white"), style="blue"))


def _format_value(result: SolverResult) -> str:
    if result.objective == Objective.INTEREST_RATE and result.converged:
        return f"{result.value:.6f} ({result.value * 100:.4f}%)"
    if result.objective == Objective.PERIODS_FOR_AMOUNT:
        return f"{result.value:,.3f}"
    return f"{result.value:,.2f}"


def display_result(result: SolverResult) -> None:
    """Display the solved value and its description."""
    display_header(f"📐 {_OBJECTIVE_TITLES[result.objective]}")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Parameter", style="dim")
    table.add_column("Value", justify="right")

    style = "bold green" if result.converged else "bold yellow"
    table.add_row("Result", Text(_format_value(result), style=style))
    if result.reference_period is not None:
        table.add_row("Reference Period", str(result.reference_period))
    table.add_row("Converged", "yes" if result.converged else "no")
    table.add_row("Description", result.description)

    console.print(table)


def display_terms(result: SolverResult) -> None:
    """Display each flow's contribution at the reference period."""
    if not result.terms:
        return

    display_header(f"💸 Flows at Period {result.reference_period}")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Period", justify="center")
    table.add_column("Direction", justify="center")
    table.add_column("Amount", justify="right")
    table.add_column("Factor", justify="right")
    table.add_column("Value", justify="right", style="bold")

    for term in sorted(result.terms, key=lambda t: t.period):
        value = f"{term.value:,.6f} X" if term.unknown else f"{term.value:,.2f}"
        table.add_row(
            str(term.period),
            term.direction.value,
            term.amount,
            f"{term.factor:,.6f}",
            value,
        )

    console.print(table)


def display_all(result: SolverResult) -> None:
    """Display every section for a solver result."""
    display_result(result)
    display_terms(result)


def display_conversion(source: RateQuotation, target: RateQuotation) -> None:
    """Display a rate conversion."""
    display_header("🔁 Rate Conversion")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("", style="dim")
    table.add_column("Kind", justify="center")
    table.add_column("Payment", justify="center")
    table.add_column("Compounding", justify="center")
    table.add_column("Rate", justify="right")

    for label, quote in (("From", source), ("To", target)):
        table.add_row(
            label,
            quote.kind.value,
            quote.payment_period.value,
            quote.effective_compounding.value,
            f"{quote.value:.10f} ({quote.value * 100:.6f}%)",
        )

    console.print(table)
