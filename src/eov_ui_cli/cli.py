"""
Equation-of-Value CLI Application

Typer-based command-line interface for the equation-of-value solver.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from eov_engine.engine import EquationOfValueEngine
from eov_engine.models import RateQuotation
from eov_engine.rates import convert_quotation, resolve_kind, resolve_periodicity
from eov_io.readers import read_input_file
from eov_io.writers import export_csv, export_xlsx
from eov_ui_cli.display import display_all, display_conversion


app = typer.Typer(
    name="eov",
    help="Equation-of-value solver for time-value-of-money problems",
    add_completion=False,
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Show solver debug logging",
    ),
) -> None:
    """Solve equations of value and convert interest rates."""
    _configure_logging(verbose)


def _resolve_input_file(input_file: Optional[Path], input_option: Optional[Path]) -> Path:
    """Resolve input file from positional arg or --input option."""
    resolved = input_option or input_file
    if resolved is None:
        raise typer.BadParameter("Missing input file. Provide a positional INPUT_FILE or --input.")
    if not resolved.exists():
        raise typer.BadParameter(f"Input file not found: {resolved}")
    if not resolved.is_file():
        raise typer.BadParameter(f"Input path is not a file: {resolved}")
    return resolved


@app.command()
def solve(
    input_file: Optional[Path] = typer.Argument(
        None,
        help="Path to request file (YAML or JSON)",
    ),
    input_option: Optional[Path] = typer.Option(
        None,
        "--input",
        "-i",
        help="Path to request file (YAML or JSON)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Output Excel file path",
    ),
    csv_dir: Optional[Path] = typer.Option(
        None,
        "--csv-dir",
        help="Directory to export CSV files",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet", "-q",
        help="Suppress table output",
    ),
) -> None:
    """
    Solve the equation of value described by a request file.

    Reads a YAML or JSON request, runs the solver for its objective and
    displays the result as rich tables. Optionally exports to Excel/CSV.
    """
    try:
        input_file = _resolve_input_file(input_file, input_option)
        console.print(f"[dim]Reading request file: {input_file}[/dim]")
        case = read_input_file(input_file)

        engine = EquationOfValueEngine(case.request, case.settings)
        result = engine.run()

        if quiet:
            console.print(f"{result.value}")
        else:
            display_all(result)

        if not result.converged:
            console.print(f"[yellow]⚠ {result.description}[/yellow]")

        if output:
            console.print(f"\n[dim]Exporting to Excel: {output}[/dim]")
            export_xlsx(result, output)
            console.print(f"[green]✓ Exported to {output}[/green]")

        if csv_dir:
            console.print(f"\n[dim]Exporting CSVs to: {csv_dir}[/dim]")
            files = export_csv(result, csv_dir)
            console.print(f"[green]✓ Exported {len(files)} CSV files[/green]")

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def validate(
    input_file: Optional[Path] = typer.Argument(
        None,
        help="Path to request file (YAML or JSON)",
    ),
    input_option: Optional[Path] = typer.Option(
        None,
        "--input",
        "-i",
        help="Path to request file (YAML or JSON)",
    ),
) -> None:
    """
    Validate a request file without solving it.

    Checks that every field required by the objective is present.
    """
    try:
        input_file = _resolve_input_file(input_file, input_option)
        console.print(f"[dim]Validating: {input_file}[/dim]")
        case = read_input_file(input_file)

        # Create engine (which validates the request)
        engine = EquationOfValueEngine(case.request, case.settings)

        console.print("[green]✓ Request file is valid[/green]")

        console.print(f"\n  Objective: {engine.objective.value}")
        flows = getattr(case.request, "cash_flows", None)
        if flows is not None:
            console.print(f"  Cash flows: {len(flows)}")
        rate = getattr(case.request, "rate", None)
        if rate is not None:
            console.print(f"  Rate: {rate}")

    except Exception as e:
        console.print(f"[red]Validation failed: {e}[/red]")
        raise typer.Exit(code=1)


@app.command("convert-rate")
def convert_rate_command(
    value: float = typer.Argument(
        ...,
        help="Rate in decimal form (2.6% -> 0.026)",
    ),
    from_kind: str = typer.Option(
        ...,
        "--from-kind",
        help="Convention of the given rate: E, Tnv, Tna, iv, ia",
    ),
    from_period: str = typer.Option(
        ...,
        "--from-period",
        help="Payment periodicity of the given rate (e.g. monthly, mensual)",
    ),
    from_compounding: Optional[str] = typer.Option(
        None,
        "--from-compounding",
        help="Compounding periodicity of the given rate (defaults to its payment periodicity)",
    ),
    to_kind: str = typer.Option(
        ...,
        "--to-kind",
        help="Convention of the result: E, Tnv, Tna, iv, ia",
    ),
    to_period: str = typer.Option(
        ...,
        "--to-period",
        help="Payment periodicity of the result",
    ),
    to_compounding: Optional[str] = typer.Option(
        None,
        "--to-compounding",
        help="Compounding periodicity of the result (defaults to its payment periodicity)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet", "-q",
        help="Print only the converted rate",
    ),
) -> None:
    """
    Convert an interest rate between quotation conventions.
    """
    try:
        source = RateQuotation(
            value=value,
            kind=resolve_kind(from_kind),
            payment_period=resolve_periodicity(from_period),
            compounding_period=resolve_periodicity(from_compounding) if from_compounding else None,
        )
        target = convert_quotation(source, to_kind, to_period, to_compounding)

        if quiet:
            console.print(f"{target.value}")
        else:
            display_conversion(source, target)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
