"""
Equation-of-Value I/O Writers

Excel and CSV export of solver results.
"""
from __future__ import annotations

from pathlib import Path

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.utils.dataframe import dataframe_to_rows

from eov_engine.models import SolverResult


def _create_summary_table(result: SolverResult) -> pd.DataFrame:
    """Create result summary table."""
    data = [
        ["Objective", result.objective.value],
        ["Value", result.value],
        ["Converged", "yes" if result.converged else "no"],
        ["Description", result.description],
    ]

    if result.reference_period is not None:
        data.insert(2, ["Reference Period", result.reference_period])

    return pd.DataFrame(data, columns=["Parameter", "Value"])


def _create_terms_table(result: SolverResult) -> pd.DataFrame:
    """Create per-flow contribution table."""
    rows = []
    for term in result.terms:
        rows.append({
            "Period": term.period,
            "Direction": term.direction.value,
            "Amount": term.amount,
            "Factor": term.factor,
            "Value at Reference": term.value,
            "Unknown X": "yes" if term.unknown else "no",
        })
    columns = ["Period", "Direction", "Amount", "Factor", "Value at Reference", "Unknown X"]
    return pd.DataFrame(rows, columns=columns)


def format_tables(result: SolverResult) -> dict[str, pd.DataFrame]:
    """
    Convert a solver result to display-ready DataFrames.

    Returns:
        Dict mapping table name to DataFrame
    """
    tables = {"1_Summary": _create_summary_table(result)}
    if result.terms:
        tables["2_Flow_Terms"] = _create_terms_table(result)
    return tables


def _style_xlsx_sheet(ws) -> None:
    """Apply styling to Excel worksheet."""
    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="2E75B6", end_color="2E75B6", fill_type="solid")
    thin_border = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin"),
    )

    for cell in ws[1]:
        cell.font = header_font
        cell.fill = header_fill
        cell.border = thin_border
        cell.alignment = Alignment(horizontal="center")

    for row in ws.iter_rows(min_row=2, max_row=ws.max_row, max_col=ws.max_column):
        for cell in row:
            cell.border = thin_border
            if isinstance(cell.value, float):
                cell.number_format = "#,##0.000000" if abs(cell.value) < 1 else "#,##0.00"
            elif isinstance(cell.value, int):
                cell.number_format = "0"

    _auto_fit_columns(ws, ws.max_column)


def _auto_fit_columns(ws, max_col: int) -> None:
    for col in range(1, max_col + 1):
        max_length = 0
        for row in ws.iter_rows(min_col=col, max_col=col, max_row=ws.max_row):
            cell = row[0]
            if cell.value is not None and len(str(cell.value)) > max_length:
                max_length = len(str(cell.value))
        ws.column_dimensions[get_column_letter(col)].width = min(max_length + 2, 60)


def export_xlsx(result: SolverResult, path: str | Path) -> None:
    """
    Export a solver result to an Excel file (one sheet per table).

    Args:
        result: Solver result to export
        path: Output file path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    tables = format_tables(result)
    wb = Workbook()
    wb.remove(wb.active)
    for sheet_name, df in tables.items():
        ws = wb.create_sheet(title=sheet_name[:31])
        for r in dataframe_to_rows(df, index=False, header=True):
            ws.append(r)
        _style_xlsx_sheet(ws)
    wb.save(path)


def export_csv(result: SolverResult, output_dir: str | Path) -> list[Path]:
    """
    Export a solver result to CSV files (one per table).

    Args:
        result: Solver result to export
        output_dir: Directory to write CSV files

    Returns:
        List of created file paths
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    tables = format_tables(result)
    created_files = []

    for table_name, df in tables.items():
        file_path = output_dir / f"{table_name}.csv"
        df.to_csv(file_path, index=False)
        created_files.append(file_path)

    return created_files
