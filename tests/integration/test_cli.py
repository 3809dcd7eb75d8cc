"""
Integration Tests for the CLI

Runs the Typer commands against the bundled request files.
"""
from pathlib import Path

import pytest
from typer.testing import CliRunner

from eov_ui_cli.cli import app


CASE_DIR = Path(__file__).parent.parent.parent / "case_files"

runner = CliRunner()


class TestSolveCommand:
    def test_quiet_prints_value(self):
        result = runner.invoke(app, ["solve", str(CASE_DIR / "value_at_n.yaml"), "--quiet"])
        assert result.exit_code == 0
        assert "121.0" in result.output

    def test_input_option(self):
        result = runner.invoke(app, ["solve", "--input", str(CASE_DIR / "uniform_series.yaml")])
        assert result.exit_code == 0
        assert "Uniform Series" in result.output

    def test_tables_show_flow_terms(self):
        result = runner.invoke(app, ["solve", str(CASE_DIR / "unknown_x.json")])
        assert result.exit_code == 0
        assert "Unknown X" in result.output
        assert "Flows at Period 6" in result.output

    def test_missing_file(self, tmp_path: Path):
        result = runner.invoke(app, ["solve", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1
        assert "Input file not found" in result.output

    def test_no_input(self):
        result = runner.invoke(app, ["solve"])
        assert result.exit_code == 1
        assert "Missing input file" in result.output

    def test_solver_error_reported(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("objective: valueAtN\ninputs:\n  rate: 0.1\n  target_period: 1\n  cash_flows: []\n")
        result = runner.invoke(app, ["solve", str(path)])
        assert result.exit_code == 1
        assert "No cash flows to evaluate" in result.output

    def test_exports(self, tmp_path: Path):
        xlsx = tmp_path / "out" / "result.xlsx"
        csv_dir = tmp_path / "csv"
        result = runner.invoke(app, [
            "solve", str(CASE_DIR / "value_at_n.yaml"),
            "--quiet", "--output", str(xlsx), "--csv-dir", str(csv_dir),
        ])
        assert result.exit_code == 0
        assert xlsx.exists()
        assert (csv_dir / "1_Summary.csv").exists()
        assert (csv_dir / "2_Flow_Terms.csv").exists()

    def test_verbose_flag(self):
        result = runner.invoke(app, ["--verbose", "solve", str(CASE_DIR / "interest_rate.yaml"), "-q"])
        assert result.exit_code == 0


class TestValidateCommand:
    @pytest.mark.parametrize("name", [
        "value_at_n.yaml",
        "interest_rate.yaml",
        "periods_for_amount.yaml",
        "unknown_x.json",
        "uniform_series.yaml",
    ])
    def test_case_files_are_valid(self, name):
        result = runner.invoke(app, ["validate", str(CASE_DIR / name)])
        assert result.exit_code == 0
        assert "Request file is valid" in result.output

    def test_invalid_request(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("objective: seriesUniformes\ninputs:\n  rate: 0.02\n")
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 1
        assert "Validation failed" in result.output


class TestConvertRateCommand:
    def test_quiet(self):
        result = runner.invoke(app, [
            "convert-rate", "0.12",
            "--from-kind", "Tnv", "--from-period", "monthly",
            "--to-kind", "E", "--to-period", "annual",
            "--quiet",
        ])
        assert result.exit_code == 0
        assert float(result.output.strip()) == pytest.approx(0.1268250301, abs=1e-9)

    def test_table(self):
        result = runner.invoke(app, [
            "convert-rate", "0.12",
            "--from-kind", "E", "--from-period", "anual",
            "--to-kind", "iv", "--to-period", "mensual",
        ])
        assert result.exit_code == 0
        assert "Rate Conversion" in result.output

    def test_unknown_kind(self):
        result = runner.invoke(app, [
            "convert-rate", "0.12",
            "--from-kind", "APR", "--from-period", "monthly",
            "--to-kind", "E", "--to-period", "annual",
        ])
        assert result.exit_code == 1
        assert "Unsupported rate kind" in result.output
