"""
Equation-of-Value I/O Readers

YAML and JSON request file parsing.

A request file holds the objective, its inputs and optional solver settings:

    objective: valueAtN
    inputs:
      rate: 0.1
      target_period: 2
      cash_flows:
        - {period: 0, amount: 100, direction: inflow}
    settings:
      period_search_limit: 500

Spanish and camelCase keys (objetivo, entradas, tasaInteres,
flujosEfectivo, n, monto, tipo, ...) are accepted as aliases.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, NamedTuple

import yaml

from eov_engine.models import EquationOfValueRequest, SolverSettings, parse_request


class RequestCase(NamedTuple):
    """A parsed request file."""
    request: EquationOfValueRequest
    settings: SolverSettings


_TOP_LEVEL_ALIASES = {
    "objetivo": "objective",
    "entradas": "inputs",
    "configuracion": "settings",
}

_INPUT_ALIASES = {
    "tasaInteres": "rate",
    "tasa": "rate",
    "tasaInteresOutflows": "outflow_rate",
    "outflowRate": "outflow_rate",
    "usarTasasDiferenciadas": "use_differential_rates",
    "useDifferentialRates": "use_differential_rates",
    "flujosEfectivo": "cash_flows",
    "cashFlows": "cash_flows",
    "flujos": "cash_flows",
    "periodoObjetivo": "target_period",
    "targetPeriod": "target_period",
    "periodos": "periods",
    "montoObjetivo": "target_amount",
    "targetAmount": "target_amount",
    "puntoFocal": "focal_period",
    "focalPeriod": "focal_period",
    "tipoAnualidad": "annuity_kind",
    "annuityKind": "annuity_kind",
    "periodoInicial": "first_period",
    "firstPeriod": "first_period",
    "periodoFinal": "last_period",
    "lastPeriod": "last_period",
    "valorA": "value_a",
    "valorP": "value_p",
    "valorF": "value_f",
    "A": "value_a",
    "P": "value_p",
    "F": "value_f",
    "calcularEnSeries": "solve_for",
    "solveFor": "solve_for",
}

_FLOW_ALIASES = {
    "n": "period",
    "periodo": "period",
    "monto": "amount",
    "tipo": "direction",
    "type": "direction",
}


def _rename_keys(data: dict, aliases: dict[str, str]) -> dict:
    """Map alias keys onto canonical names; canonical keys win over aliases."""
    result = {}
    for key, value in data.items():
        canonical = aliases.get(key, key)
        if canonical in result and canonical == key:
            result[canonical] = value
        elif canonical not in result:
            result[canonical] = value
    return result


def _parse_cash_flows(flows: list) -> list[dict]:
    """Parse the cash-flow list."""
    parsed = []
    for flow in flows:
        if not isinstance(flow, dict):
            raise ValueError(f"Each cash flow must be a mapping, got {flow!r}")
        parsed.append(_rename_keys(flow, _FLOW_ALIASES))
    return parsed


def _parse_inputs(data: dict) -> dict:
    """Parse the inputs section."""
    inputs = _rename_keys(data, _INPUT_ALIASES)
    if inputs.get("cash_flows") is not None:
        inputs["cash_flows"] = _parse_cash_flows(inputs["cash_flows"])
    return inputs


def parse_input_dict(data: dict[str, Any]) -> RequestCase:
    """
    Parse a dictionary into a request and its solver settings.

    This is the core parsing function used by both YAML and JSON readers.

    Args:
        data: Raw request dictionary

    Returns:
        RequestCase with the request variant named by `objective`
    """
    if not isinstance(data, dict):
        raise ValueError("A request file must contain a mapping at the top level")

    top = _rename_keys(data, _TOP_LEVEL_ALIASES)
    if "objective" not in top:
        raise ValueError("Missing 'objective' in request file")

    inputs = _parse_inputs(top.get("inputs") or {})
    request = parse_request({"objective": top["objective"], **inputs})
    settings = SolverSettings.model_validate(top.get("settings") or {})
    return RequestCase(request=request, settings=settings)


def read_yaml(path: str | Path) -> RequestCase:
    """
    Read a request from a YAML file.

    Args:
        path: Path to YAML file

    Returns:
        RequestCase
    """
    path = Path(path)
    with open(path, "r") as f:
        data = yaml.safe_load(f)

    return parse_input_dict(data)


def read_json(path: str | Path) -> RequestCase:
    """
    Read a request from a JSON file.

    Args:
        path: Path to JSON file

    Returns:
        RequestCase
    """
    path = Path(path)
    with open(path, "r") as f:
        data = json.load(f)

    return parse_input_dict(data)


def read_input_file(path: str | Path) -> RequestCase:
    """
    Read a request from a file (auto-detects format).

    Args:
        path: Path to input file (YAML or JSON)

    Returns:
        RequestCase
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        return read_yaml(path)
    elif suffix == ".json":
        return read_json(path)
    else:
        raise ValueError(f"Unsupported file format: {suffix}")
