"""Matrix commands implementation."""

import sys
import json
from pathlib import Path
from typing import List, Optional

import numpy as np

from morphmodels.api import create_model, normalize_model_name
from morphmodels.models.rates import RelativeRateScheme, relative_rates_to_matrix


def parse_frequencies(freqs: Optional[str]) -> Optional[List[float]]:
    """Parse a comma-separated frequency list ("0.1,0.2,0.3,0.4")."""
    if freqs is None:
        return None
    try:
        return [float(value) for value in freqs.split(",") if value.strip()]
    except ValueError:
        raise ValueError(f"Could not parse frequencies '{freqs}'")


def format_matrix(matrix: np.ndarray, format: str, label: str, info: dict) -> str:
    """Render a matrix (or flat vector) as text, JSON or TSV."""
    if format == "json":
        data = dict(info)
        data[label] = matrix.tolist()
        return json.dumps(data, indent=2)

    rows = np.atleast_2d(matrix)
    if format == "tsv":
        return "\n".join("\t".join(f"{x:.10g}" for x in row) for row in rows)

    lines = [f"{key}: {value}" for key, value in info.items()]
    lines.append("=" * 80)
    for row in rows:
        lines.append("  ".join(f"{x:>12.8f}" for x in row))
    return "\n".join(lines)


def write_output(text: str, output: Optional[Path], quiet: bool):
    if output is None:
        print(text)
        return
    output.write_text(text + "\n")
    if not quiet:
        print(f"Wrote {output}", file=sys.stderr)


def _fail(e: Exception):
    print(f"Error: {e}", file=sys.stderr)
    sys.exit(1)


def run_pmatrix(
    model: str,
    states: int,
    time: float,
    rate: float,
    freqs: Optional[str],
    output: Optional[Path],
    format: str,
    quiet: bool,
):
    """Print the transition probability matrix for one branch."""
    try:
        name = normalize_model_name(model)
        substitution_model = create_model(name, states, parse_frequencies(freqs))
        P = substitution_model.get_transition_probabilities(time, 0.0, rate)
    except ValueError as e:
        _fail(e)

    info = {"model": name, "states": states, "time": time, "rate": rate}
    write_output(format_matrix(P, format, "P", info), output, quiet)


def run_qmatrix(
    model: str,
    states: int,
    freqs: Optional[str],
    output: Optional[Path],
    format: str,
    quiet: bool,
):
    """Print the instantaneous rate matrix."""
    try:
        name = normalize_model_name(model)
        substitution_model = create_model(name, states, parse_frequencies(freqs))
        Q = substitution_model.get_rate_matrix()
    except ValueError as e:
        _fail(e)

    info = {"model": name, "states": states}
    write_output(format_matrix(Q, format, "Q", info), output, quiet)


def run_relative_rates(
    scheme: str,
    states: int,
    flat: bool,
    output: Optional[Path],
    format: str,
    quiet: bool,
):
    """Print the relative rate layout of an ordinal scheme."""
    try:
        rate_scheme = RelativeRateScheme(scheme)
        rates = rate_scheme.build(states)
        if not flat:
            rates = relative_rates_to_matrix(rates, states)
    except ValueError as e:
        _fail(e)

    info = {"scheme": rate_scheme.value, "states": states}
    write_output(format_matrix(rates, format, "rates", info), output, quiet)
