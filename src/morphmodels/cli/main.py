"""Main CLI application for morphmodels."""

import typer
from pathlib import Path
from typing import Optional
from enum import Enum

from morphmodels import __version__

app = typer.Typer(
    name="morphmodels",
    help="Substitution models for discrete morphological characters",
    no_args_is_help=True,
)


class ModelName(str, Enum):
    """Substitution model."""
    LEWIS_MK = "lewis-mk"
    ORDINAL = "ordinal"
    NESTED_ORDINAL = "nested-ordinal"


class SchemeName(str, Enum):
    """Relative rate layout."""
    ORDINAL = "ordinal"
    NESTED_ORDINAL = "nested-ordinal"


class OutputFormat(str, Enum):
    """Output format."""
    TEXT = "text"
    JSON = "json"
    TSV = "tsv"


def _version_callback(value: bool):
    if value:
        typer.echo(f"morphmodels {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """Substitution models for discrete morphological characters."""


@app.command()
def pmatrix(
    model: ModelName = typer.Option(
        ModelName.LEWIS_MK,
        "--model", "-m",
        help="Substitution model",
    ),
    states: int = typer.Option(
        ...,
        "--states", "-n",
        help="Number of character states",
    ),
    time: float = typer.Option(
        1.0,
        "--time", "-t",
        help="Branch length (elapsed time)",
    ),
    rate: float = typer.Option(
        1.0,
        "--rate", "-r",
        help="Rate multiplier",
        min=0.0,
    ),
    freqs: Optional[str] = typer.Option(
        None,
        "--freqs",
        help="Comma-separated stationary frequencies (default: uniform)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Output file (default: stdout)",
    ),
    format: OutputFormat = typer.Option(
        OutputFormat.TEXT,
        "--format",
        help="Output format",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet", "-q",
        help="Minimal output",
    ),
):
    """
    Compute the transition probability matrix P(t) for one branch.

    Example:
        morphmodels pmatrix -n 4 -t 0.5
        morphmodels pmatrix -m ordinal -n 5 -t 1.0 --format json
    """
    from .commands.matrices import run_pmatrix

    run_pmatrix(
        model=model.value,
        states=states,
        time=time,
        rate=rate,
        freqs=freqs,
        output=output,
        format=format.value,
        quiet=quiet,
    )


@app.command()
def qmatrix(
    model: ModelName = typer.Option(
        ModelName.LEWIS_MK,
        "--model", "-m",
        help="Substitution model",
    ),
    states: int = typer.Option(
        ...,
        "--states", "-n",
        help="Number of character states",
    ),
    freqs: Optional[str] = typer.Option(
        None,
        "--freqs",
        help="Comma-separated stationary frequencies (default: uniform)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Output file (default: stdout)",
    ),
    format: OutputFormat = typer.Option(
        OutputFormat.TEXT,
        "--format",
        help="Output format",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet", "-q",
        help="Minimal output",
    ),
):
    """
    Print the instantaneous rate matrix Q.

    Example:
        morphmodels qmatrix -n 4
        morphmodels qmatrix -n 4 --freqs 0.1,0.2,0.3,0.4
    """
    from .commands.matrices import run_qmatrix

    run_qmatrix(
        model=model.value,
        states=states,
        freqs=freqs,
        output=output,
        format=format.value,
        quiet=quiet,
    )


@app.command(name="relative-rates")
def relative_rates(
    scheme: SchemeName = typer.Option(
        SchemeName.ORDINAL,
        "--scheme",
        help="Relative rate layout",
    ),
    states: int = typer.Option(
        ...,
        "--states", "-n",
        help="Number of character states",
    ),
    flat: bool = typer.Option(
        False,
        "--flat",
        help="Print the flat off-diagonal vector instead of the square matrix",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Output file (default: stdout)",
    ),
    format: OutputFormat = typer.Option(
        OutputFormat.TEXT,
        "--format",
        help="Output format",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet", "-q",
        help="Minimal output",
    ),
):
    """
    Show which state changes an ordinal scheme permits.

    Example:
        morphmodels relative-rates -n 5
        morphmodels relative-rates --scheme nested-ordinal -n 5 --flat
    """
    from .commands.matrices import run_relative_rates

    run_relative_rates(
        scheme=scheme.value,
        states=states,
        flat=flat,
        output=output,
        format=format.value,
        quiet=quiet,
    )


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
