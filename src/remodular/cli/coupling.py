"""Coupling command: normalized class-pair coupling."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from ..graph import CouplingAnalyzer, load_class_model
from ..logging_config import setup_logging, verbosity_for
from ..serializers import serialize_coupling
from . import app
from ._common import (
    CONFIG_OPTION,
    FORMAT_OPTION,
    MODEL_ARGUMENT,
    QUIET_OPTION,
    VERBOSE_OPTION,
    check_format,
    cli_errors,
    console,
    resolve_config,
)


@app.command()
def coupling(
    model: Path = MODEL_ARGUMENT,
    top: int = typer.Option(
        20,
        "--top",
        "-t",
        help="Number of class pairs to display",
        min=1,
        max=10000,
    ),
    fmt: str = FORMAT_OPTION,
    verbose: bool = VERBOSE_OPTION,
    quiet: bool = QUIET_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
):
    """
    Measure coupling between every pair of classes.

    Scores are inter-class call matches divided by the total, so all pairs
    sum to 1.

    [bold cyan]Examples:[/bold cyan]

      remodular coupling model.json --top 10
    """
    check_format(fmt)
    logger = setup_logging(verbosity_for(verbose, quiet))

    with cli_errors(logger, verbose, fmt):
        settings = resolve_config(config=config, verbose=verbose, quiet=quiet)
        setup_logging(settings.verbosity, log_file=settings.log_file)
        analyzer = CouplingAnalyzer.from_classes(load_class_model(model))

        if fmt == "json":
            data = serialize_coupling(analyzer, settings.precision)
            data["pairs"] = data["pairs"][:top]
            print(json.dumps(data, indent=2))
            return

        if analyzer.total == 0:
            console.print("[yellow]No inter-class calls found.[/yellow]")
            return

        table = Table(title="Class Coupling")
        table.add_column("Class A")
        table.add_column("Class B")
        table.add_column("Coupling", justify="right")
        table.add_column("Calls", justify="right")
        for (a, b), value, raw in analyzer.ranked()[:top]:
            table.add_row(escape(a), escape(b), f"{value:.{settings.precision}f}", str(raw))
        console.print(table)
        console.print(f"  Total inter-class calls: [green]{analyzer.total}[/green]")
