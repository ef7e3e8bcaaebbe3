"""Modules command: hierarchical clustering and module identification."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from ..graph import load_class_model
from ..logging_config import setup_logging, verbosity_for
from ..pipeline import AnalysisResult, run_pipeline
from ..serializers import serialize_result
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
def modules(
    model: Path = MODEL_ARGUMENT,
    threshold: Optional[float] = typer.Option(
        None,
        "--threshold",
        "-t",
        help="Minimum internal coupling of a module, in [0, 1] (default from config: 0.02)",
    ),
    show_merges: bool = typer.Option(
        False,
        "--show-merges",
        "-m",
        help="Also print every clustering step",
    ),
    fmt: str = FORMAT_OPTION,
    verbose: bool = VERBOSE_OPTION,
    quiet: bool = QUIET_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
):
    """
    Cluster classes on coupling and propose candidate modules.

    [bold cyan]Examples:[/bold cyan]

      remodular modules model.json

      remodular modules model.json --threshold 0.05 --show-merges
    """
    check_format(fmt)
    logger = setup_logging(verbosity_for(verbose, quiet))

    with cli_errors(logger, verbose, fmt):
        settings = resolve_config(config=config, threshold=threshold, verbose=verbose, quiet=quiet)
        setup_logging(settings.verbosity, log_file=settings.log_file)
        classes = load_class_model(model)
        result = run_pipeline(
            classes,
            settings.coupling_threshold,
            large_model_warning=settings.large_model_warning,
        )

        if fmt == "json":
            print(json.dumps(serialize_result(result, settings.precision), indent=2))
        else:
            _output_rich(result, settings.precision, show_merges=show_merges)


def _output_rich(result: AnalysisResult, precision: int, show_merges: bool = False):
    if show_merges and result.dendrogram.merges:
        merges = Table(title="Dendrogram")
        merges.add_column("Level", justify="right")
        merges.add_column("Merged")
        merges.add_column("With")
        merges.add_column("Coupling", justify="right")
        for m in result.dendrogram.merges:
            merges.add_row(
                str(m.level),
                escape(", ".join(m.left.members)),
                escape(", ".join(m.right.members)),
                f"{m.coupling:.{precision}f}",
            )
        console.print(merges)

    if not result.modules:
        console.print(
            f"[yellow]No module reaches internal coupling {result.threshold}.[/yellow]"
        )
        return

    table = Table(title=f"Candidate Modules (threshold {result.threshold})")
    table.add_column("#", justify="right")
    table.add_column("Classes")
    table.add_column("Score", justify="right")
    for idx, module in enumerate(result.modules, 1):
        table.add_row(str(idx), escape(", ".join(module.class_names)), f"{module.score:.{precision}f}")
    console.print(table)
