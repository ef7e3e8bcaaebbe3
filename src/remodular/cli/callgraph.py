"""Call graph command: per-method resolved callees."""

import json
from pathlib import Path
from typing import Optional

from rich.markup import escape
from rich.table import Table

from ..graph import ClassUnit, load_class_model, resolve_calls
from ..graph.resolver import CallResolution
from ..logging_config import setup_logging, verbosity_for
from ..serializers import serialize_call_graph
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
    package_styles,
    resolve_config,
)


@app.command()
def callgraph(
    model: Path = MODEL_ARGUMENT,
    fmt: str = FORMAT_OPTION,
    verbose: bool = VERBOSE_OPTION,
    quiet: bool = QUIET_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
):
    """
    Resolve method invocations into a call graph.

    Each invocation links to the first method with the same name and
    parameter count; calls that match nothing in the model are dropped.

    [bold cyan]Examples:[/bold cyan]

      remodular callgraph model.json

      remodular callgraph model.json --format json
    """
    check_format(fmt)
    logger = setup_logging(verbosity_for(verbose, quiet))

    with cli_errors(logger, verbose, fmt):
        settings = resolve_config(config=config, verbose=verbose, quiet=quiet)
        setup_logging(settings.verbosity, log_file=settings.log_file)
        classes = load_class_model(model)
        resolution = resolve_calls(classes)

        if fmt == "json":
            data = serialize_call_graph(resolution.graph)
            data["unresolved"] = {
                str(key): sigs for key, sigs in sorted(resolution.unresolved.items())
            }
            print(json.dumps(data, indent=2))
        else:
            _output_rich(classes, resolution, verbose=verbose)


def _output_rich(classes: list[ClassUnit], resolution: CallResolution, verbose: bool = False):
    styles = package_styles(classes)
    graph = resolution.graph

    table = Table(title="Call Graph", show_lines=False)
    table.add_column("Method", no_wrap=True)
    table.add_column("Calls")
    if verbose:
        table.add_column("Unresolved", style="dim")

    for cls in classes:
        style = styles[cls.package]
        for method in cls.methods:
            key = cls.method_key(method)
            callees = escape(", ".join(str(c) for c in dict.fromkeys(method.callees))) or "[dim]-[/dim]"
            row = [f"[{style}]{escape(str(key))}[/{style}]", callees]
            if verbose:
                row.append(escape(", ".join(resolution.unresolved.get(key, []))))
            table.add_row(*row)

    console.print(table)
    console.print(
        f"  [green]{len(graph.methods)}[/green] methods, "
        f"[green]{graph.edge_count}[/green] call edges, "
        f"[yellow]{resolution.unresolved_count}[/yellow] unresolved calls"
    )
