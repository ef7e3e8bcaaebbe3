"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="remodular",
    help="Remodular - call-graph coupling analysis and module discovery",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool):
    if value:
        console.print(f"remodular {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """Analyze a JSON class model: call graph, class coupling, candidate modules."""


# Import subcommands to register them
from .callgraph import callgraph as _callgraph  # noqa: F401, E402
from .coupling import coupling as _coupling  # noqa: F401, E402
from .modules import modules as _modules  # noqa: F401, E402
