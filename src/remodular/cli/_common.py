"""Shared CLI helpers."""

import json
from contextlib import contextmanager
from logging import Logger
from pathlib import Path
from typing import Iterator, Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..config import AnalysisConfig, load_config
from ..exceptions import RemodularError
from ..graph import ClassUnit

console = Console()

MODEL_ARGUMENT = typer.Argument(
    ...,
    help="JSON class model produced by a source-model provider",
    exists=True,
    file_okay=True,
    dir_okay=False,
    readable=True,
)

CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Configuration file (TOML)",
    exists=True,
    file_okay=True,
    dir_okay=False,
)

FORMAT_OPTION = typer.Option(
    "rich",
    "--format",
    "-f",
    help="Output format: rich (human-readable) or json",
)

VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Debug logging")
QUIET_OPTION = typer.Option(False, "--quiet", "-q", help="Only log errors")

_FORMATS = ("rich", "json")


def resolve_config(
    config: Optional[Path] = None,
    threshold: Optional[float] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> AnalysisConfig:
    """Build configuration from CLI options."""
    overrides: dict = {}
    if threshold is not None:
        overrides["coupling_threshold"] = threshold
    if verbose:
        overrides["verbose"] = True
    if quiet:
        overrides["quiet"] = True
    return load_config(config_file=config, **overrides)


def check_format(fmt: str) -> str:
    if fmt not in _FORMATS:
        raise typer.BadParameter(f"expected one of {', '.join(_FORMATS)}", param_hint="--format")
    return fmt


def package_styles(classes: list[ClassUnit]) -> dict[str, str]:
    """Colour per package, built fresh for each rendering call."""
    palette = ["cyan", "magenta", "green", "yellow", "blue", "red", "bright_cyan", "bright_magenta"]
    styles: dict[str, str] = {}
    for cls in classes:
        if cls.package not in styles:
            styles[cls.package] = palette[len(styles) % len(palette)]
    return styles


@contextmanager
def cli_errors(logger: Logger, verbose: bool = False, fmt: str = "rich") -> Iterator[None]:
    """Turn library errors into a red message (or a JSON error object) and exit status 1."""
    try:
        yield
    except typer.Exit:
        raise
    except RemodularError as e:
        if fmt == "json":
            print(json.dumps(e.to_dict(), indent=2))
        else:
            console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)
