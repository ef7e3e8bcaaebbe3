"""
Logging for Remodular.

Log records go to stderr through a rich handler so that ``--format json``
output on stdout stays machine-readable. Verbosity follows
``AnalysisConfig.verbosity``:

    quiet   -> ERROR   (only failures)
    normal  -> WARNING (duplicate classes, large models)
    verbose -> DEBUG   (per-merge detail, unresolved calls, stage timings)
"""

import logging
import time
from contextlib import contextmanager
from typing import Iterator, MutableMapping, Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "remodular"

VERBOSITY_LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}


def verbosity_for(verbose: bool = False, quiet: bool = False) -> str:
    """Verbosity name for the -v/-q command-line flags (quiet wins)."""
    if quiet:
        return "quiet"
    if verbose:
        return "verbose"
    return "normal"


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """
    Install the stderr rich handler (and optional file handler).

    Calling it again replaces the previous handlers, so the CLI can start
    from the command-line flags and reconfigure once settings are loaded.

    Args:
        verbosity: One of ``quiet``, ``normal``, ``verbose``
        log_file: Optional file that also receives every record

    Returns:
        The ``remodular`` package logger
    """
    level = VERBOSITY_LEVELS[verbosity]
    verbose = verbosity == "verbose"

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            # Class names like Box[int] are not markup
            markup=False,
            show_time=True,
            show_path=verbose,
        )
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``remodular`` namespace (``graph.resolver`` -> ``remodular.graph.resolver``)."""
    if name is None:
        return logging.getLogger(LOGGER_NAME)
    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)


@contextmanager
def stage_timer(
    logger: logging.Logger, stage: str, timings: MutableMapping[str, float]
) -> Iterator[None]:
    """
    Time one pipeline stage into ``timings[stage]`` and log it at DEBUG.

    The duration is recorded even when the stage raises.
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        timings[stage] = elapsed
        logger.debug(f"Stage {stage} took {elapsed:.3f}s")
