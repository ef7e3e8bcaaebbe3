"""Public API for Remodular.

Example:
    >>> from remodular import analyze
    >>>
    >>> # From a JSON class model
    >>> result = analyze("model.json", threshold=0.03)
    >>> result.module_class_names
    [['OrderService', 'OrderRepository'], ...]
    >>>
    >>> # From ClassUnit objects built by your own source-model provider
    >>> result = analyze(classes)
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Union

from .config import load_config, validate_threshold
from .graph import ClassUnit, load_class_model
from .logging_config import get_logger, setup_logging
from .pipeline import AnalysisResult, run_pipeline

logger = get_logger(__name__)

ModelSource = Union[str, Path, Iterable[ClassUnit]]


def analyze(
    model: ModelSource,
    threshold: Optional[float] = None,
    config_file: Optional[Path] = None,
    configure_logging: bool = False,
    **overrides,
) -> AnalysisResult:
    """Resolve calls, compute coupling, cluster and identify modules.

    Args:
        model: Path to a JSON class model, or ClassUnit objects
        threshold: Coupling threshold ``cp`` in [0, 1]; defaults to the
            configured ``coupling_threshold``
        config_file: Optional explicit config file path
        configure_logging: Install the rich log handler for this run
        **overrides: Configuration overrides (e.g., verbose=True)

    Returns:
        AnalysisResult with call graph, coupling, dendrogram and modules

    Raises:
        InvalidConfigError: If the threshold is outside [0, 1]
        ConfigurationError: If configuration can't be loaded
        ModelLoadError: If a model file can't be read
    """
    if threshold is not None:
        overrides["coupling_threshold"] = validate_threshold(threshold)
    config = load_config(config_file=config_file, **overrides)

    if configure_logging:
        setup_logging(config.verbosity, log_file=config.log_file)

    if isinstance(model, (str, Path)):
        classes = load_class_model(Path(model))
    else:
        classes = list(model)

    logger.info(f"Analyzing {len(classes)} classes at threshold {config.coupling_threshold}")
    return run_pipeline(
        classes,
        config.coupling_threshold,
        large_model_warning=config.large_model_warning,
    )
