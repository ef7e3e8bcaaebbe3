"""Configuration loading and management for Remodular.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.remodular.toml)
    3. Project config (./remodular.toml)
    4. Explicit config file
    5. Environment variables (REMODULAR_* prefix)
    6. Keyword overrides (CLI flags, API arguments)

Example:
    >>> config = load_config(coupling_threshold=0.05)
    >>> config.coupling_threshold
    0.05
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

_VERBOSITIES = ("quiet", "normal", "verbose")


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for a coupling/clustering run.

    Attributes:
        coupling_threshold: Minimum internal coupling a dendrogram subtree
            needs to be reported as a module. Must be in [0, 1]; 0.01-0.05
            works well for normalized coupling on a few hundred classes.
        large_model_warning: Class count above which a warning about the
            clustering and module-scoring cost is logged.
        precision: Decimal places used when reporting scores.
        verbosity: Logging verbosity level.
        log_file: Optional path that also receives log records.
    """

    coupling_threshold: float = 0.02
    large_model_warning: int = 300
    precision: int = 4
    verbosity: Verbosity = "normal"
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        validate_threshold(self.coupling_threshold)
        if self.large_model_warning < 1:
            raise InvalidConfigError(
                "large_model_warning", self.large_model_warning, "must be at least 1"
            )
        if not 0 <= self.precision <= 12:
            raise InvalidConfigError("precision", self.precision, "must be between 0 and 12")
        if self.verbosity not in _VERBOSITIES:
            raise InvalidConfigError(
                "verbosity", self.verbosity, f"must be one of {', '.join(_VERBOSITIES)}"
            )


def validate_threshold(cp: Any) -> float:
    """Check that a coupling threshold lies in [0, 1] and return it as float.

    Raises:
        InvalidConfigError: If cp is not a number in [0, 1]
    """
    if isinstance(cp, bool) or not isinstance(cp, (int, float)):
        raise InvalidConfigError("coupling_threshold", cp, "must be a number")
    value = float(cp)
    # NaN fails both comparisons
    if not 0.0 <= value <= 1.0:
        raise InvalidConfigError("coupling_threshold", cp, "must be between 0.0 and 1.0")
    return value


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``verbose``
            and ``quiet`` booleans are translated to ``verbosity``; ``None``
            values are ignored.

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is missing or unreadable, or a
            key is unknown
        InvalidConfigError: If a value is out of range
    """
    merged: dict = {}

    global_config = Path.home() / ".remodular.toml"
    if global_config.exists():
        merged.update(_read_config_file(global_config, "global"))

    project_config = Path.cwd() / "remodular.toml"
    if project_config.exists():
        merged.update(_read_config_file(project_config, "project"))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_read_config_file(config_file, "explicit"))

    merged.update(_load_env_vars())

    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"
    merged.update(overrides)

    unknown = sorted(set(merged) - set(AnalysisConfig.__dataclass_fields__))
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration keys: {', '.join(unknown)}",
            details={"allowed": ", ".join(AnalysisConfig.__dataclass_fields__)},
        )

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _read_config_file(path: Path, label: str) -> dict:
    try:
        data = _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid {label} config '{path}': {e}")
    # Settings may live at top level or under a [remodular] table
    section = data.get("remodular", data)
    if not isinstance(section, dict):
        raise ConfigurationError(f"Invalid {label} config '{path}': [remodular] must be a table")
    return dict(section)


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from REMODULAR_* environment variables.

    Supported environment variables:
        REMODULAR_COUPLING_THRESHOLD: float
        REMODULAR_LARGE_MODEL_WARNING: int
        REMODULAR_PRECISION: int
        REMODULAR_VERBOSITY: quiet/normal/verbose
        REMODULAR_LOG_FILE: path

    Returns:
        Dict of field_name -> parsed_value for any REMODULAR_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"REMODULAR_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(field_name, env_value, f"{env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If neither tomllib nor tomli is available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or the 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
