"""Exception hierarchy for Remodular."""

from .analysis import AnalysisError, ModelLoadError
from .base import RemodularError
from .config import ConfigurationError, InvalidConfigError

__all__ = [
    "RemodularError",
    "AnalysisError",
    "ModelLoadError",
    "ConfigurationError",
    "InvalidConfigError",
]
