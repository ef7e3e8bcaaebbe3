"""Analysis-related exceptions: model loading and input shape."""

from pathlib import Path
from typing import Optional

from .base import RemodularError


class AnalysisError(RemodularError):
    """Base class for analysis-related errors."""
    pass


class ModelLoadError(AnalysisError):
    """Raised when a class model document cannot be read or understood."""

    def __init__(self, path: Optional[Path], reason: str):
        where = str(path) if path is not None else "<memory>"
        super().__init__(
            f"Cannot load class model: {where}",
            details={"path": where, "reason": reason},
        )
        self.path = path
        self.reason = reason
