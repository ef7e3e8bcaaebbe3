"""Base exception for Remodular."""

from typing import Any, Mapping, Optional


class RemodularError(Exception):
    """Base exception for all Remodular errors.

    ``details`` names what to fix in the input: the offending config key,
    the model path, the position inside the model document. Values are
    stored as strings so they appear unchanged in JSON error output.
    """

    def __init__(self, message: str, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details: dict[str, str] = {key: str(value) for key, value in (details or {}).items()}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        return f"{self.message} ({', '.join(f'{k}={v}' for k, v in self.details.items())})"

    def to_dict(self) -> dict[str, Any]:
        """Payload printed by ``--format json`` commands on failure."""
        return {"error": type(self).__name__, "message": self.message, "details": dict(self.details)}
