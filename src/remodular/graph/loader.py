"""Read a materialized class model from JSON.

The document is either ``{"classes": [...]}`` or a bare list of class
objects::

    {"name": "OrderService", "package": "com.shop", "attributes": 3,
     "methods": [{"name": "place", "parameters": 1, "lines": 12,
                  "calls": ["save:1", "validate:0"]}]}

Only ``name`` is required on classes and methods.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from ..exceptions import ModelLoadError
from ..logging_config import get_logger
from .models import ClassUnit, MethodUnit

logger = get_logger(__name__)


def load_class_model(path: Path) -> list[ClassUnit]:
    """Load classes from a JSON model file.

    Raises:
        ModelLoadError: If the file can't be read, isn't JSON, or has the
            wrong shape
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ModelLoadError(path, e.strerror or str(e))
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise ModelLoadError(path, f"invalid JSON at line {e.lineno}: {e.msg}")

    classes = classes_from_data(document, path)
    logger.info(f"Loaded {len(classes)} classes from {path}")
    return classes


def classes_from_data(document: Any, path: Optional[Path] = None) -> list[ClassUnit]:
    """Build ClassUnit objects from an already-parsed JSON document."""
    if isinstance(document, dict):
        entries = document.get("classes")
    else:
        entries = document
    if not isinstance(entries, list):
        raise ModelLoadError(path, "expected a list of classes or an object with a 'classes' list")

    return [_class_from_dict(entry, i, path) for i, entry in enumerate(entries)]


def _class_from_dict(entry: Any, position: int, path: Optional[Path]) -> ClassUnit:
    where = f"classes[{position}]"
    if not isinstance(entry, dict):
        raise ModelLoadError(path, f"{where} must be an object")
    name = _require_name(entry, where, path)

    methods_data = entry.get("methods", [])
    if not isinstance(methods_data, list):
        raise ModelLoadError(path, f"{where}.methods must be a list")

    return ClassUnit(
        name=name,
        package=_optional_str(entry, "package", where, path),
        attribute_count=_optional_int(entry, "attributes", where, path),
        methods=[
            _method_from_dict(m, f"{where}.methods[{j}]", path) for j, m in enumerate(methods_data)
        ],
    )


def _method_from_dict(entry: Any, where: str, path: Optional[Path]) -> MethodUnit:
    if not isinstance(entry, dict):
        raise ModelLoadError(path, f"{where} must be an object")
    calls = entry.get("calls", [])
    if not isinstance(calls, list) or not all(isinstance(c, str) for c in calls):
        raise ModelLoadError(path, f"{where}.calls must be a list of 'name:count' strings")

    return MethodUnit(
        name=_require_name(entry, where, path),
        parameter_count=_optional_int(entry, "parameters", where, path),
        line_count=_optional_int(entry, "lines", where, path),
        call_signatures=list(calls),
    )


def _require_name(entry: dict, where: str, path: Optional[Path]) -> str:
    name = entry.get("name")
    if not isinstance(name, str) or not name:
        raise ModelLoadError(path, f"{where}.name must be a non-empty string")
    return name


def _optional_str(entry: dict, field_name: str, where: str, path: Optional[Path]) -> str:
    value = entry.get(field_name, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ModelLoadError(path, f"{where}.{field_name} must be a string")
    return value


def _optional_int(entry: dict, field_name: str, where: str, path: Optional[Path]) -> int:
    value = entry.get(field_name, 0)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ModelLoadError(path, f"{where}.{field_name} must be a non-negative integer")
    return value
