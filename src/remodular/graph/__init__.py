"""Class model, call resolution and class coupling."""

from .coupling import CouplingAnalyzer, coupling_key
from .loader import load_class_model
from .models import CallEdge, CallGraph, ClassUnit, MethodKey, MethodUnit
from .resolver import CallResolution, CallResolver, resolve_calls

__all__ = [
    "CallEdge",
    "CallGraph",
    "CallResolution",
    "CallResolver",
    "ClassUnit",
    "CouplingAnalyzer",
    "MethodKey",
    "MethodUnit",
    "coupling_key",
    "load_class_model",
    "resolve_calls",
]
