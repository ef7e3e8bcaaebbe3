"""
Remodular - Call-Graph Coupling and Module Discovery

Resolves method invocations of an object-oriented class model into a call
graph, measures normalized coupling between classes, and clusters classes
hierarchically to propose candidate architectural modules.
"""

__version__ = "0.3.0"
__author__ = "Naman Agarwal"

from .api import analyze
from .clustering import ClusteringEngine, Dendrogram, Module, ModuleIdentifier
from .graph import CallResolver, ClassUnit, CouplingAnalyzer, MethodUnit
from .pipeline import AnalysisResult, run_pipeline

__all__ = [
    "analyze",  # Main entry point
    "run_pipeline",
    "AnalysisResult",
    "ClassUnit",
    "MethodUnit",
    "CallResolver",
    "CouplingAnalyzer",
    "ClusteringEngine",
    "Dendrogram",
    "Module",
    "ModuleIdentifier",
]
