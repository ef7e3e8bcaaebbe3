"""Hierarchical clustering of classes and module identification."""

from .engine import ClusteringEngine
from .models import Cluster, Dendrogram, Merge, Module
from .modules import ModuleIdentifier, modules_as_class_names

__all__ = [
    "Cluster",
    "ClusteringEngine",
    "Dendrogram",
    "Merge",
    "Module",
    "ModuleIdentifier",
    "modules_as_class_names",
]
