"""Plain-data forms of analysis results for JSON output.

All rounding happens HERE, not in the analyzers; the in-memory results keep
full precision.
"""

from __future__ import annotations

from typing import Any, Sequence

from .clustering import Cluster, Dendrogram, Module
from .graph import CallGraph, CouplingAnalyzer
from .pipeline import AnalysisResult


def serialize_call_graph(graph: CallGraph) -> dict[str, Any]:
    """Per-method list of resolved direct callees."""
    return {
        "method_count": len(graph.methods),
        "edge_count": graph.edge_count,
        "methods": {
            str(key): [str(callee) for callee in graph.adjacency.get(key, [])]
            for key in graph.methods
        },
    }


def serialize_coupling(coupling: CouplingAnalyzer, precision: int = 4) -> dict[str, Any]:
    """Pair -> score map, sorted by descending coupling."""
    return {
        "total": coupling.total,
        "pairs": [
            {"a": a, "b": b, "coupling": round(value, precision), "calls": raw}
            for (a, b), value, raw in coupling.ranked()
        ],
    }


def serialize_cluster(cluster: Cluster, precision: int = 4) -> dict[str, Any]:
    """Nested tree form of a cluster, filled in top-down with an explicit stack."""
    tree = _cluster_fields(cluster, precision)
    stack = [(cluster, tree)]
    while stack:
        node, data = stack.pop()
        if node.is_leaf:
            continue
        assert node.left is not None and node.right is not None
        data["left"] = _cluster_fields(node.left, precision)
        data["right"] = _cluster_fields(node.right, precision)
        stack.append((node.right, data["right"]))
        stack.append((node.left, data["left"]))
    return tree


def _cluster_fields(cluster: Cluster, precision: int) -> dict[str, Any]:
    if cluster.is_leaf:
        return {"class": cluster.members[0]}
    return {"coupling": round(cluster.coupling, precision), "classes": list(cluster.members)}


def serialize_dendrogram(dendrogram: Dendrogram, precision: int = 4) -> dict[str, Any]:
    root = dendrogram.root
    return {
        "levels": [[list(c.members) for c in level] for level in dendrogram.levels],
        "merges": [
            {
                "level": m.level,
                "left": list(m.left.members),
                "right": list(m.right.members),
                "coupling": round(m.coupling, precision),
            }
            for m in dendrogram.merges
        ],
        "tree": serialize_cluster(root, precision) if root is not None else None,
    }


def serialize_modules(modules: Sequence[Module], precision: int = 4) -> list[dict[str, Any]]:
    return [
        {"classes": module.class_names, "score": round(module.score, precision)}
        for module in modules
    ]


def serialize_result(result: AnalysisResult, precision: int = 4) -> dict[str, Any]:
    return {
        "summary": {
            "classes": len(result.classes),
            "methods": len(result.call_graph.methods),
            "call_edges": result.call_graph.edge_count,
            "unresolved_calls": result.resolution.unresolved_count,
            "inter_class_calls": result.coupling.total,
            "threshold": result.threshold,
            "module_count": len(result.modules),
        },
        "coupling": serialize_coupling(result.coupling, precision),
        "dendrogram": serialize_dendrogram(result.dendrogram, precision),
        "modules": serialize_modules(result.modules, precision),
    }
