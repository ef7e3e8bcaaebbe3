"""Call resolution: match recorded invocation signatures to concrete methods.

Matching uses (name, parameter count) only. No type information is involved,
so the same signature can match methods in several classes:

  * call-graph edges link only the FIRST matching method in class/method
    iteration order (one edge per invocation site),
  * coupling inputs record EVERY class owning a matching method.

Signatures that match nothing (library calls, code outside the analyzed set)
are dropped from both outputs and only reported in ``unresolved``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from ..logging_config import get_logger
from .models import CallEdge, CallGraph, ClassUnit, MethodKey, unique_classes

logger = get_logger(__name__)


@dataclass
class CallResolution:
    """Everything the resolver derives from a class model."""

    graph: CallGraph = field(default_factory=CallGraph)
    # signature -> class keys owning a method with it, first-seen order
    signature_owners: dict[str, list[str]] = field(default_factory=dict)
    # class key -> resolved signature occurrences, one per (method, signature)
    class_calls: dict[str, list[str]] = field(default_factory=dict)
    # method key -> signatures that matched nothing
    unresolved: dict[MethodKey, list[str]] = field(default_factory=dict)
    class_keys: list[str] = field(default_factory=list)

    @property
    def unresolved_count(self) -> int:
        return sum(len(sigs) for sigs in self.unresolved.values())


class CallResolver:
    """Resolves call signatures of a class model into a call graph."""

    def __init__(self, classes: Iterable[ClassUnit]):
        self.classes = unique_classes(classes)
        self._first_target: dict[str, MethodKey] = {}
        self._owners: dict[str, list[str]] = {}
        self._index_signatures()

    def _index_signatures(self) -> None:
        for cls in self.classes:
            for method in cls.methods:
                sig = method.signature
                self._first_target.setdefault(sig, cls.method_key(method))
                owners = self._owners.setdefault(sig, [])
                if cls.qualified_name not in owners:
                    owners.append(cls.qualified_name)

    def first_match(self, signature: str) -> MethodKey | None:
        """Method linked for a call-graph edge, or None if unresolved."""
        return self._first_target.get(signature)

    def matching_classes(self, signature: str) -> list[str]:
        """All classes owning a method with this signature."""
        return list(self._owners.get(signature, []))

    def resolve(self) -> CallResolution:
        """Resolve every recorded invocation of every method."""
        graph = CallGraph()
        for cls in self.classes:
            for method in cls.methods:
                key = cls.method_key(method)
                graph.methods.setdefault(key, method)
                graph.adjacency.setdefault(key, [])
                graph.reverse.setdefault(key, [])

        resolution = CallResolution(
            graph=graph,
            signature_owners={sig: list(owners) for sig, owners in self._owners.items()},
            class_keys=[cls.qualified_name for cls in self.classes],
        )

        for cls in self.classes:
            occurrences = resolution.class_calls.setdefault(cls.qualified_name, [])
            for method in cls.methods:
                key = cls.method_key(method)
                callees: list[MethodKey] = []
                for sig in method.call_signatures:
                    target = self._first_target.get(sig)
                    if target is None:
                        resolution.unresolved.setdefault(key, []).append(sig)
                        continue
                    callees.append(target)
                    occurrences.append(sig)
                    graph.edges.append(CallEdge(key, target))
                    graph.adjacency[key].append(target)
                    graph.reverse[target].append(key)
                method.callees = callees

        logger.debug(
            f"Resolved {graph.edge_count} call edges across {len(graph.methods)} methods "
            f"({resolution.unresolved_count} unresolved signatures dropped)"
        )
        return resolution


def resolve_calls(classes: Iterable[ClassUnit]) -> CallResolution:
    """Build the call graph and coupling inputs for a class model."""
    return CallResolver(classes).resolve()
