"""Data models for the class/method model and the resolved call graph.

Ontology levels:
  Level 1: Constructs (classes, methods): handed in by a source-model provider
  Level 2: Relationships (method calls): call graph edges
  Level 3: Measurements (class-pair coupling): see coupling.py
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, NamedTuple

from ..logging_config import get_logger

logger = get_logger(__name__)


def call_signature(name: str, parameter_count: int) -> str:
    """Build the textual ``name:paramCount`` key used to match invocations."""
    return f"{name}:{parameter_count}"


# ── Level 1: Constructs ────────────────────────────────────────────


class MethodKey(NamedTuple):
    """Stable arena key of a method: owning class, name and arity."""

    class_name: str
    name: str
    parameter_count: int

    @property
    def signature(self) -> str:
        return call_signature(self.name, self.parameter_count)

    def __str__(self) -> str:
        return f"{self.class_name}.{self.name}/{self.parameter_count}"


@dataclass
class MethodUnit:
    """A method as recorded by the source-model provider.

    ``call_signatures`` holds the textual ``name:paramCount`` of every
    invocation found in the body. Duplicates collapse, first-seen order is
    kept. ``callees`` is assigned by the call resolver.
    """

    name: str
    parameter_count: int = 0
    line_count: int = 0
    call_signatures: list[str] = field(default_factory=list)
    callees: list[MethodKey] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.call_signatures = list(dict.fromkeys(self.call_signatures))

    @property
    def signature(self) -> str:
        return call_signature(self.name, self.parameter_count)


@dataclass
class ClassUnit:
    """A class with its owned methods, in declaration order."""

    name: str
    package: str = ""
    attribute_count: int = 0
    methods: list[MethodUnit] = field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        return f"{self.package}.{self.name}" if self.package else self.name

    def method_key(self, method: MethodUnit) -> MethodKey:
        return MethodKey(self.qualified_name, method.name, method.parameter_count)


def unique_classes(classes: Iterable[ClassUnit]) -> list[ClassUnit]:
    """Drop classes whose qualified name was already seen.

    The first occurrence wins; later duplicates are logged and ignored.
    """
    seen: set[str] = set()
    result: list[ClassUnit] = []
    for cls in classes:
        key = cls.qualified_name
        if key in seen:
            logger.warning(f"Duplicate class {key!r} ignored; keeping first definition")
            continue
        seen.add(key)
        result.append(cls)
    return result


# ── Level 2: Relationships (the call graph) ────────────────────────


class CallEdge(NamedTuple):
    """Directed invocation from one method to another. May be a self-call."""

    caller: MethodKey
    callee: MethodKey


@dataclass
class CallGraph:
    """Arena of methods addressed by MethodKey plus the resolved edges.

    Edges reference methods only by key, so cycles and self-calls need no
    special handling. Overloads sharing a key share one arena slot (the
    first declared method) and their edges are merged under that key.
    """

    methods: dict[MethodKey, MethodUnit] = field(default_factory=dict)
    adjacency: dict[MethodKey, list[MethodKey]] = field(default_factory=dict)
    reverse: dict[MethodKey, list[MethodKey]] = field(default_factory=dict)
    edges: list[CallEdge] = field(default_factory=list)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def callees(self, key: MethodKey) -> list[MethodKey]:
        return list(self.adjacency.get(key, []))

    def callers(self, key: MethodKey) -> list[MethodKey]:
        return list(self.reverse.get(key, []))
