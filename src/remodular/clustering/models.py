"""Dendrogram data models: clusters, levels, modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from ..graph.models import ClassUnit


@dataclass(frozen=True, eq=False)
class Cluster:
    """Immutable dendrogram node.

    A leaf wraps exactly one class; an internal node owns exactly two
    children and the coupling value that won its merge. Equality is
    identity: two clusters are the same node only if they are the same
    object.
    """

    members: tuple[str, ...]
    left: Optional["Cluster"] = None
    right: Optional["Cluster"] = None
    coupling: float = 0.0
    unit: Optional[ClassUnit] = None

    def __post_init__(self) -> None:
        assert (self.left is None) == (self.right is None), "cluster must have 0 or 2 children"
        if self.left is None:
            assert self.unit is not None and len(self.members) == 1, "leaf wraps exactly one class"

    @classmethod
    def leaf(cls, unit: ClassUnit) -> "Cluster":
        return cls(members=(unit.qualified_name,), unit=unit)

    @classmethod
    def merge(cls, left: "Cluster", right: "Cluster", coupling: float) -> "Cluster":
        return cls(members=left.members + right.members, left=left, right=right, coupling=coupling)

    @property
    def is_leaf(self) -> bool:
        return self.left is None

    @property
    def size(self) -> int:
        return len(self.members)

    def walk(self) -> Iterator["Cluster"]:
        """Yield this cluster and all descendants in pre-order (node, left, right)."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)

    def leaves(self) -> list["Cluster"]:
        return [node for node in self.walk() if node.is_leaf]

    def __repr__(self) -> str:
        if self.is_leaf:
            return f"Cluster({self.members[0]})"
        return f"Cluster({', '.join(self.members)}; coupling={self.coupling:.4f})"


Level = tuple[Cluster, ...]


@dataclass
class Merge:
    """One agglomeration step: ``left`` and ``right`` became ``parent``."""

    level: int
    left: Cluster
    right: Cluster
    parent: Cluster

    @property
    def coupling(self) -> float:
        return self.parent.coupling


@dataclass
class Dendrogram:
    """Append-only sequence of partition levels.

    Level 0 holds one leaf per class; level k holds N - k clusters; the last
    level holds the root alone. Levels share cluster objects, so a cluster
    dropped from one level is still reachable as a child in the next.
    """

    levels: list[Level] = field(default_factory=list)
    merges: list[Merge] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.levels)

    @property
    def class_count(self) -> int:
        return len(self.levels[0]) if self.levels else 0

    @property
    def root(self) -> Optional[Cluster]:
        if not self.levels:
            return None
        final = self.levels[-1]
        assert len(final) == 1, "dendrogram is incomplete: final level has more than one cluster"
        return final[0]

    def level(self, k: int) -> Level:
        return self.levels[k]

    def shape(self) -> list[tuple[tuple[str, ...], ...]]:
        """Member tuples of every cluster of every level, for comparisons."""
        return [tuple(c.members for c in level) for level in self.levels]


@dataclass
class Module:
    """A dendrogram subtree that passed the internal-coupling filter.

    ``clusters`` are all clusters of the subtree in pre-order, starting with
    ``root``; ``score`` is their mean pairwise inter-cluster coupling.
    """

    root: Cluster
    clusters: tuple[Cluster, ...]
    score: float

    @property
    def class_names(self) -> list[str]:
        return list(self.root.members)

    @property
    def size(self) -> int:
        return self.root.size
