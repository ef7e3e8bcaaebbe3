"""Agglomerative clustering of classes on normalized coupling.

Similarity between two clusters is the sum of coupling over every member
pair divided by the product of the cluster sizes. Each step merges the pair
with the strictly greatest similarity; ties go to the first pair in (i, j)
nested-iteration order over the current level, so identical input always
yields an identical dendrogram. When every pair scores 0 the same rule still
applies and produces a well-defined (if meaningless) tree.

The engine keeps a block-sum matrix for the current level: entry (i, j) is
the summed coupling between the members of cluster i and cluster j. A merge
replaces two rows with their sum, sum(c1 + c2, c3) = sum(c1, c3) + sum(c2, c3),
so each step costs O(k^2) array work instead of re-reading member pairs.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence

import numpy as np

from ..graph.coupling import PairKey, coupling_matrix
from ..graph.models import ClassUnit, unique_classes
from ..logging_config import get_logger
from .models import Cluster, Dendrogram, Level, Merge, Module
from .modules import ModuleIdentifier

logger = get_logger(__name__)

DEFAULT_LARGE_MODEL_WARNING = 300


class ClusteringEngine:
    """Builds a dendrogram from classes and a pair->coupling map."""

    def __init__(
        self,
        classes: Iterable[ClassUnit],
        couplings: Mapping[PairKey, float],
        large_model_warning: int = DEFAULT_LARGE_MODEL_WARNING,
    ):
        """Initialize the engine with level 0 of the dendrogram.

        Args:
            classes: Classes to cluster; leaf order follows this order
            couplings: Canonical (min, max) class-key pairs -> normalized
                coupling. Missing pairs count as 0.
            large_model_warning: Class count above which a cost warning is logged
        """
        self.classes = unique_classes(classes)
        keys = [cls.qualified_name for cls in self.classes]
        self._index = {key: i for i, key in enumerate(keys)}
        self._matrix = coupling_matrix(keys, couplings)
        self._indices: dict[Cluster, np.ndarray] = {}
        self._large_model_warning = large_model_warning

        self.dendrogram = Dendrogram()
        # Block sums of the level they were computed for
        self._sums_level: Optional[Level] = None
        self._level_sums: Optional[np.ndarray] = None
        if self.classes:
            level0 = tuple(Cluster.leaf(cls) for cls in self.classes)
            self.dendrogram.levels.append(level0)
            self._sums_level = level0
            self._level_sums = self._matrix.copy()
        self._done = len(self.classes) <= 1

    def coupling(self, class_a: str, class_b: str) -> float:
        i = self._index.get(class_a)
        j = self._index.get(class_b)
        if i is None or j is None:
            return 0.0
        return float(self._matrix[i, j])

    def inter_cluster_coupling(self, c1: Cluster, c2: Cluster) -> float:
        """Sum of member-pair coupling divided by |c1| * |c2|."""
        total = self._matrix[np.ix_(self._member_indices(c1), self._member_indices(c2))].sum()
        return float(total) / (c1.size * c2.size)

    def coupling_table(self, clusters: Sequence[Cluster]) -> np.ndarray:
        """Inter-cluster coupling between every pair of ``clusters`` (k x k)."""
        sums = self._block_sums(clusters)
        sizes = np.array([c.size for c in clusters], dtype=float)
        return sums / np.outer(sizes, sizes)

    def _block_sums(self, clusters: Sequence[Cluster]) -> np.ndarray:
        if clusters is self._sums_level and self._level_sums is not None:
            return self._level_sums
        membership = np.zeros((len(clusters), len(self.classes)))
        for row, cluster in enumerate(clusters):
            membership[row, self._member_indices(cluster)] = 1.0
        return membership @ self._matrix @ membership.T

    def _member_indices(self, cluster: Cluster) -> np.ndarray:
        indices = self._indices.get(cluster)
        if indices is None:
            indices = np.array([self._index[m] for m in cluster.members], dtype=np.intp)
            self._indices[cluster] = indices
        return indices

    def find_best_pair(self, level: Level) -> tuple[int, int, float]:
        """Indices and similarity of the pair to merge next.

        The first pair in (i, j) order with the strictly greatest value wins.
        """
        assert len(level) >= 2, "find_best_pair needs at least two clusters"
        sums = self._block_sums(level)
        sizes = np.array([c.size for c in level], dtype=float)
        rows, cols = np.triu_indices(len(level), 1)
        values = sums[rows, cols] / (sizes[rows] * sizes[cols])
        # triu_indices is row-major and argmax returns the first maximum
        best = int(np.argmax(values))
        return int(rows[best]), int(cols[best]), float(values[best])

    def step(self) -> Optional[Merge]:
        """Perform one merge and append the next level. None once complete."""
        current = self.dendrogram.levels[-1] if self.dendrogram.levels else ()
        if len(current) <= 1:
            self._done = True
            return None

        i, j, value = self.find_best_pair(current)
        parent = Cluster.merge(current[i], current[j], value)
        next_level = tuple(c for k, c in enumerate(current) if k != i and k != j) + (parent,)

        self._level_sums = self._merged_sums(self._block_sums(current), i, j)
        self._sums_level = next_level

        merge = Merge(level=len(self.dendrogram.levels), left=current[i], right=current[j], parent=parent)
        self.dendrogram.levels.append(next_level)
        self.dendrogram.merges.append(merge)
        logger.debug(
            f"Level {merge.level}: merged [{', '.join(current[i].members)}] + "
            f"[{', '.join(current[j].members)}] at {value:.6f}"
        )
        if len(next_level) == 1:
            self._done = True
        return merge

    @staticmethod
    def _merged_sums(sums: np.ndarray, i: int, j: int) -> np.ndarray:
        """Block sums after clusters i and j merge into one appended last."""
        keep = [k for k in range(len(sums)) if k != i and k != j]
        merged = sums[i] + sums[j]
        result = np.empty((len(keep) + 1, len(keep) + 1))
        result[:-1, :-1] = sums[np.ix_(keep, keep)]
        result[:-1, -1] = merged[keep]
        result[-1, :-1] = merged[keep]
        result[-1, -1] = merged[i] + merged[j]
        return result

    def run(self) -> Dendrogram:
        """Merge until a single root cluster remains and return the dendrogram."""
        n = len(self.classes)
        if n > self._large_model_warning:
            logger.warning(
                f"Clustering {n} classes; module scoring grows roughly with n^3 "
                f"and may take a while"
            )
        while not self._done:
            self.step()
        logger.info(f"Clustering finished: {len(self.dendrogram)} levels for {n} classes")
        return self.dendrogram

    def module_identifier(self) -> ModuleIdentifier:
        """ModuleIdentifier over this engine's dendrogram and coupling table."""
        return ModuleIdentifier(self.dendrogram, self.inter_cluster_coupling, table=self.coupling_table)

    def identify_modules(self, cp: float) -> list[Module]:
        """Run clustering if needed, then extract modules at threshold ``cp``."""
        self.run()
        return self.module_identifier().identify(cp)
