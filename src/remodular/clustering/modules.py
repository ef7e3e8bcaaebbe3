"""Module identification: extract coupled subtrees from a dendrogram.

Every cluster of the tree (root, internal nodes, leaves) is a candidate.
A candidate's member clusters are all clusters of its subtree in pre-order,
and its internal coupling is the mean inter-cluster coupling over every
unordered member pair (0 with fewer than two members). Candidates scoring
strictly below the threshold are dropped; if more than N // 2 survive
(N = number of classes) only the N // 2 best are kept, ties in discovery
order.

A subtree over m classes holds 2m - 1 clusters and its pre-order is a
contiguous slice of the root's pre-order, so one coupling table over the
whole tree scores every candidate.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

import numpy as np

from ..logging_config import get_logger
from .models import Cluster, Dendrogram, Module

logger = get_logger(__name__)

Similarity = Callable[[Cluster, Cluster], float]
SimilarityTable = Callable[[Sequence[Cluster]], np.ndarray]


class ModuleIdentifier:
    """Filters dendrogram subtrees by internal coupling."""

    def __init__(
        self,
        dendrogram: Dendrogram,
        similarity: Similarity,
        table: Optional[SimilarityTable] = None,
    ):
        """
        Args:
            dendrogram: A completed dendrogram (last level holds one cluster)
            similarity: Inter-cluster coupling, normally
                ``ClusteringEngine.inter_cluster_coupling``
            table: Optional vectorized form of ``similarity`` returning the
                k x k matrix for k clusters, normally
                ``ClusteringEngine.coupling_table``
        """
        self.dendrogram = dendrogram
        self.similarity = similarity
        self.table = table

    def similarity_table(self, clusters: Sequence[Cluster]) -> np.ndarray:
        """Pairwise similarity of ``clusters``; only the upper triangle is used."""
        if self.table is not None:
            return self.table(clusters)
        n = len(clusters)
        result = np.zeros((n, n))
        for i in range(n):
            for j in range(i + 1, n):
                result[i, j] = self.similarity(clusters[i], clusters[j])
        return result

    def internal_coupling(self, clusters: Sequence[Cluster]) -> float:
        return _mean_pairwise(self.similarity_table(clusters))

    def candidates(self) -> list[Module]:
        """Every subtree of the dendrogram, scored, in pre-order of their roots."""
        root = self.dendrogram.root
        if root is None:
            return []
        nodes = tuple(root.walk())
        table = self.similarity_table(nodes)
        modules = []
        for start, node in enumerate(nodes):
            end = start + 2 * node.size - 1
            modules.append(
                Module(
                    root=node,
                    clusters=nodes[start:end],
                    score=_mean_pairwise(table[start:end, start:end]),
                )
            )
        return modules

    def identify(self, cp: float) -> list[Module]:
        """Modules whose internal coupling is at least ``cp``.

        ``cp`` is expected to be validated by the caller (see
        ``remodular.config.validate_threshold``).
        """
        candidates = self.candidates()
        kept = [m for m in candidates if m.score >= cp]

        limit = self.dendrogram.class_count // 2
        if len(kept) > limit:
            # sorted() is stable, so equal scores keep discovery order
            kept = sorted(kept, key=lambda m: m.score, reverse=True)[:limit]

        logger.info(
            f"Module identification: {len(candidates)} candidates, "
            f"{len(kept)} kept at threshold {cp}"
        )
        return kept


def _mean_pairwise(block: np.ndarray) -> float:
    n = len(block)
    if n <= 1:
        return 0.0
    return float(np.triu(block, 1).sum()) / (n * (n - 1) // 2)


def modules_as_class_names(modules: Sequence[Module]) -> list[list[str]]:
    """Flat form of a module list: each module as its class names."""
    return [module.class_names for module in modules]
