"""Class-level coupling derived from resolved call signatures.

For every unordered pair of distinct classes (A, B) the raw coupling counts
signature matches where a method of A records a signature owned by a method
of B (or vice versa). An invocation matching methods in three other classes
increments three pair counters. Raw counts are normalized by the grand total,
so normalized values lie in [0, 1] and sum to 1; with no inter-class matches
the normalized map is empty.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

import numpy as np

from ..logging_config import get_logger
from .models import ClassUnit
from .resolver import CallResolution, resolve_calls

logger = get_logger(__name__)

PairKey = tuple[str, str]


def coupling_key(class_a: str, class_b: str) -> PairKey:
    """Canonical (min, max) key for an unordered class pair."""
    return (class_a, class_b) if class_a <= class_b else (class_b, class_a)


class CouplingAnalyzer:
    """Symmetric normalized pairwise coupling. Immutable after construction."""

    def __init__(self, resolution: CallResolution):
        raw: dict[PairKey, int] = {}
        total = 0
        for source, signatures in resolution.class_calls.items():
            for sig in signatures:
                for target in resolution.signature_owners.get(sig, ()):
                    if target == source:
                        continue
                    key = coupling_key(source, target)
                    raw[key] = raw.get(key, 0) + 1
                    total += 1

        normalized: dict[PairKey, float] = {}
        if total > 0:
            normalized = {key: count / total for key, count in raw.items()}

        self._class_keys = list(resolution.class_keys)
        self._raw = raw
        self._normalized = normalized
        self._total = total

        logger.debug(f"Coupling: {len(raw)} class pairs, {total} inter-class matches")

    @classmethod
    def from_classes(cls, classes: Iterable[ClassUnit]) -> "CouplingAnalyzer":
        return cls(resolve_calls(classes))

    @property
    def class_keys(self) -> list[str]:
        return list(self._class_keys)

    @property
    def normalized(self) -> Mapping[PairKey, float]:
        """Read-only view of the normalized coupling map."""
        return MappingProxyType(self._normalized)

    @property
    def total(self) -> int:
        """Total number of inter-class signature matches."""
        return self._total

    def coupling(self, class_a: str, class_b: str) -> float:
        """Normalized coupling of a pair, order-insensitive (0.0 if absent)."""
        if class_a == class_b:
            return 0.0
        return self._normalized.get(coupling_key(class_a, class_b), 0.0)

    def raw_coupling(self, class_a: str, class_b: str) -> int:
        """Raw match count of a pair, order-insensitive (0 if absent)."""
        if class_a == class_b:
            return 0
        return self._raw.get(coupling_key(class_a, class_b), 0)

    def ranked(self) -> list[tuple[PairKey, float, int]]:
        """(pair, normalized, raw) sorted by descending coupling, then pair."""
        return sorted(
            ((key, value, self._raw[key]) for key, value in self._normalized.items()),
            key=lambda item: (-item[1], item[0]),
        )

    def matrix(self, class_keys: Sequence[str] | None = None) -> np.ndarray:
        """Dense symmetric coupling matrix over ``class_keys`` (zero diagonal)."""
        keys = list(self._class_keys if class_keys is None else class_keys)
        return coupling_matrix(keys, self._normalized)


def coupling_matrix(class_keys: Sequence[str], couplings: Mapping[PairKey, float]) -> np.ndarray:
    """Build a dense symmetric matrix from a pair->coupling map.

    Pairs naming classes outside ``class_keys`` are ignored; missing pairs are 0.
    """
    index = {key: i for i, key in enumerate(class_keys)}
    matrix = np.zeros((len(class_keys), len(class_keys)), dtype=np.float64)
    for (a, b), value in couplings.items():
        i = index.get(a)
        j = index.get(b)
        if i is None or j is None or i == j:
            continue
        matrix[i, j] = value
        matrix[j, i] = value
    return matrix
