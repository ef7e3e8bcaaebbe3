"""Tests for module identification from the dendrogram."""

import pytest

from remodular.clustering.engine import ClusteringEngine
from remodular.clustering.models import Dendrogram
from remodular.clustering.modules import ModuleIdentifier, modules_as_class_names
from remodular.graph.coupling import CouplingAnalyzer
from remodular.graph.loader import classes_from_data
from remodular.graph.models import ClassUnit


def _identifier(classes, couplings=None):
    if couplings is None:
        couplings = CouplingAnalyzer.from_classes(classes).normalized
    engine = ClusteringEngine(classes, couplings)
    return ModuleIdentifier(engine.run(), engine.inter_cluster_coupling)


class TestCandidates:
    """Every subtree is a candidate, scored by mean pairwise coupling."""

    def test_every_cluster_is_a_candidate(self, three_classes):
        candidates = _identifier(three_classes).candidates()
        assert [m.root.members for m in candidates] == [
            ("C", "A", "B"),
            ("C",),
            ("A", "B"),
            ("A",),
            ("B",),
        ]

    def test_scores(self, three_classes):
        scores = {m.root.members: m.score for m in _identifier(three_classes).candidates()}
        # [AB, A, B]: (0.3 + 0.3 + 0.6) / 3
        assert scores[("A", "B")] == pytest.approx(0.4)
        assert scores[("C", "A", "B")] == pytest.approx(2.7333333 / 10)
        assert scores[("C",)] == 0.0

    def test_members_include_whole_subtree(self, three_classes):
        root_module = _identifier(three_classes).candidates()[0]
        assert len(root_module.clusters) == 5
        assert root_module.clusters[0] is root_module.root

    def test_internal_coupling_of_fewer_than_two(self):
        identifier = ModuleIdentifier(Dendrogram(), lambda a, b: 1.0)
        assert identifier.internal_coupling([]) == 0.0


class TestIdentify:
    """Threshold filter and N // 2 cap."""

    def test_scenario_keeps_best_half(self, three_classes):
        modules = _identifier(three_classes).identify(0.01)
        assert modules_as_class_names(modules) == [["A", "B"]]
        assert modules[0].score == pytest.approx(0.4)

    def test_threshold_is_inclusive(self, three_classes):
        identifier = _identifier(three_classes)
        score = identifier.candidates()[2].score
        assert [m.class_names for m in identifier.identify(score)] == [["A", "B"]]

    def test_high_threshold_drops_everything(self, three_classes):
        assert _identifier(three_classes).identify(0.5) == []

    def test_never_more_than_half(self, model_document):
        classes = classes_from_data(model_document)
        modules = _identifier(classes).identify(0.0)
        assert len(modules) <= len(classes) // 2

    def test_model_document_modules(self, model_document):
        classes = classes_from_data(model_document)
        modules = _identifier(classes).identify(0.02)
        assert modules_as_class_names(modules) == [
            ["shop.orders.OrderService", "shop.orders.OrderRepository"],
            ["shop.common.Validator", "shop.common.AuditLog"],
        ]
        assert modules[0].score == pytest.approx(1 / 3)
        assert modules[1].score == pytest.approx(1 / 6)

    def test_ties_keep_discovery_order(self):
        classes = [ClassUnit(name=n) for n in ("P", "Q", "R", "S")]
        modules = _identifier(classes, {}).identify(0.0)
        assert [m.class_names for m in modules] == [["P", "Q", "R", "S"], ["P", "Q"]]


class TestDegenerateInputs:
    """Single class, unconnected pair, empty model."""

    def test_single_class(self, single_class):
        identifier = _identifier(single_class)
        assert identifier.identify(0.01) == []
        assert identifier.identify(0.0) == []

    def test_unconnected_pair_root_scores_zero(self, isolated_pair):
        identifier = _identifier(isolated_pair)
        assert identifier.candidates()[0].score == 0.0
        assert identifier.identify(0.01) == []
        zero = identifier.identify(0.0)
        assert [m.class_names for m in zero] == [["Left", "Right"]]

    def test_empty_dendrogram(self):
        assert ModuleIdentifier(Dendrogram(), lambda a, b: 0.0).identify(0.0) == []

    def test_engine_convenience(self, three_classes):
        engine = ClusteringEngine(three_classes, CouplingAnalyzer.from_classes(three_classes).normalized)
        assert [m.class_names for m in engine.identify_modules(0.01)] == [["A", "B"]]


class TestCouplingTable:
    """The vectorized table scores candidates like the pairwise callable."""

    def test_table_and_callable_agree(self, model_document):
        classes = classes_from_data(model_document)
        engine = ClusteringEngine(classes, CouplingAnalyzer.from_classes(classes).normalized)
        dendrogram = engine.run()
        pairwise = ModuleIdentifier(dendrogram, engine.inter_cluster_coupling).candidates()
        tabled = engine.module_identifier().candidates()
        assert [m.root for m in tabled] == [m.root for m in pairwise]
        assert [m.clusters for m in tabled] == [m.clusters for m in pairwise]
        assert [m.score for m in tabled] == pytest.approx([m.score for m in pairwise])

    def test_root_score(self, model_document):
        classes = classes_from_data(model_document)
        engine = ClusteringEngine(classes, CouplingAnalyzer.from_classes(classes).normalized)
        engine.run()
        assert engine.module_identifier().candidates()[0].score == pytest.approx(0.1339, abs=1e-4)
