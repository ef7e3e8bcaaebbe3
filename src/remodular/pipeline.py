"""Analysis pipeline: call resolution, coupling, clustering, modules.

Every stage produces a result the next stage only reads; the pipeline
holds no shared mutable state and can run on any worker thread. It does not
validate the threshold; callers go through ``remodular.api.analyze`` or
``remodular.config.validate_threshold`` first.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .clustering import ClusteringEngine, Dendrogram, Module
from .clustering.engine import DEFAULT_LARGE_MODEL_WARNING
from .graph import CallResolution, CallResolver, ClassUnit, CouplingAnalyzer
from .graph.models import CallGraph, unique_classes
from .logging_config import get_logger, stage_timer

logger = get_logger(__name__)


@dataclass
class AnalysisResult:
    """Output forms of a full run."""

    classes: list[ClassUnit]
    resolution: CallResolution
    coupling: CouplingAnalyzer
    dendrogram: Dendrogram
    modules: list[Module]
    threshold: float
    timings: dict[str, float] = field(default_factory=dict)

    @property
    def call_graph(self) -> CallGraph:
        return self.resolution.graph

    @property
    def module_class_names(self) -> list[list[str]]:
        return [m.class_names for m in self.modules]


def run_pipeline(
    classes: Iterable[ClassUnit],
    threshold: float,
    large_model_warning: int = DEFAULT_LARGE_MODEL_WARNING,
) -> AnalysisResult:
    """Run CallResolver → CouplingAnalyzer → ClusteringEngine → ModuleIdentifier."""
    timings: dict[str, float] = {}
    units = unique_classes(classes)

    with stage_timer(logger, "resolve", timings):
        resolution = CallResolver(units).resolve()
    logger.info(
        f"Call graph: {len(resolution.graph.methods)} methods, "
        f"{resolution.graph.edge_count} edges"
    )

    with stage_timer(logger, "coupling", timings):
        coupling = CouplingAnalyzer(resolution)
    logger.info(f"Coupling: {len(coupling.normalized)} pairs, {coupling.total} inter-class matches")

    with stage_timer(logger, "clustering", timings):
        engine = ClusteringEngine(units, coupling.normalized, large_model_warning=large_model_warning)
        dendrogram = engine.run()

    with stage_timer(logger, "modules", timings):
        modules = engine.module_identifier().identify(threshold)

    return AnalysisResult(
        classes=units,
        resolution=resolution,
        coupling=coupling,
        dendrogram=dendrogram,
        modules=modules,
        threshold=threshold,
        timings=timings,
    )
