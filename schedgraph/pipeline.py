"""End-to-end scheduling analysis of a task graph.

`analyze` chains the individual algorithms:

1. Tarjan SCC decomposition of the task graph.
2. Condensation of the SCCs into a DAG.
3. Topological order of the condensation (Kahn or DFS).
4. Expansion of that order into a task execution order.
5. Shortest paths over the condensation from the source task's component.
6. Critical path over the whole condensation.

Every stage builds its own state; the input graph is only read.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from schedgraph.algorithms.condensation import condense
from schedgraph.algorithms.dag_paths import find_critical_path, shortest_paths
from schedgraph.algorithms.scc import tarjan_scc
from schedgraph.algorithms.topo import derive_task_order, topological_order
from schedgraph.algorithms.types import Metrics, OrderResult, PathResult, SCCResult
from schedgraph.config import DEFAULT_CONFIG, AnalysisConfig
from schedgraph.errors import VertexRangeError
from schedgraph.graph.task_graph import TaskGraph
from schedgraph.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ScheduleAnalysis:
    """Results of every pipeline stage for one task graph.

    Attributes:
        graph: The analyzed task graph.
        config: Settings the analysis ran with.
        scc: Strongly connected components of ``graph``.
        condensation: Condensation DAG; vertex ``i`` is component ``i``.
        scc_order: Topological order of the condensation.
        task_order: Task execution order derived from ``scc_order``.
        source: Source task, or None for an empty graph.
        source_component: Component containing ``source``.
        shortest: Shortest paths over the condensation from
            ``source_component``; None for an empty graph.
        critical: Critical-path relaxation over the condensation.
    """

    graph: TaskGraph
    config: AnalysisConfig
    scc: SCCResult
    condensation: TaskGraph
    scc_order: OrderResult
    task_order: List[int]
    source: Optional[int]
    source_component: Optional[int]
    shortest: Optional[PathResult]
    critical: PathResult

    @property
    def critical_path(self) -> List[int]:
        """Component ids along the critical path (empty for an empty graph)."""
        end = self.critical.endpoint
        if end is None:
            return []
        return self.critical.require_path(end)

    @property
    def critical_length(self) -> int:
        length = self.critical.length
        return 0 if length is None else length

    @property
    def critical_tasks(self) -> List[int]:
        """Tasks of the components on the critical path, in path order."""
        return derive_task_order(self.critical_path, self.scc.components)

    def metrics(self) -> Dict[str, Metrics]:
        stages = {
            "scc": self.scc.metrics,
            "topological_order": self.scc_order.metrics,
        }
        if self.shortest is not None:
            stages["shortest_paths"] = self.shortest.metrics
        stages["critical_path"] = self.critical.metrics
        return stages

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable summary of all stages."""
        shortest: Optional[Dict[str, Any]] = None
        if self.shortest is not None:
            shortest = self.shortest.to_dict()
            shortest["paths"] = {
                str(c): self.shortest.path_to(c)
                for c in self.condensation.vertices()
                if self.shortest.reachable(c)
            }
        return {
            "graph": {
                "n": self.graph.vertex_count,
                "edges": self.graph.edge_count,
                "directed": self.graph.directed,
            },
            "config": {
                "topo_method": self.config.topo_method.name.lower(),
                "weight_policy": self.config.weight_policy.name.lower(),
            },
            "sccs": [list(c) for c in self.scc.components],
            "condensation": {
                "n": self.condensation.vertex_count,
                "edges": [
                    {"u": e.source, "v": e.target, "w": e.weight}
                    for e in self.condensation.iter_edges()
                ],
            },
            "scc_order": list(self.scc_order.order),
            "task_order": list(self.task_order),
            "source": self.source,
            "source_component": self.source_component,
            "shortest_paths": shortest,
            "critical_path": {
                "components": self.critical_path,
                "tasks": self.critical_tasks,
                "length": self.critical_length,
                "distances": list(self.critical.distances),
            },
            "metrics": {name: m.to_dict() for name, m in self.metrics().items()},
        }


def analyze(
    graph: TaskGraph,
    source: Optional[int] = None,
    config: Optional[AnalysisConfig] = None,
) -> ScheduleAnalysis:
    """Run the full scheduling analysis on ``graph``.

    Args:
        graph: Task graph; may contain cycles.
        source: Task whose component seeds the shortest-path pass. Defaults
            to ``config.default_source`` (ignored for an empty graph).
        config: Analysis settings; defaults to `DEFAULT_CONFIG`.

    Returns:
        ScheduleAnalysis with the output of every stage.

    Raises:
        VertexRangeError: If ``source`` is not a vertex of a non-empty graph.
    """
    cfg = config or DEFAULT_CONFIG
    n = graph.vertex_count

    if source is None and n > 0:
        source = cfg.default_source
    if source is not None and not 0 <= source < n:
        raise VertexRangeError(source, n, "source")

    scc = tarjan_scc(graph)
    logger.debug(f"Stage scc: {len(scc)} components, sizes={scc.sizes()}")

    condensation = condense(graph, scc, policy=cfg.weight_policy)
    scc_order = topological_order(condensation, cfg.topo_method)
    task_order = derive_task_order(scc_order.order, scc.components)
    logger.debug(f"Stage order: scc_order={scc_order.order}")

    source_component: Optional[int] = None
    shortest: Optional[PathResult] = None
    if source is not None:
        source_component = scc.component_of(source)
        shortest = shortest_paths(condensation, scc_order.order, source_component)

    critical = find_critical_path(condensation, scc_order.order)

    analysis = ScheduleAnalysis(
        graph=graph,
        config=cfg,
        scc=scc,
        condensation=condensation,
        scc_order=scc_order,
        task_order=task_order,
        source=source,
        source_component=source_component,
        shortest=shortest,
        critical=critical,
    )
    logger.info(
        f"Analyzed {n} tasks: {len(scc)} SCCs "
        f"({len(scc.nontrivial())} cyclic), critical path length "
        f"{analysis.critical_length} over {len(analysis.critical_path)} components"
    )
    return analysis
