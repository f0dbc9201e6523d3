"""schedgraph: task-graph analysis for execution scheduling.

schedgraph decomposes a directed, edge-weighted task graph into strongly
connected components, collapses them into a condensation DAG, orders that DAG
topologically and computes shortest, longest and critical-path distances over
the order.

Primary API:
    TaskGraph - Dense-id weighted multigraph (extends networkx.MultiDiGraph)
    analyze() - Run the full pipeline and collect every stage's result
    tarjan_scc(), condense(), topological_order(), derive_task_order()
    shortest_paths(), longest_paths(), find_critical_path(), reconstruct_path()

Example:
    from schedgraph import TaskGraph, analyze

    g = TaskGraph(4)
    g.add_edge(0, 1, 5)
    g.add_edge(1, 0, 1)
    g.add_edge(1, 2, 3)
    g.add_edge(2, 3, 2)

    result = analyze(g, source=0)
    result.task_order       # [1, 0, 2, 3]
    result.critical_path    # component ids along the heaviest chain
"""

from __future__ import annotations

from schedgraph import cli, logging
from schedgraph._version import __version__
from schedgraph.algorithms import (
    Metrics,
    OrderResult,
    PathMode,
    PathResult,
    SCCResult,
    TopoMethod,
    WeightPolicy,
    condense,
    decompose_scc,
    derive_task_order,
    dfs_order,
    find_critical_path,
    has_cycle,
    kahn_order,
    longest_paths,
    reconstruct_path,
    shortest_paths,
    tarjan_scc,
    topological_order,
)
from schedgraph.config import DEFAULT_CONFIG, AnalysisConfig
from schedgraph.errors import (
    CycleDetectedError,
    NoPathError,
    OrderMismatchError,
    PreconditionViolation,
    SchedGraphError,
    StructuralError,
    VertexRangeError,
)
from schedgraph.graph import Edge, TaskGraph
from schedgraph.io import GraphDocument, load_graph_document, load_graph_file
from schedgraph.pipeline import ScheduleAnalysis, analyze

__all__ = [
    # Version
    "__version__",
    # Model
    "Edge",
    "TaskGraph",
    "GraphDocument",
    "load_graph_document",
    "load_graph_file",
    # Algorithms
    "tarjan_scc",
    "decompose_scc",
    "condense",
    "topological_order",
    "kahn_order",
    "dfs_order",
    "has_cycle",
    "derive_task_order",
    "shortest_paths",
    "longest_paths",
    "find_critical_path",
    "reconstruct_path",
    # Pipeline
    "analyze",
    "ScheduleAnalysis",
    "AnalysisConfig",
    "DEFAULT_CONFIG",
    # Types
    "Metrics",
    "OrderResult",
    "PathMode",
    "PathResult",
    "SCCResult",
    "TopoMethod",
    "WeightPolicy",
    # Errors
    "SchedGraphError",
    "StructuralError",
    "CycleDetectedError",
    "PreconditionViolation",
    "VertexRangeError",
    "OrderMismatchError",
    "NoPathError",
    # Utilities
    "cli",
    "logging",
]
