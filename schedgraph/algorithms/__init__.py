"""Graph analysis algorithms: SCCs, condensation, ordering and DAG paths."""

from schedgraph.algorithms.condensation import component_membership, condense
from schedgraph.algorithms.dag_paths import (
    find_critical_path,
    longest_paths,
    reconstruct_path,
    shortest_paths,
)
from schedgraph.algorithms.scc import decompose_scc, tarjan_scc
from schedgraph.algorithms.topo import (
    derive_task_order,
    dfs_order,
    has_cycle,
    kahn_order,
    topological_order,
)
from schedgraph.algorithms.types import (
    Metrics,
    OrderResult,
    PathMode,
    PathResult,
    SCCResult,
    TopoMethod,
    WeightPolicy,
)

__all__ = [
    "Metrics",
    "OrderResult",
    "PathMode",
    "PathResult",
    "SCCResult",
    "TopoMethod",
    "WeightPolicy",
    "component_membership",
    "condense",
    "decompose_scc",
    "derive_task_order",
    "dfs_order",
    "find_critical_path",
    "has_cycle",
    "kahn_order",
    "longest_paths",
    "reconstruct_path",
    "shortest_paths",
    "tarjan_scc",
    "topological_order",
]
