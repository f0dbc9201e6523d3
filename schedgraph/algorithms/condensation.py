"""Condensation of a graph by its strongly connected components.

Each component becomes one vertex of a new `TaskGraph`; an edge ``i -> j``
exists iff some original edge leaves component ``i`` and enters component
``j`` with ``i != j``. Parallel inter-component edges are merged into one,
weighted according to a `WeightPolicy`.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple, Union

from schedgraph.algorithms.types import SCCResult, WeightPolicy
from schedgraph.errors import OrderMismatchError
from schedgraph.graph.task_graph import TaskGraph
from schedgraph.logging import get_logger

logger = get_logger(__name__)

Components = Union[SCCResult, Sequence[Sequence[int]]]


def component_membership(sccs: Components, n: int) -> List[int]:
    """Map every vertex to the index of the component containing it.

    Args:
        sccs: Components as an SCCResult or a list of vertex lists.
        n: Vertex count of the graph the components belong to.

    Returns:
        List of length ``n`` with the component index per vertex.

    Raises:
        OrderMismatchError: If the components do not partition ``0..n-1``.
    """
    membership = [-1] * n
    for comp_id, members in enumerate(sccs):
        for v in members:
            if not 0 <= v < n:
                raise OrderMismatchError(
                    f"Component {comp_id} contains vertex {v} outside 0..{n - 1}"
                )
            if membership[v] != -1:
                raise OrderMismatchError(
                    f"Vertex {v} appears in components {membership[v]} and {comp_id}"
                )
            membership[v] = comp_id

    missing = [v for v, c in enumerate(membership) if c == -1]
    if missing:
        raise OrderMismatchError(
            f"Components do not cover {len(missing)} vertex(es), e.g. {missing[:5]}"
        )
    return membership


def condense(
    graph: TaskGraph,
    sccs: Components,
    policy: Union[WeightPolicy, str] = WeightPolicy.FIRST,
) -> TaskGraph:
    """Build the condensation DAG of ``graph``.

    Original edges are scanned by source vertex id, then insertion order.
    Condensation edges are added in first-seen order of their component pair.

    Args:
        graph: Original graph.
        sccs: Its strongly connected components (e.g. from `tarjan_scc`).
        policy: Weight kept when several original edges join the same pair
            of components. ``FIRST`` keeps the first one encountered.

    Returns:
        Directed TaskGraph with one vertex per component and at most one
        edge per ordered component pair, without self-loops.

    Raises:
        OrderMismatchError: If ``sccs`` does not partition the vertices.
    """
    policy = WeightPolicy.coerce(policy)
    membership = (
        sccs.membership
        if isinstance(sccs, SCCResult)
        else component_membership(sccs, graph.vertex_count)
    )
    if len(membership) != graph.vertex_count:
        raise OrderMismatchError(
            f"SCC membership covers {len(membership)} vertices, "
            f"graph has {graph.vertex_count}"
        )

    # Insertion-ordered: (src_comp, dst_comp) -> weight
    weights: Dict[Tuple[int, int], int] = {}
    for edge in graph.iter_edges():
        pair = (membership[edge.source], membership[edge.target])
        if pair[0] == pair[1]:
            continue
        current = weights.get(pair)
        if current is None:
            weights[pair] = edge.weight
        elif policy == WeightPolicy.MIN and edge.weight < current:
            weights[pair] = edge.weight
        elif policy == WeightPolicy.MAX and edge.weight > current:
            weights[pair] = edge.weight

    condensation = TaskGraph(len(sccs), directed=True)
    for (src, dst), w in weights.items():
        condensation.add_edge(src, dst, w)

    logger.debug(
        f"Condensation: {len(sccs)} components, {len(weights)} edges "
        f"(policy={policy.name.lower()}, {graph.edge_count} original edges)"
    )
    return condensation
