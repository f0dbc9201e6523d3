"""Strongly connected components via Tarjan's algorithm.

The depth-first search runs on an explicit stack of ``[vertex, edge_pos]``
frames, so recursion depth is not bounded by the interpreter limit.

Notes:
    Components are emitted in the order their roots finish. That order is a
    reverse topological order of the condensation graph: every component is
    emitted after all components reachable from it.
"""

from __future__ import annotations

from typing import List

from schedgraph.algorithms.types import Metrics, SCCResult
from schedgraph.graph.task_graph import TaskGraph
from schedgraph.logging import get_logger

logger = get_logger(__name__)

_UNVISITED = -1


def tarjan_scc(graph: TaskGraph) -> SCCResult:
    """Partition the vertices of ``graph`` into strongly connected components.

    DFS starts from every undiscovered vertex in increasing id order and
    follows out-edges in insertion order, so the result depends only on the
    order in which edges were added.

    Args:
        graph: Graph to decompose.

    Returns:
        SCCResult whose components cover every vertex exactly once. Each
        component lists its members in stack-pop order (root last).
    """
    n = graph.vertex_count
    disc: List[int] = [_UNVISITED] * n
    low: List[int] = [0] * n
    on_stack: List[bool] = [False] * n
    stack: List[int] = []
    components: List[List[int]] = []
    membership: List[int] = [_UNVISITED] * n
    metrics = Metrics()
    counter = 0

    with metrics.timed():
        for root in graph.vertices():
            if disc[root] != _UNVISITED:
                continue

            disc[root] = low[root] = counter
            counter += 1
            stack.append(root)
            on_stack[root] = True
            metrics.dfs_visits += 1
            frames: List[List[int]] = [[root, 0]]

            while frames:
                frame = frames[-1]
                u, pos = frame
                edges = graph.out_edges_of(u)

                if pos < len(edges):
                    frame[1] = pos + 1
                    v = edges[pos].target
                    metrics.edges_explored += 1
                    if disc[v] == _UNVISITED:
                        disc[v] = low[v] = counter
                        counter += 1
                        stack.append(v)
                        on_stack[v] = True
                        metrics.dfs_visits += 1
                        frames.append([v, 0])
                    elif on_stack[v]:
                        low[u] = min(low[u], disc[v])
                    continue

                # All edges of u explored
                frames.pop()
                if frames:
                    parent = frames[-1][0]
                    low[parent] = min(low[parent], low[u])

                if low[u] == disc[u]:
                    comp_id = len(components)
                    component: List[int] = []
                    while True:
                        w = stack.pop()
                        on_stack[w] = False
                        membership[w] = comp_id
                        component.append(w)
                        if w == u:
                            break
                    components.append(component)

    logger.debug(
        f"Tarjan SCC: {n} vertices -> {len(components)} components; {metrics}"
    )
    return SCCResult(components=components, membership=membership, metrics=metrics)


decompose_scc = tarjan_scc
