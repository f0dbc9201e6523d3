"""Topological ordering with two interchangeable strategies.

Kahn's algorithm (the default) repeatedly removes zero in-degree vertices
from a FIFO frontier. The DFS strategy reverses the completion order of a
depth-first traversal and reports a cycle as soon as an edge reaches a vertex
on the active path. Both accept and reject exactly the same graphs, though
they may break ties differently.

A cyclic graph never yields a partial order: both strategies raise
`CycleDetectedError`. An empty graph yields an empty order.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Sequence, Union

from schedgraph.algorithms.types import Metrics, OrderResult, TopoMethod
from schedgraph.errors import CycleDetectedError, OrderMismatchError
from schedgraph.graph.task_graph import TaskGraph
from schedgraph.logging import get_logger

logger = get_logger(__name__)


def kahn_order(graph: TaskGraph) -> OrderResult:
    """Return a topological order using Kahn's algorithm.

    The frontier is seeded with zero in-degree vertices in ascending id
    order and processed first-in first-out.

    Raises:
        CycleDetectedError: If fewer than ``n`` vertices could be ordered.
            ``remaining`` lists the vertices never emitted.
    """
    n = graph.vertex_count
    metrics = Metrics()
    order: List[int] = []

    with metrics.timed():
        in_deg = graph.in_degrees()
        queue: Deque[int] = deque()
        for v in graph.vertices():
            if in_deg[v] == 0:
                queue.append(v)
                metrics.pushes += 1

        while queue:
            u = queue.popleft()
            metrics.pops += 1
            order.append(u)
            for edge in graph.out_edges_of(u):
                metrics.edges_explored += 1
                in_deg[edge.target] -= 1
                if in_deg[edge.target] == 0:
                    queue.append(edge.target)
                    metrics.pushes += 1

    if len(order) != n:
        emitted = set(order)
        remaining = [v for v in graph.vertices() if v not in emitted]
        logger.debug(f"Kahn: cycle detected, {len(remaining)} vertices unresolved")
        raise CycleDetectedError(remaining, metrics=metrics, method="kahn")

    logger.debug(f"Kahn: ordered {n} vertices; {metrics}")
    return OrderResult(order=order, method=TopoMethod.KAHN, metrics=metrics)


def dfs_order(graph: TaskGraph) -> OrderResult:
    """Return a topological order from reversed DFS completion times.

    Unvisited vertices are used as DFS roots in ascending id order.

    Raises:
        CycleDetectedError: As soon as an edge targets a vertex on the active
            DFS path. ``remaining`` holds that cycle, starting at the target.
    """
    n = graph.vertex_count
    metrics = Metrics()
    visited: List[bool] = [False] * n
    on_path: List[bool] = [False] * n
    completed: List[int] = []

    with metrics.timed():
        for root in graph.vertices():
            if visited[root]:
                continue

            visited[root] = on_path[root] = True
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
                    if not visited[v]:
                        visited[v] = on_path[v] = True
                        metrics.dfs_visits += 1
                        frames.append([v, 0])
                    elif on_path[v]:
                        path = [f[0] for f in frames]
                        cycle = path[path.index(v) :]
                        logger.debug(f"DFS: back edge {u} -> {v} closes cycle {cycle}")
                        raise CycleDetectedError(cycle, metrics=metrics, method="dfs")
                    continue

                frames.pop()
                on_path[u] = False
                completed.append(u)

    completed.reverse()
    logger.debug(f"DFS: ordered {n} vertices; {metrics}")
    return OrderResult(order=completed, method=TopoMethod.DFS, metrics=metrics)


def topological_order(
    graph: TaskGraph, method: Union[TopoMethod, str] = TopoMethod.KAHN
) -> OrderResult:
    """Return a topological order of ``graph`` using ``method``.

    Args:
        graph: Graph to order.
        method: ``TopoMethod.KAHN``/``"kahn"`` or ``TopoMethod.DFS``/``"dfs"``.

    Raises:
        CycleDetectedError: If the graph contains a cycle.
    """
    method = TopoMethod.coerce(method)
    if method == TopoMethod.DFS:
        return dfs_order(graph)
    return kahn_order(graph)


def has_cycle(graph: TaskGraph) -> bool:
    """Return True if ``graph`` contains a directed cycle (self-loops included)."""
    try:
        kahn_order(graph)
    except CycleDetectedError:
        return True
    return False


def derive_task_order(
    scc_order: Sequence[int], sccs: Sequence[Sequence[int]]
) -> List[int]:
    """Expand an order of component ids into an order of original vertices.

    Each component contributes its members in their stored order.

    Args:
        scc_order: Component ids, typically a topological order of the
            condensation graph.
        sccs: Component member lists indexed by component id.

    Returns:
        Flattened vertex sequence.

    Raises:
        OrderMismatchError: If ``scc_order`` references an unknown component.
    """
    task_order: List[int] = []
    for comp_id in scc_order:
        if not 0 <= comp_id < len(sccs):
            raise OrderMismatchError(
                f"Component id {comp_id} out of range for {len(sccs)} components"
            )
        task_order.extend(sccs[comp_id])
    return task_order
