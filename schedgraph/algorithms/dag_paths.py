"""Single-pass path analysis over a DAG in topological order.

All three analyses walk a precomputed topological order once and relax every
outgoing edge of each processed vertex, which is correct because a vertex's
distance is final before any of its successors is visited. They differ only
in initialization and comparison direction:

- `shortest_paths`: source at 0, others unreached, keep smaller sums.
- `longest_paths`: source at 0, others unreached, keep larger sums.
- `find_critical_path`: every vertex at 0, all vertices processed, keep
  larger sums. The result holds, per vertex, the heaviest chain ending there.

The order is trusted to match the graph. Only its shape (a permutation of
``0..n-1``) is checked; cycles are not re-detected.
"""

from __future__ import annotations

import operator
from typing import Callable, List, Optional, Sequence

from schedgraph.algorithms.types import Metrics, PathMode, PathResult
from schedgraph.errors import OrderMismatchError, VertexRangeError
from schedgraph.graph.task_graph import TaskGraph
from schedgraph.logging import get_logger

logger = get_logger(__name__)


def _check_order(graph: TaskGraph, order: Sequence[int]) -> None:
    n = graph.vertex_count
    if len(order) != n:
        raise OrderMismatchError(
            f"Order has {len(order)} entries but graph has {n} vertices"
        )
    seen = [False] * n
    for v in order:
        if not 0 <= v < n:
            raise OrderMismatchError(f"Order contains vertex {v} outside 0..{n - 1}")
        if seen[v]:
            raise OrderMismatchError(f"Order contains vertex {v} more than once")
        seen[v] = True


def _relax_from_source(
    graph: TaskGraph,
    order: Sequence[int],
    source: int,
    better: Callable[[int, int], bool],
    mode: PathMode,
) -> PathResult:
    _check_order(graph, order)
    n = graph.vertex_count
    if not 0 <= source < n:
        raise VertexRangeError(source, n, "source")

    dist: List[Optional[int]] = [None] * n
    parent: List[Optional[int]] = [None] * n
    dist[source] = 0
    metrics = Metrics()

    with metrics.timed():
        after_source = False
        for u in order:
            if u == source:
                after_source = True
            du = dist[u]
            if not after_source or du is None:
                continue
            for edge in graph.out_edges_of(u):
                metrics.edges_explored += 1
                candidate = du + edge.weight
                dv = dist[edge.target]
                if dv is None or better(candidate, dv):
                    dist[edge.target] = candidate
                    parent[edge.target] = u
                    metrics.relaxations += 1

    logger.debug(
        f"{mode.name.capitalize()} paths from {source}: "
        f"{sum(d is not None for d in dist)}/{n} reached; {metrics}"
    )
    return PathResult(
        distances=dist, parents=parent, source=source, mode=mode, metrics=metrics
    )


def shortest_paths(graph: TaskGraph, order: Sequence[int], source: int) -> PathResult:
    """Single-source shortest paths in a DAG.

    Vertices before ``source`` in ``order`` and vertices not yet reached are
    skipped.

    Args:
        graph: Acyclic graph.
        order: Topological order of ``graph``.
        source: Start vertex.

    Returns:
        PathResult in ``SHORTEST`` mode; unreached vertices have distance None.

    Raises:
        OrderMismatchError: If ``order`` is not a permutation of the vertices.
        VertexRangeError: If ``source`` is not a vertex of ``graph``.
    """
    return _relax_from_source(graph, order, source, operator.lt, PathMode.SHORTEST)


def longest_paths(graph: TaskGraph, order: Sequence[int], source: int) -> PathResult:
    """Single-source longest paths in a DAG.

    Mirrors `shortest_paths` with the comparison reversed. Only paths that
    start at ``source`` are considered.
    """
    return _relax_from_source(graph, order, source, operator.gt, PathMode.LONGEST)


def find_critical_path(graph: TaskGraph, order: Sequence[int]) -> PathResult:
    """Heaviest path over the whole DAG.

    Every vertex starts at distance 0 and every edge is relaxed towards the
    maximum, so ``distances[v]`` is the weight of the heaviest chain ending
    at ``v`` from any vertex. The global critical path ends at
    ``result.endpoint`` and is ``result.path_to(result.endpoint)``.

    Args:
        graph: Acyclic graph.
        order: Topological order of ``graph``.

    Returns:
        PathResult in ``CRITICAL`` mode with ``source`` set to None.
    """
    _check_order(graph, order)
    n = graph.vertex_count
    dist: List[int] = [0] * n
    parent: List[Optional[int]] = [None] * n
    metrics = Metrics()

    with metrics.timed():
        for u in order:
            du = dist[u]
            for edge in graph.out_edges_of(u):
                metrics.edges_explored += 1
                candidate = du + edge.weight
                if candidate > dist[edge.target]:
                    dist[edge.target] = candidate
                    parent[edge.target] = u
                    metrics.relaxations += 1

    result = PathResult(
        distances=list(dist),
        parents=parent,
        source=None,
        mode=PathMode.CRITICAL,
        metrics=metrics,
    )
    logger.debug(
        f"Critical path: length={result.length} ending at {result.endpoint}; {metrics}"
    )
    return result


def reconstruct_path(result: PathResult, target: int) -> Optional[List[int]]:
    """Return the path ending at ``target`` or None when it was never reached.

    Raises:
        VertexRangeError: If ``target`` is not a vertex of the analyzed graph.
    """
    return result.path_to(target)
