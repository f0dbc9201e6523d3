"""Conversion between `TaskGraph` and plain NetworkX digraphs.

`to_digraph` collapses parallel edges into one ``networkx.DiGraph`` edge per
ordered pair; `from_digraph` goes the other way for graphs whose nodes are
already the integers ``0..n-1``.
"""

from typing import Optional

import networkx as nx

from schedgraph.graph.task_graph import TaskGraph


def to_digraph(graph: TaskGraph, revertible: bool = True) -> nx.DiGraph:
    """Convert a TaskGraph to a NetworkX DiGraph.

    Parallel edges are consolidated into one edge whose ``weight`` is the
    first-seen weight for that ordered pair. If ``revertible`` is True the
    weights of all parallel edges, in insertion order, are kept in the
    ``_uv_weights`` attribute so `from_digraph` can restore them.

    Args:
        graph: The TaskGraph to convert.
        revertible: If True, store the original parallel weights.

    Returns:
        A NetworkX DiGraph over the same vertex ids.
    """
    nx_graph = nx.DiGraph()
    nx_graph.add_nodes_from(graph.vertices())

    for edge in graph.iter_edges():
        if not nx_graph.has_edge(edge.source, edge.target):
            nx_graph.add_edge(edge.source, edge.target, weight=edge.weight)
        if revertible:
            edge_attr = nx_graph.edges[edge.source, edge.target]
            edge_attr.setdefault("_uv_weights", []).append(edge.weight)
    return nx_graph


def from_digraph(
    nx_graph: nx.DiGraph, weight: str = "weight", default_weight: int = 1
) -> TaskGraph:
    """Build a TaskGraph from a NetworkX digraph with nodes ``0..n-1``.

    Edges carrying a ``_uv_weights`` list (see `to_digraph`) are expanded back
    into their parallel edges; others contribute one edge using the ``weight``
    attribute or ``default_weight``.

    Args:
        nx_graph: Directed NetworkX graph (``DiGraph`` or ``MultiDiGraph``).
        weight: Edge attribute holding the integer weight.
        default_weight: Weight used when the attribute is missing.

    Returns:
        A new directed TaskGraph.

    Raises:
        ValueError: If the graph is undirected or its nodes are not exactly
            the integers ``0..n-1``.
    """
    if not nx_graph.is_directed():
        raise ValueError("from_digraph requires a directed NetworkX graph.")
    n = nx_graph.number_of_nodes()
    if set(nx_graph.nodes) != set(range(n)):
        raise ValueError(
            f"Node ids must be the integers 0..{n - 1}; "
            "relabel with networkx.convert_node_labels_to_integers first."
        )

    graph = TaskGraph(n, directed=True)
    for u, v, data in nx_graph.edges(data=True):
        parallel: Optional[list] = data.get("_uv_weights")
        if parallel:
            for w in parallel:
                graph.add_edge(u, v, w)
        else:
            graph.add_edge(u, v, data.get(weight, default_weight))
    return graph
