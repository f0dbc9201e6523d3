"""Dense-id weighted task graph built on ``networkx.MultiDiGraph``.

`TaskGraph` fixes its vertex set at construction to the integers ``0..n-1``
and only allows edges to be appended afterwards. Alongside the NetworkX
adjacency it keeps, per vertex, the outgoing edges in insertion order; the
analysis algorithms iterate that list so their output is fully determined by
the order in which edges were added.
"""

from __future__ import annotations

from operator import index
from pickle import dumps, loads
from typing import Any, Dict, Iterable, Iterator, List, NamedTuple, Optional, Set

import networkx as nx

from schedgraph.errors import VertexRangeError

Vertex = int
EdgeKey = int


class Edge(NamedTuple):
    """One directed weighted edge as stored in a `TaskGraph`."""

    source: Vertex
    target: Vertex
    weight: int
    key: EdgeKey


class TaskGraph(nx.MultiDiGraph):
    """Directed weighted multigraph over the vertices ``0..n-1``.

    This class enforces:
      - All vertices exist from construction on; none can be added or removed.
      - Edge endpoints must be valid vertex ids (``VertexRangeError`` otherwise).
      - Edge weights are integers.
      - Edges are append-only; each gets a unique increasing integer key.
      - When ``directed`` is False, ``add_edge(u, v, w)`` also stores ``v -> u``.

    Inherits from:
        networkx.MultiDiGraph
    """

    def __init__(self, n: int = 0, directed: bool = True, **attr: Any) -> None:
        """Create a graph with ``n`` isolated vertices.

        Args:
            n: Number of vertices. Must be non-negative.
            directed: If False, every added edge is mirrored.
            **attr: Graph-level attributes forwarded to NetworkX.

        Raises:
            ValueError: If ``n`` is negative.
        """
        n = index(n)
        if n < 0:
            raise ValueError(f"Vertex count must be non-negative, got {n}")
        super().__init__(**attr)
        self._n: int = n
        self._directed: bool = bool(directed)
        self._out: List[List[Edge]] = [[] for _ in range(n)]
        self._next_edge_key: int = 0
        # Keys of the reverse copies stored for undirected graphs
        self._mirrored: Set[EdgeKey] = set()
        super().add_nodes_from(range(n))

    #
    # Construction
    #
    def add_edge(  # pyright: ignore[reportIncompatibleMethodOverride]
        self,
        u_for_edge: Vertex,
        v_for_edge: Vertex,
        weight: int = 1,
        **attr: Any,
    ) -> EdgeKey:
        """Append the edge ``u_for_edge -> v_for_edge`` with ``weight``.

        Args:
            u_for_edge: Source vertex id.
            v_for_edge: Target vertex id.
            weight: Integer edge weight.
            **attr: Extra edge attributes stored on the NetworkX edge.

        Returns:
            Key of the forward edge. For undirected graphs the mirrored edge
            receives the next key.

        Raises:
            VertexRangeError: If either endpoint is not in ``0..n-1``.
            TypeError: If ``weight`` is not an integer.
        """
        u = self._check_vertex(u_for_edge, "source")
        v = self._check_vertex(v_for_edge, "target")
        w = index(weight)

        key = self._append(u, v, w, attr)
        if not self._directed:
            self._mirrored.add(self._append(v, u, w, attr))
        return key

    def add_edges_from(  # type: ignore[override]
        self, ebunch_to_add: Iterable[Any], **attr: Any
    ) -> List[EdgeKey]:
        """Append edges given as ``(u, v)``, ``(u, v, weight)`` or ``(u, v, attrs)``.

        Returns:
            Keys of the forward edges in input order.
        """
        keys: List[EdgeKey] = []
        for entry in ebunch_to_add:
            if len(entry) == 2:
                u, v = entry
                keys.append(self.add_edge(u, v, **attr))
            elif len(entry) == 3:
                u, v, third = entry
                if isinstance(third, dict):
                    data = {**attr, **third}
                    w = data.pop("weight", 1)
                    keys.append(self.add_edge(u, v, w, **data))
                else:
                    keys.append(self.add_edge(u, v, third, **attr))
            else:
                raise ValueError(f"Edge tuple {entry!r} must have 2 or 3 elements")
        return keys

    def add_node(self, node_for_adding: Any, **attr: Any) -> None:
        raise ValueError(
            "TaskGraph vertices are fixed at construction; "
            f"create a new TaskGraph instead of adding {node_for_adding!r}."
        )

    def add_nodes_from(self, nodes_for_adding: Any, **attr: Any) -> None:
        raise ValueError(
            "TaskGraph vertices are fixed at construction; convert with "
            "to_multidigraph() before using NetworkX functions that rebuild "
            "the graph (relabel_nodes, compose, union)."
        )

    def remove_node(self, n: Any) -> None:
        raise ValueError("TaskGraph does not support removing vertices.")

    def remove_edge(self, u: Any, v: Any, key: Optional[Any] = None) -> None:
        raise ValueError("TaskGraph edges are append-only.")

    def copy(self, as_view: bool = False) -> TaskGraph:  # type: ignore[override]
        """Return an independent deep copy (pickle based)."""
        if as_view:
            raise ValueError("TaskGraph does not support copy views.")
        return loads(dumps(self))

    def freeze(self) -> TaskGraph:
        """Freeze this graph in place via ``networkx.freeze`` and return it."""
        return nx.freeze(self)

    def to_multidigraph(self) -> nx.MultiDiGraph:
        """Return an independent plain ``networkx.MultiDiGraph`` copy.

        Edge keys, weights and extra edge attributes are preserved. Undirected
        graphs are returned with both stored directions.
        """
        plain = nx.MultiDiGraph(**self.graph)
        plain.add_nodes_from(self.vertices())
        for u, v, key, data in self.edges(keys=True, data=True):
            plain.add_edge(u, v, key=key, **data)
        return plain

    def subgraph(  # type: ignore[override]
        self, nodes: Iterable[Any]
    ) -> nx.MultiDiGraph:
        """Subgraph view over ``nodes`` of a plain `to_multidigraph` copy.

        A vertex subset is generally not ``0..k-1``, so the result is not a
        TaskGraph.
        """
        return self.to_multidigraph().subgraph(nodes)

    def edge_subgraph(  # type: ignore[override]
        self, edges: Iterable[Any]
    ) -> nx.MultiDiGraph:
        """Edge-induced subgraph view of a plain `to_multidigraph` copy.

        Edges are ``(u, v, key)`` triples as for any MultiDiGraph.
        """
        return self.to_multidigraph().edge_subgraph(edges)

    #
    # Queries
    #
    @property
    def vertex_count(self) -> int:
        """Number of vertices.

        Raises:
            ValueError: If NetworkX built this object as a view (for example
                ``networkx.subgraph_view`` or ``networkx.reverse_view``), whose
                node set no longer matches the dense edge storage.
        """
        if len(self._node) != self._n:
            raise ValueError(
                f"TaskGraph storage covers {self._n} vertices but the NetworkX "
                f"node set has {len(self._node)}; NetworkX views of a TaskGraph "
                "are not supported, use to_multidigraph() instead."
            )
        return self._n

    @property
    def edge_count(self) -> int:
        return sum(len(edges) for edges in self._out)

    @property
    def directed(self) -> bool:
        """Whether edges were added one-way (True) or mirrored (False)."""
        return self._directed

    def vertices(self) -> range:
        return range(self._n)

    def out_edges_of(self, u: Vertex) -> List[Edge]:
        """Outgoing edges of ``u`` in insertion order.

        The returned list is the graph's own storage; callers must not modify it.
        """
        return self._out[self._check_vertex(u)]

    def iter_edges(self) -> Iterator[Edge]:
        """Yield every edge, by source vertex id then insertion order."""
        for edges in self._out:
            yield from edges

    def input_edges(self) -> Iterator[Edge]:
        """Yield the edges as passed to `add_edge`, skipping undirected mirrors."""
        for edge in self.iter_edges():
            if edge.key not in self._mirrored:
                yield edge

    def in_degrees(self) -> List[int]:
        """In-degree of every vertex, counting parallel edges."""
        degrees = [0] * self._n
        for edges in self._out:
            for edge in edges:
                degrees[edge.target] += 1
        return degrees

    def transpose(self) -> TaskGraph:
        """Return a new graph with every edge reversed.

        The result has the same vertex count and ``directed`` flag. Edges
        are already mirrored in an undirected graph, so they are copied
        one-to-one rather than mirrored again.
        """
        reversed_graph = TaskGraph(self._n, directed=True)
        for edge in self.iter_edges():
            key = reversed_graph._append(edge.target, edge.source, edge.weight, {})
            if edge.key in self._mirrored:
                reversed_graph._mirrored.add(key)
        reversed_graph._directed = self._directed
        return reversed_graph

    def reverse(self, copy: bool = True) -> TaskGraph:  # type: ignore[override]
        """NetworkX-compatible alias for :meth:`transpose` (always a copy)."""
        return self.transpose()

    def to_dict(self) -> Dict[str, Any]:
        """Return the graph as a JSON-serializable graph document."""
        # Import here to avoid circular import
        from schedgraph.io import graph_to_document

        return graph_to_document(self)

    def __repr__(self) -> str:
        return (
            f"TaskGraph(n={self._n}, edges={self.edge_count}, "
            f"directed={self._directed})"
        )

    #
    # Internals
    #
    def _check_vertex(self, vertex: Any, role: str = "vertex") -> Vertex:
        if isinstance(vertex, bool):
            raise VertexRangeError(vertex, self._n, role)
        try:
            v = index(vertex)
        except TypeError:
            raise VertexRangeError(vertex, self._n, role) from None
        if not 0 <= v < self._n:
            raise VertexRangeError(vertex, self._n, role)
        return v

    def _append(self, u: Vertex, v: Vertex, w: int, attr: Dict[str, Any]) -> EdgeKey:
        key = self._next_edge_key
        self._next_edge_key += 1
        super().add_edge(u, v, key=key, **{**attr, "weight": w})
        self._out[u].append(Edge(u, v, w, key))
        return key
