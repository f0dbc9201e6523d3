import networkx as nx
import pytest

from schedgraph.algorithms.scc import tarjan_scc
from schedgraph.algorithms.topo import kahn_order
from schedgraph.errors import VertexRangeError
from schedgraph.graph.task_graph import Edge, TaskGraph


def test_init_creates_fixed_vertices():
    g = TaskGraph(4)
    assert g.vertex_count == 4
    assert g.number_of_nodes() == 4
    assert list(g.vertices()) == [0, 1, 2, 3]
    assert g.edge_count == 0
    assert g.directed


def test_negative_vertex_count_rejected():
    with pytest.raises(ValueError, match="non-negative"):
        TaskGraph(-1)


def test_add_edge_returns_increasing_keys():
    g = TaskGraph(3)
    k1 = g.add_edge(0, 1, 5)
    k2 = g.add_edge(0, 1, 7)
    k3 = g.add_edge(1, 2)
    assert k1 < k2 < k3
    assert g.edge_count == 3
    assert g.number_of_edges() == 3
    assert g.out_edges_of(0) == [Edge(0, 1, 5, k1), Edge(0, 1, 7, k2)]
    assert g.out_edges_of(1)[0].weight == 1
    # Mirrored in the NetworkX adjacency
    assert g[0][1][k2]["weight"] == 7


def test_edges_keep_insertion_order():
    g = TaskGraph(4)
    g.add_edge(0, 3)
    g.add_edge(0, 1)
    g.add_edge(0, 2)
    assert [e.target for e in g.out_edges_of(0)] == [3, 1, 2]


@pytest.mark.parametrize("u,v", [(-1, 0), (0, 3), (True, 0), ("0", 1), (1.5, 0)])
def test_add_edge_rejects_invalid_endpoints(u, v):
    g = TaskGraph(3)
    with pytest.raises(VertexRangeError):
        g.add_edge(u, v)
    assert g.edge_count == 0


def test_add_edge_rejects_non_integer_weight():
    g = TaskGraph(2)
    with pytest.raises(TypeError):
        g.add_edge(0, 1, 1.5)


def test_undirected_mirrors_edges():
    g = TaskGraph(3, directed=False)
    g.add_edge(0, 1, 4)
    assert not g.directed
    assert g.edge_count == 2
    assert [(e.source, e.target) for e in g.iter_edges()] == [(0, 1), (1, 0)]
    assert [(e.source, e.target, e.weight) for e in g.input_edges()] == [(0, 1, 4)]


def test_add_edges_from_variants():
    g = TaskGraph(3)
    keys = g.add_edges_from([(0, 1), (1, 2, 6), (0, 2, {"weight": 3, "label": "x"})])
    assert len(keys) == 3
    assert [(e.source, e.target, e.weight) for e in g.iter_edges()] == [
        (0, 1, 1),
        (0, 2, 3),
        (1, 2, 6),
    ]
    assert g[0][2][keys[2]]["label"] == "x"

    with pytest.raises(ValueError, match="2 or 3 elements"):
        g.add_edges_from([(0, 1, 2, 3)])


def test_vertex_set_is_fixed():
    g = TaskGraph(2)
    with pytest.raises(ValueError):
        g.add_node(5)
    with pytest.raises(ValueError):
        g.add_nodes_from([5, 6])
    with pytest.raises(ValueError):
        g.remove_node(0)
    g.add_edge(0, 1)
    with pytest.raises(ValueError):
        g.remove_edge(0, 1)


def test_in_degrees_count_parallel_edges():
    g = TaskGraph(3)
    g.add_edge(0, 2)
    g.add_edge(0, 2)
    g.add_edge(1, 2)
    assert g.in_degrees() == [0, 0, 3]


def test_out_edges_of_checks_vertex():
    with pytest.raises(VertexRangeError):
        TaskGraph(2).out_edges_of(2)


def test_transpose(diamond):
    t = diamond.transpose()
    assert t.vertex_count == 4
    assert sorted((e.source, e.target, e.weight) for e in t.iter_edges()) == [
        (1, 0, 5),
        (2, 0, 3),
        (3, 1, 2),
        (3, 2, 6),
    ]
    assert diamond.reverse().edge_count == 4


def test_transpose_of_undirected_keeps_edge_count():
    g = TaskGraph(2, directed=False)
    g.add_edge(0, 1, 2)
    t = g.transpose()
    assert not t.directed
    assert t.edge_count == 2
    assert len(list(t.input_edges())) == 1


def test_copy_is_independent(chain4):
    dup = chain4.copy()
    dup.add_edge(3, 0)
    assert chain4.edge_count == 3
    assert dup.edge_count == 4
    assert isinstance(dup, TaskGraph)
    with pytest.raises(ValueError):
        chain4.copy(as_view=True)


def test_freeze(chain4):
    frozen = chain4.freeze()
    assert nx.is_frozen(frozen)
    with pytest.raises(nx.NetworkXError):
        frozen.add_edge(0, 3)


def test_networkx_algorithms_work(diamond):
    assert nx.is_directed_acyclic_graph(diamond)
    assert nx.shortest_path_length(diamond, 0, 3, weight="weight") == 7


def test_repr(chain4):
    assert repr(chain4) == "TaskGraph(n=4, edges=3, directed=True)"


def test_to_multidigraph_is_plain_copy(mixed):
    plain = mixed.to_multidigraph()
    assert type(plain) is nx.MultiDiGraph
    assert sorted(plain.nodes) == list(range(8))
    assert plain.number_of_edges() == mixed.edge_count
    assert plain[0][3][10]["weight"] == 8
    plain.add_node(99)
    assert mixed.vertex_count == 8


def test_subgraph_returns_plain_networkx_graph(make_graph):
    g = make_graph(3, [(0, 1, 1), (1, 2, 4)])
    sub = g.subgraph([0, 1])
    assert not isinstance(sub, TaskGraph)
    assert sorted(sub.nodes) == [0, 1]
    assert list(sub.edges(data="weight")) == [(0, 1, 1)]


def test_edge_subgraph_returns_plain_networkx_graph(make_graph):
    g = make_graph(3, [(0, 1, 1), (1, 2, 4)])
    key = g.out_edges_of(1)[0].key
    sub = g.edge_subgraph([(1, 2, key)])
    assert not isinstance(sub, TaskGraph)
    assert sorted(sub.nodes) == [1, 2]


def test_networkx_views_are_rejected_by_algorithms(make_graph):
    g = make_graph(3, [(0, 1, 1), (1, 2, 1), (2, 0, 1)])
    view = nx.subgraph_view(g, filter_node=lambda v: v != 2)
    with pytest.raises(ValueError, match="views of a TaskGraph"):
        view.vertex_count
    with pytest.raises(ValueError, match="views of a TaskGraph"):
        tarjan_scc(view)
    with pytest.raises(ValueError, match="views of a TaskGraph"):
        kahn_order(nx.reverse_view(g))


def test_relabel_nodes_copy_points_to_plain_conversion(chain4):
    with pytest.raises(ValueError, match="to_multidigraph"):
        nx.relabel_nodes(chain4, {0: 10}, copy=True)
    relabeled = nx.relabel_nodes(chain4.to_multidigraph(), {0: 10}, copy=True)
    assert sorted(relabeled.nodes) == [1, 2, 3, 10]
