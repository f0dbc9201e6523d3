import random

import networkx as nx
import pytest

from schedgraph.algorithms.condensation import condense
from schedgraph.algorithms.dag_paths import (
    find_critical_path,
    longest_paths,
    reconstruct_path,
    shortest_paths,
)
from schedgraph.algorithms.scc import tarjan_scc
from schedgraph.algorithms.topo import kahn_order
from schedgraph.algorithms.types import PathMode
from schedgraph.errors import NoPathError, OrderMismatchError, VertexRangeError
from schedgraph.graph.task_graph import TaskGraph


def random_simple_dag(seed: int, n: int, m: int) -> TaskGraph:
    """Random DAG without parallel edges, edges oriented low id -> high id."""
    rng = random.Random(seed)
    pairs = set()
    g = TaskGraph(n)
    while len(pairs) < m:
        u, v = sorted(rng.sample(range(n), 2))
        if (u, v) in pairs:
            continue
        pairs.add((u, v))
        g.add_edge(u, v, rng.randint(1, 10))
    return g


@pytest.fixture
def mixed_dag(mixed):
    return condense(mixed, tarjan_scc(mixed))


class TestShortestPaths:
    def test_diamond(self, diamond):
        result = shortest_paths(diamond, [0, 1, 2, 3], 0)
        assert result.distances == [0, 5, 3, 7]
        assert result.parents == [None, 0, 0, 1]
        assert result.mode == PathMode.SHORTEST
        assert result.source == 0
        assert result.path_to(3) == [0, 1, 3]

    def test_unreached_vertices_are_none(self, diamond):
        result = shortest_paths(diamond, [0, 1, 2, 3], 1)
        assert result.distances == [None, 0, None, 2]
        assert result.reachable(3)
        assert not result.reachable(0)
        assert result.path_to(2) is None
        assert reconstruct_path(result, 0) is None

    def test_require_path_raises_for_unreached(self, diamond):
        result = shortest_paths(diamond, [0, 1, 2, 3], 1)
        assert result.require_path(3) == [1, 3]
        with pytest.raises(NoPathError) as exc_info:
            result.require_path(2)
        assert exc_info.value.target == 2

    def test_chain_reconstruction(self, chain4):
        result = shortest_paths(chain4, [0, 1, 2, 3], 0)
        assert result.distances == [0, 1, 2, 3]
        assert reconstruct_path(result, 3) == [0, 1, 2, 3]

    def test_path_to_source_is_source(self, chain4):
        result = shortest_paths(chain4, [0, 1, 2, 3], 2)
        assert result.path_to(2) == [2]
        assert result.distances == [None, None, 0, 1]

    def test_mixed_condensation(self, mixed_dag):
        result = shortest_paths(mixed_dag, [3, 2, 1, 0], 3)
        assert result.distances == [10, 9, 8, 0]
        assert result.parents == [1, 3, 3, None]
        assert result.path_to(0) == [3, 1, 0]

    def test_parallel_edges_use_lightest(self, make_graph):
        g = make_graph(2, [(0, 1, 7), (0, 1, 2)])
        assert shortest_paths(g, [0, 1], 0).distances == [0, 2]

    def test_metrics(self, diamond):
        metrics = shortest_paths(diamond, [0, 1, 2, 3], 0).metrics
        assert metrics.edges_explored == 4
        # 1, 2 and 3 reached; 3 is not improved via 2
        assert metrics.relaxations == 3

    @pytest.mark.parametrize("seed", range(5))
    def test_matches_dijkstra(self, seed):
        g = random_simple_dag(seed, n=20, m=40)
        result = shortest_paths(g, kahn_order(g).order, 0)
        expected = nx.single_source_dijkstra_path_length(g, 0, weight="weight")
        for v in g.vertices():
            assert result.distances[v] == expected.get(v)


class TestLongestPaths:
    def test_diamond(self, diamond):
        result = longest_paths(diamond, [0, 1, 2, 3], 0)
        assert result.distances == [0, 5, 3, 9]
        assert result.parents == [None, 0, 0, 2]
        assert result.mode == PathMode.LONGEST
        assert result.path_to(3) == [0, 2, 3]

    def test_mixed_condensation(self, mixed_dag):
        result = longest_paths(mixed_dag, [3, 2, 1, 0], 3)
        assert result.distances == [14, 13, 8, 0]
        assert result.path_to(0) == [3, 2, 1, 0]

    def test_unreached_stays_none(self, chain4):
        result = longest_paths(chain4, [0, 1, 2, 3], 3)
        assert result.distances == [None, None, None, 0]


class TestCriticalPath:
    def test_diamond(self, diamond):
        result = find_critical_path(diamond, [0, 1, 2, 3])
        assert result.mode == PathMode.CRITICAL
        assert result.source is None
        assert result.distances == [0, 5, 3, 9]
        assert result.endpoint == 3
        assert result.length == 9
        assert result.path_to(result.endpoint) == [0, 2, 3]

    def test_mixed_condensation(self, mixed_dag):
        result = find_critical_path(mixed_dag, [3, 2, 1, 0])
        assert result.distances == [14, 13, 8, 0]
        assert result.endpoint == 0
        assert result.length == 14
        assert result.path_to(0) == [3, 2, 1, 0]

    def test_mixed_condensation_min_policy(self, mixed):
        dag = condense(mixed, tarjan_scc(mixed), "min")
        result = find_critical_path(dag, [3, 2, 1, 0])
        assert result.length == 10
        assert result.path_to(result.endpoint) == [3, 1, 0]

    def test_no_edges(self):
        result = find_critical_path(TaskGraph(3), [0, 1, 2])
        assert result.distances == [0, 0, 0]
        # Lowest id wins ties
        assert result.endpoint == 0
        assert result.length == 0
        assert result.path_to(0) == [0]

    def test_every_vertex_has_integer_distance(self, make_graph):
        g = make_graph(5, [(3, 1, 2), (1, 4, 3)])
        result = find_critical_path(g, [0, 2, 3, 1, 4])
        assert result.distances == [0, 2, 0, 0, 5]
        assert all(type(d) is int for d in result.distances)
        assert all(result.reachable(v) for v in g.vertices())
        assert result.parents == [None, 3, None, None, 1]

    def test_empty_graph(self, empty_graph):
        result = find_critical_path(empty_graph, [])
        assert result.distances == []
        assert result.endpoint is None
        assert result.length is None

    def test_starts_anywhere(self, make_graph):
        # Heaviest chain starts at 2, not at the lowest id
        g = make_graph(4, [(0, 1, 1), (2, 3, 10)])
        result = find_critical_path(g, [0, 2, 1, 3])
        assert result.endpoint == 3
        assert result.path_to(3) == [2, 3]

    @pytest.mark.parametrize("seed", range(5))
    def test_matches_networkx_longest_path(self, seed):
        g = random_simple_dag(seed, n=25, m=50)
        result = find_critical_path(g, kahn_order(g).order)
        assert result.length == nx.dag_longest_path_length(g, weight="weight")
        path = result.path_to(result.endpoint)
        total = sum(
            min(d["weight"] for d in g[u][v].values()) for u, v in zip(path, path[1:])
        )
        assert total == result.length


class TestPreconditions:
    @pytest.mark.parametrize(
        "order",
        [[0, 1, 2], [0, 1, 2, 2], [0, 1, 2, 4], [0, 1, 2, 3, 0]],
        ids=["short", "duplicate", "out_of_range", "long"],
    )
    def test_order_must_be_permutation(self, diamond, order):
        with pytest.raises(OrderMismatchError):
            shortest_paths(diamond, order, 0)
        with pytest.raises(OrderMismatchError):
            find_critical_path(diamond, order)

    @pytest.mark.parametrize("source", [-1, 4])
    def test_source_out_of_range(self, diamond, source):
        with pytest.raises(VertexRangeError, match="Source"):
            shortest_paths(diamond, [0, 1, 2, 3], source)
        with pytest.raises(VertexRangeError):
            longest_paths(diamond, [0, 1, 2, 3], source)

    def test_target_out_of_range(self, diamond):
        result = shortest_paths(diamond, [0, 1, 2, 3], 0)
        with pytest.raises(VertexRangeError, match="Target"):
            result.path_to(9)

    def test_errors_are_value_errors(self, diamond):
        with pytest.raises(ValueError):
            shortest_paths(diamond, [], 0)


def test_to_dict(diamond):
    data = shortest_paths(diamond, [0, 1, 2, 3], 1).to_dict()
    assert data["mode"] == "shortest"
    assert data["source"] == 1
    assert data["distances"] == [None, 0, None, 2]
    assert data["parents"] == [None, None, None, 1]
    assert set(data["metrics"]) >= {"elapsed_ns", "elapsed_ms", "relaxations"}
