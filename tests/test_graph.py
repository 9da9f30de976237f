#!/usr/bin/env python3
"""
Tests for the weighted graph and the flat geometry generators.

Verifies:
1. Adjacency lists agree with the edge list
2. Malformed construction fails without committing anything
3. Generators emit the expected degree and edge counts
"""

import numpy as np
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from graphmc.graph import Edge, GraphError, WeightedGraph
from graphmc.geometry import cycle_graph, rect_graph, triangle_graph


def random_graph(n=20, m=60, seed=7):
    rng = np.random.default_rng(seed)
    graph = WeightedGraph(n, node_weights=rng.uniform(0.5, 2.0, size=n))
    while graph.n_edges < m:
        a, b = rng.integers(0, n, size=2)
        if a != b:
            graph.add_edge(int(a), int(b), float(rng.uniform(0.1, 3.0)))
    return graph.freeze()


def check_adjacency(graph):
    assert sum(graph.degree(s) for s in range(graph.n_nodes)) == 2 * graph.n_edges
    for e, edge in enumerate(graph.edges):
        assert graph.neighbors(edge.a).count((e, edge.b)) == 1
        assert graph.neighbors(edge.b).count((e, edge.a)) == 1


def test_adjacency_consistency():
    """Every edge endpoint appears exactly once in its partner's list."""
    for graph in [random_graph(), cycle_graph(5), rect_graph(3, 4), triangle_graph(4)]:
        check_adjacency(graph)


def test_add_edge_updates_both_endpoints():
    graph = WeightedGraph(3)
    e = graph.add_edge(0, 2, 0.5)
    assert e == 0
    assert graph.neighbors(0) == ((0, 2),)
    assert graph.neighbors(2) == ((0, 0),)
    assert graph.neighbors(1) == ()
    assert graph.edge(0) == Edge(0, 2, 0.5)
    assert graph.edge(0).other(2) == 0
    assert graph.edge_weight(0) == 0.5


def test_node_weights_and_volume():
    graph = WeightedGraph(3, node_weights=[1.0, 2.0, 0.5])
    assert graph.add_node(1.5) == 3
    assert graph.volume == 5.0
    graph.set_node_weight(0, 3.0)
    assert graph.node_weight(0) == 3.0
    assert np.array_equal(graph.node_weights, [3.0, 2.0, 0.5, 1.5])


def test_self_loop_rejected():
    graph = WeightedGraph(3)
    with pytest.raises(GraphError):
        graph.add_edge(1, 1)
    assert graph.n_edges == 0
    assert graph.degree(1) == 0


def test_out_of_range_rejected():
    graph = WeightedGraph(3)
    for a, b in [(0, 3), (-1, 0), (5, 6)]:
        with pytest.raises(GraphError):
            graph.add_edge(a, b)
    assert graph.n_edges == 0
    assert all(graph.degree(s) == 0 for s in range(3))


def test_bad_weights_rejected():
    graph = WeightedGraph(2)
    for w in [0.0, -1.0, float('nan'), float('inf')]:
        with pytest.raises(GraphError):
            graph.add_edge(0, 1, w)
    with pytest.raises(GraphError):
        graph.add_node(0.0)
    with pytest.raises(GraphError):
        WeightedGraph(2, node_weights=[1.0])
    assert graph.n_edges == 0
    assert graph.n_nodes == 2


def test_frozen_graph_is_read_only():
    graph = cycle_graph(4)
    assert graph.frozen
    with pytest.raises(GraphError):
        graph.add_edge(0, 2)
    with pytest.raises(GraphError):
        graph.add_node()
    with pytest.raises(GraphError):
        graph.set_node_weight(0, 2.0)
    assert graph.n_edges == 4


def test_from_edges_is_all_or_nothing():
    graph = WeightedGraph.from_edges(3, [(0, 1), (1, 2, 2.0)])
    assert graph.frozen
    assert graph.n_edges == 2
    assert graph.edge_weight(1) == 2.0

    with pytest.raises(GraphError):
        WeightedGraph.from_edges(3, [(0, 1), (1, 1)])
    with pytest.raises(GraphError):
        WeightedGraph.from_edges(3, [(0, 1), (0, 1, 2.0, 3.0)])


def test_fractional_ids_rejected():
    graph = WeightedGraph(3)
    with pytest.raises(GraphError):
        graph.add_edge(0.7, 2.9)
    with pytest.raises(GraphError):
        graph.add_edge("0", 1)
    assert graph.n_edges == 0
    with pytest.raises(GraphError):
        WeightedGraph.from_edges(3, [(0.5, 1)])

    # numpy integers are valid ids
    assert graph.add_edge(np.int64(0), np.int32(2)) == 0
    assert graph.edge(0) == Edge(0, 2, 1.0)


def test_accessors_reject_bad_ids():
    graph = rect_graph(3, 3)
    for node in [-1, 9, 1.5]:
        with pytest.raises(GraphError):
            graph.neighbors(node)
        with pytest.raises(GraphError):
            graph.degree(node)
        with pytest.raises(GraphError):
            graph.node_weight(node)
    for edge_id in [-1, graph.n_edges]:
        with pytest.raises(GraphError):
            graph.edge(edge_id)
        with pytest.raises(GraphError):
            graph.edge_weight(edge_id)
    assert graph.degree(np.int64(8)) == 4


def test_sparse_views():
    graph = WeightedGraph.from_edges(5, [(0, 1, 2.0), (2, 3, 1.0), (3, 2, 0.5)])
    adj = graph.adjacency_matrix()
    assert adj.shape == (5, 5)
    assert (adj != adj.T).nnz == 0
    assert adj[0, 1] == 2.0
    assert adj[2, 3] == 1.5

    n_comp, labels = graph.connected_components()
    assert n_comp == 3
    assert labels[0] == labels[1]
    assert labels[2] == labels[3]
    assert labels[4] != labels[0]
    assert graph.isolated_nodes() == [4]


def test_generator_shapes():
    ring = cycle_graph(6, weight=0.5)
    assert ring.n_nodes == 6 and ring.n_edges == 6
    assert all(ring.degree(s) == 2 for s in range(6))
    assert all(e.weight == 0.5 for e in ring.edges)

    rect = rect_graph(3, 5, wx=1.0, wy=2.0)
    assert rect.n_nodes == 15 and rect.n_edges == 30
    assert all(rect.degree(s) == 4 for s in range(15))

    tri = triangle_graph(4, weights=(1.0, 1.0, 0.5))
    assert tri.n_nodes == 16 and tri.n_edges == 48
    assert all(tri.degree(s) == 6 for s in range(16))
    assert tri.connected_components()[0] == 1


def test_generator_rejects_small_extent():
    with pytest.raises(ValueError):
        cycle_graph(2)
    with pytest.raises(ValueError):
        rect_graph(4, 2)
    with pytest.raises(ValueError):
        triangle_graph(1)


def main():
    tests = [obj for name, obj in sorted(globals().items()) if name.startswith('test_')]
    failed = 0
    for test in tests:
        try:
            test()
            print(f"  ✓ {test.__name__}")
        except Exception as exc:
            failed += 1
            print(f"  ✗ {test.__name__}: {exc!r}")
    print(f"\nPassed: {len(tests) - failed}/{len(tests)}")
    return failed == 0


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
