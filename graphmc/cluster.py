"""
Cluster updates: Wolff and Swendsen-Wang.

Both algorithms work on any model exposing

    graph   : WeightedGraph
    field   : float ndarray, one value per node, mutated in place
    rng     : RandomStream
    bond_rate(value, neighbor_value, weight) -> float
    reflect(value) -> float

A bond between two nodes is activated with probability 1 - exp(rate)
when rate < 0 and never otherwise. For the Ising model
rate = -2 β s_a s_b J, which gives the usual p = 1 - exp(-2βJ) for
aligned spins. The φ⁴ model uses the same form with β absorbed
(embedded-Ising cluster move).

References
----------
U. Wolff, Phys. Rev. Lett. 62, 361 (1989).
R.H. Swendsen and J.S. Wang, Phys. Rev. Lett. 58, 86 (1987).
"""

import math
from typing import List, Optional

from .union_find import UnionFind


def wolff_update(model, clustered: Optional[List[bool]] = None) -> int:
    """
    Grow and reflect a single Wolff cluster.

    Draws: one ``uniform_int`` for the seed node, then one ``uniform01``
    per tested bond whose rate is negative, in stack-pop order and, within
    a node, in adjacency order.

    Parameters
    ----------
    model : cluster-capable field model
    clustered : list of bool, optional
        Scratch marker array of length n (reset here). Allocated when absent.

    Returns
    -------
    cluster_size : int
        Number of reflected nodes, between 1 and n.
    """
    graph = model.graph
    field = model.field
    rng = model.rng
    n = graph.n_nodes
    if n == 0:
        raise ValueError("Wolff update on an empty graph")

    if clustered is None:
        clustered = [False] * n
    else:
        clustered[:] = [False] * n

    s = rng.uniform_int(0, n - 1)
    clustered[s] = True
    cluster_size = 1
    stack = [s]

    while stack:
        s = stack.pop()

        # reflect before testing neighbors; bond tests use the old value
        value = field[s]
        field[s] = model.reflect(value)

        for edge_id, nbr in graph.neighbors(s):
            if clustered[nbr]:
                continue

            rate = model.bond_rate(value, field[nbr], graph.edge_weight(edge_id))
            if rate >= 0.0 or rng.uniform01() < math.exp(rate):
                continue

            clustered[nbr] = True
            cluster_size += 1
            stack.append(nbr)

    return cluster_size


def swendsen_wang_update(model, forest: Optional[UnionFind] = None) -> int:
    """
    Decompose the whole graph into bond clusters and reflect each with
    probability 1/2.

    Draws: one ``uniform01`` per edge whose rate is negative, in edge
    insertion order; then one ``coin`` per cluster, clusters taken in order
    of their smallest node id.

    Parameters
    ----------
    model : cluster-capable field model
    forest : UnionFind, optional
        Scratch forest of size n (reset here). Allocated when absent.

    Returns
    -------
    n_clusters : int
        Number of distinct clusters, between 1 and n.
    """
    graph = model.graph
    field = model.field
    rng = model.rng
    n = graph.n_nodes
    if n == 0:
        raise ValueError("Swendsen-Wang update on an empty graph")

    if forest is None:
        forest = UnionFind(n)
    else:
        forest.reset()

    for edge in graph.edges:
        rate = model.bond_rate(field[edge.a], field[edge.b], edge.weight)
        if rate >= 0.0 or rng.uniform01() < math.exp(rate):
            continue
        forest.union(edge.a, edge.b)

    # roots are the smallest member, so each root is visited before the
    # rest of its cluster
    is_flipped = {}
    for s in range(n):
        r = forest.find(s)
        if r not in is_flipped:
            is_flipped[r] = rng.coin()
        if is_flipped[r]:
            field[s] = model.reflect(field[s])

    return len(is_flipped)
