"""
Flat geometry generators.

Each generator is an independent function that emits a frozen
WeightedGraph. Curved geometries (sphere, hyperbolic disk) come from
external generators that build the same graph type, usually setting
non-uniform node and edge weights.

Node ids are assigned in row-major order: node (x, y) has id ``x + nx * y``.
"""

from typing import Tuple

from .graph import WeightedGraph


def _check_extent(name: str, value: int):
    if value < 3:
        raise ValueError(f"{name} must be at least 3 for a periodic lattice, got {value}")


def cycle_graph(n: int, weight: float = 1.0) -> WeightedGraph:
    """Ring of ``n`` nodes, edge (i, i+1 mod n) for each i."""
    _check_extent("n", n)
    graph = WeightedGraph(n)
    for s in range(n):
        graph.add_edge(s, (s + 1) % n, weight)
    return graph.freeze()


def rect_graph(nx: int, ny: int, wx: float = 1.0, wy: float = 1.0) -> WeightedGraph:
    """
    Periodic rectangular lattice.

    Parameters
    ----------
    nx, ny : int
        Lattice extent in each direction.
    wx, wy : float
        Coupling weight of horizontal and vertical links.
    """
    _check_extent("nx", nx)
    _check_extent("ny", ny)
    graph = WeightedGraph(nx * ny)
    for y in range(ny):
        for x in range(nx):
            s = x + nx * y
            graph.add_edge(s, (x + 1) % nx + nx * y, wx)
            graph.add_edge(s, x + nx * ((y + 1) % ny), wy)
    return graph.freeze()


def triangle_graph(
    n: int,
    weights: Tuple[float, float, float] = (1.0, 1.0, 1.0),
) -> WeightedGraph:
    """
    Periodic triangular lattice on an n x n rhombus.

    Every node has six neighbors. ``weights`` sets the coupling along the
    three link directions (x, y and the x-y diagonal); unequal weights give
    the anisotropic couplings of a skewed triangulation.
    """
    _check_extent("n", n)
    w1, w2, w3 = weights
    graph = WeightedGraph(n * n)
    for y in range(n):
        for x in range(n):
            s = x + n * y
            graph.add_edge(s, (x + 1) % n + n * y, w1)
            graph.add_edge(s, x + n * ((y + 1) % n), w2)
            graph.add_edge(s, (x - 1) % n + n * ((y + 1) % n), w3)
    return graph.freeze()
