"""
Weighted Graph

Fixed-topology graph used to discretize a geometry. Each edge carries a
coupling weight J_ab > 0 and each node a statistical weight w_i > 0.

Graphs are append-only while being built by a geometry generator, then
frozen. A frozen graph is read-only and may be shared between independent
simulation contexts.
"""

import math
import numpy as np
import operator
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from scipy import sparse
from scipy.sparse import csgraph


class GraphError(ValueError):
    """Malformed graph construction (self-loop, bad id, bad weight, frozen)."""


@dataclass(frozen=True)
class Edge:
    """A weighted link between two distinct nodes."""
    a: int
    b: int
    weight: float

    def other(self, node: int) -> int:
        """Endpoint opposite to ``node``."""
        return self.b if node == self.a else self.a


def _as_index(value, what: str = "Node") -> int:
    try:
        return operator.index(value)
    except TypeError:
        raise GraphError(f"{what} id must be an integer, got {value!r}") from None


def _check_weight(weight: float, what: str) -> float:
    w = float(weight)
    if not math.isfinite(w) or w <= 0.0:
        raise GraphError(f"{what} weight must be positive and finite, got {weight!r}")
    return w


class WeightedGraph:
    """
    Nodes, weighted edges and adjacency lists.

    Parameters
    ----------
    n_nodes : int
        Number of nodes to create up front.
    node_weights : sequence of float, optional
        Statistical weight of each node (default 1.0 each).

    Examples
    --------
    >>> g = WeightedGraph(3)
    >>> g.add_edge(0, 1, 0.5)
    0
    >>> g.neighbors(1)
    ((0, 0),)
    """

    def __init__(self, n_nodes: int = 0, node_weights: Optional[Sequence[float]] = None):
        if n_nodes < 0:
            raise GraphError(f"Node count must be non-negative, got {n_nodes}")
        if node_weights is None:
            weights = [1.0] * n_nodes
        else:
            if len(node_weights) != n_nodes:
                raise GraphError(
                    f"Got {len(node_weights)} node weights for {n_nodes} nodes"
                )
            weights = [_check_weight(w, "Node") for w in node_weights]

        self._node_wt: List[float] = weights
        self._edges: List[Edge] = []
        self._adj: List[List[Tuple[int, int]]] = [[] for _ in range(n_nodes)]
        self._frozen = False

    @classmethod
    def from_edges(
        cls,
        n_nodes: int,
        edges: Iterable[Tuple],
        node_weights: Optional[Sequence[float]] = None,
    ) -> "WeightedGraph":
        """
        Build and freeze a graph from ``(a, b)`` or ``(a, b, weight)`` tuples.

        Every edge is validated before the graph is created, so a malformed
        edge list never yields a partially built graph.
        """
        checked = []
        for item in edges:
            if len(item) == 2:
                a, b = item
                w = 1.0
            elif len(item) == 3:
                a, b, w = item
            else:
                raise GraphError(f"Edge must be (a, b) or (a, b, weight), got {item!r}")
            a, b = _as_index(a), _as_index(b)
            cls._check_endpoints(a, b, n_nodes)
            checked.append((a, b, _check_weight(w, "Edge")))

        graph = cls(n_nodes, node_weights)
        for a, b, w in checked:
            graph.add_edge(a, b, w)
        graph.freeze()
        return graph

    @staticmethod
    def _check_endpoints(a: int, b: int, n_nodes: int):
        if a == b:
            raise GraphError(f"Self-loop on node {a} is not allowed")
        for s in (a, b):
            if s < 0 or s >= n_nodes:
                raise GraphError(f"Node id {s} out of range [0, {n_nodes})")

    def _check_mutable(self):
        if self._frozen:
            raise GraphError("Graph is frozen; topology is fixed once built")

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_node(self, weight: float = 1.0) -> int:
        """Append a node and return its id."""
        self._check_mutable()
        w = _check_weight(weight, "Node")
        self._node_wt.append(w)
        self._adj.append([])
        return len(self._node_wt) - 1

    def add_edge(self, a: int, b: int, weight: float = 1.0) -> int:
        """
        Append edge (a, b) and register it in both adjacency lists.

        Returns
        -------
        edge_id : int
        """
        self._check_mutable()
        a, b = _as_index(a), _as_index(b)
        self._check_endpoints(a, b, self.n_nodes)
        w = _check_weight(weight, "Edge")

        edge_id = len(self._edges)
        self._edges.append(Edge(a, b, w))
        self._adj[a].append((edge_id, b))
        self._adj[b].append((edge_id, a))
        return edge_id

    def set_node_weight(self, node: int, weight: float):
        """Reassign a node weight (construction only)."""
        self._check_mutable()
        node = self._check_node(node)
        self._node_wt[node] = _check_weight(weight, "Node")

    def freeze(self) -> "WeightedGraph":
        """Make the graph read-only. Returns self."""
        if not self._frozen:
            self._adj = [tuple(nbrs) for nbrs in self._adj]
            self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def _check_node(self, node: int) -> int:
        node = _as_index(node)
        if node < 0 or node >= self.n_nodes:
            raise GraphError(f"Node id {node} out of range [0, {self.n_nodes})")
        return node

    def _check_edge(self, edge_id: int) -> int:
        edge_id = _as_index(edge_id, "Edge")
        if edge_id < 0 or edge_id >= self.n_edges:
            raise GraphError(f"Edge id {edge_id} out of range [0, {self.n_edges})")
        return edge_id

    @property
    def n_nodes(self) -> int:
        return len(self._node_wt)

    @property
    def n_edges(self) -> int:
        return len(self._edges)

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return tuple(self._edges)

    @property
    def node_weights(self) -> np.ndarray:
        """Copy of the node weights as a float array."""
        return np.array(self._node_wt, dtype=float)

    @property
    def volume(self) -> float:
        """Total statistical weight V = Σ w_i."""
        return math.fsum(self._node_wt)

    def neighbors(self, node: int) -> Tuple[Tuple[int, int], ...]:
        """Sequence of ``(edge_id, neighbor_id)`` pairs incident on ``node``."""
        nbrs = self._adj[self._check_node(node)]
        return nbrs if self._frozen else tuple(nbrs)

    def degree(self, node: int) -> int:
        return len(self._adj[self._check_node(node)])

    def edge(self, edge_id: int) -> Edge:
        return self._edges[self._check_edge(edge_id)]

    def edge_weight(self, edge_id: int) -> float:
        return self._edges[self._check_edge(edge_id)].weight

    def node_weight(self, node: int) -> float:
        return self._node_wt[self._check_node(node)]

    # ------------------------------------------------------------------
    # Sparse views
    # ------------------------------------------------------------------

    def adjacency_matrix(self) -> sparse.csr_matrix:
        """
        Symmetric coupling matrix A with A[a, b] = Σ J over edges (a, b).

        Parallel edges are summed.
        """
        n = self.n_nodes
        if not self._edges:
            return sparse.csr_matrix((n, n), dtype=float)
        rows = np.array([e.a for e in self._edges] + [e.b for e in self._edges])
        cols = np.array([e.b for e in self._edges] + [e.a for e in self._edges])
        vals = np.array([e.weight for e in self._edges] * 2, dtype=float)
        return sparse.coo_matrix((vals, (rows, cols)), shape=(n, n)).tocsr()

    def connected_components(self) -> Tuple[int, np.ndarray]:
        """Number of connected components and a component label per node."""
        n_comp, labels = csgraph.connected_components(
            self.adjacency_matrix(), directed=False
        )
        return int(n_comp), labels

    def isolated_nodes(self) -> List[int]:
        """Nodes with no incident edge (Wolff seeds there give cluster size 1)."""
        return [s for s in range(self.n_nodes) if not self._adj[s]]

    def __repr__(self) -> str:
        return (
            f"WeightedGraph(n_nodes={self.n_nodes}, n_edges={self.n_edges}, "
            f"volume={self.volume:.6g}, frozen={self._frozen})"
        )
