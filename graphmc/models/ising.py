"""
Ising model on a weighted graph.

    S = -β Σ_<ab> J_ab s_a s_b,   s_i = ±1

Spins are stored as floats so the cluster engine and the statistics code
see the same field type as for φ⁴.
"""

from typing import Optional

from ..graph import WeightedGraph
from ..random_stream import RandomStream
from .base import FieldModel


class IsingModel(FieldModel):
    """
    Parameters
    ----------
    graph : WeightedGraph
    beta : float
        Bare coupling (inverse temperature).
    rng : RandomStream, optional
    """

    def __init__(
        self,
        graph: WeightedGraph,
        beta: float,
        rng: Optional[RandomStream] = None,
    ):
        super().__init__(graph, rng)
        self.beta = float(beta)
        self.cold_start()

    @property
    def spin(self):
        return self.field

    def hot_start(self):
        """One coin flip per node, in node order; heads is +1."""
        for s in range(self.n_nodes):
            self.field[s] = 1.0 if self.rng.coin() else -1.0

    def local_field(self, node: int) -> float:
        """Σ_n J_in s_n over the neighbors of ``node``."""
        graph = self.graph
        field = self.field
        h = 0.0
        for edge_id, nbr in graph.neighbors(node):
            h += field[nbr] * graph.edge_weight(edge_id)
        return h

    def propose(self, node: int) -> float:
        return -self.field[node]

    def action_delta(self, node: int, new_value: float) -> float:
        # only full flips are proposed: ΔS = 2 s_i β Σ J s_n
        return 2.0 * self.field[node] * self.beta * self.local_field(node)

    def bond_rate(self, value: float, neighbor_value: float, weight: float) -> float:
        return -2.0 * self.beta * value * neighbor_value * weight

    def action(self) -> float:
        """Action per unit volume."""
        field = self.field
        total = 0.0
        for edge in self.graph.edges:
            total -= self.beta * field[edge.a] * field[edge.b] * edge.weight
        return total / self.graph.volume

    def mean_spin(self) -> float:
        return self.magnetization()
