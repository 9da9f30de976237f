"""
Field models: the local-update contract shared by Ising and φ⁴.

A model owns its field array and its RandomStream; the graph is borrowed
and never modified. Subclasses supply the proposal and the local action
change, and the pairwise bond rate used by the cluster algorithms.
"""

import math
import numpy as np
from typing import Optional

from ..cluster import swendsen_wang_update, wolff_update
from ..graph import GraphError, WeightedGraph
from ..random_stream import RandomStream
from ..union_find import UnionFind


class FieldModel:
    """
    Scalar field on the nodes of a weighted graph.

    Parameters
    ----------
    graph : WeightedGraph
        Geometry. Frozen here if the caller has not already done so.
    rng : RandomStream, optional
        Stream owned by this model. A fresh unseeded stream when omitted.
    """

    def __init__(self, graph: WeightedGraph, rng: Optional[RandomStream] = None):
        if graph.n_nodes == 0:
            raise GraphError("Field models need a graph with at least one node")
        self.graph = graph.freeze()
        self.rng = rng if rng is not None else RandomStream()
        self.field = np.zeros(graph.n_nodes, dtype=float)

        self._clustered = [False] * graph.n_nodes
        self._forest = UnionFind(graph.n_nodes)

    @property
    def n_nodes(self) -> int:
        return self.graph.n_nodes

    # ------------------------------------------------------------------
    # Field access
    # ------------------------------------------------------------------

    def get_value(self, node: int) -> float:
        return float(self.field[self.graph._check_node(node)])

    def set_value(self, node: int, value: float):
        self.field[self.graph._check_node(node)] = value

    def hot_start(self):
        """Random initial configuration. Subclasses define the distribution."""
        raise NotImplementedError

    def cold_start(self, value: float = 1.0):
        """Uniform initial configuration."""
        self.field.fill(value)

    # ------------------------------------------------------------------
    # Local updates
    # ------------------------------------------------------------------

    def propose(self, node: int) -> float:
        """Trial value for ``node``. May consume random draws."""
        raise NotImplementedError

    def action_delta(self, node: int, new_value: float) -> float:
        """Change in the action if ``node`` took ``new_value``."""
        raise NotImplementedError

    def metropolis_sweep(self) -> float:
        """
        One Metropolis trial at every node, in ascending node order.

        A trial is accepted when ΔS <= 0; otherwise one uniform draw is
        consumed and the trial accepted if it falls below exp(-ΔS).

        Returns
        -------
        acceptance : float
            Fraction of accepted trials, in [0, 1].
        """
        n = self.n_nodes
        rng = self.rng
        field = self.field
        accept = 0
        for s in range(n):
            new_value = self.propose(s)
            delta_s = self.action_delta(s, new_value)
            if delta_s <= 0.0 or rng.uniform01() < math.exp(-delta_s):
                field[s] = new_value
                accept += 1
        return accept / n

    # ------------------------------------------------------------------
    # Cluster updates
    # ------------------------------------------------------------------

    def bond_rate(self, value: float, neighbor_value: float, weight: float) -> float:
        """Log of the bond rejection probability; >= 0 means never bond."""
        raise NotImplementedError

    def reflect(self, value: float) -> float:
        """Cluster move applied to each member."""
        return -value

    def wolff_update(self) -> int:
        """Single-cluster update; returns the cluster size."""
        return wolff_update(self, self._clustered)

    def swendsen_wang_update(self) -> int:
        """Multi-cluster update; returns the number of clusters."""
        return swendsen_wang_update(self, self._forest)

    # ------------------------------------------------------------------
    # Observables
    # ------------------------------------------------------------------

    def magnetization(self) -> float:
        """Weighted average Σ w_i φ_i / V."""
        w = self.graph.node_weights
        return float(np.dot(w, self.field) / self.graph.volume)

    def action(self) -> float:
        raise NotImplementedError
