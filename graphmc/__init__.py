"""
graphmc - Monte Carlo on Weighted Graphs

Ising and φ⁴ models on arbitrary weighted graphs (flat or curved
discretizations), updated with Wolff, Swendsen-Wang and Metropolis moves,
plus jackknife / autocorrelation analysis of the resulting time series.

Basic usage:
    >>> from graphmc import RandomStream, IsingModel, rect_graph, Accumulator
    >>> graph = rect_graph(16, 16)
    >>> model = IsingModel(graph, beta=0.44, rng=RandomStream(1234))
    >>> model.hot_start()
    >>> mag = Accumulator('m')
    >>> for _ in range(1000):
    ...     model.wolff_update()
    ...     mag.record(abs(model.magnetization()))
    >>> print(mag.mean(), mag.jackknife_error(), mag.autocorr_time())

Driver:
    >>> from graphmc import ChainConfig, run_chain
    >>> config = ChainConfig(seed=1234, n_therm=100, n_traj=1000, n_wolff=4)
    >>> result = run_chain(IsingModel(graph, 0.44, config.make_stream()), config)
    >>> print(result.binder_cumulant())
"""

__version__ = "0.1.0"

from .random_stream import RandomStream

from .graph import (
    Edge,
    GraphError,
    WeightedGraph,
)

from .geometry import (
    cycle_graph,
    rect_graph,
    triangle_graph,
)

from .union_find import UnionFind

from .cluster import (
    wolff_update,
    swendsen_wang_update,
)

from .models import (
    FieldModel,
    IsingModel,
    Phi4Model,
)

from .statistics import (
    Accumulator,
    InsufficientSamplesError,
    LengthMismatchError,
    mean,
    error,
    autocorr_function,
    autocorr_time,
    jackknife_samples,
    jackknife_error,
    jackknife_mean,
    jackknife_mean_error,
    u4,
    jackknife_u4,
    susceptibility,
    jackknife_susceptibility,
)

from .field_io import encode_spins, decode_spins

from .config import ChainConfig

from .chain import (
    ChainResult,
    run_chain,
    default_observables,
    thermalization_check,
)

__all__ = [
    # Random numbers
    "RandomStream",
    # Graphs
    "Edge",
    "GraphError",
    "WeightedGraph",
    "cycle_graph",
    "rect_graph",
    "triangle_graph",
    # Updates
    "UnionFind",
    "wolff_update",
    "swendsen_wang_update",
    "FieldModel",
    "IsingModel",
    "Phi4Model",
    # Statistics
    "Accumulator",
    "InsufficientSamplesError",
    "LengthMismatchError",
    "mean",
    "error",
    "autocorr_function",
    "autocorr_time",
    "jackknife_samples",
    "jackknife_error",
    "jackknife_mean",
    "jackknife_mean_error",
    "u4",
    "jackknife_u4",
    "susceptibility",
    "jackknife_susceptibility",
    # Field encoding
    "encode_spins",
    "decode_spins",
    # Driver
    "ChainConfig",
    "ChainResult",
    "run_chain",
    "default_observables",
    "thermalization_check",
]
