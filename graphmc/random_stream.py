"""
Random Stream

Seedable source of uniform reals, uniform integers and coin flips.

Every simulation context owns exactly one stream. There is no module-level
generator: two models built with the same seed, graph and parameters
consume identical draw sequences and therefore produce bit-identical
trajectories.
"""

import numpy as np
from typing import Optional


class RandomStream:
    """
    Explicitly owned random number stream.

    Thin wrapper over ``numpy.random.Generator`` (PCG64) exposing only the
    draws the update algorithms need, so each algorithm's draw count is
    easy to audit.

    Parameters
    ----------
    seed : int, optional
        Seed for the underlying generator. ``None`` draws fresh OS entropy
        (non-reproducible).
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def uniform01(self) -> float:
        """Uniform real in [0, 1)."""
        return float(self._rng.random())

    def uniform_int(self, lo: int, hi: int) -> int:
        """Uniform integer in [lo, hi], both ends inclusive."""
        if hi < lo:
            raise ValueError(f"Empty integer range [{lo}, {hi}]")
        return int(self._rng.integers(lo, hi, endpoint=True))

    def coin(self) -> bool:
        """Fair coin flip. Consumes one uniform draw."""
        return self.uniform01() < 0.5

    def normal(self, mean: float = 0.0, std: float = 1.0) -> float:
        """Gaussian real with the given mean and standard deviation."""
        return float(self._rng.normal(mean, std))

    def __repr__(self) -> str:
        return f"RandomStream(seed={self.seed!r})"
