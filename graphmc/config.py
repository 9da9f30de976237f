"""
Chain configuration.

Update schedule and seed for one Markov chain, loadable from a plain dict
or a YAML file:

    seed: 1234
    n_therm: 1000
    n_traj: 20000
    n_skip: 20
    n_wolff: 4
    n_metropolis: 1
"""

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .random_stream import RandomStream


@dataclass
class ChainConfig:
    """Update schedule for ``run_chain``."""
    seed: Optional[int] = None
    n_therm: int = 1000        # iterations discarded before measuring
    n_traj: int = 10000        # measured iterations
    n_skip: int = 10           # iterations between measurements
    n_wolff: int = 1           # Wolff updates per iteration
    n_sw: int = 0              # Swendsen-Wang updates per iteration
    n_metropolis: int = 1      # Metropolis sweeps per iteration
    n_overrelax: int = 0       # overrelaxation sweeps per iteration (φ⁴ only)
    cold_start: bool = False

    def validate(self) -> "ChainConfig":
        for name in ('n_therm', 'n_traj', 'n_wolff', 'n_sw', 'n_metropolis', 'n_overrelax'):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
        if not isinstance(self.n_skip, int) or self.n_skip < 1:
            raise ValueError(f"n_skip must be a positive integer, got {self.n_skip!r}")
        if self.seed is not None and not isinstance(self.seed, int):
            raise ValueError(f"seed must be an integer or None, got {self.seed!r}")
        return self

    @property
    def n_iterations(self) -> int:
        return self.n_therm + self.n_traj

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChainConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**data).validate()

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "ChainConfig":
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return cls.from_dict(data)

    def make_stream(self) -> RandomStream:
        """Fresh RandomStream seeded from this config."""
        return RandomStream(self.seed)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
