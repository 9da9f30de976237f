"""
Field models

Modules
-------
base : FieldModel local-update contract (Metropolis sweep, cluster hooks)
ising : Z2 spins, S = -β Σ J s_a s_b
phi4 : scalar φ⁴ with Metropolis, embedded-Ising clusters and overrelaxation
"""

from .base import FieldModel
from .ising import IsingModel
from .phi4 import Phi4Model

__all__ = [
    'FieldModel',
    'IsingModel',
    'Phi4Model',
]
