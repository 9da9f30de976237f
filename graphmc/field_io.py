"""
Bit-packed Ising field encoding.

Layout: node i is stored in byte i // 8 at bit i % 8 (least significant
bit first). A set bit means spin -1, a clear bit spin +1. The buffer is
ceil(n / 8) bytes; unused high bits of the last byte are zero.
"""

import numpy as np
from typing import Sequence


def encode_spins(spins: Sequence[float]) -> bytes:
    """Pack a ±1 field into bytes."""
    arr = np.asarray(spins, dtype=float).ravel()
    bits = (arr < 0).astype(np.uint8)
    return np.packbits(bits, bitorder='little').tobytes()


def decode_spins(data: bytes, n_nodes: int) -> np.ndarray:
    """Unpack ``n_nodes`` spins from ``data`` into a float array of ±1."""
    n_bytes = (n_nodes + 7) // 8
    if len(data) < n_bytes:
        raise ValueError(
            f"Need {n_bytes} bytes for {n_nodes} spins, got {len(data)}"
        )
    if n_nodes == 0:
        return np.zeros(0)
    buf = np.frombuffer(data, dtype=np.uint8, count=n_bytes)
    bits = np.unpackbits(buf, bitorder='little')[:n_nodes]
    return np.where(bits == 1, -1.0, 1.0)
