"""
Union-Find

Disjoint-set forest used by Swendsen-Wang to track bond-connected
components. ``find`` compresses paths; ``union`` always makes the smaller
root id the parent, so the root of every component is its smallest
member regardless of the order in which unions were made.
"""

from typing import Dict, List


class UnionFind:
    """
    Parameters
    ----------
    n : int
        Number of elements, labelled 0 .. n-1.
    """

    def __init__(self, n: int):
        if n < 0:
            raise ValueError(f"Size must be non-negative, got {n}")
        self.parent: List[int] = list(range(n))

    def __len__(self) -> int:
        return len(self.parent)

    def reset(self):
        """Every element becomes its own root."""
        self.parent = list(range(len(self.parent)))

    def find(self, s: int) -> int:
        """Root of ``s``; every node on the path is re-pointed at the root."""
        parent = self.parent
        root = parent[s]
        while root != parent[root]:
            root = parent[root]

        while s != root:
            nxt = parent[s]
            parent[s] = root
            s = nxt
        return root

    def union(self, a: int, b: int) -> int:
        """Merge the sets of ``a`` and ``b``; returns the surviving root."""
        ra = self.find(a)
        rb = self.find(b)
        if ra == rb:
            return ra
        r = min(ra, rb)
        self.parent[ra] = r
        self.parent[rb] = r
        return r

    def connected(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)

    def groups(self) -> Dict[int, List[int]]:
        """Members of each set keyed by root, members in ascending order."""
        out: Dict[int, List[int]] = {}
        for s in range(len(self.parent)):
            out.setdefault(self.find(s), []).append(s)
        return out

    def n_components(self) -> int:
        return sum(1 for s in range(len(self.parent)) if self.find(s) == s)
