# src/calphadg/bounds/matrix.py

"""Distance bounds containers.

``SparseBoundsMatrix`` holds the bounds given as input: adjacency lists
over integer indices pointing into an arena of ``Bound`` values.
``AllPairsBoundsMatrix`` is the dense, read-only result of smoothing.
Both carry the index -> residue serial mapping fixed at construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

Pair = Tuple[int, int]


@dataclass(frozen=True)
class Bound:
    """A (lower, upper) distance interval."""

    lower: float
    upper: float

    def __post_init__(self):
        if self.lower < 0 or self.upper < 0:
            raise ValueError(f"Bounds must be non-negative, got [{self.lower}, {self.upper}]")
        if self.lower > self.upper:
            raise ValueError(f"Lower bound {self.lower} is above upper bound {self.upper}")

    def __contains__(self, value: float) -> bool:
        return self.lower <= value <= self.upper

    @property
    def width(self) -> float:
        return self.upper - self.lower

    def __str__(self) -> str:
        return f"[{self.lower:4.1f} {self.upper:4.1f}]"


def _ordered(i: int, j: int) -> Pair:
    return (i, j) if i < j else (j, i)


class _SerialMapping:
    """Index <-> residue serial bijection shared by both bounds containers."""

    def _init_serials(self, n: int, serials: Optional[Sequence[int]]) -> None:
        if serials is None:
            serials = range(1, n + 1)
        self._serials: Tuple[int, ...] = tuple(int(s) for s in serials)
        if len(self._serials) != n:
            raise ValueError(f"Got {len(self._serials)} serials for {n} indices")
        self._serial_index: Dict[int, int] = {s: i for i, s in enumerate(self._serials)}
        if len(self._serial_index) != n:
            raise ValueError("Serials must be unique")

    @property
    def serials(self) -> Tuple[int, ...]:
        return self._serials

    def serial_of(self, idx: int) -> int:
        return self._serials[idx]

    def index_of(self, serial: int) -> int:
        return self._serial_index[serial]


class SparseBoundsMatrix(_SerialMapping):
    """Partial symmetric mapping from index pairs to bounds.

    Bounds are stored once per unordered pair and can be queried in either
    order. Undefined pairs carry no constraint.

    Args:
        size: Number of indices (points).
        serials: Residue serial for each index; defaults to ``1..size``.
    """

    def __init__(self, size: int, serials: Optional[Sequence[int]] = None):
        if size < 0:
            raise ValueError(f"Matrix size must be non-negative, got {size}")
        self.size = size
        self._init_serials(size, serials)
        self._adj: List[Dict[int, int]] = [{} for _ in range(size)]
        self._arena: List[Bound] = []

    def _check_pair(self, i: int, j: int) -> None:
        if i == j:
            raise ValueError(f"No bound can be set on the diagonal ({i}, {j})")
        for k in (i, j):
            if not 0 <= k < self.size:
                raise ValueError(f"Index {k} out of range for matrix of size {self.size}")

    def set(self, i: int, j: int, bound: Bound) -> None:
        """Set (or replace) the bound between ``i`` and ``j``."""
        self._check_pair(i, j)
        slot = self._adj[i].get(j)
        if slot is None:
            self._arena.append(bound)
            slot = len(self._arena) - 1
            self._adj[i][j] = slot
            self._adj[j][i] = slot
        else:
            self._arena[slot] = bound

    def get(self, i: int, j: int) -> Optional[Bound]:
        """Bound between ``i`` and ``j``, or None if undefined."""
        slot = self._adj[i].get(j)
        return None if slot is None else self._arena[slot]

    def __getitem__(self, pair: Pair) -> Optional[Bound]:
        return self.get(*pair)

    def __setitem__(self, pair: Pair, bound: Bound) -> None:
        self.set(pair[0], pair[1], bound)

    def __contains__(self, pair: Pair) -> bool:
        i, j = pair
        return 0 <= i < self.size and j in self._adj[i]

    def __len__(self) -> int:
        """Number of defined pairs."""
        return sum(len(nb) for nb in self._adj) // 2

    def pairs(self, min_seq_separation: int = 0) -> List[Pair]:
        """Defined pairs ``(i, j)``, ``i < j``, with ``j - i > min_seq_separation``.

        Pairs are returned in row-major order.
        """
        out = []
        for i, nb in enumerate(self._adj):
            out.extend((i, j) for j in sorted(nb) if j - i > min_seq_separation)
        return out

    def items(self) -> Iterator[Tuple[Pair, Bound]]:
        """Iterate ``((i, j), bound)`` in row-major order."""
        for i, j in self.pairs():
            yield (i, j), self._arena[self._adj[i][j]]

    def copy(self) -> "SparseBoundsMatrix":
        """Independent copy; later changes to either matrix do not affect the other."""
        new = SparseBoundsMatrix(self.size, self._serials)
        for (i, j), b in self.items():
            new.set(i, j, Bound(b.lower, b.upper))
        return new

    def subset(self, pairs) -> "SparseBoundsMatrix":
        """New matrix holding only the given (defined) pairs."""
        new = SparseBoundsMatrix(self.size, self._serials)
        for i, j in pairs:
            b = self.get(i, j)
            if b is None:
                raise ValueError(f"Pair ({i}, {j}) has no bound to copy")
            new.set(i, j, b)
        return new

    def __repr__(self) -> str:
        return f"SparseBoundsMatrix(size={self.size}, pairs={len(self)})"


class AllPairsBoundsMatrix(_SerialMapping):
    """Dense symmetric bounds for every pair of indices.

    The lower/upper arrays are read-only; the diagonal is zero. Only
    produced by smoothing.
    """

    def __init__(self, lower: np.ndarray, upper: np.ndarray, serials: Optional[Sequence[int]] = None):
        lower = np.array(lower, dtype=np.float64)
        upper = np.array(upper, dtype=np.float64)
        if lower.shape != upper.shape or lower.ndim != 2 or lower.shape[0] != lower.shape[1]:
            raise ValueError(f"Bounds arrays must be square and equal shape, got {lower.shape} and {upper.shape}")
        self.size = lower.shape[0]
        self._init_serials(self.size, serials)
        np.fill_diagonal(lower, 0.0)
        np.fill_diagonal(upper, 0.0)
        lower.flags.writeable = False
        upper.flags.writeable = False
        self._lower = lower
        self._upper = upper

    @property
    def lower(self) -> np.ndarray:
        return self._lower

    @property
    def upper(self) -> np.ndarray:
        return self._upper

    def __getitem__(self, pair: Pair) -> Bound:
        i, j = pair
        return Bound(float(self._lower[i, j]), float(self._upper[i, j]))

    def __len__(self) -> int:
        return self.size

    def to_sparse(self) -> SparseBoundsMatrix:
        """Sparse matrix with every off-diagonal pair defined."""
        sparse = SparseBoundsMatrix(self.size, self._serials)
        for i in range(self.size):
            for j in range(i + 1, self.size):
                sparse.set(i, j, Bound(float(self._lower[i, j]), float(self._upper[i, j])))
        return sparse

    def violations(self, margin: float = 0.0) -> int:
        """Number of pairs ``i < j`` whose lower bound exceeds the upper bound."""
        iu = np.triu_indices(self.size, k=1)
        return int(np.sum(self._lower[iu] > self._upper[iu] + margin))

    def __repr__(self) -> str:
        return f"AllPairsBoundsMatrix(size={self.size})"
