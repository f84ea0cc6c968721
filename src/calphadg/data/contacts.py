# src/calphadg/data/contacts.py

"""Residue contact graphs: the sparse input to reconstruction.

A contact graph holds one node per residue (identified by its serial and
residue type), an undirected edge per contact, the contact type and the
distance cutoff used to define contacts. Matrix indices ``0..n-1`` map to
serials in the order the residues were given.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Protocol, Sequence, Tuple

import numpy as np

from calphadg.geometry.distances import pairwise_distances
from calphadg.utils.constants import CONTACT_CUTOFF, CONTACT_TYPE


class ContactGraphLike(Protocol):
    """What the bounds construction needs from a contact provider."""

    contact_type: str
    cutoff: float

    def __len__(self) -> int: ...

    def serial_of(self, idx: int) -> int: ...

    def index_of(self, serial: int) -> int: ...

    def residue_type(self, idx: int) -> str: ...

    def iter_index_edges(self) -> Iterator[Tuple[int, int]]: ...


@dataclass
class ContactGraph:
    """Residue interaction graph with a stable index/serial mapping.

    Attributes:
        residues: 3-letter residue types, one per node, in chain order.
        edges: Contacts as pairs of residue serials.
        contact_type: Contact type name (e.g. ``"Ca"`` or ``"Ca/Cg"``).
        cutoff: Distance cutoff defining a contact (Å).
        serials: Residue serials; defaults to ``1..n``.
    """

    residues: Sequence[str]
    edges: Iterable[Tuple[int, int]] = ()
    contact_type: str = CONTACT_TYPE
    cutoff: float = CONTACT_CUTOFF
    serials: Optional[Sequence[int]] = None
    _index: Dict[int, int] = field(init=False, repr=False)

    def __post_init__(self):
        self.residues = [r.strip().upper() for r in self.residues]
        if self.serials is None:
            self.serials = list(range(1, len(self.residues) + 1))
        else:
            self.serials = [int(s) for s in self.serials]

        if len(self.serials) != len(self.residues):
            raise ValueError(
                f"Number of serials ({len(self.serials)}) differs from "
                f"sequence length ({len(self.residues)})"
            )
        self._index = {s: i for i, s in enumerate(self.serials)}
        if len(self._index) != len(self.serials):
            raise ValueError("Residue serials must be unique")

        normalized = set()
        for a, b in self.edges:
            a, b = int(a), int(b)
            if a == b:
                raise ValueError(f"Self contact for residue {a}")
            for s in (a, b):
                if s not in self._index:
                    raise ValueError(f"Contact refers to unknown residue serial {s}")
            normalized.add((a, b) if self._index[a] < self._index[b] else (b, a))
        self.edges = sorted(normalized, key=lambda e: (self._index[e[0]], self._index[e[1]]))

    def __len__(self) -> int:
        return len(self.residues)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def serial_of(self, idx: int) -> int:
        return self.serials[idx]

    def index_of(self, serial: int) -> int:
        return self._index[serial]

    def residue_type(self, idx: int) -> str:
        return self.residues[idx]

    def iter_index_edges(self) -> Iterator[Tuple[int, int]]:
        """Yield contacts as ``(i, j)`` matrix indices with ``i < j``."""
        for a, b in self.edges:
            yield self._index[a], self._index[b]

    def with_index_edges(self, pairs: Iterable[Tuple[int, int]]) -> "ContactGraph":
        """New graph over the same residues with the given index-pair contacts."""
        return ContactGraph(
            residues=list(self.residues),
            edges=[(self.serials[i], self.serials[j]) for i, j in pairs],
            contact_type=self.contact_type,
            cutoff=self.cutoff,
            serials=list(self.serials),
        )


def contact_graph_from_coords(
    coords: np.ndarray,
    residues: Sequence[str],
    cutoff: float = CONTACT_CUTOFF,
    contact_type: str = CONTACT_TYPE,
    serials: Optional[Sequence[int]] = None,
    exclude: int = 0,
) -> ContactGraph:
    """Build a contact graph from coordinates of one atom per residue.

    Args:
        coords: (N, 3) coordinates (e.g. Cα).
        residues: 3-letter residue types.
        cutoff: Pairs closer than this are contacts (Å).
        contact_type: Contact type label stored on the graph.
        serials: Optional residue serials (default 1..N).
        exclude: Sequence separation cutoff (|i-j| <= exclude excluded).

    Returns:
        ContactGraph with one edge per contact.
    """
    coords = np.asarray(coords, dtype=np.float64)
    if coords.ndim != 2 or coords.shape[1] != 3:
        raise ValueError(f"Expected (N, 3) coordinates, got shape {coords.shape}")
    if coords.shape[0] != len(residues):
        raise ValueError(
            f"Got {coords.shape[0]} coordinates for {len(residues)} residues"
        )

    D = pairwise_distances(coords)
    N = D.shape[0]
    iu = np.triu_indices(N, k=max(exclude, 0) + 1)
    good = D[iu] < cutoff

    graph = ContactGraph(
        residues=residues,
        contact_type=contact_type,
        cutoff=cutoff,
        serials=serials,
    )
    pairs: List[Tuple[int, int]] = list(zip(iu[0][good].tolist(), iu[1][good].tolist()))
    return graph.with_index_edges(pairs)
