# src/calphadg/distill/consensus.py

"""Consensus contact graphs from sets of contact subsets."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

from calphadg.data.contacts import ContactGraph, ContactGraphLike

Pair = Tuple[int, int]


@dataclass
class ConsensusGraph:
    """Union of contacts from several subsets, weighted by occurrence.

    Attributes:
        residues: 3-letter residue types in chain order.
        serials: Residue serials, one per index.
        contact_type: Contact type of the source graph.
        cutoff: Cutoff of the source graph (Å).
        n_sets: Number of subsets merged.
        weights: Index pair -> fraction of subsets containing it.
    """

    residues: Sequence[str]
    serials: Sequence[int]
    contact_type: str
    cutoff: float
    n_sets: int
    weights: Dict[Pair, float] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.weights)

    def weight(self, i: int, j: int) -> float:
        return self.weights.get((min(i, j), max(i, j)), 0.0)

    def top_contacts(self, k: int) -> List[Tuple[int, int, float]]:
        """The ``k`` highest-weighted contacts as ``(i, j, weight)``.

        Ties are broken by index order.
        """
        ranked = sorted(self.weights.items(), key=lambda item: (-item[1], item[0]))
        return [(i, j, w) for (i, j), w in ranked[: max(k, 0)]]

    def to_contact_graph(self, min_weight: float = 0.0) -> ContactGraph:
        """Contact graph of the contacts with weight >= ``min_weight``."""
        graph = ContactGraph(
            residues=list(self.residues),
            contact_type=self.contact_type,
            cutoff=self.cutoff,
            serials=list(self.serials),
        )
        return graph.with_index_edges(p for p, w in self.weights.items() if w >= min_weight)


class VoteAverager:
    """Weights each contact by the fraction of subsets that contain it."""

    def average(self, subsets: Sequence[Iterable[Pair]], graph: ContactGraphLike) -> ConsensusGraph:
        votes: Counter = Counter()
        for pairs in subsets:
            votes.update({(min(i, j), max(i, j)) for i, j in pairs})

        n_sets = len(subsets)
        n = len(graph)
        return ConsensusGraph(
            residues=[graph.residue_type(i) for i in range(n)],
            serials=[graph.serial_of(i) for i in range(n)],
            contact_type=graph.contact_type,
            cutoff=graph.cutoff,
            n_sets=n_sets,
            weights={pair: count / n_sets for pair, count in sorted(votes.items())} if n_sets else {},
        )
