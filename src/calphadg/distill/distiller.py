# src/calphadg/distill/distiller.py

"""Random-sampling search for the most informative contact subsets.

Subsets of a contact map are drawn at random, each is scored by how well
its triangle-inequality bounds reproduce the full map, and the results
are kept sorted by error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Tuple, Union

from calphadg.bounds.construction import bounds_from_contact_graph
from calphadg.bounds.matrix import SparseBoundsMatrix
from calphadg.data.contact_types import DEFAULT_LOOKUP, DistanceLookup
from calphadg.data.contacts import ContactGraphLike
from calphadg.distill.consensus import ConsensusGraph, VoteAverager
from calphadg.distill.deviation import DeviationFn, positive_deviation
from calphadg.distill.sampling import eligible_pairs, sample_subset
from calphadg.distill.scorer import cm_error
from calphadg.utils.constants import (
    CA_CA_BOND_LENGTH,
    CONSENSUS_PERCENTILE,
    DIAGONALS_TO_SKIP,
    SCORE_PRINT_FORMAT,
)
from calphadg.utils.logging import ProgressBar, get_logger
from calphadg.utils.seed import SeedLike, make_rng

logger = get_logger()

Pair = Tuple[int, int]


@dataclass(order=True)
class SetScore:
    """A contact subset (index pairs, backbone excluded) and its error."""

    score: float
    pairs: List[Pair] = field(default_factory=list, compare=False)


class Distiller:
    """Scores random contact subsets of a contact graph.

    Args:
        graph: Full contact graph.
        lookup: Residue-pair distance lookups for the bounds.
        rng: Generator (or seed) used for subset selection.
        min_seq_separation: Only contacts with larger separation are sampled.
        deviation: Deviation function of the contact-map error.
        backbone_distance: Distance fixed between consecutive residues (Å).
    """

    def __init__(
        self,
        graph: ContactGraphLike,
        lookup: DistanceLookup = DEFAULT_LOOKUP,
        rng: SeedLike = None,
        min_seq_separation: int = DIAGONALS_TO_SKIP,
        deviation: Union[str, DeviationFn] = positive_deviation,
        backbone_distance: float = CA_CA_BOND_LENGTH,
    ):
        self.graph = graph
        self.bounds: SparseBoundsMatrix = bounds_from_contact_graph(graph, lookup, backbone_distance)
        self.total_contacts = sum(1 for _ in graph.iter_index_edges())
        self.rng = make_rng(rng)
        self.min_seq_separation = min_seq_separation
        self.deviation = deviation
        self.backbone_distance = backbone_distance
        self._sampled: List[SetScore] = []

    @property
    def size(self) -> int:
        return self.bounds.size

    @property
    def sampled_sets(self) -> List[SetScore]:
        """All scored subsets, lowest error first."""
        return list(self._sampled)

    def num_eligible(self) -> int:
        return len(eligible_pairs(self.bounds, self.min_seq_separation))

    def sample_subset(self, num_contacts: int) -> SparseBoundsMatrix:
        """One random subset of ``num_contacts`` contacts plus backbone."""
        return sample_subset(self.bounds, num_contacts, self.rng, self.min_seq_separation, self.backbone_distance)

    def score(self, subset: SparseBoundsMatrix) -> float:
        """Contact-map error of a subset against the full map."""
        return cm_error(subset, self.bounds, self.deviation)

    def distill_random_sampling(
        self,
        num_samples: int,
        fraction: float,
        should_stop: Optional[Callable[[], bool]] = None,
        progress: bool = False,
    ) -> List[SetScore]:
        """Sample and score random subsets.

        Args:
            num_samples: Number of subsets to draw.
            fraction: Subset size as a fraction of the total contact count.
            should_stop: Checked between trials; when it returns True the
                subsets scored so far are kept.
            progress: Show an ASCII progress bar.

        Returns:
            Scored subsets sorted by ascending error.

        Raises:
            ValueError: If the subset size exceeds the number of eligible
                contacts.
        """
        if num_samples < 0:
            raise ValueError(f"num_samples must be non-negative, got {num_samples}")
        num_contacts = int(self.total_contacts * fraction)
        available = self.num_eligible()
        if num_contacts < 0 or num_contacts > available:
            raise ValueError(
                f"Subset of {num_contacts} contacts requested but only {available} contacts "
                f"have sequence separation above {self.min_seq_separation}"
            )

        logger.info(
            f"Sampling {num_samples} subsets of {num_contacts} contacts, "
            f"with sequence separation above {self.min_seq_separation}"
        )
        bar = ProgressBar(num_samples, prefix="Distilling") if progress else None

        sampled = []
        for trial in range(num_samples):
            if should_stop is not None and should_stop():
                logger.info(f"Sampling stopped after {trial} of {num_samples} subsets")
                break
            subset = self.sample_subset(num_contacts)
            error = self.score(subset)
            # Backbone restraints are not part of the subset
            sampled.append(SetScore(error, subset.pairs(min_seq_separation=1)))
            logger.debug(f"subset {trial}: error {SCORE_PRINT_FORMAT.format(error)}")
            if bar is not None:
                bar.update()
        if bar is not None:
            bar.close()

        self._sampled = sorted(sampled)
        if self._sampled:
            logger.info(
                f"Error min {SCORE_PRINT_FORMAT.format(self._sampled[0].score)}, "
                f"max {SCORE_PRINT_FORMAT.format(self._sampled[-1].score)}"
            )
        return self.sampled_sets

    def _require_samples(self) -> None:
        if not self._sampled:
            raise RuntimeError("No subsets sampled yet; call distill_random_sampling() first")

    def min_error_set_score(self) -> SetScore:
        """Most informative subset."""
        self._require_samples()
        return self._sampled[0]

    def max_error_set_score(self) -> SetScore:
        """Least informative subset."""
        self._require_samples()
        return self._sampled[-1]

    def scores(self) -> List[float]:
        """Errors of all subsets, ascending."""
        return [s.score for s in self._sampled]

    def format_scores(self) -> str:
        """One score per line."""
        return "\n".join(SCORE_PRINT_FORMAT.format(s) for s in self.scores())

    def iter_subsets(self, starting_id: int = 1) -> Iterator[Tuple[int, float, List[Pair]]]:
        """Yield ``(subset_id, score, pairs)`` with pairs as residue serials."""
        for offset, set_score in enumerate(self._sampled):
            pairs = [(self.graph.serial_of(i), self.graph.serial_of(j)) for i, j in set_score.pairs]
            yield starting_id + offset, set_score.score, pairs

    def consensus(self, percentile: float = CONSENSUS_PERCENTILE, averager=None) -> ConsensusGraph:
        """Weighted union of the best ``percentile`` of subsets.

        At least one subset is always used.
        """
        self._require_samples()
        n_best = max(int(len(self._sampled) * percentile), 1)
        best = self._sampled[:n_best]
        mean_error = sum(s.score for s in best) / n_best
        logger.info(f"Averaging the best {n_best} subsets (mean error {SCORE_PRINT_FORMAT.format(mean_error)})")

        averager = averager or VoteAverager()
        return averager.average([s.pairs for s in best], self.graph)
