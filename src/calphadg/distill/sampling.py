# src/calphadg/distill/sampling.py

"""Random contact subsets of a bounds matrix."""

from typing import List, Tuple

import numpy as np

from calphadg.bounds.construction import add_backbone_restraints
from calphadg.bounds.matrix import SparseBoundsMatrix
from calphadg.utils.constants import CA_CA_BOND_LENGTH, DIAGONALS_TO_SKIP


def eligible_pairs(bounds: SparseBoundsMatrix, min_seq_separation: int = DIAGONALS_TO_SKIP) -> List[Tuple[int, int]]:
    """Defined pairs that may be sampled, in row-major order."""
    return bounds.pairs(min_seq_separation)


def sample_subset(
    bounds: SparseBoundsMatrix,
    num_contacts: int,
    rng: np.random.Generator,
    min_seq_separation: int = DIAGONALS_TO_SKIP,
    backbone_distance: float = CA_CA_BOND_LENGTH,
) -> SparseBoundsMatrix:
    """Draw ``num_contacts`` distinct contacts plus the backbone restraints.

    Only contacts with sequence separation above ``min_seq_separation``
    are eligible.

    Raises:
        ValueError: If more contacts are requested than are eligible.
    """
    pairs = eligible_pairs(bounds, min_seq_separation)
    if num_contacts < 0 or num_contacts > len(pairs):
        raise ValueError(
            f"Cannot sample {num_contacts} contacts: {len(pairs)} contacts have "
            f"sequence separation above {min_seq_separation}"
        )
    chosen = np.sort(rng.choice(len(pairs), size=num_contacts, replace=False))
    subset = bounds.subset([pairs[k] for k in chosen])
    return add_backbone_restraints(subset, backbone_distance)
