# src/calphadg/distill/__init__.py

"""Information content of contact subsets."""

from calphadg.distill.consensus import ConsensusGraph, VoteAverager
from calphadg.distill.deviation import DEVIATIONS, get_deviation, positive_deviation, squared_deviation
from calphadg.distill.distiller import Distiller, SetScore
from calphadg.distill.sampling import eligible_pairs, sample_subset
from calphadg.distill.scorer import cm_error, dm_error, infer_all_bounds, random_subset_errors, standard_error

__all__ = [
    # Deviations
    "positive_deviation",
    "squared_deviation",
    "get_deviation",
    "DEVIATIONS",
    # Scoring
    "infer_all_bounds",
    "cm_error",
    "dm_error",
    "standard_error",
    "random_subset_errors",
    # Sampling
    "eligible_pairs",
    "sample_subset",
    # Distiller
    "Distiller",
    "SetScore",
    # Consensus
    "ConsensusGraph",
    "VoteAverager",
]
