# src/calphadg/distill/scorer.py

"""Error functions measuring how much of a contact map a subset encodes.

A subset is smoothed through the triangle inequality and its inferred
upper bounds are compared with the full map. Low error means the subset
carries most of the geometric information of the full map.
"""

from typing import Optional, Tuple, Union

import numpy as np

from calphadg.bounds.matrix import AllPairsBoundsMatrix, SparseBoundsMatrix
from calphadg.bounds.smoothing import smooth_bounds
from calphadg.distill.deviation import DeviationFn, get_deviation, positive_deviation
from calphadg.distill.sampling import sample_subset
from calphadg.utils.constants import DIAGONALS_TO_SKIP
from calphadg.utils.seed import SeedLike, make_rng


def infer_all_bounds(sparse: SparseBoundsMatrix, hard_sphere_bound: Optional[float] = None) -> AllPairsBoundsMatrix:
    """Bounds for all pairs inferred through the triangle inequality."""
    return smooth_bounds(sparse, hard_sphere_bound)


def cm_error(
    subset: SparseBoundsMatrix,
    full: SparseBoundsMatrix,
    deviation: Union[str, DeviationFn] = positive_deviation,
) -> float:
    """Contact-map error of a subset.

    Sum over the pairs defined in ``full`` of the deviation between the
    subset's inferred upper bound and the full map's upper bound, divided
    by the matrix size.
    """
    if subset.size != full.size:
        raise ValueError(f"Subset size {subset.size} differs from full map size {full.size}")
    if full.size == 0:
        return 0.0
    deviation = get_deviation(deviation)
    inferred = infer_all_bounds(subset).upper

    pairs = full.pairs()
    if not pairs:
        return 0.0
    i, j = np.array(pairs).T
    reference = np.array([full.get(a, b).upper for a, b in pairs])
    return float(np.sum(deviation(inferred[i, j], reference)) / full.size)


def dm_error(subset: SparseBoundsMatrix, distances: np.ndarray) -> float:
    """Distance-map error of a subset against the full distance matrix.

    2 * sqrt(Σ_{i<j, d_ij != 0} max(0, u'_ij - d_ij)²) / (n (n - 1))
    """
    D = np.asarray(distances, dtype=np.float64)
    n = D.shape[0]
    if D.shape != (subset.size, subset.size):
        raise ValueError(f"Distance matrix shape {D.shape} does not match subset size {subset.size}")
    if n < 2:
        return 0.0
    inferred = infer_all_bounds(subset).upper

    iu = np.triu_indices(n, k=1)
    d = D[iu]
    over = np.where(d != 0.0, positive_deviation(inferred[iu], d), 0.0)
    return float(2.0 * np.sqrt(np.sum(over**2)) / (n * (n - 1)))


def standard_error(values) -> float:
    """Standard error of the mean: sqrt(Σ(x - m)² / (N (N - 1)))."""
    x = np.asarray(values, dtype=np.float64)
    if len(x) < 2:
        return 0.0
    return float(np.sqrt(np.sum((x - x.mean()) ** 2) / (len(x) * (len(x) - 1))))


def random_subset_errors(
    full: SparseBoundsMatrix,
    num_contacts: int,
    runs: int,
    rng: SeedLike = None,
    distances: Optional[np.ndarray] = None,
    deviation: Union[str, DeviationFn] = positive_deviation,
    min_seq_separation: int = DIAGONALS_TO_SKIP,
) -> Tuple[float, float]:
    """Baseline error of random subsets of a given size.

    Scores ``runs`` random subsets with the contact-map error, or with the
    distance-map error when ``distances`` is given.

    Returns:
        (mean error, standard error)
    """
    if runs < 1:
        raise ValueError(f"runs must be positive, got {runs}")
    rng = make_rng(rng)
    errors = []
    for _ in range(runs):
        subset = sample_subset(full, num_contacts, rng, min_seq_separation)
        if distances is None:
            errors.append(cm_error(subset, full, deviation))
        else:
            errors.append(dm_error(subset, distances))
    return float(np.mean(errors)), standard_error(errors)
