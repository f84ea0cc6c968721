# src/calphadg/evaluation/metrics/violations.py

"""Fidelity of an embedding to the bounds it was drawn from."""

from typing import Tuple

import numpy as np

from calphadg.bounds.matrix import AllPairsBoundsMatrix
from calphadg.geometry.distances import pairwise_distances
from calphadg.utils.constants import BOUNDS_MARGIN
from calphadg.utils.math import upper_triangle


def bound_violations(R: np.ndarray, bounds: AllPairsBoundsMatrix, margin: float = BOUNDS_MARGIN) -> Tuple[int, int]:
    """Count realized distances outside their bounds.

    Args:
        R: (N, 3) coordinates, indexed like ``bounds``.
        bounds: All-pairs bounds.
        margin: Tolerance applied on both sides (Å).

    Returns:
        (n_below_lower, n_above_upper) over pairs i < j.
    """
    R = np.asarray(R, dtype=np.float64)
    if len(R) != bounds.size:
        raise ValueError(f"Got {len(R)} points for bounds of size {bounds.size}")

    d = upper_triangle(pairwise_distances(R))
    below = int(np.sum(d < upper_triangle(bounds.lower) - margin))
    above = int(np.sum(d > upper_triangle(bounds.upper) + margin))
    return below, above


def count_violations(R: np.ndarray, bounds: AllPairsBoundsMatrix, margin: float = BOUNDS_MARGIN) -> int:
    """Total number of pairs whose realized distance is outside its bounds."""
    return sum(bound_violations(R, bounds, margin))
