# src/calphadg/evaluation/metrics/rg.py

"""Radius of gyration calculation."""

import numpy as np

from calphadg.utils.math import upper_triangle


def radius_of_gyration(R: np.ndarray) -> float:
    """Compute radius of gyration.

    Rg = sqrt(mean(||r_i - r_com||²))

    Args:
        R: (N, 3) coordinates.

    Returns:
        Radius of gyration in same units as input.
    """
    R = np.asarray(R, dtype=np.float64)
    if len(R) == 0:
        return 0.0
    com = R.mean(axis=0)
    return float(np.sqrt(((R - com) ** 2).sum(axis=1).mean()))


def radius_of_gyration_from_sq_dists(sq_dists: np.ndarray) -> float:
    """Radius of gyration from a complete matrix of squared distances.

    Rg² = Σ_{i<j} D_ij / N², no coordinates needed.
    """
    D = np.asarray(sq_dists, dtype=np.float64)
    n = D.shape[0]
    if n == 0:
        return 0.0
    return float(np.sqrt(upper_triangle(D).sum() / n**2))


def batch_rg(models: np.ndarray) -> np.ndarray:
    """Compute Rg for each model of an ensemble."""
    return np.array([radius_of_gyration(model) for model in models])
