# src/calphadg/geometry/distances.py

"""Distance matrices from Cartesian coordinates."""

import numpy as np


def pairwise_distances(R: np.ndarray) -> np.ndarray:
    """Compute all pairwise distances.

    Args:
        R: (N, 3) coordinates.

    Returns:
        (N, N) symmetric distance matrix with zero diagonal.
    """
    return np.sqrt(squared_distances(R))


def squared_distances(R: np.ndarray) -> np.ndarray:
    """Compute all pairwise squared distances.

    Args:
        R: (N, 3) coordinates.

    Returns:
        (N, N) symmetric matrix of squared distances with zero diagonal.
    """
    R = np.asarray(R, dtype=np.float64)
    diff = R[:, None, :] - R[None, :, :]
    D2 = (diff * diff).sum(axis=-1)
    np.fill_diagonal(D2, 0.0)
    return D2
