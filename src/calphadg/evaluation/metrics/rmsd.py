# src/calphadg/evaluation/metrics/rmsd.py

"""RMSD calculation with Kabsch alignment and enantiomer handling."""

from typing import Tuple

import numpy as np


def kabsch_rotate(P: np.ndarray, Q: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Find optimal rotation aligning P onto Q after centering.

    Args:
        P: (N, 3) source points.
        Q: (N, 3) target points.

    Returns:
        (P_aligned, rotation_matrix) where P_aligned = (P - P_com) @ R
    """
    P_centered = P - P.mean(axis=0)
    Q_centered = Q - Q.mean(axis=0)

    C = P_centered.T @ Q_centered
    V, _, Wt = np.linalg.svd(C)

    # Proper rotation only; reflections are handled by mirror()
    d = np.sign(np.linalg.det(V @ Wt))
    if d == 0:
        d = 1.0
    D = np.diag([1.0, 1.0, d])
    R = V @ D @ Wt

    return P_centered @ R, R


def rmsd_kabsch(P: np.ndarray, Q: np.ndarray) -> float:
    """Compute RMSD between two point sets after optimal alignment.

    Args:
        P: (N, 3) source points.
        Q: (N, 3) target points.

    Returns:
        RMSD value in same units as input.
    """
    P = np.asarray(P, dtype=np.float64)
    Q = np.asarray(Q, dtype=np.float64)
    if P.shape != Q.shape:
        raise ValueError(f"Shape mismatch: {P.shape} vs {Q.shape}")

    if len(P) == 0:
        return 0.0

    P_aligned, _ = kabsch_rotate(P, Q)
    Q_centered = Q - Q.mean(axis=0)

    diff = P_aligned - Q_centered
    return float(np.sqrt(np.mean(np.sum(diff * diff, axis=1))))


def mirror(R: np.ndarray) -> np.ndarray:
    """Mirror image of a conformation (inversion through the origin)."""
    return -np.asarray(R, dtype=np.float64)


def rmsd_with_mirror(P: np.ndarray, Q: np.ndarray) -> Tuple[float, float]:
    """RMSD of P to Q and to the mirror image of Q.

    Embeddings from distances alone fix chirality arbitrarily, so both
    enantiomers are compared.

    Returns:
        (rmsd, rmsd_mirrored)
    """
    return rmsd_kabsch(P, Q), rmsd_kabsch(P, mirror(Q))


def batch_rmsd(models: np.ndarray, reference: np.ndarray) -> np.ndarray:
    """Compute RMSD for each model of an ensemble.

    Args:
        models: (n_models, N, 3) coordinates.
        reference: (N, 3) reference structure.

    Returns:
        (n_models,) RMSD values.
    """
    rmsds = np.zeros(len(models))
    for i, model in enumerate(models):
        rmsds[i] = rmsd_kabsch(model, reference)
    return rmsds
