# src/calphadg/geometry/internal.py

"""Backbone geometry of Cα traces.

R is expected to be [B, L, 3] or [L, 3].
Outputs are batched if input is batched.
"""

import numpy as np
import torch

from calphadg.geometry.distances import pairwise_distances
from calphadg.utils.constants import DIST_CHAIN_BREAK
from calphadg.utils.math import safe_norm


def _ensure_batch(R):
    """Convert 2D input to a batched float64 tensor."""
    if isinstance(R, np.ndarray):
        R = torch.from_numpy(np.ascontiguousarray(R, dtype=np.float64))
    if R.dim() == 2:
        return R.unsqueeze(0)
    return R


def bond_lengths(R) -> torch.Tensor:
    """Compute virtual bond lengths ℓ_i = ||r_{i+1} - r_i||.

    Args:
        R: (B, L, 3) or (L, 3) coordinates.

    Returns:
        (B, L-1) bond lengths in Å.
    """
    Rb = _ensure_batch(R)
    diffs = Rb[:, 1:, :] - Rb[:, :-1, :]
    return safe_norm(diffs, dim=-1)


def mean_bond_length(R) -> float:
    """Mean distance between index-consecutive points of a single trace."""
    if len(R) < 2:
        return 0.0
    return bond_lengths(R)[0].mean().item()


def check_backbone(R, max_jump: float = DIST_CHAIN_BREAK, exclude: int = 2) -> dict:
    """Check geometric sanity of an embedded Cα trace.

    Args:
        R: (L, 3) coordinates (numpy or torch tensor).
        max_jump: Maximum Cα-Cα distance before a chain break is reported.
        exclude: Sequence separation ignored for the clash check.

    Returns:
        Dictionary with validation results.
    """
    Rb = _ensure_batch(R)[0]
    L = Rb.shape[0]

    if L < 2:
        return {"length": L, "bond_lengths": None, "chain_breaks": 0, "min_nonbonded": None}

    l = bond_lengths(Rb)[0]
    breaks = int((l > max_jump).sum().item())

    D = pairwise_distances(Rb.numpy())
    sep = np.abs(np.arange(L)[:, None] - np.arange(L)[None, :])
    nonbonded = D[sep > exclude]
    min_nonbonded = float(nonbonded.min()) if nonbonded.size else None

    return {
        "length": L,
        "bond_lengths": {
            "min": l.min().item(),
            "max": l.max().item(),
            "mean": l.mean().item(),
        },
        "chain_breaks": breaks,
        "min_nonbonded": min_nonbonded,
    }
