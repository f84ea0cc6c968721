# src/calphadg/utils/math.py

"""Mathematical utilities with safe numerical operations."""

import numpy as np
import torch


def safe_norm(
    x: torch.Tensor,
    dim: int = -1,
    keepdim: bool = False,
    eps: float = 1e-12,
) -> torch.Tensor:
    """Compute norm with numerical safety (avoid zero gradient).

    Args:
        x: Input tensor.
        dim: Dimension along which to compute norm.
        keepdim: Keep reduced dimension.
        eps: Small value to avoid sqrt(0).

    Returns:
        Norm of x along specified dimension.
    """
    return torch.sqrt(torch.sum(x * x, dim=dim, keepdim=keepdim) + eps)


def upper_triangle(M: np.ndarray, k: int = 1) -> np.ndarray:
    """Return the entries of the strict upper triangle of a square matrix."""
    iu = np.triu_indices(M.shape[0], k=k)
    return M[iu]


def is_symmetric(M: np.ndarray, atol: float = 1e-8) -> bool:
    """Check a square matrix is symmetric within tolerance."""
    return M.ndim == 2 and M.shape[0] == M.shape[1] and np.allclose(M, M.T, atol=atol)
