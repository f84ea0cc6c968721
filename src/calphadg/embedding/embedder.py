# src/calphadg/embedding/embedder.py

"""Metric embedding, the second half of the EMBED algorithm.

Given a complete matrix of exact squared distances, classical
multidimensional scaling recovers 3D coordinates: the squared distances
are converted to a centred Gram matrix whose three largest eigenpairs
give the coordinates.

Reference:
    T.F. Havel, "Distance Geometry: Theory, Algorithms, and Chemical
    Applications", Encyclopedia of Computational Chemistry (1998), 3.2.2.
"""

from enum import Enum
from typing import Optional, Sequence, Union

import numpy as np

from calphadg.evaluation.metrics.rg import radius_of_gyration, radius_of_gyration_from_sq_dists
from calphadg.utils.constants import CA_CA_BOND_LENGTH, EIGENVALUE_TOLERANCE
from calphadg.utils.logging import get_logger
from calphadg.utils.math import is_symmetric

logger = get_logger()

EMBEDDING_DIM = 3


class ScalingMethod(Enum):
    """How the raw embedding is rescaled to match the input."""

    RADGYRATION = "radgyration"
    AVRG_INTER_CA_DIST = "avrg_inter_ca_dist"

    @classmethod
    def coerce(cls, value: Union["ScalingMethod", str]) -> "ScalingMethod":
        """Accept a member, its value or its name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        key = str(value).strip()
        for member in cls:
            if key.lower() in (member.value, member.name.lower()):
                return member
        valid = ", ".join(m.name for m in cls)
        raise ValueError(f"Unknown scaling method {value!r}; expected one of {valid}")


class Embedder:
    """Classical MDS embedding of a complete squared-distance matrix.

    Args:
        sq_dists: (N, N) symmetric matrix of squared distances, zero diagonal.
        masses: (N,) point masses (default 1.0 each).
        weights: (N,) point weights (default 1.0 each).

    Raises:
        ValueError: If the matrix is not square or masses/weights do not
            match its dimension.
    """

    def __init__(
        self,
        sq_dists: np.ndarray,
        masses: Optional[Sequence[float]] = None,
        weights: Optional[Sequence[float]] = None,
    ):
        D = np.asarray(sq_dists, dtype=np.float64)
        if D.ndim != 2 or D.shape[0] != D.shape[1]:
            raise ValueError(f"Squared distance matrix must be square, got shape {D.shape}")
        n = D.shape[0]
        if not is_symmetric(D):
            logger.warning("Squared distance matrix is not symmetric; the metric matrix will be symmetrised")

        self.masses = self._vector(masses, n, "masses")
        self.weights = self._vector(weights, n, "weights")
        if np.any(self.weights == 0):
            raise ValueError("Weights must be non-zero")

        self.sq_dists = D
        self.n = n
        # Top eigenvalues of the last embedding, largest first
        self.eigenvalues: Optional[np.ndarray] = None
        self.has_negative_eigenvalues = False

    @staticmethod
    def _vector(values: Optional[Sequence[float]], n: int, name: str) -> np.ndarray:
        if values is None:
            return np.ones(n)
        values = np.asarray(values, dtype=np.float64).reshape(-1)
        if len(values) != n:
            raise ValueError(f"Got {len(values)} {name} for a {n}x{n} squared distance matrix")
        return values

    def centroid_sq_distances(self) -> np.ndarray:
        """Squared distance of each point to the mass-weighted centroid.

        Do[i] = (1/M) Σ_j m_j D[i,j] - (1/M²) Σ_{j<k} m_j m_k D[j,k], M = Σ m.
        """
        m = self.masses
        total = m.sum()
        if total == 0:
            return np.zeros(self.n)
        pair_term = 0.5 * (m @ self.sq_dists @ m)
        return (self.sq_dists @ m) / total - pair_term / total**2

    def gram_matrix(self) -> np.ndarray:
        """Weighted metric matrix B = W A W, A[i,j] = (Do[i] + Do[j] - D[i,j]) / 2."""
        Do = self.centroid_sq_distances()
        A = 0.5 * (Do[:, None] + Do[None, :] - self.sq_dists)
        w = self.weights
        return w[:, None] * A * w[None, :]

    def embed(self, scaling: Union[ScalingMethod, str] = ScalingMethod.RADGYRATION) -> np.ndarray:
        """Compute the 3D embedding.

        A negative eigenvalue among the three largest means the input is
        not embeddable in 3D; a warning is logged and the best available
        coordinates are returned.

        Args:
            scaling: Rescaling applied to the raw embedding.

        Returns:
            (N, 3) coordinates, indexed like the input matrix.
        """
        scaling = ScalingMethod.coerce(scaling)
        n = self.n
        if n == 0:
            self.eigenvalues = np.zeros(0)
            return np.zeros((0, EMBEDDING_DIM))

        B = self.gram_matrix()
        B = 0.5 * (B + B.T)
        evals, evecs = np.linalg.eigh(B)

        # Stable sort keeps the solver's order among equal eigenvalues
        order = np.argsort(-evals, kind="stable")[:EMBEDDING_DIM]
        top = evals[order]
        self.eigenvalues = top
        # Round-off on planar or collinear inputs gives tiny negative values
        tol = EIGENVALUE_TOLERANCE * max(float(top[0]), 1.0)
        self.has_negative_eigenvalues = bool(np.any(top < -tol))
        if self.has_negative_eigenvalues:
            logger.warning(f"One of the 3 largest eigenvalues is negative: {np.round(top, 4).tolist()}")

        Y = np.zeros((n, EMBEDDING_DIM))
        Y[:, : len(order)] = evecs[:, order] * np.sqrt(np.maximum(top, 0.0))
        X = Y / self.weights[:, None]

        return X * self._scale_factor(X, scaling)

    def _scale_factor(self, X: np.ndarray, scaling: ScalingMethod) -> float:
        if scaling is ScalingMethod.RADGYRATION:
            target = radius_of_gyration_from_sq_dists(self.sq_dists)
            current = radius_of_gyration(X)
        else:
            if self.n < 2:
                return 1.0
            target = CA_CA_BOND_LENGTH
            current = float(np.linalg.norm(np.diff(X, axis=0), axis=1).mean())

        if current <= 0:
            logger.warning("Embedding collapsed to a point, skipping scaling")
            return 1.0
        return target / current
