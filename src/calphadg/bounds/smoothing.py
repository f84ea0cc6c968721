# src/calphadg/bounds/smoothing.py

"""Bounds smoothing and sampling, the first half of the EMBED algorithm.

Implementation of the bounds smoothing part of the EMBED algorithm of
Crippen and Havel: a sparse set of distance ranges is turned into ranges
for all pairs using the triangle inequality, and concrete distance
matrices are then drawn from those ranges.

References:
    T.F. Havel, "Distance Geometry: Theory, Algorithms, and Chemical
    Applications", Encyclopedia of Computational Chemistry (1998), 3.1.
    G.M. Crippen and T.F. Havel, "Distance Geometry and Molecular
    Conformation", chapter 5 (Wiley, 1988).
    J. Kuszewski, M. Nilges and A.T. Brünger, "Sampling and efficiency of
    metric matrix distance geometry: a novel partial metrization
    algorithm", J. Biomol. NMR 2 (1992) 33-56.

Upper bounds are all-pairs shortest paths over the graph whose edges are
the sparse upper bounds (Dijkstra from every node, which suits the sparse
contact graphs). Lower bounds use a hard-sphere placeholder: undefined
pairs all get one lower bound taken from the input. This is not a
triangle-inequality lower bound and is kept as is so that results stay
comparable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import networkx as nx
import numpy as np

from calphadg.bounds.matrix import AllPairsBoundsMatrix, SparseBoundsMatrix
from calphadg.utils.constants import BOUNDS_MARGIN, NUM_METRIZATION_ROOTS
from calphadg.utils.logging import get_logger
from calphadg.utils.seed import SeedLike, make_rng

logger = get_logger()


class DisconnectedBoundsError(ValueError):
    """Raised when some pair has no path in the upper-bound graph."""


@dataclass
class MetrizationResult:
    """One metrized draw.

    Attributes:
        distances: (N, N) symmetric distance matrix, zero diagonal.
        roots: Indices whose distances were fixed before final sampling.
        violations: Number of times a fixed distance forced a lower bound
            above its upper bound (clamped to the upper bound).
        bounds: Bounds after metrization.
    """

    distances: np.ndarray
    roots: List[int] = field(default_factory=list)
    violations: int = 0
    bounds: Optional[AllPairsBoundsMatrix] = None


def default_hard_sphere_bound(sparse: SparseBoundsMatrix) -> float:
    """Lower bound of the first defined pair in row-major order (0 if none)."""
    for _, bound in sparse.items():
        return bound.lower
    return 0.0


def upper_bounds_all_pairs(sparse: SparseBoundsMatrix) -> np.ndarray:
    """All-pairs shortest paths over the sparse upper bounds.

    Returns:
        (N, N) matrix of upper bounds; ``inf`` for pairs with no path.
    """
    n = sparse.size
    graph = nx.Graph()
    graph.add_nodes_from(range(n))
    for (i, j), bound in sparse.items():
        graph.add_edge(i, j, weight=bound.upper)

    upper = np.full((n, n), np.inf)
    for source, lengths in nx.all_pairs_dijkstra_path_length(graph, weight="weight"):
        for target, length in lengths.items():
            upper[source, target] = length
    np.fill_diagonal(upper, 0.0)
    return upper


def _clamp_lower(lower: np.ndarray, upper: np.ndarray, margin: float) -> int:
    """Set lower := upper where lower > upper; return count beyond ``margin``."""
    iu = np.triu_indices(lower.shape[0], k=1)
    n_bad = int(np.sum(lower[iu] > upper[iu] + margin))
    np.minimum(lower, upper, out=lower)
    return n_bad


def smooth_bounds(
    sparse: SparseBoundsMatrix,
    hard_sphere_bound: Optional[float] = None,
    margin: float = BOUNDS_MARGIN,
) -> AllPairsBoundsMatrix:
    """Compute bounds for all pairs from a sparse bounds matrix.

    ``sparse`` is not modified.

    Args:
        sparse: Sparse input bounds.
        hard_sphere_bound: Lower bound for undefined pairs. Defaults to
            the lower bound of the first defined pair.
        margin: Tolerance when comparing lower and upper bounds.

    Returns:
        AllPairsBoundsMatrix with lower <= upper for every pair.

    Raises:
        DisconnectedBoundsError: If some pair gets no finite upper bound.
    """
    n = sparse.size
    upper = upper_bounds_all_pairs(sparse)

    missing = np.argwhere(~np.isfinite(upper))
    if missing.size:
        i, j = missing[0]
        raise DisconnectedBoundsError(
            f"No upper bound can be inferred for pair ({i}, {j}): "
            f"{len(missing) // 2} pairs are not connected by any bound"
        )

    if hard_sphere_bound is None:
        hard_sphere_bound = default_hard_sphere_bound(sparse)

    lower = np.full((n, n), float(hard_sphere_bound))
    for (i, j), bound in sparse.items():
        lower[i, j] = lower[j, i] = bound.lower
    np.fill_diagonal(lower, 0.0)

    n_bad = _clamp_lower(lower, upper, margin)
    if n_bad:
        logger.warning(
            f"{n_bad} pairs had a lower bound above the inferred upper bound; "
            f"lower bounds set to the upper bounds"
        )

    return AllPairsBoundsMatrix(lower, upper, sparse.serials)


def sample_distances(lower: np.ndarray, upper: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """Draw a symmetric distance matrix uniformly within the given bounds.

    Pairs ``i < j`` are drawn independently in row-major order.
    """
    n = lower.shape[0]
    iu = np.triu_indices(n, k=1)
    values = lower[iu] + rng.random(len(iu[0])) * (upper[iu] - lower[iu])
    D = np.zeros((n, n))
    D[iu] = values
    return D + D.T


def _fix_distance(lower: np.ndarray, upper: np.ndarray, i: int, j: int, value: float) -> None:
    """Fix the distance of pair (i, j) and re-tighten all upper bounds.

    ``upper`` must already satisfy the triangle inequality; lowering one
    entry only needs paths through the new (i, j) edge to be checked.
    """
    lower[i, j] = lower[j, i] = value
    upper[i, j] = upper[j, i] = value
    via_ij = upper[:, i, None] + value + upper[None, j, :]
    via_ji = upper[:, j, None] + value + upper[None, i, :]
    np.minimum(upper, np.minimum(via_ij, via_ji), out=upper)


class BoundsSmoother:
    """Triangle-inequality smoothing and sampling of distance bounds.

    The smoother keeps a private copy of the sparse input, so the caller's
    matrix can be reused. The all-pairs bounds are computed once and every
    draw starts from them, so draws are independent of each other.

    Args:
        sparse: Sparse input bounds.
        rng: Generator (or seed) used for every draw.
        hard_sphere_bound: Lower bound for undefined pairs (default: the
            lower bound of the first defined pair).
        num_roots: Number of root indices for partial metrization; None
            metrizes every index.
        margin: Tolerance when comparing lower and upper bounds.
    """

    def __init__(
        self,
        sparse: SparseBoundsMatrix,
        rng: SeedLike = None,
        hard_sphere_bound: Optional[float] = None,
        num_roots: Optional[int] = NUM_METRIZATION_ROOTS,
        margin: float = BOUNDS_MARGIN,
    ):
        if num_roots is not None and num_roots < 0:
            raise ValueError(f"num_roots must be non-negative, got {num_roots}")
        self._sparse = sparse.copy()
        self.rng = make_rng(rng)
        self.hard_sphere_bound = (
            default_hard_sphere_bound(self._sparse) if hard_sphere_bound is None else hard_sphere_bound
        )
        self.num_roots = num_roots
        self.margin = margin
        self._all_pairs: Optional[AllPairsBoundsMatrix] = None

    @property
    def size(self) -> int:
        return self._sparse.size

    @property
    def sparse_bounds(self) -> SparseBoundsMatrix:
        """Copy of the sparse input bounds."""
        return self._sparse.copy()

    def smooth(self) -> AllPairsBoundsMatrix:
        """Bounds for all pairs, computed on first use and cached."""
        if self._all_pairs is None:
            logger.debug(f"Smoothing {len(self._sparse)} bounds over {self.size} points")
            self._all_pairs = smooth_bounds(self._sparse, self.hard_sphere_bound, self.margin)
        return self._all_pairs

    @property
    def initial_bounds_all_pairs(self) -> AllPairsBoundsMatrix:
        return self.smooth()

    def sample_bounds(self) -> np.ndarray:
        """Random distance matrix drawn uniformly from the all-pairs bounds.

        Returns:
            (N, N) symmetric distance matrix with zero diagonal.
        """
        bounds = self.smooth()
        return sample_distances(bounds.lower, bounds.upper, self.rng)

    def metrize(self) -> MetrizationResult:
        """Draw a distance matrix using partial metrization.

        For each root, the distances to every other index are drawn one at a
        time; after each draw the pair is fixed and all upper bounds are
        re-tightened before the next pair is drawn. Remaining pairs are then
        sampled uniformly. A fix that pushes some lower bound above its
        upper bound is clamped (lower := upper) and counted.
        """
        bounds = self.smooth()
        lower = np.array(bounds.lower)
        upper = np.array(bounds.upper)
        n = self.size

        k = n if self.num_roots is None else min(self.num_roots, n)
        roots = self.rng.choice(n, size=k, replace=False).tolist() if n else []

        violations = 0
        for root in roots:
            for other in range(n):
                if other == root:
                    continue
                lo, up = lower[root, other], upper[root, other]
                if lo == up:
                    continue
                value = lo + self.rng.random() * (up - lo)
                _fix_distance(lower, upper, root, other, value)
                violations += _clamp_lower(lower, upper, self.margin)

        if violations:
            logger.warning(
                f"Metrization with roots {roots} produced {violations} lower bounds "
                f"above upper bounds; clamped to the upper bounds"
            )

        distances = sample_distances(lower, upper, self.rng)
        return MetrizationResult(
            distances=distances,
            roots=roots,
            violations=violations,
            bounds=AllPairsBoundsMatrix(lower, upper, self._sparse.serials),
        )
