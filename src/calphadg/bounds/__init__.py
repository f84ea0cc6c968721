# src/calphadg/bounds/__init__.py

"""Distance bounds: containers, construction from contacts and smoothing."""

from calphadg.bounds.construction import add_backbone_restraints, bounds_from_contact_graph
from calphadg.bounds.matrix import AllPairsBoundsMatrix, Bound, SparseBoundsMatrix
from calphadg.bounds.smoothing import (
    BoundsSmoother,
    DisconnectedBoundsError,
    MetrizationResult,
    sample_distances,
    smooth_bounds,
)

__all__ = [
    # Containers
    "Bound",
    "SparseBoundsMatrix",
    "AllPairsBoundsMatrix",
    # Construction
    "bounds_from_contact_graph",
    "add_backbone_restraints",
    # Smoothing
    "BoundsSmoother",
    "MetrizationResult",
    "DisconnectedBoundsError",
    "smooth_bounds",
    "sample_distances",
]
