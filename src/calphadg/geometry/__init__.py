# src/calphadg/geometry/__init__.py

"""Geometry utilities for Cα traces.

Provides:
- Pairwise (squared) distance matrices
- Virtual bond lengths (ℓ) and backbone sanity checks
"""

from calphadg.geometry.distances import pairwise_distances, squared_distances
from calphadg.geometry.internal import bond_lengths, check_backbone, mean_bond_length

__all__ = [
    "pairwise_distances",
    "squared_distances",
    "bond_lengths",
    "mean_bond_length",
    "check_backbone",
]
