# src/calphadg/evaluation/metrics/__init__.py

"""Core metric functions for embedding evaluation."""

from calphadg.evaluation.metrics.rg import batch_rg, radius_of_gyration, radius_of_gyration_from_sq_dists
from calphadg.evaluation.metrics.rmsd import batch_rmsd, kabsch_rotate, mirror, rmsd_kabsch, rmsd_with_mirror
from calphadg.evaluation.metrics.violations import bound_violations, count_violations

__all__ = [
    "rmsd_kabsch",
    "kabsch_rotate",
    "mirror",
    "rmsd_with_mirror",
    "batch_rmsd",
    "radius_of_gyration",
    "radius_of_gyration_from_sq_dists",
    "batch_rg",
    "bound_violations",
    "count_violations",
]
