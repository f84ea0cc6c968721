# src/calphadg/evaluation/__init__.py

"""Evaluation metrics for reconstructed ensembles."""

from calphadg.evaluation.metrics.rg import batch_rg, radius_of_gyration, radius_of_gyration_from_sq_dists
from calphadg.evaluation.metrics.rmsd import batch_rmsd, kabsch_rotate, mirror, rmsd_kabsch, rmsd_with_mirror
from calphadg.evaluation.metrics.violations import bound_violations, count_violations
from calphadg.evaluation.reporting import EnsembleEvaluator, ReconstructionReport
from calphadg.geometry.distances import pairwise_distances

__all__ = [
    # Metrics
    "rmsd_kabsch",
    "kabsch_rotate",
    "mirror",
    "rmsd_with_mirror",
    "batch_rmsd",
    "radius_of_gyration",
    "radius_of_gyration_from_sq_dists",
    "batch_rg",
    "pairwise_distances",
    "bound_violations",
    "count_violations",
    # Reporting
    "ReconstructionReport",
    "EnsembleEvaluator",
]
