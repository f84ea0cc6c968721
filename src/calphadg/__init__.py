"""calphadg: distance-geometry reconstruction of protein Cα traces.

This package reconstructs ensembles of 3D Cα models from sparse contact
maps with the EMBED algorithm (bounds smoothing, sampling or partial
metrization, classical MDS embedding), and scores how much geometric
information a subset of contacts carries.
"""

from calphadg._version import __version__

# Bounds
from calphadg.bounds.construction import add_backbone_restraints, bounds_from_contact_graph
from calphadg.bounds.matrix import AllPairsBoundsMatrix, Bound, SparseBoundsMatrix
from calphadg.bounds.smoothing import BoundsSmoother, DisconnectedBoundsError, MetrizationResult

# Data
from calphadg.data.contact_types import DistanceLookup, InvalidContactTypeError
from calphadg.data.contacts import ContactGraph, contact_graph_from_coords
from calphadg.data.synthetic import make_extended_chain, make_helix, random_sequence

# Distillation
from calphadg.distill.consensus import ConsensusGraph, VoteAverager
from calphadg.distill.distiller import Distiller, SetScore
from calphadg.distill.scorer import cm_error, dm_error, random_subset_errors, standard_error

# Embedding
from calphadg.embedding.embedder import Embedder, ScalingMethod

# Evaluation
from calphadg.evaluation.metrics.rg import radius_of_gyration
from calphadg.evaluation.metrics.rmsd import rmsd_kabsch, rmsd_with_mirror
from calphadg.evaluation.metrics.violations import count_violations
from calphadg.evaluation.reporting import ReconstructionReport

# Reconstruction
from calphadg.reconstruction.base import Ensemble, ReconstructionResult
from calphadg.reconstruction.reconstructer import Reconstructer

__all__ = [
    # Version
    "__version__",
    # Bounds
    "Bound",
    "SparseBoundsMatrix",
    "AllPairsBoundsMatrix",
    "bounds_from_contact_graph",
    "add_backbone_restraints",
    "BoundsSmoother",
    "MetrizationResult",
    "DisconnectedBoundsError",
    # Data
    "ContactGraph",
    "contact_graph_from_coords",
    "DistanceLookup",
    "InvalidContactTypeError",
    "make_extended_chain",
    "make_helix",
    "random_sequence",
    # Embedding
    "Embedder",
    "ScalingMethod",
    # Reconstruction
    "Reconstructer",
    "Ensemble",
    "ReconstructionResult",
    # Distillation
    "Distiller",
    "SetScore",
    "ConsensusGraph",
    "VoteAverager",
    "cm_error",
    "dm_error",
    "standard_error",
    "random_subset_errors",
    # Evaluation
    "rmsd_kabsch",
    "rmsd_with_mirror",
    "radius_of_gyration",
    "count_violations",
    "ReconstructionReport",
]
