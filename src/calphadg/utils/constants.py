# src/calphadg/utils/constants.py

"""Central constants used across calphadg.

All values are defaults that can be overridden by keyword arguments.
"""

# Backbone geometry
CA_CA_BOND_LENGTH = 3.8  # Contiguous Cα-Cα distance in Å
DIST_MIN_CA = 2.8  # Cα hard-sphere lower bound (Å)
DIST_MIN = 2.6  # Generic hard-sphere lower bound, used for Cb/Cg (Å)
BB_DIAMETER_GYRATION = 4.6  # Backbone diameter of gyration (Å)
DIST_CHAIN_BREAK = 4.5  # Adjacent Cα further apart than this is a chain break (Å)

# Contact definitions
CONTACT_CUTOFF = 8.0  # Default Cα contact cutoff (Å)
CONTACT_TYPE = "Ca"

# Bounds smoothing
BOUNDS_MARGIN = 1e-4  # Tolerance when comparing lower and upper bounds
NUM_METRIZATION_ROOTS = 4  # As in Kuszewski et al. (1992)

# Embedding
EIGENVALUE_TOLERANCE = 1e-9  # Relative to the largest eigenvalue

# Subset distillation
DIAGONALS_TO_SKIP = 4  # Only contacts with |i-j| > this are sampled
CONSENSUS_PERCENTILE = 0.01
SCORE_PRINT_FORMAT = "{:9.4f}"
