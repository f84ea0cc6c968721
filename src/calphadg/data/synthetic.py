# src/calphadg/data/synthetic.py

"""Synthetic Cα traces for testing and debugging."""

from typing import List, Optional

import numpy as np

from calphadg.data.contact_types import STANDARD_AA3
from calphadg.utils.constants import CA_CA_BOND_LENGTH
from calphadg.utils.seed import SeedLike, make_rng


def make_extended_chain(
    length: int,
    bond: float = CA_CA_BOND_LENGTH,
    noise: float = 0.0,
    rng: SeedLike = None,
) -> np.ndarray:
    """Generate an extended Cα chain along the x-axis.

    Args:
        length: Chain length.
        bond: Spacing between consecutive atoms (Å).
        noise: Gaussian noise amplitude.
        rng: Generator or seed for the noise.

    Returns:
        (length, 3) coordinates.
    """
    R = np.zeros((length, 3))
    R[:, 0] = np.arange(length) * bond

    if noise > 0:
        R = R + noise * make_rng(rng).standard_normal(R.shape)

    return R


def make_helix(
    length: int,
    radius: float = 2.3,
    rise: float = 1.5,
    twist: float = 100.0,
    noise: float = 0.0,
    rng: SeedLike = None,
) -> np.ndarray:
    """Generate an ideal alpha helix Cα trace.

    The default radius, rise and twist give a Cα-Cα spacing of about 3.8 Å.

    Args:
        length: Chain length.
        radius: Helix radius (Å).
        rise: Rise per residue (Å).
        twist: Twist per residue (degrees).
        noise: Gaussian noise amplitude.
        rng: Generator or seed for the noise.

    Returns:
        (length, 3) coordinates.
    """
    twist_rad = np.deg2rad(twist)
    i = np.arange(length, dtype=np.float64)

    R = np.stack(
        [radius * np.cos(i * twist_rad), radius * np.sin(i * twist_rad), i * rise],
        axis=-1,
    )

    if noise > 0:
        R = R + noise * make_rng(rng).standard_normal(R.shape)

    return R


def make_hairpin(length: int, bond: float = CA_CA_BOND_LENGTH, gap: float = 5.0) -> np.ndarray:
    """Two antiparallel strands joined by a turn, as a planar Cα trace.

    Args:
        length: Chain length (at least 4).
        bond: Spacing along each strand (Å).
        gap: Distance between the strands (Å).

    Returns:
        (length, 3) coordinates.
    """
    if length < 4:
        raise ValueError(f"Hairpin needs at least 4 residues, got {length}")
    half = length // 2
    R = np.zeros((length, 3))
    R[:half, 0] = np.arange(half) * bond
    R[half:, 0] = (half - 1 - np.arange(length - half)) * bond
    R[half:, 1] = gap
    # Lift the turn residues out of plane so the trace is not degenerate
    R[half - 1, 2] = 1.0
    R[half, 2] = 1.0
    return R


def random_sequence(length: int, rng: SeedLike = None) -> List[str]:
    """Generate a random sequence of 3-letter residue names."""
    idx = make_rng(rng).integers(0, len(STANDARD_AA3), size=length)
    return [STANDARD_AA3[i] for i in idx]


def poly_ala(length: int) -> List[str]:
    """Poly-alanine sequence of the given length."""
    return ["ALA"] * length
