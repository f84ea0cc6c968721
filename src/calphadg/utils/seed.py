# src/calphadg/utils/seed.py

"""Reproducibility utilities for random generators.

Every stochastic component takes one ``numpy.random.Generator`` and
draws from it for its whole lifetime.
"""

import os
import random
from typing import List, Optional, Union

import numpy as np
import torch

SeedLike = Union[None, int, np.random.SeedSequence, np.random.Generator]


def make_rng(seed: SeedLike = None) -> np.random.Generator:
    """Return a Generator for ``seed``.

    An existing Generator is returned unchanged so callers can share one
    stream across components.
    """
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def spawn_rngs(seed: Optional[Union[int, np.random.SeedSequence]], n: int) -> List[np.random.Generator]:
    """Derive ``n`` independent generators from one seed.

    Use one child per worker when draws are run in parallel.

    Args:
        seed: Root seed (or SeedSequence).
        n: Number of child generators.

    Returns:
        List of independent generators.
    """
    if n < 0:
        raise ValueError(f"Number of generators must be non-negative, got {n}")
    root = seed if isinstance(seed, np.random.SeedSequence) else np.random.SeedSequence(seed)
    return [np.random.default_rng(child) for child in root.spawn(n)]


def seed_all(seed: int = 42) -> None:
    """Set all global random seeds for reproducibility.

    Args:
        seed: Random seed to use.
    """
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)

    os.environ["PYTHONHASHSEED"] = str(seed)
