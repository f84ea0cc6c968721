# tests/conftest.py

"""Pytest fixtures for testing."""

import numpy as np
import pytest

from calphadg.bounds.construction import add_backbone_restraints, bounds_from_contact_graph
from calphadg.bounds.matrix import Bound, SparseBoundsMatrix
from calphadg.data.contacts import contact_graph_from_coords
from calphadg.data.synthetic import make_hairpin, make_helix, poly_ala


@pytest.fixture
def rng():
    """Seeded generator."""
    return np.random.default_rng(1234)


@pytest.fixture
def helix():
    """Ideal helix of 12 residues."""
    return make_helix(12)


@pytest.fixture
def helix_graph(helix):
    """Cα contact graph of the helix at 8 Å."""
    return contact_graph_from_coords(helix, poly_ala(len(helix)), cutoff=8.0)


@pytest.fixture
def helix_bounds(helix_graph):
    """Sparse bounds of the helix contact graph."""
    return bounds_from_contact_graph(helix_graph)


@pytest.fixture
def hairpin():
    """Planar hairpin of 16 residues."""
    return make_hairpin(16)


@pytest.fixture
def hairpin_graph(hairpin):
    """Cα contact graph of the hairpin at 8 Å."""
    return contact_graph_from_coords(hairpin, poly_ala(len(hairpin)), cutoff=8.0)


@pytest.fixture
def chain4():
    """Four points with only backbone bounds [3.8, 3.8]."""
    return add_backbone_restraints(SparseBoundsMatrix(4))


@pytest.fixture
def cycle4():
    """Four points on a cycle 0-1-2-3-0, every bound [3.8, 3.8]."""
    bounds = SparseBoundsMatrix(4)
    for i, j in [(0, 1), (1, 2), (2, 3), (3, 0)]:
        bounds.set(i, j, Bound(3.8, 3.8))
    return bounds


@pytest.fixture
def exact_bounds(helix):
    """Every pair of the helix bounded by its exact distance."""
    n = len(helix)
    bounds = SparseBoundsMatrix(n)
    for i in range(n):
        for j in range(i + 1, n):
            d = float(np.linalg.norm(helix[i] - helix[j]))
            bounds.set(i, j, Bound(d, d))
    return bounds
