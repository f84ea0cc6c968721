# tests/test_geometry.py

"""Tests for geometry module."""

import numpy as np
import pytest
import torch

from calphadg.geometry.distances import pairwise_distances, squared_distances
from calphadg.geometry.internal import bond_lengths, check_backbone, mean_bond_length


class TestDistances:
    """Test distance matrices."""

    def test_pairwise(self):
        R = np.array([[0.0, 0.0, 0.0], [3.0, 4.0, 0.0]])
        D = pairwise_distances(R)
        assert D[0, 1] == pytest.approx(5.0)
        assert D[1, 0] == pytest.approx(5.0)
        assert np.all(np.diag(D) == 0.0)

    def test_squared(self, helix):
        assert np.allclose(squared_distances(helix), pairwise_distances(helix) ** 2)


class TestBackbone:
    """Test Cα backbone checks."""

    def test_bond_lengths_batched(self):
        R = torch.zeros(2, 4, 3)
        R[:, :, 0] = torch.arange(4) * 3.8
        l = bond_lengths(R)
        assert l.shape == (2, 3)
        assert torch.allclose(l, torch.full((2, 3), 3.8), atol=1e-5)

    def test_mean_bond_length_numpy(self, helix):
        assert mean_bond_length(helix) == pytest.approx(np.linalg.norm(helix[1] - helix[0]), abs=1e-6)

    def test_check_backbone_chain_break(self):
        R = np.zeros((5, 3))
        R[:, 0] = [0.0, 3.8, 7.6, 15.0, 18.8]
        check = check_backbone(R)
        assert check["length"] == 5
        assert check["chain_breaks"] == 1
        assert check["bond_lengths"]["max"] == pytest.approx(7.4, abs=1e-5)

    def test_check_backbone_helix(self, helix):
        check = check_backbone(helix)
        assert check["chain_breaks"] == 0
        assert check["min_nonbonded"] > 4.0

    def test_check_backbone_single_point(self):
        assert check_backbone(np.zeros((1, 3)))["chain_breaks"] == 0
