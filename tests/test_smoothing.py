# tests/test_smoothing.py

"""Tests for triangle-inequality smoothing, sampling and metrization."""

import logging

import numpy as np
import pytest

from calphadg.bounds.construction import add_backbone_restraints
from calphadg.bounds.matrix import Bound, SparseBoundsMatrix
from calphadg.bounds.smoothing import (
    BoundsSmoother,
    DisconnectedBoundsError,
    default_hard_sphere_bound,
    sample_distances,
    smooth_bounds,
)


def _assert_triangle(U, atol=1e-9):
    # U[i, j] <= U[i, k] + U[k, j] for all i, j, k
    assert np.all(U[:, None, :] <= U[:, :, None] + U[None, :, :] + atol)


class TestUpperBounds:
    """Test shortest-path upper bounds."""

    def test_chain_three_hops(self, chain4):
        bounds = smooth_bounds(chain4)
        assert bounds.upper[0, 3] == pytest.approx(11.4, abs=1e-12)
        assert bounds.upper[0, 2] == pytest.approx(7.6, abs=1e-12)
        # Lower bound is the placeholder, untouched by smoothing
        assert bounds.lower[0, 3] == pytest.approx(3.8)

    def test_cycle_two_hops(self, cycle4):
        bounds = smooth_bounds(cycle4)
        assert bounds.upper[0, 2] == pytest.approx(7.6, abs=1e-12)
        assert bounds.upper[1, 3] == pytest.approx(7.6, abs=1e-12)
        assert bounds.upper[0, 3] == pytest.approx(3.8)

    def test_triangle_inequality(self, helix_bounds):
        bounds = smooth_bounds(helix_bounds)
        _assert_triangle(bounds.upper)

    def test_lower_below_upper(self, helix_bounds):
        bounds = smooth_bounds(helix_bounds)
        assert np.all(bounds.lower <= bounds.upper)
        assert bounds.violations() == 0

    def test_symmetric_zero_diagonal(self, helix_bounds):
        bounds = smooth_bounds(helix_bounds)
        assert np.allclose(bounds.upper, bounds.upper.T)
        assert np.allclose(bounds.lower, bounds.lower.T)
        assert np.all(np.diag(bounds.upper) == 0.0)

    def test_idempotent(self, helix_bounds):
        first = smooth_bounds(helix_bounds)
        second = smooth_bounds(first.to_sparse())
        assert np.allclose(first.upper, second.upper, atol=1e-9)
        assert np.allclose(first.lower, second.lower, atol=1e-9)

    def test_disconnected(self):
        bounds = SparseBoundsMatrix(3)
        bounds.set(0, 1, Bound(3.8, 3.8))
        with pytest.raises(DisconnectedBoundsError):
            smooth_bounds(bounds)
        with pytest.raises(ValueError):
            smooth_bounds(bounds)

    def test_input_not_modified(self, helix_bounds):
        before = list(helix_bounds.items())
        smoother = BoundsSmoother(helix_bounds, rng=0)
        smoother.smooth()
        smoother.metrize()
        assert list(helix_bounds.items()) == before

    def test_sparse_bounds_is_private_copy(self, helix_bounds):
        smoother = BoundsSmoother(helix_bounds, rng=0)
        helix_bounds.set(0, 11, Bound(3.0, 4.0))
        assert smoother.sparse_bounds.get(0, 11) is None

        copy = smoother.sparse_bounds
        copy.set(0, 11, Bound(3.0, 4.0))
        assert smoother.sparse_bounds.get(0, 11) is None

    def test_serials_carried(self):
        bounds = add_backbone_restraints(SparseBoundsMatrix(3, serials=[4, 5, 6]))
        assert smooth_bounds(bounds).serials == (4, 5, 6)


class TestLowerBounds:
    """Test the hard-sphere placeholder policy."""

    def test_default_is_first_defined_pair(self):
        bounds = SparseBoundsMatrix(4)
        bounds.set(1, 3, Bound(2.5, 9.0))
        bounds.set(0, 2, Bound(3.1, 9.0))
        add_backbone_restraints(bounds)
        # Row-major: (0, 1) comes first
        assert default_hard_sphere_bound(bounds) == pytest.approx(3.8)

    def test_override(self, chain4):
        bounds = smooth_bounds(chain4, hard_sphere_bound=2.8)
        assert bounds.lower[0, 2] == pytest.approx(2.8)
        assert bounds.lower[0, 3] == pytest.approx(2.8)
        # Defined pairs keep their own lower bound
        assert bounds.lower[0, 1] == pytest.approx(3.8)

    def test_clamped_when_above_upper(self, chain4, caplog):
        chain4.set(0, 2, Bound(9.0, 9.5))
        with caplog.at_level(logging.WARNING, logger="calphadg"):
            bounds = smooth_bounds(chain4)
        assert bounds.upper[0, 2] == pytest.approx(7.6)
        assert bounds.lower[0, 2] == pytest.approx(7.6)
        assert "lower bound above" in caplog.text


class TestSampling:
    """Test uniform sampling from all-pairs bounds."""

    def test_containment(self, helix_bounds):
        smoother = BoundsSmoother(helix_bounds, rng=3)
        bounds = smoother.smooth()
        for _ in range(5):
            D = smoother.sample_bounds()
            iu = np.triu_indices(len(D), k=1)
            assert np.all(D[iu] >= bounds.lower[iu] - 1e-12)
            assert np.all(D[iu] <= bounds.upper[iu] + 1e-12)
            assert np.allclose(D, D.T)
            assert np.all(np.diag(D) == 0.0)

    def test_fixed_bounds_reproduced(self, chain4, rng):
        bounds = smooth_bounds(chain4)
        D = sample_distances(bounds.lower, bounds.upper, rng)
        assert D[0, 1] == pytest.approx(3.8)

    def test_reproducible(self, helix_bounds):
        D1 = BoundsSmoother(helix_bounds, rng=11).sample_bounds()
        D2 = BoundsSmoother(helix_bounds, rng=11).sample_bounds()
        assert np.array_equal(D1, D2)

    def test_smoothing_cached(self, helix_bounds):
        smoother = BoundsSmoother(helix_bounds)
        assert smoother.smooth() is smoother.initial_bounds_all_pairs


class TestMetrization:
    """Test partial metrization."""

    def test_distinct_roots(self, helix_bounds):
        result = BoundsSmoother(helix_bounds, rng=5).metrize()
        assert len(result.roots) == 4
        assert len(set(result.roots)) == 4

    def test_root_rows_fixed(self, helix_bounds):
        result = BoundsSmoother(helix_bounds, rng=5).metrize()
        for root in result.roots:
            assert np.allclose(result.bounds.lower[root], result.bounds.upper[root])
            assert np.allclose(result.distances[root], result.bounds.upper[root])

    def test_containment_and_consistency(self, helix_bounds):
        smoother = BoundsSmoother(helix_bounds, rng=9)
        initial = smoother.smooth()
        result = smoother.metrize()
        D = result.distances
        iu = np.triu_indices(len(D), k=1)
        assert np.all(result.bounds.lower <= result.bounds.upper)
        assert np.all(result.bounds.upper <= initial.upper + 1e-9)
        assert np.all(D[iu] >= result.bounds.lower[iu] - 1e-12)
        assert np.all(D[iu] <= result.bounds.upper[iu] + 1e-12)
        _assert_triangle(result.bounds.upper)
        assert np.allclose(D, D.T)

    def test_full_metrization(self, chain4):
        result = BoundsSmoother(chain4, rng=2, num_roots=None).metrize()
        assert sorted(result.roots) == [0, 1, 2, 3]
        # Every pair fixed: the distances satisfy the triangle inequality
        _assert_triangle(result.distances)

    def test_roots_capped_by_size(self, chain4):
        result = BoundsSmoother(chain4, rng=2, num_roots=10).metrize()
        assert len(result.roots) == 4

    def test_draws_independent(self, helix_bounds):
        smoother = BoundsSmoother(helix_bounds, rng=1)
        smoother.metrize()
        # Later draws start from the pristine all-pairs bounds
        assert np.array_equal(smoother.smooth().upper, smooth_bounds(helix_bounds).upper)

    def test_reproducible(self, helix_bounds):
        r1 = BoundsSmoother(helix_bounds, rng=42).metrize()
        r2 = BoundsSmoother(helix_bounds, rng=42).metrize()
        assert r1.roots == r2.roots
        assert np.array_equal(r1.distances, r2.distances)

    def test_negative_roots_rejected(self, chain4):
        with pytest.raises(ValueError):
            BoundsSmoother(chain4, num_roots=-1)
