# tests/test_bounds.py

"""Tests for bounds containers and their construction from contacts."""

import numpy as np
import pytest

from calphadg.bounds.construction import add_backbone_restraints, bounds_from_contact_graph
from calphadg.bounds.matrix import AllPairsBoundsMatrix, Bound, SparseBoundsMatrix
from calphadg.data.contact_types import InvalidContactTypeError
from calphadg.data.contacts import ContactGraph


class TestBound:
    """Test the bound interval."""

    def test_valid(self):
        b = Bound(2.0, 4.0)
        assert 3.0 in b
        assert 5.0 not in b
        assert b.width == pytest.approx(2.0)

    def test_inverted_rejected(self):
        with pytest.raises(ValueError):
            Bound(4.0, 2.0)

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            Bound(-1.0, 2.0)


class TestSparseBoundsMatrix:
    """Test the sparse bounds container."""

    def test_symmetric_access(self):
        m = SparseBoundsMatrix(5)
        m.set(3, 1, Bound(2.0, 6.0))
        assert m.get(1, 3) == Bound(2.0, 6.0)
        assert m[3, 1] == Bound(2.0, 6.0)
        assert (1, 3) in m
        assert m.get(0, 4) is None
        assert len(m) == 1

    def test_replace_keeps_single_entry(self):
        m = SparseBoundsMatrix(3)
        m.set(0, 2, Bound(1.0, 2.0))
        m[2, 0] = Bound(1.5, 2.5)
        assert len(m) == 1
        assert m.get(0, 2) == Bound(1.5, 2.5)

    def test_invalid_pairs(self):
        m = SparseBoundsMatrix(3)
        with pytest.raises(ValueError):
            m.set(1, 1, Bound(1.0, 2.0))
        with pytest.raises(ValueError):
            m.set(0, 3, Bound(1.0, 2.0))

    def test_pairs_row_major_and_separation(self):
        m = add_backbone_restraints(SparseBoundsMatrix(6))
        m.set(0, 5, Bound(3.0, 8.0))
        m.set(1, 4, Bound(3.0, 8.0))
        assert m.pairs()[:2] == [(0, 1), (0, 5)]
        assert m.pairs(min_seq_separation=1) == [(0, 5), (1, 4)]
        assert m.pairs(min_seq_separation=4) == [(0, 5)]

    def test_copy_is_independent(self):
        m = add_backbone_restraints(SparseBoundsMatrix(4))
        c = m.copy()
        c.set(0, 3, Bound(1.0, 9.0))
        assert (0, 3) not in m
        assert len(c) == len(m) + 1

    def test_serial_mapping(self):
        m = SparseBoundsMatrix(3, serials=[10, 11, 15])
        assert m.serial_of(2) == 15
        assert m.index_of(11) == 1
        with pytest.raises(ValueError):
            SparseBoundsMatrix(3, serials=[1, 2])
        with pytest.raises(ValueError):
            SparseBoundsMatrix(2, serials=[4, 4])


class TestAllPairsBoundsMatrix:
    """Test the dense bounds container."""

    def test_read_only(self):
        lower = np.full((3, 3), 1.0)
        upper = np.full((3, 3), 2.0)
        m = AllPairsBoundsMatrix(lower, upper)
        assert m.lower[0, 0] == 0.0
        assert m[0, 1] == Bound(1.0, 2.0)
        with pytest.raises(ValueError):
            m.upper[0, 1] = 5.0

    def test_to_sparse(self):
        m = AllPairsBoundsMatrix(np.full((4, 4), 1.0), np.full((4, 4), 2.0), serials=[5, 6, 7, 8])
        sparse = m.to_sparse()
        assert len(sparse) == 6
        assert sparse.serials == (5, 6, 7, 8)

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            AllPairsBoundsMatrix(np.zeros((3, 3)), np.zeros((3, 4)))


class TestConstruction:
    """Test conversion of contact graphs into bounds."""

    def test_backbone_always_present(self):
        graph = ContactGraph(["ALA"] * 5)
        bounds = bounds_from_contact_graph(graph)
        assert len(bounds) == 4
        for i in range(4):
            assert bounds.get(i, i + 1) == Bound(3.8, 3.8)

    def test_contact_bounds(self, helix_graph, helix_bounds):
        for i, j in helix_graph.iter_index_edges():
            b = helix_bounds.get(i, j)
            if j - i == 1:
                assert b == Bound(3.8, 3.8)
            else:
                assert b.lower == pytest.approx(2.8)
                assert b.upper == pytest.approx(8.0)

    def test_adjacent_contact_gets_backbone_bound(self):
        graph = ContactGraph(["GLY"] * 4, edges=[(1, 2), (1, 4)])
        bounds = bounds_from_contact_graph(graph)
        assert bounds.get(0, 1) == Bound(3.8, 3.8)
        assert bounds.get(0, 3) == Bound(2.8, 8.0)

    def test_crossed_contact_type(self):
        graph = ContactGraph(["ALA"] * 4, edges=[(1, 4)], contact_type="Ca/Cg", cutoff=9.0)
        bounds = bounds_from_contact_graph(graph)
        assert bounds.get(0, 3).lower == pytest.approx((2.8 + 2.6) / 2)
        assert bounds.get(0, 3).upper == pytest.approx(9.0)

    def test_serials_carried(self):
        graph = ContactGraph(["ALA"] * 3, serials=[7, 8, 9])
        assert bounds_from_contact_graph(graph).serials == (7, 8, 9)

    @pytest.mark.parametrize("ct", ["BB", "SC", "Ca+Cb", "Xx", "Ca/"])
    def test_invalid_contact_type(self, ct):
        graph = ContactGraph(["ALA"] * 4, edges=[(1, 4)], contact_type=ct)
        with pytest.raises(InvalidContactTypeError):
            bounds_from_contact_graph(graph)
