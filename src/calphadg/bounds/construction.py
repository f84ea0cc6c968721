# src/calphadg/bounds/construction.py

"""Conversion of contact graphs into sparse bounds matrices."""

from __future__ import annotations

from typing import TYPE_CHECKING

from calphadg.bounds.matrix import Bound, SparseBoundsMatrix
from calphadg.data.contact_types import (
    DEFAULT_LOOKUP,
    DistanceLookup,
    InvalidContactTypeError,
    is_single_atom_contact_type,
    split_contact_type,
)
from calphadg.utils.constants import CA_CA_BOND_LENGTH
from calphadg.utils.logging import get_logger

if TYPE_CHECKING:
    from calphadg.data.contacts import ContactGraphLike

logger = get_logger()


def add_backbone_restraints(bounds: SparseBoundsMatrix, distance: float = CA_CA_BOND_LENGTH) -> SparseBoundsMatrix:
    """Fix the bound of every index-consecutive pair to ``[distance, distance]``.

    Only contiguous Cα restraints are added. Modifies ``bounds`` in place
    and returns it.
    """
    backbone = Bound(distance, distance)
    for i in range(bounds.size - 1):
        bounds.set(i, i + 1, backbone)
    return bounds


def bounds_from_contact_graph(
    graph: "ContactGraphLike",
    lookup: DistanceLookup = DEFAULT_LOOKUP,
    backbone_distance: float = CA_CA_BOND_LENGTH,
) -> SparseBoundsMatrix:
    """Convert a contact graph into a sparse bounds matrix.

    For each contact between non-adjacent residues the lower bound is the
    mean of the hard-sphere lookups of both contact-type halves and the
    upper bound is the mean of their upper lookups plus the cutoff.
    Adjacent residues always get the backbone bound.

    Args:
        graph: Contact provider (see ``ContactGraphLike``).
        lookup: Residue-pair distance lookups.
        backbone_distance: Distance fixed between consecutive residues (Å).

    Returns:
        SparseBoundsMatrix indexed like the graph, carrying its serials.

    Raises:
        InvalidContactTypeError: If the contact type is not made of
            recognized single-atom types.
    """
    ct = graph.contact_type
    if not is_single_atom_contact_type(ct):
        raise InvalidContactTypeError(f"Contact type {ct!r} is not valid for reconstruction")
    i_ct, j_ct = split_contact_type(ct)

    n = len(graph)
    serials = [graph.serial_of(i) for i in range(n)]
    bounds = SparseBoundsMatrix(n, serials)
    cutoff = graph.cutoff

    for i, j in graph.iter_index_edges():
        if abs(j - i) <= 1:
            continue
        i_res = graph.residue_type(i)
        j_res = graph.residue_type(j)
        dist_min = (lookup.lower_bound(i_ct, i_res, j_res) + lookup.lower_bound(j_ct, i_res, j_res)) / 2
        dist_max = (lookup.upper_bound(i_ct, i_res, j_res) + lookup.upper_bound(j_ct, i_res, j_res)) / 2 + cutoff
        bounds.set(i, j, Bound(dist_min, dist_max))

    add_backbone_restraints(bounds, backbone_distance)
    logger.debug(f"Built bounds matrix of size {n} with {len(bounds)} defined pairs")
    return bounds
