# src/calphadg/data/__init__.py

"""Contact graphs, contact types and synthetic structures."""

from calphadg.data.contact_types import (
    DEFAULT_LOOKUP,
    DistanceLookup,
    InvalidContactTypeError,
    is_single_atom_contact_type,
    split_contact_type,
)
from calphadg.data.contacts import ContactGraph, ContactGraphLike, contact_graph_from_coords
from calphadg.data.synthetic import (
    make_extended_chain,
    make_hairpin,
    make_helix,
    poly_ala,
    random_sequence,
)

__all__ = [
    # Contact types
    "DistanceLookup",
    "DEFAULT_LOOKUP",
    "InvalidContactTypeError",
    "is_single_atom_contact_type",
    "split_contact_type",
    # Contact graphs
    "ContactGraph",
    "ContactGraphLike",
    "contact_graph_from_coords",
    # Synthetic data
    "make_extended_chain",
    "make_helix",
    "make_hairpin",
    "random_sequence",
    "poly_ala",
]
