# src/calphadg/data/contact_types.py

"""Contact-type catalogue and residue-pair distance bound lookups.

A contact type names the atom(s) of each residue whose distance defines a
contact: single-atom types (``Ca``, ``Cb``, ...), multi-atom types
(``BB``, ``SC``) and crossed types written ``i_ct/j_ct`` (e.g. ``Ca/Cg``).
Only single-atom types (crossed or not) can be turned into bounds for
reconstruction.
"""

from typing import Dict, Mapping, Optional, Tuple

from calphadg.utils.constants import BB_DIAMETER_GYRATION, DIST_MIN, DIST_MIN_CA

# Standard residue names, used to validate lookups
STANDARD_AA3 = (
    "ALA", "CYS", "ASP", "GLU", "PHE", "GLY", "HIS", "ILE", "LYS", "LEU",
    "MET", "ASN", "PRO", "GLN", "ARG", "SER", "THR", "VAL", "TRP", "TYR",
)

# Hard-sphere lower bounds for single-atom contact types (Å)
SINGLE_ATOM_LOWER_BOUNDS: Dict[str, float] = {
    "Ca": DIST_MIN_CA,
    "Cb": DIST_MIN,
    "Cg": DIST_MIN,
    "C": DIST_MIN_CA,
}


class InvalidContactTypeError(ValueError):
    """Raised when a contact type cannot be used to derive distance bounds."""


def split_contact_type(ct: str) -> Tuple[str, str]:
    """Split a (possibly crossed) contact type into its two halves.

    ``"Ca"`` gives ``("Ca", "Ca")`` and ``"Ca/Cg"`` gives ``("Ca", "Cg")``.
    """
    if "/" in ct:
        parts = ct.split("/")
        if len(parts) != 2 or not all(parts):
            raise InvalidContactTypeError(f"Malformed crossed contact type: {ct!r}")
        return parts[0], parts[1]
    return ct, ct


def is_single_atom_contact_type(ct: str) -> bool:
    """True if ``ct`` is a single-atom contact type, crossed ones included."""
    if not ct or "+" in ct:
        return False
    try:
        i_ct, j_ct = split_contact_type(ct)
    except InvalidContactTypeError:
        return False
    return i_ct in SINGLE_ATOM_LOWER_BOUNDS and j_ct in SINGLE_ATOM_LOWER_BOUNDS


class DistanceLookup:
    """Lower/upper distance lookups per contact type and residue pair.

    Single-atom types contribute their hard-sphere lower bound and a zero
    upper offset (the cutoff alone is the upper bound). ``BB`` uses the Cα
    hard sphere and the backbone diameter of gyration. ``SC`` needs a
    residue-pair table mapping sorted ``(aa1, aa2)`` to ``(lower, upper)``.
    """

    def __init__(self, sc_pair_bounds: Optional[Mapping[Tuple[str, str], Tuple[float, float]]] = None):
        self.sc_pair_bounds: Dict[Tuple[str, str], Tuple[float, float]] = {}
        for (aa1, aa2), bounds in (sc_pair_bounds or {}).items():
            self.sc_pair_bounds[self._pair_key(aa1, aa2)] = (float(bounds[0]), float(bounds[1]))

    @staticmethod
    def _pair_key(aa1: str, aa2: str) -> Tuple[str, str]:
        # Table is keyed in alphabetical order
        aa1, aa2 = aa1.strip().upper(), aa2.strip().upper()
        return (aa1, aa2) if aa1 <= aa2 else (aa2, aa1)

    def _sc_bounds(self, aa1: str, aa2: str) -> Tuple[float, float]:
        key = self._pair_key(aa1, aa2)
        if key not in self.sc_pair_bounds:
            raise KeyError(f"No side-chain bounds for residue pair {key[0]}_{key[1]}")
        return self.sc_pair_bounds[key]

    def lower_bound(self, ct: str, aa1: str, aa2: str) -> float:
        """Lower bound distance for a contact of type ``ct`` between two residues."""
        if ct in SINGLE_ATOM_LOWER_BOUNDS:
            return SINGLE_ATOM_LOWER_BOUNDS[ct]
        if ct == "BB":
            return DIST_MIN_CA
        if ct == "SC":
            return self._sc_bounds(aa1, aa2)[0]
        raise InvalidContactTypeError(f"No lower bound defined for contact type {ct!r}")

    def upper_bound(self, ct: str, aa1: str, aa2: str) -> float:
        """Upper bound offset added to the cutoff for a contact of type ``ct``."""
        if ct in SINGLE_ATOM_LOWER_BOUNDS:
            return 0.0
        if ct == "BB":
            return BB_DIAMETER_GYRATION
        if ct == "SC":
            return self._sc_bounds(aa1, aa2)[1]
        raise InvalidContactTypeError(f"No upper bound defined for contact type {ct!r}")


DEFAULT_LOOKUP = DistanceLookup()
