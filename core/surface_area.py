"""
Surface area provider interface definitions
"""

import csv
import re
from abc import ABC, abstractmethod
from pathlib import Path

from .exceptions import InvalidInputError, UpstreamComputationError

ResidueKey = tuple[str, int, str]  # (chain, resnum, insertion code)

# Residue numbers as FreeSASA and PDB files print them, e.g. "52" or "  52A"
_RESNUM_PATTERN = re.compile(r"^\s*(-?\d+)\s*([A-Za-z]?)\s*$")


def parse_resnum(value) -> tuple[int, str]:
    """Split a residue number string into its number and insertion code"""
    match = _RESNUM_PATTERN.match(str(value))
    if match is None:
        raise ValueError(f"Invalid residue number: {value!r}")
    return int(match.group(1)), match.group(2)


def make_key(chain, resnum, icode: str = "") -> ResidueKey:
    if isinstance(resnum, str):
        resnum, parsed = parse_resnum(resnum)
        icode = icode or parsed
    return (str(chain), int(resnum), str(icode).strip())


def normalize_areas(areas: dict) -> dict[ResidueKey, float]:
    """
    Area mapping with (chain, resnum, icode) keys

    (chain, resnum) keys stand for residues without an insertion code.
    """
    return {make_key(*key): float(value) for key, value in areas.items()}


def residue_key(residue) -> ResidueKey:
    """Key of a BioPython residue in a surface area mapping"""
    _, resseq, icode = residue.id
    return make_key(residue.get_parent().id, resseq, icode)


def first_model(structure):
    """First model of a BioPython structure; models are returned unchanged"""
    level = getattr(structure, "level", None)
    if level == "M":
        return structure
    if level != "S":
        raise InvalidInputError(f"Expected a BioPython Structure or Model, got: {type(structure)}")
    models = structure.child_list
    if not models:
        raise InvalidInputError(f"Structure {structure.id} contains no models")
    return models[0]


class SurfaceAreaProvider(ABC):
    """Surface area provider abstract base class"""

    @abstractmethod
    def compute(self, structure) -> dict[ResidueKey, float]:
        """
        Compute solvent accessible surface area per residue

        Args:
            structure: BioPython structure (or model) object

        Returns:
            dict[ResidueKey, float]: Area (Å²) keyed by (chain, resnum, icode)
        """
        pass


class PrecomputedSurfaceArea(SurfaceAreaProvider):
    """Surface areas computed elsewhere and attached to the structure"""

    def __init__(self, areas: dict[ResidueKey, float]):
        self.areas = normalize_areas(areas)

    def compute(self, structure) -> dict[ResidueKey, float]:
        if not self.areas:
            raise UpstreamComputationError("No precomputed surface areas available")
        return dict(self.areas)

    @classmethod
    def from_csv(
        cls,
        filepath: str | Path,
        area_column: str = "SASA",
    ) -> "PrecomputedSurfaceArea":
        """
        Read areas from a CSV file with chain, resnum and area columns

        The default column names match the FreeSASA residue table written by
        FreeSASAWrapper.
        """
        areas = {}
        try:
            with open(filepath, "r", newline="", encoding="utf-8") as f:
                reader = csv.DictReader(f)
                for row in reader:
                    chain = str(row.get("chain", "")).strip()
                    resnum = str(row.get("resnum", "")).strip()
                    if not resnum:
                        continue
                    areas[make_key(chain, resnum)] = float(row[area_column])
        except (OSError, KeyError, ValueError) as e:
            raise UpstreamComputationError(
                f"Failed to read surface areas from {filepath}: {e}"
            ) from e
        return cls(areas)


class BFactorSurfaceArea(SurfaceAreaProvider):
    """Surface areas stored in the B-factor column of each CA atom"""

    def __init__(self, atom_name: str = "CA"):
        self.atom_name = atom_name

    def compute(self, structure) -> dict[ResidueKey, float]:
        model = first_model(structure)
        areas = {}
        for residue in model.get_residues():
            if self.atom_name in residue:
                areas[residue_key(residue)] = float(residue[self.atom_name].get_bfactor())
        if not areas:
            raise UpstreamComputationError(
                f"No {self.atom_name} atoms carry surface area values"
            )
        return areas
