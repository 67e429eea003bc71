"""
Residue extraction: one CA sample per protein residue
"""

import numpy as np
from Bio.PDB.Polypeptide import is_aa  # type: ignore

from .data_models import ResidueSample, ResidueSamples, ANVIL_HYDROPHOBIC_RESIDUES
from .exceptions import InvalidInputError
from .surface_area import ResidueKey, first_model, normalize_areas, residue_key

WATER_NAMES = {"HOH", "WAT", "SOL", "H2O", "TIP3", "TIP3P", "T3P", "W"}

# Area assigned to residues the provider has no value for (never exposed)
MISSING_AREA = -1.0


def extract_residue_samples(
    structure,
    areas: dict[ResidueKey, float],
    afilter: float,
    hydrophobic_residues: tuple[str, ...] = ANVIL_HYDROPHOBIC_RESIDUES,
) -> ResidueSamples:
    """
    Sample the CA atom of every protein residue in the first model

    Args:
        structure: BioPython structure or model
        areas: Surface area per residue, keyed by (chain, resnum, icode)
        afilter: Residues with an area above this threshold are exposed
        hydrophobic_residues: Residue names classified as hydrophobic

    Returns:
        ResidueSamples: Samples in chain/residue order
    """
    model = first_model(structure)
    areas = normalize_areas(areas)
    hydrophobic_set = {name.upper() for name in hydrophobic_residues}

    samples = []
    for chain in model:
        for residue in chain:
            resname = residue.get_resname().upper().strip()
            if resname in WATER_NAMES:
                continue

            # consider only amino acids
            if not is_aa(residue, standard=False):
                continue

            # only CA is considered for downstream operations
            if "CA" not in residue:
                continue

            area = float(areas.get(residue_key(residue), MISSING_AREA))
            samples.append(
                ResidueSample(
                    chain=chain.id,
                    resnum=int(residue.id[1]),
                    icode=residue.id[2].strip(),
                    resname=resname,
                    coord=np.array(residue["CA"].coord, dtype=float),
                    hydrophobic=resname in hydrophobic_set,
                    exposed=area > afilter,
                    area=area,
                )
            )

    if not samples:
        raise InvalidInputError("Structure contains no protein CA atoms")

    return ResidueSamples(samples)
