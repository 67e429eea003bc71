import sys
from pathlib import Path

import numpy as np
import pytest
from Bio.PDB.Atom import Atom
from Bio.PDB.Chain import Chain
from Bio.PDB.Model import Model
from Bio.PDB.Residue import Residue
from Bio.PDB.Structure import Structure

# Ensure the repository root is on sys.path so tests can import the packages
# without requiring an editable install.
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from algorithms.anvil_method import AnvilMethod  # noqa: E402
from core.data_models import AnvilConfig, ResidueSample, ResidueSamples  # noqa: E402
from core.surface_area import BFactorSurfaceArea, parse_resnum  # noqa: E402


def build_structure(residues, structure_id="test"):
    """
    BioPython structure from (chain, resnum, resname, coord[, bfactor[, hetflag[, atom]]])

    Each residue gets a single atom (CA unless given); the B-factor defaults
    to 100 so BFactorSurfaceArea marks every residue as exposed. A string
    resnum such as "52A" carries an insertion code.
    """
    structure = Structure(structure_id)
    model = Model(0)
    structure.add(model)
    chains = {}
    for serial, entry in enumerate(residues, start=1):
        chain_id, resnum, resname, coord = entry[:4]
        bfactor = entry[4] if len(entry) > 4 else 100.0
        hetflag = entry[5] if len(entry) > 5 else " "
        atom_name = entry[6] if len(entry) > 6 else "CA"

        if chain_id not in chains:
            chains[chain_id] = Chain(chain_id)
            model.add(chains[chain_id])

        number, icode = parse_resnum(resnum)
        residue = Residue((hetflag, number, icode or " "), resname, "    ")
        element = "O" if atom_name == "O" else "C"
        residue.add(
            Atom(
                atom_name,
                np.array(coord, dtype="f"),
                bfactor,
                1.0,
                " ",
                f" {atom_name:<3}",
                serial,
                element=element,
            )
        )
        chains[chain_id].add(residue)
    return structure


def ring(z, radius, count, resname, phase=0.0):
    angles = phase + 2 * np.pi * np.arange(count) / count
    return [
        (resname, (radius * np.cos(a), radius * np.sin(a), z))
        for a in angles
    ]


def ring_residues(
    hydrophobic_z=(-10.0, 10.0),
    hydrophilic_z=(-22.0, -18.0, 18.0, 22.0),
    radius=8.0,
    count=12,
    phases=None,
    offset=(0.0, 0.0, 0.0),
):
    """Hydrophobic LEU rings and hydrophilic LYS rings stacked along z"""
    layers = [(z, "LEU") for z in hydrophobic_z] + [(z, "LYS") for z in hydrophilic_z]
    residues = []
    resnum = 1
    for k, (z, resname) in enumerate(layers):
        phase = phases[k] if phases is not None else 0.0
        for name, coord in ring(z, radius, count, resname, phase):
            residues.append(("A", resnum, name, tuple(np.add(coord, offset))))
            resnum += 1
    return residues


@pytest.fixture
def make_structure():
    return build_structure


@pytest.fixture
def make_samples():
    def _make(coords, hydrophobic, exposed=None):
        coords = np.asarray(coords, dtype=float)
        if exposed is None:
            exposed = np.ones(len(coords), dtype=bool)
        return ResidueSamples(
            [
                ResidueSample(
                    chain="A",
                    resnum=i + 1,
                    resname="LEU" if h else "LYS",
                    coord=coords[i].copy(),
                    hydrophobic=bool(h),
                    exposed=bool(e),
                    area=100.0 if e else 0.0,
                )
                for i, (h, e) in enumerate(zip(hydrophobic, exposed))
            ]
        )

    return _make


@pytest.fixture
def ring_structure():
    return build_structure(ring_residues())


@pytest.fixture
def fast_config():
    """Default search with a smaller refinement sphere"""
    return AnvilConfig(number_of_refinement_points=2000, progress_interval=0.0)


@pytest.fixture(scope="session")
def ring_result():
    """Samples and topology of the default ring structure"""
    method = AnvilMethod(
        AnvilConfig(number_of_refinement_points=2000, progress_interval=0.0),
        BFactorSurfaceArea(),
    )
    samples = method.extract_samples(build_structure(ring_residues()))
    return samples, method.calculate_from_samples(samples)
