from pathlib import Path

from Bio.PDB import MMCIFParser, PDBParser  # type: ignore
from Bio.PDB.PDBExceptions import PDBConstructionException  # type: ignore

from core.exceptions import InvalidInputError

CIF_SUFFIXES = {".cif", ".mmcif"}


class PDBLoader:
    def __init__(self, quiet: bool = False):
        """
        Args:
            quiet: suspend BioPython warning
        """
        self.quiet = quiet

    def _parser(self, path: Path):
        if path.suffix.lower() in CIF_SUFFIXES:
            return MMCIFParser(QUIET=self.quiet)
        return PDBParser(QUIET=self.quiet)

    def load(self, structure_path: str | Path, structure_id: str | None = None):
        """
        load a PDB or mmCIF file

        Returns:
            BioPython structure object
        """
        path = Path(structure_path)
        parser = self._parser(path)
        try:
            structure = parser.get_structure(structure_id or path.stem, str(path))
        except (OSError, ValueError, KeyError, PDBConstructionException) as e:
            raise InvalidInputError(f"Failed to parse structure {path}: {e}") from e

        if structure is None or len(structure) == 0:
            raise InvalidInputError(f"Structure file contains no models: {path}")

        return structure

    @staticmethod
    def summary(structure) -> dict[str, int]:
        """Model, chain, residue and atom counts of the first model"""
        model = structure.child_list[0]
        return {
            "models": len(structure),
            "chains": len(model),
            "residues": sum(1 for _ in model.get_residues()),
            "atoms": sum(1 for _ in model.get_atoms()),
        }


def load_structure(structure_path: str | Path, quiet: bool = False):
    """
    Load a structure file with default loader settings

    Args:
        structure_path: Path to the PDB or mmCIF file
        quiet: Whether to operate in silent mode

    Returns:
        BioPython structure object
    """
    loader = PDBLoader(quiet=quiet)
    return loader.load(structure_path)
