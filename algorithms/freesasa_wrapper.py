"""
FreeSASA wrapper
"""

import freesasa

from core.exceptions import UpstreamComputationError
from core.surface_area import ResidueKey, SurfaceAreaProvider, first_model, make_key, parse_resnum
from utils.logger import LogMixin


class FreeSASAWrapper(SurfaceAreaProvider, LogMixin):
    """Residue surface areas computed with FreeSASA"""

    # Water molecule name set (consistent with the residue extractor)
    WATER_NAMES = {"HOH", "WAT", "SOL", "H2O", "TIP3", "TIP3P", "T3P", "W"}

    def __init__(self, classifier=None, options: dict | None = None):
        """
        Args:
            classifier: FreeSASA classifier (default: ProtOr radii)
            options: Structure options passed to freesasa.structureFromBioPDB
        """
        self.classifier = classifier
        self.options = options

    def compute_residue_sasa(self, structure) -> list[dict[str, object]]:
        """
        Compute residue solvent accessible surface area

        Args:
            structure: BioPython structure or model (first model is used)

        Returns:
            list[dict[str, object]]: Residue SASA result list
                - chain: chain identifier
                - resnum: residue number
                - icode: insertion code ("" when absent)
                - resname: residue name
                - SASA: total solvent accessible surface area (Å²)
                - relative: relative accessibility (nan if undefined)
        """
        model = first_model(structure)
        try:
            kwargs = {"classifier": self.classifier}
            if self.options is not None:
                kwargs["options"] = self.options
            fs_structure = freesasa.structureFromBioPDB(model, **kwargs)
            result = freesasa.calc(fs_structure)
            residue_areas = result.residueAreas()
        except Exception as e:
            raise UpstreamComputationError(f"FreeSASA calculation failed: {e}") from e

        output = []
        for chain, chain_dict in residue_areas.items():
            for resnum, area_obj in chain_dict.items():
                resname = area_obj.residueType

                # Skip water molecules
                if resname.upper() in self.WATER_NAMES:
                    continue

                try:
                    number, icode = parse_resnum(resnum)
                except ValueError:
                    self.logger.debug(f"Skipping residue with unparsable number: {resnum!r}")
                    continue

                output.append(
                    {
                        "chain": chain,
                        "resnum": number,
                        "icode": icode,
                        "resname": resname,
                        "SASA": float(area_obj.total),
                        "relative": float(area_obj.relativeTotal),
                    }
                )

        return output

    def compute(self, structure) -> dict[ResidueKey, float]:
        """Total SASA per residue keyed by (chain, resnum, icode)"""
        table = self.compute_residue_sasa(structure)
        if not table:
            raise UpstreamComputationError("FreeSASA returned no residue areas")
        self.logger.debug(f"FreeSASA computed areas for {len(table)} residues")
        return {
            make_key(row["chain"], row["resnum"], row["icode"]): float(row["SASA"]) for row in table
        }
