import csv
from pathlib import Path

from core.data_models import ResidueSamples, Topology


class CSVWriter:
    @staticmethod
    def write_membrane(
        filepath: str,
        topology: Topology,
        include_header: bool = True,
    ) -> None:
        """Membrane points as x, y, z, layer rows"""
        Path(filepath).parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)

            if include_header:
                writer.writerow(["x", "y", "z", "layer"])

            for layer_index, layer in enumerate(topology.layers(), start=1):
                for point in layer:
                    writer.writerow(
                        [
                            f"{point[0]:.3f}",
                            f"{point[1]:.3f}",
                            f"{point[2]:.3f}",
                            layer_index,
                        ]
                    )

    @staticmethod
    def write_samples(
        filepath: str,
        samples: ResidueSamples,
        include_header: bool = True,
    ) -> None:
        """Residue samples; the chain/resnum/SASA columns can be read back as areas"""
        Path(filepath).parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)

            if include_header:
                writer.writerow(
                    ["chain", "resnum", "resname", "SASA", "hydrophobic", "exposed"]
                )

            for sample in samples:
                writer.writerow(
                    [
                        sample.chain,
                        f"{sample.resnum}{sample.icode}",
                        sample.resname,
                        f"{sample.area:.3f}",
                        "Yes" if sample.hydrophobic else "No",
                        "Yes" if sample.exposed else "No",
                    ]
                )
