"""
Surface area provider factory
"""

from pathlib import Path

from core.data_models import SurfaceAreaSource
from core.surface_area import (
    BFactorSurfaceArea,
    PrecomputedSurfaceArea,
    ResidueKey,
    SurfaceAreaProvider,
)
from algorithms.freesasa_wrapper import FreeSASAWrapper


class ProviderFactory:
    """Surface area provider factory"""

    @staticmethod
    def create_provider(
        source: SurfaceAreaSource | str,
        areas: dict[ResidueKey, float] | None = None,
        csv_path: str | Path | None = None,
    ) -> SurfaceAreaProvider:
        """
        Create surface area provider

        Args:
            source: Provider type (enum or string)
            areas: Residue areas (only needed for the precomputed source)
            csv_path: CSV file with residue areas (alternative to `areas`)

        Returns:
            SurfaceAreaProvider: Provider instance
        """
        # Handle string input
        if isinstance(source, str):
            source = SurfaceAreaSource(source.lower())

        if source == SurfaceAreaSource.FREESASA:
            return FreeSASAWrapper()
        elif source == SurfaceAreaSource.BFACTOR:
            return BFactorSurfaceArea()
        elif source == SurfaceAreaSource.PRECOMPUTED:
            if csv_path is not None:
                return PrecomputedSurfaceArea.from_csv(csv_path)
            if areas is None:
                raise ValueError("Precomputed surface areas require `areas` or `csv_path`.")
            return PrecomputedSurfaceArea(areas)
        else:
            raise ValueError(f"Unknown surface area source: {source}")

    @staticmethod
    def get_available_sources() -> list:
        """Get available provider list"""
        return [source.value for source in SurfaceAreaSource]
