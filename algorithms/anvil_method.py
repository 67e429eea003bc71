"""
ANVIL membrane topology method

Implements:
Membrane positioning for high- and low-resolution protein structures through
a binary classification approach
Guillaume Postic, Yassine Ghouzam, Vincent Guiraud, and Jean-Christophe Gelly
Protein Engineering, Design & Selection, 2015, 1-5
doi: 10.1093/protein/gzv063
"""

import asyncio

from core.data_models import (
    AnvilConfig,
    HydrophobicityStats,
    ProximalReference,
    ResidueSamples,
    Topology,
)
from core.exceptions import (
    AnvilError,
    InvalidInputError,
    NoMembraneFoundError,
    UpstreamComputationError,
)
from core.geometry import centroid_and_extent, find_proximate_axes, generate_sphere_points
from core.membrane_layers import create_membrane_layers
from core.residue_extractor import extract_residue_samples
from core.runtime import ProgressCallback, RuntimeContext
from core.slab_scanner import SlabScanner, select_membrane
from core.surface_area import ResidueKey, SurfaceAreaProvider
from algorithms.freesasa_wrapper import FreeSASAWrapper
from utils.logger import LogMixin


class AnvilMethod(LogMixin):
    """ANVIL method"""

    def __init__(
        self,
        config: AnvilConfig | None = None,
        surface_area: SurfaceAreaProvider | None = None,
    ):
        """
        Args:
            config: ANVIL configuration
            surface_area: Surface area provider (default: FreeSASA)
        """
        self.config = config or AnvilConfig()
        self.config.validate()
        self.surface_area = surface_area or FreeSASAWrapper()

    def create_runtime(self, progress_callback: ProgressCallback | None = None) -> RuntimeContext:
        return RuntimeContext(progress_callback, update_interval=self.config.progress_interval)

    def compute_surface_area(self, structure) -> dict[ResidueKey, float]:
        """Run the surface area provider once, before any scanning"""
        try:
            areas = self.surface_area.compute(structure)
        except AnvilError:
            raise
        except Exception as e:
            raise UpstreamComputationError(f"Surface area computation failed: {e}") from e

        if not areas:
            raise UpstreamComputationError("Surface area provider returned no values")
        return areas

    def extract_samples(self, structure, runtime: RuntimeContext | None = None) -> ResidueSamples:
        """Surface areas plus one CA sample per protein residue"""
        runtime = runtime or self.create_runtime()
        runtime.checkpoint("Computing surface area")
        areas = self.compute_surface_area(structure)

        runtime.checkpoint("Extracting residues")
        samples = extract_residue_samples(
            structure,
            areas,
            self.config.afilter,
            self.config.hydrophobic_residues,
        )
        self.logger.info(
            f"Extracted {len(samples)} CA samples, {samples.exposed_count} exposed "
            f"(afilter={self.config.afilter})"
        )
        return samples

    def calculate(self, structure, runtime: RuntimeContext | None = None) -> Topology:
        """
        Compute the membrane topology of a structure

        Args:
            structure: BioPython structure or model
            runtime: Cancellation and progress context

        Returns:
            Topology: Points of both membrane layers and the winning slab

        Raises:
            InvalidInputError: No protein CA atoms
            UpstreamComputationError: Surface area unavailable
            NoMembraneFoundError: No slab scored above zero
            ComputationCancelledError: Cancelled through the runtime
        """
        runtime = runtime or self.create_runtime()
        samples = self.extract_samples(structure, runtime)
        return self.calculate_from_samples(samples, runtime)

    def calculate_from_samples(
        self,
        samples: ResidueSamples,
        runtime: RuntimeContext | None = None,
    ) -> Topology:
        """Membrane search over already extracted residue samples"""
        config = self.config
        runtime = runtime or self.create_runtime()
        if len(samples) == 0:
            raise InvalidInputError("No residue samples to scan")

        # calculate centroid and extent
        centroid, extent = centroid_and_extent(samples.coords)
        self.logger.info(
            f"Centroid ({centroid[0]:.2f}, {centroid[1]:.2f}, {centroid[2]:.2f}), "
            f"extent {extent:.2f} Å"
        )

        reference = HydrophobicityStats.from_samples(samples)
        scanner = SlabScanner(samples, centroid, config, reference)

        runtime.checkpoint("Sampling sphere")
        sphere_points = generate_sphere_points(config.number_of_sphere_points, centroid, extent)
        initial = scanner.find_membrane(sphere_points, runtime, message="Initial axis scan")
        self.logger.info(
            f"Initial scan: qmax={initial.qmax:.6g}, thickness {initial.thickness:.1f} Å "
            f"(axis {initial.axis_index}/{len(sphere_points)})"
        )

        refined = self._refine(scanner, initial, centroid, extent, runtime)
        membrane = select_membrane(initial, refined)
        self.logger.info(
            f"Selected {'refined' if membrane is refined else 'initial'} membrane: "
            f"qmax={membrane.qmax:.6g}, thickness {membrane.thickness:.1f} Å"
        )

        runtime.checkpoint("Creating membrane layers")
        points, layer_sizes = create_membrane_layers(
            membrane, extent, config.membrane_point_density
        )
        runtime.checkpoint("Done", 1, 1)

        return Topology(
            membrane=points,
            candidate=membrane,
            centroid=centroid,
            extent=extent,
            layer_sizes=layer_sizes,
        )

    def _refine(self, scanner, initial, centroid, extent, runtime):
        """Rescan the axes near the initial result; None if nothing scores"""
        config = self.config
        if config.proximal_reference == ProximalReference.AXIS:
            reference_point = initial.axis_point
        else:
            reference_point = centroid

        runtime.checkpoint("Selecting proximate axes")
        axes = find_proximate_axes(
            config.number_of_sphere_points,
            centroid,
            extent,
            reference_point,
            config.number_of_refinement_points,
        )
        self.logger.debug(
            f"Refinement: {len(axes)} axes around the {config.proximal_reference.value}"
        )

        try:
            refined = scanner.find_membrane(axes, runtime, message="Refined axis scan")
        except NoMembraneFoundError:
            self.logger.info("Refined scan found no positively scoring slab")
            return None

        self.logger.info(f"Refined scan: qmax={refined.qmax:.6g}")
        return refined


def calculate(
    structure,
    config: AnvilConfig | None = None,
    surface_area: SurfaceAreaProvider | None = None,
    runtime: RuntimeContext | None = None,
) -> Topology:
    """Synchronous entry point"""
    return AnvilMethod(config, surface_area).calculate(structure, runtime)


async def compute(
    structure,
    config: AnvilConfig | None = None,
    surface_area: SurfaceAreaProvider | None = None,
    runtime: RuntimeContext | None = None,
) -> Topology:
    """
    Compute the membrane topology without blocking the event loop

    The calculation runs in a worker thread. Cancelling the awaiting task
    cancels the runtime, which stops the worker at its next checkpoint.
    """
    method = AnvilMethod(config, surface_area)
    runtime = runtime or method.create_runtime()
    try:
        return await asyncio.to_thread(method.calculate, structure, runtime)
    except asyncio.CancelledError:
        runtime.cancel()
        raise

