"""
Core data model definitions
"""

from dataclasses import dataclass, field
from enum import Enum
import numpy as np

from .exceptions import ConfigurationError


# ANVIL-specific (not a general hydrophobicity scale) membrane-favoring residues
ANVIL_HYDROPHOBIC_RESIDUES = (
    "ALA",
    "CYS",
    "GLY",
    "HIS",
    "ILE",
    "LEU",
    "MET",
    "PHE",
    "SER",
    "THR",
    "VAL",
)


class ProximalReference(str, Enum):
    """Reference point used to select refinement axes"""

    CENTROID = "centroid"
    AXIS = "axis"


class SurfaceAreaSource(str, Enum):
    """Surface area provider type"""

    FREESASA = "freesasa"
    BFACTOR = "bfactor"
    PRECOMPUTED = "precomputed"


@dataclass(frozen=True)
class ResidueSample:
    """One CA sample per protein residue"""

    chain: str
    resnum: int
    resname: str
    coord: np.ndarray  # CA coordinates
    hydrophobic: bool
    exposed: bool
    area: float = 0.0  # Surface area reported by the provider (Å²)
    icode: str = ""  # PDB insertion code

    def __post_init__(self):
        """Data validation"""
        if not isinstance(self.chain, str):
            raise ValueError(f"chain must be a string, got: {type(self.chain)}")
        if not isinstance(self.resnum, int):
            raise ValueError(f"resnum must be an integer, got: {type(self.resnum)}")
        if not isinstance(self.resname, str):
            raise ValueError(f"resname must be a string, got: {type(self.resname)}")
        if not isinstance(self.icode, str):
            raise ValueError(f"icode must be a string, got: {type(self.icode)}")
        if not isinstance(self.coord, np.ndarray):
            raise ValueError(f"coord must be a numpy array, got: {type(self.coord)}")
        if self.coord.shape != (3,):
            raise ValueError(f"coord must be a 3D vector, shape: {self.coord.shape}")


class ResidueSamples:
    """
    Immutable collection of residue samples

    Per-sample fields are exposed as read-only numpy arrays built once, so
    concurrent axis evaluations can share them without copying.
    """

    def __init__(self, samples: list[ResidueSample]):
        self._samples = tuple(samples)
        if self._samples:
            coords = np.vstack([s.coord for s in self._samples]).astype(float)
        else:
            coords = np.empty((0, 3), dtype=float)
        hydrophobic = np.array([s.hydrophobic for s in self._samples], dtype=bool)
        exposed = np.array([s.exposed for s in self._samples], dtype=bool)
        for arr in (coords, hydrophobic, exposed):
            arr.flags.writeable = False
        self._coords = coords
        self._hydrophobic = hydrophobic
        self._exposed = exposed

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self):
        return iter(self._samples)

    def __getitem__(self, index: int) -> ResidueSample:
        return self._samples[index]

    @property
    def coords(self) -> np.ndarray:
        return self._coords

    @property
    def hydrophobic(self) -> np.ndarray:
        return self._hydrophobic

    @property
    def exposed(self) -> np.ndarray:
        return self._exposed

    @property
    def exposed_count(self) -> int:
        """Number of exposed samples"""
        return int(self._exposed.sum())


@dataclass(frozen=True)
class HydrophobicityStats:
    """Hydrophobic/hydrophilic residue counts (possibly weighted)"""

    hphob: float
    hphil: float
    total: float

    @classmethod
    def of(cls, hphob: float, hphil: float, total: float | None = None):
        return cls(hphob=hphob, hphil=hphil, total=hphob + hphil if not total else total)

    @classmethod
    def from_samples(cls, samples: ResidueSamples):
        """Count exposed samples"""
        hphob = int(np.count_nonzero(samples.exposed & samples.hydrophobic))
        hphil = int(np.count_nonzero(samples.exposed & ~samples.hydrophobic))
        return cls.of(hphob, hphil)


@dataclass(frozen=True)
class Slice:
    """A slab of one step thickness along a candidate axis"""

    plane_point1: np.ndarray
    plane_point2: np.ndarray
    stats: HydrophobicityStats


@dataclass(frozen=True)
class MembraneCandidate:
    """Best scoring slab found along one axis"""

    plane_point1: np.ndarray
    plane_point2: np.ndarray
    normal_vector: np.ndarray  # axis_point - centroid
    axis_point: np.ndarray
    centroid: np.ndarray
    stats: HydrophobicityStats
    qmax: float
    axis_index: int = 0
    window_start: int = 0
    window_slices: int = 0

    @property
    def thickness(self) -> float:
        """Distance between the two bounding plane points (Å)"""
        return float(np.linalg.norm(self.plane_point2 - self.plane_point1))

    @property
    def unit_normal(self) -> np.ndarray:
        return self.normal_vector / np.linalg.norm(self.normal_vector)

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary"""
        return {
            "qmax": self.qmax,
            "thickness": self.thickness,
            "plane_point1": [float(v) for v in self.plane_point1],
            "plane_point2": [float(v) for v in self.plane_point2],
            "normal": [float(v) for v in self.unit_normal],
            "axis_point": [float(v) for v in self.axis_point],
            "hphob": self.stats.hphob,
            "hphil": self.stats.hphil,
            "total": self.stats.total,
        }


@dataclass
class Topology:
    """Membrane topology result"""

    membrane: np.ndarray  # Points of both membrane layers, shape (n, 3)
    candidate: MembraneCandidate | None = None
    centroid: np.ndarray | None = None
    extent: float = 0.0
    layer_sizes: tuple[int, int] = (0, 0)

    def __post_init__(self):
        """Data validation"""
        if not isinstance(self.membrane, np.ndarray):
            raise ValueError(f"membrane must be a numpy array, got: {type(self.membrane)}")
        if len(self.membrane.shape) != 2 or self.membrane.shape[1] != 3:
            raise ValueError(f"membrane shape must be (n, 3), got: {self.membrane.shape}")

    @property
    def count(self) -> int:
        """Number of membrane points"""
        return len(self.membrane)

    def layers(self) -> tuple[np.ndarray, np.ndarray]:
        """Membrane points split into the two layers"""
        n1 = self.layer_sizes[0]
        return self.membrane[:n1], self.membrane[n1:]


@dataclass
class AnvilConfig:
    """ANVIL configuration"""

    # Search parameters
    number_of_sphere_points: int = 350  # Axis candidates in the initial pass
    step_size: float = 1.0  # Slice thickness (Å)
    min_thickness: float = 20.0  # Minimum membrane thickness (Å)
    max_thickness: float = 40.0  # Maximum membrane thickness (Å)
    afilter: float = 40.0  # Exposure threshold on residue surface area (Å²)

    # Output parameters
    membrane_point_density: float = 2.0  # Spacing of membrane layer points (Å)

    # Refinement parameters
    number_of_refinement_points: int = 30000
    proximal_reference: ProximalReference = ProximalReference.CENTROID

    # Computation parameters
    num_processes: int = 1  # Number of worker threads for axis evaluation
    progress_interval: float = 0.25  # Minimum seconds between progress reports

    hydrophobic_residues: tuple[str, ...] = field(
        default_factory=lambda: ANVIL_HYDROPHOBIC_RESIDUES
    )

    def validate(self):
        """Validate configuration parameters"""
        if self.number_of_sphere_points < 2:
            raise ConfigurationError(
                f"number_of_sphere_points must be at least 2: {self.number_of_sphere_points}"
            )
        if self.step_size <= 0:
            raise ConfigurationError(f"step_size must be greater than 0: {self.step_size}")
        if self.min_thickness >= self.max_thickness:
            raise ConfigurationError(
                f"min_thickness must be smaller than max_thickness: "
                f"{self.min_thickness} >= {self.max_thickness}"
            )
        if self.min_thickness < 2 * self.step_size:
            raise ConfigurationError(
                f"min_thickness must span at least two slices: "
                f"{self.min_thickness} < 2 * {self.step_size}"
            )
        if self.membrane_point_density <= 0:
            raise ConfigurationError(
                f"membrane_point_density must be greater than 0: {self.membrane_point_density}"
            )
        if self.number_of_refinement_points < self.number_of_sphere_points:
            raise ConfigurationError(
                f"number_of_refinement_points must be at least number_of_sphere_points: "
                f"{self.number_of_refinement_points} < {self.number_of_sphere_points}"
            )
        if self.num_processes <= 0:
            raise ConfigurationError(f"num_processes must be greater than 0: {self.num_processes}")
        if self.progress_interval < 0:
            raise ConfigurationError(
                f"progress_interval must be non-negative: {self.progress_interval}"
            )

        # Normalize string input
        if not isinstance(self.proximal_reference, ProximalReference):
            try:
                self.proximal_reference = ProximalReference(str(self.proximal_reference).lower())
            except ValueError:
                raise ConfigurationError(
                    f"Unknown proximal reference: {self.proximal_reference}"
                ) from None

        # Validate residue names
        for res in self.hydrophobic_residues:
            if not isinstance(res, str) or len(res) != 3:
                raise ConfigurationError(f"Residue name must be a 3-letter code: {res}")
