# import membrane_topology

from core.data_models import (
    AnvilConfig,
    MembraneCandidate,
    ProximalReference,
    ResidueSample,
    SurfaceAreaSource,
    Topology,
)
from core.exceptions import (
    AnvilError,
    ComputationCancelledError,
    ConfigurationError,
    InvalidInputError,
    NoMembraneFoundError,
    UpstreamComputationError,
)
from core.runtime import ProgressUpdate, RuntimeContext
from algorithms.anvil_method import AnvilMethod, calculate, compute

__version__ = "1.0"

__all__ = [
    "AnvilConfig",
    "AnvilMethod",
    "MembraneCandidate",
    "ProximalReference",
    "ResidueSample",
    "SurfaceAreaSource",
    "Topology",
    "RuntimeContext",
    "ProgressUpdate",
    "calculate",
    "compute",
    "AnvilError",
    "ComputationCancelledError",
    "ConfigurationError",
    "InvalidInputError",
    "NoMembraneFoundError",
    "UpstreamComputationError",
]
