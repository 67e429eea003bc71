"""
Core data models and interface definitions
"""

from .data_models import (
    ResidueSample,
    ResidueSamples,
    HydrophobicityStats,
    Slice,
    MembraneCandidate,
    Topology,
    AnvilConfig,
    ProximalReference,
    SurfaceAreaSource,
)
from .exceptions import (
    AnvilError,
    InvalidInputError,
    ConfigurationError,
    NoMembraneFoundError,
    UpstreamComputationError,
    ComputationCancelledError,
)

__all__ = [
    "ResidueSample",
    "ResidueSamples",
    "HydrophobicityStats",
    "Slice",
    "MembraneCandidate",
    "Topology",
    "AnvilConfig",
    "ProximalReference",
    "SurfaceAreaSource",
    "AnvilError",
    "InvalidInputError",
    "ConfigurationError",
    "NoMembraneFoundError",
    "UpstreamComputationError",
    "ComputationCancelledError",
]
