"""
Error types raised by the membrane topology pipeline
"""


class AnvilError(Exception):
    """Base class for membrane topology computation failures"""


class InvalidInputError(AnvilError, ValueError):
    """The structure cannot be used (e.g. no protein CA atoms)"""


class ConfigurationError(AnvilError, ValueError):
    """Invalid search parameters"""


class NoMembraneFoundError(AnvilError, RuntimeError):
    """The search finished without any positively scoring slab"""


class UpstreamComputationError(AnvilError, RuntimeError):
    """The surface area provider failed or returned nothing"""


class ComputationCancelledError(Exception):
    """
    The computation was cancelled through its runtime context.

    Not an AnvilError: a cancelled run has not failed.
    """
