"""
Algorithm module
"""

from algorithms.anvil_method import AnvilMethod, calculate, compute
from algorithms.freesasa_wrapper import FreeSASAWrapper
from algorithms.provider_factory import ProviderFactory

__all__ = [
    "AnvilMethod",
    "calculate",
    "compute",
    "FreeSASAWrapper",
    "ProviderFactory",
]
