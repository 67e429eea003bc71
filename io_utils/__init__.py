"""
Input/output module
"""

from io_utils.pdb_loader import PDBLoader, load_structure
from io_utils.csv_writer import CSVWriter
from io_utils.result_formatter import ResultFormatter

__all__ = [
    "PDBLoader",
    "load_structure",
    "CSVWriter",
    "ResultFormatter",
]
