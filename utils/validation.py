"""
Validation Utilities
"""

import os
from pathlib import Path

from core.data_models import AnvilConfig
from core.exceptions import InvalidInputError

PDB_SUFFIXES = {".pdb", ".ent"}
CIF_SUFFIXES = {".cif", ".mmcif"}
PDB_RECORDS = ("HEADER", "TITLE", "REMARK", "CRYST1", "ATOM", "HETATM", "MODEL", "ENDMDL", "TER", "END")


def validate_structure_file(filepath: str | Path) -> bool:
    """
    Validates a PDB or mmCIF file.

    Args:
        filepath: Path to the structure file.

    Returns:
        bool: True if the file is valid.
    """
    path = Path(filepath)

    # Check file existence
    if not path.exists():
        raise InvalidInputError(f"Structure file not found: {filepath}")

    # Check file size
    if path.stat().st_size == 0:
        raise InvalidInputError(f"Structure file is empty: {filepath}")

    suffix = path.suffix.lower()
    if suffix not in PDB_SUFFIXES | CIF_SUFFIXES:
        raise InvalidInputError(f"File extension is not a recognized structure format: {filepath}")

    # Basic content validation
    try:
        with open(path, "r") as f:
            first_line = f.readline().rstrip("\n")
    except UnicodeDecodeError:
        raise InvalidInputError(f"Structure file is not a text file: {filepath}") from None

    if suffix in CIF_SUFFIXES:
        if not first_line.startswith("data_"):
            raise InvalidInputError(
                f"Invalid mmCIF file format. First line: {first_line[:50]}..."
            )
    elif first_line[0:6].strip() not in PDB_RECORDS:
        raise InvalidInputError(f"Invalid PDB file format. First line: {first_line[:50]}...")

    return True


def validate_config(config: AnvilConfig) -> bool:
    """
    Validates the ANVIL configuration.

    Args:
        config: ANVIL configuration object.

    Returns:
        bool: True if the configuration is valid.
    """
    config.validate()  # Uses the built-in validate method
    return True


def validate_output_path(filepath: str | Path) -> Path:
    """
    Validates the destination of an output CSV before the computation starts.

    The parent directory is created when missing and must be writable; the
    path itself must not be an existing directory.

    Args:
        filepath: Path of the file to be written.

    Returns:
        Path: The validated output path.
    """
    path = Path(filepath)
    if path.is_dir():
        raise InvalidInputError(f"Output path is a directory: {filepath}")

    directory = path.parent
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise InvalidInputError(f"Cannot create output directory {directory}: {e}") from e

    if not os.access(directory, os.W_OK):
        raise InvalidInputError(f"Output directory is not writable: {directory}")

    return path
