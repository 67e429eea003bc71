#!/usr/bin/env python3
"""
Membrane topology detection (ANVIL) for protein structures
"""

# Example: anvil-topology --pdb 1a0s.pdb --output 1a0s_membrane.csv --progress --verbose

import argparse
import sys
import time

from algorithms.anvil_method import AnvilMethod
from algorithms.provider_factory import ProviderFactory
from core.data_models import AnvilConfig, ProximalReference, SurfaceAreaSource
from core.exceptions import AnvilError, ComputationCancelledError
from io_utils.csv_writer import CSVWriter
from io_utils.pdb_loader import PDBLoader
from io_utils.result_formatter import ResultFormatter
from utils.logger import level_from_verbosity, setup_logger
from utils.progress import ProgressBar
from utils.validation import validate_config, validate_output_path, validate_structure_file

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    defaults = AnvilConfig()
    parser = argparse.ArgumentParser(
        description="Detect the membrane slab of a protein structure (ANVIL)"
    )
    parser.add_argument("--pdb", required=True, help="structure file (.pdb, .ent, .cif)")
    parser.add_argument(
        "--sasa-source",
        choices=[s.value for s in SurfaceAreaSource],
        default=SurfaceAreaSource.FREESASA.value,
        help="where residue surface areas come from",
    )
    parser.add_argument("--sasa-csv", help="CSV with chain,resnum,SASA columns (precomputed source)")
    parser.add_argument("--sphere-points", type=int, default=defaults.number_of_sphere_points)
    parser.add_argument("--step-size", type=float, default=defaults.step_size)
    parser.add_argument("--min-thickness", type=float, default=defaults.min_thickness)
    parser.add_argument("--max-thickness", type=float, default=defaults.max_thickness)
    parser.add_argument("--afilter", type=float, default=defaults.afilter)
    parser.add_argument("--density", type=float, default=defaults.membrane_point_density)
    parser.add_argument(
        "--refinement-points", type=int, default=defaults.number_of_refinement_points
    )
    parser.add_argument(
        "--proximal-reference",
        choices=[r.value for r in ProximalReference],
        default=defaults.proximal_reference.value,
    )
    parser.add_argument("--nproc", type=int, default=defaults.num_processes)
    parser.add_argument("--output", help="CSV file for the membrane points")
    parser.add_argument("--samples-output", help="CSV file for the residue samples")
    parser.add_argument("--log-file")
    parser.add_argument("--progress", action="store_true", help="show a progress bar")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--quiet", action="store_true")
    return parser


def config_from_args(args: argparse.Namespace) -> AnvilConfig:
    return AnvilConfig(
        number_of_sphere_points=args.sphere_points,
        step_size=args.step_size,
        min_thickness=args.min_thickness,
        max_thickness=args.max_thickness,
        afilter=args.afilter,
        membrane_point_density=args.density,
        number_of_refinement_points=args.refinement_points,
        proximal_reference=ProximalReference(args.proximal_reference),
        num_processes=args.nproc,
    )


def run(args: argparse.Namespace) -> int:
    logger = setup_logger(
        level=level_from_verbosity(args.verbose, args.quiet), log_file=args.log_file
    )
    start = time.time()

    try:
        config = config_from_args(args)
        validate_config(config)
        validate_structure_file(args.pdb)
        for output in (args.output, args.samples_output):
            if output:
                validate_output_path(output)

        structure = PDBLoader(quiet=not args.verbose).load(args.pdb)
        logger.info(f"Loaded {args.pdb}: {PDBLoader.summary(structure)}")

        if args.sasa_source == SurfaceAreaSource.PRECOMPUTED.value and not args.sasa_csv:
            logger.error("--sasa-source precomputed requires --sasa-csv")
            return EXIT_FAILURE
        provider = ProviderFactory.create_provider(args.sasa_source, csv_path=args.sasa_csv)

        method = AnvilMethod(config, provider)
        runtime = method.create_runtime(ProgressBar() if args.progress else None)

        samples = method.extract_samples(structure, runtime)
        if args.samples_output:
            CSVWriter.write_samples(args.samples_output, samples)
            logger.info(f"Wrote {args.samples_output}")

        topology = method.calculate_from_samples(samples, runtime)
    except ComputationCancelledError as e:
        logger.warning(str(e))
        return EXIT_CANCELLED
    except AnvilError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return EXIT_FAILURE

    if args.output:
        CSVWriter.write_membrane(args.output, topology)
        logger.info(f"Wrote {args.output} ({topology.count} points)")

    print(ResultFormatter.format_summary(topology, samples))
    logger.info(f"Total runtime: {time.time() - start:.2f}s")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return run(args)
    except KeyboardInterrupt:
        return EXIT_CANCELLED


if __name__ == "__main__":
    sys.exit(main())
