import csv

import pytest
from Bio.PDB import PDBIO

from anvil_topology import EXIT_CANCELLED, EXIT_FAILURE, EXIT_OK, build_parser, config_from_args, main
from core.data_models import ProximalReference


@pytest.fixture
def rings_pdb(tmp_path, ring_structure):
    path = tmp_path / "rings.pdb"
    io = PDBIO()
    io.set_structure(ring_structure)
    io.save(str(path))
    return path


def test_parser_defaults_match_config():
    args = build_parser().parse_args(["--pdb", "x.pdb"])
    config = config_from_args(args)

    assert args.sasa_source == "freesasa"
    assert config.number_of_sphere_points == 350
    assert config.number_of_refinement_points == 30000
    assert config.proximal_reference is ProximalReference.CENTROID
    assert config.num_processes == 1


def test_cli_writes_membrane_and_samples(tmp_path, rings_pdb, capsys):
    output = tmp_path / "out" / "membrane.csv"
    samples_output = tmp_path / "out" / "samples.csv"

    code = main(
        [
            "--pdb", str(rings_pdb),
            "--sasa-source", "bfactor",
            "--refinement-points", "1000",
            "--nproc", "2",
            "--output", str(output),
            "--samples-output", str(samples_output),
            "--quiet",
        ]
    )

    assert code == EXIT_OK
    with open(output, newline="") as f:
        rows = list(csv.DictReader(f))
    assert rows
    assert {row["layer"] for row in rows} == {"1", "2"}
    with open(samples_output, newline="") as f:
        assert len(list(csv.DictReader(f))) == 72

    summary = capsys.readouterr().out
    assert "=== Membrane Topology ===" in summary
    assert "CA samples: 72" in summary


def test_cli_reads_precomputed_areas(tmp_path, rings_pdb):
    areas = tmp_path / "areas.csv"
    lines = ["chain,resnum,SASA"] + [f"A,{n},90.0" for n in range(1, 73)]
    areas.write_text("\n".join(lines) + "\n")

    code = main(
        [
            "--pdb", str(rings_pdb),
            "--sasa-source", "precomputed",
            "--sasa-csv", str(areas),
            "--refinement-points", "1000",
            "--proximal-reference", "axis",
            "--quiet",
        ]
    )
    assert code == EXIT_OK


def test_cli_precomputed_requires_csv(rings_pdb):
    assert main(["--pdb", str(rings_pdb), "--sasa-source", "precomputed", "--quiet"]) == EXIT_FAILURE


def test_cli_missing_structure(tmp_path):
    assert main(["--pdb", str(tmp_path / "missing.pdb"), "--quiet"]) == EXIT_FAILURE


def test_cli_invalid_configuration(rings_pdb):
    code = main(
        [
            "--pdb", str(rings_pdb),
            "--sasa-source", "bfactor",
            "--min-thickness", "40",
            "--max-thickness", "20",
            "--quiet",
        ]
    )
    assert code == EXIT_FAILURE


def test_cli_keyboard_interrupt(monkeypatch, rings_pdb):
    def interrupted(args):
        raise KeyboardInterrupt

    monkeypatch.setattr("anvil_topology.run", interrupted)
    assert main(["--pdb", str(rings_pdb)]) == EXIT_CANCELLED
