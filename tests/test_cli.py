import json

import pytest

from project_crosswind.cli import build_parser, main

T0 = 1_700_000_000


@pytest.fixture
def dataset_paths(tmp_path, twin_flights, airports):
    flights_path = tmp_path / "flights.json"
    airports_path = tmp_path / "airports.json"
    flights_path.write_text(json.dumps([f.to_record() for f in twin_flights]), encoding="utf-8")
    airports_path.write_text(json.dumps({k: list(v) for k, v in airports.items()}), encoding="utf-8")
    return ["--flights_path", str(flights_path), "--airports_path", str(airports_path)]


def test_parser_defaults():
    args = build_parser().parse_args(["hotspots", "--flights_path", "f.json"])
    assert args.cell_nm == 25.0
    assert args.cell_ft == 2000.0
    assert args.time_bucket_s == 300
    assert args.airports_path is None
    assert args.time_begin is None


def test_parser_requires_subcommand():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_snapshot_command(dataset_paths, capsys):
    assert main(["snapshot", *dataset_paths, "--time", str(T0 + 60)]) == 0
    out = capsys.readouterr().out
    assert "X1" in out
    assert "Y2" in out
    assert "active=2" in out


def test_conflicts_command_with_suggestions(dataset_paths, capsys):
    assert main(["conflicts", *dataset_paths, "--time", str(T0 + 60), "--suggest"]) == 0
    out = capsys.readouterr().out
    assert "Increase X1 altitude" in out


def test_hotspots_and_load_commands(dataset_paths, capsys):
    assert main(["hotspots", *dataset_paths, "--top", "3"]) == 0
    assert main(["load", *dataset_paths, "--window_s", "900"]) == 0
    out = capsys.readouterr().out
    assert "Top hotspots" in out
    assert "AAA" in out


def test_optimize_command_writes_edits(dataset_paths, tmp_path):
    output = tmp_path / "edits.json"
    assert main(["optimize", *dataset_paths, "--output_path", str(output)]) == 0
    assert json.loads(output.read_text(encoding="utf-8")) == {"X1": {"departure_time_delta": 300.0}}
