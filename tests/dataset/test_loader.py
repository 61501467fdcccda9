import json
import logging

import pytest

from project_crosswind.dataset import DEFAULT_AIRPORTS, load_airports, load_flights
from project_crosswind.errors import DatasetError

T0 = 1_700_000_000


def _record(acid, **extra):
    record = {
        "ACID": acid,
        "departure airport": "CYYZ",
        "arrival airport": "CYUL",
        "departure time": T0,
        "aircraft speed": 450,
        "altitude": 33000,
        "route": "44.50N/76.50W",
    }
    record.update(extra)
    return record


def _write(tmp_path, name, payload):
    path = tmp_path / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_flights_from_array(tmp_path):
    path = _write(tmp_path, "flights.json", [_record("ACA1"), _record("WJA2", is_cargo=True)])
    flights = load_flights(path)
    assert [f.acid for f in flights] == ["ACA1", "WJA2"]
    assert flights[1].is_cargo
    assert flights[0].departure_airport in DEFAULT_AIRPORTS


def test_load_flights_from_wrapped_object(tmp_path):
    path = _write(tmp_path, "flights.json", {"flights": [_record("ACA1")]})
    assert [f.acid for f in load_flights(path)] == ["ACA1"]


def test_duplicate_acid_rejected(tmp_path):
    path = _write(tmp_path, "flights.json", [_record("ACA1"), _record("ACA1")])
    with pytest.raises(DatasetError, match="Duplicate"):
        load_flights(path)


@pytest.mark.parametrize(
    "payload",
    [
        {"not": "a list"},
        [_record("ACA1", **{"aircraft speed": "fast"})],
        [{"ACID": "ACA1"}],
        ["ACA1"],
    ],
)
def test_malformed_flight_files(tmp_path, payload):
    path = _write(tmp_path, "flights.json", payload)
    with pytest.raises(DatasetError):
        load_flights(path)


def test_invalid_json(tmp_path):
    path = tmp_path / "flights.json"
    path.write_text("[{", encoding="utf-8")
    with pytest.raises(DatasetError):
        load_flights(path)


def test_malformed_route_token_warns_once(tmp_path, caplog):
    path = _write(tmp_path, "flights.json", [_record("ACA1", route="44.50N/76.50W 45.0X/75.0W")])
    with caplog.at_level(logging.WARNING, logger="project_crosswind.dataset.loader"):
        flights = load_flights(path)
    assert flights[0].route.endswith("45.0X/75.0W")
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "ACA1" in warnings[0].getMessage()


def test_load_airports(tmp_path):
    path = _write(tmp_path, "airports.json", {"AAA": [10, 5], "BBB": [11.0, 5.0]})
    assert load_airports(path) == {"AAA": (10.0, 5.0), "BBB": (11.0, 5.0)}

    bad = _write(tmp_path, "bad.json", {"AAA": [10]})
    with pytest.raises(DatasetError):
        load_airports(bad)


@pytest.mark.parametrize("token", ["200N/75.00W", "nanN/75.00W", "44.50N/infW"])
def test_out_of_range_route_token_warns(tmp_path, caplog, token):
    path = _write(tmp_path, "flights.json", [_record("ACA1", route=token)])
    with caplog.at_level(logging.WARNING, logger="project_crosswind.dataset.loader"):
        load_flights(path)
    assert [r.levelno for r in caplog.records] == [logging.WARNING]
