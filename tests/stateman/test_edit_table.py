import json

import pytest

from project_crosswind.errors import InvalidEditError
from project_crosswind.stateman import EditTable, FlightEdit


def test_with_edit_overlays_without_touching_receiver():
    base = EditTable({"F1": FlightEdit(departure_time_delta_s=300)})
    trial = base.with_edit("F1", altitude_delta_ft=2000)

    assert base["F1"] == FlightEdit(departure_time_delta_s=300)
    assert trial["F1"] == FlightEdit(departure_time_delta_s=300, altitude_delta_ft=2000)


def test_with_edit_last_write_wins_per_field():
    table = EditTable().with_edit("F1", departure_time_delta_s=300)
    table = table.with_edit("F1", departure_time_delta_s=900)
    assert table["F1"].departure_time_delta_s == 900


def test_merge_policies():
    current = EditTable({"F1": FlightEdit(departure_time_delta_s=300, altitude_delta_ft=1000)})
    incoming = {"F1": {"altitude_delta_ft": -2000}, "F2": {"departure_time_delta": 60}}

    overwritten = current.merge(incoming, policy="overwrite")
    assert overwritten["F1"] == FlightEdit(altitude_delta_ft=-2000)
    assert overwritten["F2"].departure_time_delta_s == 60

    overlaid = current.merge(incoming, policy="overlay")
    assert overlaid["F1"] == FlightEdit(departure_time_delta_s=300, altitude_delta_ft=-2000)

    with pytest.raises(ValueError):
        current.merge(incoming, policy="replace")


def test_totals_are_signed_delay_and_absolute_altitude():
    table = EditTable({
        "F1": FlightEdit(departure_time_delta_s=600, altitude_delta_ft=2000),
        "F2": FlightEdit(departure_time_delta_s=-300, altitude_delta_ft=-2000),
    })
    assert table.total_delay_minutes() == pytest.approx(5.0)
    assert table.total_altitude_change_ft() == pytest.approx(4000.0)


def test_without_and_noop():
    table = EditTable({"F1": FlightEdit(), "F2": FlightEdit(speed_delta_kts=-20)})
    assert [acid for acid, _ in table.nonzero_items()] == ["F2"]
    trimmed = table.without("F2")
    assert "F2" not in trimmed
    assert "F2" in table


@pytest.mark.parametrize("value", ["abc", float("nan"), float("inf"), None])
def test_invalid_numeric_edit_rejected(value):
    with pytest.raises(InvalidEditError):
        FlightEdit(altitude_delta_ft=value)


def test_unknown_keys_rejected():
    with pytest.raises(InvalidEditError):
        FlightEdit.from_dict({"heading_delta": 10})
    with pytest.raises(InvalidEditError):
        FlightEdit().overlay(heading_delta=10)


def test_json_round_trip(tmp_path):
    table = EditTable({
        "ACA101": FlightEdit(departure_time_delta_s=300, route_override="45.00N/75.00W"),
        "WJA202": FlightEdit(),
    })
    path = tmp_path / "edits.json"
    table.save_json(path)

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload == {
        "ACA101": {"departure_time_delta": 300.0, "route_modification": "45.00N/75.00W"}
    }
    assert EditTable.load_json(path) == EditTable({"ACA101": table["ACA101"]})


def test_load_json_requires_mapping(tmp_path):
    path = tmp_path / "edits.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(InvalidEditError):
        EditTable.load_json(path)
