import pytest

from project_crosswind.conflicts.detector import detect_conflicts, near_any_airport
from project_crosswind.simulate.snapshot import snapshot

T0 = 1_700_000_000


def _pairs(conflicts):
    return {c.pair for c in conflicts}


def test_same_route_same_time_conflicts_while_active(twin_flights, airports):
    for t in (T0, T0 + 60, T0 + 180, T0 + 300):
        conflicts = detect_conflicts(snapshot(twin_flights, t, None, airports))
        assert len(conflicts) == 1
        c = conflicts[0]
        assert c.h_nm == pytest.approx(0.0, abs=1e-6)
        assert c.v_ft == 0.0
        assert c.time == t
    assert detect_conflicts(snapshot(twin_flights, T0 + 3000, None, airports)) == []


def test_detection_symmetric_under_reordering(make_flight, airports):
    flights = [
        make_flight("A1"),
        make_flight("B2", t=T0 + 20),
        make_flight("C3", alt=31000),
        make_flight("D4", alt=36000),
    ]
    forward = detect_conflicts(snapshot(flights, T0 + 120, None, airports))
    backward = detect_conflicts(snapshot(list(reversed(flights)), T0 + 120, None, airports))
    assert _pairs(forward) == _pairs(backward)
    assert frozenset({"A1", "D4"}) not in _pairs(forward)
    assert frozenset({"A1", "C3"}) in _pairs(forward)


def test_vertical_minimum_is_strict(make_flight, airports):
    flights = [make_flight("A1", alt=30000), make_flight("B2", alt=32000)]
    entries = snapshot(flights, T0 + 60, None, airports)
    assert detect_conflicts(entries) == []
    assert len(detect_conflicts(entries, v_sep_ft=2000.1)) == 1


def test_custom_horizontal_minimum(make_flight, airports):
    flights = [make_flight("A1"), make_flight("B2", t=T0 + 60)]
    entries = snapshot(flights, T0 + 120, None, airports)
    # About 10 NM in trail.
    assert detect_conflicts(entries) == []
    assert len(detect_conflicts(entries, h_sep_nm=12.0)) == 1


def test_airport_exclusion_drops_terminal_pairs(twin_flights, airports):
    entries = snapshot(twin_flights, T0 + 30, None, airports)
    assert len(detect_conflicts(entries)) == 1
    assert detect_conflicts(entries, exclude_near_airports=airports) == []

    # Mid-route, about 30 NM from both ends.
    entries = snapshot(twin_flights, T0 + 180, None, airports)
    assert len(detect_conflicts(entries, exclude_near_airports=airports)) == 1


def test_near_any_airport_radius_is_inclusive(airports):
    assert near_any_airport((10.0, 5.0), airports)
    assert near_any_airport((10.2, 5.0), airports, radius_nm=12.1)
    assert not near_any_airport((10.5, 5.0), airports)
    assert not near_any_airport((10.5, 5.0), {})
