import math

import pytest

from project_crosswind.load.window_counter import (
    busiest_windows,
    busy_threshold,
    compute_airport_load,
    generate_windows,
)

T0 = 1_700_000_000


def test_single_flight_single_window(make_flight):
    load = compute_airport_load([make_flight("F1")], T0, T0 + 899, window_s=900)

    assert set(load) == {"AAA", "BBB"}
    dep = load["AAA"][0]
    assert (dep.window_start, dep.deps, dep.arrs, dep.ops) == (T0, 1, 0, 1)
    assert dep.busy is True

    arr = load["BBB"][0]
    assert arr.ops == 0
    assert arr.busy is False


def test_counts_sum_to_flights_in_range(make_flight):
    flights = [
        make_flight("F1", arrival_time=T0 + 1800),
        make_flight("F2", dep="BBB", arr="CCC", t=T0 + 400),
        make_flight("F3", dep="CCC", arr="AAA", t=T0 + 1000),
        make_flight("F4", t=T0 + 5000),
        make_flight("F5", t=T0 - 100),
    ]
    t_start, t_end = T0, T0 + 3599
    load = compute_airport_load(flights, t_start, t_end, window_s=900)

    deps_in_range = sum(1 for f in flights if t_start <= f.departure_time < t_start + 4 * 900)
    arrs_in_range = sum(1 for f in flights if t_start <= f.effective_arrival_time < t_start + 4 * 900)
    assert sum(w.deps for ws in load.values() for w in ws) == deps_in_range
    assert sum(w.arrs for ws in load.values() for w in ws) == arrs_in_range
    assert all(len(ws) == 4 for ws in load.values())
    for ws in load.values():
        for w in ws:
            assert w.ops == w.deps + w.arrs


def test_missing_arrival_defaults_to_one_hour(make_flight):
    load = compute_airport_load([make_flight("F1")], T0, T0 + 3600, window_s=900)
    arrivals = [w for w in load["BBB"] if w.arrs]
    assert [w.window_start for w in arrivals] == [T0 + 3600]


def test_generate_windows():
    assert generate_windows(0, 1800, 900) == [0, 900, 1800]
    with pytest.raises(ValueError):
        generate_windows(0, 1800, -1)


def test_busy_threshold_percentile_index():
    assert busy_threshold(list(range(1, 21))) == 19
    assert busy_threshold([3]) == 3
    assert busy_threshold([]) == math.inf


def test_zero_ops_window_never_busy(make_flight):
    load = compute_airport_load([make_flight("F1", t=T0 + 10_000)], T0, T0 + 1800)
    assert all(not w.busy for ws in load.values() for w in ws)


def test_busiest_windows_orders_by_ops(make_flight):
    flights = [make_flight("F1"), make_flight("F2", t=T0 + 100), make_flight("F3", dep="BBB", arr="AAA")]
    load = compute_airport_load(flights, T0, T0 + 899)
    top = busiest_windows(load, top_k=2)
    assert [(ap, w.ops) for ap, w in top] == [("AAA", 2), ("BBB", 1)]
