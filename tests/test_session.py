import pytest

from project_crosswind.errors import DatasetError, InvalidEditError, UnknownFlightError
from project_crosswind.optimize.greedy import GreedyConfig
from project_crosswind.session import ScenarioSession
from project_crosswind.stateman import EditTable, FlightEdit
from project_crosswind.suggestions import RuleBasedSuggestionProvider, Suggestion

T0 = 1_700_000_000


@pytest.fixture
def session(twin_flights, airports):
    return ScenarioSession(twin_flights, airports, provider=RuleBasedSuggestionProvider())


def _suggestion(**kwargs):
    base = dict(type="altitude", target="X1", action="", description="", confidence=0.5, impact="LOW")
    base.update(kwargs)
    return Suggestion(**base)


def test_duplicate_acid_rejected(make_flight, airports):
    with pytest.raises(DatasetError):
        ScenarioSession([make_flight("F1"), make_flight("F1")], airports)


def test_unknown_flight(session):
    with pytest.raises(UnknownFlightError):
        session.flight("NOPE")
    with pytest.raises(KeyError):
        session.flight("NOPE")


def test_apply_suggestion_resolves_conflict(session):
    conflict = session.conflicts(T0 + 60)[0]
    climb = session.suggest(conflict)[0]

    session.apply_suggestion(climb)
    assert session.edits["X1"] == FlightEdit(altitude_delta_ft=3000)
    assert session.conflicts(T0 + 60) == []

    session.undo("X1")
    assert len(session.conflicts(T0 + 60)) == 1


@pytest.mark.parametrize(
    "kwargs,expected",
    [
        (dict(type="time", new_departure_time=T0 + 300), FlightEdit(departure_time_delta_s=300)),
        (dict(type="speed", new_speed_kts=580), FlightEdit(speed_delta_kts=-20)),
        (dict(type="route", new_route="10.60N/5.10E"), FlightEdit(route_override="10.60N/5.10E")),
    ],
)
def test_apply_suggestion_is_relative_to_original(session, kwargs, expected):
    session.apply_suggestion(_suggestion(**kwargs))
    session.apply_suggestion(_suggestion(**kwargs))
    assert session.edits["X1"] == expected


def test_apply_suggestion_without_value(session):
    with pytest.raises(InvalidEditError):
        session.apply_suggestion(_suggestion(type="altitude"))


def test_optimize_stages_edits_until_accepted(session):
    result = session.optimize(config=GreedyConfig(max_iterations=3))
    assert len(session.edits) == 0
    assert session.suggested_edits == result.edits

    session.apply_all_suggested()
    assert session.edits == result.edits
    assert len(session.suggested_edits) == 0
    assert session.conflicts(T0) == []


def test_clear_drops_everything(session):
    session.stage_suggested({"Y2": {"departure_time_delta": 60}})
    session.apply_suggestion(_suggestion(new_altitude_ft=34000))
    session.clear()
    assert session.edits == EditTable()
    assert session.suggested_edits == EditTable()


def test_analytics_see_session_edits(session):
    session.apply_suggestion(_suggestion(new_altitude_ft=34000))
    cells = session.hotspots(T0, T0 + 300)
    assert all(c.conflict_count == 0 for c in cells)

    session.snapshot(T0 + 60)
    assert session.diagnostics.active == 2

    load = session.airport_load(T0, T0 + 899)
    assert load["AAA"][0].deps == 2


def test_hotspot_options_are_explicit(session):
    cells = session.hotspots(T0, T0 + 300, time_bucket_s=60, cell_ft=10000)
    assert sorted({c.time for c in cells}) == [T0 + 60 * i for i in range(6)]
    assert all(c.traffic_count == 2 for c in cells)

    with pytest.raises(TypeError):
        session.hotspots(T0, T0 + 300, edits=EditTable())
