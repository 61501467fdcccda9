import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from project_crosswind.trajectory.types import Flight

T0 = 1_700_000_000


@pytest.fixture
def airports():
    """
    Small airport table with a north-south pair one degree of latitude apart
    (about 60 NM) and a distant third airport.
    """
    return {
        "AAA": (10.0, 5.0),
        "BBB": (11.0, 5.0),
        "CCC": (20.0, 30.0),
    }


@pytest.fixture
def make_flight():
    def _make(acid, dep="AAA", arr="BBB", t=T0, speed=600.0, alt=30000.0, **kwargs):
        return Flight(
            acid=acid,
            departure_airport=dep,
            arrival_airport=arr,
            departure_time=t,
            speed_kts=speed,
            altitude_ft=alt,
            **kwargs,
        )

    return _make


@pytest.fixture
def twin_flights(make_flight):
    """Two flights with identical schedules: a guaranteed loss of separation."""
    return [make_flight("X1"), make_flight("Y2")]
