"""
Snapshot engine: positions of every active flight at one instant.

Edits are overlaid at evaluation time only; neither the flight records nor
the edit table are modified. Flights whose airports cannot be resolved and
flights that are not airborne at the query time are omitted, and both cases
are counted in an optional ``SnapshotDiagnostics`` so the skip policy stays
observable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Union

from project_crosswind.stateman.edit_table import EditTable, FlightEdit
from project_crosswind.trajectory.types import AirportTable, Flight, LatLon
from project_crosswind.trajectory.waypoints import build_waypoints, position_at

logger = logging.getLogger(__name__)

EditsArg = Optional[Union[EditTable, Mapping[str, FlightEdit]]]

_NO_EDIT = FlightEdit()


@dataclass(frozen=True)
class SnapshotEntry:
    flight: Flight
    lat: float
    lon: float
    altitude_ft: float
    time: float

    @property
    def latlon(self) -> LatLon:
        return (self.lat, self.lon)

    @property
    def acid(self) -> str:
        return self.flight.acid


@dataclass
class SnapshotDiagnostics:
    """Running counters of how flights were handled across snapshot calls."""

    unresolved: int = 0
    inactive: int = 0
    active: int = 0

    @property
    def evaluated(self) -> int:
        return self.unresolved + self.inactive + self.active


def snapshot(
    flights: Iterable[Flight],
    query_time: float,
    edits: EditsArg = None,
    airports: Optional[AirportTable] = None,
    *,
    diagnostics: Optional[SnapshotDiagnostics] = None,
    method: str = "geodesic",
) -> List[SnapshotEntry]:
    """
    Evaluate every flight at ``query_time`` with ``edits`` applied.

    Args:
        flights: Flight records, evaluated in the given order
        query_time: Unix seconds
        edits: Optional ACID -> FlightEdit overlay
        airports: Airport code -> (lat, lon)
        diagnostics: Optional counters updated in place
        method: Interpolation method passed to ``position_at``

    Returns:
        Snapshot entries for the flights active at ``query_time``
    """
    airports = airports or {}
    edits = edits or {}
    entries: List[SnapshotEntry] = []

    for flight in flights:
        edit = edits.get(flight.acid) or _NO_EDIT
        waypoints = build_waypoints(flight, airports, route=edit.route_override or None)
        if waypoints is None:
            if diagnostics is not None:
                diagnostics.unresolved += 1
            logger.debug("Flight %s skipped: unknown airport", flight.acid)
            continue

        departure = flight.departure_time + edit.departure_time_delta_s
        speed = flight.speed_kts + edit.speed_delta_kts
        point = position_at(waypoints, departure, speed, query_time, method=method)
        if point is None:
            if diagnostics is not None:
                diagnostics.inactive += 1
            continue

        if diagnostics is not None:
            diagnostics.active += 1
        entries.append(
            SnapshotEntry(
                flight=flight,
                lat=point[0],
                lon=point[1],
                altitude_ft=flight.altitude_ft + edit.altitude_delta_ft,
                time=query_time,
            )
        )
    return entries


__all__ = ["SnapshotEntry", "SnapshotDiagnostics", "snapshot"]
