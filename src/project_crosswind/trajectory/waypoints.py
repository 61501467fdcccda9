from __future__ import annotations

from typing import Optional, Sequence

from project_crosswind.geo.distance import haversine_nm, interpolate
from .route_parser import parse_route
from .types import AirportTable, Flight, LatLon, Waypoints


def build_waypoints(
    flight: Flight,
    airports: AirportTable,
    route: Optional[str] = None,
    strict: bool = False,
) -> Optional[Waypoints]:
    """
    Ordered waypoint list ``[departure, *route midpoints, arrival]``.

    Args:
        flight: Flight whose endpoints are looked up in ``airports``
        airports: Mapping airport code -> (lat, lon)
        route: Optional route string overriding ``flight.route``
        strict: Raise on malformed route tokens instead of dropping them

    Returns:
        The waypoint list, or None when either airport is unknown
    """
    dep = airports.get(flight.departure_airport) if flight.departure_airport else None
    arr = airports.get(flight.arrival_airport) if flight.arrival_airport else None
    if dep is None or arr is None:
        return None

    mid = parse_route(flight.route if route is None else route, strict=strict)
    return [(float(dep[0]), float(dep[1])), *mid, (float(arr[0]), float(arr[1]))]


def route_length_nm(waypoints: Sequence[LatLon]) -> float:
    total = 0.0
    for i in range(len(waypoints) - 1):
        total += haversine_nm(waypoints[i], waypoints[i + 1])
    return total


def position_at(
    waypoints: Sequence[LatLon],
    departure_time: float,
    speed_kts: float,
    query_time: float,
    method: str = "geodesic",
) -> Optional[LatLon]:
    """
    Interpolated (lat, lon) of a flight at ``query_time``.

    Returns None when the flight is not active: before departure, or once the
    distance flown reaches the route length. Arrived flights are not clamped
    to the destination.
    """
    elapsed = query_time - departure_time
    if elapsed < 0:
        return None

    dist = elapsed * (speed_kts / 3600.0)
    legs = [haversine_nm(waypoints[i], waypoints[i + 1]) for i in range(len(waypoints) - 1)]
    if dist >= sum(legs):
        return None

    for i, leg in enumerate(legs):
        if leg <= 0:
            continue
        if dist <= leg:
            return interpolate(waypoints[i], waypoints[i + 1], dist / leg, method=method)
        dist -= leg
    return None
