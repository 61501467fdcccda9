from .types import (
    DEFAULT_FLIGHT_DURATION_S,
    AirportTable,
    Flight,
    LatLon,
    Waypoints,
)
from .route_parser import format_waypoint, parse_coord, parse_route, parse_waypoint
from .waypoints import build_waypoints, position_at, route_length_nm

__all__ = [
    "DEFAULT_FLIGHT_DURATION_S",
    "AirportTable",
    "Flight",
    "LatLon",
    "Waypoints",
    "format_waypoint",
    "parse_coord",
    "parse_route",
    "parse_waypoint",
    "build_waypoints",
    "position_at",
    "route_length_nm",
]
