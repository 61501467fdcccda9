from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Mapping

from project_crosswind.errors import DatasetError, RouteParseError
from project_crosswind.trajectory.route_parser import parse_route
from project_crosswind.trajectory.types import Flight, LatLon

logger = logging.getLogger(__name__)

# Canadian airports used by the demo datasets.
DEFAULT_AIRPORTS: Dict[str, LatLon] = {
    "CYYZ": (43.68, -79.63),
    "CYVR": (49.19, -123.18),
    "CYUL": (45.47, -73.74),
    "CYYC": (51.11, -114.02),
    "CYOW": (45.32, -75.67),
    "CYWG": (49.91, -97.24),
    "CYHZ": (44.88, -63.51),
    "CYEG": (53.31, -113.58),
    "CYQB": (46.79, -71.39),
    "CYYJ": (48.65, -123.43),
    "CYYT": (47.62, -52.75),
    "CYXE": (52.17, -106.7),
}


def _read_json(path: str | Path):
    try:
        with open(path, "r", encoding="utf-8") as handle:
            return json.load(handle)
    except json.JSONDecodeError as exc:
        raise DatasetError(f"{path}: invalid JSON ({exc})") from exc


def flights_from_records(records) -> List[Flight]:
    """
    Build flights from dataset records, rejecting duplicate ACIDs.

    Routes are checked once here so malformed tokens are reported at load
    time; evaluation later drops them silently.
    """
    flights: List[Flight] = []
    seen = set()
    for i, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise DatasetError(f"Flight record #{i} is not an object")
        flight = Flight.from_record(record)
        if flight.acid in seen:
            raise DatasetError(f"Duplicate ACID {flight.acid!r}")
        seen.add(flight.acid)
        try:
            parse_route(flight.route, strict=True)
        except RouteParseError as exc:
            logger.warning("Flight %s: %s; the token will be ignored", flight.acid, exc)
        flights.append(flight)
    return flights


def load_flights(path: str | Path) -> List[Flight]:
    """Load a JSON array of flight records."""
    payload = _read_json(path)
    if isinstance(payload, Mapping) and "flights" in payload:
        payload = payload["flights"]
    if not isinstance(payload, list):
        raise DatasetError(f"{path}: expected a JSON array of flight records")
    flights = flights_from_records(payload)
    logger.info("Loaded %d flights from %s", len(flights), path)
    return flights


def load_airports(path: str | Path) -> Dict[str, LatLon]:
    """Load a JSON object mapping airport code -> [lat, lon]."""
    payload = _read_json(path)
    if not isinstance(payload, Mapping):
        raise DatasetError(f"{path}: expected a JSON object of airport coordinates")
    airports: Dict[str, LatLon] = {}
    for code, coords in payload.items():
        try:
            lat, lon = coords
            airports[str(code)] = (float(lat), float(lon))
        except (TypeError, ValueError) as exc:
            raise DatasetError(f"Airport {code!r} must map to [lat, lon]") from exc
    return airports


__all__ = ["DEFAULT_AIRPORTS", "flights_from_records", "load_flights", "load_airports"]
