"""Parsing of ``lat/lon`` route strings."""

from __future__ import annotations

import logging
import math
from typing import List, Optional

from project_crosswind.errors import RouteParseError
from .types import LatLon

logger = logging.getLogger(__name__)

_NEGATIVE = {"S", "W"}
_DIRECTIONS = {"N", "S", "E", "W"}
_MAX_MAGNITUDE = {"N": 90.0, "S": 90.0, "E": 180.0, "W": 180.0}


def parse_coord(token: str) -> float:
    """
    Parse a signed-direction coordinate such as ``43.68N`` or ``79.63W``.

    S and W negate the magnitude.

    Raises:
        RouteParseError: If the direction letter is invalid, or the magnitude
            is not a finite number within 90 (N/S) or 180 (E/W).
    """
    text = (token or "").strip()
    if len(text) < 2:
        raise RouteParseError(f"Malformed coordinate {token!r}")
    direction = text[-1].upper()
    if direction not in _DIRECTIONS:
        raise RouteParseError(f"Coordinate {token!r} has no N/S/E/W suffix")
    try:
        value = float(text[:-1])
    except ValueError as exc:
        raise RouteParseError(f"Coordinate {token!r} has a non-numeric magnitude") from exc
    if not math.isfinite(value) or abs(value) > _MAX_MAGNITUDE[direction]:
        raise RouteParseError(f"Coordinate {token!r} is out of range")
    return -value if direction in _NEGATIVE else value


def parse_waypoint(token: str) -> LatLon:
    parts = token.split("/")
    if len(parts) != 2:
        raise RouteParseError(f"Route token {token!r} is not of the form lat/lon")
    return (parse_coord(parts[0]), parse_coord(parts[1]))


def parse_route(route: Optional[str], strict: bool = False) -> List[LatLon]:
    """
    Convert a whitespace-separated route string into (lat, lon) midpoints.

    In lenient mode (default) malformed tokens are dropped and logged so that
    one bad token does not discard the whole flight. With ``strict=True`` the
    first malformed token raises ``RouteParseError``.
    """
    if not route or not route.strip():
        return []

    points: List[LatLon] = []
    for token in route.split():
        try:
            points.append(parse_waypoint(token))
        except RouteParseError:
            if strict:
                raise
            logger.debug("Dropping malformed route token %r", token)
    return points


def format_coord(value: float, positive: str, negative: str) -> str:
    return f"{abs(value):.2f}{positive if value >= 0 else negative}"


def format_waypoint(point: LatLon) -> str:
    return f"{format_coord(point[0], 'N', 'S')}/{format_coord(point[1], 'E', 'W')}"
