from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np
from geographiclib.geodesic import Geodesic
from geopy.distance import ELLIPSOIDS

LatLon = Tuple[float, float]

EARTH_RADIUS_KM = 6371.0
NM_TO_KM = 1.852
# km -> NM, applied to R_km * c.
KM_TO_NM = 0.5399568

_WGS84_A_KM, _, _WGS84_F = ELLIPSOIDS["WGS-84"]
_WGS84 = Geodesic(_WGS84_A_KM * 1000.0, _WGS84_F)


def haversine_nm(p1: Sequence[float], p2: Sequence[float]) -> float:
    """
    Great-circle distance between two (lat, lon) points in nautical miles.

    Args:
        p1, p2: (latitude, longitude) pairs in degrees

    Returns:
        Distance in nautical miles on a 6371 km sphere
    """
    lat1, lon1 = p1[0], p1[1]
    lat2, lon2 = p2[0], p2[1]
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    s1 = math.radians(lat1)
    s2 = math.radians(lat2)
    h = math.sin(dlat / 2) ** 2 + math.cos(s1) * math.cos(s2) * math.sin(dlon / 2) ** 2
    c = 2 * math.asin(min(1.0, math.sqrt(h)))
    return EARTH_RADIUS_KM * c * KM_TO_NM


def haversine_vectorized(lat1: np.ndarray, lon1: np.ndarray,
                         lat2: np.ndarray, lon2: np.ndarray) -> np.ndarray:
    """
    Vectorized haversine distance calculation.

    Uses the same sphere and conversion constant as ``haversine_nm`` so that
    scalar and array results agree.

    Args:
        lat1, lon1: Arrays of latitude and longitude for first points
        lat2, lon2: Arrays of latitude and longitude for second points

    Returns:
        Array of distances in nautical miles
    """
    lat1_rad = np.radians(lat1)
    lat2_rad = np.radians(lat2)
    dlat = lat2_rad - lat1_rad
    dlon = np.radians(lon2) - np.radians(lon1)

    h = (np.sin(dlat / 2) ** 2 +
         np.cos(lat1_rad) * np.cos(lat2_rad) * np.sin(dlon / 2) ** 2)
    c = 2 * np.arcsin(np.minimum(1.0, np.sqrt(h)))

    return EARTH_RADIUS_KM * c * KM_TO_NM


def interpolate(p1: Sequence[float], p2: Sequence[float], fraction: float,
                method: str = "geodesic") -> LatLon:
    """
    Point at ``fraction`` of the way from ``p1`` to ``p2``.

    ``method="geodesic"`` walks the WGS-84 geodesic between the two points.
    ``method="linear"`` blends latitude and longitude independently; it is an
    approximation and does not follow a great-circle path.
    """
    if method == "linear":
        return (
            p1[0] + (p2[0] - p1[0]) * fraction,
            p1[1] + (p2[1] - p1[1]) * fraction,
        )
    if method != "geodesic":
        raise ValueError(f"Unknown interpolation method: {method!r}")

    line = _WGS84.InverseLine(p1[0], p1[1], p2[0], p2[1])
    pos = line.Position(fraction * line.s13)
    return (float(pos["lat2"]), float(pos["lon2"]))


__all__ = [
    "LatLon",
    "EARTH_RADIUS_KM",
    "NM_TO_KM",
    "KM_TO_NM",
    "haversine_nm",
    "haversine_vectorized",
    "interpolate",
]
