from .distance import (
    EARTH_RADIUS_KM,
    KM_TO_NM,
    NM_TO_KM,
    LatLon,
    haversine_nm,
    haversine_vectorized,
    interpolate,
)

__all__ = [
    "EARTH_RADIUS_KM",
    "KM_TO_NM",
    "NM_TO_KM",
    "LatLon",
    "haversine_nm",
    "haversine_vectorized",
    "interpolate",
]
