from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from project_crosswind.config import AIRPORT_RADIUS_NM, DEFAULT_SEPARATION
from project_crosswind.geo.distance import haversine_nm, haversine_vectorized
from project_crosswind.simulate.snapshot import SnapshotEntry
from project_crosswind.trajectory.types import AirportTable, LatLon


@dataclass(frozen=True)
class ConflictRecord:
    a: SnapshotEntry
    b: SnapshotEntry
    h_nm: float
    v_ft: float
    time: float

    @property
    def pair(self) -> frozenset:
        return frozenset((self.a.acid, self.b.acid))


class _AirportScreen:
    """Airport coordinates packed for repeated proximity checks."""

    def __init__(self, airports: AirportTable, radius_nm: float):
        coords = np.asarray([tuple(v) for v in airports.values()], dtype=float).reshape(-1, 2)
        self.lats = coords[:, 0]
        self.lons = coords[:, 1]
        self.radius_nm = float(radius_nm)

    def near(self, point: LatLon) -> bool:
        if self.lats.size == 0:
            return False
        d = haversine_vectorized(point[0], point[1], self.lats, self.lons)
        return bool(np.any(d <= self.radius_nm))


def near_any_airport(point: LatLon, airports: AirportTable,
                     radius_nm: float = AIRPORT_RADIUS_NM) -> bool:
    """True when ``point`` lies within ``radius_nm`` (inclusive) of any airport."""
    return _AirportScreen(airports, radius_nm).near(point)


def detect_conflicts(
    entries: Sequence[SnapshotEntry],
    h_sep_nm: float = DEFAULT_SEPARATION.horizontal_nm,
    v_sep_ft: float = DEFAULT_SEPARATION.vertical_ft,
    *,
    exclude_near_airports: Optional[AirportTable] = None,
    airport_radius_nm: float = AIRPORT_RADIUS_NM,
) -> List[ConflictRecord]:
    """
    All-pairs loss-of-separation scan over one snapshot.

    A pair conflicts when horizontal separation < ``h_sep_nm`` and vertical
    separation < ``v_sep_ft``. Pairs are reported in (i, j) order with i < j
    following the snapshot order.

    When ``exclude_near_airports`` is given, any pair where either aircraft is
    within ``airport_radius_nm`` of one of those airports is ignored, which
    suppresses terminal-area clustering.
    """
    screen = None
    near: List[bool] = []
    if exclude_near_airports:
        screen = _AirportScreen(exclude_near_airports, airport_radius_nm)
        near = [screen.near(e.latlon) for e in entries]

    conflicts: List[ConflictRecord] = []
    n = len(entries)
    for i in range(n):
        if screen is not None and near[i]:
            continue
        a = entries[i]
        for j in range(i + 1, n):
            if screen is not None and near[j]:
                continue
            b = entries[j]
            h = haversine_nm(a.latlon, b.latlon)
            if h >= h_sep_nm:
                continue
            v = abs(a.altitude_ft - b.altitude_ft)
            if v >= v_sep_ft:
                continue
            conflicts.append(ConflictRecord(a=a, b=b, h_nm=h, v_ft=v, time=a.time))
    return conflicts


def count_conflicts(
    entries: Sequence[SnapshotEntry],
    h_sep_nm: float = DEFAULT_SEPARATION.horizontal_nm,
    v_sep_ft: float = DEFAULT_SEPARATION.vertical_ft,
) -> int:
    return len(detect_conflicts(entries, h_sep_nm, v_sep_ft))


__all__ = ["ConflictRecord", "detect_conflicts", "count_conflicts", "near_any_airport"]
