"""
Space-time-altitude hotspot analysis.

Repeated snapshots over ``[t_start, t_end]`` are projected onto a local
equirectangular plane and bucketed into cells of ``cell_nm`` x ``cell_nm``
x ``cell_ft`` per time bucket. Each occupied cell is scored as
``traffic_count + 3 * conflict_count``.

``confidence`` is a recurrence measure, not a statistical confidence: the
number of cells (at any time bucket) sharing this cell's spatial index with
traffic greater than or equal to this cell's, divided by the total number of
occupied cells in the analysed window.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from project_crosswind.config import (
    DEFAULT_HOTSPOT_CONFIG,
    HOTSPOT_SEPARATION,
    HotspotConfig,
    resolve_hotspot_config,
)
from project_crosswind.conflicts.detector import count_conflicts
from project_crosswind.geo.distance import EARTH_RADIUS_KM, NM_TO_KM
from project_crosswind.simulate.snapshot import EditsArg, SnapshotEntry, snapshot
from project_crosswind.trajectory.types import AirportTable, Flight

logger = logging.getLogger(__name__)

CellKey = Tuple[float, int, int, int]
SpatialKey = Tuple[int, int, int]

CONFLICT_WEIGHT = 3


@dataclass
class HotspotCell:
    time: float
    ix: int
    iy: int
    iz: int
    entries: List[SnapshotEntry] = field(default_factory=list)
    traffic_count: int = 0
    conflict_count: int = 0
    flow_count: int = 0
    score: int = 0
    flights: List[str] = field(default_factory=list)
    confidence: float = 0.0

    @property
    def key(self) -> str:
        return f"{self.time}|{self.ix}|{self.iy}|{self.iz}"

    @property
    def spatial_key(self) -> SpatialKey:
        return (self.ix, self.iy, self.iz)


def project_km(lat: float, lon: float,
               reference_lat_deg: float = DEFAULT_HOTSPOT_CONFIG.reference_lat_deg) -> Tuple[float, float]:
    """Equirectangular (x_km, y_km) centred on ``reference_lat_deg``."""
    lat0 = math.radians(reference_lat_deg)
    x = lon * math.cos(lat0) * (math.pi / 180) * EARTH_RADIUS_KM
    y = lat * (math.pi / 180) * EARTH_RADIUS_KM
    return x, y


def iter_bucket_times(t_start: float, t_end: float, step: float) -> List[float]:
    """Bucket starts ``t_start, t_start + step, ...`` up to and including ``t_end``."""
    if step <= 0:
        raise ValueError("time bucket width must be positive")
    times = []
    t = t_start
    while t <= t_end:
        times.append(t)
        t += step
    return times


def cell_index(entry: SnapshotEntry, config: HotspotConfig) -> SpatialKey:
    cell_km = config.cell_nm * NM_TO_KM
    x, y = project_km(entry.lat, entry.lon, config.reference_lat_deg)
    return (
        math.floor(x / cell_km),
        math.floor(y / cell_km),
        math.floor(entry.altitude_ft / config.cell_ft),
    )


def _summarize_cell(cell: HotspotCell) -> None:
    flights: Dict[str, None] = {}
    flows = set()
    for entry in cell.entries:
        flights.setdefault(entry.acid, None)
        flows.add(entry.flight.flow)
    cell.traffic_count = len(cell.entries)
    cell.conflict_count = count_conflicts(
        cell.entries,
        HOTSPOT_SEPARATION.horizontal_nm,
        HOTSPOT_SEPARATION.vertical_ft,
    )
    cell.flow_count = len(flows)
    cell.score = cell.traffic_count + CONFLICT_WEIGHT * cell.conflict_count
    cell.flights = list(flights)


def _assign_confidence(cells: Sequence[HotspotCell]) -> None:
    total = len(cells)
    if total == 0:
        return
    traffic_by_spatial: Dict[SpatialKey, List[int]] = defaultdict(list)
    for cell in cells:
        traffic_by_spatial[cell.spatial_key].append(cell.traffic_count)
    for cell in cells:
        repeat = sum(1 for tc in traffic_by_spatial[cell.spatial_key] if tc >= cell.traffic_count)
        cell.confidence = repeat / total


def compute_hotspots(
    flights: Sequence[Flight],
    t_start: float,
    t_end: float,
    *,
    airports: Optional[AirportTable] = None,
    edits: EditsArg = None,
    cell_nm: Optional[float] = None,
    cell_ft: Optional[float] = None,
    time_bucket_s: Optional[float] = None,
    config: Optional[HotspotConfig] = None,
    method: str = "geodesic",
) -> List[HotspotCell]:
    """
    Bucket traffic into space-time-altitude cells and rank them by score.

    Keyword overrides (``cell_nm``, ``cell_ft``, ``time_bucket_s``) take
    precedence over ``config``. ``edits`` are applied to every internal
    snapshot so callers observe the effect of hypothetical changes.

    Returns:
        Cells sorted by descending score; equal scores keep first-seen order.
    """
    cfg = resolve_hotspot_config(config)
    cfg = HotspotConfig(
        cell_nm=cell_nm if cell_nm else cfg.cell_nm,
        cell_ft=cell_ft if cell_ft else cfg.cell_ft,
        time_bucket_s=time_bucket_s if time_bucket_s else cfg.time_bucket_s,
        reference_lat_deg=cfg.reference_lat_deg,
    )

    cells: Dict[CellKey, HotspotCell] = {}
    for t in iter_bucket_times(t_start, t_end, cfg.time_bucket_s):
        for entry in snapshot(flights, t, edits, airports, method=method):
            ix, iy, iz = cell_index(entry, cfg)
            key = (t, ix, iy, iz)
            cell = cells.get(key)
            if cell is None:
                cell = cells[key] = HotspotCell(time=t, ix=ix, iy=iy, iz=iz)
            cell.entries.append(entry)

    result = list(cells.values())
    for cell in result:
        _summarize_cell(cell)
    _assign_confidence(result)

    result.sort(key=lambda c: -c.score)
    logger.debug("Computed %d hotspot cells over [%s, %s]", len(result), t_start, t_end)
    return result


__all__ = [
    "HotspotCell",
    "project_km",
    "iter_bucket_times",
    "cell_index",
    "compute_hotspots",
]
