"""Trajectory simulation, separation and hotspot analytics for flight schedules."""

from project_crosswind.conflicts import ConflictRecord, detect_conflicts
from project_crosswind.geo import haversine_nm, interpolate
from project_crosswind.hotspots import HotspotCell, compute_hotspots
from project_crosswind.load import LoadWindow, compute_airport_load
from project_crosswind.optimize import (
    GreedyConfig,
    OptimizationResult,
    ScenarioMetrics,
    optimize_schedule,
    score_scenario,
)
from project_crosswind.simulate import SnapshotEntry, snapshot
from project_crosswind.stateman import EditTable, FlightEdit
from project_crosswind.trajectory import Flight, build_waypoints, position_at

__version__ = "0.1.0"

__all__ = [
    "ConflictRecord",
    "detect_conflicts",
    "haversine_nm",
    "interpolate",
    "HotspotCell",
    "compute_hotspots",
    "LoadWindow",
    "compute_airport_load",
    "GreedyConfig",
    "OptimizationResult",
    "ScenarioMetrics",
    "optimize_schedule",
    "score_scenario",
    "SnapshotEntry",
    "snapshot",
    "EditTable",
    "FlightEdit",
    "Flight",
    "build_waypoints",
    "position_at",
]
