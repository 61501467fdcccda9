from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Mapping, Optional, Sequence, Union

from project_crosswind.config import SeparationMinima, resolve_separation
from project_crosswind.conflicts.detector import detect_conflicts
from project_crosswind.hotspots.analyzer import iter_bucket_times
from project_crosswind.simulate.snapshot import snapshot
from project_crosswind.stateman.edit_table import EditTable
from project_crosswind.trajectory.types import AirportTable, Flight

DEFAULT_WEIGHTS: Dict[str, float] = {"A": 1000.0, "B": 50.0, "C": 1.0, "D": 0.1}
# A time bucket counts as a hotspot when more flights than this are airborne.
BUSY_BUCKET_THRESHOLD = 6


@dataclass(frozen=True)
class ScenarioMetrics:
    conflicts: int = 0
    hotspots: int = 0
    total_delay_minutes: float = 0.0
    alt_change_ft: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


MetricsLike = Union[ScenarioMetrics, Mapping[str, float]]


def resolve_weights(weights: Optional[Mapping[str, float]]) -> Dict[str, float]:
    """Defaults with per-key overrides from ``weights``."""
    if weights:
        return {**DEFAULT_WEIGHTS, **weights}
    return dict(DEFAULT_WEIGHTS)


def score_scenario(metrics: MetricsLike, weights: Optional[Mapping[str, float]] = None) -> float:
    """
    Weighted scalar score of a scenario; lower is better.

    Objective: A*conflicts + B*hotspots + C*delay_minutes + D*|alt_change_ft|

    Args:
        metrics: ScenarioMetrics or a mapping with the same keys
        weights: Optional dict overriding coefficients 'A','B','C','D'
    """
    w = resolve_weights(weights)
    m = metrics.to_dict() if isinstance(metrics, ScenarioMetrics) else metrics
    return (
        w["A"] * float(m.get("conflicts", 0) or 0)
        + w["B"] * float(m.get("hotspots", 0) or 0)
        + w["C"] * float(m.get("total_delay_minutes", 0) or 0)
        + w["D"] * abs(float(m.get("alt_change_ft", 0) or 0))
    )


def compute_metrics(
    flights: Sequence[Flight],
    edits: Optional[EditTable],
    *,
    airports: AirportTable,
    t_start: float,
    t_end: float,
    time_bucket_s: float,
    separation: Optional[SeparationMinima] = None,
    busy_bucket_threshold: int = BUSY_BUCKET_THRESHOLD,
    method: str = "geodesic",
) -> ScenarioMetrics:
    """
    Aggregate scenario metrics over ``[t_start, t_end]``.

    Conflicts are summed over every time bucket; ``hotspots`` counts the
    buckets with more than ``busy_bucket_threshold`` active flights. Delay is
    the signed sum of departure deltas and altitude change the sum of
    absolute altitude deltas over the edited flights.
    """
    sep = resolve_separation(separation)
    edits = edits if edits is not None else EditTable()

    total_conflicts = 0
    busy_buckets = 0
    for t in iter_bucket_times(t_start, t_end, time_bucket_s):
        snap = snapshot(flights, t, edits, airports, method=method)
        total_conflicts += len(detect_conflicts(snap, sep.horizontal_nm, sep.vertical_ft))
        if len(snap) > busy_bucket_threshold:
            busy_buckets += 1

    return ScenarioMetrics(
        conflicts=total_conflicts,
        hotspots=busy_buckets,
        total_delay_minutes=edits.total_delay_minutes(),
        alt_change_ft=edits.total_altitude_change_ft(),
    )


__all__ = [
    "DEFAULT_WEIGHTS",
    "BUSY_BUCKET_THRESHOLD",
    "ScenarioMetrics",
    "resolve_weights",
    "score_scenario",
    "compute_metrics",
]
