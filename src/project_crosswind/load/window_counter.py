from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from project_crosswind.trajectory.types import Flight

BUSY_PERCENTILE = 0.95
DEFAULT_WINDOW_S = 900


@dataclass
class LoadWindow:
    window_start: float
    deps: int = 0
    arrs: int = 0
    ops: int = 0
    busy: bool = False


def generate_windows(t_start: float, t_end: float, window_s: float) -> List[float]:
    """Window starts ``t_start, t_start + window_s, ...`` while ``<= t_end``."""
    if window_s <= 0:
        raise ValueError("window_s must be positive")
    windows = []
    current = t_start
    while current <= t_end:
        windows.append(current)
        current += window_s
    return windows


def _window_index(t: float, t_start: float, window_s: float, n_windows: int) -> Optional[int]:
    if t < t_start:
        return None
    idx = int(math.floor((t - t_start) / window_s))
    return idx if idx < n_windows else None


def busy_threshold(ops_values: Sequence[int]) -> float:
    """
    Ops count at the 95th percentile position of the sorted values.

    Uses index ``floor(0.95 * N) - 1`` clamped to 0; infinite when there are
    no windows at all.
    """
    if len(ops_values) == 0:
        return math.inf
    ordered = np.sort(np.asarray(ops_values, dtype=np.int64))
    idx = max(0, int(math.floor(len(ordered) * BUSY_PERCENTILE)) - 1)
    return float(ordered[idx])


def compute_airport_load(
    flights: Sequence[Flight],
    t_start: float,
    t_end: float,
    window_s: float = DEFAULT_WINDOW_S,
) -> Dict[str, List[LoadWindow]]:
    """
    Windowed departure/arrival counts per airport.

    Every airport named as a departure or arrival gets the same list of
    fixed windows. A window is busy when its ops reach the global 95th
    percentile threshold and are non-zero.
    """
    airports: Dict[str, None] = {}
    for f in flights:
        for code in (f.departure_airport, f.arrival_airport):
            if code:
                airports.setdefault(code, None)

    starts = generate_windows(t_start, t_end, window_s)
    n = len(starts)
    load: Dict[str, List[LoadWindow]] = {
        ap: [LoadWindow(window_start=ws) for ws in starts] for ap in airports
    }

    for f in flights:
        dep_idx = _window_index(f.departure_time, t_start, window_s, n)
        if dep_idx is not None and f.departure_airport in load:
            w = load[f.departure_airport][dep_idx]
            w.deps += 1
            w.ops = w.deps + w.arrs
        arr_idx = _window_index(f.effective_arrival_time, t_start, window_s, n)
        if arr_idx is not None and f.arrival_airport in load:
            w = load[f.arrival_airport][arr_idx]
            w.arrs += 1
            w.ops = w.deps + w.arrs

    threshold = busy_threshold([w.ops for windows in load.values() for w in windows])
    for windows in load.values():
        for w in windows:
            w.busy = w.ops >= threshold and w.ops > 0
    return load


def busiest_windows(load: Dict[str, List[LoadWindow]], top_k: int = 10) -> List[Tuple[str, LoadWindow]]:
    """Highest-ops (airport, window) pairs, ties in airport/window order."""
    flat = [(ap, w) for ap, windows in load.items() for w in windows if w.ops > 0]
    flat.sort(key=lambda item: -item[1].ops)
    return flat[:top_k]


__all__ = [
    "LoadWindow",
    "BUSY_PERCENTILE",
    "DEFAULT_WINDOW_S",
    "generate_windows",
    "busy_threshold",
    "compute_airport_load",
    "busiest_windows",
]
