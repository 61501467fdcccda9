from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass
class GreedyConfig:
    # Search budget
    max_iterations: int = 30
    max_candidate_flights: int = 8
    time_budget_s: Optional[float] = None

    # Candidate edits, tried per flight in this order
    time_deltas_min: Tuple[int, ...] = (5, 10, 15)
    altitude_deltas_ft: Tuple[int, ...] = (2000, -2000)

    # Hotspot grid
    cell_nm: float = 25.0
    cell_ft: float = 2000.0
    time_bucket_s: int = 300

    # Metrics
    busy_bucket_threshold: int = 6

    # Candidate evaluation workers (1 = in-process)
    n_jobs: int = 1
