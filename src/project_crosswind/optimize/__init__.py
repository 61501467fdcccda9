from .objective import (
    BUSY_BUCKET_THRESHOLD,
    DEFAULT_WEIGHTS,
    ScenarioMetrics,
    compute_metrics,
    resolve_weights,
    score_scenario,
)
from .greedy import GreedyConfig, GreedyOptimizer, OptimizationResult, optimize_schedule

__all__ = [
    "BUSY_BUCKET_THRESHOLD",
    "DEFAULT_WEIGHTS",
    "ScenarioMetrics",
    "compute_metrics",
    "resolve_weights",
    "score_scenario",
    "GreedyConfig",
    "GreedyOptimizer",
    "OptimizationResult",
    "optimize_schedule",
]
