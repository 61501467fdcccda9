from .config import GreedyConfig
from .engine import AcceptedMove, GreedyOptimizer, OptimizationResult, default_time_range, optimize_schedule

__all__ = [
    "GreedyConfig",
    "AcceptedMove",
    "GreedyOptimizer",
    "OptimizationResult",
    "default_time_range",
    "optimize_schedule",
]
