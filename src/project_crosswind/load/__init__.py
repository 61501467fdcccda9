from .window_counter import (
    BUSY_PERCENTILE,
    DEFAULT_WINDOW_S,
    LoadWindow,
    busiest_windows,
    busy_threshold,
    compute_airport_load,
    generate_windows,
)

__all__ = [
    "BUSY_PERCENTILE",
    "DEFAULT_WINDOW_S",
    "LoadWindow",
    "busiest_windows",
    "busy_threshold",
    "compute_airport_load",
    "generate_windows",
]
