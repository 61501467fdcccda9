"""Edit overlays applied to flights at evaluation time."""

from .edit_table import EditLike, EditTable, FlightEdit

__all__ = [
    "EditLike",
    "EditTable",
    "FlightEdit",
]
