"""Typed helpers for the ``stateman`` package."""

from __future__ import annotations

from typing import Dict, Literal, Optional, TypedDict


class FlightEditDict(TypedDict, total=False):
    """Serialized shape of a single flight edit (demo key names)."""

    departure_time_delta: float
    altitude_delta_ft: float
    speed_delta_kts: float
    route_modification: Optional[str]


EditMergePolicy = Literal["overwrite", "overlay"]
EditMapping = Dict[str, FlightEditDict]
