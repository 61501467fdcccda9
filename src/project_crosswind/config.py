"""Shared tunables for the analytics modules."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

__all__ = [
    "SeparationMinima",
    "HotspotConfig",
    "DEFAULT_SEPARATION",
    "HOTSPOT_SEPARATION",
    "DEFAULT_HOTSPOT_CONFIG",
    "AIRPORT_RADIUS_NM",
    "resolve_separation",
    "resolve_hotspot_config",
]


@dataclass(frozen=True)
class SeparationMinima:
    """Loss of separation: both distances strictly below these minima."""

    horizontal_nm: float = 5.0
    vertical_ft: float = 2000.0


@dataclass(frozen=True)
class HotspotConfig:
    """Space-time-altitude grid used by the hotspot analyzer."""

    cell_nm: float = 25.0
    cell_ft: float = 2000.0
    time_bucket_s: int = 300
    reference_lat_deg: float = 56.0


DEFAULT_SEPARATION = SeparationMinima()
# Cell conflict counting is fixed and does not follow caller-supplied minima.
HOTSPOT_SEPARATION = SeparationMinima(horizontal_nm=5.0, vertical_ft=2000.0)
DEFAULT_HOTSPOT_CONFIG = HotspotConfig()
AIRPORT_RADIUS_NM = 15.0


def resolve_separation(separation: Optional[SeparationMinima]) -> SeparationMinima:
    """Return the provided minima or the module defaults."""

    return separation if separation is not None else DEFAULT_SEPARATION


def resolve_hotspot_config(config: Optional[HotspotConfig]) -> HotspotConfig:
    """Return a copy of the provided config or the defaults."""

    cfg = config if config is not None else DEFAULT_HOTSPOT_CONFIG
    return replace(cfg)
