"""
Scenario session: the single owner of mutable what-if state.

The analytics functions are pure. A session holds the loaded flights and
airport table together with the accepted and the suggested edit tables, and
hands copies of them to the analytics on every call.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from project_crosswind.conflicts.detector import ConflictRecord, detect_conflicts
from project_crosswind.config import DEFAULT_SEPARATION, HotspotConfig
from project_crosswind.errors import DatasetError, InvalidEditError, UnknownFlightError
from project_crosswind.hotspots.analyzer import HotspotCell, compute_hotspots
from project_crosswind.load.window_counter import DEFAULT_WINDOW_S, LoadWindow, compute_airport_load
from project_crosswind.optimize.greedy.engine import OptimizationResult, optimize_schedule
from project_crosswind.simulate.snapshot import SnapshotDiagnostics, SnapshotEntry, snapshot
from project_crosswind.stateman.edit_table import EditTable
from project_crosswind.suggestions.provider import NullSuggestionProvider, Suggestion, SuggestionProvider
from project_crosswind.trajectory.types import AirportTable, Flight

logger = logging.getLogger(__name__)


class ScenarioSession:
    def __init__(
        self,
        flights: Sequence[Flight],
        airports: AirportTable,
        provider: Optional[SuggestionProvider] = None,
    ) -> None:
        by_acid: Dict[str, Flight] = {}
        for f in flights:
            if f.acid in by_acid:
                raise DatasetError(f"Duplicate ACID {f.acid!r} in flight dataset")
            by_acid[f.acid] = f
        self.flights: List[Flight] = list(flights)
        self.airports: Dict[str, tuple] = dict(airports)
        self.provider: SuggestionProvider = provider or NullSuggestionProvider()
        self._by_acid = by_acid
        self.edits = EditTable()
        self.suggested_edits = EditTable()
        self.diagnostics = SnapshotDiagnostics()

    def flight(self, acid: str) -> Flight:
        try:
            return self._by_acid[acid]
        except KeyError:
            raise UnknownFlightError(acid) from None

    # --- analytics --------------------------------------------------------------
    def snapshot(self, t: float) -> List[SnapshotEntry]:
        return snapshot(self.flights, t, self.edits.copy(), self.airports, diagnostics=self.diagnostics)

    def conflicts(
        self,
        t: float,
        h_sep_nm: float = DEFAULT_SEPARATION.horizontal_nm,
        v_sep_ft: float = DEFAULT_SEPARATION.vertical_ft,
        exclude_near_airports: bool = False,
    ) -> List[ConflictRecord]:
        return detect_conflicts(
            self.snapshot(t),
            h_sep_nm,
            v_sep_ft,
            exclude_near_airports=self.airports if exclude_near_airports else None,
        )

    def hotspots(
        self,
        t_start: float,
        t_end: float,
        *,
        cell_nm: Optional[float] = None,
        cell_ft: Optional[float] = None,
        time_bucket_s: Optional[float] = None,
        config: Optional[HotspotConfig] = None,
    ) -> List[HotspotCell]:
        """Hotspot cells for the session's flights with the accepted edits applied."""
        return compute_hotspots(
            self.flights,
            t_start,
            t_end,
            airports=self.airports,
            edits=self.edits.copy(),
            cell_nm=cell_nm,
            cell_ft=cell_ft,
            time_bucket_s=time_bucket_s,
            config=config,
        )

    def airport_load(self, t_start: float, t_end: float,
                     window_s: float = DEFAULT_WINDOW_S) -> Dict[str, List[LoadWindow]]:
        return compute_airport_load(self.flights, t_start, t_end, window_s)

    def optimize(self, **options) -> OptimizationResult:
        """Run the optimizer and stage its edits as suggestions (not applied)."""
        result = optimize_schedule(self.flights, airports=self.airports, **options)
        self.stage_suggested(result.edits)
        return result

    def suggest(self, conflict: ConflictRecord) -> List[Suggestion]:
        return self.provider.suggest(conflict)

    # --- edit management ------------------------------------------------------
    def apply_suggestion(self, suggestion: Suggestion) -> EditTable:
        """Turn a suggestion into an accepted edit relative to the original record."""
        original = self.flight(suggestion.target)
        if suggestion.type == "altitude" and suggestion.new_altitude_ft is not None:
            change = {"altitude_delta_ft": suggestion.new_altitude_ft - original.altitude_ft}
        elif suggestion.type == "time" and suggestion.new_departure_time is not None:
            change = {"departure_time_delta_s": suggestion.new_departure_time - original.departure_time}
        elif suggestion.type == "speed" and suggestion.new_speed_kts is not None:
            change = {"speed_delta_kts": suggestion.new_speed_kts - original.speed_kts}
        elif suggestion.type == "route" and suggestion.new_route is not None:
            change = {"route_override": suggestion.new_route}
        else:
            raise InvalidEditError(f"Suggestion {suggestion.type!r} for {suggestion.target} carries no value")
        self.edits = self.edits.with_edit(original.acid, **change)
        logger.info("Applied %s suggestion to %s", suggestion.type, original.acid)
        return self.edits

    def stage_suggested(self, edits: Mapping | EditTable) -> None:
        self.suggested_edits = edits.copy() if isinstance(edits, EditTable) else EditTable(edits)

    def apply_all_suggested(self) -> EditTable:
        self.edits = self.edits.merge(self.suggested_edits, policy="overwrite")
        self.suggested_edits = EditTable()
        return self.edits

    def undo(self, acid: str) -> None:
        self.edits = self.edits.without(acid)

    def clear(self) -> None:
        self.edits = EditTable()
        self.suggested_edits = EditTable()


__all__ = ["ScenarioSession"]
