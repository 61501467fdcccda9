"""Suggestion provider protocol for conflict remedies."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Literal, Optional, Protocol

from project_crosswind.conflicts.detector import ConflictRecord

SuggestionType = Literal["altitude", "speed", "route", "time"]
Impact = Literal["LOW", "MEDIUM", "HIGH"]


@dataclass(frozen=True)
class Suggestion:
    type: SuggestionType
    target: str
    action: str
    description: str
    confidence: float
    impact: Impact
    new_altitude_ft: Optional[float] = None
    new_speed_kts: Optional[float] = None
    new_route: Optional[str] = None
    new_departure_time: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


class SuggestionProvider(Protocol):
    """Anything that can rank remedies for a loss-of-separation event."""

    def suggest(self, conflict: ConflictRecord) -> List[Suggestion]:
        """Return remedies for ``conflict``, most preferred first."""


class NullSuggestionProvider:
    """Provider used when no suggestion backend is configured."""

    def suggest(self, conflict: ConflictRecord) -> List[Suggestion]:
        return []
