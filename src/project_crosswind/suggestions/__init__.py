from .provider import NullSuggestionProvider, Suggestion, SuggestionProvider
from .rule_based import RuleBasedSuggestionProvider, flight_progress, offset_route

__all__ = [
    "NullSuggestionProvider",
    "Suggestion",
    "SuggestionProvider",
    "RuleBasedSuggestionProvider",
    "flight_progress",
    "offset_route",
]
