from __future__ import annotations

from typing import List, Optional

from project_crosswind.config import DEFAULT_SEPARATION, SeparationMinima
from project_crosswind.conflicts.detector import ConflictRecord
from project_crosswind.errors import RouteParseError
from project_crosswind.trajectory.route_parser import format_waypoint, parse_waypoint
from project_crosswind.trajectory.types import Flight
from .provider import Suggestion

# Nominal flight duration used to estimate progress along the route.
NOMINAL_FLIGHT_S = 2 * 3600
SPEED_REDUCTION_KTS = 20
CLIMB_MARGIN_FT = 1000
CARGO_DELAY_MIN = 5


def flight_progress(flight: Flight, t: float, departure_time: Optional[float] = None) -> float:
    """Fraction in [0, 1] of a nominal two-hour flight elapsed at ``t``."""
    dep = flight.departure_time if departure_time is None else departure_time
    elapsed = t - dep
    if elapsed < 0:
        return 0.0
    return min(elapsed / NOMINAL_FLIGHT_S, 1.0)


def offset_route(route: Optional[str], offset_deg: float = 0.1) -> str:
    """Shift the first route waypoint by ``offset_deg`` in latitude and longitude."""
    if not route or not route.strip():
        return ""
    tokens = route.split()
    try:
        lat, lon = parse_waypoint(tokens[0])
    except RouteParseError:
        return route
    tokens[0] = format_waypoint((lat + offset_deg, lon + offset_deg))
    return " ".join(tokens)


class RuleBasedSuggestionProvider:
    """
    Deterministic remedies for a conflict, lowest impact first.

    Altitude changes are proposed when vertical separation is lost, a speed
    reduction (preferring the cargo flight) when horizontal separation is
    lost, a lateral offset when only horizontal separation is lost, and a
    short departure delay when a cargo flight is early in its flight.
    """

    def __init__(self, separation: Optional[SeparationMinima] = None):
        self.separation = separation or DEFAULT_SEPARATION

    def suggest(self, conflict: ConflictRecord) -> List[Suggestion]:
        a, b = conflict.a, conflict.b
        fa, fb = a.flight, b.flight
        hsep = self.separation.horizontal_nm
        vsep = self.separation.vertical_ft
        suggestions: List[Suggestion] = []

        if conflict.v_ft < vsep:
            higher, lower = (a, b) if a.altitude_ft > b.altitude_ft else (b, a)
            needed = vsep - conflict.v_ft
            lower_target = lower.altitude_ft + needed + CLIMB_MARGIN_FT
            higher_target = higher.altitude_ft + needed + CLIMB_MARGIN_FT
            suggestions.append(Suggestion(
                type="altitude",
                target=lower.acid,
                action=f"Increase {lower.acid} altitude by {needed:.0f} ft",
                description=f"Climb {lower.acid} to {lower_target:.0f} ft for vertical separation",
                confidence=0.85,
                impact="LOW",
                new_altitude_ft=lower_target,
            ))
            suggestions.append(Suggestion(
                type="altitude",
                target=higher.acid,
                action=f"Increase {higher.acid} altitude by {needed:.0f} ft",
                description=f"Climb {higher.acid} for additional safety margin",
                confidence=0.75,
                impact="LOW",
                new_altitude_ft=higher_target,
            ))

        if conflict.h_nm < hsep:
            adjust = fa if fa.is_cargo else fb
            suggestions.append(Suggestion(
                type="speed",
                target=adjust.acid,
                action=f"Reduce {adjust.acid} speed by {SPEED_REDUCTION_KTS} knots",
                description=f"Slow {adjust.acid} to create temporal separation",
                confidence=0.70,
                impact="MEDIUM",
                new_speed_kts=adjust.speed_kts - SPEED_REDUCTION_KTS,
            ))

        if conflict.h_nm < hsep and conflict.v_ft >= vsep:
            suggestions.append(Suggestion(
                type="route",
                target=fa.acid,
                action=f"Add minor waypoint offset for {fa.acid}",
                description="Small lateral deviation of 5-10 NM to increase horizontal separation",
                confidence=0.65,
                impact="MEDIUM",
                new_route=offset_route(fa.route),
            ))

        early = (flight_progress(fa, conflict.time) < 0.5
                 or flight_progress(fb, conflict.time) < 0.5)
        if early and (fa.is_cargo or fb.is_cargo):
            delay = fa if fa.is_cargo else fb
            suggestions.append(Suggestion(
                type="time",
                target=delay.acid,
                action=f"Delay {delay.acid} by {CARGO_DELAY_MIN} minutes",
                description=f"Delay {delay.acid} departure to avoid temporal overlap",
                confidence=0.90,
                impact="HIGH",
                new_departure_time=delay.departure_time + CARGO_DELAY_MIN * 60,
            ))

        return suggestions
