"""Flight records and waypoint typing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple

from project_crosswind.errors import DatasetError

LatLon = Tuple[float, float]
Waypoints = List[LatLon]
AirportTable = Mapping[str, LatLon]

# Arrival time assumed when a record carries none.
DEFAULT_FLIGHT_DURATION_S = 3600


@dataclass(frozen=True)
class Flight:
    """Static schedule of a single flight.

    Times are Unix seconds, speed is knots and altitude is feet. ``route``
    holds whitespace-separated ``lat/lon`` tokens such as ``43.68N/79.63W``.
    """

    acid: str
    departure_airport: str
    arrival_airport: str
    departure_time: float
    speed_kts: float
    altitude_ft: float = 0.0
    arrival_time: Optional[float] = None
    route: str = ""
    is_cargo: bool = False

    @property
    def effective_arrival_time(self) -> float:
        if self.arrival_time:
            return float(self.arrival_time)
        return float(self.departure_time) + DEFAULT_FLIGHT_DURATION_S

    @property
    def flow(self) -> Tuple[str, str]:
        return (self.departure_airport, self.arrival_airport)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Flight":
        """Build a Flight from a dataset record using the demo's key names."""
        try:
            acid = str(record["ACID"])
            departure_time = float(record["departure time"])
            speed = float(record["aircraft speed"])
        except KeyError as exc:
            raise DatasetError(f"Flight record is missing field {exc.args[0]!r}") from exc
        except (TypeError, ValueError) as exc:
            raise DatasetError(f"Flight record {record.get('ACID')!r} has a non-numeric field") from exc

        arrival_raw = record.get("arrival time")
        try:
            altitude = float(record.get("altitude") or 0)
            arrival_time = float(arrival_raw) if arrival_raw not in (None, "") else None
        except (TypeError, ValueError) as exc:
            raise DatasetError(f"Flight record {acid!r} has a non-numeric field") from exc

        return cls(
            acid=acid,
            departure_airport=str(record.get("departure airport") or ""),
            arrival_airport=str(record.get("arrival airport") or ""),
            departure_time=departure_time,
            speed_kts=speed,
            altitude_ft=altitude,
            arrival_time=arrival_time,
            route=str(record.get("route") or ""),
            is_cargo=bool(record.get("is_cargo", False)),
        )

    def to_record(self) -> dict:
        record = {
            "ACID": self.acid,
            "departure airport": self.departure_airport,
            "arrival airport": self.arrival_airport,
            "departure time": self.departure_time,
            "aircraft speed": self.speed_kts,
            "altitude": self.altitude_ft,
            "route": self.route,
            "is_cargo": self.is_cargo,
        }
        if self.arrival_time is not None:
            record["arrival time"] = self.arrival_time
        return record
