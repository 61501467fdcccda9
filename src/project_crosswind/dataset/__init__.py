from .loader import DEFAULT_AIRPORTS, flights_from_records, load_airports, load_flights

__all__ = ["DEFAULT_AIRPORTS", "flights_from_records", "load_airports", "load_flights"]
